"""Example routes that read and write the Cassandra-backed session."""

from flask import Blueprint, jsonify, session, Response

blueprint = Blueprint('sessions', __name__, url_prefix='')


@blueprint.route('/session', methods=['GET'])
def show() -> Response:
    """Show the current session."""
    return jsonify({'new': session.new, 'values': dict(session)})


@blueprint.route('/session/<key>/<value>', methods=['PUT'])
def put(key: str, value: str) -> Response:
    """Set a value on the current session."""
    session[key] = value
    return jsonify(dict(session))


@blueprint.route('/session', methods=['DELETE'])
def expire() -> Response:
    """Expire the session cookie."""
    session.expire()
    return jsonify({})
