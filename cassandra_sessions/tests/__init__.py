"""Tests for :mod:`cassandra_sessions`."""
