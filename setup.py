"""Install the Cassandra session store package."""

from setuptools import setup, find_packages

setup(
    name='cassandra-sessions',
    version='0.1.0',
    packages=find_packages(exclude=['*tests*']),
    package_data={'cassandra_sessions': ['config.py']},
    install_requires=[
        "cassandra-driver>=3.29",
        "cryptography",
        "flask>=3",
        "pyjwt>=2",
        "python-json-logger",
        "pytz",
        "werkzeug>=3"
    ],
    extras_require={
        'test': ['pytest', 'hypothesis']
    },
    zip_safe=False
)
