"""Install gatehouse."""

from setuptools import setup, find_packages

setup(
    name='gatehouse',
    version='0.1.0',
    packages=find_packages(exclude=['*test*']),
    python_requires='>=3.7',
    install_requires=[
        "flask",
        "flask-sqlalchemy",
        "sqlalchemy",
        "argon2-cffi",
        "pyjwt",
        "pytz",
        "python-dateutil",
        "python-json-logger",
        "click"
    ],
    extras_require={
        'test': [
            "pytest",
            "hypothesis",
            "mimesis"
        ]
    },
    entry_points={
        'console_scripts': ['gatehouse-seed=gatehouse.seed:seed']
    },
    zip_safe=False
)
