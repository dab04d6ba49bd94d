"""Install the travel app account settings engine."""

from setuptools import setup, find_packages

setup(
    name='travel-accounts',
    version='0.1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.9',
    install_requires=[
        "pydantic>=2",
        "httpx",
        "sqlalchemy>=1.4",
        "pyjwt",
        "pytz",
        "pycountry>=22.1.10",
        "python-json-logger",
        "click"
    ],
    extras_require={
        'test': [
            "pytest",
            "pytest-asyncio",
            "hypothesis"
        ]
    },
    entry_points={
        'console_scripts': [
            'travel-accounts=travel_accounts.cli:cli'
        ]
    },
    zip_safe=False
)
