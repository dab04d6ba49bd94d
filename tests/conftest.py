"""Special pytest fixture configuration file.

This file automatically provides all fixtures defined in it to all
pytest tests in this directory and sub directories.

See https://docs.pytest.org/en/6.2.x/fixture.html#conftest-py-sharing-fixtures-across-multiple-files
"""
import pytest

from travel_accounts.console import AccountConsole

from .fakes import SESSION, FakeFunctions, FakeIdentity, FakeRecords


@pytest.fixture
def log():
    return []


@pytest.fixture
def identity(log):
    """An identity service with an active session."""
    return FakeIdentity(log, SESSION)


@pytest.fixture
def anonymous(log):
    """An identity service without a session."""
    return FakeIdentity(log)


@pytest.fixture
def records(log):
    return FakeRecords(log)


@pytest.fixture
def functions(log):
    return FakeFunctions(log)


@pytest.fixture
def console(identity, records, functions):
    return AccountConsole(identity, records, functions)
