"""Tests for :mod:`travel_accounts.cli`."""

from unittest import mock

import pytest
from click.testing import CliRunner

from travel_accounts import cli
from travel_accounts.console import AccountConsole
from travel_accounts.exceptions import IdentityServiceError, \
    RecordStoreError

from .fakes import USER_ID, FakeFunctions, FakeIdentity, FakeRecords, called

LINK = 'https://travel.example/#access_token=abc&refresh_token=def' \
    '&type=recovery'


@pytest.fixture
def fakes(log):
    return FakeIdentity(log), FakeRecords(log), FakeFunctions(log)


@pytest.fixture
def runner(fakes):
    """Runs the CLI against the fakes instead of the configured backend."""
    console = AccountConsole(*fakes)
    with mock.patch.object(AccountConsole, 'from_config',
                           return_value=console), \
            mock.patch.object(cli, 'setup_logger'):
        yield CliRunner()


ENV = {'TRAVEL_ACCESS_TOKEN': 'access-1', 'TRAVEL_REFRESH_TOKEN': 'refresh-1'}


def test_reset_password(runner, log):
    result = runner.invoke(cli.cli, ['reset-password', LINK],
                           input='secret1\nsecret1\n')

    assert result.exit_code == 0, result.output
    assert 'Password changed.' in result.output
    assert log == [('establish_session', 'abc', 'def'),
                   ('update_credential', 'secret1')]


def test_reset_password_mismatch(runner, log):
    result = runner.invoke(cli.cli, ['reset-password', LINK],
                           input='secret1\nsecret2\n')

    assert result.exit_code == 1
    assert 'Passwords do not match' in result.output
    assert called(log, 'update_credential') == []


def test_reset_password_not_a_recovery_link(runner, log):
    result = runner.invoke(cli.cli, ['reset-password',
                                     'https://travel.example/#x=1'])
    assert result.exit_code == 1
    assert log == []


def test_reset_password_expired_link(runner, fakes):
    identity, _, _ = fakes
    identity.failures['establish_session'] = \
        IdentityServiceError('Token has expired or is invalid')
    result = runner.invoke(cli.cli, ['reset-password', LINK])

    assert result.exit_code == 1
    assert 'expired or is invalid' in result.output


def test_settings(runner, log):
    result = runner.invoke(cli.cli, ['settings', '--home-country', 'JP',
                                     '--current-home-country', 'KR'],
                           env=ENV)

    assert result.exit_code == 0, result.output
    assert 'Settings updated.' in result.output
    assert log == [
        ('establish_session', 'access-1', 'refresh-1'),
        ('update', 'user_profiles', {'id': USER_ID}, {'home_country': 'JP'}),
    ]


def test_settings_with_password(runner, log):
    result = runner.invoke(cli.cli, ['settings', '--home-country', 'KR',
                                     '--current-home-country', 'KR',
                                     '--change-password'],
                           input='secret1\nsecret1\n', env=ENV)

    assert result.exit_code == 0, result.output
    assert called(log, 'update') == []
    assert called(log, 'update_credential') == [('update_credential',
                                                 'secret1')]


def test_settings_failure(runner, fakes):
    _, records, _ = fakes
    records.failures['update'] = RecordStoreError('permission denied')
    result = runner.invoke(cli.cli, ['settings', '--home-country', 'JP',
                                     '--current-home-country', 'KR'],
                           env=ENV)

    assert result.exit_code == 1
    assert 'permission denied' in result.output


def test_settings_requires_a_token(runner, log):
    result = runner.invoke(cli.cli, ['settings', '--home-country', 'JP'],
                           env={'TRAVEL_ACCESS_TOKEN': None})
    assert result.exit_code != 0
    assert log == []


def test_delete_account(runner, log):
    result = runner.invoke(cli.cli, ['delete-account'], input='y\ny\n',
                           env=ENV)

    assert result.exit_code == 0, result.output
    assert 'Your account has been deleted' in result.output
    assert [call[0] for call in log] == ['establish_session', 'delete_where',
                                        'delete_where', 'invoke', 'sign_out']


@pytest.mark.parametrize('answers', ['n\n', 'y\nn\n'])
def test_delete_account_declined(runner, log, answers):
    """Declining either confirmation touches nothing."""
    result = runner.invoke(cli.cli, ['delete-account'], input=answers,
                           env=ENV)

    assert result.exit_code == 1
    assert 'Account deletion cancelled.' in result.output
    assert log == []


def test_delete_account_partial_failure(runner, fakes, log):
    _, records, _ = fakes
    records.failures['delete_where:user_profiles'] = \
        RecordStoreError('connection reset')
    result = runner.invoke(cli.cli, ['delete-account'], input='y\ny\n',
                           env=ENV)

    assert result.exit_code == 1
    assert 'profile: connection reset' in result.output
    assert 'Already deleted: records.' in result.output
    assert called(log, 'sign_out') == []
