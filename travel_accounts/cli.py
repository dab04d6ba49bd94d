"""
Command-line front end for the account settings engine.

.. code-block:: bash

   $ travel-accounts reset-password 'https://travel.example/#access_token=...&type=recovery'
   New password:
   Repeat for confirmation:
   Password changed.

   $ TRAVEL_ACCESS_TOKEN=... travel-accounts settings --home-country JP --current-home-country KR
   Settings updated.

   $ TRAVEL_ACCESS_TOKEN=... travel-accounts delete-account

Configure the backend with ``SUPABASE_URL`` and ``SUPABASE_ANON_KEY``; see
:mod:`travel_accounts.config`.
"""

import asyncio
import sys
from typing import Any, Callable

import click

from . import config
from .app_logging import setup_logger
from .console import AccountConsole
from .domain import RecoveryStatus
from .exceptions import ServiceError
from .fragments import Location


def session_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Tokens of the session to act for, usually from the environment."""
    command = click.option('--refresh-token', envvar='TRAVEL_REFRESH_TOKEN',
                           default='', show_default=False)(command)
    command = click.option('--access-token', envvar='TRAVEL_ACCESS_TOKEN',
                           required=True)(command)
    return command


@click.group()
@click.option('--log-level', type=int, default=config.LOGLEVEL,
              help='Numeric logging level.')
def cli(log_level: int) -> None:
    """Manage a travel app account."""
    setup_logger(log_level, stream=sys.stderr)


@cli.command('reset-password')
@click.argument('url')
def reset_password(url: str) -> None:
    """Set a new password using the link from a password-reset email."""
    sys.exit(asyncio.run(_reset_password(url)))


async def _reset_password(url: str) -> int:
    async with AccountConsole.from_config() as console:
        result = await console.recover(Location.from_url(url))
        if result.status is RecoveryStatus.NOT_APPLICABLE:
            click.echo('That is not a password recovery link.', err=True)
            return 1
        if not result.ok:
            click.echo('Could not restore your session. The link has '
                       'expired or is invalid.', err=True)
            return 1

        password = click.prompt('New password', hide_input=True)
        confirm = click.prompt('Repeat for confirmation', hide_input=True)
        outcome = await console.update_password(password, confirm)
        if not outcome.ok:
            click.echo(outcome.message, err=True)
            return 1
        click.echo('Password changed.')
        return 0


@cli.command()
@session_options
@click.option('--home-country', required=True,
              help='ISO 3166-1 alpha-2 code, e.g. JP.')
@click.option('--current-home-country', default='',
              help='The home country on record; unchanged values are not '
                   'written.')
@click.option('--change-password', is_flag=True,
              help='Also prompt for a new password.')
def settings(access_token: str, refresh_token: str, home_country: str,
             current_home_country: str, change_password: bool) -> None:
    """Update the home country and, optionally, the password."""
    password = confirm = ''
    if change_password:
        password = click.prompt('New password', hide_input=True)
        confirm = click.prompt('Repeat for confirmation', hide_input=True)
    sys.exit(asyncio.run(_settings(access_token, refresh_token, home_country,
                                   current_home_country, password, confirm)))


async def _settings(access_token: str, refresh_token: str,
                    home_country: str, current_home_country: str,
                    password: str, confirm: str) -> int:
    async with AccountConsole.from_config() as console:
        try:
            await console.resume(access_token, refresh_token)
        except ServiceError as e:
            click.echo(f'Could not sign in: {e.message}', err=True)
            return 1
        result = await console.apply_settings(
            home_country, password, confirm,
            current_home_country=current_home_country
        )
        if not result.ok:
            click.echo('An error occurred while updating settings: '
                       f'{result.message}', err=True)
            if result.partial:
                click.echo(f'Home country was saved as {result.home_country}; '
                           'the password was not changed.', err=True)
            return 1
        click.echo('Settings updated.')
        return 0


@cli.command('delete-account')
@session_options
def delete_account(access_token: str, refresh_token: str) -> None:
    """Delete the account and all of its travel records."""
    if not click.confirm('Really delete your account?\n\nAll of your travel '
                         'records will be deleted and cannot be recovered.'):
        click.echo('Account deletion cancelled.')
        sys.exit(1)
    if not click.confirm('Confirming once more. Delete your account?'):
        click.echo('Account deletion cancelled.')
        sys.exit(1)
    sys.exit(asyncio.run(_delete_account(access_token, refresh_token)))


async def _delete_account(access_token: str, refresh_token: str) -> int:
    async with AccountConsole.from_config() as console:
        try:
            await console.resume(access_token, refresh_token)
        except ServiceError as e:
            click.echo(f'Could not sign in: {e.message}', err=True)
            return 1
        result = await console.delete_account(confirmed=True)
        if not result.ok:
            stage = result.stage.label if result.stage else 'start'
            click.echo('An error occurred while deleting the account '
                       f'({stage}: {result.message}). Please try again '
                       'later.', err=True)
            if result.partial:
                done = ', '.join(s.label for s in result.completed_stages)
                click.echo(f'Already deleted: {done}.', err=True)
            return 1
        click.echo('Your account has been deleted. Thank you for travelling '
                   'with us.')
        return 0
