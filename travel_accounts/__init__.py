"""
Travel app account settings and lifecycle.

This package provides the workflow engine behind the travel app's settings
surface: recovering a session from a password-reset link, changing a
password, syncing the user's home-country preference, and deleting an
account. Presentation is someone else's job. A web page, the bundled CLI, or
a test drives the workflows and renders the outcome values they return.

Every workflow is an ordered sequence of asynchronous steps against external
services (the identity service, the record store, and remote functions). The
first step that fails aborts the rest and is reported as a typed outcome
rather than raised.

Quick start
-----------

.. code-block:: python

   from travel_accounts.console import AccountConsole
   from travel_accounts.fragments import Location

   console = AccountConsole.from_config()
   result = await console.recover(Location.from_url(url))
   if result.show_password_change:
       outcome = await console.update_password(new, again)

Account deletion is irreversible and is only attempted after the caller has
collected two confirmations from the user:

.. code-block:: python

   result = await console.delete_account(confirmed=True)
   if not result.ok:
       show(result.stage, result.message)   # do not sign out or clear state

"""
