"""Tests for :mod:`travel_accounts.services.datastore`."""

from datetime import date

import pytest

from travel_accounts.exceptions import RecordStoreError
from travel_accounts.services.datastore import SQLRecordStore
from travel_accounts.services.datastore.models import DBProfile, DBTravel


@pytest.fixture
def store(tmp_path):
    store = SQLRecordStore.from_uri(f'sqlite:///{tmp_path}/records.db')
    store.create_all()
    with store.transaction() as session:
        session.add_all([
            DBProfile(id='user-1', home_country='KR'),
            DBProfile(id='user-2', home_country='US'),
            DBTravel(user_id='user-1', country='JP', city='Osaka',
                     start_date=date(2023, 4, 1), end_date=date(2023, 4, 5)),
            DBTravel(user_id='user-1', country='FR', city='Paris'),
            DBTravel(user_id='user-2', country='IT', city='Rome'),
        ])
    yield store
    store.drop_all()


def travels_of(store, user_id):
    with store.transaction() as session:
        return session.query(DBTravel).filter_by(user_id=user_id).count()


def home_country_of(store, user_id):
    with store.transaction() as session:
        return session.get(DBProfile, user_id).home_country


@pytest.mark.asyncio
async def test_delete_where(store):
    """Only the rows matching the filter are deleted."""
    await store.delete_where('user_travels', {'user_id': 'user-1'})
    assert travels_of(store, 'user-1') == 0
    assert travels_of(store, 'user-2') == 1


@pytest.mark.asyncio
async def test_delete_nothing_matching(store):
    await store.delete_where('user_travels', {'user_id': 'nobody'})
    assert travels_of(store, 'user-1') == 2


@pytest.mark.asyncio
async def test_update(store):
    await store.update('user_profiles', {'id': 'user-1'},
                       {'home_country': 'JP'})
    assert home_country_of(store, 'user-1') == 'JP'
    assert home_country_of(store, 'user-2') == 'US'


@pytest.mark.asyncio
async def test_unknown_table(store):
    with pytest.raises(RecordStoreError) as excinfo:
        await store.delete_where('passports', {'user_id': 'user-1'})
    assert excinfo.value.message == 'relation "passports" does not exist'


@pytest.mark.asyncio
async def test_unknown_column(store):
    """Database errors surface as record store errors."""
    with pytest.raises(RecordStoreError):
        await store.update('user_profiles', {'no_such_column': 'user-1'},
                           {'home_country': 'JP'})
    assert home_country_of(store, 'user-1') == 'KR'


@pytest.mark.asyncio
async def test_refuses_unfiltered(store):
    with pytest.raises(ValueError):
        await store.delete_where('user_travels', {})
    assert travels_of(store, 'user-1') == 2
