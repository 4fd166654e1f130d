"""Tests for :mod:`people.services.store`."""

import pytest

from people.domain import Person
from people.exceptions import DuplicateUsername, UpstreamError
from people.passwords import hash_password
from people.services.models import DBPerson
from people.services.store import slugify


def _person(first, last, **kwargs):
    return Person(first_name=first, last_name=last, title=f'{first} {last}',
                  password_hash=hash_password('secret'), **kwargs)


@pytest.mark.asyncio
async def test_save_assigns_id_and_slug(store):
    person = _person('Ada', 'Lovelace')
    await store.save(person)
    assert person.id
    assert person.slug == 'ada-lovelace'

    results = await store.query({'id': person.id}, {})
    assert results.total == 1
    assert results.people[0].last_name == 'Lovelace'
    assert results.people[0].password_hash == person.password_hash


@pytest.mark.asyncio
async def test_update(store):
    person = _person('Ada', 'Lovelace', group_ids=['g2', 'g1'])
    await store.save(person)
    person.phone = '555'
    await store.save(person)

    results = await store.query({}, {})
    assert results.total == 1
    assert results.people[0].phone == '555'
    assert results.people[0].group_ids == ['g2', 'g1']


@pytest.mark.asyncio
async def test_criteria(store):
    for first, last in [('Ada', 'Lovelace'), ('Alan', 'Turing'),
                        ('Grace', 'Hopper'), ('Tim', 'lee')]:
        await store.save(_person(first, last, login=first != 'Tim'))

    results = await store.query({'last_name': {'$istartswith': 'L'}},
                                {'sort': [('last_name', 1)]})
    assert [p.first_name for p in results.people] == ['Ada', 'Tim']

    results = await store.query({'$and': [{'login': {'$ne': True}}, {}]}, {})
    assert [p.first_name for p in results.people] == ['Tim']

    results = await store.query(
        {'$or': [{'first_name': 'Alan'}, {'first_name': 'Grace'}]},
        {'sort': [('first_name', -1)]}
    )
    assert [p.first_name for p in results.people] == ['Grace', 'Alan']


@pytest.mark.asyncio
async def test_like_wildcards_are_literal(store):
    await store.save(_person('Ada', 'Lovelace'))
    results = await store.query({'last_name': {'$istartswith': '%'}}, {})
    assert results.total == 0


@pytest.mark.asyncio
async def test_pagination(store):
    for i in range(5):
        await store.save(_person('Person', f'Number{i}'))
    results = await store.query({}, {'sort': [('last_name', 1)],
                                     'skip': 1, 'limit': 2})
    assert results.total == 5
    assert [p.last_name for p in results.people] == ['Number1', 'Number2']


@pytest.mark.asyncio
async def test_projection(store):
    await store.save(_person('Ada', 'Lovelace', email='ada@example.org'))
    results = await store.query({}, {'fields': ('id', 'title')})
    person = results.people[0]
    assert person.title == 'Ada Lovelace'
    assert person.email == ''
    assert person.password_hash is None


@pytest.mark.asyncio
async def test_unknown_field(store):
    with pytest.raises(ValueError):
        await store.query({'password_hash': 'x'}, {})


@pytest.mark.asyncio
async def test_login_username_is_unique(store):
    """Two people who can log in cannot share a username."""
    await store.save(_person('Ada', 'Lovelace', login=True, username='ada'))
    with pytest.raises(DuplicateUsername):
        await store.save(_person('Ada', 'Other', login=True, username='ada'))


@pytest.mark.asyncio
async def test_username_shared_without_login(store):
    """People who cannot log in may share usernames."""
    await store.save(_person('Ada', 'Lovelace', login=True, username='ada'))
    await store.save(_person('Ada', 'Other', login=False, username='ada'))
    results = await store.query({'username': 'ada'}, {})
    assert results.total == 2


@pytest.mark.asyncio
async def test_login_without_username(store):
    """Blank usernames do not collide, even for people who can log in."""
    await store.save(_person('Ada', 'Lovelace', login=True))
    await store.save(_person('Alan', 'Turing', login=True))
    results = await store.query({'login': True}, {})
    assert results.total == 2


@pytest.mark.asyncio
async def test_other_integrity_errors(store):
    """Only username clashes are reported as duplicate usernames."""
    person = _person('Ada', 'Lovelace', login=True, username='ada')
    await store.save(person)
    with pytest.raises(UpstreamError) as excinfo:
        with store.transaction() as session:
            session.add(DBPerson(id=person.id, title='Ada Again',
                                 group_ids=[]))
    assert not isinstance(excinfo.value, DuplicateUsername)


@pytest.mark.asyncio
async def test_unavailable(store):
    """Database failures are raised as upstream errors."""
    store.drop_all()
    with pytest.raises(UpstreamError):
        await store.query({}, {})


def test_slugify():
    assert slugify('Jane  Public!') == 'jane-public'
    assert slugify('***') == 'person'
