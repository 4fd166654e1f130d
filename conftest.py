"""Special pytest fixture configuration file.

This file automatically provides all fixtures defined in it to all
pytest tests in this directory and sub directories.
"""
from typing import Any, Dict, List, Mapping, Optional

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from people.domain import Group, Identity, Page, RequestContext
from people.factory import create_web_app
from people.permissions import Authorizer
from people.query import People
from people.services.groups import GroupService
from people.services.store import SQLRecordStore


class FakeGroups(GroupService):
    """Group service over a dict, counting the calls made to it."""

    def __init__(self, groups: List[Group]) -> None:
        self.groups = {group.id: group for group in groups}
        self.get_calls: List[Dict[str, Any]] = []
        self.get_one_calls: List[Mapping[str, Any]] = []
        self.best_page_calls: List[str] = []
        self.fail = False

    async def get(self, context, criteria, options):
        self.get_calls.append({'criteria': criteria, 'options': options})
        if self.fail:
            raise RuntimeError('groups are down')
        ids = criteria['id']['$in']
        return [self.groups[_id] for _id in ids if _id in self.groups]

    async def get_one(self, context, criteria, options):
        self.get_one_calls.append(criteria)
        return self.groups.get(criteria['id'])

    async def find_best_page(self, context, group) -> Optional[Page]:
        self.best_page_calls.append(group.id)
        if self.fail:
            raise RuntimeError('groups are down')
        if group.id == 'dummy':
            return Page(id='directory', slug='/directory')
        return Page(id=f'page-{group.id}', slug=f'/groups/{group.slug}')


@pytest.fixture
def secret():
    return "testing_secret"


@pytest.fixture
def engine():
    return create_engine('sqlite://', poolclass=StaticPool,
                         connect_args={'check_same_thread': False})


@pytest.fixture
def store(engine):
    _store = SQLRecordStore(engine)
    _store.create_all()
    yield _store
    _store.drop_all()


@pytest.fixture
def groups():
    return FakeGroups([
        Group(id='g1', title='Faculty', slug='faculty'),
        Group(id='g2', title='Staff', slug='staff'),
    ])


@pytest.fixture
def authorizer():
    return Authorizer()


@pytest.fixture
def people(store, authorizer, groups):
    return People(store, authorizer, groups)


@pytest.fixture
def admin():
    return RequestContext(identity=Identity(user_id='1', username='admin',
                                            is_admin=True))


@pytest.fixture
def editor():
    """Granted edit-people by the base policy, but not an admin."""
    return RequestContext(identity=Identity(
        user_id='2', username='editor',
        permissions=['edit-people', 'edit-profile']
    ))


@pytest.fixture
def anonymous():
    return RequestContext()


@pytest_asyncio.fixture
async def alice(people, admin):
    return await people.save(admin, {
        'first_name': 'Alice',
        'last_name': 'Liddell',
        'login': True,
        'username': 'alice',
        'password': 'through-the-looking-glass',
        'email': 'alice@example.org',
        'group_ids': ['g1', 'g2'],
    })


@pytest.fixture
def client(store, groups, secret):
    app = create_web_app(store=store, groups=groups, jwt_secret=secret)
    return TestClient(app)
