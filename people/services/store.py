"""
Record store for person records.

:class:`RecordStore` is the interface the people layer consumes. Criteria are
mongo-style dicts:

.. code-block:: python

   {'$and': [{'username': 'alice'}, {'login': True}]}
   {'last_name': {'$istartswith': 'm'}}
   {'id': {'$in': ['a1', 'b2']}}

:class:`SQLRecordStore` implements it on top of SQLAlchemy. Its blocking
database work runs in the threadpool so that the event loop is not held up.
"""

import logging
import re
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Generator, Mapping, Optional

from sqlalchemy import and_, create_engine, false, func, or_, select, true
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from ..domain import Person, QueryResults
from ..exceptions import DuplicateUsername, UpstreamError
from .models import Base, DBPerson

logger = logging.getLogger(__name__)

QUERYABLE = ('id', 'title', 'first_name', 'last_name', 'slug', 'login',
             'username', 'email', 'phone')
"""Fields that may appear in criteria and sort specifications."""


class RecordStore(ABC):
    """Query and save primitives of the content-record store."""

    @abstractmethod
    async def query(self, criteria: Mapping[str, Any],
                    options: Mapping[str, Any]) -> QueryResults:
        """
        Find people matching ``criteria``.

        Recognized options are ``sort`` (a list of ``(field, 1 | -1)``
        pairs), ``skip``, ``limit`` and ``fields`` (names of the attributes
        to return).
        """

    @abstractmethod
    async def save(self, person: Person) -> None:
        """Insert or update ``person``, assigning ``id`` and ``slug``."""


def slugify(title: str) -> str:
    """Make a URL-safe slug from a title."""
    return re.sub(r'[^a-z0-9]+', '-', title.lower()).strip('-') or 'person'


def _escape_like(value: str) -> str:
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def _column(name: str) -> Any:
    if name not in QUERYABLE:
        raise ValueError(f'Cannot query on {name}')
    return getattr(DBPerson, name)


def _field_clause(name: str, value: Any) -> Any:
    column = _column(name)
    if not isinstance(value, dict):
        return column.is_(None) if value is None else column == value
    clauses = []
    for operator, operand in value.items():
        if operator == '$in':
            clauses.append(column.in_(list(operand)))
        elif operator == '$ne':
            clauses.append(or_(column != operand, column.is_(None)))
        elif operator == '$istartswith':
            pattern = _escape_like(str(operand).lower()) + '%'
            clauses.append(func.lower(column).like(pattern, escape='\\'))
        else:
            raise ValueError(f'Unsupported operator {operator}')
    return and_(true(), *clauses)


def to_clause(criteria: Mapping[str, Any]) -> Any:
    """Translate mongo-style ``criteria`` into a SQLAlchemy clause."""
    clauses = []
    for key, value in criteria.items():
        if key == '$and':
            clauses.append(and_(true(), *[to_clause(c) for c in value]))
        elif key == '$or':
            clauses.append(or_(false(), *[to_clause(c) for c in value]))
        else:
            clauses.append(_field_clause(key, value))
    return and_(true(), *clauses)


def _to_domain(db_person: DBPerson, fields: Optional[Any] = None) -> Person:
    data = {name: getattr(db_person, name) for name in Person.model_fields
            if hasattr(DBPerson, name)}
    data['group_ids'] = list(db_person.group_ids or [])
    if fields:
        data = {name: value for name, value in data.items()
                if name in fields}
    return Person(**data)


class SQLRecordStore(RecordStore):
    """Person records in a SQL database."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_uri(cls, uri: str) -> 'SQLRecordStore':
        connect_args = {'check_same_thread': False} \
            if uri.startswith('sqlite') else {}
        return cls(create_engine(uri, connect_args=connect_args))

    def create_all(self) -> None:
        """Create all tables in the database."""
        Base.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        """Drop all tables in the database."""
        Base.metadata.drop_all(self.engine)

    @contextmanager
    def transaction(self) -> Generator[Session, None, None]:
        """Context manager for database transaction."""
        session = self._sessions()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            logger.error('Commit failed, rolling back: %s', str(e))
            # Only the driver message; str(e) includes the whole statement.
            reason = str(e.orig)
            if 'ix_people_login_username' in reason \
                    or 'people.username' in reason:
                raise DuplicateUsername('Username is already taken') from e
            raise UpstreamError('Record could not be saved') from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error('Commit failed, rolling back: %s', str(e))
            raise UpstreamError('Record store is unavailable') from e
        finally:
            session.close()

    async def query(self, criteria: Mapping[str, Any],
                    options: Mapping[str, Any]) -> QueryResults:
        return await run_in_threadpool(self._query, criteria, options)

    async def save(self, person: Person) -> None:
        await run_in_threadpool(self._save, person)

    def _query(self, criteria: Mapping[str, Any],
               options: Mapping[str, Any]) -> QueryResults:
        clause = to_clause(criteria)
        skip = int(options.get('skip') or 0)
        limit = options.get('limit')
        stmt = select(DBPerson).where(clause)
        for name, direction in options.get('sort') or []:
            column = _column(name)
            stmt = stmt.order_by(column.desc() if direction < 0
                                 else column.asc())
        if skip:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(int(limit))

        with self.transaction() as session:
            total = session.scalar(
                select(func.count()).select_from(DBPerson).where(clause)
            )
            people = [_to_domain(db_person, options.get('fields'))
                      for db_person in session.scalars(stmt)]
        logger.debug('Query matched %i people, returning %i',
                     total, len(people))
        return QueryResults(people=people, total=total, skip=skip,
                            limit=limit)

    def _save(self, person: Person) -> None:
        if not person.slug:
            person.slug = slugify(person.title)
        data: Dict[str, Any] = dict(
            title=person.title,
            first_name=person.first_name,
            last_name=person.last_name,
            slug=person.slug,
            login=person.login,
            username=person.username,
            password_hash=person.password_hash,
            email=person.email,
            phone=person.phone,
            group_ids=list(person.group_ids),
        )
        with self.transaction() as session:
            db_person = None
            if person.id is not None:
                db_person = session.get(DBPerson, person.id)
            if db_person is None:
                db_person = DBPerson(id=person.id or uuid.uuid4().hex)
                session.add(db_person)
            for name, value in data.items():
                setattr(db_person, name, value)
        person.id = db_person.id
        logger.debug('Saved person %s', person.id)
