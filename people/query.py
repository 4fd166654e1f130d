"""
Access to person records.

:class:`People` wraps a :class:`.RecordStore`. It adds the person-specific
filters and default sort to every query, strips password hashes from
whatever comes back, and joins people to their groups. Saves go through the
authorizer and :func:`.credentials.before_save` before reaching the store.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from . import credentials, pages
from .domain import Page, Person, QueryResults, RequestContext
from .exceptions import ConfigurationError, NotFound
from .permissions import EDIT_PEOPLE, Authorizer, people_admin_only
from .sanitize import convert_boolean_filter_criteria, sanitize_string
from .services.groups import GroupService, join_by_array
from .services.store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_SORT = [('last_name', 1), ('first_name', 1)]

AUTOCOMPLETE_FIELDS = frozenset({'title', 'first_name', 'last_name', 'id',
                                 'login', 'username', 'slug'})
"""Kept to a minimum; typeahead lookups happen on every keystroke."""


def autocomplete_title(person: Person) -> str:
    """Disambiguate the title by username, or by slug if login is off."""
    if person.login:
        return f'{person.title} ({person.username})'
    return f'{person.title} ({person.slug})'


class People:
    """Person records on top of a generic record store."""

    def __init__(self, store: RecordStore, authorizer: Authorizer,
                 groups: Optional[GroupService] = None) -> None:
        self.store = store
        self.authorizer = authorizer
        self._groups = groups
        self.authorizer.register('people-admin-only', people_admin_only)

    def set_groups(self, groups: GroupService) -> None:
        """
        Attach the group service.

        The group service usually needs this object to join groups to their
        people, so it may only exist once this one does.
        """
        self._groups = groups

    @property
    def groups(self) -> GroupService:
        if self._groups is None:
            raise ConfigurationError('No group service attached')
        return self._groups

    async def get(self, context: RequestContext,
                  criteria: Optional[Mapping[str, Any]] = None,
                  options: Optional[Mapping[str, Any]] = None) \
            -> QueryResults:
        """
        Find people.

        Parameters
        ----------
        context : :class:`.RequestContext`
        criteria : Mapping
            Store criteria. Always combined with the filters derived from
            ``options``, never replaced by them.
        options : Mapping
            ``login`` (bool or ``'any'``), ``letter`` (initial of the last
            name), ``sort``, ``skip``, ``limit``, ``fields``, ``get_groups``
            (default ``True``) and ``permalink`` (default ``False``). Not
            modified.

        Returns
        -------
        :class:`.QueryResults`
            No person in the results carries a password hash.

        """
        # Copy, so that the caller's options are left alone.
        options = dict(options or {})
        filter_criteria: Dict[str, Any] = {}

        convert_boolean_filter_criteria('login', options, filter_criteria)

        letter = sanitize_string(options.pop('letter', None), None)
        if letter:
            filter_criteria['last_name'] = {'$istartswith': letter}

        get_groups = options.pop('get_groups', True) is not False
        permalink = bool(options.pop('permalink', False))

        if not options.get('sort'):
            options['sort'] = DEFAULT_SORT

        results = await self.store.query(
            {'$and': [dict(criteria or {}), filter_criteria]}, options
        )
        for person in results.people:
            # Passwords are write-only outside of authentication.
            person.password_hash = None

        if get_groups:
            # get_people: False, or the groups would join right back to us.
            await join_by_array(context, results.people, 'group_ids',
                                'groups', self.groups.get,
                                {'get_people': False, 'permalink': False})
        if permalink:
            for person in results.people:
                page = await self.find_best_page(context, person)
                if page is not None:
                    pages.permalink(person, page)
        return results

    async def get_one(self, context: RequestContext,
                      criteria: Mapping[str, Any],
                      options: Optional[Mapping[str, Any]] = None) \
            -> Optional[Person]:
        """Get the first person matching ``criteria``, if any."""
        results = await self.get(context, criteria,
                                 dict(options or {}, limit=1))
        return results.people[0] if results.people else None

    async def save(self, context: RequestContext,
                   data: Mapping[str, Any]) -> Person:
        """
        Create or update a person from raw ``data``.

        When ``data`` carries an ``id`` the existing record is updated,
        keeping its password hash unless a new password is supplied.

        Raises
        ------
        :class:`.Forbidden`
        :class:`.NotFound`
            ``data['id']`` does not match any person.

        """
        self.authorizer.require(context, EDIT_PEOPLE)
        person_id = sanitize_string(data.get('id'), None)
        if person_id is None:
            person = Person()
        else:
            # Straight to the store: the existing hash must survive.
            results = await self.store.query({'id': person_id}, {'limit': 1})
            if not results.people:
                raise NotFound(f'No such person: {person_id}')
            person = results.people[0]

        credentials.before_save(data, person)
        await self.store.save(person)
        logger.info('Person %s saved', person.id)
        return person.model_copy(update={'password_hash': None})

    async def find_best_page(self, context: RequestContext,
                             person: Person) -> Optional[Page]:
        return await pages.find_best_page(self.groups, context, person)

    def add_api_criteria(self, query: Mapping[str, Any],
                         criteria: Dict[str, Any],
                         options: Dict[str, Any]) -> None:
        """API listings include people whether or not they can log in."""
        letter = sanitize_string(query.get('letter'), None)
        if letter:
            options['letter'] = letter
        options['login'] = 'any'

    async def autocomplete(self, context: RequestContext, term: Any,
                           limit: int = 10) -> List[Dict[str, Any]]:
        """Typeahead suggestions for people matching ``term``."""
        term = sanitize_string(term, None)
        if term is None:
            return []
        criteria = {'$or': [{'title': {'$istartswith': term}},
                            {'last_name': {'$istartswith': term}},
                            {'username': {'$istartswith': term}}]}
        results = await self.get(context, criteria, {
            'fields': AUTOCOMPLETE_FIELDS,
            'get_groups': False,
            'limit': limit
        })
        return [{'label': autocomplete_title(person), 'value': person.id}
                for person in results.people]
