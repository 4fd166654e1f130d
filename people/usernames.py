"""
Suggest usernames that are not already taken.

The check and the eventual save are separate requests, so two callers can
be handed the same name. Uniqueness among login-enabled people is enforced
by the record store when the person is saved; this module only makes a
collision unlikely.
"""

import logging
import random

from .domain import RequestContext
from .exceptions import GenerationExhausted
from .permissions import EDIT_PEOPLE
from .query import People
from .sanitize import sanitize_string

logger = logging.getLogger(__name__)


async def unique_username(people: People, context: RequestContext,
                          username: str, max_attempts: int = 20) -> str:
    """
    Find a username based on ``username`` that nobody has yet.

    A random digit is appended for as long as the candidate is in use. Each
    check depends on the previous one, so they run one at a time.

    Parameters
    ----------
    people : :class:`.People`
    context : :class:`.RequestContext`
        Must be permitted to ``edit-people``.
    username : str
    max_attempts : int
        Number of candidates to check before giving up.

    Returns
    -------
    str

    Raises
    ------
    :class:`.Forbidden`
    :class:`.GenerationExhausted`

    """
    people.authorizer.require(context, EDIT_PEOPLE)
    candidate = sanitize_string(username)
    for attempt in range(max_attempts):
        existing = await people.get(context, {'username': candidate},
                                    {'get_groups': False, 'limit': 1,
                                     'fields': ('id',)})
        if not existing.people:
            logger.debug('Username %s is free after %i attempt(s)',
                         candidate, attempt + 1)
            return candidate
        candidate += str(random.randint(0, 9))
    raise GenerationExhausted(
        f'No free username found after {max_attempts} attempts'
    )
