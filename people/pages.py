"""
The best page for a person.

A person's public presence is the best directory page for their first
group. The group service decides which page that is; the answer is cached
on the :class:`.RequestContext` so that a listing of people who share a
group costs one lookup per request rather than one per person.
"""

import logging
from typing import Optional

from .domain import Group, Page, Person, RequestContext
from .services.groups import GroupService

logger = logging.getLogger(__name__)

PLACEHOLDER_GROUP_ID = 'dummy'


def placeholder_group() -> Group:
    """A group no real page is locked down to, for people without groups."""
    return Group(id=PLACEHOLDER_GROUP_ID, type='group')


async def find_best_page(groups: GroupService, context: RequestContext,
                         person: Person) -> Optional[Page]:
    """
    Get the best page for ``person``.

    Parameters
    ----------
    groups : :class:`.GroupService`
    context : :class:`.RequestContext`
        Its ``best_pages`` cache is consulted and updated.
    person : :class:`.Person`

    Returns
    -------
    :class:`.Page` or None

    """
    if person.groups:
        group_id = person.groups[0].id
    elif person.group_ids:
        group_id = person.group_ids[0]
    else:
        group_id = PLACEHOLDER_GROUP_ID

    if group_id in context.best_pages:
        return context.best_pages[group_id]

    if group_id == PLACEHOLDER_GROUP_ID:
        group = placeholder_group()
    elif person.groups:
        group = person.groups[0]
    else:
        group = await groups.get_one(context, {'id': group_id},
                                     {'get_people': False})
        if group is None:
            logger.debug('Group %s is gone, using the placeholder', group_id)
            group = placeholder_group()

    # Failures propagate from here, and so are never cached.
    page = await groups.find_best_page(context, group)
    context.best_pages[group_id] = page
    context.best_pages[group.id] = page
    return page


def permalink(person: Person, page: Page) -> Person:
    """Set the URL of ``person`` beneath ``page``."""
    person.url = f'{page.slug}/{person.slug}'
    return person
