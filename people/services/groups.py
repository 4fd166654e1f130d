"""Integration with the group service, and the join used to attach groups."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Sequence

from ..domain import Group, Page, RequestContext

logger = logging.getLogger(__name__)

Getter = Callable[[RequestContext, Mapping[str, Any], Mapping[str, Any]],
                  Awaitable[List[Any]]]


class GroupService(ABC):
    """
    The groups module, as seen from the people layer.

    Criteria use the same mongo-style dicts as the record store. The options
    ``get_people`` (bool) and ``permalink`` (bool) control whether groups are
    joined back to their people and whether each group's own best page is
    resolved.
    """

    @abstractmethod
    async def get(self, context: RequestContext, criteria: Mapping[str, Any],
                  options: Mapping[str, Any]) -> List[Group]:
        """Get all groups matching ``criteria``."""

    @abstractmethod
    async def get_one(self, context: RequestContext,
                      criteria: Mapping[str, Any],
                      options: Mapping[str, Any]) -> Optional[Group]:
        """Get the first group matching ``criteria``, if any."""

    @abstractmethod
    async def find_best_page(self, context: RequestContext,
                             group: Group) -> Optional[Page]:
        """Get the directory page best suited to display ``group``."""


class NullGroupService(GroupService):
    """For deployments without groups: every person lives on one page."""

    def __init__(self, default_page_slug: str) -> None:
        self.default_page = Page(slug=default_page_slug, title='People')

    async def get(self, context: RequestContext, criteria: Mapping[str, Any],
                  options: Mapping[str, Any]) -> List[Group]:
        return []

    async def get_one(self, context: RequestContext,
                      criteria: Mapping[str, Any],
                      options: Mapping[str, Any]) -> Optional[Group]:
        return None

    async def find_best_page(self, context: RequestContext,
                             group: Group) -> Optional[Page]:
        return self.default_page


async def join_by_array(context: RequestContext, items: Sequence[Any],
                        id_field: str, objects_field: str, get: Getter,
                        get_options: Mapping[str, Any]) -> None:
    """
    Attach related objects to ``items`` by an array of foreign keys.

    All related objects are fetched with a single call to ``get``. Each item
    gets ``objects_field`` set to the objects whose ids appear in its
    ``id_field``, in that order. Ids with no matching object are skipped.

    Parameters
    ----------
    context : :class:`.RequestContext`
    items : sequence
        Objects carrying a list of ids in ``id_field``.
    id_field : str
    objects_field : str
    get : coroutine function
        Called as ``get(context, criteria, options)``.
    get_options : Mapping
        Passed to ``get``, e.g. to prevent it from joining back to ``items``.

    """
    ids: List[str] = []
    for item in items:
        for _id in getattr(item, id_field) or []:
            if _id not in ids:
                ids.append(_id)
    if not ids:
        for item in items:
            setattr(item, objects_field, [])
        return

    # Fetch everything before touching any item.
    objects = await get(context, {'id': {'$in': ids}}, get_options)
    by_id = {obj.id: obj for obj in objects}
    logger.debug('Joined %i of %i %s', len(by_id), len(ids), objects_field)
    for item in items:
        setattr(item, objects_field, [by_id[_id] for _id
                                      in getattr(item, id_field) or []
                                      if _id in by_id])
