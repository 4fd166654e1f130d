"""
Authorization decisions for person records.

Decisions are made by an :class:`Authorizer`: a base policy produces the
initial verdict, then each registered predicate is consulted in order. A
predicate receives a mutable :class:`Decision` and may set its ``response``
to ``'Forbidden'``. Predicates can only tighten a verdict; an attempt to
clear a denial is ignored.

The people layer registers :func:`people_admin_only` when it starts up:

.. code-block:: python

   authorizer = Authorizer()
   people = People(store, authorizer, groups)   # registers the predicate
   authorizer.permits(context, 'edit-people')   # False unless admin

"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .domain import RequestContext
from .exceptions import Forbidden

logger = logging.getLogger(__name__)

FORBIDDEN = 'Forbidden'

VIEW_PEOPLE = 'view-people'
EDIT_PEOPLE = 'edit-people'
EDIT_PROFILE = 'edit-profile'


@dataclass
class Decision:
    """The outcome of an authorization check. ``None`` means allowed."""

    response: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.response is None


BasePolicy = Callable[[RequestContext, str], bool]
Predicate = Callable[[RequestContext, str, Decision], None]


def default_policy(context: RequestContext, action: str) -> bool:
    """Admins may do anything, anyone may view, others need the action."""
    if action.startswith('view-'):
        return True
    identity = context.identity
    if identity is None:
        return False
    return identity.is_admin or action in identity.permissions


def people_admin_only(context: RequestContext, action: str,
                      decision: Decision) -> None:
    """Only admins may do anything with people other than view them."""
    if action.endswith('-people') and action != VIEW_PEOPLE:
        identity = context.identity
        if not (identity and identity.is_admin):
            decision.response = FORBIDDEN


class Authorizer:
    """A base policy followed by a chain of tightening predicates."""

    def __init__(self, policy: BasePolicy = default_policy) -> None:
        self.policy = policy
        self._predicates: List[Tuple[str, Predicate]] = []

    def register(self, name: str, predicate: Predicate) -> None:
        """Add a predicate to the end of the chain."""
        if any(registered == name for registered, _ in self._predicates):
            logger.debug('Predicate %s already registered', name)
            return
        self._predicates.append((name, predicate))

    def decide(self, context: RequestContext, action: str) -> Decision:
        """Run the base policy and every predicate for ``action``."""
        decision = Decision()
        if not self.policy(context, action):
            decision.response = FORBIDDEN
        for name, predicate in self._predicates:
            previous = decision.response
            predicate(context, action, decision)
            if previous is not None and decision.response != previous:
                logger.warning('Predicate %s tried to loosen %s on %s',
                               name, previous, action)
                decision.response = previous
        return decision

    def permits(self, context: RequestContext, action: str) -> bool:
        return self.decide(context, action).allowed

    def require(self, context: RequestContext, action: str) -> None:
        """
        Ensure that ``action`` is permitted.

        Raises
        ------
        :class:`.Forbidden`

        """
        if not self.permits(context, action):
            logger.debug('Access denied for %s', action)
            raise Forbidden('Access denied')
