"""Core data structures for person records and their collaborators."""

from typing import Dict, List, NamedTuple, Optional
from dataclasses import dataclass, field

from pydantic import BaseModel, Field


class Group(BaseModel):
    """A group a person belongs to. Owned by the group service."""

    id: str
    title: str = ''
    slug: str = ''
    type: str = 'group'


class Page(BaseModel):
    """A navigable page, as returned by the group service."""

    id: Optional[str] = None
    title: str = ''
    slug: str
    type: str = 'page'


class Person(BaseModel):
    """A person account record."""

    id: Optional[str] = None
    """Opaque identifier assigned by the record store on first save."""

    title: str = ''
    """Display name."""

    first_name: str = ''
    last_name: str = ''
    slug: str = ''

    login: bool = False
    """Whether this person may log in to the platform."""

    username: str = ''
    """Only required to be unique among login-enabled people."""

    password_hash: Optional[str] = Field(default=None, exclude=True)
    """
    Self-describing salted hash. Write-only.

    Never serialized, and cleared from every record handed out by
    :meth:`people.query.People.get`.
    """

    email: str = ''
    phone: str = ''

    group_ids: List[str] = []
    """Ordered group ids. The first one is the primary group."""

    groups: Optional[List[Group]] = None
    """Resolved groups, populated by the group join."""

    url: Optional[str] = None
    """Permalink, populated when permalinks are requested."""


class Identity(BaseModel):
    """The user on whose behalf a request is made."""

    user_id: str
    username: str = ''
    is_admin: bool = False
    permissions: List[str] = []
    """Action names the base policy grants to this user."""


class QueryResults(NamedTuple):
    """People returned by the record store, with pagination metadata."""

    people: List[Person]
    total: int
    skip: int = 0
    limit: Optional[int] = None


@dataclass
class RequestContext:
    """State scoped to a single request."""

    identity: Optional[Identity] = None

    best_pages: Dict[str, Optional[Page]] = field(default_factory=dict)
    """Best page by group id. Lives and dies with the request."""
