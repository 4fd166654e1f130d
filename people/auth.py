"""FastAPI dependencies for the identity and context of a request."""

import logging
from typing import Optional

import jwt as pyjwt
from fastapi import Depends, Header, Request
from pydantic import ValidationError as SchemaError

from .domain import Identity, RequestContext
from .jwt import decode
from .permissions import Authorizer
from .query import People

log = logging.getLogger(__name__)


async def jwt_header(Authorization: Optional[str] = Header(None)) \
        -> Optional[str]:
    """Gets the JWT from the Authorization Bearer header."""
    if not Authorization:
        return None

    parts = Authorization.split()
    if not parts or parts[0].lower() != 'bearer':
        log.debug('Authorization header lacked bearer')
        return None
    if len(parts) != 2:
        log.debug('Authorization header was not 2 parts')
        return None
    return parts[1]


async def get_identity(request: Request,
                       token: Optional[str] = Depends(jwt_header)) \
        -> Optional[Identity]:
    """
    The identity the request is made on behalf of.

    Requests without a valid token are anonymous; it is up to the authorizer
    to decide what anonymous requests may do.
    """
    if token is None:
        return None
    try:
        return Identity(**decode(token, request.app.state.jwt_secret))
    except (pyjwt.InvalidTokenError, SchemaError, TypeError) as e:
        log.debug('Ignoring invalid token: %s', e)
        return None


async def get_context(identity: Optional[Identity] = Depends(get_identity)) \
        -> RequestContext:
    """A fresh context, and so a fresh best page cache, per request."""
    return RequestContext(identity=identity)


def get_people(request: Request) -> People:
    people: People = request.app.state.people
    return people


def get_authorizer(request: Request) -> Authorizer:
    authorizer: Authorizer = request.app.state.authorizer
    return authorizer
