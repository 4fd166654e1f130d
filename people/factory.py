"""Application factory for the people service."""

import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from . import config, routes
from .exceptions import DuplicateUsername, Forbidden, NotFound, UpstreamError
from .permissions import Authorizer
from .query import People
from .services.groups import GroupService, NullGroupService
from .services.store import RecordStore, SQLRecordStore

logger = logging.getLogger(__name__)

INVALID_SCOPE = {'reason': 'Access denied'}
NOT_FOUND = {'reason': 'Not found'}
USERNAME_TAKEN = {'reason': 'Username is already taken'}


async def _forbidden(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(INVALID_SCOPE, status_code=403)


async def _not_found(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(NOT_FOUND, status_code=404)


async def _conflict(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(USERNAME_TAKEN, status_code=409)


async def _upstream(request: Request, exc: Exception) -> PlainTextResponse:
    logger.error('Upstream failure on %s: %s', request.url.path, exc)
    return PlainTextResponse('error', status_code=500)


def create_web_app(store: Optional[RecordStore] = None,
                   groups: Optional[GroupService] = None,
                   authorizer: Optional[Authorizer] = None,
                   jwt_secret: Optional[str] = None) -> FastAPI:
    """
    Initialize and configure the people application.

    Parameters
    ----------
    store : :class:`.RecordStore`
        Defaults to a SQL store at ``DATABASE_URI``.
    groups : :class:`.GroupService`
        Defaults to a :class:`.NullGroupService`, which puts everyone on the
        ``DEFAULT_PAGE_SLUG`` page.
    authorizer : :class:`.Authorizer`
        Defaults to one with the default base policy.
    jwt_secret : str
        Defaults to ``JWT_SECRET``.

    """
    logging.getLogger('people').setLevel(config.LOGLEVEL)

    if store is None:
        store = SQLRecordStore.from_uri(config.DATABASE_URI)
        if config.CREATE_DB:
            store.create_all()
    if groups is None:
        groups = NullGroupService(config.DEFAULT_PAGE_SLUG)
    if authorizer is None:
        authorizer = Authorizer()
    if jwt_secret is None and not os.environ.get('JWT_SECRET'):
        logger.warning('JWT_SECRET is not set; using a secret local to this'
                       ' process. Tokens will not verify across workers.')

    app = FastAPI(title='people', version=config.VERSION)
    app.state.authorizer = authorizer
    app.state.people = People(store, authorizer, groups)
    app.state.jwt_secret = jwt_secret or config.JWT_SECRET

    app.include_router(routes.router, prefix=config.BASE_PATH)

    app.add_exception_handler(Forbidden, _forbidden)
    app.add_exception_handler(NotFound, _not_found)
    app.add_exception_handler(DuplicateUsername, _conflict)
    app.add_exception_handler(UpstreamError, _upstream)
    return app
