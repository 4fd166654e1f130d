"""HTTP routes for person records."""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import PlainTextResponse

from . import config, usernames
from .auth import get_authorizer, get_context, get_people
from .domain import RequestContext
from .exceptions import Forbidden, GenerationExhausted, NotFound, \
    UpstreamError
from .passwords import generate_passphrase
from .permissions import EDIT_PROFILE, VIEW_PEOPLE, Authorizer
from .query import People

logger = logging.getLogger(__name__)

router = APIRouter()


def _notfound() -> PlainTextResponse:
    return PlainTextResponse('notfound', status_code=404)


@router.get('')
async def list_people(letter: Optional[str] = None,
                      skip: int = Query(0, ge=0),
                      limit: int = Query(50, ge=1, le=500),
                      context: RequestContext = Depends(get_context),
                      people: People = Depends(get_people)):
    """List people, with the URL of each one's best page."""
    people.authorizer.require(context, VIEW_PEOPLE)
    criteria: Dict[str, Any] = {}
    options: Dict[str, Any] = {'skip': skip, 'limit': limit,
                               'permalink': True}
    people.add_api_criteria({'letter': letter}, criteria, options)
    results = await people.get(context, criteria, options)
    return {'people': results.people, 'total': results.total,
            'skip': results.skip, 'limit': results.limit}


@router.post('')
async def save_person(data: Dict[str, Any] = Body(...),
                      context: RequestContext = Depends(get_context),
                      people: People = Depends(get_people)):
    """Create or update a person. Admins only."""
    return await people.save(context, data)


@router.get('/autocomplete')
async def autocomplete(term: str = '',
                       context: RequestContext = Depends(get_context),
                       people: People = Depends(get_people)):
    people.authorizer.require(context, VIEW_PEOPLE)
    return await people.autocomplete(context, term)


@router.post('/username-unique')
async def username_unique(data: Dict[str, Any] = Body(...),
                          context: RequestContext = Depends(get_context),
                          people: People = Depends(get_people)):
    """Suggest a username that is not in use."""
    try:
        username = await usernames.unique_username(
            people, context, data.get('username'),
            max_attempts=config.USERNAME_MAX_ATTEMPTS
        )
    except Forbidden:
        return _notfound()
    except (GenerationExhausted, UpstreamError) as e:
        logger.error('Could not generate a username: %s', e)
        return PlainTextResponse('error', status_code=500)
    return {'username': username}


@router.post('/generate-password')
async def generate_password(
        context: RequestContext = Depends(get_context),
        authorizer: Authorizer = Depends(get_authorizer)):
    """Suggest a memorable password."""
    if not authorizer.permits(context, EDIT_PROFILE):
        return _notfound()
    return {'password': generate_passphrase(config.PASSPHRASE_WORDS)}


@router.get('/{person_id}')
async def get_person(person_id: str,
                     context: RequestContext = Depends(get_context),
                     people: People = Depends(get_people)):
    people.authorizer.require(context, VIEW_PEOPLE)
    person = await people.get_one(context, {'id': person_id},
                                  {'login': 'any', 'permalink': True})
    if person is None:
        raise NotFound(f'No such person: {person_id}')
    return person
