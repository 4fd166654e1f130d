"""Sanitization of person fields and password handling prior to saving."""

import logging
from typing import Any, Mapping

from .domain import Person
from .passwords import generate_secret, hash_password
from .sanitize import sanitize_boolean, sanitize_ids, sanitize_string

logger = logging.getLogger(__name__)

DEFAULT_FIRST_NAME = 'Jane'
DEFAULT_LAST_NAME = 'Public'


def before_save(data: Mapping[str, Any], person: Person) -> Person:
    """
    Apply caller-supplied ``data`` to ``person`` immediately before it is
    written to the record store.

    Cosmetic fields are sanitized to safe defaults rather than rejected.
    Fields missing from ``data`` keep the value they have on ``person``, so an
    update only needs to carry what changes. The password hash is regenerated
    when a new password is supplied, or when the record has no hash at all;
    otherwise it is left exactly as it was.

    Parameters
    ----------
    data : Mapping
        Raw field values, as supplied by the caller.
    person : :class:`.Person`
        The record being created or updated. Modified in place.

    Returns
    -------
    :class:`.Person`

    """
    person.first_name = sanitize_string(
        data.get('first_name', person.first_name), DEFAULT_FIRST_NAME
    )
    person.last_name = sanitize_string(
        data.get('last_name', person.last_name), DEFAULT_LAST_NAME
    )
    person.title = sanitize_string(
        data.get('title', person.title),
        f'{person.first_name} {person.last_name}'
    )

    person.login = sanitize_boolean(data.get('login', person.login))
    person.username = sanitize_string(data.get('username', person.username))

    # Leading underscore: this must never end up on the record as is.
    _password = sanitize_string(data.get('password'), None)
    if not person.password_hash or _password is not None:
        if _password is None:
            logger.debug('No password for %s, generating a placeholder',
                         person.id or 'new person')
            _password = generate_secret()
        person.password_hash = hash_password(_password)

    person.email = sanitize_string(data.get('email', person.email))
    person.phone = sanitize_string(data.get('phone', person.phone))
    if 'group_ids' in data:
        person.group_ids = sanitize_ids(data['group_ids'])
    return person
