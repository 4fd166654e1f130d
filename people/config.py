"""Application configuration."""

import os
import secrets

VERSION = '0.1.0'
"""The application version."""

BASE_PATH = os.environ.get('PEOPLE_BASE_PATH', '/people')
"""Path prefix under which the people routes are mounted."""

DATABASE_URI = os.environ.get('PEOPLE_DATABASE_URI', 'sqlite:///people.db')
"""SQLAlchemy URI for the person record store."""

CREATE_DB = bool(int(os.environ.get('CREATE_DB', 0)))
"""Create the record store tables when the application starts."""

JWT_SECRET = os.environ.get('JWT_SECRET', secrets.token_urlsafe(16))
"""Secret used to verify the bearer tokens that carry request identities.

Must be set, and shared, when running more than one worker. The default is
random and local to the process.
"""

USERNAME_MAX_ATTEMPTS = int(os.environ.get('USERNAME_MAX_ATTEMPTS', '20'))
"""Upper bound on candidates tried when looking for a free username.

Each attempt appends one digit, so twenty attempts is far more than any
realistic data set needs.
"""

PASSPHRASE_WORDS = int(os.environ.get('PASSPHRASE_WORDS', '4'))
"""Number of words in a generated passphrase."""

DEFAULT_PAGE_SLUG = os.environ.get('DEFAULT_PAGE_SLUG', '/people')
"""Slug of the directory page used when no group service is configured."""

LOGLEVEL = int(os.environ.get('LOGLEVEL', 20))
