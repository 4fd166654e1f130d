"""Password hashing and generation."""

import logging
import secrets

from mimesis import Text
from werkzeug.security import check_password_hash, generate_password_hash

from .exceptions import ValidationError

logger = logging.getLogger(__name__)


class PasswordAuthenticationFailed(RuntimeError):
    """Password is not correct."""


def hash_password(password: str) -> str:
    """
    Generate a salted hash of a password.

    The result is a single ``method$salt$hash`` token with a newly generated
    salt, so it is all that is needed to verify a candidate later.
    """
    if not password:
        raise ValidationError('Refusing to hash an empty password')
    return generate_password_hash(password)


def check_password(password: str, encrypted: str) -> bool:
    """Check a password against a hash produced by :func:`hash_password`."""
    if not encrypted or not check_password_hash(encrypted, password):
        raise PasswordAuthenticationFailed('Incorrect password')
    return True


def generate_secret() -> str:
    """Generate a random throwaway secret, for accounts without a password."""
    return secrets.token_urlsafe(24)


def generate_passphrase(words: int = 4, separator: str = '-') -> str:
    """Generate a human-memorable passphrase made of common words."""
    text = Text(seed=secrets.randbits(64))
    return separator.join(word.lower() for word in text.words(quantity=words))
