"""Bearer tokens carrying request identities."""

from typing import Any, Dict

import jwt

from .domain import Identity


def decode(token: str, secret: str) -> Dict[str, Any]:
    """Decode an auth token to access identity information."""
    return dict(jwt.decode(token, secret, algorithms=['HS256']))


def encode(identity: Identity, secret: str) -> str:
    """Encode an auth token."""
    return jwt.encode(identity.model_dump(), secret, algorithm='HS256')


def identity_jwt(user_id: str, secret: str, is_admin: bool = False,
                 **permissions: bool) -> str:
    """For use in testing to make a jwt."""
    return encode(
        Identity(user_id=user_id, username=f'user{user_id}',
                 is_admin=is_admin,
                 permissions=[action.replace('_', '-') for action, granted
                              in permissions.items() if granted]),
        secret
    )
