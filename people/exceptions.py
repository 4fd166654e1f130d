"""Exceptions."""


class ValidationError(ValueError):
    """Input could not be coerced into a usable value."""


class Forbidden(RuntimeError):
    """The requesting identity is not authorized for this action."""


class NotFound(RuntimeError):
    """The requested record does not exist, or the route is not available."""


class GenerationExhausted(RuntimeError):
    """Gave up looking for a free username."""


class UpstreamError(RuntimeError):
    """The record store or the group service failed."""


class DuplicateUsername(UpstreamError):
    """Another login-enabled person already has this username."""


class ConfigurationError(RuntimeError):
    """The application is not configured correctly."""
