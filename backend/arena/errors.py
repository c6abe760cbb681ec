"""Errors raised by the realtime session subsystem.

A closed transport is not an error here: disconnects are ordinary events
handled by the lifecycle.
"""


class SessionError(Exception):
    """Base class for session errors."""


class Unauthorized(SessionError):
    """Credential absent, malformed, expired or wrongly signed."""


class MalformedMessage(SessionError):
    """Inbound payload has the wrong shape or field types."""
