"""Realtime session services: credentials, registry, protocol and lifecycle.

The submodules hold transport-agnostic domain logic. Socket handlers and
HTTP routes reach the per-app instances through the accessors below.
"""

from flask import current_app

TOKENS_EXTENSION = 'arena.tokens'
SESSION_EXTENSION = 'arena.session'


def current_tokens():
    return current_app.extensions[TOKENS_EXTENSION]


def current_session():
    return current_app.extensions[SESSION_EXTENSION]
