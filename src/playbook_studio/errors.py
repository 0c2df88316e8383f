"""Error taxonomy shared by the repository, the HTTP layer and the client."""
from __future__ import annotations


class StudioError(Exception):
    """Base class for Playbook Studio errors"""


class ValidationError(StudioError):
    """A draft failed client-side validation; nothing was sent over the network."""


class BadRequestError(StudioError):
    """Request body could not be parsed (HTTP 400)"""


class NotFoundError(StudioError):
    """Lookup miss (HTTP 404)"""


class PersistenceError(StudioError):
    """Database unavailable or write rejected (HTTP 500)"""
