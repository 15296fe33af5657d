"""Exceptions raised by the retro board core and its storage gateways."""


class RetroError(Exception):
    """Base class for all retro board errors."""


class ValidationError(RetroError):
    """Rejected input: empty text, bad topic, malformed payload."""


class TransportError(RetroError):
    """A persisted call failed or timed out. Local state was not advanced."""


class ConcurrencyConflict(RetroError):
    """An archive for the same team is already in flight."""


class NotFoundError(RetroError):
    """The targeted team, card or archive no longer exists."""
