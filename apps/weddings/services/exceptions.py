"""Exceptions raised by wedding services."""


class InviteError(Exception):
    """Raised when a partner invite cannot be used."""
