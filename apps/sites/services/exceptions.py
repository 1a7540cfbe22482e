"""Exceptions raised by site services."""


class SiteValidationError(Exception):
    """Raised when a site cannot be published; ``errors`` maps keys to messages."""

    def __init__(self, errors):
        self.errors = errors
        super().__init__('; '.join(
            message for messages in errors.values() for message in messages
        ))


class SiteAlreadyExistsError(Exception):
    """Raised when creating a second site for a wedding."""


class NoPublishedVersionError(Exception):
    """Raised when a rollback is requested but nothing was ever published."""


class InvalidTemplateModeError(ValueError):
    """Raised when a template is applied with a mode other than merge or overwrite."""
