"""Exceptions raised by media services."""


class MediaUploadError(Exception):
    """An upload was rejected; ``errors`` holds the user facing reasons."""

    def __init__(self, message='Media upload failed', errors=None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])

    @classmethod
    def validation_failed(cls, errors):
        return cls('File validation failed', errors)

    @classmethod
    def malware_detected(cls):
        return cls('File rejected for security reasons', ['File appears to be malicious'])

    @classmethod
    def storage_quota_exceeded(cls, limit):
        limit_mb = round(limit / 1024 / 1024)
        return cls(
            'Storage quota exceeded',
            [f"Storage limit of {limit_mb}MB has been reached for this wedding"],
        )


class AlbumError(Exception):
    """An album operation broke an album rule; ``field`` names the input at fault."""

    def __init__(self, message, field=None):
        super().__init__(message)
        self.message = message
        self.field = field
