"""
Error types for content loading.

None of these escape the resolution engine during normal operation:
loaders catch them and degrade to an empty layer.
"""


class ContentError(Exception):
    """Base class for content source problems."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"{path}: {reason}" if reason else path
        super().__init__(message)


class SourceUnavailable(ContentError):
    """Raised when a layer file is missing or cannot be read."""
    pass


class MalformedSource(ContentError):
    """Raised when a layer file parses but does not have the expected shape."""
    pass
