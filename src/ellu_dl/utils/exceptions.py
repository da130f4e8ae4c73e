"""Custom exception hierarchy for ellu-dl."""


class ElluError(Exception):
    """Base exception for all ellu-dl errors."""


class InvalidURLError(ElluError):
    """Raised when the book page URL has an unrecognized shape."""


class FetchError(ElluError):
    """Raised when a network/HTTP request fails."""


class AuthenticationError(FetchError):
    """Raised when the session cookie is missing, expired or rejected."""


class NotFoundError(FetchError):
    """Raised when the requested page or resource does not exist."""


class ManifestNotFoundError(ElluError):
    """Raised when the reader page carries no chapter manifest."""


class DecodeError(ElluError):
    """Raised when a JSON payload is malformed or has an unexpected shape."""


class ParseError(ElluError):
    """Raised when HTML parsing fails or an expected element is missing."""


class ResourceFetchError(ElluError):
    """Raised when an embedded image cannot be downloaded or registered."""


class AssemblyError(ElluError):
    """Raised when EPUB creation fails."""
