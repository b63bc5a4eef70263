"""Custom exceptions for confluence_mirror."""


class ConfluenceMirrorError(Exception):
    """Base exception for confluence_mirror operations."""


class ConfigurationError(ConfluenceMirrorError):
    """Required configuration is missing or invalid."""


class FetchError(ConfluenceMirrorError):
    """Error during content fetching."""


class PageNotFoundError(FetchError):
    """Requested page does not exist or is not visible to the caller."""


class AuthenticationError(FetchError):
    """Confluence rejected the supplied credentials."""


class RateLimitError(FetchError):
    """Rate limited by Confluence."""


class ParseError(ConfluenceMirrorError):
    """Error while parsing a document body."""
