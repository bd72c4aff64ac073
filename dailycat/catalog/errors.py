"""Catalog error taxonomy."""


class CatalogError(Exception):
    """Unexpected response from the photo catalog"""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(CatalogError):
    """The photo no longer exists upstream (HTTP 404)"""
    pass


class RateLimitedError(CatalogError):
    """The catalog refused the request because of rate limiting"""
    pass
