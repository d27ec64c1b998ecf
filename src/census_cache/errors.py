class CacheError(Exception):
    """Base class for everything the fetch cache raises."""

    def __init__(self, message: str, key=None):
        super().__init__(message)
        self.key = key

class FetchFailure(CacheError):
    """The caller's fetch function failed. No entry was written."""

class CacheCorrupt(CacheError):
    """An existing entry is empty or cannot be decoded."""

    def __init__(self, message: str, key=None, path=None):
        super().__init__(message, key=key)
        self.path = path

class PersistFailure(CacheError):
    """A fetched result could not be serialized or written."""
