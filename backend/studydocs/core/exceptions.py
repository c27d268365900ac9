"""
Custom exceptions for the search subsystem.

Failures on the index-write path (extraction, indexing) are absorbed and
logged by the indexing pipeline. Failures on the index-read path are raised
to the caller as SearchExecutionError so a broken query never looks like an
empty result.
"""


class SearchError(Exception):
    """Base class for all search subsystem errors."""
    pass


class SearchExecutionError(SearchError):
    """
    Raised when a query cannot be built or executed against the index.

    This is the only user-visible failure class of the subsystem; the API
    layer maps it to a 502 response.
    """
    pass


class IndexingError(SearchError):
    """Raised when a record cannot be written to or removed from the index."""
    pass


class StorageError(Exception):
    """Raised when the object storage client cannot be created or queried."""
    pass


class ExtractionError(Exception):
    """Raised when the document parser fails to read a file."""
    pass


class UnsupportedFormatError(ExtractionError):
    """Raised when no parser is registered for the file type."""
    pass


class WriteLimitReached(Exception):
    """
    Signal raised by the bounded text writer once the character cap is hit.

    This is not a failure: the writer already holds the text up to the cap
    and the caller returns it.
    """
    pass
