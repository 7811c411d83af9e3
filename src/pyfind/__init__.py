"""pyfind — recursive filesystem search with byte-level glob filters."""

__version__ = "0.1.0"


class FindError(Exception):
    """User-facing CLI error.

    Raised when a traversal cannot be completed. The message is printed
    to stderr and the process exits with code 1.
    """
