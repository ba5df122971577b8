"""Exception hierarchy.

Expected data-shape problems are reported through result values
(zeros, empty lists, ``Result.fail``). Exceptions are reserved for
structural problems with the input itself.
"""


class KowalskiError(Exception):
    """Base class for all kowalski errors."""


class DataSetError(KowalskiError):
    """A dataset could not be built from the given input."""
