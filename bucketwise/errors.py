# errors.py

"""Error taxonomy shared by the rules, services and API layers.

Affordability rejections are deliberately absent: a blocked purchase is a
normal result value, not an exception.
"""


class BucketwiseError(Exception):
    """Base class for every error raised on purpose by this package."""


class ValidationError(BucketwiseError, ValueError):
    """Bad input caught before any write (non-positive amount, bad currency...)."""


class NotFoundError(BucketwiseError, LookupError):
    """A referenced bucket, expense or wishlist item does not exist for the user."""


class LimiterConfigurationError(BucketwiseError):
    """A bucket carries a zero, negative or missing limiter coefficient."""


class OperationTimeoutError(BucketwiseError, TimeoutError):
    """An engine operation exceeded its configured time budget."""
