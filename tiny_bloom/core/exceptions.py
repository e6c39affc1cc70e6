"""
Exceptions raised by tiny-bloom.
"""


class InvalidParameter(ValueError):
    """
    Raised when a filter is configured with parameters it cannot honour.

    This is the only error a filter raises on the public surface, and only at
    construction time: a non-positive or non-integer capacity, a false positive
    rate outside the open interval (0, 1), or an unknown hash function name.
    No partially built filter is ever returned.

    It subclasses ValueError so existing ``except ValueError`` handlers keep
    working.
    """
