"""
Not-found marker returned by cache reads.

NOT_FOUND is distinct from None, so None, 0, False and "" stay legitimate
cached values while "absent" is unambiguous.
"""

from typing import Any


class _NotFound:
    """Singleton type of NOT_FOUND."""
    
    _instance = None
    
    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
    
    def __bool__(self) -> bool:
        return False
    
    def __repr__(self) -> str:
        return "NOT_FOUND"
    
    def __reduce__(self):
        return (_NotFound, ())


NOT_FOUND = _NotFound()


def is_found(value: Any) -> bool:
    """Check whether a cache read produced a value."""
    return value is not NOT_FOUND
