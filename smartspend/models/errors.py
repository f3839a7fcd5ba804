"""
Data-level exceptions.

These describe problems with a single value or a single record.
They never abort a session: callers either reject the one operation
(InvalidInputError) or degrade the one figure (CorruptRecordError).
"""

from typing import Optional


class InvalidInputError(ValueError):
    """User input cannot be accepted (empty description, non-numeric amount, ...)."""
    
    def __init__(self, message: str, issues: Optional[list[str]] = None):
        self.issues = issues or [message]
        super().__init__(message)


class CorruptRecordError(ValueError):
    """A stored value that should be numeric is not."""
    
    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Not a numeric amount: {value!r}")
