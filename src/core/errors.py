"""
Exceptions raised by the calendar, mail and persistence adapters.
"""


class MutationError(Exception):
    """Raised when a single calendar create/delete/list call fails.

    The caller counts it against the affected date and carries on with
    the remaining dates.
    """

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation} failed: {detail}")


class StoreError(Exception):
    """Raised when the calendar, mailbox or persistence layer is unreachable."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
