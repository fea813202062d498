"""Custom exceptions for ttchat.

Only :class:`StoreUnavailable` is allowed to fail a request.  The two
completion-related errors are raised internally and absorbed by the
services into degraded responses.
"""

from __future__ import annotations


class StoreUnavailable(Exception):
    """Raised when the transcript store cannot be read or written.

    Attributes:
        operation: The store operation that failed (``"fetch"``,
            ``"create"`` or ``"replace"``).
        conversation_id: The conversation the operation targeted.
    """

    def __init__(self, message: str, operation: str = "", conversation_id: str = "") -> None:
        super().__init__(message)
        self.operation = operation
        self.conversation_id = conversation_id


class CompletionFailure(Exception):
    """Raised when the completion service returns no usable text.

    Covers API errors (quota, auth, malformed response), transport
    timeouts, and empty or whitespace-only replies.
    """


class MalformedAnnotation(Exception):
    """Raised when an annotation reply cannot be parsed or validated.

    Attributes:
        raw_response: The raw model output that failed to parse.
    """

    def __init__(self, message: str, raw_response: str = "") -> None:
        super().__init__(message)
        self.raw_response = raw_response
