"""Base exception classes for the archive audit domain layer."""


class ArchiveAuditError(Exception):
    """Base exception for all archive audit errors.

    All domain-specific exceptions MUST inherit from this class.
    This lets the CLI report every tool failure the same way.

    Note:
        A continuity break or a missing block is NOT an error. Those are
        the findings of an audit and are reported as diagnostics.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
