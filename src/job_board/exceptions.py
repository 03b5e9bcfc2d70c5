class JobBoardError(Exception):
    """
    Base class for every error raised by the job board core.
    Carries the operation name and the document id involved, when known,
    so callers can log the failure without re-deriving state.
    """

    def __init__(
        self, message: str, operation: str | None = None, document_id: str | None = None
    ) -> None:
        self.message = message
        self.operation = operation
        self.document_id = document_id
        super().__init__(self.message)

    def __str__(self) -> str:
        context = []
        if self.operation:
            context.append(f"operation={self.operation}")
        if self.document_id:
            context.append(f"id={self.document_id}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class ValidationError(JobBoardError, ValueError):
    """Malformed input rejected before any store call was issued."""


class NotFoundError(JobBoardError, LookupError):
    """The referenced document does not exist at mutation time."""


class StoreUnavailableError(JobBoardError):
    """The underlying document store failed."""


class OperationTimeoutError(JobBoardError, TimeoutError):
    """A caller-imposed wait on a store operation was exceeded."""
