from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import TracebackType
from typing import Any, TypeVar

Document = dict[str, Any]
T = TypeVar("T")


@dataclass(frozen=True)
class DocumentRef:
    """Address of a single document."""

    collection: str
    id: str


class Transaction(ABC):
    """
    Handle passed to a transaction function.
    Reads and writes made through it commit together or not at all.
    """

    @abstractmethod
    def get(self, ref: DocumentRef) -> Document | None:
        """Read a document inside the transaction, or None if it does not exist."""

    @abstractmethod
    def set(self, ref: DocumentRef, document: Document) -> None:
        """Create or overwrite a document inside the transaction."""


class DocumentStore(ABC):
    """
    Abstract asynchronous key-document store.

    Each document lives in a named collection under a store-assigned id.
    Implementations surface every failure as StoreUnavailableError.
    """

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Document | None:
        """Return the document, or None if the id does not resolve."""

    @abstractmethod
    async def insert(self, collection: str, document: Document) -> str:
        """Store a new document and return the id assigned to it."""

    @abstractmethod
    async def replace(self, collection: str, doc_id: str, document: Document) -> None:
        """Overwrite an existing document. Raises NotFoundError if the id is absent."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Mapping[str, Any],
        limit: int,
        start_after: str | None = None,
    ) -> list[tuple[str, Document]]:
        """
        Return up to `limit` (id, document) pairs whose top-level fields equal
        every value in `filters`, in insertion order, starting after the
        document `start_after` when given.
        """

    @abstractmethod
    async def run_transaction(
        self,
        fn: Callable[[Transaction], T],
        operation: str = "transaction",
        document_id: str | None = None,
    ) -> T:
        """
        Run `fn` as one atomic read-modify-write unit and return its result.
        Store failures are reported under `operation` and `document_id`.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the store's resources."""

    def __enter__(self) -> "DocumentStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
