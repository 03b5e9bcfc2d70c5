import asyncio
import json
import logging
import sqlite3
import threading
import uuid
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, TypeVar

from job_board.exceptions import NotFoundError, StoreUnavailableError, ValidationError
from job_board.store.base import Document, DocumentRef, DocumentStore, Transaction

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _SQLiteTransaction(Transaction):
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get(self, ref: DocumentRef) -> Document | None:
        return _select_document(self._conn, ref.collection, ref.id)

    def set(self, ref: DocumentRef, document: Document) -> None:
        self._conn.execute(
            """
            INSERT INTO documents (collection, doc_id, data) VALUES (?, ?, ?)
            ON CONFLICT (collection, doc_id) DO UPDATE SET data = excluded.data
            """,
            (ref.collection, ref.id, json.dumps(document)),
        )


def _select_document(conn: sqlite3.Connection, collection: str, doc_id: str) -> Document | None:
    row = conn.execute(
        "SELECT data FROM documents WHERE collection = ? AND doc_id = ?",
        (collection, doc_id),
    ).fetchone()
    if row is None:
        return None
    return json.loads(row[0])


class SQLiteDocumentStore(DocumentStore):
    """
    Document store backed by a single SQLite table of JSON documents.

    All access to the connection is serialized by a lock and runs in a worker
    thread, so coroutines awaiting the store never block the event loop.
    Transactions use BEGIN IMMEDIATE, which makes a read-modify-write atomic
    with respect to every other writer.
    """

    def __init__(self, db_path: str = "job_board.db") -> None:
        self.db_path = db_path
        self._lock = threading.Lock()
        try:
            # Autocommit mode: transactions are opened explicitly with BEGIN.
            self._conn: sqlite3.Connection | None = sqlite3.connect(
                db_path, check_same_thread=False, isolation_level=None
            )
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot open store at {db_path}: {e}", "connect") from e
        self.init_db()

    @property
    def connection(self) -> sqlite3.Connection:
        """Return the persistent database connection."""
        if self._conn is None:
            raise StoreUnavailableError("Store connection is closed")
        return self._conn

    def init_db(self) -> None:
        """Create the documents table if it doesn't exist."""
        with self._lock:
            self.connection.execute("""
                CREATE TABLE IF NOT EXISTS documents (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    collection TEXT NOT NULL,
                    doc_id TEXT NOT NULL,
                    data TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE (collection, doc_id)
                )
            """)
        logger.info(f"Document store initialized at {self.db_path}")

    async def _run(self, operation: str, doc_id: str | None, func: Callable[[], T]) -> T:
        def locked() -> T:
            with self._lock:
                return func()

        try:
            return await asyncio.to_thread(locked)
        except StoreUnavailableError as e:
            e.operation = e.operation or operation
            e.document_id = e.document_id or doc_id
            raise
        except sqlite3.Error as e:
            logger.error(f"Store failure during {operation} (id={doc_id}): {e}")
            raise StoreUnavailableError(f"Store failure: {e}", operation, doc_id) from e

    async def get(self, collection: str, doc_id: str) -> Document | None:
        return await self._run(
            "get", doc_id, lambda: _select_document(self.connection, collection, doc_id)
        )

    async def insert(self, collection: str, document: Document) -> str:
        doc_id = uuid.uuid4().hex

        def _insert() -> None:
            self.connection.execute(
                "INSERT INTO documents (collection, doc_id, data) VALUES (?, ?, ?)",
                (collection, doc_id, json.dumps(document)),
            )

        await self._run("insert", doc_id, _insert)
        logger.debug(f"Inserted document {collection}/{doc_id}")
        return doc_id

    async def replace(self, collection: str, doc_id: str, document: Document) -> None:
        def _replace() -> None:
            cursor = self.connection.execute(
                "UPDATE documents SET data = ? WHERE collection = ? AND doc_id = ?",
                (json.dumps(document), collection, doc_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Document does not exist", "replace", doc_id)

        await self._run("replace", doc_id, _replace)

    async def query(
        self,
        collection: str,
        filters: Mapping[str, Any],
        limit: int,
        start_after: str | None = None,
    ) -> list[tuple[str, Document]]:
        if limit <= 0:
            raise ValidationError(f"query limit should be positive, got {limit}", "query")

        clauses = ["collection = ?"]
        params: list[Any] = [collection]
        for field, value in filters.items():
            if isinstance(value, Enum):
                value = value.value
            clauses.append("json_extract(data, ?) = ?")
            params.extend([f'$."{field}"', value])
        if start_after is not None:
            clauses.append(
                "seq > (SELECT seq FROM documents WHERE collection = ? AND doc_id = ?)"
            )
            params.extend([collection, start_after])
        params.append(limit)

        sql = (
            f"SELECT doc_id, data FROM documents WHERE {' AND '.join(clauses)} "
            "ORDER BY seq LIMIT ?"
        )

        def _query() -> list[tuple[str, Document]]:
            rows = self.connection.execute(sql, params).fetchall()
            return [(row[0], json.loads(row[1])) for row in rows]

        return await self._run("query", None, _query)

    async def run_transaction(
        self,
        fn: Callable[[Transaction], T],
        operation: str = "transaction",
        document_id: str | None = None,
    ) -> T:
        def _transact() -> T:
            conn = self.connection
            conn.execute("BEGIN IMMEDIATE")
            try:
                result = fn(_SQLiteTransaction(conn))
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            # A failed COMMIT (e.g. SQLITE_BUSY) leaves the transaction open
            try:
                conn.execute("COMMIT")
            except BaseException:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            return result

        return await self._run(operation, document_id, _transact)

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None
