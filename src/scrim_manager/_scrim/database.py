# Area: Scrim
"""
scrim_manager._scrim.database — Transactional Document Store
============================================================

SQLite-backed document store. Documents are JSON objects keyed by
(collection, doc_id). ``transaction(fn)`` runs ``fn`` against a
Transaction handle that records the version of every document it
reads and buffers every write; the commit re-checks those versions
under a write lock and applies the writes atomically. If another
commit got there first, ``fn`` is re-run with fresh reads.
"""

import json
import logging
import random
import sqlite3
import time
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar, Union

from ..errors import TransactionConflictError, TransientStoreError

logger = logging.getLogger("scrim_manager.scrim.database")

# Path to schema file
SCHEMA_PATH = Path(__file__).parent / "schema.sql"

DEFAULT_MAX_ATTEMPTS = 5

# Backoff between attempts: uniform(0, min(cap, base * 2**attempt)) seconds
BACKOFF_BASE_S = 0.005
BACKOFF_CAP_S = 0.1

T = TypeVar("T")
DocKey = Tuple[str, str]


def get_connection(db_path: str = "scrims.db", timeout: float = 30.0) -> sqlite3.Connection:
    """
    Get a database connection.

    Args:
        db_path: Path to the SQLite database file
        timeout: Seconds to wait for a competing write lock

    Returns:
        SQLite connection with row factory set and explicit transactions
    """
    conn = sqlite3.connect(db_path, timeout=timeout, isolation_level=None)
    conn.row_factory = sqlite3.Row
    return conn


def init_database(db_path: str = "scrims.db") -> None:
    """
    Initialize the database with schema.

    Args:
        db_path: Path to the SQLite database file
    """
    conn = get_connection(db_path)
    try:
        with open(SCHEMA_PATH, "r") as f:
            schema = f.read()
        conn.executescript(schema)
        logger.info(f"Database initialized at {db_path}")
    finally:
        conn.close()


def new_document_id() -> str:
    return uuid.uuid4().hex


class Transaction:
    """
    Read/write handle passed to a transaction function.

    Reads go straight to the database and remember the version seen.
    Writes are buffered and only become visible on commit. A document
    written earlier in the same transaction reads back as written.
    """

    def __init__(self, store: "DocumentStore"):
        self._store = store
        self._reads: Dict[DocKey, Optional[int]] = {}
        self._writes: Dict[DocKey, Optional[Dict[str, Any]]] = {}

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """
        Read a document.

        Returns:
            A copy of the document, or None if it does not exist
        """
        key = (collection, doc_id)
        if key in self._writes:
            data = self._writes[key]
            return json.loads(json.dumps(data)) if data is not None else None
        version, data = self._store._read(collection, doc_id)
        self._reads.setdefault(key, version)
        return data

    def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self._writes[(collection, doc_id)] = data

    def add(self, collection: str, data: Dict[str, Any], doc_id: Optional[str] = None) -> str:
        """Write a new document under a generated id."""
        doc_id = doc_id or new_document_id()
        self._writes[(collection, doc_id)] = data
        return doc_id

    def delete(self, collection: str, doc_id: str) -> None:
        self._writes[(collection, doc_id)] = None

    def commit(self) -> None:
        """
        Apply buffered writes if nothing read has changed since.

        Raises:
            TransactionConflictError: If a read document was modified or
                deleted by another commit
            sqlite3.OperationalError: If the write lock could not be taken
        """
        if not self._writes:
            return
        conn = self._store._get_conn()
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                for (collection, doc_id), seen in self._reads.items():
                    row = conn.execute(
                        "SELECT version FROM documents WHERE collection = ? AND doc_id = ?",
                        (collection, doc_id),
                    ).fetchone()
                    current = row["version"] if row else None
                    if current != seen:
                        raise TransactionConflictError(collection, doc_id)

                conn.execute("UPDATE store_clock SET tick = tick + 1 WHERE id = 1")
                tick = conn.execute("SELECT tick FROM store_clock WHERE id = 1").fetchone()["tick"]

                for (collection, doc_id), data in self._writes.items():
                    if data is None:
                        conn.execute(
                            "DELETE FROM documents WHERE collection = ? AND doc_id = ?",
                            (collection, doc_id),
                        )
                    else:
                        conn.execute(
                            """
                            INSERT INTO documents (collection, doc_id, body, version)
                            VALUES (?, ?, ?, ?)
                            ON CONFLICT (collection, doc_id) DO UPDATE SET
                                body = excluded.body,
                                version = excluded.version,
                                updated_at = CURRENT_TIMESTAMP
                            """,
                            (collection, doc_id, _dumps(data), tick),
                        )
                conn.execute("COMMIT")
            except BaseException:
                conn.execute("ROLLBACK")
                raise
        finally:
            conn.close()


class DocumentStore:
    """
    Transactional document store over one SQLite file.

    Attributes:
        db_path: Path to the SQLite database file
        max_attempts: Commit attempts before giving up on a transaction
    """

    def __init__(self, db_path: str = "scrims.db", max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self.db_path = db_path
        self.max_attempts = max_attempts

    def _get_conn(self) -> sqlite3.Connection:
        """Get a database connection."""
        return get_connection(self.db_path)

    def _read(self, collection: str, doc_id: str) -> Tuple[Optional[int], Optional[Dict[str, Any]]]:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT version, body FROM documents WHERE collection = ? AND doc_id = ?",
                (collection, doc_id),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            return None, None
        return row["version"], json.loads(row["body"])

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a document by id.

        Returns:
            Document dict or None if not found
        """
        return self._read(collection, doc_id)[1]

    def list(self, collection: str) -> List[Tuple[str, Dict[str, Any]]]:
        """
        Get every document of a collection, oldest first.

        Returns:
            List of (doc_id, document) pairs
        """
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT doc_id, body FROM documents WHERE collection = ? "
                "ORDER BY created_at, rowid",
                (collection,),
            ).fetchall()
        finally:
            conn.close()
        return [(row["doc_id"], json.loads(row["body"])) for row in rows]

    def put(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Write a document unconditionally."""
        def write(tx: Transaction) -> None:
            tx.set(collection, doc_id, data)
        self.transaction(write)

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Write a new document and return its generated id."""
        return self.transaction(lambda tx: tx.add(collection, data))

    def delete(self, collection: str, doc_id: str) -> bool:
        """
        Delete a document.

        Returns:
            True if the document existed
        """
        def remove(tx: Transaction) -> bool:
            if tx.get(collection, doc_id) is None:
                return False
            tx.delete(collection, doc_id)
            return True
        return self.transaction(remove)

    def transaction(self, fn: Callable[[Transaction], T],
                    max_attempts: Optional[int] = None) -> T:
        """
        Run ``fn`` as one atomic read-modify-write.

        ``fn`` must derive everything it writes from what it reads
        through the handle; it may be called more than once. Exceptions
        raised by ``fn`` abort the transaction without writing and
        propagate unchanged.

        Args:
            fn: Transaction function
            max_attempts: Override of the store's retry budget

        Returns:
            Whatever ``fn`` returned on the attempt that committed

        Raises:
            TransientStoreError: If every attempt hit a conflict
        """
        attempts = max_attempts or self.max_attempts
        for attempt in range(1, attempts + 1):
            tx = Transaction(self)
            result = fn(tx)
            try:
                tx.commit()
                return result
            except TransactionConflictError as e:
                logger.info(f"Transaction conflict on attempt {attempt}/{attempts}: {e}")
            except sqlite3.OperationalError as e:
                logger.warning(f"Store busy on attempt {attempt}/{attempts}: {e}")
            if attempt < attempts:
                time.sleep(random.uniform(0, min(BACKOFF_CAP_S, BACKOFF_BASE_S * 2 ** attempt)))
        raise TransientStoreError(
            f"The scrim was busy; gave up after {attempts} attempts. Please retry."
        )


class BaseRepository:
    """
    Base class for collection repositories.

    Accepts either a DocumentStore or a database path.
    """

    collection = ""

    def __init__(self, store: Union[DocumentStore, str] = "scrims.db"):
        """
        Initialize repository.

        Args:
            store: DocumentStore instance or path to the SQLite file
        """
        self.store = store if isinstance(store, DocumentStore) else DocumentStore(store)

    def _get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        return self.store.get(self.collection, doc_id)

    def _list(self) -> List[Tuple[str, Dict[str, Any]]]:
        return self.store.list(self.collection)


def _dumps(data: Dict[str, Any]) -> str:
    return json.dumps(data, ensure_ascii=False, default=str)
