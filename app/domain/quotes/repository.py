"""Quote repository - JSON document operations for stored quotes"""

import json
import logging
import os
import tempfile
from pathlib import Path
from threading import RLock
from typing import Callable, Optional, TypeVar, Union

from pydantic import ValidationError

from ...config import QUOTES_DATA_DIR, QUOTES_FILE_NAME
from ...errors import NotFoundError, StorageError
from .lifecycle import QuoteStatus
from .schemas import QuoteRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JsonDocumentStore:
    """
    A single JSON document holding a list of records, read and written in full.

    update() runs read-modify-write under a process-local lock and replaces the
    file atomically, so readers never see a half-written document. Writers in
    other processes are not coordinated: two processes updating the same file
    can still lose one of the updates.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = RLock()

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> Optional[list[dict]]:
        """Return the stored list, or None when the document does not exist yet"""
        with self._lock:
            return self._read_unlocked()

    def update(self, mutator: Callable[[list[dict]], T], create: bool = True) -> T:
        """
        Apply mutator to the stored list and write the result back.

        If mutator raises, nothing is written. With create=False a missing
        document raises NotFoundError instead of starting from an empty list.
        """
        with self._lock:
            docs = self._read_unlocked()
            if docs is None:
                if not create:
                    raise NotFoundError("Quotes database not found")
                docs = []
            result = mutator(docs)
            self._write_unlocked(docs)
            return result

    def _read_unlocked(self) -> Optional[list[dict]]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"❌ Failed to read {self.path}: {e}")
            raise StorageError("Failed to read quotes") from e

        if not isinstance(data, list):
            logger.error(f"❌ {self.path} does not contain a list of records")
            raise StorageError("Failed to read quotes")
        return data

    def _write_unlocked(self, docs: list[dict]) -> None:
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(docs, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"❌ Failed to write {self.path}: {e}")
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError("Failed to store quotes") from e


class QuoteRepository:
    """Repository for quote record operations"""

    def __init__(self, store: JsonDocumentStore):
        self.store = store

    @staticmethod
    def _to_record(doc: dict) -> QuoteRecord:
        try:
            return QuoteRecord.model_validate(doc)
        except ValidationError as e:
            logger.error(f"❌ Malformed quote record {doc.get('id', '?')}: {e}")
            raise StorageError("Stored quote record is malformed") from e

    def append(self, record: QuoteRecord) -> QuoteRecord:
        """Add a new record. Returns the record as stored (currency rounded to 2 dp)."""
        payload = record.model_dump(mode="json")

        def _append(docs: list[dict]) -> None:
            if any(doc.get("id") == record.id for doc in docs):
                raise StorageError(f"Quote id {record.id} already exists")
            docs.append(payload)

        self.store.update(_append)
        logger.info(f"💾 Stored quote {record.id}")
        return self._to_record(payload)

    def list_quotes(self) -> list[QuoteRecord]:
        """All records in insertion order"""
        docs = self.store.read() or []
        return [self._to_record(doc) for doc in docs]

    def find_by_id(self, quote_id: str) -> QuoteRecord:
        for doc in self.store.read() or []:
            if doc.get("id") == quote_id:
                return self._to_record(doc)
        raise NotFoundError("Quote not found")

    def update_status(self, quote_id: str, status: QuoteStatus) -> QuoteRecord:
        """Rewrite the status of one record, leaving every other field untouched"""

        def _update(docs: list[dict]) -> QuoteRecord:
            for doc in docs:
                if doc.get("id") == quote_id:
                    current = self._to_record(doc)
                    doc["status"] = status.value
                    return current.model_copy(update={"status": status})
            raise NotFoundError("Quote not found")

        return self.store.update(_update, create=False)


quote_store = JsonDocumentStore(Path(QUOTES_DATA_DIR) / QUOTES_FILE_NAME)


def get_quote_repository() -> QuoteRepository:
    """Dependency injection for QuoteRepository"""
    return QuoteRepository(quote_store)
