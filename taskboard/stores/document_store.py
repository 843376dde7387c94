"""
JSON-file document collections.

Each collection is one JSON file holding {"documents": [...]}. Writes are
read-modify-write cycles under a named file lock and land via an atomic
temp-file move, so a single-collection write is all-or-nothing. There are
no transactions across collections.
"""

from __future__ import annotations

import json
import shutil
import tempfile
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from ..core.locks import acquire_lock, lock_key_collection
from ..utils.exceptions import Conflict, StoreError
from ..utils.logger import get_logger

logger = get_logger(__name__)

Document = Dict[str, Any]
Matcher = Callable[[Document], bool]
# Returns the rewritten document, or None to leave it untouched
Rewriter = Callable[[Document], Optional[Document]]


class DuplicateKeyError(Conflict):
    """A unique field already holds the value being written"""

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"Duplicate value for unique field {field!r}")


def _atomic_write(path: Path, payload: Dict) -> None:
    """Atomically write JSON to the target path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w", dir=str(path.parent), delete=False, encoding="utf-8"
    ) as tf:
        json.dump(payload, tf, indent=2, ensure_ascii=False, default=str)
        temp_path = Path(tf.name)
    try:
        shutil.move(str(temp_path), str(path))
    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise


class JsonCollection:
    """A flat collection of JSON documents keyed by `id`."""

    def __init__(self, path: Path, locks_dir: Optional[Path] = None):
        self.path = Path(path)
        self.name = self.path.stem
        self.locks_dir = Path(locks_dir) if locks_dir else self.path.parent / "locks"
        self._lock_key = lock_key_collection(self.name)

    # ------------------------------------------------------------------ io

    def _load(self) -> List[Document]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Failed to read collection", collection=self.name, error=str(e))
            raise StoreError(f"Failed to read {self.name} store")
        documents = raw.get("documents") if isinstance(raw, dict) else None
        if not isinstance(documents, list):
            logger.error("Malformed collection file", collection=self.name)
            raise StoreError(f"Failed to read {self.name} store")
        return documents

    def _save(self, documents: List[Document]) -> None:
        try:
            _atomic_write(self.path, {"documents": documents})
        except OSError as e:
            logger.error("Failed to write collection", collection=self.name, error=str(e))
            raise StoreError(f"Failed to write {self.name} store")

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with ExitStack() as stack:
            try:
                stack.enter_context(acquire_lock(self.locks_dir, self._lock_key))
            except OSError as e:
                # TimeoutError included
                logger.error("Failed to lock collection", collection=self.name, error=str(e))
                raise StoreError(f"Failed to lock {self.name} store")
            yield

    # --------------------------------------------------------------- reads

    def all(self) -> List[Document]:
        return self._load()

    def find(self, match: Optional[Matcher] = None) -> List[Document]:
        documents = self._load()
        if match is None:
            return documents
        return [doc for doc in documents if match(doc)]

    def find_one(self, match: Matcher) -> Optional[Document]:
        return next((doc for doc in self._load() if match(doc)), None)

    def get(self, doc_id: str) -> Optional[Document]:
        return self.find_one(lambda doc: doc.get("id") == doc_id)

    # -------------------------------------------------------------- writes

    @staticmethod
    def _check_unique(
        documents: List[Document], candidate: Document, unique: Iterable[str]
    ) -> None:
        for field in unique:
            value = candidate.get(field)
            for doc in documents:
                if doc.get("id") != candidate.get("id") and doc.get(field) == value:
                    raise DuplicateKeyError(field, value)

    def insert_one(self, document: Document, unique: Iterable[str] = ()) -> Document:
        with self._locked():
            documents = self._load()
            self._check_unique(documents, document, unique)
            documents.append(document)
            self._save(documents)
        return document

    def update_one(
        self, doc_id: str, changes: Document, unique: Iterable[str] = ()
    ) -> Optional[Document]:
        """Merge `changes` into the document; None if it does not exist."""
        with self._locked():
            documents = self._load()
            for index, doc in enumerate(documents):
                if doc.get("id") == doc_id:
                    updated = {**doc, **changes, "id": doc_id}
                    self._check_unique(documents, updated, unique)
                    documents[index] = updated
                    self._save(documents)
                    return updated
        return None

    def update_many(self, rewrite: Rewriter) -> int:
        """Apply `rewrite` to every document in one write; returns modified count."""
        modified = 0
        with self._locked():
            documents = self._load()
            for index, doc in enumerate(documents):
                updated = rewrite(dict(doc))
                if updated is not None and updated != doc:
                    updated["id"] = doc.get("id")
                    documents[index] = updated
                    modified += 1
            if modified:
                self._save(documents)
        return modified

    def delete_one(self, doc_id: str) -> Optional[Document]:
        with self._locked():
            documents = self._load()
            for index, doc in enumerate(documents):
                if doc.get("id") == doc_id:
                    del documents[index]
                    self._save(documents)
                    return doc
        return None

    def delete_many(self, match: Matcher) -> int:
        with self._locked():
            documents = self._load()
            kept = [doc for doc in documents if not match(doc)]
            deleted = len(documents) - len(kept)
            if deleted:
                self._save(kept)
        return deleted
