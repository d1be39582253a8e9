"""
Flat-file JSON "database".

Each collection lives in ``<data_dir>/<name>.json`` as a JSON array and is
read and overwritten as a whole. Read-modify-write cycles are serialized by a
lock inside one process; a second process writing the same files can still
lose updates (last writer wins).
"""
import json
import logging
import os
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

from errors import PersistenceError

logger = logging.getLogger("quantum_build")

COLLECTIONS = ("products", "users", "orders")


class JsonDatabase:
    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        self.lock = threading.RLock()

    def path(self, collection: str) -> str:
        return os.path.join(self.data_dir, f"{collection}.json")

    def read(self, collection: str) -> List[Dict[str, Any]]:
        """Whole collection, or [] when the file is missing or unreadable."""
        path = self.path(collection)
        if not os.path.exists(path):
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error reading %s: %s", path, e)
            return []
        if not isinstance(data, list):
            logger.error("Error reading %s: expected a JSON array", path)
            return []
        return data

    def write(self, collection: str, docs: List[Dict[str, Any]]) -> None:
        path = self.path(collection)
        tmp = path + ".tmp"
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(docs, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except (OSError, TypeError, ValueError) as e:
            logger.exception("Error writing %s", path)
            if os.path.exists(tmp):
                os.remove(tmp)
            raise PersistenceError(f"Failed to save {collection}") from e

    def create_document(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        with self.lock:
            docs = self.read(collection)
            docs.append(data)
            self.write(collection, docs)
        return data

    def replace_documents(self, collection: str, docs: List[Dict[str, Any]]) -> None:
        with self.lock:
            self.write(collection, docs)

    def update_document(self, collection: str, match: Callable[[Dict[str, Any]], bool], changes: Dict[str, Any], drop: Iterable[str] = ()) -> Optional[Dict[str, Any]]:
        """Apply ``changes`` (and remove ``drop`` keys) on the first matching document and save; returns it or None."""
        with self.lock:
            docs = self.read(collection)
            for doc in docs:
                if match(doc):
                    for key in drop:
                        doc.pop(key, None)
                    doc.update(changes)
                    self.write(collection, docs)
                    return doc
        return None

    def find_one(self, collection: str, match: Callable[[Dict[str, Any]], bool]) -> Optional[Dict[str, Any]]:
        for doc in self.read(collection):
            if match(doc):
                return doc
        return None

    def count(self, collection: str) -> int:
        return len(self.read(collection))
