# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Process-wide metadata registry: schema identity -> metadata dict.
# Entries are dropped when the schema is garbage collected.


from typing import *
import logging
import threading
import weakref


logger = logging.getLogger(__name__)


class Registry:
    "Weak identity mapping from schemas to metadata, with a single write lock."

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._meta = weakref.WeakKeyDictionary()

    def add(self, schema: Any, meta: Dict[str, Any]) -> None:
        with self._lock:
            self._meta[schema] = dict(meta)
        logger.debug('registry add: %s %s', type(schema).__name__, sorted(meta.keys()))

    def get(self, schema: Any) -> Optional[Dict[str, Any]]:
        out = self._meta.get(schema)
        return None if out is None else dict(out)

    def has(self, schema: Any) -> bool:
        return schema in self._meta

    def remove(self, schema: Any) -> None:
        with self._lock:
            self._meta.pop(schema, None)

    def clear(self) -> None:
        with self._lock:
            self._meta.clear()

    def __len__(self) -> int:
        return len(self._meta)


GLOBAL_REGISTRY = Registry()
