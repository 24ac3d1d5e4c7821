# This file implements the process-local store backed by a lock-protected dictionary.
# It exists for services that need no persistence across restarts, such as the users collection.
# Every operation holds the single lock for its full duration, reads included.
# An exception escaping while the lock is held poisons the store so it stops serving requests.

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable, Hashable, Iterator
from contextlib import contextmanager

from pydantic import BaseModel

from resource_api.stores.base import StoreCorruptedError
from resource_api.stores.resources import ResourceDefinition

LOGGER = logging.getLogger("resource_api.stores")


class InMemoryStore:
    """Dictionary of records keyed by id, guarded by one mutex."""

    backend_name = "memory"

    def __init__(
        self,
        definition: ResourceDefinition,
        *,
        id_factory: Callable[[], Hashable] | None = None,
    ) -> None:
        self.definition = definition
        self._id_factory = id_factory or definition.id_factory or itertools.count(1).__next__
        self._records: dict[Hashable, BaseModel] = {}
        self._lock = threading.Lock()
        self._poisoned = False

    @contextmanager
    def _locked(self) -> Iterator[dict[Hashable, BaseModel]]:
        with self._lock:
            if self._poisoned:
                raise StoreCorruptedError(
                    f"{self.definition.label} store is poisoned and cannot serve requests."
                )
            try:
                yield self._records
            except BaseException:
                self._poisoned = True
                LOGGER.critical(
                    "Invariant violation inside %s store; refusing further operations.",
                    self.definition.name,
                    exc_info=True,
                )
                raise

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    def can_serve(self) -> bool:
        return not self._poisoned

    def create(self, payload: BaseModel) -> BaseModel:
        with self._locked() as records:
            record_id = self._id_factory()
            if record_id in records:
                raise RuntimeError(f"Identifier collision for {self.definition.name}: {record_id!r}")
            record = self.definition.build_record(record_id, payload)
            records[record_id] = record
            return record

    def list(self) -> list[BaseModel]:
        with self._locked() as records:
            return list(records.values())

    def get(self, record_id: Hashable) -> BaseModel | None:
        with self._locked() as records:
            return records.get(record_id)

    def update(self, record_id: Hashable, payload: BaseModel) -> BaseModel | None:
        with self._locked() as records:
            if record_id not in records:
                return None
            record = self.definition.build_record(record_id, payload)
            records[record_id] = record
            return record

    def delete(self, record_id: Hashable) -> bool:
        with self._locked() as records:
            return records.pop(record_id, None) is not None

    def __len__(self) -> int:
        with self._locked() as records:
            return len(records)
