"""Key-value persistence for the menu aggregates.

Every write is atomic across all the names it touches: either every value
lands or none does.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Iterable, Mapping, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DbSession

from ..db.models import OptionRecord
from ..exceptions import PersistenceError

logger = logging.getLogger(__name__)


class OptionStore(Protocol):
    def read(self, names: Iterable[str]) -> dict[str, Any]:
        """Return the stored values for ``names``; absent names are omitted."""

    def write(self, values: Mapping[str, Any], *, delete: Iterable[str] = ()) -> None:
        """Store ``values`` and delete ``delete`` in one atomic step."""


class SqlOptionStore:
    def __init__(self, db: DbSession) -> None:
        self.db = db

    def read(self, names: Iterable[str]) -> dict[str, Any]:
        wanted = list(names)
        if not wanted:
            return {}
        try:
            records = self.db.execute(select(OptionRecord).where(OptionRecord.name.in_(wanted))).scalars().all()
        except SQLAlchemyError as exc:
            logger.exception("option_read_failed", extra={"data": {"names": wanted}})
            raise PersistenceError(f"Failed to read options: {exc}") from exc
        return {record.name: deepcopy(record.value) for record in records}

    def write(self, values: Mapping[str, Any], *, delete: Iterable[str] = ()) -> None:
        doomed = [name for name in delete if name not in values]
        try:
            with self.db.begin_nested():
                for name, value in values.items():
                    record = self.db.get(OptionRecord, name)
                    if record is None:
                        self.db.add(OptionRecord(name=name, value=deepcopy(value)))
                    else:
                        record.value = deepcopy(value)
                for name in doomed:
                    record = self.db.get(OptionRecord, name)
                    if record is not None:
                        self.db.delete(record)
            self.db.flush()
        except SQLAlchemyError as exc:
            logger.exception(
                "option_write_failed",
                extra={"data": {"names": sorted(values), "deleted": doomed}},
            )
            raise PersistenceError(f"Failed to write options: {exc}") from exc


class MemoryOptionStore:
    """Dict-backed store for tests and one-off compilation."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = deepcopy(dict(initial or {}))

    def read(self, names: Iterable[str]) -> dict[str, Any]:
        return {name: deepcopy(self._data[name]) for name in names if name in self._data}

    def write(self, values: Mapping[str, Any], *, delete: Iterable[str] = ()) -> None:
        staged = dict(self._data)
        for name in delete:
            staged.pop(name, None)
        for name, value in values.items():
            staged[name] = deepcopy(value)
        self._data = staged

    def snapshot(self) -> dict[str, Any]:
        return deepcopy(self._data)


__all__ = ["OptionStore", "SqlOptionStore", "MemoryOptionStore"]
