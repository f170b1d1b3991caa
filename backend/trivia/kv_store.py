"""Key-value adapter over the ``kv_store`` table.

Every room, player and answer record lives here as a JSON value under a
string key. Writes are last-write-wins; there is no versioning.
"""

import copy
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from trivia.errors import StoreError
from trivia.models import KvEntry


def _escape_like(prefix: str) -> str:
    return prefix.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


class KeyValueStore:
    def __init__(self, db, logger=None):
        self._db = db
        self._logger = logger

    @property
    def session(self):
        return self._db.session

    def get(self, key: str) -> Optional[Any]:
        try:
            entry = self.session.get(KvEntry, key)
        except SQLAlchemyError as exc:
            self._fail('get', key, exc)
        # Copy so callers can mutate the result without touching session state
        return copy.deepcopy(entry.value) if entry else None

    def set(self, key: str, value: Any) -> None:
        self.set_many({key: value})

    def set_many(self, items: Dict[str, Any]) -> None:
        """Write all items in one transaction."""
        try:
            for key, value in items.items():
                self.session.merge(KvEntry(key=key, value=value))
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            self._fail('set', ','.join(items), exc)

    def get_by_prefix(self, prefix: str) -> List[Any]:
        try:
            rows = (
                self.session.query(KvEntry)
                .filter(KvEntry.key.like(_escape_like(prefix) + '%', escape='\\'))
                .order_by(KvEntry.key)
                .all()
            )
        except SQLAlchemyError as exc:
            self._fail('scan', prefix, exc)
        return [copy.deepcopy(row.value) for row in rows]

    def _fail(self, op: str, key: str, exc: Exception):
        if self._logger is not None:
            self._logger.exception(f"[kv] {op} failed key={key}")
        raise StoreError(f"Store {op} failed: {exc}") from exc
