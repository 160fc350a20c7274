"""
Record store abstraction over SQLAlchemy, Firebase Firestore and memory.

All backends speak the same row-oriented contract: rows are plain dicts
keyed by column name and every row carries the owning ``user_id``.
Mutating calls report failure through ``StoreResult.error`` instead of
raising, reads raise ``StoreError``.
"""

from __future__ import annotations

import copy
import itertools
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import StoreError
from app.models import EmailLog, Guest, GuestRelationship, Table
from app.services.firebase_client import get_firestore_client

logger = logging.getLogger(__name__)

MODELS = {
    "guests": Guest,
    "tables": Table,
    "guest_relationships": GuestRelationship,
    "email_logs": EmailLog,
}

Filters = Dict[str, Any]
Row = Dict[str, Any]


@dataclass
class StoreResult:
    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _matches(row: Row, filters: Optional[Filters]) -> bool:
    for key, expected in (filters or {}).items():
        value = row.get(key)
        if isinstance(expected, (list, tuple, set, frozenset)):
            if value not in expected:
                return False
        elif value != expected:
            return False
    return True


def _sort_rows(rows: List[Row], order_by: Optional[str]) -> List[Row]:
    if not order_by:
        return rows
    descending = order_by.startswith("-")
    key = order_by.lstrip("-")
    return sorted(rows, key=lambda r: (r.get(key) is None, r.get(key)), reverse=descending)


def rsvp_stats_procedure(store: "RecordStore", user_id: str) -> Dict[str, int]:
    """Count a user's guests per RSVP status"""
    stats = {"attending": 0, "declined": 0, "pending": 0, "total": 0}
    for guest in store.select("guests", {"user_id": user_id}):
        stats["total"] += 1
        status = guest.get("rsvp_status")
        if status == "confirmed":
            stats["attending"] += 1
        elif status in ("declined", "pending"):
            stats[status] += 1
    return stats


def count_records_procedure(store: "RecordStore", user_id: str) -> Dict[str, int]:
    """Count a user's rows in every known table"""
    return {table: len(store.select(table, {"user_id": user_id})) for table in MODELS}


class RecordStore:
    """Generic record store contract"""

    name = "abstract"

    def __init__(self):
        self.procedures: Dict[str, Callable[..., Any]] = {
            "rsvp_stats": rsvp_stats_procedure,
            "count_records": count_records_procedure,
        }

    def select(self, table: str, filters: Optional[Filters] = None, order_by: Optional[str] = None) -> List[Row]:
        raise NotImplementedError

    def insert(self, table: str, rows: List[Row]) -> StoreResult:
        raise NotImplementedError

    def update(self, table: str, filters: Filters, values: Row) -> StoreResult:
        raise NotImplementedError

    def delete(self, table: str, filters: Filters) -> StoreResult:
        raise NotImplementedError

    def rpc(self, name: str, args: Optional[Dict[str, Any]] = None) -> StoreResult:
        procedure = self.procedures.get(name)
        if procedure is None:
            return StoreResult(error=f"Unknown procedure: {name}")
        try:
            return StoreResult(data=procedure(self, **(args or {})))
        except (StoreError, TypeError) as e:
            logger.error(f"Procedure {name} failed: {e}")
            return StoreResult(error=str(e))


# -------- SQLAlchemy --------

class SqlRecordStore(RecordStore):
    name = "sql"

    def __init__(self, db: Session):
        super().__init__()
        self.db = db

    @staticmethod
    def _model(table: str):
        try:
            return MODELS[table]
        except KeyError:
            raise StoreError(f"Unknown table: {table}")

    @staticmethod
    def _to_row(obj) -> Row:
        return {column.name: getattr(obj, column.name) for column in obj.__table__.columns}

    def _query(self, table: str, filters: Optional[Filters]):
        model = self._model(table)
        query = self.db.query(model)
        for key, value in (filters or {}).items():
            column = getattr(model, key)
            if isinstance(value, (list, tuple, set, frozenset)):
                query = query.filter(column.in_(list(value)))
            elif value is None:
                query = query.filter(column.is_(None))
            else:
                query = query.filter(column == value)
        return model, query

    def select(self, table, filters=None, order_by=None):
        try:
            model, query = self._query(table, filters)
            if order_by:
                column = getattr(model, order_by.lstrip("-"))
                query = query.order_by(column.desc() if order_by.startswith("-") else column)
            return [self._to_row(obj) for obj in query.all()]
        except (SQLAlchemyError, AttributeError) as e:
            logger.error(f"Error selecting from {table}: {e}")
            raise StoreError(f"Failed to load {table}")

    def insert(self, table, rows):
        try:
            model = self._model(table)
            objects = [model(**row) for row in rows]
            self.db.add_all(objects)
            self.db.commit()
            return StoreResult(data=[self._to_row(obj) for obj in objects])
        except (SQLAlchemyError, TypeError, StoreError) as e:
            self.db.rollback()
            logger.error(f"Error inserting into {table}: {e}")
            return StoreResult(error=f"Failed to insert into {table}: {e}")

    def update(self, table, filters, values):
        try:
            _, query = self._query(table, filters)
            count = query.update(values, synchronize_session=False)
            self.db.commit()
            return StoreResult(data=count)
        except (SQLAlchemyError, AttributeError, StoreError) as e:
            self.db.rollback()
            logger.error(f"Error updating {table}: {e}")
            return StoreResult(error=f"Failed to update {table}: {e}")

    def delete(self, table, filters):
        try:
            _, query = self._query(table, filters)
            count = query.delete(synchronize_session=False)
            self.db.commit()
            return StoreResult(data=count)
        except (SQLAlchemyError, AttributeError, StoreError) as e:
            self.db.rollback()
            logger.error(f"Error deleting from {table}: {e}")
            return StoreResult(error=f"Failed to delete from {table}: {e}")


# -------- Firestore --------

class FirestoreRecordStore(RecordStore):
    """Top-level collection per table, documents carry user_id.

    Firestore accepts at most ``IN_FILTER_LIMIT`` values in one ``in``
    filter, so longer lists are queried in slices and the documents merged.
    """

    name = "firestore"

    IN_FILTER_LIMIT = 30

    def __init__(self, client=None):
        super().__init__()
        self.fs = client or get_firestore_client()
        if self.fs is None:
            raise StoreError("Firebase is not enabled")

    def _split_filters(self, filters: Optional[Filters]) -> Iterator[Filters]:
        options = []
        for key, value in (filters or {}).items():
            if isinstance(value, (list, tuple, set, frozenset)):
                values = list(dict.fromkeys(value))
                if not values:
                    # An empty "in" list matches nothing
                    return
                limit = self.IN_FILTER_LIMIT
                options.append([(key, values[i:i + limit]) for i in range(0, len(values), limit)])
            else:
                options.append([(key, value)])
        for combination in itertools.product(*options):
            yield dict(combination)

    def _query(self, table: str, filters: Filters):
        query = self.fs.collection(table)
        for key, value in filters.items():
            if isinstance(value, list):
                query = query.where(key, "in", value)
            else:
                query = query.where(key, "==", value)
        return query

    def _documents(self, table: str, filters: Optional[Filters]) -> list:
        documents = {}
        for part in self._split_filters(filters):
            for doc in self._query(table, part).get():
                documents.setdefault(doc.id, doc)
        return list(documents.values())

    def select(self, table, filters=None, order_by=None):
        try:
            results: List[Row] = []
            for doc in self._documents(table, filters):
                item = doc.to_dict()
                item["id"] = doc.id
                results.append(item)
        except Exception as e:
            logger.error(f"Error selecting from Firestore {table}: {e}")
            raise StoreError(f"Failed to load {table}")
        return _sort_rows(results, order_by)

    def insert(self, table, rows):
        try:
            batch = self.fs.batch()
            written: List[Row] = []
            for row in rows:
                data = dict(row)
                doc_id = str(data.pop("id", None) or uuid.uuid4())
                data.setdefault("created_at", datetime.now(timezone.utc).isoformat())
                batch.set(self.fs.collection(table).document(doc_id), data)
                written.append({"id": doc_id, **data})
            batch.commit()
            return StoreResult(data=written)
        except Exception as e:
            logger.error(f"Error inserting into Firestore {table}: {e}")
            return StoreResult(error=f"Failed to insert into {table}: {e}")

    def update(self, table, filters, values):
        try:
            count = 0
            for doc in self._documents(table, filters):
                doc.reference.set(dict(values), merge=True)
                count += 1
            return StoreResult(data=count)
        except Exception as e:
            logger.error(f"Error updating Firestore {table}: {e}")
            return StoreResult(error=f"Failed to update {table}: {e}")

    def delete(self, table, filters):
        try:
            count = 0
            for doc in self._documents(table, filters):
                doc.reference.delete()
                count += 1
            return StoreResult(data=count)
        except Exception as e:
            logger.error(f"Error deleting from Firestore {table}: {e}")
            return StoreResult(error=f"Failed to delete from {table}: {e}")


# -------- Memory --------

class MemoryRecordStore(RecordStore):
    """Process-local store used for dev-mode mock data and tests"""

    name = "memory"

    def __init__(self, tables: Iterable[str] = MODELS):
        super().__init__()
        self.tables: Dict[str, List[Row]] = {table: [] for table in tables}

    def _rows(self, table: str) -> List[Row]:
        if table not in self.tables:
            raise StoreError(f"Unknown table: {table}")
        return self.tables[table]

    def select(self, table, filters=None, order_by=None):
        rows = [copy.deepcopy(r) for r in self._rows(table) if _matches(r, filters)]
        return _sort_rows(rows, order_by)

    def insert(self, table, rows):
        if table not in self.tables:
            return StoreResult(error=f"Unknown table: {table}")
        written = []
        for row in rows:
            data = dict(row)
            data.setdefault("id", str(uuid.uuid4()))
            written.append(data)
        self.tables[table].extend(written)
        return StoreResult(data=copy.deepcopy(written))

    def update(self, table, filters, values):
        if table not in self.tables:
            return StoreResult(error=f"Unknown table: {table}")
        count = 0
        for row in self.tables[table]:
            if _matches(row, filters):
                row.update(values)
                count += 1
        return StoreResult(data=count)

    def delete(self, table, filters):
        if table not in self.tables:
            return StoreResult(error=f"Unknown table: {table}")
        kept = [r for r in self.tables[table] if not _matches(r, filters)]
        count = len(self.tables[table]) - len(kept)
        self.tables[table] = kept
        return StoreResult(data=count)
