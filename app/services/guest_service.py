"""
Guest, table and relationship access on top of the record store
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from app.core.exceptions import NotFoundError, StoreError
from app.schemas.guest import GuestCreate, GuestResponse, GuestUpdate, RsvpStats
from app.schemas.table import (
    RelationshipCreate,
    RelationshipResponse,
    TableCreate,
    TableResponse,
    TableUpdate,
)
from app.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class GuestService:
    """Owner-scoped guest operations"""

    def __init__(self, store: RecordStore):
        self.store = store

    def list_guests(self, user_id: str) -> List[GuestResponse]:
        rows = self.store.select("guests", {"user_id": user_id}, order_by="name")
        return [GuestResponse(**self._clean(row)) for row in rows]

    @staticmethod
    def _clean(row: Dict) -> Dict:
        data = {k: v for k, v in row.items() if k in GuestResponse.model_fields}
        data["id"] = str(data["id"])
        data["email"] = data.get("email") or ""
        return data

    def get_guest(self, user_id: str, guest_id: str) -> GuestResponse:
        rows = self.store.select("guests", {"user_id": user_id, "id": guest_id})
        if not rows:
            raise NotFoundError("Guest")
        return GuestResponse(**self._clean(rows[0]))

    def create_guest(self, user_id: str, guest: GuestCreate) -> GuestResponse:
        result = self.store.insert("guests", [{**guest.model_dump(), "user_id": user_id}])
        if result.error:
            raise StoreError(result.error)
        return GuestResponse(**self._clean(result.data[0]))

    def import_guests(self, user_id: str, rows: List[Dict]) -> int:
        if not rows:
            return 0
        result = self.store.insert("guests", [{**row, "user_id": user_id} for row in rows])
        if result.error:
            raise StoreError(result.error)
        logger.info(f"Imported {len(rows)} guests for user {user_id}")
        return len(rows)

    def update_guest(self, user_id: str, guest_id: str, update: GuestUpdate) -> GuestResponse:
        values = update.model_dump(exclude_unset=True)
        if values:
            values["updated_at"] = datetime.now(timezone.utc)
            result = self.store.update("guests", {"user_id": user_id, "id": guest_id}, values)
            if result.error:
                raise StoreError(result.error)
            if not result.data:
                raise NotFoundError("Guest")
        return self.get_guest(user_id, guest_id)

    def delete_guest(self, user_id: str, guest_id: str) -> None:
        result = self.store.delete("guests", {"user_id": user_id, "id": guest_id})
        if result.error:
            raise StoreError(result.error)
        if not result.data:
            raise NotFoundError("Guest")

    def assign_table(self, user_id: str, guest_id: str, table_name: Optional[str]) -> GuestResponse:
        return self.update_guest(user_id, guest_id, GuestUpdate(table_assignment=table_name))

    def rsvp_stats(self, user_id: str) -> RsvpStats:
        result = self.store.rpc("rsvp_stats", {"user_id": user_id})
        if result.error:
            raise StoreError(result.error)
        return RsvpStats(**result.data)

    @staticmethod
    def _table_response(table: Dict, guests: Optional[List[str]] = None) -> TableResponse:
        return TableResponse(
            id=str(table["id"]),
            name=table["name"],
            shape=table["shape"],
            capacity=table["capacity"],
            position_x=table.get("position_x") or 0,
            position_y=table.get("position_y") or 0,
            guests=guests or [],
            user_id=table.get("user_id"),
        )

    @staticmethod
    def _relationship_response(row: Dict) -> RelationshipResponse:
        return RelationshipResponse(
            id=str(row["id"]),
            guest_id=str(row["guest_id"]),
            related_guest_id=str(row["related_guest_id"]),
            relationship_type=row["relationship_type"],
            user_id=row.get("user_id"),
        )

    def get_tables(self, user_id: str) -> List[TableResponse]:
        """Tables with the ids of the guests assigned to each, by table name"""
        tables = self.store.select("tables", {"user_id": user_id}, order_by="name")
        guests = self.store.select("guests", {"user_id": user_id})

        guests_by_table: Dict[str, List[str]] = {}
        for guest in guests:
            if guest.get("table_assignment"):
                guests_by_table.setdefault(guest["table_assignment"], []).append(str(guest["id"]))

        return [self._table_response(t, guests_by_table.get(t["name"])) for t in tables]

    def get_table(self, user_id: str, table_id: str) -> TableResponse:
        rows = self.store.select("tables", {"user_id": user_id, "id": table_id})
        if not rows:
            raise NotFoundError("Table")
        table = rows[0]
        seated = self.store.select("guests", {"user_id": user_id, "table_assignment": table["name"]})
        return self._table_response(table, [str(g["id"]) for g in seated])

    def create_table(self, user_id: str, table: TableCreate) -> TableResponse:
        result = self.store.insert("tables", [{**table.model_dump(), "user_id": user_id}])
        if result.error:
            raise StoreError(result.error)
        logger.info(f"Created table {table.name} for user {user_id}")
        return self._table_response(result.data[0])

    def update_table(self, user_id: str, table_id: str, update: TableUpdate) -> TableResponse:
        # Guests keep their table_assignment name when a table is renamed
        values = update.model_dump(exclude_unset=True)
        if values:
            result = self.store.update("tables", {"user_id": user_id, "id": table_id}, values)
            if result.error:
                raise StoreError(result.error)
            if not result.data:
                raise NotFoundError("Table")
        return self.get_table(user_id, table_id)

    def delete_table(self, user_id: str, table_id: str) -> None:
        result = self.store.delete("tables", {"user_id": user_id, "id": table_id})
        if result.error:
            raise StoreError(result.error)
        if not result.data:
            raise NotFoundError("Table")

    def list_relationships(self, user_id: str) -> List[RelationshipResponse]:
        rows = self.store.select("guest_relationships", {"user_id": user_id})
        return [self._relationship_response(r) for r in rows]

    def create_relationship(self, user_id: str, relationship: RelationshipCreate) -> RelationshipResponse:
        """Manually relate two of the user's guests; duplicate pairs are allowed"""
        if relationship.guest_id == relationship.related_guest_id:
            raise ValueError("A guest cannot be related to themselves")

        ids = {relationship.guest_id, relationship.related_guest_id}
        owned = self.store.select("guests", {"user_id": user_id, "id": list(ids)})
        if len(owned) != len(ids):
            raise NotFoundError("Guest")

        result = self.store.insert("guest_relationships", [{**relationship.model_dump(), "user_id": user_id}])
        if result.error:
            raise StoreError(result.error)
        return self._relationship_response(result.data[0])

    def delete_relationship(self, user_id: str, relationship_id: str) -> None:
        result = self.store.delete("guest_relationships", {"user_id": user_id, "id": relationship_id})
        if result.error:
            raise StoreError(result.error)
        if not result.data:
            raise NotFoundError("Relationship")
