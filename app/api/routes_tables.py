"""
Table planning API routes
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.api.deps import get_current_user_id, get_record_store
from app.schemas.table import RelationshipCreate, TableCreate, TableUpdate
from app.services.export_service import CSV_MEDIA_TYPE, csv_filename, table_assignment_rows, to_csv
from app.services.guest_service import GuestService
from app.services.record_store import RecordStore
from app.utils.responses import error_response, success_response

router = APIRouter()

@router.get("/tables")
async def list_tables(
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    """Tables with the ids of their assigned guests"""
    tables = GuestService(store).get_tables(user_id)
    return success_response(message="Tables retrieved", data=tables)

@router.get("/tables/assignments.csv")
async def export_table_assignments(
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    service = GuestService(store)
    tables = [t.model_dump() for t in service.get_tables(user_id)]
    guests = [g.model_dump() for g in service.list_guests(user_id)]
    rows = table_assignment_rows(tables, guests)
    if not rows:
        return error_response(message="No table assignments to export", status_code=404)

    return Response(
        content=to_csv(rows),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={csv_filename('wedding_table_assignments')}"}
    )

@router.post("/tables")
async def create_table(
    table: TableCreate,
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    created = GuestService(store).create_table(user_id, table)
    return success_response(message="Table created", data=created, status_code=201)

@router.put("/tables/{table_id}")
async def update_table(
    table_id: str,
    update: TableUpdate,
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    """Rename, reshape, resize or move a table"""
    updated = GuestService(store).update_table(user_id, table_id, update)
    return success_response(message="Table updated", data=updated)

@router.delete("/tables/{table_id}")
async def delete_table(
    table_id: str,
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    GuestService(store).delete_table(user_id, table_id)
    return success_response(message="Table deleted")

@router.get("/relationships")
async def list_relationships(
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    relationships = GuestService(store).list_relationships(user_id)
    return success_response(message="Relationships retrieved", data=relationships)

@router.post("/relationships")
async def create_relationship(
    relationship: RelationshipCreate,
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    created = GuestService(store).create_relationship(user_id, relationship)
    return success_response(message="Relationship created", data=created, status_code=201)

@router.delete("/relationships/{relationship_id}")
async def delete_relationship(
    relationship_id: str,
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    GuestService(store).delete_relationship(user_id, relationship_id)
    return success_response(message="Relationship deleted")
