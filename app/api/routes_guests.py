"""
Guest list API routes
"""

from typing import Optional
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from app.api.deps import get_current_user_id, get_dev_state, get_record_store
from app.schemas.common import PaginationParams
from app.schemas.guest import (
    GuestCreate,
    GuestFilter,
    GuestPage,
    GuestUpdate,
    ReminderRequest,
    TableAssignmentRequest,
)
from app.services.dev_state import DevStateStore
from app.services.export_service import (
    CSV_MEDIA_TYPE,
    XLSX_MEDIA_TYPE,
    ExcelService,
    csv_filename,
    guest_export_rows,
    to_csv,
)
from app.services.guest_filter import GuestFilterEngine
from app.services.guest_service import GuestService
from app.services.record_store import RecordStore
from app.services.reminder_service import ReminderService
from app.utils.responses import error_response, success_response

router = APIRouter()

@router.get("")
async def list_guests(
    search: str = "",
    filter: Optional[GuestFilter] = None,
    pagination: PaginationParams = Depends(),
    store: RecordStore = Depends(get_record_store),
    dev_state: DevStateStore = Depends(get_dev_state),
    user_id: str = Depends(get_current_user_id)
):
    """Search, filter and paginate the user's guests"""
    await dev_state.simulate_network_delay()
    guests = GuestService(store).list_guests(user_id)
    filtered = GuestFilterEngine.filter(guests, search, filter)
    result = GuestFilterEngine.paginate(filtered, pagination.page, pagination.per_page)

    return success_response(
        message="Guests retrieved",
        data=GuestPage(
            items=result.items,
            page=result.page,
            per_page=result.per_page,
            total_pages=result.total_pages,
            total_items=result.total_items,
            search=search,
            filter=filter,
        )
    )

@router.post("")
async def create_guest(
    guest: GuestCreate,
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    created = GuestService(store).create_guest(user_id, guest)
    return success_response(message="Guest created", data=created, status_code=201)

@router.get("/stats")
async def rsvp_stats(
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    return success_response(message="RSVP stats retrieved", data=GuestService(store).rsvp_stats(user_id))

@router.get("/export.csv")
async def export_guests_csv(
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    guests = [g.model_dump() for g in GuestService(store).list_guests(user_id)]
    if not guests:
        return error_response(message="No guests to export", status_code=404)

    return Response(
        content=to_csv(guest_export_rows(guests)),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={csv_filename('guest_list')}"}
    )

@router.get("/export.xlsx")
async def export_guests_excel(
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    guests = [g.model_dump() for g in GuestService(store).list_guests(user_id)]
    return Response(
        content=ExcelService.export_guest_list(guests),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=guest_list.xlsx"}
    )

@router.post("/import")
async def import_guests(
    file: UploadFile = File(...),
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    """Import guests from an Excel sheet"""
    if not file.filename or not file.filename.endswith((".xlsx", ".xls")):
        return error_response(
            message="Invalid file format. Please upload an Excel file (.xlsx or .xls)",
            status_code=400
        )

    rows, errors = ExcelService.import_guest_list(await file.read())
    if errors:
        return error_response(
            message="Excel file validation failed",
            details=errors,
            status_code=422
        )

    imported = GuestService(store).import_guests(user_id, rows)
    return success_response(
        message=f"{imported} guests imported",
        data={"imported_count": imported, "filename": file.filename}
    )

@router.post("/reminders")
async def send_reminders(
    request: ReminderRequest,
    store: RecordStore = Depends(get_record_store),
    dev_state: DevStateStore = Depends(get_dev_state),
    user_id: str = Depends(get_current_user_id)
):
    """Simulate RSVP reminder e-mails to the selected pending guests"""
    sent = await ReminderService(store, dev_state).send_rsvp_reminders(user_id, request.guest_ids)
    message = f"Sent reminders to {sent} guests" if sent else "No pending guests with email addresses found"
    return success_response(message=message, data={"count": sent})

@router.get("/email-logs")
async def email_logs(
    guest_id: Optional[str] = None,
    store: RecordStore = Depends(get_record_store),
    dev_state: DevStateStore = Depends(get_dev_state),
    user_id: str = Depends(get_current_user_id)
):
    logs = ReminderService(store, dev_state).get_email_logs(user_id, guest_id)
    return success_response(message="Email logs retrieved", data=logs)

@router.get("/{guest_id}")
async def get_guest(
    guest_id: str,
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    return success_response(message="Guest retrieved", data=GuestService(store).get_guest(user_id, guest_id))

@router.put("/{guest_id}")
async def update_guest(
    guest_id: str,
    update: GuestUpdate,
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    updated = GuestService(store).update_guest(user_id, guest_id, update)
    return success_response(message="Guest updated", data=updated)

@router.put("/{guest_id}/table")
async def assign_table(
    guest_id: str,
    assignment: TableAssignmentRequest,
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    guest = GuestService(store).assign_table(user_id, guest_id, assignment.table_name)
    message = f"Guest assigned to {assignment.table_name}" if assignment.table_name else "Guest unassigned"
    return success_response(message=message, data=guest)

@router.delete("/{guest_id}")
async def delete_guest(
    guest_id: str,
    store: RecordStore = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id)
):
    GuestService(store).delete_guest(user_id, guest_id)
    return success_response(message="Guest deleted")
