"""
CSV and Excel export/import for guest lists and table assignments
"""

import io
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

CSV_MEDIA_TYPE = "text/csv;charset=utf-8"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

SHAPE_LABELS = {"round": "Round", "rectangle": "Rectangle", "oval": "Oval"}

RSVP_ALIASES = {
    "confirmed": "confirmed",
    "attending": "confirmed",
    "yes": "confirmed",
    "declined": "declined",
    "no": "declined",
    "pending": "pending",
    "": "pending",
}


def _csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str) and "," in value:
        return f'"{value}"'
    return str(value)


def to_csv(records: Sequence[Mapping[str, Any]]) -> str:
    """Render flat records as CSV text.

    The header comes from the first record's keys. Only string values
    containing a comma are quoted; everything else is written as is.
    """
    if not records:
        raise ValueError("Nothing to export")
    headers = list(records[0].keys())
    lines = [",".join(headers)]
    for record in records:
        lines.append(",".join(_csv_value(record.get(h)) for h in headers))
    return "\n".join(lines)


def csv_filename(name: str) -> str:
    return f"{name}.csv"


def format_table_shape(shape: Optional[str]) -> str:
    return SHAPE_LABELS.get(shape or "", "Unknown")


def guest_export_rows(guests: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {
            "Name": g.get("name"),
            "Email": g.get("email") or "",
            "Phone": g.get("phone") or "",
            "RSVP Status": g.get("rsvp_status"),
            "Dietary Restrictions": g.get("dietary_restrictions") or "",
            "Table": g.get("table_assignment") or "",
        }
        for g in guests
    ]


def table_assignment_rows(
    tables: Sequence[Mapping[str, Any]],
    guests: Sequence[Mapping[str, Any]],
) -> List[Dict[str, Any]]:
    """One row per seated guest, sorted by table name then guest name"""
    guests_by_id = {g["id"]: g for g in guests}
    rows = []
    for table in tables:
        for guest_id in table.get("guests", []):
            guest = guests_by_id.get(guest_id)
            if not guest:
                continue
            rows.append({
                "Guest Name": guest.get("name"),
                "Table Name": table.get("name"),
                "Table Shape": format_table_shape(table.get("shape")),
                "Dietary Restrictions": guest.get("dietary_restrictions") or "-",
                "Email": guest.get("email") or "-",
                "Phone": guest.get("phone") or "-",
            })
    rows.sort(key=lambda r: (r["Table Name"] or "", r["Guest Name"] or ""))
    return rows


class ExcelService:
    """Excel round trip for guest lists"""

    REQUIRED_COLUMNS = ["name"]
    SHEET_NAME = "Guest List"

    @staticmethod
    def export_guest_list(guests: Sequence[Mapping[str, Any]]) -> bytes:
        df = pd.DataFrame(guest_export_rows(guests), columns=[
            "Name", "Email", "Phone", "RSVP Status", "Dietary Restrictions", "Table",
        ])
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=ExcelService.SHEET_NAME)
        return buffer.getvalue()

    @staticmethod
    def map_columns(columns) -> Dict[str, str]:
        """Map normalized field names to the sheet's actual column headers"""
        mapping: Dict[str, str] = {}
        for col in columns:
            col_lower = str(col).lower().strip()
            if "name" in col_lower and "table" not in col_lower:
                mapping.setdefault("name", col)
            elif "mail" in col_lower:
                mapping["email"] = col
            elif "phone" in col_lower:
                mapping["phone"] = col
            elif "rsvp" in col_lower or "status" in col_lower:
                mapping["rsvp_status"] = col
            elif "dietary" in col_lower:
                mapping["dietary_restrictions"] = col
            elif "table" in col_lower:
                mapping["table_assignment"] = col
        return mapping

    @staticmethod
    def _cell(row, column: Optional[str]) -> Optional[str]:
        if column is None or pd.isna(row[column]):
            return None
        value = str(row[column]).strip()
        return value or None

    @staticmethod
    def import_guest_list(file_content: bytes) -> Tuple[List[Dict[str, Any]], List[str]]:
        """Parse an uploaded sheet into guest rows (without user_id) and errors"""
        try:
            df = pd.read_excel(io.BytesIO(file_content), dtype=str)
        except Exception as e:
            return [], [f"Error reading Excel file: {e}"]

        mapping = ExcelService.map_columns(df.columns)
        missing = [c for c in ExcelService.REQUIRED_COLUMNS if c not in mapping]
        if missing:
            return [], [f"Missing required columns: {', '.join(missing)}"]

        rows: List[Dict[str, Any]] = []
        errors: List[str] = []
        for index, row in df.iterrows():
            name = ExcelService._cell(row, mapping["name"])
            if not name:
                continue
            status = (ExcelService._cell(row, mapping.get("rsvp_status")) or "").lower()
            if status not in RSVP_ALIASES:
                errors.append(f"Row {index + 2}: unknown RSVP status '{status}'")
                continue
            rows.append({
                "name": name,
                "email": ExcelService._cell(row, mapping.get("email")) or "",
                "phone": ExcelService._cell(row, mapping.get("phone")),
                "rsvp_status": RSVP_ALIASES[status],
                "dietary_restrictions": ExcelService._cell(row, mapping.get("dietary_restrictions")),
                "table_assignment": ExcelService._cell(row, mapping.get("table_assignment")),
            })
        return rows, errors
