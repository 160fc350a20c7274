"""
Tests for CSV and Excel export/import
"""

import io

import pandas as pd
import pytest

from app.services.export_service import (
    ExcelService,
    csv_filename,
    format_table_shape,
    guest_export_rows,
    table_assignment_rows,
    to_csv,
)

def create_test_excel(data):
    """Helper function to create Excel bytes from data"""
    df = pd.DataFrame(data)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False)
    return buffer.getvalue()

def test_to_csv_quotes_comma_strings_only():
    assert to_csv([{"Name": "A,B", "Age": 5}]) == 'Name,Age\n"A,B",5'

def test_to_csv_header_from_first_record():
    csv_text = to_csv([
        {"Name": "Anna", "Table": "VIP 1"},
        {"Table": "Family 2", "Name": "Ben", "Extra": "ignored"},
    ])
    assert csv_text.split("\n") == ["Name,Table", "Anna,VIP 1", "Ben,Family 2"]

def test_to_csv_renders_none_as_empty():
    assert to_csv([{"Name": "Anna", "Dietary": None}]) == "Name,Dietary\nAnna,"

def test_to_csv_is_deterministic():
    records = [{"Name": "Anna", "Age": 31}, {"Name": "Ben, Jr.", "Age": 2}]
    assert to_csv(records) == to_csv(list(records))

def test_to_csv_requires_records():
    with pytest.raises(ValueError):
        to_csv([])

def test_csv_filename():
    assert csv_filename("wedding_table_assignments") == "wedding_table_assignments.csv"

@pytest.mark.parametrize("shape,label", [
    ("round", "Round"), ("rectangle", "Rectangle"), ("oval", "Oval"), ("hexagon", "Unknown"), (None, "Unknown"),
])
def test_format_table_shape(shape, label):
    assert format_table_shape(shape) == label

def test_table_assignment_rows_sorted_with_placeholders():
    tables = [
        {"name": "VIP 2", "shape": "oval", "guests": ["g3"]},
        {"name": "Family 1", "shape": "round", "guests": ["g2", "g1", "missing"]},
    ]
    guests = [
        {"id": "g1", "name": "Zoe", "email": "zoe@example.com", "phone": None, "dietary_restrictions": "Vegan"},
        {"id": "g2", "name": "Adam", "email": "", "phone": "+15550000000", "dietary_restrictions": None},
        {"id": "g3", "name": "Mia", "email": "mia@example.com", "phone": None, "dietary_restrictions": None},
    ]

    rows = table_assignment_rows(tables, guests)

    assert [(r["Table Name"], r["Guest Name"]) for r in rows] == [
        ("Family 1", "Adam"), ("Family 1", "Zoe"), ("VIP 2", "Mia"),
    ]
    assert rows[0]["Email"] == "-"
    assert rows[0]["Dietary Restrictions"] == "-"
    assert rows[1]["Phone"] == "-"
    assert rows[2]["Table Shape"] == "Oval"

def test_guest_export_rows():
    rows = guest_export_rows([{"name": "Anna", "rsvp_status": "confirmed", "email": None}])
    assert rows == [{
        "Name": "Anna", "Email": "", "Phone": "", "RSVP Status": "confirmed",
        "Dietary Restrictions": "", "Table": "",
    }]

def test_import_guest_list():
    content = create_test_excel({
        "Name": ["Anna Smith", "Ben Jones", ""],
        "Email": ["anna@example.com", None, None],
        "RSVP Status": ["Attending", "", "pending"],
        "Dietary Restrictions": ["Vegan", None, None],
        "Table": ["Family 1", None, None],
    })

    rows, errors = ExcelService.import_guest_list(content)

    assert errors == []
    assert len(rows) == 2
    assert rows[0] == {
        "name": "Anna Smith",
        "email": "anna@example.com",
        "phone": None,
        "rsvp_status": "confirmed",
        "dietary_restrictions": "Vegan",
        "table_assignment": "Family 1",
    }
    assert rows[1]["rsvp_status"] == "pending"
    assert rows[1]["email"] == ""

def test_import_requires_name_column():
    rows, errors = ExcelService.import_guest_list(create_test_excel({"Email": ["a@example.com"]}))
    assert rows == []
    assert "Missing required columns: name" in errors[0]

def test_import_reports_unknown_status():
    rows, errors = ExcelService.import_guest_list(create_test_excel({
        "Name": ["Anna"], "RSVP Status": ["maybe"],
    }))
    assert rows == []
    assert errors == ["Row 2: unknown RSVP status 'maybe'"]

def test_import_rejects_non_excel_bytes():
    rows, errors = ExcelService.import_guest_list(b"not a spreadsheet")
    assert rows == []
    assert errors[0].startswith("Error reading Excel file")

def test_export_guest_list_is_readable():
    content = ExcelService.export_guest_list([{"name": "Anna", "rsvp_status": "pending"}])
    df = pd.read_excel(io.BytesIO(content), sheet_name="Guest List")
    assert list(df.columns) == ["Name", "Email", "Phone", "RSVP Status", "Dietary Restrictions", "Table"]
    assert df.iloc[0]["Name"] == "Anna"
