"""
Roster data handling for the margin dashboard.

Three transformations live here, none of which touch the network:

* ``parse_people_workbook`` turns an uploaded ``.xlsx`` file into the
  ``{"name", "cpf"}`` records the webhook expects.
* ``group_by_city`` turns the flat roster returned by the webhook into an
  ordered mapping of city name to people, filling defaults for missing
  fields.
* ``export_city_workbook`` builds the downloadable workbook for one city.

pandas picks the Excel engines by name, so both are imported here to make
sure Vercel bundles them with the function.
"""

import io
import uuid
from datetime import datetime

import pandas as pd
import openpyxl  # noqa: F401  pylint: disable=unused-import
import xlsxwriter  # noqa: F401  pylint: disable=unused-import

from .errors import GatewayError, InvalidFileFormat

REQUIRED_COLUMNS = ("Name", "CPF")
INVALID_FORMAT_MESSAGE = 'Invalid file format. The Excel file must contain "Name" and "CPF" columns.'

UNKNOWN = "Unknown"
NOT_AVAILABLE = "N/A"

EXPORT_COLUMNS = ["Name", "CPF", "Margin"]
EXPORT_SHEET = "Data"
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
# Pinned so the same people always produce the same workbook.
WORKBOOK_CREATED = datetime(2024, 1, 1)


# -----------------------------------------------------------------------------
# Upload parsing
# -----------------------------------------------------------------------------

def parse_people_workbook(file_content):
    """
    Read the first sheet of an uploaded workbook into Name/CPF records.

    The header row names the columns; blank rows are skipped.  Every
    remaining row must carry both a ``Name`` and a ``CPF`` value, otherwise
    the whole file is rejected and nothing is returned.

    :param file_content: Raw bytes of the workbook or a binary file object.
    :return: List of ``{"name": ..., "cpf": ...}`` dicts in sheet order.
    :raises InvalidFileFormat: If the file is not a readable workbook or a
        required column or value is missing.
    """
    if hasattr(file_content, "read"):
        file_content = file_content.read()
    try:
        # Text everywhere so CPFs keep their leading zeros
        df = pd.read_excel(io.BytesIO(file_content), sheet_name=0, dtype=str, engine="openpyxl")
    except Exception as exc:
        raise InvalidFileFormat(f"Unable to read the Excel file: {exc}") from exc

    df = df.dropna(how="all")
    if any(col not in df.columns for col in REQUIRED_COLUMNS):
        raise InvalidFileFormat(INVALID_FORMAT_MESSAGE)
    if df[list(REQUIRED_COLUMNS)].isna().to_numpy().any():
        raise InvalidFileFormat(INVALID_FORMAT_MESSAGE)

    return [
        {"name": row["Name"], "cpf": row["CPF"]}
        for row in df[list(REQUIRED_COLUMNS)].to_dict("records")
    ]


def tag_with_city(records, city):
    """Copy each record with its ``city`` set."""
    return [{**record, "city": city} for record in records]


# -----------------------------------------------------------------------------
# Grouping
# -----------------------------------------------------------------------------

def coerce_margin(value):
    """Return the margin as a float, or None when it is missing or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        margin = float(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(margin):
        return None
    return margin


def is_empty_table(payload):
    """True for the ``{"table": "empty"}`` sentinel."""
    return isinstance(payload, dict) and payload.get("table") == "empty"


def group_by_city(payload):
    """
    Partition the webhook roster into ``{city: [person, ...]}``.

    Cities appear in the order they are first seen and people keep their
    input order.  The ``{"table": "empty"}`` sentinel, ``None`` and an
    empty list all give an empty mapping.

    :param payload: Decoded JSON body of the roster endpoint.
    :return: Dict of city name to list of person dicts.
    :raises GatewayError: If the payload is not a list of records.
    """
    if not payload or is_empty_table(payload):
        return {}
    if not isinstance(payload, list):
        raise GatewayError("Failed to fetch data")

    city_data = {}
    for record in payload:
        if not isinstance(record, dict):
            raise GatewayError("Failed to fetch data")
        city = record.get("city") or UNKNOWN
        city_data.setdefault(city, []).append({
            **record,
            "id": str(record.get("id") or uuid.uuid4()),
            "cpf": record.get("cpf") or NOT_AVAILABLE,
            "name": record.get("name") or UNKNOWN,
            "margin": coerce_margin(record.get("margin")),
            "city": city,
        })
    return city_data


# -----------------------------------------------------------------------------
# Export
# -----------------------------------------------------------------------------

def format_margin(margin):
    """Two decimals, or N/A for a missing margin."""
    margin = coerce_margin(margin)
    if margin is None:
        return NOT_AVAILABLE
    return f"{margin:.2f}"


def export_filename(city):
    """Download name for a city's workbook."""
    return f"{city}_Table.xlsx"


def export_city_workbook(city, people):
    """
    Build the download workbook for one city.

    :param city: City name, used for the workbook title.
    :param people: Person dicts (``name``, ``cpf``, ``margin``).
    :return: Binary ``.xlsx`` content with a single ``Data`` sheet.
    """
    df_export = pd.DataFrame(
        [
            {
                "Name": person.get("name"),
                "CPF": person.get("cpf"),
                "Margin": format_margin(person.get("margin")),
            }
            for person in people
        ],
        columns=EXPORT_COLUMNS,
    )

    output = io.BytesIO()
    # Cells stay plain text, "=..." and URLs included
    options = {"strings_to_formulas": False, "strings_to_urls": False}
    with pd.ExcelWriter(output, engine="xlsxwriter", engine_kwargs={"options": options}) as writer:
        wb = writer.book
        wb.set_properties({"title": f"{city} roster", "created": WORKBOOK_CREATED})
        fmt_header = wb.add_format({"bold": True, "bg_color": "#D9E1F2", "align": "center", "valign": "vcenter", "border": 1})

        df_export.to_excel(writer, sheet_name=EXPORT_SHEET, index=False)
        ws = writer.sheets[EXPORT_SHEET]
        for c, name in enumerate(df_export.columns):
            ws.write(0, c, name, fmt_header)
        ws.set_column(0, 0, 32)
        ws.set_column(1, 1, 18)
        ws.set_column(2, 2, 12)

    output.seek(0)
    return output.getvalue()
