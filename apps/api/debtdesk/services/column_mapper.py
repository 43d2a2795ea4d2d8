"""Column mapping for bulk imports.

Turns a parsed header row into an editable {source_column: target_field}
mapping, merges saved mappings onto it, and validates the result before
an import runs.
"""

import csv
import io

from debtdesk.db.enums import ImportType
from debtdesk.services.import_fields import (
    RESERVED_FIELDS,
    SKIP,
    get_fields,
    normalize_field_key,
)


class MappingError(ValueError):
    """Mapping cannot be used for an import (whole batch is rejected)."""


# =============================================================================
# CSV Parsing
# =============================================================================


def parse_csv_content(file_content: bytes | str) -> tuple[list[str], list[dict[str, str]]]:
    """
    Parse CSV content into headers and header-keyed records.

    Short rows are padded with absent keys; extra cells are dropped.

    Returns:
        (headers, records)
    """
    if isinstance(file_content, bytes):
        file_content = file_content.decode("utf-8-sig")  # Handle BOM

    reader = csv.reader(io.StringIO(file_content))
    rows = [row for row in reader if any(cell.strip() for cell in row)]

    if not rows:
        return [], []

    headers = [h.strip() for h in rows[0]]
    records: list[dict[str, str]] = []
    for row in rows[1:]:
        records.append(
            {header: row[idx] for idx, header in enumerate(headers) if idx < len(row)}
        )

    return headers, records


# =============================================================================
# Mapping construction
# =============================================================================


def build_default_mapping(headers: list[str]) -> dict[str, str]:
    """Every column starts out skipped."""
    return {header: SKIP for header in headers}


def apply_saved_mapping(current: dict[str, str], saved: dict[str, str]) -> dict[str, str]:
    """
    Merge a saved mapping onto the current one.

    Only columns present in both take the saved target. Columns the saved
    mapping does not know about keep whatever the user already chose, and
    saved columns missing from the file are ignored.
    """
    merged = dict(current)
    for column in current:
        if column in saved:
            merged[column] = saved[column]
    return merged


def suggest_mapping(headers: list[str], import_type: ImportType | str) -> dict[str, str]:
    """
    Suggest targets by normalized name ("Account Number" -> accountNumber).

    Purely advisory; columns with no obvious target stay skipped.
    """
    by_key = {normalize_field_key(spec.name): spec.name for spec in get_fields(import_type)}
    suggestion = build_default_mapping(headers)
    for header in headers:
        target = by_key.get(normalize_field_key(header))
        if target:
            suggestion[header] = target
    return suggestion


def validate_mapping(mapping: dict[str, str], import_type: ImportType | str) -> dict[str, str]:
    """
    Check a mapping before any row is processed.

    Targets outside the known field set are allowed for account imports
    (they become custom fields). Reserved engine-owned fields are not.

    Raises:
        MappingError: mapping is unusable
    """
    ImportType(import_type)
    if not isinstance(mapping, dict):
        raise MappingError("Mappings must be an object of source column to target field")

    for column, target in mapping.items():
        if target is None:
            continue
        if not isinstance(target, str):
            raise MappingError(f"Mapping for column '{column}' must be a field name")
        if target in RESERVED_FIELDS:
            raise MappingError(f"Field '{target}' cannot be imported (column '{column}')")
    return mapping


def mapped_columns(mapping: dict[str, str]) -> dict[str, str]:
    """Mapping without skipped or empty targets."""
    return {column: target for column, target in mapping.items() if target and target != SKIP}
