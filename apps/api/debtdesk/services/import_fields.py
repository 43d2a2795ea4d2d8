"""Target field schema for bulk imports.

Every importable field is a FieldSpec. Repeated groups (phones, emails,
references, custom slots) are generated from their group definition, so
adding a sixth phone or a fourth reference is a one-number change.

Field names are the strings users pick in the column mapper
(``accountNumber``, ``phone3Label``, ``ref2City``); ``attr`` is the model
attribute the value lands on, where there is one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from debtdesk.db.enums import ImportType


SKIP = "skip"

FieldGroup = Literal["account", "phone", "email", "employment", "reference", "custom"]
FieldKind = Literal["text", "currency"]

MAX_PHONES = 5
MAX_EMAILS = 3
MAX_REFERENCES = 3
MAX_CUSTOM_SLOTS = 10


@dataclass(frozen=True)
class FieldSpec:
    """One importable target field."""

    name: str
    group: FieldGroup
    attr: str | None = None
    index: int | None = None
    subfield: str | None = None
    kind: FieldKind = "text"


# =============================================================================
# Account row fields
# =============================================================================

_ACCOUNT_ROW_FIELDS: list[FieldSpec] = [
    # identity
    FieldSpec("accountNumber", "account", attr="account_number"),
    FieldSpec("firstName", "account", attr="first_name"),
    FieldSpec("lastName", "account", attr="last_name"),
    FieldSpec("dateOfBirth", "account", attr="date_of_birth"),
    FieldSpec("ssn", "account", attr="ssn"),
    FieldSpec("ssnLast4", "account", attr="ssn_last4"),
    # address
    FieldSpec("address", "account", attr="address"),
    FieldSpec("city", "account", attr="city"),
    FieldSpec("state", "account", attr="state"),
    FieldSpec("zipCode", "account", attr="zip_code"),
    # legacy single email lives on the account row
    FieldSpec("email", "account", attr="email"),
    # balances
    FieldSpec("originalBalance", "account", attr="original_balance", kind="currency"),
    FieldSpec("currentBalance", "account", attr="current_balance", kind="currency"),
    # debt info
    FieldSpec("originalCreditor", "account", attr="original_creditor"),
    FieldSpec("clientName", "account", attr="client_name"),
    FieldSpec("status", "account", attr="status"),
    FieldSpec("lastContactDate", "account", attr="last_contact_date"),
    FieldSpec("nextFollowUpDate", "account", attr="next_follow_up_date"),
]

# Legacy single phone column; feeds phone1 when phone1 is not mapped
LEGACY_PHONE_FIELD = FieldSpec("phone", "phone", index=1, subfield="legacy")

_EMPLOYMENT_FIELDS: list[FieldSpec] = [
    FieldSpec("employerName", "employment", attr="employer_name"),
    FieldSpec("employerPhone", "employment", attr="employer_phone"),
    FieldSpec("employerAddress", "employment", attr="employer_address"),
    FieldSpec("position", "employment", attr="position"),
    FieldSpec("salary", "employment", attr="salary", kind="currency"),
]

# subfield name -> AccountReference attribute
REFERENCE_SUBFIELDS: dict[str, str] = {
    "Name": "name",
    "Relationship": "relationship_type",
    "Phone": "phone",
    "Address": "address",
    "City": "city",
    "State": "state",
    "ZipCode": "zip_code",
    "Notes": "notes",
}


def _contact_group(group: Literal["phone", "email"], count: int) -> list[FieldSpec]:
    specs: list[FieldSpec] = []
    for n in range(1, count + 1):
        specs.append(FieldSpec(f"{group}{n}", group, index=n, subfield="value"))
        specs.append(FieldSpec(f"{group}{n}Label", group, index=n, subfield="label"))
    return specs


def _reference_group(count: int) -> list[FieldSpec]:
    return [
        FieldSpec(f"ref{n}{sub}", "reference", attr=attr, index=n, subfield=sub)
        for n in range(1, count + 1)
        for sub, attr in REFERENCE_SUBFIELDS.items()
    ]


def _custom_slots(count: int) -> list[FieldSpec]:
    return [FieldSpec(f"custom{n}", "custom", index=n) for n in range(1, count + 1)]


ACCOUNT_FIELDS: list[FieldSpec] = [
    *_ACCOUNT_ROW_FIELDS,
    LEGACY_PHONE_FIELD,
    *_contact_group("phone", MAX_PHONES),
    *_contact_group("email", MAX_EMAILS),
    *_EMPLOYMENT_FIELDS,
    *_reference_group(MAX_REFERENCES),
    *_custom_slots(MAX_CUSTOM_SLOTS),
]

CONTACT_FIELDS: list[FieldSpec] = [
    FieldSpec("accountNumber", "account", attr="account_number"),
    FieldSpec("ssn", "account", attr="ssn"),
    FieldSpec("phone", "phone", subfield="value"),
    FieldSpec("phoneLabel", "phone", subfield="label"),
    FieldSpec("email", "email", subfield="value"),
    FieldSpec("emailLabel", "email", subfield="label"),
]

FIELDS_BY_IMPORT_TYPE: dict[ImportType, list[FieldSpec]] = {
    ImportType.ACCOUNTS: ACCOUNT_FIELDS,
    ImportType.CONTACTS: CONTACT_FIELDS,
}

# Known-field allowlist: anything mapped outside this set is a custom field
KNOWN_ACCOUNT_FIELDS: frozenset[str] = frozenset(spec.name for spec in ACCOUNT_FIELDS)

ACCOUNT_ROW_SPECS: dict[str, FieldSpec] = {spec.name: spec for spec in _ACCOUNT_ROW_FIELDS}
CUSTOM_SLOT_NAMES: frozenset[str] = frozenset(
    spec.name for spec in ACCOUNT_FIELDS if spec.group == "custom"
)
CURRENCY_FIELDS: frozenset[str] = frozenset(
    spec.name for spec in ACCOUNT_FIELDS if spec.kind == "currency"
)

# Owned by the engine; never importable
RESERVED_FIELDS: frozenset[str] = frozenset(
    {
        "id",
        "organizationId",
        "portfolioId",
        "clientId",
        "linkedAccountId",
        "fileNumber",
        "customFields",
    }
)


def get_fields(import_type: ImportType | str) -> list[FieldSpec]:
    """Return the target field set for an import type."""
    return FIELDS_BY_IMPORT_TYPE[ImportType(import_type)]


def field_names(import_type: ImportType | str) -> list[str]:
    """Target field names in display order, for mapping dropdowns."""
    return [spec.name for spec in get_fields(import_type)]


def phone_field(n: int) -> str:
    return f"phone{n}"


def email_field(n: int) -> str:
    return f"email{n}"


def reference_field(n: int, subfield: str) -> str:
    return f"ref{n}{subfield}"


_NORMALIZE_PATTERN = re.compile(r"[\s_\-]+")


def normalize_field_key(value: str) -> str:
    """Case/space/underscore-insensitive key used for suggestions."""
    return _NORMALIZE_PATTERN.sub("", value.strip().lower())
