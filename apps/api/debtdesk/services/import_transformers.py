"""Field coercion for bulk imports.

Applies a column mapping to one raw record and produces the typed
intermediate record the resolver and materializer work from.

Features:
- currency: "$1,250.00" -> 125000 (integer cents)
- passthrough: everything else is kept as a stripped string
- blank or missing cells are left out entirely so downstream defaults apply
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Literal

from debtdesk.core.config import settings
from debtdesk.db.enums import ImportType
from debtdesk.services.import_fields import CURRENCY_FIELDS, SKIP


CurrencyFailureMode = Literal["zero", "warn"]


@dataclass
class TransformOutput:
    """Result of a transformation operation."""

    value: Any
    success: bool
    warnings: list[str]
    error: str | None = None


@dataclass
class CoercedRecord:
    """Mapped values keyed by target field (or custom label) plus coercion warnings."""

    values: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self.values


# =============================================================================
# Currency Transformer
# =============================================================================

# Leading numeric prefix, the way a lenient float parse reads "12.50 USD"
_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_CURRENCY_NOISE = re.compile(r"[$,]")


def transform_currency(raw_value: str) -> TransformOutput:
    """
    Parse a human currency string into integer cents.

    "$" and "," are stripped, the remaining number is scaled by 100 and
    rounded half-up. Anything unparseable becomes 0 and is reported as an
    unsuccessful transform so callers can decide whether to warn.
    """
    value = _CURRENCY_NOISE.sub("", str(raw_value)).strip()
    match = _NUMBER_PREFIX.match(value)
    if not match:
        return TransformOutput(
            value=0,
            success=False,
            warnings=[],
            error=f"Unparseable currency value '{raw_value}'",
        )

    try:
        number = Decimal(match.group(0))
    except InvalidOperation:
        return TransformOutput(
            value=0,
            success=False,
            warnings=[],
            error=f"Unparseable currency value '{raw_value}'",
        )

    cents = int((number * 100).to_integral_value(rounding=ROUND_HALF_UP))
    warnings: list[str] = []
    if match.end() != len(value):
        warnings.append(f"Ignored trailing characters in currency value '{raw_value}'")
    return TransformOutput(value=cents, success=True, warnings=warnings)


def to_minor_units(raw_value: str) -> int:
    """Currency string to cents; unparseable input is 0."""
    return transform_currency(raw_value).value


def format_minor_units(cents: int) -> str:
    """Cents to a plain two-decimal string (125000 -> "1250.00")."""
    sign = "-" if cents < 0 else ""
    whole, frac = divmod(abs(cents), 100)
    return f"{sign}{whole}.{frac:02d}"


# =============================================================================
# Record coercion
# =============================================================================


def coerce_record(
    record: dict[str, Any],
    mapping: dict[str, str],
    *,
    import_type: ImportType | str = ImportType.ACCOUNTS,
    currency_failure: CurrencyFailureMode | None = None,
) -> CoercedRecord:
    """
    Apply a column mapping to one raw record.

    - skipped columns are dropped
    - missing or blank cells are absent from the result
    - currency targets become integer cents (account imports only)
    - any other target, known or not, keeps its stripped string value
      under the target name
    """
    mode = currency_failure or settings.CURRENCY_PARSE_FAILURE
    currency_fields = CURRENCY_FIELDS if ImportType(import_type) == ImportType.ACCOUNTS else frozenset()
    result = CoercedRecord()

    for column, target in mapping.items():
        if not target or target == SKIP:
            continue
        raw = record.get(column)
        if raw is None:
            continue
        value = str(raw).strip()
        if not value:
            continue

        if target in currency_fields:
            output = transform_currency(value)
            result.values[target] = output.value
            if mode == "warn":
                if not output.success:
                    result.warnings.append(f"{target}: {output.error}; stored as 0")
                result.warnings.extend(f"{target}: {w}" for w in output.warnings)
            continue

        result.values[target] = value

    return result
