import pytest

from debtdesk.db.enums import ImportType
from debtdesk.services.import_transformers import (
    coerce_record,
    format_minor_units,
    to_minor_units,
    transform_currency,
)


@pytest.mark.parametrize(
    "raw, cents",
    [
        ("$1,250.00", 125000),
        ("1250", 125000),
        ("0.01", 1),
        ("$0.00", 0),
        ("19.995", 2000),
        ("-12.50", -1250),
    ],
)
def test_transform_currency_parses_to_cents(raw: str, cents: int) -> None:
    result = transform_currency(raw)
    assert result.success is True
    assert result.value == cents


def test_transform_currency_unparseable_is_zero_and_unsuccessful() -> None:
    result = transform_currency("N/A")
    assert result.success is False
    assert result.value == 0
    assert "N/A" in result.error


def test_transform_currency_ignores_trailing_text_with_warning() -> None:
    result = transform_currency("12.50 USD")
    assert result.success is True
    assert result.value == 1250
    assert result.warnings


@pytest.mark.parametrize("raw", ["$1,250.00", "$0.99", "1,000,000.10", "42.00"])
def test_currency_formats_back_to_same_value(raw: str) -> None:
    formatted = format_minor_units(to_minor_units(raw))
    assert formatted == raw.replace("$", "").replace(",", "")


def test_coerce_record_drops_skips_and_blanks() -> None:
    record = {"Acct": " A1 ", "Name": "", "Junk": "x", "Balance": "$10.00"}
    mapping = {"Acct": "accountNumber", "Name": "firstName", "Junk": "skip", "Balance": "originalBalance"}

    coerced = coerce_record(record, mapping)

    assert coerced.values == {"accountNumber": "A1", "originalBalance": 1000}
    assert "firstName" not in coerced


def test_coerce_record_missing_column_is_absent() -> None:
    coerced = coerce_record({}, {"Acct": "accountNumber"})
    assert coerced.values == {}


def test_coerce_record_keeps_unknown_targets() -> None:
    coerced = coerce_record({"Br": "North"}, {"Br": "Branch Code"})
    assert coerced.get("Branch Code") == "North"


def test_coerce_record_zero_mode_is_silent() -> None:
    coerced = coerce_record(
        {"Balance": "abc"}, {"Balance": "originalBalance"}, currency_failure="zero"
    )
    assert coerced.get("originalBalance") == 0
    assert coerced.warnings == []


def test_coerce_record_warn_mode_reports_unparseable() -> None:
    coerced = coerce_record(
        {"Balance": "abc"}, {"Balance": "originalBalance"}, currency_failure="warn"
    )
    assert coerced.get("originalBalance") == 0
    assert len(coerced.warnings) == 1
    assert coerced.warnings[0].startswith("originalBalance:")


def test_coerce_record_contacts_does_not_parse_currency() -> None:
    coerced = coerce_record(
        {"Balance": "$5.00"}, {"Balance": "originalBalance"}, import_type=ImportType.CONTACTS
    )
    assert coerced.get("originalBalance") == "$5.00"
