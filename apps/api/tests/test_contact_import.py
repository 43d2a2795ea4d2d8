"""Tests for the contact-only importer."""

import pytest

from debtdesk.db.enums import ContactType, ImportStatus
from debtdesk.services import (
    account_detail_service,
    account_service,
    contact_import_service,
    import_service,
)
from debtdesk.services.column_mapper import MappingError


CONTACT_MAPPING = {
    "Acct": "accountNumber",
    "SSN": "ssn",
    "Phone": "phone",
    "Phone Type": "phoneLabel",
    "Email": "email",
}


@pytest.fixture
def existing_account(db, test_org, test_portfolio):
    return account_service.create_account(
        db,
        organization_id=test_org.id,
        portfolio_id=test_portfolio.id,
        account_number="A1",
        first_name="Ann",
        last_name="Lee",
        ssn="111223333",
    )


def _run(db, org, portfolio, records, mappings=None):
    return contact_import_service.import_contacts(
        db,
        org.id,
        portfolio_id=portfolio.id,
        records=records,
        mappings=mappings or CONTACT_MAPPING,
    )


def test_adds_phone_and_email_to_matched_account(db, test_org, test_portfolio, existing_account):
    result = _run(
        db,
        test_org,
        test_portfolio,
        [{"Acct": "A1", "Phone": "555-0100", "Phone Type": "Cell", "Email": "ann@example.com"}],
    )

    assert (result.matched, result.added) == (1, 2)
    assert result.errors == []
    assert result.message == "Import complete: 2 contacts added to 1 accounts"

    [phone] = account_detail_service.list_contacts(db, existing_account.id, ContactType.PHONE)
    assert (phone.value, phone.label, phone.is_primary) == ("555-0100", "Cell", False)
    [email] = account_detail_service.list_contacts(db, existing_account.id, ContactType.EMAIL)
    assert email.label is None


def test_matches_by_ssn_when_row_has_no_account_number(
    db, test_org, test_portfolio, existing_account
):
    result = _run(db, test_org, test_portfolio, [{"SSN": "111223333", "Phone": "555-0100"}])

    assert (result.matched, result.added) == (1, 1)
    [phone] = account_detail_service.list_contacts(db, existing_account.id, ContactType.PHONE)
    assert phone.value == "555-0100"


def test_account_number_takes_precedence_over_ssn(
    db, test_org, test_portfolio, existing_account
):
    second = account_service.create_account(
        db,
        organization_id=test_org.id,
        portfolio_id=test_portfolio.id,
        account_number="A2",
        first_name="Bob",
        last_name="Ray",
        ssn="999887777",
    )

    # A2's account number with A1's SSN belongs to A2
    result = _run(db, test_org, test_portfolio, [{"Acct": "A2", "SSN": "111223333", "Phone": "555-0100"}])

    assert (result.matched, result.added) == (1, 1)
    assert account_detail_service.list_contacts(db, existing_account.id, ContactType.PHONE) == []
    [phone] = account_detail_service.list_contacts(db, second.id, ContactType.PHONE)
    assert phone.value == "555-0100"


def test_unknown_account_number_is_not_matched_by_ssn(
    db, test_org, test_portfolio, existing_account
):
    result = _run(db, test_org, test_portfolio, [{"Acct": "NOPE", "SSN": "111223333", "Phone": "555-0101"}])

    assert (result.matched, result.added) == (0, 0)
    assert result.errors == ["Row 1: No matching account found"]
    assert account_detail_service.list_contacts(db, existing_account.id) == []


def test_unmatched_rows_are_errors_not_accounts(db, test_org, test_portfolio, existing_account):
    result = _run(
        db,
        test_org,
        test_portfolio,
        [{"Acct": "NOPE", "Phone": "555-0100"}, {"Phone": "555-0101"}],
    )

    assert (result.matched, result.added) == (0, 0)
    assert result.errors == [
        "Row 1: No matching account found",
        "Row 2: No matching account found",
    ]
    assert len(account_service.list_accounts(db, test_org.id)) == 1


def test_match_without_contact_values_counts_match_only(db, test_org, test_portfolio, existing_account):
    result = _run(db, test_org, test_portfolio, [{"Acct": "A1", "Phone": " "}])
    assert (result.matched, result.added) == (1, 0)


def test_other_portfolio_accounts_are_not_matched(
    db, test_org, test_portfolio, other_portfolio, existing_account
):
    result = _run(db, test_org, other_portfolio, [{"Acct": "A1", "Phone": "555-0100"}])
    assert result.matched == 0
    assert len(result.errors) == 1


def test_contact_batch_is_recorded(db, test_org, test_portfolio, existing_account):
    result = _run(db, test_org, test_portfolio, [{"Acct": "A1", "Email": "ann@example.com"}])

    batch = import_service.get_batch(db, test_org.id, result.batch_id)
    assert batch.status == ImportStatus.COMPLETED.value
    assert batch.import_type == "contacts"
    assert (batch.matched_count, batch.added_count) == (1, 1)


def test_reserved_target_rejected(db, test_org, test_portfolio):
    with pytest.raises(MappingError):
        _run(db, test_org, test_portfolio, [{"Acct": "A1"}], mappings={"Acct": "id"})
