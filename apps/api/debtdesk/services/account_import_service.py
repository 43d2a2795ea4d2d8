"""Bulk account import.

Features:
- Column mapping + field coercion per row
- Identity resolution against a per-batch snapshot (update / create / link)
- File numbers from the tenant sequence, create path only
- Child fan-out (phones, emails, employment, references) as independent writes
- Portfolio rollup recomputed once at the end
- Per-row failures recorded, never raised
"""

import logging
import time
import uuid
from typing import Any, Callable
from uuid import UUID

from sqlalchemy.orm import Session

from debtdesk.core.config import settings
from debtdesk.core.structured_logging import build_log_context
from debtdesk.db.enums import (
    DEFAULT_ACCOUNT_STATUS,
    AccountStatus,
    ContactType,
    FanoutEntity,
    ImportType,
)
from debtdesk.db.models import Account
from debtdesk.services import (
    account_detail_service,
    account_service,
    import_mapping_service,
    import_service,
    portfolio_service,
)
from debtdesk.services.column_mapper import mapped_columns, validate_mapping
from debtdesk.services.file_number_service import FileNumberAllocator
from debtdesk.services.identity_resolver import IdentityResolver, ResolutionOutcome
from debtdesk.services.import_fields import (
    ACCOUNT_ROW_SPECS,
    CUSTOM_SLOT_NAMES,
    KNOWN_ACCOUNT_FIELDS,
    LEGACY_PHONE_FIELD,
    MAX_EMAILS,
    MAX_PHONES,
    MAX_REFERENCES,
    REFERENCE_SUBFIELDS,
    email_field,
    phone_field,
    reference_field,
)
from debtdesk.services.import_service import ImportResult
from debtdesk.services.import_transformers import CoercedRecord, coerce_record

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"
MISSING_KEY_ERROR = "Row missing account number and SSN - skipped"


# =============================================================================
# Record -> account fields
# =============================================================================


def _normalize_status(raw: str) -> str:
    status = str(raw).strip().lower()
    if status not in AccountStatus.values():
        raise ValueError(f"Invalid status '{raw}'")
    return status


def _account_row_fields(record: CoercedRecord) -> dict[str, Any]:
    """Mapped values that land directly on the account row, by model attribute."""
    fields: dict[str, Any] = {}
    for name, spec in ACCOUNT_ROW_SPECS.items():
        if name in record:
            fields[spec.attr] = record.get(name)
    if "status" in fields:
        fields["status"] = _normalize_status(fields["status"])
    return fields


def _custom_fields(record: CoercedRecord) -> dict[str, Any]:
    """customN slots plus any target outside the known field set."""
    return {
        target: value
        for target, value in record.values.items()
        if target in CUSTOM_SLOT_NAMES or target not in KNOWN_ACCOUNT_FIELDS
    }


def _custom_slot_labels(mappings: dict[str, str]) -> dict[str, str]:
    """{"custom3": "Branch"} for every column mapped onto a custom slot."""
    return {
        target: column
        for column, target in mapped_columns(mappings).items()
        if target in CUSTOM_SLOT_NAMES
    }


def synthesize_account_number() -> str:
    return f"AUTO-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


# =============================================================================
# Materializer
# =============================================================================


def _create_account(
    db: Session,
    org_id: UUID,
    portfolio_id: UUID,
    client_id: UUID | None,
    record: CoercedRecord,
    *,
    file_number: str,
    linked_account_id: UUID | None,
) -> Account:
    fields = _account_row_fields(record)
    custom = _custom_fields(record)

    fields["account_number"] = fields.get("account_number") or synthesize_account_number()
    fields.setdefault("first_name", UNKNOWN_NAME)
    fields.setdefault("last_name", UNKNOWN_NAME)
    fields.setdefault("original_balance", 0)
    fields.setdefault("current_balance", fields["original_balance"])
    fields.setdefault("status", DEFAULT_ACCOUNT_STATUS.value)
    if fields.get("ssn") and "ssn_last4" not in fields:
        fields["ssn_last4"] = fields["ssn"][-4:]

    return account_service.create_account(
        db,
        organization_id=org_id,
        portfolio_id=portfolio_id,
        client_id=client_id,
        linked_account_id=linked_account_id,
        file_number=file_number,
        custom_fields=custom or None,
        **fields,
    )


def _update_account(db: Session, org_id: UUID, account_id: UUID, record: CoercedRecord) -> Account:
    """Partial patch of the matched account; child groups are ignored here."""
    account = account_service.get_account(db, org_id, account_id)
    if account is None:
        raise ValueError("Matched account no longer exists")

    fields = _account_row_fields(record)
    if fields.get("ssn") and "ssn_last4" not in fields:
        fields["ssn_last4"] = fields["ssn"][-4:]

    custom = _custom_fields(record)
    if custom:
        merged = dict(account.custom_fields or {})
        merged.update(custom)
        fields["custom_fields"] = merged

    return account_service.update_account(db, account, fields)


class _Fanout:
    """Creates child entities for one new account, each as its own write."""

    def __init__(self, db: Session, account_id: UUID, row: int, log_context: dict[str, Any]):
        self.db = db
        self.account_id = account_id
        self.row = row
        self.log_context = log_context
        self.failures: list[dict[str, Any]] = []

    def attempt(self, entity: FanoutEntity, create: Callable[..., Any], **kwargs: Any) -> bool:
        try:
            create(self.db, self.account_id, **kwargs)
            return True
        except Exception as exc:
            self.db.rollback()
            logger.warning(
                "Child %s creation failed for account=%s: %s",
                entity.value,
                self.account_id,
                exc.__class__.__name__,
                extra=self.log_context,
            )
            self.failures.append(
                {
                    "row": self.row,
                    "account_id": str(self.account_id),
                    "entity": entity.value,
                    "error": str(exc),
                }
            )
            return False

    def contacts(
        self,
        record: CoercedRecord,
        contact_type: ContactType,
        entity: FanoutEntity,
        count: int,
        field_name: Callable[[int], str],
        fallback_label: str,
    ) -> None:
        created = 0
        for n in range(1, count + 1):
            value = record.get(field_name(n))
            if n == 1 and not value and contact_type == ContactType.PHONE:
                value = record.get(LEGACY_PHONE_FIELD.name)
            if not value or not str(value).strip():
                continue
            label = record.get(f"{field_name(n)}Label") or (
                "Primary" if created == 0 else f"{fallback_label} {created + 1}"
            )
            if self.attempt(
                entity,
                account_detail_service.create_contact,
                contact_type=contact_type,
                value=str(value).strip(),
                label=label,
                is_primary=created == 0,
            ):
                created += 1

    def employment(self, record: CoercedRecord) -> None:
        employer_name = record.get("employerName")
        if not employer_name or not str(employer_name).strip():
            return
        self.attempt(
            FanoutEntity.EMPLOYMENT,
            account_detail_service.create_employment_record,
            employer_name=str(employer_name).strip(),
            employer_phone=record.get("employerPhone"),
            employer_address=record.get("employerAddress"),
            position=record.get("position"),
            salary=record.get("salary"),
            is_current=True,
        )

    def references(self, record: CoercedRecord) -> None:
        for n in range(1, MAX_REFERENCES + 1):
            name = record.get(reference_field(n, "Name"))
            if not name or not str(name).strip():
                continue
            details = {
                attr: record.get(reference_field(n, subfield))
                for subfield, attr in REFERENCE_SUBFIELDS.items()
                if subfield != "Name"
            }
            self.attempt(
                FanoutEntity.REFERENCE,
                account_detail_service.create_reference,
                name=str(name).strip(),
                **details,
            )


def _create_children(
    db: Session, account_id: UUID, record: CoercedRecord, row: int, log_context: dict[str, Any]
) -> list[dict[str, Any]]:
    fanout = _Fanout(db, account_id, row, log_context)
    fanout.contacts(record, ContactType.PHONE, FanoutEntity.PHONE, MAX_PHONES, phone_field, "Phone")
    fanout.contacts(record, ContactType.EMAIL, FanoutEntity.EMAIL, MAX_EMAILS, email_field, "Email")
    fanout.employment(record)
    fanout.references(record)
    return fanout.failures


# =============================================================================
# Orchestration
# =============================================================================


def import_accounts(
    db: Session,
    org_id: UUID,
    *,
    portfolio_id: UUID,
    records: list[dict[str, Any]],
    mappings: dict[str, str],
    client_id: UUID | None = None,
    file_number_start: int | None = None,
    mapping_id: UUID | None = None,
    file_name: str | None = None,
    dedupe_within_batch: bool | None = None,
    currency_failure: str | None = None,
) -> ImportResult:
    """
    Import account rows into a portfolio.

    Raises (before any row is processed):
        MappingError: mapping targets a reserved field
        PortfolioNotFoundError: portfolio not in this tenant
        ImportValidationError: too many rows, unknown client or mapping
    """
    validate_mapping(mappings, ImportType.ACCOUNTS)
    portfolio = import_service.validate_request(
        db,
        org_id,
        portfolio_id=portfolio_id,
        records=records,
        client_id=client_id,
        mapping_id=mapping_id,
    )
    if dedupe_within_batch is None:
        dedupe_within_batch = settings.IMPORT_DEDUPE_WITHIN_BATCH

    batch = import_service.create_batch(
        db,
        org_id,
        portfolio.id,
        ImportType.ACCOUNTS,
        total_records=len(records),
        column_mapping=mappings,
        mapping_id=mapping_id,
        file_name=file_name,
        file_number_start=file_number_start,
    )
    batch_id = batch.id
    log_context = build_log_context(
        org_id=org_id,
        portfolio_id=portfolio.id,
        batch_id=batch_id,
        import_type=ImportType.ACCOUNTS.value,
    )
    result = ImportResult(
        import_type=ImportType.ACCOUNTS, batch_id=batch_id, total_records=len(records)
    )
    logger.info("Account import started: %s records", len(records), extra=log_context)

    try:
        portfolio_service.register_custom_field_labels(db, portfolio, _custom_slot_labels(mappings))

        resolver = IdentityResolver.from_accounts(
            portfolio.id,
            account_service.list_accounts(db, org_id, portfolio_id=portfolio.id),
            account_service.list_accounts(db, org_id),
        )
        allocator = FileNumberAllocator(db, org_id, file_number_start)

        for row, raw in enumerate(records, start=1):
            row_context = {**log_context, "row": row}
            try:
                record = coerce_record(
                    raw,
                    mappings,
                    import_type=ImportType.ACCOUNTS,
                    currency_failure=currency_failure,
                )
                for warning in record.warnings:
                    result.row_warning(row, warning)

                resolution = resolver.resolve(record)
                if resolution.outcome == ResolutionOutcome.REJECT:
                    result.row_error(row, MISSING_KEY_ERROR)
                    continue

                if resolution.outcome == ResolutionOutcome.UPDATE:
                    _update_account(db, org_id, resolution.match.id, record)
                    result.updated += 1
                    continue

                file_number = allocator.allocate(allocator.floor_for(result.created))
                account = _create_account(
                    db,
                    org_id,
                    portfolio.id,
                    client_id,
                    record,
                    file_number=file_number,
                    linked_account_id=resolution.linked.id if resolution.linked else None,
                )
                result.created += 1
                if resolution.linked:
                    result.linked += 1
                if dedupe_within_batch:
                    resolver.register_created(account)

                result.fanout_failures.extend(
                    _create_children(db, account.id, record, row, row_context)
                )
            except Exception as exc:
                db.rollback()
                logger.warning(
                    "Account import row failed: %s", exc.__class__.__name__, extra=row_context
                )
                result.row_error(row, str(exc) or "Unknown error processing record")

        portfolio = portfolio_service.get_portfolio(db, org_id, portfolio_id)
        portfolio_service.recompute_totals(db, portfolio)

        if mapping_id is not None:
            import_mapping_service.increment_usage(db, mapping_id)

        import_service.complete_batch(db, batch, result)
    except Exception as exc:
        db.rollback()
        logger.exception("Account import failed", extra=log_context)
        import_service.fail_batch(db, batch_id, str(exc))
        raise

    logger.info(
        "Account import completed: created=%s updated=%s linked=%s errors=%s fanout_failures=%s",
        result.created,
        result.updated,
        result.linked,
        len(result.errors),
        len(result.fanout_failures),
        extra=log_context,
    )
    return result
