"""Contact-only import: append phones/emails to accounts that already exist."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from debtdesk.core.structured_logging import build_log_context
from debtdesk.db.enums import ContactType, ImportType
from debtdesk.services import (
    account_detail_service,
    account_service,
    import_mapping_service,
    import_service,
)
from debtdesk.services.column_mapper import validate_mapping
from debtdesk.services.identity_resolver import IdentityResolver
from debtdesk.services.import_service import ImportResult
from debtdesk.services.import_transformers import coerce_record

logger = logging.getLogger(__name__)

NO_MATCH_ERROR = "No matching account found"


def import_contacts(
    db: Session,
    org_id: UUID,
    *,
    portfolio_id: UUID,
    records: list[dict[str, Any]],
    mappings: dict[str, str],
    mapping_id: UUID | None = None,
    file_name: str | None = None,
) -> ImportResult:
    """
    Match each row to an existing account in the portfolio (account number,
    or SSN when the row has none) and add its phone and/or email. Never creates accounts.
    """
    validate_mapping(mappings, ImportType.CONTACTS)
    portfolio = import_service.validate_request(
        db, org_id, portfolio_id=portfolio_id, records=records, mapping_id=mapping_id
    )

    batch = import_service.create_batch(
        db,
        org_id,
        portfolio.id,
        ImportType.CONTACTS,
        total_records=len(records),
        column_mapping=mappings,
        mapping_id=mapping_id,
        file_name=file_name,
    )
    batch_id = batch.id
    log_context = build_log_context(
        org_id=org_id,
        portfolio_id=portfolio.id,
        batch_id=batch_id,
        import_type=ImportType.CONTACTS.value,
    )
    result = ImportResult(
        import_type=ImportType.CONTACTS, batch_id=batch_id, total_records=len(records)
    )
    logger.info("Contact import started: %s records", len(records), extra=log_context)

    try:
        # Account number takes precedence over SSN; no cross-portfolio links
        resolver = IdentityResolver.from_accounts(
            portfolio.id,
            account_service.list_accounts(db, org_id, portfolio_id=portfolio.id),
            [],
        )

        for row, raw in enumerate(records, start=1):
            try:
                record = coerce_record(raw, mappings, import_type=ImportType.CONTACTS)
                match = resolver.match_by_precedence(
                    record.get("accountNumber"), record.get("ssn")
                )
                if match is None:
                    result.row_error(row, NO_MATCH_ERROR)
                    continue

                result.matched += 1
                for contact_type in (ContactType.PHONE, ContactType.EMAIL):
                    value = record.get(contact_type.value)
                    if not value:
                        continue
                    account_detail_service.create_contact(
                        db,
                        match.id,
                        contact_type=contact_type,
                        value=value,
                        label=record.get(f"{contact_type.value}Label"),
                        is_primary=False,
                    )
                    result.added += 1
            except Exception as exc:
                db.rollback()
                logger.warning(
                    "Contact import row failed: %s",
                    exc.__class__.__name__,
                    extra={**log_context, "row": row},
                )
                result.row_error(row, str(exc) or "Unknown error processing record")

        if mapping_id is not None:
            import_mapping_service.increment_usage(db, mapping_id)

        import_service.complete_batch(db, batch, result)
    except Exception as exc:
        db.rollback()
        logger.exception("Contact import failed", extra=log_context)
        import_service.fail_batch(db, batch_id, str(exc))
        raise

    logger.info(
        "Contact import completed: matched=%s added=%s errors=%s",
        result.matched,
        result.added,
        len(result.errors),
        extra=log_context,
    )
    return result
