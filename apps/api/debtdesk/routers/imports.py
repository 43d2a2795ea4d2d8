"""
Bulk import API endpoints.

Accounts and contacts arrive as already-parsed rows plus a column
mapping; the preview endpoint does the CSV parsing for the mapping screen.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile, status
from sqlalchemy.orm import Session

from debtdesk.core.deps import get_current_org_id, get_db
from debtdesk.core.rate_limit import import_limit, limiter
from debtdesk.db.enums import ImportType
from debtdesk.schemas.imports import (
    AccountImportRequest,
    AccountImportResponse,
    AccountImportResults,
    ContactImportRequest,
    ContactImportResponse,
    ContactImportResults,
    ImportBatchListItem,
    ImportBatchRead,
    ImportPreviewResponse,
    IncompleteAccountRead,
)
from debtdesk.services import (
    account_import_service,
    contact_import_service,
    import_service,
    reconciliation_service,
)
from debtdesk.services.column_mapper import MappingError
from debtdesk.services.import_service import ImportValidationError, PortfolioNotFoundError


router = APIRouter(prefix="/import", tags=["import"])


def _batch_error(exc: ValueError) -> HTTPException:
    """Whole-batch failures: unknown portfolio is 404, anything else 400."""
    if isinstance(exc, PortfolioNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post("/accounts", response_model=AccountImportResponse)
@limiter.limit(import_limit)
def import_accounts(
    request: Request,
    body: AccountImportRequest,
    org_id: UUID = Depends(get_current_org_id),
    db: Session = Depends(get_db),
):
    """Create, update or link accounts from mapped rows."""
    try:
        result = account_import_service.import_accounts(
            db,
            org_id,
            portfolio_id=body.portfolio_id,
            client_id=body.client_id,
            records=body.records,
            mappings=body.mappings,
            file_number_start=body.file_number_start,
            mapping_id=body.mapping_id,
            file_name=body.file_name,
        )
    except (MappingError, ImportValidationError, PortfolioNotFoundError) as e:
        raise _batch_error(e)

    return AccountImportResponse(
        success=True,
        results=AccountImportResults(
            created=result.created,
            updated=result.updated,
            linked=result.linked,
            errors=result.errors,
            warnings=result.warnings,
        ),
        message=result.message,
        batch_id=result.batch_id,
    )


@router.post("/contacts", response_model=ContactImportResponse)
@limiter.limit(import_limit)
def import_contacts(
    request: Request,
    body: ContactImportRequest,
    org_id: UUID = Depends(get_current_org_id),
    db: Session = Depends(get_db),
):
    """Append phones/emails to existing accounts; never creates accounts."""
    try:
        result = contact_import_service.import_contacts(
            db,
            org_id,
            portfolio_id=body.portfolio_id,
            records=body.records,
            mappings=body.mappings,
            mapping_id=body.mapping_id,
            file_name=body.file_name,
        )
    except (MappingError, ImportValidationError, PortfolioNotFoundError) as e:
        raise _batch_error(e)

    return ContactImportResponse(
        success=True,
        results=ContactImportResults(
            added=result.added,
            matched=result.matched,
            errors=result.errors,
        ),
        message=result.message,
        batch_id=result.batch_id,
    )


@router.post("/preview", response_model=ImportPreviewResponse)
@limiter.limit(import_limit)
async def preview_import(
    request: Request,
    file: UploadFile = File(..., description="CSV file to preview"),
    import_type: ImportType = Form(ImportType.ACCOUNTS),
    mapping_id: UUID | None = Form(None),
    org_id: UUID = Depends(get_current_org_id),
    db: Session = Depends(get_db),
):
    """
    Parse a CSV and return headers, sample rows and the starting mapping.

    The mapping has the chosen saved mapping (or the tenant default for the
    import type) applied; ``suggestedMapping`` is advisory only.
    """
    if not file.filename or not file.filename.lower().endswith(".csv"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File must be a CSV file",
        )

    content = await file.read()
    try:
        preview = import_service.preview_import(
            db, org_id, content, import_type, mapping_id=mapping_id
        )
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CSV file must be UTF-8 encoded",
        )
    except ImportValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ImportPreviewResponse(
        import_type=preview.import_type,
        headers=preview.headers,
        total_rows=preview.total_rows,
        sample_rows=preview.sample_rows,
        mapping=preview.mapping,
        suggested_mapping=preview.suggested_mapping,
        available_fields=preview.available_fields,
        applied_mapping_id=preview.applied_mapping_id,
    )


@router.get("/batches", response_model=list[ImportBatchListItem])
def list_batches(
    portfolio_id: UUID | None = Query(None, alias="portfolioId"),
    limit: int = Query(20, ge=1, le=100),
    org_id: UUID = Depends(get_current_org_id),
    db: Session = Depends(get_db),
):
    return import_service.list_batches(db, org_id, portfolio_id=portfolio_id, limit=limit)


@router.get("/batches/{batch_id:uuid}", response_model=ImportBatchRead)
def get_batch(
    batch_id: UUID,
    org_id: UUID = Depends(get_current_org_id),
    db: Session = Depends(get_db),
):
    batch = import_service.get_batch(db, org_id, batch_id)
    if not batch:
        raise HTTPException(status_code=404, detail="Import batch not found")
    return batch


@router.get("/batches/{batch_id:uuid}/incomplete", response_model=list[IncompleteAccountRead])
def list_incomplete_accounts(
    batch_id: UUID,
    org_id: UUID = Depends(get_current_org_id),
    db: Session = Depends(get_db),
):
    """Accounts from the batch still missing a child entity whose creation failed."""
    if not import_service.get_batch(db, org_id, batch_id):
        raise HTTPException(status_code=404, detail="Import batch not found")
    return reconciliation_service.find_incomplete_accounts(db, org_id, batch_id)
