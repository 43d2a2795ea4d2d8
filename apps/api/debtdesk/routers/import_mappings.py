"""Saved import mapping endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from debtdesk.core.deps import get_current_org_id, get_db
from debtdesk.db.enums import ImportType
from debtdesk.schemas.import_mapping import (
    ImportMappingCreate,
    ImportMappingRead,
    ImportMappingUpdate,
)
from debtdesk.services import import_mapping_service
from debtdesk.services.column_mapper import MappingError, validate_mapping


router = APIRouter(prefix="/import-mappings", tags=["import-mappings"])


@router.get("", response_model=list[ImportMappingRead])
def list_mappings(
    import_type: ImportType | None = Query(None, alias="importType"),
    org_id: UUID = Depends(get_current_org_id),
    db: Session = Depends(get_db),
):
    return import_mapping_service.list_mappings(db, org_id, import_type)


@router.post("", response_model=ImportMappingRead, status_code=201)
def create_mapping(
    body: ImportMappingCreate,
    org_id: UUID = Depends(get_current_org_id),
    db: Session = Depends(get_db),
):
    try:
        validate_mapping(body.field_mappings, body.import_type)
    except MappingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return import_mapping_service.create_mapping(
        db=db,
        org_id=org_id,
        name=body.name,
        import_type=body.import_type,
        field_mappings=body.field_mappings,
        description=body.description,
        is_default=body.is_default,
    )


@router.get("/{mapping_id:uuid}", response_model=ImportMappingRead)
def get_mapping(
    mapping_id: UUID,
    org_id: UUID = Depends(get_current_org_id),
    db: Session = Depends(get_db),
):
    mapping = import_mapping_service.get_mapping(db, org_id, mapping_id)
    if not mapping:
        raise HTTPException(status_code=404, detail="Import mapping not found")
    return mapping


@router.patch("/{mapping_id:uuid}", response_model=ImportMappingRead)
def update_mapping(
    mapping_id: UUID,
    body: ImportMappingUpdate,
    org_id: UUID = Depends(get_current_org_id),
    db: Session = Depends(get_db),
):
    mapping = import_mapping_service.get_mapping(db, org_id, mapping_id)
    if not mapping:
        raise HTTPException(status_code=404, detail="Import mapping not found")

    if body.field_mappings is not None:
        try:
            validate_mapping(body.field_mappings, mapping.import_type)
        except MappingError as e:
            raise HTTPException(status_code=400, detail=str(e))

    return import_mapping_service.update_mapping(
        db=db,
        mapping=mapping,
        name=body.name,
        description=body.description,
        field_mappings=body.field_mappings,
        is_default=body.is_default,
    )


@router.delete("/{mapping_id:uuid}", status_code=204)
def delete_mapping(
    mapping_id: UUID,
    org_id: UUID = Depends(get_current_org_id),
    db: Session = Depends(get_db),
):
    mapping = import_mapping_service.get_mapping(db, org_id, mapping_id)
    if not mapping:
        raise HTTPException(status_code=404, detail="Import mapping not found")
    import_mapping_service.delete_mapping(db, mapping)
