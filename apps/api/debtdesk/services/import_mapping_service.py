"""Saved column mappings ("schemas") for bulk imports."""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from debtdesk.db.enums import ImportType
from debtdesk.db.models import ImportMapping


def list_mappings(
    db: Session, org_id: UUID, import_type: ImportType | None = None
) -> list[ImportMapping]:
    query = db.query(ImportMapping).filter(ImportMapping.organization_id == org_id)
    if import_type is not None:
        query = query.filter(ImportMapping.import_type == import_type.value)
    return query.order_by(ImportMapping.created_at.desc()).all()


def get_mapping(db: Session, org_id: UUID, mapping_id: UUID) -> ImportMapping | None:
    return (
        db.query(ImportMapping)
        .filter(
            ImportMapping.organization_id == org_id,
            ImportMapping.id == mapping_id,
        )
        .first()
    )


def get_default_mapping(
    db: Session, org_id: UUID, import_type: ImportType
) -> ImportMapping | None:
    return (
        db.query(ImportMapping)
        .filter(
            ImportMapping.organization_id == org_id,
            ImportMapping.import_type == import_type.value,
            ImportMapping.is_default.is_(True),
        )
        .first()
    )


def _clear_default(
    db: Session, org_id: UUID, import_type: str, exclude_id: UUID | None = None
) -> None:
    query = db.query(ImportMapping).filter(
        ImportMapping.organization_id == org_id,
        ImportMapping.import_type == import_type,
        ImportMapping.is_default.is_(True),
    )
    if exclude_id:
        query = query.filter(ImportMapping.id != exclude_id)
    query.update({ImportMapping.is_default: False})
    # Flush so the partial unique index never sees two defaults
    db.flush()


def create_mapping(
    db: Session,
    org_id: UUID,
    *,
    name: str,
    import_type: ImportType,
    field_mappings: dict[str, str],
    description: str | None = None,
    is_default: bool = False,
) -> ImportMapping:
    if is_default:
        _clear_default(db, org_id, import_type.value)

    mapping = ImportMapping(
        organization_id=org_id,
        name=name,
        description=description,
        import_type=import_type.value,
        field_mappings=field_mappings,
        is_default=is_default,
    )
    db.add(mapping)
    db.commit()
    db.refresh(mapping)
    return mapping


def update_mapping(
    db: Session,
    mapping: ImportMapping,
    *,
    name: str | None = None,
    description: str | None = None,
    field_mappings: dict[str, str] | None = None,
    is_default: bool | None = None,
) -> ImportMapping:
    if is_default is True:
        _clear_default(db, mapping.organization_id, mapping.import_type, exclude_id=mapping.id)
        mapping.is_default = True
    elif is_default is False:
        mapping.is_default = False

    if name is not None:
        mapping.name = name
    if description is not None:
        mapping.description = description
    if field_mappings is not None:
        mapping.field_mappings = field_mappings

    db.commit()
    db.refresh(mapping)
    return mapping


def delete_mapping(db: Session, mapping: ImportMapping) -> None:
    db.delete(mapping)
    db.commit()


def increment_usage(db: Session, mapping_id: UUID) -> None:
    """Increment the usage count and update last_used_at."""
    db.query(ImportMapping).filter(ImportMapping.id == mapping_id).update(
        {
            "usage_count": ImportMapping.usage_count + 1,
            "last_used_at": datetime.now(timezone.utc),
        }
    )
    db.commit()
