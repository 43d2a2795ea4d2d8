"""Pydantic schemas for saved import mappings."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from debtdesk.db.enums import ImportType
from debtdesk.schemas.base import CamelModel


class ImportMappingBase(CamelModel):
    name: str = Field(min_length=1, max_length=100, description="Mapping name")
    description: str | None = Field(default=None, max_length=500)
    is_default: bool = Field(default=False, description="Apply automatically on preview")


class ImportMappingCreate(ImportMappingBase):
    import_type: ImportType
    field_mappings: dict[str, str] = Field(
        description="Source column -> target field (or 'skip')",
    )


class ImportMappingUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    is_default: bool | None = None
    field_mappings: dict[str, str] | None = None


class ImportMappingRead(ImportMappingBase):
    id: UUID
    organization_id: UUID
    import_type: ImportType
    field_mappings: dict[str, str]
    usage_count: int
    last_used_at: datetime | None
    created_at: datetime
    updated_at: datetime
