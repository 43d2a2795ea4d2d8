"""File number allocation (FN-{year}-{seq}).

Numbers come from a per-tenant, per-year sequence row. The row is locked
with SELECT ... FOR UPDATE and only flushed here; the caller's account
insert commits it, so a failed insert rolls the advance back with it.
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from debtdesk.core.config import settings
from debtdesk.db.models import FileNumberSequence

logger = logging.getLogger(__name__)


def format_file_number(year: int, seq: int) -> str:
    """FN-2026-000042"""
    return f"{settings.FILE_NUMBER_PREFIX}-{year}-{seq:0{settings.FILE_NUMBER_WIDTH}d}"


def _lock_sequence(db: Session, org_id: UUID, year: int, seed: int = 0) -> FileNumberSequence:
    """Lock the tenant's sequence row, creating it at ``seed`` if missing."""
    sequence = (
        db.query(FileNumberSequence)
        .filter(
            FileNumberSequence.organization_id == org_id,
            FileNumberSequence.year == year,
        )
        .with_for_update()
        .first()
    )
    if sequence is None:
        sequence = FileNumberSequence(organization_id=org_id, year=year, last_value=seed)
        db.add(sequence)
        db.flush()
    return sequence


def get_last_value(db: Session, org_id: UUID, year: int) -> int:
    """Last sequence value handed out for a tenant and year (0 if none)."""
    sequence = (
        db.query(FileNumberSequence)
        .filter(
            FileNumberSequence.organization_id == org_id,
            FileNumberSequence.year == year,
        )
        .first()
    )
    return sequence.last_value if sequence else 0


class FileNumberAllocator:
    """
    Hands out file numbers for one import batch.

    ``floor`` is the batch-relative value (start + creations so far). On a
    tenant with no earlier numbers that is exactly what gets allocated;
    otherwise the sequence continues past numbers already in use.
    """

    def __init__(self, db: Session, org_id: UUID, start: int | None = None):
        self.db = db
        self.org_id = org_id
        self.start = start if start is not None else settings.DEFAULT_FILE_NUMBER_START

    def floor_for(self, created_so_far: int) -> int:
        return self.start + created_so_far

    def allocate(self, floor: int) -> str:
        """Advance the sequence (flush only) and return the formatted number."""
        year = datetime.now(timezone.utc).year
        # A new row starts just below the floor so the first number is the floor itself
        sequence = _lock_sequence(self.db, self.org_id, year, seed=floor - 1)
        seq = max(sequence.last_value + 1, floor)
        if seq != floor:
            logger.debug(
                "File number floor %s already used for org=%s year=%s, allocating %s",
                floor,
                self.org_id,
                year,
                seq,
            )
        sequence.last_value = seq
        self.db.flush()
        return format_file_number(year, seq)
