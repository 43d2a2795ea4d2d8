from datetime import datetime, timezone

from debtdesk.services.file_number_service import (
    FileNumberAllocator,
    format_file_number,
    get_last_value,
)


def test_format_file_number_pads_sequence():
    assert format_file_number(2026, 42) == "FN-2026-000042"
    assert format_file_number(2026, 1234567) == "FN-2026-1234567"


def test_allocator_starts_at_floor_on_fresh_tenant(db, test_org):
    year = datetime.now(timezone.utc).year
    allocator = FileNumberAllocator(db, test_org.id, start=7)

    first = allocator.allocate(allocator.floor_for(0))
    second = allocator.allocate(allocator.floor_for(1))
    db.commit()

    assert first == f"FN-{year}-000007"
    assert second == f"FN-{year}-000008"
    assert get_last_value(db, test_org.id, year) == 8


def test_allocator_never_goes_backwards(db, test_org):
    year = datetime.now(timezone.utc).year
    FileNumberAllocator(db, test_org.id, start=50).allocate(50)
    db.commit()

    allocator = FileNumberAllocator(db, test_org.id, start=1)
    assert allocator.allocate(allocator.floor_for(0)) == f"FN-{year}-000051"


def test_rollback_discards_sequence_advance(db, test_org):
    year = datetime.now(timezone.utc).year
    allocator = FileNumberAllocator(db, test_org.id)
    allocator.allocate(allocator.floor_for(0))
    db.commit()

    allocator.allocate(allocator.floor_for(1))
    db.rollback()

    assert get_last_value(db, test_org.id, year) == 1


def test_sequences_are_per_tenant(db, test_org):
    from debtdesk.services import org_service

    other = org_service.create_org(db, name="Other Agency", slug="other-agency")
    year = datetime.now(timezone.utc).year

    FileNumberAllocator(db, test_org.id).allocate(1)
    FileNumberAllocator(db, test_org.id).allocate(1)
    db.commit()

    assert FileNumberAllocator(db, other.id).allocate(1) == f"FN-{year}-000001"


def test_allocator_honours_zero_start_on_fresh_tenant(db, test_org):
    year = datetime.now(timezone.utc).year
    allocator = FileNumberAllocator(db, test_org.id, start=0)

    first = allocator.allocate(allocator.floor_for(0))
    second = allocator.allocate(allocator.floor_for(1))

    assert (first, second) == (f"FN-{year}-000000", f"FN-{year}-000001")
