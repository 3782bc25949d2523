from datetime import datetime, timezone
from decimal import Decimal

import pytest

from phoenixapi.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from phoenixapi.schemas.watchlist import (
    AdminEntryCreate,
    EntryUpdate,
    Term,
    WatchlistEntrySchema,
)
from phoenixapi.services.watchlist_service import WatchlistService, group_by_sector


def _entry(id, symbol, sector, term=Term.LONG):
    return WatchlistEntrySchema(
        id=id,
        symbol=symbol,
        company_name=f"{symbol} Inc",
        sector=sector,
        term=term,
        added_by=1,
        added_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


class TestGroupBySector:
    def test_known_sectors_follow_canonical_order(self):
        grouped = group_by_sector(
            [
                _entry(1, "XOM", "Energy"),
                _entry(2, "AAPL", "Technology"),
                _entry(3, "JPM", "Finance"),
            ]
        )

        assert list(grouped) == ["Technology", "Finance", "Energy"]

    def test_unknown_sectors_sort_after_known_ones(self):
        grouped = group_by_sector(
            [
                _entry(1, "ZZZ", "Zeta"),
                _entry(2, "AAA", "Alpha"),
                _entry(3, "NEE", "Utilities"),
            ]
        )

        assert list(grouped) == ["Utilities", "Alpha", "Zeta"]

    def test_terms_split_and_symbols_sorted(self):
        grouped = group_by_sector(
            [
                _entry(1, "NVDA", "Technology"),
                _entry(2, "AMD", "Technology", Term.SHORT),
                _entry(3, "AAPL", "Technology"),
            ]
        )

        tech = grouped["Technology"]
        assert [e.symbol for e in tech.long] == ["AAPL", "NVDA"]
        assert [e.symbol for e in tech.short] == ["AMD"]

    def test_empty_input(self):
        assert group_by_sector([]) == {}


@pytest.fixture
def service(db):
    return WatchlistService(db)


def _create(**overrides):
    data = {
        "symbol": "msft",
        "company_name": "Microsoft",
        "sector": "Technology",
        "term": "long",
        "current_price": "410.50",
    }
    data.update(overrides)
    return AdminEntryCreate(**data)


def test_admin_add_entry(service, admin):
    entry = service.add_entry(_create(), admin)

    assert entry.symbol == "MSFT"
    assert entry.added_by == admin.id
    assert entry.submission_id is None
    assert entry.current_price == Decimal("410.50")


def test_non_admin_cannot_add(service, alice):
    with pytest.raises(PermissionDeniedError):
        service.add_entry(_create(), alice)


def test_add_rejects_unknown_sector(service, admin):
    with pytest.raises(ValidationError) as exc_info:
        service.add_entry(_create(sector="Crypto"), admin)

    assert exc_info.value.details["field"] == "sector"


def test_grouped_counts_all_entries(service, admin):
    service.add_entry(_create(), admin)
    service.add_entry(_create(symbol="XOM", company_name="Exxon", sector="Energy"), admin)

    grouped = service.grouped()

    assert grouped.total_count == 2
    assert list(grouped.sectors) == ["Technology", "Energy"]


def test_update_entry_changes_given_fields(service, admin):
    entry = service.add_entry(_create(notes="Cloud"), admin)

    updated = service.update_entry(entry.id, EntryUpdate(target_price="500"), admin)

    assert updated.target_price == Decimal("500")
    assert updated.notes == "Cloud"


def test_update_missing_entry(service, admin):
    with pytest.raises(NotFoundError):
        service.update_entry(404, EntryUpdate(notes="x"), admin)


def test_delete_entry(service, admin, alice):
    entry = service.add_entry(_create(), admin)

    with pytest.raises(PermissionDeniedError):
        service.delete_entry(entry.id, alice)

    service.delete_entry(entry.id, admin)
    assert service.list_entries() == []
    with pytest.raises(NotFoundError):
        service.delete_entry(entry.id, admin)
