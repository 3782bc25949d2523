"""
Watchlist Service

Published watchlist entries: listing, sector grouping and admin edits.
"""

import logging
from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from phoenixapi.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from phoenixapi.repositories.watchlist_repository import WatchlistEntryRepository
from phoenixapi.schemas.user import User as UserSchema
from phoenixapi.schemas.watchlist import (
    SECTORS,
    AdminEntryCreate,
    EntryDraft,
    EntryUpdate,
    GroupedWatchlist,
    SectorGroup,
    Term,
    WatchlistEntrySchema,
)

logger = logging.getLogger(__name__)


def validate_draft(draft: EntryDraft) -> None:
    """Raise ValidationError for a draft that cannot become an entry"""
    if not draft.symbol:
        raise ValidationError("Symbol is required", {"field": "symbol"})
    if not draft.company_name:
        raise ValidationError("Company name is required", {"field": "company_name"})
    if draft.sector not in SECTORS:
        raise ValidationError(
            f"Unknown sector: {draft.sector}",
            {"field": "sector", "allowed": SECTORS},
        )


def group_by_sector(entries: Iterable[WatchlistEntrySchema]) -> Dict[str, SectorGroup]:
    """Bucket entries by sector and term.

    Known sectors come first in SECTORS order, any others after them
    alphabetically. Within a bucket entries are sorted by symbol; the sort is
    stable so equal symbols keep their input order.
    """
    buckets: Dict[str, SectorGroup] = {}
    for entry in entries:
        group = buckets.setdefault(entry.sector, SectorGroup())
        if entry.term == Term.SHORT:
            group.short.append(entry)
        else:
            group.long.append(entry)

    for group in buckets.values():
        group.long.sort(key=lambda e: e.symbol)
        group.short.sort(key=lambda e: e.symbol)

    def sector_key(sector: str):
        if sector in SECTORS:
            return (0, SECTORS.index(sector), sector)
        return (1, 0, sector)

    return {sector: buckets[sector] for sector in sorted(buckets, key=sector_key)}


def _require_admin(user: UserSchema) -> None:
    if not user.is_admin:
        raise PermissionDeniedError("Admin access required")


class WatchlistService:
    def __init__(self, db: Session):
        self.db = db
        self.entry_repo = WatchlistEntryRepository(db)

    def list_entries(self) -> List[WatchlistEntrySchema]:
        return self.entry_repo.list_ordered()

    def grouped(self) -> GroupedWatchlist:
        entries = self.list_entries()
        return GroupedWatchlist(sectors=group_by_sector(entries), total_count=len(entries))

    def get_entry(self, entry_id: int) -> WatchlistEntrySchema:
        entry = self.entry_repo.get_by_id(entry_id)
        if entry is None:
            raise NotFoundError(f"Watchlist entry not found: {entry_id}", {"entry_id": entry_id})
        return entry

    def add_entry(self, draft: AdminEntryCreate, admin: UserSchema) -> WatchlistEntrySchema:
        """Direct admin add; the entry has no originating submission"""
        _require_admin(admin)
        validate_draft(draft)
        entry = self.entry_repo.create(
            symbol=draft.symbol,
            company_name=draft.company_name,
            sector=draft.sector,
            term=draft.term,
            notes=draft.notes,
            current_price=draft.current_price,
            target_price=draft.target_price,
            added_by=admin.id,
            submission_id=None,
        )
        logger.info(f"Admin {admin.id} added {draft.symbol} to the watchlist")
        return entry

    def update_entry(
        self, entry_id: int, update: EntryUpdate, admin: UserSchema
    ) -> WatchlistEntrySchema:
        _require_admin(admin)
        self.get_entry(entry_id)
        changes = update.model_dump(exclude_unset=True)
        if not changes:
            return self.get_entry(entry_id)
        return self.entry_repo.update(entry_id, **changes)

    def delete_entry(self, entry_id: int, admin: UserSchema) -> None:
        _require_admin(admin)
        if not self.entry_repo.delete(entry_id):
            raise NotFoundError(f"Watchlist entry not found: {entry_id}", {"entry_id": entry_id})
        logger.info(f"Admin {admin.id} deleted watchlist entry {entry_id}")
