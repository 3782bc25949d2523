"""
Seed script: an admin account and a starter watchlist.

Usage: python scripts/seed_data.py <admin_username> <admin_password>
"""

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from phoenixapi.core.security import hash_password
from phoenixapi.database.session import get_db_context
from phoenixapi.models import User, WatchlistEntry
from phoenixapi.models.watchlist import TermEnum

STARTER_WATCHLIST = [
    ("AAPL", "Apple Inc.", "Technology", TermEnum.LONG),
    ("NVDA", "NVIDIA Corporation", "Technology", TermEnum.LONG),
    ("JPM", "JPMorgan Chase & Co.", "Finance", TermEnum.LONG),
    ("XOM", "Exxon Mobil Corporation", "Energy", TermEnum.SHORT),
    ("JNJ", "Johnson & Johnson", "Healthcare", TermEnum.LONG),
]


def seed(admin_username: str, admin_password: str):
    with get_db_context() as db:
        admin = db.query(User).filter(User.username == admin_username).first()
        if admin is None:
            admin = User(
                username=admin_username,
                display_name=admin_username,
                password_hash=hash_password(admin_password),
                is_admin=True,
            )
            db.add(admin)
            db.flush()
            print(f"Created admin user {admin_username} (id={admin.id})")
        elif not admin.is_admin:
            admin.is_admin = True
            print(f"Promoted {admin_username} to admin")

        existing = {row[0] for row in db.query(WatchlistEntry.symbol).all()}
        added = 0
        for symbol, company, sector, term in STARTER_WATCHLIST:
            if symbol in existing:
                continue
            db.add(
                WatchlistEntry(
                    symbol=symbol,
                    company_name=company,
                    sector=sector,
                    term=term,
                    added_by=admin.id,
                )
            )
            added += 1
        print(f"Added {added} watchlist entries")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(1)
    seed(sys.argv[1], sys.argv[2])
