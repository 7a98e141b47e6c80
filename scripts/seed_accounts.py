from __future__ import annotations

import argparse
from pathlib import Path

from sqlmodel import Session

from app.db.init_db import init_db
from app.db.session import engine
from app.services.account_seed import default_accounts, load_accounts, seed_accounts


def main() -> None:
    parser = argparse.ArgumentParser(description='Seed the admin and demo accounts.')
    parser.add_argument(
        '--path',
        default=None,
        help='Optional JSON file with {"accounts": [...]}; defaults to the configured admin and demo users',
    )
    parser.add_argument('--dry-run', action='store_true', help='Validate only, do not write to DB')
    args = parser.parse_args()

    accounts = load_accounts(Path(args.path).expanduser()) if args.path else default_accounts()
    if args.dry_run:
        print(f"validated {len(accounts)} seed accounts")
        return

    init_db()
    with Session(engine) as session:
        summary = seed_accounts(session, accounts)
    print(
        f"seeded accounts: created={summary.created} updated={summary.updated} skipped={summary.skipped}"
    )


if __name__ == '__main__':
    main()
