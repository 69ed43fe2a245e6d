#!/usr/bin/env python3
"""
Load jobs from a JSON export into the SQLite database.

Usage:
    python scripts/load_jobs_to_db.py --json data/jobs.json --db data/jobs.db
    python scripts/load_jobs_to_db.py --json data/jobs.json --db data/jobs.db --verify
"""

import argparse
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from similarjobs.database import Job, get_session
from similarjobs.storage import load_jobs
from storage.repositories.jobs import load_records


def load(json_path: Path, db_path: Path, dry_run: bool = False) -> int:
    """
    Load jobs from JSON into the database.

    Args:
        json_path: Path to JSON file (list of jobs or {"jobs": [...]})
        db_path: Path to SQLite database file
        dry_run: If True, don't write to database

    Returns:
        Number of jobs written
    """
    print(f"Loading jobs from {json_path}...")
    records, rejected = load_jobs(json_path)
    print(f"Found {len(records)} valid jobs, {len(rejected)} rejected")
    for job_id, errors in rejected.items():
        print(f"  ✗ {job_id}: {'; '.join(errors)}")

    if dry_run:
        print("\n[DRY RUN] Would load the following jobs:")
        for i, record in enumerate(records[:5], 1):
            print(f"  {i}. {record.id}: {record.company_name or '-'} - {record.title}")
        if len(records) > 5:
            print(f"  ... and {len(records) - 5} more")
        return 0

    print(f"\nInitializing database at {db_path}...")
    try:
        new, updated = load_records(records, db_path)
    except Exception as e:
        print(f"\n❌ Load failed: {e}")
        raise

    print(f"\n✅ Loaded {new + updated} jobs (new={new}, updated={updated})")
    return new + updated


def verify(json_path: Path, db_path: Path) -> bool:
    """Check that every valid job in the JSON file exists in the database."""
    records, _ = load_jobs(json_path)
    session = get_session(db_path)
    try:
        db_ids = {row.id for row in session.query(Job.id).all()}
    finally:
        session.close()

    missing = [r.id for r in records if r.id not in db_ids]
    if missing:
        print(f"\n❌ {len(missing)} jobs missing from database:")
        for job_id in missing[:10]:
            print(f"  - {job_id}")
        return False
    print(f"\n✅ All {len(records)} jobs present in database")
    return True


def main():
    parser = argparse.ArgumentParser(description="Load jobs from JSON into SQLite")
    parser.add_argument("--json", required=True, help="Path to JSON job export")
    parser.add_argument("--db", default="data/jobs.db", help="Path to SQLite database")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be loaded")
    parser.add_argument("--verify", action="store_true", help="Verify the database after loading")
    args = parser.parse_args()

    json_path = Path(args.json)
    if not json_path.exists():
        print(f"❌ JSON file not found: {json_path}")
        sys.exit(1)

    load(json_path, Path(args.db), dry_run=args.dry_run)
    if args.verify and not args.dry_run:
        sys.exit(0 if verify(json_path, Path(args.db)) else 1)


if __name__ == "__main__":
    main()
