#!/usr/bin/env python3
"""
Seed the group store with the agency's core nationwide/regional groups.

Usage:
    python scripts/seed_groups.py --db data/groups.db
    python scripts/seed_groups.py --export data/seed_groups.json
"""

import argparse
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from geomatch.database import init_database, get_session, upsert_group
from geomatch.schema import validate_group
from geomatch.storage import save_records

PRODUCTION_GROUPS = [
    {
        "id": "jobsisrael",
        "name": "דרושים ודרושות בכל הארץ",
        "url": "https://www.facebook.com/groups/jobsisrael",
        "keywords": ["all", "general", "עבודה", "דרושים"],
        "is_member": True,
    },
    {
        "id": "adminjobs",
        "name": "משרות אדמיניסטרציה ושירות לקוחות",
        "url": "https://www.facebook.com/groups/adminjobs",
        "keywords": ["admin", "office", "service", "שירות", "מכירות", "אדמיניסטרציה", "משרד"],
        "is_member": True,
    },
    {
        "id": "centerjobsil",
        "name": "דרושים במרכז והסביבה",
        "url": "https://www.facebook.com/groups/centerjobsil",
        "keywords": ["center", "general", "מרכז"],
        "region": "center",
        "is_member": True,
    },
    {
        "id": "juniorhitech",
        "name": "דרושים הייטק - ללא ניסיון / ג'וניורים",
        "url": "https://www.facebook.com/groups/juniorhitech",
        "keywords": ["junior", "entry", "hitech", "ג'וניור", "הייטק", "מתכנת"],
        "is_member": True,
    },
]


def seed(db_path: Path, dry_run: bool = False) -> bool:
    """
    Upsert PRODUCTION_GROUPS into the store.

    Args:
        db_path: Path to SQLite database file
        dry_run: If True, don't write to database
    """
    if dry_run:
        print("[DRY RUN] Would seed the following groups:")
        for i, g in enumerate(PRODUCTION_GROUPS, 1):
            print(f"  {i}. {g['id']}: {g['name']}")
        return True

    print(f"Initializing database at {db_path}...")
    init_database(db_path)
    session = get_session(db_path)

    counts = {"new": 0, "updated": 0, "no-change": 0}
    try:
        for record in PRODUCTION_GROUPS:
            errors = validate_group(record)
            if errors:
                print(f"⚠️  Skipping {record.get('id')}: {errors}")
                continue
            status = upsert_group(session, record)
            counts[status] += 1
            print(f"  [{status}] {record['name']}")
        session.commit()
    except Exception as e:
        session.rollback()
        print(f"❌ Failed to seed groups: {e}")
        return False
    finally:
        session.close()

    print(f"\n✅ Seeding complete! new={counts['new']} updated={counts['updated']} no-change={counts['no-change']}")
    return True


def main():
    parser = argparse.ArgumentParser(description="Seed core distribution groups")
    parser.add_argument("--db", type=Path, default=Path("data/groups.db"),
                       help="Path to SQLite database file")
    parser.add_argument("--export", type=Path,
                       help="Write the seed list to a JSON file instead of the database")
    parser.add_argument("--dry-run", action="store_true",
                       help="Show what would be seeded without writing")

    args = parser.parse_args()

    if args.export:
        save_records(args.export, PRODUCTION_GROUPS, key="groups")
        print(f"Wrote {len(PRODUCTION_GROUPS)} groups to {args.export}")
        return

    if not seed(args.db, dry_run=args.dry_run):
        sys.exit(1)


if __name__ == "__main__":
    main()
