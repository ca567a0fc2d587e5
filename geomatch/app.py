import argparse
import json
from pathlib import Path

from . import __version__
from .database import get_session, init_database, list_member_groups, upsert_group
from .env import get_settings, load_env
from .logger import get_logger
from .normalize import analyze_group, normalize_location
from .schema import DistributionGroup, JobPosting, validate_group, validate_job
from .scoring import MAX_RECOMMENDED_GROUPS, geo_score, recommend_groups
from .storage import load_records


def _split_tags(raw):
    return [t.strip() for t in raw.split(",") if t.strip()] if raw else []


def _load_json(input_path: Path):
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise SystemExit(f"Invalid JSON in {input_path}: {e}")


def cmd_normalize(args: argparse.Namespace) -> None:
    loc = normalize_location(args.location)
    print(f"City: {loc.city or '-'}")
    print(f"Region: {loc.region}")


def cmd_score(args: argparse.Namespace) -> None:
    tags = _split_tags(args.tags)
    geo = analyze_group(args.group_name, tags, args.region)
    score = geo_score(args.location, args.group_name, tags, args.region)
    print(f"Group cities: {', '.join(sorted(geo.cities)) or '-'}")
    print(f"Group region: {geo.region}")
    print(f"Geo score: {score}")


def _load_job(args: argparse.Namespace) -> JobPosting:
    if args.job:
        record = _load_json(Path(args.job))
        errors = validate_job(record)
        if errors:
            raise SystemExit("Invalid job: " + "; ".join(errors))
        return JobPosting.from_record(record)
    if not args.title:
        raise SystemExit("Provide --job FILE or --title (with optional --location/--description)")
    return JobPosting.from_record(
        {"title": args.title, "location": args.location or "", "description": args.description or ""}
    )


def _load_groups(args: argparse.Namespace):
    if args.groups:
        groups_path = Path(args.groups)
        if not groups_path.exists():
            raise SystemExit(f"Groups file not found: {groups_path}")
        groups = []
        for record in load_records(groups_path, key="groups"):
            errors = validate_group(record)
            if errors:
                print(f"[skip] {record.get('id') or record.get('name')} - {errors}")
                continue
            group = DistributionGroup.from_record(record)
            if group.is_member:
                groups.append(group)
        return groups

    db_path = Path(args.db) if args.db else get_settings()["db_path"]
    if not db_path.exists():
        raise SystemExit(f"Group store not found: {db_path}. Run 'seed-groups' first.")
    session = get_session(db_path)
    try:
        return list_member_groups(session)
    finally:
        session.close()


def cmd_recommend(args: argparse.Namespace) -> None:
    job = _load_job(args)
    groups = _load_groups(args)
    ranked = recommend_groups(job, groups, limit=args.limit)
    if not ranked:
        print("No relevant groups found.")
        return
    print(f"Top {len(ranked)} groups for '{job.title}' ({job.location or 'no location'}):")
    for g in ranked:
        print(f" - [{g.score}] {g.name} ({g.url or g.group_id})")


def cmd_seed_groups(args: argparse.Namespace) -> None:
    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    db_path = Path(args.db) if args.db else get_settings()["db_path"]
    init_database(db_path)
    session = get_session(db_path)
    new = upd = same = skip = 0
    try:
        for record in load_records(input_path, key="groups"):
            errors = validate_group(record)
            if errors:
                print(f"[validation_error] {record.get('id')} - {errors}")
                skip += 1
                continue
            status = upsert_group(session, record)
            if status == "new":
                new += 1
            elif status == "updated":
                upd += 1
            else:
                same += 1
            print(f"[{status}] {record['id']}")
        session.commit()
    finally:
        session.close()
    print(f"Done. new={new} updated={upd} no-change={same} skipped={skip}")


def cmd_list_groups(args: argparse.Namespace) -> None:
    db_path = Path(args.db) if args.db else get_settings()["db_path"]
    if not db_path.exists():
        print(f"Group store not found: {db_path}")
        return
    session = get_session(db_path)
    try:
        groups = list_member_groups(session)
    finally:
        session.close()
    if not groups:
        print("No member groups in store.")
        return
    print(f"Found {len(groups)} member groups in {db_path}:\n")
    for g in groups:
        print(f"ID: {g.group_id}")
        print(f"  Name: {g.name}")
        print(f"  URL: {g.url}")
        print(f"  Region: {g.region}")
        print(f"  Tags: {', '.join(g.location_tags) or '-'}")
        print()


def cmd_validate(args: argparse.Namespace) -> None:
    record = _load_json(Path(args.input))
    errors = validate_job(record) if args.kind == "job" else validate_group(record)
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)
    print("Valid")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="geomatch", description="Geo-aware group recommendations for job posts")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    nrm = subparsers.add_parser("normalize", help="Resolve a free-text location to city and region")
    nrm.add_argument("--location", required=True, help="Location text, e.g. \"ראשל״צ והסביבה\"")
    nrm.set_defaults(func=cmd_normalize)

    scr = subparsers.add_parser("score", help="Geo score of a job location against one group")
    scr.add_argument("--location", required=True, help="Job location text")
    scr.add_argument("--group-name", required=True, help="Group display name")
    scr.add_argument("--tags", help="Comma-separated group location tags")
    scr.add_argument("--region", help="Declared group region (center, south, ... or Hebrew name)")
    scr.set_defaults(func=cmd_score)

    rec = subparsers.add_parser("recommend", help=f"Recommend up to {MAX_RECOMMENDED_GROUPS} groups for a job")
    rec.add_argument("--job", help="Path to job JSON (title, location, description)")
    rec.add_argument("--title", help="Job title (instead of --job)")
    rec.add_argument("--location", help="Job location (with --title)")
    rec.add_argument("--description", help="Job description (with --title)")
    rec.add_argument("--groups", help="Path to groups JSON; defaults to the group store")
    rec.add_argument("--db", help="Path to group store (default: $GEOMATCH_DB or data/groups.db)")
    rec.add_argument("--limit", type=int, help=f"Max groups to return (capped at {MAX_RECOMMENDED_GROUPS})")
    rec.set_defaults(func=cmd_recommend)

    sed = subparsers.add_parser("seed-groups", help="Import groups from a JSON file into the group store")
    sed.add_argument("--input", required=True, help="Path to groups JSON")
    sed.add_argument("--db", help="Path to group store (default: $GEOMATCH_DB or data/groups.db)")
    sed.set_defaults(func=cmd_seed_groups)

    lst = subparsers.add_parser("list-groups", help="List member groups in the store")
    lst.add_argument("--db", help="Path to group store (default: $GEOMATCH_DB or data/groups.db)")
    lst.set_defaults(func=cmd_list_groups)

    val = subparsers.add_parser("validate", help="Validate a job or group JSON record")
    val.add_argument("--input", required=True, help="Path to JSON record")
    val.add_argument("--kind", choices=["job", "group"], default="job", help="Record type (default: job)")
    val.set_defaults(func=cmd_validate)
    return parser


def main(argv=None):
    # Load .env if present (GEOMATCH_DB, GEOMATCH_LOG_LEVEL, GEOMATCH_LOG_DIR)
    load_env()
    parser = build_parser()
    try:
        settings = get_settings()
    except ValueError as e:
        parser.error(str(e))
    get_logger(level=settings["log_level"], log_dir=settings["log_dir"])

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
