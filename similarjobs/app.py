import argparse
import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from . import __version__
from .config import Settings, load_scoring_config, load_settings
from .database import get_session, init_database
from .env import load_env
from .errors import InvalidInputError, RecommendationError
from .logger import get_logger
from .schema import parse_debug, validate_job_record
from .storage import load_job_dicts, load_jobs, save_results

from pipelines.recommendation.candidate_selector import (
    CandidateSupplier,
    InMemoryJobSource,
    ReferenceJobLoader,
)
from pipelines.recommendation.recommender import ALGORITHM, recommend_similar_jobs
from pipelines.recommendation.weights import ConfigError, ScoringConfig
from storage.repositories.jobs import JobRepository, load_records

logger = get_logger()


def _debug_requested(params: Dict[str, Any]) -> bool:
    try:
        return parse_debug(params.get("debug"))
    except InvalidInputError:
        return False


def handle_similar_jobs_request(
    params: Dict[str, Any],
    loader: ReferenceJobLoader,
    supplier: CandidateSupplier,
    settings: Optional[Settings] = None,
    config: Optional[ScoringConfig] = None,
    **options: Any,
) -> Tuple[int, Dict[str, Any]]:
    """
    Run one similar-jobs request and map the outcome to (status, payload).

    params holds the raw request values: ``id``, ``limit`` and ``debug``.
    Validation and not-found errors carry their reason; other failures
    carry a generic message with the underlying cause attached.
    """
    settings = settings or load_settings()
    config = config or load_scoring_config(settings.weights_path)
    options.setdefault("workers", settings.workers)
    try:
        result = recommend_similar_jobs(
            params.get("id"),
            params.get("limit"),
            params.get("debug"),
            loader=loader,
            supplier=supplier,
            config=config,
            default_limit=settings.default_limit,
            max_limit=settings.max_limit,
            candidate_limit=settings.candidate_limit,
            **options,
        )
    except RecommendationError as e:
        payload: Dict[str, Any] = {"success": False, "message": e.message}
        if e.status_code >= 500:
            payload["message"] = "Failed to retrieve similar jobs"
            cause = e.__cause__ or e
            payload["error"] = str(cause)
        if _debug_requested(params):
            payload["debug"] = {"algorithm": ALGORITHM, "steps": list(e.trace)}
        return e.status_code, payload
    return 200, result.to_dict()


def _open_source(args: argparse.Namespace, settings: Settings):
    if getattr(args, "input", None):
        records, rejected = load_jobs(Path(args.input))
        for job_id, errors in rejected.items():
            logger.warning("Skipping invalid job", job_id=job_id, errors=errors)
        return InMemoryJobSource(records), None
    db_path = Path(args.db) if getattr(args, "db", None) else settings.db_path
    if not db_path.exists():
        raise SystemExit(f"Database not found: {db_path}. Run 'init-db' and 'load' first.")
    session = get_session(db_path)
    return JobRepository(session), session


def cmd_similar(args: argparse.Namespace) -> None:
    settings = load_settings()
    try:
        config = load_scoring_config(Path(args.weights) if args.weights else settings.weights_path)
    except ConfigError as e:
        raise SystemExit(str(e))

    source, session = _open_source(args, settings)
    try:
        status, payload = handle_similar_jobs_request(
            {"id": args.job_id, "limit": args.limit, "debug": args.debug},
            loader=source,
            supplier=source,
            settings=settings,
            config=config,
            timeout=args.timeout,
        )
    finally:
        if session is not None:
            session.close()

    if args.output:
        save_results(Path(args.output), payload)
        print(f"Wrote {args.output}")
    else:
        print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))
    if args.metrics:
        logger.log_metrics_summary()
    if status != 200:
        raise SystemExit(1)


def cmd_init_db(args: argparse.Namespace) -> None:
    db_path = Path(args.db) if args.db else load_settings().db_path
    init_database(db_path)
    print(f"Initialized database at {db_path}")


def cmd_load(args: argparse.Namespace) -> None:
    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    db_path = Path(args.db) if args.db else load_settings().db_path
    records, rejected = load_jobs(input_path)
    for job_id, errors in rejected.items():
        print(f"[validation_error] {job_id} - {errors}")

    new, updated = load_records(records, db_path)
    print(f"Done. new={new} updated={updated} skipped={len(rejected)}")


def cmd_validate(args: argparse.Namespace) -> None:
    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    invalid = 0
    for index, job in enumerate(load_job_dicts(input_path)):
        errors = validate_job_record(job)
        if errors:
            invalid += 1
            print(f"Invalid: {job.get('id') or f'#{index}'}")
            for e in errors:
                print(f" - {e}")
    if invalid:
        raise SystemExit(2)
    print("Valid")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="similarjobs", description="Similar job recommendations")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    ini = subparsers.add_parser("init-db", help="Create the SQLite schema")
    ini.add_argument("--db", help="Path to SQLite database (default: $SIMILARJOBS_DB or data/jobs.db)")
    ini.set_defaults(func=cmd_init_db)

    lod = subparsers.add_parser("load", help="Validate jobs from a JSON file and upsert them into the database")
    lod.add_argument("--input", required=True, help="JSON file with a list of jobs")
    lod.add_argument("--db", help="Path to SQLite database")
    lod.set_defaults(func=cmd_load)

    val = subparsers.add_parser("validate", help="Validate jobs in a JSON file")
    val.add_argument("--input", required=True, help="JSON file with one job or a list of jobs")
    val.set_defaults(func=cmd_validate)

    sim = subparsers.add_parser("similar", help="Recommend jobs similar to a reference job")
    sim.add_argument("job_id", help="Reference job UUID")
    sim.add_argument("--limit", help="Number of results (clamped to 1-10, default 3)")
    sim.add_argument("--debug", action="store_true", help="Include factor scores and processing trace")
    sim.add_argument("--db", help="Path to SQLite database")
    sim.add_argument("--input", help="Read jobs from a JSON file instead of the database")
    sim.add_argument("--weights", help="JSON file overriding scoring weights (or set SIMILARJOBS_WEIGHTS)")
    sim.add_argument("--timeout", type=float, help="Abort if processing takes longer than this many seconds")
    sim.add_argument("--output", help="Write the response JSON to this file")
    sim.add_argument("--metrics", action="store_true", help="Log session metrics when done")
    sim.set_defaults(func=cmd_similar)
    return parser


def main(argv=None):
    # Load .env if present (SIMILARJOBS_DB, SIMILARJOBS_WEIGHTS, etc.)
    load_env()
    parser = build_parser()
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
