import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from job_board.config import DB_PATH, DEFAULT_PAGE_SIZE
from job_board.exceptions import JobBoardError, ValidationError
from job_board.formatter import JobFormatter
from job_board.models import Job, Requirement, parse_job
from job_board.service import JobBoard
from job_board.store.sqlite_store import SQLiteDocumentStore

# Set up logging once, in the application entry point only
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.INFO
)
logger = logging.getLogger(__name__)


def load_job_payload(path: str) -> Job:
    """Read a job from a JSON file, or from stdin when path is '-'."""
    try:
        if path == "-":
            data = json.load(sys.stdin)
        else:
            with Path(path).open(encoding="utf-8") as f:
                data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Job payload is not valid JSON: {e}", "load_job_payload") from e
    except OSError as e:
        raise ValidationError(f"Cannot read job payload: {e}", "load_job_payload") from e

    if not isinstance(data, dict):
        raise ValidationError("Job payload should be a JSON object", "load_job_payload")
    return parse_job(data)


def _dump(job: Job) -> dict[str, Any]:
    return job.model_dump(mode="json", by_alias=True)


def _print_jobs(jobs: list[Job], as_json: bool) -> None:
    if as_json:
        print(json.dumps([_dump(job) for job in jobs], indent=2))
        return
    if not jobs:
        print("No jobs found.")
    for job in jobs:
        print(JobFormatter.format_job(job))
        print()


async def run_command(args: argparse.Namespace) -> int:
    """Run one subcommand against the store and return the process exit code."""
    with SQLiteDocumentStore(args.db or DB_PATH) as store:
        board = JobBoard(store, timeout=args.timeout)

        if args.command == "create":
            job_id = await board.create_job(args.owner, load_job_payload(args.file))
            print(job_id)

        elif args.command == "replace":
            await board.replace_job(args.job_id, load_job_payload(args.file))
            logger.info(f"Job {args.job_id} replaced.")

        elif args.command == "delete":
            await board.mark_job_deleted(args.job_id)
            logger.info(f"Job {args.job_id} marked as deleted.")

        elif args.command == "get":
            job = await board.fetch_job(args.job_id)
            if job is None:
                logger.error(f"Job {args.job_id} not found.")
                return 1
            if args.json:
                print(json.dumps(_dump(job), indent=2))
            else:
                print(JobFormatter.format_job(job))

        elif args.command == "eligible":
            jobs = await board.fetch_eligible_jobs(args.skills)
            _print_jobs(sorted(jobs, key=lambda j: j.job_id or ""), args.json)

        elif args.command == "page":
            page_size = args.size if args.size is not None else DEFAULT_PAGE_SIZE
            page = await board.fetch_owner_job_page(args.owner, page_size, args.index)
            if args.json:
                print(page.model_dump_json(by_alias=True, indent=2))
            else:
                print(JobFormatter.format_page(page))

        elif args.command == "interest":
            changed = await board.toggle_interest(args.applicant, args.job, args.interested)
            if not changed:
                logger.info("Interest already in the requested state.")

        elif args.command == "interested":
            _print_jobs(await board.fetch_interested_jobs(args.applicant), args.json)

    return 0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="job-board",
        description="Manage job postings and applicant interest in the job board store.",
    )
    parser.add_argument("--db", default=None, metavar="PATH", help="SQLite store path.")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Seconds to wait for the store (overrides STORE_TIMEOUT env var).",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON.")

    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create", help="Create a job post for a business account.")
    create.add_argument("--owner", required=True, help="Uid of the owning business account.")
    create.add_argument("--file", required=True, help="JSON job payload, or '-' for stdin.")

    replace = commands.add_parser("replace", help="Fully replace an existing job post.")
    replace.add_argument("job_id")
    replace.add_argument("--file", required=True, help="JSON job payload, or '-' for stdin.")

    delete = commands.add_parser("delete", help="Mark a job post as deleted.")
    delete.add_argument("job_id")

    get = commands.add_parser("get", help="Show a single job post.")
    get.add_argument("job_id")

    eligible = commands.add_parser("eligible", help="List active jobs open to a skill set.")
    eligible.add_argument(
        "--skills",
        nargs="*",
        default=[],
        choices=Requirement.all_ids(),
        metavar="REQUIREMENT_ID",
        help=f"Any of: {', '.join(Requirement.all_ids())}.",
    )

    page = commands.add_parser("page", help="Show one page of an owner's active jobs.")
    page.add_argument("--owner", required=True)
    page.add_argument("--size", type=int, default=None)
    page.add_argument("--index", type=int, default=0)

    interest = commands.add_parser("interest", help="Set an applicant's interest in a job.")
    interest.add_argument("--applicant", required=True)
    interest.add_argument("--job", required=True)
    state = interest.add_mutually_exclusive_group(required=True)
    state.add_argument("--on", dest="interested", action="store_true")
    state.add_argument("--off", dest="interested", action="store_false")

    interested = commands.add_parser("interested", help="List jobs an applicant is interested in.")
    interested.add_argument("--applicant", required=True)

    return parser.parse_args(argv)


def cli(argv: list[str] | None = None) -> None:
    """CLI entry point for the package."""
    args = parse_args(argv)

    if args.timeout is not None and args.timeout <= 0:
        logger.error("--timeout must be a positive number.")
        sys.exit(1)

    try:
        exit_code = asyncio.run(run_command(args))
    except JobBoardError as e:
        logger.error(f"{args.command} failed: {e}")
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    cli()
