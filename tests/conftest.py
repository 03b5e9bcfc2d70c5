import os
from datetime import UTC, datetime

import pytest

# Set environment variables for tests before any imports happen
os.environ["JOB_BOARD_DB_PATH"] = ":memory:"
os.environ["STORE_TIMEOUT"] = "5"
# Small batches so repository scans cross batch boundaries
os.environ["QUERY_BATCH_SIZE"] = "2"
os.environ["DEFAULT_PAGE_SIZE"] = "10"

from job_board.interest import InterestService  # noqa: E402
from job_board.models import (  # noqa: E402
    Job,
    JobDuration,
    JobPayment,
    JobStatus,
    Location,
    PaymentFrequency,
    Requirement,
)
from job_board.repository import JobRepository  # noqa: E402
from job_board.store.sqlite_store import SQLiteDocumentStore  # noqa: E402


def make_job(
    requirements: tuple[Requirement, ...] = (),
    status: JobStatus = JobStatus.ACTIVE,
    title: str = "Programmer",
) -> Job:
    """Build a job like the ones business accounts post."""
    return Job(
        job_status=status,
        job_title=title,
        location=Location(name="Maple Tree", postal_code="123456"),
        job_description="Fighting to defeat hair line recede",
        job_pay=JobPayment(min=0, max=5000, frequency=PaymentFrequency.MONTHLY),
        requirements=requirements,
        post_expiry_timestamp=datetime(2030, 1, 1, tzinfo=UTC),
        job_duration=JobDuration.ONE_MONTH,
    )


@pytest.fixture
def sample_job():
    """A reusable sample Job for tests."""
    return make_job(
        requirements=(Requirement.DRIVING_LICENSE_C, Requirement.O_LEVEL, Requirement.ENGLISH),
        title="Software Engineer",
    )


@pytest.fixture
def store():
    """Fixture to provide an in-memory document store for testing."""
    with SQLiteDocumentStore(db_path=":memory:") as test_store:
        yield test_store


@pytest.fixture
def repo(store):
    return JobRepository(store)


@pytest.fixture
def interests(store):
    return InterestService(store)


@pytest.fixture
def job_factory():
    """Factory for jobs with the given requirements, status and title."""
    return make_job
