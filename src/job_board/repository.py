import logging
from collections.abc import AsyncIterator, Iterable, Mapping
from typing import Any

import pydantic

from job_board import config
from job_board.exceptions import NotFoundError, ValidationError
from job_board.matcher import filter_eligible
from job_board.models import Applicant, Job, JobPage, JobStatus, Requirement
from job_board.pagination import paginate, validate_page_request
from job_board.store.base import Document, DocumentRef, DocumentStore, Transaction

logger = logging.getLogger(__name__)

JOB_COLLECTION = "Jobs"
OWNER_FIELD = "ownerUid"
STATUS_FIELD = "jobStatus"


def require_id(value: str, name: str, operation: str) -> None:
    """Reject empty ids before any store access."""
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{name} should be a non-empty string", operation)


def as_requirements(values: Iterable[Requirement | str], operation: str) -> frozenset[Requirement]:
    """Convert a mix of Requirement members and stable ids into a set of requirements."""
    if isinstance(values, str):
        raise ValidationError(f"Expected a collection of requirements, got {values!r}", operation)
    requirements = set()
    for value in values:
        if isinstance(value, Requirement):
            requirements.add(value)
        elif isinstance(value, str):
            try:
                requirements.add(Requirement.from_id(value))
            except ValidationError as e:
                e.operation = operation
                raise
        else:
            raise ValidationError(f"Invalid requirement: {value!r}", operation)
    return frozenset(requirements)


class JobRepository:
    """
    Persistence lifecycle of job postings.

    Jobs are never hard-deleted: deletion is a permanent transition to
    DELETED. Mutations of an existing job run as store transactions so
    concurrent writers never lose each other's updates.
    """

    def __init__(self, store: DocumentStore, batch_size: int | None = None) -> None:
        self.store = store
        self.batch_size = batch_size if batch_size is not None else config.QUERY_BATCH_SIZE

    @staticmethod
    def _validated(job: Job, operation: str, job_id: str | None = None) -> Job:
        """Re-check every Job invariant, even for instances built without validation."""
        try:
            return Job.model_validate(job.model_dump())
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Invalid job: {e.errors(include_url=False)}", operation, job_id
            ) from e

    async def create(self, owner_uid: str, job: Job) -> str:
        """Insert a new ACTIVE job owned by `owner_uid` and return its id."""
        require_id(owner_uid, "Owner uid", "create")
        job = self._validated(job, "create").model_copy(
            update={"job_status": JobStatus.ACTIVE, "job_id": None}
        )

        document = {**job.to_document(), OWNER_FIELD: owner_uid}
        job_id = await self.store.insert(JOB_COLLECTION, document)
        logger.info(f"Created job {job_id} ('{job.job_title}') for owner {owner_uid}")
        return job_id

    async def replace(self, job_id: str, job: Job) -> None:
        """
        Overwrite the whole job document. Fields the caller leaves out revert
        to their defaults. The owner is kept, and a deleted job stays deleted.
        """
        require_id(job_id, "Job id", "replace")
        body = self._validated(job, "replace", job_id).to_document()
        ref = DocumentRef(JOB_COLLECTION, job_id)

        def _replace(txn: Transaction) -> None:
            existing = txn.get(ref)
            if existing is None:
                raise NotFoundError("Job does not exist", "replace", job_id)
            if OWNER_FIELD in existing:
                body[OWNER_FIELD] = existing[OWNER_FIELD]
            if existing.get(STATUS_FIELD) == JobStatus.DELETED.value:
                body[STATUS_FIELD] = JobStatus.DELETED.value
            txn.set(ref, body)

        await self.store.run_transaction(_replace, "replace", job_id)
        logger.info(f"Replaced job {job_id}")

    async def mark_deleted(self, job_id: str) -> None:
        """Mark the job DELETED, leaving every other field untouched. Idempotent."""
        require_id(job_id, "Job id", "mark_deleted")
        ref = DocumentRef(JOB_COLLECTION, job_id)

        def _mark_deleted(txn: Transaction) -> bool:
            existing = txn.get(ref)
            if existing is None:
                raise NotFoundError("Job does not exist", "mark_deleted", job_id)
            if existing.get(STATUS_FIELD) == JobStatus.DELETED.value:
                return False
            txn.set(ref, {**existing, STATUS_FIELD: JobStatus.DELETED.value})
            return True

        if await self.store.run_transaction(_mark_deleted, "mark_deleted", job_id):
            logger.info(f"Marked job {job_id} as deleted")
        else:
            logger.debug(f"Job {job_id} was already deleted")

    async def fetch_by_id(self, job_id: str) -> Job | None:
        """Return the job whatever its status, or None if the id does not resolve."""
        require_id(job_id, "Job id", "fetch_by_id")
        document = await self.store.get(JOB_COLLECTION, job_id)
        if document is None:
            logger.debug(f"Job {job_id} not found")
            return None
        return Job.from_document(job_id, document)

    async def _scan(self, filters: Mapping[str, Any]) -> AsyncIterator[tuple[str, Document]]:
        """Read every matching document in insertion order, one batch at a time."""
        start_after = None
        while True:
            batch = await self.store.query(JOB_COLLECTION, filters, self.batch_size, start_after)
            for doc_id, document in batch:
                yield doc_id, document
            if len(batch) < self.batch_size:
                return
            start_after = batch[-1][0]

    async def fetch_eligible(
        self, applicant_skills: Applicant | Iterable[Requirement | str]
    ) -> set[Job]:
        """
        Return every ACTIVE job whose requirements are all among the applicant's
        skills. Takes an Applicant or the skills themselves.
        """
        if isinstance(applicant_skills, Applicant):
            applicant_skills = applicant_skills.skills
        skills = as_requirements(applicant_skills, "fetch_eligible")

        candidates: dict[str, Job] = {}
        async for doc_id, document in self._scan({STATUS_FIELD: JobStatus.ACTIVE}):
            candidates[doc_id] = Job.from_document(doc_id, document)

        eligible = set(filter_eligible(candidates.values(), skills))
        logger.debug(f"{len(eligible)} of {len(candidates)} active jobs eligible")
        return eligible

    async def fetch_page_by_owner(self, owner_uid: str, page_size: int, page_index: int) -> JobPage:
        """Return one page of the owner's active jobs, in insertion order."""
        require_id(owner_uid, "Owner uid", "fetch_page_by_owner")
        validate_page_request(page_size, page_index)

        jobs = [
            Job.from_document(doc_id, document)
            async for doc_id, document in self._scan(
                {OWNER_FIELD: owner_uid, STATUS_FIELD: JobStatus.ACTIVE}
            )
        ]
        return paginate(jobs, page_size, page_index)
