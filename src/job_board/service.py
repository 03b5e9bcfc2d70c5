import asyncio
import logging
from collections.abc import Coroutine, Iterable
from typing import Any, TypeVar

from job_board import config
from job_board.exceptions import OperationTimeoutError
from job_board.interest import InterestService
from job_board.models import Applicant, Job, JobPage, Requirement
from job_board.repository import JobRepository
from job_board.store.base import DocumentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _log_abandoned(operation: str, task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Abandoned {operation} failed after its wait timed out: {exc}")
    else:
        logger.info(f"Abandoned {operation} completed after its wait timed out")


class JobBoard:
    """
    Entry point used by the request-handling layer.

    Each call runs one repository or interest operation and waits for it at
    most `timeout` seconds. A timed-out wait raises OperationTimeoutError but
    does not cancel the operation, which may still complete and commit.
    """

    def __init__(
        self,
        store: DocumentStore,
        timeout: float | None = None,
        batch_size: int | None = None,
    ) -> None:
        self.jobs = JobRepository(store, batch_size=batch_size)
        self.interests = InterestService(store)
        self.timeout = timeout if timeout is not None else config.STORE_TIMEOUT

    async def _bounded(
        self,
        operation: str,
        coro: Coroutine[Any, Any, T],
        document_id: str | None = None,
        timeout: float | None = None,
    ) -> T:
        wait = timeout if timeout is not None else self.timeout
        task = asyncio.ensure_future(coro)
        try:
            return await asyncio.wait_for(asyncio.shield(task), timeout=wait)
        except TimeoutError:
            task.add_done_callback(lambda t: _log_abandoned(operation, t))
            logger.warning(f"Timed out after {wait}s waiting for {operation} (id={document_id})")
            raise OperationTimeoutError(
                f"No result within {wait}s", operation, document_id
            ) from None

    async def create_job(self, owner_uid: str, job: Job, timeout: float | None = None) -> str:
        return await self._bounded("create_job", self.jobs.create(owner_uid, job), timeout=timeout)

    async def replace_job(self, job_id: str, job: Job, timeout: float | None = None) -> None:
        await self._bounded("replace_job", self.jobs.replace(job_id, job), job_id, timeout)

    async def mark_job_deleted(self, job_id: str, timeout: float | None = None) -> None:
        await self._bounded("mark_job_deleted", self.jobs.mark_deleted(job_id), job_id, timeout)

    async def fetch_job(self, job_id: str, timeout: float | None = None) -> Job | None:
        return await self._bounded("fetch_job", self.jobs.fetch_by_id(job_id), job_id, timeout)

    async def fetch_eligible_jobs(
        self,
        applicant_skills: Applicant | Iterable[Requirement | str],
        timeout: float | None = None,
    ) -> set[Job]:
        return await self._bounded(
            "fetch_eligible_jobs", self.jobs.fetch_eligible(applicant_skills), timeout=timeout
        )

    async def fetch_owner_job_page(
        self, owner_uid: str, page_size: int, page_index: int, timeout: float | None = None
    ) -> JobPage:
        return await self._bounded(
            "fetch_owner_job_page",
            self.jobs.fetch_page_by_owner(owner_uid, page_size, page_index),
            timeout=timeout,
        )

    async def toggle_interest(
        self, applicant_id: str, job_id: str, interested: bool, timeout: float | None = None
    ) -> bool:
        return await self._bounded(
            "toggle_interest",
            self.interests.toggle_interest(applicant_id, job_id, interested),
            job_id,
            timeout,
        )

    async def fetch_interested_jobs(
        self, applicant_id: str, timeout: float | None = None
    ) -> list[Job]:
        return await self._bounded(
            "fetch_interested_jobs",
            self.interests.fetch_interested_jobs(applicant_id),
            applicant_id,
            timeout,
        )
