import logging

from job_board.exceptions import NotFoundError, ValidationError
from job_board.models import Job
from job_board.repository import JOB_COLLECTION, require_id
from job_board.store.base import DocumentRef, DocumentStore, Transaction

logger = logging.getLogger(__name__)

INTEREST_COLLECTION = "ApplicantInterests"
JOB_IDS_FIELD = "jobIds"


class InterestService:
    """
    Records which jobs an applicant is interested in.

    Interest lives in one document per applicant, keyed by the applicant id,
    holding the ids of the jobs they are interested in. Every change is a
    single store transaction that also checks the job exists.
    """

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def toggle_interest(self, applicant_id: str, job_id: str, interested: bool) -> bool:
        """
        Set the applicant's interest in the job to `interested`.

        Returns True if the stored state changed, False if it already matched.
        Raises NotFoundError, writing nothing, when the job does not exist.
        """
        require_id(applicant_id, "Applicant id", "toggle_interest")
        require_id(job_id, "Job id", "toggle_interest")
        if not isinstance(interested, bool):
            raise ValidationError("Interest should be a boolean", "toggle_interest", job_id)

        job_ref = DocumentRef(JOB_COLLECTION, job_id)
        interest_ref = DocumentRef(INTEREST_COLLECTION, applicant_id)

        def _toggle(txn: Transaction) -> bool:
            if txn.get(job_ref) is None:
                raise NotFoundError("Job does not exist", "toggle_interest", job_id)

            record = txn.get(interest_ref) or {"applicantId": applicant_id}
            job_ids = list(record.get(JOB_IDS_FIELD, []))
            if interested == (job_id in job_ids):
                return False

            if interested:
                job_ids.append(job_id)
            else:
                job_ids = [existing for existing in job_ids if existing != job_id]
            txn.set(interest_ref, {**record, JOB_IDS_FIELD: job_ids})
            return True

        changed = await self.store.run_transaction(_toggle, "toggle_interest", job_id)
        if changed:
            state = "interested" if interested else "not interested"
            logger.info(f"Applicant {applicant_id} is now {state} in job {job_id}")
        return changed

    async def interested_job_ids(self, applicant_id: str) -> list[str]:
        """Return the ids of the jobs the applicant is interested in, oldest first."""
        require_id(applicant_id, "Applicant id", "interested_job_ids")
        record = await self.store.get(INTEREST_COLLECTION, applicant_id)
        if record is None:
            return []
        return list(record.get(JOB_IDS_FIELD, []))

    async def is_interested(self, applicant_id: str, job_id: str) -> bool:
        require_id(job_id, "Job id", "is_interested")
        return job_id in await self.interested_job_ids(applicant_id)

    async def fetch_interested_jobs(self, applicant_id: str) -> list[Job]:
        """Return the jobs the applicant is interested in. Ids that no longer resolve are skipped."""
        jobs = []
        for job_id in await self.interested_job_ids(applicant_id):
            document = await self.store.get(JOB_COLLECTION, job_id)
            if document is None:
                logger.warning(f"Applicant {applicant_id} holds interest in missing job {job_id}")
                continue
            jobs.append(Job.from_document(job_id, document))
        return jobs
