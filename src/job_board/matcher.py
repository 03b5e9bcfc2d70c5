from collections.abc import Collection, Iterable, Iterator

from job_board.exceptions import ValidationError
from job_board.models import Job, JobStatus, Requirement


def is_eligible(
    job_requirements: Collection[Requirement], applicant_skills: Collection[Requirement]
) -> bool:
    """
    Return True if every requirement of the job is among the applicant's skills.

    Both inputs are treated as sets, so duplicates do not matter. A job with
    no requirements is open to every applicant, including one with no skills.
    Location, pay and expiry play no part here.
    """
    if isinstance(job_requirements, str) or isinstance(applicant_skills, str):
        raise ValidationError("Requirements and skills should be collections, not a string")
    return set(job_requirements) <= set(applicant_skills)


def filter_eligible(
    jobs: Iterable[Job], applicant_skills: Iterable[Requirement]
) -> Iterator[Job]:
    """Yield the ACTIVE jobs whose requirements the applicant satisfies."""
    if isinstance(applicant_skills, str):
        raise ValidationError("Skills should be a collection, not a string")
    skills = frozenset(applicant_skills)
    for job in jobs:
        if job.job_status is JobStatus.ACTIVE and is_eligible(job.requirements, skills):
            yield job
