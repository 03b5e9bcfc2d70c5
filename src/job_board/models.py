from datetime import datetime
from enum import Enum
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from job_board.exceptions import ValidationError


class Requirement(str, Enum):
    """
    Closed vocabulary shared by job requirements and applicant skills.
    The enum value is the stable id stored in documents.
    """

    O_LEVEL = "O_LEVEL"
    ENGLISH = "LANGUAGE_ENGLISH"
    DRIVING_LICENSE_C = "DRIVING_LICENSE_C"

    @classmethod
    def from_id(cls, requirement_id: str) -> "Requirement":
        """Return the requirement with the given stable id."""
        for requirement in cls:
            if requirement.value == requirement_id:
                return requirement
        raise ValidationError(f"Invalid requirement id: {requirement_id!r}")

    @classmethod
    def all_ids(cls) -> list[str]:
        return [requirement.value for requirement in cls]

    def localized_name(self, language: str = "en") -> str:
        """Return the display name of the requirement in the given language."""
        names = _LOCALIZED_NAMES[self]
        if language not in names:
            raise ValidationError(f"Language is not supported: {language!r}")
        return names[language]


_LOCALIZED_NAMES: dict[Requirement, dict[str, str]] = {
    Requirement.O_LEVEL: {"en": "O Level"},
    Requirement.ENGLISH: {"en": "English"},
    Requirement.DRIVING_LICENSE_C: {"en": "Category C Driving License"},
}


class JobStatus(str, Enum):
    ACTIVE = "ACTIVE"
    DELETED = "DELETED"


class PaymentFrequency(str, Enum):
    HOURLY = "HOURLY"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class JobDuration(str, Enum):
    ONE_WEEK = "ONE_WEEK"
    ONE_MONTH = "ONE_MONTH"
    SIX_MONTHS = "SIX_MONTHS"
    ONE_YEAR = "ONE_YEAR"
    OTHER = "OTHER"


class _Document(BaseModel):
    # Documents use camelCase keys; Python code uses snake_case names.
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Location(_Document):
    name: str = ""
    postal_code: str = ""
    latitude: float = 0.0
    longitude: float = 0.0


class JobPayment(_Document):
    """Pay range of a job. The lower limit is never negative and never above the upper one."""

    min: int = 0
    max: int = 0
    frequency: PaymentFrequency = PaymentFrequency.HOURLY

    @model_validator(mode="after")
    def _check_range(self) -> "JobPayment":
        if self.min < 0:
            raise ValueError('"min" should not be negative')
        if self.max < self.min:
            raise ValueError('"max" should not be less than "min"')
        return self


class Job(_Document):
    """
    A job posting as stored in the document store.

    Every field except the title has a default, so a partial payload used
    for a full replace resets the omitted fields.
    """

    job_id: str | None = None
    job_status: JobStatus = JobStatus.ACTIVE
    job_title: str = Field(min_length=1)
    location: Location = Location()
    job_description: str = ""
    job_pay: JobPayment = JobPayment()
    requirements: tuple[Requirement, ...] = ()
    post_expiry_timestamp: datetime | None = None
    job_duration: JobDuration = JobDuration.OTHER

    @field_validator("requirements")
    @classmethod
    def _dedupe_requirements(cls, value: tuple[Requirement, ...]) -> tuple[Requirement, ...]:
        return tuple(dict.fromkeys(value))

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored document body. The id lives outside the body."""
        return self.model_dump(mode="json", by_alias=True, exclude={"job_id"})

    @classmethod
    def from_document(cls, job_id: str, document: dict[str, Any]) -> "Job":
        return cls.model_validate({**document, "jobId": job_id})


class Applicant(_Document):
    name: str
    skills: frozenset[Requirement] = frozenset()


class JobPage(_Document):
    """One zero-indexed slice of an owner's jobs, recomputed on every fetch."""

    jobs: tuple[Job, ...] = ()
    page_index: int
    page_size: int
    total_count: int

    @computed_field(alias="hasMore")  # type: ignore[prop-decorator]
    @property
    def has_more(self) -> bool:
        return (self.page_index + 1) * self.page_size < self.total_count


def parse_job(data: dict[str, Any]) -> Job:
    """
    Build a Job from a raw payload (camelCase or snake_case keys).
    Raises job_board.exceptions.ValidationError instead of pydantic's error.
    """
    try:
        return Job.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid job: {e.errors(include_url=False)}", "parse_job") from e
