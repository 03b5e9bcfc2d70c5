import pytest

from job_board.exceptions import ValidationError
from job_board.matcher import filter_eligible, is_eligible
from job_board.models import JobStatus, Requirement

O_LEVEL = Requirement.O_LEVEL
ENGLISH = Requirement.ENGLISH
LICENSE = Requirement.DRIVING_LICENSE_C


@pytest.mark.parametrize(
    "requirements, skills, expected",
    [
        # No requirements: open to everyone, even without skills
        ([], [], True),
        ([], [O_LEVEL, ENGLISH, LICENSE], True),
        # Subset matches
        ([O_LEVEL], [O_LEVEL, ENGLISH], True),
        ([O_LEVEL, ENGLISH], [O_LEVEL, ENGLISH], True),
        ([ENGLISH, O_LEVEL], [O_LEVEL, ENGLISH, LICENSE], True),
        # Missing a requirement
        ([O_LEVEL, ENGLISH], [O_LEVEL], False),
        ([LICENSE], [], False),
        ([ENGLISH, LICENSE], [O_LEVEL, ENGLISH], False),
        # Duplicates do not matter
        ([O_LEVEL, O_LEVEL], [O_LEVEL], True),
        ([O_LEVEL], [O_LEVEL, O_LEVEL, ENGLISH], True),
    ],
)
def test_is_eligible(requirements, skills, expected):
    assert is_eligible(requirements, skills) is expected


def test_adding_skills_never_removes_eligibility():
    """Every job eligible for a skill set stays eligible for any superset of it."""
    all_requirement_sets = [
        [],
        [O_LEVEL],
        [ENGLISH],
        [LICENSE],
        [O_LEVEL, ENGLISH],
        [ENGLISH, LICENSE],
        [O_LEVEL, ENGLISH, LICENSE],
    ]
    skill_sets = all_requirement_sets

    for skills in skill_sets:
        for extra in Requirement:
            wider = skills + [extra]
            for requirements in all_requirement_sets:
                if is_eligible(requirements, skills):
                    assert is_eligible(requirements, wider)


def test_filter_eligible_skips_deleted_jobs(job_factory):
    active = job_factory(requirements=(O_LEVEL,), title="Active")
    deleted = job_factory(requirements=(O_LEVEL,), status=JobStatus.DELETED, title="Deleted")
    unmatched = job_factory(requirements=(LICENSE,), title="Unmatched")

    result = list(filter_eligible([active, deleted, unmatched], [O_LEVEL, ENGLISH]))

    assert result == [active]


def test_filter_eligible_accepts_a_one_shot_iterable(job_factory):
    jobs = (job_factory(title=f"Job {i}") for i in range(3))
    skills = iter([O_LEVEL])

    assert len(list(filter_eligible(jobs, skills))) == 3


@pytest.mark.parametrize(
    "requirements, skills",
    [
        ("O_LEVEL", [O_LEVEL]),
        ([O_LEVEL], "O_LEVEL"),
    ],
)
def test_is_eligible_rejects_a_bare_string(requirements, skills):
    with pytest.raises(ValidationError):
        is_eligible(requirements, skills)


def test_filter_eligible_rejects_a_bare_string(job_factory):
    with pytest.raises(ValidationError):
        list(filter_eligible([job_factory()], "O_LEVEL"))
