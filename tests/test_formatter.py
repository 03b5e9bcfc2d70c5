from job_board.formatter import JobFormatter
from job_board.models import Job, JobPage, JobPayment, JobStatus, PaymentFrequency, Requirement


def test_format_pay_range():
    pay = JobPayment(min=0, max=5000, frequency=PaymentFrequency.MONTHLY)
    assert JobFormatter.format_pay(pay) == "0 - 5000 (monthly)"


def test_format_pay_single_value():
    pay = JobPayment(min=12, max=12, frequency=PaymentFrequency.HOURLY)
    assert JobFormatter.format_pay(pay) == "12 (hourly)"


def test_format_job_with_all_fields(sample_job):
    formatted = JobFormatter.format_job(sample_job.model_copy(update={"job_id": "abc"}))

    assert formatted.startswith("Software Engineer [ACTIVE]")
    assert "Id: abc" in formatted
    assert "Location: Maple Tree 123456" in formatted
    assert "Pay: 0 - 5000 (monthly)" in formatted
    assert "Duration: one month" in formatted
    assert "Requirements: Category C Driving License, O Level, English" in formatted
    assert "Expires: 2030-01-01T00:00:00+00:00" in formatted
    assert formatted.endswith("Fighting to defeat hair line recede")


def test_format_job_minimal():
    formatted = JobFormatter.format_job(Job(job_title="Cashier", job_status=JobStatus.DELETED))

    assert formatted.startswith("Cashier [DELETED]")
    assert "Id:" not in formatted
    assert "Location:" not in formatted
    assert "Expires:" not in formatted
    assert "Requirements: none" in formatted


def test_format_job_truncates_long_description():
    long_desc = "word " * 100
    formatted = JobFormatter.format_job(Job(job_title="Writer", job_description=long_desc))

    last_line = formatted.splitlines()[-1]
    assert last_line.endswith("...")
    assert len(last_line) <= JobFormatter.DESCRIPTION_LIMIT + 3


def test_format_page_header(job_factory):
    page = JobPage(
        jobs=(job_factory(title="A"), job_factory(title="B")),
        page_index=1,
        page_size=2,
        total_count=5,
    )

    formatted = JobFormatter.format_page(page)

    assert formatted.startswith("Page 2: jobs 3-4 of 5")
    assert "A [ACTIVE]" in formatted
    assert "B [ACTIVE]" in formatted


def test_format_empty_page():
    page = JobPage(page_index=3, page_size=2, total_count=5)
    assert JobFormatter.format_page(page) == "Page 4: no jobs (total 5)"


def test_format_job_requirements_in_stored_order():
    job = Job(job_title="Driver", requirements=(Requirement.ENGLISH, Requirement.O_LEVEL))
    assert "Requirements: English, O Level" in JobFormatter.format_job(job)
