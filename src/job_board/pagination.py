from collections.abc import Sequence

from job_board.exceptions import ValidationError
from job_board.models import Job, JobPage


def validate_page_request(page_size: int, page_index: int) -> None:
    """Reject page parameters that can never describe a page."""
    if page_size <= 0:
        raise ValidationError(f"page size should be positive, got {page_size}", "paginate")
    if page_index < 0:
        raise ValidationError(f"page index should not be negative, got {page_index}", "paginate")


def paginate(items: Sequence[Job], page_size: int, page_index: int) -> JobPage:
    """
    Slice an ordered collection of jobs into the zero-indexed page requested.

    Page i holds items [i * page_size, min((i + 1) * page_size, len(items))).
    A page past the end is empty rather than an error; the total count tells
    the caller the results are exhausted. No cursor state is kept between
    calls, so the same input always yields the same page.
    """
    validate_page_request(page_size, page_index)

    start = page_index * page_size
    return JobPage(
        jobs=tuple(items[start : start + page_size]),
        page_index=page_index,
        page_size=page_size,
        total_count=len(items),
    )
