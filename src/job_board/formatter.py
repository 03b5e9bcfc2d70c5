from job_board.models import Job, JobPage, JobPayment


class JobFormatter:
    """
    Renders jobs and job pages as plain text for the command line.
    """

    DESCRIPTION_LIMIT = 200

    @classmethod
    def format_pay(cls, pay: JobPayment) -> str:
        frequency = pay.frequency.value.lower()
        if pay.min == pay.max:
            return f"{pay.min} ({frequency})"
        return f"{pay.min} - {pay.max} ({frequency})"

    @classmethod
    def format_job(cls, job: Job, language: str = "en") -> str:
        """
        Formats the job into a multi-line summary.
        """
        lines = [f"{job.job_title} [{job.job_status.value}]"]
        if job.job_id:
            lines.append(f"Id: {job.job_id}")
        if job.location.name:
            lines.append(f"Location: {job.location.name} {job.location.postal_code}".rstrip())
        lines.append(f"Pay: {cls.format_pay(job.job_pay)}")
        lines.append(f"Duration: {job.job_duration.value.replace('_', ' ').lower()}")

        if job.requirements:
            names = ", ".join(r.localized_name(language) for r in job.requirements)
            lines.append(f"Requirements: {names}")
        else:
            lines.append("Requirements: none")

        if job.post_expiry_timestamp:
            lines.append(f"Expires: {job.post_expiry_timestamp.isoformat()}")

        # Truncate at the last word boundary
        desc = job.job_description.strip()
        if desc:
            if len(desc) > cls.DESCRIPTION_LIMIT:
                desc = desc[: cls.DESCRIPTION_LIMIT].rsplit(" ", 1)[0] + "..."
            lines.append("")
            lines.append(desc)

        return "\n".join(lines)

    @classmethod
    def format_page(cls, page: JobPage) -> str:
        first = page.page_index * page.page_size + 1
        header = f"Page {page.page_index + 1}: "
        if page.jobs:
            last = first + len(page.jobs) - 1
            header += f"jobs {first}-{last} of {page.total_count}"
        else:
            header += f"no jobs (total {page.total_count})"

        blocks = [header] + [cls.format_job(job) for job in page.jobs]
        return "\n\n".join(blocks)
