import structlog

from ...domain.entities import ApplicationView, Identity, Job, JobStatus
from ...domain.errors import NotFound, ValidationError
from ...domain import policy
from ...domain.policy import Action
from ..dto import JobInput
from ..ports import IApplicationRepository, IJobRepository

logger = structlog.get_logger(__name__)


def _clean_skills(skills: list[str]) -> list[str]:
    return [s.strip() for s in skills if s and s.strip()]


class CreateJob:
    def __init__(self, jobs: IJobRepository):
        self.jobs = jobs

    def execute(self, identity: Identity, data: JobInput) -> int:
        policy.check(identity, Action.CREATE_JOB)
        if not (data.title and data.description):
            raise ValidationError("Title and description required")
        if data.budget is not None and data.budget < 0:
            raise ValidationError("Budget must not be negative")

        job = self.jobs.create(Job(
            id=None,
            title=data.title,
            description=data.description,
            client_id=identity.id,
            skills_required=_clean_skills(data.skills_required),
            budget=data.budget,
        ))
        logger.info("job_created", job_id=job.id, client_id=identity.id)
        return job.id


class ListJobs:
    def __init__(self, jobs: IJobRepository):
        self.jobs = jobs

    def execute(self, status: JobStatus | None = None) -> list[Job]:
        return self.jobs.list(status=status)


class GetJob:
    def __init__(self, jobs: IJobRepository):
        self.jobs = jobs

    def execute(self, job_id: int) -> Job:
        job = self.jobs.get(job_id)
        if job is None:
            raise NotFound("Job not found")
        return job


class ApplyToJob:
    def __init__(self, jobs: IJobRepository, applications: IApplicationRepository):
        self.jobs = jobs
        self.applications = applications

    def execute(self, identity: Identity, job_id: int) -> None:
        policy.check(identity, Action.APPLY_JOB)
        if self.jobs.get(job_id) is None:
            raise NotFound("Job not found")
        self.applications.add(identity.id, job_id)
        logger.info("application_created", user_id=identity.id, job_id=job_id)


class ListApplications:
    def __init__(self, applications: IApplicationRepository):
        self.applications = applications

    def execute(self, identity: Identity) -> list[ApplicationView]:
        return self.applications.list_for_user(identity.id)
