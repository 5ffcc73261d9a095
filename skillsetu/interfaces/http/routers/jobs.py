from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ....application.dto import JobInput
from ....application.use_cases.jobs import ApplyToJob, CreateJob, GetJob, ListApplications, ListJobs
from ....domain.entities import Identity, JobStatus
from ....domain.policy import Action
from ....infrastructure.db import get_db
from ....infrastructure.metrics import lifecycle_events_total
from ....infrastructure.repositories import ApplicationRepository, JobRepository
from ..authz import get_identity, require_action
from ..schemas import ApplicationOut, JobCreate, JobCreated, JobOut, MessageResp

router = APIRouter(prefix="/api", tags=["jobs"])

@router.get("/jobs", response_model=list[JobOut])
def list_jobs(db: Session = Depends(get_db), status: JobStatus | None = Query(None)):
    rows = ListJobs(JobRepository(db)).execute(status=status)
    return [JobOut.model_validate(row) for row in rows]

@router.get("/jobs/{job_id}", response_model=JobOut)
def get_job(job_id: int, db: Session = Depends(get_db)):
    return JobOut.model_validate(GetJob(JobRepository(db)).execute(job_id))

# --- Client-only:

@router.post("/jobs", response_model=JobCreated, status_code=status.HTTP_201_CREATED)
def create_job(payload: JobCreate | None = None,
               identity: Identity = Depends(require_action(Action.CREATE_JOB)),
               db: Session = Depends(get_db)):
    payload = payload or JobCreate()
    job_id = CreateJob(JobRepository(db)).execute(identity, JobInput(
        title=payload.title,
        description=payload.description,
        skills_required=payload.skills_required,
        budget=payload.budget,
    ))
    lifecycle_events_total.labels(event="job_created").inc()
    return JobCreated(jobId=job_id)

# --- Learner-only:

@router.post("/jobs/{job_id}/apply", response_model=MessageResp, status_code=status.HTTP_201_CREATED)
def apply(job_id: int,
          identity: Identity = Depends(require_action(Action.APPLY_JOB)),
          db: Session = Depends(get_db)):
    ApplyToJob(JobRepository(db), ApplicationRepository(db)).execute(identity, job_id)
    lifecycle_events_total.labels(event="applied").inc()
    return MessageResp(message="Application submitted successfully")

@router.get("/applications", response_model=list[ApplicationOut])
def my_applications(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    rows = ListApplications(ApplicationRepository(db)).execute(identity)
    return [ApplicationOut.model_validate(row) for row in rows]
