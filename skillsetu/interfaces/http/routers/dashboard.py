from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ....application.use_cases.dashboard import GetDashboardStats
from ....domain.entities import ClientStats, DashboardStats, Identity, LearnerStats, MentorStats
from ....infrastructure.db import get_db
from ....infrastructure.repositories import (
    ApplicationRepository,
    CourseRepository,
    EnrollmentRepository,
    JobRepository,
)
from ..authz import get_identity
from ..schemas import ClientStatsOut, LearnerStatsOut, MentorStatsOut

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def to_response(stats: DashboardStats) -> LearnerStatsOut | MentorStatsOut | ClientStatsOut:
    if isinstance(stats, LearnerStats):
        return LearnerStatsOut(enrolledCourses=stats.enrolledCourses, applications=stats.applications)
    if isinstance(stats, MentorStats):
        return MentorStatsOut(coursesCreated=stats.coursesCreated)
    if isinstance(stats, ClientStats):
        return ClientStatsOut(jobsPosted=stats.jobsPosted)
    raise TypeError(f"unknown stats type {type(stats).__name__}")


@router.get("/stats", response_model=LearnerStatsOut | MentorStatsOut | ClientStatsOut)
def stats(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    uc = GetDashboardStats(
        courses=CourseRepository(db),
        jobs=JobRepository(db),
        enrollments=EnrollmentRepository(db),
        applications=ApplicationRepository(db),
    )
    return to_response(uc.execute(identity))
