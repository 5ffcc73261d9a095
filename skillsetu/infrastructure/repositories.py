from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .metrics import db_queries_total
from .models import ApplicationORM, CourseORM, EnrollmentORM, JobORM, UserORM
from ..domain.entities import (
    ApplicationStatus,
    ApplicationView,
    Course,
    Difficulty,
    EnrollmentView,
    Job,
    JobStatus,
    Role,
    User,
)
from ..domain.errors import Conflict
from ..application.ports import (
    IApplicationRepository,
    ICourseRepository,
    IEnrollmentRepository,
    IJobRepository,
    IUserRepository,
)


def user_to_domain(u: UserORM) -> User:
    return User(
        id=u.id,
        email=u.email,
        name=u.name,
        role=Role(u.role),
        password_hash=u.password_hash,
        created_at=u.created_at,
    )


def course_to_domain(c: CourseORM) -> Course:
    return Course(
        id=c.id,
        title=c.title,
        description=c.description,
        category=c.category,
        difficulty=Difficulty(c.difficulty) if c.difficulty else None,
        instructor_id=c.instructor_id,
        created_at=c.created_at,
    )


def job_to_domain(j: JobORM) -> Job:
    return Job(
        id=j.id,
        title=j.title,
        description=j.description,
        client_id=j.client_id,
        skills_required=list(j.skills_required or []),
        budget=j.budget,
        status=JobStatus(j.status),
        created_at=j.created_at,
    )


def _is_unique_violation(exc: IntegrityError) -> bool:
    # sqlite: "UNIQUE constraint failed", postgres: "violates unique constraint"
    return "unique" in str(exc.orig).lower()


def _insert(db: Session, row, conflict_message: str | None = None):
    """Вставка с коммитом.

    Нарушение unique constraint превращается в Conflict(conflict_message),
    остальные IntegrityError (FK, CHECK, NOT NULL) пробрасываются после rollback.
    """
    db_queries_total.inc()
    db.add(row)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if conflict_message and _is_unique_violation(e):
            raise Conflict(conflict_message) from e
        raise
    db.refresh(row)
    return row


class UserRepository(IUserRepository):
    def __init__(self, db: Session): self.db = db

    def get_by_email(self, email: str) -> User | None:
        db_queries_total.inc()
        row = self.db.query(UserORM).filter(UserORM.email == email).first()
        return user_to_domain(row) if row else None

    def get_by_id(self, user_id: int) -> User | None:
        db_queries_total.inc()
        row = self.db.get(UserORM, user_id)
        return user_to_domain(row) if row else None

    def create(self, email: str, password_hash: str, name: str, role: Role) -> User:
        row = UserORM(email=email, password_hash=password_hash, name=name, role=role.value)
        return user_to_domain(_insert(self.db, row, "Email already exists"))


class CourseRepository(ICourseRepository):
    def __init__(self, db: Session): self.db = db

    def create(self, course: Course) -> Course:
        row = CourseORM(
            title=course.title,
            description=course.description,
            category=course.category,
            difficulty=course.difficulty.value if course.difficulty else None,
            instructor_id=course.instructor_id,
        )
        return course_to_domain(_insert(self.db, row))

    def get(self, course_id: int) -> Course | None:
        db_queries_total.inc()
        row = self.db.get(CourseORM, course_id)
        return course_to_domain(row) if row else None

    def list(self, category: str | None = None, difficulty: Difficulty | None = None) -> list[Course]:
        db_queries_total.inc()
        q = self.db.query(CourseORM)
        if category:
            q = q.filter(CourseORM.category == category)
        if difficulty:
            q = q.filter(CourseORM.difficulty == difficulty.value)
        return [course_to_domain(row) for row in q.order_by(CourseORM.id).all()]

    def count_by_instructor(self, instructor_id: int) -> int:
        db_queries_total.inc()
        return self.db.scalar(
            select(func.count()).select_from(CourseORM).where(CourseORM.instructor_id == instructor_id)
        ) or 0


class JobRepository(IJobRepository):
    def __init__(self, db: Session): self.db = db

    def create(self, job: Job) -> Job:
        row = JobORM(
            title=job.title,
            description=job.description,
            client_id=job.client_id,
            skills_required=list(job.skills_required),
            budget=job.budget,
            status=job.status.value,
        )
        return job_to_domain(_insert(self.db, row))

    def get(self, job_id: int) -> Job | None:
        db_queries_total.inc()
        row = self.db.get(JobORM, job_id)
        return job_to_domain(row) if row else None

    def list(self, status: JobStatus | None = None) -> list[Job]:
        db_queries_total.inc()
        q = self.db.query(JobORM)
        if status:
            q = q.filter(JobORM.status == status.value)
        return [job_to_domain(row) for row in q.order_by(JobORM.id).all()]

    def count_by_client(self, client_id: int) -> int:
        db_queries_total.inc()
        return self.db.scalar(
            select(func.count()).select_from(JobORM).where(JobORM.client_id == client_id)
        ) or 0


class EnrollmentRepository(IEnrollmentRepository):
    def __init__(self, db: Session): self.db = db

    def add(self, user_id: int, course_id: int) -> None:
        _insert(self.db, EnrollmentORM(user_id=user_id, course_id=course_id), "Already enrolled")

    def list_for_user(self, user_id: int) -> list[EnrollmentView]:
        db_queries_total.inc()
        q = (select(EnrollmentORM, CourseORM)
             .join(CourseORM, EnrollmentORM.course_id == CourseORM.id)
             .where(EnrollmentORM.user_id == user_id)
             .order_by(EnrollmentORM.id))
        return [
            EnrollmentView(
                id=e.id,
                user_id=e.user_id,
                course_id=e.course_id,
                progress=e.progress,
                enrolled_at=e.enrolled_at,
                title=c.title,
                description=c.description,
                category=c.category,
                difficulty=Difficulty(c.difficulty) if c.difficulty else None,
            )
            for e, c in self.db.execute(q).all()
        ]

    def count_for_user(self, user_id: int) -> int:
        db_queries_total.inc()
        return self.db.scalar(
            select(func.count()).select_from(EnrollmentORM).where(EnrollmentORM.user_id == user_id)
        ) or 0


class ApplicationRepository(IApplicationRepository):
    def __init__(self, db: Session): self.db = db

    def add(self, user_id: int, job_id: int) -> None:
        _insert(self.db, ApplicationORM(user_id=user_id, job_id=job_id), "Already applied")

    def list_for_user(self, user_id: int) -> list[ApplicationView]:
        db_queries_total.inc()
        q = (select(ApplicationORM, JobORM)
             .join(JobORM, ApplicationORM.job_id == JobORM.id)
             .where(ApplicationORM.user_id == user_id)
             .order_by(ApplicationORM.id))
        return [
            ApplicationView(
                id=a.id,
                user_id=a.user_id,
                job_id=a.job_id,
                status=ApplicationStatus(a.status),
                applied_at=a.applied_at,
                title=j.title,
                description=j.description,
                budget=j.budget,
                job_status=JobStatus(j.status),
            )
            for a, j in self.db.execute(q).all()
        ]

    def count_for_user(self, user_id: int) -> int:
        db_queries_total.inc()
        return self.db.scalar(
            select(func.count()).select_from(ApplicationORM).where(ApplicationORM.user_id == user_id)
        ) or 0
