from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    LEARNER = "learner"
    MENTOR = "mentor"
    CLIENT = "client"


class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class JobStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    def can_transition_to(self, target: "JobStatus") -> bool:
        # open -> in_progress -> completed, только на шаг вперёд
        order = list(JobStatus)
        return order.index(target) == order.index(self) + 1


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class User:
    id: int | None
    email: str
    name: str
    role: Role
    password_hash: str = field(default="", repr=False)
    created_at: datetime | None = None


@dataclass(frozen=True)
class Claims:
    sub: int
    email: str
    role: Role
    exp: datetime


@dataclass(frozen=True)
class Identity:
    id: int
    email: str
    role: Role

    @classmethod
    def from_claims(cls, claims: Claims) -> "Identity":
        return cls(id=claims.sub, email=claims.email, role=claims.role)


@dataclass(frozen=True)
class Course:
    id: int | None
    title: str
    description: str
    instructor_id: int
    category: str | None = None
    difficulty: Difficulty | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class Job:
    id: int | None
    title: str
    description: str
    client_id: int
    skills_required: list[str] = field(default_factory=list)
    budget: float | None = None
    status: JobStatus = JobStatus.OPEN
    created_at: datetime | None = None


@dataclass(frozen=True)
class EnrollmentView:
    """Запись на курс вместе с данными курса."""
    id: int
    user_id: int
    course_id: int
    progress: int
    enrolled_at: datetime | None
    title: str
    description: str
    category: str | None
    difficulty: Difficulty | None


@dataclass(frozen=True)
class ApplicationView:
    """Отклик вместе с данными вакансии."""
    id: int
    user_id: int
    job_id: int
    status: ApplicationStatus
    applied_at: datetime | None
    title: str
    description: str
    budget: float | None
    job_status: JobStatus


@dataclass(frozen=True)
class LearnerStats:
    enrolledCourses: int
    applications: int
    role: Role = Role.LEARNER


@dataclass(frozen=True)
class MentorStats:
    coursesCreated: int
    role: Role = Role.MENTOR


@dataclass(frozen=True)
class ClientStats:
    jobsPosted: int
    role: Role = Role.CLIENT


DashboardStats = LearnerStats | MentorStats | ClientStats
