from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, field_validator

from ...domain.entities import ApplicationStatus, Difficulty, JobStatus, Role

# Поля запросов необязательные: пропуски проверяет use case и отвечает 400

class RegisterReq(BaseModel):
    email: EmailStr | None = None
    password: str | None = None
    name: str | None = None
    role: str | None = None

class LoginReq(BaseModel):
    email: EmailStr | None = None
    password: str | None = None

class UserResp(BaseModel):
    id: int
    email: EmailStr
    name: str
    role: Role
    created_at: datetime | None = None
    class Config: from_attributes = True

class AuthResp(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    user: UserResp

class MessageResp(BaseModel):
    message: str

class CourseCreate(BaseModel):
    title: str | None = None
    description: str | None = None
    category: str | None = None
    difficulty: str | None = None

class CourseCreated(BaseModel):
    message: str = "Course created successfully"
    courseId: int

class CourseOut(BaseModel):
    id: int
    title: str
    description: str
    category: str | None = None
    difficulty: Difficulty | None = None
    instructor_id: int
    created_at: datetime | None = None
    class Config: from_attributes = True

class JobCreate(BaseModel):
    title: str | None = None
    description: str | None = None
    skills_required: list[str] = []
    budget: float | None = None

    @field_validator("skills_required", mode="before")
    @classmethod
    def split_skills(cls, v):
        # фронтенд присылает навыки строкой через запятую
        if v is None:
            return []
        if isinstance(v, str):
            return v.split(",")
        return v

class JobCreated(BaseModel):
    message: str = "Job created successfully"
    jobId: int

class JobOut(BaseModel):
    id: int
    title: str
    description: str
    client_id: int
    skills_required: list[str]
    budget: float | None = None
    status: JobStatus
    created_at: datetime | None = None
    class Config: from_attributes = True

class EnrollmentOut(BaseModel):
    id: int
    user_id: int
    course_id: int
    progress: int
    enrolled_at: datetime | None = None
    title: str
    description: str
    category: str | None = None
    difficulty: Difficulty | None = None
    class Config: from_attributes = True

class ApplicationOut(BaseModel):
    id: int
    user_id: int
    job_id: int
    status: ApplicationStatus
    applied_at: datetime | None = None
    title: str
    description: str
    budget: float | None = None
    job_status: JobStatus
    class Config: from_attributes = True

class LearnerStatsOut(BaseModel):
    role: Literal["learner"] = "learner"
    enrolledCourses: int
    applications: int

class MentorStatsOut(BaseModel):
    role: Literal["mentor"] = "mentor"
    coursesCreated: int

class ClientStatsOut(BaseModel):
    role: Literal["client"] = "client"
    jobsPosted: int
