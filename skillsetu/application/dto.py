from dataclasses import dataclass, field

from ..domain.entities import User


@dataclass
class RegisterUserInput:
    email: str | None
    password: str | None
    name: str | None
    role: str | None


@dataclass
class CourseInput:
    title: str | None
    description: str | None
    category: str | None = None
    difficulty: str | None = None


@dataclass
class JobInput:
    title: str | None
    description: str | None
    skills_required: list[str] = field(default_factory=list)
    budget: float | None = None


@dataclass
class AuthResult:
    user: User
    token: str
