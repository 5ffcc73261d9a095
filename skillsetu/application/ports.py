from ..domain.entities import (
    ApplicationView,
    Claims,
    Course,
    Difficulty,
    EnrollmentView,
    Job,
    JobStatus,
    Role,
    User,
)

# Порты хранилища. Уникальность (email, user+course, user+job) обязана
# проверяться атомарно на уровне БД, нарушение -> Conflict.


class IUserRepository:
    def get_by_email(self, email: str) -> User | None: ...
    def get_by_id(self, user_id: int) -> User | None: ...
    def create(self, email: str, password_hash: str, name: str, role: Role) -> User: ...


class ICourseRepository:
    def create(self, course: Course) -> Course: ...
    def get(self, course_id: int) -> Course | None: ...
    def list(self, category: str | None = None, difficulty: Difficulty | None = None) -> list[Course]: ...
    def count_by_instructor(self, instructor_id: int) -> int: ...


class IJobRepository:
    def create(self, job: Job) -> Job: ...
    def get(self, job_id: int) -> Job | None: ...
    def list(self, status: JobStatus | None = None) -> list[Job]: ...
    def count_by_client(self, client_id: int) -> int: ...


class IEnrollmentRepository:
    def add(self, user_id: int, course_id: int) -> None: ...
    def list_for_user(self, user_id: int) -> list[EnrollmentView]: ...
    def count_for_user(self, user_id: int) -> int: ...


class IApplicationRepository:
    def add(self, user_id: int, job_id: int) -> None: ...
    def list_for_user(self, user_id: int) -> list[ApplicationView]: ...
    def count_for_user(self, user_id: int) -> int: ...


class IPasswordHasher:
    dummy_hash: str

    def hash(self, plain: str) -> str: ...
    def verify(self, plain: str, hashed: str) -> bool: ...


class ITokenService:
    def issue(self, user_id: int, email: str, role: Role) -> str: ...
    def verify(self, token: str | None) -> Claims: ...
