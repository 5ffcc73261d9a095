import structlog

from ...domain.entities import Course, Difficulty, EnrollmentView, Identity
from ...domain.errors import NotFound, ValidationError
from ...domain import policy
from ...domain.policy import Action
from ..dto import CourseInput
from ..ports import ICourseRepository, IEnrollmentRepository

logger = structlog.get_logger(__name__)


class CreateCourse:
    def __init__(self, courses: ICourseRepository):
        self.courses = courses

    def execute(self, identity: Identity, data: CourseInput) -> int:
        policy.check(identity, Action.CREATE_COURSE)
        if not (data.title and data.description):
            raise ValidationError("Title and description required")
        difficulty = None
        if data.difficulty:
            try:
                difficulty = Difficulty(data.difficulty)
            except ValueError:
                raise ValidationError("Invalid difficulty")

        course = self.courses.create(Course(
            id=None,
            title=data.title,
            description=data.description,
            category=data.category or None,
            difficulty=difficulty,
            instructor_id=identity.id,
        ))
        logger.info("course_created", course_id=course.id, instructor_id=identity.id)
        return course.id


class ListCourses:
    def __init__(self, courses: ICourseRepository):
        self.courses = courses

    def execute(self, category: str | None = None, difficulty: Difficulty | None = None) -> list[Course]:
        return self.courses.list(category=category, difficulty=difficulty)


class GetCourse:
    def __init__(self, courses: ICourseRepository):
        self.courses = courses

    def execute(self, course_id: int) -> Course:
        course = self.courses.get(course_id)
        if course is None:
            raise NotFound("Course not found")
        return course


class EnrollInCourse:
    def __init__(self, courses: ICourseRepository, enrollments: IEnrollmentRepository):
        self.courses = courses
        self.enrollments = enrollments

    def execute(self, identity: Identity, course_id: int) -> None:
        policy.check(identity, Action.ENROLL_COURSE)
        if self.courses.get(course_id) is None:
            raise NotFound("Course not found")
        # без проверки "прочитал-записал": дубликат ловит unique constraint
        self.enrollments.add(identity.id, course_id)
        logger.info("enrollment_created", user_id=identity.id, course_id=course_id)


class ListEnrollments:
    def __init__(self, enrollments: IEnrollmentRepository):
        self.enrollments = enrollments

    def execute(self, identity: Identity) -> list[EnrollmentView]:
        return self.enrollments.list_for_user(identity.id)
