import pytest

from skillsetu.application.dto import CourseInput, JobInput, RegisterUserInput
from skillsetu.application.use_cases.auth import GetCurrentUser, LoginUser, RegisterUser
from skillsetu.application.use_cases.courses import CreateCourse, EnrollInCourse, ListEnrollments
from skillsetu.application.use_cases.dashboard import GetDashboardStats
from skillsetu.application.use_cases.jobs import ApplyToJob, CreateJob, ListApplications
from skillsetu.domain.entities import ClientStats, Identity, LearnerStats, MentorStats, Role
from skillsetu.domain.errors import Conflict, Forbidden, NotFound, Unauthorized, ValidationError

LEARNER = Identity(id=1, email="l@test.com", role=Role.LEARNER)
MENTOR = Identity(id=2, email="m@test.com", role=Role.MENTOR)
CLIENT = Identity(id=3, email="c@test.com", role=Role.CLIENT)


@pytest.fixture
def register_uc(fake_users, fake_hasher, tokens):
    return RegisterUser(repo=fake_users, hasher=fake_hasher, tokens=tokens)


@pytest.fixture
def login_uc(fake_users, fake_hasher, tokens):
    return LoginUser(repo=fake_users, hasher=fake_hasher, tokens=tokens)


def test_register_then_login(register_uc, login_uc, tokens):
    """Для любой валидной регистрации роль в токене совпадает, логин проходит"""
    for i, role in enumerate(Role):
        email = f"user{i}@test.com"
        result = register_uc.execute(RegisterUserInput(email, "pw123456", "User", role.value))
        assert tokens.verify(result.token).role == role
        assert result.user.password_hash != "pw123456"

        login = login_uc.execute(email, "pw123456")
        assert login.user.id == result.user.id
        assert tokens.verify(login.token).sub == result.user.id


@pytest.mark.parametrize("data", [
    RegisterUserInput(None, "pw", "N", "learner"),
    RegisterUserInput("a@test.com", "", "N", "learner"),
    RegisterUserInput("a@test.com", "pw", None, "learner"),
    RegisterUserInput("a@test.com", "pw", "N", None),
])
def test_register_missing_field(register_uc, data):
    with pytest.raises(ValidationError):
        register_uc.execute(data)


def test_register_duplicate_email(register_uc, fake_users):
    register_uc.execute(RegisterUserInput("a@test.com", "pw", "First", "learner"))
    with pytest.raises(Conflict):
        register_uc.execute(RegisterUserInput("a@test.com", "pw2", "Second", "mentor"))
    assert fake_users.get_by_email("a@test.com").name == "First"


def test_login_failures_are_indistinguishable(register_uc, login_uc, fake_hasher):
    """Одинаковая ошибка и одинаковая работа хэшера для обоих случаев"""
    register_uc.execute(RegisterUserInput("x@test.com", "pw123456", "X", "learner"))

    with pytest.raises(Unauthorized) as wrong_password:
        login_uc.execute("x@test.com", "wrong")
    calls_after_wrong = fake_hasher.verify_calls
    with pytest.raises(Unauthorized) as unknown_user:
        login_uc.execute("noone@test.com", "anything")

    assert str(wrong_password.value) == str(unknown_user.value) == "Invalid credentials"
    assert fake_hasher.verify_calls - calls_after_wrong == 1


def test_login_missing_password(login_uc):
    with pytest.raises(ValidationError):
        login_uc.execute("x@test.com", None)


def test_current_user_not_found(fake_users):
    with pytest.raises(NotFound):
        GetCurrentUser(fake_users).execute(LEARNER)


def test_create_course_checks_role_before_payload(fake_courses):
    """Роль проверяется раньше содержимого запроса"""
    uc = CreateCourse(fake_courses)
    with pytest.raises(Forbidden):
        uc.execute(CLIENT, CourseInput(title=None, description=None))
    with pytest.raises(ValidationError):
        uc.execute(MENTOR, CourseInput(title="T", description=""))
    assert uc.execute(MENTOR, CourseInput(title="T", description="D", difficulty="Beginner")) == 1
    assert fake_courses.get(1).instructor_id == MENTOR.id


def test_enroll_lifecycle(fake_courses, fake_enrollments):
    course_id = CreateCourse(fake_courses).execute(MENTOR, CourseInput(title="T", description="D"))
    uc = EnrollInCourse(fake_courses, fake_enrollments)

    with pytest.raises(Forbidden):
        uc.execute(MENTOR, course_id)
    with pytest.raises(NotFound):
        uc.execute(LEARNER, 999)

    uc.execute(LEARNER, course_id)
    with pytest.raises(Conflict):
        uc.execute(LEARNER, course_id)
    assert fake_enrollments.count_for_user(LEARNER.id) == 1

    views = ListEnrollments(fake_enrollments).execute(LEARNER)
    assert [v.title for v in views] == ["T"]


def test_apply_lifecycle(fake_jobs, fake_applications):
    job_id = CreateJob(fake_jobs).execute(CLIENT, JobInput(title="J", description="D", skills_required=[" a ", ""]))
    assert fake_jobs.get(job_id).skills_required == ["a"]
    uc = ApplyToJob(fake_jobs, fake_applications)

    with pytest.raises(Forbidden):
        uc.execute(CLIENT, job_id)
    uc.execute(LEARNER, job_id)
    with pytest.raises(Conflict):
        uc.execute(LEARNER, job_id)

    views = ListApplications(fake_applications).execute(LEARNER)
    assert len(views) == 1
    assert views[0].status.value == "pending"


def test_create_job_wrong_role(fake_jobs):
    with pytest.raises(Forbidden):
        CreateJob(fake_jobs).execute(LEARNER, JobInput(title="J", description="D"))


def test_dashboard_stats_are_role_shaped(fake_courses, fake_jobs, fake_enrollments, fake_applications):
    course_id = CreateCourse(fake_courses).execute(MENTOR, CourseInput(title="T", description="D"))
    job_id = CreateJob(fake_jobs).execute(CLIENT, JobInput(title="J", description="D"))
    EnrollInCourse(fake_courses, fake_enrollments).execute(LEARNER, course_id)
    ApplyToJob(fake_jobs, fake_applications).execute(LEARNER, job_id)

    uc = GetDashboardStats(fake_courses, fake_jobs, fake_enrollments, fake_applications)
    assert uc.execute(LEARNER) == LearnerStats(enrolledCourses=1, applications=1)
    assert uc.execute(MENTOR) == MentorStats(coursesCreated=1)
    assert uc.execute(CLIENT) == ClientStats(jobsPosted=1)
