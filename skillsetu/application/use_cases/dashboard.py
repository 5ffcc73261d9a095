from ...domain.entities import ClientStats, DashboardStats, Identity, LearnerStats, MentorStats, Role
from ..ports import IApplicationRepository, ICourseRepository, IEnrollmentRepository, IJobRepository


class GetDashboardStats:
    """Счётчики для дашборда в зависимости от роли. Только чтение."""

    def __init__(
        self,
        courses: ICourseRepository,
        jobs: IJobRepository,
        enrollments: IEnrollmentRepository,
        applications: IApplicationRepository,
    ):
        self.courses = courses
        self.jobs = jobs
        self.enrollments = enrollments
        self.applications = applications

    def execute(self, identity: Identity) -> DashboardStats:
        if identity.role == Role.LEARNER:
            return LearnerStats(
                enrolledCourses=self.enrollments.count_for_user(identity.id),
                applications=self.applications.count_for_user(identity.id),
            )
        if identity.role == Role.MENTOR:
            return MentorStats(coursesCreated=self.courses.count_by_instructor(identity.id))
        return ClientStats(jobsPosted=self.jobs.count_by_client(identity.id))
