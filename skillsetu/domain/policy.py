from enum import Enum

from .entities import Identity, JobStatus, Role
from .errors import Conflict, Forbidden


class Action(str, Enum):
    CREATE_COURSE = "create_course"
    ENROLL_COURSE = "enroll_course"
    CREATE_JOB = "create_job"
    APPLY_JOB = "apply_job"


ROLE_POLICY: dict[Action, Role] = {
    Action.CREATE_COURSE: Role.MENTOR,
    Action.ENROLL_COURSE: Role.LEARNER,
    Action.CREATE_JOB: Role.CLIENT,
    Action.APPLY_JOB: Role.LEARNER,
}

DENIED_MESSAGES: dict[Action, str] = {
    Action.CREATE_COURSE: "Only mentors can create courses",
    Action.ENROLL_COURSE: "Only learners can enroll in courses",
    Action.CREATE_JOB: "Only clients can post jobs",
    Action.APPLY_JOB: "Only learners can apply for jobs",
}


def is_allowed(role: Role, action: Action) -> bool:
    return ROLE_POLICY[action] == role


def check(identity: Identity, action: Action) -> None:
    if not is_allowed(identity.role, action):
        raise Forbidden(DENIED_MESSAGES[action])


def advance_job_status(current: JobStatus, target: JobStatus) -> JobStatus:
    if not current.can_transition_to(target):
        raise Conflict(f"Cannot move job from {current.value} to {target.value}")
    return target
