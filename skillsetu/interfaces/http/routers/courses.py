from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ....application.dto import CourseInput
from ....application.use_cases.courses import (
    CreateCourse,
    EnrollInCourse,
    GetCourse,
    ListCourses,
    ListEnrollments,
)
from ....domain.entities import Difficulty, Identity
from ....domain.policy import Action
from ....infrastructure.db import get_db
from ....infrastructure.metrics import lifecycle_events_total
from ....infrastructure.repositories import CourseRepository, EnrollmentRepository
from ..authz import get_identity, require_action
from ..schemas import CourseCreate, CourseCreated, CourseOut, EnrollmentOut, MessageResp

router = APIRouter(prefix="/api", tags=["courses"])

@router.get("/courses", response_model=list[CourseOut])
def list_courses(db: Session = Depends(get_db),
                 category: str | None = Query(None),
                 difficulty: Difficulty | None = Query(None)):
    rows = ListCourses(CourseRepository(db)).execute(category=category, difficulty=difficulty)
    return [CourseOut.model_validate(row) for row in rows]

@router.get("/courses/{course_id}", response_model=CourseOut)
def get_course(course_id: int, db: Session = Depends(get_db)):
    return CourseOut.model_validate(GetCourse(CourseRepository(db)).execute(course_id))

# --- Mentor-only:

@router.post("/courses", response_model=CourseCreated, status_code=status.HTTP_201_CREATED)
def create_course(payload: CourseCreate | None = None,
                  identity: Identity = Depends(require_action(Action.CREATE_COURSE)),
                  db: Session = Depends(get_db)):
    payload = payload or CourseCreate()
    course_id = CreateCourse(CourseRepository(db)).execute(identity, CourseInput(
        title=payload.title,
        description=payload.description,
        category=payload.category,
        difficulty=payload.difficulty,
    ))
    lifecycle_events_total.labels(event="course_created").inc()
    return CourseCreated(courseId=course_id)

# --- Learner-only:

@router.post("/courses/{course_id}/enroll", response_model=MessageResp, status_code=status.HTTP_201_CREATED)
def enroll(course_id: int,
           identity: Identity = Depends(require_action(Action.ENROLL_COURSE)),
           db: Session = Depends(get_db)):
    EnrollInCourse(CourseRepository(db), EnrollmentRepository(db)).execute(identity, course_id)
    lifecycle_events_total.labels(event="enrolled").inc()
    return MessageResp(message="Enrolled successfully")

@router.get("/enrollments", response_model=list[EnrollmentOut])
def my_enrollments(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    rows = ListEnrollments(EnrollmentRepository(db)).execute(identity)
    return [EnrollmentOut.model_validate(row) for row in rows]
