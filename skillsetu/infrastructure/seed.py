import structlog
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .models import CourseORM, JobORM, UserORM
from .security import PasswordHasher

logger = structlog.get_logger(__name__)

SAMPLE_PASSWORD = "password123"

SAMPLE_USERS = [
    ("learner@test.com", "John Learner", "learner"),
    ("mentor@test.com", "Jane Mentor", "mentor"),
    ("client@test.com", "Bob Client", "client"),
]

SAMPLE_COURSES = [
    ("Video Editing for YouTube", "Learn to edit engaging vlogs that captivate audiences", "Design", "Beginner"),
    ("Basic Web Development", "Master HTML, CSS, and basic JavaScript", "Tech", "Beginner"),
    ("Graphic Design (Hindi)", "Complete graphic design course in Hindi", "Design", "Intermediate"),
    ("Advanced Python Programming", "Deep dive into Python frameworks and best practices", "Tech", "Advanced"),
]

SAMPLE_JOBS = [
    ("Website Redesign", "Need a modern website redesign for e-commerce",
     ["HTML", "CSS", "JavaScript"], 5000),
    ("Video Editor Needed", "Looking for experienced video editor for YouTube channel",
     ["Video Editing", "Adobe Premiere"], 2000),
    ("Logo Design Project", "Create a professional logo for tech startup",
     ["Graphic Design", "Illustrator"], 1500),
]


def seed_sample_data(db: Session) -> bool:
    """Заполняет пустую БД демо-данными. Возвращает False, если пользователи уже есть."""
    if db.scalar(select(func.count()).select_from(UserORM)):
        return False

    pwd_hash = PasswordHasher().hash(SAMPLE_PASSWORD)
    users = {}
    for email, name, role in SAMPLE_USERS:
        row = UserORM(email=email, password_hash=pwd_hash, name=name, role=role)
        db.add(row)
        users[role] = row
    db.flush()

    for title, description, category, difficulty in SAMPLE_COURSES:
        db.add(CourseORM(title=title, description=description, category=category,
                         difficulty=difficulty, instructor_id=users["mentor"].id))
    for title, description, skills, budget in SAMPLE_JOBS:
        db.add(JobORM(title=title, description=description, client_id=users["client"].id,
                      skills_required=skills, budget=budget, status="open"))
    db.commit()

    logger.info("sample_data_seeded", users=len(SAMPLE_USERS),
                courses=len(SAMPLE_COURSES), jobs=len(SAMPLE_JOBS))
    return True
