from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from ..config import settings

connect_args = {}
engine_kwargs = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # sync-роуты выполняются в threadpool
    connect_args = {"check_same_thread": False}
else:
    engine_kwargs = {"pool_size": 10, "max_overflow": 20, "pool_recycle": 3600}
    if settings.DATABASE_URL.startswith("postgresql"):
        connect_args = {"client_encoding": "utf8"}

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
    echo=False,
    **engine_kwargs,
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

def get_db():
    db = SessionLocal()
    try: yield db
    finally: db.close()
