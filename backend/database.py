# backend/database.py
import uuid

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import settings

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

# SQLAlchemy requires the postgresql:// scheme
if SQLALCHEMY_DATABASE_URL.startswith("postgres://"):
    SQLALCHEMY_DATABASE_URL = SQLALCHEMY_DATABASE_URL.replace("postgres://", "postgresql://", 1)


def build_connect_args(url: str, timeout_seconds: int) -> dict:
    # Bound every storage call so a slow backend cannot stall a worker
    if url.startswith("sqlite"):
        return {"check_same_thread": False, "timeout": timeout_seconds}
    if url.startswith("postgresql"):
        return {"options": f"-c statement_timeout={timeout_seconds * 1000}"}
    return {}


engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args=build_connect_args(SQLALCHEMY_DATABASE_URL, settings.STORAGE_TIMEOUT_SECONDS),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def generate_id() -> str:
    return str(uuid.uuid4())

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    # Register every mapped table before create_all
    import models.users, models.product, models.cart, models.campaign, models.history, models.log  # noqa: F401
    Base.metadata.create_all(bind=engine)
