from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from shared.core.config import settings

Base = declarative_base()

POOL_SIZE = 2
MAX_OVERFLOW = 2

if settings.DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        settings.DATABASE_URL,
        connect_args={"check_same_thread": False}
    )
else:
    engine = create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=POOL_SIZE,          # max idle connections
        max_overflow=MAX_OVERFLOW,      # max temporary extra connections
        pool_timeout=30       # wait time before failing
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
