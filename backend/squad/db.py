# squad/db.py

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from squad import config

# SQLAlchemy Engine
engine = create_engine(config.DATABASE_URL, echo=config.SQL_ECHO, pool_pre_ping=True)

# Session local class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()

# Dependency to get DB session in FastAPI.
# The session is closed exactly once per request; anything not committed is rolled back.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
