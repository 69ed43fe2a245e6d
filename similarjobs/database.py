"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for job and company storage.
"""

from datetime import datetime, timezone
from pathlib import Path
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Company(Base):
    """Employer profile."""

    __tablename__ = "companies"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    industries = Column(JSON, nullable=True)  # list of industry names
    company_size = Column(String, nullable=True)
    website = Column(String, nullable=True)
    logo = Column(String, nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    rating = Column(Float, nullable=True)
    total_reviews = Column(Integer, nullable=False, default=0)

    jobs = relationship("Job", back_populates="company")


class Job(Base):
    """Job posting model."""

    __tablename__ = "jobs"

    id = Column(String, primary_key=True)  # UUID
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    skills = Column(JSON, nullable=True)  # list of skill names
    job_type = Column(String, nullable=True)
    experience_level = Column(String, nullable=True)
    salary = Column(String, nullable=True)  # free-text label, overrides min/max
    salary_min = Column(Float, nullable=True)
    salary_max = Column(Float, nullable=True)
    remote_work = Column(String, nullable=True)
    department = Column(String, nullable=True)
    company_id = Column(String, ForeignKey("companies.id"), nullable=True, index=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    is_premium = Column(Boolean, nullable=False, default=False)
    views = Column(Integer, nullable=False, default=0)
    applications = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default="active", index=True)
    region = Column(String, nullable=False, default="india", index=True)
    valid_till = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    company = relationship("Company", back_populates="jobs")


def get_engine(db_path: Path):
    return create_engine(f"sqlite:///{db_path}")


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = get_engine(db_path)
    Base.metadata.create_all(engine)


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = get_engine(db_path)
    Session = sessionmaker(bind=engine)
    return Session()
