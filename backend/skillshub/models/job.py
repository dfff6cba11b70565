from datetime import datetime
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum

from skillshub.database import Base


class JobType(str, enum.Enum):
    GIG = "GIG"  # Freelance / project-based
    INTERNSHIP = "INTERNSHIP"
    PART_TIME = "PART_TIME"
    FULL_TIME = "FULL_TIME"


class JobStatus(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


# Type-specific columns; exactly one group is meaningful for a given job.
VARIANT_FIELDS: dict[JobType, tuple[str, ...]] = {
    JobType.GIG: ("project_duration", "budget", "deadline", "deliverables"),
    JobType.INTERNSHIP: ("internship_duration", "stipend", "start_date", "learning_objectives"),
    JobType.PART_TIME: ("hours_per_week", "schedule", "hourly_rate"),
    JobType.FULL_TIME: ("work_arrangement", "start_date_full_time", "probation_period", "benefits"),
}

DATE_FIELDS = ("deadline", "start_date", "start_date_full_time")


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employer_id = Column(Integer, ForeignKey("employer_profiles.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(SQLEnum(JobType, name="job_type"), nullable=False, index=True)
    location = Column(String(255), nullable=True)
    salary_range = Column(String(255), nullable=True)
    status = Column(SQLEnum(JobStatus, name="job_status"), nullable=False, default=JobStatus.OPEN, index=True)

    # GIG
    project_duration = Column(String(255), nullable=True)
    budget = Column(String(255), nullable=True)
    deadline = Column(DateTime, nullable=True)
    deliverables = Column(Text, nullable=True)

    # INTERNSHIP
    internship_duration = Column(String(255), nullable=True)
    stipend = Column(String(255), nullable=True)
    start_date = Column(DateTime, nullable=True)
    learning_objectives = Column(Text, nullable=True)

    # PART_TIME
    hours_per_week = Column(String(50), nullable=True)
    schedule = Column(String(255), nullable=True)
    hourly_rate = Column(String(255), nullable=True)

    # FULL_TIME
    work_arrangement = Column(String(100), nullable=True)  # onsite | remote | hybrid
    start_date_full_time = Column(DateTime, nullable=True)
    probation_period = Column(String(255), nullable=True)
    benefits = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    employer = relationship("EmployerProfile", back_populates="jobs")
    skills = relationship("SkillOnJob", back_populates="job", cascade="all, delete-orphan")
    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan")
