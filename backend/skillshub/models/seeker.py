from datetime import datetime
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum

from skillshub.database import Base


class Pathway(str, enum.Enum):
    """Which track a job seeker signed up through."""
    STUDENT = "STUDENT"
    GRADUATE = "GRADUATE"
    ARTISAN = "ARTISAN"


class SeekerProfile(Base):
    __tablename__ = "seeker_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    pathway = Column(SQLEnum(Pathway, name="pathway"), nullable=False)
    profession = Column(String(255), nullable=True)
    headline = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    date_of_birth = Column(DateTime, nullable=True)
    years_experience = Column(Integer, nullable=True)
    availability = Column(String(100), nullable=True)  # e.g. "Immediately", "2 weeks"

    resume_file_id = Column(String(32), ForeignKey("file_objects.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="seeker_profile")
    resume_file = relationship("FileObject")
    skills = relationship("SkillOnProfile", back_populates="seeker", cascade="all, delete-orphan")
    education = relationship("Education", cascade="all, delete-orphan")
    trainings = relationship("Training", cascade="all, delete-orphan")
    experiences = relationship("WorkExperience", cascade="all, delete-orphan")
    portfolio = relationship("PortfolioItem", cascade="all, delete-orphan")


class Education(Base):
    __tablename__ = "education"

    id = Column(Integer, primary_key=True, autoincrement=True)
    seeker_id = Column(Integer, ForeignKey("seeker_profiles.id", ondelete="CASCADE"), nullable=False)
    school = Column(String(255), nullable=False)
    credential = Column(String(255), nullable=True)
    field = Column(String(255), nullable=True)
    start_year = Column(Integer, nullable=True)
    end_year = Column(Integer, nullable=True)


class Training(Base):
    __tablename__ = "trainings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    seeker_id = Column(Integer, ForeignKey("seeker_profiles.id", ondelete="CASCADE"), nullable=False)
    training_name = Column(String(255), nullable=False)
    institute = Column(String(255), nullable=True)
    certificate = Column(String(255), nullable=True)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)


class WorkExperience(Base):
    __tablename__ = "work_experiences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    seeker_id = Column(Integer, ForeignKey("seeker_profiles.id", ondelete="CASCADE"), nullable=False)
    company_name = Column(String(255), nullable=False)
    role_title = Column(String(255), nullable=False)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    description = Column(Text, nullable=True)


class PortfolioItem(Base):
    """Portfolio entry: either an external link or an uploaded file."""
    __tablename__ = "portfolio_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    seeker_id = Column(Integer, ForeignKey("seeker_profiles.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    link_url = Column(String(500), nullable=True)
    file_id = Column(String(32), ForeignKey("file_objects.id", ondelete="SET NULL"), nullable=True)

    file = relationship("FileObject")
