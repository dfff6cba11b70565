from sqlalchemy import Column, String, Integer, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from skillshub.database import Base


class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    slug = Column(String(120), unique=True, nullable=False, index=True)


class SkillOnJob(Base):
    """A skill as required (or preferred) by a job."""
    __tablename__ = "skills_on_jobs"

    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), primary_key=True)
    skill_id = Column(Integer, ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True)
    required = Column(Boolean, nullable=False, default=True)

    job = relationship("Job", back_populates="skills")
    skill = relationship("Skill")


class SkillOnProfile(Base):
    """A skill held by a job seeker, with a proficiency level (1-5)."""
    __tablename__ = "skills_on_profiles"

    seeker_id = Column(Integer, ForeignKey("seeker_profiles.id", ondelete="CASCADE"), primary_key=True)
    skill_id = Column(Integer, ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True)
    level = Column(Integer, nullable=True)

    seeker = relationship("SeekerProfile", back_populates="skills")
    skill = relationship("Skill")
