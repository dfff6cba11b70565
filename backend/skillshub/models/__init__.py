"""Database models"""
from skillshub.models.user import User, UserRole, Session
from skillshub.models.file_object import FileObject
from skillshub.models.skill import Skill, SkillOnJob, SkillOnProfile
from skillshub.models.employer import EmployerProfile
from skillshub.models.seeker import (
    SeekerProfile,
    Pathway,
    Education,
    Training,
    WorkExperience,
    PortfolioItem,
)
from skillshub.models.job import Job, JobType, JobStatus
from skillshub.models.application import Application, ApplicationStatus
from skillshub.models.location import Region, District
from skillshub.models.notification import Notification

__all__ = [
    "User",
    "UserRole",
    "Session",
    "FileObject",
    "Skill",
    "SkillOnJob",
    "SkillOnProfile",
    "EmployerProfile",
    "SeekerProfile",
    "Pathway",
    "Education",
    "Training",
    "WorkExperience",
    "PortfolioItem",
    "Job",
    "JobType",
    "JobStatus",
    "Application",
    "ApplicationStatus",
    "Region",
    "District",
    "Notification",
]
