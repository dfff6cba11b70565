from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from skillshub.database import Base


class EmployerProfile(Base):
    __tablename__ = "employer_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    org_name = Column(String(255), nullable=False)
    org_type = Column(String(100), nullable=True)  # e.g. "Company", "NGO", "Government"
    website = Column(String(500), nullable=True)
    verified = Column(Boolean, default=False, nullable=False)

    company_logo_file_id = Column(String(32), ForeignKey("file_objects.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="employer_profile")
    company_logo_file = relationship("FileObject")
    jobs = relationship("Job", back_populates="employer")
