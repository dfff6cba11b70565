from datetime import datetime
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
import enum

from skillshub.database import Base


class ApplicationStatus(str, enum.Enum):
    APPLIED = "APPLIED"
    SHORTLISTED = "SHORTLISTED"  # Also the initial status of employer-initiated (recruited) applications
    HIRED = "HIRED"
    REJECTED = "REJECTED"


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=ApplicationStatus.APPLIED.value)

    cover_letter_text = Column(Text, nullable=True)
    cover_letter_file_id = Column(String(32), ForeignKey("file_objects.id", ondelete="SET NULL"), nullable=True)
    cv_file_id = Column(String(32), ForeignKey("file_objects.id", ondelete="SET NULL"), nullable=True)
    expected_pay = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    job = relationship("Job", back_populates="applications")
    user = relationship("User")

    __table_args__ = (
        # One application per seeker per job
        UniqueConstraint("job_id", "user_id", name="uq_application_job_user"),
    )
