from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from skillshub.database import Base


class Region(Base):
    """Sierra Leone region (Eastern, Northern, ...)."""
    __tablename__ = "regions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)

    districts = relationship("District", back_populates="region", order_by="District.name")


class District(Base):
    __tablename__ = "districts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    region_id = Column(Integer, ForeignKey("regions.id", ondelete="CASCADE"), nullable=False)

    region = relationship("Region", back_populates="districts")

    __table_args__ = (
        UniqueConstraint("name", "region_id", name="uq_district_region"),
    )
