"""
Lookup data endpoints (skills catalogue, Sierra Leone regions).
"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from skillshub.database import get_db
from skillshub.models.location import Region
from skillshub.models.skill import Skill
from skillshub.schemas.reference import SkillListResponse, SkillOut, RegionListResponse, RegionOut

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/skills", response_model=SkillListResponse)
async def list_skills(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Skill).order_by(Skill.name))
    return SkillListResponse(skills=[SkillOut.model_validate(s) for s in result.scalars().all()])


@router.get("/locations/regions", response_model=RegionListResponse)
async def list_regions(db: AsyncSession = Depends(get_db)):
    """Regions with their districts, both sorted by name."""
    result = await db.execute(
        select(Region).options(selectinload(Region.districts)).order_by(Region.name)
    )
    regions = result.scalars().all()
    logger.debug(f"Fetched {len(regions)} regions")
    return RegionListResponse(regions=[RegionOut.model_validate(r) for r in regions])
