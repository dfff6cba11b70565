"""
Reference data seeding (Sierra Leone regions/districts and the skills
catalogue). Safe to run on every startup.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillshub.models.location import Region, District
from skillshub.models.skill import Skill

logger = logging.getLogger(__name__)

# 5 regions, 16 districts
REGIONS = {
    "Eastern": ["Kailahun", "Kenema", "Kono"],
    "Northern": ["Bombali", "Falaba", "Koinadugu", "Tonkolili"],
    "North West": ["Kambia", "Karene", "Port Loko"],
    "Southern": ["Bo", "Bonthe", "Moyamba", "Pujehun"],
    "Western Area": ["Western Area Rural", "Western Area Urban"],
}

# (slug, name)
SKILLS = [
    # Technical
    ("frontend-development", "Front-end Development"),
    ("backend-development", "Back-end Development"),
    ("fullstack-development", "Full-stack Development"),
    ("mobile-development", "Mobile Development"),
    ("ui-ux-design", "UI/UX Design"),
    ("graphic-design", "Graphic Design"),
    ("web-design", "Web Design"),
    ("data-entry", "Data Entry"),
    ("data-analysis", "Data Analysis"),
    ("database-management", "Database Management"),
    ("cloud-computing", "Cloud Computing"),
    ("cybersecurity", "Cybersecurity"),
    # Business & marketing
    ("digital-marketing", "Digital Marketing"),
    ("social-media-marketing", "Social Media Marketing"),
    ("content-writing", "Content Writing"),
    ("copywriting", "Copywriting"),
    ("seo", "SEO (Search Engine Optimization)"),
    ("business-development", "Business Development"),
    ("project-management", "Project Management"),
    ("customer-service", "Customer Service"),
    # Creative
    ("video-editing", "Video Editing"),
    ("photography", "Photography"),
    ("animation", "Animation"),
    ("illustration", "Illustration"),
    # Professional
    ("accounting", "Accounting"),
    ("bookkeeping", "Bookkeeping"),
    ("financial-analysis", "Financial Analysis"),
    ("human-resources", "Human Resources"),
    ("administration", "Administration"),
    # Artisan
    ("tailoring", "Tailoring"),
    ("welding", "Welding"),
    ("carpentry", "Carpentry"),
    ("electrical-work", "Electrical Work"),
    ("plumbing", "Plumbing"),
    ("masonry", "Masonry"),
    # Other
    ("translation", "Translation"),
    ("tutoring", "Tutoring"),
    ("event-planning", "Event Planning"),
    ("catering", "Catering"),
]


async def seed_regions(db: AsyncSession) -> int:
    """Insert missing regions and districts. Returns the number of rows added."""
    added = 0
    result = await db.execute(select(Region))
    existing = {region.name: region for region in result.scalars().all()}

    for region_name, district_names in REGIONS.items():
        region = existing.get(region_name)
        if region is None:
            region = Region(name=region_name)
            db.add(region)
            await db.flush()
            added += 1

        result = await db.execute(select(District.name).where(District.region_id == region.id))
        present = {row[0] for row in result.all()}
        for name in district_names:
            if name not in present:
                db.add(District(name=name, region_id=region.id))
                added += 1

    await db.commit()
    return added


async def seed_skills(db: AsyncSession) -> int:
    """Insert missing skills and refresh names of existing slugs."""
    added = 0
    result = await db.execute(select(Skill))
    by_slug = {skill.slug: skill for skill in result.scalars().all()}

    for slug, name in SKILLS:
        skill = by_slug.get(slug)
        if skill is None:
            db.add(Skill(slug=slug, name=name))
            added += 1
        elif skill.name != name:
            skill.name = name

    await db.commit()
    return added


async def seed_reference_data(db: AsyncSession) -> None:
    regions_added = await seed_regions(db)
    skills_added = await seed_skills(db)
    logger.info(f"Reference data seeded: {regions_added} region/district rows, {skills_added} skills added")
