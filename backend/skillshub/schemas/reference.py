"""Lookup data and upload schemas."""
from skillshub.schemas.common import CamelModel


class SkillOut(CamelModel):
    id: int
    name: str
    slug: str


class SkillListResponse(CamelModel):
    skills: list[SkillOut]


class DistrictOut(CamelModel):
    id: int
    name: str


class RegionOut(CamelModel):
    id: int
    name: str
    districts: list[DistrictOut] = []


class RegionListResponse(CamelModel):
    regions: list[RegionOut]


class UploadResponse(CamelModel):
    success: bool = True
    file_id: str
    bucket_key: str
    size_bytes: int
    message: str
