"""Skill picker used by the job form."""
import logging
from typing import Any, Iterable, Optional

logger = logging.getLogger(__name__)


class SkillSelector:
    """
    Searchable multi-select over the skills catalogue.

    Selections are keyed by skill id (insertion ordered), so a skill can only
    be selected once. Each selection carries a required/preferred flag.
    """

    def __init__(self, catalogue: Iterable[dict[str, Any]]):
        self.catalogue: dict[int, dict[str, Any]] = {skill["id"]: skill for skill in catalogue}
        self.selected: dict[int, bool] = {}

    @classmethod
    async def load(cls, client) -> "SkillSelector":
        """Selector over the full (cached) skills list."""
        body = await client.skills()
        return cls(body.get("skills", []))

    def suggestions(self, query: str, limit: Optional[int] = 10) -> list[dict[str, Any]]:
        """Unselected skills whose name contains `query` (case-insensitive)."""
        needle = query.strip().lower()
        if not needle:
            return []
        matches = [
            skill for skill_id, skill in self.catalogue.items()
            if skill_id not in self.selected and needle in skill["name"].lower()
        ]
        return matches[:limit] if limit is not None else matches

    def add(self, skill_id: int, required: bool = True) -> bool:
        """Select a skill. Returns False for unknown or already-selected ids."""
        if skill_id not in self.catalogue:
            logger.debug(f"Ignoring unknown skill id {skill_id}")
            return False
        if skill_id in self.selected:
            return False
        self.selected[skill_id] = required
        return True

    def remove(self, skill_id: int) -> None:
        self.selected.pop(skill_id, None)

    def toggle_required(self, skill_id: int) -> None:
        if skill_id in self.selected:
            self.selected[skill_id] = not self.selected[skill_id]

    def clear(self) -> None:
        self.selected.clear()

    def entries(self) -> list[dict[str, Any]]:
        """Payload form: [{skillId, required}]."""
        return [{"skillId": skill_id, "required": required} for skill_id, required in self.selected.items()]

    def chips(self) -> list[tuple[str, bool]]:
        """(name, required) for each selection, in selection order."""
        return [(self.catalogue[skill_id]["name"], required) for skill_id, required in self.selected.items()]

    def __len__(self) -> int:
        return len(self.selected)
