"""Static coaching knowledge: path templates, skill metadata and field metadata.

The tables are loaded once from ``worklife_coach/data/knowledge_base.json``
into a frozen model and handed to each engine at construction. Tests can
build a smaller ``KnowledgeBase`` directly.

Example Usage:
    from worklife_coach.models.knowledge import KnowledgeBase

    kb = KnowledgeBase.load()
    kb.skill_metadata("Machine Learning").dependencies  # ["python", "statistics"]
    kb.field_metadata("data science").core_skills
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_KNOWLEDGE_BASE_PATH = (
    Path(__file__).resolve().parent.parent / "data" / "knowledge_base.json"
)


class PathTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    keywords: tuple[str, ...]
    required_skills: tuple[str, ...]
    related_skills: tuple[str, ...]
    industries: tuple[str, ...]
    growth_potential: float = Field(ge=0.0, le=1.0)


class SkillMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    dependencies: tuple[str, ...] = ()
    learning_months: int = Field(default=4, gt=0)
    impact: float = Field(default=0.7, ge=0.0, le=1.0)
    resources: tuple[str, ...] = Field(min_length=1)


class FieldMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    core_skills: tuple[str, ...]
    industry_knowledge: tuple[str, ...] = ()
    typical_roles: tuple[str, ...] = ()


class KnowledgeBase(BaseModel):
    """Immutable lookup tables shared by the recommendation engines."""

    model_config = ConfigDict(frozen=True)

    path_templates: tuple[PathTemplate, ...]
    skills: dict[str, SkillMetadata]
    default_skill: SkillMetadata
    fields: dict[str, FieldMetadata]
    generic_field: FieldMetadata
    universal_skills: tuple[str, ...]
    transition_resources: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    default_resources: tuple[str, ...] = ("Online courses", "Books and tutorials", "Practice projects")

    @classmethod
    def load(cls, path: Path | str | None = None) -> "KnowledgeBase":
        """Load the knowledge base from JSON.

        Args:
            path: JSON file (defaults to the packaged knowledge_base.json)

        Raises:
            FileNotFoundError: If the file doesn't exist
            pydantic.ValidationError: If the tables are malformed
        """
        kb_path = Path(path) if path is not None else DEFAULT_KNOWLEDGE_BASE_PATH
        if not kb_path.exists():
            raise FileNotFoundError(f"Knowledge base not found: {kb_path}")

        with open(kb_path, "r", encoding="utf-8") as f:
            return cls.model_validate(json.load(f))

    def find_skill(self, skill_name: str) -> Optional[SkillMetadata]:
        """Exact lookup first, then substring match in either direction."""
        skill_lower = skill_name.lower().strip()
        if skill_lower in self.skills:
            return self.skills[skill_lower]
        for key, metadata in self.skills.items():
            if key in skill_lower or skill_lower in key:
                return metadata
        return None

    def skill_metadata(self, skill_name: str) -> SkillMetadata:
        return self.find_skill(skill_name) or self.default_skill

    def field_metadata(self, field_name: str) -> FieldMetadata:
        """Field lookup with a generic fallback named after the requested field."""
        field_lower = field_name.lower().strip()
        if field_lower in self.fields:
            return self.fields[field_lower]
        for key, metadata in self.fields.items():
            if key in field_lower or (field_lower and field_lower in key):
                return metadata
        return self.generic_field.model_copy(update={"name": field_name})

    def resources_for(self, skill_name: str) -> tuple[str, ...]:
        skill_lower = skill_name.lower().strip()
        if skill_lower in self.transition_resources:
            return self.transition_resources[skill_lower]
        for key, resources in self.transition_resources.items():
            if key in skill_lower or (skill_lower and skill_lower in key):
                return resources
        return self.default_resources

    def is_universal(self, skill_name: str) -> bool:
        skill_lower = skill_name.lower()
        return any(u in skill_lower or skill_lower in u for u in self.universal_skills)


@lru_cache(maxsize=1)
def default_knowledge_base() -> KnowledgeBase:
    """Packaged knowledge base, loaded once per process."""
    return KnowledgeBase.load()
