"""
Pediatric knowledge base schemas.

These Pydantic models mirror the rows of the three knowledge tables
(pediatric_conditions, pediatric_drugs, pediatric_topics) plus the
working types built from them during a search.

WHY PYDANTIC HERE:
------------------
Rows come back from Postgres as plain dicts. Array columns can be NULL,
optional text columns can be missing. Validating every row through a model
means downstream code (scoring, formatting) never has to guard against
`None` where it expects a list.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ContentType = Literal["condition", "drug", "topic"]
SortBy = Literal["relevance", "title", "category", "chapter"]
SortOrder = Literal["asc", "desc"]


class _Record(BaseModel):
    """Shared config: tolerate extra columns (created_at, updated_at, ...)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _null_lists_to_empty(cls, value, info):
        # Postgres returns NULL for empty array columns
        field = cls.model_fields.get(info.field_name)
        if value is None and field is not None and field.default_factory is list:
            return []
        return value


# ---------------------------------------------------------------------------
# KNOWLEDGE RECORDS
# ---------------------------------------------------------------------------


class PediatricCondition(_Record):
    """A condition chapter entry (e.g. 'Acute Otitis Media')."""

    id: str
    title: str
    category: str
    subcategory: str | None = None
    description: str = ""
    symptoms: list[str] = Field(default_factory=list)
    diagnosis: str = ""
    treatment: str = ""
    complications: list[str] = Field(default_factory=list)
    prognosis: str | None = None
    age_groups: list[str] = Field(default_factory=list)
    icd_codes: list[str] = Field(default_factory=list)
    references: list[str] = Field(default_factory=list)
    chapter: str = ""
    page_number: int | None = None


class DosageByAge(BaseModel):
    """One row of a drug's per-age-group dosing table."""

    model_config = ConfigDict(frozen=True)

    age_group: str
    dosage: str
    route: str
    frequency: str


class PediatricDrug(_Record):
    """A medication with pediatric dosing information."""

    id: str
    name: str
    generic_name: str | None = None
    category: str
    indications: list[str] = Field(default_factory=list)
    contraindications: list[str] = Field(default_factory=list)
    dosage_pediatric: str = ""
    dosage_by_age: list[DosageByAge] = Field(default_factory=list)
    side_effects: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    interactions: list[str] = Field(default_factory=list)
    monitoring: list[str] = Field(default_factory=list)
    references: list[str] = Field(default_factory=list)


class PediatricTopic(_Record):
    """
    A free-form textbook topic.

    related_conditions / related_drugs hold ids only. They are weak
    references: nothing guarantees the ids still exist.
    """

    id: str
    title: str
    category: str
    content: str = ""
    key_points: list[str] = Field(default_factory=list)
    related_conditions: list[str] = Field(default_factory=list)
    related_drugs: list[str] = Field(default_factory=list)
    chapter: str = ""
    section: str = ""
    page_number: int | None = None
    tags: list[str] = Field(default_factory=list)
    references: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# SEARCH TYPES
# ---------------------------------------------------------------------------


class SearchResult(BaseModel):
    """
    Uniform projection of any knowledge record for ranking and display.

    Built per search call, never persisted.
    """

    id: str
    title: str
    type: ContentType
    category: str
    description: str
    relevance_score: int = Field(ge=0)
    age_groups: list[str] | None = None
    chapter: str | None = None


class SearchFilters(BaseModel):
    """
    Store-side filters applied inside the SQL queries.

    All provided filters must match. `age_group` applies to conditions,
    `tags` to topics, `chapter` to conditions and topics.
    """

    category: str | None = None
    age_group: str | None = None
    chapter: str | None = None
    tags: list[str] = Field(default_factory=list)


class AdvancedSearchFilters(BaseModel):
    """Result-side filters and ordering applied after unification."""

    categories: list[str] = Field(default_factory=list)
    age_groups: list[str] = Field(default_factory=list)
    chapters: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    content_types: list[ContentType] = Field(default_factory=list)
    sort_by: SortBy = "relevance"
    sort_order: SortOrder = "desc"


class KnowledgeSearchResults(BaseModel):
    """Raw matches of one search, grouped by record kind."""

    conditions: list[PediatricCondition] = Field(default_factory=list)
    drugs: list[PediatricDrug] = Field(default_factory=list)
    topics: list[PediatricTopic] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.conditions) + len(self.drugs) + len(self.topics)


class RelatedContent(BaseModel):
    """The bounded record set used to ground a prompt."""

    conditions: list[PediatricCondition] = Field(default_factory=list)
    drugs: list[PediatricDrug] = Field(default_factory=list)
    topics: list[PediatricTopic] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.conditions or self.drugs or self.topics)


class CategoryListing(BaseModel):
    """Distinct categories available per record kind."""

    condition_categories: list[str] = Field(default_factory=list)
    drug_categories: list[str] = Field(default_factory=list)
    topic_categories: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# AGE GROUPS
# ---------------------------------------------------------------------------


class AgeGroup(BaseModel):
    """A pediatric age band used to tag records."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    age_range: str


AGE_GROUPS: tuple[AgeGroup, ...] = (
    AgeGroup(key="newborn", label="Newborn (0-28 days)", age_range="0-28 days"),
    AgeGroup(key="infant", label="Infant (1-12 months)", age_range="1-12 months"),
    AgeGroup(key="toddler", label="Toddler (1-3 years)", age_range="1-3 years"),
    AgeGroup(key="preschool", label="Preschool (3-5 years)", age_range="3-5 years"),
    AgeGroup(key="school", label="School Age (5-12 years)", age_range="5-12 years"),
    AgeGroup(key="adolescent", label="Adolescent (12-18 years)", age_range="12-18 years"),
)

POPULAR_CATEGORIES: tuple[str, ...] = (
    "Infectious Diseases",
    "Respiratory Disorders",
    "Gastrointestinal Disorders",
    "Neurological Disorders",
    "Cardiovascular Disorders",
    "Endocrine Disorders",
    "Dermatology",
    "Emergency Medicine",
    "Nutrition",
    "Growth and Development",
    "Immunizations",
    "Behavioral Health",
)
