"""Configuration objects and helpers for the slot agent."""

from __future__ import annotations

from typing import Dict, Iterable, List

import structlog
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOGGER = structlog.get_logger(__name__)

DEFAULT_CITIES: tuple[str, ...] = (
    "Toronto",
    "Mississauga",
    "Scarborough",
    "Etobicoke",
    "Markham",
    "Richmond Hill",
    "Thornhill",
)

DEFAULT_CATEGORY_KEYS: tuple[str, ...] = ("moderna", "pfizer")


class AppointmentCategory(BaseModel):
    """An appointment type the upstream API knows by ``capability_name``."""

    model_config = ConfigDict(frozen=True)

    key: str
    capability_name: str
    label: str


# The upstream identifies each appointment type by its display name.
DEFAULT_CATEGORIES: Dict[str, AppointmentCategory] = {
    "moderna": AppointmentCategory(
        key="moderna",
        capability_name="COVID-19 Vaccine (Moderna Dose 3 or Booster Dose)",
        label="COVID-19 Vaccine (Moderna Dose 3 or Booster Dose)",
    ),
    "pfizer": AppointmentCategory(
        key="pfizer",
        capability_name="COVID-19 Vaccine (Pfizer Dose 3 or Booster Dose)",
        label="COVID-19 Vaccine (Pfizer Dose 3 or Booster Dose)",
    ),
    "screening": AppointmentCategory(
        key="screening",
        capability_name="COVID-19 Rapid Antigen Screening (Asymptomatic)",
        label="COVID-19 Rapid Antigen Screening (Asymptomatic)",
    ),
}


class Settings(BaseSettings):
    """Runtime configuration sourced from environment variables."""

    graphql_base_url: HttpUrl = Field("https://gql.medscheck.medmeapp.com")
    booking_base_url: HttpUrl = Field("https://shoppersdrugmart.medmeapp.com")
    enterprise_name: str = Field("SDM")
    tenant_id: str = Field("edfbb1a3-aca2-4ee4-bbbb-9237237736c4")
    timeout_seconds: float = Field(10.0, gt=0)
    window_days: int = Field(10, ge=1)
    max_concurrency: int = Field(8, ge=1)
    debug: bool = Field(False)
    categories: Dict[str, AppointmentCategory] = Field(
        default_factory=lambda: dict(DEFAULT_CATEGORIES)
    )

    model_config = SettingsConfigDict(
        env_prefix="SLOT_AGENT_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("categories")
    @classmethod
    def keys_match(cls, value: Dict[str, AppointmentCategory]) -> Dict[str, AppointmentCategory]:
        """Reject tables whose keys disagree with the category they hold."""
        for key, category in value.items():
            if key != category.key:
                raise ValueError(f"category {category.key!r} registered under {key!r}")
        return value

    @property
    def graphql_url(self) -> str:
        return str(self.graphql_base_url).rstrip("/")

    @property
    def booking_url(self) -> str:
        return str(self.booking_base_url).rstrip("/")

    def categories_for(self, names: Iterable[str]) -> List[AppointmentCategory]:
        """Resolve category names in request order, skipping ones we do not know."""
        selected: list[AppointmentCategory] = []
        for name in names:
            category = self.categories.get(name.strip().lower())
            if category is None:
                LOGGER.warning("config.unknown_category", category=name)
                continue
            if category not in selected:
                selected.append(category)
        return selected
