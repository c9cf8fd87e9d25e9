"""Model -> year -> configuration navigation state for detail views."""

from dataclasses import dataclass, field
from typing import Optional

from ..models.catalog import Configuration, ModelYear


@dataclass
class NavigationState:
    """Current selection within one model's year/trim hierarchy.

    Changing a level clears everything below it. ``resolve()`` fills unset
    levels with defaults: the latest year, then that year's default trim
    (or its first trim).
    """

    model_id: str
    model_years: list[ModelYear] = field(default_factory=list)
    year_id: Optional[str] = None
    configuration_id: Optional[str] = None

    def select_model(self, model_id: str, model_years: list[ModelYear]) -> None:
        self.model_id = model_id
        self.model_years = model_years
        self.year_id = None
        self.configuration_id = None

    def select_year(self, year_id: str) -> None:
        if not any(y.id == year_id for y in self.model_years):
            raise ValueError(f"Year {year_id} does not belong to model {self.model_id}")
        if year_id != self.year_id:
            self.configuration_id = None
        self.year_id = year_id

    def select_year_by_number(self, year: int) -> None:
        for y in self.model_years:
            if y.year == year:
                self.select_year(y.id)
                return
        raise ValueError(f"Model {self.model_id} has no {year} model year")

    def select_configuration(self, configuration_id: str) -> None:
        year = self.current_year
        if year is None:
            raise ValueError("Select a model year before a configuration")
        if not any(c.id == configuration_id for c in year.configurations):
            raise ValueError(
                f"Configuration {configuration_id} does not belong to year {year.year}"
            )
        self.configuration_id = configuration_id

    @property
    def current_year(self) -> Optional[ModelYear]:
        for y in self.model_years:
            if y.id == self.year_id:
                return y
        return None

    @property
    def current_configuration(self) -> Optional[Configuration]:
        year = self.current_year
        if year is None:
            return None
        for c in year.configurations:
            if c.id == self.configuration_id:
                return c
        return None

    def resolve(self) -> "NavigationState":
        """Fill unset levels with their defaults. Returns self."""
        if self.current_year is None and self.model_years:
            latest = max(self.model_years, key=lambda y: y.year)
            self.year_id = latest.id
            self.configuration_id = None
        year = self.current_year
        if year is not None and self.current_configuration is None and year.configurations:
            default = next((c for c in year.configurations if c.is_default), None)
            self.configuration_id = (default or year.configurations[0]).id
        return self

    def to_dict(self) -> dict:
        year = self.current_year
        config = self.current_configuration
        return {
            "model_id": self.model_id,
            "year_id": self.year_id,
            "year": year.year if year else None,
            "configuration_id": self.configuration_id,
            "configuration_name": config.display_name if config else None,
            "available_years": sorted((y.year for y in self.model_years), reverse=True),
            "available_configurations": [
                {"id": c.id, "name": c.display_name, "is_default": c.is_default}
                for c in (year.configurations if year else [])
            ],
        }
