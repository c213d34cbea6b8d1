import datetime as dt
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator, model_validator

from daily_drop.seasons import Hemisphere, Season

APP_NAME = "The Daily Drop"


class DropRecipe(BaseModel):
    # size_ml, dilution_percent, carrier, base, notes... are kept as extras
    model_config = ConfigDict(extra="allow")

    drops: Dict[str, PositiveInt]


class Formats(BaseModel):
    diffuser: DropRecipe
    roller: DropRecipe
    spray_optional: DropRecipe

    def all_drops(self):
        for name in ("diffuser", "roller", "spray_optional"):
            yield name, getattr(self, name).drops


class RecipeDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    app: str = APP_NAME
    date: dt.date
    season: Season
    hemisphere: Hemisphere
    title: str
    oils: List[str] = Field(min_length=1)
    formats: Formats
    why_it_works: str
    safety: List[str]
    tags: List[str]

    @field_validator("oils")
    @classmethod
    def _unique_oils(cls, oils: List[str]) -> List[str]:
        seen = set()
        for oil in oils:
            if oil in seen:
                raise ValueError(f"duplicate oil: {oil}")
            seen.add(oil)
        return oils

    @model_validator(mode="after")
    def _drops_reference_oils(self) -> "RecipeDocument":
        known = set(self.oils)
        for fmt, drops in self.formats.all_drops():
            unknown = [name for name in drops if name not in known]
            if unknown:
                raise ValueError(f"formats.{fmt}.drops references oils not in 'oils': {unknown}")
        return self
