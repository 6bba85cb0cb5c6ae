"""
Race result record and ranking enums (Pydantic)
"""
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError


class Distance(str, Enum):
    """Race distance"""
    D500 = "500m"
    D1000 = "1000m"
    D1500 = "1500m"
    D3000 = "3000m"
    D5000 = "5000m"
    MASS_START = "Mass Start"


class Gender(str, Enum):
    """Race gender (from the race title)"""
    MEN = "men"
    WOMEN = "women"


class ResultStatus(str, Enum):
    """Finish status"""
    OK = "OK"
    DQ_DNF = "DQ/DNF"


class Tier(str, Enum):
    """Ranking scope"""
    OVERALL = "overall"
    JUNIOR = "junior"
    MASTER = "master"


# Canonical orderings
DISTANCES = [d.value for d in Distance]
GENDERS = [g.value for g in Gender]
TIERS = [t.value for t in Tier]

# Substrings in the time column that mark a non-finisher
NON_FINISH_MARKERS = ("DQ", "DNF", "DNS")


class InvalidRaceResultError(ValueError):
    """Raised when a result row is missing an identifying field"""

    def __init__(self, index: int, fields: List[str], message: str = ""):
        self.index = index
        self.fields = fields
        detail = message or ", ".join(fields)
        super().__init__(f"Invalid race result at row {index}: {detail}")


class RaceResult(BaseModel):
    """One competitor's row in one race"""
    rank: str = Field(default="", description="Raw rank text (may be non-numeric)")
    name: str = Field(..., description="Competitor name, used as identity key")
    category: str = Field(default="Unknown", description="Category code (MA1, L35, ...)")
    country: str = Field(default="", description="Country code")
    time: str = Field(default="N/A", description="Raw race clock text")
    distance: Distance = Field(..., description="Race distance")
    gender: Gender = Field(..., description="Race gender")
    status: Optional[ResultStatus] = Field(None, description="Finish status")

    class Config:
        use_enum_values = True

    @field_validator("rank", "time", "country", "category", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("category")
    @classmethod
    def _category_default(cls, value: str) -> str:
        return value or "Unknown"

    @model_validator(mode="after")
    def _derive_status(self) -> "RaceResult":
        if self.status is None:
            time_text = self.time or ""
            if any(marker in time_text for marker in NON_FINISH_MARKERS):
                self.status = ResultStatus.DQ_DNF.value
            else:
                self.status = ResultStatus.OK.value
        return self

    @property
    def is_finisher(self) -> bool:
        return self.status == ResultStatus.OK.value


def coerce_results(rows: Iterable[Union[RaceResult, Mapping[str, Any]]]) -> List[RaceResult]:
    """Validate raw rows into RaceResult objects, failing fast on structural errors"""
    results: List[RaceResult] = []
    for index, row in enumerate(rows):
        if isinstance(row, RaceResult):
            results.append(row)
            continue
        if not isinstance(row, Mapping):
            raise InvalidRaceResultError(index, [], f"expected a mapping, got {type(row).__name__}")
        try:
            results.append(RaceResult.model_validate(dict(row)))
        except PydanticValidationError as e:
            fields = [".".join(str(loc) for loc in err["loc"]) or "row" for err in e.errors()]
            raise InvalidRaceResultError(index, fields) from e
    return results
