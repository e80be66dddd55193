"""Data models for the PCOS risk calculator."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _FrozenModel(BaseModel):
    # camelCase aliases keep stored blobs in the shape the web client used
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class RiskLevel(str, Enum):
    low = "low"
    moderate = "moderate"
    high = "high"


class FactorStatus(str, Enum):
    normal = "normal"
    borderline = "borderline"
    abnormal = "abnormal"


class HormoneStatus(str, Enum):
    normal = "Normal"
    borderline = "Borderline"
    high = "High"
    low = "Low"


def compute_bmi(height: float, weight: float) -> float:
    """BMI in kg/m² rounded to one decimal; 0.0 when height or weight is not positive."""
    if height <= 0 or weight <= 0:
        return 0.0
    height_m = height / 100
    return round(weight / (height_m * height_m), 1)


def compute_lh_fsh_ratio(lh: float, fsh: float) -> float:
    """LH/FSH ratio rounded to two decimals; 0.0 when either value is not positive."""
    if lh <= 0 or fsh <= 0:
        return 0.0
    return round(lh / fsh, 2)


class Profile(_FrozenModel):
    """Self-reported health profile scored by the calculator.

    ``bmi`` and ``lh_fsh_ratio`` are derived. They are always recomputed from
    their source fields, so a supplied value only stands in when a source is
    missing.

    Attributes:
        age: Age in years
        height: Height in cm
        weight: Weight in kg
        bmi: Body mass index in kg/m²
        family_history: PCOS in a first-degree relative
        cycle_length: Menstrual cycle length in days
        irregular_periods: Cycles vary noticeably in length
        missed_periods: Periods skipped entirely
        acne_severity: 0 (none) to 3 (severe)
        excess_hair_growth: 0 (none) to 4 (severe)
        hair_fall: Scalp hair thinning
        dark_patches: Acanthosis on neck or armpits
        mood_swings: Frequent mood swings
        testosterone: Total testosterone in ng/dL
        amh: Anti-Müllerian hormone in ng/mL
        lh: Luteinizing hormone in mIU/mL
        fsh: Follicle-stimulating hormone in mIU/mL
        lh_fsh_ratio: LH divided by FSH
        cortisol: Cortisol in µg/dL
    """

    age: int
    height: float
    weight: float
    bmi: float
    family_history: bool = False

    cycle_length: int
    irregular_periods: bool = False
    missed_periods: bool = False
    acne_severity: int = 0
    excess_hair_growth: int = 0
    hair_fall: bool = False
    dark_patches: bool = False
    mood_swings: bool = False

    testosterone: float
    amh: float
    lh: float
    fsh: float
    lh_fsh_ratio: float
    cortisol: float

    @model_validator(mode="before")
    @classmethod
    def _derive_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        height = data.get("height")
        weight = data.get("weight")
        if height is not None and weight is not None:
            data["bmi"] = compute_bmi(float(height), float(weight))
        lh = data.get("lh")
        fsh = data.get("fsh")
        if lh is not None and fsh is not None:
            data.pop("lhFshRatio", None)
            data["lh_fsh_ratio"] = compute_lh_fsh_ratio(float(lh), float(fsh))
        return data

    def with_updates(self, **changes: Any) -> "Profile":
        """Return a copy with ``changes`` applied and derived fields refreshed."""
        return Profile.model_validate({**self.model_dump(), **changes})


class RiskFactor(_FrozenModel):
    """One of the five weighted categories behind a risk score.

    Attributes:
        name: Category label (e.g. 'BMI', 'Hormonal Markers')
        contribution: The category's own 0-100 sub-score, before weighting
        status: normal / borderline / abnormal, from the sub-score
        description: Short human-readable summary of the inputs
    """

    name: str
    contribution: float
    status: FactorStatus
    description: str


class HormoneReading(_FrozenModel):
    value: float
    status: HormoneStatus
    range: str


class HormoneAnalysis(_FrozenModel):
    testosterone: HormoneReading
    amh: HormoneReading
    lh: HormoneReading
    fsh: HormoneReading
    lh_fsh_ratio: HormoneReading
    cortisol: HormoneReading

    def items(self) -> list[tuple[str, HormoneReading]]:
        """Readings keyed by field name, in display order."""
        return [(name, getattr(self, name)) for name in type(self).model_fields]


class RiskResult(_FrozenModel):
    """Output of a risk calculation.

    Attributes:
        risk_level: low / moderate / high bucket of ``score``
        confidence: Display-only figure in [70, 95]; not used for classification
        score: Weighted sum of the five sub-scores
        factors: The five RiskFactors in fixed order
        hormone_analysis: Per-hormone status against reference ranges
    """

    risk_level: RiskLevel
    confidence: float = Field(ge=70, le=95)
    score: float
    factors: list[RiskFactor]
    hormone_analysis: HormoneAnalysis


class StoredReport(_FrozenModel):
    """A saved (profile, result) pair.

    Attributes:
        id: Report identifier (uuid4)
        date: ISO-8601 UTC timestamp of when the report was saved
        profile: The scored profile
        result: The calculator output, verbatim
    """

    id: str
    date: str
    profile: Profile
    result: RiskResult
