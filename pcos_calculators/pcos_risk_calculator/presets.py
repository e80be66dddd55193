"""Demo profiles and reference data.

Demo values follow patterns in the Kaggle PCOS_infertility dataset. Reference
ranges are the usual adult female clinical ranges.
"""

from pcos_calculators.pcos_risk_calculator.errors import UnknownPresetError
from pcos_calculators.pcos_risk_calculator.models import Profile, RiskLevel

REFERENCE_RANGES: dict[str, dict[str, float | str]] = {
    "testosterone": {"min": 15, "max": 70, "unit": "ng/dL"},
    "amh": {"min": 1.0, "max": 4.0, "unit": "ng/mL"},
    "lh": {"min": 2.0, "max": 15.0, "unit": "mIU/mL"},
    "fsh": {"min": 3.0, "max": 10.0, "unit": "mIU/mL"},
    "lh_fsh_ratio": {"min": 1.0, "max": 2.0, "unit": ""},
    "cortisol": {"min": 6.0, "max": 23.0, "unit": "µg/dL"},
    "bmi": {"min": 18.5, "max": 24.9, "unit": "kg/m²"},
}

DEMO_PROFILES: dict[str, Profile] = {
    "normal": Profile(
        age=28,
        height=162,
        weight=58,
        bmi=22.1,
        family_history=False,
        cycle_length=28,
        irregular_periods=False,
        missed_periods=False,
        acne_severity=0,
        excess_hair_growth=0,
        hair_fall=False,
        dark_patches=False,
        mood_swings=False,
        testosterone=35,
        amh=2.5,
        lh=6.0,
        fsh=5.5,
        lh_fsh_ratio=1.09,
        cortisol=12.0,
    ),
    "borderline": Profile(
        age=26,
        height=160,
        weight=68,
        bmi=26.6,
        family_history=True,
        cycle_length=35,
        irregular_periods=True,
        missed_periods=False,
        acne_severity=2,
        excess_hair_growth=2,
        hair_fall=True,
        dark_patches=False,
        mood_swings=True,
        testosterone=55,
        amh=5.5,
        lh=12.0,
        fsh=5.0,
        lh_fsh_ratio=2.4,
        cortisol=18.0,
    ),
    "likelyPCOS": Profile(
        age=24,
        height=158,
        weight=78,
        bmi=31.2,
        family_history=True,
        cycle_length=45,
        irregular_periods=True,
        missed_periods=True,
        acne_severity=3,
        excess_hair_growth=4,
        hair_fall=True,
        dark_patches=True,
        mood_swings=True,
        testosterone=85,
        amh=10.5,
        lh=18.0,
        fsh=4.5,
        lh_fsh_ratio=4.0,
        cortisol=24.0,
    ),
}

# Starting values for a blank intake
DEFAULT_PROFILE = Profile(
    age=25,
    height=160,
    weight=60,
    bmi=23.4,
    family_history=False,
    cycle_length=28,
    testosterone=40,
    amh=2.5,
    lh=6.0,
    fsh=5.0,
    lh_fsh_ratio=1.2,
    cortisol=12.0,
)

RISK_LEVEL_SUMMARIES: dict[RiskLevel, dict[str, str]] = {
    RiskLevel.low: {
        "label": "Low Risk",
        "description": (
            "Your indicators suggest a low likelihood of PCOS. "
            "Continue maintaining a healthy lifestyle."
        ),
    },
    RiskLevel.moderate: {
        "label": "Moderate Risk",
        "description": (
            "Some indicators suggest you may be at moderate risk. "
            "Consider consulting a healthcare provider."
        ),
    },
    RiskLevel.high: {
        "label": "High Risk",
        "description": (
            "Multiple indicators suggest elevated PCOS risk. "
            "We strongly recommend consulting a healthcare professional."
        ),
    },
}


def get_demo_profile(name: str) -> Profile:
    """Look up a demo profile by name ('normal', 'borderline', 'likelyPCOS')."""
    try:
        return DEMO_PROFILES[name]
    except KeyError:
        raise UnknownPresetError(name, sorted(DEMO_PROFILES)) from None
