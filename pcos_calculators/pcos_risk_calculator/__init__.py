"""PCOS Risk Calculator.

Scores a self-reported health profile into a low/moderate/high PCOS risk
from five weighted categories, with a per-hormone status breakdown.
"""

from pcos_calculators.pcos_risk_calculator.calculator import (
    FACTOR_NAMES,
    PCOSCalculator,
    classify_score,
    compute_risk,
)
from pcos_calculators.pcos_risk_calculator.errors import (
    AuthError,
    IntakeValidationError,
    PCOSError,
    UnknownPresetError,
)
from pcos_calculators.pcos_risk_calculator.intake import build_profile, validate_profile
from pcos_calculators.pcos_risk_calculator.models import (
    FactorStatus,
    HormoneAnalysis,
    HormoneReading,
    HormoneStatus,
    Profile,
    RiskFactor,
    RiskLevel,
    RiskResult,
    StoredReport,
)
from pcos_calculators.pcos_risk_calculator.presets import (
    DEMO_PROFILES,
    REFERENCE_RANGES,
    RISK_LEVEL_SUMMARIES,
    get_demo_profile,
)

__all__ = [
    "DEMO_PROFILES",
    "FACTOR_NAMES",
    "REFERENCE_RANGES",
    "RISK_LEVEL_SUMMARIES",
    "AuthError",
    "FactorStatus",
    "HormoneAnalysis",
    "HormoneReading",
    "HormoneStatus",
    "IntakeValidationError",
    "PCOSCalculator",
    "PCOSError",
    "Profile",
    "RiskFactor",
    "RiskLevel",
    "RiskResult",
    "StoredReport",
    "UnknownPresetError",
    "build_profile",
    "classify_score",
    "compute_risk",
    "get_demo_profile",
    "validate_profile",
]
