"""PCOS Risk Calculator.

This module implements the weighted scoring used by the assessment:
1. Scores five categories independently on a 0-100 scale
   (BMI, menstrual irregularity, clinical symptoms, hormonal markers,
   family history)
2. Weights the category scores (0.15 / 0.20 / 0.20 / 0.35 / 0.10)
3. Sums them into a total score and buckets it into low/moderate/high
4. Compares each hormone against its reference range for display

The weights and thresholds follow the Rotterdam criteria as interpreted by
the assessment's clinical heuristics. The BMI step function is deliberately
non-monotonic: underweight scores above normal weight.
"""

import random

from pcos_calculators.pcos_risk_calculator.models import (
    FactorStatus,
    HormoneAnalysis,
    HormoneReading,
    HormoneStatus,
    Profile,
    RiskFactor,
    RiskLevel,
    RiskResult,
)

BMI_WEIGHT = 0.15
MENSTRUAL_WEIGHT = 0.2
CLINICAL_WEIGHT = 0.2
HORMONAL_WEIGHT = 0.35
FAMILY_HISTORY_WEIGHT = 0.1

FACTOR_NAMES = (
    "BMI",
    "Menstrual Irregularity",
    "Clinical Symptoms",
    "Hormonal Markers",
    "Family History",
)

LOW_RISK_CEILING = 35
MODERATE_RISK_CEILING = 65

_module_rng = random.Random()


def factor_status(contribution: float) -> FactorStatus:
    """Bucket a 0-100 sub-score: below 30 normal, below 60 borderline."""
    if contribution < 30:
        return FactorStatus.normal
    if contribution < 60:
        return FactorStatus.borderline
    return FactorStatus.abnormal


def classify_score(score: float) -> RiskLevel:
    """Map a total score to a risk level (35 and 65 belong to the upper bucket)."""
    if score < LOW_RISK_CEILING:
        return RiskLevel.low
    elif score < MODERATE_RISK_CEILING:
        return RiskLevel.moderate
    else:
        return RiskLevel.high


class PCOSCalculator:
    """Weighted PCOS risk calculator.

    Implements the scoring algorithm:
    1. Compute the five category sub-scores
    2. Sum sub-score x weight into the total score
    3. Classify the total into a risk level
    4. Attach a per-hormone status breakdown

    Example:
        >>> import random
        >>> from pcos_calculators.pcos_risk_calculator import DEMO_PROFILES
        >>> calculator = PCOSCalculator(rng=random.Random(7))
        >>> result = calculator.score(DEMO_PROFILES["normal"])
        >>> print(f"{result.risk_level.value}: {result.score:.2f}")
        low: 1.50
    """

    def __init__(self, rng: random.Random | None = None):
        """Initialize calculator.

        Args:
            rng: Random source for the confidence figure. Pass a seeded
                ``random.Random`` for reproducible output.
        """
        self._rng = rng if rng is not None else _module_rng

    def bmi_score(self, bmi: float) -> float:
        """BMI sub-score.

        Args:
            bmi: Body mass index in kg/m²

        Returns:
            20 underweight, 10 normal, 40 overweight, 70 obese I, 90 above
        """
        if bmi < 18.5:
            return 20
        if bmi < 25:
            return 10
        if bmi < 30:
            return 40
        if bmi < 35:
            return 70
        return 90

    def menstrual_score(self, profile: Profile) -> float:
        """Menstrual irregularity sub-score, capped at 100."""
        score = 0
        if profile.irregular_periods:
            score += 40
        if profile.missed_periods:
            score += 30
        if profile.cycle_length > 35:
            score += 20
        if profile.cycle_length > 45:
            score += 10
        return min(100, score)

    def clinical_score(self, profile: Profile) -> float:
        """Clinical symptoms sub-score (acne, hirsutism, hair fall, acanthosis, mood), capped at 100."""
        score = 0
        score += profile.acne_severity * 15
        score += profile.excess_hair_growth * 12
        if profile.hair_fall:
            score += 15
        if profile.dark_patches:
            score += 20
        if profile.mood_swings:
            score += 10
        return min(100, score)

    def hormonal_score(self, profile: Profile) -> float:
        """Hormonal markers sub-score.

        Args:
            profile: Profile with testosterone, AMH, LH/FSH ratio and cortisol

        Returns:
            Sum of per-marker points, capped at 100
        """
        score = 0

        if profile.testosterone > 70:
            score += 25
        elif profile.testosterone > 55:
            score += 15

        # AMH runs high with increased follicle counts
        if profile.amh > 6:
            score += 25
        elif profile.amh > 4:
            score += 15

        if profile.lh_fsh_ratio > 3:
            score += 30
        elif profile.lh_fsh_ratio > 2:
            score += 20

        if profile.cortisol > 23:
            score += 15

        return min(100, score)

    def family_history_score(self, profile: Profile) -> float:
        return 70 if profile.family_history else 0

    def confidence(self) -> float:
        """Display-only confidence figure in [70, 95]."""
        return min(95, 70 + self._rng.random() * 25)

    def analyze_hormones(self, profile: Profile) -> HormoneAnalysis:
        """Compare each hormone against its display reference range.

        These thresholds are independent of the hormonal sub-score.
        """
        return HormoneAnalysis(
            testosterone=HormoneReading(
                value=profile.testosterone,
                status=_above(profile.testosterone, high=70, borderline=55),
                range="15-70 ng/dL",
            ),
            amh=HormoneReading(
                value=profile.amh,
                status=_above(profile.amh, high=6, borderline=4),
                range="1.0-4.0 ng/mL",
            ),
            lh=HormoneReading(
                value=profile.lh,
                status=_above(profile.lh, high=15, borderline=12),
                range="2-15 mIU/mL",
            ),
            fsh=HormoneReading(
                value=profile.fsh,
                status=_outside(profile.fsh, low=3, high=10),
                range="3-10 mIU/mL",
            ),
            lh_fsh_ratio=HormoneReading(
                value=profile.lh_fsh_ratio,
                status=_above(profile.lh_fsh_ratio, high=3, borderline=2),
                range="1.0-2.0",
            ),
            cortisol=HormoneReading(
                value=profile.cortisol,
                status=_outside(profile.cortisol, low=6, high=23),
                range="6-23 µg/dL",
            ),
        )

    def score(self, profile: Profile) -> RiskResult:
        """Calculate the risk result for a single profile.

        Args:
            profile: Profile to score. Values are not range-checked here.

        Returns:
            RiskResult with score, risk level, factors and hormone analysis
        """
        # Step 1: Category sub-scores
        bmi_score = self.bmi_score(profile.bmi)
        menstrual_score = self.menstrual_score(profile)
        clinical_score = self.clinical_score(profile)
        hormonal_score = self.hormonal_score(profile)
        family_score = self.family_history_score(profile)

        # Step 2: Weighted total
        total_score = (
            bmi_score * BMI_WEIGHT
            + menstrual_score * MENSTRUAL_WEIGHT
            + clinical_score * CLINICAL_WEIGHT
            + hormonal_score * HORMONAL_WEIGHT
            + family_score * FAMILY_HISTORY_WEIGHT
        )

        # Step 3: Factors carry the raw sub-score, not the weighted share
        descriptions = (
            f"BMI {profile.bmi:.1f} kg/m²",
            "Irregular cycles detected" if profile.irregular_periods else "Regular cycles",
            f"Acne: {profile.acne_severity}/3, Hair Growth: {profile.excess_hair_growth}/4",
            f"LH/FSH ratio: {profile.lh_fsh_ratio:.2f}",
            "Family history present" if profile.family_history else "No family history",
        )
        sub_scores = (bmi_score, menstrual_score, clinical_score, hormonal_score, family_score)

        factors = [
            RiskFactor(
                name=name,
                contribution=float(sub_score),
                status=factor_status(sub_score),
                description=description,
            )
            for name, sub_score, description in zip(FACTOR_NAMES, sub_scores, descriptions)
        ]

        return RiskResult(
            risk_level=classify_score(total_score),
            confidence=self.confidence(),
            score=float(total_score),
            factors=factors,
            hormone_analysis=self.analyze_hormones(profile),
        )

    def score_batch(self, profiles: list[Profile]) -> list[RiskResult]:
        """Calculate risk results for multiple profiles.

        Args:
            profiles: List of profiles

        Returns:
            List of results in same order as inputs
        """
        return [self.score(profile) for profile in profiles]


def _above(value: float, *, high: float, borderline: float) -> HormoneStatus:
    if value > high:
        return HormoneStatus.high
    if value > borderline:
        return HormoneStatus.borderline
    return HormoneStatus.normal


def _outside(value: float, *, low: float, high: float) -> HormoneStatus:
    if value > high:
        return HormoneStatus.high
    if value < low:
        return HormoneStatus.low
    return HormoneStatus.normal


def compute_risk(profile: Profile, rng: random.Random | None = None) -> RiskResult:
    """Score ``profile`` with a one-off calculator."""
    return PCOSCalculator(rng=rng).score(profile)
