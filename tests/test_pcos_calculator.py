"""Tests for PCOS Risk Calculator."""

import random

import pytest
from pydantic import ValidationError

from pcos_calculators.pcos_risk_calculator import (
    DEMO_PROFILES,
    FACTOR_NAMES,
    FactorStatus,
    HormoneStatus,
    PCOSCalculator,
    Profile,
    RiskLevel,
    RiskResult,
    classify_score,
    compute_risk,
)


def make_profile(**overrides):
    """Profile whose every sub-score is zero apart from BMI (10)."""
    data = {
        "age": 30,
        "height": 165,
        "weight": 60,
        "cycle_length": 28,
        "testosterone": 30,
        "amh": 2.0,
        "lh": 5.0,
        "fsh": 5.0,
        "cortisol": 12.0,
    }
    data.update(overrides)
    return Profile(**data)


class TestProfile:
    """Tests for Profile model."""

    def test_valid_profile(self):
        """Test creating a valid profile."""
        profile = make_profile(acne_severity=2, irregular_periods=True)
        assert profile.age == 30
        assert profile.acne_severity == 2
        assert profile.irregular_periods is True
        assert profile.family_history is False

    def test_derived_fields_computed_when_omitted(self):
        """Test bmi and lh_fsh_ratio are derived from their sources."""
        profile = Profile(
            age=25,
            height=160,
            weight=64,
            cycle_length=28,
            testosterone=40,
            amh=2.5,
            lh=12.0,
            fsh=4.0,
            cortisol=12.0,
        )
        assert profile.bmi == 25.0
        assert profile.lh_fsh_ratio == 3.0

    def test_supplied_derived_values_are_recomputed(self):
        """Test bmi and lh_fsh_ratio that contradict their sources are replaced."""
        profile = make_profile(height=160, weight=60, bmi=40.0, lh=12.0, fsh=4.0, lh_fsh_ratio=9.0)
        assert profile.bmi == 23.4
        assert profile.lh_fsh_ratio == 3.0

        camel = Profile.model_validate({**profile.model_dump(by_alias=True), "lhFshRatio": 0.5})
        assert camel.lh_fsh_ratio == 3.0

    def test_ratio_rounded_to_two_decimals(self):
        profile = make_profile(lh=6.0, fsh=5.5)
        assert profile.lh_fsh_ratio == 1.09

    def test_with_updates_recomputes_bmi(self):
        """Test changing weight refreshes bmi."""
        profile = make_profile(height=160, weight=64)
        updated = profile.with_updates(weight=70)
        assert updated.bmi == 27.3
        assert profile.bmi == 25.0

    def test_with_updates_recomputes_ratio(self):
        profile = make_profile(lh=5.0, fsh=5.0)
        assert profile.with_updates(fsh=2.0).lh_fsh_ratio == 2.5

    def test_with_updates_leaves_unrelated_derived_fields(self):
        profile = make_profile()
        assert profile.with_updates(acne_severity=1).bmi == 22.0

    def test_zero_fsh_gives_zero_ratio(self):
        assert make_profile().with_updates(fsh=0).lh_fsh_ratio == 0.0

    def test_profile_is_frozen(self):
        profile = make_profile()
        with pytest.raises(ValidationError):
            profile.age = 40

    def test_camel_case_aliases(self):
        """Test profiles load from the camelCase blob shape."""
        profile = Profile.model_validate(
            {
                "age": 28,
                "height": 162,
                "weight": 58,
                "bmi": 22.1,
                "familyHistory": True,
                "cycleLength": 28,
                "irregularPeriods": True,
                "acneSeverity": 1,
                "excessHairGrowth": 0,
                "testosterone": 35,
                "amh": 2.5,
                "lh": 6.0,
                "fsh": 5.5,
                "lhFshRatio": 1.09,
                "cortisol": 12.0,
            }
        )
        assert profile.family_history is True
        assert profile.cycle_length == 28
        assert profile.lh_fsh_ratio == 1.09
        assert profile.model_dump(by_alias=True)["lhFshRatio"] == 1.09

    def test_invalid_type(self):
        """Test that a non-numeric severity raises error."""
        with pytest.raises(ValueError):
            make_profile(acne_severity="lots")


class TestPCOSCalculator:
    """Tests for PCOSCalculator."""

    @pytest.fixture
    def calculator(self):
        """Create calculator instance with a fixed random source."""
        return PCOSCalculator(rng=random.Random(42))

    def test_normal_demo_profile(self, calculator):
        """Test the normal preset scores only on BMI."""
        result = calculator.score(DEMO_PROFILES["normal"])

        assert result.score == pytest.approx(1.5)
        assert result.risk_level == RiskLevel.low
        assert [f.contribution for f in result.factors] == [10, 0, 0, 0, 0]
        assert all(f.status == FactorStatus.normal for f in result.factors)

    def test_likely_pcos_demo_profile(self, calculator):
        """Test the likely-PCOS preset hits the capped sub-scores."""
        result = calculator.score(DEMO_PROFILES["likelyPCOS"])

        assert [f.contribution for f in result.factors] == [70, 90, 100, 95, 70]
        assert result.score == pytest.approx(88.75)
        assert result.risk_level == RiskLevel.high

    def test_borderline_demo_profile(self, calculator):
        result = calculator.score(DEMO_PROFILES["borderline"])

        assert [f.contribution for f in result.factors] == [40, 40, 79, 35, 70]
        assert result.score == pytest.approx(49.05)
        assert result.risk_level == RiskLevel.moderate
        assert [f.status for f in result.factors] == [
            FactorStatus.borderline,
            FactorStatus.borderline,
            FactorStatus.abnormal,
            FactorStatus.borderline,
            FactorStatus.abnormal,
        ]

    def test_factor_order_and_count(self, calculator):
        """Test that factors always come back as the five categories in order."""
        for profile in DEMO_PROFILES.values():
            result = calculator.score(profile)
            assert [f.name for f in result.factors] == list(FACTOR_NAMES)
            assert [f.name for f in result.factors] == [
                "BMI",
                "Menstrual Irregularity",
                "Clinical Symptoms",
                "Hormonal Markers",
                "Family History",
            ]

    def test_contribution_is_raw_sub_score(self, calculator):
        """Test contribution is the unweighted sub-score."""
        result = calculator.score(make_profile(family_history=True))
        family = result.factors[4]
        assert family.contribution == 70
        assert family.status == FactorStatus.abnormal
        assert family.description == "Family history present"

    @pytest.mark.parametrize(
        ("bmi", "expected"),
        [
            (17.0, 20),
            (18.4, 20),
            (18.5, 10),
            (24.9, 10),
            (25.0, 40),
            (29.9, 40),
            (30.0, 70),
            (34.9, 70),
            (35.0, 90),
            (48.0, 90),
        ],
    )
    def test_bmi_step_function(self, calculator, bmi, expected):
        """Test half-open BMI bands, including underweight above normal."""
        assert calculator.bmi_score(bmi) == expected
        assert calculator.score(make_profile(height=100, weight=bmi)).factors[0].contribution == expected

    def test_menstrual_score(self, calculator):
        assert calculator.menstrual_score(make_profile()) == 0
        assert calculator.menstrual_score(make_profile(irregular_periods=True)) == 40
        assert calculator.menstrual_score(make_profile(cycle_length=36)) == 20
        assert calculator.menstrual_score(make_profile(cycle_length=46)) == 30
        assert (
            calculator.menstrual_score(
                make_profile(irregular_periods=True, missed_periods=True, cycle_length=60)
            )
            == 100
        )

    def test_clinical_score_caps_at_100(self, calculator):
        profile = make_profile(
            acne_severity=3,
            excess_hair_growth=4,
            hair_fall=True,
            dark_patches=True,
            mood_swings=True,
        )
        assert calculator.clinical_score(profile) == 100
        assert calculator.clinical_score(make_profile(acne_severity=1, dark_patches=True)) == 35

    def test_hormonal_score_thresholds(self, calculator):
        """Test each marker's lower and upper step."""
        assert calculator.hormonal_score(make_profile(testosterone=55)) == 0
        assert calculator.hormonal_score(make_profile(testosterone=56)) == 15
        assert calculator.hormonal_score(make_profile(testosterone=71)) == 25
        assert calculator.hormonal_score(make_profile(amh=4.5)) == 15
        assert calculator.hormonal_score(make_profile(amh=6.5)) == 25
        assert calculator.hormonal_score(make_profile(lh=12.5, fsh=5.0)) == 20
        assert calculator.hormonal_score(make_profile(lh=17.5, fsh=5.0)) == 30
        assert calculator.hormonal_score(make_profile(cortisol=23)) == 0
        assert calculator.hormonal_score(make_profile(cortisol=24)) == 15

    def test_factor_descriptions(self, calculator):
        result = calculator.score(DEMO_PROFILES["borderline"])
        assert [f.description for f in result.factors] == [
            "BMI 26.6 kg/m²",
            "Irregular cycles detected",
            "Acne: 2/3, Hair Growth: 2/4",
            "LH/FSH ratio: 2.40",
            "Family history present",
        ]

    def test_pathological_input_is_not_clamped(self, calculator):
        """Test negative inputs flow through without validation."""
        result = calculator.score(make_profile(acne_severity=-3))
        assert result.factors[2].contribution == -45
        assert result.score == pytest.approx(1.5 - 9.0)
        assert result.risk_level == RiskLevel.low

    def test_confidence_range(self, calculator):
        """Test confidence stays within [70, 95]."""
        for _ in range(50):
            result = calculator.score(DEMO_PROFILES["normal"])
            assert 70 <= result.confidence <= 95

    def test_seeded_confidence_is_reproducible(self):
        a = PCOSCalculator(rng=random.Random(3)).score(DEMO_PROFILES["borderline"])
        b = PCOSCalculator(rng=random.Random(3)).score(DEMO_PROFILES["borderline"])
        assert a.confidence == b.confidence

    def test_idempotent_apart_from_confidence(self):
        """Test scoring twice yields the same level, score and factors."""
        profile = DEMO_PROFILES["likelyPCOS"]
        first = compute_risk(profile)
        second = compute_risk(profile)
        assert first.risk_level == second.risk_level
        assert first.score == second.score
        assert first.factors == second.factors

    def test_score_bounds_over_extremes(self, calculator):
        """Test the score stays within [0, 94) for in-range extremes."""
        lowest = make_profile()
        highest = make_profile(
            height=100,
            weight=40,
            family_history=True,
            irregular_periods=True,
            missed_periods=True,
            cycle_length=90,
            acne_severity=3,
            excess_hair_growth=4,
            hair_fall=True,
            dark_patches=True,
            mood_swings=True,
            testosterone=200,
            amh=50,
            lh=50,
            cortisol=50,
        )
        assert calculator.score(lowest).score >= 0
        assert calculator.score(highest).score == pytest.approx(93.75)
        assert calculator.score(highest).score < 94

    def test_score_output_structure(self, calculator):
        """Test that score output has expected structure."""
        result = calculator.score(DEMO_PROFILES["normal"])

        assert isinstance(result, RiskResult)
        assert isinstance(result.score, float)
        assert len(result.factors) == 5
        dumped = result.model_dump(by_alias=True)
        assert set(dumped) == {"riskLevel", "confidence", "score", "factors", "hormoneAnalysis"}
        assert set(dumped["hormoneAnalysis"]) == {
            "testosterone",
            "amh",
            "lh",
            "fsh",
            "lhFshRatio",
            "cortisol",
        }

    def test_batch_scoring(self, calculator):
        """Test batch scoring multiple profiles."""
        profiles = [DEMO_PROFILES["normal"], DEMO_PROFILES["borderline"], DEMO_PROFILES["likelyPCOS"]]

        results = calculator.score_batch(profiles)

        assert len(results) == 3
        assert [r.risk_level for r in results] == [RiskLevel.low, RiskLevel.moderate, RiskLevel.high]


class TestClassification:
    """Tests for score to risk level mapping."""

    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (0.0, RiskLevel.low),
            (34.99, RiskLevel.low),
            (35.0, RiskLevel.moderate),
            (64.99, RiskLevel.moderate),
            (65.0, RiskLevel.high),
            (93.75, RiskLevel.high),
        ],
    )
    def test_boundaries(self, score, expected):
        assert classify_score(score) == expected


class TestHormoneAnalysis:
    """Tests for per-hormone display statuses."""

    @pytest.fixture
    def calculator(self):
        return PCOSCalculator(rng=random.Random(0))

    def test_normal_preset_all_normal(self, calculator):
        analysis = calculator.analyze_hormones(DEMO_PROFILES["normal"])
        assert all(reading.status == HormoneStatus.normal for _, reading in analysis.items())

    def test_likely_pcos_preset(self, calculator):
        analysis = calculator.analyze_hormones(DEMO_PROFILES["likelyPCOS"])
        assert analysis.testosterone.status == HormoneStatus.high
        assert analysis.amh.status == HormoneStatus.high
        assert analysis.lh.status == HormoneStatus.high
        assert analysis.fsh.status == HormoneStatus.normal
        assert analysis.lh_fsh_ratio.status == HormoneStatus.high
        assert analysis.cortisol.status == HormoneStatus.high
        assert analysis.lh.value == 18.0

    def test_borderline_statuses(self, calculator):
        analysis = calculator.analyze_hormones(DEMO_PROFILES["borderline"])
        assert analysis.testosterone.status == HormoneStatus.normal
        assert analysis.amh.status == HormoneStatus.borderline
        assert analysis.lh.status == HormoneStatus.normal
        assert analysis.lh_fsh_ratio.status == HormoneStatus.borderline

    def test_low_readings(self, calculator):
        analysis = calculator.analyze_hormones(make_profile(fsh=2.5, cortisol=5.0))
        assert analysis.fsh.status == HormoneStatus.low
        assert analysis.cortisol.status == HormoneStatus.low

    def test_lh_and_fsh_high(self, calculator):
        analysis = calculator.analyze_hormones(make_profile(lh=13.0, fsh=11.0))
        assert analysis.lh.status == HormoneStatus.borderline
        assert analysis.fsh.status == HormoneStatus.high

    def test_reference_range_strings(self, calculator):
        analysis = calculator.analyze_hormones(DEMO_PROFILES["normal"])
        assert [reading.range for _, reading in analysis.items()] == [
            "15-70 ng/dL",
            "1.0-4.0 ng/mL",
            "2-15 mIU/mL",
            "3-10 mIU/mL",
            "1.0-2.0",
            "6-23 µg/dL",
        ]
