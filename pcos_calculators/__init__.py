"""PCOS calculators - Risk scoring calculator implementations.

Available calculators:
    - PCOSCalculator: weighted PCOS risk calculator
"""

from pcos_calculators.pcos_risk_calculator import PCOSCalculator, Profile, RiskResult

__all__ = ["PCOSCalculator", "Profile", "RiskResult"]
