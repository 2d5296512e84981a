# pharmashe/logic/profile.py

"""Derived values for the user health profile."""

import math
from typing import Optional

from pharmashe.core.domain import UserProfile


def parse_number(value: str) -> float:
    """Parses a positive finite number, returning 0.0 for anything else."""
    try:
        n = float(value)
    except (TypeError, ValueError):
        return 0.0
    return n if math.isfinite(n) and n > 0 else 0.0


def compute_bmi(height_cm: float, weight_kg: float) -> Optional[float]:
    """Body mass index rounded to one decimal, or None without both inputs."""
    if height_cm <= 0 or weight_kg <= 0:
        return None
    height_m = height_cm / 100
    return round(weight_kg / (height_m * height_m), 1)


def bmi_category(bmi: float) -> str:
    if bmi < 18.5:
        return "Underweight"
    if bmi < 25:
        return "Normal"
    if bmi < 30:
        return "Overweight"
    return "Obese"


def profile_bmi(profile: UserProfile) -> Optional[float]:
    return compute_bmi(parse_number(profile.height_cm), parse_number(profile.weight_kg))


def has_content(profile: Optional[UserProfile]) -> bool:
    """True when at least one profile field holds more than whitespace."""
    if profile is None:
        return False
    return any(
        value.strip()
        for value in (
            profile.height_cm,
            profile.weight_kg,
            profile.underlying_conditions,
            profile.concerns,
        )
    )
