"""Profile evaluation: BMI value and weight category.

Pure functions, no I/O. The formula divides by height in centimetres squared
and the band between underweight and overweight has no branch of its own;
both are kept as the bot has always reported them.
"""
from models.session import BmiCategory, BmiResult, UserProfile
from core.exceptions import FlowPreconditionError


def calc_bmi(weight_kg: int, height_cm: int) -> float:
    """
    Calculate Body Mass Index as weight / height².

    Height stays in centimetres, so real adults land far below 1.0.
    """
    if height_cm is None or weight_kg is None:
        raise FlowPreconditionError("BMI needs both weight and height")
    if height_cm <= 0:
        raise FlowPreconditionError(f"Height must be positive, got {height_cm}")
    return weight_kg / (height_cm * height_cm)


def bmi_category(bmi: float) -> BmiCategory:
    """
    Classify a BMI value. First matching band wins; values falling between
    bands (including 18.5 < bmi < 25) are UNCLASSIFIED.
    """
    if bmi <= 18.5:
        return BmiCategory.UNDERWEIGHT
    if 25 <= bmi <= 29.9:
        return BmiCategory.OVERWEIGHT
    if 30 <= bmi <= 34.99:
        return BmiCategory.OBESE_I
    if 35 <= bmi <= 39.99:
        return BmiCategory.OBESE_II
    if bmi >= 40:
        return BmiCategory.OBESE_III
    return BmiCategory.UNCLASSIFIED


def evaluate_profile(profile: UserProfile) -> BmiResult:
    """Derive the BMI result for a completed profile."""
    value = calc_bmi(profile.weight_kg, profile.height_cm)
    return BmiResult(value=value, category=bmi_category(value))
