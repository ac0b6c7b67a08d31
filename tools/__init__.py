"""IMC Bot Tools Module.

Deterministic helpers used by the conversation flow.

Tools:
    calc_bmi: Calculate Body Mass Index.
    bmi_category: Classify a BMI value.
    evaluate_profile: BMI value + category for a finished profile.
    recognize_text / recognize_choice / recognize_int: Typed step inputs.
"""
from tools.health_metrics import (
    calc_bmi,
    bmi_category,
    evaluate_profile,
)
from tools.recognizers import (
    InputKind,
    FoundChoice,
    recognize_text,
    recognize_choice,
    recognize_int,
)

__all__ = [
    "calc_bmi",
    "bmi_category",
    "evaluate_profile",
    "InputKind",
    "FoundChoice",
    "recognize_text",
    "recognize_choice",
    "recognize_int",
]
