"""IMC Bot Data Models.

This module contains dataclasses for the interview state and its results.

Models:
    UserProfile: The finished, persisted answers for one user.
    FlowAccumulator: Answers collected so far in an unfinished interview.
    FlowState: Step + accumulator, persisted between turns.
    FlowStep: Enum for the interview stages.
    BmiResult / BmiCategory: Output of the profile evaluator.
    OutboundMessage / TurnResult: What a single turn sends back.
"""
from models.session import (
    Sex,
    FlowStep,
    BmiCategory,
    UserProfile,
    FlowAccumulator,
    FlowState,
    BmiResult,
    OutboundMessage,
    TurnResult,
)

__all__ = [
    "Sex",
    "FlowStep",
    "BmiCategory",
    "UserProfile",
    "FlowAccumulator",
    "FlowState",
    "BmiResult",
    "OutboundMessage",
    "TurnResult",
]
