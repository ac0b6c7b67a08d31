from typing import List, Optional
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from core.exceptions import FlowPreconditionError


class Sex(Enum):
    MALE = "Masculino"
    FEMALE = "Feminino"

    @classmethod
    def from_label(cls, label: str) -> "Sex":
        for sex in cls:
            if sex.value == label:
                return sex
        raise FlowPreconditionError(f"Unknown sex label: {label!r}")


class FlowStep(Enum):
    """Position of the interview. Only ever moves forward."""
    ASK_NAME = "ask_name"
    ASK_SEX = "ask_sex"
    ASK_HEIGHT = "ask_height"
    ASK_WEIGHT = "ask_weight"
    EVALUATE = "evaluate"

    @classmethod
    def from_value(cls, value: str) -> "FlowStep":
        try:
            return cls(value)
        except ValueError:
            raise FlowPreconditionError(f"Unknown flow step: {value!r}") from None


class BmiCategory(Enum):
    UNDERWEIGHT = "Abaixo do peso"
    NORMAL = "Peso normal"
    OVERWEIGHT = "Sobrepeso"
    OBESE_I = "Obesidade Grau I"
    OBESE_II = "Obesidade Grau II"
    OBESE_III = "Obesidade Grau III"
    UNCLASSIFIED = "Sem resposta"

    @property
    def label(self) -> str:
        return self.value


def _stored_measure(data: dict, key: str, required: bool = True) -> Optional[int]:
    """A stored height/weight: a positive int, or None when optional and absent."""
    value = data.get(key)
    if value is None and not required:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise FlowPreconditionError(f"Stored {key} is not a positive integer: {value!r}")
    return value


def _stored_name(data: dict, required: bool = True) -> Optional[str]:
    value = data.get("name")
    if value is None and not required:
        return None
    if not isinstance(value, str) or not value.strip():
        raise FlowPreconditionError(f"Stored name is not a non-empty string: {value!r}")
    return value


@dataclass
class UserProfile:
    """Long-term memory: what we know about the user after a finished interview."""
    name: str
    sex: Sex
    height_cm: int
    weight_kg: int

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "sex": self.sex.value,
            "height_cm": self.height_cm,
            "weight_kg": self.weight_kg,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        return cls(
            name=_stored_name(data),
            sex=Sex.from_label(data["sex"]),
            height_cm=_stored_measure(data, "height_cm"),
            weight_kg=_stored_measure(data, "weight_kg"),
        )


@dataclass
class FlowAccumulator:
    """Short-term memory: the answers collected so far in this interview."""
    name: Optional[str] = None
    sex: Optional[Sex] = None
    height_cm: Optional[int] = None
    weight_kg: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields

    @property
    def missing_fields(self) -> List[str]:
        missing = []
        if self.name is None: missing.append("name")
        if self.sex is None: missing.append("sex")
        if self.height_cm is None: missing.append("height_cm")
        if self.weight_kg is None: missing.append("weight_kg")
        return missing

    def to_profile(self) -> UserProfile:
        if not self.is_complete:
            raise FlowPreconditionError(
                f"Cannot build profile, missing: {', '.join(self.missing_fields)}"
            )
        return UserProfile.from_dict(self.to_dict())

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "sex": self.sex.value if self.sex else None,
            "height_cm": self.height_cm,
            "weight_kg": self.weight_kg,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FlowAccumulator":
        sex = data.get("sex")
        return cls(
            name=_stored_name(data, required=False),
            sex=Sex.from_label(sex) if sex is not None else None,
            height_cm=_stored_measure(data, "height_cm", required=False),
            weight_kg=_stored_measure(data, "weight_kg", required=False),
        )


@dataclass
class FlowState:
    """What gets persisted between turns so the next one resumes in place."""
    step: FlowStep = FlowStep.ASK_NAME
    accumulator: FlowAccumulator = field(default_factory=FlowAccumulator)
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())
    updated_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> dict:
        return {
            "step": self.step.value,
            "accumulator": self.accumulator.to_dict(),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FlowState":
        if "step" not in data:
            raise FlowPreconditionError("Stored flow state has no step")
        return cls(
            step=FlowStep.from_value(data["step"]),
            accumulator=FlowAccumulator.from_dict(data.get("accumulator") or {}),
            created_at=data.get("created_at", datetime.now().isoformat()),
            updated_at=data.get("updated_at", datetime.now().isoformat()),
        )


@dataclass
class BmiResult:
    value: float
    category: BmiCategory


@dataclass
class OutboundMessage:
    """A message for the channel. `choices` is only set on closed-choice prompts."""
    text: str
    choices: List[str] = field(default_factory=list)

    def render(self) -> str:
        if not self.choices:
            return self.text
        numbered = [f"({i}) {choice}" for i, choice in enumerate(self.choices, start=1)]
        if len(numbered) == 1:
            inline = numbered[0]
        else:
            inline = ", ".join(numbered[:-1]) + " ou " + numbered[-1]
        return f"{self.text} {inline}"


@dataclass
class TurnResult:
    """Outcome of one `advance` call."""
    next_step: FlowStep
    accumulator: FlowAccumulator
    messages: List[OutboundMessage] = field(default_factory=list)
    is_terminal: bool = False
    # Only filled on the terminal turn
    profile: Optional[UserProfile] = None
    bmi: Optional[BmiResult] = None

    @property
    def texts(self) -> List[str]:
        return [m.render() for m in self.messages]

    def to_state(self) -> FlowState:
        return FlowState(step=self.next_step, accumulator=self.accumulator)

