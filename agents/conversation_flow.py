"""ConversationFlow - the five-step IMC interview

Steps, strictly in order:
    ASK_NAME -> ASK_SEX -> ASK_HEIGHT -> ASK_WEIGHT -> EVALUATE

Each call to `advance` handles exactly one inbound message. The caller keeps
the returned step and accumulator and hands them back on the next turn, so
nothing here lives across turns and the state can be persisted anywhere.

Design Decisions:
    1. Typed inputs: every step declares an InputKind and the matching
       recognizer runs before the step handler sees the reply.
    2. Bad input re-prompts: an unrecognized or invalid reply keeps the flow
       on the same step. It never raises.
    3. Bad state raises: an unknown step or a missing answer at EVALUATE is a
       FlowPreconditionError for the caller to deal with.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional
import logging

from core.exceptions import FlowPreconditionError
from core.observability import metrics
from models.session import (
    FlowAccumulator,
    FlowStep,
    OutboundMessage,
    Sex,
    TurnResult,
)
from services.state_store import StateStore
from tools.health_metrics import evaluate_profile
from tools.recognizers import InputKind, recognize_choice, recognize_int, recognize_text

logger = logging.getLogger(__name__)

SEX_CHOICES = [Sex.MALE.value, Sex.FEMALE.value]


def _positive(value: int) -> bool:
    return value > 0


@dataclass
class StepPrompt:
    """What a step asks and what it accepts."""
    text: str
    kind: InputKind
    choices: List[str] = field(default_factory=list)
    retry_text: Optional[str] = None
    validator: Optional[Callable[[Any], bool]] = None

    def message(self) -> OutboundMessage:
        return OutboundMessage(text=self.text, choices=list(self.choices))


STEP_PROMPTS: Dict[FlowStep, StepPrompt] = {
    FlowStep.ASK_NAME: StepPrompt(
        text="Por favor, insira seu nome.",
        kind=InputKind.TEXT,
    ),
    FlowStep.ASK_SEX: StepPrompt(
        text="Selecione seu sexo.",
        kind=InputKind.CHOICE,
        choices=SEX_CHOICES,
    ),
    FlowStep.ASK_HEIGHT: StepPrompt(
        text="Insira sua Altura.",
        kind=InputKind.INTEGER,
        retry_text="A altura deve ser maior que 0.",
        validator=_positive,
    ),
    FlowStep.ASK_WEIGHT: StepPrompt(
        text="Informe seu peso.",
        kind=InputKind.INTEGER,
        retry_text="O peso deve ser maior que 0.",
        validator=_positive,
    ),
}


def format_summary(profile, bmi) -> str:
    """The closing message: every collected field plus the BMI result."""
    lines = [
        "+=====DADOS SALVOS=====+",
        f"Nome: {profile.name}",
        f"Sexo: {profile.sex.value}",
        f"Altura: {profile.height_cm} cm",
        f"Peso: {profile.weight_kg} Kg",
        f"IMC: {bmi.value}",
        "",
        f"Resultado: {bmi.category.label}",
    ]
    return "\n".join(lines)


class ConversationFlow:
    """Explicit state machine for the interview of one user."""

    def __init__(self, store: StateStore, user_id: str):
        self.store = store
        self.user_id = user_id
        self._handlers = {
            FlowStep.ASK_NAME: self._store_name,
            FlowStep.ASK_SEX: self._store_sex,
            FlowStep.ASK_HEIGHT: self._store_height,
            FlowStep.ASK_WEIGHT: self._store_weight,
            FlowStep.EVALUATE: self._evaluate,
        }

    def advance(
        self,
        current_step: FlowStep,
        accumulator: FlowAccumulator,
        user_reply: Optional[str] = None,
    ) -> TurnResult:
        """
        Run one turn.

        Args:
            current_step: Step the flow was suspended at.
            accumulator: Answers collected so far (not mutated).
            user_reply: Raw user text, or None when the step has not been
                asked yet (the first turn of a new flow).

        Returns:
            TurnResult with the next step, the updated accumulator and the
            messages to send.
        """
        if not isinstance(current_step, FlowStep) or current_step not in self._handlers:
            raise FlowPreconditionError(f"Unknown flow step: {current_step!r}")
        if accumulator is None:
            raise FlowPreconditionError("No accumulator supplied")

        accumulator = replace(accumulator)

        if current_step is FlowStep.EVALUATE:
            return self._evaluate(accumulator, None)

        prompt = STEP_PROMPTS[current_step]
        if user_reply is None:
            return TurnResult(current_step, accumulator, [prompt.message()])

        value = self._recognize(prompt, user_reply)
        if value is None or (prompt.validator and not prompt.validator(value)):
            return self._retry(current_step, accumulator, user_reply)

        return self._handlers[current_step](accumulator, value)

    # === Recognition ===

    def _recognize(self, prompt: StepPrompt, reply: str):
        if prompt.kind is InputKind.TEXT:
            return recognize_text(reply)
        if prompt.kind is InputKind.CHOICE:
            return recognize_choice(reply, prompt.choices)
        if prompt.kind is InputKind.INTEGER:
            return recognize_int(reply)
        raise FlowPreconditionError(f"Unsupported input kind: {prompt.kind}")

    def _retry(self, step: FlowStep, accumulator: FlowAccumulator, reply: str) -> TurnResult:
        prompt = STEP_PROMPTS[step]
        logger.info(f"Rejected reply at {step.value}: {reply[:50]!r}")
        metrics.record_retry(step.value)

        messages = []
        if prompt.retry_text:
            messages.append(OutboundMessage(prompt.retry_text))
        messages.append(prompt.message())
        return TurnResult(step, accumulator, messages)

    # === Step handlers ===

    def _store_name(self, accumulator: FlowAccumulator, name: str) -> TurnResult:
        accumulator.name = name
        return TurnResult(
            FlowStep.ASK_SEX,
            accumulator,
            [OutboundMessage(f"Obrigado, {name}."), STEP_PROMPTS[FlowStep.ASK_SEX].message()],
        )

    def _store_sex(self, accumulator: FlowAccumulator, choice) -> TurnResult:
        accumulator.sex = Sex.from_label(choice.value)
        logger.debug(f"Sex matched {choice.value} (score {choice.score:.2f})")
        return TurnResult(
            FlowStep.ASK_HEIGHT,
            accumulator,
            [STEP_PROMPTS[FlowStep.ASK_HEIGHT].message()],
        )

    def _store_height(self, accumulator: FlowAccumulator, height_cm: int) -> TurnResult:
        accumulator.height_cm = height_cm
        return TurnResult(
            FlowStep.ASK_WEIGHT,
            accumulator,
            [STEP_PROMPTS[FlowStep.ASK_WEIGHT].message()],
        )

    def _store_weight(self, accumulator: FlowAccumulator, weight_kg: int) -> TurnResult:
        accumulator.weight_kg = weight_kg
        # Last answer: evaluate in the same turn
        return self._evaluate(accumulator, None)

    def _evaluate(self, accumulator: FlowAccumulator, _reply) -> TurnResult:
        profile = accumulator.to_profile()
        bmi = evaluate_profile(profile)

        self.store.save_profile(self.user_id, profile)
        metrics.record_completion()
        logger.info(f"Flow complete for {self.user_id}: IMC {bmi.value:.6f} ({bmi.category.name})")

        return TurnResult(
            FlowStep.EVALUATE,
            FlowAccumulator(),
            [OutboundMessage(format_summary(profile, bmi))],
            is_terminal=True,
            profile=profile,
            bmi=bmi,
        )
