"""Errors raised by the conversation flow.

Bad user input is never an error: the flow re-prompts instead. These are
raised only when the persisted state handed to the flow cannot be trusted.
"""


class FlowError(Exception):
    """Base class for conversation flow errors."""


class FlowPreconditionError(FlowError):
    """Unknown step, corrupt stored state, or a missing answer at evaluation."""
