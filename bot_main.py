"""IMC Bot - console edition

Turn dispatcher for the IMC interview:
- Loads the suspended flow for the user from the state store
- Runs exactly one ConversationFlow step per inbound message
- Saves the new flow state, or clears it once the interview is finished
- Traces every turn (logging + metrics)
"""
import argparse
import logging
from typing import List, Optional

from agents.conversation_flow import ConversationFlow
from core.observability import Tracer, get_metrics_summary
from models.session import FlowAccumulator, FlowStep, OutboundMessage
from services.state_store import StateStore, get_state_store

logger = logging.getLogger(__name__)


class ImcBot:
    """
    Turn dispatcher: one `process` call per message from a user.

    Attributes:
        store: Per-user state store (flow state + profile).
    """

    def __init__(self, store: Optional[StateStore] = None):
        self.store = store if store is not None else get_state_store()

    def process(self, user_id: str, user_text: Optional[str]) -> List[OutboundMessage]:
        """Process one user message and return the messages to send back.

        The message that opens a new interview is not an answer to anything,
        so it is dropped and the first prompt is sent instead.
        """
        stored = self.store.get_flow_state(user_id)
        if stored is None:
            step, accumulator, reply = FlowStep.ASK_NAME, FlowAccumulator(), None
            logger.info(f"Starting new interview for {user_id}")
        else:
            step, accumulator, reply = stored.step, stored.accumulator, user_text

        flow = ConversationFlow(self.store, user_id)
        with Tracer("ConversationFlow", user_text, step=step.value):
            result = flow.advance(step, accumulator, reply)

        if result.is_terminal:
            self.store.clear_flow_state(user_id)
        else:
            state = result.to_state()
            if stored is not None:
                state.created_at = stored.created_at
            self.store.save_flow_state(user_id, state)

        return result.messages

    def reset(self, user_id: str) -> bool:
        """Abandon the running interview for a user, if any."""
        return self.store.clear_flow_state(user_id)

    def get_metrics(self) -> dict:
        return get_metrics_summary()


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="IMC Bot (console)")
    parser.add_argument("--user", default="console_user", help="Conversation id")
    parser.add_argument("--no-persist", action="store_true", help="Keep state in memory only")
    args = parser.parse_args(argv)

    store = StateStore(persist=False) if args.no_persist else get_state_store()
    bot = ImcBot(store)

    print("=== IMC Bot ===")
    print("Digite qualquer coisa para começar. 'exit' para sair.\n")

    while True:
        try:
            user_input = input("Você: ")
        except EOFError:
            break
        if user_input.strip().lower() in ["exit", "quit"]:
            break

        for message in bot.process(args.user, user_input):
            print(f"Bot: {message.render()}")

    print("Até logo!")
    logger.info(f"Session metrics: {bot.get_metrics()}")


if __name__ == "__main__":
    main()
