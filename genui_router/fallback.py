"""Fallback handler for the generalInput route."""

import logging

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, SystemMessage

from genui_router.errors import HANDLER, OracleUnavailableError
from genui_router.prompts import GENERAL_INPUT_PROMPT
from genui_router.state import ConversationState

logger = logging.getLogger(__name__)


class GeneralInputHandler:
    """Answer conversationally when no specialized route applies.

    Unlike the classifier, this sees the full history: nothing narrowed the
    task down, so every prior turn is context.
    """

    def __init__(self, llm: BaseChatModel):
        self.llm = llm

    def handle(self, state: ConversationState) -> AIMessage:
        messages = [SystemMessage(content=GENERAL_INPUT_PROMPT), *state.get("messages", [])]
        try:
            return self.llm.invoke(messages)
        except Exception as e:
            logger.error("General input oracle call failed: %s", e)
            raise OracleUnavailableError(
                f"General input oracle call failed: {e}", stage=HANDLER
            ) from e

    def __call__(self, state: ConversationState) -> dict:
        return {"messages": [self.handle(state)]}
