"""Intent classifier — maps the latest human message to exactly one Route."""

import logging
from typing import Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, SystemMessage

from genui_router.errors import (
    ClassificationFailureError,
    NoInputError,
    OracleUnavailableError,
)
from genui_router.prompts import ROUTER_PROMPT, ROUTER_TOOL
from genui_router.state import ConversationState, Route, RouterDecision

logger = logging.getLogger(__name__)

# LangGraph skips token streaming for runs carrying this tag
NOSTREAM_TAG = "langsmith:nostream"


def latest_human_message(messages: Sequence[BaseMessage]) -> Optional[BaseMessage]:
    """Scan history from the end for the most recent human message."""
    for msg in reversed(messages):
        if getattr(msg, "type", None) == "human":
            return msg
    return None


def extract_decision(response: AIMessage) -> RouterDecision:
    """Pull the route out of the router tool call.

    Raises:
        ClassificationFailureError: No tool call, or its route is not a Route.
    """
    tool_calls = getattr(response, "tool_calls", None) or []
    if not tool_calls:
        raise ClassificationFailureError("No tool call found in response")

    route = (tool_calls[0].get("args") or {}).get("route")
    try:
        return RouterDecision(route=Route(route))
    except ValueError:
        raise ClassificationFailureError(f"Oracle chose unknown route {route!r}") from None


class IntentClassifier:
    """Graph node that classifies the conversation's latest human message.

    The oracle is bound to a single `router` tool with `tool_choice` forcing
    it, so it has to commit to one enumerated label instead of free text.
    Build the oracle at temperature 0 (see `genui_router.llm.get_llm`) so the
    same history always routes the same way.
    """

    def __init__(self, llm: BaseChatModel):
        self.llm = (
            llm.bind_tools([ROUTER_TOOL], tool_choice=ROUTER_TOOL["name"])
            .with_config(tags=[NOSTREAM_TAG])
        )

    def classify(self, state: ConversationState) -> Route:
        human = latest_human_message(state.get("messages") or [])
        if human is None:
            raise NoInputError("No human message found in state")

        try:
            response = self.llm.invoke([SystemMessage(content=ROUTER_PROMPT), human])
        except Exception as e:
            logger.error("Classification oracle call failed: %s", e)
            raise OracleUnavailableError(f"Classification oracle call failed: {e}") from e

        try:
            decision = extract_decision(response)
        except ClassificationFailureError as e:
            logger.error("Could not extract a route: %s", e)
            raise

        logger.info("Routing to %s", decision.route.value)
        return decision.route

    def __call__(self, state: ConversationState) -> dict:
        return {"next_route": self.classify(state)}
