"""Shared test doubles: a scripted chat model and recording handler stubs."""

from typing import Any, Callable, List, Optional

import pytest
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatResult
from pydantic import Field

from genui_router.classifier import IntentClassifier
from genui_router.fallback import GeneralInputHandler
from genui_router.graph import build_graph
from genui_router.state import Route


def router_reply(route: Any) -> AIMessage:
    """AIMessage carrying a router tool call for `route`."""
    return AIMessage(
        content="",
        tool_calls=[{"name": "router", "args": {"route": route}, "id": "call_router"}],
    )


class ScriptedOracle(BaseChatModel):
    """Chat model that answers from a reply function and records every call."""

    reply: Callable[[List[BaseMessage]], BaseMessage]
    error: Optional[Exception] = None
    calls: List[dict] = Field(default_factory=list)

    @property
    def _llm_type(self) -> str:
        return "scripted"

    def bind_tools(self, tools, *, tool_choice=None, **kwargs):
        return self.bind(tools=tools, tool_choice=tool_choice, **kwargs)

    def _generate(self, messages, stop=None, run_manager=None, **kwargs) -> ChatResult:
        self.calls.append({"messages": list(messages), "kwargs": kwargs})
        if self.error is not None:
            raise self.error
        return ChatResult(generations=[ChatGeneration(message=self.reply(messages))])


def keyword_router(messages: List[BaseMessage]) -> AIMessage:
    """Deterministic stand-in for the classification oracle."""
    text = messages[-1].content.lower()
    if "aapl" in text or "stock" in text or "portfolio" in text:
        return router_reply("stockbroker")
    if "plan" in text or "trip" in text:
        return router_reply("tripPlanner")
    return router_reply("generalInput")


def echo_capabilities(messages: List[BaseMessage]) -> AIMessage:
    """Fallback oracle that answers 'what can you do' from its system prompt."""
    system = messages[0].content
    capabilities = [line for line in system.splitlines() if line.startswith("- ")]
    return AIMessage(content="I can help with:\n" + "\n".join(capabilities))


class RecordingHandler:
    """Specialized handler stub that appends a fixed reply."""

    def __init__(self, reply: str):
        self.reply = reply
        self.calls = []

    def __call__(self, state):
        self.calls.append(list(state["messages"]))
        return {"messages": [AIMessage(content=self.reply)]}


@pytest.fixture
def router_oracle():
    return ScriptedOracle(reply=keyword_router)


@pytest.fixture
def fallback_oracle():
    return ScriptedOracle(reply=echo_capabilities)


@pytest.fixture
def handlers():
    return {
        Route.STOCKBROKER: RecordingHandler("AAPL is trading at $190.12."),
        Route.TRIP_PLANNER: RecordingHandler("Here's a weekend itinerary for Lisbon."),
    }


@pytest.fixture
def graph(router_oracle, fallback_oracle, handlers):
    return build_graph(
        classifier=IntentClassifier(router_oracle),
        handlers=handlers,
        fallback=GeneralInputHandler(fallback_oracle),
    )
