"""Unit tests for the intent classifier."""

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from genui_router.classifier import (
    NOSTREAM_TAG,
    IntentClassifier,
    extract_decision,
    latest_human_message,
)
from genui_router.errors import (
    ClassificationFailureError,
    NoInputError,
    OracleUnavailableError,
)
from genui_router.prompts import ROUTER_PROMPT
from genui_router.state import Route, RouterDecision

from conftest import ScriptedOracle, router_reply


class TestLatestHumanMessage:

    def test_returns_most_recent_human(self):
        messages = [
            HumanMessage(content="first"),
            AIMessage(content="reply"),
            HumanMessage(content="second"),
            AIMessage(content="another reply"),
        ]
        assert latest_human_message(messages).content == "second"

    def test_none_without_human(self):
        assert latest_human_message([SystemMessage(content="sys"), AIMessage(content="hi")]) is None
        assert latest_human_message([]) is None


class TestExtractDecision:

    def test_valid_route(self):
        assert extract_decision(router_reply("tripPlanner")) == RouterDecision(Route.TRIP_PLANNER)

    def test_no_tool_call(self):
        with pytest.raises(ClassificationFailureError, match="No tool call"):
            extract_decision(AIMessage(content="stockbroker"))

    def test_unknown_route(self):
        with pytest.raises(ClassificationFailureError, match="unknown route"):
            extract_decision(router_reply("weather"))

    def test_missing_route_argument(self):
        message = AIMessage(
            content="",
            tool_calls=[{"name": "router", "args": {}, "id": "call_1"}],
        )
        with pytest.raises(ClassificationFailureError):
            extract_decision(message)


class TestIntentClassifier:

    def test_stock_question_routes_to_stockbroker(self, router_oracle):
        classifier = IntentClassifier(router_oracle)
        state = {"messages": [HumanMessage(content="What's AAPL trading at?")]}

        assert classifier.classify(state) is Route.STOCKBROKER

    def test_trip_request_routes_to_trip_planner(self, router_oracle):
        classifier = IntentClassifier(router_oracle)
        state = {"messages": [HumanMessage(content="Plan a weekend in Lisbon")]}

        assert classifier.classify(state) is Route.TRIP_PLANNER

    def test_sends_system_prompt_and_latest_human_only(self, router_oracle):
        classifier = IntentClassifier(router_oracle)
        state = {
            "messages": [
                HumanMessage(content="Plan a weekend in Lisbon"),
                AIMessage(content="Sure, when?"),
                HumanMessage(content="Actually, what's AAPL at?"),
                AIMessage(content="thinking"),
            ]
        }

        classifier.classify(state)

        sent = router_oracle.calls[0]["messages"]
        assert len(sent) == 2
        assert sent[0].content == ROUTER_PROMPT
        assert sent[1].content == "Actually, what's AAPL at?"

    def test_forces_router_tool(self, router_oracle):
        classifier = IntentClassifier(router_oracle)
        classifier.classify({"messages": [HumanMessage(content="hello")]})

        kwargs = router_oracle.calls[0]["kwargs"]
        assert kwargs["tool_choice"] == "router"
        [tool] = kwargs["tools"]
        assert tool["name"] == "router"
        assert tool["parameters"]["properties"]["route"]["enum"] == [
            "stockbroker", "tripPlanner", "generalInput",
        ]

    def test_call_is_tagged_nostream(self, router_oracle):
        classifier = IntentClassifier(router_oracle)
        assert NOSTREAM_TAG in classifier.llm.config["tags"]

    def test_deterministic_for_same_history(self, router_oracle):
        classifier = IntentClassifier(router_oracle)
        state = {"messages": [HumanMessage(content="Show my portfolio")]}

        assert classifier.classify(state) == classifier.classify(state)

    def test_does_not_mutate_state(self, router_oracle):
        classifier = IntentClassifier(router_oracle)
        messages = [HumanMessage(content="hello")]
        state = {"messages": messages}

        classifier.classify(state)

        assert state == {"messages": messages}
        assert len(messages) == 1

    def test_node_returns_next_route(self, router_oracle):
        classifier = IntentClassifier(router_oracle)
        update = classifier({"messages": [HumanMessage(content="What can you do?")]})
        assert update == {"next_route": Route.GENERAL_INPUT}

    @pytest.mark.parametrize("messages", [[], [AIMessage(content="Hi there")]])
    def test_no_human_message_raises_before_oracle_call(self, router_oracle, messages):
        classifier = IntentClassifier(router_oracle)

        with pytest.raises(NoInputError) as excinfo:
            classifier.classify({"messages": messages})

        assert excinfo.value.stage == "classification"
        assert router_oracle.calls == []

    def test_free_text_answer_fails_classification(self):
        oracle = ScriptedOracle(reply=lambda messages: AIMessage(content="stockbroker"))
        classifier = IntentClassifier(oracle)

        with pytest.raises(ClassificationFailureError):
            classifier.classify({"messages": [HumanMessage(content="AAPL?")]})

    def test_oracle_failure_is_wrapped(self):
        oracle = ScriptedOracle(
            reply=lambda messages: router_reply("stockbroker"),
            error=ConnectionError("provider down"),
        )
        classifier = IntentClassifier(oracle)

        with pytest.raises(OracleUnavailableError) as excinfo:
            classifier.classify({"messages": [HumanMessage(content="AAPL?")]})

        assert excinfo.value.stage == "classification"
        assert isinstance(excinfo.value.__cause__, ConnectionError)
