"""Single-turn intent router: classify the latest message, run one handler."""

from genui_router.classifier import IntentClassifier
from genui_router.errors import (
    ClassificationFailureError,
    HandlerError,
    InvalidRouteError,
    NoInputError,
    OracleUnavailableError,
    RouterError,
)
from genui_router.fallback import GeneralInputHandler
from genui_router.graph import arun, build_default_graph, build_graph, route_decision, run
from genui_router.state import ConversationState, Route, RouterDecision

__all__ = [
    "ClassificationFailureError",
    "ConversationState",
    "GeneralInputHandler",
    "HandlerError",
    "IntentClassifier",
    "InvalidRouteError",
    "NoInputError",
    "OracleUnavailableError",
    "Route",
    "RouterDecision",
    "RouterError",
    "arun",
    "build_default_graph",
    "build_graph",
    "route_decision",
    "run",
]
