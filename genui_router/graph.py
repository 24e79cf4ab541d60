"""LangGraph for the router — classify once, dispatch to exactly one handler.

Entry: router → (stockbroker | tripPlanner | generalInput) → END
"""

import inspect
import logging
from typing import Any, Callable, Dict, Optional, Union

from langchain_core.messages import convert_to_messages
from langgraph.graph import StateGraph, START, END

from genui_router import config
from genui_router.classifier import IntentClassifier
from genui_router.errors import HandlerError, InvalidRouteError, RouterError
from genui_router.fallback import GeneralInputHandler
from genui_router.llm import get_llm
from genui_router.node_client import build_worker_handlers
from genui_router.state import ConversationState, Route, SPECIALIZED_ROUTES

logger = logging.getLogger(__name__)

GRAPH_NAME = "Generative UI Agent"
ROUTER_NODE = "router"

Handler = Callable[[ConversationState], Any]


# ---------------------------------------------------------------------------
# Routing Function
# ---------------------------------------------------------------------------

def route_decision(state: ConversationState) -> str:
    """Conditional edge: the stored Route names the node to run next."""
    route = state.get("next_route")
    if not isinstance(route, Route):
        logger.error("Dispatcher received a route outside the route set: %r", route)
        raise InvalidRouteError(
            f"Route {route!r} is not one of {[r.value for r in Route]}"
        )
    return route.value


# ---------------------------------------------------------------------------
# Handler Nodes
# ---------------------------------------------------------------------------

def _is_async(handler: Handler) -> bool:
    return inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
        getattr(handler, "__call__", None)
    )


def _guard(route: Route, handler: Handler) -> Handler:
    """Wrap a specialized handler so its failures surface as HandlerError."""
    if _is_async(handler):
        async def node(state: ConversationState) -> dict:
            try:
                return await handler(state)
            except RouterError:
                raise
            except Exception as e:
                logger.exception("%s handler failed", route.value)
                raise HandlerError(route.value, str(e)) from e
    else:
        def node(state: ConversationState) -> dict:
            try:
                return handler(state)
            except RouterError:
                raise
            except Exception as e:
                logger.exception("%s handler failed", route.value)
                raise HandlerError(route.value, str(e)) from e

    node.__name__ = f"{route.value}_node"
    return node


# ---------------------------------------------------------------------------
# Build Graph
# ---------------------------------------------------------------------------

def build_graph(
    classifier: IntentClassifier,
    handlers: Dict[Route, Handler],
    fallback: GeneralInputHandler,
    checkpointer: Any = None,
):
    """Build and compile the routing graph.

    Args:
        classifier: Node that stores the route decision in `next_route`.
        handlers: One handler per specialized route, each returning a
                  partial state update.
        fallback: Node for the generalInput catch-all.
        checkpointer: Optional LangGraph checkpointer; the caller owns it.

    Raises:
        ValueError: If `handlers` does not cover exactly the specialized routes.
    """
    missing = set(SPECIALIZED_ROUTES) - set(handlers)
    extra = set(handlers) - set(SPECIALIZED_ROUTES)
    if missing:
        raise ValueError(f"No handler for routes: {sorted(Route(r).value for r in missing)}")
    if extra:
        raise ValueError(f"Handlers given for unexpected routes: {sorted(map(str, extra))}")

    graph = StateGraph(ConversationState)

    graph.add_node(ROUTER_NODE, classifier)
    for route in SPECIALIZED_ROUTES:
        graph.add_node(route.value, _guard(route, handlers[route]))
    graph.add_node(Route.GENERAL_INPUT.value, fallback)

    graph.add_edge(START, ROUTER_NODE)
    graph.add_conditional_edges(
        ROUTER_NODE, route_decision, {route.value: route.value for route in Route}
    )

    # Terminal nodes — all go to END
    for route in Route:
        graph.add_edge(route.value, END)

    compiled = graph.compile(checkpointer=checkpointer)
    compiled.name = GRAPH_NAME
    return compiled


def build_default_graph(checkpointer: Any = None):
    """Graph wired from config: provider oracles and HTTP worker handlers."""
    return build_graph(
        classifier=IntentClassifier(get_llm(config.CLASSIFIER_PROVIDER, temperature=0)),
        handlers=build_worker_handlers(config.WORKER_URLS, timeout=config.WORKER_TIMEOUT),
        fallback=GeneralInputHandler(get_llm(config.FALLBACK_PROVIDER, temperature=0)),
        checkpointer=checkpointer,
    )


# ---------------------------------------------------------------------------
# Run Entry Points
# ---------------------------------------------------------------------------

Conversation = Union[ConversationState, list]


def _graph_input(conversation: Conversation) -> dict:
    """Normalize a state dict or a message list into graph input.

    `next_route` is reset so a decision persisted from an earlier turn can
    never drive this one.
    """
    if isinstance(conversation, dict):
        messages = conversation.get("messages") or []
    else:
        messages = conversation
    return {"messages": convert_to_messages(messages), "next_route": None}


def _run_config(thread_id: Optional[str]) -> Optional[dict]:
    if thread_id is None:
        return None
    return {"configurable": {"thread_id": thread_id}}


def run(graph, conversation: Conversation, thread_id: Optional[str] = None) -> ConversationState:
    """Run one Start → End traversal and return the final state.

    With a checkpointer-compiled graph, pass only the new messages and a
    `thread_id`; they are appended to that thread's stored history.
    """
    return graph.invoke(_graph_input(conversation), config=_run_config(thread_id))


async def arun(graph, conversation: Conversation, thread_id: Optional[str] = None) -> ConversationState:
    """Async `run`; required when a specialized handler is a coroutine."""
    return await graph.ainvoke(_graph_input(conversation), config=_run_config(thread_id))
