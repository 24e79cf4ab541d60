"""State schema for the routing graph."""

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, List, Optional

from langchain_core.messages import AnyMessage
from typing_extensions import TypedDict


class Route(str, Enum):
    STOCKBROKER = "stockbroker"
    TRIP_PLANNER = "tripPlanner"
    GENERAL_INPUT = "generalInput"  # catch-all


SPECIALIZED_ROUTES = tuple(r for r in Route if r is not Route.GENERAL_INPUT)


@dataclass(frozen=True)
class RouterDecision:
    route: Route


class ConversationState(TypedDict, total=False):
    # Append-only: handler updates are concatenated, never replace history
    messages: Annotated[List[AnyMessage], operator.add]

    # Set by the classify node, read only by the dispatcher
    next_route: Optional[Route]
