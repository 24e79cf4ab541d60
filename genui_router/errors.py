"""Error taxonomy for the router.

Every error carries the stage that failed so callers can tell a broken
classification apart from a broken handler.
"""

from typing import Optional

CLASSIFICATION = "classification"
HANDLER = "handler"


class RouterError(Exception):
    """Base class for all router failures."""

    stage = CLASSIFICATION

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class NoInputError(RouterError):
    """The history holds no human message to classify."""


class ClassificationFailureError(RouterError):
    """The oracle answered but without an extractable route decision."""


class OracleUnavailableError(RouterError):
    """The oracle call itself failed (network, provider, CLI)."""


class InvalidRouteError(RouterError):
    """The dispatcher saw a route outside the closed route set."""


class HandlerError(RouterError):
    """A specialized handler failed while producing its reply."""

    stage = HANDLER

    def __init__(self, route: str, message: str):
        super().__init__(f"{route} handler failed: {message}")
        self.route = route
