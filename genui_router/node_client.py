"""HTTP client for specialized handlers served by worker node containers."""

import logging
from typing import Dict, List, Sequence

import requests
from langchain_core.messages import AIMessage, BaseMessage

from genui_router.errors import HandlerError
from genui_router.state import ConversationState, Route

logger = logging.getLogger(__name__)

ROLES = {"human": "user", "ai": "assistant", "system": "system", "tool": "tool"}


def to_wire(messages: Sequence[BaseMessage]) -> List[dict]:
    """Flatten LangChain messages into [{role, content}, ...]."""
    return [{"role": ROLES.get(m.type, m.type), "content": m.content} for m in messages]


class WorkerNodeHandler:
    """Specialized handler that forwards the conversation to a worker's /process.

    Request:  {route, messages: [{role, content}, ...]}
    Response: {response: str, ...}  — only `response` is read
    """

    def __init__(self, route: Route, url: str, timeout: int = 120):
        self.route = route
        self.url = url.rstrip("/")
        self.timeout = timeout

    def __call__(self, state: ConversationState) -> dict:
        url = f"{self.url}/process"
        payload = {
            "route": self.route.value,
            "messages": to_wire(state.get("messages") or []),
        }

        try:
            resp = requests.post(url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.Timeout as e:
            logger.error("Worker %s timed out after %ss", self.route.value, self.timeout)
            raise HandlerError(self.route.value, f"timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            logger.error("Failed to reach %s worker: %s", self.route.value, e)
            raise HandlerError(self.route.value, f"failed to reach worker: {e}") from e

        reply = data.get("response") if isinstance(data, dict) else None
        if not isinstance(reply, str):
            logger.error("Worker %s returned no reply: %r", self.route.value, data)
            raise HandlerError(self.route.value, f"worker returned no 'response' string: {data!r}")

        return {"messages": [AIMessage(content=reply)]}


def build_worker_handlers(worker_urls: Dict[Route, str], timeout: int = 120) -> Dict[Route, WorkerNodeHandler]:
    return {
        route: WorkerNodeHandler(route, url, timeout=timeout)
        for route, url in worker_urls.items()
    }
