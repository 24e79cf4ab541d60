"""Router HTTP service — persistent Flask container.

Loads the routing graph once at startup. Container stays warm.
Exposes POST /process (one routed turn) and GET /health.
"""

import logging

from flask import Flask, jsonify, request
from langchain_core.messages import convert_to_messages

from genui_router import config
from genui_router.errors import (
    ClassificationFailureError,
    HandlerError,
    InvalidRouteError,
    NoInputError,
    OracleUnavailableError,
    RouterError,
)
from genui_router.graph import build_default_graph, run
from genui_router.node_client import to_wire

logger = logging.getLogger(__name__)

STATUS_CODES = {
    NoInputError: 400,
    ClassificationFailureError: 502,
    HandlerError: 502,
    OracleUnavailableError: 503,
    InvalidRouteError: 500,
}


def _bad_request(detail: str):
    return jsonify({"error": "BadRequest", "stage": None, "detail": detail}), 400


def create_app(graph=None) -> Flask:
    app = Flask(__name__)

    # Load graph once at startup — no cold start per request
    router_graph = graph if graph is not None else build_default_graph()

    @app.route("/process", methods=["POST"])
    def process():
        """Route one turn.

        Request:
            {
                messages: [{role, content}, ...],   # history, newest last
                thread_id: str                      # required when the graph has a checkpointer
            }

        With a checkpointer, send only the new messages; the thread holds
        earlier turns.

        Response:
            {
                route: str,          # route label that handled the turn
                response: str,       # the appended reply
                messages: [...]      # full updated history
            }
        """
        data = request.get_json(silent=True)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return _bad_request("Request body must be a JSON object")

        messages = data.get("messages", [])
        if not isinstance(messages, list):
            return _bad_request("'messages' must be a list of {role, content} objects")

        thread_id = data.get("thread_id")
        if thread_id is not None and not isinstance(thread_id, str):
            return _bad_request("'thread_id' must be a string")
        if thread_id is None and getattr(router_graph, "checkpointer", None) is not None:
            return _bad_request("'thread_id' is required by this router")

        try:
            messages = convert_to_messages(messages)
        except (ValueError, NotImplementedError) as e:
            return _bad_request(str(e))

        try:
            result = run(router_graph, messages, thread_id=thread_id)
        except RouterError as e:
            logger.warning("Run failed at %s stage: %s", e.stage, e)
            return jsonify({
                "error": type(e).__name__,
                "stage": e.stage,
                "detail": str(e),
            }), STATUS_CODES.get(type(e), 500)

        return jsonify({
            "route": result["next_route"].value,
            "response": result["messages"][-1].content,
            "messages": to_wire(result["messages"]),
        })

    @app.route("/health", methods=["GET"])
    def health():
        """Simple health check — verifies the container is alive and graph is loaded."""
        return jsonify({"status": "ok", "service": "genui-router"})

    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("genui-router starting on port %d", config.PORT)
    create_app().run(host="0.0.0.0", port=config.PORT)
