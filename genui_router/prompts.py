"""Prompts and the forced-choice router tool, built from the route registry."""

from genui_router.config import ROUTES
from genui_router.state import Route


def describe_routes(include_catch_all: bool = True) -> str:
    """Format ROUTES as a bullet list for a system prompt."""
    lines = []
    for route, info in ROUTES.items():
        if not include_catch_all and not info["handler"]:
            continue
        lines.append(f"- {route.value}: {info['description']}")
    return "\n".join(lines)


ROUTER_PROMPT = """You're a highly helpful AI assistant, tasked with routing the user's query to the appropriate tool.
You should analyze the user's input, and choose the appropriate tool to use."""

ROUTER_TOOL = {
    "name": "router",
    "description": "A tool to route the user's query to the appropriate tool.",
    "parameters": {
        "type": "object",
        "properties": {
            "route": {
                "type": "string",
                "enum": [r.value for r in Route],
                "description": (
                    "The route to take based on the user's input.\n"
                    f"{describe_routes()}"
                ),
            },
        },
        "required": ["route"],
    },
}

GENERAL_INPUT_PROMPT = f"""You are an AI assistant.
If the user asks what you can do, describe these tools. Otherwise, just answer as normal.

{describe_routes(include_catch_all=False)}"""
