"""Configuration for the router — oracle providers, routes and worker registry."""

import os
from dotenv import load_dotenv

from genui_router.state import Route

load_dotenv()

# Oracle settings — classifier and fallback may use different providers
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "claude-cli")
CLASSIFIER_PROVIDER = os.getenv("CLASSIFIER_PROVIDER", LLM_PROVIDER)
FALLBACK_PROVIDER = os.getenv("FALLBACK_PROVIDER", LLM_PROVIDER)

CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "haiku")
CLAUDE_TIMEOUT = int(os.getenv("CLAUDE_TIMEOUT", "120"))
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
GOOGLE_MODEL = os.getenv("GOOGLE_MODEL", "gemini-2.0-flash")

# Specialized handler registry — each route is served by a worker container
WORKER_URLS = {
    Route.STOCKBROKER: os.getenv("WORKER_STOCKBROKER_URL", "http://stockbroker:8101"),
    Route.TRIP_PLANNER: os.getenv("WORKER_TRIP_PLANNER_URL", "http://trip-planner:8102"),
}
WORKER_TIMEOUT = int(os.getenv("WORKER_TIMEOUT", "120"))

# HTTP service
PORT = int(os.getenv("PORT", "8200"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Route definitions
ROUTES = {
    Route.STOCKBROKER: {
        "description": (
            "can fetch the price of a ticker, purchase/sell a ticker, "
            "or get the user's portfolio"
        ),
        "handler": True,
    },
    Route.TRIP_PLANNER: {
        "description": (
            "helps the user plan their trip. it can suggest restaurants, "
            "and places to stay in any given location."
        ),
        "handler": True,
    },
    Route.GENERAL_INPUT: {
        "description": "handles all other cases where the above tools don't apply",
        "handler": False,
    },
}
