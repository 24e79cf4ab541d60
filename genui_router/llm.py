"""Oracle client factory.

The classifier and the fallback handler take a chat model as a constructor
argument; this is the one place real provider clients are built.
"""

import logging
from typing import Optional

from langchain_core.language_models.chat_models import BaseChatModel

from genui_router import config
from genui_router.claude_llm import ChatClaudeCLI

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("claude-cli", "openai", "google")


def get_llm(provider: Optional[str] = None, temperature: float = 0) -> BaseChatModel:
    """Build a chat model for the given provider.

    Args:
        provider: "claude-cli", "openai" or "google". Defaults to LLM_PROVIDER.
        temperature: Sampling temperature. Defaults to 0 (deterministic).
                     The Claude CLI has no sampling flag, so under
                     "claude-cli" it is recorded on the model but never
                     sent; only the forced tool choice keeps routing stable.

    Raises:
        ValueError: If the provider is not supported.
    """
    resolved = (provider or config.LLM_PROVIDER).lower()

    if resolved == "claude-cli":
        logger.warning(
            "Claude CLI cannot set sampling temperature; temperature=%s is not forwarded",
            temperature,
        )
        return ChatClaudeCLI(
            model_name=config.CLAUDE_MODEL,
            timeout=config.CLAUDE_TIMEOUT,
            temperature=temperature,
        )

    if resolved == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(model=config.OPENAI_MODEL, temperature=temperature)

    if resolved == "google":
        from langchain_google_genai import ChatGoogleGenerativeAI

        return ChatGoogleGenerativeAI(model=config.GOOGLE_MODEL, temperature=temperature)

    raise ValueError(
        f"Unsupported provider: {resolved}. Supported: {list(SUPPORTED_PROVIDERS)}"
    )
