"""LangChain-compatible LLM wrapper around the Claude CLI.

Uses `claude -p` to send prompts to a local Claude instance.
No API key needed — just a Claude subscription and the CLI installed.
Each call is stateless — the full prompt is sent every time.
"""

import json
import logging
import subprocess
import uuid
from typing import Any, Dict, List, Optional, Sequence

from langchain_core.callbacks import CallbackManagerForLLMRun
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_core.outputs import ChatResult, ChatGeneration
from langchain_core.utils.function_calling import convert_to_openai_tool

logger = logging.getLogger(__name__)

FORCED_TOOL_PROMPT = """You must answer by calling the tool "{name}": {description}

Respond ONLY with a JSON object holding the tool's arguments, matching this JSON schema:
{schema}
"""


def _strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        text = text.rsplit("```", 1)[0]
    return text.strip()


class ChatClaudeCLI(BaseChatModel):
    """Chat model that shells out to the Claude CLI.

    Requires `claude` to be installed and available on PATH.
    Uses `claude -p` (prompt mode) with no tools — pure reasoning.

    Tool calling is emulated for forced choices only: when a tool is bound
    with `tool_choice`, its JSON schema is appended to the prompt and the
    JSON reply is returned as a tool call on the AIMessage. Replies that do
    not parse come back as plain content with no tool calls.

    Args:
        model_name: Model to use (default "haiku"). Accepts "haiku", "sonnet",
                    "opus", or a full model ID like "claude-haiku-4-5".
        timeout: Max seconds to wait for a response (default 120).
        temperature: Kept for parity with API-backed models. The CLI has no
                     sampling flag, so it is not forwarded.
        allowed_tools: Tools Claude can use. Empty string = no tools (pure
                       chatbot mode). Set to None to use CLI defaults.
    """

    model_name: str = "haiku"
    timeout: int = 120
    temperature: float = 0.0
    allowed_tools: Optional[str] = ""  # Empty string = no tools (pure chatbot)

    @property
    def _llm_type(self) -> str:
        return "claude-cli"

    def bind_tools(self, tools: Sequence[Any], *, tool_choice: Any = None, **kwargs: Any):
        formatted = [convert_to_openai_tool(t) for t in tools]
        return self.bind(tools=formatted, tool_choice=tool_choice, **kwargs)

    def _format_messages(self, messages: List[BaseMessage]) -> str:
        """Convert LangChain messages into a single prompt string for Claude CLI."""
        parts = []
        for msg in messages:
            if isinstance(msg, SystemMessage):
                parts.append(f"[System]\n{msg.content}")
            elif isinstance(msg, HumanMessage):
                parts.append(f"[User]\n{msg.content}")
            elif isinstance(msg, AIMessage):
                parts.append(f"[Assistant]\n{msg.content}")
            else:
                parts.append(msg.content)
        return "\n\n".join(parts)

    def _build_command(self, prompt: str) -> List[str]:
        """Build the Claude CLI command with appropriate flags."""
        cmd = ["claude", "-p", prompt, "--model", self.model_name, "--no-chrome"]

        # Strip tools for pure chatbot mode
        if self.allowed_tools is not None:
            cmd.extend(["--allowedTools", self.allowed_tools])

        return cmd

    @staticmethod
    def _forced_tool(tools: Optional[List[dict]], tool_choice: Any) -> Optional[Dict[str, Any]]:
        """Resolve which bound tool the caller forced, if any."""
        if not tools or tool_choice in (None, "auto", "none"):
            return None
        functions = [t["function"] for t in tools]
        if tool_choice in ("any", "required", True):
            if len(functions) == 1:
                return functions[0]
            raise ValueError("Claude CLI can only force a choice between exactly one tool")
        if isinstance(tool_choice, dict):
            tool_choice = tool_choice.get("function", {}).get("name")
        for fn in functions:
            if fn["name"] == tool_choice:
                return fn
        raise ValueError(f"tool_choice {tool_choice!r} does not match any bound tool")

    def _run_cli(self, prompt: str) -> str:
        cmd = self._build_command(prompt)

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise RuntimeError(
                "Claude CLI not found. Install it and make sure 'claude' is on your PATH."
            )
        except subprocess.TimeoutExpired:
            raise RuntimeError(f"Claude CLI timed out after {self.timeout}s")

        if result.returncode != 0:
            error_msg = result.stderr.strip() or f"Claude CLI exited with code {result.returncode}"
            raise RuntimeError(error_msg)

        return result.stdout.strip()

    def _generate(
        self,
        messages: List[BaseMessage],
        stop: Optional[List[str]] = None,
        run_manager: Optional[CallbackManagerForLLMRun] = None,
        **kwargs: Any,
    ) -> ChatResult:
        """Call Claude CLI with the formatted prompt."""
        tool = self._forced_tool(kwargs.get("tools"), kwargs.get("tool_choice"))
        if tool is not None:
            messages = list(messages) + [SystemMessage(content=FORCED_TOOL_PROMPT.format(
                name=tool["name"],
                description=tool.get("description", ""),
                schema=json.dumps(tool.get("parameters", {}), indent=2),
            ))]

        content = self._run_cli(self._format_messages(messages))

        if tool is None:
            message = AIMessage(content=content)
        else:
            message = self._parse_tool_call(tool["name"], content)
        return ChatResult(generations=[ChatGeneration(message=message)])

    @staticmethod
    def _parse_tool_call(name: str, content: str) -> AIMessage:
        try:
            args = json.loads(_strip_code_fences(content))
        except json.JSONDecodeError:
            args = None
        if not isinstance(args, dict):
            logger.warning("Claude CLI reply for tool %s is not a JSON object", name)
            return AIMessage(content=content)
        return AIMessage(
            content="",
            tool_calls=[{"name": name, "args": args, "id": f"call_{uuid.uuid4().hex[:12]}"}],
        )
