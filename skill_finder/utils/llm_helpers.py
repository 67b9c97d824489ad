"""
LLM Helpers Module

Thin client layer for the optional AI re-ranking step. All LLM calls go
through an object satisfying the LLMClient protocol so the reranker can be
exercised with a fake client in tests.

The recommendation flow never retries: one call, bounded by a timeout in the
caller, and any failure falls back to the deterministic pipeline.

Example Usage:
    from skill_finder.utils.llm_helpers import ClaudeLLMClient, parse_llm_json

    client = ClaudeLLMClient(model="claude-sonnet-4-5")
    text = await client.complete(system_prompt, user_prompt)
    payload = parse_llm_json(text)
"""

import json
from typing import Any, Optional, Protocol

import structlog

logger = structlog.get_logger(__name__)


class LLMResponseError(Exception):
    """Raised when the LLM returns an empty or unparseable response."""

    pass


class LLMClient(Protocol):
    """Anything that can answer a single system + user prompt pair with text."""

    model: str

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        correlation_id: Optional[str] = None,
    ) -> str: ...


def _extract_json_from_markdown(response_text: str) -> str:
    """Extract JSON from LLM response, removing markdown code block markers if present.

    Args:
        response_text: Raw text response from LLM

    Returns:
        Clean JSON string with code block markers removed
    """
    json_text = response_text.strip()

    # Remove markdown code block markers if present
    if json_text.startswith("```json"):
        json_text = json_text[7:]
    elif json_text.startswith("```"):
        json_text = json_text[3:]

    if json_text.endswith("```"):
        json_text = json_text[:-3]

    return json_text.strip()


def parse_llm_json(response_text: str) -> Any:
    """Decode a JSON response, tolerating a surrounding markdown code fence.

    Raises:
        LLMResponseError: If the text is not valid JSON
    """
    json_text = _extract_json_from_markdown(response_text)
    try:
        return json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.warning(
            "LLM response is not valid JSON",
            error=str(e),
            response_preview=json_text[:200],
        )
        raise LLMResponseError(f"LLM response is not valid JSON: {e}") from e


class ClaudeLLMClient:
    """LLMClient backed by claude_agent_sdk.ClaudeSDKClient.

    Configured for pure text generation: no tools, no project settings and a
    single turn per call.
    """

    def __init__(self, model: str, max_turns: int = 1):
        self.model = model
        self.max_turns = max_turns

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        correlation_id: Optional[str] = None,
    ) -> str:
        """
        Send one prompt and collect the text of the reply.

        Args:
            system_prompt: Rendered system instructions
            user_prompt: Request payload (JSON text)
            correlation_id: Optional correlation ID for logging

        Returns:
            LLM response text

        Raises:
            LLMResponseError: If the model returned no text
        """
        from claude_agent_sdk import ClaudeAgentOptions, ClaudeSDKClient

        log = logger.bind(correlation_id=correlation_id) if correlation_id else logger
        log.debug("LLM call initiated", model=self.model, prompt_length=len(user_prompt))

        options = ClaudeAgentOptions(
            max_turns=self.max_turns,
            allowed_tools=[],
            system_prompt=system_prompt,
            setting_sources=None,
            model=self.model,
        )

        response_text = ""
        try:
            async with ClaudeSDKClient(options=options) as client:
                await client.query(user_prompt)

                async for message in client.receive_response():
                    if hasattr(message, "content") and message.content:
                        for block in message.content:
                            if hasattr(block, "text"):
                                response_text += block.text
        except Exception as e:
            log.error("LLM call failed", error=str(e), model=self.model)
            raise

        if not response_text.strip():
            log.error("LLM returned empty response", model=self.model)
            raise LLMResponseError("LLM returned empty response")

        log.debug("LLM call succeeded", response_length=len(response_text))
        return response_text.strip()
