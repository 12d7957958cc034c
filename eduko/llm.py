import json
import logging
from typing import Any, TypeVar

from anthropic import Anthropic
from pydantic import BaseModel, ValidationError

from .config import Settings

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class MissingCredentials(RuntimeError):
    pass


class InvalidModelJSON(ValueError):
    def __init__(self, raw_text: str, error: str, kind: str):
        super().__init__(f"Model output failure ({kind}): {error}")
        self.raw_text = raw_text
        self.error = error
        self.kind = kind


class EmptyModelOutput(InvalidModelJSON):
    def __init__(self):
        super().__init__(
            raw_text="",
            error="No text content found in model response",
            kind="empty_output",
        )


def resolve_client(client: Any | None = None, api_key: str | None = None) -> Any:
    if client is not None:
        return client
    if not api_key:
        raise MissingCredentials(
            "Missing ANTHROPIC_API_KEY. Add it to your environment (e.g. .env) to enable Ko AI."
        )
    return Anthropic(api_key=api_key)


def extract_text(resp) -> str:
    parts = []
    for block in resp.content:
        if hasattr(block, "text") and block.text:
            parts.append(block.text)
    raw_text = "".join(parts)
    if not raw_text.strip():
        raise EmptyModelOutput()
    return raw_text.strip()


def strip_code_fence(raw: str) -> str:
    text = raw.strip()
    if not text.startswith("```"):
        return text
    lines = text.splitlines()
    lines = lines[1:]
    if lines and lines[-1].strip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def parse_model_json(raw: str, output_model: type[ModelT]) -> ModelT:
    if not raw.strip():
        raise EmptyModelOutput()

    try:
        data = json.loads(strip_code_fence(raw))
    except json.JSONDecodeError as e:
        raise InvalidModelJSON(raw_text=raw, error=str(e), kind="json_decode") from e

    try:
        return output_model.model_validate(data)
    except ValidationError as e:
        raise InvalidModelJSON(raw_text=raw, error=str(e), kind="schema_validation") from e


def _create(
    messages: list[dict[str, Any]],
    *,
    system: str,
    client: Any | None,
    settings: Settings,
    temperature: float | None = None,
) -> str:
    resolved_client = resolve_client(client=client, api_key=settings.api_key)
    resp = resolved_client.messages.create(
        model=settings.model,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature if temperature is None else temperature,
        system=system,
        messages=messages,
    )
    return extract_text(resp)


def generate_json(
    prompt: str,
    output_model: type[ModelT],
    *,
    system: str,
    client: Any | None = None,
    settings: Settings | None = None,
) -> tuple[ModelT, str]:
    """Run a single-turn prompt and validate the reply against ``output_model``.

    Returns the validated model together with the raw model text so callers can
    keep it as an artifact.
    """
    settings = settings or Settings()
    raw = _create(
        [{"role": "user", "content": prompt}],
        system=system,
        client=client,
        settings=settings,
    )
    logger.debug("model returned %d characters for %s", len(raw), output_model.__name__)
    return parse_model_json(raw, output_model), raw


def generate_text(
    messages: list[dict[str, Any]],
    *,
    system: str,
    client: Any | None = None,
    settings: Settings | None = None,
    temperature: float | None = None,
) -> str:
    settings = settings or Settings()
    return _create(
        messages,
        system=system,
        client=client,
        settings=settings,
        temperature=temperature,
    )
