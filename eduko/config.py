import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_MODEL = "claude-sonnet-4-5"
DEFAULT_PORT = 4000


def _int_env(name: str, default: int | None) -> int | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got '{value}'") from exc


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got '{value}'") from exc


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    max_tokens: int = 2000
    temperature: float = 0.0
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    max_peers_per_session: int | None = None
    log_level: str = "INFO"
    runs_dir: str = "runs"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        max_peers = _int_env("EDUKO_MAX_PEERS_PER_SESSION", None)
        if max_peers is not None and max_peers < 1:
            raise ValueError("EDUKO_MAX_PEERS_PER_SESSION must be at least 1")
        return cls(
            api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            model=os.getenv("EDUKO_MODEL", DEFAULT_MODEL),
            max_tokens=_int_env("EDUKO_MAX_TOKENS", 2000),
            temperature=_float_env("EDUKO_TEMPERATURE", 0.0),
            host=os.getenv("EDUKO_HOST", "0.0.0.0"),
            port=_int_env("PORT", DEFAULT_PORT),
            max_peers_per_session=max_peers,
            log_level=os.getenv("EDUKO_LOG_LEVEL", "INFO").upper(),
            runs_dir=os.getenv("EDUKO_RUNS_DIR", "runs"),
        )
