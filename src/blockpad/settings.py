from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    if val in {"1", "true", "yes", "y", "on"}:
        return True
    if val in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _default_data_dir() -> Path:
    raw = os.environ.get("BLOCKPAD_DATA_DIR")
    if raw:
        return Path(raw)
    return Path.home() / ".blockpad"


@dataclass(frozen=True)
class Settings:
    """Static settings for the editor service.

    Keep defaults local and auditable; the only network endpoint is the
    local Ollama server used for AI polish.
    """

    data_dir: Path = _default_data_dir()
    log_path: Path = data_dir / "blockpad.log"
    log_level: str = os.environ.get("BLOCKPAD_LOG_LEVEL", "INFO")
    log_max_bytes: int = int(os.environ.get("BLOCKPAD_LOG_MAX_BYTES", str(1_000_000)))
    log_backup_count: int = int(os.environ.get("BLOCKPAD_LOG_BACKUP_COUNT", "3"))
    ollama_url: str = os.environ.get("BLOCKPAD_OLLAMA_URL", "http://127.0.0.1:11434")
    ollama_model: str | None = os.environ.get("BLOCKPAD_OLLAMA_MODEL")

    # AI polish is optional; when disabled editor/polish is rejected at the
    # RPC boundary and sessions are created without an improve capability.
    polish_enabled: bool = _env_bool("BLOCKPAD_POLISH_ENABLED", True)


settings = Settings()
