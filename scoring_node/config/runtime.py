from __future__ import annotations

from dataclasses import dataclass
import os


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class RuntimeSettings:
    qualifier_quantity: int
    rank_tie_break: str
    final_phase_updates_rerank: bool
    qualification_retry_attempts: int
    api_host: str
    api_port: int
    log_level: str

    @classmethod
    def from_env(cls) -> "RuntimeSettings":
        return cls(
            qualifier_quantity=int(os.getenv("QUALIFIER_QUANTITY", "8")),
            rank_tie_break=os.getenv("RANK_TIE_BREAK", "team_id"),
            final_phase_updates_rerank=_env_bool("FINAL_PHASE_UPDATES_RERANK", "false"),
            qualification_retry_attempts=int(os.getenv("QUALIFICATION_RETRY_ATTEMPTS", "3")),
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=int(os.getenv("API_PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
