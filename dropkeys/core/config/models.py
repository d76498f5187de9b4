from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class DropKeysConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    keys: List[str] = Field(default_factory=list)
    on_error: Literal["abort", "skip"] = "abort"
    skip_blank_lines: bool = True
    log_dir: Optional[str] = None
    log_level: str = "WARNING"
    error_log_path: Optional[str] = None
    include_tracebacks: bool = False

    @field_validator("log_level")
    @classmethod
    def _validate_level(cls, v: str) -> str:
        lv = str(v or "").strip().upper()
        if lv not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return lv
