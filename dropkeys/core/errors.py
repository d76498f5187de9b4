from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from dropkeys.core.redaction import redact


class Severity(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class DropKeysError(Exception):
    code: str
    user_message: str
    severity: Severity = Severity.ERROR
    recoverable: bool = True
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.code)

    def __str__(self) -> str:
        return f"{self.code}: {self.user_message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "recoverable": bool(self.recoverable),
            "context": redact(self.context or {}),
        }


# ---- Core types ----
class ConfigError(DropKeysError):
    def __init__(self, user_message: str = "Configuration error.", **ctx: Any):
        super().__init__("config_error", user_message, severity=Severity.CRITICAL, recoverable=False, context=ctx)


class KeyListSyntaxError(DropKeysError):
    def __init__(self, user_message: str = "Malformed key list.", **ctx: Any):
        super().__init__("key_list_syntax_error", user_message, severity=Severity.CRITICAL, recoverable=False, context=ctx)


class RecordDecodeError(DropKeysError):
    def __init__(self, user_message: str = "Record is not valid JSON.", **ctx: Any):
        super().__init__("record_decode_error", user_message, severity=Severity.WARN, recoverable=True, context=ctx)


class RecordEncodeError(DropKeysError):
    def __init__(self, user_message: str = "Filtered record could not be encoded.", **ctx: Any):
        super().__init__("record_encode_error", user_message, severity=Severity.ERROR, recoverable=True, context=ctx)
