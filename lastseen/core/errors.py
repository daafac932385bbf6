from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class Severity(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class LastSeenError(Exception):
    code: str
    user_message: str
    severity: Severity = Severity.ERROR
    recoverable: bool = True
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.code)

    def __str__(self) -> str:
        return self.user_message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "recoverable": bool(self.recoverable),
            "context": dict(self.context or {}),
        }


# ---- Core types ----
class ConfigError(LastSeenError):
    def __init__(self, user_message: str = "Configuration error.", **ctx: Any):
        super().__init__("config_error", user_message, severity=Severity.CRITICAL, recoverable=False, context=ctx)


class StorageIOError(LastSeenError):
    """
    File creation, read, parse or write failure on the timestamp store.
    Logged where detected; never surfaced to storage callers.
    """

    def __init__(self, user_message: str = "Storage I/O error.", **ctx: Any):
        super().__init__("storage_io_error", user_message, severity=Severity.ERROR, recoverable=True, context=ctx)


class BackgroundTaskFailure(LastSeenError):
    def __init__(self, user_message: str = "Unexpected async error.", **ctx: Any):
        super().__init__("background_task_failure", user_message, severity=Severity.ERROR, recoverable=True, context=ctx)


class CommandUsageError(LastSeenError):
    def __init__(self, user_message: str = "Invalid command usage.", **ctx: Any):
        super().__init__("command_usage", user_message, severity=Severity.WARN, recoverable=True, context=ctx)
