from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from idlecat.core.monitor.types import MonitorConfig

DEFAULT_IDLE_TIMEOUT = 5
DEFAULT_IDLE_TO_ACTIVE_THRESHOLD = 2 * 60
DEFAULT_ACTIVE_TO_IDLE_THRESHOLD = 3 * 60


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    idle_timeout: float = Field(default=DEFAULT_IDLE_TIMEOUT, gt=0)
    idle_to_active_threshold: float = Field(default=DEFAULT_IDLE_TO_ACTIVE_THRESHOLD, gt=0)
    active_to_idle_threshold: float = Field(default=DEFAULT_ACTIVE_TO_IDLE_THRESHOLD, gt=0)
    idle_to_active_command: Optional[str] = None
    active_to_idle_command: Optional[str] = None
    eof_command: Optional[str] = None
    log_file: Optional[str] = None

    @field_validator("idle_to_active_command", "active_to_idle_command", "eof_command", "log_file")
    @classmethod
    def _blank_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    def to_monitor_config(self) -> MonitorConfig:
        return MonitorConfig(
            idle_timeout=self.idle_timeout,
            idle_to_active_threshold=self.idle_to_active_threshold,
            active_to_idle_threshold=self.active_to_idle_threshold,
            idle_to_active_command=self.idle_to_active_command,
            active_to_idle_command=self.active_to_idle_command,
            eof_command=self.eof_command,
        )
