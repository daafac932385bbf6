from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LastSeenConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    config_version: int = Field(default=1, ge=1)
    debug: bool = False
    data_file: str = "last-seen.yml"
    players_file: str = "players.json"
    # ten minutes
    autosave_interval_seconds: int = Field(default=600, ge=1, le=86400)
    date_format: str = "%a %b %d %Y %I:%M:%S %p"
    log_dir: str = "logs"

    @field_validator("data_file", "players_file")
    @classmethod
    def _plain_file_name(cls, v: str) -> str:
        v = str(v or "").strip()
        if not v:
            raise ValueError("file name must not be empty")
        if "/" in v or "\\" in v:
            raise ValueError("file name must not contain a directory")
        return v

    @field_validator("date_format")
    @classmethod
    def _non_empty_format(cls, v: str) -> str:
        if not str(v or "").strip():
            raise ValueError("date_format must not be empty")
        return v
