"""Runner settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class RunnerSettings(BaseModel):
    """Options controlling a program run.

    Built by the CLI from its arguments; library callers may construct it
    directly.
    """

    program_dir: Path = Path(".")
    poll_interval_ms: int = Field(default=50, gt=0)
    max_depth: int = Field(default=64, ge=1)
    dry_run: bool = False
