"""Configuration models for Pomo CLI."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class TimerSettings(BaseModel):
    """Durations and round target read by the state machine."""

    model_config = {"extra": "ignore", "validate_assignment": True}

    focus_duration: float = Field(default=1500, gt=0, description="Focus length in seconds")
    break_duration: float = Field(default=300, gt=0, description="Break length in seconds")
    target_rounds: int = Field(default=6, description="Focus sessions per plan")
    auto_start_break: bool = Field(default=False)

    @field_validator("target_rounds")
    @classmethod
    def clamp_target_rounds(cls, v: int) -> int:
        """A plan needs at least one focus round."""
        return max(1, v)

    @property
    def focus_duration_seconds(self) -> float:
        return float(self.focus_duration)

    @property
    def break_duration_seconds(self) -> float:
        return float(self.break_duration)


class OutputConfig(BaseModel):
    """Output configuration."""

    bell: bool = Field(default=True, description="Ring the terminal bell on completion")


class AppConfig(BaseModel):
    """Main Pomo configuration"""

    model_config = {"extra": "ignore"}

    timer: TimerSettings = Field(default_factory=TimerSettings)
    output: OutputConfig = Field(default_factory=OutputConfig)
    default_range: str = Field(default="this-week", description="Default stats range")

    @field_validator("default_range")
    @classmethod
    def validate_default_range(cls, v: str) -> str:
        """Store the canonical slug of a known range."""
        from pomo_cli.models.focus.filters import DateRangeFilter

        return DateRangeFilter.from_label(v).slug

    def get_value(self, key: str):
        """Look up a dotted key such as ``timer.focus_duration``."""
        section, _, name = key.partition(".")
        target = getattr(self, section, None) if name else self
        name = name or section
        if not isinstance(target, BaseModel) or name not in type(target).model_fields:
            raise KeyError(f"Unknown config key '{key}'")
        return getattr(target, name)
