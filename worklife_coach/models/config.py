"""
Configuration Models

Pydantic models for coaching configuration. Values come from a JSON file
(config/coaching_params.json) with optional overrides from the environment
(.env loaded through python-dotenv).
"""

import json
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationInfo, field_validator


class IntentConfig(BaseModel):
    """Intent recognition thresholds."""

    mindset_severity_threshold: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Emotional severity at which mindset support comes before tactics",
    )


class ActionStepConfig(BaseModel):
    """Overload control for generated action steps."""

    max_steps_per_timeframe: int = Field(default=3, gt=0, le=10)
    reduced_steps_per_timeframe: int = Field(default=2, gt=0, le=10)
    overload_goal_threshold: int = Field(
        default=2,
        ge=0,
        description="More active goals than this switches to the reduced cap",
    )

    @field_validator("reduced_steps_per_timeframe")
    @classmethod
    def validate_reduced_cap(cls, v: int, info: ValidationInfo) -> int:
        """Reduced cap cannot exceed the normal cap."""
        max_steps = info.data.get("max_steps_per_timeframe", 3)
        if v > max_steps:
            raise ValueError(
                f"reduced_steps_per_timeframe ({v}) must be <= "
                f"max_steps_per_timeframe ({max_steps})"
            )
        return v


class ConversationConfig(BaseModel):
    """Session and multi-turn behaviour."""

    recent_update_days: int = Field(
        default=7,
        ge=0,
        description="Profile updated within this many days counts as changed circumstances",
    )
    history_window: int = Field(default=10, gt=0)
    context_reference_min_length: int = Field(default=50, ge=0)
    session_timeout_minutes: int = Field(default=30, gt=0)


class GrowthPlanConfig(BaseModel):
    """Milestone scheduling band, in months from plan creation."""

    milestone_min_months: int = Field(default=3, ge=0)
    milestone_max_months: int = Field(default=12, gt=0)
    milestone_push_months: int = Field(default=3, gt=0)

    @field_validator("milestone_max_months")
    @classmethod
    def validate_band(cls, v: int, info: ValidationInfo) -> int:
        low = info.data.get("milestone_min_months", 3)
        if v < low:
            raise ValueError(
                f"milestone_max_months ({v}) must be >= milestone_min_months ({low})"
            )
        return v


class LoggingConfig(BaseModel):
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v.upper()


class CoachingParams(BaseModel):
    """Coaching parameters configuration model."""

    intent: IntentConfig = Field(default_factory=IntentConfig)
    action_steps: ActionStepConfig = Field(default_factory=ActionStepConfig)
    conversation: ConversationConfig = Field(default_factory=ConversationConfig)
    growth_plan: GrowthPlanConfig = Field(default_factory=GrowthPlanConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    data_dir: Optional[str] = None

    @classmethod
    def load(cls, config_path: Path | str | None = None) -> "CoachingParams":
        """Load coaching parameters from config file.

        Args:
            config_path: Path to coaching_params.json (defaults to config/coaching_params.json)

        Returns:
            CoachingParams: Validated configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config validation fails
        """
        if config_path is None:
            config_path = Path("config/coaching_params.json")
        else:
            config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}. "
                f"Copy {config_path.stem}.example.json to {config_path.name}"
            )

        with open(config_path, "r", encoding="utf-8") as f:
            config_data = json.load(f)

        return cls(**config_data)

    @classmethod
    def from_env(cls, env_file: Path | str | None = None) -> "CoachingParams":
        """Build parameters from the environment.

        Reads a .env file if present, loads WORKLIFE_CONFIG_PATH when set and
        applies WORKLIFE_LOG_LEVEL, WORKLIFE_LOG_FILE and WORKLIFE_DATA_DIR
        on top. Falls back to defaults when no config file is configured.
        """
        load_dotenv(dotenv_path=env_file)

        config_path = os.getenv("WORKLIFE_CONFIG_PATH")
        params = cls.load(config_path) if config_path else cls()

        log_level = os.getenv("WORKLIFE_LOG_LEVEL")
        log_file = os.getenv("WORKLIFE_LOG_FILE")
        data_dir = os.getenv("WORKLIFE_DATA_DIR")

        logging_updates = {}
        if log_level:
            logging_updates["log_level"] = log_level
        if log_file:
            logging_updates["log_file"] = log_file
        if logging_updates:
            params.logging = LoggingConfig(
                **{**params.logging.model_dump(), **logging_updates}
            )
        if data_dir:
            params.data_dir = data_dir

        return params
