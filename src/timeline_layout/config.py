"""Runtime configuration for the timeline layout engine."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from timeline_layout.services.edge_router import RouteOptions
from timeline_layout.services.time_zoom import ZoomOptions
from timeline_layout.utils.time_utils import MS_PER_DAY, MS_PER_HOUR


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Lane geometry
    row_height: float = Field(
        default=44,
        gt=0,
        validation_alias="TIMELINE_ROW_HEIGHT"
    )
    row_gap: float = Field(
        default=8,
        ge=0,
        validation_alias="TIMELINE_ROW_GAP"
    )

    # Edge routing
    edge_padding: float = Field(
        default=8,
        ge=0,
        validation_alias="TIMELINE_EDGE_PADDING"
    )
    corner_radius: float = Field(
        default=8,
        ge=0,
        validation_alias="TIMELINE_CORNER_RADIUS"
    )
    lane_step: float = Field(
        default=12,
        gt=0,
        validation_alias="TIMELINE_LANE_STEP"
    )

    # Pan/zoom
    viewport_width: float = Field(
        default=1200,
        gt=0,
        validation_alias="TIMELINE_VIEWPORT_WIDTH"
    )
    min_scale: float = Field(
        default=1 / (30 * MS_PER_DAY),
        gt=0,
        validation_alias="TIMELINE_MIN_SCALE"
    )
    max_scale: float = Field(
        default=8 / MS_PER_HOUR,
        gt=0,
        validation_alias="TIMELINE_MAX_SCALE"
    )
    wheel_zoom_no_ctrl: bool = Field(
        default=False,
        validation_alias="TIMELINE_WHEEL_ZOOM_NO_CTRL"
    )
    initial_span_days: Optional[float] = Field(
        default=None,
        gt=0,
        validation_alias="TIMELINE_INITIAL_SPAN_DAYS"
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        validation_alias="TIMELINE_LOG_LEVEL"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }

    def zoom_options(self, initial_center_time: Optional[float] = None) -> ZoomOptions:
        """Build pan/zoom options from these settings."""
        return ZoomOptions(
            min_scale=self.min_scale,
            max_scale=self.max_scale,
            wheel_zoom_no_ctrl=self.wheel_zoom_no_ctrl,
            initial_span_days=self.initial_span_days,
            initial_center_time=initial_center_time,
        )

    def route_options(self) -> RouteOptions:
        """Build edge routing options from these settings."""
        return RouteOptions(radius=self.corner_radius, padding=self.edge_padding)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global _settings
    _settings = Settings()
    return _settings
