"""User input validation package."""

from water_tracker.validation.input_parser import (
    adjust_volume_by_drag,
    clamp_slider_volume,
    parse_volume_text,
)

__all__ = ["adjust_volume_by_drag", "clamp_slider_volume", "parse_volume_text"]
