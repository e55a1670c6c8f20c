"""
User Input Parsing

The preset form and the custom-add sheet hand us raw text and slider
positions. Parsing never raises: bad input yields None and the caller
turns that into a silent no-op.
"""

from typing import Optional, Union


def parse_volume_text(text: Union[str, int, None]) -> Optional[int]:
    """
    Parse a volume typed by the user.
    
    Accepts an optional sign and surrounding whitespace, nothing else:
    "250" -> 250, " 250 " -> 250, "2.5" -> None, "1_000" -> None.
    """
    if isinstance(text, bool):
        return None
    if isinstance(text, int):
        return text
    if text is None:
        return None
    stripped = text.strip()
    # int() also takes "1_000" and non-ASCII digits
    if not stripped or not stripped.isascii() or "_" in stripped:
        return None
    try:
        return int(stripped, 10)
    except ValueError:
        return None


def clamp_slider_volume(value: int, maximum: int = 2000) -> int:
    """Keep a custom-add slider value within 0..maximum."""
    return max(0, min(maximum, value))


def adjust_volume_by_drag(volume: int, drag_offset: float, maximum: int = 2000) -> int:
    """
    Apply a vertical drag to the custom-add volume.
    
    Dragging up (negative offset) increases the volume by 1 mL per 10
    points of travel.
    """
    change = int(-drag_offset / 10)
    return clamp_slider_volume(volume + change, maximum)
