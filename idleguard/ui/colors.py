"""Style value parsing for the modal."""


def hex_to_rgb(hex_color: str, fallback: tuple[int, int, int] = (0, 0, 0)) -> tuple[int, int, int]:
    """Convert hex color to RGB tuple.

    Args:
        hex_color: Hex color string (e.g., "#16325C" or "#FFF").
        fallback: Returned when the string is not a valid color.

    Returns:
        RGB tuple.
    """
    value = hex_color.strip().lstrip("#")
    if len(value) == 3:
        value = "".join(c * 2 for c in value)
    if len(value) != 6:
        return fallback
    try:
        return tuple(int(value[i : i + 2], 16) for i in (0, 2, 4))  # type: ignore[return-value]
    except ValueError:
        return fallback


def parse_px(value: str, fallback: int) -> int:
    """Parse a CSS-like pixel size ("480px", "480") to an int."""
    text = value.strip().lower().removesuffix("px").strip()
    try:
        number = int(float(text))
    except ValueError:
        return fallback
    return number if number >= 0 else fallback
