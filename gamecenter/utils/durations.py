import re

from gamecenter.core.errors import ValidationError

_PART = re.compile(r"(\d+(?:\.\d+)?)\s*(hours?|hrs?|h|minutes?|mins?|m)\b", re.IGNORECASE)


def parse_duration_label(label: str) -> int:
    """
    Convert a pricing duration label into whole minutes.

    Accepts the labels the desk uses: "30 mins", "1 hour", "2 hours",
    "1 hour 30 mins", "90 minutes", "1.5 hours".
    """
    text = (label or "").strip()
    parts = _PART.findall(text)
    # Everything in the label must be consumed by hour/minute parts
    if not parts or _PART.sub("", text).strip():
        raise ValidationError(f"Unrecognised duration '{label}'")

    minutes = 0.0
    for amount, unit in parts:
        value = float(amount)
        minutes += value * 60 if unit.lower().startswith("h") else value

    if minutes <= 0 or minutes != int(minutes):
        raise ValidationError(f"Duration '{label}' must be a positive whole number of minutes")
    return int(minutes)


def format_minutes(minutes: int) -> str:
    """Human label for a number of minutes, e.g. 90 -> "1 hour 30 mins"."""
    hours, mins = divmod(int(minutes), 60)
    if hours and mins:
        return f"{hours} hour{'s' if hours > 1 else ''} {mins} mins"
    if hours:
        return f"{hours} hour{'s' if hours > 1 else ''}"
    return f"{mins} mins"
