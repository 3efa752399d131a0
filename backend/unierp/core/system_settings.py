"""System Settings — well-known setting keys and how their stored values read.

Invariants:
    - Values are stored as text; flags are "true"/"false"
    - A missing flag reads as its default, never as an error
"""

REGISTRATION_OPEN = "registration_open"

FLAG_DEFAULTS: dict[str, bool] = {
    REGISTRATION_OPEN: True,
}


def read_flag(key: str, value: str | None) -> bool:
    """Interpret a stored setting as a boolean flag."""
    if value is None:
        return FLAG_DEFAULTS.get(key, False)
    return value.strip().lower() == "true"
