from typing import Optional


def parse_limit(raw: Optional[str], default: int) -> int:
    """Positive integer from a query string, else `default`."""
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    return value if value > 0 else default
