from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the DB boundary representation)."""
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


def to_iso_utc(dt: datetime | None) -> str | None:
    """
    Serialize a datetime to UTC ISO 8601 with trailing 'Z'.
    - If dt is None: return None.
    - If dt is naive: assume it is already UTC (DB boundary) and set tzinfo=UTC.
    - If dt has TZ: convert to UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return dt.isoformat().replace("+00:00", "Z")


def parse_dt(value: datetime | str) -> datetime:
    """
    Parse various datetime formats and return a tz-aware UTC datetime.
    Accepted inputs:
    - datetime (naive or tz-aware). Naive assumed UTC.
    - ISO 8601 strings, with or without 'Z' or offsets, with 'T' or space separator.
    - SQL-like strings 'YYYY-MM-DD HH:MM[:SS][.ffffff]'.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        s = value.strip()
        # normalize 'Z' to '+00:00' for fromisoformat
        s_norm = s.replace("Z", "+00:00")
        try:
            dt = datetime.fromisoformat(s_norm)
        except ValueError:
            try:
                s2 = s_norm.replace(" ", "T", 1)
                dt = datetime.fromisoformat(s2)
            except ValueError as e:
                raise ValueError(f"Unsupported datetime format: {value}") from e

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return dt


def to_naive_utc(value: datetime | str | None) -> datetime | None:
    """Normalize any accepted datetime input to naive UTC for DATETIME columns."""
    if value is None:
        return None
    return parse_dt(value).replace(tzinfo=None)
