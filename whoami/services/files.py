from __future__ import annotations

from datetime import datetime, timezone


def generate_filename(
    basename: str, extension: str, now: datetime | None = None
) -> str:
    """Return ``<basename>-<timestamp>.<extension>`` with a filesystem-safe ISO timestamp.

    The timestamp is UTC with millisecond precision and a trailing ``Z``; every
    ``:`` and ``.`` is replaced by ``-``.
    """
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    iso = moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
    timestamp = iso.replace(":", "-").replace(".", "-")
    return f"{basename}-{timestamp}.{extension.lstrip('.')}"
