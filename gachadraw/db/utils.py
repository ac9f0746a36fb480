import os
from pathlib import Path
from typing import Optional

SQLITE_RELATIVE_PREFIX = "sqlite:///./"


def resolve_sqlite_url(url: str, project_root: Path) -> str:
    """Anchor a relative ``sqlite:///./<path>`` URL at ``project_root``.

    Any other URL (absolute sqlite paths, in-memory databases, server
    backends) is returned as given.
    """
    if not url.startswith(SQLITE_RELATIVE_PREFIX):
        return url
    db_path = (project_root / url[len(SQLITE_RELATIVE_PREFIX):]).resolve()
    return f"sqlite:///{db_path}"


def env_int(name: str, default: int) -> int:
    """Read an integer setting from the environment, falling back to ``default``."""
    raw: Optional[str] = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable '{name}' must be an integer") from exc
