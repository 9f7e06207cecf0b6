"""Pick up settings from ``.env`` files before reading the environment.

Searched in order: ``./.env`` in the launch directory, then
``~/.config/video-approval/.env``. A variable already set in the shell is
left alone; a blank or ``""`` value counts as unset.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

DEFAULT_ENV_PATHS: tuple[Path, ...] = (
    Path(".env"),
    Path.home() / ".config" / "video-approval" / ".env",
)

# [export ]KEY=VALUE; VALUE may be wrapped in matching quotes.
_LINE_RE = re.compile(r"^(?:export\s+)?(?P<key>[^=\s]+)\s*=\s*(?P<value>.*)$")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def _is_unset(value: str | None) -> bool:
    return value is None or not _unquote(value.strip()).strip()


def parse_dotenv(path: Path) -> dict[str, str]:
    """Read ``KEY=VALUE`` pairs from *path*; a missing file yields ``{}``.

    Comment lines (``#``) and lines without ``=`` are skipped. Values are
    taken literally apart from one layer of surrounding quotes.
    """
    if not path.is_file():
        return {}

    pairs: dict[str, str] = {}
    for raw in path.read_text().splitlines():
        line = raw.strip()
        if line.startswith("#"):
            continue
        match = _LINE_RE.match(line)
        if match:
            pairs[match["key"]] = _unquote(match["value"].strip())
    return pairs


def load_dotenv(paths: tuple[Path, ...] | None = None) -> dict[str, str]:
    """Copy values from *paths* into ``os.environ`` where the variable is unset.

    The first file that defines a variable wins.

    Returns:
        The variables that were set by this call.
    """
    injected: dict[str, str] = {}
    for path in DEFAULT_ENV_PATHS if paths is None else paths:
        for key, value in parse_dotenv(path).items():
            if key not in injected and _is_unset(os.environ.get(key)):
                os.environ[key] = value
                injected[key] = value
    return injected
