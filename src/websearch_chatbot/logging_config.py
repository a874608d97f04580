"""Loguru sinks for the chatbot backend.

Every record carries ``extra["session"]``: the thread id while
``Agent.chat`` is running a turn, ``NO_SESSION`` otherwise.
"""

import sys
from pathlib import Path
from typing import Any, Callable

from loguru import logger

NO_SESSION = "-"

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> <level>{level:<8}</level> "
    "<magenta>[{extra[session]}]</magenta> "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
_FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | session={extra[session]} | "
    "{name}:{function}:{line} - {message}"
)


def _add_console_sink(level: str) -> str:
    logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT)
    return f"console (stderr, {level})"


def _add_file_sink(
    level: str,
    path: str = "chatbot.log",
    rotation: str = "10 MB",
    retention: int = 3,
) -> str:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    logger.add(path, level=level, format=_FILE_FORMAT, rotation=rotation, retention=retention)
    return f"file ({path}, {level})"


_SINKS: dict[str, Callable[..., str]] = {
    "console": _add_console_sink,
    "file": _add_file_sink,
}

_DEFAULT_CONSUMERS = [
    {"type": "console"},
    {"type": "file", "path": "chatbot.log"},
]


def setup_logging(
    level: str = "INFO",
    consumers: list[dict[str, Any]] | None = None,
) -> list[str]:
    """Replace all sinks with the ``LogConsumers`` entries; returns one description per sink added.

    Each entry is ``{"type": "console" | "file", "level"?: str, ...}``; extra
    keys (``path``, ``rotation``, ``retention``) go to the file sink.
    """
    logger.remove()
    logger.configure(extra={"session": NO_SESSION})

    descriptions: list[str] = []
    unknown: list[str] = []
    for config in _DEFAULT_CONSUMERS if consumers is None else consumers:
        sink_type = config.get("type", "")
        add_sink = _SINKS.get(sink_type)
        if add_sink is None:
            unknown.append(sink_type)
            continue
        options = {k: v for k, v in config.items() if k not in ("type", "level")}
        descriptions.append(add_sink(config.get("level", level), **options))

    # Reported once the sinks exist, so the warning is not lost.
    for sink_type in unknown:
        logger.warning(f"Unknown log consumer type: {sink_type!r}")
    return descriptions
