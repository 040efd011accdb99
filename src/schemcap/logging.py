"""
Schemcap Logging Configuration

Two loggers are involved:

- ``schemcap``: the package logger; module loggers are its children and
  emit DEBUG detail (splits, reroutes, seeds, slides)
- ``schemcap.gestures``: one INFO line per committed editor gesture
  (placement, wire commit, drag release, delete, paste, undo, ...)

Both are silent until :func:`enable_verbose` attaches a console handler.

Example::

    from schemcap.logging import enable_verbose

    enable_verbose("INFO")               # one line per gesture
    enable_verbose("DEBUG")              # plus topology detail
    enable_verbose("INFO", gestures_only=True)
"""

import logging
from typing import Iterable, Optional

_logger = logging.getLogger("schemcap")
_logger.addHandler(logging.NullHandler())  # Default: no output

_gesture_logger = logging.getLogger("schemcap.gestures")

# Vertices shown per wire in a gesture line before eliding the rest
MAX_LOGGED_VERTICES = 6


def enable_verbose(
    level: str = "INFO", format: Optional[str] = None, gestures_only: bool = False
) -> None:
    """Enable console logging of editor activity.

    Args:
        level: Logging level - "DEBUG", "INFO", "WARNING", "ERROR"
        format: Optional custom format string
        gestures_only: Only show committed gestures, not module detail

    Example:
        enable_verbose("DEBUG")

        editor = Editor()
        editor.start_wire((0, 0))
        editor.add_wire_point((40, 0))
        editor.finish_wire()  # "wire commit: wire=... points=(0, 0) (40, 0)"

        disable_verbose()
    """
    disable_verbose()
    target = _gesture_logger if gestures_only else _logger
    target.setLevel(getattr(logging, level.upper()))

    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level.upper()))

    if format is None:
        format = "[%(levelname)s] %(name)s: %(message)s"

    handler.setFormatter(logging.Formatter(format))
    target.addHandler(handler)


def disable_verbose() -> None:
    """Disable verbose logging."""
    _logger.setLevel(logging.WARNING)
    _gesture_logger.setLevel(logging.NOTSET)
    for logger in (_logger, _gesture_logger):
        for handler in logger.handlers[:]:
            if not isinstance(handler, logging.NullHandler):
                logger.removeHandler(handler)


def format_points(points: Iterable[float], limit: int = MAX_LOGGED_VERTICES) -> str:
    """Render a flat point list as ``(x, y) (x, y) ...``, eliding long wires."""
    flat = list(points)
    vertices = [f"({flat[i]:g}, {flat[i + 1]:g})" for i in range(0, len(flat) - 1, 2)]
    if len(vertices) > limit:
        hidden = len(vertices) - limit
        vertices = vertices[: limit - 1] + [f"... +{hidden}", vertices[-1]]
    return " ".join(vertices)


def log_gesture(gesture: str, **details) -> None:
    """Log one committed editor gesture on ``schemcap.gestures``.

    ``details`` are rendered as ``key=value`` in the order given; ``None``
    values are skipped.
    """
    if not _gesture_logger.isEnabledFor(logging.INFO):
        return
    parts = [f"{key}={value}" for key, value in details.items() if value is not None]
    _gesture_logger.info(f"{gesture}: {' '.join(parts)}" if parts else gesture)
