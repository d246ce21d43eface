# Copyright 2026 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Structured logging for the actuator core.

Every module calls ``setup_logger()`` once at import. Events go to the
console as one compact line and to a rotating JSON-lines file shared by the
whole process.
"""

from collections.abc import Mapping
from datetime import datetime
import inspect
import logging
import logging.handlers
import os
from pathlib import Path
import sys
import tempfile
from typing import Any

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder

from actuators.constants import ACTUATORS_LOG_DIR, ACTUATORS_PROJECT_ROOT

# The vendor SDK logs every frame retry at INFO.
logging.getLogger("phoenix6").setLevel(logging.WARNING)

_LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
_LOG_FILE_BACKUPS = 20

_log_file: Path | None = None


def _log_directory() -> Path:
    if (ACTUATORS_PROJECT_ROOT / ".git").exists():
        candidate = ACTUATORS_LOG_DIR
    else:
        state_home = os.getenv("XDG_STATE_HOME")
        base = Path(state_home) if state_home else Path.home() / ".local" / "state"
        candidate = base / "actuators" / "logs"

    for log_dir in (candidate, Path(tempfile.gettempdir()) / "actuators" / "logs"):
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            continue
        return log_dir
    raise OSError(f"no writable log directory, tried {candidate}")


def _ensure_configured() -> Path:
    """Configure structlog once per process and return the shared log file."""
    global _log_file

    if _log_file is not None:
        return _log_file

    started = datetime.now().strftime("%Y%m%d_%H%M%S")
    _log_file = _log_directory() / f"actuators_{started}_{os.getpid()}.jsonl"

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            CallsiteParameterAdder(
                parameters=[CallsiteParameter.FUNC_NAME, CallsiteParameter.LINENO]
            ),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return _log_file


# ===== Console rendering =====

_SOURCE_WIDTH = 30
_USE_COLOR = hasattr(sys.stdout, "isatty") and sys.stdout.isatty()

_RESET = "\033[0m"
_STYLE = {
    "dbg": "\033[1;36;40m",
    "inf": "\033[1;32;40m",
    "war": "\033[1;33;40m",
    "err": "\033[1;31;40m",
    "cri": "\033[1;31;40m",
    "fixed": "\033[1;30;40m",
    "event": "\033[0;34m",
    "key": "\033[0;36m",
    "value": "\033[0;35m",
    "eq": "\033[0;37m",
}
_HIDDEN_KEYS = frozenset(
    {"func_name", "lineno", "exception", "exc_info", "_record", "_from_structlog"}
)


def _paint(text: str, style: str) -> str:
    if not _USE_COLOR:
        return text
    return f"{_STYLE.get(style, '')}{text}{_RESET}"


def _clock(timestamp: str) -> str:
    try:
        moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00")) if timestamp else datetime.now()
    except (ValueError, AttributeError):
        return str(timestamp)[:12]
    return moment.strftime("%H:%M:%S") + f".{moment.microsecond // 1000:03d}"


def _render_console(logger: Any, method_name: str, event_dict: Mapping[str, Any]) -> str:
    """HH:MM:SS.mmm[lvl][control/device.py          ] Event key=value ..."""
    fields = {k: v for k, v in event_dict.items() if k not in _HIDDEN_KEYS}

    clock = _clock(fields.pop("timestamp", ""))
    level = str(fields.pop("level", "???"))[:3].lower()
    source = str(fields.pop("logger", ""))[-_SOURCE_WIDTH:]
    event = fields.pop("event", "")

    line = (
        _paint(clock, "fixed")
        + _paint(f"[{level}]", level)
        + _paint(f"[{source:<{_SOURCE_WIDTH}}]", "fixed")
        + " "
        + _paint(str(event), "event")
    )
    pairs = [
        _paint(key, "key") + _paint("=", "eq") + _paint(str(value), "value")
        for key, value in sorted(fields.items())
    ]
    return " ".join([line, *pairs])


def setup_logger(*, level: int | None = None) -> Any:
    """Set up a structured logger named after the calling module's file.

    Args:
        level: The logging level. Defaults to ``ACTUATORS_LOG_LEVEL`` or INFO.

    Returns:
        A configured structlog logger instance.
    """
    name = inspect.stack()[1].filename
    try:
        name = str(Path(name).relative_to(ACTUATORS_PROJECT_ROOT))
    except (ValueError, TypeError):
        pass

    log_file = _ensure_configured()
    if level is None:
        level = logging.getLevelName(os.getenv("ACTUATORS_LOG_LEVEL", "INFO").upper())

    stdlib_logger = logging.getLogger(name)
    stdlib_logger.handlers.clear()
    stdlib_logger.setLevel(level)
    stdlib_logger.propagate = False

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(structlog.stdlib.ProcessorFormatter(processor=_render_console))

    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        mode="a",
        maxBytes=_LOG_FILE_MAX_BYTES,
        backupCount=_LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=structlog.processors.JSONRenderer())
    )

    for handler in (console, file_handler):
        handler.setLevel(level)
        stdlib_logger.addHandler(handler)

    return structlog.get_logger(name)
