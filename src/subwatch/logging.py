"""Centralized logging configuration for subwatch.

Entry points call configure_logging() once, early.

Logging Levels:
- DEBUG: Arming decisions, snapshot reloads, skipped rows
- INFO: Returns fired, bridge deliveries, watcher lifecycle
- WARNING: Recoverable issues (storage retries, bad snapshots, rejected alerts)
- ERROR: Failed notifications and bridge calls

Event messages are snake_case names; details go in dotted ``extra`` keys
(``submarine.name``, ``error.message``) which the JSONL handler records.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any, TextIO

DEFAULT_LOG_RETENTION_DAYS = 7

LEVEL_ENV_VAR = "SUBWATCH_LOG_LEVEL"

DEFAULT_REDACT_PATTERNS: list[str] = [
    # Bearer tokens in headers
    r"\bBearer\s+([A-Za-z0-9._\-+=/]{8,})",
    # ENV-style assignments: BRIDGE_TOKEN=secret or API_KEY: secret
    r"\b[A-Z0-9_]+(?:KEY|TOKEN|SECRET|PASSWORD)\s*[=:]\s*([^\s\"']{8,})",
    # Credentials embedded in URLs
    r"https?://[^\s:/@]+:([^\s@/]+)@",
]

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


@dataclass
class SecretRedactor:
    """Redacts credentials from log text, keeping a short prefix/suffix."""

    patterns: list[re.Pattern[str]] = field(default_factory=list)
    enabled: bool = True

    def __post_init__(self) -> None:
        if not self.patterns:
            self.patterns = [
                re.compile(p, re.IGNORECASE) for p in DEFAULT_REDACT_PATTERNS
            ]

    def redact(self, text: str) -> str:
        if not self.enabled or not text:
            return text
        for pattern in self.patterns:
            text = pattern.sub(self._mask_match, text)
        return text

    def _mask_match(self, match: re.Match[str]) -> str:
        full = match.group(0)
        token = match.group(1) if match.lastindex else full
        if "..." in token:
            return full
        if len(token) < 12:
            masked = "***"
        else:
            masked = f"{token[:4]}...{token[-4:]}"
        return full.replace(token, masked)


_redactor = SecretRedactor()


def prune_old_logs(
    logs_dir: Path,
    retention_days: int = DEFAULT_LOG_RETENTION_DAYS,
    suffix: str = ".jsonl",
) -> int:
    """Delete log files older than the retention period.

    Returns:
        Number of files deleted.
    """
    if not logs_dir.exists():
        return 0

    cutoff = datetime.now(UTC) - timedelta(days=retention_days)
    deleted = 0
    for entry in logs_dir.iterdir():
        if not entry.is_file() or not entry.name.endswith(suffix):
            continue
        try:
            if datetime.fromtimestamp(entry.stat().st_mtime, UTC) < cutoff:
                entry.unlink()
                deleted += 1
        except OSError:
            pass  # Another process may have removed it
    return deleted


def _component(name: str) -> str:
    parts = name.split(".")
    if len(parts) >= 2 and parts[0] == "subwatch":
        return parts[1]
    return parts[0]


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Return the ``extra`` fields attached to a record."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and key != "component"
    }


class JSONLHandler(logging.Handler):
    """Writes one redacted JSON object per record to a daily file.

    Files are named ``YYYY-MM-DD.jsonl``; old files are pruned on rotation.
    """

    def __init__(
        self,
        logs_dir: Path,
        retention_days: int = DEFAULT_LOG_RETENTION_DAYS,
    ):
        super().__init__()
        self._logs_dir = logs_dir
        self._logs_dir.mkdir(parents=True, exist_ok=True)
        self._retention_days = retention_days
        self._current_date: str | None = None
        self._file: TextIO | None = None

    def _get_log_file(self) -> TextIO:
        today = datetime.now(UTC).strftime("%Y-%m-%d")
        if self._current_date != today or self._file is None:
            if self._file:
                self._file.close()
            self._current_date = today
            self._file = (self._logs_dir / f"{today}.jsonl").open("a", encoding="utf-8")
            prune_old_logs(self._logs_dir, self._retention_days)
        return self._file

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry: dict[str, Any] = {
                "ts": datetime.now(UTC).isoformat(),
                "level": record.levelname,
                "component": _component(record.name),
                "logger": record.name,
                "message": _redactor.redact(record.getMessage()),
            }
            if record.exc_info:
                formatter = self.formatter or logging.Formatter()
                entry["exception"] = _redactor.redact(
                    formatter.formatException(record.exc_info)
                )
            if extras := record_extras(record):
                redacted = _redactor.redact(json.dumps(extras, default=str))
                try:
                    entry["extra"] = json.loads(redacted)
                except json.JSONDecodeError:
                    entry["extra"] = {"_redacted_raw": redacted}

            log_file = self._get_log_file()
            log_file.write(json.dumps(entry) + "\n")
            log_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        if self._file:
            self._file.close()
            self._file = None
        super().close()


class ComponentFormatter(logging.Formatter):
    """Formatter that shows the component and any extras after the message.

    ``subwatch.tracking.watcher`` is shown as ``tracking``.
    """

    def format(self, record: logging.LogRecord) -> str:
        record.component = _component(record.name)
        text = super().format(record)
        if extras := record_extras(record):
            details = " ".join(f"{k}={v}" for k, v in extras.items())
            text = f"{text} {details}"
        return _redactor.redact(text)


# Third-party loggers that are too noisy at INFO level
NOISY_LOGGERS = [
    "httpx",
    "httpcore",
    "aiosqlite",
    "sqlalchemy.engine",
]


def configure_logging(
    level: str | None = None,
    use_rich: bool = False,
    log_to_file: bool = False,
) -> None:
    """Configure logging for subwatch.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses SUBWATCH_LOG_LEVEL env var or INFO.
        use_rich: Use Rich handler for colorful output (daemon mode).
        log_to_file: Also write logs to JSONL files in ~/.subwatch/logs/.
    """
    from subwatch.config.paths import get_logs_path

    if level is None:
        level = os.environ.get(LEVEL_ENV_VAR, "INFO")
    level = level.upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        level = "INFO"
    log_level = getattr(logging, level)

    handlers: list[logging.Handler] = []

    if use_rich:
        from rich.logging import RichHandler

        console_handler: logging.Handler = RichHandler(
            rich_tracebacks=False,
            show_path=False,
            show_time=True,
            markup=False,
        )
        console_handler.setFormatter(ComponentFormatter("%(component)s | %(message)s"))
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            ComponentFormatter(
                "%(asctime)s | %(levelname)-8s | %(component)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )
    handlers.append(console_handler)

    if log_to_file:
        file_handler = JSONLHandler(get_logs_path())
        file_handler.setLevel(log_level)
        handlers.append(file_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
