"""
Logging for the discount allocator.

One StructuredLogger per process writes to stdout and to a daily file
under logs/, and counts allocation runs per surface (cli, batch, api,
simulate). The pure allocation core logs through plain child loggers of
"discount_allocator" and only reaches these handlers once a front end
has called get_logger().
"""

import copy
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

LOGGER_NAME = "discount_allocator"
CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _empty_surface() -> Dict[str, Any]:
    return {"attempts": 0, "successes": 0, "failures": 0, "errors_by_type": {}}


class StructuredLogger:
    """
    Console and file logging with a JSON context suffix, plus run counters.

    Counters live in self.metrics:
        runs_attempted / runs_successful / runs_failed  totals over all surfaces
        errors_by_type                                  failure count per exception name
        surfaces                                        the same counts split by surface
    """

    def __init__(
        self,
        name: str = LOGGER_NAME,
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        self.logger = logging.getLogger(name)
        # Handlers filter by level; the file always gets DEBUG
        self.logger.setLevel(logging.DEBUG)
        self.logger.handlers.clear()
        self.logger.propagate = False
        self.log_file: Optional[Path] = None

        self.metrics: Dict[str, Any] = {
            "runs_attempted": 0,
            "runs_successful": 0,
            "runs_failed": 0,
            "errors_by_type": {},
            "surfaces": {},
        }

        if enable_console:
            console = logging.StreamHandler(sys.stdout)
            console.setLevel(getattr(logging, level.upper()))
            console.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
            self.logger.addHandler(console)

        if enable_file:
            log_dir = log_dir or Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)
            self.log_file = log_dir / f"{LOGGER_NAME}_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
            self.logger.addHandler(file_handler)

        if not self.logger.handlers:
            self.logger.addHandler(logging.NullHandler())

    def debug(self, message: str, **context):
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, **context):
        self._log(logging.INFO, message, context)

    def warning(self, message: str, **context):
        self._log(logging.WARNING, message, context)

    def error(self, message: str, **context):
        self._log(logging.ERROR, message, context)

    def critical(self, message: str, **context):
        self._log(logging.CRITICAL, message, context)

    def _log(self, level: int, message: str, context: Dict[str, Any]):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Run counters

    def _surface(self, surface: str) -> Dict[str, Any]:
        return self.metrics["surfaces"].setdefault(surface, _empty_surface())

    def record_run_attempt(self, surface: str):
        self.metrics["runs_attempted"] += 1
        self._surface(surface)["attempts"] += 1

    def record_run_success(self, surface: str):
        self.metrics["runs_successful"] += 1
        self._surface(surface)["successes"] += 1

    def record_run_failure(self, surface: str, error_type: str):
        self.metrics["runs_failed"] += 1
        totals = self.metrics["errors_by_type"]
        totals[error_type] = totals.get(error_type, 0) + 1

        stats = self._surface(surface)
        stats["failures"] += 1
        stats["errors_by_type"][error_type] = stats["errors_by_type"].get(error_type, 0) + 1

    def get_metrics(self) -> Dict[str, Any]:
        """Snapshot of the counters with a success_rate per surface. Safe to mutate."""
        snapshot = copy.deepcopy(self.metrics)
        for stats in snapshot["surfaces"].values():
            attempts = stats["attempts"]
            stats["success_rate"] = round(stats["successes"] / attempts, 3) if attempts else 0.0
        return snapshot

    def log_metrics_summary(self):
        metrics = self.get_metrics()
        attempted = metrics["runs_attempted"]
        succeeded = metrics["runs_successful"]
        overall = round(succeeded / attempted * 100, 1) if attempted else 0

        self.info("=== Allocation run summary ===")
        self.info(f"Runs: {succeeded}/{attempted} ({overall}% success)")
        for surface, stats in sorted(metrics["surfaces"].items()):
            line = (
                f"  {surface}: {stats['successes']}/{stats['attempts']} "
                f"({stats['success_rate'] * 100:.1f}%)"
            )
            if stats["errors_by_type"]:
                errors = ", ".join(f"{k}={v}" for k, v in sorted(stats["errors_by_type"].items()))
                line += f" errors: {errors}"
            self.info(line)
        for error_type, count in sorted(metrics["errors_by_type"].items()):
            self.info(f"  {error_type}: {count}")


_global_logger: Optional[StructuredLogger] = None


def get_logger(name: str = LOGGER_NAME, level: str = "INFO", **kwargs) -> StructuredLogger:
    """Return the process-wide logger, creating it on first use with these arguments."""
    global _global_logger
    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)
    return _global_logger


def reset_logger():
    global _global_logger
    _global_logger = None
