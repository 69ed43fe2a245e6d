"""
Structured logging system for similarjobs.

Provides centralized logging with console and file outputs, log levels,
and metrics tracking for monitoring recommendation health.
"""

import logging
import os
import sys
import threading
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for monitoring recommendation requests.
    """

    def __init__(
        self,
        name: str = "similarjobs",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()  # Remove existing handlers
        self.logger.propagate = False

        self.metrics = self._empty_metrics()
        self._metrics_lock = threading.Lock()

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"similarjobs_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    @staticmethod
    def _empty_metrics() -> dict:
        return {
            "requests": 0,
            "requests_succeeded": 0,
            "requests_failed": 0,
            "candidates_scored": 0,
            "factor_faults": 0,
            "faults_by_factor": {},
            "errors_by_type": {},
        }

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        """Internal logging method with context."""
        if not self.logger.isEnabledFor(level):
            return
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_request(self):
        """Increment request counter."""
        with self._metrics_lock:
            self.metrics["requests"] += 1

    def record_request_success(self, candidates_scored: int):
        """Record a completed request and how many candidates it scored."""
        with self._metrics_lock:
            self.metrics["requests_succeeded"] += 1
            self.metrics["candidates_scored"] += candidates_scored

    def record_request_failure(self, error_type: str):
        """Record a failed request."""
        with self._metrics_lock:
            self.metrics["requests_failed"] += 1
            errors = self.metrics["errors_by_type"]
            errors[error_type] = errors.get(error_type, 0) + 1

    def record_factor_fault(self, factor: str):
        """Record a factor value that had to be coerced to 0."""
        with self._metrics_lock:
            self.metrics["factor_faults"] += 1
            faults = self.metrics["faults_by_factor"]
            faults[factor] = faults.get(factor, 0) + 1

    def get_metrics(self) -> dict:
        """Return current metrics."""
        metrics_copy = dict(self.metrics)
        metrics_copy["faults_by_factor"] = dict(self.metrics["faults_by_factor"])
        metrics_copy["errors_by_type"] = dict(self.metrics["errors_by_type"])
        total = metrics_copy["requests"]
        metrics_copy["success_rate"] = (
            round(metrics_copy["requests_succeeded"] / total, 3) if total > 0 else 0.0
        )
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Recommendation Session Metrics ===")
        self.info(
            f"Requests: {metrics['requests_succeeded']}/{metrics['requests']} "
            f"({metrics['success_rate'] * 100:.1f}% success)"
        )
        self.info(f"Candidates scored: {metrics['candidates_scored']}")

        if metrics["faults_by_factor"]:
            self.info(f"Factor faults: {metrics['factor_faults']}")
            for factor, count in metrics["faults_by_factor"].items():
                self.info(f"  {factor}: {count}")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "similarjobs",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level; defaults to $SIMILARJOBS_LOG_LEVEL or INFO
        **kwargs: Additional arguments passed to StructuredLogger.
            File output is only enabled by default when
            $SIMILARJOBS_LOG_DIR is set.

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        if level is None:
            level = os.getenv("SIMILARJOBS_LOG_LEVEL", "INFO")
        if "enable_file" not in kwargs:
            log_dir = os.getenv("SIMILARJOBS_LOG_DIR")
            kwargs["enable_file"] = bool(log_dir) or "log_dir" in kwargs
            if log_dir and "log_dir" not in kwargs:
                kwargs["log_dir"] = Path(log_dir)
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
