"""
Logging utilities for the desk booking bot

Provides:
- Workflow start/end banners
- Structured error tracking (JSON Lines) for per-date booking failures
"""

import logging
import traceback
import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any


def log_workflow_start(logger, workflow_name: str, params: dict = None):
    """
    Log the start of a workflow with parameters.

    Args:
        logger: Anything with an info(message) method
        workflow_name: Name of the workflow
        params: Dictionary of workflow parameters
    """
    logger.info("=" * 70)
    logger.info(f"Starting: {workflow_name}")
    logger.info("=" * 70)
    if params:
        for key, value in params.items():
            logger.info(f"   {key}: {value}")
    logger.info("=" * 70)


def log_workflow_end(logger, workflow_name: str, success: bool, duration: float = None):
    """
    Log the end of a workflow with status.

    Args:
        logger: Anything with info/error methods
        workflow_name: Name of the workflow
        success: Whether workflow succeeded
        duration: Optional duration in seconds
    """
    status = "SUCCESS" if success else "FAILED"
    log = logger.info if success else logger.error

    logger.info("=" * 70)
    log(f"{workflow_name}: {status}")
    if duration:
        logger.info(f"   Duration: {duration:.2f} seconds")
    logger.info("=" * 70)


class ErrorTracker:
    """
    Track and log errors with debugging context
    """

    def __init__(self, log_dir: Path = None):
        if log_dir is None:
            log_dir = Path("logs") / "errors"

        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.error_log_file = self.log_dir / "error_log.jsonl"

    def log_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        level: str = "error"
    ):
        """
        Log an error with full context and stack trace

        Args:
            error: The exception that occurred
            context: Additional context information
            level: Error level (error, warning, critical)
        """
        error_data = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "error_type": type(error).__name__,
            "error_message": str(error),
            "stack_trace": "".join(traceback.format_exception(type(error), error, error.__traceback__)),
            "context": context or {},
        }

        try:
            with open(self.error_log_file, 'a', encoding='utf-8') as f:
                f.write(json.dumps(error_data, default=str) + '\n')
        except OSError as e:
            logging.getLogger("deskbot").warning(f"Failed to write error log: {e}")

    def log_booking_error(
        self,
        date: str,
        error: Exception,
        desk: Optional[str] = None,
        additional_context: Optional[Dict[str, Any]] = None
    ):
        """
        Log booking-specific errors with structured context

        Args:
            date: The date being booked
            error: The exception that occurred
            desk: Desk name if one had been selected
            additional_context: Additional context information
        """
        context = {
            "booking_date": date,
            "desk": desk,
            "workflow": "desk_booking",
            **(additional_context or {})
        }

        self.log_error(error, context=context, level="error")

    def get_recent_errors(self, limit: int = 50) -> list:
        """
        Get recent errors from the log

        Args:
            limit: Maximum number of errors to return

        Returns:
            List of error dictionaries
        """
        if not self.error_log_file.exists():
            return []

        with open(self.error_log_file, 'r', encoding='utf-8') as f:
            lines = f.readlines()

        errors = []
        for line in lines[-limit:]:
            try:
                errors.append(json.loads(line))
            except json.JSONDecodeError:
                continue

        return errors


def log_booking_failure(
    date: str,
    error: Exception,
    tracker: ErrorTracker,
    desk: Optional[str] = None,
    **kwargs
):
    """
    Convenience function to log booking failures

    Args:
        date: Booking date
        error: The exception that occurred
        tracker: Tracker to write to
        desk: Desk name if applicable
        **kwargs: Additional context
    """
    tracker.log_booking_error(date, error, desk=desk, additional_context=kwargs)
