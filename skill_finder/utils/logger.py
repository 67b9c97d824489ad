"""
Structured Logger Module

Configures structlog for JSON-formatted structured logging with correlation IDs.
All pipeline stages log through this module so a single recommendation or
provider search can be traced end to end.

Example Usage:
    from skill_finder.utils.logger import get_logger

    # Get logger with context
    logger = get_logger(
        correlation_id="a1b2c3d4-e5f6-7890-abcd-ef1234567890",
        phase="recommendation",
        component="candidate_filter"
    )

    # Log with context automatically included
    logger.info("Stage 1 complete", candidates=42)
    logger.warning("Budget fallback used", fallback_size=3)
    logger.error("LLM call failed", error="Timeout after 20s")

Log Levels:
    - DEBUG: Per-skill decisions (filtered, eliminated, deltas), LLM prompts
    - INFO: Stage counts, pipeline outcomes
    - WARNING: Fallbacks, skipped malformed catalog rows
    - ERROR: LLM failures (always recovered by the deterministic pipeline)
    - CRITICAL: Unrecoverable failures requiring operator intervention
"""

import logging
import sys
import uuid
from pathlib import Path
from typing import Optional
import structlog
from structlog.types import BindableLogger, EventDict, WrappedLogger


def mask_credentials(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Processor to mask sensitive credentials in log output.

    Args:
        logger: Logger instance
        method_name: Logging method name
        event_dict: Event dictionary to process

    Returns:
        Event dictionary with masked credentials

    Masks:
        - password, api_key, token, secret, credential, auth fields
        - Replaces values with "***MASKED***"
        - Uses word boundary matching to avoid false positives
    """
    sensitive_fields = {"password", "api_key", "token", "secret", "credential", "auth"}

    for key in list(event_dict.keys()):
        key_lower = key.lower()
        for sensitive in sensitive_fields:
            if (
                key_lower == sensitive
                or key_lower.endswith(f"_{sensitive}")
                or key_lower.endswith(f"-{sensitive}")
                or key_lower.startswith(f"{sensitive}_")
                or key_lower.startswith(f"{sensitive}-")
            ):
                event_dict[key] = "***MASKED***"
                break

    return event_dict


def configure_logging(
    log_file: Optional[str] = None, log_level: str = "INFO"
) -> None:
    """
    Configure structlog with JSON output on stdout and optional file logging.

    Args:
        log_file: Optional path to a log file (parent directory is created)
        log_level: Logging level (default: "INFO")

    Log Format (JSON):
        {
            "timestamp": "2026-10-06T10:30:45Z",
            "level": "info",
            "correlation_id": "a1b2c3d4-...",
            "phase": "recommendation",
            "component": "psychometric_scorer",
            "event": "Stage 3 complete",
            "scored": 17
        }
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper()),
        handlers=handlers,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            mask_credentials,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(
    correlation_id: Optional[str] = None,
    phase: Optional[str] = None,
    component: Optional[str] = None,
) -> BindableLogger:
    """
    Get structured logger with bound context.

    Args:
        correlation_id: Correlation ID for request tracing (generates UUID if not provided)
        phase: Pipeline phase (e.g., "recommendation", "ai_rerank", "provider_match")
        component: Component name (e.g., "feasibility_scorer", "provider_matcher")

    Returns:
        BoundLogger with correlation_id, phase, and component bound to context

    Example:
        logger = get_logger(
            correlation_id="a1b2c3d4-e5f6-7890-abcd-ef1234567890",
            phase="provider_match",
            component="provider_matcher"
        )
        logger.info("Providers ranked", skill_code="GD01", returned=4)
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    logger = structlog.get_logger()

    if correlation_id:
        logger = logger.bind(correlation_id=correlation_id)
    if phase:
        logger = logger.bind(phase=phase)
    if component:
        logger = logger.bind(component=component)

    return logger


# Initialize logging on module import with default settings
configure_logging()
