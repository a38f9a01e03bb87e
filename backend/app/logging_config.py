"""Structured logging configuration using structlog.

JSON logging in production, colorized console output elsewhere.
GitHub tokens and account identity (logins, repository owners, emails)
are filtered before rendering.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from app.config import Environment, get_settings

# Substrings: any key containing one of these is a secret.
SECRET_KEY_PARTS = ("token", "secret", "password", "authorization", "api_key", "cookie")

# Exact keys that identify a GitHub account or person.
PII_KEYS = frozenset({"username", "login", "github_login", "email", "ip_address"})

# Keys holding "owner/name" repository paths; the owner is a GitHub login.
REPO_PATH_KEYS = frozenset({"repo", "full_name"})

REDACTED = "[REDACTED]"
PII_REDACTED = "[PII_REDACTED]"

NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "sqlalchemy.engine", "celery.redirected")


def _filter_sensitive_data(
    _logger: Any, _method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    for key in event_dict:
        if any(part in key.lower() for part in SECRET_KEY_PARTS):
            event_dict[key] = REDACTED
    return event_dict


def _mask_repo_owner(path: Any) -> Any:
    if not isinstance(path, str) or "/" not in path:
        return path
    _owner, _, name = path.partition("/")
    return f"{PII_REDACTED}/{name}"


def _filter_pii(
    _logger: Any, _method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Drop GitHub identities, keeping the repository name for debugging."""
    for key in event_dict:
        if key in PII_KEYS:
            event_dict[key] = PII_REDACTED
        elif key in REPO_PATH_KEYS:
            event_dict[key] = _mask_repo_owner(event_dict[key])
    return event_dict


def _renderer(environment: Environment) -> structlog.types.Processor:
    if environment == Environment.PRODUCTION:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def setup_logging() -> None:
    """Route structlog and stdlib logging through one stdout handler."""
    settings = get_settings()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            _filter_sensitive_data,
            _filter_pii,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings.environment),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.log_level.upper())

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
