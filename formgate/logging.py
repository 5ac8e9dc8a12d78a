# SPDX-License-Identifier: Apache-2.0

import logging.config
import os
import uuid

import structlog

request_logger = structlog.get_logger("formgate.request")

DEV_MODE = os.environ.get("FORMGATE_ENV") == "development"

RENDERER: structlog.dev.ConsoleRenderer | structlog.processors.JSONRenderer
if DEV_MODE:
    RENDERER = structlog.dev.ConsoleRenderer(colors=True)
else:
    RENDERER = structlog.processors.JSONRenderer()

# Keys whose values must never reach a log sink verbatim.
SENSITIVE_KEYS = frozenset({"secret", "secret_key"})


def _create_id(request):
    return str(uuid.uuid4())


def _redact(value):
    if isinstance(value, dict):
        return {
            k: "[redacted]" if k in SENSITIVE_KEYS else _redact(v)
            for k, v in value.items()
        }
    return value


def _redact_secrets(logger, method_name, event_dict):
    """Mask the reCAPTCHA secret wherever it shows up in an event."""
    return _redact(event_dict)


def _create_logger(request):
    # This has to use **{} instead of just a kwarg because request.id is not
    # an allowed kwarg name.
    return request_logger.bind(**{"request.id": request.id})


def includeme(config):
    level = config.registry.settings.get("logging.level", "INFO")

    foreign_pre_chain = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog_formatter": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": RENDERER,
                    "foreign_pre_chain": foreign_pre_chain,
                }
            },
            "handlers": {
                "primary": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "structlog_formatter",
                },
            },
            "loggers": {
                "urllib3": {"level": "WARNING"},
            },
            "root": {"level": level, "handlers": ["primary"]},
        }
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _redact_secrets,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Give every request a unique identifier
    config.add_request_method(_create_id, name="id", reify=True)

    # Add a log method to every request.
    config.add_request_method(_create_logger, name="log", reify=True)
