"""Structured logging for wsroot (structlog).

Two independent knobs shape what a discovery run prints:

* ``ENABLE_WORKING_DIR_LOGS_LEVEL`` (``none`` | ``info`` | ``verbose``) picks
  which discovery events :mod:`wsroot.core.root` emits at all.
* :func:`configure_logging` picks how emitted events are rendered: one JSON
  object per line (``WSROOT_LOG_JSON=true``, the default) or the structlog
  console renderer (``WSROOT_LOG_JSON=false``).

Every event is tagged ``component="wsroot.path"`` and any ``Path`` values,
including the candidate lists logged at ``verbose``, are turned into strings.
Records go to stderr; stdout carries only the command's answer, so
``cd "$(wsroot root)"`` keeps working with logging switched on.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping, MutableMapping
from typing import Any

import structlog

_COMPONENT = "wsroot.path"


def _component_processor(
    _logger: Any,
    _method: str,
    event_dict: MutableMapping[str, Any],
) -> Mapping[str, Any]:
    event_dict.setdefault("component", _COMPONENT)
    return event_dict


def _fspath_or_value(value: Any) -> Any:
    return os.fspath(value) if isinstance(value, os.PathLike) else value


def _stringify_paths(
    _logger: Any,
    _method: str,
    event_dict: MutableMapping[str, Any],
) -> Mapping[str, Any]:
    """Turn ``Path`` values, and lists or tuples of them, into ``str``."""
    for key, value in event_dict.items():
        if isinstance(value, (list, tuple)):
            event_dict[key] = [_fspath_or_value(item) for item in value]
        else:
            event_dict[key] = _fspath_or_value(value)
    return event_dict


def _discovery_chain() -> list[structlog.types.Processor]:
    """Processors applied to structlog events and to foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _component_processor,
        _stringify_paths,
    ]


def _renderer(json_output: bool) -> structlog.types.Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, level: str = "INFO", json_output: bool = True) -> None:
    """Route structlog through a single stderr handler on the root logger.

    Called by the CLI callback before any command runs.  Calling it again
    replaces the previous handler, so switching ``--log-json``/``--log-text``
    within one process does not duplicate output.

    Parameters
    ----------
    level:
        Stdlib level name.  Unknown names fall back to ``INFO``.
    json_output:
        JSON lines when *True*, console rendering when *False*.
    """
    chain = _discovery_chain()

    # Loggers stay uncached so that capture_logs() and reconfiguration see
    # loggers created at import time.
    structlog.configure(
        processors=[*chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_output),
            ],
            foreign_pre_chain=chain,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
