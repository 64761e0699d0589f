"""
gitgraph logging utilities.

Library code logs on four loggers:

- ``gitgraph``        root of the hierarchy
- ``gitgraph.http``   one DEBUG line per request and response
- ``gitgraph.git``    branch, tree and push progress
- ``gitgraph.pulls``  pull request lifecycle

Nothing here adds handlers unless ``configure_logging`` is called. Access
tokens and Authorization headers are masked before any HTTP line is emitted.
"""

import logging
import re
from typing import Any

_sdk_logger = logging.getLogger("gitgraph")
_http_logger = logging.getLogger("gitgraph.http")
_area_loggers = {
    "git": logging.getLogger("gitgraph.git"),
    "pulls": logging.getLogger("gitgraph.pulls"),
}

TOKEN_PLACEHOLDER = "[TOKEN_REDACTED]"
VALUE_PLACEHOLDER = "[REDACTED]"

_MASKS: list[tuple[re.Pattern[str], str]] = [
    # "Bearer <token>" / "token <token>" as sent in Authorization headers
    (re.compile(r"\b(Bearer|token)\s+[\w\-.]{8,}", re.IGNORECASE), rf"\1 {TOKEN_PLACEHOLDER}"),
    # Classic, OAuth, user-to-server, installation and refresh tokens
    (re.compile(r"\bgh[pousr]_[A-Za-z0-9]{20,}\b"), TOKEN_PLACEHOLDER),
    # Fine-grained personal access tokens
    (re.compile(r"\bgithub_pat_\w{20,}\b"), TOKEN_PLACEHOLDER),
    # key="value" / key: 'value' pairs in free text
    (
        re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE),
        rf"\1: {VALUE_PLACEHOLDER}",
    ),
]

_PREVIEW_CHARS = 4

_SENSITIVE_KEYS = frozenset({"authorization", "token", "secret", "password", "api_key"})


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Attach a handler to the ``gitgraph`` logger and set levels.

    Args:
        level: Level for ``gitgraph``, ``gitgraph.git`` and ``gitgraph.pulls``
        http_level: Level for ``gitgraph.http`` (default: ``level``). Request
            lines are only produced at DEBUG.
        handler: Handler to attach (default: a stderr ``StreamHandler``)
        format_string: Record format (default: time, logger, level, message)

    Example:
        ```python
        import logging
        from gitgraph.logging import configure_logging

        # Show every API call while keeping operation logs at INFO
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    handler = handler or logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(format_string or "%(asctime)s %(name)s %(levelname)s: %(message)s")
    )
    _sdk_logger.addHandler(handler)
    _sdk_logger.setLevel(level)

    for area_logger in _area_loggers.values():
        area_logger.setLevel(level)
    _http_logger.setLevel(level if http_level is None else http_level)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``gitgraph`` or the ``gitgraph.<name>`` child logger."""
    return logging.getLogger("gitgraph" if name is None else f"gitgraph.{name}")


def mask_sensitive_data(text: str) -> str:
    """Replace access tokens and secret assignments in ``text`` with placeholders."""
    for pattern, replacement in _MASKS:
        text = pattern.sub(replacement, text)
    return text


def truncate_token(token: str) -> str:
    """
    Shorten a token for display, e.g. ``"ghp_...9xYz"``.

    Tokens too short to preview safely are replaced entirely.
    """
    if len(token) <= 4 * _PREVIEW_CHARS:
        return TOKEN_PLACEHOLDER
    return f"{token[:_PREVIEW_CHARS]}...{token[-_PREVIEW_CHARS:]}"


def _is_sensitive(key: str, sensitive_keys: frozenset[str] | set[str]) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in sensitive_keys)


def _redact(value: Any, sensitive_keys: frozenset[str] | set[str]) -> Any:
    if isinstance(value, dict):
        return safe_log_dict(value, sensitive_keys)
    if isinstance(value, list):
        return [_redact(item, sensitive_keys) for item in value]
    return value


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Copy ``data`` with the values of sensitive keys replaced by ``[REDACTED]``.

    A key is sensitive when it contains one of ``sensitive_keys``
    (case-insensitive), so ``client_secret`` and ``Authorization`` both match.
    Nested dicts and lists are copied the same way.
    """
    keys = _SENSITIVE_KEYS if sensitive_keys is None else sensitive_keys
    return {
        key: VALUE_PLACEHOLDER if _is_sensitive(key, keys) else _redact(value, keys)
        for key, value in data.items()
    }


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """Emit one masked DEBUG line for an outgoing request."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    line = f"{method} {url}"
    if headers:
        line += f" | headers={safe_log_dict(headers)}"
    if body:
        shown = safe_log_dict(body)
        # Blob payloads can be large; only their size is useful here
        if isinstance(shown.get("content"), str):
            shown["content"] = f"<{len(shown['content'])} chars>"
        line += f" | body={shown}"

    _http_logger.debug(mask_sensitive_data(line))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
) -> None:
    """Emit one DEBUG line for a received response."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    line = f"Response {status_code} from {url}"
    if elapsed_ms is not None:
        line += f" | elapsed={elapsed_ms:.2f}ms"
    _http_logger.debug(line)


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "truncate_token",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
]
