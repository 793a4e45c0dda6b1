# jsontree/logging.py
import logging
import os
import re
from typing import Any, Dict, Optional

PII_RE = re.compile(r"([\w\.-]+)@([\w\.-]+)")  # naive email redaction
MAX_STR = 80


def configure_logging(level: Optional[str] = None):
    logging.basicConfig(
        level=level or os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def redact_str(s: str) -> str:
    s = PII_RE.sub("[redacted-email]", s)
    if len(s) > MAX_STR:
        s = s[:MAX_STR] + "..."
    return s


def summarize_value(v: Any) -> Any:
    """
    Reduce a value to something safe to log. Document bodies are never
    dumped: objects become their key list, arrays their length.
    """
    if isinstance(v, dict):
        return f"<object keys={sorted(str(k) for k in v)}>"
    if isinstance(v, (list, tuple)):
        return f"<array len={len(v)}>"
    if isinstance(v, str):
        return redact_str(v)
    return v


def summarize_args(args: Dict[str, Any]) -> Dict[str, Any]:
    return {k: summarize_value(v) for k, v in args.items()}


def log_operation(logger: logging.Logger, name: str, args: Dict[str, Any]):
    logger.info("op %s %s", name, summarize_args(args))
