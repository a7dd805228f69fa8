"""Log sanitizer - removes sensitive data from log messages.

SMTP and HTTP error text can echo back recipient addresses or credentials;
run it through here before it reaches a log file.
"""

import re
from typing import Union

# Patterns to detect and redact sensitive data
SENSITIVE_PATTERNS = [
    # Email addresses
    (r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b', '[EMAIL]'),

    # Passwords, keys, tokens in key=value format
    (r'(password|passwd|pass|secret|token|api_key|apikey|credential)["\s:=]+[^\s,}"\']{4,}',
     r'\1=[REDACTED]'),

    # Bearer / Basic auth headers
    (r'(Bearer|Basic)\s+[A-Za-z0-9\-_\.=+/]+', r'\1 [REDACTED]'),

    # JWT tokens (three base64 segments separated by dots)
    (r'eyJ[A-Za-z0-9\-_]+\.eyJ[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+', '[JWT_TOKEN]'),

    # Generic long alphanumeric strings that look like keys (32+ chars)
    (r'\b[A-Za-z0-9]{32,}\b', '[LONG_TOKEN]'),
]

# Compiled patterns for efficiency
_COMPILED_PATTERNS = [(re.compile(p, re.IGNORECASE), r) for p, r in SENSITIVE_PATTERNS]


def sanitize_log(text: str) -> str:
    """Remove sensitive data from text for safe logging.

    Args:
        text: The text to sanitize

    Returns:
        Sanitized text with sensitive data replaced by placeholders
    """
    if not text:
        return text

    result = text
    for pattern, replacement in _COMPILED_PATTERNS:
        result = pattern.sub(replacement, result)

    return result


def sanitize_for_log(value: Union[str, bytes, BaseException, None], max_length: int = 300) -> str:
    """Sanitize and truncate a value (often an exception) for logging.

    Args:
        value: The value to sanitize
        max_length: Maximum length of returned string

    Returns:
        Sanitized, truncated string safe for logging
    """
    if value is None:
        return "<None>"

    if isinstance(value, bytes):
        text = value.decode('utf-8', errors='replace')
    else:
        text = str(value)

    sanitized = sanitize_log(text)

    if len(sanitized) > max_length:
        return sanitized[:max_length] + f"... [{len(text)} chars total]"

    return sanitized
