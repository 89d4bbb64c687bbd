"""Logging middleware with sensitive data redaction."""

import re

# Sensitive parameters to redact from URLs and form bodies
SENSITIVE_PARAMS = [
    "api_key",
    "token",
    "password",
    "secret",
    "key",
    "refresh_token",
    "access_token",
    "client_secret",
    "device_code",
    "code",
    "authorization",
    "bearer",
]

_PATTERNS = [(param, re.compile(rf"(?<![A-Za-z_]){param}=([^&\s\"]+)", re.IGNORECASE)) for param in SENSITIVE_PARAMS]


def redact_sensitive_data(url: str) -> str:
    """Redact sensitive query parameters from URL."""
    redacted = url
    for param, pattern in _PATTERNS:
        redacted = pattern.sub(f"{param}=***REDACTED***", redacted)
    return redacted
