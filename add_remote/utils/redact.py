"""Utilities for redacting sensitive information from logs and errors."""

import re
from typing import Any, Dict


def redact_token(text: str) -> str:
    """
    Redact GitLab and GitHub tokens from text.

    GitHub tokens typically start with 'ghp_', 'gho_', 'ghu_', 'ghs_', or 'ghr_',
    GitLab personal access tokens with 'glpat-'.
    """
    # Redact GitHub tokens
    text = re.sub(r'gh[pousr]_[A-Za-z0-9]{36,}', '***REDACTED***', text)

    # Redact GitLab personal access tokens
    text = re.sub(r'glpat-[A-Za-z0-9_\-]{20,}', '***REDACTED***', text)

    # Redact tokens passed in the query string
    text = re.sub(r'(private_token=)[^&\s"\']+', r'\1***REDACTED***', text)

    # Redact Basic and Bearer credentials in Authorization headers
    text = re.sub(r'(Basic|Bearer)\s+[A-Za-z0-9_\-\.=+/]+', r'\1 ***REDACTED***', text)

    return text


def redact_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively redact sensitive fields from a dictionary.

    Redacts common sensitive field names like 'token', 'password', 'authorization', etc.
    """
    sensitive_keys = {'token', 'private_token', 'password', 'secret', 'authorization', 'private-token'}

    redacted = {}
    for key, value in data.items():
        if key.lower() in sensitive_keys:
            redacted[key] = '***REDACTED***'
        elif isinstance(value, dict):
            redacted[key] = redact_dict(value)
        elif isinstance(value, str):
            redacted[key] = redact_token(value)
        else:
            redacted[key] = value

    return redacted


def safe_error_message(error: Exception, context: str = "") -> str:
    """
    Create a safe error message with redacted sensitive information.

    Args:
        error: The exception to format
        context: Additional context about where the error occurred

    Returns:
        A safe error message with redacted tokens
    """
    redacted_msg = redact_token(str(error))

    if context:
        return f"{context}: {redacted_msg}"
    return redacted_msg
