"""
Logging utilities for the VoltStore backend.

Provides standardized logger configuration.

SECURITY RULES:
- NEVER log the Gemini API key or the Supabase publishable key
- NEVER log raw upstream error payloads that may echo the credential
- Credential problems are logged by kind only (missing, rejected, leaked)

Acceptable logging:
- High-level events (e.g., "AI recommendation attempted", "fallback used")
- Rate cache transitions (e.g., "rates refreshed", "rate quote suppressed until ...")
- Non-sensitive metadata (e.g., budget tier, component count)
"""

import logging
from typing import Optional


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger for the specified module.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to INFO)

    Returns:
        Configured logger instance

    Usage:
        >>> from voltstore.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("High-level event occurred")
    """
    logger = logging.getLogger(name)

    if level is None:
        level = logging.INFO

    logger.setLevel(level)

    # Add handler if not already configured (avoid duplicate handlers)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
