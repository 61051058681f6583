"""Exponential backoff for transient storage failures."""

import random
from dataclasses import dataclass


@dataclass
class RetryConfig:
    """Configuration for backoff between failed polls."""

    base_delay: float = 1.0
    max_delay: float = 60.0
    exponential_base: float = 2.0
    jitter: float = 0.1  # Fraction of the delay, applied in both directions


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """Calculate delay before the next attempt with exponential backoff and jitter.

    Args:
        attempt: Number of consecutive failures so far (1-indexed).
        config: Retry configuration.

    Returns:
        Delay in seconds, never negative and never above ``max_delay``
        plus jitter.
    """
    delay = config.base_delay * (config.exponential_base ** (attempt - 1))
    delay = min(delay, config.max_delay)

    jitter_range = delay * config.jitter
    delay += random.uniform(-jitter_range, jitter_range)  # noqa: S311

    return max(0, delay)
