"""Retry strategies using Strategy Pattern."""
import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from ..config import RetryConfig


class RetryStrategy(ABC):
    """Abstract retry strategy."""
    
    @abstractmethod
    def should_retry(self, status: Optional[int], attempt: int) -> bool:
        """Determines if a failed attempt should be retried."""
        pass
    
    @abstractmethod
    async def wait(self, attempt: int):
        """Waits before the next attempt."""
        pass
    
    @property
    @abstractmethod
    def max_attempts(self) -> int:
        """Total attempts allowed."""
        pass


class FixedDelayStrategy(RetryStrategy):
    """Fixed attempt count with a constant pause between attempts."""
    
    def __init__(self, config: Optional[RetryConfig] = None):
        self._config = config or RetryConfig()
    
    @property
    def max_attempts(self) -> int:
        return self._config.attempts
    
    def should_retry(self, status: Optional[int], attempt: int) -> bool:
        """Retries network errors (status None) and configured statuses."""
        return self._config.should_retry(status, attempt)
    
    async def wait(self, attempt: int):
        """Waits the configured delay."""
        await asyncio.sleep(self._config.calculate_delay(attempt))
