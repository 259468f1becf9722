"""
Publisher - main entry point for publishing content.

Usage:
    >>> async with Publisher() as publisher:
    ...     results = await publisher.run(secret, "assets/*.json", published=True)
    ...     for result in results:
    ...         print(result.path, result.content_address, result.ok)
"""
import dataclasses
from typing import Any, List, Optional

import aiohttp

from .core.config import PublisherConfig
from .core.crypto.key_derivation import MasterSecret
from .core.logging import get_logger, setup_logging
from .core.naming import NAMESPEC_PATH
from .core.packaging import Packager
from .core.pipeline import PipelineOrchestrator
from .core.upload import Uploader, UploadResult

logger = get_logger('pandopub')


class Publisher:
    """
    Async publisher owning the HTTP session for a batch of uploads.
    
    Example:
        >>> config = PublisherConfig.for_endpoint("http://127.0.0.1:8787")
        >>> async with Publisher(config) as publisher:
        ...     results = await publisher.run(secret, "site", mode="wrap")
    """
    
    def __init__(
        self,
        config: Optional[PublisherConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
        packager: Optional[Packager] = None
    ):
        """
        Initialize publisher.
        
        Args:
            config: Publisher configuration (defaults if not provided)
            session: Optional externally owned HTTP session
            packager: Optional packager (built from config if not provided)
        """
        self._config = config or PublisherConfig.default()
        setup_logging(self._config.log_level)
        self._uploader = Uploader(self._config, session=session)
        self._packager = packager or Packager(self._config.archiver)
        self._orchestrator = PipelineOrchestrator(self._uploader, self._packager)
    
    @property
    def config(self) -> PublisherConfig:
        """Get current configuration."""
        return self._config
    
    async def __aenter__(self) -> 'Publisher':
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
    
    async def close(self):
        """Release the HTTP session if owned."""
        await self._uploader.close()
    
    async def run(
        self,
        secret: MasterSecret,
        glob_pattern: str,
        namespec: str = NAMESPEC_PATH,
        published: bool = False,
        mode: Any = None,
        limit: int = -1
    ) -> List[UploadResult]:
        """
        Publish every entry matching ``glob_pattern``.
        
        See PipelineOrchestrator.run for details.
        """
        return await self._orchestrator.run(
            secret, glob_pattern,
            namespec=namespec,
            published=published,
            mode=mode,
            limit=limit
        )


async def run(
    secret: MasterSecret,
    glob_pattern: str,
    namespec: str = NAMESPEC_PATH,
    published: bool = False,
    mode: Any = None,
    limit: int = -1,
    endpoint: Optional[str] = None,
    config: Optional[PublisherConfig] = None
) -> List[UploadResult]:
    """
    One-shot publish with a temporary Publisher.
    
    Args:
        endpoint: Overrides ``config.endpoint`` when given
    """
    config = config or PublisherConfig.default()
    if endpoint:
        config = dataclasses.replace(config, endpoint=endpoint)
    
    async with Publisher(config) as publisher:
        return await publisher.run(
            secret, glob_pattern,
            namespec=namespec,
            published=published,
            mode=mode,
            limit=limit
        )
