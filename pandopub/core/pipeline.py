"""
Pipeline orchestrator.

Expands a glob into an ordered file list, publishes every entry
concurrently and collects the results in input order. Each item runs
inside its own error boundary: a failing item becomes a failed result and
never cancels its siblings.
"""
import asyncio
import glob
from typing import Any, List, Optional

from .crypto import Ed25519Keypair, derive_publishing_key, load_master_key
from .crypto.key_derivation import MasterSecret
from .exceptions import PublishError
from .logging import get_logger
from .naming import NAMESPEC_PATH, content_address, human_name_from_path
from .packaging import Packager, Payload, sanitize_mode
from .upload import PublishMetadata, UploadItem, UploadResult, Uploader

logger = get_logger('pandopub.pipeline')


async def expand_glob(pattern: str, limit: int = -1) -> List[str]:
    """
    Expand a glob pattern into a sorted file list.

    Args:
        pattern: Glob pattern (``**`` matches recursively)
        limit: Keep only the first ``limit`` entries when ``limit >= 0``

    Raises:
        PublishError: If the pattern is empty
    """
    if not pattern:
        raise PublishError("Glob pattern must not be empty")

    files = await asyncio.to_thread(glob.glob, pattern, recursive=True)
    files = sorted(files)
    if limit is not None and limit >= 0:
        files = files[:limit]
    return files


class PipelineOrchestrator:
    """
    Coordinates the publishing of a batch of files.

    Uses dependency injection for the packager and uploader, making it:
    - Testable (mock dependencies)
    - Extensible (swap archive encoders or transports)
    """

    def __init__(self, uploader: Uploader, packager: Optional[Packager] = None):
        """
        Initialize orchestrator.

        Args:
            uploader: Uploader used for every item
            packager: Packager used for every item
        """
        self._uploader = uploader
        self._packager = packager or Packager()

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
        Publish every file matching ``glob_pattern``.

        Args:
            secret: Master secret (base64 protobuf private key)
            glob_pattern: Files or directories to publish
            namespec: How human names are derived
            published: Value of the ``published`` metadata flag
            mode: Raw packaging mode (sanitized, default ``dag``)
            limit: Maximum number of entries, negative for all

        Returns:
            One result per processed entry, in glob order

        Raises:
            KeyDerivationError: If the master secret cannot be decoded
            PublishError: If the glob pattern is unusable
        """
        master_key = load_master_key(secret)
        files = await expand_glob(glob_pattern, limit)
        logger.info(f"Publishing {len(files)} item(s) matching {glob_pattern!r}")

        tasks = [
            self.publish_item(master_key, path, namespec, published, mode)
            for path in files
        ]
        results = await asyncio.gather(*tasks)

        failed = sum(1 for result in results if not result.ok)
        if failed:
            logger.warning(f"{failed} of {len(results)} item(s) failed")
        else:
            logger.info(f"All {len(results)} item(s) published")
        return list(results)

    async def publish_item(
        self,
        master_key: Ed25519Keypair,
        path: str,
        namespec: str,
        published: bool,
        mode: Any
    ) -> UploadResult:
        """
        Publish one entry; never raises except on cancellation.
        """
        mode = sanitize_mode(mode)
        result = UploadResult(path=path, mode=mode)
        payload: Optional[Payload] = None

        try:
            human_name = human_name_from_path(namespec, path)
            result.human_name = human_name

            keypair = derive_publishing_key(master_key, human_name)
            result.content_address = content_address(keypair)

            payload = await self._packager.build(mode, path)
            item = UploadItem(
                path=path,
                human_name=human_name,
                mode=mode,
                keypair=keypair,
                content_address=result.content_address,
                metadata=PublishMetadata(published, human_name, path, mode),
                payload=payload
            )
            result.response = await self._uploader.upload(item)
        except PublishError as e:
            if e.path is None:
                e.path = path
            if e.mode is None:
                e.mode = mode.value
            result.error = e
        except Exception as e:
            result.error = PublishError(f"Unexpected error: {e}", path=path, mode=mode.value)
            result.error.__cause__ = e
        finally:
            if payload is not None:
                await payload.release()

        if result.error is not None:
            url = getattr(result.error, 'url', None)
            logger.error(
                f"Failed to publish {path} (as={mode.value}, url={url}): {result.error}"
            )
        return result
