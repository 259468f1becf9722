"""
Uploadable payloads.

A payload is a file on disk plus the knowledge of how to stream it. It can
be opened once per HTTP attempt; each opening owns its own descriptor,
closed when that attempt ends. Temporary archives are removed on release.
"""
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Optional

import aiofiles
import aiofiles.os
import aiohttp

from ..exceptions import PackagingError, ResourceError
from ..logging import get_logger
from .modes import PackagingMode

logger = get_logger('pandopub.packaging')

CAR_CONTENT_TYPE = 'application/vnd.ipld.car'
FORM_FIELD = 'data'


@dataclass
class PayloadBody:
    """An opened payload: request body plus its content headers."""
    body: Any
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class Payload:
    """
    Packaged content ready for upload.

    Attributes:
        mode: Packaging mode that produced it
        source: File whose bytes are sent (original file or archive)
        filename: Name advertised in multipart envelopes
        temp_path: Temporary archive owned by this payload, if any
    """
    mode: PackagingMode
    source: Path
    filename: str
    temp_path: Optional[Path] = None
    chunk_size: int = 64 * 1024
    open_handles: int = 0
    released: bool = False

    @property
    def is_multipart(self) -> bool:
        return self.mode.is_multipart

    async def _read_chunks(self, handle) -> AsyncIterator[bytes]:
        while True:
            chunk = await handle.read(self.chunk_size)
            if not chunk:
                break
            yield chunk

    @asynccontextmanager
    async def open(self) -> AsyncIterator[PayloadBody]:
        """
        Open a fresh body for one request attempt.

        Yields:
            PayloadBody with a streaming body and its content headers
        """
        if self.released:
            raise PackagingError(f"Payload for {self.source} was already released", mode=self.mode.value)

        handle = await aiofiles.open(self.source, 'rb')
        self.open_handles += 1
        stream = self._read_chunks(handle)
        try:
            if self.is_multipart:
                writer = aiohttp.MultipartWriter('form-data')
                part = writer.append(stream, {'Content-Type': 'application/octet-stream'})
                part.set_content_disposition('form-data', name=FORM_FIELD, filename=self.filename)
                yield PayloadBody(writer, {'Content-Type': writer.content_type})
            else:
                yield PayloadBody(stream, {'Content-Type': CAR_CONTENT_TYPE})
        finally:
            await stream.aclose()
            await handle.close()
            self.open_handles -= 1

    async def release(self) -> None:
        """
        Remove the temporary archive, if this payload owns one.

        Cleanup failures are logged, never raised, so they cannot mask the
        error that ended the item.
        """
        if self.released:
            return
        self.released = True
        if self.temp_path is None:
            return

        try:
            await aiofiles.os.remove(self.temp_path)
            logger.debug(f"Removed temporary archive {self.temp_path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            error = ResourceError(
                f"Cannot remove temporary archive {self.temp_path}: {e}",
                path=str(self.temp_path),
                mode=self.mode.value
            )
            logger.warning(str(error))

    async def __aenter__(self) -> 'Payload':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.release()
