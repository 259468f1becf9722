"""
Content-addressed archive encoders.

Both encoders write a CARv1 file to a path chosen by the caller:

- DagArchiveEncoder encodes a JSON-like document as a single DAG-CBOR block.
- DirectoryArchiver shells out to the ``ipfs-car`` tool to pack a tree.
"""
import asyncio
import json
from pathlib import Path
from typing import Any, Optional, Tuple, Union

import aiofiles
import dag_cbor
from multiformats import CID, multihash, varint

from ..config import ArchiverConfig
from ..exceptions import PackagingError
from ..logging import get_logger

logger = get_logger('pandopub.packaging')

CAR_VERSION = 1


def block_cid(block: bytes, codec: str = 'dag-cbor') -> CID:
    """CIDv1 of an encoded block (sha2-256)."""
    return CID('base32', 1, codec, multihash.digest(block, 'sha2-256'))


def car_header(root: CID) -> bytes:
    """Length-prefixed CARv1 header naming a single root."""
    header = dag_cbor.encode({'roots': [root], 'version': CAR_VERSION})
    return varint.encode(len(header)) + header


def car_section(cid: CID, block: bytes) -> bytes:
    """Length-prefixed CARv1 block section."""
    cid_bytes = bytes(cid)
    return varint.encode(len(cid_bytes) + len(block)) + cid_bytes + block


class DagArchiveEncoder:
    """
    Encodes a structured document into a one-block CAR file.
    """
    
    def parse(self, text: Union[str, bytes], source: Optional[str] = None) -> Any:
        """
        Parse a JSON document.
        
        Raises:
            PackagingError: If the document is not valid JSON
        """
        try:
            return json.loads(text)
        except (ValueError, UnicodeDecodeError) as e:
            raise PackagingError(f"Cannot parse document: {e}", path=source, mode='dag') from e
    
    def encode_block(self, document: Any, source: Optional[str] = None) -> Tuple[CID, bytes]:
        """
        Encode a document as a DAG-CBOR block.
        
        Returns:
            Tuple of (block CID, block bytes)
        """
        try:
            block = dag_cbor.encode(document)
        except Exception as e:
            raise PackagingError(f"Cannot encode document as DAG-CBOR: {e}", path=source, mode='dag') from e
        return block_cid(block), block
    
    async def encode(self, source: Path, output: Path) -> CID:
        """
        Read, parse and archive the JSON document at ``source`` into ``output``.
        
        Returns:
            Root CID of the archive
        """
        async with aiofiles.open(source, 'rb') as f:
            text = await f.read()
        
        document = self.parse(text, str(source))
        root, block = self.encode_block(document, str(source))
        
        async with aiofiles.open(output, 'wb') as f:
            await f.write(car_header(root))
            await f.write(car_section(root, block))
        
        logger.debug(f"Encoded {source} as DAG-CBOR archive {root} ({len(block)} bytes)")
        return root


class DirectoryArchiver:
    """
    Packs a directory tree into a CAR file using the external ``ipfs-car`` tool.
    """
    
    def __init__(self, config: Optional[ArchiverConfig] = None):
        """
        Initialize the archiver.
        
        Args:
            config: Executable and extra arguments to use
        """
        self._config = config or ArchiverConfig()
    
    def build_command(self, source: Path, output: Path, wrap_directory: bool) -> Tuple[str, ...]:
        """Build the archiver argv."""
        args = [*self._config.command, 'pack', str(source), '--output', str(output)]
        if not wrap_directory:
            args.append('--no-wrap')
        args.extend(self._config.extra_args)
        return tuple(args)
    
    async def encode(self, source: Path, output: Path, wrap_directory: bool = False) -> None:
        """
        Pack ``source`` into ``output``.
        
        Raises:
            PackagingError: If the tool is missing or exits non-zero
        """
        mode = 'wrap' if wrap_directory else 'dir'
        command = self.build_command(source, output, wrap_directory)
        logger.debug(f"Running archiver: {' '.join(command)}")
        
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        except OSError as e:
            raise PackagingError(f"Cannot start archiver {command[0]!r}: {e}", path=str(source), mode=mode) from e
        
        try:
            _, stderr = await process.communicate()
        except BaseException:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
            raise

        if process.returncode != 0:
            message = stderr.decode(errors='replace').strip()
            raise PackagingError(
                f"Archiver exited with status {process.returncode}: {message}",
                path=str(source),
                mode=mode
            )
