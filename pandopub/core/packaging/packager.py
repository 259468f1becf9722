"""
Packager.

Turns (mode, path) into an uploadable Payload, dispatching on the
packaging mode. Temporary archives are created per item and removed on
every failure path before the error propagates.
"""
import asyncio
import os
import tempfile
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional, Union

from ..config import ArchiverConfig
from ..exceptions import InvalidSpecError, PackagingError
from ..logging import get_logger
from .archive import DagArchiveEncoder, DirectoryArchiver
from .modes import PackagingMode, is_valid_pairing, sanitize_mode
from .payload import Payload

logger = get_logger('pandopub.packaging')

TEMP_PREFIX = 'pandopub-'
TEMP_SUFFIX = '.car'


class Packager:
    """
    Builds payloads for each packaging mode.
    
    Uses injected encoders, making it testable without the external
    archiver installed.
    """
    
    def __init__(
        self,
        archiver_config: Optional[ArchiverConfig] = None,
        dag_encoder: Optional[DagArchiveEncoder] = None,
        directory_archiver: Optional[DirectoryArchiver] = None,
        temp_dir: Optional[str] = None
    ):
        """
        Initialize packager.
        
        Args:
            archiver_config: External archiver settings
            dag_encoder: Encoder for ``dag`` mode
            directory_archiver: Archiver for ``dir``/``wrap`` modes
            temp_dir: Directory for temporary archives (system default if None)
        """
        self._dag_encoder = dag_encoder or DagArchiveEncoder()
        self._directory_archiver = directory_archiver or DirectoryArchiver(archiver_config)
        self._temp_dir = temp_dir
        self._builders: Dict[PackagingMode, Callable[[Path], Awaitable[Payload]]] = {
            PackagingMode.DAG: self._build_dag,
            PackagingMode.FILE: self._build_file,
            PackagingMode.DIR: self._build_directory,
            PackagingMode.WRAP: self._build_wrapped_directory,
        }
    
    async def build(self, mode: Union[PackagingMode, str], path: Union[str, Path]) -> Payload:
        """
        Build the payload for one item.
        
        Args:
            mode: Packaging mode (raw values are sanitized)
            path: File or directory to package
            
        Returns:
            Payload; the caller owns it and must release it
            
        Raises:
            InvalidSpecError: If the path does not fit the mode
            PackagingError: If parsing or archiving fails
        """
        mode = sanitize_mode(mode)
        path = Path(path)
        
        if not await is_valid_pairing(mode, path):
            raise InvalidSpecError(
                f"Invalid as/file pairing: {mode.value} {path}",
                path=str(path),
                mode=mode.value
            )
        
        return await self._builders[mode](path)
    
    def _create_temp_file(self) -> Path:
        fd, name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX, dir=self._temp_dir)
        os.close(fd)
        return Path(name)
    
    async def _reserve_temp_file(self) -> Path:
        return await asyncio.to_thread(self._create_temp_file)
    
    async def _build_archive(
        self,
        mode: PackagingMode,
        path: Path,
        encode: Callable[[Path], Awaitable[object]]
    ) -> Payload:
        try:
            temp_path = await self._reserve_temp_file()
        except OSError as e:
            raise PackagingError(f"Cannot create temporary archive: {e}", path=str(path), mode=mode.value) from e
        
        payload = Payload(
            mode=mode,
            source=temp_path,
            filename=f"{path.name}{TEMP_SUFFIX}",
            temp_path=temp_path
        )
        try:
            await encode(temp_path)
        except (OSError, ValueError) as e:
            await payload.release()
            raise PackagingError(f"Cannot archive {path}: {e}", path=str(path), mode=mode.value) from e
        except BaseException:
            await payload.release()
            raise
        
        logger.debug(f"Packed {path} as {mode.value} archive {temp_path}")
        return payload
    
    async def _build_dag(self, path: Path) -> Payload:
        return await self._build_archive(
            PackagingMode.DAG, path,
            lambda output: self._dag_encoder.encode(path, output)
        )
    
    async def _build_file(self, path: Path) -> Payload:
        return Payload(mode=PackagingMode.FILE, source=path, filename=path.name)
    
    async def _build_directory(self, path: Path) -> Payload:
        return await self._build_archive(
            PackagingMode.DIR, path,
            lambda output: self._directory_archiver.encode(path, output, wrap_directory=False)
        )
    
    async def _build_wrapped_directory(self, path: Path) -> Payload:
        return await self._build_archive(
            PackagingMode.WRAP, path,
            lambda output: self._directory_archiver.encode(path, output, wrap_directory=True)
        )


async def build_payload(
    mode: Union[PackagingMode, str],
    path: Union[str, Path],
    archiver_config: Optional[ArchiverConfig] = None
) -> Payload:
    """Build a payload with a default Packager."""
    return await Packager(archiver_config).build(mode, path)
