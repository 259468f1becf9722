"""
Packaging modes and mode/path validation.
"""
import stat
from enum import Enum
from typing import Any, Optional

import aiofiles.os


class PackagingMode(str, Enum):
    """
    How an item is packaged before upload.
    
    - DAG: JSON document encoded as DAG-CBOR inside a CAR archive
    - FILE: raw file inside a multipart envelope
    - DIR: directory tree packed into a CAR archive
    - WRAP: like DIR, nested under one extra top-level directory node
    """
    DAG = 'dag'
    FILE = 'file'
    DIR = 'dir'
    WRAP = 'wrap'
    
    @property
    def expects_directory(self) -> bool:
        """True when the mode packs a directory rather than a file."""
        return self in (PackagingMode.DIR, PackagingMode.WRAP)
    
    @property
    def is_multipart(self) -> bool:
        """True when the payload is sent as multipart form data."""
        return self is PackagingMode.FILE


DEFAULT_MODE = PackagingMode.DAG


def sanitize_mode(raw: Optional[Any]) -> PackagingMode:
    """
    Normalize a raw ``as`` value.
    
    Exact matches of ``dag``, ``file``, ``dir`` and ``wrap`` pass through;
    anything else (empty, None, unknown) becomes ``dag``.
    """
    if isinstance(raw, PackagingMode):
        return raw
    if not isinstance(raw, str):
        return DEFAULT_MODE
    try:
        return PackagingMode(raw)
    except ValueError:
        return DEFAULT_MODE


async def is_valid_pairing(mode: Any, path: Any) -> bool:
    """
    Check that ``path`` is the kind of entry ``mode`` packages.
    
    Never raises: a missing or unreadable path is simply invalid. The path
    itself is inspected (symlinks are not followed), and only exact mode
    values are accepted; sanitize first to apply the ``dag`` default.
    """
    if isinstance(mode, PackagingMode):
        mode = mode.value
    try:
        st = await aiofiles.os.stat(path, follow_symlinks=False)
    except (OSError, TypeError, ValueError):
        return False
    
    valid_file = mode in ('dag', 'file') and stat.S_ISREG(st.st_mode)
    valid_dir = mode in ('dir', 'wrap') and stat.S_ISDIR(st.st_mode)
    return valid_file or valid_dir
