"""
Packaging module.

Selects a packaging strategy per item (raw file, DAG archive, directory
archive) and produces reopenable payloads for the uploader.
"""
from .modes import PackagingMode, DEFAULT_MODE, sanitize_mode, is_valid_pairing
from .archive import DagArchiveEncoder, DirectoryArchiver, block_cid, car_header, car_section
from .payload import Payload, PayloadBody, CAR_CONTENT_TYPE, FORM_FIELD
from .packager import Packager, build_payload

__all__ = [
    'PackagingMode',
    'DEFAULT_MODE',
    'sanitize_mode',
    'is_valid_pairing',
    'DagArchiveEncoder',
    'DirectoryArchiver',
    'block_cid',
    'car_header',
    'car_section',
    'Payload',
    'PayloadBody',
    'CAR_CONTENT_TYPE',
    'FORM_FIELD',
    'Packager',
    'build_payload',
]
