"""
pandopub - Deterministic content publishing for the Pando content API.

Usage:
    >>> from pandopub import Publisher
    >>> 
    >>> async with Publisher() as publisher:
    ...     results = await publisher.run(secret, "assets/*.json")
    ...     for result in results:
    ...         print(result.content_address, result.to_dict())
"""
from .publisher import Publisher, run
from .core.logging import setup_logging

# Configuration
from .core.config import (
    PublisherConfig,
    RetryConfig,
    TimeoutConfig,
    SSLConfig,
    ArchiverConfig
)

# Building blocks
from .core.crypto import Ed25519Keypair, derive_publishing_key, load_master_key
from .core.naming import human_name_from_path, content_address, peer_id_from_public_key
from .core.packaging import PackagingMode, sanitize_mode, is_valid_pairing, build_payload
from .core.upload import UploadResult

# Errors
from .core.exceptions import (
    PublishError,
    KeyDerivationError,
    UnsupportedNameSpecError,
    InvalidSpecError,
    PackagingError,
    UploadError,
    ResourceError
)

__version__ = '1.0.0'


__all__ = [
    'Publisher',
    'run',
    'PublisherConfig',
    'RetryConfig',
    'TimeoutConfig',
    'SSLConfig',
    'ArchiverConfig',
    'Ed25519Keypair',
    'derive_publishing_key',
    'load_master_key',
    'human_name_from_path',
    'content_address',
    'peer_id_from_public_key',
    'PackagingMode',
    'sanitize_mode',
    'is_valid_pairing',
    'build_payload',
    'UploadResult',
    'PublishError',
    'KeyDerivationError',
    'UnsupportedNameSpecError',
    'InvalidSpecError',
    'PackagingError',
    'UploadError',
    'ResourceError',
    'setup_logging',
]
