"""Crypto module: key envelopes and publishing key derivation."""
from .encoding import Base64Encoder
from .keys import (
    KeyType,
    Ed25519Keypair,
    encode_key_envelope,
    decode_key_envelope,
    unmarshal_private_key,
    marshal_public_key,
    generate_keypair_from_seed,
)
from .key_derivation import (
    KeyDeriver,
    SignatureSeedKeyDeriver,
    load_master_key,
    derive_publishing_key,
)

__all__ = [
    'Base64Encoder',
    'KeyType',
    'Ed25519Keypair',
    'encode_key_envelope',
    'decode_key_envelope',
    'unmarshal_private_key',
    'marshal_public_key',
    'generate_keypair_from_seed',
    'KeyDeriver',
    'SignatureSeedKeyDeriver',
    'load_master_key',
    'derive_publishing_key',
]
