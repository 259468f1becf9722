"""
Libp2p-style Ed25519 keys.

Keys travel as the libp2p protobuf envelope::

    message PrivateKey { KeyType Type = 1; bytes Data = 2; }
    message PublicKey  { KeyType Type = 1; bytes Data = 2; }

For Ed25519 the private ``Data`` is ``seed || public`` (64 bytes) and the
public ``Data`` is the raw 32-byte point.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Optional, Tuple

from Crypto.Signature import eddsa
from multiformats import varint

from ..exceptions import KeyDerivationError

ED25519_SEED_LEN = 32
ED25519_PUB_LEN = 32
ED25519_SIG_LEN = 64


class KeyType(IntEnum):
    """Libp2p key types."""
    RSA = 0
    ED25519 = 1
    SECP256K1 = 2
    ECDSA = 3


def _read_varint(data: bytes, offset: int) -> Tuple[int, int]:
    """Read one varint at ``offset``; return (value, next offset)."""
    try:
        value, size, _ = varint.decode_raw(data[offset:])
    except (ValueError, IndexError) as e:
        raise ValueError(f"Malformed varint at offset {offset}: {e}") from e
    return value, offset + size


def encode_key_envelope(key_type: KeyType, data: bytes) -> bytes:
    """Encode a key as a libp2p protobuf envelope."""
    return (
        b'\x08' + varint.encode(int(key_type))
        + b'\x12' + varint.encode(len(data)) + data
    )


def decode_key_envelope(envelope: bytes) -> Tuple[int, bytes]:
    """
    Decode a libp2p protobuf key envelope.
    
    Returns:
        Tuple of (key type, key data)
        
    Raises:
        ValueError: If the envelope is malformed
    """
    fields: Dict[int, object] = {}
    offset = 0
    while offset < len(envelope):
        tag, offset = _read_varint(envelope, offset)
        field_number, wire_type = tag >> 3, tag & 0x07
        if wire_type == 0:
            value, offset = _read_varint(envelope, offset)
        elif wire_type == 2:
            length, offset = _read_varint(envelope, offset)
            if offset + length > len(envelope):
                raise ValueError("Truncated length-delimited field")
            value = envelope[offset:offset + length]
            offset += length
        else:
            raise ValueError(f"Unsupported wire type {wire_type}")
        fields[field_number] = value
    
    if 1 not in fields or 2 not in fields:
        raise ValueError("Key envelope is missing Type or Data")
    return fields[1], fields[2]


@dataclass(frozen=True)
class Ed25519Keypair:
    """An Ed25519 keypair identified by its 32-byte seed."""
    seed: bytes
    public_key: bytes
    
    @classmethod
    def from_seed(cls, seed: bytes) -> 'Ed25519Keypair':
        """Deterministically build a keypair from a 32-byte seed."""
        if len(seed) != ED25519_SEED_LEN:
            raise KeyDerivationError(
                f"Ed25519 seed must be {ED25519_SEED_LEN} bytes, got {len(seed)}"
            )
        key = eddsa.import_private_key(seed)
        public = key.public_key().export_key(format='raw')
        return cls(seed=bytes(seed), public_key=bytes(public))
    
    def sign(self, message: bytes) -> bytes:
        """Sign a message (pure Ed25519, deterministic)."""
        key = eddsa.import_private_key(self.seed)
        return eddsa.new(key, 'rfc8032').sign(message)
    
    def marshal_public_key(self) -> bytes:
        """Protobuf-encoded public key."""
        return encode_key_envelope(KeyType.ED25519, self.public_key)
    
    def marshal_private_key(self) -> bytes:
        """Protobuf-encoded private key (seed || public)."""
        return encode_key_envelope(KeyType.ED25519, self.seed + self.public_key)


def unmarshal_private_key(envelope: bytes) -> Ed25519Keypair:
    """
    Decode a protobuf private key.
    
    Raises:
        KeyDerivationError: If the envelope is malformed or not Ed25519
    """
    try:
        key_type, data = decode_key_envelope(envelope)
    except ValueError as e:
        raise KeyDerivationError(f"Cannot decode private key: {e}") from e
    
    if key_type != KeyType.ED25519:
        raise KeyDerivationError(f"Unsupported key type {key_type}, expected Ed25519")
    # Older encoders append the public key twice (96 bytes)
    if len(data) not in (64, 96):
        raise KeyDerivationError(f"Invalid Ed25519 private key length {len(data)}")
    
    return Ed25519Keypair.from_seed(data[:ED25519_SEED_LEN])


def marshal_public_key(keypair: Ed25519Keypair) -> bytes:
    """Protobuf-encoded public half of a keypair."""
    return keypair.marshal_public_key()


def generate_keypair_from_seed(
    algorithm: str,
    seed: bytes,
    bitwidth: Optional[int] = None
) -> Ed25519Keypair:
    """
    Generate a keypair from a seed with an explicit algorithm.
    
    ``bitwidth`` is accepted for interface parity and ignored for Ed25519.
    """
    if algorithm.lower() != 'ed25519':
        raise KeyDerivationError(f"Unsupported key algorithm: {algorithm}")
    return Ed25519Keypair.from_seed(seed)
