"""
Name resolution.

Turns filesystem paths into human names and publishing public keys into
stable content addresses (``k51...`` libp2p-key CIDs in base36).
"""
from pathlib import PurePath
from typing import Union

from multiformats import CID, multibase

from .crypto import Ed25519Keypair
from .exceptions import UnsupportedNameSpecError

NAMESPEC_PATH = 'path'

SUPPORTED_NAMESPECS = (NAMESPEC_PATH,)


def human_name_from_path(namespec: str, path: Union[str, PurePath]) -> str:
    """
    Derive the human name of an item.
    
    For ``namespec == "path"`` this is the final path segment, extension
    included: ``alex/is/a/test/machine`` -> ``machine``.
    
    Raises:
        UnsupportedNameSpecError: For any other namespec
    """
    if namespec == NAMESPEC_PATH:
        return PurePath(path).name
    raise UnsupportedNameSpecError(
        f"Unexpected namespec {namespec!r}. Should be 'path'.",
        path=str(path)
    )


def peer_id_from_public_key(public_key: bytes) -> str:
    """
    Peer identifier for a protobuf-encoded public key.
    
    Short keys are inlined with the identity hash, longer ones hashed with
    sha2-256; the multihash is rendered in bare base58btc (``12D3Koo...``).
    """
    cid = CID.peer_id(public_key)
    return multibase.encode(cid.digest, 'base58btc')[1:]


def encode_base36(peer_id: str) -> str:
    """Render a base58btc peer identifier as a base36 libp2p-key CID."""
    multihash_bytes = multibase.decode('z' + peer_id)
    return CID('base36', 1, 'libp2p-key', multihash_bytes).encode()


def content_address(public_key: Union[bytes, Ed25519Keypair]) -> str:
    """
    Stable content address for a publishing public key.
    
    Args:
        public_key: Protobuf-encoded public key, or the keypair itself
    """
    if isinstance(public_key, Ed25519Keypair):
        public_key = public_key.marshal_public_key()
    return encode_base36(peer_id_from_public_key(public_key))
