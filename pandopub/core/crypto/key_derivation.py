"""Publishing key derivation using Strategy Pattern."""
from abc import ABC, abstractmethod
from typing import Union

from ..exceptions import KeyDerivationError
from ..logging import get_logger
from .encoding import Base64Encoder
from .keys import Ed25519Keypair, generate_keypair_from_seed, unmarshal_private_key

logger = get_logger('pandopub.crypto')

MasterSecret = Union[str, bytes, Ed25519Keypair]


def load_master_key(secret: MasterSecret) -> Ed25519Keypair:
    """
    Decode a master secret into a signing key.
    
    Args:
        secret: Base64 protobuf string, raw protobuf bytes, or an already
            decoded keypair
            
    Raises:
        KeyDerivationError: If the secret cannot be decoded
    """
    if isinstance(secret, Ed25519Keypair):
        return secret
    if isinstance(secret, str):
        try:
            secret = Base64Encoder.decode(secret)
        except ValueError as e:
            raise KeyDerivationError(f"Master secret is not valid base64: {e}") from e
    if not isinstance(secret, (bytes, bytearray)) or not secret:
        raise KeyDerivationError("Master secret is empty")
    return unmarshal_private_key(bytes(secret))


class KeyDeriver(ABC):
    """Abstract base class for per-name key derivation."""
    
    @abstractmethod
    def derive(self, master_key: Ed25519Keypair, name: str) -> Ed25519Keypair:
        """Derives a publishing keypair for a name."""
        pass


class SignatureSeedKeyDeriver(KeyDeriver):
    """
    Derives a keypair by signing the name with the master key.
    
    The first 32 bytes of the signature seed an Ed25519 keypair. Ed25519
    signatures are deterministic, so the same (master key, name) always
    gives the same keypair.
    """
    
    SEED_LENGTH = 32
    
    def __init__(self, algorithm: str = 'ed25519', bitwidth: int = 2048):
        """Initializes the deriver with the generated key algorithm."""
        self.algorithm = algorithm
        self.bitwidth = bitwidth
    
    def derive(self, master_key: Ed25519Keypair, name: str) -> Ed25519Keypair:
        """Derives the publishing keypair for ``name``."""
        signature = master_key.sign(name.encode('utf-8'))
        if len(signature) < self.SEED_LENGTH:
            raise KeyDerivationError(
                f"Signature too short to seed a key: {len(signature)} bytes"
            )
        seed = signature[:self.SEED_LENGTH]
        return generate_keypair_from_seed(self.algorithm, seed, self.bitwidth)


_default_deriver = SignatureSeedKeyDeriver()


def derive_publishing_key(master_secret: MasterSecret, human_name: str) -> Ed25519Keypair:
    """
    Derive the publishing keypair for a human name.
    
    Args:
        master_secret: Master secret (see load_master_key)
        human_name: Human-readable item name
        
    Returns:
        Deterministic Ed25519 keypair
        
    Raises:
        KeyDerivationError: If the secret is unusable
    """
    master_key = load_master_key(master_secret)
    keypair = _default_deriver.derive(master_key, human_name)
    logger.debug(f"Derived publishing key for {human_name!r}")
    return keypair
