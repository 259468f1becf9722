"""Tests for human names and content addresses."""
import pytest

from pandopub.core.crypto import Ed25519Keypair
from pandopub.core.exceptions import UnsupportedNameSpecError
from pandopub.core.naming import (
    content_address,
    encode_base36,
    human_name_from_path,
    peer_id_from_public_key,
)


class TestHumanName:
    """Test suite for human_name_from_path."""
    
    def test_path_namespec(self):
        """Test final path segment is used."""
        assert human_name_from_path('path', 'alex/is/a/test/machine') == 'machine'
    
    def test_extension_kept(self):
        """Test extensions are retained."""
        assert human_name_from_path('path', 'assets/nft/1.json') == '1.json'
    
    def test_trailing_slash(self):
        """Test directories given with a trailing slash keep their name."""
        assert human_name_from_path('path', 'public/site/') == 'site'
    
    def test_unknown_namespec(self):
        """Test unknown namespec raises."""
        with pytest.raises(UnsupportedNameSpecError, match="namespec"):
            human_name_from_path('hash', 'a/b')


class TestContentAddress:
    """Test suite for content_address."""
    
    @pytest.fixture
    def keypair(self):
        return Ed25519Keypair.from_seed(b"\x11" * 32)
    
    def test_deterministic(self, keypair):
        """Test same key gives same address."""
        assert content_address(keypair) == content_address(keypair.marshal_public_key())
    
    def test_base36_libp2p_key(self, keypair):
        """Test address is a lowercase base36 libp2p-key CID."""
        address = content_address(keypair)
        
        assert address.startswith('k51qzi5uqu5')
        assert address == address.lower()
    
    def test_peer_id_is_inlined_ed25519(self, keypair):
        """Test Ed25519 peer IDs use the identity multihash form."""
        assert peer_id_from_public_key(keypair.marshal_public_key()).startswith('12D3KooW')
    
    def test_encode_base36_of_peer_id(self, keypair):
        """Test the two-step path equals content_address."""
        peer_id = peer_id_from_public_key(keypair.marshal_public_key())
        
        assert encode_base36(peer_id) == content_address(keypair)
    
    def test_distinct_keys_distinct_addresses(self, keypair):
        """Test different keys give different addresses."""
        other = Ed25519Keypair.from_seed(b"\x12" * 32)
        
        assert content_address(keypair) != content_address(other)
