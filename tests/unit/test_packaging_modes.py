"""Tests for packaging modes and mode/path validation."""
import pytest

from pandopub.core.packaging import PackagingMode, is_valid_pairing, sanitize_mode


class TestSanitizeMode:
    """Test suite for sanitize_mode."""
    
    @pytest.mark.parametrize("raw", ['dag', 'file', 'dir', 'wrap'])
    def test_known_modes_pass_through(self, raw):
        """Test valid modes are kept."""
        assert sanitize_mode(raw).value == raw
    
    @pytest.mark.parametrize("raw", ['this_is_a_bad_as_parameter', '', None, 'DAG', 'dags', ' file'])
    def test_others_default_to_dag(self, raw):
        """Test anything else becomes dag."""
        assert sanitize_mode(raw) is PackagingMode.DAG
    
    def test_enum_pass_through(self):
        """Test enum members are returned unchanged."""
        assert sanitize_mode(PackagingMode.WRAP) is PackagingMode.WRAP


class TestIsValidPairing:
    """Test suite for is_valid_pairing."""
    
    @pytest.fixture
    def regular_file(self, tmp_path):
        path = tmp_path / 'test.js'
        path.write_text('// test')
        return path
    
    @pytest.fixture
    def directory(self, tmp_path):
        path = tmp_path / 'fixtures'
        path.mkdir()
        return path
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode,expected", [
        ('dag', True), ('file', True), ('dir', False), ('wrap', False),
    ])
    async def test_against_file(self, regular_file, mode, expected):
        """Test file modes accept regular files."""
        assert await is_valid_pairing(mode, regular_file) is expected
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode,expected", [
        ('dag', False), ('file', False), ('dir', True), ('wrap', True),
    ])
    async def test_against_directory(self, directory, mode, expected):
        """Test directory modes accept directories."""
        assert await is_valid_pairing(mode, directory) is expected
    
    @pytest.mark.asyncio
    async def test_enum_modes(self, regular_file, directory):
        """Test enum members behave like their values."""
        assert await is_valid_pairing(PackagingMode.FILE, regular_file)
        assert await is_valid_pairing(PackagingMode.WRAP, directory)
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ['', None, '/nonexistent/path/for/test'])
    async def test_bad_paths(self, path):
        """Test unusable paths are invalid, not errors."""
        for mode in ('dag', 'file', 'dir', 'wrap'):
            assert await is_valid_pairing(mode, path) is False
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode", ['this_is_not_a_valid_as_spec', None])
    async def test_bad_modes(self, mode, regular_file, directory):
        """Test unknown raw modes are invalid."""
        assert await is_valid_pairing(mode, regular_file) is False
        assert await is_valid_pairing(mode, directory) is False
    
    @pytest.mark.asyncio
    async def test_symlink_not_followed(self, regular_file, tmp_path):
        """Test a symlink to a file is not a regular file."""
        link = tmp_path / 'link.js'
        link.symlink_to(regular_file)
        
        assert await is_valid_pairing('file', link) is False
