"""Tests for archive encoders."""
import asyncio
import json
from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

import dag_cbor
import pytest

from pandopub.core.config import ArchiverConfig
from pandopub.core.exceptions import PackagingError
from pandopub.core.packaging import DagArchiveEncoder, DirectoryArchiver, block_cid


def read_varint(data: bytes, offset: int):
    value, shift = 0, 0
    while True:
        byte = data[offset]
        offset += 1
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, offset
        shift += 7


class TestDagArchiveEncoder:
    """Test suite for DagArchiveEncoder."""
    
    @pytest.fixture
    def encoder(self):
        return DagArchiveEncoder()
    
    @pytest.mark.asyncio
    async def test_car_layout(self, encoder, json_file, tmp_path):
        """Test the archive is a one-block CARv1 rooted at the document."""
        output = tmp_path / 'out.car'
        root = await encoder.encode(json_file, output)
        data = output.read_bytes()
        
        header_len, offset = read_varint(data, 0)
        header = dag_cbor.decode(data[offset:offset + header_len])
        offset += header_len
        
        assert header['version'] == 1
        assert [bytes(cid) for cid in header['roots']] == [bytes(root)]
        
        section_len, offset = read_varint(data, offset)
        section = data[offset:offset + section_len]
        cid_bytes = bytes(root)
        
        assert offset + section_len == len(data)
        assert section[:len(cid_bytes)] == cid_bytes
        assert dag_cbor.decode(section[len(cid_bytes):]) == json.loads(json_file.read_text())
    
    @pytest.mark.asyncio
    async def test_root_is_content_addressed(self, encoder, json_file, tmp_path):
        """Test the root CID depends only on the document."""
        first = await encoder.encode(json_file, tmp_path / 'a.car')
        copy = tmp_path / 'copy.json'
        copy.write_text(json.dumps(json.loads(json_file.read_text()), indent=4))
        second = await encoder.encode(copy, tmp_path / 'b.car')
        
        assert bytes(first) == bytes(second)
    
    def test_block_cid_codec(self, encoder):
        """Test block CIDs are dag-cbor sha2-256."""
        cid, block = encoder.encode_block({'a': 1})
        
        assert cid.codec.name == 'dag-cbor'
        assert bytes(cid) == bytes(block_cid(block))
    
    def test_parse_invalid_json(self, encoder):
        """Test invalid JSON raises PackagingError."""
        with pytest.raises(PackagingError, match="parse"):
            encoder.parse(b"{not json", source='x.json')
    
    @pytest.mark.asyncio
    async def test_encode_invalid_json(self, encoder, tmp_path):
        """Test encoding a non-JSON file raises PackagingError."""
        source = tmp_path / 'image.car'
        source.write_bytes(b"\x00\x01\x02binary")
        
        with pytest.raises(PackagingError) as exc_info:
            await encoder.encode(source, tmp_path / 'out.car')
        
        assert exc_info.value.path == str(source)
        assert exc_info.value.mode == 'dag'


class TestDirectoryArchiver:
    """Test suite for DirectoryArchiver."""
    
    def test_command_dir(self):
        """Test dir mode disables wrapping."""
        archiver = DirectoryArchiver(ArchiverConfig(command=('npx', 'ipfs-car')))
        command = archiver.build_command(Path('site'), Path('/tmp/out.car'), wrap_directory=False)
        
        assert command == ('npx', 'ipfs-car', 'pack', 'site', '--output', '/tmp/out.car', '--no-wrap')
    
    def test_command_wrap(self):
        """Test wrap mode keeps the default wrapping directory."""
        archiver = DirectoryArchiver()
        command = archiver.build_command(Path('site'), Path('out.car'), wrap_directory=True)
        
        assert command == ('ipfs-car', 'pack', 'site', '--output', 'out.car')
    
    @pytest.mark.asyncio
    async def test_missing_executable(self, content_dir, tmp_path):
        """Test a missing archiver raises PackagingError."""
        archiver = DirectoryArchiver(ArchiverConfig(command=('pandopub-no-such-archiver',)))
        
        with pytest.raises(PackagingError, match="Cannot start archiver"):
            await archiver.encode(content_dir, tmp_path / 'out.car')
    
    @pytest.mark.asyncio
    async def test_non_zero_exit(self, content_dir, tmp_path):
        """Test a failing archiver raises PackagingError with stderr."""
        process = Mock()
        process.returncode = 2
        process.communicate = AsyncMock(return_value=(b"", b"boom"))
        
        with patch('asyncio.create_subprocess_exec', AsyncMock(return_value=process)):
            with pytest.raises(PackagingError, match="boom") as exc_info:
                await DirectoryArchiver().encode(content_dir, tmp_path / 'out.car', wrap_directory=True)
        
        assert exc_info.value.mode == 'wrap'
    
    @pytest.mark.asyncio
    async def test_success(self, content_dir, tmp_path):
        """Test a zero exit completes."""
        process = Mock()
        process.returncode = 0
        process.communicate = AsyncMock(return_value=(b"bafy...", b""))
        
        with patch('asyncio.create_subprocess_exec', AsyncMock(return_value=process)) as create:
            await DirectoryArchiver().encode(content_dir, tmp_path / 'out.car')
        
        args = create.call_args.args
        assert args[:3] == ('ipfs-car', 'pack', str(content_dir))
        assert '--no-wrap' in args
    
    @pytest.mark.asyncio
    async def test_cancelled_archiver_is_killed(self, content_dir, tmp_path):
        """Test cancelling an item kills and reaps the archiver process."""
        process = Mock()
        process.communicate = AsyncMock(side_effect=asyncio.CancelledError())
        process.wait = AsyncMock(return_value=-9)
        
        with patch('asyncio.create_subprocess_exec', AsyncMock(return_value=process)):
            with pytest.raises(asyncio.CancelledError):
                await DirectoryArchiver().encode(content_dir, tmp_path / 'out.car')
        
        process.kill.assert_called_once_with()
        process.wait.assert_awaited_once()
