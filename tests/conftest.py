"""Pytest fixtures for pandopub tests."""
import asyncio
import json
from typing import Any, Callable, Dict, List, Optional

import pytest

from pandopub.core.config import PublisherConfig, RetryConfig

# Base64 protobuf Ed25519 key, as stored in a workflow secret
TEST_SECRET = 'CAESQNCzosaz9m4t4MQgFEuHIjicXYOLhk5Ee+/i4+AisAqR1VMaS460TQzZND3dtS0aS4f6qTYnryAWcWJfYlXWFlM='
TEST_HUMAN_NAME = 'my_content.jpg'
TEST_CONTENT_ADDRESS = 'k51qzi5uqu5dgthudpht2my9zr9v80xyz9c41fylhm9kzu8rj8jt8w3ivs0d5g'


class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse."""
    
    def __init__(self, status: int = 200, body: Any = None, delay: float = 0):
        self.status = status
        self._body = body if isinstance(body, str) else json.dumps(body if body is not None else {'cid': 'bafytest'})
        self._delay = delay
    
    async def text(self) -> str:
        return self._body


class _FakeRequest:
    def __init__(self, session: 'FakeSession', call: Dict[str, Any]):
        self._session = session
        self._call = call
    
    async def __aenter__(self) -> FakeResponse:
        data = self._call['data']
        if hasattr(data, '__aiter__'):
            chunks = []
            async for chunk in data:
                chunks.append(chunk)
            self._call['body'] = b''.join(chunks)
        outcome = self._session.handler(self._call)
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome._delay:
            await asyncio.sleep(outcome._delay)
        return outcome
    
    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """
    Records POSTs and answers them through ``handler(call)``.
    
    The handler returns a FakeResponse or an exception instance to raise.
    """
    
    def __init__(self, handler: Optional[Callable[[Dict[str, Any]], Any]] = None):
        self.handler = handler or (lambda call: FakeResponse())
        self.calls: List[Dict[str, Any]] = []
        self.closed = False
    
    def post(self, url, data=None, headers=None, **kwargs):
        call = {'url': url, 'data': data, 'headers': dict(headers or {}), 'body': None}
        self.calls.append(call)
        return _FakeRequest(self, call)
    
    async def close(self):
        self.closed = True


@pytest.fixture
def secret():
    """Returns the test master secret."""
    return TEST_SECRET


@pytest.fixture
def fast_config():
    """Config with no delay between retries."""
    return PublisherConfig(
        endpoint='https://api.example.test',
        retry=RetryConfig(attempts=3, delay=0)
    )


@pytest.fixture
def fake_session():
    """Returns a session answering every POST with a JSON ack."""
    return FakeSession()


@pytest.fixture
def json_file(tmp_path):
    """Creates a small JSON document."""
    path = tmp_path / 'doc.json'
    path.write_text(json.dumps({'name': 'unrevealed', 'attributes': [1, 2, 3]}))
    return path


@pytest.fixture
def content_dir(tmp_path):
    """Creates a directory with a couple of files."""
    path = tmp_path / 'site'
    path.mkdir()
    (path / 'index.html').write_text('<h1>hello</h1>')
    (path / 'style.css').write_text('h1 { color: red; }')
    return path


@pytest.fixture
def archive_tmp(tmp_path):
    """Directory that receives temporary archives."""
    path = tmp_path / 'archives'
    path.mkdir()
    return path


@pytest.fixture
def known_vector():
    """Returns (human name, expected content address) for TEST_SECRET."""
    return TEST_HUMAN_NAME, TEST_CONTENT_ADDRESS


@pytest.fixture
def make_session():
    """Returns the FakeSession factory."""
    return FakeSession


@pytest.fixture
def make_response():
    """Returns the FakeResponse factory."""
    return FakeResponse
