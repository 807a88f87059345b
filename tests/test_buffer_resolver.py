"""Buffer payload resolution: source priority, traversal guard, quotas."""

import io

import pytest

from gltfcodec.constants import READ_BLOCK_SIZE
from gltfcodec.errors import (
    E_QUOTA_ALLOCATION,
    E_RES_DATA_URI,
    E_RES_NO_CHUNK,
    E_RES_NO_URI,
    E_RES_READ,
    E_RES_SIZE_MISMATCH,
    E_RES_TRAVERSAL,
    E_RES_ZERO_LENGTH,
    QuotaExceeded,
    ResourceError,
)
from gltfcodec.model import Buffer, encode_data_uri
from gltfcodec.quotas import QuotaEnforcer, ReadQuotas
from gltfcodec.resolver import BufferResolver, check_relative_uri


class _Files:
    """In-memory read capability recording the URIs it was asked for."""

    def __init__(self, files=None):
        self.files = files or {}
        self.calls = []

    def __call__(self, uri):
        self.calls.append(uri)
        if uri not in self.files:
            raise FileNotFoundError(uri)
        return io.BytesIO(self.files[uri])


def _never_called(uri):
    raise AssertionError(f"read capability called for {uri!r}")


def _resolver(handler=None, quotas=None) -> BufferResolver:
    return BufferResolver(QuotaEnforcer(quotas or ReadQuotas()), handler)


def _resource_code(resolver, buffer, **kw) -> str:
    with pytest.raises(ResourceError) as ei:
        resolver.resolve(buffer, 0, **kw)
    return ei.value.code


def test_zero_length_fails():
    buf = Buffer(byte_length=0, uri="a.bin")
    assert _resource_code(_resolver(_never_called), buf) == E_RES_ZERO_LENGTH


@pytest.mark.parametrize(
    "uri",
    [
        "../secret.bin",
        "a/../../b.bin",
        "%2e%2e/secret.bin",
        "a/%2E%2E/%2e%2e/b.bin",
        "..\\secret.bin",
        "/etc/passwd",
        "C:/data.bin",
        "file:///etc/passwd",
        "http://example.com/a.bin",
    ],
)
def test_traversal_rejected_before_read(uri):
    buf = Buffer(byte_length=4, uri=uri)
    assert _resource_code(_resolver(_never_called), buf) == E_RES_TRAVERSAL


@pytest.mark.parametrize("uri", ["a.bin", "sub/dir/a.bin", "my%20file.bin", "a..b.bin"])
def test_relative_uris_accepted(uri):
    assert check_relative_uri(uri)


def test_quota_checked_before_external_read():
    buf = Buffer(byte_length=3, uri="a.bin")
    with pytest.raises(QuotaExceeded) as ei:
        _resolver(_never_called, ReadQuotas(max_single_allocation=2)).resolve(buf, 0)
    assert ei.value.code == E_QUOTA_ALLOCATION


def test_quota_checked_without_read_capability():
    buf = Buffer(byte_length=3, uri="a.bin")
    with pytest.raises(QuotaExceeded):
        _resolver(None, ReadQuotas(max_single_allocation=2)).resolve(buf, 0)


def test_external_read():
    files = _Files({"a.bin": b"\x01\x02\x03"})
    data = _resolver(files).resolve(Buffer(byte_length=3, uri="a.bin"), 0)
    assert data == b"\x01\x02\x03"
    assert files.calls == ["a.bin"]


def test_external_uri_percent_decoding_not_applied_to_handler():
    files = _Files({"my%20file.bin": b"\x01"})
    assert _resolver(files).resolve(Buffer(byte_length=1, uri="my%20file.bin"), 0) == b"\x01"


def test_external_size_mismatch():
    short = _Files({"a.bin": b"\x01\x02"})
    assert (
        _resource_code(_resolver(short), Buffer(byte_length=3, uri="a.bin"))
        == E_RES_SIZE_MISMATCH
    )
    long = _Files({"a.bin": b"\x01" * 10})
    assert (
        _resource_code(_resolver(long), Buffer(byte_length=3, uri="a.bin"))
        == E_RES_SIZE_MISMATCH
    )


def test_external_read_failure_chained():
    with pytest.raises(ResourceError) as ei:
        _resolver(_Files()).resolve(Buffer(byte_length=3, uri="missing.bin"), 0)
    assert ei.value.code == E_RES_READ
    assert isinstance(ei.value.__cause__, FileNotFoundError)


def test_external_without_capability():
    buf = Buffer(byte_length=3, uri="a.bin")
    assert _resource_code(_resolver(None), buf) == E_RES_READ


def test_external_stream_closed():
    stream = io.BytesIO(b"\x01\x02")
    _resolver(lambda uri: stream).resolve(Buffer(byte_length=2, uri="a.bin"), 0)
    assert stream.closed


def test_embedded_payload():
    buf = Buffer(byte_length=3, uri=encode_data_uri(b"abc"))
    assert _resolver(_never_called).resolve(buf, 0) == b"abc"


def test_embedded_gltf_buffer_mimetype():
    buf = Buffer(byte_length=3, uri="data:application/gltf-buffer;base64,YWJj")
    assert _resolver(_never_called).resolve(buf, 0) == b"abc"


def test_embedded_invalid_base64():
    buf = Buffer(byte_length=3, uri="data:application/octet-stream;base64,@@@@")
    assert _resource_code(_resolver(), buf) == E_RES_DATA_URI


def test_embedded_length_mismatch():
    buf = Buffer(byte_length=4, uri=encode_data_uri(b"abc"))
    assert _resource_code(_resolver(), buf) == E_RES_SIZE_MISMATCH


def test_embedded_quota():
    buf = Buffer(byte_length=3, uri=encode_data_uri(b"abc"))
    with pytest.raises(QuotaExceeded):
        _resolver(quotas=ReadQuotas(max_single_allocation=2)).resolve(buf, 0)


def test_container_chunk_with_padding():
    buf = Buffer(byte_length=5)
    data = _resolver().resolve(buf, 0, binary_chunk=b"12345\x00\x00\x00", in_container=True)
    assert data == b"12345"


def test_container_chunk_too_much_padding():
    buf = Buffer(byte_length=4)
    code = _resource_code(
        _resolver(), buf, binary_chunk=b"1234" + b"\x00" * 4, in_container=True
    )
    assert code == E_RES_SIZE_MISMATCH


def test_container_chunk_too_short():
    buf = Buffer(byte_length=8)
    code = _resource_code(_resolver(), buf, binary_chunk=b"1234", in_container=True)
    assert code == E_RES_SIZE_MISMATCH


def test_container_without_binary_chunk():
    code = _resource_code(_resolver(), Buffer(byte_length=4), in_container=True)
    assert code == E_RES_NO_CHUNK


def test_container_binds_first_buffer_only():
    with pytest.raises(ResourceError) as ei:
        _resolver().resolve(Buffer(byte_length=4), 1, b"1234", True)
    assert ei.value.code == E_RES_NO_URI


def test_no_locator_outside_container():
    assert _resource_code(_resolver(), Buffer(byte_length=4)) == E_RES_NO_URI


class _RecordingStream:
    def __init__(self, data: bytes):
        self._inner = io.BytesIO(data)
        self.requests = []
        self.closed = False

    def read(self, size: int = -1) -> bytes:
        self.requests.append(size)
        return self._inner.read(size)

    def close(self) -> None:
        self.closed = True


def test_external_read_never_requests_declared_length():
    stream = _RecordingStream(b"abc")
    buf = Buffer(byte_length=0x7FFFFFF0, uri="a.bin")
    with pytest.raises(ResourceError) as ei:
        _resolver(lambda uri: stream).resolve(buf, 0)
    assert ei.value.code == E_RES_SIZE_MISMATCH
    assert max(stream.requests) <= READ_BLOCK_SIZE
    assert stream.closed
