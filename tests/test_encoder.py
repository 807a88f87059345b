"""Encoding documents to JSON and GLB, buffer placement."""

import io

import pytest

from gltfcodec.decoder import DocumentDecoder, decode
from gltfcodec.encoder import DocumentEncoder, encode
from gltfcodec.errors import E_RES_SIZE_MISMATCH, E_RES_TRAVERSAL, E_RES_WRITE, ResourceError
from gltfcodec.model import Buffer, Document, Node, encode_data_uri


def _doc_with(*buffers: Buffer) -> Document:
    return Document(buffers=list(buffers), nodes=[Node(name="n")])


def test_plain_json_embeds_unbound_buffer():
    doc = _doc_with(Buffer(byte_length=3, data=b"abc"))
    out = decode(encode(doc))
    assert out.buffers[0].uri == encode_data_uri(b"abc")
    assert out.buffers[0].data == b"abc"


def test_binary_binds_first_buffer_to_chunk():
    doc = _doc_with(Buffer(byte_length=5, data=b"12345"), Buffer(byte_length=2, data=b"xy"))
    data = encode(doc, as_binary=True)
    out, framed = DocumentDecoder().decode_framed(data)
    assert framed.binary == b"12345\x00\x00\x00"
    assert out.buffers[0].uri == ""
    assert out.buffers[0].data == b"12345"
    assert out.buffers[1].is_embedded_resource()
    assert out.buffers[1].data == b"xy"


def test_caller_document_not_mutated():
    buf = Buffer(byte_length=3, data=b"abc")
    doc = _doc_with(buf)
    encode(doc)
    assert buf.uri == ""
    assert doc.buffers[0] is buf


def test_embedded_buffer_reencoded_from_payload():
    buf = Buffer(byte_length=3, uri=encode_data_uri(b"old"), data=b"new")
    out = decode(encode(_doc_with(buf)))
    assert out.buffers[0].data == b"new"


def test_external_buffer_written():
    written = {}
    encoder = DocumentEncoder(write_handler=written.__setitem__)
    data = encoder.encode(_doc_with(Buffer(byte_length=2, uri="a.bin", data=b"hi")))
    assert written == {"a.bin": b"hi"}
    assert b'"uri":"a.bin"' in data


def test_external_embedded_on_request():
    encoder = DocumentEncoder(embed_external=True)
    out = decode(encoder.encode(_doc_with(Buffer(byte_length=2, uri="a.bin", data=b"hi"))))
    assert out.buffers[0].data == b"hi"


def test_reference_only_external_buffer():
    def handler(uri, data):
        raise AssertionError("nothing to write")

    encoder = DocumentEncoder(write_handler=handler)
    data = encoder.encode(_doc_with(Buffer(byte_length=10, uri="big.bin")))
    assert b'"byteLength":10' in data


def test_write_traversal_rejected():
    def handler(uri, data):
        raise AssertionError("must not be called")

    encoder = DocumentEncoder(write_handler=handler)
    with pytest.raises(ResourceError) as ei:
        encoder.encode(_doc_with(Buffer(byte_length=2, uri="../x.bin", data=b"hi")))
    assert ei.value.code == E_RES_TRAVERSAL


def test_write_failure_wrapped():
    def handler(uri, data):
        raise PermissionError(uri)

    with pytest.raises(ResourceError) as ei:
        DocumentEncoder(write_handler=handler).encode(
            _doc_with(Buffer(byte_length=2, uri="a.bin", data=b"hi"))
        )
    assert ei.value.code == E_RES_WRITE
    assert isinstance(ei.value.__cause__, PermissionError)


def test_payload_length_must_match():
    with pytest.raises(ResourceError) as ei:
        encode(_doc_with(Buffer(byte_length=4, data=b"abc")))
    assert ei.value.code == E_RES_SIZE_MISMATCH


def test_glb_roundtrip_is_stable():
    doc = _doc_with(Buffer(byte_length=4, data=b"\x00\x01\x02\x03"))
    first = encode(doc, as_binary=True)
    second = encode(decode(first), as_binary=True)
    assert first == second


def test_encode_to_stream():
    stream = io.BytesIO()
    n = DocumentEncoder(as_binary=True).encode_to(Document(), stream)
    assert n == len(stream.getvalue())
    assert stream.getvalue()[:4] == b"glTF"
