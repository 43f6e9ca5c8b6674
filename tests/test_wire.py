import pytest

from peerlink import Codecs, ConfigurationError, Envelope, EnvelopeError, pack_message, unpack_message


@pytest.mark.parametrize("codec_name", ["msgpack", "json"])
def test_round_trip(codec_name):
    codec = Codecs.get(codec_name)
    frame = pack_message("move", {"x": 1, "y": 2}, codec)
    assert isinstance(frame, bytes)
    assert unpack_message(frame, codec) == Envelope("move", {"x": 1, "y": 2})


def test_envelope_wire_shape():
    env = Envelope("chat", {"text": "hi", "tags": [1, [2, 3]]})
    assert env.to_wire() == ["chat", {"text": "hi", "tags": [1, [2, 3]]}]
    assert Envelope.from_wire(env.to_wire()) == env


def test_msgpack_keeps_bytes_and_int_keys():
    codec = Codecs.get("msgpack")
    payload = {1: b"\x00\x01", "nested": {"list": [None, True, 1.5]}}
    assert unpack_message(pack_message("blob", payload, codec), codec).payload == payload


@pytest.mark.parametrize("name", ["", None, 5])
def test_envelope_name_must_be_non_empty_string(name):
    with pytest.raises(EnvelopeError):
        Envelope(name, 1)


def test_unencodable_payload():
    with pytest.raises(EnvelopeError):
        pack_message("bad", object(), Codecs.get("json"))


@pytest.mark.parametrize("codec_name, frame", [
    ("json", b"\xc1"),
    ("json", b"not json at all"),
    ("msgpack", b"\xc1"),
])
def test_malformed_frame(codec_name, frame):
    with pytest.raises(EnvelopeError):
        unpack_message(frame, Codecs.get(codec_name))


def test_frame_must_be_a_pair():
    codec = Codecs.get("msgpack")
    with pytest.raises(EnvelopeError):
        unpack_message(codec.dumps(["only-name"]), codec)
    with pytest.raises(EnvelopeError):
        unpack_message(codec.dumps({"name": "x"}), codec)


def test_unknown_codec():
    with pytest.raises(ConfigurationError):
        Codecs.get("bitser")
    assert Codecs.names() == ["json", "msgpack"]
