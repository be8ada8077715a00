"""Serialization of subscriptions to length-delimited MessagePack records.

A store file is zero or more records concatenated in write order. Each
record is a 4-byte big-endian length followed by that many bytes of a
MessagePack map. Datetimes travel as the MessagePack Timestamp extension
and opaque identifiers as bin, so nothing is re-encoded as text.
"""

import struct
from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Any, TypeVar

import msgpack
from pydantic import BaseModel

from ..domain.aggregates import Subscription
from ..domain.exceptions import SerializationError

T = TypeVar("T", bound=BaseModel)

LENGTH_PREFIX = struct.Struct(">I")
MAX_RECORD_SIZE = 0xFFFFFFFF


def _encode_default(obj: Any) -> Any:
    """Encode values msgpack has no native type for."""
    if isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"Cannot serialize object of type {type(obj).__name__}")


def serialize_to_msgpack(obj: BaseModel) -> bytes:
    """Serialize a Pydantic model to MessagePack bytes."""
    try:
        data = obj.model_dump(mode="python")
        return bytes(msgpack.packb(data, use_bin_type=True, datetime=True, default=_encode_default))
    except Exception as e:
        raise SerializationError(f"Failed to serialize to msgpack: {e}") from e


def deserialize_from_msgpack(data: bytes, model_class: type[T]) -> T:
    """Deserialize MessagePack bytes to a Pydantic model."""
    try:
        unpacked = msgpack.unpackb(data, raw=False, timestamp=3)
        return model_class.model_validate(unpacked)
    except Exception as e:
        raise SerializationError(f"Failed to deserialize from msgpack: {e}") from e


def encode_record(subscription: Subscription) -> bytes:
    """Frame one subscription as a length-prefixed record."""
    payload = serialize_to_msgpack(subscription)
    if len(payload) > MAX_RECORD_SIZE:
        raise SerializationError(f"Subscription record too large: {len(payload)} bytes")
    return LENGTH_PREFIX.pack(len(payload)) + payload


def encode_records(subscriptions: Iterable[Subscription]) -> bytes:
    """Frame every subscription, preserving order."""
    return b"".join(encode_record(subscription) for subscription in subscriptions)


def iter_records(data: bytes) -> Iterator[bytes]:
    """Split a store file into record payloads.

    Raises:
        SerializationError: If the data ends inside a length prefix or a record
    """
    offset = 0
    index = 0
    while offset < len(data):
        if len(data) - offset < LENGTH_PREFIX.size:
            raise SerializationError(f"Truncated length prefix for record {index}")
        (length,) = LENGTH_PREFIX.unpack_from(data, offset)
        offset += LENGTH_PREFIX.size
        if len(data) - offset < length:
            raise SerializationError(
                f"Truncated record {index}: expected {length} bytes, got {len(data) - offset}"
            )
        yield data[offset : offset + length]
        offset += length
        index += 1


def decode_records(data: bytes) -> list[Subscription]:
    """Decode every record of a store file.

    An empty input decodes to no subscriptions.

    Raises:
        SerializationError: If any record cannot be decoded; no partial result
            is returned
    """
    subscriptions = []
    for index, payload in enumerate(iter_records(data)):
        try:
            subscriptions.append(deserialize_from_msgpack(payload, Subscription))
        except SerializationError as e:
            raise SerializationError(f"Record {index}: {e}", details={"record_index": index}) from e
    return subscriptions
