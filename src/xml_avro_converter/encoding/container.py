"""Avro object container output for encoded records.

Writing binary container files needs ``fastavro``, which is an optional
dependency and is only imported when a container is actually written.
"""

import json
from typing import Any, BinaryIO, Dict, Iterable, Union

from xml_avro_converter.encoding.values import RecordValue
from xml_avro_converter.shared import ContainerWriteError, get_logger

CODECS = ("null", "deflate")

logger = get_logger(__name__, component="container")


def is_available() -> bool:
    """Check if fastavro is available."""
    try:
        import fastavro  # noqa: F401
        return True
    except ImportError:
        return False


def write_container(
    out: BinaryIO,
    schema_json: Union[str, Dict[str, Any]],
    records: Iterable[RecordValue],
    codec: str = "null",
) -> int:
    """Write records to ``out`` as an Avro object container file.

    Args:
        out: Binary stream to write to
        schema_json: The writer schema, as JSON text or a decoded dict
        records: Encoded records that conform to the schema
        codec: Block compression codec, one of ``CODECS``

    Returns:
        Number of records written

    Raises:
        ContainerWriteError: if fastavro is missing, rejects the schema or
            rejects a record
    """
    if codec not in CODECS:
        raise ValueError(f"Unknown codec '{codec}', expected one of {list(CODECS)}")
    try:
        import fastavro
        from fastavro.schema import SchemaParseException
        from fastavro.validation import ValidationError
    except ImportError as e:
        raise ContainerWriteError(
            "Avro container output requires fastavro, which is not installed"
        ) from e

    if isinstance(schema_json, str):
        schema_json = json.loads(schema_json)
    plain = [record.to_dict() for record in records]

    try:
        parsed = fastavro.parse_schema(schema_json)
        fastavro.writer(out, parsed, plain, codec=codec, validator=True)
    except SchemaParseException as e:
        raise ContainerWriteError(f"Schema rejected by fastavro: {e}") from e
    except (ValidationError, ValueError, TypeError) as e:
        raise ContainerWriteError(f"Record cannot be written: {e}") from e

    logger.debug(
        "Container written",
        extra={"records": len(plain), "codec": codec},
    )
    return len(plain)
