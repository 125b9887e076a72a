"""Coercion of scalar text into typed Avro primitives.

Each primitive kind has one rule. Text that a rule cannot parse raises
``MalformedScalarError``; no partial or best-effort parsing is attempted.
The date-time detection for long fields is a separate, replaceable rule.
"""

import re
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, FrozenSet, Optional

from xml_avro_converter.schema.types import SchemaKind
from xml_avro_converter.shared import MalformedScalarError

INT32_MIN, INT32_MAX = -(2 ** 31), 2 ** 31 - 1
INT64_MIN, INT64_MAX = -(2 ** 63), 2 ** 63 - 1

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_SUFFIX_PATTERN = re.compile(r"(.*[0-9.])[fFdD]")
_FLOAT_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_NON_FINITE_PATTERN = re.compile(r"[+-]?(?:NaN|Infinity)")

# xsd:dateTime, e.g. 2018-05-09T14:00:28-07:00 or 2018-05-09T21:00:28.250Z
_DATETIME_PATTERN = re.compile(
    r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
    r"T(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?:\.(?P<fraction>[0-9]+))?"
    r"(?P<tz>Z|[+-][0-9]{2}:[0-9]{2})?"
)

_EPOCH = datetime(1970, 1, 1)
_ONE_MS = timedelta(milliseconds=1)


def parse_datetime_millis(text: str) -> int:
    """Convert an ISO-8601 date-time into UTC epoch milliseconds.

    Args:
        text: timestamp like '2018-05-09T14:00:28-07:00'

    Returns:
        milliseconds since the Unix epoch, like 1525899628000

    A timestamp without an offset is read as UTC. Fractional seconds beyond
    millisecond precision are truncated.
    """
    match = _DATETIME_PATTERN.fullmatch(text.strip())
    if match is None:
        raise MalformedScalarError(text, "long", reason="not an ISO-8601 date-time")

    parts = match.groupdict()
    hour = int(parts["hour"])
    minute, second = int(parts["minute"]), int(parts["second"])
    rollover = timedelta()
    if hour == 24 and minute == 0 and second == 0:
        # xsd allows 24:00:00 as the end of the day
        hour, rollover = 0, timedelta(days=1)

    try:
        local = datetime(
            int(parts["year"]), int(parts["month"]), int(parts["day"]),
            hour, minute, second,
        ) + rollover
    except ValueError as e:
        raise MalformedScalarError(text, "long", reason=str(e)) from e

    offset = timedelta()
    tz = parts["tz"]
    if tz and tz != "Z":
        tz_hours, tz_minutes = int(tz[1:3]), int(tz[4:6])
        if tz_hours > 14 or tz_minutes > 59:
            raise MalformedScalarError(text, "long", reason="invalid offset")
        offset = timedelta(hours=tz_hours, minutes=tz_minutes)
        if tz[0] == "-":
            offset = -offset

    millis = (local - offset - _EPOCH) // _ONE_MS
    fraction = parts["fraction"]
    if fraction:
        millis += int(fraction[:3].ljust(3, "0"))
    return millis


class DateTimeRule:
    """Heuristic that treats long-field text containing a marker as a date-time.

    Any long value whose text contains the marker is parsed as a timestamp,
    so plain numbers must never carry it.
    """

    def __init__(self, marker: str = "T") -> None:
        if not marker:
            raise ValueError("Date-time marker cannot be empty")
        self.marker = marker

    def matches(self, text: str) -> bool:
        return self.marker in text

    def to_millis(self, text: str) -> int:
        return parse_datetime_millis(text)


def _parse_integer(text: str, kind: str, low: int, high: int) -> int:
    if not _INTEGER_PATTERN.fullmatch(text):
        raise MalformedScalarError(text, kind, reason="not a base-10 integer")
    value = int(text)
    if not low <= value <= high:
        raise MalformedScalarError(text, kind, reason="out of range")
    return value


def coerce_string(text: str) -> str:
    return text


def coerce_int(text: str) -> int:
    return _parse_integer(text, "int", INT32_MIN, INT32_MAX)


def coerce_long(text: str, datetime_rule: Optional[DateTimeRule] = None) -> int:
    if datetime_rule is not None and datetime_rule.matches(text):
        return datetime_rule.to_millis(text)
    return _parse_integer(text, "long", INT64_MIN, INT64_MAX)


def coerce_float(text: str, kind: str = "double") -> float:
    """Parse a base-10 floating-point literal.

    Surrounding whitespace and a trailing ``f``/``d`` type suffix are
    accepted. Non-finite values must be spelled ``NaN`` or ``Infinity``;
    other spellings Python would accept (``inf``, ``nan``, digit group
    underscores) are rejected.
    """
    literal = text.strip()
    suffixed = _FLOAT_SUFFIX_PATTERN.fullmatch(literal)
    if suffixed:
        literal = suffixed.group(1)
    if not (
        _FLOAT_PATTERN.fullmatch(literal) or _NON_FINITE_PATTERN.fullmatch(literal)
    ):
        raise MalformedScalarError(text, kind, reason="not a floating-point literal")
    return float(literal)


def coerce_boolean(text: Optional[str]) -> bool:
    """Case-insensitive ``true``; anything else, including no text, is False."""
    return text is not None and text.lower() == "true"


COERCIBLE_KINDS: FrozenSet[SchemaKind] = frozenset({
    SchemaKind.STRING,
    SchemaKind.INT,
    SchemaKind.LONG,
    SchemaKind.FLOAT,
    SchemaKind.DOUBLE,
    SchemaKind.BOOLEAN,
    SchemaKind.NULL,
})


def coerce_primitive(
    text: Optional[str],
    kind: SchemaKind,
    datetime_rule: Optional[DateTimeRule] = None,
    path: Optional[str] = None,
) -> Any:
    """Convert scalar text to the Python value for ``kind``.

    Returns None ("no value") for the null kind and for a string slot without
    text.

    Raises:
        MalformedScalarError: if the text does not parse as ``kind``
        ValueError: if ``kind`` has no coercion rule
    """
    if kind not in COERCIBLE_KINDS:
        raise ValueError(f"No coercion rule for {kind.value}")
    if kind is SchemaKind.NULL:
        return None
    if kind is SchemaKind.BOOLEAN:
        return coerce_boolean(text)
    if text is None:
        if kind is SchemaKind.STRING:
            return None
        raise MalformedScalarError(text, kind.value, path, reason="element has no text")

    rules: Dict[SchemaKind, Callable[[str], Any]] = {
        SchemaKind.STRING: coerce_string,
        SchemaKind.INT: coerce_int,
        SchemaKind.LONG: lambda value: coerce_long(value, datetime_rule),
        SchemaKind.FLOAT: lambda value: coerce_float(value, "float"),
        SchemaKind.DOUBLE: coerce_float,
    }
    try:
        return rules[kind](text)
    except MalformedScalarError as e:
        if path is not None and e.path is None:
            raise MalformedScalarError(
                text, e.kind, path, reason=e.reason
            ) from e
        raise
