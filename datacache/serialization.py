"""
JSON encoding and decoding for cached objects.

Dates are written as milliseconds since 1970 by default, or as ISO-8601
strings. Naive datetimes are treated as UTC.
"""

import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional, Type, TypeVar, get_args, get_origin
from uuid import UUID

from pydantic import BaseModel, ValidationError

from .errors import SerializationFailed

ModelT = TypeVar("ModelT", bound=BaseModel)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class DateStrategy(str, Enum):
    MILLISECONDS_SINCE_1970 = "millisecondsSince1970"
    ISO8601 = "iso8601"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _encode_date(value: date, date_strategy: DateStrategy) -> Any:
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    value = _as_utc(value)
    if date_strategy == DateStrategy.ISO8601:
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    return int(round(value.timestamp() * 1000))


def _default_encoder(date_strategy: DateStrategy) -> Callable[[Any], Any]:
    def encode(value: Any) -> Any:
        if isinstance(value, BaseModel):
            return value.model_dump(mode="python")
        if isinstance(value, date):
            return _encode_date(value, date_strategy)
        if is_dataclass(value) and not isinstance(value, type):
            return asdict(value)
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, (UUID, Decimal)):
            return str(value)
        if isinstance(value, (set, frozenset)):
            return list(value)
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
    return encode


def to_json(
    obj: Any,
    date_strategy: DateStrategy = DateStrategy.MILLISECONDS_SINCE_1970,
    pretty: bool = True
) -> str:
    """
    Encode an object as JSON text.

    Args:
        obj: Pydantic model, dataclass, mapping, sequence or scalar
        date_strategy: How datetimes are written
        pretty: Indent the output

    Returns:
        JSON string

    Raises:
        SerializationFailed: If the object (or anything inside it) cannot be encoded
    """
    # Top-level dates bypass json's default hook
    if isinstance(obj, date):
        obj = _encode_date(obj, date_strategy)

    try:
        return json.dumps(
            obj,
            default=_default_encoder(date_strategy),
            indent=2 if pretty else None,
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise SerializationFailed(str(e)) from e


def _decode_millis(value: Any, annotation: Any) -> Any:
    """Turn epoch-millisecond numbers into datetimes wherever the annotation expects a date."""
    origin = get_origin(annotation)
    if origin is not None:
        args = get_args(annotation)
        if origin in (list, set, frozenset, tuple) and isinstance(value, list) and args:
            return [_decode_millis(item, args[0]) for item in value]
        if origin is dict and isinstance(value, dict) and len(args) == 2:
            return {k: _decode_millis(v, args[1]) for k, v in value.items()}
        # Optional, Union and Annotated
        for arg in args:
            decoded = _decode_millis(value, arg)
            if decoded is not value:
                return decoded
        return value

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if annotation is datetime:
            return EPOCH + timedelta(milliseconds=value)
        if annotation is date:
            return (EPOCH + timedelta(milliseconds=value)).date()

    if isinstance(annotation, type) and issubclass(annotation, BaseModel) and isinstance(value, dict):
        decoded = dict(value)
        for name, field in annotation.model_fields.items():
            field_key = field.alias or name
            if field_key in decoded:
                decoded[field_key] = _decode_millis(decoded[field_key], field.annotation)
        return decoded

    return value


def from_json(
    text: str,
    model: Optional[Type[ModelT]] = None,
    date_strategy: DateStrategy = DateStrategy.MILLISECONDS_SINCE_1970
) -> Any:
    """
    Decode JSON text, optionally validating it into a Pydantic model.

    With a model and the millisecond strategy, numbers in datetime and date
    fields (nested models included) are read as milliseconds since 1970
    before validation. ISO-8601 strings are left to Pydantic.

    Raises:
        SerializationFailed: If the text is not valid JSON or fails validation
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        raise SerializationFailed(str(e)) from e

    if model is None:
        return data

    try:
        if date_strategy == DateStrategy.MILLISECONDS_SINCE_1970:
            data = _decode_millis(data, model)
        return model.model_validate(data)
    except (ValidationError, OverflowError) as e:
        raise SerializationFailed(str(e)) from e
