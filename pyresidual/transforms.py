# Licensed to the Apache Software Foundation (ASF) under one
# or more contributor license agreements.  See the NOTICE file
# distributed with this work for additional information
# regarding copyright ownership.  The ASF licenses this file
# to you under the Apache License, Version 2.0 (the
# "License"); you may not use this file except in compliance
# with the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.
"""Partition transforms and the predicate projections they support.

A transform maps a source column value to a partition value. To use partition
values for filtering, every transform can rewrite a predicate on its source
column into a predicate on the partition value in two ways:

- ``project`` (inclusive): the projected predicate is true for a partition value
  whenever the original predicate is true for *some* source value in it.
- ``strict_project``: the projected predicate is true for a partition value only
  when the original predicate is true for *every* source value in it.

Either returns None when no such predicate exists.
"""
import base64
import struct
from abc import ABC, abstractmethod
from enum import IntEnum
from functools import singledispatch
from typing import Any, Callable, Optional

import mmh3
from pydantic import Field, PositiveInt, PrivateAttr, model_serializer

from pyresidual.expressions import (
    BoundEqualTo,
    BoundGreaterThan,
    BoundGreaterThanOrEqual,
    BoundIn,
    BoundLessThan,
    BoundLessThanOrEqual,
    BoundLiteralPredicate,
    BoundNotEqualTo,
    BoundNotIn,
    BoundNotStartsWith,
    BoundPredicate,
    BoundSetPredicate,
    BoundStartsWith,
    BoundUnaryPredicate,
    EqualTo,
    GreaterThan,
    GreaterThanOrEqual,
    LessThan,
    LessThanOrEqual,
    NotEqualTo,
    NotStartsWith,
    Reference,
    StartsWith,
    UnboundPredicate,
)
from pyresidual.expressions.literals import (
    DateLiteral,
    DecimalLiteral,
    Literal,
    LongLiteral,
    TimestampLiteral,
    literal,
)
from pyresidual.typedef import L, MetadataBaseModel
from pyresidual.types import (
    BinaryType,
    DataType,
    DateType,
    DecimalType,
    FixedType,
    IntegerType,
    LongType,
    StringType,
    TimestampType,
    TimestamptzType,
    TimeType,
    UUIDType,
)
from pyresidual.utils import datetime
from pyresidual.utils.decimal import decimal_to_bytes, truncate_decimal
from pyresidual.utils.parsing import ParseNumberFromBrackets
from pyresidual.utils.singleton import Singleton

IDENTITY = "identity"
VOID = "void"
BUCKET = "bucket"
TRUNCATE = "truncate"
YEAR = "year"
MONTH = "month"
DAY = "day"
HOUR = "hour"

BUCKET_PARSER = ParseNumberFromBrackets(BUCKET)
TRUNCATE_PARSER = ParseNumberFromBrackets(TRUNCATE)


def parse_transform(v: Any) -> Any:
    """Turn the string form of a transform into a Transform, other values are returned as they are.

    Example:
        >>> parse_transform("bucket[16]")
        BucketTransform(num_buckets=16)
    """
    if isinstance(v, str):
        if v == IDENTITY:
            return IdentityTransform()
        elif v == VOID:
            return VoidTransform()
        elif v.startswith(BUCKET):
            return BucketTransform(num_buckets=BUCKET_PARSER.match(v))
        elif v.startswith(TRUNCATE):
            return TruncateTransform(width=TRUNCATE_PARSER.match(v))
        elif v == YEAR:
            return YearTransform()
        elif v == MONTH:
            return MonthTransform()
        elif v == DAY:
            return DayTransform()
        elif v == HOUR:
            return HourTransform()
        else:
            return UnknownTransform(transform=v)
    return v


def _transform_literal(func: Callable[[Any], Any], lit: Literal[L]) -> Literal[L]:
    """Unwrap the value from the literal, apply the transform and wrap it again."""
    return literal(func(lit.value))


class Transform(MetadataBaseModel, ABC):
    """Base class of the partition transforms, serialized as its string form (``bucket[16]``).

    Use ``parse_transform`` or one of the concrete classes to create one.
    """

    @model_serializer
    def ser_model(self) -> str:
        return str(self)

    @abstractmethod
    def transform(self, source: DataType) -> Callable[[Optional[Any]], Optional[Any]]:
        ...

    def apply(self, source: DataType, value: Optional[Any]) -> Optional[Any]:
        return self.transform(source)(value)

    @abstractmethod
    def can_transform(self, source: DataType) -> bool:
        return False

    @abstractmethod
    def result_type(self, source: DataType) -> DataType:
        ...

    @abstractmethod
    def project(self, name: str, pred: BoundPredicate[L]) -> Optional[UnboundPredicate[Any]]:
        ...

    @abstractmethod
    def strict_project(self, name: str, pred: BoundPredicate[L]) -> Optional[UnboundPredicate[Any]]:
        ...

    @property
    def preserves_order(self) -> bool:
        return False

    def to_human_string(self, _: DataType, value: Optional[Any]) -> str:
        return str(value) if value is not None else "null"

    @abstractmethod
    def __str__(self) -> str:
        ...

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Transform):
            return str(self) == str(other)
        return False

    def __hash__(self) -> int:
        return hash(str(self))


class BucketTransform(Transform):
    """Hashes a value into one of ``num_buckets`` buckets.

    The hash is the 32-bit Murmur3 hash of the value's binary form, made positive and
    taken modulo the number of buckets.

    Args:
      num_buckets (int): The number of buckets.
    """

    num_buckets: PositiveInt = Field()

    def __init__(self, num_buckets: int, **data: Any) -> None:
        super().__init__(num_buckets=num_buckets, **data)

    def can_transform(self, source: DataType) -> bool:
        return type(source) in {
            IntegerType,
            DateType,
            LongType,
            TimeType,
            TimestampType,
            TimestamptzType,
            DecimalType,
            StringType,
            FixedType,
            BinaryType,
            UUIDType,
        }

    def result_type(self, source: DataType) -> DataType:
        return IntegerType()

    def transform(self, source: DataType, bucket: bool = True) -> Callable[[Optional[Any]], Optional[int]]:
        source_type = type(source)
        if source_type in {IntegerType, LongType, DateType, TimeType, TimestampType, TimestamptzType}:

            def hash_func(v: Any) -> int:
                return mmh3.hash(struct.pack("<q", v))

        elif source_type == DecimalType:

            def hash_func(v: Any) -> int:
                return mmh3.hash(decimal_to_bytes(v))

        elif source_type in {StringType, FixedType, BinaryType}:

            def hash_func(v: Any) -> int:
                return mmh3.hash(v)

        elif source_type == UUIDType:

            def hash_func(v: Any) -> int:
                return mmh3.hash(
                    struct.pack(
                        ">QQ",
                        (v.int >> 64) & 0xFFFFFFFFFFFFFFFF,
                        v.int & 0xFFFFFFFFFFFFFFFF,
                    )
                )

        else:
            raise ValueError(f"Cannot bucket values of type: {source}")

        if bucket:
            return lambda v: (hash_func(v) & IntegerType.max) % self.num_buckets if v is not None else None
        return hash_func

    def project(self, name: str, pred: BoundPredicate[L]) -> Optional[UnboundPredicate[Any]]:
        transformer = self.transform(pred.term.ref().field.field_type)
        if isinstance(pred, BoundUnaryPredicate):
            return pred.as_unbound(Reference(name))
        elif isinstance(pred, BoundEqualTo):
            return pred.as_unbound(Reference(name), _transform_literal(transformer, pred.literal))
        elif isinstance(pred, BoundIn):
            return _set_apply_transform(name, pred, transformer)
        # ranges and negations cannot be projected, the hash does not preserve order
        return None

    def strict_project(self, name: str, pred: BoundPredicate[L]) -> Optional[UnboundPredicate[Any]]:
        transformer = self.transform(pred.term.ref().field.field_type)
        if isinstance(pred, BoundUnaryPredicate):
            return pred.as_unbound(Reference(name))
        elif isinstance(pred, BoundNotEqualTo):
            # a different bucket means a different value
            return pred.as_unbound(Reference(name), _transform_literal(transformer, pred.literal))
        elif isinstance(pred, BoundNotIn):
            return _set_apply_transform(name, pred, transformer)
        return None

    def __str__(self) -> str:
        return f"bucket[{self.num_buckets}]"

    def __repr__(self) -> str:
        return f"BucketTransform(num_buckets={self.num_buckets})"


class TimeResolution(IntEnum):
    YEAR = 6
    MONTH = 5
    DAY = 3
    HOUR = 2


class TimeTransform(Transform, Singleton):
    """Base class of the transforms that map dates and timestamps to an ordinal since the epoch."""

    @property
    @abstractmethod
    def granularity(self) -> TimeResolution:
        ...

    def result_type(self, source: DataType) -> DataType:
        return IntegerType()

    def project(self, name: str, pred: BoundPredicate[L]) -> Optional[UnboundPredicate[Any]]:
        transformer = self.transform(pred.term.ref().field.field_type)
        if isinstance(pred, BoundUnaryPredicate):
            return pred.as_unbound(Reference(name))
        elif isinstance(pred, BoundLiteralPredicate):
            return _truncate_number(name, pred, transformer)
        elif isinstance(pred, BoundIn):
            return _set_apply_transform(name, pred, transformer)
        return None

    def strict_project(self, name: str, pred: BoundPredicate[L]) -> Optional[UnboundPredicate[Any]]:
        transformer = self.transform(pred.term.ref().field.field_type)
        if isinstance(pred, BoundUnaryPredicate):
            return pred.as_unbound(Reference(name))
        elif isinstance(pred, BoundLiteralPredicate):
            return _truncate_number_strict(name, pred, transformer)
        elif isinstance(pred, BoundNotIn):
            return _set_apply_transform(name, pred, transformer)
        return None

    @property
    def preserves_order(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.granularity.name.lower()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class YearTransform(TimeTransform):
    """Transforms a date or timestamp into the number of years since 1970.

    Example:
        >>> transform = YearTransform()
        >>> transform.transform(TimestampType())(1512151975038194)
        47
    """

    def transform(self, source: DataType) -> Callable[[Optional[Any]], Optional[int]]:
        source_type = type(source)
        if source_type == DateType:
            year_func = datetime.days_to_years
        elif source_type in {TimestampType, TimestamptzType}:
            year_func = datetime.micros_to_years
        else:
            raise ValueError(f"Cannot apply year transform for type: {source}")

        return lambda v: year_func(v) if v is not None else None

    def can_transform(self, source: DataType) -> bool:
        return type(source) in {DateType, TimestampType, TimestamptzType}

    @property
    def granularity(self) -> TimeResolution:
        return TimeResolution.YEAR

    def to_human_string(self, _: DataType, value: Optional[Any]) -> str:
        return datetime.to_human_year(value) if isinstance(value, int) else "null"


class MonthTransform(TimeTransform):
    """Transforms a date or timestamp into the number of months since 1970-01.

    Example:
        >>> transform = MonthTransform()
        >>> transform.transform(DateType())(17501)
        575
    """

    def transform(self, source: DataType) -> Callable[[Optional[Any]], Optional[int]]:
        source_type = type(source)
        if source_type == DateType:
            month_func = datetime.days_to_months
        elif source_type in {TimestampType, TimestamptzType}:
            month_func = datetime.micros_to_months
        else:
            raise ValueError(f"Cannot apply month transform for type: {source}")

        return lambda v: month_func(v) if v is not None else None

    def can_transform(self, source: DataType) -> bool:
        return type(source) in {DateType, TimestampType, TimestamptzType}

    @property
    def granularity(self) -> TimeResolution:
        return TimeResolution.MONTH

    def to_human_string(self, _: DataType, value: Optional[Any]) -> str:
        return datetime.to_human_month(value) if isinstance(value, int) else "null"


class DayTransform(TimeTransform):
    """Transforms a date or timestamp into the number of days since 1970-01-01.

    Example:
        >>> transform = DayTransform()
        >>> transform.transform(TimestampType())(1512151975038194)
        17501
    """

    def transform(self, source: DataType) -> Callable[[Optional[Any]], Optional[int]]:
        source_type = type(source)
        if source_type == DateType:

            def day_func(v: Any) -> int:
                return v

        elif source_type in {TimestampType, TimestamptzType}:
            day_func = datetime.micros_to_days
        else:
            raise ValueError(f"Cannot apply day transform for type: {source}")

        return lambda v: day_func(v) if v is not None else None

    def can_transform(self, source: DataType) -> bool:
        return type(source) in {DateType, TimestampType, TimestamptzType}

    def result_type(self, source: DataType) -> DataType:
        return DateType()

    @property
    def granularity(self) -> TimeResolution:
        return TimeResolution.DAY

    def to_human_string(self, _: DataType, value: Optional[Any]) -> str:
        return datetime.to_human_day(value) if isinstance(value, int) else "null"


class HourTransform(TimeTransform):
    """Transforms a timestamp into the number of hours since 1970-01-01 00:00.

    Example:
        >>> transform = HourTransform()
        >>> transform.transform(TimestampType())(1512151975038194)
        420042
    """

    def transform(self, source: DataType) -> Callable[[Optional[Any]], Optional[int]]:
        if type(source) not in {TimestampType, TimestamptzType}:
            raise ValueError(f"Cannot apply hour transform for type: {source}")
        return lambda v: datetime.micros_to_hours(v) if v is not None else None

    def can_transform(self, source: DataType) -> bool:
        return type(source) in {TimestampType, TimestamptzType}

    @property
    def granularity(self) -> TimeResolution:
        return TimeResolution.HOUR

    def to_human_string(self, _: DataType, value: Optional[Any]) -> str:
        return datetime.to_human_hour(value) if isinstance(value, int) else "null"


def _base64encode(buffer: bytes) -> str:
    return base64.b64encode(buffer).decode("ISO-8859-1")


class IdentityTransform(Transform, Singleton):
    """Transforms a value into itself, so every predicate projects as it is.

    Example:
        >>> transform = IdentityTransform()
        >>> transform.transform(StringType())('hello-world')
        'hello-world'
    """

    def transform(self, source: DataType) -> Callable[[Optional[Any]], Optional[Any]]:
        return lambda v: v

    def can_transform(self, source: DataType) -> bool:
        return source.is_primitive

    def result_type(self, source: DataType) -> DataType:
        return source

    def project(self, name: str, pred: BoundPredicate[L]) -> Optional[UnboundPredicate[Any]]:
        return _rename(name, pred)

    def strict_project(self, name: str, pred: BoundPredicate[L]) -> Optional[UnboundPredicate[Any]]:
        return _rename(name, pred)

    @property
    def preserves_order(self) -> bool:
        return True

    def to_human_string(self, source_type: DataType, value: Optional[Any]) -> str:
        return _human_string(value, source_type) if value is not None else "null"

    def __str__(self) -> str:
        return IDENTITY

    def __repr__(self) -> str:
        return "IdentityTransform()"


class TruncateTransform(Transform):
    """Truncates a value to a width.

    Numbers are rounded down to a multiple of the width, strings and binary values are
    cut to their first ``width`` characters or bytes.

    Args:
      width (int): The truncate width, should be positive.
    """

    width: PositiveInt = Field()

    def __init__(self, width: int, **data: Any):
        super().__init__(width=width, **data)

    def can_transform(self, source: DataType) -> bool:
        return type(source) in {IntegerType, LongType, StringType, BinaryType, DecimalType}

    def result_type(self, source: DataType) -> DataType:
        return source

    @property
    def preserves_order(self) -> bool:
        return True

    def transform(self, source: DataType) -> Callable[[Optional[Any]], Optional[Any]]:
        source_type = type(source)
        if source_type in {IntegerType, LongType}:

            def truncate_func(v: Any) -> Any:
                return v - v % self.width

        elif source_type in {StringType, BinaryType}:

            def truncate_func(v: Any) -> Any:
                return v[0 : min(self.width, len(v))]

        elif source_type == DecimalType:

            def truncate_func(v: Any) -> Any:
                return truncate_decimal(v, self.width)

        else:
            raise ValueError(f"Cannot truncate for type: {source}")

        return lambda v: truncate_func(v) if v is not None else None

    def project(self, name: str, pred: BoundPredicate[L]) -> Optional[UnboundPredicate[Any]]:
        field_type = pred.term.ref().field.field_type
        if isinstance(pred, BoundUnaryPredicate):
            return pred.as_unbound(Reference(name))
        elif isinstance(pred, BoundIn):
            return _set_apply_transform(name, pred, self.transform(field_type))
        elif isinstance(pred, BoundLiteralPredicate):
            if isinstance(field_type, (IntegerType, LongType, DecimalType)):
                return _truncate_number(name, pred, self.transform(field_type))
            elif isinstance(field_type, (BinaryType, StringType)):
                return _truncate_array(name, pred, self.transform(field_type), self.width)
        return None

    def strict_project(self, name: str, pred: BoundPredicate[L]) -> Optional[UnboundPredicate[Any]]:
        field_type = pred.term.ref().field.field_type
        if isinstance(pred, BoundUnaryPredicate):
            return pred.as_unbound(Reference(name))
        elif isinstance(pred, BoundNotIn):
            return _set_apply_transform(name, pred, self.transform(field_type))
        elif isinstance(pred, BoundLiteralPredicate):
            if isinstance(field_type, (IntegerType, LongType, DecimalType)):
                return _truncate_number_strict(name, pred, self.transform(field_type))
            elif isinstance(field_type, (BinaryType, StringType)):
                return _truncate_array_strict(name, pred, self.transform(field_type), self.width)
        return None

    def to_human_string(self, _: DataType, value: Optional[Any]) -> str:
        if value is None:
            return "null"
        elif isinstance(value, bytes):
            return _base64encode(value)
        else:
            return str(value)

    def __str__(self) -> str:
        return f"truncate[{self.width}]"

    def __repr__(self) -> str:
        return f"TruncateTransform(width={self.width})"


@singledispatch
def _human_string(value: Any, _type: DataType) -> str:
    return str(value)


@_human_string.register(bytes)
def _(value: bytes, _type: DataType) -> str:
    return _base64encode(value)


@_human_string.register(int)
def _(value: int, _type: DataType) -> str:
    return _int_to_human_string(_type, value)


@singledispatch
def _int_to_human_string(_type: DataType, value: int) -> str:
    return str(value)


@_int_to_human_string.register(DateType)
def _(_type: DataType, value: int) -> str:
    return datetime.to_human_day(value)


@_int_to_human_string.register(TimeType)
def _(_type: DataType, value: int) -> str:
    return datetime.to_human_time(value)


@_int_to_human_string.register(TimestampType)
def _(_type: DataType, value: int) -> str:
    return datetime.to_human_timestamp(value)


@_int_to_human_string.register(TimestamptzType)
def _(_type: DataType, value: int) -> str:
    return datetime.to_human_timestamptz(value)


class UnknownTransform(Transform):
    """A transform this library cannot apply, kept so that its name survives a round trip.

    Args:
      transform (str): The name of the transform.
    """

    _transform: str = PrivateAttr()

    def __init__(self, transform: str, **data: Any):
        super().__init__(**data)
        self._transform = transform

    def transform(self, source: DataType) -> Callable[[Optional[Any]], Optional[Any]]:
        raise AttributeError(f"Cannot apply unsupported transform: {self}")

    def can_transform(self, source: DataType) -> bool:
        return False

    def result_type(self, source: DataType) -> DataType:
        return StringType()

    def project(self, name: str, pred: BoundPredicate[L]) -> Optional[UnboundPredicate[Any]]:
        return None

    def strict_project(self, name: str, pred: BoundPredicate[L]) -> Optional[UnboundPredicate[Any]]:
        return None

    def __str__(self) -> str:
        return self._transform

    def __repr__(self) -> str:
        return f"UnknownTransform(transform={repr(self._transform)})"


class VoidTransform(Transform, Singleton):
    """A transform that always returns None."""

    def transform(self, source: DataType) -> Callable[[Optional[Any]], Optional[Any]]:
        return lambda v: None

    def can_transform(self, _: DataType) -> bool:
        return True

    def result_type(self, source: DataType) -> DataType:
        return source

    def project(self, name: str, pred: BoundPredicate[L]) -> Optional[UnboundPredicate[Any]]:
        return None

    def strict_project(self, name: str, pred: BoundPredicate[L]) -> Optional[UnboundPredicate[Any]]:
        return None

    def to_human_string(self, _: DataType, value: Optional[Any]) -> str:
        return "null"

    def __str__(self) -> str:
        return VOID

    def __repr__(self) -> str:
        return "VoidTransform()"


def _rename(name: str, pred: BoundPredicate[L]) -> UnboundPredicate[Any]:
    if isinstance(pred, BoundUnaryPredicate):
        return pred.as_unbound(Reference(name))
    elif isinstance(pred, BoundLiteralPredicate):
        return pred.as_unbound(Reference(name), pred.literal)
    elif isinstance(pred, BoundSetPredicate):
        return pred.as_unbound(Reference(name), pred.literals)
    raise ValueError(f"Could not project: {pred}")


def _numeric_boundary(pred: BoundLiteralPredicate[L]) -> Literal[Any]:
    boundary = pred.literal
    if not isinstance(boundary, (LongLiteral, DecimalLiteral, DateLiteral, TimestampLiteral)):
        raise ValueError(f"Expected a numeric literal, got: {type(boundary)}")
    return boundary


def _truncate_number(
    name: str, pred: BoundLiteralPredicate[L], transform: Callable[[Any], Any]
) -> Optional[UnboundPredicate[Any]]:
    boundary = _numeric_boundary(pred)

    if isinstance(pred, BoundLessThan):
        return LessThanOrEqual(Reference(name), _transform_literal(transform, boundary.decrement()))  # type: ignore
    elif isinstance(pred, BoundLessThanOrEqual):
        return LessThanOrEqual(Reference(name), _transform_literal(transform, boundary))
    elif isinstance(pred, BoundGreaterThan):
        return GreaterThanOrEqual(Reference(name), _transform_literal(transform, boundary.increment()))  # type: ignore
    elif isinstance(pred, BoundGreaterThanOrEqual):
        return GreaterThanOrEqual(Reference(name), _transform_literal(transform, boundary))
    elif isinstance(pred, BoundEqualTo):
        return EqualTo(Reference(name), _transform_literal(transform, boundary))
    return None


def _truncate_number_strict(
    name: str, pred: BoundLiteralPredicate[L], transform: Callable[[Any], Any]
) -> Optional[UnboundPredicate[Any]]:
    boundary = _numeric_boundary(pred)

    # the partition value t(x) bounds x from below, so only the partitions entirely
    # on one side of t(boundary) can be proven
    if isinstance(pred, BoundLessThan):
        return LessThan(Reference(name), _transform_literal(transform, boundary))
    elif isinstance(pred, BoundLessThanOrEqual):
        return LessThan(Reference(name), _transform_literal(transform, boundary.increment()))  # type: ignore
    elif isinstance(pred, BoundGreaterThan):
        return GreaterThan(Reference(name), _transform_literal(transform, boundary))
    elif isinstance(pred, BoundGreaterThanOrEqual):
        return GreaterThan(Reference(name), _transform_literal(transform, boundary.decrement()))  # type: ignore
    elif isinstance(pred, BoundNotEqualTo):
        return NotEqualTo(Reference(name), _transform_literal(transform, boundary))
    # equality holds for a single value, never for a whole partition
    return None


def _truncate_array(
    name: str, pred: BoundLiteralPredicate[L], transform: Callable[[Any], Any], width: int
) -> Optional[UnboundPredicate[Any]]:
    boundary = pred.literal

    if isinstance(pred, (BoundLessThan, BoundLessThanOrEqual)):
        return LessThanOrEqual(Reference(name), _transform_literal(transform, boundary))
    elif isinstance(pred, (BoundGreaterThan, BoundGreaterThanOrEqual)):
        return GreaterThanOrEqual(Reference(name), _transform_literal(transform, boundary))
    elif isinstance(pred, BoundEqualTo):
        return EqualTo(Reference(name), _transform_literal(transform, boundary))
    elif isinstance(pred, BoundStartsWith):
        return StartsWith(Reference(name), _transform_literal(transform, boundary))
    elif isinstance(pred, BoundNotStartsWith):
        if len(boundary.value) < width:  # type: ignore
            return NotStartsWith(Reference(name), boundary)
        elif len(boundary.value) == width:  # type: ignore
            return NotEqualTo(Reference(name), boundary)
        # a longer prefix is cut by the truncation, every partition may hold a match
        return None
    return None


def _truncate_array_strict(
    name: str, pred: BoundLiteralPredicate[L], transform: Callable[[Any], Any], width: int
) -> Optional[UnboundPredicate[Any]]:
    boundary = pred.literal

    if isinstance(pred, (BoundLessThan, BoundLessThanOrEqual)):
        return LessThan(Reference(name), _transform_literal(transform, boundary))
    elif isinstance(pred, (BoundGreaterThan, BoundGreaterThanOrEqual)):
        return GreaterThan(Reference(name), _transform_literal(transform, boundary))
    elif isinstance(pred, BoundNotEqualTo):
        return NotEqualTo(Reference(name), _transform_literal(transform, boundary))
    elif isinstance(pred, BoundStartsWith):
        if len(boundary.value) < width:  # type: ignore
            return StartsWith(Reference(name), boundary)
        elif len(boundary.value) == width:  # type: ignore
            return EqualTo(Reference(name), boundary)
        return None
    elif isinstance(pred, BoundNotStartsWith):
        if len(boundary.value) < width:  # type: ignore
            return NotStartsWith(Reference(name), boundary)
        elif len(boundary.value) == width:  # type: ignore
            return NotEqualTo(Reference(name), boundary)
        return NotStartsWith(Reference(name), _transform_literal(transform, boundary))
    return None


def _set_apply_transform(name: str, pred: BoundSetPredicate[L], transform: Callable[[Any], Any]) -> UnboundPredicate[Any]:
    return pred.as_unbound(Reference(name), {_transform_literal(transform, lit) for lit in pred.literals})
