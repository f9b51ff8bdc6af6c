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
"""Data types used in describing table schemas and partition tuples.

Example:
    >>> str(StructType(
    ...     NestedField(1, "required_field", StringType(), True),
    ...     NestedField(2, "optional_field", IntegerType(), False)
    ... ))
    'struct<1: required_field: required string, 2: optional_field: optional int>'
"""
import re
from typing import (
    Any,
    ClassVar,
    Dict,
    Literal,
    Optional,
    Tuple,
)

from pydantic import (
    Field,
    SerializeAsAny,
    field_validator,
    model_serializer,
)

from pyresidual.exceptions import ValidationError
from pyresidual.typedef import MetadataBaseModel
from pyresidual.utils.parsing import ParseNumberFromBrackets
from pyresidual.utils.singleton import Singleton

DECIMAL_REGEX = re.compile(r"decimal\((\d+),\s*(\d+)\)")
FIXED = "fixed"
FIXED_PARSER = ParseNumberFromBrackets(FIXED)


def _parse_decimal_type(decimal: str) -> Tuple[int, int]:
    matches = DECIMAL_REGEX.search(decimal)
    if matches:
        return int(matches.group(1)), int(matches.group(2))
    raise ValidationError(f"Could not parse {decimal} into a DecimalType")


def _parse_type(v: Any) -> Any:
    # Types are serialized as their string form, and structs as a dict
    if isinstance(v, str):
        if v in _PRIMITIVES_BY_NAME:
            return _PRIMITIVES_BY_NAME[v]()
        elif v.startswith(FIXED):
            return FixedType(FIXED_PARSER.match(v))
        elif v.startswith("decimal"):
            return DecimalType(*_parse_decimal_type(v))
        raise ValueError(f"Unknown type: {v}")
    if isinstance(v, dict) and v.get("type") == "struct":
        return StructType(**v)
    return v


class DataType(MetadataBaseModel):
    """Base type for all types."""

    @property
    def is_primitive(self) -> bool:
        return isinstance(self, PrimitiveType)

    @property
    def is_struct(self) -> bool:
        return isinstance(self, StructType)


class PrimitiveType(DataType, Singleton):
    """Base class for all primitive types, serialized as their string name."""

    root: ClassVar[str]

    @model_serializer
    def ser_model(self) -> str:
        return str(self)

    def __repr__(self) -> str:
        """Returns the string representation of the PrimitiveType class."""
        return f"{type(self).__name__}()"

    def __str__(self) -> str:
        """Returns the string representation of the PrimitiveType class."""
        return self.root


class FixedType(PrimitiveType):
    """A fixed data type.

    Example:
        >>> FixedType(8)
        FixedType(length=8)
        >>> FixedType(8) == FixedType(8)
        True
        >>> FixedType(19) == FixedType(25)
        False
    """

    length: int = Field()

    def __init__(self, length: int) -> None:
        super().__init__(length=length)

    def __len__(self) -> int:
        """Returns the length of an instance of the FixedType class."""
        return self.length

    def __str__(self) -> str:
        return f"fixed[{self.length}]"

    def __repr__(self) -> str:
        return f"FixedType(length={self.length})"

    def __getnewargs__(self) -> Tuple[int]:
        """A magic function for pickling the FixedType class."""
        return (self.length,)


class DecimalType(PrimitiveType):
    """A fixed-point decimal data type.

    Example:
        >>> DecimalType(32, 3)
        DecimalType(precision=32, scale=3)
        >>> DecimalType(8, 3) == DecimalType(8, 3)
        True
    """

    precision: int = Field()
    scale: int = Field()

    def __init__(self, precision: int, scale: int) -> None:
        super().__init__(precision=precision, scale=scale)

    def __repr__(self) -> str:
        return f"DecimalType(precision={self.precision}, scale={self.scale})"

    def __str__(self) -> str:
        return f"decimal({self.precision}, {self.scale})"

    def __getnewargs__(self) -> Tuple[int, int]:
        """A magic function for pickling the DecimalType class."""
        return self.precision, self.scale


class NestedField(DataType):
    """Represents a field of a struct.

    This is where field IDs, names, docs, and nullability are tracked.

    Example:
        >>> str(NestedField(
        ...     field_id=1,
        ...     name='foo',
        ...     field_type=FixedType(22),
        ...     required=False,
        ... ))
        '1: foo: optional fixed[22]'
        >>> str(NestedField(
        ...     field_id=2,
        ...     name='bar',
        ...     field_type=LongType(),
        ...     required=True,
        ...     doc="Just a long"
        ... ))
        '2: bar: required long (Just a long)'
    """

    field_id: int = Field(alias="id")
    name: str = Field()
    field_type: SerializeAsAny[DataType] = Field(alias="type")
    required: bool = Field(default=True)
    doc: Optional[str] = Field(default=None, repr=False)

    def __init__(
        self,
        field_id: Optional[int] = None,
        name: Optional[str] = None,
        field_type: Optional[DataType] = None,
        required: bool = True,
        doc: Optional[str] = None,
        **data: Any,
    ):
        # Positional arguments have to be mapped onto the aliases
        data["id"] = data["id"] if "id" in data else field_id
        data["name"] = data["name"] if "name" in data else name
        data["type"] = data["type"] if "type" in data else field_type
        data["required"] = data["required"] if "required" in data else required
        data["doc"] = data["doc"] if "doc" in data else doc
        super().__init__(**data)

    @field_validator("field_type", mode="before")
    @classmethod
    def _parse_field_type(cls, v: Any) -> Any:
        return _parse_type(v)

    def __str__(self) -> str:
        """Returns the string representation of the NestedField class."""
        doc = "" if not self.doc else f" ({self.doc})"
        req = "required" if self.required else "optional"
        return f"{self.field_id}: {self.name}: {req} {self.field_type}{doc}"

    def __getnewargs__(self) -> Tuple[int, str, DataType, bool, Optional[str]]:
        """A magic function for pickling the NestedField class."""
        return (self.field_id, self.name, self.field_type, self.required, self.doc)

    @property
    def optional(self) -> bool:
        return not self.required


class StructType(DataType):
    """A struct type, an ordered collection of NestedFields.

    Example:
        >>> str(StructType(
        ...     NestedField(1, "required_field", StringType(), True),
        ...     NestedField(2, "optional_field", IntegerType(), False)
        ... ))
        'struct<1: required_field: required string, 2: optional_field: optional int>'
    """

    type: Literal["struct"] = Field(default="struct")
    fields: Tuple[NestedField, ...] = Field(default_factory=tuple)

    def __init__(self, *fields: NestedField, **data: Any):
        # In case we use positional arguments, instead of keyword args
        if fields:
            data["fields"] = fields
        super().__init__(**data)

    def field(self, field_id: int) -> Optional[NestedField]:
        for field in self.fields:
            if field.field_id == field_id:
                return field
        return None

    def __str__(self) -> str:
        """Returns the string representation of the StructType class."""
        return f"struct<{', '.join(map(str, self.fields))}>"

    def __repr__(self) -> str:
        """Returns the string representation of the StructType class."""
        return f"StructType(fields=({', '.join(map(repr, self.fields))},))"

    def __len__(self) -> int:
        """Returns the length of an instance of the StructType class."""
        return len(self.fields)

    def __getnewargs__(self) -> Tuple[NestedField, ...]:
        """A magic function for pickling the StructType class."""
        return self.fields

    def __hash__(self) -> int:
        return hash(self.fields)

    def __eq__(self, other: Any) -> bool:
        """Compares the object if it is equal to another object."""
        return self.fields == other.fields if isinstance(other, StructType) else False


class BooleanType(PrimitiveType):
    """A boolean data type.

    Example:
        >>> column_foo = BooleanType()
        >>> isinstance(column_foo, BooleanType)
        True
        >>> column_foo
        BooleanType()
    """

    root: ClassVar[str] = "boolean"


class IntegerType(PrimitiveType):
    """A 32-bit signed integer data type, can be promoted to LongType.

    Attributes:
        max (int): The maximum allowed value for Integers (returns `2147483647`).
        min (int): The minimum allowed value for Integers (returns `-2147483648`).
    """

    root: ClassVar[str] = "int"

    max: ClassVar[int] = 2147483647
    min: ClassVar[int] = -2147483648


class LongType(PrimitiveType):
    """A 64-bit signed integer data type.

    Example:
        >>> column_foo = LongType()
        >>> column_foo
        LongType()
        >>> str(column_foo)
        'long'

    Attributes:
        max (int): The maximum allowed value for Longs (returns `9223372036854775807`).
        min (int): The minimum allowed value for Longs (returns `-9223372036854775808`).
    """

    root: ClassVar[str] = "long"

    max: ClassVar[int] = 9223372036854775807
    min: ClassVar[int] = -9223372036854775808


class FloatType(PrimitiveType):
    """A 32-bit IEEE 754 floating point data type, can be promoted to DoubleType.

    Attributes:
        max (float): The maximum allowed value for Floats (returns `3.4028235e38`).
        min (float): The minimum allowed value for Floats (returns `-3.4028235e38`).
    """

    root: ClassVar[str] = "float"

    max: ClassVar[float] = 3.4028235e38
    min: ClassVar[float] = -3.4028235e38


class DoubleType(PrimitiveType):
    """A 64-bit IEEE 754 floating point data type."""

    root: ClassVar[str] = "double"


class DateType(PrimitiveType):
    """A calendar date without a timezone or time, stored as days from 1970-01-01."""

    root: ClassVar[str] = "date"


class TimeType(PrimitiveType):
    """A time of day with microsecond precision, without a date or timezone."""

    root: ClassVar[str] = "time"


class TimestampType(PrimitiveType):
    """A timestamp with microsecond precision, without a timezone."""

    root: ClassVar[str] = "timestamp"


class TimestamptzType(PrimitiveType):
    """A timestamp with microsecond precision, stored as UTC."""

    root: ClassVar[str] = "timestamptz"


class StringType(PrimitiveType):
    """An arbitrary-length character sequence, encoded with UTF-8.

    Example:
        >>> column_foo = StringType()
        >>> isinstance(column_foo, StringType)
        True
        >>> column_foo
        StringType()
    """

    root: ClassVar[str] = "string"


class UUIDType(PrimitiveType):
    """A universally unique identifier."""

    root: ClassVar[str] = "uuid"


class BinaryType(PrimitiveType):
    """An arbitrary-length byte array."""

    root: ClassVar[str] = "binary"


_PRIMITIVES_BY_NAME: Dict[str, Any] = {
    primitive.root: primitive
    for primitive in (
        BooleanType,
        IntegerType,
        LongType,
        FloatType,
        DoubleType,
        DateType,
        TimeType,
        TimestampType,
        TimestamptzType,
        StringType,
        UUIDType,
        BinaryType,
    )
}
