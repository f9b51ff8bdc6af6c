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
from functools import cached_property
from typing import (
    Any,
    Dict,
    List,
    Optional,
    Tuple,
)
from urllib.parse import quote

from pydantic import Field, field_serializer, field_validator

from pyresidual.exceptions import ValidationError
from pyresidual.schema import Schema
from pyresidual.transforms import Transform, UnknownTransform, parse_transform
from pyresidual.typedef import MetadataBaseModel, StructProtocol
from pyresidual.types import NestedField, StructType

INITIAL_PARTITION_SPEC_ID = 0
PARTITION_FIELD_ID_START: int = 1000


class PartitionField(MetadataBaseModel):
    """How one partition value is derived from a source column.

    Attributes:
        source_id(int): The id of the source column in the table schema.
        field_id(int): The id of the partition field.
        transform(Transform): The transform that produces the partition value.
        name(str): The name of the partition field.
    """

    source_id: int = Field(alias="source-id")
    field_id: int = Field(alias="field-id")
    transform: Transform = Field()
    name: str = Field()

    def __init__(
        self,
        source_id: Optional[int] = None,
        field_id: Optional[int] = None,
        transform: Optional[Any] = None,
        name: Optional[str] = None,
        **data: Any,
    ):
        if source_id is not None:
            data["source-id"] = source_id
        if field_id is not None:
            data["field-id"] = field_id
        if transform is not None:
            data["transform"] = transform
        if name is not None:
            data["name"] = name
        super().__init__(**data)

    @field_validator("transform", mode="before")
    @classmethod
    def _parse_transform(cls, v: Any) -> Any:
        return parse_transform(v)

    @field_serializer("transform")
    def _serialize_transform(self, transform: Transform) -> str:
        return str(transform)

    def __str__(self) -> str:
        return f"{self.field_id}: {self.name}: {self.transform}({self.source_id})"


class PartitionSpec(MetadataBaseModel):
    """The ordered partition fields a table is partitioned by.

    Several fields may be derived from the same source column, for example a day and
    a bucket of one timestamp.

    Attributes:
        spec_id(int): The id of the spec.
        fields(Tuple[PartitionField, ...]): The partition fields, in the order of the partition tuple.
    """

    spec_id: int = Field(alias="spec-id", default=INITIAL_PARTITION_SPEC_ID)
    fields: Tuple[PartitionField, ...] = Field(default_factory=tuple)

    def __init__(self, *fields: PartitionField, **data: Any):
        if fields:
            data["fields"] = tuple(fields)
        super().__init__(**data)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, PartitionSpec):
            return False
        return self.spec_id == other.spec_id and self.fields == other.fields

    def __hash__(self) -> int:
        return hash((self.spec_id, self.fields))

    def __str__(self) -> str:
        result_str = "["
        if self.fields:
            result_str += "\n  " + "\n  ".join([str(field) for field in self.fields]) + "\n"
        result_str += "]"
        return result_str

    def __repr__(self) -> str:
        fields = f"{', '.join(repr(column) for column in self.fields)}, " if self.fields else ""
        return f"PartitionSpec({fields}spec_id={self.spec_id})"

    def is_unpartitioned(self) -> bool:
        return not self.fields

    @cached_property
    def _source_id_to_fields(self) -> Dict[int, List[PartitionField]]:
        source_id_to_fields: Dict[int, List[PartitionField]] = {}
        for partition_field in self.fields:
            source_id_to_fields.setdefault(partition_field.source_id, []).append(partition_field)
        return source_id_to_fields

    def fields_by_source_id(self, source_id: int) -> List[PartitionField]:
        """All partition fields derived from the source column, in spec order. Empty when there are none."""
        return self._source_id_to_fields.get(source_id, [])

    def partition_type(self, schema: Schema) -> StructType:
        """Produces the struct type of the partition tuple.

        The partition fields are all optional: transforms produce null for a null input,
        so a partition value is null whenever its source column can be. The values of an
        unknown transform are typed as strings, they are carried but never evaluated.

        Args:
            schema: The table schema the spec is defined on.

        Raises:
            ValidationError: When a known transform cannot be applied to its source column.

        Returns:
            StructType: One NestedField per PartitionField, in spec order.
        """
        nested_fields = []
        for field in self.fields:
            source_type = schema.find_type(field.source_id)
            if not isinstance(field.transform, UnknownTransform) and not field.transform.can_transform(source_type):
                raise ValidationError(f"Cannot apply {field.transform} to source column of type {source_type}: {field}")
            result_type = field.transform.result_type(source_type)
            nested_fields.append(NestedField(field.field_id, field.name, result_type, required=False))
        return StructType(*nested_fields)

    def partition_to_path(self, data: StructProtocol, schema: Schema) -> str:
        """Renders a partition tuple as a ``name=value/...`` path, for logs and messages."""
        partition_type = self.partition_type(schema)
        segments = []
        for pos, partition_field in enumerate(self.fields):
            value_str = partition_field.transform.to_human_string(partition_type.fields[pos].field_type, value=data[pos])
            segments.append(f"{quote(partition_field.name, safe='')}={quote(value_str, safe='')}")
        return "/".join(segments)


UNPARTITIONED_PARTITION_SPEC = PartitionSpec(spec_id=0)
