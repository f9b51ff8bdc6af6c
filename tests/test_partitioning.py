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
import pytest

from pyresidual.exceptions import ValidationError
from pyresidual.partitioning import UNPARTITIONED_PARTITION_SPEC, PartitionField, PartitionSpec
from pyresidual.schema import Schema
from pyresidual.transforms import BucketTransform, DayTransform, IdentityTransform, TruncateTransform
from pyresidual.typedef import Record
from pyresidual.types import (
    DateType,
    IntegerType,
    NestedField,
    StringType,
    StructType,
)


def test_partition_field_init() -> None:
    bucket_transform = BucketTransform(100)  # type: ignore
    partition_field = PartitionField(3, 1000, bucket_transform, "id")

    assert partition_field.source_id == 3
    assert partition_field.field_id == 1000
    assert partition_field.transform == bucket_transform
    assert partition_field.name == "id"
    assert partition_field == partition_field
    assert str(partition_field) == "1000: id: bucket[100](3)"
    assert (
        repr(partition_field)
        == "PartitionField(source_id=3, field_id=1000, transform=BucketTransform(num_buckets=100), name='id')"
    )


def test_partition_field_from_string_transform() -> None:
    assert PartitionField(source_id=1, field_id=1000, transform="truncate[4]", name="t").transform == TruncateTransform(4)


def test_partition_field_serialize() -> None:
    partition_field = PartitionField(source_id=4, field_id=1000, transform=DayTransform(), name="ts_day")
    assert partition_field.model_dump() == {"source-id": 4, "field-id": 1000, "transform": "day", "name": "ts_day"}
    assert partition_field.model_dump_json() == '{"source-id":4,"field-id":1000,"transform":"day","name":"ts_day"}'


def test_partition_field_deserialize() -> None:
    json = '{"source-id":1,"field-id":1000,"transform":"bucket[16]","name":"id_bucket"}'
    assert PartitionField.model_validate_json(json) == PartitionField(1, 1000, BucketTransform(16), "id_bucket")


def test_partition_spec_init() -> None:
    bucket_transform: BucketTransform = BucketTransform(4)  # type: ignore

    id_field1 = PartitionField(3, 1001, bucket_transform, "id")
    partition_spec1 = PartitionSpec(id_field1)

    assert partition_spec1.spec_id == 0
    assert partition_spec1 == partition_spec1
    assert partition_spec1 != id_field1
    assert str(partition_spec1) == f"[\n  {str(id_field1)}\n]"
    assert not partition_spec1.is_unpartitioned()
    # only differ by PartitionField field_id
    id_field2 = PartitionField(3, 1002, bucket_transform, "id")
    partition_spec2 = PartitionSpec(id_field2)
    assert partition_spec1 != partition_spec2
    assert partition_spec1.fields_by_source_id(3) == [id_field1]
    assert partition_spec1.fields_by_source_id(1925) == []


def test_partition_spec_repr() -> None:
    field = PartitionField(1, 1000, IdentityTransform(), "id")
    assert repr(PartitionSpec(field, spec_id=3)) == f"PartitionSpec({repr(field)}, spec_id=3)"
    assert repr(PartitionSpec()) == "PartitionSpec(spec_id=0)"


def test_unpartitioned() -> None:
    assert UNPARTITIONED_PARTITION_SPEC.is_unpartitioned()
    assert PartitionSpec().is_unpartitioned()
    assert str(UNPARTITIONED_PARTITION_SPEC) == "[]"
    assert UNPARTITIONED_PARTITION_SPEC == PartitionSpec()
    assert hash(UNPARTITIONED_PARTITION_SPEC) == hash(PartitionSpec())


def test_fields_by_source_id_keeps_spec_order(day_and_bucket_spec: PartitionSpec) -> None:
    fields = day_and_bucket_spec.fields_by_source_id(4)
    assert [field.name for field in fields] == ["ts_day", "ts_bucket"]


def test_partition_spec_serialize() -> None:
    spec = PartitionSpec(PartitionField(1, 1000, TruncateTransform(19), "str_truncate"), spec_id=3)
    assert (
        spec.model_dump_json()
        == '{"spec-id":3,"fields":[{"source-id":1,"field-id":1000,"transform":"truncate[19]","name":"str_truncate"}]}'
    )


def test_partition_spec_deserialize() -> None:
    json = '{"spec-id":3,"fields":[{"source-id":1,"field-id":1000,"transform":"truncate[19]","name":"str_truncate"}]}'
    expected = PartitionSpec(PartitionField(1, 1000, TruncateTransform(19), "str_truncate"), spec_id=3)
    assert PartitionSpec.model_validate_json(json) == expected


def test_partition_type(schema: Schema, multi_spec: PartitionSpec) -> None:
    assert multi_spec.partition_type(schema) == StructType(
        NestedField(1000, "category", StringType(), required=False),
        NestedField(1001, "ts_day", DateType(), required=False),
        NestedField(1002, "id_bucket", IntegerType(), required=False),
    )


def test_partition_type_unpartitioned(schema: Schema) -> None:
    assert PartitionSpec().partition_type(schema) == StructType()


def test_partition_type_invalid_transform(schema: Schema) -> None:
    spec = PartitionSpec(PartitionField(2, 1000, DayTransform(), "data_day"))
    with pytest.raises(ValidationError) as exc_info:
        spec.partition_type(schema)
    assert "Cannot apply day to source column of type string" in str(exc_info.value)


def test_partition_type_unknown_transform(schema: Schema) -> None:
    spec = PartitionSpec(
        PartitionField(4, 1000, DayTransform(), "ts_day"),
        PartitionField(2, 1001, "zorder", "data_zorder"),
    )
    assert spec.partition_type(schema) == StructType(
        NestedField(1000, "ts_day", DateType(), required=False),
        NestedField(1001, "data_zorder", StringType(), required=False),
    )


def test_partition_type_unknown_column(schema: Schema) -> None:
    spec = PartitionSpec(PartitionField(99, 1000, IdentityTransform(), "missing"))
    with pytest.raises(ValueError):
        spec.partition_type(schema)


def test_partition_to_path(schema: Schema, multi_spec: PartitionSpec) -> None:
    path = multi_spec.partition_to_path(Record("sci fi", 17501, 3), schema)
    assert path == "category=sci%20fi/ts_day=2017-12-01/id_bucket=3"


def test_partition_to_path_null(schema: Schema, day_spec: PartitionSpec) -> None:
    assert day_spec.partition_to_path(Record(None), schema) == "ts_day=null"
