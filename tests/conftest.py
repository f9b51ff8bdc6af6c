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
"""Shared fixtures.

Fixtures are defined here so that they are available to every test module. A fixture
that is used in a pytest.mark.parametrize decorator can be retrieved by name through
the built-in ``request`` fixture: ``request.getfixturevalue(fixture_name)``.
"""
import pytest

from pyresidual.partitioning import PartitionField, PartitionSpec
from pyresidual.schema import Schema
from pyresidual.transforms import (
    BucketTransform,
    DayTransform,
    HourTransform,
    IdentityTransform,
    TruncateTransform,
)
from pyresidual.types import (
    BooleanType,
    DateType,
    DecimalType,
    DoubleType,
    FloatType,
    IntegerType,
    LongType,
    NestedField,
    StringType,
    StructType,
    TimestampType,
)


@pytest.fixture(scope="session")
def table_schema_simple() -> Schema:
    return Schema(
        NestedField(field_id=1, name="foo", field_type=StringType(), required=False),
        NestedField(field_id=2, name="bar", field_type=IntegerType(), required=True),
        NestedField(field_id=3, name="baz", field_type=BooleanType(), required=False),
        schema_id=1,
        identifier_field_ids=[2],
    )


@pytest.fixture(scope="session")
def table_schema_nested() -> Schema:
    return Schema(
        NestedField(field_id=1, name="foo", field_type=StringType(), required=False),
        NestedField(field_id=2, name="bar", field_type=IntegerType(), required=True),
        NestedField(
            field_id=3,
            name="location",
            field_type=StructType(
                NestedField(field_id=4, name="latitude", field_type=FloatType(), required=False),
                NestedField(field_id=5, name="longitude", field_type=FloatType(), required=False),
            ),
            required=False,
        ),
        schema_id=1,
        identifier_field_ids=[2],
    )


@pytest.fixture(scope="session")
def schema() -> Schema:
    """A table with a column for every kind of partition transform."""
    return Schema(
        NestedField(1, "id", LongType(), required=False),
        NestedField(2, "data", StringType(), required=False),
        NestedField(3, "event_date", DateType(), required=False),
        NestedField(4, "ts", TimestampType(), required=False),
        NestedField(5, "price", DecimalType(9, 2), required=False),
        NestedField(6, "score", DoubleType(), required=False),
        NestedField(7, "category", StringType(), required=True),
    )


@pytest.fixture(scope="session")
def day_spec() -> PartitionSpec:
    return PartitionSpec(PartitionField(4, 1000, DayTransform(), "ts_day"))


@pytest.fixture(scope="session")
def hour_spec() -> PartitionSpec:
    return PartitionSpec(PartitionField(4, 1000, HourTransform(), "ts_hour"))


@pytest.fixture(scope="session")
def id_spec() -> PartitionSpec:
    return PartitionSpec(PartitionField(1, 1000, IdentityTransform(), "id_part"))


@pytest.fixture(scope="session")
def bucket_spec() -> PartitionSpec:
    return PartitionSpec(PartitionField(1, 1000, BucketTransform(16), "id_bucket"))


@pytest.fixture(scope="session")
def truncate_str_spec() -> PartitionSpec:
    return PartitionSpec(PartitionField(2, 1000, TruncateTransform(2), "data_trunc"))


@pytest.fixture(scope="session")
def truncate_int_spec() -> PartitionSpec:
    return PartitionSpec(PartitionField(1, 1000, TruncateTransform(10), "id_trunc"))


@pytest.fixture(scope="session")
def day_and_bucket_spec() -> PartitionSpec:
    """Two partition fields derived from the same timestamp column."""
    return PartitionSpec(
        PartitionField(4, 1000, DayTransform(), "ts_day"),
        PartitionField(4, 1001, BucketTransform(4), "ts_bucket"),
    )


@pytest.fixture(scope="session")
def multi_spec() -> PartitionSpec:
    return PartitionSpec(
        PartitionField(7, 1000, IdentityTransform(), "category"),
        PartitionField(4, 1001, DayTransform(), "ts_day"),
        PartitionField(1, 1002, BucketTransform(8), "id_bucket"),
    )
