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
# pylint:disable=redefined-outer-name
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

import pytest

from pyresidual.exceptions import ValidationError
from pyresidual.expressions import (
    BooleanExpression,
    EqualTo,
    GreaterThan,
    GreaterThanOrEqual,
    In,
    IsNull,
    LessThan,
    LessThanOrEqual,
    NotEqualTo,
    NotIn,
    NotNull,
    NotStartsWith,
    StartsWith,
    UnboundPredicate,
)
from pyresidual.schema import Schema
from pyresidual.transforms import (
    BucketTransform,
    DayTransform,
    HourTransform,
    IdentityTransform,
    MonthTransform,
    Transform,
    TruncateTransform,
    UnknownTransform,
    VoidTransform,
    YearTransform,
    parse_transform,
)
from pyresidual.types import (
    BinaryType,
    BooleanType,
    DateType,
    DecimalType,
    DoubleType,
    FixedType,
    IntegerType,
    LongType,
    NestedField,
    StringType,
    TimestampType,
    TimestamptzType,
    TimeType,
    UUIDType,
)
from pyresidual.utils.datetime import (
    date_str_to_days,
    time_str_to_micros,
    timestamp_to_micros,
    timestamptz_to_micros,
)


@pytest.mark.parametrize(
    "test_input,test_type,expected",
    [
        (1, IntegerType(), 1392991556),
        (34, IntegerType(), 2017239379),
        (34, LongType(), 2017239379),
        (date_str_to_days("2017-11-16"), DateType(), -653330422),
        (time_str_to_micros("22:31:08"), TimeType(), -662762989),
        (timestamp_to_micros("2017-11-16T22:31:08"), TimestampType(), -2047944441),
        (timestamptz_to_micros("2017-11-16T14:31:08-08:00"), TimestamptzType(), -2047944441),
        (b"\x00\x01\x02\x03", BinaryType(), -188683207),
        (b"\x00\x01\x02\x03", FixedType(4), -188683207),
        ("iceberg", StringType(), 1210000089),
        (UUID("f79c3e09-677c-4bbd-a479-3f349cb785e7"), UUIDType(), 1488055340),
    ],
)
def test_bucket_hash_values(test_input: Any, test_type: Any, expected: Any) -> None:
    assert BucketTransform(num_buckets=8).transform(test_type, bucket=False)(test_input) == expected


@pytest.mark.parametrize(
    "transform,value,expected",
    [
        (BucketTransform(100).transform(IntegerType()), 34, 79),
        (BucketTransform(100).transform(LongType()), 34, 79),
        (BucketTransform(100).transform(DecimalType(9, 2)), Decimal("14.20"), 59),
        (BucketTransform(100).transform(StringType()), "iceberg", 89),
        (BucketTransform(100).transform(IntegerType()), None, None),
    ],
)
def test_buckets(transform: Any, value: Any, expected: int) -> None:
    assert transform(value) == expected


@pytest.mark.parametrize(
    "type_var",
    [
        BinaryType(),
        DateType(),
        DecimalType(8, 5),
        FixedType(8),
        IntegerType(),
        LongType(),
        StringType(),
        TimestampType(),
        TimestamptzType(),
        TimeType(),
        UUIDType(),
    ],
)
def test_bucket_method(type_var: Any) -> None:
    bucket_transform = BucketTransform(8)
    assert str(bucket_transform) == str(eval(repr(bucket_transform)))
    assert bucket_transform.can_transform(type_var)
    assert bucket_transform.num_buckets == 8
    assert bucket_transform.apply(type_var, None) is None
    assert bucket_transform.to_human_string(type_var, "test") == "test"
    assert bucket_transform.result_type(type_var) == IntegerType()


def test_bucket_cannot_transform() -> None:
    assert not BucketTransform(8).can_transform(BooleanType())
    assert not BucketTransform(8).can_transform(DoubleType())
    with pytest.raises(ValueError):
        BucketTransform(8).transform(BooleanType())


def test_bucket_requires_positive_buckets() -> None:
    with pytest.raises(ValueError):
        BucketTransform(0)


@pytest.mark.parametrize(
    "transform,type_var,value,expected",
    [
        (YearTransform(), DateType(), date_str_to_days("2017-12-01"), 47),
        (YearTransform(), TimestampType(), 1512151975038194, 47),
        (YearTransform(), TimestampType(), -1, -1),
        (MonthTransform(), DateType(), 17501, 575),
        (MonthTransform(), TimestampType(), 1512151975038194, 575),
        (MonthTransform(), DateType(), -1, -1),
        (DayTransform(), DateType(), 17501, 17501),
        (DayTransform(), TimestampType(), 1512151975038194, 17501),
        (DayTransform(), TimestampType(), -1, -1),
        (HourTransform(), TimestampType(), 1512151975038194, 420042),
        (HourTransform(), TimestampType(), -1, -1),
    ],
)
def test_time_transforms(transform: Transform, type_var: Any, value: int, expected: int) -> None:
    assert transform.transform(type_var)(value) == expected
    assert transform.transform(type_var)(None) is None


def test_time_transform_types() -> None:
    assert YearTransform().result_type(DateType()) == IntegerType()
    assert MonthTransform().result_type(TimestampType()) == IntegerType()
    assert DayTransform().result_type(TimestampType()) == DateType()
    assert HourTransform().result_type(TimestampType()) == IntegerType()
    assert not HourTransform().can_transform(DateType())
    assert not DayTransform().can_transform(StringType())
    with pytest.raises(ValueError):
        HourTransform().transform(DateType())


@pytest.mark.parametrize(
    "transform,value,expected",
    [
        (YearTransform(), 47, "2017"),
        (MonthTransform(), 575, "2017-12"),
        (DayTransform(), 17501, "2017-12-01"),
        (HourTransform(), 420042, "2017-12-01-18"),
        (DayTransform(), None, "null"),
    ],
)
def test_time_to_human_string(transform: Transform, value: Optional[int], expected: str) -> None:
    assert transform.to_human_string(IntegerType(), value) == expected


def test_time_transforms_are_singletons() -> None:
    assert DayTransform() is DayTransform()
    assert IdentityTransform() is IdentityTransform()
    assert VoidTransform() is VoidTransform()


@pytest.mark.parametrize(
    "type_var,value,expected",
    [
        (IntegerType(), 1, 0),
        (IntegerType(), 15, 10),
        (IntegerType(), -1, -10),
        (LongType(), -15, -20),
        (StringType(), "iceberg", "ice"),
        (StringType(), "ic", "ic"),
        (BinaryType(), b"\x00\x01\x02\x03", b"\x00\x01\x02"),
        (DecimalType(9, 2), Decimal("12.34"), Decimal("12.30")),
        (DecimalType(9, 2), Decimal("-0.05"), Decimal("-0.10")),
    ],
)
def test_truncate(type_var: Any, value: Any, expected: Any) -> None:
    width = 3 if isinstance(type_var, (StringType, BinaryType)) else 10
    truncate = TruncateTransform(width)
    assert truncate.transform(type_var)(value) == expected
    assert truncate.transform(type_var)(None) is None
    assert truncate.result_type(type_var) == type_var


def test_truncate_method() -> None:
    truncate = TruncateTransform(10)
    assert str(truncate) == "truncate[10]"
    assert repr(truncate) == "TruncateTransform(width=10)"
    assert truncate.width == 10
    assert truncate.preserves_order
    assert truncate.to_human_string(BinaryType(), b"\x00\x01\x02\x03") == "AAECAw=="
    assert not truncate.can_transform(DateType())


@pytest.mark.parametrize(
    "type_var,value,expected",
    [
        (LongType(), 123, "123"),
        (StringType(), "abc", "abc"),
        (DateType(), 17501, "2017-12-01"),
        (TimeType(), 36775038194, "10:12:55.038194"),
        (TimestampType(), 1512151975038194, "2017-12-01T18:12:55.038194"),
        (TimestamptzType(), 1512151975038194, "2017-12-01T18:12:55.038194+00:00"),
        (BinaryType(), b"\x00\x01\x02\x03", "AAECAw=="),
        (DecimalType(9, 2), Decimal("14.20"), "14.20"),
        (LongType(), None, "null"),
    ],
)
def test_identity_human_string(type_var: Any, value: Any, expected: str) -> None:
    assert IdentityTransform().to_human_string(type_var, value) == expected


def test_identity_method() -> None:
    identity = IdentityTransform()
    assert str(identity) == "identity"
    assert repr(identity) == "IdentityTransform()"
    assert identity.can_transform(StringType())
    assert identity.result_type(DateType()) == DateType()
    assert identity.apply(StringType(), "x") == "x"


def test_void_transform() -> None:
    void = VoidTransform()
    assert void.apply(StringType(), "x") is None
    assert void.can_transform(StringType())
    assert void.to_human_string(StringType(), "x") == "null"
    assert str(void) == "void"
    assert not void.preserves_order


def test_unknown_transform() -> None:
    unknown = UnknownTransform(transform="zorder")
    assert str(unknown) == "zorder"
    assert repr(unknown) == "UnknownTransform(transform='zorder')"
    assert not unknown.can_transform(StringType())
    with pytest.raises(AttributeError) as exc_info:
        unknown.transform(StringType())
    assert "Cannot apply unsupported transform: zorder" in str(exc_info.value)


@pytest.mark.parametrize(
    "as_str,expected",
    [
        ("identity", IdentityTransform()),
        ("void", VoidTransform()),
        ("bucket[16]", BucketTransform(16)),
        ("truncate[4]", TruncateTransform(4)),
        ("year", YearTransform()),
        ("month", MonthTransform()),
        ("day", DayTransform()),
        ("hour", HourTransform()),
        ("zorder", UnknownTransform(transform="zorder")),
    ],
)
def test_parse_transform(as_str: str, expected: Transform) -> None:
    parsed = parse_transform(as_str)
    assert parsed == expected
    assert str(parsed) == as_str
    assert parse_transform(parsed) is parsed


def test_parse_transform_invalid_width() -> None:
    with pytest.raises(ValidationError) as exc_info:
        parse_transform("bucket[abc]")
    assert "Could not match bucket[abc], expected format bucket[22]" in str(exc_info.value)


@pytest.mark.parametrize(
    "transform,serialized",
    [
        (BucketTransform(16), '"bucket[16]"'),
        (TruncateTransform(4), '"truncate[4]"'),
        (DayTransform(), '"day"'),
        (IdentityTransform(), '"identity"'),
    ],
)
def test_transform_serialize(transform: Transform, serialized: str) -> None:
    assert transform.model_dump_json() == serialized


def test_transform_equality() -> None:
    assert BucketTransform(16) == BucketTransform(16)
    assert BucketTransform(16) != BucketTransform(8)
    assert BucketTransform(16) != TruncateTransform(16)
    assert hash(TruncateTransform(4)) == hash(TruncateTransform(4))
    assert BucketTransform(16) != "bucket[16]"


@pytest.fixture
def projection_schema() -> Schema:
    return Schema(
        NestedField(1, "id", LongType(), required=False),
        NestedField(2, "data", StringType(), required=False),
        NestedField(3, "ts", TimestampType(), required=False),
        NestedField(4, "event_date", DateType(), required=False),
        NestedField(5, "price", DecimalType(9, 2), required=False),
    )


def _project(schema: Schema, transform: Transform, pred: UnboundPredicate[Any]) -> Optional[BooleanExpression]:
    return transform.project("part", pred.bind(schema))  # type: ignore


def _strict(schema: Schema, transform: Transform, pred: UnboundPredicate[Any]) -> Optional[BooleanExpression]:
    return transform.strict_project("part", pred.bind(schema))  # type: ignore


@pytest.mark.parametrize(
    "pred,expected",
    [
        (LessThan("id", 25), LessThan("part", 20)),
        (LessThanOrEqual("id", 25), LessThan("part", 20)),
        (LessThanOrEqual("id", 29), LessThan("part", 30)),
        (GreaterThan("id", 25), GreaterThan("part", 20)),
        (GreaterThan("id", 29), GreaterThan("part", 20)),
        (GreaterThanOrEqual("id", 25), GreaterThan("part", 20)),
        (GreaterThanOrEqual("id", 30), GreaterThan("part", 20)),
        (NotEqualTo("id", 25), NotEqualTo("part", 20)),
        (NotIn("id", {25, 36}), NotIn("part", {20, 30})),
        (EqualTo("id", 25), None),
        (In("id", {25, 36}), None),
        (IsNull("id"), IsNull("part")),
        (NotNull("id"), NotNull("part")),
    ],
)
def test_truncate_number_strict_projection(projection_schema: Schema, pred: Any, expected: Any) -> None:
    assert _strict(projection_schema, TruncateTransform(10), pred) == expected


@pytest.mark.parametrize(
    "pred,expected",
    [
        (LessThan("id", 25), LessThanOrEqual("part", 20)),
        (LessThan("id", 20), LessThanOrEqual("part", 10)),
        (LessThanOrEqual("id", 25), LessThanOrEqual("part", 20)),
        (GreaterThan("id", 25), GreaterThanOrEqual("part", 20)),
        (GreaterThan("id", 29), GreaterThanOrEqual("part", 30)),
        (GreaterThanOrEqual("id", 25), GreaterThanOrEqual("part", 20)),
        (EqualTo("id", 25), EqualTo("part", 20)),
        (In("id", {25, 36}), In("part", {20, 30})),
        (NotEqualTo("id", 25), None),
        (NotIn("id", {25, 36}), None),
    ],
)
def test_truncate_number_projection(projection_schema: Schema, pred: Any, expected: Any) -> None:
    assert _project(projection_schema, TruncateTransform(10), pred) == expected


def test_truncate_decimal_projection(projection_schema: Schema) -> None:
    truncate = TruncateTransform(10)
    assert _strict(projection_schema, truncate, LessThanOrEqual("price", "12.34")) == LessThan("part", Decimal("12.30"))
    assert _strict(projection_schema, truncate, LessThanOrEqual("price", "12.39")) == LessThan("part", Decimal("12.40"))
    assert _project(projection_schema, truncate, GreaterThan("price", "12.39")) == GreaterThanOrEqual("part", Decimal("12.40"))


@pytest.mark.parametrize(
    "pred,expected",
    [
        (LessThan("data", "abc"), LessThan("part", "ab")),
        (LessThanOrEqual("data", "abc"), LessThan("part", "ab")),
        (GreaterThan("data", "abc"), GreaterThan("part", "ab")),
        (GreaterThanOrEqual("data", "abc"), GreaterThan("part", "ab")),
        (NotEqualTo("data", "abc"), NotEqualTo("part", "ab")),
        (EqualTo("data", "abc"), None),
        (StartsWith("data", "a"), StartsWith("part", "a")),
        (StartsWith("data", "ab"), EqualTo("part", "ab")),
        (StartsWith("data", "abc"), None),
        (NotStartsWith("data", "a"), NotStartsWith("part", "a")),
        (NotStartsWith("data", "ab"), NotEqualTo("part", "ab")),
        (NotStartsWith("data", "abc"), NotStartsWith("part", "ab")),
        (NotIn("data", {"abc", "xyz"}), NotIn("part", {"ab", "xy"})),
    ],
)
def test_truncate_string_strict_projection(projection_schema: Schema, pred: Any, expected: Any) -> None:
    assert _strict(projection_schema, TruncateTransform(2), pred) == expected


@pytest.mark.parametrize(
    "pred,expected",
    [
        (LessThan("data", "abc"), LessThanOrEqual("part", "ab")),
        (GreaterThanOrEqual("data", "abc"), GreaterThanOrEqual("part", "ab")),
        (EqualTo("data", "abc"), EqualTo("part", "ab")),
        (StartsWith("data", "a"), StartsWith("part", "a")),
        (StartsWith("data", "abc"), StartsWith("part", "ab")),
        (NotStartsWith("data", "a"), NotStartsWith("part", "a")),
        (NotStartsWith("data", "ab"), NotEqualTo("part", "ab")),
        (NotStartsWith("data", "abc"), None),
        (In("data", {"abc", "xyz"}), In("part", {"ab", "xy"})),
        (NotEqualTo("data", "abc"), None),
    ],
)
def test_truncate_string_projection(projection_schema: Schema, pred: Any, expected: Any) -> None:
    assert _project(projection_schema, TruncateTransform(2), pred) == expected


DAY_10 = date_str_to_days("2022-01-10")


@pytest.mark.parametrize(
    "pred,expected",
    [
        (LessThan("ts", "2022-01-10T12:00:00"), LessThan("part", DAY_10)),
        (LessThan("ts", "2022-01-10T00:00:00"), LessThan("part", DAY_10)),
        (LessThanOrEqual("ts", "2022-01-10T12:00:00"), LessThan("part", DAY_10)),
        (LessThanOrEqual("ts", "2022-01-10T23:59:59.999999"), LessThan("part", DAY_10 + 1)),
        (GreaterThan("ts", "2022-01-10T12:00:00"), GreaterThan("part", DAY_10)),
        (GreaterThanOrEqual("ts", "2022-01-10T12:00:00"), GreaterThan("part", DAY_10)),
        (GreaterThanOrEqual("ts", "2022-01-10T00:00:00"), GreaterThan("part", DAY_10 - 1)),
        (NotEqualTo("ts", "2022-01-10T12:00:00"), NotEqualTo("part", DAY_10)),
        (EqualTo("ts", "2022-01-10T12:00:00"), None),
        (IsNull("ts"), IsNull("part")),
    ],
)
def test_day_strict_projection(projection_schema: Schema, pred: Any, expected: Any) -> None:
    assert _strict(projection_schema, DayTransform(), pred) == expected


@pytest.mark.parametrize(
    "pred,expected",
    [
        (LessThan("ts", "2022-01-10T12:00:00"), LessThanOrEqual("part", DAY_10)),
        (LessThan("ts", "2022-01-10T00:00:00"), LessThanOrEqual("part", DAY_10 - 1)),
        (LessThanOrEqual("ts", "2022-01-10T12:00:00"), LessThanOrEqual("part", DAY_10)),
        (GreaterThan("ts", "2022-01-10T23:59:59.999999"), GreaterThanOrEqual("part", DAY_10 + 1)),
        (GreaterThanOrEqual("ts", "2022-01-10T12:00:00"), GreaterThanOrEqual("part", DAY_10)),
        (EqualTo("ts", "2022-01-10T12:00:00"), EqualTo("part", DAY_10)),
        (NotEqualTo("ts", "2022-01-10T12:00:00"), None),
    ],
)
def test_day_projection(projection_schema: Schema, pred: Any, expected: Any) -> None:
    assert _project(projection_schema, DayTransform(), pred) == expected


def test_month_strict_projection_on_date(projection_schema: Schema) -> None:
    # 2022-01 is month 624
    assert _strict(projection_schema, MonthTransform(), LessThan("event_date", "2022-01-15")) == LessThan("part", 624)
    assert _strict(projection_schema, MonthTransform(), LessThanOrEqual("event_date", "2022-01-31")) == LessThan("part", 625)
    assert _strict(projection_schema, MonthTransform(), GreaterThanOrEqual("event_date", "2022-01-01")) == GreaterThan(
        "part", 623
    )


def test_year_strict_projection_on_timestamp(projection_schema: Schema) -> None:
    assert _strict(projection_schema, YearTransform(), GreaterThan("ts", "2022-06-01T00:00:00")) == GreaterThan("part", 52)
    assert _strict(projection_schema, YearTransform(), NotIn("ts", {"2021-06-01T00:00:00", "2022-06-01T00:00:00"})) == NotIn(
        "part", {51, 52}
    )


def test_hour_strict_projection(projection_schema: Schema) -> None:
    hour = timestamp_to_micros("2022-01-10T12:00:00") // 3_600_000_000
    assert _strict(projection_schema, HourTransform(), GreaterThanOrEqual("ts", "2022-01-10T12:00:00")) == GreaterThan(
        "part", hour - 1
    )
    assert _strict(projection_schema, HourTransform(), GreaterThanOrEqual("ts", "2022-01-10T12:30:00")) == GreaterThan(
        "part", hour
    )


def test_bucket_projections(projection_schema: Schema) -> None:
    bucket = BucketTransform(16)
    value = bucket.transform(LongType())(25)
    other = bucket.transform(LongType())(36)

    assert _strict(projection_schema, bucket, NotEqualTo("id", 25)) == NotEqualTo("part", value)
    assert _strict(projection_schema, bucket, NotIn("id", {25, 36})) == NotIn("part", {value, other})
    assert _strict(projection_schema, bucket, EqualTo("id", 25)) is None
    assert _strict(projection_schema, bucket, LessThan("id", 25)) is None
    assert _strict(projection_schema, bucket, IsNull("id")) == IsNull("part")

    assert _project(projection_schema, bucket, EqualTo("id", 25)) == EqualTo("part", value)
    assert _project(projection_schema, bucket, In("id", {25, 36})) == In("part", {value, other})
    assert _project(projection_schema, bucket, NotEqualTo("id", 25)) is None
    assert _project(projection_schema, bucket, GreaterThan("id", 25)) is None


@pytest.mark.parametrize(
    "pred,expected",
    [
        (EqualTo("id", 25), EqualTo("part", 25)),
        (LessThan("id", 25), LessThan("part", 25)),
        (NotIn("id", {25, 36}), NotIn("part", {25, 36})),
        (StartsWith("data", "ab"), StartsWith("part", "ab")),
        (NotNull("data"), NotNull("part")),
    ],
)
def test_identity_projections(projection_schema: Schema, pred: Any, expected: Any) -> None:
    assert _strict(projection_schema, IdentityTransform(), pred) == expected
    assert _project(projection_schema, IdentityTransform(), pred) == expected


@pytest.mark.parametrize("transform", [VoidTransform(), UnknownTransform(transform="zorder")])
def test_projections_without_transform(projection_schema: Schema, transform: Transform) -> None:
    assert _strict(projection_schema, transform, EqualTo("id", 25)) is None
    assert _project(projection_schema, transform, EqualTo("id", 25)) is None
    assert _strict(projection_schema, transform, IsNull("id")) is None
