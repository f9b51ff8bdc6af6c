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
import logging
import os
from unittest import mock

import pytest

from pyresidual.expressions import AlwaysTrue, EqualTo, GreaterThanOrEqual
from pyresidual.partitioning import UNPARTITIONED_PARTITION_SPEC, PartitionSpec
from pyresidual.planning import PartitionResidual, ResidualPlanner
from pyresidual.schema import Schema
from pyresidual.typedef import Record
from pyresidual.utils.datetime import date_str_to_days, timestamp_to_micros

LOWER = "2022-01-10T12:00:00"
ROW_FILTER = f"category = 'books' and ts >= '{LOWER}'"


def _partition(category: str, iso_date: str) -> Record:
    return Record(category, date_str_to_days(iso_date), 3)


def _row(category: str, ts: str) -> Record:
    return Record(1, "a", None, timestamp_to_micros(ts), None, None, category)


@pytest.fixture
def planner(schema: Schema, multi_spec: PartitionSpec) -> ResidualPlanner:
    return ResidualPlanner(schema, multi_spec, ROW_FILTER, case_sensitive=True)


def test_row_filter_is_parsed(planner: ResidualPlanner) -> None:
    assert planner.row_filter.left == EqualTo("category", "books")  # type: ignore
    assert planner.row_filter.right == GreaterThanOrEqual("ts", LOWER)  # type: ignore


def test_residual_for(planner: ResidualPlanner) -> None:
    partition = _partition("books", "2022-01-11")
    result = planner.residual_for(partition)
    assert result == PartitionResidual(partition, AlwaysTrue())
    assert result.matches_all_rows


def test_residual_for_boundary_partition(planner: ResidualPlanner) -> None:
    result = planner.residual_for(_partition("books", "2022-01-10"))
    assert result.residual == GreaterThanOrEqual("ts", LOWER)
    assert not result.matches_all_rows


def test_plan_drops_partitions_without_matches(planner: ResidualPlanner) -> None:
    partitions = [
        _partition("books", "2022-01-12"),
        _partition("toys", "2022-01-11"),
        _partition("books", "2022-01-09"),
        _partition("books", "2022-01-10"),
        _partition("books", "2022-01-11"),
    ]
    planned = planner.plan(partitions)
    assert [pr.partition for pr in planned] == [partitions[0], partitions[3], partitions[4]]
    assert [pr.matches_all_rows for pr in planned] == [True, False, True]


def test_plan_nothing(planner: ResidualPlanner) -> None:
    assert planner.plan([]) == []


def test_row_evaluator(planner: ResidualPlanner) -> None:
    (boundary,) = planner.plan([_partition("books", "2022-01-10")])
    matches = planner.row_evaluator(boundary)
    assert matches(_row("books", "2022-01-10T13:00:00"))
    assert not matches(_row("books", "2022-01-10T11:00:00"))


def test_row_evaluator_all_rows(planner: ResidualPlanner) -> None:
    (inner,) = planner.plan([_partition("books", "2022-01-11")])
    assert planner.row_evaluator(inner)(_row("books", "2022-01-11T00:00:00"))


def test_unpartitioned(schema: Schema) -> None:
    planner = ResidualPlanner(schema, UNPARTITIONED_PARTITION_SPEC, ROW_FILTER)
    (result,) = planner.plan([Record()])
    assert result.residual == planner.row_filter


def test_default_row_filter(schema: Schema, multi_spec: PartitionSpec) -> None:
    planner = ResidualPlanner(schema, multi_spec)
    assert all(pr.matches_all_rows for pr in planner.plan([_partition("toys", "2022-01-11")]))


def test_case_sensitive_by_default(schema: Schema, multi_spec: PartitionSpec) -> None:
    planner = ResidualPlanner(schema, multi_spec, "CATEGORY = 'books'")
    assert planner.case_sensitive
    with pytest.raises(ValueError) as exc_info:
        planner.plan([_partition("books", "2022-01-11")])
    assert "Could not find field with name CATEGORY, case_sensitive=True" in str(exc_info.value)


@mock.patch.dict(os.environ, {"PYRESIDUAL_CASE_SENSITIVE": "false"})
def test_case_sensitive_from_environment(schema: Schema, multi_spec: PartitionSpec) -> None:
    planner = ResidualPlanner(schema, multi_spec, "CATEGORY = 'books'")
    assert not planner.case_sensitive
    (result,) = planner.plan([_partition("books", "2022-01-11"), _partition("toys", "2022-01-11")])
    assert result.matches_all_rows


@mock.patch.dict(os.environ, {"PYRESIDUAL_CASE_SENSITIVE": "false"})
def test_case_sensitive_argument_wins(schema: Schema, multi_spec: PartitionSpec) -> None:
    assert ResidualPlanner(schema, multi_spec, "category = 'books'", case_sensitive=True).case_sensitive


def test_plan_logs_skipped_partitions(planner: ResidualPlanner, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="pyresidual.planning"):
        planner.plan([_partition("sci fi", "2022-01-11"), _partition("books", "2022-01-11")])
    assert "Skipping partition category=sci%20fi/ts_day=2022-01-11/id_bucket=3" in caplog.text
    assert "category=books" not in caplog.text
    assert "Planned 1 of 2 partitions" in caplog.text
