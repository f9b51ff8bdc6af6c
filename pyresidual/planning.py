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
"""Computes residuals for the partitions of a table, to decide which ones a scan has to read."""
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Union

from pyresidual.expressions import ALWAYS_TRUE, AlwaysFalse, AlwaysTrue, BooleanExpression
from pyresidual.expressions.parser import parse
from pyresidual.expressions.visitors import ResidualEvaluator, expression_evaluator, residual_evaluator_of
from pyresidual.partitioning import PartitionSpec
from pyresidual.schema import Schema
from pyresidual.typedef import StructProtocol
from pyresidual.utils.concurrent import ExecutorFactory
from pyresidual.utils.config import Config

logger = logging.getLogger(__name__)

CASE_SENSITIVE = "case-sensitive"


def _parse_row_filter(expr: Union[str, BooleanExpression]) -> BooleanExpression:
    return parse(expr) if isinstance(expr, str) else expr


@dataclass(frozen=True)
class PartitionResidual:
    """A partition tuple and what is left of the row filter for it."""

    partition: StructProtocol
    residual: BooleanExpression

    @property
    def matches_all_rows(self) -> bool:
        return isinstance(self.residual, AlwaysTrue)


class ResidualPlanner:
    """Plans which partitions to read for a row filter.

    One residual evaluator is shared by all the partitions, which are evaluated in
    parallel on the shared executor.

    Args:
        schema (Schema): The table schema.
        spec (PartitionSpec): The partition spec of the table.
        row_filter (Union[str, BooleanExpression]): The filter, as an expression or as text.
        case_sensitive (Optional[bool]): Whether column names are matched case sensitively,
            the ``case-sensitive`` setting (default true) when left out.
    """

    schema: Schema
    spec: PartitionSpec
    row_filter: BooleanExpression
    case_sensitive: bool
    evaluator: ResidualEvaluator

    def __init__(
        self,
        schema: Schema,
        spec: PartitionSpec,
        row_filter: Union[str, BooleanExpression] = ALWAYS_TRUE,
        case_sensitive: Optional[bool] = None,
    ) -> None:
        self.schema = schema
        self.spec = spec
        self.row_filter = _parse_row_filter(row_filter)
        if case_sensitive is None:
            configured = Config().get_bool(CASE_SENSITIVE)
            case_sensitive = True if configured is None else configured
        self.case_sensitive = case_sensitive
        self.evaluator = residual_evaluator_of(spec, self.row_filter, case_sensitive, schema)

    def residual_for(self, partition: StructProtocol) -> PartitionResidual:
        return PartitionResidual(partition, self.evaluator.residual_for(partition))

    def plan(self, partitions: Iterable[StructProtocol]) -> List[PartitionResidual]:
        """Computes the residual of every partition and leaves out the ones no row can match.

        The result keeps the order of the partitions.

        Raises:
            ValueError: When the filter references a column that is not in the schema.
        """
        executor = ExecutorFactory.get_or_create()
        residuals = list(executor.map(self.residual_for, partitions))
        planned = []
        for pr in residuals:
            if not isinstance(pr.residual, AlwaysFalse):
                planned.append(pr)
            elif logger.isEnabledFor(logging.DEBUG):
                logger.debug("Skipping partition %s", self.spec.partition_to_path(pr.partition, self.schema))
        logger.debug("Planned %d of %d partitions for filter %s", len(planned), len(residuals), self.row_filter)
        return planned

    def row_evaluator(self, partition_residual: PartitionResidual) -> Callable[[StructProtocol], bool]:
        """Returns a function that checks the rows of the partition against its residual."""
        return expression_evaluator(self.schema, partition_residual.residual, self.case_sensitive)
