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
from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    List,
    Optional,
    Protocol,
    Set,
    TypeVar,
    Union,
    runtime_checkable,
)
from uuid import UUID

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from pyresidual.types import StructType


class FrozenDict(Dict[Any, Any]):
    def __setitem__(self, instance: Any, value: Any) -> None:
        """Used for assigning a value to a FrozenDict."""
        raise AttributeError("FrozenDict does not support assignment")

    def update(self, *args: Any, **kwargs: Any) -> None:
        raise AttributeError("FrozenDict does not support .update()")


EMPTY_DICT = FrozenDict()

RecursiveDict = Dict[str, Union[str, "RecursiveDict"]]

L = TypeVar("L", str, bool, int, float, bytes, UUID, Decimal, covariant=True)


@runtime_checkable
class StructProtocol(Protocol):  # pragma: no cover
    """A generic protocol used by accessors to get and set at positions of an object."""

    @abstractmethod
    def __getitem__(self, pos: int) -> Any:
        """Used for fetching a value from a StructProtocol."""

    @abstractmethod
    def __setitem__(self, pos: int, value: Any) -> None:
        """Used for assigning a value to a StructProtocol."""


class MetadataBaseModel(BaseModel):
    """Base model for the schema, type, transform and partition spec classes.

    Instances are frozen, so they can be shared between threads, and can be populated
    either by field name or by the dashed JSON alias (``source-id``). When serialized,
    aliases are used and None values are left out, so the optional ``doc`` of a
    NestedField does not show up.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def _exclude_private_properties(self, exclude: Optional[Set[str]] = None) -> Set[str]:
        # Cached properties end up in __dict__, leave anything private out of the serialized form
        return set.union({field for field in self.__dict__ if field.startswith("_")}, exclude or set())

    def model_dump(  # type: ignore
        self, exclude_none: bool = True, exclude: Optional[Set[str]] = None, by_alias: bool = True, **kwargs: Any
    ) -> Dict[str, Any]:
        return super().model_dump(
            exclude_none=exclude_none, exclude=self._exclude_private_properties(exclude), by_alias=by_alias, **kwargs
        )

    def model_dump_json(  # type: ignore
        self, exclude_none: bool = True, exclude: Optional[Set[str]] = None, by_alias: bool = True, **kwargs: Any
    ) -> str:
        return super().model_dump_json(
            exclude_none=exclude_none, exclude=self._exclude_private_properties(exclude), by_alias=by_alias, **kwargs
        )


class Record(StructProtocol):
    """A row of values, addressable by position and by name.

    Partition tuples handed to the residual evaluator are usually Records, built either
    positionally (``Record(17500, "a")``) or against the partition type
    (``Record(17500, "a", struct=spec.partition_type(schema))``).
    """

    _position_to_field_name: Dict[int, str]

    def __init__(self, *data: Any, struct: Optional[StructType] = None, **named_data: Any) -> None:
        if struct is not None:
            self._position_to_field_name = {idx: field.name for idx, field in enumerate(struct.fields)}
        elif named_data:
            # Order of named_data is preserved (PEP 468) so this can be used to generate the position dict
            self._position_to_field_name = dict(enumerate(named_data.keys()))
        else:
            self._position_to_field_name = {idx: f"field{idx + 1}" for idx in range(len(data))}

        for idx, d in enumerate(data):
            self[idx] = d

        for field_name, d in named_data.items():
            self.__setattr__(field_name, d)

    def __setitem__(self, pos: int, value: Any) -> None:
        """Used for assigning a value to a Record."""
        self.__setattr__(self._position_to_field_name[pos], value)

    def __getitem__(self, pos: int) -> Any:
        """Used for fetching a value from a Record."""
        return self.__getattribute__(self._position_to_field_name[pos])

    def __len__(self) -> int:
        return len(self._position_to_field_name)

    def __eq__(self, other: Any) -> bool:
        """Returns the equality of two instances of the Record class."""
        if not isinstance(other, Record):
            return False
        return self.record_fields() == other.record_fields()

    def __repr__(self) -> str:
        """Returns the string representation of the Record class."""
        return f"{self.__class__.__name__}[{', '.join(f'{key}={repr(value)}' for key, value in self.__dict__.items() if not key.startswith('_'))}]"

    def record_fields(self) -> List[Any]:
        return [self.__getattribute__(v) if hasattr(self, v) else None for v in self._position_to_field_name.values()]
