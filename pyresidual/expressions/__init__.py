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
"""The boolean expression tree that row filters and residuals are made of.

Expressions come in two flavours. Unbound predicates reference a column by
name and are what callers build; binding them against a schema resolves the
name into a ``BoundReference`` and converts the literal to the column type.
The connectives fold constants while they are constructed, so ``And`` with an
``AlwaysFalse`` operand is ``AlwaysFalse`` and never an ``And`` node.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property, reduce
from typing import (
    Any,
    Generic,
    Iterable,
    Set,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from pyresidual.expressions.literals import (
    AboveMax,
    BelowMin,
    Literal,
    literal,
)
from pyresidual.schema import Accessor, Schema
from pyresidual.typedef import L, StructProtocol
from pyresidual.types import DoubleType, FloatType, NestedField
from pyresidual.utils.singleton import Singleton


def _to_unbound_term(term: Union[str, UnboundTerm[Any]]) -> UnboundTerm[Any]:
    return Reference(term) if isinstance(term, str) else term


def _to_literal_set(values: Union[Iterable[L], Iterable[Literal[L]]]) -> Set[Literal[L]]:
    return {_to_literal(v) for v in values}


def _to_literal(value: Union[L, Literal[L]]) -> Literal[L]:
    if isinstance(value, Literal):
        return value
    return literal(value)


class BooleanExpression(ABC):
    """An expression that evaluates to a boolean."""

    @abstractmethod
    def __invert__(self) -> BooleanExpression:
        """Transform the Expression into its negated version."""


class Term(Generic[L], ABC):
    """A simple expression that evaluates to a value."""


class Bound(ABC):
    """Represents a bound value expression."""


B = TypeVar("B")


class Unbound(Generic[B], ABC):
    """Represents an unbound value expression."""

    @abstractmethod
    def bind(self, schema: Schema, case_sensitive: bool = True) -> B:
        ...

    @property
    @abstractmethod
    def as_bound(self) -> Type[Bound]:
        ...


class BoundTerm(Term[L], Bound, ABC):
    """Represents a bound term."""

    @abstractmethod
    def ref(self) -> BoundReference[L]:
        """Returns the bound reference."""

    @abstractmethod
    def eval(self, struct: StructProtocol) -> L:  # pylint: disable=W0613
        """Returns the value at the referenced field's position in a struct."""


class BoundReference(BoundTerm[L]):
    """A reference bound to a field in a schema.

    Args:
        field (NestedField): The referenced field.
        accessor (Accessor): Reads the value at the field's position from a struct.
    """

    field: NestedField
    accessor: Accessor

    def __init__(self, field: NestedField, accessor: Accessor):
        self.field = field
        self.accessor = accessor

    def eval(self, struct: StructProtocol) -> L:
        return self.accessor.get(struct)

    def ref(self) -> BoundReference[L]:
        return self

    def __eq__(self, other: Any) -> bool:
        return self.field == other.field if isinstance(other, BoundReference) else False

    def __str__(self) -> str:
        return f"ref({self.field.name})"

    def __repr__(self) -> str:
        return f"BoundReference(field={repr(self.field)}, accessor={repr(self.accessor)})"


class UnboundTerm(Term[Any], Unbound[BoundTerm[L]], ABC):
    """Represents an unbound term."""

    @abstractmethod
    def bind(self, schema: Schema, case_sensitive: bool = True) -> BoundTerm[L]:
        ...


class Reference(UnboundTerm[Any]):
    """A reference to a column by name, not yet resolved against a schema.

    Args:
        name (str): The name of the column, dotted for nested fields.
    """

    name: str

    def __init__(self, name: str) -> None:
        self.name = name

    def bind(self, schema: Schema, case_sensitive: bool = True) -> BoundReference[L]:
        """Resolve the name against a schema.

        Raises:
            ValueError: If the schema has no column with this name.
        """
        field = schema.find_field(name_or_id=self.name, case_sensitive=case_sensitive)
        accessor = schema.accessor_for_field(field.field_id)
        return self.as_bound(field=field, accessor=accessor)  # type: ignore

    @property
    def as_bound(self) -> Type[BoundReference[L]]:
        return BoundReference

    def __eq__(self, other: Any) -> bool:
        return self.name == other.name if isinstance(other, Reference) else False

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Reference(name={repr(self.name)})"


class And(BooleanExpression):
    """Logical conjunction, more than two operands nest to the left."""

    left: BooleanExpression
    right: BooleanExpression

    def __new__(cls, left: BooleanExpression, right: BooleanExpression, *rest: BooleanExpression) -> BooleanExpression:  # type: ignore
        if rest:
            return reduce(And, (left, right, *rest))
        if isinstance(left, AlwaysFalse) or isinstance(right, AlwaysFalse):
            return AlwaysFalse()
        elif isinstance(left, AlwaysTrue):
            return right
        elif isinstance(right, AlwaysTrue):
            return left
        obj = super().__new__(cls)
        obj.left = left
        obj.right = right
        return obj

    def __invert__(self) -> BooleanExpression:
        # not (A and B) == (not A) or (not B)
        return Or(~self.left, ~self.right)

    def __eq__(self, other: Any) -> bool:
        return self.left == other.left and self.right == other.right if isinstance(other, And) else False

    def __str__(self) -> str:
        return f"({self.left} and {self.right})"

    def __repr__(self) -> str:
        return f"And(left={repr(self.left)}, right={repr(self.right)})"

    def __getnewargs__(self) -> Tuple[BooleanExpression, BooleanExpression]:
        return (self.left, self.right)


class Or(BooleanExpression):
    """Logical disjunction, more than two operands nest to the left."""

    left: BooleanExpression
    right: BooleanExpression

    def __new__(cls, left: BooleanExpression, right: BooleanExpression, *rest: BooleanExpression) -> BooleanExpression:  # type: ignore
        if rest:
            return reduce(Or, (left, right, *rest))
        if isinstance(left, AlwaysTrue) or isinstance(right, AlwaysTrue):
            return AlwaysTrue()
        elif isinstance(left, AlwaysFalse):
            return right
        elif isinstance(right, AlwaysFalse):
            return left
        obj = super().__new__(cls)
        obj.left = left
        obj.right = right
        return obj

    def __invert__(self) -> BooleanExpression:
        # not (A or B) == (not A) and (not B)
        return And(~self.left, ~self.right)

    def __eq__(self, other: Any) -> bool:
        return self.left == other.left and self.right == other.right if isinstance(other, Or) else False

    def __str__(self) -> str:
        return f"({self.left} or {self.right})"

    def __repr__(self) -> str:
        return f"Or(left={repr(self.left)}, right={repr(self.right)})"

    def __getnewargs__(self) -> Tuple[BooleanExpression, BooleanExpression]:
        return (self.left, self.right)


class Not(BooleanExpression):
    """Logical negation."""

    child: BooleanExpression

    def __new__(cls, child: BooleanExpression) -> BooleanExpression:  # type: ignore
        if isinstance(child, AlwaysTrue):
            return AlwaysFalse()
        elif isinstance(child, AlwaysFalse):
            return AlwaysTrue()
        elif isinstance(child, Not):
            return child.child
        obj = super().__new__(cls)
        obj.child = child
        return obj

    def __invert__(self) -> BooleanExpression:
        return self.child

    def __eq__(self, other: Any) -> bool:
        return self.child == other.child if isinstance(other, Not) else False

    def __str__(self) -> str:
        return f"not {self.child}"

    def __repr__(self) -> str:
        return f"Not(child={repr(self.child)})"

    def __getnewargs__(self) -> Tuple[BooleanExpression]:
        return (self.child,)


class AlwaysTrue(BooleanExpression, Singleton):
    """TRUE expression."""

    def __invert__(self) -> AlwaysFalse:
        return AlwaysFalse()

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, AlwaysTrue)

    def __hash__(self) -> int:
        return hash(AlwaysTrue)

    def __str__(self) -> str:
        return "true"

    def __repr__(self) -> str:
        return "AlwaysTrue()"


class AlwaysFalse(BooleanExpression, Singleton):
    """FALSE expression."""

    def __invert__(self) -> AlwaysTrue:
        return AlwaysTrue()

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, AlwaysFalse)

    def __hash__(self) -> int:
        return hash(AlwaysFalse)

    def __str__(self) -> str:
        return "false"

    def __repr__(self) -> str:
        return "AlwaysFalse()"


ALWAYS_TRUE = AlwaysTrue()
ALWAYS_FALSE = AlwaysFalse()


class BoundPredicate(Generic[L], Bound, BooleanExpression, ABC):
    term: BoundTerm[L]

    def __init__(self, term: BoundTerm[L]):
        self.term = term

    def __eq__(self, other: Any) -> bool:
        return type(self) is type(other) and self.term == other.term

    @property
    @abstractmethod
    def as_unbound(self) -> Type[UnboundPredicate[Any]]:
        ...


class UnboundPredicate(Generic[L], Unbound[BooleanExpression], BooleanExpression, ABC):
    term: UnboundTerm[Any]

    def __init__(self, term: Union[str, UnboundTerm[Any]]):
        self.term = _to_unbound_term(term)

    def __eq__(self, other: Any) -> bool:
        return type(self) is type(other) and self.term == other.term

    @abstractmethod
    def bind(self, schema: Schema, case_sensitive: bool = True) -> BooleanExpression:
        ...

    @property
    @abstractmethod
    def as_bound(self) -> Type[BoundPredicate[L]]:
        ...


class UnaryPredicate(UnboundPredicate[Any], ABC):
    def bind(self, schema: Schema, case_sensitive: bool = True) -> BooleanExpression:
        bound_term = self.term.bind(schema, case_sensitive)
        return self.as_bound(bound_term)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.term})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(term={repr(self.term)})"

    def __getnewargs__(self) -> Tuple[UnboundTerm[Any]]:
        return (self.term,)

    @property
    @abstractmethod
    def as_bound(self) -> Type[BoundUnaryPredicate[Any]]:
        ...


class BoundUnaryPredicate(BoundPredicate[L], ABC):
    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.term})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(term={repr(self.term)})"

    def __getnewargs__(self) -> Tuple[BoundTerm[L]]:
        return (self.term,)

    @property
    @abstractmethod
    def as_unbound(self) -> Type[UnaryPredicate]:
        ...


class BoundIsNull(BoundUnaryPredicate[L]):
    def __new__(cls, term: BoundTerm[L]) -> BooleanExpression:  # type: ignore  # pylint: disable=W0221
        # a required column is never null
        if term.ref().field.required:
            return AlwaysFalse()
        return super().__new__(cls)

    def __invert__(self) -> BooleanExpression:
        return BoundNotNull(self.term)

    @property
    def as_unbound(self) -> Type[IsNull]:
        return IsNull


class BoundNotNull(BoundUnaryPredicate[L]):
    def __new__(cls, term: BoundTerm[L]) -> BooleanExpression:  # type: ignore  # pylint: disable=W0221
        if term.ref().field.required:
            return AlwaysTrue()
        return super().__new__(cls)

    def __invert__(self) -> BooleanExpression:
        return BoundIsNull(self.term)

    @property
    def as_unbound(self) -> Type[NotNull]:
        return NotNull


class IsNull(UnaryPredicate):
    def __invert__(self) -> NotNull:
        return NotNull(self.term)

    @property
    def as_bound(self) -> Type[BoundIsNull[Any]]:
        return BoundIsNull


class NotNull(UnaryPredicate):
    def __invert__(self) -> IsNull:
        return IsNull(self.term)

    @property
    def as_bound(self) -> Type[BoundNotNull[Any]]:
        return BoundNotNull


def _is_floating(term: BoundTerm[Any]) -> bool:
    return isinstance(term.ref().field.field_type, (FloatType, DoubleType))


class BoundIsNaN(BoundUnaryPredicate[L]):
    def __new__(cls, term: BoundTerm[L]) -> BooleanExpression:  # type: ignore  # pylint: disable=W0221
        if _is_floating(term):
            return super().__new__(cls)
        return AlwaysFalse()

    def __invert__(self) -> BooleanExpression:
        return BoundNotNaN(self.term)

    @property
    def as_unbound(self) -> Type[IsNaN]:
        return IsNaN


class BoundNotNaN(BoundUnaryPredicate[L]):
    def __new__(cls, term: BoundTerm[L]) -> BooleanExpression:  # type: ignore  # pylint: disable=W0221
        if _is_floating(term):
            return super().__new__(cls)
        return AlwaysTrue()

    def __invert__(self) -> BooleanExpression:
        return BoundIsNaN(self.term)

    @property
    def as_unbound(self) -> Type[NotNaN]:
        return NotNaN


class IsNaN(UnaryPredicate):
    def __invert__(self) -> NotNaN:
        return NotNaN(self.term)

    @property
    def as_bound(self) -> Type[BoundIsNaN[Any]]:
        return BoundIsNaN


class NotNaN(UnaryPredicate):
    def __invert__(self) -> IsNaN:
        return IsNaN(self.term)

    @property
    def as_bound(self) -> Type[BoundNotNaN[Any]]:
        return BoundNotNaN


def _sorted_literals(literals: Set[Literal[Any]], render: Any) -> str:
    # sorted so that the rendering is deterministic
    return ", ".join(sorted(render(lit) for lit in literals))


class SetPredicate(UnboundPredicate[L], ABC):
    literals: Set[Literal[L]]

    def __init__(self, term: Union[str, UnboundTerm[Any]], literals: Union[Iterable[L], Iterable[Literal[L]]]):
        super().__init__(term)
        self.literals = _to_literal_set(literals)

    def bind(self, schema: Schema, case_sensitive: bool = True) -> BooleanExpression:
        bound_term = self.term.bind(schema, case_sensitive)
        field_type = bound_term.ref().field.field_type
        return self.as_bound(bound_term, {lit.to(field_type) for lit in self.literals})

    def __eq__(self, other: Any) -> bool:
        return super().__eq__(other) and self.literals == other.literals

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.term}, {{{_sorted_literals(self.literals, str)}}})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({repr(self.term)}, {{{_sorted_literals(self.literals, repr)}}})"

    def __getnewargs__(self) -> Tuple[UnboundTerm[Any], Set[Literal[L]]]:
        return (self.term, self.literals)

    @property
    @abstractmethod
    def as_bound(self) -> Type[BoundSetPredicate[L]]:
        ...


class BoundSetPredicate(BoundPredicate[L], ABC):
    literals: Set[Literal[L]]

    def __init__(self, term: BoundTerm[L], literals: Set[Literal[L]]):
        super().__init__(term)
        self.literals = _to_literal_set(literals)

    @cached_property
    def value_set(self) -> Set[L]:
        return {lit.value for lit in self.literals}

    def __eq__(self, other: Any) -> bool:
        return super().__eq__(other) and self.literals == other.literals

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.term}, {{{_sorted_literals(self.literals, str)}}})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({repr(self.term)}, {{{_sorted_literals(self.literals, repr)}}})"

    def __getnewargs__(self) -> Tuple[BoundTerm[L], Set[Literal[L]]]:
        return (self.term, self.literals)

    @property
    @abstractmethod
    def as_unbound(self) -> Type[SetPredicate[L]]:
        ...


class BoundIn(BoundSetPredicate[L]):
    def __new__(cls, term: BoundTerm[L], literals: Set[Literal[L]]) -> BooleanExpression:  # type: ignore  # pylint: disable=W0221
        if len(literals) == 0:
            return AlwaysFalse()
        elif len(literals) == 1:
            return BoundEqualTo(term, next(iter(literals)))
        return super().__new__(cls)

    def __invert__(self) -> BooleanExpression:
        return BoundNotIn(self.term, self.literals)

    @property
    def as_unbound(self) -> Type[In[L]]:
        return In


class BoundNotIn(BoundSetPredicate[L]):
    def __new__(cls, term: BoundTerm[L], literals: Set[Literal[L]]) -> BooleanExpression:  # type: ignore  # pylint: disable=W0221
        if len(literals) == 0:
            return AlwaysTrue()
        elif len(literals) == 1:
            return BoundNotEqualTo(term, next(iter(literals)))
        return super().__new__(cls)

    def __invert__(self) -> BooleanExpression:
        return BoundIn(self.term, self.literals)

    @property
    def as_unbound(self) -> Type[NotIn[L]]:
        return NotIn


class In(SetPredicate[L]):
    def __new__(  # type: ignore  # pylint: disable=W0221
        cls, term: Union[str, UnboundTerm[Any]], literals: Union[Iterable[L], Iterable[Literal[L]]]
    ) -> BooleanExpression:
        literals_set: Set[Literal[L]] = _to_literal_set(literals)
        if len(literals_set) == 0:
            return AlwaysFalse()
        elif len(literals_set) == 1:
            return EqualTo(term, next(iter(literals_set)))
        return super().__new__(cls)

    def __invert__(self) -> BooleanExpression:
        return NotIn(self.term, self.literals)

    @property
    def as_bound(self) -> Type[BoundIn[L]]:
        return BoundIn


class NotIn(SetPredicate[L]):
    def __new__(  # type: ignore  # pylint: disable=W0221
        cls, term: Union[str, UnboundTerm[Any]], literals: Union[Iterable[L], Iterable[Literal[L]]]
    ) -> BooleanExpression:
        literals_set: Set[Literal[L]] = _to_literal_set(literals)
        if len(literals_set) == 0:
            return AlwaysTrue()
        elif len(literals_set) == 1:
            return NotEqualTo(term, next(iter(literals_set)))
        return super().__new__(cls)

    def __invert__(self) -> BooleanExpression:
        return In(self.term, self.literals)

    @property
    def as_bound(self) -> Type[BoundNotIn[L]]:
        return BoundNotIn


class LiteralPredicate(UnboundPredicate[L], ABC):
    literal: Literal[L]

    def __init__(self, term: Union[str, UnboundTerm[Any]], literal: Union[L, Literal[L]]):  # pylint: disable=W0621
        super().__init__(term)
        self.literal = _to_literal(literal)  # pylint: disable=W0621

    def bind(self, schema: Schema, case_sensitive: bool = True) -> BooleanExpression:
        bound_term = self.term.bind(schema, case_sensitive)
        lit = self.literal.to(bound_term.ref().field.field_type)

        # a literal beyond the range of the column decides the comparison on its own
        if isinstance(lit, AboveMax):
            if isinstance(self, (LessThan, LessThanOrEqual, NotEqualTo)):
                return AlwaysTrue()
            elif isinstance(self, (GreaterThan, GreaterThanOrEqual, EqualTo)):
                return AlwaysFalse()
        elif isinstance(lit, BelowMin):
            if isinstance(self, (GreaterThan, GreaterThanOrEqual, NotEqualTo)):
                return AlwaysTrue()
            elif isinstance(self, (LessThan, LessThanOrEqual, EqualTo)):
                return AlwaysFalse()

        return self.as_bound(bound_term, lit)

    def __eq__(self, other: Any) -> bool:
        return super().__eq__(other) and self.literal == other.literal

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.term}, {self.literal})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(term={repr(self.term)}, literal={repr(self.literal)})"

    def __getnewargs__(self) -> Tuple[UnboundTerm[Any], Literal[L]]:
        return (self.term, self.literal)

    @property
    @abstractmethod
    def as_bound(self) -> Type[BoundLiteralPredicate[L]]:
        ...


class BoundLiteralPredicate(BoundPredicate[L], ABC):
    literal: Literal[L]

    def __init__(self, term: BoundTerm[L], literal: Literal[L]):  # pylint: disable=W0621
        super().__init__(term)
        self.literal = literal  # pylint: disable=W0621

    def __eq__(self, other: Any) -> bool:
        return super().__eq__(other) and self.literal == other.literal

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.term}, {self.literal})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(term={repr(self.term)}, literal={repr(self.literal)})"

    def __getnewargs__(self) -> Tuple[BoundTerm[L], Literal[L]]:
        return (self.term, self.literal)

    @property
    @abstractmethod
    def as_unbound(self) -> Type[LiteralPredicate[L]]:
        ...


class BoundEqualTo(BoundLiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return BoundNotEqualTo(self.term, self.literal)

    @property
    def as_unbound(self) -> Type[EqualTo[L]]:
        return EqualTo


class BoundNotEqualTo(BoundLiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return BoundEqualTo(self.term, self.literal)

    @property
    def as_unbound(self) -> Type[NotEqualTo[L]]:
        return NotEqualTo


class BoundGreaterThanOrEqual(BoundLiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return BoundLessThan(self.term, self.literal)

    @property
    def as_unbound(self) -> Type[GreaterThanOrEqual[L]]:
        return GreaterThanOrEqual


class BoundGreaterThan(BoundLiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return BoundLessThanOrEqual(self.term, self.literal)

    @property
    def as_unbound(self) -> Type[GreaterThan[L]]:
        return GreaterThan


class BoundLessThan(BoundLiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return BoundGreaterThanOrEqual(self.term, self.literal)

    @property
    def as_unbound(self) -> Type[LessThan[L]]:
        return LessThan


class BoundLessThanOrEqual(BoundLiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return BoundGreaterThan(self.term, self.literal)

    @property
    def as_unbound(self) -> Type[LessThanOrEqual[L]]:
        return LessThanOrEqual


class BoundStartsWith(BoundLiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return BoundNotStartsWith(self.term, self.literal)

    @property
    def as_unbound(self) -> Type[StartsWith[L]]:
        return StartsWith


class BoundNotStartsWith(BoundLiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return BoundStartsWith(self.term, self.literal)

    @property
    def as_unbound(self) -> Type[NotStartsWith[L]]:
        return NotStartsWith


class EqualTo(LiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return NotEqualTo(self.term, self.literal)

    @property
    def as_bound(self) -> Type[BoundEqualTo[L]]:
        return BoundEqualTo


class NotEqualTo(LiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return EqualTo(self.term, self.literal)

    @property
    def as_bound(self) -> Type[BoundNotEqualTo[L]]:
        return BoundNotEqualTo


class LessThan(LiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return GreaterThanOrEqual(self.term, self.literal)

    @property
    def as_bound(self) -> Type[BoundLessThan[L]]:
        return BoundLessThan


class GreaterThanOrEqual(LiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return LessThan(self.term, self.literal)

    @property
    def as_bound(self) -> Type[BoundGreaterThanOrEqual[L]]:
        return BoundGreaterThanOrEqual


class GreaterThan(LiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return LessThanOrEqual(self.term, self.literal)

    @property
    def as_bound(self) -> Type[BoundGreaterThan[L]]:
        return BoundGreaterThan


class LessThanOrEqual(LiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return GreaterThan(self.term, self.literal)

    @property
    def as_bound(self) -> Type[BoundLessThanOrEqual[L]]:
        return BoundLessThanOrEqual


class StartsWith(LiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return NotStartsWith(self.term, self.literal)

    @property
    def as_bound(self) -> Type[BoundStartsWith[L]]:
        return BoundStartsWith


class NotStartsWith(LiteralPredicate[L]):
    def __invert__(self) -> BooleanExpression:
        return StartsWith(self.term, self.literal)

    @property
    def as_bound(self) -> Type[BoundNotStartsWith[L]]:
        return BoundNotStartsWith
