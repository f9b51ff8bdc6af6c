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
"""Parses row filters written as text, for example ``ts >= '2022-01-01T00:00:00' and id in (1, 2)``.

Identifiers may be dotted for nested fields and double quoted when they are not plain
words. ``like 'abc%'`` is a prefix match, a pattern without a trailing ``%`` is an
equality.
"""
from decimal import Decimal
from typing import Callable, Dict

from pyparsing import (
    CaselessKeyword,
    Group,
    ParserElement,
    ParseResults,
    QuotedString,
    Suppress,
    Word,
    alphanums,
    alphas,
    delimited_list,
    infix_notation,
    one_of,
    opAssoc,
    sgl_quoted_string,
)
from pyparsing.common import pyparsing_common as common

from pyresidual.expressions import (
    AlwaysFalse,
    AlwaysTrue,
    And,
    BooleanExpression,
    EqualTo,
    GreaterThan,
    GreaterThanOrEqual,
    In,
    IsNaN,
    IsNull,
    LessThan,
    LessThanOrEqual,
    Not,
    NotEqualTo,
    NotIn,
    NotNaN,
    NotNull,
    NotStartsWith,
    Or,
    Reference,
    StartsWith,
)
from pyresidual.expressions.literals import (
    DecimalLiteral,
    Literal,
    LongLiteral,
    StringLiteral,
)
from pyresidual.typedef import L

ParserElement.enable_packrat()

AND = CaselessKeyword("and")
OR = CaselessKeyword("or")
NOT = CaselessKeyword("not")
IS = CaselessKeyword("is")
IN = CaselessKeyword("in")
NULL = CaselessKeyword("null")
NAN = CaselessKeyword("nan")
LIKE = CaselessKeyword("like")

LIKE_WILDCARD = "%"

identifier = (Word(alphas + "_", alphanums + "_$") | QuotedString('"', esc_quote='""')).set_results_name("identifier")
column = delimited_list(identifier, delim=".", combine=True).set_results_name("column")


@column.set_parse_action
def _(result: ParseResults) -> Reference:
    # the combined name is a plain string on pyparsing 3.1+, a one-element list before
    name = result.column
    if isinstance(name, ParseResults):
        name = name[0]
    return Reference(name)


boolean = one_of(["true", "false"], caseless=True).set_results_name("boolean")
string = sgl_quoted_string.set_results_name("raw_quoted_string")
decimal = common.real().set_results_name("decimal")
integer = common.signed_integer().set_results_name("integer")
literal = Group(string | decimal | integer).set_results_name("literal")
literal_set = Group(delimited_list(string) | delimited_list(decimal) | delimited_list(integer)).set_results_name("literal_set")


@boolean.set_parse_action
def _(result: ParseResults) -> BooleanExpression:
    if "true" == result.boolean.lower():
        return AlwaysTrue()
    return AlwaysFalse()


@string.set_parse_action
def _(result: ParseResults) -> Literal[str]:
    return StringLiteral(result.raw_quoted_string[1:-1].replace("''", "'"))


@decimal.set_parse_action
def _(result: ParseResults) -> Literal[Decimal]:
    return DecimalLiteral(Decimal(result.decimal))


@integer.set_parse_action
def _(result: ParseResults) -> Literal[int]:
    return LongLiteral(int(result.integer))


@literal.set_parse_action
def _(result: ParseResults) -> Literal[L]:
    return result[0][0]


@literal_set.set_parse_action
def _(result: ParseResults) -> Literal[L]:
    return result[0]


comparison_op = one_of(["<", "<=", ">", ">=", "=", "==", "!=", "<>"], caseless=True).set_results_name("op")
left_ref = column + comparison_op + literal
right_ref = literal + comparison_op + column
comparison = left_ref | right_ref

_COMPARISONS: Dict[str, Callable[..., BooleanExpression]] = {
    "<": LessThan,
    "<=": LessThanOrEqual,
    ">": GreaterThan,
    ">=": GreaterThanOrEqual,
    "=": EqualTo,
    "==": EqualTo,
    "!=": NotEqualTo,
    "<>": NotEqualTo,
}

# the operator as seen from the column, for literals on the left hand side
_MIRRORED_OPS = {"<": ">", "<=": ">=", ">": "<", ">=": "<="}


@left_ref.set_parse_action
def _(result: ParseResults) -> BooleanExpression:
    return _COMPARISONS[result.op](result.column, result.literal)


@right_ref.set_parse_action
def _(result: ParseResults) -> BooleanExpression:
    return _COMPARISONS[_MIRRORED_OPS.get(result.op, result.op)](result.column, result.literal)


def _on_column(predicate_type: Callable[..., BooleanExpression], *args: str) -> Callable[[ParseResults], BooleanExpression]:
    """A parse action that builds the predicate from the column and the named results."""

    def action(result: ParseResults) -> BooleanExpression:
        return predicate_type(result.column, *(result[arg] for arg in args))

    return action


is_null = (column + IS + NULL).set_parse_action(_on_column(IsNull))
not_null = (column + IS + NOT + NULL).set_parse_action(_on_column(NotNull))
is_nan = (column + IS + NAN).set_parse_action(_on_column(IsNaN))
not_nan = (column + IS + NOT + NAN).set_parse_action(_on_column(NotNaN))
null_check = is_null | not_null
nan_check = is_nan | not_nan

is_in = (column + IN + "(" + literal_set + ")").set_parse_action(_on_column(In, "literal_set"))
not_in = (column + NOT + IN + "(" + literal_set + ")").set_parse_action(_on_column(NotIn, "literal_set"))
in_check = is_in | not_in


def _like(
    prefix_type: Callable[..., BooleanExpression], exact_type: Callable[..., BooleanExpression]
) -> Callable[[ParseResults], BooleanExpression]:
    def action(result: ParseResults) -> BooleanExpression:
        pattern = result.raw_quoted_string.value
        if pattern.endswith(LIKE_WILDCARD):
            return prefix_type(result.column, pattern[:-1])
        return exact_type(result.column, pattern)

    return action


starts_with = (column + LIKE + string).set_parse_action(_like(StartsWith, EqualTo))
not_starts_with = (column + NOT + LIKE + string).set_parse_action(_like(NotStartsWith, NotEqualTo))
starts_check = starts_with | not_starts_with


predicate = (comparison | in_check | null_check | nan_check | starts_check | boolean).set_results_name("predicate")


def handle_not(result: ParseResults) -> BooleanExpression:
    return Not(result[0][0])


def handle_and(result: ParseResults) -> BooleanExpression:
    return And(*result[0])


def handle_or(result: ParseResults) -> BooleanExpression:
    return Or(*result[0])


boolean_expression = infix_notation(
    predicate,
    [
        (Suppress(NOT), 1, opAssoc.RIGHT, handle_not),
        (Suppress(AND), 2, opAssoc.LEFT, handle_and),
        (Suppress(OR), 2, opAssoc.LEFT, handle_or),
    ],
).set_name("expr")


def parse(expr: str) -> BooleanExpression:
    """Parses a row filter.

    Raises:
        pyparsing.ParseException: When the text is not a valid filter.
    """
    return boolean_expression.parse_string(expr, parse_all=True)[0]
