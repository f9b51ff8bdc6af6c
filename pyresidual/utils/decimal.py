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
"""Helper methods for working with Python Decimals."""
from decimal import Decimal
from typing import Union


def decimal_to_unscaled(value: Decimal) -> int:
    """Get the unscaled integer behind a Decimal, for example 12.34 becomes 1234."""
    sign, digits, _ = value.as_tuple()
    return int(Decimal((sign, digits, 0)).to_integral_value())


def unscaled_to_decimal(unscaled: int, scale: int) -> Decimal:
    """Get a scaled Decimal value given an unscaled value and a scale.

    Args:
        unscaled (int): An unscaled value.
        scale (int): A scale to set for the returned Decimal instance.

    Returns:
        Decimal: A scaled Decimal instance.
    """
    sign, digits, _ = Decimal(unscaled).as_tuple()
    return Decimal((sign, digits, -scale))


def decimal_scale(value: Decimal) -> int:
    return abs(int(value.as_tuple().exponent))


def bytes_required(value: Union[int, Decimal]) -> int:
    """Returns the minimum number of bytes needed to serialize a decimal or unscaled value."""
    if isinstance(value, Decimal):
        value = decimal_to_unscaled(value)
    if isinstance(value, int):
        # one sign bit on top of the magnitude, negative values are stored as their complement
        return ((value if value >= 0 else ~value).bit_length() + 8) // 8

    raise ValueError(f"Unsupported value: {value}")


def decimal_to_bytes(value: Decimal) -> bytes:
    """Returns the two's-complement big-endian bytes of the unscaled value, as used for bucket hashing."""
    unscaled_value = decimal_to_unscaled(value)
    return unscaled_value.to_bytes(bytes_required(unscaled_value), byteorder="big", signed=True)


def truncate_decimal(value: Decimal, width: int) -> Decimal:
    """Truncates the unscaled value of a Decimal to a multiple of width, keeping the scale.

    Args:
        value (Decimal): A decimal value.
        width (int): The truncation width in unscaled units.

    Returns:
        Decimal: A truncated Decimal instance.
    """
    unscaled_value = decimal_to_unscaled(value)
    applied_value = unscaled_value - (((unscaled_value % width) + width) % width)
    return unscaled_to_decimal(applied_value, decimal_scale(value))
