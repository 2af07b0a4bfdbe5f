# -*- coding: utf-8 -*-
# cython: language_level=3
# BSD 3-Clause License
#
# Copyright (c) 2020-2022, Faster Speeding
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# * Redistributions of source code must retain the above copyright notice, this
#   list of conditions and the following disclaimer.
#
# * Redistributions in binary form must reproduce the above copyright notice,
#   this list of conditions and the following disclaimer in the documentation
#   and/or other materials provided with the distribution.
#
# * Neither the name of the copyright holder nor the names of its
#   contributors may be used to endorse or promote products derived from
#   this software without specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE
# DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE
# FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL
# DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR
# SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
# CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY,
# OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE
# OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
"""Declarative field tables used to build and merge entities from raw payloads."""

from __future__ import annotations

__all__: typing.Sequence[str] = [
    "Field",
    "FieldTable",
    "cast_nested_id",
    "cast_sequence",
    "cast_snowflake",
    "cast_timestamp",
]

import datetime
import logging
import typing
from collections import abc as collections

import hikari
from hikari.internal import time

from . import errors

_T = typing.TypeVar("_T")
_ObjectT = typing.Mapping[str, typing.Any]

_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.kura.fields")


def cast_snowflake(value: typing.Any, /) -> hikari.Snowflake:
    """Cast a raw ID (a string of digits or an int) to a snowflake."""
    # bool is an int subclass but never a valid ID.
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise TypeError(f"Expected a str or int ID but got {type(value).__name__}")

    return hikari.Snowflake(value)


def cast_nested_id(value: _ObjectT, /) -> hikari.Snowflake:
    """Get the snowflake ID of a nested object (e.g. a message's author)."""
    return cast_snowflake(value["id"])


def cast_timestamp(value: str, /) -> datetime.datetime:
    """Cast an ISO 8601 timestamp string to an aware datetime."""
    return time.iso8601_datetime_string_to_datetime(value)


def cast_sequence(cast: typing.Callable[[typing.Any], _T], /) -> typing.Callable[[typing.Any], typing.Tuple[_T, ...]]:
    """Create a cast which applies `cast` to every element of an array."""

    def _cast(array: typing.Any, /) -> typing.Tuple[_T, ...]:
        if isinstance(array, (str, bytes)) or not isinstance(array, collections.Iterable):
            raise TypeError(f"Expected an array but got {type(array).__name__}")

        return tuple(map(cast, array))

    return _cast


class Field:
    """Declaration of a single payload field.

    Parameters
    ----------
    key : str
        The key of this field in the raw payload.

    Other Parameters
    ----------------
    name : typing.Optional[str]
        The name this field is stored under on the entity.

        Defaults to `key`.
    cast : typing.Optional[typing.Callable[[typing.Any], typing.Any]]
        Callback used to convert the raw value.

        `None` values of optional fields are never passed to this.
    default : typing.Any
        The value an optional field takes when it's missing from the payload
        an entity is built from.
    required : bool
        Whether this field must be present (and not null) when an entity is
        first built.
    """

    __slots__: typing.Sequence[str] = ("cast", "default", "key", "name", "required")

    def __init__(
        self,
        key: str,
        /,
        *,
        name: typing.Optional[str] = None,
        cast: typing.Optional[typing.Callable[[typing.Any], typing.Any]] = None,
        default: typing.Any = None,
        required: bool = False,
    ) -> None:
        self.cast = cast
        self.default = default
        self.key = key
        self.name = name or key
        self.required = required

    def __repr__(self) -> str:
        return f"Field({self.key!r}, name={self.name!r}, required={self.required})"

    def convert(self, value: typing.Any, /, *, table: str) -> typing.Any:
        """Convert a raw value present in a payload.

        Raises
        ------
        kura.errors.MalformedPayload
            If the value is null for a required field or couldn't be cast.
        """
        if value is None:
            if self.required:
                raise errors.MalformedPayload(f"{table} field {self.key!r} cannot be null", field=self.key)

            return None

        if self.cast is None:
            return value

        try:
            return self.cast(value)

        except (KeyError, TypeError, ValueError) as exc:
            raise errors.MalformedPayload(
                f"Invalid value found for {table} field {self.key!r}", field=self.key, exception=exc
            ) from exc


class FieldTable:
    """An explicit table of the required and optional fields of an entity type.

    Parameters
    ----------
    name : str
        Name of the entity type this table is for (used in error messages).
    *rules : typing.Union[str, Field]
        The fields in this table.

        A plain string is shorthand for an optional field with no cast.
    """

    __slots__: typing.Sequence[str] = ("_fields", "_name")

    def __init__(self, name: str, /, *rules: typing.Union[str, Field]) -> None:
        self._fields = tuple(Field(rule) if isinstance(rule, str) else rule for rule in rules)
        self._name = name

    def __iter__(self) -> typing.Iterator[Field]:
        return iter(self._fields)

    @property
    def name(self) -> str:
        """Name of the entity type this table is for."""
        return self._name

    @property
    def required(self) -> typing.Sequence[str]:
        """The payload keys of the required fields in this table."""
        return [field.key for field in self._fields if field.required]

    def build(self, payload: _ObjectT, /) -> typing.Dict[str, typing.Any]:
        """Build the full set of field values for a new entity.

        Parameters
        ----------
        payload : typing.Mapping[str, typing.Any]
            The raw payload.

        Returns
        -------
        dict[str, typing.Any]
            Dict of entity field names to their converted values.

        Raises
        ------
        kura.errors.MalformedPayload
            If a required field is missing or null or a value couldn't be cast.
        """
        self._check_payload(payload)
        result: typing.Dict[str, typing.Any] = {}
        for field in self._fields:
            if field.key in payload:
                result[field.name] = field.convert(payload[field.key], table=self._name)

            elif field.required:
                raise errors.MalformedPayload(
                    f"{self._name} payload is missing required field {field.key!r}", field=field.key
                )

            else:
                result[field.name] = field.default

        return result

    def merge(self, payload: _ObjectT, /) -> typing.Dict[str, typing.Any]:
        """Convert the fields present in a partial payload.

        Fields which aren't present in the payload aren't included in the
        result; they should be left untouched by the caller.

        Raises
        ------
        kura.errors.MalformedPayload
            If a present value couldn't be cast or a required field is null.
        """
        self._check_payload(payload)
        return {
            field.name: field.convert(payload[field.key], table=self._name)
            for field in self._fields
            if field.key in payload
        }

    def _check_payload(self, payload: typing.Any, /) -> None:
        if not isinstance(payload, collections.Mapping):
            _LOGGER.debug("rejecting non-mapping %s payload of type %r", self._name, type(payload))
            raise errors.MalformedPayload(f"Expected a mapping {self._name} payload but got {type(payload).__name__}")
