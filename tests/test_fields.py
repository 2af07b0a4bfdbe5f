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
import datetime

import hikari
import pytest

from kura import errors
from kura import fields

_TABLE = fields.FieldTable(
    "thing",
    fields.Field("id", cast=fields.cast_snowflake, required=True),
    fields.Field("owner", name="owner_id", cast=fields.cast_nested_id, required=True),
    fields.Field("count", cast=int, default=0),
    fields.Field("tags", cast=fields.cast_sequence(str), default=()),
    "note",
)


def test_cast_snowflake():
    assert fields.cast_snowflake("1234") == hikari.Snowflake(1234)
    assert isinstance(fields.cast_snowflake(1234), hikari.Snowflake)


@pytest.mark.parametrize("value", [True, None, 1.5, ["1"], "not-an-id"])
def test_cast_snowflake_rejects_invalid_ids(value):
    with pytest.raises((TypeError, ValueError)):
        fields.cast_snowflake(value)


def test_cast_timestamp():
    result = fields.cast_timestamp("2021-06-01T12:30:00.000000+00:00")

    assert result == datetime.datetime(2021, 6, 1, 12, 30, tzinfo=datetime.timezone.utc)


def test_cast_sequence_rejects_strings():
    with pytest.raises(TypeError):
        fields.cast_sequence(int)("123")


def test_field_table_build_applies_casts_and_defaults():
    result = _TABLE.build({"id": "5", "owner": {"id": "7"}, "tags": ["a", "b"]})

    assert result == {"id": 5, "owner_id": 7, "count": 0, "tags": ("a", "b"), "note": None}
    assert _TABLE.required == ["id", "owner"]


def test_field_table_build_missing_required_field():
    with pytest.raises(errors.MalformedPayload) as exc_info:
        _TABLE.build({"id": "5"})

    assert exc_info.value.field == "owner"


def test_field_table_build_null_required_field():
    with pytest.raises(errors.MalformedPayload) as exc_info:
        _TABLE.build({"id": None, "owner": {"id": "7"}})

    assert exc_info.value.field == "id"


def test_field_table_build_invalid_value_wraps_cause():
    with pytest.raises(errors.MalformedPayload) as exc_info:
        _TABLE.build({"id": "5", "owner": {"id": "7"}, "count": "many"})

    assert exc_info.value.field == "count"
    assert isinstance(exc_info.value.base_exception, ValueError)


def test_field_table_build_rejects_non_mapping_payload():
    with pytest.raises(errors.MalformedPayload):
        _TABLE.build(["id", "5"])  # type: ignore[arg-type]


def test_field_table_merge_only_converts_present_fields():
    assert _TABLE.merge({"count": "3", "note": None}) == {"count": 3, "note": None}
    assert _TABLE.merge({}) == {}


def test_field_table_merge_nested_id_without_id():
    with pytest.raises(errors.MalformedPayload) as exc_info:
        _TABLE.merge({"owner": {"username": "nobody"}})

    assert exc_info.value.field == "owner"
