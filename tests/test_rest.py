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
import inspect
from unittest import mock

import hikari
import pytest
from hikari.impl import rest as rest_impl
from hikari.internal import routes

from kura import errors
from kura import rest


@pytest.fixture()
def route() -> routes.CompiledRoute:
    return routes.PATCH_CHANNEL_MESSAGE.compile(channel=10, message=20)


@pytest.mark.parametrize(
    ("status", "message"),
    [(400, "Bad Request"), (401, "Not Authorized"), (403, "Missing Permissions"), (404, "Not Found")],
)
def test_check_status_rejects_client_errors(route: routes.CompiledRoute, status: int, message: str):
    with pytest.raises(errors.RemoteRejected) as exc_info:
        rest.check_status(route, {"content": "hi"}, status)

    assert exc_info.value.message == f"{message} ({status})"
    assert exc_info.value.status == status
    assert exc_info.value.method == "PATCH"
    assert exc_info.value.path == "/channels/10/messages/20"
    assert exc_info.value.body == {"content": "hi"}


@pytest.mark.parametrize("status", [200, 204, 500])
def test_check_status_passes_other_statuses(route: routes.CompiledRoute, status: int):
    rest.check_status(route, None, status)


def test_check_json_error(route: routes.CompiledRoute):
    with pytest.raises(errors.RemoteRejected) as exc_info:
        rest.check_json_error(route, None, {"code": 10008, "message": "Unknown Message"})

    assert exc_info.value.code == 10008
    assert exc_info.value.message == "Unknown Message (10008)"


@pytest.mark.parametrize("payload", [None, [], {"id": "20"}, {"code": 0, "message": "fine"}, {"message": "no code"}])
def test_check_json_error_passes_non_errors(route: routes.CompiledRoute, payload):
    rest.check_json_error(route, None, payload)


def test_check_response_returns_payload(route: routes.CompiledRoute):
    payload = {"id": "20"}

    assert rest.check_response(route, None, 200, payload) is payload


def test_remote_rejected_str():
    error = errors.RemoteRejected("Not Found (404)", "GET", "/channels/10", body={"a": 1})

    assert str(error) == 'Not Found (404)\nEndpoint: /channels/10\nMethod: GET\nData: {"a": 1}'
    assert "empty" in str(errors.RemoteRejected("Not Found (404)", "GET", "/channels/10"))


def test_hikari_rest_client_request_accepts_transport_arguments():
    parameters = inspect.signature(rest_impl.RESTClientImpl._request).parameters

    assert "json" in parameters
    assert "reason" in parameters
    assert parameters["json"].kind is inspect.Parameter.KEYWORD_ONLY
    assert parameters["reason"].kind is inspect.Parameter.KEYWORD_ONLY


@pytest.mark.asyncio()
async def test_hikari_transport_request(route: routes.CompiledRoute):
    app = mock.Mock()
    app.rest._request = mock.AsyncMock(return_value={"id": "20"})
    transport = rest.HikariTransport(app)

    result = await transport.request(route, json={"content": "hi"}, reason="because")

    assert result == {"id": "20"}
    app.rest._request.assert_awaited_once_with(route, json={"content": "hi"}, reason="because")


@pytest.mark.asyncio()
async def test_hikari_transport_request_without_reason(route: routes.CompiledRoute):
    app = mock.Mock()
    app.rest._request = mock.AsyncMock(return_value=None)

    await rest.HikariTransport(app).request(route)

    app.rest._request.assert_awaited_once_with(route, json=None, reason=hikari.UNDEFINED)


@pytest.mark.asyncio()
async def test_hikari_transport_wraps_client_errors(route: routes.CompiledRoute):
    cause = hikari.errors.NotFoundError(
        url="https://discord.com/api/v10/channels/10/messages/20",
        headers={},
        raw_body=b"",
        message="Unknown Message",
        code=10008,
    )
    app = mock.Mock()
    app.rest._request = mock.AsyncMock(side_effect=cause)

    with pytest.raises(errors.RemoteRejected) as exc_info:
        await rest.HikariTransport(app).request(route, json={"content": "hi"})

    assert exc_info.value.status == 404
    assert exc_info.value.code == 10008
    assert exc_info.value.message == "Unknown Message (10008)"
    assert exc_info.value.body == {"content": "hi"}
    assert exc_info.value.base_exception is cause
    assert exc_info.value.__cause__ is cause
