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
"""The outbound transport contract used by entity operations.

Kura doesn't implement HTTP itself; entity operations compile a hikari route
and hand it to a `RESTTransport`. `HikariTransport` runs these requests
through a hikari REST client.
"""

from __future__ import annotations

__all__: typing.Sequence[str] = [
    "HikariTransport",
    "RESTTransport",
    "check_json_error",
    "check_response",
    "check_status",
]

import abc
import http
import logging
import typing
from collections import abc as collections

import hikari

from . import errors

if typing.TYPE_CHECKING:
    from hikari.internal import routes

_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.kura.rest")

_STATUS_MESSAGES: typing.Final[typing.Mapping[int, str]] = {
    http.HTTPStatus.BAD_REQUEST: "Bad Request",
    http.HTTPStatus.UNAUTHORIZED: "Not Authorized",
    http.HTTPStatus.FORBIDDEN: "Missing Permissions",
    http.HTTPStatus.NOT_FOUND: "Not Found",
}


class RESTTransport(abc.ABC):
    """The interface of the network collaborator entity operations call into."""

    __slots__: typing.Sequence[str] = ()

    @abc.abstractmethod
    async def request(
        self, route: routes.CompiledRoute, /, *, json: typing.Any = None, reason: typing.Optional[str] = None
    ) -> typing.Any:
        """Make a request to the remote service.

        Parameters
        ----------
        route : hikari.internal.routes.CompiledRoute
            The compiled route (method and path) to request.

        Other Parameters
        ----------------
        json : typing.Any
            The JSON body to send, if any.
        reason : typing.Optional[str]
            The audit log reason to attach to the request, if any.

        Returns
        -------
        typing.Any
            The decoded JSON response body or `None` if the response had no body.

        Raises
        ------
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """


class HikariTransport(RESTTransport):
    """A transport which makes requests through a hikari REST client.

    !!! warning
        This relies on the private `RESTClientImpl._request` method so the
        supported hikari versions are pinned in `requirements.txt`.

    Parameters
    ----------
    app : hikari.traits.RESTAware
        The hikari app whose REST client should be used.
    """

    __slots__: typing.Sequence[str] = ("_app",)

    def __init__(self, app: hikari.RESTAware, /) -> None:
        self._app = app

    @property
    def app(self) -> hikari.RESTAware:
        """The hikari app this transport makes requests through."""
        return self._app

    async def request(
        self, route: routes.CompiledRoute, /, *, json: typing.Any = None, reason: typing.Optional[str] = None
    ) -> typing.Any:
        # <<Inherited docstring from RESTTransport>>
        _LOGGER.debug("requesting %s %s", route.method, route.compiled_path)
        try:
            # This is the same private entry point hikari's own REST methods go through.
            return await self._app.rest._request(  # type: ignore[attr-defined]
                route, json=json, reason=hikari.UNDEFINED if reason is None else reason
            )

        except hikari.ClientHTTPResponseError as exc:
            status = int(exc.status)
            message = exc.message or _STATUS_MESSAGES.get(status, "Client Error")
            raise errors.RemoteRejected(
                f"{message} ({exc.code or status})",
                route.method,
                route.compiled_path,
                body=json,
                status=status,
                code=exc.code or None,
                exception=exc,
            ) from exc


def check_status(route: routes.CompiledRoute, body: typing.Any, status: int, /) -> None:
    """Raise if an HTTP status code is one of the client error categories.

    Parameters
    ----------
    route : hikari.internal.routes.CompiledRoute
        The route which was requested.
    body : typing.Any
        The body which was sent with the request.
    status : int
        The response's status code.

    Raises
    ------
    kura.errors.RemoteRejected
        If the status is 400, 401, 403 or 404.
    """
    if message := _STATUS_MESSAGES.get(status):
        raise errors.RemoteRejected(
            f"{message} ({status})", route.method, route.compiled_path, body=body, status=status
        )


def check_json_error(route: routes.CompiledRoute, body: typing.Any, payload: typing.Any, /) -> None:
    """Raise if a decoded response body is a structured remote error.

    Parameters
    ----------
    route : hikari.internal.routes.CompiledRoute
        The route which was requested.
    body : typing.Any
        The body which was sent with the request.
    payload : typing.Any
        The decoded response body.

    Raises
    ------
    kura.errors.RemoteRejected
        If the payload carries both an error `code` and `message`.
    """
    if not isinstance(payload, collections.Mapping):
        return

    code = payload.get("code")
    message = payload.get("message")
    if code and message:
        raise errors.RemoteRejected(f"{message} ({code})", route.method, route.compiled_path, body=body, code=code)


def check_response(route: routes.CompiledRoute, body: typing.Any, status: int, payload: typing.Any, /) -> typing.Any:
    """Check a raw response with `check_status` then `check_json_error`.

    Returns
    -------
    typing.Any
        The payload if the response wasn't an error.
    """
    check_status(route, body, status)
    check_json_error(route, body, payload)
    return payload
