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
"""The standard errors raised by Kura.

.. note::
    These supplement python's builtin exceptions but do not replace them.

.. note::
    A cache miss is not an error in Kura; lookups and relation accessors
    return `None` when the targeted entity isn't cached.
"""

from __future__ import annotations

__all__: typing.Sequence[str] = [
    "ClosedClient",
    "KuraException",
    "MalformedPayload",
    "RemoteRejected",
]

import json
import typing


class KuraException(Exception):
    """Base exception for the expected exceptions raised by Kura.

    Parameters
    ----------
    message : str
        The exception's message.
    exception : typing.Optional[Exception]
        The exception which caused this exception if applicable else `None`.
    """

    __slots__: typing.Sequence[str] = ("base_exception", "message")

    message: str
    """The exception's message, this may be an empty string if there is no message."""

    base_exception: typing.Optional[Exception]
    """The exception which caused this exception if applicable else `None`."""

    def __init__(self, message: str, *, exception: typing.Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message: str = message
        self.base_exception: typing.Optional[Exception] = exception

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"

    def __str__(self) -> str:
        return self.message


class ClosedClient(KuraException):
    """Error that's raised when an attempt to use an inactive client is made."""

    __slots__: typing.Sequence[str] = ()


class MalformedPayload(KuraException, ValueError):
    """Error that's raised when a raw payload can't be turned into an entity.

    This covers payloads which are missing their identity or another required
    field, fields which can't be cast to their expected type and updates whose
    identity doesn't match the entity they're being merged into.

    .. note::
        When this is raised by an ingestion call the cache is left untouched.
    """

    __slots__: typing.Sequence[str] = ("field",)

    field: typing.Optional[str]
    """Name of the offending field if applicable else `None`."""

    def __init__(
        self, message: str, *, field: typing.Optional[str] = None, exception: typing.Optional[Exception] = None
    ) -> None:
        super().__init__(message, exception=exception)
        self.field = field


class RemoteRejected(KuraException):
    """Error that's raised when the remote service rejects an outbound operation.

    .. note::
        Kura never retries these; any retry policy belongs to the transport.

    Parameters
    ----------
    message : str
        The exception's message.
    method : str
        The HTTP method of the rejected request.
    path : str
        The compiled path of the rejected request.

    Other Parameters
    ----------------
    body : typing.Any
        The JSON body which was sent with the rejected request, if any.
    status : typing.Optional[int]
        The HTTP status code the request was rejected with, if known.
    code : typing.Optional[int]
        The structured error code the remote service returned, if any.
    exception : typing.Optional[Exception]
        The transport exception which caused this, if applicable.
    """

    __slots__: typing.Sequence[str] = ("body", "code", "method", "path", "status")

    def __init__(
        self,
        message: str,
        /,
        method: str,
        path: str,
        *,
        body: typing.Any = None,
        status: typing.Optional[int] = None,
        code: typing.Optional[int] = None,
        exception: typing.Optional[Exception] = None,
    ) -> None:
        super().__init__(message, exception=exception)
        self.body: typing.Any = body
        self.code: typing.Optional[int] = code
        self.method: str = method
        self.path: str = path
        self.status: typing.Optional[int] = status

    def __str__(self) -> str:
        return f"{self.message}\nEndpoint: {self.path}\nMethod: {self.method}\nData: {_format_body(self.body)}"


def _format_body(body: typing.Any, /) -> str:
    if body is None:
        return "empty"

    if isinstance(body, str):
        return body

    try:
        return json.dumps(body)

    except (TypeError, ValueError):
        return repr(body)
