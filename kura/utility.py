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
"""Helpers for marking client methods as raw gateway event listeners."""

from __future__ import annotations

__all__: typing.Sequence[str] = ["RawListenerProto", "as_raw_listener", "find_raw_listeners"]

import inspect
import typing

_T = typing.TypeVar("_T")
_ObjectT = typing.Mapping[str, typing.Any]
_CallbackT = typing.Callable[["_T", _ObjectT], None]


class RawListenerProto(typing.Protocol):
    """Protocol of a bound raw event listener method."""

    def __call__(self, payload: _ObjectT, /) -> None:
        """Ingest a raw event payload.

        Parameters
        ----------
        payload
            The event's raw payload.
        """
        raise NotImplementedError

    @property
    def __kura_event_names__(self) -> typing.Sequence[str]:
        """Sequence of the raw event names this is listening for."""
        raise NotImplementedError


def as_raw_listener(
    event_name: str, /, *event_names: str
) -> typing.Callable[[_CallbackT[_T]], _CallbackT[_T]]:
    """Mark a method as a raw event listener on a client.

    Parameters
    ----------
    event_name
        Name of the raw event this is listening for.
    event_names
        Name of other raw events this is listening for.

    Returns
    -------
    typing.Callable[[_CallbackT[_T]], _CallbackT[_T]]
        Decorator callback which marks the method as a raw event listener.
    """
    names = (event_name.upper(), *(name.upper() for name in event_names))

    def decorator(listener: _CallbackT[_T], /) -> _CallbackT[_T]:
        listener.__kura_event_names__ = names  # type: ignore[attr-defined]
        return listener

    return decorator


def find_raw_listeners(obj: typing.Any, /) -> typing.Dict[str, typing.List[RawListenerProto]]:
    """Find all the raw event listener methods on an object.

    Parameters
    ----------
    obj
        The object to find the listeners on.

    Returns
    -------
    dict[str, list[RawListenerProto]]
        A dictionary of upper-case event names to the found listener methods.
    """
    raw_listeners: typing.Dict[str, typing.List[RawListenerProto]] = {}
    # Scan the class so properties aren't evaluated.
    for attribute, function in inspect.getmembers(type(obj), inspect.isfunction):
        names: typing.Optional[typing.Sequence[str]] = getattr(function, "__kura_event_names__", None)
        if names is None:
            continue

        member = typing.cast(RawListenerProto, getattr(obj, attribute))
        for name in names:
            try:
                raw_listeners[name].append(member)

            except KeyError:
                raw_listeners[name] = [member]

    return raw_listeners
