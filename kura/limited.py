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
"""A size-limited mapping which evicts its oldest entries first."""

from __future__ import annotations

__all__: typing.Sequence[str] = ["EvictCallbackT", "LimitedMap"]

import typing
from collections import abc as collections

_KeyT = typing.TypeVar("_KeyT")
_ValueT = typing.TypeVar("_ValueT")

EvictCallbackT = typing.Callable[[typing.Any, typing.Any], None]
"""Type hint of a callback which is called with the key and value of each evicted entry."""


class LimitedMap(collections.MutableMapping[_KeyT, _ValueT]):
    """A mapping with a maximum entry count and insertion-order (FIFO) eviction.

    When inserting a new key would push the map over `max_size`, the entries
    which were first inserted the longest time ago are evicted until it fits.
    Replacing the value of an existing key keeps that key's original position
    in the eviction order and never evicts anything.

    Parameters
    ----------
    max_size : int
        The maximum amount of entries this map may hold.

        `0` means that this map is unbounded.

    Other Parameters
    ----------------
    on_evict : typing.Optional[EvictCallbackT]
        Callback called with `(key, value)` for each entry which is evicted to
        stay within `max_size`.

        This isn't called for entries which are explicitly deleted.
    """

    __slots__: typing.Sequence[str] = ("_data", "_max_size", "_on_evict")

    def __init__(self, max_size: int = 0, /, *, on_evict: typing.Optional[EvictCallbackT] = None) -> None:
        if max_size < 0:
            raise ValueError("max_size cannot be negative")

        # Dict order is insertion order and re-assigning a key keeps its position.
        self._data: typing.Dict[_KeyT, _ValueT] = {}
        self._max_size = int(max_size)
        self._on_evict = on_evict

    def __repr__(self) -> str:
        return f"{type(self).__name__}(max_size={self._max_size}, size={len(self._data)})"

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __getitem__(self, key: _KeyT, /) -> _ValueT:
        return self._data[key]

    def __setitem__(self, key: _KeyT, value: _ValueT, /) -> None:
        if key in self._data:
            self._data[key] = value
            return

        self._data[key] = value
        self._garbage_collect()

    def __delitem__(self, key: _KeyT, /) -> None:
        del self._data[key]

    def __iter__(self) -> typing.Iterator[_KeyT]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    @property
    def max_size(self) -> int:
        """The maximum amount of entries this map may hold (`0` for unbounded).

        Lowering this immediately evicts the oldest entries down to the new size.
        """
        return self._max_size

    @max_size.setter
    def max_size(self, max_size: int, /) -> None:
        if max_size < 0:
            raise ValueError("max_size cannot be negative")

        self._max_size = int(max_size)
        self._garbage_collect()

    def has(self, key: _KeyT, /) -> bool:
        """Whether an entry is stored for `key`."""
        return key in self._data

    def set(self, key: _KeyT, value: _ValueT, /) -> None:
        """Insert or replace an entry, evicting the oldest entries if needed."""
        self[key] = value

    def delete(self, key: _KeyT, /) -> typing.Optional[_ValueT]:
        """Remove an entry if present.

        Returns
        -------
        typing.Optional[_ValueT]
            The removed value or `None` if `key` wasn't stored.
        """
        return self._data.pop(key, None)

    def size(self) -> int:
        """The amount of entries currently stored."""
        return len(self._data)

    def _garbage_collect(self) -> None:
        if not self._max_size:
            return

        while len(self._data) > self._max_size:
            key = next(iter(self._data))
            value = self._data.pop(key)
            if self._on_evict:
                self._on_evict(key, value)
