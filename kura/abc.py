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
"""Abstract classes for the entities and entity managers defined by Kura."""

from __future__ import annotations

__all__: typing.Sequence[str] = ["Entity", "EntityManager"]

import abc
import types
import typing
from collections import abc as collections

import hikari

from . import errors
from . import fields

if typing.TYPE_CHECKING:
    import datetime

    from . import client as client_

_ObjectT = typing.Mapping[str, typing.Any]
_EntityT = typing.TypeVar("_EntityT", bound="Entity[typing.Any]")
KeyT = typing.TypeVar("KeyT", bound=typing.Hashable)
EntityT = typing.TypeVar("EntityT", bound="Entity[typing.Any]")


class Entity(abc.ABC, typing.Generic[KeyT]):
    """Base class of every cached entity.

    An entity holds the last known merged raw payload alongside its converted
    field values and is identified by a key which never changes after it's
    built. Relations to other entities are only ever stored as identity keys
    and resolved through the owning client's managers when accessed.

    Parameters
    ----------
    client : kura.client.Client
        The client which owns the managers this entity resolves relations through.
    payload : typing.Mapping[str, typing.Any]
        The raw payload to build this entity from.

    Raises
    ------
    kura.errors.MalformedPayload
        If the payload is missing a required field or contains an invalid value.
    """

    __slots__: typing.Sequence[str] = ("_client", "_data", "_payload")

    FIELDS: typing.ClassVar[fields.FieldTable]
    """Table of the fields this entity type is built from."""

    IDENTITY_FIELDS: typing.ClassVar[typing.Sequence[str]] = ("id",)
    """The payload keys this entity type's identity is derived from."""

    def __init__(self, client: client_.Client, payload: _ObjectT, /) -> None:
        self._client = client
        self._data: typing.Dict[str, typing.Any] = self.FIELDS.build(payload)
        self._payload: typing.Dict[str, typing.Any] = dict(payload)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r})"

    @abc.abstractmethod
    def __str__(self) -> str:
        """The display form of this entity."""

    @classmethod
    def key_from_payload(cls, payload: _ObjectT, /) -> KeyT:
        """Get the identity key of a raw payload of this entity type.

        Parameters
        ----------
        payload : typing.Mapping[str, typing.Any]
            The raw payload.

        Returns
        -------
        KeyT
            The identity key.

        Raises
        ------
        kura.errors.MalformedPayload
            If the payload's identity is missing or invalid.
        """
        return typing.cast(KeyT, _get_snowflake(cls.FIELDS.name, payload, "id"))

    @property
    def client(self) -> client_.Client:
        """The client this entity belongs to."""
        return self._client

    @property
    def created_at(self) -> datetime.datetime:
        """When this entity was created, derived from its snowflake ID."""
        return self.id.created_at

    @property
    def id(self) -> hikari.Snowflake:
        """This entity's snowflake ID."""
        return self._data["id"]

    @property
    def key(self) -> KeyT:
        """The key this entity is stored under in its manager.

        This is the same as `Entity.id` for every type but members.
        """
        return typing.cast(KeyT, self.id)

    @property
    def payload(self) -> typing.Mapping[str, typing.Any]:
        """Read-only view of the last known merged raw payload."""
        return types.MappingProxyType(self._payload)

    def update(self: _EntityT, payload: _ObjectT, /) -> _EntityT:
        """Merge a partial payload into this entity in place.

        Fields which are present in the payload overwrite the current values
        while fields which are missing are left as they are.

        Parameters
        ----------
        payload : typing.Mapping[str, typing.Any]
            The raw, possibly partial, payload.

        Returns
        -------
        Self
            This same entity.

        Raises
        ------
        kura.errors.MalformedPayload
            If the payload's identity doesn't match this entity's or it
            contains an invalid value. This entity is left untouched if raised.
        """
        self._apply(self._merge(payload), payload)
        return self

    def _merge(self, payload: _ObjectT, /) -> typing.Dict[str, typing.Any]:
        # All fields are converted before any are written.
        data = self.FIELDS.merge(payload)
        if all(key in payload for key in self.IDENTITY_FIELDS) and self.key_from_payload(payload) != self.key:
            raise errors.MalformedPayload(f"Cannot merge a payload for a different {self.FIELDS.name} into {self!r}")

        return data

    def _apply(self, data: typing.Mapping[str, typing.Any], payload: _ObjectT, /) -> None:
        self._data.update(data)
        self._payload.update(payload)


def _get_snowflake(table: str, payload: _ObjectT, key: str, /) -> hikari.Snowflake:
    if not isinstance(payload, collections.Mapping):
        raise errors.MalformedPayload(f"Expected a mapping {table} payload but got {type(payload).__name__}")

    try:
        value = payload[key]

    except KeyError:
        raise errors.MalformedPayload(f"{table} payload is missing its {key!r} identity field", field=key) from None

    try:
        return fields.cast_snowflake(value)

    except (TypeError, ValueError) as exc:
        raise errors.MalformedPayload(f"Invalid {table} identity {value!r}", field=key, exception=exc) from exc


class EntityManager(abc.ABC, typing.Generic[KeyT, EntityT]):
    """The interface of a store which owns the live entities of a single kind.

    A manager holds at most one entity object per identity key and is the
    single point where raw payloads become (or refresh) cached entities.
    """

    __slots__: typing.Sequence[str] = ()

    @property
    @abc.abstractmethod
    def cache(self) -> typing.Mapping[KeyT, EntityT]:
        """Read-only view of the cached entities in insertion order."""

    @property
    @abc.abstractmethod
    def max_size(self) -> int:
        """The maximum amount of entities this manager keeps (`0` for unbounded)."""

    @abc.abstractmethod
    def __contains__(self, key: object, /) -> bool:
        """Whether an entity is cached for a key."""

    @abc.abstractmethod
    def __iter__(self) -> typing.Iterator[EntityT]:
        """Iterate over the cached entities in insertion order."""

    @abc.abstractmethod
    def __len__(self) -> int:
        """The amount of cached entities."""

    @abc.abstractmethod
    def clear(self) -> None:
        """Remove every entity from this manager's cache."""

    @abc.abstractmethod
    def get(self, key: typing.Any, /) -> typing.Optional[EntityT]:
        """Get a cached entity.

        This never performs any I/O.

        Parameters
        ----------
        key : typing.Any
            The identity key of the entity to get.

        Returns
        -------
        typing.Optional[EntityT]
            The cached entity or `None` if it isn't cached (including when the
            key isn't a valid identity).
        """

    @abc.abstractmethod
    def remove(self, key: typing.Any, /) -> typing.Optional[EntityT]:
        """Remove an entity from the cache.

        .. note::
            Unlike the other cache-mutating methods this doesn't raise when the
            targeted entity isn't cached.

        Parameters
        ----------
        key : typing.Any
            The identity key of the entity to remove.

        Returns
        -------
        typing.Optional[EntityT]
            The removed entity, or `None` if it wasn't cached.
        """

    @abc.abstractmethod
    def update(self, payload: _ObjectT, /) -> typing.Optional[EntityT]:
        """Merge a partial payload into an entity only if it's already cached.

        Parameters
        ----------
        payload : typing.Mapping[str, typing.Any]
            The raw partial payload.

        Returns
        -------
        typing.Optional[EntityT]
            The updated entity or `None` if it wasn't cached.

        Raises
        ------
        kura.errors.MalformedPayload
            If the payload's identity is missing or it contains an invalid value.
        """

    @abc.abstractmethod
    def upsert(self, payload: _ObjectT, /) -> EntityT:
        """Create an entity from a payload or merge the payload into the cached entity.

        Parameters
        ----------
        payload : typing.Mapping[str, typing.Any]
            The raw payload.

        Returns
        -------
        EntityT
            The new or updated entity.

        Raises
        ------
        kura.errors.MalformedPayload
            If the payload is missing its identity or a field required to
            build the entity, or contains an invalid value. This also applies
            to the complete objects nested in the payload (partial references
            are skipped). The cache is left untouched if this is raised.
        """
