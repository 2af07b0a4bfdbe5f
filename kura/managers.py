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
"""In-memory managers which own the live entities of each kind."""

from __future__ import annotations

__all__: typing.Sequence[str] = [
    "Batch",
    "ChannelManager",
    "GuildManager",
    "Manager",
    "MemberManager",
    "MessageManager",
    "UserManager",
    "with_guild_id",
]

import asyncio
import itertools
import logging
import types
import typing
from collections import abc as collections

import hikari
from hikari.internal import routes

from . import abc
from . import entities
from . import fields
from . import limited

if typing.TYPE_CHECKING:
    from . import client as client_

_ObjectT = typing.Mapping[str, typing.Any]
_KeyT = typing.TypeVar("_KeyT", bound=typing.Hashable)
_EntityT = typing.TypeVar("_EntityT", bound=abc.Entity[typing.Any])
_NestedT = typing.List[typing.Tuple["Manager[typing.Any, typing.Any]", _ObjectT]]

_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.kura.managers")


def _is_complete(entity_type: typing.Type[abc.Entity[typing.Any]], payload: typing.Any, /) -> bool:
    # Nested objects may be partial references; those are skipped.
    return isinstance(payload, collections.Mapping) and all(
        payload.get(key) is not None for key in entity_type.FIELDS.required
    )


def with_guild_id(payload: _ObjectT, guild_id: typing.Optional[hikari.Snowflakeish], /) -> _ObjectT:
    """Add a guild ID to a payload which doesn't already carry one.

    Parameters
    ----------
    payload : typing.Mapping[str, typing.Any]
        The raw payload.
    guild_id : typing.Optional[hikari.snowflakes.Snowflakeish]
        The guild ID to add. If this is `None` then the payload is returned as-is.

    Returns
    -------
    typing.Mapping[str, typing.Any]
        The payload with `guild_id` set.
    """
    if guild_id is None or not isinstance(payload, collections.Mapping) or "guild_id" in payload:
        return payload

    return {**payload, "guild_id": str(guild_id)}


class _Staged:
    __slots__: typing.Sequence[str] = ("data", "entity", "key", "manager", "payload")

    def __init__(
        self,
        manager: Manager[typing.Any, typing.Any],
        key: typing.Hashable,
        payload: _ObjectT,
        entity: abc.Entity[typing.Any],
        data: typing.Optional[typing.Mapping[str, typing.Any]],
        /,
    ) -> None:
        self.data = data
        self.entity = entity
        self.key = key
        self.manager = manager
        self.payload = payload

    def commit(self) -> abc.Entity[typing.Any]:
        cache = self.manager._cache
        if (current := cache.get(self.key)) is None:
            if self.data is not None:
                self.entity._apply(self.data, self.payload)

            cache[self.key] = self.entity
            _LOGGER.debug("created %s %r", self.manager.entity_type.FIELDS.name, self.key)
            return self.entity

        if current is self.entity and self.data is not None:
            current._apply(self.data, self.payload)

        else:
            # An earlier payload in the same batch already cached this key.
            current.update(self.payload)

        return current


class Batch:
    """A group of payloads which are validated together then written together.

    Every payload added to a batch (along with the nested objects it carries)
    is fully converted when it's added and nothing is written to the cache
    until `Batch.commit` is called, so a malformed payload never leaves the
    cache partially updated.

    Examples
    --------
    ```py
    batch = kura.managers.Batch()
    batch.add(client.users, ready["user"])
    for guild in ready["guilds"]:
        batch.add(client.guilds, guild)

    batch.commit()
    ```
    """

    __slots__: typing.Sequence[str] = ("_roots", "_staged")

    def __init__(self) -> None:
        self._roots: typing.List[int] = []
        self._staged: typing.List[_Staged] = []

    def __len__(self) -> int:
        return len(self._roots)

    def add(self, manager: Manager[typing.Any, typing.Any], payload: _ObjectT, /) -> Batch:
        """Validate a payload and add it to this batch.

        Parameters
        ----------
        manager : Manager
            The manager the payload's entity belongs to.
        payload : typing.Mapping[str, typing.Any]
            The raw payload.

        Returns
        -------
        Batch
            This batch to allow chaining.

        Raises
        ------
        kura.errors.MalformedPayload
            If the payload or one of the complete objects nested in it is
            malformed. The batch is left as it was if raised.
        """
        staged: typing.List[_Staged] = []
        manager._stage(payload, staged)
        self._roots.append(len(self._staged))
        self._staged.extend(staged)
        return self

    def commit(self) -> typing.Sequence[abc.Entity[typing.Any]]:
        """Write every payload in this batch to the cache.

        Returns
        -------
        typing.Sequence[kura.abc.Entity]
            The created or updated entities for the payloads which were
            directly added, in the order they were added.
        """
        committed = [staged.commit() for staged in self._staged]
        roots = [committed[index] for index in self._roots]
        self._roots.clear()
        self._staged.clear()
        return roots


class Manager(abc.EntityManager[_KeyT, _EntityT]):
    """Standard implementation of an entity manager backed by a `kura.limited.LimitedMap`.

    Parameters
    ----------
    client : kura.client.Client
        The client this manager belongs to.
    entity_type : type[kura.abc.Entity]
        The type of entity this manager owns.

    Other Parameters
    ----------------
    max_size : int
        The maximum amount of entities to keep (`0` for unbounded).

        Once this is exceeded the oldest inserted entity is evicted.
    """

    __slots__: typing.Sequence[str] = ("_cache", "_client", "_entity_type")

    def __init__(
        self, client: client_.Client, entity_type: typing.Type[_EntityT], /, *, max_size: int = 0
    ) -> None:
        self._cache: limited.LimitedMap[_KeyT, _EntityT] = limited.LimitedMap(max_size, on_evict=self._on_evict)
        self._client = client
        self._entity_type = entity_type

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={len(self._cache)}, max_size={self._cache.max_size})"

    def __contains__(self, key: object, /) -> bool:
        # <<Inherited docstring from kura.abc.EntityManager>>
        return self.get(key) is not None

    def __iter__(self) -> typing.Iterator[_EntityT]:
        # <<Inherited docstring from kura.abc.EntityManager>>
        return iter(list(self._cache.values()))

    def __len__(self) -> int:
        # <<Inherited docstring from kura.abc.EntityManager>>
        return len(self._cache)

    @property
    def cache(self) -> typing.Mapping[_KeyT, _EntityT]:
        # <<Inherited docstring from kura.abc.EntityManager>>
        return types.MappingProxyType(self._cache)  # type: ignore[arg-type]

    @property
    def client(self) -> client_.Client:
        """The client this manager belongs to."""
        return self._client

    @property
    def entity_type(self) -> typing.Type[_EntityT]:
        """The type of entity this manager owns."""
        return self._entity_type

    @property
    def max_size(self) -> int:
        # <<Inherited docstring from kura.abc.EntityManager>>
        return self._cache.max_size

    @max_size.setter
    def max_size(self, max_size: int, /) -> None:
        self._cache.max_size = max_size

    def _on_evict(self, key: _KeyT, entity: _EntityT, /) -> None:
        _LOGGER.debug("evicted %s %r to stay within %s entries", self._entity_type.FIELDS.name, key, self.max_size)

    def _convert_key(self, key: typing.Any, /) -> typing.Optional[_KeyT]:
        try:
            return typing.cast(_KeyT, fields.cast_snowflake(key))

        except (TypeError, ValueError):
            return None

    def _nested(self, payload: _ObjectT, /) -> _NestedT:
        return []

    def _stage(self, payload: _ObjectT, staged: typing.List[_Staged], /) -> None:
        key = self._entity_type.key_from_payload(payload)
        if (entity := self._cache.get(key)) is not None:
            staged.append(_Staged(self, key, payload, entity, entity._merge(payload)))

        else:
            staged.append(_Staged(self, key, payload, self._entity_type(self._client, payload), None))

        for manager, nested in self._nested(payload):
            manager._stage(nested, staged)

    def clear(self) -> None:
        # <<Inherited docstring from kura.abc.EntityManager>>
        self._cache.clear()

    def get(self, key: typing.Any, /) -> typing.Optional[_EntityT]:
        # <<Inherited docstring from kura.abc.EntityManager>>
        if (converted := self._convert_key(key)) is None:
            return None

        return self._cache.get(converted)

    def remove(self, key: typing.Any, /) -> typing.Optional[_EntityT]:
        # <<Inherited docstring from kura.abc.EntityManager>>
        if (converted := self._convert_key(key)) is None:
            return None

        if (entity := self._cache.delete(converted)) is not None:
            _LOGGER.debug("removed %s %r", self._entity_type.FIELDS.name, converted)

        return entity

    def remove_where(self, predicate: typing.Callable[[_EntityT], bool], /) -> typing.Sequence[_EntityT]:
        """Remove every cached entity which matches a predicate.

        Parameters
        ----------
        predicate : typing.Callable[[_EntityT], bool]
            Callback which returns `True` for the entities to remove.

        Returns
        -------
        typing.Sequence[_EntityT]
            The removed entities.
        """
        removed = [entity for entity in self._cache.values() if predicate(entity)]
        for entity in removed:
            del self._cache[entity.key]

        return removed

    def update(self, payload: _ObjectT, /) -> typing.Optional[_EntityT]:
        # <<Inherited docstring from kura.abc.EntityManager>>
        key = self._entity_type.key_from_payload(payload)
        if key not in self._cache:
            _LOGGER.debug("ignoring partial update for uncached %s %r", self._entity_type.FIELDS.name, key)
            return None

        staged: typing.List[_Staged] = []
        self._stage(payload, staged)
        committed = [entry.commit() for entry in staged]
        return typing.cast(_EntityT, committed[0])

    def upsert(self, payload: _ObjectT, /) -> _EntityT:
        # <<Inherited docstring from kura.abc.EntityManager>>
        return typing.cast(_EntityT, Batch().add(self, payload).commit()[0])

    def upsert_many(self, payloads: typing.Iterable[_ObjectT], /) -> typing.Sequence[_EntityT]:
        """Upsert several payloads as one all-or-nothing write.

        Parameters
        ----------
        payloads : typing.Iterable[typing.Mapping[str, typing.Any]]
            The raw payloads.

        Returns
        -------
        typing.Sequence[_EntityT]
            The new or updated entities in the order their payloads were given.

        Raises
        ------
        kura.errors.MalformedPayload
            If any of the payloads is malformed. The cache is left untouched
            if this is raised.
        """
        batch = Batch()
        for payload in payloads:
            batch.add(self, payload)

        return typing.cast(typing.Sequence[_EntityT], batch.commit())

    async def _fetch(
        self,
        key: _KeyT,
        route: routes.CompiledRoute,
        /,
        *,
        timeout: typing.Optional[float],
        use_cache: bool,
        **upsert_kwargs: typing.Any,
    ) -> _EntityT:
        if use_cache and (entity := self._cache.get(key)) is not None:
            return entity

        request = self._client.transport.request(route)
        # The cache is only written once the request has finished.
        payload = await (asyncio.wait_for(request, timeout) if timeout is not None else request)
        return self.upsert(payload, **upsert_kwargs)  # type: ignore[call-arg]


class ChannelManager(Manager[hikari.Snowflake, entities.Channel]):
    """Manager of the cached channels and threads."""

    __slots__: typing.Sequence[str] = ()

    def __init__(self, client: client_.Client, /, *, max_size: int = 0) -> None:
        super().__init__(client, entities.Channel, max_size=max_size)

    def iter_for_guild(self, guild_id: hikari.Snowflakeish, /) -> typing.Iterator[entities.Channel]:
        """Iterate over the cached channels which belong to a guild.

        Parameters
        ----------
        guild_id : hikari.snowflakes.Snowflakeish
            ID of the guild.

        Returns
        -------
        typing.Iterator[kura.entities.Channel]
            Iterator of the guild's cached channels in insertion order.
        """
        guild_id = hikari.Snowflake(guild_id)
        return (channel for channel in self if channel.guild_id == guild_id)

    def upsert(self, payload: _ObjectT, /, *, guild_id: typing.Optional[hikari.Snowflakeish] = None) -> entities.Channel:
        """Create a channel from a payload or merge the payload into the cached channel.

        Parameters
        ----------
        payload : typing.Mapping[str, typing.Any]
            The raw channel payload.

        Other Parameters
        ----------------
        guild_id : typing.Optional[hikari.snowflakes.Snowflakeish]
            ID of the guild the channel belongs to.

            This is used for channel payloads nested in guild payloads as
            these don't include the guild's ID.

        Returns
        -------
        kura.entities.Channel
            The new or updated channel.

        Raises
        ------
        kura.errors.MalformedPayload
            If the payload is missing its identity or type, or contains an
            invalid value.
        """
        return super().upsert(with_guild_id(payload, guild_id))

    async def fetch(
        self, channel_id: hikari.Snowflakeish, /, *, timeout: typing.Optional[float] = None, use_cache: bool = True
    ) -> entities.Channel:
        """Get a channel from the cache or fetch it from the remote service.

        Parameters
        ----------
        channel_id : hikari.snowflakes.Snowflakeish
            ID of the channel.

        Other Parameters
        ----------------
        timeout : typing.Optional[float]
            How many seconds to wait for the request before giving up.
        use_cache : bool
            Whether a cached channel may be returned without making a request.

        Returns
        -------
        kura.entities.Channel
            The channel.

        Raises
        ------
        asyncio.TimeoutError
            If the request timed out. The cache is left untouched.
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        channel_id = hikari.Snowflake(channel_id)
        route = routes.GET_CHANNEL.compile(channel=channel_id)
        return await self._fetch(channel_id, route, timeout=timeout, use_cache=use_cache)


class GuildManager(Manager[hikari.Snowflake, entities.Guild]):
    """Manager of the cached guilds.

    Guild payloads which carry their channels, threads and members (as sent
    on guild create) also populate those managers.
    """

    __slots__: typing.Sequence[str] = ()

    def __init__(self, client: client_.Client, /, *, max_size: int = 0) -> None:
        super().__init__(client, entities.Guild, max_size=max_size)

    def _nested(self, payload: _ObjectT, /) -> _NestedT:
        nested: _NestedT = []
        guild_id = payload["id"]
        for channel in itertools.chain(payload.get("channels") or (), payload.get("threads") or ()):
            channel = with_guild_id(channel, guild_id)
            if _is_complete(entities.Channel, channel):
                nested.append((self._client.channels, channel))

        for member in payload.get("members") or ():
            member = with_guild_id(member, guild_id)
            if _is_complete(entities.Member, member):
                nested.append((self._client.members, member))

        return nested

    async def fetch(
        self, guild_id: hikari.Snowflakeish, /, *, timeout: typing.Optional[float] = None, use_cache: bool = True
    ) -> entities.Guild:
        """Get a guild from the cache or fetch it from the remote service.

        Parameters
        ----------
        guild_id : hikari.snowflakes.Snowflakeish
            ID of the guild.

        Other Parameters
        ----------------
        timeout : typing.Optional[float]
            How many seconds to wait for the request before giving up.
        use_cache : bool
            Whether a cached guild may be returned without making a request.

        Returns
        -------
        kura.entities.Guild
            The guild.

        Raises
        ------
        asyncio.TimeoutError
            If the request timed out. The cache is left untouched.
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        guild_id = hikari.Snowflake(guild_id)
        route = routes.GET_GUILD.compile(guild=guild_id)
        return await self._fetch(guild_id, route, timeout=timeout, use_cache=use_cache)



class UserManager(Manager[hikari.Snowflake, entities.User]):
    """Manager of the cached users."""

    __slots__: typing.Sequence[str] = ()

    def __init__(self, client: client_.Client, /, *, max_size: int = 0) -> None:
        super().__init__(client, entities.User, max_size=max_size)

    async def fetch(
        self, user_id: hikari.Snowflakeish, /, *, timeout: typing.Optional[float] = None, use_cache: bool = True
    ) -> entities.User:
        """Get a user from the cache or fetch them from the remote service.

        Parameters
        ----------
        user_id : hikari.snowflakes.Snowflakeish
            ID of the user.

        Other Parameters
        ----------------
        timeout : typing.Optional[float]
            How many seconds to wait for the request before giving up.
        use_cache : bool
            Whether a cached user may be returned without making a request.

        Returns
        -------
        kura.entities.User
            The user.

        Raises
        ------
        asyncio.TimeoutError
            If the request timed out. The cache is left untouched.
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        user_id = hikari.Snowflake(user_id)
        route = routes.GET_USER.compile(user=user_id)
        return await self._fetch(user_id, route, timeout=timeout, use_cache=use_cache)


class MemberManager(Manager[entities.MemberKey, entities.Member]):
    """Manager of the cached guild members.

    Members are keyed by `(guild_id, user_id)` tuples.
    """

    __slots__: typing.Sequence[str] = ()

    def __init__(self, client: client_.Client, /, *, max_size: int = 0) -> None:
        super().__init__(client, entities.Member, max_size=max_size)

    def _convert_key(self, key: typing.Any, /) -> typing.Optional[entities.MemberKey]:
        try:
            guild_id, user_id = key
            return (fields.cast_snowflake(guild_id), fields.cast_snowflake(user_id))

        except (TypeError, ValueError):
            return None

    def _nested(self, payload: _ObjectT, /) -> _NestedT:
        user = payload.get("user")
        return [(self._client.users, user)] if _is_complete(entities.User, user) else []

    def iter_for_guild(self, guild_id: hikari.Snowflakeish, /) -> typing.Iterator[entities.Member]:
        """Iterate over the cached members of a guild.

        Parameters
        ----------
        guild_id : hikari.snowflakes.Snowflakeish
            ID of the guild.

        Returns
        -------
        typing.Iterator[kura.entities.Member]
            Iterator of the guild's cached members in insertion order.
        """
        guild_id = hikari.Snowflake(guild_id)
        return (member for member in self if member.guild_id == guild_id)

    def iter_for_user(self, user_id: hikari.Snowflakeish, /) -> typing.Iterator[entities.Member]:
        """Iterate over the cached member objects of a user across guilds.

        Parameters
        ----------
        user_id : hikari.snowflakes.Snowflakeish
            ID of the user.

        Returns
        -------
        typing.Iterator[kura.entities.Member]
            Iterator of the user's cached member objects in insertion order.
        """
        user_id = hikari.Snowflake(user_id)
        return (member for member in self if member.user_id == user_id)

    def upsert(self, payload: _ObjectT, /, *, guild_id: typing.Optional[hikari.Snowflakeish] = None) -> entities.Member:
        """Create a member from a payload or merge the payload into the cached member.

        Parameters
        ----------
        payload : typing.Mapping[str, typing.Any]
            The raw member payload.

        Other Parameters
        ----------------
        guild_id : typing.Optional[hikari.snowflakes.Snowflakeish]
            ID of the member's guild.

            This is required for member payloads which don't include
            `guild_id` themselves (as is the case for REST responses and
            members nested in guild payloads).

        Returns
        -------
        kura.entities.Member
            The new or updated member.

        Raises
        ------
        kura.errors.MalformedPayload
            If the payload is missing its identity or contains an invalid value.
        """
        return super().upsert(with_guild_id(payload, guild_id))

    async def fetch(
        self,
        guild_id: hikari.Snowflakeish,
        user_id: hikari.Snowflakeish,
        /,
        *,
        timeout: typing.Optional[float] = None,
        use_cache: bool = True,
    ) -> entities.Member:
        """Get a member from the cache or fetch them from the remote service.

        Parameters
        ----------
        guild_id : hikari.snowflakes.Snowflakeish
            ID of the member's guild.
        user_id : hikari.snowflakes.Snowflakeish
            ID of the member's user.

        Other Parameters
        ----------------
        timeout : typing.Optional[float]
            How many seconds to wait for the request before giving up.
        use_cache : bool
            Whether a cached member may be returned without making a request.

        Returns
        -------
        kura.entities.Member
            The member.

        Raises
        ------
        asyncio.TimeoutError
            If the request timed out. The cache is left untouched.
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        key = (hikari.Snowflake(guild_id), hikari.Snowflake(user_id))
        route = routes.GET_GUILD_MEMBER.compile(guild=key[0], user=key[1])
        return await self._fetch(key, route, timeout=timeout, use_cache=use_cache, guild_id=key[0])


class MessageManager(Manager[hikari.Snowflake, entities.Message]):
    """Manager of the cached messages.

    Message payloads also populate the user manager with their author and the
    member manager with their author's member object where these are included.
    """

    __slots__: typing.Sequence[str] = ()

    def __init__(self, client: client_.Client, /, *, max_size: int = 0) -> None:
        super().__init__(client, entities.Message, max_size=max_size)

    def _nested(self, payload: _ObjectT, /) -> _NestedT:
        nested: _NestedT = []
        author = payload.get("author")
        if _is_complete(entities.User, author):
            nested.append((self._client.users, author))

        # Message create events carry a partial member without its user or guild ID.
        member = payload.get("member")
        if isinstance(member, collections.Mapping) and isinstance(author, collections.Mapping) and payload.get("guild_id"):
            member = {**member, "guild_id": payload["guild_id"], "user": author}
            if _is_complete(entities.Member, member):
                nested.append((self._client.members, member))

        for user in payload.get("mentions") or ():
            if _is_complete(entities.User, user):
                nested.append((self._client.users, user))

        return nested

    def iter_for_channel(self, channel_id: hikari.Snowflakeish, /) -> typing.Iterator[entities.Message]:
        """Iterate over the cached messages of a channel.

        Parameters
        ----------
        channel_id : hikari.snowflakes.Snowflakeish
            ID of the channel.

        Returns
        -------
        typing.Iterator[kura.entities.Message]
            Iterator of the channel's cached messages in insertion order.
        """
        channel_id = hikari.Snowflake(channel_id)
        return (message for message in self if message.channel_id == channel_id)

    async def fetch(
        self,
        channel_id: hikari.Snowflakeish,
        message_id: hikari.Snowflakeish,
        /,
        *,
        timeout: typing.Optional[float] = None,
        use_cache: bool = True,
    ) -> entities.Message:
        """Get a message from the cache or fetch it from the remote service.

        Parameters
        ----------
        channel_id : hikari.snowflakes.Snowflakeish
            ID of the channel the message is in.
        message_id : hikari.snowflakes.Snowflakeish
            ID of the message.

        Other Parameters
        ----------------
        timeout : typing.Optional[float]
            How many seconds to wait for the request before giving up.
        use_cache : bool
            Whether a cached message may be returned without making a request.

        Returns
        -------
        kura.entities.Message
            The message.

        Raises
        ------
        asyncio.TimeoutError
            If the request timed out. The cache is left untouched.
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        message_id = hikari.Snowflake(message_id)
        route = routes.GET_CHANNEL_MESSAGE.compile(channel=channel_id, message=message_id)
        return await self._fetch(message_id, route, timeout=timeout, use_cache=use_cache)
