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
"""The client which owns Kura's entity managers and keeps them in sync with gateway events."""

from __future__ import annotations

__all__: typing.Sequence[str] = ["DEFAULT_MESSAGE_CACHE_SIZE", "Client", "DeletePolicy", "ResourceIndex"]

import enum
import logging
import typing
from collections import abc as collections

import hikari

from . import abc
from . import errors
from . import managers
from . import rest
from . import utility

if typing.TYPE_CHECKING:
    import types

_ObjectT = typing.Mapping[str, typing.Any]
_ClientT = typing.TypeVar("_ClientT", bound="Client")

_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.kura")

DEFAULT_MESSAGE_CACHE_SIZE: typing.Final[int] = 1_000
"""The default amount of messages a client keeps cached."""


class ResourceIndex(enum.IntEnum):
    """An enum of the kinds of resource a client caches."""

    CHANNEL = 0
    GUILD = 1
    MEMBER = 2
    MESSAGE = 3
    USER = 4


class DeletePolicy(enum.Enum):
    """How a client treats cached entities once they've been deleted remotely."""

    REMOVE = "REMOVE"
    """Remove the entity from the cache as soon as its deletion is seen."""

    KEEP = "KEEP"
    """Leave the entity cached until it's evicted for capacity."""


class Client:
    """The owner of a set of entity managers.

    Parameters
    ----------
    transport : typing.Optional[kura.rest.RESTTransport]
        The transport entity operations and manager fetches make requests through.

        If this isn't provided then only the cache can be used.
    event_manager : typing.Optional[hikari.api.event_manager.EventManager]
        The event manager to bind this client to.

        If provided then this client will automatically ingest the raw events
        it handles while open.

    Other Parameters
    ----------------
    delete_policy : DeletePolicy
        How cached entities are treated once they've been deleted remotely.
    cache_sizes : typing.Optional[typing.Mapping[ResourceIndex, int]]
        Mapping of resources to the maximum amount of entities to keep for
        them (`0` for unbounded).

        By default messages are limited to `DEFAULT_MESSAGE_CACHE_SIZE` and
        everything else is unbounded.
    config : typing.Optional[typing.MutableMapping[str, typing.Any]]
        This client's initial settings.
    event_managed : bool
        Whether the client should be opened and closed based on the attached
        event_manager's lifetime events.
    fail_if_not_exists : typing.Optional[bool]
        Whether replies should fail if the message they reference was deleted.

    Raises
    ------
    ValueError
        If `event_managed` is `True` without an event manager.
    """

    __slots__: typing.Sequence[str] = (
        "__channels",
        "__config",
        "__delete_policy",
        "__event_manager",
        "__guilds",
        "__members",
        "__messages",
        "__raw_listeners",
        "__started",
        "__transport",
        "__users",
    )

    def __init__(
        self,
        transport: typing.Optional[rest.RESTTransport] = None,
        event_manager: typing.Optional[hikari.api.EventManager] = None,
        *,
        delete_policy: DeletePolicy,
        cache_sizes: typing.Optional[typing.Mapping[ResourceIndex, int]] = None,
        config: typing.Optional[typing.MutableMapping[str, typing.Any]] = None,
        event_managed: bool = False,
        fail_if_not_exists: typing.Optional[bool] = None,
    ) -> None:
        if not isinstance(delete_policy, DeletePolicy):
            raise TypeError(f"delete_policy must be a DeletePolicy, not {type(delete_policy).__name__}")

        self.__config = config if config is not None else {}
        self.__delete_policy = delete_policy
        self.__event_manager = event_manager
        self.__started = False
        self.__transport = transport
        self.__channels = managers.ChannelManager(self)
        self.__guilds = managers.GuildManager(self)
        self.__members = managers.MemberManager(self)
        self.__messages = managers.MessageManager(self, max_size=DEFAULT_MESSAGE_CACHE_SIZE)
        self.__users = managers.UserManager(self)
        self.__raw_listeners = utility.find_raw_listeners(self)

        for index, size in (cache_sizes or {}).items():
            self.with_cache_size(index, size)

        if fail_if_not_exists is not None:
            self.with_fail_if_not_exists(fail_if_not_exists)

        if event_manager:
            if event_managed:
                event_manager.subscribe(hikari.StartingEvent, self.__on_starting_event)
                event_manager.subscribe(hikari.StoppingEvent, self.__on_stopping_event)

        elif event_managed:
            raise ValueError("Client cannot be event_managed when not attached to an event manager.")

    @classmethod
    def from_app(
        cls: typing.Type[_ClientT],
        app: hikari.RESTAware,
        /,
        *,
        delete_policy: DeletePolicy,
        cache_sizes: typing.Optional[typing.Mapping[ResourceIndex, int]] = None,
        config: typing.Optional[typing.MutableMapping[str, typing.Any]] = None,
        event_managed: bool = False,
        fail_if_not_exists: typing.Optional[bool] = None,
    ) -> _ClientT:
        """Build a client which makes requests through and listens to a hikari app.

        Parameters
        ----------
        app : hikari.traits.RESTAware
            The hikari app to use.

            If this is also event manager aware (e.g. a `hikari.GatewayBot`)
            then its event manager is used to ingest raw events.

        Other Parameters
        ----------------
        delete_policy : DeletePolicy
            How cached entities are treated once they've been deleted remotely.
        cache_sizes : typing.Optional[typing.Mapping[ResourceIndex, int]]
            Mapping of resources to the maximum amount of entities to keep for them.
        config : typing.Optional[typing.MutableMapping[str, typing.Any]]
            The client's initial settings.
        event_managed : bool
            Whether the client should be opened and closed based on the app's
            lifetime events.
        fail_if_not_exists : typing.Optional[bool]
            Whether replies should fail if the message they reference was deleted.

        Returns
        -------
        Client
            The built client.
        """
        event_manager = app.event_manager if isinstance(app, hikari.EventManagerAware) else None
        return cls(
            rest.HikariTransport(app),
            event_manager,
            delete_policy=delete_policy,
            cache_sizes=cache_sizes,
            config=config,
            event_managed=event_managed,
            fail_if_not_exists=fail_if_not_exists,
        )

    async def __on_starting_event(self, _: hikari.StartingEvent, /) -> None:
        await self.open()

    async def __on_stopping_event(self, _: hikari.StoppingEvent, /) -> None:
        await self.close()

    async def __on_shard_payload_event(self, event: hikari.ShardPayloadEvent, /) -> None:
        self.consume(event.name, event.payload)

    async def __aenter__(self: _ClientT) -> _ClientT:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: typing.Optional[typing.Type[Exception]],
        exc_val: typing.Optional[Exception],
        exc_tb: typing.Optional[types.TracebackType],
    ) -> None:
        await self.close()

    if not typing.TYPE_CHECKING:

        def __enter__(self) -> typing.NoReturn:
            # This is async only.
            cls = type(self)
            raise TypeError(f"{cls.__module__}.{cls.__qualname__} is async-only, did you mean 'async with'?") from None

        def __exit__(
            self,
            exc_type: typing.Optional[typing.Type[Exception]],
            exc_val: typing.Optional[Exception],
            exc_tb: typing.Optional[types.TracebackType],
        ) -> None:
            return None

    @property
    def channels(self) -> managers.ChannelManager:
        """Manager of the cached channels and threads."""
        return self.__channels

    @property
    def config(self) -> typing.MutableMapping[str, typing.Any]:
        """This client's settings."""
        return self.__config

    @property
    def delete_policy(self) -> DeletePolicy:
        """How cached entities are treated once they've been deleted remotely."""
        return self.__delete_policy

    @property
    def event_manager(self) -> typing.Optional[hikari.api.EventManager]:
        """The event manager this client is ingesting raw events from."""
        return self.__event_manager

    @property
    def fail_if_not_exists(self) -> bool:
        """Whether replies should fail if the message they reference was deleted."""
        return bool(self.__config.get("fail_if_not_exists", False))

    @property
    def guilds(self) -> managers.GuildManager:
        """Manager of the cached guilds."""
        return self.__guilds

    @property
    def is_alive(self) -> bool:
        """Whether this client is open."""
        return self.__started

    @property
    def members(self) -> managers.MemberManager:
        """Manager of the cached guild members."""
        return self.__members

    @property
    def messages(self) -> managers.MessageManager:
        """Manager of the cached messages."""
        return self.__messages

    @property
    def transport(self) -> rest.RESTTransport:
        """The transport entity operations make requests through.

        Raises
        ------
        RuntimeError
            If this client was made without a transport.
        """
        if self.__transport is None:
            raise RuntimeError("This client has no REST transport to make requests through")

        return self.__transport

    @property
    def users(self) -> managers.UserManager:
        """Manager of the cached users."""
        return self.__users

    def get_manager(self, index: ResourceIndex, /) -> managers.Manager[typing.Any, typing.Any]:
        """Get the manager of a resource.

        Parameters
        ----------
        index : ResourceIndex
            The resource to get the manager for.

        Returns
        -------
        kura.managers.Manager
            The resource's manager.
        """
        if index is ResourceIndex.CHANNEL:
            return self.__channels

        if index is ResourceIndex.GUILD:
            return self.__guilds

        if index is ResourceIndex.MEMBER:
            return self.__members

        if index is ResourceIndex.MESSAGE:
            return self.__messages

        if index is ResourceIndex.USER:
            return self.__users

        raise ValueError(f"Unknown resource index {index!r}")

    def with_cache_size(self: _ClientT, index: ResourceIndex, size: int, /) -> _ClientT:
        """Set the maximum amount of entities to keep for a resource.

        Parameters
        ----------
        index : ResourceIndex
            The resource to limit.
        size : int
            The maximum amount of entities to keep (`0` for unbounded).

            Shrinking a limit evicts the oldest cached entities straight away.

        Returns
        -------
        Self
            The client to allow chaining.

        Raises
        ------
        ValueError
            If the size is negative.
        """
        self.get_manager(ResourceIndex(index)).max_size = size
        return self

    def with_fail_if_not_exists(self: _ClientT, value: bool, /) -> _ClientT:
        """Set whether replies should fail if the message they reference was deleted.

        Parameters
        ----------
        value : bool
            The setting's value.

        Returns
        -------
        Self
            The client to allow chaining.
        """
        self.__config["fail_if_not_exists"] = value
        return self

    def apply_delete_policy(
        self, manager: abc.EntityManager[typing.Any, abc.EntityT], key: typing.Any, /
    ) -> typing.Optional[abc.EntityT]:
        """Handle an entity having been deleted remotely according to this client's delete policy.

        Parameters
        ----------
        manager : kura.abc.EntityManager
            The manager which owns the entity.
        key : typing.Any
            The entity's identity key.

        Returns
        -------
        typing.Optional[kura.abc.Entity]
            The entity removed from the cache or `None` if nothing was removed.
        """
        if self.__delete_policy is DeletePolicy.REMOVE:
            return manager.remove(key)

        return None

    def consume(self, event_name: str, payload: _ObjectT, /) -> bool:
        """Ingest a raw gateway event.

        Parameters
        ----------
        event_name : str
            The event's name (e.g. `"MESSAGE_CREATE"`).
        payload : typing.Mapping[str, typing.Any]
            The event's raw payload.

        Returns
        -------
        bool
            Whether this client handles the event.

        Raises
        ------
        kura.errors.ClosedClient
            If this client isn't open.
        kura.errors.MalformedPayload
            If the payload was malformed. The cache is left untouched, even
            for events which carry several entities.
        """
        if not self.__started:
            raise errors.ClosedClient("Cannot consume events while the client is closed")

        if not isinstance(payload, collections.Mapping):
            raise errors.MalformedPayload(f"Expected a mapping {event_name} payload but got {type(payload).__name__}")

        if not (listeners := self.__raw_listeners.get(event_name.upper())):
            return False

        for listener in listeners:
            listener(payload)

        return True

    async def open(self) -> None:
        """Open this client.

        This is a no-op if the client is already open.
        """
        if self.__started:
            return

        if self.__event_manager:
            self.__event_manager.subscribe(hikari.ShardPayloadEvent, self.__on_shard_payload_event)

        self.__started = True
        _LOGGER.debug("opened kura client")

    async def close(self) -> None:
        """Close this client.

        This is a no-op if the client isn't open. Cached entities are kept.
        """
        was_started = self.__started
        self.__started = False

        if not was_started:
            return

        if self.__event_manager:
            try:
                self.__event_manager.unsubscribe(hikari.ShardPayloadEvent, self.__on_shard_payload_event)
            except LookupError:
                pass

        _LOGGER.debug("closed kura client")

    def clear(self) -> None:
        """Clear every manager's cache."""
        for index in ResourceIndex:
            self.get_manager(index).clear()

    def __remove_channel(self, channel_id: typing.Any, /) -> None:
        if (channel := self.apply_delete_policy(self.__channels, channel_id)) is not None:
            self.__messages.remove_where(lambda message: message.channel_id == channel.id)

    @utility.as_raw_listener("READY")
    def __on_ready(self, payload: _ObjectT, /) -> None:
        batch = managers.Batch().add(self.__users, payload.get("user"))  # type: ignore[arg-type]
        for guild in payload.get("guilds") or ():
            batch.add(self.__guilds, guild)

        batch.commit()

    @utility.as_raw_listener("GUILD_CREATE", "GUILD_UPDATE")
    def __on_guild_create_update(self, payload: _ObjectT, /) -> None:
        self.__guilds.upsert(payload)

    @utility.as_raw_listener("GUILD_DELETE")
    def __on_guild_delete(self, payload: _ObjectT, /) -> None:
        # An unavailable guild is an outage rather than the guild being left or deleted.
        if payload.get("unavailable"):
            self.__guilds.upsert(payload)
            return

        if (guild := self.apply_delete_policy(self.__guilds, payload.get("id"))) is None:
            return

        guild_id = guild.id
        channel_ids = {channel.id for channel in self.__channels.remove_where(lambda c: c.guild_id == guild_id)}
        self.__members.remove_where(lambda member: member.guild_id == guild_id)
        self.__messages.remove_where(
            lambda message: message.channel_id in channel_ids or message.guild_id == guild_id
        )

    @utility.as_raw_listener("CHANNEL_CREATE", "CHANNEL_UPDATE", "THREAD_CREATE", "THREAD_UPDATE")
    def __on_channel_create_update(self, payload: _ObjectT, /) -> None:
        self.__channels.upsert(payload)

    @utility.as_raw_listener("CHANNEL_DELETE", "THREAD_DELETE")
    def __on_channel_delete(self, payload: _ObjectT, /) -> None:
        self.__remove_channel(payload.get("id"))

    @utility.as_raw_listener("MESSAGE_CREATE")
    def __on_message_create(self, payload: _ObjectT, /) -> None:
        self.__messages.upsert(payload)

    @utility.as_raw_listener("MESSAGE_UPDATE")
    def __on_message_update(self, payload: _ObjectT, /) -> None:
        # Update events only carry the changed fields, so uncached messages can't be built from them.
        self.__messages.update(payload)

    @utility.as_raw_listener("MESSAGE_DELETE")
    def __on_message_delete(self, payload: _ObjectT, /) -> None:
        self.apply_delete_policy(self.__messages, payload.get("id"))

    @utility.as_raw_listener("MESSAGE_DELETE_BULK")
    def __on_message_delete_bulk(self, payload: _ObjectT, /) -> None:
        for message_id in payload.get("ids") or ():
            self.apply_delete_policy(self.__messages, message_id)

    @utility.as_raw_listener("GUILD_MEMBER_ADD", "GUILD_MEMBER_UPDATE")
    def __on_guild_member_add_update(self, payload: _ObjectT, /) -> None:
        self.__members.upsert(payload)

    @utility.as_raw_listener("GUILD_MEMBER_REMOVE")
    def __on_guild_member_remove(self, payload: _ObjectT, /) -> None:
        user = payload.get("user")
        user_id = user.get("id") if isinstance(user, collections.Mapping) else None
        self.apply_delete_policy(self.__members, (payload.get("guild_id"), user_id))

    @utility.as_raw_listener("GUILD_MEMBERS_CHUNK")
    def __on_guild_members_chunk(self, payload: _ObjectT, /) -> None:
        guild_id = payload.get("guild_id")
        self.__members.upsert_many(managers.with_guild_id(member, guild_id) for member in payload.get("members") or ())

    @utility.as_raw_listener("USER_UPDATE")
    def __on_user_update(self, payload: _ObjectT, /) -> None:
        self.__users.upsert(payload)
