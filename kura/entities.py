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
"""The concrete entity types Kura caches and the operations they expose."""

from __future__ import annotations

__all__: typing.Sequence[str] = [
    "Channel",
    "ChannelType",
    "Guild",
    "Member",
    "MemberKey",
    "Message",
    "User",
]

import enum
import logging
import typing
import urllib.parse
from collections import abc as collections

import hikari
from hikari import urls
from hikari.internal import routes

from . import abc
from . import errors
from . import fields

if typing.TYPE_CHECKING:
    import datetime

    from . import client as client_

_ObjectT = typing.Dict[str, typing.Any]
MemberKey = typing.Tuple[hikari.Snowflake, hikari.Snowflake]
"""Type hint of a member's identity key: `(guild_id, user_id)`."""

_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.kura")

_USER_MESSAGE_TYPES: typing.Final[typing.FrozenSet[int]] = frozenset(
    int(message_type)
    for message_type in (
        hikari.MessageType.DEFAULT,
        hikari.MessageType.REPLY,
        hikari.MessageType.CHAT_INPUT,
        hikari.MessageType.CONTEXT_MENU_COMMAND,
    )
)
_AVATAR_SIZES: typing.Final[typing.FrozenSet[int]] = frozenset(2**power for power in range(4, 13))


class ChannelType(enum.IntEnum):
    """The types of channel the remote service may send."""

    UNKNOWN = -1
    GUILD_TEXT = 0
    DM = 1
    GUILD_VOICE = 2
    GROUP_DM = 3
    GUILD_CATEGORY = 4
    GUILD_NEWS = 5
    GUILD_NEWS_THREAD = 10
    GUILD_PUBLIC_THREAD = 11
    GUILD_PRIVATE_THREAD = 12
    GUILD_STAGE = 13
    GUILD_DIRECTORY = 14
    GUILD_FORUM = 15
    GUILD_MEDIA = 16

    @classmethod
    def _missing_(cls, value: object) -> ChannelType:
        _LOGGER.warning("unknown channel type %r found, treating as UNKNOWN", value)
        return cls.UNKNOWN


def _undefined_body(**kwargs: typing.Any) -> _ObjectT:
    return {key: value for key, value in kwargs.items() if value is not hikari.UNDEFINED}


def _build_message_body(
    content: hikari.UndefinedNoneOr[str],
    *,
    embeds: hikari.UndefinedNoneOr[typing.Sequence[typing.Mapping[str, typing.Any]]],
    components: hikari.UndefinedNoneOr[typing.Sequence[typing.Mapping[str, typing.Any]]],
    tts: hikari.UndefinedOr[bool] = hikari.UNDEFINED,
    message_reference: hikari.UndefinedOr[typing.Mapping[str, typing.Any]] = hikari.UNDEFINED,
) -> _ObjectT:
    body = _undefined_body(content=content, tts=tts, message_reference=message_reference)
    # Embeds and components are opaque here; they're passed through as already built payloads.
    if embeds is not hikari.UNDEFINED:
        body["embeds"] = list(embeds) if embeds is not None else []

    if components is not hikari.UNDEFINED:
        body["components"] = list(components) if components is not None else []

    return body


def _format_emoji(emoji: str, /) -> str:
    if not emoji:
        raise ValueError("emoji cannot be empty")

    # Custom emoji mentions (`<:name:id>` or `<a:name:id>`) are sent as `name:id`.
    if emoji.startswith("<") and emoji.endswith(">"):
        emoji = emoji[1:-1].removeprefix("a").lstrip(":")

    return urllib.parse.quote(emoji)


async def _create_message(client: client_.Client, channel_id: hikari.Snowflake, body: _ObjectT, /) -> Message:
    route = routes.POST_CHANNEL_MESSAGES.compile(channel=channel_id)
    payload = await client.transport.request(route, json=body)
    return client.messages.upsert(payload)


class Channel(abc.Entity[hikari.Snowflake]):
    """A channel on the remote service.

    Channels render as their mention (e.g. `<#1234>`) when converted to a string.
    """

    __slots__: typing.Sequence[str] = ()

    FIELDS = fields.FieldTable(
        "channel",
        fields.Field("id", cast=fields.cast_snowflake, required=True),
        fields.Field("type", cast=ChannelType, required=True),
        fields.Field("name", cast=str),
        fields.Field("guild_id", cast=fields.cast_snowflake),
        fields.Field("position", cast=int),
        fields.Field("topic", cast=str),
        fields.Field("nsfw", cast=bool, default=False),
        fields.Field("parent_id", cast=fields.cast_snowflake),
        fields.Field("last_message_id", cast=fields.cast_snowflake),
    )

    def __str__(self) -> str:
        return self.mention

    @property
    def guild(self) -> typing.Optional[Guild]:
        """The cached guild this channel belongs to, if any."""
        if (guild_id := self.guild_id) is None:
            return None

        return self._client.guilds.get(guild_id)

    @property
    def guild_id(self) -> typing.Optional[hikari.Snowflake]:
        """ID of the guild this channel belongs to, if it's a guild channel."""
        return self._data["guild_id"]

    @property
    def is_nsfw(self) -> bool:
        """Whether this channel is marked as NSFW."""
        return self._data["nsfw"]

    @property
    def last_message_id(self) -> typing.Optional[hikari.Snowflake]:
        return self._data["last_message_id"]

    @property
    def mention(self) -> str:
        """The mention string of this channel."""
        return f"<#{self.id}>"

    @property
    def messages(self) -> typing.Sequence[Message]:
        """The messages cached for this channel, oldest first."""
        return tuple(self._client.messages.iter_for_channel(self.id))

    @property
    def name(self) -> typing.Optional[str]:
        """This channel's name, if it has one."""
        return self._data["name"]

    @property
    def parent_id(self) -> typing.Optional[hikari.Snowflake]:
        """ID of this channel's parent category or thread parent, if any."""
        return self._data["parent_id"]

    @property
    def position(self) -> typing.Optional[int]:
        return self._data["position"]

    @property
    def topic(self) -> typing.Optional[str]:
        return self._data["topic"]

    @property
    def type(self) -> ChannelType:
        """This channel's type."""
        return self._data["type"]

    def is_text(self) -> bool:
        """Whether this is a guild text channel."""
        return self.type is ChannelType.GUILD_TEXT

    def is_unknown(self) -> bool:
        """Whether this channel is of a type Kura doesn't know about."""
        return self.type is ChannelType.UNKNOWN

    async def send(
        self,
        content: hikari.UndefinedNoneOr[str] = hikari.UNDEFINED,
        *,
        embeds: hikari.UndefinedNoneOr[typing.Sequence[typing.Mapping[str, typing.Any]]] = hikari.UNDEFINED,
        components: hikari.UndefinedNoneOr[typing.Sequence[typing.Mapping[str, typing.Any]]] = hikari.UNDEFINED,
        tts: hikari.UndefinedOr[bool] = hikari.UNDEFINED,
    ) -> Message:
        """Send a message to this channel.

        Parameters
        ----------
        content : hikari.undefined.UndefinedNoneOr[str]
            The message's text content.

        Other Parameters
        ----------------
        embeds : hikari.undefined.UndefinedNoneOr[typing.Sequence[typing.Mapping[str, typing.Any]]]
            Already built embed payloads to send.
        components : hikari.undefined.UndefinedNoneOr[typing.Sequence[typing.Mapping[str, typing.Any]]]
            Already built component payloads to send.
        tts : hikari.undefined.UndefinedOr[bool]
            Whether the message should be sent as text to speech.

        Returns
        -------
        Message
            The created message, as cached by the client's message manager.

        Raises
        ------
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        body = _build_message_body(content, embeds=embeds, components=components, tts=tts)
        return await _create_message(self._client, self.id, body)

    async def edit(
        self,
        *,
        name: hikari.UndefinedOr[str] = hikari.UNDEFINED,
        position: hikari.UndefinedOr[int] = hikari.UNDEFINED,
        topic: hikari.UndefinedNoneOr[str] = hikari.UNDEFINED,
        nsfw: hikari.UndefinedOr[bool] = hikari.UNDEFINED,
        parent_id: hikari.UndefinedNoneOr[hikari.Snowflakeish] = hikari.UNDEFINED,
        reason: typing.Optional[str] = None,
    ) -> Channel:
        """Edit this channel.

        The cached channel is only changed once the remote service has
        returned the edited channel.

        Returns
        -------
        Channel
            This channel, updated with the returned payload.

        Raises
        ------
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        body = _undefined_body(name=name, position=position, topic=topic, nsfw=nsfw, parent_id=parent_id)
        if isinstance(parent_id, int):
            body["parent_id"] = str(parent_id)

        route = routes.PATCH_CHANNEL.compile(channel=self.id)
        payload = await self._client.transport.request(route, json=body, reason=reason)
        return self._client.channels.upsert(payload)

    async def delete(self, reason: typing.Optional[str] = None) -> Channel:
        """Delete this channel.

        Whether this channel is also removed from the cache is decided by the
        client's `kura.client.DeletePolicy`.

        Parameters
        ----------
        reason : typing.Optional[str]
            The audit log reason for the deletion.

        Returns
        -------
        Channel
            This channel.

        Raises
        ------
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        route = routes.DELETE_CHANNEL.compile(channel=self.id)
        await self._client.transport.request(route, reason=reason)
        self._client.apply_delete_policy(self._client.channels, self.id)

        return self


class Guild(abc.Entity[hikari.Snowflake]):
    """A guild on the remote service; renders as its name."""

    __slots__: typing.Sequence[str] = ()

    FIELDS = fields.FieldTable(
        "guild",
        fields.Field("id", cast=fields.cast_snowflake, required=True),
        fields.Field("name", cast=str),
        fields.Field("icon", cast=str),
        fields.Field("owner_id", cast=fields.cast_snowflake),
        fields.Field("unavailable", cast=bool, default=False),
        fields.Field("member_count", cast=int),
    )

    def __str__(self) -> str:
        return self.name or ""

    @property
    def channels(self) -> typing.Sequence[Channel]:
        """The channels cached for this guild."""
        return tuple(self._client.channels.iter_for_guild(self.id))

    @property
    def icon_hash(self) -> typing.Optional[str]:
        return self._data["icon"]

    @property
    def is_unavailable(self) -> bool:
        """Whether this guild is currently unavailable due to an outage."""
        return self._data["unavailable"]

    @property
    def member_count(self) -> typing.Optional[int]:
        return self._data["member_count"]

    @property
    def members(self) -> typing.Sequence[Member]:
        """The members cached for this guild."""
        return tuple(self._client.members.iter_for_guild(self.id))

    @property
    def name(self) -> typing.Optional[str]:
        """This guild's name (this won't be known for unavailable guilds)."""
        return self._data["name"]

    @property
    def owner(self) -> typing.Optional[Member]:
        """The cached member object of this guild's owner, if any."""
        if (owner_id := self.owner_id) is None:
            return None

        return self._client.members.get((self.id, owner_id))

    @property
    def owner_id(self) -> typing.Optional[hikari.Snowflake]:
        return self._data["owner_id"]

    async def edit(self, *, name: hikari.UndefinedOr[str] = hikari.UNDEFINED, reason: typing.Optional[str] = None) -> Guild:
        """Edit this guild.

        Returns
        -------
        Guild
            This guild, updated with the returned payload.

        Raises
        ------
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        route = routes.PATCH_GUILD.compile(guild=self.id)
        payload = await self._client.transport.request(route, json=_undefined_body(name=name), reason=reason)
        return self._client.guilds.upsert(payload)


class User(abc.Entity[hikari.Snowflake]):
    """A user on the remote service; renders as their username."""

    __slots__: typing.Sequence[str] = ()

    FIELDS = fields.FieldTable(
        "user",
        fields.Field("id", cast=fields.cast_snowflake, required=True),
        fields.Field("username", cast=str, required=True),
        fields.Field("discriminator", cast=str),
        fields.Field("global_name", cast=str),
        fields.Field("avatar", name="avatar_hash", cast=str),
        fields.Field("bot", name="is_bot", cast=bool, default=False),
        fields.Field("system", name="is_system", cast=bool, default=False),
    )

    def __str__(self) -> str:
        discriminator = self.discriminator
        if discriminator and discriminator != "0":
            return f"{self.username}#{discriminator}"

        return self.username

    @property
    def avatar_hash(self) -> typing.Optional[str]:
        return self._data["avatar_hash"]

    @property
    def avatar_url(self) -> typing.Optional[str]:
        """URL of this user's avatar, if they have one set."""
        return self.make_avatar_url()

    @property
    def discriminator(self) -> typing.Optional[str]:
        return self._data["discriminator"]

    @property
    def display_name(self) -> str:
        """This user's global display name, falling back to their username."""
        return self._data["global_name"] or self.username

    @property
    def global_name(self) -> typing.Optional[str]:
        return self._data["global_name"]

    @property
    def is_bot(self) -> bool:
        return self._data["is_bot"]

    @property
    def is_system(self) -> bool:
        return self._data["is_system"]

    @property
    def mention(self) -> str:
        """The mention string of this user."""
        return f"<@{self.id}>"

    @property
    def username(self) -> str:
        return self._data["username"]

    def make_avatar_url(self, *, ext: typing.Optional[str] = None, size: int = 4096) -> typing.Optional[str]:
        """Generate the URL of this user's avatar.

        Parameters
        ----------
        ext : typing.Optional[str]
            The file extension to request.

            Defaults to `gif` for animated avatars and `png` otherwise.
        size : int
            The image size to request; a power of two between 16 and 4096.

        Returns
        -------
        typing.Optional[str]
            The avatar URL or `None` if this user has no avatar set.

        Raises
        ------
        ValueError
            If `size` isn't a power of two between 16 and 4096.
        """
        if size not in _AVATAR_SIZES:
            raise ValueError("size must be a power of two between 16 and 4096")

        if (avatar_hash := self.avatar_hash) is None:
            return None

        if ext is None:
            ext = "gif" if avatar_hash.startswith("a_") else "png"

        return f"{urls.CDN_URL}/avatars/{self.id}/{avatar_hash}.{ext}?size={size}"


def _get_member_key(payload: typing.Mapping[str, typing.Any], /) -> MemberKey:
    try:
        return (fields.cast_snowflake(payload["guild_id"]), fields.cast_nested_id(payload["user"]))

    except KeyError as exc:
        raise errors.MalformedPayload(
            f"member payload is missing its {exc.args[0]!r} identity field", field=str(exc.args[0])
        ) from None

    except (TypeError, ValueError) as exc:
        raise errors.MalformedPayload("Invalid member identity", exception=exc) from exc


class Member(abc.Entity[MemberKey]):
    """A user's membership of a guild.

    Members are keyed by `(guild_id, user_id)` as one user has a separate
    member record in every guild they're in. `Member.id` is the user's ID.
    """

    __slots__: typing.Sequence[str] = ()

    FIELDS = fields.FieldTable(
        "member",
        fields.Field("guild_id", cast=fields.cast_snowflake, required=True),
        fields.Field("user", name="user_id", cast=fields.cast_nested_id, required=True),
        fields.Field("nick", cast=str),
        fields.Field("avatar", name="avatar_hash", cast=str),
        fields.Field("roles", name="role_ids", cast=fields.cast_sequence(fields.cast_snowflake), default=()),
        fields.Field("joined_at", cast=fields.cast_timestamp),
        fields.Field("pending", name="is_pending", cast=bool, default=False),
        fields.Field("deaf", name="is_deaf", cast=bool, default=False),
        fields.Field("mute", name="is_mute", cast=bool, default=False),
    )
    IDENTITY_FIELDS = ("guild_id", "user")

    def __str__(self) -> str:
        return self.display_name or self.mention

    @classmethod
    def key_from_payload(cls, payload: typing.Mapping[str, typing.Any], /) -> MemberKey:
        # <<Inherited docstring from kura.abc.Entity>>
        if not isinstance(payload, collections.Mapping):
            raise errors.MalformedPayload(f"Expected a mapping member payload but got {type(payload).__name__}")

        return _get_member_key(payload)

    @property
    def display_name(self) -> typing.Optional[str]:
        """This member's nickname, falling back to their cached user's display name."""
        if nick := self.nick:
            return nick

        if user := self.user:
            return user.display_name

        return None

    @property
    def guild(self) -> typing.Optional[Guild]:
        """The cached guild this member belongs to, if any."""
        return self._client.guilds.get(self.guild_id)

    @property
    def guild_id(self) -> hikari.Snowflake:
        return self._data["guild_id"]

    @property
    def id(self) -> hikari.Snowflake:
        # <<Inherited docstring from kura.abc.Entity>>
        return self.user_id

    @property
    def is_deaf(self) -> bool:
        return self._data["is_deaf"]

    @property
    def is_mute(self) -> bool:
        return self._data["is_mute"]

    @property
    def is_pending(self) -> bool:
        return self._data["is_pending"]

    @property
    def joined_at(self) -> typing.Optional[datetime.datetime]:
        return self._data["joined_at"]

    @property
    def key(self) -> MemberKey:
        # <<Inherited docstring from kura.abc.Entity>>
        return (self.guild_id, self.user_id)

    @property
    def mention(self) -> str:
        """The mention string of this member."""
        return f"<@{self.user_id}>"

    @property
    def nick(self) -> typing.Optional[str]:
        return self._data["nick"]

    @property
    def role_ids(self) -> typing.Sequence[hikari.Snowflake]:
        return self._data["role_ids"] or ()

    @property
    def user(self) -> typing.Optional[User]:
        """The cached user object of this member, if any."""
        return self._client.users.get(self.user_id)

    @property
    def user_id(self) -> hikari.Snowflake:
        return self._data["user_id"]

    async def edit(
        self,
        *,
        nick: hikari.UndefinedNoneOr[str] = hikari.UNDEFINED,
        roles: hikari.UndefinedOr[typing.Iterable[hikari.Snowflakeish]] = hikari.UNDEFINED,
        mute: hikari.UndefinedOr[bool] = hikari.UNDEFINED,
        deaf: hikari.UndefinedOr[bool] = hikari.UNDEFINED,
        reason: typing.Optional[str] = None,
    ) -> Member:
        """Edit this member.

        Returns
        -------
        Member
            This member, updated with the returned payload.

        Raises
        ------
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        body = _undefined_body(nick=nick, mute=mute, deaf=deaf)
        if roles is not hikari.UNDEFINED:
            body["roles"] = [str(role) for role in roles]

        route = routes.PATCH_GUILD_MEMBER.compile(guild=self.guild_id, user=self.user_id)
        payload = await self._client.transport.request(route, json=body, reason=reason)
        return self._client.members.upsert(payload, guild_id=self.guild_id)

    async def kick(self, reason: typing.Optional[str] = None) -> None:
        """Kick this member from their guild.

        Whether this member is also removed from the cache is decided by the
        client's `kura.client.DeletePolicy`.

        Raises
        ------
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        route = routes.DELETE_GUILD_MEMBER.compile(guild=self.guild_id, user=self.user_id)
        await self._client.transport.request(route, reason=reason)
        self._client.apply_delete_policy(self._client.members, self.key)


class Message(abc.Entity[hikari.Snowflake]):
    """A message on the remote service; renders as its text content."""

    __slots__: typing.Sequence[str] = ()

    FIELDS = fields.FieldTable(
        "message",
        fields.Field("id", cast=fields.cast_snowflake, required=True),
        fields.Field("channel_id", cast=fields.cast_snowflake, required=True),
        fields.Field("author", name="author_id", cast=fields.cast_nested_id, required=True),
        fields.Field("guild_id", cast=fields.cast_snowflake),
        fields.Field("content", cast=str, default=""),
        fields.Field("timestamp", cast=fields.cast_timestamp),
        fields.Field("edited_timestamp", name="edited_at", cast=fields.cast_timestamp),
        fields.Field("tts", name="is_tts", cast=bool, default=False),
        fields.Field("pinned", name="is_pinned", cast=bool, default=False),
        fields.Field("nonce"),
        fields.Field("type", name="raw_type", cast=int, default=0),
        fields.Field("flags", cast=hikari.MessageFlag, default=hikari.MessageFlag.NONE),
        fields.Field("embeds", cast=tuple, default=()),
        fields.Field("components", cast=tuple, default=()),
        fields.Field("mentions", name="mention_ids", cast=fields.cast_sequence(fields.cast_nested_id), default=()),
        fields.Field("webhook_id", cast=fields.cast_snowflake),
        fields.Field("application_id", cast=fields.cast_snowflake),
        fields.Field("message_reference"),
    )

    def __str__(self) -> str:
        return self.content

    @property
    def application_id(self) -> typing.Optional[hikari.Snowflake]:
        """ID of the application this message was sent through, if any."""
        return self._data["application_id"]

    @property
    def author(self) -> typing.Optional[User]:
        """The cached user object of this message's author, if any."""
        return self._client.users.get(self.author_id)

    @property
    def author_id(self) -> hikari.Snowflake:
        return self._data["author_id"]

    @property
    def channel(self) -> typing.Optional[Channel]:
        """The cached channel this message was sent in, if any."""
        return self._client.channels.get(self.channel_id)

    @property
    def channel_id(self) -> hikari.Snowflake:
        return self._data["channel_id"]

    @property
    def components(self) -> typing.Sequence[typing.Mapping[str, typing.Any]]:
        """This message's raw component payloads."""
        return self._data["components"] or ()

    @property
    def content(self) -> str:
        """This message's text content (an empty string if it has none)."""
        return self._data["content"] or ""

    @property
    def edited_at(self) -> typing.Optional[datetime.datetime]:
        return self._data["edited_at"]

    @property
    def embeds(self) -> typing.Sequence[typing.Mapping[str, typing.Any]]:
        """This message's raw embed payloads."""
        return self._data["embeds"] or ()

    @property
    def flags(self) -> hikari.MessageFlag:
        return self._data["flags"] or hikari.MessageFlag.NONE

    @property
    def guild(self) -> typing.Optional[Guild]:
        """The cached guild this message was sent in, if any.

        This falls back to the guild of the message's cached channel.
        """
        if (guild_id := self.guild_id) is None:
            return None

        if guild := self._client.guilds.get(guild_id):
            return guild

        return channel.guild if (channel := self.channel) else None

    @property
    def guild_id(self) -> typing.Optional[hikari.Snowflake]:
        """ID of the guild this message was sent in, if known.

        This falls back to the guild ID of the message's cached channel when
        the message payload didn't include one.
        """
        if (guild_id := self._data["guild_id"]) is not None:
            return guild_id

        return channel.guild_id if (channel := self.channel) else None

    @property
    def is_pinned(self) -> bool:
        return self._data["is_pinned"]

    @property
    def is_system(self) -> bool:
        """Whether this is a system message rather than one sent by a user or application command."""
        return self.raw_type not in _USER_MESSAGE_TYPES

    @property
    def is_tts(self) -> bool:
        return self._data["is_tts"]

    @property
    def member(self) -> typing.Optional[Member]:
        """The cached member object of this message's author, if any."""
        if (guild_id := self.guild_id) is None:
            return None

        return self._client.members.get((guild_id, self.author_id))

    @property
    def mention_ids(self) -> typing.Sequence[hikari.Snowflake]:
        """IDs of the users mentioned in this message."""
        return self._data["mention_ids"] or ()

    @property
    def mentioned_users(self) -> typing.Sequence[User]:
        """The cached users mentioned in this message."""
        users = self._client.users
        return tuple(user for user_id in self.mention_ids if (user := users.get(user_id)))

    @property
    def message_reference(self) -> typing.Optional[typing.Mapping[str, typing.Any]]:
        """The raw reference data of the message this one replies to or crossposts, if any."""
        return self._data["message_reference"]

    @property
    def nonce(self) -> typing.Union[str, int, None]:
        return self._data["nonce"]

    @property
    def raw_type(self) -> int:
        """This message's type as the raw integer sent by the remote service."""
        return self._data["raw_type"]

    @property
    def timestamp(self) -> typing.Optional[datetime.datetime]:
        return self._data["timestamp"]

    @property
    def type(self) -> typing.Union[hikari.MessageType, int]:
        """This message's type."""
        return hikari.MessageType(self.raw_type)

    @property
    def url(self) -> str:
        """The jump link to this message."""
        guild_id = self.guild_id
        return f"{urls.BASE_URL}/channels/{guild_id if guild_id is not None else '@me'}/{self.channel_id}/{self.id}"

    @property
    def webhook_id(self) -> typing.Optional[hikari.Snowflake]:
        return self._data["webhook_id"]

    async def reply(
        self,
        content: hikari.UndefinedNoneOr[str] = hikari.UNDEFINED,
        *,
        embeds: hikari.UndefinedNoneOr[typing.Sequence[typing.Mapping[str, typing.Any]]] = hikari.UNDEFINED,
        components: hikari.UndefinedNoneOr[typing.Sequence[typing.Mapping[str, typing.Any]]] = hikari.UNDEFINED,
        tts: hikari.UndefinedOr[bool] = hikari.UNDEFINED,
        fail_if_not_exists: hikari.UndefinedOr[bool] = hikari.UNDEFINED,
    ) -> Message:
        """Reply to this message.

        Other Parameters
        ----------------
        fail_if_not_exists : hikari.undefined.UndefinedOr[bool]
            Whether the reply should fail if this message was deleted in the
            meantime.

            Defaults to the client's `fail_if_not_exists` setting.

        Returns
        -------
        Message
            The created reply, as cached by the client's message manager.

        Raises
        ------
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        if fail_if_not_exists is hikari.UNDEFINED:
            fail_if_not_exists = self._client.fail_if_not_exists

        reference: _ObjectT = {
            "message_id": str(self.id),
            "channel_id": str(self.channel_id),
            "fail_if_not_exists": fail_if_not_exists,
        }
        if (guild_id := self.guild_id) is not None:
            reference["guild_id"] = str(guild_id)

        body = _build_message_body(
            content, embeds=embeds, components=components, tts=tts, message_reference=reference
        )
        return await _create_message(self._client, self.channel_id, body)

    async def edit(
        self,
        content: hikari.UndefinedNoneOr[str] = hikari.UNDEFINED,
        *,
        embeds: hikari.UndefinedNoneOr[typing.Sequence[typing.Mapping[str, typing.Any]]] = hikari.UNDEFINED,
        components: hikari.UndefinedNoneOr[typing.Sequence[typing.Mapping[str, typing.Any]]] = hikari.UNDEFINED,
    ) -> Message:
        """Edit this message.

        The cached message is only changed once the remote service has
        returned the edited message.

        Returns
        -------
        Message
            This message, updated with the returned payload.

        Raises
        ------
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        body = _build_message_body(content, embeds=embeds, components=components)
        route = routes.PATCH_CHANNEL_MESSAGE.compile(channel=self.channel_id, message=self.id)
        payload = await self._client.transport.request(route, json=body)
        return self._client.messages.upsert(payload)

    async def delete(self, reason: typing.Optional[str] = None) -> None:
        """Delete this message.

        Whether this message is also removed from the cache is decided by the
        client's `kura.client.DeletePolicy`.

        Raises
        ------
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        route = routes.DELETE_CHANNEL_MESSAGE.compile(channel=self.channel_id, message=self.id)
        await self._client.transport.request(route, reason=reason)
        self._client.apply_delete_policy(self._client.messages, self.id)

    async def react(self, emoji: str, /) -> None:
        """Add a reaction to this message as the current user.

        Parameters
        ----------
        emoji : str
            The unicode emoji or `name:id` of the custom emoji to react with.

        Raises
        ------
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        route = routes.PUT_MY_REACTION.compile(channel=self.channel_id, message=self.id, emoji=_format_emoji(emoji))
        await self._client.transport.request(route)

    async def remove_reaction(self, emoji: str, /, user: typing.Optional[hikari.Snowflakeish] = None) -> None:
        """Remove a reaction from this message.

        Parameters
        ----------
        emoji : str
            The unicode emoji or `name:id` of the custom emoji to remove.
        user : typing.Optional[hikari.snowflakes.Snowflakeish]
            ID of the user whose reaction should be removed.

            Defaults to the current user.

        Raises
        ------
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        if user is None:
            route = routes.DELETE_MY_REACTION.compile(
                channel=self.channel_id, message=self.id, emoji=_format_emoji(emoji)
            )

        else:
            route = routes.DELETE_REACTION_USER.compile(
                channel=self.channel_id, message=self.id, emoji=_format_emoji(emoji), user=int(user)
            )

        await self._client.transport.request(route)

    async def fetch_reactions(self, emoji: str, /) -> typing.Sequence[User]:
        """Fetch the users who reacted to this message with an emoji.

        Parameters
        ----------
        emoji : str
            The unicode emoji or `name:id` of the custom emoji.

        Returns
        -------
        typing.Sequence[User]
            The users who reacted, as cached by the client's user manager.

        Raises
        ------
        kura.errors.RemoteRejected
            If the remote service rejected the request.
        """
        route = routes.GET_REACTIONS.compile(channel=self.channel_id, message=self.id, emoji=_format_emoji(emoji))
        payload = await self._client.transport.request(route)
        return self._client.users.upsert_many(payload or ())
