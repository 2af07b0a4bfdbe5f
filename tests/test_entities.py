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
from unittest import mock

import hikari
import pytest
from hikari import urls

import kura
from kura import errors


def _user(user_id, username="someone", **kwargs):
    return {"id": str(user_id), "username": username, **kwargs}


def _message(message_id, channel_id=10, author_id=1, content="hello", **kwargs):
    return {
        "id": str(message_id),
        "channel_id": str(channel_id),
        "author": _user(author_id),
        "content": content,
        **kwargs,
    }


def _rejected(route_method="PATCH", path="/channels/10/messages/20"):
    return errors.RemoteRejected("Missing Permissions (50013)", route_method, path, status=403, code=50013)


def test_display_forms(client: kura.Client):
    channel = client.channels.upsert({"id": "10", "type": 0, "name": "general"})
    guild = client.guilds.upsert({"id": "99", "name": "A guild"})
    user = client.users.upsert(_user(1, username="someone", global_name="Some One"))
    member = client.members.upsert({"guild_id": "99", "user": _user(1), "nick": "nicky"})
    message = client.messages.upsert(_message(20, content="hi there"))

    assert str(channel) == "<#10>"
    assert str(guild) == "A guild"
    assert str(user) == "someone"
    assert str(member) == "nicky"
    assert str(message) == "hi there"


def test_entity_repr_and_payload(client: kura.Client):
    user = client.users.upsert(_user(1, bot=True))

    assert repr(user).startswith("User(key=")
    assert user.payload["bot"] is True
    assert user.is_bot is True
    with pytest.raises(TypeError):
        user.payload["bot"] = False  # type: ignore[index]


def test_entity_update_rejects_identity_mismatch(client: kura.Client):
    user = client.users.upsert(_user(1))

    with pytest.raises(errors.MalformedPayload):
        user.update({"id": "2", "username": "imposter"})

    assert user.username == "someone"


def test_member_update_rejects_identity_mismatch(client: kura.Client):
    member = client.members.upsert({"guild_id": "99", "user": _user(1)})

    with pytest.raises(errors.MalformedPayload):
        member.update({"guild_id": "98", "user": _user(1)})

    assert member.guild_id == 99


def test_message_resolves_channel_guild_and_author(client: kura.Client):
    guild = client.guilds.upsert({"id": "99", "name": "guild"})
    channel = client.channels.upsert({"id": "10", "type": 0, "guild_id": "99"})
    message = client.messages.upsert(_message(20, channel_id=10, author_id=1))

    assert message.channel is channel
    assert message.guild_id == 99
    assert message.guild is guild
    assert message.author is client.users.get(1)
    assert channel.messages == (message,)
    assert guild.channels == (channel,)


def test_message_resolvers_return_none_when_uncached(client: kura.Client):
    message = client.messages.upsert({"id": "20", "channel_id": "10", "author": {"id": "1"}})

    assert message.channel is None
    assert message.guild is None
    assert message.guild_id is None
    assert message.author is None
    assert message.member is None


def test_message_guild_falls_back_to_channel_guild(client: kura.Client):
    client.channels.upsert({"id": "10", "type": 0, "guild_id": "99"})
    message = client.messages.upsert(_message(20, channel_id=10))

    assert message.guild is None

    guild = client.guilds.upsert({"id": "99"})

    assert message.guild is guild


def test_resolution_is_live(client: kura.Client):
    message = client.messages.upsert(_message(20, channel_id=10))
    assert message.channel is None

    channel = client.channels.upsert({"id": "10", "type": 0})

    assert message.channel is channel


def test_message_mentioned_users(client: kura.Client):
    mentioned = client.users.upsert(_user(2))
    message = client.messages.upsert(_message(20, mentions=[{"id": "2"}, {"id": "3"}]))

    assert message.mention_ids == (2, 3)
    assert message.mentioned_users == (mentioned,)


def test_message_url(client: kura.Client):
    direct = client.messages.upsert(_message(20, channel_id=10))
    in_guild = client.messages.upsert(_message(21, channel_id=11, guild_id="99"))

    assert direct.url == f"{urls.BASE_URL}/channels/@me/10/20"
    assert in_guild.url == f"{urls.BASE_URL}/channels/99/11/21"


@pytest.mark.parametrize(("raw_type", "is_system"), [(0, False), (19, False), (20, False), (23, False), (7, True)])
def test_message_is_system(client: kura.Client, raw_type: int, is_system: bool):
    message = client.messages.upsert(_message(20, type=raw_type))

    assert message.is_system is is_system


def test_message_defaults(client: kura.Client):
    message = client.messages.upsert({"id": "20", "channel_id": "10", "author": {"id": "1"}, "content": None})

    assert message.content == ""
    assert message.embeds == ()
    assert message.flags == hikari.MessageFlag.NONE
    assert message.type == hikari.MessageType.DEFAULT
    assert message.is_pinned is False


def test_channel_unknown_type(client: kura.Client):
    channel = client.channels.upsert({"id": "10", "type": 9999})

    assert channel.type is kura.ChannelType.UNKNOWN
    assert channel.is_unknown()
    assert not channel.is_text()


def test_guild_owner_and_members(client: kura.Client):
    guild = client.guilds.upsert({"id": "99", "owner_id": "1"})
    assert guild.owner is None

    owner = client.members.upsert({"guild_id": "99", "user": _user(1)})

    assert guild.owner is owner
    assert guild.members == (owner,)
    assert owner.guild is guild


def test_member_display_name_falls_back_to_user(client: kura.Client):
    member = client.members.upsert({"guild_id": "99", "user": {"id": "1"}})
    assert member.display_name is None
    assert str(member) == "<@1>"

    client.users.upsert(_user(1, global_name="Global"))

    assert member.display_name == "Global"
    assert member.id == 1


def test_user_avatar_url(client: kura.Client):
    user = client.users.upsert(_user(1, avatar="a_hash"))
    static = client.users.upsert(_user(2, avatar="hash"))
    no_avatar = client.users.upsert(_user(3))

    assert user.avatar_url == f"{urls.CDN_URL}/avatars/1/a_hash.gif?size=4096"
    assert static.make_avatar_url(ext="webp", size=64) == f"{urls.CDN_URL}/avatars/2/hash.webp?size=64"
    assert no_avatar.avatar_url is None
    with pytest.raises(ValueError):
        static.make_avatar_url(size=100)


@pytest.mark.asyncio()
async def test_channel_send(client: kura.Client, transport: mock.AsyncMock):
    channel = client.channels.upsert({"id": "10", "type": 0})
    transport.request.return_value = _message(20, channel_id=10, content="sent")

    message = await channel.send("sent", embeds=[{"title": "embed"}])

    assert client.messages.get(20) is message
    route = transport.request.call_args.args[0]
    assert route.method == "POST"
    assert route.compiled_path == "/channels/10/messages"
    assert transport.request.call_args.kwargs["json"] == {"content": "sent", "embeds": [{"title": "embed"}]}


@pytest.mark.asyncio()
async def test_message_reply_adds_reference(client: kura.Client, transport: mock.AsyncMock):
    client.with_fail_if_not_exists(True)
    message = client.messages.upsert(_message(20, channel_id=10, guild_id="99"))
    transport.request.return_value = _message(21, channel_id=10, content="reply")

    reply = await message.reply("reply")

    assert reply.id == 21
    body = transport.request.call_args.kwargs["json"]
    assert body["message_reference"] == {
        "message_id": "20",
        "channel_id": "10",
        "guild_id": "99",
        "fail_if_not_exists": True,
    }


@pytest.mark.asyncio()
async def test_message_edit_reingests_result(client: kura.Client, transport: mock.AsyncMock):
    message = client.messages.upsert(_message(20, content="before"))
    transport.request.return_value = _message(20, content="after", edited_timestamp="2021-06-01T12:30:00.000000+00:00")

    result = await message.edit("after")

    assert result is message
    assert message.content == "after"
    assert message.edited_at is not None


@pytest.mark.asyncio()
async def test_rejected_edit_leaves_cache_unchanged(client: kura.Client, transport: mock.AsyncMock):
    message = client.messages.upsert(_message(20, content="before"))
    transport.request.side_effect = _rejected()

    with pytest.raises(errors.RemoteRejected) as exc_info:
        await message.edit("after")

    assert exc_info.value.status == 403
    assert message.content == "before"
    assert client.messages.get(20) is message


@pytest.mark.asyncio()
async def test_message_delete_removes_under_remove_policy(client: kura.Client, transport: mock.AsyncMock):
    message = client.messages.upsert(_message(20))
    transport.request.return_value = None

    await message.delete()

    assert client.messages.get(20) is None
    route = transport.request.call_args.args[0]
    assert route.method == "DELETE"
    assert route.compiled_path == "/channels/10/messages/20"


@pytest.mark.asyncio()
async def test_message_delete_keeps_under_keep_policy(keep_client: kura.Client, transport: mock.AsyncMock):
    message = keep_client.messages.upsert(_message(20))
    transport.request.return_value = None

    await message.delete()

    assert keep_client.messages.get(20) is message


@pytest.mark.asyncio()
async def test_rejected_delete_keeps_entity(client: kura.Client, transport: mock.AsyncMock):
    message = client.messages.upsert(_message(20))
    transport.request.side_effect = _rejected("DELETE")

    with pytest.raises(errors.RemoteRejected):
        await message.delete()

    assert client.messages.get(20) is message


@pytest.mark.asyncio()
async def test_message_reactions(client: kura.Client, transport: mock.AsyncMock):
    message = client.messages.upsert(_message(20, channel_id=10))
    transport.request.return_value = None

    await message.react("x")
    assert transport.request.call_args.args[0].compiled_path == "/channels/10/messages/20/reactions/x/@me"

    await message.remove_reaction("x")
    route = transport.request.call_args.args[0]
    assert route.method == "DELETE"
    assert route.compiled_path == "/channels/10/messages/20/reactions/x/@me"

    await message.react("<a:blob:123>")
    assert transport.request.call_args.args[0].compiled_path == "/channels/10/messages/20/reactions/blob%3A123/@me"

    await message.remove_reaction("x", user=5)
    assert transport.request.call_args.args[0].compiled_path == "/channels/10/messages/20/reactions/x/5"

    transport.request.return_value = [_user(5), _user(6)]
    users = await message.fetch_reactions("x")

    assert [user.id for user in users] == [5, 6]
    assert client.users.get(6) is users[1]


@pytest.mark.asyncio()
async def test_fetch_reactions_with_malformed_user_caches_nothing(client: kura.Client, transport: mock.AsyncMock):
    message = client.messages.upsert(_message(20))
    transport.request.return_value = [_user(5), {"id": "6"}]

    with pytest.raises(errors.MalformedPayload):
        await message.fetch_reactions("x")

    assert client.users.get(5) is None


@pytest.mark.asyncio()
async def test_channel_edit_and_delete(client: kura.Client, transport: mock.AsyncMock):
    channel = client.channels.upsert({"id": "10", "type": 0, "name": "general"})
    transport.request.return_value = {"id": "10", "type": 0, "name": "renamed"}

    assert await channel.edit(name="renamed", reason="tidy") is channel
    assert channel.name == "renamed"
    assert transport.request.call_args.kwargs == {"json": {"name": "renamed"}, "reason": "tidy"}

    await channel.delete()

    assert client.channels.get(10) is None


@pytest.mark.asyncio()
async def test_member_edit_and_kick(client: kura.Client, transport: mock.AsyncMock):
    member = client.members.upsert({"guild_id": "99", "user": _user(1)})
    transport.request.return_value = {"user": _user(1), "nick": "new nick", "roles": ["4"]}

    assert await member.edit(nick="new nick", roles=[4]) is member
    assert member.nick == "new nick"
    route = transport.request.call_args.args[0]
    assert route.compiled_path == "/guilds/99/members/1"
    assert transport.request.call_args.kwargs["json"] == {"nick": "new nick", "roles": ["4"]}

    transport.request.return_value = None
    await member.kick(reason="bye")

    assert client.members.get((99, 1)) is None


@pytest.mark.asyncio()
async def test_operations_without_transport_raise():
    client = kura.Client(delete_policy=kura.DeletePolicy.REMOVE)
    channel = client.channels.upsert({"id": "10", "type": 0})

    with pytest.raises(RuntimeError):
        await channel.send("hi")


@pytest.mark.asyncio()
async def test_guild_edit(client: kura.Client, transport: mock.AsyncMock):
    guild = client.guilds.upsert({"id": "99", "name": "before"})
    transport.request.return_value = {"id": "99", "name": "after"}

    assert await guild.edit(name="after") is guild
    assert guild.name == "after"
    route = transport.request.call_args.args[0]
    assert route.method == "PATCH"
    assert route.compiled_path == "/guilds/99"
