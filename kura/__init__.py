from __future__ import annotations

__all__: typing.Final[typing.Sequence[str]] = [
    "Channel",
    "ChannelType",
    "Client",
    "ClosedClient",
    "DeletePolicy",
    "Guild",
    "HikariTransport",
    "KuraException",
    "LimitedMap",
    "MalformedPayload",
    "Member",
    "Message",
    "RESTTransport",
    "RemoteRejected",
    "ResourceIndex",
    "User",
    "abc",
    "client",
    "entities",
    "errors",
    "managers",
    "rest",
]

import typing

from kura import abc
from kura import client
from kura import entities
from kura import errors
from kura import managers
from kura import rest
from kura.client import Client
from kura.client import DeletePolicy
from kura.client import ResourceIndex
from kura.entities import Channel
from kura.entities import ChannelType
from kura.entities import Guild
from kura.entities import Member
from kura.entities import Message
from kura.entities import User
from kura.errors import *
from kura.limited import LimitedMap
from kura.rest import HikariTransport
from kura.rest import RESTTransport
