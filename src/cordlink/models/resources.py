"""
REST resource models — guilds, channels and messages.

Only the fields the client reads are required; everything else is optional
so partial objects from the API still validate.
"""

from typing import Optional, Union
from pydantic import BaseModel, Field


class Guild(BaseModel):
    id: str
    name: str
    icon: Optional[str] = None
    owner: bool = False
    permissions: Optional[str] = None
    features: list[str] = []


class PermissionOverwrite(BaseModel):
    id: str
    type: Union[int, str]
    allow: str = "0"
    deny: str = "0"


class Channel(BaseModel):
    id: str
    type: int
    name: Optional[str] = None
    guild_id: Optional[str] = None
    parent_id: Optional[str] = None
    position: Optional[int] = None
    topic: Optional[str] = None
    nsfw: Optional[bool] = None
    flags: Optional[int] = None
    rate_limit_per_user: Optional[int] = None
    permission_overwrites: list[PermissionOverwrite] = []


class MessageAuthor(BaseModel):
    id: str
    username: str
    discriminator: Optional[str] = None
    avatar: Optional[str] = None
    public_flags: Optional[int] = None


class MessageAttachment(BaseModel):
    id: str
    filename: str
    size: int
    url: str
    proxy_url: Optional[str] = None
    content_type: Optional[str] = None
    height: Optional[int] = None
    width: Optional[int] = None


class MessageEmoji(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    animated: Optional[bool] = None


class MessageReaction(BaseModel):
    count: int
    me: bool
    emoji: MessageEmoji


class MessageEmbed(BaseModel):
    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    timestamp: Optional[str] = None
    color: Optional[int] = None


class Message(BaseModel):
    id: str
    channel_id: str
    content: str = ""
    author: MessageAuthor
    timestamp: str
    edited_timestamp: Optional[str] = None
    tts: bool = False
    pinned: bool = False
    mention_everyone: bool = False
    mention_roles: list[str] = []
    mentions: list[MessageAuthor] = []
    attachments: list[MessageAttachment] = []
    embeds: list[MessageEmbed] = []
    reactions: Optional[list[MessageReaction]] = None
    flags: Optional[int] = None
    message_type: int = Field(default=0, alias="type")

    model_config = {"populate_by_name": True}
