"""Data models and event types for channels, tuners, aliases and audio."""

from trunkctrl.models.alias import Alias, AliasAction, AliasModel
from trunkctrl.models.audio import AudioPacket, AudioPacketKind
from trunkctrl.models.broadcast import BroadcastConfiguration, BroadcastModel, BroadcastStatus
from trunkctrl.models.channel import Channel, ChannelEvent, ChannelEventKind, ChannelModel
from trunkctrl.models.channel_map import ChannelMap, ChannelMapModel, ChannelRange
from trunkctrl.models.icon import IconManager
from trunkctrl.models.message import Message
from trunkctrl.models.model_event import ModelEvent, ModelEventKind
from trunkctrl.models.tuner import (
    Tuner,
    TunerConfiguration,
    TunerConfigurationModel,
    TunerEvent,
    TunerEventKind,
    TunerModel,
)

__all__ = [
    "Alias",
    "AliasAction",
    "AliasModel",
    "AudioPacket",
    "AudioPacketKind",
    "BroadcastConfiguration",
    "BroadcastModel",
    "BroadcastStatus",
    "Channel",
    "ChannelEvent",
    "ChannelEventKind",
    "ChannelMap",
    "ChannelMapModel",
    "ChannelModel",
    "ChannelRange",
    "IconManager",
    "Message",
    "ModelEvent",
    "ModelEventKind",
    "Tuner",
    "TunerConfiguration",
    "TunerConfigurationModel",
    "TunerEvent",
    "TunerEventKind",
    "TunerModel",
]
