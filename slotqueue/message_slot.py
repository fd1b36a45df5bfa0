"""An in-memory message slot device: per-minor slots holding numbered channels.

Each open file is bound to one channel through :meth:`SlotFile.ioctl`.
Writes replace the channel's single stored message. Reads return that
message whole and leave it in place. Failures raise :class:`OSError`
with the errno the device reports.
"""

from __future__ import annotations

import errno
from dataclasses import dataclass, field

MAJOR_NUMBER = 235
BUFF_SIZE = 128
SUCCESS = 0
MAX_MESSAGE_SLOT_AMOUNT = 256
DEVICE_RANGE_NAME = "message_slot_manager"
DEVICE_FILE_NAME = "message_slot"

_IOC_WRITE = 1
_SIZEOF_UNSIGNED_LONG = 8
_UINT_MASK = 0xFFFFFFFF


def _iow(type_: int, nr: int, size: int) -> int:
    """Encode an ioctl request number the way the ``_IOW`` macro does."""
    return (_IOC_WRITE << 30) | (size << 16) | (type_ << 8) | nr


MSG_SLOT_CHANNEL = _iow(MAJOR_NUMBER, 0, _SIZEOF_UNSIGNED_LONG)


def _error(code: int, message: str) -> OSError:
    return OSError(code, message)


@dataclass
class Channel:
    """One channel of a slot, holding at most one message."""

    channel_id: int
    message: bytes = b""

    @property
    def size_of_message(self) -> int:
        return len(self.message)


@dataclass
class MessageSlot:
    """The channels that belong to one device minor number."""

    minor_number: int
    channels: dict[int, Channel] = field(default_factory=dict)

    @property
    def channel_amount(self) -> int:
        return len(self.channels)

    def find_channel(self, channel_id: int) -> Channel | None:
        """Return the channel with ``channel_id``, or ``None`` if there is none."""
        return self.channels.get(channel_id)

    def insert_channel(self, channel_id: int) -> Channel:
        """Create an empty channel; raise ``EEXIST`` if the id is taken."""
        if channel_id in self.channels:
            raise _error(errno.EEXIST, f"channel {channel_id} already exists")
        channel = Channel(channel_id)
        self.channels[channel_id] = channel
        return channel


class SlotFile:
    """An open handle on a message slot, bound to at most one channel."""

    def __init__(self, slot: MessageSlot) -> None:
        self.slot = slot
        self.channel_id = 0

    def __enter__(self) -> SlotFile:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def _channel(self) -> Channel:
        if self.channel_id == 0:
            raise _error(errno.EINVAL, "no channel has been set for this file")
        channel = self.slot.find_channel(self.channel_id)
        if channel is None:
            raise _error(errno.EINVAL, "the channel set for this file no longer exists")
        return channel

    def ioctl(self, command: int, channel_id: int) -> int:
        """Bind this file to ``channel_id``, creating the channel if needed."""
        channel_id &= _UINT_MASK
        if command != MSG_SLOT_CHANNEL or channel_id == 0:
            raise _error(errno.EINVAL, "invalid ioctl command or channel id")
        if self.slot.find_channel(channel_id) is None:
            self.slot.insert_channel(channel_id)
        self.channel_id = channel_id
        return SUCCESS

    def write(self, data: bytes) -> int:
        """Replace the bound channel's message with ``data``; return its length."""
        payload = bytes(data)
        if not payload or len(payload) > BUFF_SIZE:
            raise _error(errno.EMSGSIZE, "unsupported message length")
        channel = self._channel()
        channel.message = payload
        return len(payload)

    def read(self, buffer_len: int) -> bytes:
        """Return the bound channel's message if it fits in ``buffer_len`` bytes."""
        channel = self._channel()
        if not channel.message:
            raise _error(errno.EWOULDBLOCK, "no message exists in this channel")
        if channel.size_of_message > buffer_len:
            raise _error(errno.ENOSPC, "buffer too small to hold the message")
        return channel.message

    def release(self) -> int:
        """Detach this file from its channel."""
        self.channel_id = 0
        return SUCCESS


class MessageSlotManager:
    """All message slots of the device, indexed by minor number."""

    def __init__(self) -> None:
        self._slots: dict[int, MessageSlot] = {}

    def open(self, minor: int) -> SlotFile:
        """Open the slot for ``minor``, creating it on first use."""
        if not 0 <= minor < MAX_MESSAGE_SLOT_AMOUNT:
            raise _error(errno.ENXIO, f"minor number {minor} is out of range")
        slot = self._slots.get(minor)
        if slot is None:
            slot = MessageSlot(minor)
            self._slots[minor] = slot
        return SlotFile(slot)

    def unload(self) -> None:
        """Discard every slot and all of its channels."""
        for slot in self._slots.values():
            slot.channels.clear()
        self._slots.clear()