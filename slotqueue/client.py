"""Command-line clients that write to and read from a message slot device file."""

from __future__ import annotations

import fcntl
import os
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from .message_slot import BUFF_SIZE, MSG_SLOT_CHANNEL

_FAILURE = 1
_SUCCESS = 0

_OPEN_FAILED = "An error has occurred when trying to open the message slot."
_IOCTL_FAILED = "An error has occurred when trying to connect the device to a channel."
_WRITE_FAILED = (
    "An error has occurred when trying to write the message to the specified channel."
)
_READ_FAILED = (
    "An error has occurred when trying to read the message from the specified channel."
)
_PRINT_FAILED = "An error has occurred while trying to print the message."
_CLOSE_FAILED = "An error has occurred when trying to close the device."
_WRONG_ARGS = "Wrong number of arguments."


def _fail(message: str, cause: OSError | None = None) -> OSError:
    code = cause.errno if cause is not None and cause.errno is not None else 0
    return OSError(code, message)


def _parse_channel_id(text: str) -> int:
    """Read a leading decimal integer the way ``atoi`` does, as an unsigned long."""
    stripped = text.lstrip(" \t\n\v\f\r")
    sign = 1
    if stripped[:1] in ("+", "-"):
        sign = -1 if stripped[0] == "-" else 1
        stripped = stripped[1:]
    digits = ""
    for char in stripped:
        if not char.isdigit() or not char.isascii():
            break
        digits += char
    value = sign * int(digits) if digits else 0
    return value % (1 << 64)


def _ioctl_argument(channel_id: int) -> int:
    """Fit a channel id into the signed int the ioctl call accepts.

    The device keeps only the low 32 bits of the id, so nothing is lost.
    """
    value = channel_id & 0xFFFFFFFF
    return value - (1 << 32) if value >= 1 << 31 else value


@contextmanager
def _open_channel(path: str | os.PathLike[str], flags: int, channel_id: int) -> Iterator[int]:
    try:
        fd = os.open(path, flags)
    except OSError as exc:
        raise _fail(_OPEN_FAILED, exc) from exc
    try:
        try:
            fcntl.ioctl(fd, MSG_SLOT_CHANNEL, _ioctl_argument(channel_id))
        except OSError as exc:
            raise _fail(_IOCTL_FAILED, exc) from exc
        yield fd
    except BaseException:
        try:
            os.close(fd)
        except OSError:
            pass
        raise
    try:
        os.close(fd)
    except OSError as exc:
        raise _fail(_CLOSE_FAILED, exc) from exc


def read_message(path: str | os.PathLike[str], channel_id: int) -> bytes:
    """Return the message stored on ``channel_id`` of the device at ``path``."""
    with _open_channel(path, os.O_RDONLY, channel_id) as fd:
        try:
            return os.read(fd, BUFF_SIZE)
        except OSError as exc:
            raise _fail(_READ_FAILED, exc) from exc


def send_message(
    path: str | os.PathLike[str], channel_id: int, message: str | bytes
) -> int:
    """Store ``message`` on ``channel_id`` of the device at ``path``.

    Returns the number of bytes written.
    """
    payload = os.fsencode(message) if isinstance(message, str) else bytes(message)
    with _open_channel(path, os.O_WRONLY, channel_id) as fd:
        try:
            written = os.write(fd, payload)
        except OSError as exc:
            raise _fail(_WRITE_FAILED, exc) from exc
        if written != len(payload):
            raise _fail(_WRITE_FAILED)
        return written


def _report(error: OSError) -> None:
    if error.errno:
        print(f"{error.strerror}: {os.strerror(error.errno)}", file=sys.stderr)
    else:
        print(error.strerror or str(error), file=sys.stderr)


def _emit(data: bytes) -> None:
    try:
        stream = sys.stdout.buffer
        written = stream.write(data)
        stream.flush()
    except OSError as exc:
        raise _fail(_PRINT_FAILED, exc) from exc
    if written != len(data):
        raise _fail(_PRINT_FAILED)


def reader_main(argv: Sequence[str] | None = None) -> int:
    """Print the message on a channel: ``reader DEVICE CHANNEL_ID``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        _report(_fail(_WRONG_ARGS))
        return _FAILURE
    path, channel_text = args
    try:
        message = read_message(path, _parse_channel_id(channel_text))
        _emit(message)
    except OSError as exc:
        _report(exc)
        return _FAILURE
    return _SUCCESS


def sender_main(argv: Sequence[str] | None = None) -> int:
    """Store a message on a channel: ``sender DEVICE CHANNEL_ID MESSAGE``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 3:
        _report(_fail(_WRONG_ARGS))
        return _FAILURE
    path, channel_text, message = args
    try:
        send_message(path, _parse_channel_id(channel_text), message)
    except OSError as exc:
        _report(exc)
        return _FAILURE
    return _SUCCESS