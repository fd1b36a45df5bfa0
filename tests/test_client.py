import errno
import os
from types import SimpleNamespace

import pytest

from slotqueue import client
from slotqueue.message_slot import BUFF_SIZE, MSG_SLOT_CHANNEL, MessageSlotManager

DEVICE = "/dev/slot0"


class FakeDevice:
    """Routes file calls on one path to an in-memory message slot."""

    def __init__(self, path):
        self.path = path
        self.manager = MessageSlotManager()
        self.files = {}
        self.requests = []
        self.next_fd = 100

    def open(self, path, flags, mode=0o777):
        if os.fspath(path) != self.path:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
        fd = self.next_fd
        self.next_fd += 1
        self.files[fd] = self.manager.open(0)
        return fd

    def ioctl(self, fd, request, arg=0, mutate_flag=True):
        self.requests.append(request)
        return self.files[fd].ioctl(request, arg)

    def read(self, fd, size):
        return self.files[fd].read(size)

    def write(self, fd, data):
        return self.files[fd].write(data)

    def close(self, fd):
        self.files.pop(fd).release()


@pytest.fixture
def device(monkeypatch):
    fake = FakeDevice(DEVICE)
    fake_os = SimpleNamespace(
        open=fake.open,
        read=fake.read,
        write=fake.write,
        close=fake.close,
        O_RDONLY=os.O_RDONLY,
        O_WRONLY=os.O_WRONLY,
        fsencode=os.fsencode,
        strerror=os.strerror,
        PathLike=os.PathLike,
    )
    monkeypatch.setattr(client, "os", fake_os)
    monkeypatch.setattr(client, "fcntl", SimpleNamespace(ioctl=fake.ioctl))
    return fake


def test_send_then_read_round_trip(device):
    written = client.send_message(DEVICE, 4, "hello")
    assert written == 5
    assert client.read_message(DEVICE, 4) == b"hello"


def test_ioctl_uses_channel_request(device):
    assert client.send_message(DEVICE, 1, "x") == 1
    assert device.requests == [MSG_SLOT_CHANNEL]
    assert client.read_message(DEVICE, 1) == b"x"
    assert device.requests == [MSG_SLOT_CHANNEL, MSG_SLOT_CHANNEL]


def test_channels_are_independent(device):
    client.send_message(DEVICE, 1, "first")
    client.send_message(DEVICE, 2, "second")
    assert client.read_message(DEVICE, 1) == b"first"
    assert client.read_message(DEVICE, 2) == b"second"


def test_write_replaces_previous_message(device):
    client.send_message(DEVICE, 3, "a longer message")
    client.send_message(DEVICE, 3, "short")
    assert client.read_message(DEVICE, 3) == b"short"


def test_read_empty_channel_raises(device):
    with pytest.raises(OSError) as info:
        client.read_message(DEVICE, 9)
    assert info.value.errno == errno.EWOULDBLOCK
    assert device.files == {}


def test_channel_zero_is_rejected(device):
    with pytest.raises(OSError) as info:
        client.send_message(DEVICE, 0, "data")
    assert info.value.errno == errno.EINVAL
    assert device.files == {}


def test_oversized_message_is_rejected(device):
    with pytest.raises(OSError) as info:
        client.send_message(DEVICE, 5, "x" * (BUFF_SIZE + 1))
    assert info.value.errno == errno.EMSGSIZE


def test_message_of_buffer_size_is_accepted(device):
    payload = "y" * BUFF_SIZE
    assert client.send_message(DEVICE, 5, payload) == BUFF_SIZE
    assert client.read_message(DEVICE, 5) == payload.encode()


def test_empty_message_is_rejected(device):
    with pytest.raises(OSError) as info:
        client.send_message(DEVICE, 5, "")
    assert info.value.errno == errno.EMSGSIZE


def test_missing_device_raises(device):
    with pytest.raises(OSError) as info:
        client.read_message("/dev/absent", 1)
    assert info.value.errno == errno.ENOENT


def test_files_are_closed_after_success(device):
    assert client.send_message(DEVICE, 2, "bye") == 3
    assert client.read_message(DEVICE, 2) == b"bye"
    assert device.files == {}


def test_sender_and_reader_main(device, capsys):
    assert client.sender_main([DEVICE, "12", "over the wire"]) == 0
    assert client.reader_main([DEVICE, "12"]) == 0
    assert capsys.readouterr().out == "over the wire"


def test_sender_main_parses_leading_digits(device):
    assert client.sender_main([DEVICE, "7abc", "parsed"]) == 0
    assert client.read_message(DEVICE, 7) == b"parsed"


def test_non_numeric_channel_means_channel_zero(device, capsys):
    assert client.sender_main([DEVICE, "abc", "ignored"]) == 1
    err = capsys.readouterr().err
    assert "connect the device to a channel" in err


def test_wrong_argument_count(device, capsys):
    assert client.sender_main([DEVICE, "1"]) == 1
    assert client.reader_main([DEVICE]) == 1
    err = capsys.readouterr().err
    assert err.count("Wrong number of arguments.") == 2


def test_reader_main_reports_missing_device(device, capsys):
    assert client.reader_main(["/dev/absent", "1"]) == 1
    err = capsys.readouterr().err
    assert "An error has occurred when trying to open the message slot." in err


def test_reader_main_reports_empty_channel(device, capsys):
    assert client.reader_main([DEVICE, "3"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "read the message from the specified channel" in captured.err


def test_sender_main_reports_oversized_message(device, capsys):
    assert client.sender_main([DEVICE, "3", "z" * (BUFF_SIZE + 1)]) == 1
    err = capsys.readouterr().err
    assert "write the message to the specified channel" in err