# slotqueue

Three small pieces for passing data around:

- **`ConcurrentQueue`** (`slotqueue.concurrent_queue`): a thread-safe,
  unbounded FIFO queue. Consumers that block are served strictly in the
  order they started waiting.
- **Message slots** (`slotqueue.message_slot`): an in-memory store of slots,
  each holding any number of numbered channels. Every channel keeps its last
  message, up to 128 bytes.
- **Clients** (`slotqueue.client`): functions and two commands that send to
  and read from a message slot *device file* through `ioctl`, `read` and
  `write`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## ConcurrentQueue

```python
import threading
from slotqueue.concurrent_queue import ConcurrentQueue

queue = ConcurrentQueue()

def consumer():
    item = queue.dequeue()      # blocks until an item arrives for this thread
    print("got", item)

worker = threading.Thread(target=consumer)
worker.start()
queue.enqueue("hello")
worker.join()

queue.enqueue(42)
print(len(queue))               # 1
print(queue.try_dequeue())      # (True, 42)
print(queue.try_dequeue())      # (False, None)
print(queue.visited())          # 2
queue.destroy()
```

- `enqueue(item)` adds an item. If a consumer is waiting, the one that has
  waited longest receives the item directly.
- `dequeue()` removes and returns the oldest item, blocking while the queue
  is empty. Waiting consumers are served first-in, first-out.
- `try_dequeue()` never blocks. It returns `(True, item)`, or `(False, None)`
  when no item is available. It never takes an item already handed to a
  waiting consumer.
- `visited()` is the number of items that have gone in and come back out.
- `len(queue)` is the number of items currently queued.
- `destroy()` drops every queued item (they count as visited) and releases
  every waiting consumer; their `dequeue()` calls raise `RuntimeError`.

## Message slots

A `MessageSlotManager` holds up to 256 slots, indexed by minor number
(0–255). `open(minor)` creates the slot on first use and returns a
`SlotFile`. Bind the file to a channel with `ioctl`, then `write` and `read`
messages on it. A `SlotFile` is also a context manager that calls
`release()` on exit.

```python
from slotqueue.message_slot import MSG_SLOT_CHANNEL, MessageSlotManager

manager = MessageSlotManager()

with manager.open(0) as writer:
    writer.ioctl(MSG_SLOT_CHANNEL, 7)   # channel ids are non-zero
    writer.write(b"hi there")           # returns 8

with manager.open(0) as reader:
    reader.ioctl(MSG_SLOT_CHANNEL, 7)
    print(reader.read(128))             # b'hi there'

manager.unload()
```

The rules:

- `ioctl` accepts only the `MSG_SLOT_CHANNEL` command and a non-zero
  channel id (only its low 32 bits are kept). The channel is created if it
  does not exist yet.
- A message is 1 to 128 bytes long; other lengths fail with `EMSGSIZE`.
- Reading or writing before a channel is chosen fails with `EINVAL`.
- Reading a channel with no message fails with `EWOULDBLOCK`.
- Reading with a `buffer_len` smaller than the stored message fails with
  `ENOSPC`.
- A new message replaces the old one. Reading leaves it in place.
- Opening a minor number outside 0–255 fails with `ENXIO`.
- `MessageSlot.insert_channel` fails with `EEXIST` for an id already in use;
  `MessageSlot.find_channel` returns `None` for an unknown id.

All failures are raised as `OSError` carrying the matching `errno` value.

## Command-line tools

Store a message on a channel of a message slot device file:

```
slot-sender <device-path> <channel-id> <message>
```

Read the current message of a channel and write it, as raw bytes with no
trailing newline, to standard output:

```
slot-reader <device-path> <channel-id>
```

The channel id is read like C's `atoi`: leading decimal digits, with `0`
when there are none. Both commands exit with status 0 on success. On any
failure they print a description, followed by the system error text where
there is one, to standard error and exit with status 1.

The same operations are available from Python as
`slotqueue.client.send_message(path, channel_id, message)`, which returns the
number of bytes written, and `slotqueue.client.read_message(path, channel_id)`,
which returns the message as bytes. Both raise `OSError` on failure.

## What this package does not do

The command-line tools and `slotqueue.client` work on a real character
device that implements the message slot `ioctl` interface. This package does
not provide such a device: the `MessageSlotManager` lives only inside the
Python process and cannot be opened by path. The clients use `fcntl` and so
run on POSIX systems only.