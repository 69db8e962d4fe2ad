"""Reassembly of concatenated (multi-part) SMS.

The network splits long messages into parts that share a reference number
and carry their position and the total part count in the user data header.
Parts arrive in any order, possibly minutes apart, and sometimes not at
all; a Concatenator buffers them until the set is complete and throws away
sets that stay incomplete for too long.

Copyright (c) 2016-present, Facebook, Inc.
All rights reserved.

This source code is licensed under the BSD-style license found in the
LICENSE file in the root directory of this source tree. An additional grant
of patent rights can be found in the PATENTS file in the same directory.
"""

import time

from . import logger
from .pdu import DecodedMessage, SINGLE_PART

# seconds
DEFAULT_TIMEOUT = 300


class PartBuffer(object):
    """The parts of one concatenated message received so far."""

    def __init__(self, message, created_at):
        self.sender = message.sender
        self.timestamp = message.timestamp
        self.encoding = message.encoding
        self.total_parts = message.part_info.total_parts
        self.created_at = created_at
        # slot i holds part i + 1
        self.slots = [None] * self.total_parts
        self.sources = [None] * self.total_parts

    def add(self, message):
        """Store message's text in its slot; False if its part number
        doesn't fit this buffer."""
        index = message.part_info.part_number - 1
        if not 0 <= index < self.total_parts:
            return False
        self.slots[index] = message.text
        self.sources[index] = message.source_id
        return True

    def is_complete(self):
        return bool(self.slots) and all(s is not None for s in self.slots)

    def age(self, now):
        return now - self.created_at


class Concatenator(object):
    """Buffers message parts until all of a message's parts have arrived.

    Buffers are keyed by (sender, reference) or, with key_by_sender=False,
    by the reference number alone; in that case two senders reusing a
    reference inside the timeout window get their parts mixed up.

    Not thread-safe: callers must serialize add_part() and cleanup().
    """

    def __init__(self, timeout=DEFAULT_TIMEOUT, key_by_sender=True,
                 clock=time.monotonic):
        self.timeout = timeout
        self.key_by_sender = key_by_sender
        self.clock = clock
        self._buffers = {}

    def __len__(self):
        return len(self._buffers)

    @property
    def pending(self):
        """Keys of the messages still waiting for parts."""
        return list(self._buffers)

    def _key(self, message):
        if self.key_by_sender:
            return (message.sender, message.part_info.reference)
        return message.part_info.reference

    def add_part(self, message, now=None):
        """Add a decoded message (part).

        Returns the complete message when message completes a set (or was
        never part of one, in which case it's returned unchanged), None if
        more parts are needed.
        """
        if not message.part_info.is_multipart:
            return message

        if now is None:
            now = self.clock()
        key = self._key(message)
        buf = self._buffers.get(key)
        if buf is None:
            buf = PartBuffer(message, now)
            self._buffers[key] = buf

        if not buf.add(message):
            logger.warning("dropping part outside of message",
                           ref=message.part_info.reference,
                           part=message.part_info.part_number,
                           total=buf.total_parts)
        if not buf.is_complete():
            logger.debug("buffered message part",
                         ref=message.part_info.reference,
                         part=message.part_info.part_number,
                         total=buf.total_parts)
            return None

        del self._buffers[key]
        logger.info("concatenated multi-part SMS",
                    ref=message.part_info.reference, parts=buf.total_parts)
        sources = [s for s in buf.sources if s is not None]
        return DecodedMessage(buf.sender, ''.join(buf.slots), buf.timestamp,
                              SINGLE_PART, message.source_id, sources,
                              buf.encoding)

    def cleanup(self, now=None):
        """Drop the buffers older than the timeout; returns how many."""
        if now is None:
            now = self.clock()
        expired = [key for key, buf in self._buffers.items()
                   if buf.age(now) > self.timeout]
        for key in expired:
            buf = self._buffers.pop(key)
            logger.warning("timeout: dropping incomplete multi-part SMS",
                           key=key,
                           received=sum(s is not None for s in buf.slots),
                           total=buf.total_parts)
        return len(expired)
