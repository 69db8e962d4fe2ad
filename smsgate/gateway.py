"""The receive side of the gateway's polling loop.

Each poll the gateway lists the messages stored on the SIM and hands every
PDU to an Inbox, which decodes it, feeds it to the concatenator and returns
whatever messages are ready for delivery. PDUs that can't be decoded are
logged and skipped; they stay on the SIM until somebody deletes them.

Copyright (c) 2016-present, Facebook, Inc.
All rights reserved.

This source code is licensed under the BSD-style license found in the
LICENSE file in the root directory of this source tree. An additional grant
of patent rights can be found in the PATENTS file in the same directory.
"""

import time

from . import at
from . import logger
from .concat import Concatenator
from .config import GatewayConfig
from .pdu import PDUDecodeError, parse


class Inbox(object):

    def __init__(self, config=None, clock=time.monotonic):
        if config is None:
            config = GatewayConfig()
        self.config = config
        self.clock = clock
        self.concatenator = Concatenator(
            timeout=config['concat_timeout'],
            key_by_sender=config['concat_key_by_sender'],
            clock=clock)
        self._last_cleanup = None

    def receive(self, pdu_hex, source_id=None, now=None):
        """Decode one PDU; returns the message if it's complete, else None.

        None also means the PDU couldn't be decoded, which is logged.
        """
        try:
            message = parse(pdu_hex, source_id)
        except PDUDecodeError as e:
            logger.warning("skipping undecodable PDU", source=source_id,
                           error=e)
            return None
        return self.concatenator.add_part(message, now)

    def receive_listing(self, response, now=None):
        """Feed every message of an AT+CMGL response through receive().

        Returns the complete messages, in listing order.
        """
        complete = []
        for stored in at.parse_cmgl(response):
            message = self.receive(stored.pdu, stored.index, now)
            if message is not None:
                complete.append(message)
        return complete

    def tick(self, now=None):
        """Run the concatenator's cleanup if cleanup_interval seconds have
        passed since the last run. Returns how many buffers were dropped."""
        if now is None:
            now = self.clock()
        if self._last_cleanup is None:
            self._last_cleanup = now
            return 0
        if now - self._last_cleanup < self.config['cleanup_interval']:
            return 0
        self._last_cleanup = now
        return self.concatenator.cleanup(now)
