#!/usr/bin/env python3
"""
Copyright (c) 2016-present, Facebook, Inc.
All rights reserved.

This source code is licensed under the BSD-style license found in the
LICENSE file in the root directory of this source tree. An additional grant
of patent rights can be found in the PATENTS file in the same directory.
"""

'''SMS-DELIVER PDU decoding and multi-part reassembly for SMS gateways.

Overview
--------

A GSM modem in PDU mode hands out every received SMS as a hex string.
This library turns those strings into messages (sender, text, service
centre timestamp) and glues concatenated messages back together before
they're forwarded anywhere.

It decodes the GSM 03.38 default alphabet (with the extension table) and
UCS-2, including surrogate pairs. 8-bit data is treated as GSM 7-bit.


PDU Interface
-------------

>>> from smsgate import parse
>>> m = parse('07917283010010F5040B919721436587F90000521051900300400A'
...           'E8329BFD4697D9EC37', source_id=3)
>>> m.sender, m.text, m.timestamp
('+79123456789', 'hellohello', '2025-01-15 09:30:00+01:00')
>>> m.to_dict()
{'sender': '+79123456789', 'text': 'hellohello', 'timestamp': '2025-01-15 09:30:00+01:00'}

parse() raises a PDUDecodeError (a ValueError) for text that isn't a
usable PDU.


Reassembly
----------

>>> from smsgate import Concatenator
>>> c = Concatenator()
>>> c.add_part(m) is m       # single-part messages pass straight through
True

Parts of a concatenated message return None until the last one arrives.
Call cleanup() every now and then to drop messages whose remaining parts
never turned up.

The Inbox class in smsgate.gateway does both steps for a whole AT+CMGL
listing and runs the cleanup on a fixed interval.


Command-line Usage
------------------

  % python -m smsgate 07917283010010F5040B919721436587F90000521051900300400AE8329BFD4697D9EC37

  sender = +79123456789
  timestamp = 2025-01-15 09:30:00+01:00
  encoding = gsm7
  text = 'hellohello'

Use --listing to decode a saved AT+CMGL response (reassembling multi-part
messages) and --json for delivery payloads instead of the dump.
'''

__version__ = '1.0'

from .concat import Concatenator
from .config import GatewayConfig
from .gateway import Inbox
from .pdu import (parse, DecodedMessage, PartInfo, PDUDecodeError,
                  MalformedPDUError, TruncatedPDUError, IncompleteDecodeError)
from .text import decode_gsm7, decode_ucs2, decode_ucs2_hex
