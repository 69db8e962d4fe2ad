"""Parsing of the modem's PDU mode message listings.

In PDU mode (AT+CMGF=0) a modem answers AT+CMGR=<index> with

    +CMGR: <stat>,[<alpha>],<length>
    <pdu>

    OK

and AT+CMGL=<stat> with one such header/PDU pair per stored message, the
header being "+CMGL: <index>,<stat>,[<alpha>],<length>". Only the text is
handled here; talking to the modem is somebody else's job.

Copyright (c) 2016-present, Facebook, Inc.
All rights reserved.

This source code is licensed under the BSD-style license found in the
LICENSE file in the root directory of this source tree. An additional grant
of patent rights can be found in the PATENTS file in the same directory.
"""

import collections

from . import logger

# <stat> values
REC_UNREAD = 0
REC_READ = 1
STO_UNSENT = 2
STO_SENT = 3
ALL = 4

CMGR_PREFIX = '+CMGR:'
CMGL_PREFIX = '+CMGL:'

StoredPDU = collections.namedtuple('StoredPDU', 'index status length pdu')


def _lines(response):
    return [line.strip() for line in response.splitlines()]


def _pdu_after(lines, pos):
    """The first non-empty line after lines[pos], unless that's the final
    result code or another header."""
    for line in lines[pos + 1:]:
        if not line:
            continue
        if line in ('OK', 'ERROR') or line.startswith('+'):
            return None
        return line
    return None


def parse_cmgr(response):
    """Return the StoredPDU in an AT+CMGR response, or None if there's no
    message in it. The index isn't part of the response and is None."""
    lines = _lines(response)
    for pos, line in enumerate(lines):
        if not line.startswith(CMGR_PREFIX):
            continue
        fields = line[len(CMGR_PREFIX):].split(',')
        pdu = _pdu_after(lines, pos)
        try:
            status, length = int(fields[0]), int(fields[-1])
        except ValueError:
            logger.warning("malformed +CMGR header", header=line)
            return None
        if pdu is None:
            logger.warning("+CMGR header without PDU", header=line)
            return None
        return StoredPDU(None, status, length, pdu)
    return None


def parse_cmgl(response):
    """Return a StoredPDU for each message in an AT+CMGL response.

    Entries with a malformed header or no PDU line are logged and skipped.
    """
    lines = _lines(response)
    stored = []
    for pos, line in enumerate(lines):
        if not line.startswith(CMGL_PREFIX):
            continue
        fields = line[len(CMGL_PREFIX):].split(',')
        try:
            index, status = int(fields[0]), int(fields[1])
            length = int(fields[-1])
        except (ValueError, IndexError):
            logger.warning("malformed +CMGL header", header=line)
            continue
        pdu = _pdu_after(lines, pos)
        if pdu is None:
            logger.warning("+CMGL entry without PDU", index=index)
            continue
        stored.append(StoredPDU(index, status, length, pdu))
    logger.debug("parsed message listing", count=len(stored))
    return stored
