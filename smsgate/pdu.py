#!/usr/bin/env python3
"""
Copyright (c) 2016-present, Facebook, Inc.
All rights reserved.

This source code is licensed under the BSD-style license found in the
LICENSE file in the root directory of this source tree. An additional grant
of patent rights can be found in the PATENTS file in the same directory.
"""
"""Code for decoding GSM 03.40 SMS-DELIVER PDUs as read from a modem.

A modem in PDU mode (AT+CMGF=0) reports each stored message as hex text:
the service centre address, then the SMS-DELIVER TPDU. parse() turns that
text into a DecodedMessage, including the concatenation details found in
the user data header so that smsgate.concat can put multi-part messages
back together.

See http://www.dreamfabric.com/sms/ for a readable description of the
format.
"""

import collections
import datetime
import json
import re

import pytz

from . import logger
from .text import decode_gsm7, decode_ucs2

# anything shorter can't hold an SMSC length, the TPDU header fields and
# a timestamp
MIN_PDU_LENGTH = 20

UDHI_FLAG = 0x40            # TP-User-Data-Header-Indicator

TOA_TYPE_MASK = 0x70
TOA_ALPHANUMERIC = 0x50

DCS_ENCODING_MASK = 0x0C
DCS_GSM7 = 0x00
DCS_8BIT = 0x04
DCS_UCS2 = 0x08

IEI_CONCAT_8BIT = 0x00
IEI_CONCAT_16BIT = 0x08

# TP-SCTS carries a two digit year; we assume this century
CENTURY = 2000

# semi-octet values 0xA-0xE; 0xF is filler
SEMI_OCTET_DIGITS = '0123456789*#abc'

_HEX_RE = re.compile('^[0-9A-Fa-f]*$')
_TIMESTAMP_RE = re.compile(r'^(\d{4})-(\d\d)-(\d\d) (\d\d):(\d\d):(\d\d)'
                           r'([+-])(\d\d):(\d\d)$')


class PDUDecodeError(ValueError):
    pass


class MalformedPDUError(PDUDecodeError):
    pass


class TruncatedPDUError(PDUDecodeError):
    pass


class IncompleteDecodeError(PDUDecodeError):
    pass


class PDUData(object):
    """Read cursor over the octets of a hex encoded PDU."""

    def __init__(self, pdu_hex):
        text = pdu_hex.strip()
        if len(text) < MIN_PDU_LENGTH:
            raise MalformedPDUError('PDU too short (%d hex characters)'
                                    % len(text))
        if len(text) % 2:
            raise MalformedPDUError('PDU has an odd number of hex '
                                    'characters (%d)' % len(text))
        if not _HEX_RE.match(text):
            raise MalformedPDUError('PDU contains non-hex characters')
        self.data = bytes(bytearray.fromhex(text))
        self.pos = 0

    def __len__(self):
        return len(self.data) - self.pos

    def int(self):
        return self.octets(1)[0]

    def octets(self, num):
        num = int(num)
        if num < 0 or self.pos + num > len(self.data):
            raise TruncatedPDUError('PDU is truncated: wanted %d octets at '
                                    'offset %d, have %d'
                                    % (num, self.pos, len(self)))
        buf = self.data[self.pos:self.pos + num]
        self.pos += num
        return buf

    def skip(self, num):
        self.octets(num)


class PartInfo(collections.namedtuple(
        'PartInfo', 'is_multipart reference total_parts part_number')):
    """Concatenation details of one message part.

    A message that isn't part of a concatenated SMS is part 1 of 1.
    """
    __slots__ = ()

    def __new__(cls, is_multipart=False, reference=0, total_parts=1,
                part_number=1):
        return super(PartInfo, cls).__new__(cls, is_multipart, reference,
                                            total_parts, part_number)


SINGLE_PART = PartInfo()


class DecodedMessage(collections.namedtuple(
        'DecodedMessage',
        'sender text timestamp part_info source_id source_ids encoding')):
    """A decoded SMS, or a decoded part of a concatenated one.

    "sender" is "+" and the digits of the originating address, or the
             alphanumeric originator name
    "text" is the message body
    "timestamp" is the service centre time stamp,
             "YYYY-MM-DD hh:mm:ss+HH:MM"
    "part_info" is a PartInfo
    "source_id" is whatever handle the caller passed along with the PDU
             (usually the SIM storage index); it isn't interpreted here
    "source_ids" holds the handles of every PDU that went into the
             message, in part order
    "encoding" is 'gsm7' or 'ucs2'
    """
    __slots__ = ()

    def __new__(cls, sender, text, timestamp, part_info=SINGLE_PART,
                source_id=None, source_ids=None, encoding='gsm7'):
        if source_ids is None:
            source_ids = () if source_id is None else (source_id, )
        return super(DecodedMessage, cls).__new__(
            cls, sender, text, timestamp, part_info, source_id,
            tuple(source_ids), encoding)

    @property
    def is_multipart(self):
        return self.part_info.is_multipart

    @property
    def datetime(self):
        return scts_to_datetime(self.timestamp)

    def to_dict(self):
        """The JSON body posted to the delivery endpoint."""
        return {
            'sender': self.sender,
            'text': self.text,
            'timestamp': self.timestamp,
        }

    def to_json(self):
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def dump(self):
        l = []
        l.append('sender = %s' % self.sender)
        l.append('timestamp = %s' % self.timestamp)
        l.append('encoding = %s' % self.encoding)
        if self.part_info.is_multipart:
            l.append('part = %d/%d (ref %d)' % (self.part_info.part_number,
                                                self.part_info.total_parts,
                                                self.part_info.reference))
        if self.source_ids:
            l.append('source = %s' % ', '.join(str(s) for s in
                                               self.source_ids))
        l.append('text = %r' % self.text)
        return '\n'.join(l)


def parse(pdu_hex, source_id=None):
    '''Decode a PDU hex string (SMSC address + SMS-DELIVER TPDU).

    "pdu_hex" is the hex text the modem returned for one stored message
    "source_id" is an opaque handle attached to the result

    Raises a PDUDecodeError subclass if the text isn't hex, is too short,
    declares more data than it holds, or decodes to an empty sender or
    text.
    '''
    pdu = PDUData(pdu_hex)

    # service centre address: length in octets, then the address itself
    pdu.skip(pdu.int())

    first = pdu.int()
    udhi = bool(first & UDHI_FLAG)
    logger.debug("PDU first octet", first='0x%02X' % first, udhi=int(udhi))

    toa, sender = parse_address(pdu)

    # TP-Protocol-ID
    pdu.skip(1)

    # TP-Data-Coding-Scheme
    dcs = pdu.int()

    # TP-Service-Centre-Time-Stamp
    timestamp = unpack_timestamp(pdu.octets(7))

    # TP-User-Data-Length and TP-User-Data
    udl = pdu.int()
    text, part_info, encoding = parse_user_data(pdu, dcs, udl, udhi)

    if not sender:
        raise IncompleteDecodeError('PDU decoded to an empty sender')
    if not text:
        raise IncompleteDecodeError('PDU decoded to an empty text')
    if len(pdu):
        logger.debug("ignoring trailing octets after user data",
                     count=len(pdu))

    return DecodedMessage(sender, text, timestamp, part_info, source_id,
                          encoding=encoding)


def parse_address(pdu):
    '''Parse the TP-Address-Length, TP-Type-Of-Address and TP-Address
    from the cursor and return the TOA and the address.
    '''
    length = pdu.int()
    toa = pdu.int()
    # both kinds of address occupy ceil(length / 2) octets
    octets = pdu.octets((length + 1) // 2)
    if (toa & TOA_TYPE_MASK) == TOA_ALPHANUMERIC:
        logger.debug("alphanumeric originating address", toa='%02x' % toa)
        return toa, unpack_alphanumeric(octets, length)
    return toa, unpack_phone_number(octets, length)


def unpack_alphanumeric(octets, length):
    '''Decode a GSM-coded originator name.

    "length" counts the semi-octets holding septets. Encoders disagree on
    whether padding is counted, so when the octets end with seven spare
    zero bits those are padding, not an '@'.
    '''
    octets = bytearray(octets)
    available = len(octets) * 8 // 7
    septets = min(length * 4 // 7, available)
    if (septets == available and octets and len(octets) * 8 % 7 == 0
            and not octets[-1] >> 1):
        septets -= 1
    return decode_gsm7(octets, septets)


def unpack_phone_number(octets, digit_count=None):
    '''Turn "decimal encoded semi-octets" into "+" and the digits.

    Each octet holds two digits, low nibble first; an odd digit count is
    padded with a trailing 0xF nibble which is dropped.
    '''
    digits = []
    for octet in bytearray(octets):
        for nibble in (octet & 0x0F, octet >> 4):
            if nibble < len(SEMI_OCTET_DIGITS):
                digits.append(SEMI_OCTET_DIGITS[nibble])
    if digit_count is not None:
        digits = digits[:digit_count]
    return '+' + ''.join(digits)


def _swapped_bcd(octet):
    return (octet & 0x0F) * 10 + (octet >> 4)


def unpack_timestamp(octets):
    '''Turn the seven TP-SCTS octets into "YYYY-MM-DD hh:mm:ss+HH:MM".

    The first six octets are nibble-swapped BCD year, month, day, hour,
    minute and second. The last is the zone in quarters of an hour, also
    swapped, with the sign in bit 3.
    '''
    octets = bytearray(octets)
    year, month, day, hour, minute, second = [_swapped_bcd(o)
                                              for o in octets[:6]]
    zone = octets[6]
    sign = '-' if zone & 0x08 else '+'
    quarters = _swapped_bcd(zone & 0xF7)
    return '%04d-%02d-%02d %02d:%02d:%02d%s%02d:%02d' % (
        CENTURY + year, month, day, hour, minute, second,
        sign, quarters // 4, (quarters % 4) * 15)


def scts_to_datetime(timestamp):
    '''Turn a timestamp produced by unpack_timestamp() into a timezone
    aware datetime.

    Raises ValueError for text that isn't in that format or doesn't name
    a real date.
    '''
    match = _TIMESTAMP_RE.match(timestamp)
    if not match:
        raise ValueError('not an SMS timestamp: %r' % (timestamp, ))
    fields = match.groups()
    year, month, day, hour, minute, second = [int(f) for f in fields[:6]]
    offset = int(fields[7]) * 60 + int(fields[8])
    if fields[6] == '-':
        offset = -offset
    tz = pytz.FixedOffset(offset)
    return tz.localize(datetime.datetime(year, month, day, hour, minute,
                                         second))


def parse_udh(header):
    '''Split a user data header (without its length octet) into a list of
    (IEI, [data octets]) information elements.

    An element whose declared length runs past the end of the header ends
    the walk.
    '''
    header = bytearray(header)
    elements = []
    pos = 0
    while pos + 2 <= len(header):
        iei = header[pos]
        iedl = header[pos + 1]
        pos += 2
        if pos + iedl > len(header):
            logger.warning("UDH element overruns header", iei=iei,
                           length=iedl, available=len(header) - pos)
            break
        elements.append((iei, list(header[pos:pos + iedl])))
        pos += iedl
    return elements


def concat_info(elements):
    '''Extract the concatenation information from UDH elements.

    Returns the PartInfo of the first usable 8-bit or 16-bit reference
    concatenation element, or SINGLE_PART if there is none.
    '''
    for iei, val in elements:
        if iei == IEI_CONCAT_8BIT and len(val) >= 3:
            ref, total, seq = val[0], val[1], val[2]
        elif iei == IEI_CONCAT_16BIT and len(val) >= 4:
            ref, total, seq = (val[0] << 8) | val[1], val[2], val[3]
        else:
            continue
        if not total:
            # GSM 03.40 9.2.3.24.1: receivers ignore the IE if this is 0
            logger.debug("ignoring concatenation element with 0 parts",
                         ref=ref)
            continue
        if not 1 <= seq <= total:
            logger.debug("ignoring concatenation element with bad part "
                         "number", ref=ref, part=seq, total=total)
            continue
        logger.debug("multi-part SMS", ref=ref, part=seq, total=total)
        return PartInfo(True, ref, total, seq)
    return SINGLE_PART


def parse_user_data(pdu, dcs, udl, udhi):
    '''Read TP-User-Data from the cursor and decode it.

    Returns (text, part_info, encoding).
    '''
    encoding = dcs & DCS_ENCODING_MASK
    if encoding == DCS_UCS2:
        # TP-UDL counts octets
        data = pdu.octets(udl)
    else:
        if encoding == DCS_8BIT:
            logger.warning("8-bit data coding decoded as GSM 7-bit",
                           dcs='0x%02X' % dcs)
        # TP-UDL counts septets, header included
        data = pdu.octets((udl * 7 + 7) // 8)

    header_len = 0
    part_info = SINGLE_PART
    if udhi:
        if not data:
            raise TruncatedPDUError('UDHI set but there is no user data')
        udhl = data[0]
        header_len = udhl + 1
        if header_len > len(data):
            raise TruncatedPDUError('UDH length %d exceeds user data (%d '
                                    'octets)' % (udhl, len(data)))
        part_info = concat_info(parse_udh(data[1:header_len]))

    if encoding == DCS_UCS2:
        return decode_ucs2(data[header_len:]), part_info, 'ucs2'

    # If 7 bit data is used and the TP-UD-Header does not finish on a
    # septet boundary then fill bits are inserted after it so that the
    # text itself starts on a septet boundary.
    header_bits = header_len * 8
    fill_bits = (7 - header_bits % 7) % 7
    septets = max(udl - (header_bits + 6) // 7, 0)
    start = header_bits + fill_bits
    text = decode_gsm7(data[start // 8:], septets, start % 8)
    return text, part_info, 'gsm7'
