#!/usr/bin/env python3
"""
Copyright (c) 2016-present, Facebook, Inc.
All rights reserved.

This source code is licensed under the BSD-style license found in the
LICENSE file in the root directory of this source tree. An additional grant
of patent rights can be found in the PATENTS file in the same directory.
"""

"""Text decoders for SMS user data.

Two alphabets are handled: the packed GSM 03.38 default alphabet (seven
bits per character, little endian across octet boundaries) and UCS-2,
which in practice is big endian UTF-16 since handsets happily send
surrogate pairs for emoji.

Neither decoder fails: unknown escape codes become '?' and unpaired
surrogates become U+FFFD.
"""

import binascii
import struct

from . import gsm0338

REPLACEMENT_CHARACTER = '\ufffd'

_BOMS = (0xFEFF, 0xFFFE)
_HIGH_SURROGATES = range(0xD800, 0xDC00)
_LOW_SURROGATES = range(0xDC00, 0xE000)


def decode_gsm7(data, char_count, bit_offset=0):
    """Unpack `char_count` septets from `data` starting at `bit_offset`.

    `bit_offset` (0-6) is non-zero when the text follows a user data
    header that doesn't end on a septet boundary. The escape septet and
    the one following it both consume a septet slot but produce a single
    character, so the result may be shorter than `char_count`.
    """
    data = bytearray(data)
    out = []
    escaped = False
    for _ in range(char_count):
        index, shift = divmod(bit_offset, 8)
        current = data[index] if index < len(data) else 0
        if shift <= 1:
            septet = (current >> shift) & 0x7F
        else:
            # septet straddles two octets; missing trailing bits read as 0
            following = data[index + 1] if index + 1 < len(data) else 0
            septet = ((current >> shift) | (following << (8 - shift))) & 0x7F
        bit_offset += 7

        if escaped:
            out.append(gsm0338.lookup(septet, escaped=True))
            escaped = False
        elif septet == gsm0338.ESCAPE:
            escaped = True
        else:
            out.append(gsm0338.lookup(septet))
    return ''.join(out)


def decode_ucs2(data, byte_count=None):
    """Decode big endian UCS-2 / UTF-16 text.

    A leading byte order mark is skipped and a trailing odd byte ignored.
    Surrogate pairs are combined into one code point; a surrogate without
    its partner decodes to REPLACEMENT_CHARACTER.
    """
    data = bytes(data)
    if byte_count is not None:
        data = data[:max(byte_count, 0)]
    units = struct.unpack('>%dH' % (len(data) // 2), data[:len(data) & ~1])
    if units and units[0] in _BOMS:
        units = units[1:]

    out = []
    high = None
    for unit in units:
        if unit in _HIGH_SURROGATES:
            if high is not None:
                out.append(REPLACEMENT_CHARACTER)
            high = unit
            continue
        if unit in _LOW_SURROGATES:
            if high is None:
                out.append(REPLACEMENT_CHARACTER)
            else:
                out.append(chr(0x10000 +
                               ((high - 0xD800) << 10 | (unit - 0xDC00))))
                high = None
            continue
        if high is not None:
            out.append(REPLACEMENT_CHARACTER)
            high = None
        out.append(chr(unit))
    if high is not None:
        out.append(REPLACEMENT_CHARACTER)
    return ''.join(out)


def decode_ucs2_hex(hex_text):
    """Decode UCS-2 given as hex text, four hex digits per character.

    Some modems report text-mode UCS-2 messages this way. Text whose length
    isn't a multiple of four (or isn't hex at all) decodes to ''.
    """
    hex_text = hex_text.strip()
    if len(hex_text) % 4:
        return ''
    try:
        data = binascii.unhexlify(hex_text)
    except (binascii.Error, ValueError):
        return ''
    return decode_ucs2(data)
