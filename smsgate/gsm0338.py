#!/usr/bin/env python3
"""
Copyright (c) 2016-present, Facebook, Inc.
All rights reserved.

This source code is licensed under the BSD-style license found in the
LICENSE file in the root directory of this source tree. An additional grant
of patent rights can be found in the PATENTS file in the same directory.
"""

"""GSM 03.38 default alphabet and its single-shift extension table.

Only decoding is needed here: septets read from an SMS-DELIVER user data
field (or an alphanumeric originating address) map to unicode characters
through `BASIC_TABLE`, and the septet following an `ESCAPE` maps through
`EXTENSION_TABLE`.
"""

ESCAPE = 0x1B

# returned for escaped septets that have no extension table entry
UNKNOWN = '?'

# indexed by septet value; row comments give the first septet of each row
BASIC_TABLE = (
    # 0x00
    '@', '£', '$', '¥', 'è', 'é', 'ù', 'ì',
    'ò', 'Ç', '\n', 'Ø', 'ø', '\r', 'Å', 'å',
    # 0x10 (0x1b is the escape; NBSP is only a placeholder)
    'Δ', '_', 'Φ', 'Γ', 'Λ', 'Ω', 'Π', 'Ψ',
    'Σ', 'Θ', 'Ξ', '\xa0', 'Æ', 'æ', 'ß', 'É',
    # 0x20
    ' ', '!', '"', '#', '¤', '%', '&', "'",
    '(', ')', '*', '+', ',', '-', '.', '/',
    # 0x30
    '0', '1', '2', '3', '4', '5', '6', '7',
    '8', '9', ':', ';', '<', '=', '>', '?',
    # 0x40
    '¡', 'A', 'B', 'C', 'D', 'E', 'F', 'G',
    'H', 'I', 'J', 'K', 'L', 'M', 'N', 'O',
    # 0x50
    'P', 'Q', 'R', 'S', 'T', 'U', 'V', 'W',
    'X', 'Y', 'Z', 'Ä', 'Ö', 'Ñ', 'Ü', '§',
    # 0x60
    '¿', 'a', 'b', 'c', 'd', 'e', 'f', 'g',
    'h', 'i', 'j', 'k', 'l', 'm', 'n', 'o',
    # 0x70
    'p', 'q', 'r', 's', 't', 'u', 'v', 'w',
    'x', 'y', 'z', 'ä', 'ö', 'ñ', 'ü', 'à',
)

EXTENSION_TABLE = {0x0A: '\x0c',    # FORM FEED
                   0x14: '^',       # CIRCUMFLEX ACCENT
                   0x28: '{',       # LEFT CURLY BRACKET
                   0x29: '}',       # RIGHT CURLY BRACKET
                   0x2F: '\\',      # REVERSE SOLIDUS
                   0x3C: '[',       # LEFT SQUARE BRACKET
                   0x3D: '~',       # TILDE
                   0x3E: ']',       # RIGHT SQUARE BRACKET
                   0x40: '|',       # VERTICAL LINE
                   0x65: '€'}       # EURO SIGN

assert len(BASIC_TABLE) == 128


def lookup(septet, escaped=False):
    """Map one septet to its character.

    With `escaped` set the septet is the one following an ESCAPE and is
    looked up in the extension table, falling back to UNKNOWN.
    """
    if escaped:
        return EXTENSION_TABLE.get(septet, UNKNOWN)
    return BASIC_TABLE[septet & 0x7F]
