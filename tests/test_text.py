#!/usr/bin/env python3
"""
Copyright (c) 2016-present, Facebook, Inc.
All rights reserved.

This source code is licensed under the BSD-style license found in the
LICENSE file in the root directory of this source tree. An additional grant
of patent rights can be found in the PATENTS file in the same directory.
"""
import string
import unittest

from smsgate import gsm0338
from smsgate.text import (decode_gsm7, decode_ucs2, decode_ucs2_hex,
                          REPLACEMENT_CHARACTER)

from . import pack7bit


class GSM7Test(unittest.TestCase):

    def test_decoding_7_bit(self):
        input_bytes = [0xE8, 0x32, 0x9B, 0xFD, 0x46, 0x97, 0xD9, 0xEC, 0x37]
        self.assertEqual(decode_gsm7(bytes(input_bytes), 10), 'hellohello')

    def test_ascii_compatible_range(self):
        # everything in 0x20..0x7e that the default alphabet keeps in place
        text = (string.ascii_letters + string.digits +
                ' !"#%&\'()*+,-./:;<=>?')
        packed = pack7bit([ord(c) for c in text])
        self.assertEqual(decode_gsm7(packed, len(text)), text)

    def test_fewer_chars_than_data(self):
        input_bytes = [0xE8, 0x32, 0x9B, 0xFD, 0x46, 0x97, 0xD9, 0xEC, 0x37]
        self.assertEqual(decode_gsm7(bytes(input_bytes), 5), 'hello')

    def test_national_characters(self):
        septets = [0x10, 0x12, 0x1C, 0x5F, 0x01, 0x7F]
        self.assertEqual(decode_gsm7(pack7bit(septets), len(septets)),
                         'ΔΦÆ§£à')

    def test_escape_euro(self):
        self.assertEqual(decode_gsm7(pack7bit([0x1B, 0x65]), 2), '€')

    def test_escape_unmapped(self):
        self.assertEqual(decode_gsm7(pack7bit([0x1B, 0x41]), 2),
                         gsm0338.UNKNOWN)

    def test_extension_table(self):
        septets = []
        for code in (0x0A, 0x14, 0x28, 0x29, 0x2F, 0x3C, 0x3D, 0x3E, 0x40):
            septets.extend([0x1B, code])
        self.assertEqual(decode_gsm7(pack7bit(septets), len(septets)),
                         '\x0c^{}\\[~]|')

    def test_escape_consumes_septet(self):
        # 'a', ESC '(', 'b': four septets, three characters
        septets = [0x61, 0x1B, 0x28, 0x62]
        self.assertEqual(decode_gsm7(pack7bit(septets), 4), 'a{b')

    def test_trailing_escape_is_dropped(self):
        self.assertEqual(decode_gsm7(pack7bit([0x61, 0x1B]), 2), 'a')

    def test_bit_offset(self):
        # text after a 6 octet UDH starts one fill bit into its octet
        packed = pack7bit([ord(c) for c in 'hello'], fill_bits=1)
        self.assertEqual(decode_gsm7(packed, 5, 1), 'hello')
        for offset in range(7):
            packed = pack7bit([ord(c) for c in 'offset'], fill_bits=offset)
            self.assertEqual(decode_gsm7(packed, 6, offset), 'offset')

    def test_short_data_reads_zero(self):
        # missing bits decode as septet 0, i.e. '@'
        self.assertEqual(decode_gsm7(b'', 2), '@@')


class UCS2Test(unittest.TestCase):

    def test_basic(self):
        data = 'Hello © Ж €'.encode('utf-16-be')
        self.assertEqual(decode_ucs2(data), 'Hello © Ж €')

    def test_byte_count(self):
        data = 'Hello'.encode('utf-16-be')
        self.assertEqual(decode_ucs2(data, 4), 'He')

    def test_bom_skipped(self):
        self.assertEqual(decode_ucs2(b'\xfe\xff\x00A'), 'A')
        self.assertEqual(decode_ucs2(b'\xff\xfe\x00A'), 'A')

    def test_surrogate_pair(self):
        text = decode_ucs2(b'\xd8\x3d\xde\x00')
        self.assertEqual(text, '\U0001F600')
        self.assertEqual(text.encode('utf-8'), b'\xf0\x9f\x98\x80')

    def test_lone_low_surrogate(self):
        self.assertEqual(decode_ucs2(b'\x00A\xde\x00\x00B'),
                         'A' + REPLACEMENT_CHARACTER + 'B')

    def test_high_surrogate_without_low(self):
        self.assertEqual(decode_ucs2(b'\xd8\x3d\x00B'),
                         REPLACEMENT_CHARACTER + 'B')
        self.assertEqual(decode_ucs2(b'\x00A\xd8\x3d'),
                         'A' + REPLACEMENT_CHARACTER)

    def test_odd_trailing_byte_ignored(self):
        self.assertEqual(decode_ucs2(b'\x00A\x00'), 'A')

    def test_hex(self):
        self.assertEqual(decode_ucs2_hex('041F04400438'), 'При')
        self.assertEqual(decode_ucs2_hex('041F0'), '')
        self.assertEqual(decode_ucs2_hex('ZZZZ'), '')
