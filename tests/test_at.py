#!/usr/bin/env python3
"""
Copyright (c) 2016-present, Facebook, Inc.
All rights reserved.

This source code is licensed under the BSD-style license found in the
LICENSE file in the root directory of this source tree. An additional grant
of patent rights can be found in the PATENTS file in the same directory.
"""
import unittest

import mock

from smsgate import at

PDU_1 = ('07917283010010F5040B919721436587F90000521051900300400A'
         'E8329BFD4697D9EC37')
PDU_2 = '00040BC87238880900F10000993092516195800AE8329BFD4697D9EC37'


class CMGRTest(unittest.TestCase):

    def test_read(self):
        response = '+CMGR: 0,,36\r\n%s\r\n\r\nOK\r\n' % PDU_1
        self.assertEqual(at.parse_cmgr(response),
                         at.StoredPDU(None, at.REC_UNREAD, 36, PDU_1))

    def test_with_echo(self):
        response = 'AT+CMGR=3\r\n+CMGR: 1,"",28\r\n%s\r\nOK\r\n' % PDU_2
        stored = at.parse_cmgr(response)
        self.assertEqual(stored.status, at.REC_READ)
        self.assertEqual(stored.length, 28)
        self.assertEqual(stored.pdu, PDU_2)

    def test_empty_slot(self):
        self.assertIsNone(at.parse_cmgr('OK\r\n'))
        self.assertIsNone(at.parse_cmgr('+CMS ERROR: 321\r\n'))

    def test_header_without_pdu(self):
        with mock.patch('smsgate.at.logger') as mock_logger:
            self.assertIsNone(at.parse_cmgr('+CMGR: 0,,36\r\n\r\nOK\r\n'))
        self.assertTrue(mock_logger.warning.called)

    def test_malformed_header(self):
        with mock.patch('smsgate.at.logger') as mock_logger:
            self.assertIsNone(at.parse_cmgr('+CMGR: x,,y\r\n%s\r\n' % PDU_1))
        self.assertTrue(mock_logger.warning.called)


class CMGLTest(unittest.TestCase):

    def test_listing(self):
        response = ('+CMGL: 1,0,,36\r\n%s\r\n'
                    '+CMGL: 4,1,"",28\r\n%s\r\n'
                    '\r\nOK\r\n' % (PDU_1, PDU_2))
        self.assertEqual(at.parse_cmgl(response), [
            at.StoredPDU(1, at.REC_UNREAD, 36, PDU_1),
            at.StoredPDU(4, at.REC_READ, 28, PDU_2),
        ])

    def test_empty_listing(self):
        self.assertEqual(at.parse_cmgl('OK\r\n'), [])
        self.assertEqual(at.parse_cmgl(''), [])

    def test_bad_entries_skipped(self):
        response = ('+CMGL: 1\r\n%s\r\n'
                    '+CMGL: 2,0,,36\r\n'
                    '+CMGL: 3,0,,36\r\n%s\r\n'
                    'OK\r\n' % (PDU_1, PDU_1))
        with mock.patch('smsgate.at.logger') as mock_logger:
            stored = at.parse_cmgl(response)
        self.assertEqual([s.index for s in stored], [3])
        self.assertEqual(mock_logger.warning.call_count, 2)
