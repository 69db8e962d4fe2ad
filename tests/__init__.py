""" Direct logging output to stdout during testing.

Copyright (c) 2016-present, Facebook, Inc.
All rights reserved.

This source code is licensed under the BSD-style license found in the
LICENSE file in the root directory of this source tree. An additional grant
of patent rights can be found in the PATENTS file in the same directory.
"""

from logging import StreamHandler, DEBUG
# use stdout for output since the test runner captures it per test
from sys import stdout

from smsgate.logger import DefaultLogger, notice

DefaultLogger.update_handler(StreamHandler(stdout), DEBUG)
notice("directing logger output to stdout during testing")


def pack7bit(septets, fill_bits=0):
    """ Pack a sequence of septet values (ints) into octets, starting
    fill_bits into the first octet. Tests use it to build user data. """
    n = fill_bits
    bignum = 0
    for septet in septets:
        bignum |= (septet & 0x7F) << n
        n += 7
    out = []
    while n > 0:
        out.append(bignum & 0xFF)
        bignum >>= 8
        n -= 8
    return bytes(bytearray(out))
