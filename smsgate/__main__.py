"""Decode SMS-DELIVER PDUs from the command line.

Copyright (c) 2016-present, Facebook, Inc.
All rights reserved.

This source code is licensed under the BSD-style license found in the
LICENSE file in the root directory of this source tree. An additional grant
of patent rights can be found in the PATENTS file in the same directory.
"""

import argparse
import logging
import sys

from . import logger
from .config import GatewayConfig
from .gateway import Inbox
from .pdu import PDUDecodeError, parse


def _show(message, as_json, out):
    if as_json:
        print(message.to_json(), file=out)
    else:
        print(file=out)
        print(message.dump(), file=out)


def main(argv=None, out=None):
    if out is None:
        out = sys.stdout
    parser = argparse.ArgumentParser(
        prog='smsgate',
        description='Decode SMS-DELIVER PDUs as read from a modem in PDU '
                    'mode.')
    parser.add_argument(
        "pdu",
        nargs='*',
        help="PDU hex string(s), SMSC address included")
    parser.add_argument(
        "-l", "--listing",
        type=argparse.FileType('r'),
        default=None,
        help="file holding an AT+CMGL response ('-' for stdin); "
             "multi-part messages are reassembled")
    parser.add_argument(
        "-j", "--json",
        action='store_true',
        default=False,
        help="print delivery payloads as JSON")
    parser.add_argument(
        "-v", "--verbose",
        action='store_true',
        default=False,
        help="log decoding details to stderr")
    args = parser.parse_args(argv)

    if not args.pdu and args.listing is None:
        parser.error("give PDUs or --listing")

    config = GatewayConfig()
    if args.verbose:
        logger.DefaultLogger.update_handler(
            logging.StreamHandler(sys.stderr), logging.DEBUG, verbose=True)
    else:
        config.apply_logging()

    status = 0
    for pdu in args.pdu:
        try:
            message = parse(pdu)
        except PDUDecodeError as e:
            print('%s: %s' % (pdu, e), file=sys.stderr)
            status = 1
            continue
        _show(message, args.json, out)

    if args.listing is not None:
        inbox = Inbox(config)
        with args.listing as f:
            messages = inbox.receive_listing(f.read())
        for message in messages:
            _show(message, args.json, out)
        if len(inbox.concatenator):
            print('%d incomplete multi-part message(s)'
                  % len(inbox.concatenator), file=sys.stderr)
    return status


if __name__ == '__main__':
    sys.exit(main())
