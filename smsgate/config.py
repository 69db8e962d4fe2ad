"""Gateway configuration.

Copyright (c) 2016-present, Facebook, Inc.
All rights reserved.

This source code is licensed under the BSD-style license found in the
LICENSE file in the root directory of this source tree. An additional grant
of patent rights can be found in the PATENTS file in the same directory.
"""

import os

from . import logger


ENV_PREFIX = 'SMSGATE_'

DEFAULTS = {
    # seconds a partially received multi-part message is kept
    'concat_timeout': 300,
    # seconds between two cleanup passes over the reassembly buffers
    'cleanup_interval': 60,
    # reassemble by (sender, reference) rather than reference alone
    'concat_key_by_sender': True,
    'log_level': 'WARNING',
}


class GatewayConfig(dict):
    """A configuration dictionary seeded with DEFAULTS.

    Values are overridden, in order, by SMSGATE_<KEY> environment variables
    and by explicit keyword arguments. Strings are ducktyped into ints,
    floats, bools and None the way they'd be read back from a key-value
    store.
    """

    def __init__(self, environ=None, **overrides):
        super(GatewayConfig, self).__init__(DEFAULTS)
        if environ is None:
            environ = os.environ
        for key in DEFAULTS:
            env_key = ENV_PREFIX + key.upper()
            if env_key in environ:
                self[key] = environ[env_key]
        for key, value in overrides.items():
            if key not in DEFAULTS:
                raise KeyError('unknown setting: %s' % (key, ))
            self[key] = value

    @staticmethod
    def _ducktype(value):
        """Very simple typing.

        We try to cast to an integer, then a float. If neither works and the
        value *exactly* matches "True"/"true", "False"/"false" or "None" we
        return that; otherwise the string itself.
        """
        if value is None or not isinstance(value, str):
            return value
        try:
            return int(value)
        except ValueError:
            pass
        try:
            return float(value)
        except ValueError:
            pass
        if value in ("True", "true"):
            return True
        elif value in ("False", "false"):
            return False
        elif value == "None":
            return None
        return value

    def __getitem__(self, key):
        return self._ducktype(super(GatewayConfig, self).__getitem__(key))

    def get(self, key, default=None):
        if key in self:
            return self[key]
        return default

    def apply_logging(self):
        """Set the smsgate logger level from 'log_level'."""
        logger.DefaultLogger.update_handler(level=self['log_level'])
