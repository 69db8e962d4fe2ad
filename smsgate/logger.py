"""smsgate loggers.

We create a standard logging.Logger object to be used through the
module-level functions below (debug(), notice(), warning() etc.). We also
install a syslog handler on the root logger so that everything logged via
the logging module ends up in syslog, which is where the gateway's other
daemons send their output as well.

Copyright (c) 2016-present, Facebook, Inc.
All rights reserved.

This source code is licensed under the BSD-style license found in the
LICENSE file in the root directory of this source tree. An additional grant
of patent rights can be found in the PATENTS file in the same directory.
"""

import errno
import logging
from logging.handlers import SysLogHandler
from os import environ
from sys import stderr
from syslog import LOG_DEBUG, LOG_LOCAL0
import traceback


# add a 'notice' level, between WARNING (30)  and INFO (20)
NOTICE = 25
logging.addLevelName(NOTICE, "NOTICE")

SIMPLE_FORMAT = "%(filename)s:%(lineno)d:%(funcName)s: %(message)s"
VERBOSE_FORMAT = "[%(levelname)s] " + SIMPLE_FORMAT

# these are syslog log levels
LOG_LEVELS = ['EMERGENCY', 'ALERT', 'CRITICAL', 'ERROR', 'WARNING', 'NOTICE',
              'INFO', 'DEBUG']


class DefaultLogger(object):
    """ Capture state of default logging config.

    SMSGATE_LOGGER_NAME selects the logger name, e.g., to fold our output
    into that of an embedding application.
    """
    _log = logging.getLogger(environ.get("SMSGATE_LOGGER_NAME", "smsgate"))
    _log_formatter = logging.Formatter("smsgate: " + SIMPLE_FORMAT)
    _log_verbose = logging.Formatter(VERBOSE_FORMAT)
    _log_handler = None

    @classmethod
    def log(cls, level, message, tb_offset=2):
        """ Log message with the file/function/lineno of the caller.

        tb_offset counts stack frames back to the caller: 2 for direct calls
        to this method, 4 for the module-level functions (which add their
        own frame and that of _handle_log_event()).
        """
        assert tb_offset >= 2
        # Logger.handle() doesn't check levels, and skipping early saves us
        # walking the stack for messages nobody wants.
        if not cls._log.isEnabledFor(level):
            return

        tb = traceback.extract_stack(limit=tb_offset)
        (pathname, lineno, function, _) = tb[0]
        rec = cls._log.makeRecord(cls._log.name, level, pathname, lineno,
                                  message, args=None, exc_info=None,
                                  func=function)
        cls._log.handle(rec)

    @staticmethod
    def _get_logging_level(level):
        """ Map a syslog level (0 is EMERGENCY, 7 is DEBUG) to a logging
        level. Values that already look like logging levels (>= 10) pass
        through unchanged. """
        assert level >= 0
        if level >= logging.DEBUG:
            return level
        if level > LOG_DEBUG:
            return logging.DEBUG
        return [
            logging.CRITICAL,  # syslog.LOG_EMERG
            logging.CRITICAL,  # syslog.LOG_ALERT,
            logging.CRITICAL,  # syslog.LOG_CRIT,
            logging.ERROR,     # syslog.LOG_ERR,
            logging.WARNING,   # syslog.LOG_WARNING,
            NOTICE,            # syslog.LOG_NOTICE,
            logging.INFO,      # syslog.LOG_INFO,
            logging.DEBUG,     # syslog.LOG_DEBUG
        ][level]

    @classmethod
    def update_handler(cls, handler=None, level=None, verbose=False):
        """ Install handler on the root logger (replacing the one we
        installed before, if any) and/or set our logger's level.

        level is either a logging/syslog number or one of LOG_LEVELS.
        """
        root = logging.getLogger()
        if level is not None:
            if not isinstance(level, int):
                try:
                    level = LOG_LEVELS.index(str(level).upper())
                except ValueError:
                    cls.log(logging.WARNING,
                            "invalid log level: '%s'" % (level, ))
                    level = None
            if level is not None:
                cls._log.setLevel(cls._get_logging_level(level))
        if handler:
            if cls._log_handler:
                root.removeHandler(cls._log_handler)
            cls._log_handler = handler
            root.addHandler(handler)
        if cls._log_handler:
            cls._log_handler.setFormatter(
                cls._log_verbose if verbose else cls._log_formatter)
        if handler:
            cls.log(logging.DEBUG,
                    "set default log handler to %s" % (handler, ))


def _install_syslog_handler():
    # an empty socket name means the embedding application has its own
    # handlers and we shouldn't add ours
    sock = environ.get('SMSGATE_SYSLOG_SOCKET', '/dev/log')
    handler = None
    try:
        if sock:
            handler = SysLogHandler(address=sock, facility=LOG_LOCAL0)
    except IOError as ex:
        if ex.errno != errno.ENOENT:
            raise
        print("unable to connect to syslog at %s: %s" % (sock, ex),
              file=stderr)
    # note that we're setting the level of the logger, not handler, here
    DefaultLogger.update_handler(handler, logging.WARNING)


_install_syslog_handler()


def critical(message, **kwargs):
    _handle_log_event(logging.CRITICAL, message, **kwargs)

def error(message, **kwargs):
    _handle_log_event(logging.ERROR, message, **kwargs)

def warning(message, **kwargs):
    _handle_log_event(logging.WARNING, message, **kwargs)

def notice(message, **kwargs):
    _handle_log_event(NOTICE, message, **kwargs)

def info(message, **kwargs):
    _handle_log_event(logging.INFO, message, **kwargs)

def debug(message, **kwargs):
    _handle_log_event(logging.DEBUG, message, **kwargs)

def _handle_log_event(priority, message, **kwargs):
    """ Append keyword arguments to message as sorted key=value pairs. """
    tb_offset = kwargs.pop('tb_offset', 0) + 4
    if kwargs:
        message = " ".join([message] +
                           [('%s=%s' % (k, v)) for (k, v) in
                            sorted(kwargs.items(), key=lambda i: i[0])])
    DefaultLogger.log(priority, message, tb_offset)
