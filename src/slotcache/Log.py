#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import logging
import threading
import time


class LogLevel:
    """
    LogLevel represents the severity of a log message.
    """

    _levels = {}

    def __init__(self, name, ordinal, py_level):
        self._name = name
        self._ordinal = ordinal
        self._py_level = py_level

    @staticmethod
    def from_str(name, checked=True):
        """Parse LogLevel from string"""
        level = LogLevel._levels.get(str(name).strip().lower())
        if level is not None:
            return level
        if checked:
            from .Err import ArgErr
            raise ArgErr.make(f"Unknown log level: {name}")
        return None

    @staticmethod
    def vals():
        """Get all log level values"""
        return [LogLevel.debug, LogLevel.info, LogLevel.warn, LogLevel.err, LogLevel.silent]

    def name(self):
        return self._name

    def ordinal(self):
        return self._ordinal

    def to_str(self):
        return self._name

    def __lt__(self, other):
        return self._ordinal < other._ordinal

    def __le__(self, other):
        return self._ordinal <= other._ordinal

    def __repr__(self):
        return f"LogLevel({self._name})"


LogLevel.debug = LogLevel("debug", 0, logging.DEBUG)
LogLevel.info = LogLevel("info", 1, logging.INFO)
LogLevel.warn = LogLevel("warn", 2, logging.WARNING)
LogLevel.err = LogLevel("err", 3, logging.ERROR)
LogLevel.silent = LogLevel("silent", 4, logging.CRITICAL + 10)

for _level in LogLevel.vals():
    LogLevel._levels[_level.name()] = _level
LogLevel._levels["warning"] = LogLevel.warn
LogLevel._levels["error"] = LogLevel.err


class LogRec:
    """
    LogRec represents a single log record.
    """

    def __init__(self, time, level, log_name, msg, err=None):
        self._time = time
        self._level = level
        self._log_name = log_name
        self._msg = msg
        self._err = err

    def time(self):
        return self._time

    def level(self):
        return self._level

    def log_name(self):
        return self._log_name

    def msg(self):
        return self._msg

    def err(self):
        return self._err

    def to_str(self):
        return f"[{self._level.name()}] {self._log_name}: {self._msg}"

    def __str__(self):
        return self.to_str()


class Log:
    """
    Log provides logging functionality.

    Records go to every global handler and then to the standard
    ``logging`` logger of the same name.
    """

    _logs = {}
    _handlers = []
    _lock = threading.Lock()

    def __init__(self, name, register=True):
        if not Log._is_valid_name(name):
            from .Err import ArgErr
            raise ArgErr.make(f"Invalid log name: {name}")

        self._name = name
        self._level = LogLevel.info
        self._py_logger = logging.getLogger(name)

        if register:
            with Log._lock:
                if name in Log._logs:
                    from .Err import ArgErr
                    raise ArgErr.make(f"Log already registered: {name}")
                Log._logs[name] = self

    @staticmethod
    def _is_valid_name(name):
        if not name:
            return False
        for c in name:
            if not (c.isalnum() or c == '.' or c == '_'):
                return False
        return True

    @staticmethod
    def get(name):
        """Get or create a log by name.

        New logs take their initial level from the ``log.level`` config key.
        """
        log = Log._logs.get(name)
        if log is not None:
            return log
        with Log._lock:
            log = Log._logs.get(name)
            if log is not None:
                return log
            log = Log(name, register=False)
            Log._logs[name] = log

        from .Env import Env
        level = LogLevel.from_str(Env.cur().config("log.level", "info"), False)
        if level is not None:
            log.level(level)
        return log

    @staticmethod
    def find(name, checked=True):
        """Find a log by name"""
        log = Log._logs.get(name)
        if log is not None:
            return log
        if checked:
            from .Err import ArgErr
            raise ArgErr.make(f"Unknown log: {name}")
        return None

    def name(self):
        return self._name

    def level(self, value=None):
        """Get or set log level - log.level() or log.level(new_level)"""
        if value is None:
            return self._level
        self._level = value
        return None

    def is_enabled(self, level):
        return level._ordinal >= self._level._ordinal and level is not LogLevel.silent

    def is_debug(self):
        return self.is_enabled(LogLevel.debug)

    def debug(self, msg, err=None):
        if self.is_enabled(LogLevel.debug):
            self.log(LogRec(time.time(), LogLevel.debug, self._name, msg, err))

    def info(self, msg, err=None):
        if self.is_enabled(LogLevel.info):
            self.log(LogRec(time.time(), LogLevel.info, self._name, msg, err))

    def warn(self, msg, err=None):
        if self.is_enabled(LogLevel.warn):
            self.log(LogRec(time.time(), LogLevel.warn, self._name, msg, err))

    def err(self, msg, err=None):
        if self.is_enabled(LogLevel.err):
            self.log(LogRec(time.time(), LogLevel.err, self._name, msg, err))

    def log(self, rec):
        """Log a record - can be overridden by subclasses"""
        for handler in list(Log._handlers):
            try:
                handler(rec)
            except Exception:
                # handlers must never break the code being logged
                self._py_logger.debug("log handler failed", exc_info=True)

        exc_info = None
        if rec._err is not None:
            exc_info = (type(rec._err), rec._err, rec._err.__traceback__)
        self._py_logger.log(rec._level._py_level, rec._msg, exc_info=exc_info)

    def to_str(self):
        return self._name

    @staticmethod
    def handlers():
        """Get global log handlers"""
        return list(Log._handlers)

    @staticmethod
    def add_handler(handler):
        """Add a global log handler"""
        if not callable(handler):
            from .Err import ArgErr
            raise ArgErr.make("Handler must be callable")
        with Log._lock:
            Log._handlers.append(handler)

    @staticmethod
    def remove_handler(handler):
        """Remove a global log handler"""
        with Log._lock:
            if handler in Log._handlers:
                Log._handlers.remove(handler)
