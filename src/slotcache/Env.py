#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import os


class Env:
    """Process configuration for slotcache.

    Config keys resolve from the environment first (``SLOTCACHE_<KEY>``,
    dots become underscores), then ``etc/slotcache/config.props`` under the
    working directory, then the caller's default.
    """

    _instance = None

    # Prefix for environment variable overrides
    ENV_PREFIX = "SLOTCACHE_"

    def __init__(self, work_dir=None):
        self._work_dir = work_dir
        self._props = None  # Lazily loaded config.props

    @staticmethod
    def cur():
        if Env._instance is None:
            Env._instance = Env()
        return Env._instance

    @staticmethod
    def reload():
        """Drop the current instance so config is re-read on next access."""
        Env._instance = None

    def work_dir(self):
        return self._work_dir if self._work_dir is not None else os.getcwd()

    def config_file(self):
        return os.path.join(self.work_dir(), "etc", "slotcache", "config.props")

    def props(self):
        """Return the parsed config.props as a dict (empty if no file)."""
        if self._props is None:
            self._props = Env.read_props(self.config_file())
        return self._props

    @staticmethod
    def read_props(path):
        """Parse a props file of ``key=value`` lines.

        Blank lines and lines starting with ``#`` or ``//`` are skipped.
        Missing files yield an empty dict.
        """
        props = {}
        if not os.path.isfile(path):
            return props
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#") or line.startswith("//"):
                    continue
                eq = line.find("=")
                if eq < 0:
                    continue
                props[line[:eq].strip()] = line[eq + 1:].strip()
        return props

    def config(self, key, def_val=None):
        """Get configuration value.

        Args:
            key: Config key like 'log.level'
            def_val: Default value if not configured

        Returns:
            Config value string or def_val
        """
        env_key = Env.ENV_PREFIX + key.replace(".", "_").upper()
        val = os.environ.get(env_key)
        if val is not None:
            return val
        val = self.props().get(key)
        if val is not None:
            return val
        return def_val

    def config_int(self, key, def_val):
        val = self.config(key)
        if val is None:
            return def_val
        try:
            return int(val)
        except ValueError:
            from .Log import Log
            Log.get("slotcache").warn(f"Invalid int for config {key}: {val!r}")
            return def_val

    def config_bool(self, key, def_val):
        val = self.config(key)
        if val is None:
            return def_val
        return str(val).strip().lower() in ("true", "1", "yes", "on")
