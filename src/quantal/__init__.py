import collections.abc
import configparser
import json
import os
import pathlib
import typing

from quantal.core import iotools


# read version from installed package
from importlib.metadata import version
__version__ = version("quantal")


DEFAULTS = {
    'precision': '34',
    'cache': 'false',
    'log_level': 'INFO',
}
"""Default values of recognized configuration parameters."""


class Settings(collections.abc.Mapping):
    """A collection of package-wide settings.

    Instances of this class look for a file called ``quantal.ini`` in a fixed
    sequence of locations and read its ``[quantal]`` section. Parameters that
    the file does not define, or all parameters if there is no such file,
    take their values from `DEFAULTS`.
    """

    def __init__(self, path: iotools.PathLike=None) -> None:
        home = pathlib.Path('~').expanduser()
        paths = [
            pathlib.Path.cwd(), # The current working directory
            home, # The user's home directory
            home / '.config', # Linux standard (local)
            os.environ.get('QUANTAL_INI'), # A known environment variable
            pathlib.Path(__file__).parent, # The package top
        ]
        config = configparser.ConfigParser()
        config.read_dict({'quantal': DEFAULTS})
        self.path = (
            iotools.existing(path) if path is not None
            else iotools.search(paths, 'quantal.ini')
        )
        if self.path is not None:
            config.read(self.path, encoding='utf-8')
        self._config = config['quantal']

    def __len__(self) -> int:
        """The number of available parameter values."""
        return len(self._config)

    def __iter__(self):
        """Iterate over available parameter values."""
        yield from self._config

    def __getitem__(self, key: str):
        """Access parameter values by mapping key."""
        if key in self._config:
            return self._config[key]
        raise KeyError(
            f"{__package__} has no value for {key!r}"
        ) from None

    def getint(self, key: str) -> int:
        """Convert the value of `key` to an integer."""
        return self._config.getint(key)

    def getboolean(self, key: str) -> bool:
        """Convert the value of `key` to a boolean."""
        return self._config.getboolean(key)

    def __str__(self) -> str:
        return json.dumps(
            dict(self._config),
            indent=4,
            sort_keys=True,
        )

    def __repr__(self) -> str:
        return f"{__package__}.Settings({self.path}):\n{self}"


def settings(**overrides: typing.Any) -> Settings:
    """Get package settings, with optional run-time overrides, and make them
    the active configuration.

    The result determines the number of digits in inexact values (see
    `~numerical.PRECISION`) and the level of the package logger until the
    next call. Calling this function without overrides restores the values
    from the configuration file.

    Parameters
    ----------
    **overrides
        Key-value pairs that replace the corresponding values from the
        configuration file. Keys must be recognized parameters.
    """
    current = Settings()
    for key, value in overrides.items():
        if key not in DEFAULTS:
            raise KeyError(f"Unknown setting {key!r}") from None
        current._config[key] = str(value)
    _activate(current)
    return current


def _activate(current: Settings) -> None:
    """Update the package state that depends on `current`."""
    from quantal.core import numerical
    from quantal import logger
    numerical.PRECISION = current.getint('precision')
    logger.set_level(current['log_level'])
