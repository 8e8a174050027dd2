import logging
import pathlib

import pytest

import quantal
from quantal import logger
from quantal.core import iotools
from quantal.core import numerical


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """An isolated directory tree with no configuration files."""
    home = tmp_path / 'home'
    home.mkdir()
    work = tmp_path / 'work'
    work.mkdir()
    monkeypatch.setenv('HOME', str(home))
    monkeypatch.delenv('QUANTAL_INI', raising=False)
    monkeypatch.chdir(work)
    return {'home': home, 'work': work, 'root': tmp_path}


def write_ini(directory: pathlib.Path, **values) -> pathlib.Path:
    """Write a configuration file in `directory`."""
    lines = ['[quantal]'] + [f"{k} = {v}" for k, v in values.items()]
    path = directory / 'quantal.ini'
    path.write_text('\n'.join(lines), encoding='utf-8')
    return path


def test_defaults(workspace):
    """Without a file, every parameter has its default value."""
    settings = quantal.Settings()
    assert settings.path is None
    assert dict(settings) == quantal.DEFAULTS
    assert settings.getint('precision') == 34
    assert not settings.getboolean('cache')
    assert settings['log_level'] == 'INFO'
    with pytest.raises(KeyError):
        settings['colour']


def test_search_order(workspace):
    """The current directory takes precedence over the home directory."""
    write_ini(workspace['home'], precision=50)
    settings = quantal.Settings()
    assert settings.path == workspace['home'].resolve() / 'quantal.ini'
    assert settings.getint('precision') == 50
    assert settings['cache'] == 'false'
    write_ini(workspace['work'], precision=20)
    assert quantal.Settings().getint('precision') == 20


def test_config_directory(workspace):
    """Look for a file in the user's configuration directory."""
    config = workspace['home'] / '.config'
    config.mkdir()
    write_ini(config, cache='yes')
    assert quantal.Settings().getboolean('cache')


def test_environment(workspace, monkeypatch):
    """Look for a file in the directory named by QUANTAL_INI."""
    other = workspace['root'] / 'other'
    other.mkdir()
    write_ini(other, log_level='DEBUG')
    monkeypatch.setenv('QUANTAL_INI', str(other))
    assert quantal.Settings()['log_level'] == 'DEBUG'


def test_explicit_path(workspace):
    """Read a file at a given path."""
    path = write_ini(workspace['root'], precision=12)
    assert quantal.Settings(path).getint('precision') == 12
    with pytest.raises(iotools.NonExistentPathError):
        quantal.Settings(workspace['root'] / 'missing.ini')


def test_overrides(workspace):
    """Override parameter values at run time."""
    settings = quantal.settings(cache=True, precision=10)
    assert settings.getboolean('cache')
    assert settings.getint('precision') == 10
    assert not quantal.Settings().getboolean('cache')
    with pytest.raises(KeyError):
        quantal.settings(colour='red')


def test_precision_override(workspace):
    """Overriding the precision changes the digits of inexact values."""
    quantal.settings(precision=10)
    assert numerical.PRECISION == 10
    assert str(numerical.Factor(1, 1).evaluate()) == '3.141592654'
    assert str(numerical.Factor(1, 1).evaluate(5)) == '3.1416'
    quantal.settings()
    assert numerical.PRECISION == 34
    expected = '3.141592653589793238462643383279503'
    assert str(numerical.Factor(1, 1).evaluate()) == expected


def test_log_level_override(workspace):
    """Overriding the log level changes the level of the package logger."""
    package = logging.getLogger('quantal')
    quantal.settings(log_level='debug')
    assert logger.LEVEL == 'DEBUG'
    assert package.level == logging.DEBUG
    quantal.settings()
    assert package.level == logging.INFO
    logger.enable_file_logging(str(workspace['work'] / 'debug.log'))
    quantal.settings(log_level='WARNING')
    assert package.level == logging.DEBUG
    logger.disable_file_logging()
    assert package.level == logging.WARNING


def test_search(tmp_path):
    """Search a sequence of optional directories for a file."""
    target = tmp_path / 'found.txt'
    target.write_text('here', encoding='utf-8')
    paths = [None, tmp_path / 'missing', tmp_path]
    assert iotools.search(paths, 'found.txt') == target.resolve()
    assert iotools.search(paths, 'other.txt') is None
