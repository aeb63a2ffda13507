"""Tests for environment-driven settings."""

import pytest

from csvgen.settings import Settings


def test_defaults_without_environment():
    """Verify unset variables fall back to defaults."""
    settings = Settings.from_env({})

    assert settings == Settings(template_file='config.json', log_level='WARNING', log_file=None, seed=None)


def test_environment_overrides():
    """Verify every variable is picked up."""
    settings = Settings.from_env({
        'CSVGEN_TEMPLATE_FILE': 'templates.json',
        'CSVGEN_LOG_LEVEL': 'debug',
        'CSVGEN_LOG_FILE': 'run.log',
        'CSVGEN_SEED': ' 42 ',
    })

    assert settings.template_file == 'templates.json'
    assert settings.log_level == 'DEBUG'
    assert settings.log_file == 'run.log'
    assert settings.seed == 42


def test_blank_values_use_defaults():
    """Verify empty variables count as unset."""
    settings = Settings.from_env({'CSVGEN_TEMPLATE_FILE': '', 'CSVGEN_SEED': ''})

    assert settings.template_file == 'config.json'
    assert settings.seed is None


def test_invalid_seed():
    """Verify a non-integer seed raises ValueError."""
    with pytest.raises(ValueError, match='CSVGEN_SEED'):
        Settings.from_env({'CSVGEN_SEED': '4.2'})


def test_reads_os_environ(monkeypatch):
    """Verify os.environ is used when no mapping is given."""
    monkeypatch.setenv('CSVGEN_TEMPLATE_FILE', 'from_env.json')

    assert Settings.from_env().template_file == 'from_env.json'
