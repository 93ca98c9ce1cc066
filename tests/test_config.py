#!/usr/bin/env python3
"""
Tests for the configuration file handling.
"""

from pathlib import Path

import pytest
import yaml

from composectl.core.config import (
    DEFAULT_ROOT,
    Config,
    ProjectConfig,
    ServiceConfig,
    ensure_default_config,
    load_config,
    load_settings,
    save_config,
)
from composectl.core.exceptions import ConfigError


class TestConfig:
    """Test loading and saving the configuration file."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / 'projects.yml')
        assert config.root == DEFAULT_ROOT
        assert config.projects == {}

    def test_ensure_default_config(self, tmp_path):
        path = tmp_path / 'sub' / 'projects.yml'
        assert ensure_default_config(path) is True
        assert path.exists()
        assert yaml.safe_load(path.read_text()) == {'root': DEFAULT_ROOT, 'projects': {}}
        assert ensure_default_config(path) is False

    def test_save_and_load(self, tmp_path):
        path = tmp_path / 'projects.yml'
        config = Config(root='/srv/docker', projects={
            'shop': ProjectConfig(
                path='/opt/shop',
                services=[ServiceConfig(name='web', health_check='http://localhost/health')],
                env={'APP_ENV': 'dev'}
            )
        })
        save_config(config, path)

        loaded = load_config(path)
        assert loaded == config
        assert not list(tmp_path.glob('projects_*.yml'))

    def test_service_names_as_strings(self, tmp_path):
        path = tmp_path / 'projects.yml'
        path.write_text("projects:\n  shop:\n    services: [web, db]\n    env:\n      PORT: 8080\n")
        shop = load_config(path).get_project_config('shop')
        assert [s.name for s in shop.services] == ['web', 'db']
        assert shop.env == {'PORT': '8080'}

    def test_unknown_project_gives_empty_config(self):
        assert Config().get_project_config('nope') == ProjectConfig()

    @pytest.mark.parametrize("content", [
        "projects: [1, 2]\n",
        "- a\n- b\n",
        "projects:\n  shop:\n    env: [a]\n",
        "root: [unclosed\n",
    ])
    def test_invalid_config(self, tmp_path, content):
        path = tmp_path / 'projects.yml'
        path.write_text(content)
        with pytest.raises(ConfigError):
            load_config(path)


def test_load_settings_explicit_root_wins(tmp_path):
    path = tmp_path / 'projects.yml'
    path.write_text("root: /from/config\n")

    assert load_settings(path).root == Path('/from/config')
    assert load_settings(path, tmp_path / 'cli').root == tmp_path / 'cli'
    assert load_settings(path).log_dir == tmp_path / 'logs'


def test_load_settings_expands_home(tmp_path, monkeypatch):
    monkeypatch.setenv('HOME', str(tmp_path))
    settings = load_settings(tmp_path / 'projects.yml')
    assert settings.root == tmp_path / 'devwww' / 'docker'
