#!/usr/bin/env python3
"""
Tests for project discovery.
"""

import pytest

from composectl.core.config import Config, ProjectConfig
from composectl.core.discovery import ProjectDiscovery, find_project, project_name_from_dir
from composectl.core.exceptions import DiscoveryRootNotFound, ProjectNotFound


def test_project_name_from_dir():
    assert project_name_from_dir('docker-MyShop') == 'myshop'
    assert project_name_from_dir('docker-api') == 'api'


def test_discovers_only_valid_projects(projects_root):
    projects = ProjectDiscovery(projects_root).discover()
    assert [p.name for p in projects] == ['web', 'api']
    assert projects[0].path == projects_root / 'docker-Web'
    assert projects[0].compose_path == projects_root / 'docker-Web' / 'docker-compose.yml'
    assert all(not p.running and p.service_count == 0 for p in projects)


def test_duplicate_names_are_skipped(projects_root):
    (projects_root / 'docker-web').mkdir()
    (projects_root / 'docker-web' / 'docker-compose.yml').write_text("services: {}\n")
    names = [p.name for p in ProjectDiscovery(projects_root).discover()]
    assert names.count('web') == 1


def test_missing_root_raises(tmp_path):
    with pytest.raises(DiscoveryRootNotFound):
        ProjectDiscovery(tmp_path / 'missing').discover()


def test_registered_projects(tmp_path, projects_root):
    shop = tmp_path / 'elsewhere' / 'shop'
    shop.mkdir(parents=True)
    (shop / 'docker-compose.yml').write_text("services: {}\n")
    config = Config(projects={
        'shop': ProjectConfig(path=str(shop)),
        'web': ProjectConfig(path=str(shop)),
        'ghost': ProjectConfig(path=str(tmp_path / 'nowhere')),
    })

    projects = ProjectDiscovery(projects_root, config).discover()
    assert [p.name for p in projects] == ['web', 'api', 'shop']
    assert projects[0].path == projects_root / 'docker-Web'


def test_registered_projects_without_root(tmp_path):
    shop = tmp_path / 'shop'
    shop.mkdir()
    (shop / 'docker-compose.yml').write_text("services: {}\n")
    config = Config(projects={'shop': ProjectConfig(path=str(shop))})

    projects = ProjectDiscovery(tmp_path / 'missing', config).discover()
    assert [p.name for p in projects] == ['shop']


def test_project_env(projects_root):
    (projects_root / 'docker-api' / '.env').write_text("APP_ENV=prod\nPORT=8000\n")
    config = Config(projects={'api': ProjectConfig(env={'APP_ENV': 'dev'})})

    api = find_project(ProjectDiscovery(projects_root, config).discover(), 'api')
    assert api.env == {'APP_ENV': 'dev', 'PORT': '8000'}


def test_find_project_not_found(projects_root):
    with pytest.raises(ProjectNotFound):
        find_project(ProjectDiscovery(projects_root).discover(), 'nope')
