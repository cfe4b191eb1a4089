"""Shared test fixtures."""
from __future__ import annotations

import logging
import os

import pytest


def render_server_xml(features, includes=(), extra=""):
    """Render a minimal server.xml declaring ``features``."""
    feature_lines = "\n".join(f"        <feature>{f}</feature>" for f in features)
    include_lines = "\n".join(f'    <include location="{loc}"/>' for loc in includes)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<server description="test server">
    <featureManager>
{feature_lines}
    </featureManager>
{include_lines}
{extra}
</server>
"""


@pytest.fixture
def config_dir(tmp_path):
    """Empty server configuration directory."""
    path = tmp_path / "config"
    path.mkdir()
    return path


@pytest.fixture
def write_config(config_dir):
    """Write a config file relative to ``config_dir`` and return its path."""
    def _write(relative, content):
        target = config_dir / relative
        os.makedirs(target.parent, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target
    return _write


@pytest.fixture
def server_xml():
    """The ``render_server_xml`` helper as a fixture."""
    return render_server_xml


@pytest.fixture
def restore_root_logger():
    """Drop handlers added to the root logger by configure_logging and reset its level."""
    root = logging.getLogger()
    level = root.level
    before = set(root.handlers)
    yield
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
