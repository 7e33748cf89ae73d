"""Shared pytest fixtures for stignore tests."""
import logging
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Generator

import pytest
import yaml


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def rule_file(temp_dir: Path) -> Callable[..., Path]:
    """Factory writing rule files into the temporary directory.

    Usage: ``rule_file("name", "line1", "line2")``.
    """

    def _write(name: str, *lines: str) -> Path:
        path = temp_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Provide a sample stignore configuration."""
    return {
        "stignore": {
            "rules": {
                "file": "project.stignore",
                "cache": True,
                "casefold": False,
            },
            "logging": {
                "level": "DEBUG",
                "file": None,
            },
        }
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: Dict[str, Any]) -> Path:
    """Create a configuration file."""
    config_path = temp_dir / "stignore.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep STIGNORE_* variables from the outer environment out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("STIGNORE_"):
            monkeypatch.delenv(key)
    yield


@pytest.fixture(autouse=True)
def standard_config_files(monkeypatch, tmp_path):
    """Point the system and user config files into a per-test directory."""
    paths = {
        "system": tmp_path / "etc" / "config.yaml",
        "user": tmp_path / "home" / "config.yaml",
    }
    monkeypatch.setattr(
        "stignore.infrastructure.config_manager.SYSTEM_CONFIG_FILE", str(paths["system"])
    )
    monkeypatch.setattr("stignore.infrastructure.config_manager.USER_CONFIG_FILE", str(paths["user"]))
    yield paths


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo handler changes made to the stignore logger hierarchy."""
    root = logging.getLogger("stignore")
    handlers = list(root.handlers)
    level = root.level
    propagate = root.propagate
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate
