"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import logging
import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
# This ensures that the local fzpath package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of fzpath modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("fzpath"):
        del sys.modules[module_name]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the global config file and data dir at the test's tmp_path.

    Keeps a developer's real ~/.config/fzpath and ~/.local/share/fzpath out
    of every test.
    """
    import fzpath.config.loader as loader

    for key in list(os.environ):
        if key.upper().startswith("FZPATH__"):
            monkeypatch.delenv(key)

    data_dir = tmp_path / "fzpath-data"
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", tmp_path / "no-such-config.yaml")
    monkeypatch.setenv("FZPATH__INDEX__DATA_DIR", str(data_dir))
    yield data_dir


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop handlers a test (or a CLI invocation) bound to its own streams."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
