from __future__ import annotations

from collections.abc import Iterator
from dataclasses import replace
from pathlib import Path

import pytest


@pytest.fixture
def isolated_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the event log at a temp dir so tests never write to the home directory."""

    import cognitive_layer.errors as errors_mod
    import cognitive_layer.settings as settings_mod
    import cognitive_layer.storage as storage_mod

    data_dir = tmp_path / "cognitive-layer-data"
    patched = replace(settings_mod.settings, data_dir=data_dir)
    monkeypatch.setattr(settings_mod, "settings", patched)
    monkeypatch.setattr(storage_mod, "settings", patched)

    errors_mod._RECENT_SIGNATURES.clear()
    try:
        yield data_dir
    finally:
        errors_mod._RECENT_SIGNATURES.clear()
