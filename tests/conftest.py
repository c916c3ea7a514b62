from pathlib import Path
from typing import Iterable

import pytest


def create_device(root: Path, name: str, size: str = "0\n", markers: Iterable[str] = ()) -> Path:
    entry = root / name
    entry.mkdir(parents=True)
    (entry / "size").write_text(size)
    for marker in markers:
        (entry / marker).mkdir()
    return entry


@pytest.fixture
def sysfs_root(tmp_path: Path) -> Path:
    root = tmp_path / "block"
    root.mkdir()
    return root
