from pathlib import Path

import pytest


@pytest.fixture
def icon_dir(tmp_path: Path) -> Path:
    root = tmp_path / "svg"
    root.mkdir()
    return root


@pytest.fixture
def write_icon(icon_dir: Path):
    def _write(style: str, name: str, content: str | bytes, ext: str = ".svg") -> Path:
        style_dir = icon_dir / style
        style_dir.mkdir(exist_ok=True)
        path = style_dir / f"{name}{ext}"
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_bytes(content)
        return path

    return _write
