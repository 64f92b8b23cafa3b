"""
Pytest configuration and fixtures
"""

import sys
from pathlib import Path

import pytest

# Make the src/ layout importable without installing
SRC_DIR = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_DIR))

from slidedeck.builder import SlideshowBuilder
from slidedeck.config import Config


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create a project with a document, a template and static files."""
    tmp_path = tmp_path.resolve()
    (tmp_path / "slides.md").write_text("slide one\n\n---\n\nslide two\n", encoding="utf-8")
    (tmp_path / "template.html").write_text("<html>{{content}}</html>", encoding="utf-8")

    static = tmp_path / "static"
    (static / "css").mkdir(parents=True)
    (static / "css" / "style.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    (static / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x01\x02")
    return tmp_path


@pytest.fixture
def config(project_dir: Path) -> Config:
    """Configuration pointing at the sample project."""
    return Config.from_dict(
        {
            "paths": {
                "project_root": ".",
                "input": "slides.md",
                "template": "template.html",
                "static_dir": "static",
                "output_dir": "out",
            }
        },
        project_dir,
    )


@pytest.fixture
def builder(config: Config) -> SlideshowBuilder:
    return SlideshowBuilder(config)
