import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import atlas_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


def write_image(path: Path, size, color=(255, 0, 0, 255), mode="RGBA") -> Path:
    """Save a solid-colour image, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new(mode, size, color).save(path)
    return path


# Common test fixtures
@pytest.fixture
def sprite_tree(tmp_path: Path) -> Path:
    """
    Two images in separate subdirectories plus a non-image file.

        sprites/a/1.png    10x20 red
        sprites/b/2.png    30x5  blue
        sprites/b/notes.txt
    """
    root = tmp_path / "sprites"
    write_image(root / "a" / "1.png", (10, 20), (255, 0, 0, 255))
    write_image(root / "b" / "2.png", (30, 5), (0, 0, 255, 255))
    (root / "b" / "notes.txt").write_text("not an image")
    return root


@pytest.fixture
def empty_tree(tmp_path: Path) -> Path:
    """Directory tree with subdirectories but no images."""
    root = tmp_path / "empty"
    (root / "nested" / "deeper").mkdir(parents=True)
    (root / "readme.md").write_text("nothing here")
    return root


@pytest.fixture
def make_image():
    """Factory fixture: make_image(path, size, color=..., mode=...)."""
    return write_image
