"""
Tests for packer.output.descriptor

Test Coverage:
- render_descriptor(): Exact text, prefixes, region naming, order
- write_descriptor(): Atomic write, WriteError
- parse_descriptor(): Round trip and malformed input
"""

import pytest
from pathlib import Path

from atlas_toolkit.core.errors import ParseError, WriteError
from atlas_toolkit.core.models import SourceImage
from atlas_toolkit.packer.config import DescriptorConfig
from atlas_toolkit.packer.layout_engine import compute_layout
from atlas_toolkit.packer.output.descriptor import (
    parse_descriptor,
    render_descriptor,
    write_descriptor,
)

ROOT = Path("/assets/sprites")

EXPECTED = """hero.png
size: 30, 25
format: RGBA8888
filter: MipMapLinearLinear, MipMapLinearLinear
repeat: none
a/1
  rotate: false
  xy: 0, 0
  size: 10, 20
  orig: 10, 20
  offset: 0, 0
  index: -1
b/2
  rotate: false
  xy: 0, 20
  size: 30, 5
  orig: 30, 5
  offset: 0, 0
  index: -1
"""


@pytest.fixture
def layout():
    return compute_layout([
        SourceImage(ROOT / "a" / "1.png", 10, 20),
        SourceImage(ROOT / "b" / "2.png", 30, 5),
    ])


class TestRenderDescriptor:
    """Tests for render_descriptor()."""

    def test_render_matches_expected_text_exactly(self, layout):
        assert render_descriptor(layout, "hero.png", ROOT) == EXPECTED

    def test_render_with_prefix_prepends_to_every_region(self, layout):
        text = render_descriptor(layout, "hero.png", ROOT, "sprites/")

        region_lines = [line for line in text.splitlines() if line.startswith("sprites/")]
        assert region_lines == ["sprites/a/1", "sprites/b/2"]

    def test_render_strips_only_last_extension(self):
        layout = compute_layout([SourceImage(ROOT / "ui" / "btn.ok.png", 4, 4)])

        text = render_descriptor(layout, "ui.png", ROOT)

        assert text.splitlines()[5] == "ui/btn.ok"

    def test_render_regions_follow_placement_order(self):
        layout = compute_layout([
            SourceImage(ROOT / "z.png", 1, 1),
            SourceImage(ROOT / "a.png", 1, 2),
        ])

        lines = render_descriptor(layout, "x.png", ROOT).splitlines()

        assert lines[5] == "z"
        assert lines[12] == "a"
        assert lines[14] == "  xy: 0, 1"

    def test_render_uses_config_header(self, layout):
        config = DescriptorConfig(format="RGBA4444", filter=("Linear", "Nearest"), repeat="xy")

        lines = render_descriptor(layout, "hero.png", ROOT, config=config).splitlines()

        assert lines[2:5] == ["format: RGBA4444", "filter: Linear, Nearest", "repeat: xy"]

    def test_render_zero_height_region(self):
        layout = compute_layout([SourceImage(ROOT / "flat.png", 8, 0)])

        text = render_descriptor(layout, "flat.png", ROOT)

        assert "size: 8, 0" in text
        assert text.splitlines()[1] == "size: 8, 0"


class TestWriteDescriptor:
    """Tests for write_descriptor()."""

    def test_write_descriptor_writes_text_with_unix_newlines(self, tmp_path):
        out = tmp_path / "hero.atlas"

        write_descriptor(EXPECTED, out)

        assert out.read_bytes() == EXPECTED.encode("utf-8")
        assert [p.name for p in tmp_path.iterdir()] == ["hero.atlas"]

    def test_write_descriptor_overwrites_existing_file(self, tmp_path):
        out = tmp_path / "hero.atlas"
        out.write_text("old contents")

        write_descriptor(EXPECTED, out)

        assert out.read_text() == EXPECTED

    def test_write_descriptor_when_destination_invalid_then_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file")

        with pytest.raises(WriteError) as exc_info:
            write_descriptor(EXPECTED, blocker / "hero.atlas")

        assert exc_info.value.path == blocker / "hero.atlas"


class TestParseDescriptor:
    """Tests for parse_descriptor()."""

    def test_parse_reads_header_and_regions(self):
        parsed = parse_descriptor(EXPECTED)

        assert parsed.reference_name == "hero.png"
        assert parsed.size == (30, 25)
        assert parsed.header["format"] == "RGBA8888"
        assert [r.name for r in parsed.regions] == ["a/1", "b/2"]
        assert parsed.regions[1].xy == (0, 20)
        assert parsed.regions[1].size == (30, 5)
        assert parsed.regions[1].orig == (30, 5)
        assert parsed.regions[1].rotate is False
        assert parsed.regions[1].index == -1

    def test_parse_round_trips_rendered_layout(self, layout):
        parsed = parse_descriptor(render_descriptor(layout, "hero.png", ROOT, "pre/"))

        assert parsed.size == layout.canvas.size
        for region, placement in zip(parsed.regions, layout.placements):
            assert region.xy == (placement.x, placement.y)
            assert region.size == (placement.width, placement.height)

    def test_parse_accepts_crlf_line_endings(self):
        parsed = parse_descriptor(EXPECTED.replace("\n", "\r\n"))

        assert [r.name for r in parsed.regions] == ["a/1", "b/2"]

    def test_parse_region_name_that_looks_like_header_key(self):
        text = EXPECTED.replace("b/2\n", "size\n")

        parsed = parse_descriptor(text)

        assert [r.name for r in parsed.regions] == ["a/1", "size"]

    def test_parse_region_name_with_leading_whitespace(self):
        layout = compute_layout([
            SourceImage(ROOT / " a.png", 4, 4),
            SourceImage(ROOT / "b.png", 2, 2),
        ])

        parsed = parse_descriptor(render_descriptor(layout, "hero.png", ROOT))

        assert [r.name for r in parsed.regions] == [" a", "b"]
        assert parsed.regions[0].xy == (0, 0)
        assert parsed.regions[1].xy == (0, 4)

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "hero.png\nformat: RGBA8888\n",
            "hero.png\nsize: 30\n",
            "hero.png\nsize: a, b\n",
            "hero.png\nsize: 1, 1\n  xy: 0, 0\n",
            "hero.png\nsize: 1, 1\nregion\n  size: 1, 1\n",
            "hero.png\nsize: 1, 1\nregion\n  xy: 0, 0\n  size: 1, 1\n  index: x\n",
            "hero.png\nsize: 1, 1\nregion\n  no separator\n",
        ],
    )
    def test_parse_malformed_raises(self, text):
        with pytest.raises(ParseError):
            parse_descriptor(text)
