"""
Integration tests for packer.pipeline

Test Coverage:
- plan_atlas(): Discovery + probe + layout, empty input warning
- build_atlas_image() / build_atlas_descriptor(): Artifacts agree
- verify_descriptor(): Round trip and drift detection
- Failure policy: no artifact written when any stage fails
"""

import pytest
from pathlib import Path
from PIL import Image

from atlas_toolkit.core.errors import DecodeError, DirectoryReadError, EmptyInputWarning, EncodeError
from atlas_toolkit.packer import PackerConfig
from atlas_toolkit.packer.layout_engine import compute_layout
from atlas_toolkit.packer.output.descriptor import parse_descriptor
from atlas_toolkit.packer.pipeline import (
    build_atlas_descriptor,
    build_atlas_image,
    plan_atlas,
    verify_descriptor,
)


class TestPlanAtlas:
    """Tests for plan_atlas()."""

    def test_plan_atlas_reference_scenario(self, sprite_tree):
        plan = plan_atlas(sprite_tree)

        assert plan.root == sprite_tree.absolute()
        assert [p.relative_to(plan.root).as_posix() for p in plan.images.paths] == [
            "a/1.png",
            "b/2.png",
        ]
        assert plan.layout.canvas.size == (30, 25)
        assert [(p.x, p.y, p.width, p.height) for p in plan.layout.placements] == [
            (0, 0, 10, 20),
            (0, 20, 30, 5),
        ]

    def test_plan_atlas_when_empty_then_warns_and_returns_none(self, empty_tree):
        with pytest.warns(EmptyInputWarning):
            assert plan_atlas(empty_tree) is None

    def test_plan_atlas_layout_matches_layout_engine(self, sprite_tree):
        plan = plan_atlas(sprite_tree, config=PackerConfig(max_workers=1))

        assert plan.layout == compute_layout(plan.images)

    def test_plan_atlas_records_timing(self, sprite_tree):
        from atlas_toolkit.packer.timing import TimingLog

        timing = TimingLog()
        plan_atlas(sprite_tree, timing=timing)

        assert list(timing.phase_timings) == ["discovery", "probe", "layout"]

    def test_plan_atlas_when_root_missing_then_raises(self, tmp_path):
        with pytest.raises(DirectoryReadError):
            plan_atlas(tmp_path / "missing")


class TestBuildAtlasImage:
    """Tests for build_atlas_image()."""

    def test_build_atlas_image_writes_canvas(self, sprite_tree, tmp_path):
        out = tmp_path / "out" / "hero.png"

        result = build_atlas_image(sprite_tree, out)

        assert result.output_path == out
        assert result.image_count == 2
        assert result.canvas.size == (30, 25)
        with Image.open(out) as atlas:
            assert atlas.size == (30, 25)
            assert atlas.mode == "RGBA"
            assert atlas.getpixel((5, 10)) == (255, 0, 0, 255)
            assert atlas.getpixel((5, 22)) == (0, 0, 255, 255)
            assert atlas.getpixel((20, 10)) == (0, 0, 0, 0)

    def test_build_atlas_image_when_empty_then_no_output(self, empty_tree, tmp_path):
        out = tmp_path / "hero.png"

        result = build_atlas_image(empty_tree, out)

        assert result.output_path is None
        assert result.canvas is None
        assert result.image_count == 0
        assert result.warnings and "No image files found" in result.warnings[0]
        assert not out.exists()

    def test_build_atlas_image_when_image_corrupt_then_no_output(self, sprite_tree, tmp_path):
        (sprite_tree / "b" / "broken.png").write_text("not a png")
        out = tmp_path / "hero.png"

        with pytest.raises(DecodeError) as exc_info:
            build_atlas_image(sprite_tree, out)

        assert exc_info.value.path.name == "broken.png"
        assert not out.exists()

    def test_build_atlas_image_when_extension_unsupported_then_raises(self, sprite_tree, tmp_path):
        with pytest.raises(EncodeError):
            build_atlas_image(sprite_tree, tmp_path / "hero.unknown")

    def test_build_atlas_image_opens_each_source_once(self, sprite_tree, tmp_path, monkeypatch):
        from atlas_toolkit.packer import probe

        opened = []
        real_open = Image.open

        def counting_open(fp, *args, **kwargs):
            opened.append(Path(fp))
            return real_open(fp, *args, **kwargs)

        monkeypatch.setattr(probe.Image, "open", counting_open)

        build_atlas_image(sprite_tree, tmp_path / "hero.png")

        assert sorted(p.name for p in opened) == ["1.png", "2.png"]

    def test_plan_atlas_keep_pixels_matches_placements(self, sprite_tree):
        plan = plan_atlas(sprite_tree, keep_pixels=True)

        assert [px.size for px in plan.pixels] == [(p.width, p.height) for p in plan.layout]
        assert all(px.mode == "RGBA" for px in plan.pixels)


class TestBuildAtlasDescriptor:
    """Tests for build_atlas_descriptor()."""

    def test_build_atlas_descriptor_reference_scenario(self, sprite_tree, tmp_path):
        out = tmp_path / "hero.atlas"

        result = build_atlas_descriptor(sprite_tree, out)

        assert result.output_path == out
        lines = out.read_text().splitlines()
        assert lines[0] == "hero.png"
        assert lines[1] == "size: 30, 25"
        assert lines[5] == "a/1"
        assert lines[7] == "  xy: 0, 0"
        assert lines[8] == "  size: 10, 20"
        assert lines[12] == "b/2"
        assert lines[14] == "  xy: 0, 20"
        assert lines[15] == "  size: 30, 5"

    def test_build_atlas_descriptor_excludes_non_images(self, sprite_tree, tmp_path):
        out = tmp_path / "hero.atlas"

        build_atlas_descriptor(sprite_tree, out)

        assert "notes" not in out.read_text()

    def test_build_atlas_descriptor_with_prefix(self, sprite_tree, tmp_path):
        out = tmp_path / "hero.atlas"

        build_atlas_descriptor(sprite_tree, out, "sprites")

        regions = [r.name for r in parse_descriptor(out.read_text()).regions]
        assert regions == ["sprites/a/1", "sprites/b/2"]

    def test_build_atlas_descriptor_when_empty_then_no_output(self, empty_tree, tmp_path):
        out = tmp_path / "hero.atlas"

        result = build_atlas_descriptor(empty_tree, out)

        assert result.output_path is None
        assert not out.exists()


class TestArtifactsAgree:
    """The image and the descriptor built separately describe one layout."""

    def test_descriptor_regions_match_image_pixels(self, tmp_path, make_image):
        root = tmp_path / "tree"
        colors = {
            "x/b.png": ((7, 3), (10, 0, 0, 255)),
            "x/a.png": ((4, 9), (20, 0, 0, 255)),
            "c.gif": ((5, 5), None),
            "B.png": ((12, 2), (30, 0, 0, 255)),
        }
        for rel, (size, color) in colors.items():
            if color is None:
                make_image(root / rel, size, 1, mode="P")
            else:
                make_image(root / rel, size, color)
        image_out = tmp_path / "atlas.png"
        text_out = tmp_path / "atlas.atlas"

        build_atlas_image(root, image_out, config=PackerConfig(max_workers=3))
        build_atlas_descriptor(root, text_out, config=PackerConfig(max_workers=1))

        parsed = parse_descriptor(text_out.read_text())
        with Image.open(image_out) as atlas:
            assert atlas.size == parsed.size
            for region in parsed.regions:
                rel, (size, color) = next(
                    (k, v) for k, v in colors.items() if k.rsplit(".", 1)[0] == region.name
                )
                assert region.size == size
                if color is not None:
                    x, y = region.xy
                    assert atlas.getpixel((x, y)) == color
                    assert atlas.getpixel((x + size[0] - 1, y + size[1] - 1)) == color

    def test_verify_descriptor_round_trip(self, sprite_tree, tmp_path):
        out = tmp_path / "hero.atlas"
        build_atlas_descriptor(sprite_tree, out, "sprites")

        result = verify_descriptor(sprite_tree, out, "sprites")

        assert result.ok
        assert result.region_count == 2

    def test_verify_descriptor_accepts_names_with_leading_whitespace(self, sprite_tree, tmp_path, make_image):
        make_image(sprite_tree / " lead.png", (3, 3))
        out = tmp_path / "hero.atlas"
        build_atlas_descriptor(sprite_tree, out)

        result = verify_descriptor(sprite_tree, out)

        assert result.ok
        assert result.region_count == 3

    def test_verify_descriptor_detects_changed_tree(self, sprite_tree, tmp_path, make_image):
        out = tmp_path / "hero.atlas"
        build_atlas_descriptor(sprite_tree, out)
        make_image(sprite_tree / "a" / "0.png", (40, 3))

        result = verify_descriptor(sprite_tree, out)

        assert not result.ok
        assert any("canvas size" in m for m in result.mismatches)
        assert any("region count" in m for m in result.mismatches)

    def test_verify_descriptor_detects_wrong_prefix(self, sprite_tree, tmp_path):
        out = tmp_path / "hero.atlas"
        build_atlas_descriptor(sprite_tree, out)

        result = verify_descriptor(sprite_tree, out, "sprites")

        assert not result.ok

    def test_verify_descriptor_when_tree_empty(self, sprite_tree, empty_tree, tmp_path):
        out = tmp_path / "hero.atlas"
        build_atlas_descriptor(sprite_tree, out)

        result = verify_descriptor(empty_tree, out)

        assert not result.ok
