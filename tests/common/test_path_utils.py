"""Tests for common.path_utils naming helpers."""

import pytest
from pathlib import Path

from atlas_toolkit.common.path_utils import normalize_prefix, reference_name, region_name


@pytest.mark.parametrize(
    "prefix, expected",
    [
        (None, ""),
        ("", ""),
        ("sprites", "sprites/"),
        ("sprites/", "sprites/"),
        ("sprites//", "sprites/"),
        ("ui\\icons", "ui/icons/"),
        ("ui\\icons\\", "ui/icons/"),
        ("/", ""),
    ],
)
def test_normalize_prefix(prefix, expected):
    assert normalize_prefix(prefix) == expected


def test_region_name_is_relative_without_extension():
    assert region_name(Path("/root/a/1.png"), Path("/root")) == "a/1"


def test_region_name_with_prefix():
    assert region_name(Path("/root/b/2.png"), Path("/root"), "sprites/") == "sprites/b/2"


def test_region_name_keeps_inner_dots():
    assert region_name(Path("/root/v1.2/hero.idle.png"), Path("/root")) == "v1.2/hero.idle"


def test_region_name_uses_forward_slashes():
    name = region_name(Path("/root") / "deep" / "er" / "x.gif", Path("/root"))
    assert name == "deep/er/x"


@pytest.mark.parametrize(
    "output, expected",
    [
        ("hero.atlas", "hero.png"),
        ("out/hero.txt", "hero.png"),
        ("hero", "hero.png"),
        ("my.sprites.atlas", "my.sprites.png"),
    ],
)
def test_reference_name(output, expected):
    assert reference_name(output) == expected


def test_reference_name_custom_extension():
    assert reference_name("hero.atlas", ".webp") == "hero.webp"
