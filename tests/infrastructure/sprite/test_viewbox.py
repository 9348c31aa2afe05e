# tests/infrastructure/sprite/test_viewbox.py
import pytest

from iconsprite.infrastructure.sprite.viewbox import (
    create_view_box,
    extract_svg_dimensions,
    extract_svg_inner_content,
    extract_view_box,
    parse_view_box,
    validate_view_box,
)


@pytest.mark.parametrize("value", ["0 0 24 24", "-10 -10 20 20", "0,0,16,16", " 0  0 1.5 2e1 "])
def test_valid_view_boxes(value):
    assert validate_view_box(value) is True


@pytest.mark.parametrize("value", ["abc", "", None, "0 0 24", "0 0 24 24 1", "0 0 nan 24", "0 0 inf 24"])
def test_invalid_view_boxes(value):
    assert validate_view_box(value) is False


def test_parse_view_box_returns_floats():
    assert parse_view_box("-10, -10 20 20") == (-10.0, -10.0, 20.0, 20.0)
    with pytest.raises(ValueError):
        parse_view_box("abc")


def test_create_view_box_rounds_dimensions():
    assert create_view_box(23.6, 24.2) == "0 0 24 24"
    assert create_view_box(10, 10, min_x=-5, min_y=1.5) == "-5 1.5 10 10"


def test_extract_view_box_prefers_attribute_and_falls_back_to_bounds():
    assert extract_view_box('<svg viewBox="0 0 16 16"><path/></svg>', 24, 24) == "0 0 16 16"
    assert extract_view_box("<svg><path/></svg>", 24.4, 31.6) == "0 0 24 32"


def test_inner_content_strips_root_and_prolog():
    svg = '<?xml version="1.0"?>\n<svg xmlns="http://www.w3.org/2000/svg"><g><path d="M0 0"/></g></svg>'
    assert extract_svg_inner_content(svg) == '<g><path d="M0 0"/></g>'
    assert extract_svg_inner_content("<path/>") == "<path/>"


def test_svg_dimensions_ignore_stroke_width():
    svg = '<svg stroke-width="3" width="24px" height="16"><path/></svg>'
    assert extract_svg_dimensions(svg) == (24.0, 16.0)
    assert extract_svg_dimensions("<svg><path/></svg>") == (None, None)
    assert extract_svg_dimensions("<g/>") == (None, None)


def test_half_pixel_bounds_round_up():
    assert create_view_box(24.5, 16.5) == "0 0 25 17"
    assert extract_view_box('<svg xmlns="http://www.w3.org/2000/svg"><path/></svg>', 24.5, 16.5) == "0 0 25 17"


def test_view_box_attribute_matched_in_any_case():
    assert extract_view_box('<svg VIEWBOX="0 0 8 8"><path/></svg>', 24, 24) == "0 0 8 8"
    assert extract_view_box('<svg data-myviewbox="0 0 8 8"><path/></svg>', 24, 24) == "0 0 24 24"


def test_inner_content_ignores_tags_that_only_start_with_svg():
    assert extract_svg_inner_content("<svgicon><g/></svg>") == "<svgicon><g/></svg>"
