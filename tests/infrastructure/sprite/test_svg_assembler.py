# tests/infrastructure/sprite/test_svg_assembler.py
import pytest

from iconsprite.domain.sprite.entities import SvgIconData
from iconsprite.domain.sprite.interfaces import ISvgOptimizer
from iconsprite.infrastructure.sprite.svg_assembler import (
    SvgAssembleOptions,
    SvgSpriteAssembler,
    compute_grid_layout,
    create_svg_icon_data,
    escape_xml,
    format_svg,
    generate_preview,
    validate_svg_icons,
)
from iconsprite.shared.errors import SpriteGenerationError

RAW = SvgAssembleOptions(optimize=False)


def _svg(icon_id: str, view_box: str = "0 0 24 24", body: str = '<path d="M0 0h24v24H0z"/>') -> SvgIconData:
    content = f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="{view_box}">{body}</svg>'
    return SvgIconData(id=icon_id, content=content, view_box=view_box, width=24, height=24)


# ───────────────────────── фейкові оптимізатори ─────────────────────────
class _FlatteningOptimizer:
    def __init__(self) -> None:
        self.calls = 0

    def optimize(self, svg: str) -> str:
        self.calls += 1
        return svg.replace("\n", "")


class _BrokenOptimizer:
    def optimize(self, svg: str) -> str:
        raise RuntimeError("optimizer crashed")


class _SymbolEater:
    def optimize(self, svg: str) -> str:
        return '<svg xmlns="http://www.w3.org/2000/svg"/>'


def test_fake_optimizers_satisfy_protocol():
    assert isinstance(_FlatteningOptimizer(), ISvgOptimizer)


# ───────────────────────── збірка ─────────────────────────
def test_symbols_sorted_by_id():
    sheet = SvgSpriteAssembler(_FlatteningOptimizer()).assemble([_svg("b"), _svg("a")], RAW)

    assert [icon.id for icon in sheet.icons] == ["a", "b"]
    assert sheet.content.index('<symbol id="a"') < sheet.content.index('<symbol id="b"')
    assert sheet.content.startswith('<svg xmlns="http://www.w3.org/2000/svg"')
    assert '<symbol id="a" viewBox="0 0 24 24">' in sheet.content
    assert '<path d="M0 0h24v24H0z"/>' in sheet.content
    assert sheet.warnings == ()


def test_grid_sets_outer_dimensions():
    sheet = SvgSpriteAssembler(_FlatteningOptimizer()).assemble([_svg(x) for x in "abc"], RAW)

    # 3 іконки → 2 колонки × 2 рядки, клітинка 24 + 4
    assert (sheet.width, sheet.height) == (56, 56)
    assert 'width="56" height="56" viewBox="0 0 56 56"' in sheet.content


def test_same_input_same_hash_regardless_of_order():
    assembler = SvgSpriteAssembler(_FlatteningOptimizer())
    first = assembler.assemble([_svg("a"), _svg("b")], RAW)
    second = assembler.assemble([_svg("b"), _svg("a")], RAW)

    assert first.content == second.content
    assert first.hash == second.hash


def test_ids_are_escaped_in_attributes():
    sheet = SvgSpriteAssembler(_FlatteningOptimizer()).assemble([_svg('a"&<b')], RAW)
    assert 'id="a&quot;&amp;&lt;b"' in sheet.content


def test_optimizer_output_used_when_it_keeps_symbols():
    optimizer = _FlatteningOptimizer()

    sheet = SvgSpriteAssembler(optimizer).assemble([_svg("a")])

    assert optimizer.calls == 1
    assert "\n" not in sheet.content
    assert sheet.warnings == ()


def test_optimizer_crash_falls_back_to_raw_with_warning():
    raw = SvgSpriteAssembler(_FlatteningOptimizer()).assemble([_svg("a")], RAW)

    sheet = SvgSpriteAssembler(_BrokenOptimizer()).assemble([_svg("a")])

    assert sheet.content == raw.content
    assert len(sheet.warnings) == 1
    assert "optimizer crashed" in sheet.warnings[0]


def test_optimizer_dropping_symbols_falls_back_to_raw():
    sheet = SvgSpriteAssembler(_SymbolEater()).assemble([_svg("a")])

    assert '<symbol id="a"' in sheet.content
    assert sheet.warnings


def test_real_optimizer_keeps_symbol_ids():
    icons = [_svg("home"), _svg("search")]
    raw = SvgSpriteAssembler().assemble(icons, RAW)

    sheet = SvgSpriteAssembler().assemble(icons)

    # scour справді відпрацював, а не спрацював відкат на сиру розмітку
    assert sheet.warnings == ()
    assert sheet.content != raw.content
    assert 'id="home"' in sheet.content
    assert 'id="search"' in sheet.content


def test_pretty_output_puts_tags_on_separate_lines():
    sheet = SvgSpriteAssembler(_FlatteningOptimizer()).assemble(
        [_svg("a", body="<g><path/></g>")], SvgAssembleOptions(optimize=False, pretty=True)
    )
    assert "<g>\n<path/>\n</g>" in sheet.content


# ───────────────────────── помилки ─────────────────────────
def test_empty_input_raises():
    with pytest.raises(SpriteGenerationError) as info:
        SvgSpriteAssembler(_FlatteningOptimizer()).assemble([])
    assert info.value.code == "E404"


def test_invalid_view_box_raises_with_icon_id():
    with pytest.raises(SpriteGenerationError) as info:
        SvgSpriteAssembler(_FlatteningOptimizer()).assemble([_svg("ok"), _svg("bad", view_box="abc")], RAW)
    assert info.value.context.icon_id == "bad"


def test_validate_svg_icons_lists_every_problem():
    icons = [
        _svg("ok"),
        SvgIconData(id="", content="", view_box="1 2", width=0, height=5),
    ]
    problems = validate_svg_icons(icons)

    assert [icon_id for icon_id, _ in problems] == ["", "", "", ""]
    assert validate_svg_icons([_svg("ok")]) == []


# ───────────────────────── допоміжні функції ─────────────────────────
def test_create_svg_icon_data_uses_bounds_when_view_box_missing():
    icon = create_svg_icon_data("x", b'<svg xmlns="http://www.w3.org/2000/svg"><path/></svg>', 15.6, 16)
    assert icon.view_box == "0 0 16 16"
    assert (icon.width, icon.height) == (15.6, 16)


def test_grid_layout_of_empty_input_is_empty():
    layout = compute_grid_layout([])
    assert (layout.columns, layout.rows, layout.width, layout.height) == (0, 0, 0, 0)


def test_grid_falls_back_to_declared_size_for_bad_view_box():
    icon = SvgIconData(id="x", content="<svg/>", view_box="abc", width=10, height=12)
    layout = compute_grid_layout([icon], padding=0)
    assert (layout.cell_width, layout.cell_height) == (10, 12)


def test_escape_xml_and_format_svg():
    assert escape_xml("""<a & 'b' "c">""") == "&lt;a &amp; &apos;b&apos; &quot;c&quot;&gt;"
    assert format_svg("<svg><g/></svg>") == "<svg>\n<g/>\n</svg>"


# ───────────────────────── превʼю ─────────────────────────
def test_preview_is_idempotent_and_references_every_symbol():
    sheet = SvgSpriteAssembler(_FlatteningOptimizer()).assemble([_svg("b"), _svg("a")], RAW)

    first = generate_preview(sheet)
    second = generate_preview(sheet)

    assert first == second
    assert '<use href="#a" xlink:href="#a" x="2" y="2" width="24" height="24"/>' in first
    assert '<use href="#b" xlink:href="#b" x="30" y="2" width="24" height="24"/>' in first
    assert first.index("<defs>") < first.index('<symbol id="a"') < first.index("</defs>")
