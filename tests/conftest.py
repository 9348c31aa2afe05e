# tests/conftest.py
import io
import sys
from pathlib import Path
from typing import Callable, Tuple

import pytest
from PIL import Image

# Додаємо src в sys.path, щоб працював імпорт "iconsprite.…" без встановлення пакета
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from iconsprite.domain.export.entities import Bounds, ParsedIconNode  # noqa: E402


# ───────────────────────── фабрики тестових даних ─────────────────────────
def _png_bytes(width: int, height: int, color: Tuple[int, int, int, int] = (255, 0, 0, 255)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


def _node(icon_id: str, export_id: str = "", width: float = 24, height: float = 24) -> ParsedIconNode:
    return ParsedIconNode(
        node_id=f"node-{icon_id}",
        export_id=export_id or f"exp-{icon_id}",
        name=icon_id,
        type="COMPONENT",
        bounds=Bounds(x=0, y=0, width=width, height=height),
    )


@pytest.fixture
def png_bytes() -> Callable[..., bytes]:
    return _png_bytes


@pytest.fixture
def make_node() -> Callable[..., ParsedIconNode]:
    return _node
