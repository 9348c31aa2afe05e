# 🖼️ iconsprite/infrastructure/sprite/png_compositor.py
"""
🖼️ Растровий компонувальник спрайт-аркуша на Pillow.

🔹 Прозора RGBA-канва `W*scale × H*scale` (половини вгору).
🔹 Кожна іконка декодується, за потреби ресемплиться (LANCZOS) до цільового розміру
   і накладається в `(x*scale, y*scale)`.
🔹 PNG кодується з `compress_level` (0..9); відбиток — 8 hex SHA-256.
🔹 `composite_retina_pair()` — стандартний 1× та retina 2× з подвоєними метаданими.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import io																# 💾 Буфери в памʼяті
import logging															# 🧾 Логування
from dataclasses import dataclass, field								# 🧱 DTO опцій/результату
from typing import Optional, Sequence, Tuple							# 🧰 Типізація

# 🌐 Зовнішні бібліотеки
from PIL import Image													# 🖼️ Pillow

# 🧩 Внутрішні модулі проєкту
from iconsprite.domain.sprite.entities import PackedIcon, RasterSpritePair, SpriteSheet
from iconsprite.shared.errors import ImageProcessingContext, ImageProcessingError
from iconsprite.shared.utils.content_hash import content_hash
from iconsprite.shared.utils.logger import LOG_NAME
from iconsprite.shared.utils.rounding import round_half_up

logger = logging.getLogger(f"{LOG_NAME}.png")							# 🧾 Локальний логер модуля

RGBA = Tuple[int, int, int, int]
RETINA_SCALE = 2


@dataclass(frozen=True)
class CompositeOptions:
    """⚙️ Параметри компонування."""

    scale: float = 1													# 🔍 Множник аркуша
    background_color: RGBA = (0, 0, 0, 0)								# 🎨 Прозорий за замовчуванням
    compression_level: int = 9											# 🗜️ zlib 0..9


@dataclass(frozen=True)
class CompositeResult:
    buffer: bytes = field(repr=False)
    hash: str
    width: int
    height: int


# ================================
# 🔧 ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _scaled(value: float, scale: float) -> int:
    return round_half_up(value * scale)


def _decode(icon: PackedIcon) -> Image.Image:
    try:
        with Image.open(io.BytesIO(icon.buffer)) as source:
            return source.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageProcessingError(
            f"Failed to decode image for icon '{icon.id}': {exc}",
            context=ImageProcessingContext(icon_id=icon.id, width=icon.width, height=icon.height, detail=str(exc)),
        ) from exc


def _validate(packed_icons: Sequence[PackedIcon], width: float, height: float, options: CompositeOptions) -> None:
    if not packed_icons:
        raise ImageProcessingError("Cannot composite an empty icon list", context=ImageProcessingContext())
    if width <= 0 or height <= 0 or options.scale <= 0:
        raise ImageProcessingError(
            f"Invalid sprite dimensions {width}x{height} at scale {options.scale}",
            context=ImageProcessingContext(width=width, height=height),
        )
    if not 0 <= options.compression_level <= 9:
        raise ImageProcessingError(
            f"compression_level must be within 0..9, got {options.compression_level}",
            context=ImageProcessingContext(detail="compression_level"),
        )


# ================================
# 🖼️ КОМПОНУВАННЯ
# ================================
def composite(
    packed_icons: Sequence[PackedIcon],
    width: float,
    height: float,
    options: Optional[CompositeOptions] = None,
) -> CompositeResult:
    """
    Складає PNG-аркуш з розміщених іконок.

    Args:
        packed_icons: Іконки з позиціями контенту (масштаб 1).
        width: Ширина аркуша (масштаб 1).
        height: Висота аркуша (масштаб 1).
        options: Масштаб, фон, рівень стиснення.

    Returns:
        CompositeResult: PNG-байти, відбиток і фактичні розміри в пікселях.

    Raises:
        ImageProcessingError: Порожній вхід, некоректні розміри, зламане зображення.
    """
    opts = options or CompositeOptions()
    _validate(packed_icons, width, height, opts)

    canvas_size = (max(1, _scaled(width, opts.scale)), max(1, _scaled(height, opts.scale)))
    canvas = Image.new("RGBA", canvas_size, tuple(opts.background_color))

    for icon in packed_icons:
        image = _decode(icon)
        target = (max(1, _scaled(icon.width, opts.scale)), max(1, _scaled(icon.height, opts.scale)))
        if image.size != target:
            image = image.resize(target, Image.Resampling.LANCZOS)	# 🔍 Ресемплінг лише за розбіжності розмірів
        dest = (_scaled(icon.x, opts.scale), _scaled(icon.y, opts.scale))
        try:
            canvas.alpha_composite(image, dest=dest)
        except ValueError as exc:
            raise ImageProcessingError(
                f"Failed to place icon '{icon.id}' at {dest}: {exc}",
                context=ImageProcessingContext(icon_id=icon.id, width=icon.width, height=icon.height, detail=str(exc)),
            ) from exc

    output = io.BytesIO()
    try:
        canvas.save(output, format="PNG", compress_level=opts.compression_level)
    except (OSError, ValueError) as exc:
        raise ImageProcessingError(
            f"Failed to encode sprite PNG: {exc}",
            context=ImageProcessingContext(width=width, height=height, detail=str(exc)),
        ) from exc

    buffer = output.getvalue()
    digest = content_hash(buffer)
    logger.info(
        "🖼️ PNG sprite %dx%d (scale=%g, icons=%d, %d bytes, hash=%s)",
        canvas_size[0], canvas_size[1], opts.scale, len(packed_icons), len(buffer), digest,
    )
    return CompositeResult(buffer=buffer, hash=digest, width=canvas_size[0], height=canvas_size[1])


def _scale_icon(icon: PackedIcon, scale: float) -> PackedIcon:
    if scale == 1:
        return icon
    return PackedIcon(
        id=icon.id,
        name=icon.name,
        node_id=icon.node_id,
        width=icon.width * scale,
        height=icon.height * scale,
        buffer=icon.buffer,
        x=icon.x * scale,
        y=icon.y * scale,
    )


def composite_sprite_sheet(
    packed_icons: Sequence[PackedIcon],
    width: float,
    height: float,
    scale: float = 1,
    options: Optional[CompositeOptions] = None,
) -> SpriteSheet:
    """Аркуш у масштабі `scale`; метадані іконок (`x, y, width, height`) перераховані ×scale."""
    base = options or CompositeOptions()
    opts = CompositeOptions(
        scale=scale,
        background_color=base.background_color,
        compression_level=base.compression_level,
    )
    result = composite(packed_icons, width, height, opts)
    return SpriteSheet(
        width=result.width,
        height=result.height,
        icons=tuple(_scale_icon(icon, scale) for icon in packed_icons),
        hash=result.hash,
        buffer=result.buffer,
        scale=scale,
    )


def composite_retina_pair(
    packed_icons: Sequence[PackedIcon],
    width: float,
    height: float,
    options: Optional[CompositeOptions] = None,
) -> RasterSpritePair:
    """Пара 1× / 2× з однакових позицій."""
    return RasterSpritePair(
        standard=composite_sprite_sheet(packed_icons, width, height, 1, options),
        retina=composite_sprite_sheet(packed_icons, width, height, RETINA_SCALE, options),
    )


__all__ = [
    "CompositeOptions",
    "CompositeResult",
    "RETINA_SCALE",
    "composite",
    "composite_sprite_sheet",
    "composite_retina_pair",
]
