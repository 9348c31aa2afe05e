# 🏛️ iconsprite/infrastructure/services/sprite_pipeline_service.py
"""
🏛️ Сервіс-оркестратор пайплайна «експорт → пакування → PNG → SVG → превʼю».

🔹 Формати незалежні: збій растрової гілки не блокує векторну (і навпаки).
🔹 CPU-важкі кроки (Pillow, scour) виконуються в `asyncio.to_thread`.
🔹 Перекриття після пакування перевіряються з налаштовуваною реакцією.
🔹 Результат передається зовнішньому `ISpriteOutputWriter` (sync або async), якщо він заданий.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio															# ⏳ to_thread / Event
import inspect															# 🔍 Sync/async writer
import logging															# 🧾 Логування етапів
from typing import Dict, Mapping, Optional, Sequence, Tuple			# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from iconsprite.config.settings import PipelineSettings
from iconsprite.domain.export.entities import ExportFormat, ParsedIconNode
from iconsprite.domain.export.interfaces import IDesignApiClient
from iconsprite.domain.sprite.entities import (
    IconData,
    SpriteBuildResult,
    SpriteSheet,
    SvgIconData,
    SvgSpriteSheet,
)
from iconsprite.domain.sprite.interfaces import ISpriteOutputWriter
from iconsprite.infrastructure.export.exporter import IconExporter
from iconsprite.infrastructure.sprite.packer import calculate_dimensions, check_overlaps, pack_with_positions
from iconsprite.infrastructure.sprite.png_compositor import (
    RETINA_SCALE,
    CompositeOptions,
    composite_retina_pair,
    composite_sprite_sheet,
)
from iconsprite.infrastructure.sprite.svg_assembler import (
    SvgAssembleOptions,
    SvgSpriteAssembler,
    generate_preview,
)
from iconsprite.shared.errors import SpriteError
from iconsprite.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.pipeline")					# 🧾 Локальний логер модуля


class SpritePipelineService:
    """🏛️ Збирає растровий і векторний спрайти з вузлів дизайну."""

    def __init__(
        self,
        exporter: IconExporter,
        settings: PipelineSettings,
        *,
        assembler: Optional[SvgSpriteAssembler] = None,
        writer: Optional[ISpriteOutputWriter] = None,
    ) -> None:
        self._exporter = exporter										# 📤 Оркестратор експорту
        self._settings = settings										# 🧾 Налаштування
        self._assembler = assembler or SvgSpriteAssembler()			# 🧩 Збирач SVG
        self._writer = writer											# 💾 Записувач (опційно)

    @classmethod
    def from_settings(
        cls,
        client: IDesignApiClient,
        settings: PipelineSettings,
        *,
        writer: Optional[ISpriteOutputWriter] = None,
    ) -> "SpritePipelineService":
        exporter = IconExporter(
            client,
            batch_size=settings.export.batch_size,
            max_concurrency=settings.export.max_concurrency,
        )
        return cls(exporter, settings, writer=writer)

    async def build(
        self,
        file_key: str,
        icon_metadata: Mapping[str, ParsedIconNode],
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> SpriteBuildResult:
        """
        Повний прогін пайплайна.

        Args:
            file_key: Ключ файлу дизайну.
            icon_metadata: `icon_id → ParsedIconNode` від парсера.
            cancel_event: Токен скасування експорту.

        Returns:
            SpriteBuildResult: Артефакти, невдачі експорту та помилки по форматах.

        Raises:
            asyncio.CancelledError: Прогін скасовано.
        """
        settings = self._settings
        logger.info("🚀 Sprite build started: file=%s icons=%d", file_key, len(icon_metadata))

        exported = await self._exporter.export_all(
            file_key,
            icon_metadata,
            raster=settings.export.raster,
            vector=settings.export.vector,
            scale=settings.raster.scale,
            cancel_event=cancel_event,
        )
        errors: Dict[ExportFormat, SpriteError] = dict(exported.errors)

        standard: Optional[SpriteSheet] = None
        retina: Optional[SpriteSheet] = None
        if exported.raster is not None:
            try:
                standard, retina = await asyncio.to_thread(self._compose_raster, exported.raster.items)
            except SpriteError as exc:
                logger.error("❌ PNG sprite failed: %s", exc.message, extra=exc.to_log_extra())
                errors[ExportFormat.PNG] = exc

        vector: Optional[SvgSpriteSheet] = None
        preview: Optional[str] = None
        if exported.vector is not None:
            try:
                vector, preview = await asyncio.to_thread(self._compose_vector, exported.vector.items)
            except SpriteError as exc:
                logger.error("❌ SVG sprite failed: %s", exc.message, extra=exc.to_log_extra())
                errors[ExportFormat.SVG] = exc

        result = SpriteBuildResult(
            standard=standard,
            retina=retina,
            vector=vector,
            preview=preview,
            failures=exported.failures,
            errors=errors,
        )

        if self._writer is not None:
            outcome = self._writer.write(result)
            if inspect.isawaitable(outcome):
                await outcome

        logger.info(
            "🏁 Sprite build finished: png=%s retina=%s svg=%s failures=%d errors=%d",
            standard.hash if standard else "-",
            retina.hash if retina else "-",
            vector.hash if vector else "-",
            len(result.failures),
            len(errors),
        )
        return result

    # ================================
    # 🔧 КРОКИ
    # ================================
    def _compose_raster(self, icons: Sequence[IconData]) -> Tuple[SpriteSheet, Optional[SpriteSheet]]:
        settings = self._settings
        packed = pack_with_positions(icons, settings.padding)
        dimensions = calculate_dimensions(icons, settings.padding)
        check_overlaps(packed, settings.padding, settings.overlap_severity)
        options = CompositeOptions(
            background_color=settings.raster.background_color,
            compression_level=settings.raster.compression_level,
        )
        if settings.raster.scale == RETINA_SCALE:
            pair = composite_retina_pair(packed, dimensions.width, dimensions.height, options)
            return pair.standard, pair.retina
        return composite_sprite_sheet(packed, dimensions.width, dimensions.height, 1, options), None

    def _compose_vector(self, icons: Sequence[SvgIconData]) -> Tuple[SvgSpriteSheet, Optional[str]]:
        settings = self._settings.vector
        sheet = self._assembler.assemble(
            icons,
            SvgAssembleOptions(optimize=settings.optimize, pretty=settings.pretty),
        )
        return sheet, (generate_preview(sheet) if settings.preview else None)


__all__ = ["SpritePipelineService"]
