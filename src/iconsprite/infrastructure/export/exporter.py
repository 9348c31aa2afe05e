# 📤 iconsprite/infrastructure/export/exporter.py
"""
📤 Оркестратор експорту іконок: дедуплікація → батчі → паралельні завантаження → fan-out.

🔹 Кілька іконок з однаковим `export_id` скачуються рівно один раз.
🔹 Батчі виконуються послідовно (ліміти API), завантаження всередині батча — паралельно,
   не більше `max_concurrency` одночасно (`asyncio.Semaphore`).
🔹 Будь-яка невдача стає записом `ExportFailure`; виняток лише коли провалилось усе.
🔹 Порядок результатів детермінований: позиція батча → позиція в батчі → порядок аліасів.
🔹 Скасування через `asyncio.Event` або скасування зовнішньої задачі: дочірні задачі
   скасовуються й дочікуються, потім `asyncio.CancelledError` летить далі.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio															# ⏳ Конкурентні завантаження
import logging															# 🧾 Логування прогресу
import time																# ⏱️ Тривалість експорту
from typing import (													# 🧰 Типізація
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)

# 🧩 Внутрішні модулі проєкту
from iconsprite.domain.export.entities import (
    CombinedExportResult,
    ExportFailure,
    ExportFormat,
    ExportResult,
    ExportStats,
    ParsedIconNode,
)
from iconsprite.domain.export.interfaces import IDesignApiClient, SvgExportOptions
from iconsprite.domain.sprite.entities import IconData, SvgIconData
from iconsprite.infrastructure.sprite.svg_assembler import create_svg_icon_data
from iconsprite.shared.errors import ExportFailedError, ExportFailureContext, SpriteError
from iconsprite.shared.metrics import EXPORT_DOWNLOADS_TOTAL, EXPORT_FAILURES_TOTAL
from iconsprite.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.exporter")					# 🧾 Локальний логер модуля

ItemT = TypeVar("ItemT")
RecordBuilder = Callable[[bytes, Sequence[Tuple[str, ParsedIconNode]]], List[ItemT]]


# ================================
# 📦 КОНСТАНТИ
# ================================
DEFAULT_BATCH_SIZE = 50													# 📦 Вузлів на один запит URL
DEFAULT_MAX_CONCURRENCY = 5												# 🔐 Паралельних завантажень
MAX_LOGGED_FAILURES = 5													# 🧾 Скільки невдач показати в лозі
MAX_SAMPLE_REASONS = 10													# 🧾 Скільки причин покласти в помилку
NULL_URL_REASON = "Export URL is null"


# ================================
# 🧮 ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def group_by_export_id(metadata: Mapping[str, ParsedIconNode]) -> Dict[str, List[str]]:
    """
    Групує icon id за `export_id`, зберігаючи порядок першої появи.

    Returns:
        Dict[str, List[str]]: `export_id → [icon_id, ...]` у порядку вставки метаданих.
    """
    groups: Dict[str, List[str]] = {}
    for icon_id, node in metadata.items():
        groups.setdefault(node.export_id, []).append(icon_id)
    return groups


def make_batches(ids: Sequence[str], batch_size: int) -> List[List[str]]:
    """Ріже послідовність на шматки по `batch_size`; останній може бути коротшим."""
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")
    return [list(ids[start:start + batch_size]) for start in range(0, len(ids), batch_size)]


def build_raster_records(buffer: bytes, icons: Sequence[Tuple[str, ParsedIconNode]]) -> List[IconData]:
    """🖼️ Один `IconData` на кожен аліас; буфер спільний."""
    return [
        IconData(
            id=icon_id,
            name=node.name,
            node_id=node.node_id,
            width=node.bounds.width,
            height=node.bounds.height,
            buffer=buffer,
        )
        for icon_id, node in icons
    ]


def build_vector_records(buffer: bytes, icons: Sequence[Tuple[str, ParsedIconNode]]) -> List[SvgIconData]:
    """🧩 Декодує UTF-8 SVG і витягує viewBox (fallback — з розмірів вузла)."""
    return [create_svg_icon_data(icon_id, buffer, node.bounds.width, node.bounds.height) for icon_id, node in icons]


def _reason(error: BaseException) -> str:
    if isinstance(error, SpriteError):
        return f"[{error.code}] {error.message}"
    return str(error) or type(error).__name__


def _raise_if_cancelled(cancel_event: Optional[asyncio.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise asyncio.CancelledError("export cancelled")


# ================================
# 📤 ОРКЕСТРАТОР
# ================================
class IconExporter:
    """📤 Експортує растрові та векторні іконки через `IDesignApiClient`."""

    def __init__(
        self,
        client: IDesignApiClient,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._client = client											# 🎨 Дизайн-API
        self.batch_size = batch_size									# 📦 Розмір батча
        self.max_concurrency = max_concurrency							# 🔐 Вікно завантажень
        self._clock = clock											# ⏱️ Годинник (підміняється в тестах)

    # ================================
    # 🔄 ПУБЛІЧНИЙ API
    # ================================
    async def export_raster(
        self,
        file_key: str,
        metadata: Mapping[str, ParsedIconNode],
        *,
        scale: float = 1,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ExportResult[IconData]:
        """
        Експортує PNG для всіх іконок `metadata`.

        Args:
            file_key: Ключ файлу дизайну.
            metadata: `icon_id → ParsedIconNode` (порядок вставки значущий).
            scale: Масштаб рендера на боці API.
            cancel_event: Токен скасування.

        Returns:
            ExportResult[IconData]: Записи, невдачі та статистика.

        Raises:
            ExportFailedError: Жодна іконка не експортована.
            asyncio.CancelledError: Експорт скасовано.
        """
        return await self._export(
            file_key,
            metadata,
            ExportFormat.PNG,
            build_raster_records,
            scale=scale,
            svg_options=None,
            cancel_event=cancel_event,
        )

    async def export_vector(
        self,
        file_key: str,
        metadata: Mapping[str, ParsedIconNode],
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ExportResult[SvgIconData]:
        """Експортує SVG (`svg_include_id`, `svg_simplify_stroke`) для всіх іконок `metadata`."""
        return await self._export(
            file_key,
            metadata,
            ExportFormat.SVG,
            build_vector_records,
            scale=None,
            svg_options=SvgExportOptions(include_id=True, simplify_stroke=True),
            cancel_event=cancel_event,
        )

    async def export_all(
        self,
        file_key: str,
        metadata: Mapping[str, ParsedIconNode],
        *,
        raster: bool = True,
        vector: bool = True,
        scale: float = 1,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> CombinedExportResult:
        """Експортує обидва формати незалежно: `SpriteError` одного потрапляє в `errors`."""
        results: Dict[ExportFormat, ExportResult] = {}
        errors: Dict[ExportFormat, SpriteError] = {}

        if raster:
            try:
                results[ExportFormat.PNG] = await self.export_raster(
                    file_key, metadata, scale=scale, cancel_event=cancel_event
                )
            except SpriteError as exc:
                logger.error("❌ PNG export failed: %s", exc.message, extra=exc.to_log_extra())
                errors[ExportFormat.PNG] = exc

        if vector:
            try:
                results[ExportFormat.SVG] = await self.export_vector(
                    file_key, metadata, cancel_event=cancel_event
                )
            except SpriteError as exc:
                logger.error("❌ SVG export failed: %s", exc.message, extra=exc.to_log_extra())
                errors[ExportFormat.SVG] = exc

        return CombinedExportResult(
            raster=results.get(ExportFormat.PNG),
            vector=results.get(ExportFormat.SVG),
            errors=errors,
        )

    # ================================
    # 🔁 ОСНОВНИЙ ЦИКЛ
    # ================================
    async def _export(
        self,
        file_key: str,
        metadata: Mapping[str, ParsedIconNode],
        fmt: ExportFormat,
        build: RecordBuilder,
        *,
        scale: Optional[float],
        svg_options: Optional[SvgExportOptions],
        cancel_event: Optional[asyncio.Event],
    ) -> ExportResult:
        started = self._clock()
        groups = group_by_export_id(metadata)
        batches = make_batches(list(groups), self.batch_size)
        logger.info(
            "📤 %s export: icons=%d unique=%d batches=%d",
            fmt.value.upper(), len(metadata), len(groups), len(batches),
        )

        items: List = []
        failures: List[ExportFailure] = []
        for batch_no, batch in enumerate(batches, start=1):
            _raise_if_cancelled(cancel_event)
            try:
                response = await self._client.get_export_urls(
                    file_key,
                    ids=batch,
                    format=fmt,
                    scale=scale,
                    svg_options=svg_options,
                )
            except asyncio.CancelledError:
                raise
            except Exception as exc:									# noqa: BLE001	# 🧯 Батч падає цілком, цикл продовжується
                reason = _reason(exc)
                logger.warning("⚠️ Batch %d/%d failed: %s", batch_no, len(batches), reason)
                failures.extend(self._failure(fmt, export_id, groups[export_id], metadata, reason) for export_id in batch)
                continue

            if response.err:
                reason = f"Export API error: {response.err}"
                logger.warning("⚠️ Batch %d/%d rejected: %s", batch_no, len(batches), response.err)
                failures.extend(self._failure(fmt, export_id, groups[export_id], metadata, reason) for export_id in batch)
                continue

            batch_items, batch_failures = await self._download_batch(
                fmt, batch, response.images, groups, metadata, build, cancel_event
            )
            items.extend(batch_items)
            failures.extend(batch_failures)
            logger.debug(
                "📦 Batch %d/%d done: items=%d failures=%d",
                batch_no, len(batches), len(batch_items), len(batch_failures),
            )

        failed_icons = sum(len(failure.icon_ids) for failure in failures)
        stats = ExportStats(
            total=len(metadata),
            successful=len(items),
            failed=failed_icons,
            duration_ms=round((self._clock() - started) * 1000.0, 1),
        )
        if failures:
            EXPORT_FAILURES_TOTAL.labels(format=fmt.value).inc(len(failures))
            self._log_failures(fmt, failures)

        if not items:
            raise ExportFailedError(
                f"All {fmt.value.upper()} exports failed",
                context=ExportFailureContext(
                    format=fmt.value,
                    total=stats.total,
                    sample_reasons=tuple(
                        f"{failure.export_id}: {failure.reason}" for failure in failures[:MAX_SAMPLE_REASONS]
                    ),
                ),
                failures=failures,
            )

        logger.info(
            "✅ %s export: %d/%d icons in %.0f ms",
            fmt.value.upper(), stats.successful, stats.total, stats.duration_ms,
        )
        return ExportResult(items=tuple(items), failures=tuple(failures), stats=stats)

    # ================================
    # 📥 ЗАВАНТАЖЕННЯ БАТЧА
    # ================================
    async def _download_batch(
        self,
        fmt: ExportFormat,
        batch: Sequence[str],
        images: Mapping[str, Optional[str]],
        groups: Mapping[str, List[str]],
        metadata: Mapping[str, ParsedIconNode],
        build: RecordBuilder,
        cancel_event: Optional[asyncio.Event],
    ) -> Tuple[List, List[ExportFailure]]:
        """Паралельно скачує батч; кожне завантаження пише лише у власний слот."""
        slots: List[Tuple[List, Optional[ExportFailure]]] = [([], None) for _ in batch]
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _one(position: int, export_id: str, url: str) -> None:
            async with semaphore:
                _raise_if_cancelled(cancel_event)
                icon_ids = groups[export_id]
                try:
                    buffer = await self._client.download(url)
                    records = build(buffer, [(icon_id, metadata[icon_id]) for icon_id in icon_ids])
                except asyncio.CancelledError:
                    raise
                except Exception as exc:								# noqa: BLE001	# 🧯 Невдача стає даними
                    EXPORT_DOWNLOADS_TOTAL.labels(outcome="error").inc()
                    slots[position] = ([], self._failure(fmt, export_id, icon_ids, metadata, _reason(exc)))
                    return
                EXPORT_DOWNLOADS_TOTAL.labels(outcome="ok").inc()
                slots[position] = (records, None)

        tasks: List[asyncio.Task] = []
        for position, export_id in enumerate(batch):
            url = images.get(export_id)
            if not url:
                EXPORT_DOWNLOADS_TOTAL.labels(outcome="missing_url").inc()
                slots[position] = ([], self._failure(fmt, export_id, groups[export_id], metadata, NULL_URL_REASON))
                continue
            tasks.append(asyncio.create_task(_one(position, export_id, url)))

        await self._await_all(tasks, cancel_event)

        items: List = []
        failures: List[ExportFailure] = []
        for records, failure in slots:
            items.extend(records)
            if failure is not None:
                failures.append(failure)
        return items, failures

    async def _await_all(self, tasks: List[asyncio.Task], cancel_event: Optional[asyncio.Event]) -> None:
        """⏳ Чекає всі задачі; при скасуванні гасить решту, дочікується й прокидає `CancelledError`."""
        if not tasks:
            return
        watcher: Optional[asyncio.Task] = None
        try:
            if cancel_event is None:
                await asyncio.gather(*tasks)
                return
            watcher = asyncio.create_task(cancel_event.wait())
            pending = set(tasks)
            while pending:
                done, _ = await asyncio.wait(pending | {watcher}, return_when=asyncio.FIRST_COMPLETED)
                if watcher in done:
                    raise asyncio.CancelledError("export cancelled")
                pending -= done
            for task in tasks:
                task.result()											# 🚨 Прокидаємо неочікувані збої задач
        except asyncio.CancelledError:
            in_flight = sum(1 for task in tasks if not task.done())
            logger.info("🛑 Export cancelled: stopping %d in-flight download(s)", in_flight)
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        finally:
            if watcher is not None and not watcher.done():
                watcher.cancel()

    # ================================
    # 🧾 ЗАПИСИ ПРО НЕВДАЧІ
    # ================================
    @staticmethod
    def _failure(
        fmt: ExportFormat,
        export_id: str,
        icon_ids: Iterable[str],
        metadata: Mapping[str, ParsedIconNode],
        reason: str,
    ) -> ExportFailure:
        ids = tuple(icon_ids)
        return ExportFailure(
            format=fmt,
            export_id=export_id,
            icon_ids=ids,
            node_ids=tuple(metadata[icon_id].node_id for icon_id in ids),
            reason=reason,
        )

    @staticmethod
    def _log_failures(fmt: ExportFormat, failures: Sequence[ExportFailure]) -> None:
        logger.warning("⚠️ Failed to export %d %s item(s):", len(failures), fmt.value.upper())
        for failure in failures[:MAX_LOGGED_FAILURES]:
            logger.warning("  - %s: %s", failure.export_id, failure.reason)
        if len(failures) > MAX_LOGGED_FAILURES:
            logger.warning("  ... and %d more", len(failures) - MAX_LOGGED_FAILURES)


__all__ = [
    "IconExporter",
    "group_by_export_id",
    "make_batches",
    "build_raster_records",
    "build_vector_records",
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_MAX_CONCURRENCY",
    "NULL_URL_REASON",
]
