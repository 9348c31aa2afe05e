# 🔌 iconsprite/domain/export/interfaces.py
"""
🔌 Контракти дизайн-API для оркестратора експорту.

🔹 `IDesignApiClient` — два виклики: отримати URL експортів і скачати байти.
🔹 `ExportUrlsResponse` — мапа `export_id → URL | None` та опційне `err`.
🔹 `SvgExportOptions` — прапорці SVG-експорту (ids, спрощення обведень).
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass, field								# 🧱 DTO відповіді
from typing import Dict, Optional, Protocol, Sequence, runtime_checkable	# 🧰 Протоколи

# 🧩 Внутрішні модулі проєкту
from iconsprite.domain.export.entities import ExportFormat				# 🏷️ png / svg


@dataclass(frozen=True)
class SvgExportOptions:
    """🧩 Прапорці SVG-експорту."""

    include_id: bool = True												# 🆔 svg_include_id
    simplify_stroke: bool = True										# ✏️ svg_simplify_stroke


@dataclass(frozen=True)
class ExportUrlsResponse:
    """📨 Відповідь `/v1/images`: `None` означає, що сервер не відрендерив вузол."""

    images: Dict[str, Optional[str]] = field(default_factory=dict)
    err: Optional[str] = None


@runtime_checkable
class IDesignApiClient(Protocol):
    """
    Контракт клієнта дизайн-API.

    Реалізації самі вирішують питання автентифікації, ретраїв і таймаутів;
    оркестратор лише викликає методи й перетворює винятки на `ExportFailure`.
    """

    async def get_export_urls(
        self,
        file_key: str,
        *,
        ids: Sequence[str],
        format: ExportFormat,
        scale: Optional[float] = None,
        svg_options: Optional[SvgExportOptions] = None,
    ) -> ExportUrlsResponse:
        """Повертає тимчасові URL відрендерених експортів для `ids`."""
        ...

    async def download(self, url: str) -> bytes:
        """Скачує байти за тимчасовим URL."""
        ...


__all__ = ["SvgExportOptions", "ExportUrlsResponse", "IDesignApiClient"]
