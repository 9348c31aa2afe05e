# 📊 iconsprite/shared/metrics/__init__.py
"""
📊 Prometheus-метрики пайплайна експорту та збірки спрайтів.

🔹 `EXPORT_DOWNLOADS_TOTAL{outcome}` — завантаження експортів (ok/error/missing_url).
🔹 `EXPORT_FAILURES_TOTAL{format}` — записи `ExportFailure` за форматом.
🔹 `RETRY_ATTEMPTS_TOTAL{outcome}` — ретраї (retry/exhausted/rate_limited).
🔹 `SVG_OPTIMIZATION_FALLBACK_TOTAL` — відкат до неоптимізованого SVG.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import Counter									# 📊 Prometheus-метрики

# ================================
# 📥 ЕКСПОРТ
# ================================
EXPORT_DOWNLOADS_TOTAL = Counter(
    "iconsprite_export_downloads_total",								# 🏷️ Імʼя метрики
    "Export downloads by outcome",										# 📝 Опис у Prometheus
    ["outcome"],
)

EXPORT_FAILURES_TOTAL = Counter(
    "iconsprite_export_failures_total",
    "Per-icon export failure records by format",
    ["format"],
)

# ================================
# 🔁 РЕТРАЇ
# ================================
RETRY_ATTEMPTS_TOTAL = Counter(
    "iconsprite_retry_attempts_total",
    "Retry helper decisions by outcome",
    ["outcome"],
)

# ================================
# 🧹 SVG
# ================================
SVG_OPTIMIZATION_FALLBACK_TOTAL = Counter(
    "iconsprite_svg_optimization_fallback_total",
    "Sprite assemblies that fell back to unoptimized markup",
)


__all__ = [
    "EXPORT_DOWNLOADS_TOTAL",
    "EXPORT_FAILURES_TOTAL",
    "RETRY_ATTEMPTS_TOTAL",
    "SVG_OPTIMIZATION_FALLBACK_TOTAL",
]
