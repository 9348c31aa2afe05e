# 🔐 iconsprite/shared/utils/content_hash.py
"""
🔐 Короткі відбитки вмісту для cache-busting імен файлів спрайтів.

🔹 Перші 8 hex-символів SHA-256 (не криптографічний захист, лише відбиток).
🔹 `combined_hash` — один відбиток для PNG + SVG пари.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import hashlib															# 🔐 SHA-256
from typing import Union												# 🧰 Типізація

HASH_LENGTH: int = 8													# 📏 Довжина відбитка


def content_hash(data: Union[bytes, str]) -> str:
    """Повертає 8-символьний hex-відбиток байтів або UTF-8 рядка."""
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    return hashlib.sha256(raw).hexdigest()[:HASH_LENGTH]


def combined_hash(png_buffer: bytes, svg_content: str) -> str:
    """Відбиток пари артефактів: SHA-256 від конкатенації PNG-байтів і SVG-тексту."""
    digest = hashlib.sha256()
    digest.update(png_buffer)
    digest.update(svg_content.encode("utf-8"))
    return digest.hexdigest()[:HASH_LENGTH]


__all__ = ["HASH_LENGTH", "content_hash", "combined_hash"]
