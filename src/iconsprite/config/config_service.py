# ⚙️ iconsprite/config/config_service.py
"""
⚙️ config_service.py — шарувата конфігурація пайплайна спрайтів.

🔹 Клас `ConfigService`:
- Завантажує вбудований `config.yaml`, потім файл користувача (YAML або JSON), потім `.env`/оточення.
- Надає єдиний метод `.get()` з крапковими ключами (`export.batch_size`).
- Не є singleton: кожен запуск CLI/тест отримує власний знімок.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import yaml                                  # 📦 YAML-парсинг
from dotenv import load_dotenv              # 🔐 Завантаження змінних із .env

# 🔠 Системні імпорти
import copy                                 # 🧬 Глибокі копії для as_dict()
import json                                 # 📄 Робота з JSON-файлами
import logging                              # 🧾 Логування
import os                                   # 📁 Доступ до змінних середовища
from pathlib import Path                    # 📁 Побудова шляху до файлів
from typing import Any, Dict, Mapping, Optional, Union  # 🧩 Типізація

# 🧩 Внутрішні модулі проєкту
from iconsprite.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

# 🔐 Змінна оточення → крапковий ключ конфігурації
ENV_KEYS: Dict[str, str] = {
    "FIGMA_TOKEN": "api.token",
    "ICONSPRITE_BASE_URL": "api.base_url",
    "ICONSPRITE_BATCH_SIZE": "export.batch_size",
    "ICONSPRITE_MAX_CONCURRENCY": "export.max_concurrency",
    "ICONSPRITE_LOG_LEVEL": "logging.level",
}


# ============================
# ⚙️ СЕРВІС ДОСТУПУ ДО КОНФІГІВ
# ============================
class ConfigService:
    """
    ⚙️ Обʼєднана конфігурація з трьох джерел.

    Пріоритет (від нижчого до вищого): вбудований YAML → файл користувача → оточення.
    Відсутній файл користувача — помилка; зламаний вбудований YAML — теж.
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        *,
        env: Optional[Mapping[str, str]] = None,
        load_env_file: bool = True,
    ) -> None:
        self._config: Dict[str, Any] = {}       # 📦 Обʼєднана конфігурація
        self._load_all_configs(config_path, env, load_env_file)

    def _load_all_configs(
        self,
        config_path: Optional[Union[str, Path]],
        env: Optional[Mapping[str, str]],
        load_env_file: bool,
    ) -> None:
        # --- 1. Вбудовані дефолти ---
        logger.debug("📘 Завантаження вбудованого config.yaml")
        self._deep_update(self._config, self._read_file(DEFAULT_CONFIG_PATH))

        # --- 2. Файл користувача ---
        if config_path is not None:
            path = Path(config_path)
            logger.debug("📄 Завантаження конфігурації користувача: %s", path)
            self._deep_update(self._config, self._read_file(path))

        # --- 3. .env та оточення ---
        if env is None:
            if load_env_file:
                load_dotenv()                    # 🔐 Ініціалізує змінні середовища з файлу .env
            env = os.environ
        env_vars = {key: env[name] for name, key in ENV_KEYS.items() if env.get(name)}
        self._deep_update(self._config, self._unflatten_dict(env_vars))

        logger.info("✅ Конфігурацію завантажено (user_file=%s, env_overrides=%d)", config_path or "-", len(env_vars))

    @staticmethod
    def _read_file(path: Path) -> Dict[str, Any]:
        """📥 Читає YAML або JSON (за розширенням) у словник."""
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping at top level")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """
        🔑 Отримує значення конфігурації за ключем (наприклад: 'export.batch_size').

        Args:
            key (str): Ключ у форматі з крапкою.
            default (Any): Значення за замовчуванням, якщо ключ не знайдено або дорівнює None.

        Returns:
            Any: Значення параметра або default.
        """
        value: Any = self._config
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default
        return default if value is None else value

    def section(self, key: str) -> Dict[str, Any]:
        """📂 Повертає копію вкладеного розділу (порожній словник, якщо його немає)."""
        node = self.get(key, {})
        return copy.deepcopy(node) if isinstance(node, dict) else {}

    def as_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._config)

    # ===============================
    # 🔧 ДОПОМІЖНІ МЕТОДИ ЗЛИТТЯ КОНФІГІВ
    # ===============================
    @staticmethod
    def _unflatten_dict(d: Mapping[str, Any]) -> Dict[str, Any]:
        """
        🔁 Перетворює ключі з крапками в ієрархічний словник.
        'api.token' → {'api': {'token': ...}}
        """
        result: Dict[str, Any] = {}
        for key, value in d.items():
            parts = key.split(".")
            d_ref = result
            for part in parts[:-1]:
                d_ref = d_ref.setdefault(part, {})
            d_ref[parts[-1]] = value
        return result

    @classmethod
    def _deep_update(cls, source: Dict[str, Any], overrides: Mapping[str, Any]) -> None:
        """🔁 Рекурсивно обʼєднує словники; вкладені dict зливаються, решта перезаписується."""
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(source.get(key), dict):
                cls._deep_update(source[key], value)
            else:
                source[key] = value


__all__ = ["ConfigService", "DEFAULT_CONFIG_PATH", "ENV_KEYS"]
