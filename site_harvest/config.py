# === FILE: site_harvest/config.py ===
"""
Загрузка и валидация конфигурации краулера SiteHarvest.
Схема описана моделью Pydantic, файл может быть в YAML или JSON.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_USER_AGENT = "GMC-Compliance-Checker/1.0 (Web Crawler)"


class CrawlerConfig(BaseModel):
    """Настройки одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    max_pages: int = Field(50, ge=1, description="Лимит страниц при обходе в ширину.")
    sitemap_max_pages: int = Field(100, ge=1, description="Лимит страниц в режиме sitemap.")
    max_child_sitemaps: int = Field(5, ge=0, description="Сколько дочерних sitemap читать из индекса.")
    concurrency: int = Field(1, ge=1, description="Число одновременных загрузок.")
    scan_timeout: Optional[float] = Field(
        60.0, gt=0, description="Общий дедлайн обхода; по истечении возвращаются собранные страницы."
    )


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный CrawlerConfig.
    Без явного пути используется configs/default.yaml, а если его нет, значения по умолчанию.
    Явно указанный, но отсутствующий файл даёт FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return CrawlerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return CrawlerConfig(**data)


__all__ = ["CrawlerConfig", "DEFAULT_USER_AGENT", "load_config"]
