# -*- coding: utf-8 -*-
"""
枝写 BranchWrite - 分支式创作写作应用的存储核心
BranchWrite - Storage core of a branching creative-writing application

Copyright © 2025-2026 BranchWrite Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  应用配置 - 环境变量驱动的运行参数 + config.yaml 中的存储参数
  Application configuration - env-driven runtime settings plus storage options from config.yaml.

使用示例 / Usage:
    from branchwrite.config import settings, config_section

    settings.debug
    config_section("storage").get("lock_timeout", 30)
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}

# Default config file lives next to the package (backend/config.yaml)
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


class Settings(BaseModel):
    """Runtime settings resolved from the environment."""

    debug: bool = Field(default=False, description="Verbose logging")
    host: str = Field(default="127.0.0.1", description="HTTP bind host")
    port: int = Field(default=8000, description="HTTP port")
    data_dir: Optional[str] = Field(
        default=None,
        description="Storage root override; defaults to ~/.branchwrite",
    )

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            debug=str(os.getenv("BRANCHWRITE_DEBUG", "")).strip().lower() in _TRUTHY,
            host=os.getenv("BRANCHWRITE_HOST") or "127.0.0.1",
            port=int(os.getenv("BRANCHWRITE_PORT") or os.getenv("PORT") or 8000),
            data_dir=os.getenv("BRANCHWRITE_DATA_DIR") or None,
        )


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    读取 YAML 配置文件

    Load the YAML config file. A missing file yields an empty dict so every
    consumer falls back to its own defaults.

    Args:
        path: 配置文件路径 / Config file path (defaults to BRANCHWRITE_CONFIG or backend/config.yaml)

    Returns:
        配置字典 / Config dict
    """
    config_path = Path(path or os.getenv("BRANCHWRITE_CONFIG") or DEFAULT_CONFIG_PATH)
    if not config_path.exists():
        return {}
    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def config_section(name: str, source: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    读取配置中的一个小节

    Return one top-level section of the config as a dict. A section whose
    keys are all commented out parses as None and yields an empty dict.
    """
    section = (config if source is None else source).get(name)
    return section if isinstance(section, dict) else {}


settings = Settings.from_env()
config: Dict[str, Any] = load_config()
