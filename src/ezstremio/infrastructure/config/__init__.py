from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, PrehrajConfig

__all__ = ["AppConfig", "EnvOverrides", "PrehrajConfig", "load_config"]
