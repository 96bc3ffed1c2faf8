# pcie_netfix/config/__init__.py
from .config_loader import Config
from .settings import RebinderConfig

__all__ = ["Config", "RebinderConfig"]
