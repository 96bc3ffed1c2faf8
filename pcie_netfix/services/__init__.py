# pcie_netfix/services/__init__.py
from .systemctl import ServiceController, SystemctlController

__all__ = ["ServiceController", "SystemctlController"]
