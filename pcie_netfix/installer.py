# SPDX-License-Identifier: LGPL-3.0-or-later
# pcie_netfix/installer.py
"""
Install / uninstall the boot-time oneshot unit.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config.settings import DEFAULT_UNIT_NAME
from .config.systemd_template import SystemdUnitParams, render_unit
from .core.exceptions import Fatal
from .core.file_ops import safe_unlink, write_text_atomic
from .core.logger import Log
from .services.systemctl import ServiceController

DEFAULT_UNIT_DIR = Path("/etc/systemd/system")


class Installer:
    def __init__(
        self,
        services: ServiceController,
        params: SystemdUnitParams,
        logger: Optional[logging.Logger] = None,
        *,
        unit_dir: Path = DEFAULT_UNIT_DIR,
        unit_name: str = DEFAULT_UNIT_NAME,
    ):
        self.services = services
        self.params = params
        self.logger = logger or Log.get("installer")
        self.unit_dir = Path(unit_dir)
        self.unit_name = unit_name

    @property
    def unit_path(self) -> Path:
        return self.unit_dir / self.unit_name

    def install_unit(self) -> Path:
        Log.step(self.logger, "Installing systemd service...")
        write_text_atomic(self.unit_path, render_unit(self.params), prefer_mode=0o644)
        self.services.daemon_reload()
        Log.ok(self.logger, f"Service file installed to {self.unit_path}")
        return self.unit_path

    def enable(self) -> None:
        Log.step(self.logger, f"Enabling {self.unit_name} to run at boot...")
        self.services.enable(self.unit_name)
        Log.ok(self.logger, "Service enabled successfully")

    def test(self) -> None:
        Log.step(self.logger, "Testing the service...")
        if not self.services.start(self.unit_name):
            raise Fatal(1, f"Failed to start service; check the logs with: journalctl -u {self.unit_name}")
        Log.ok(self.logger, "Service started successfully")

        if self.services.is_active(self.unit_name):
            Log.ok(self.logger, "Service is running correctly")
        else:
            Log.warn(self.logger, "Service started but may not be active")

        status = self.services.status(self.unit_name)
        if status:
            self.logger.info("Service status:\n%s", status)

    def install(self, *, enable: bool = True, test: bool = True) -> Path:
        Log.banner(self.logger, "PCIe network fix installation")
        path = self.install_unit()
        if enable:
            self.enable()
        if test:
            self.test()
        self.summary()
        return path

    def uninstall(self) -> None:
        Log.step(self.logger, "Uninstalling PCIe network fix service...")

        if self.services.is_enabled(self.unit_name):
            self.services.disable(self.unit_name)
            self.logger.info("Service disabled")

        if self.services.is_active(self.unit_name):
            self.services.stop(self.unit_name)
            self.logger.info("Service stopped")

        if self.unit_path.exists():
            safe_unlink(self.unit_path)
            self.logger.info("Service file removed")

        self.services.daemon_reload()
        Log.ok(self.logger, "Uninstallation completed")

    def summary(self) -> None:
        u = self.unit_name
        Log.ok(self.logger, "Installation completed successfully!")
        self.logger.info("Useful commands:")
        self.logger.info("  - Check service status: systemctl status %s", u)
        self.logger.info("  - View service logs: journalctl -u %s", u)
        self.logger.info("  - Run manually: systemctl start %s", u)
        self.logger.info("  - Disable auto-start: systemctl disable %s", u)
