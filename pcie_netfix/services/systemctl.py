# SPDX-License-Identifier: LGPL-3.0-or-later
# pcie_netfix/services/systemctl.py
from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional

from ..core.exceptions import Fatal
from ..core.logger import Log
from ..core.utils import U


class ServiceController(ABC):
    """Narrow view of the service manager used by the CLI and installer."""

    @abstractmethod
    def restart(self, unit: str) -> bool:
        """Restart `unit`; False (not an exception) if the restart failed."""
        raise NotImplementedError

    @abstractmethod
    def start(self, unit: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def stop(self, unit: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def enable(self, unit: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def disable(self, unit: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def is_active(self, unit: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def is_enabled(self, unit: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def status(self, unit: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def daemon_reload(self) -> None:
        raise NotImplementedError


class SystemctlController(ServiceController):
    def __init__(self, logger: Optional[logging.Logger] = None, *, systemctl: str = "systemctl"):
        self.logger = logger or Log.get("services")
        self.systemctl = systemctl

    def _cmd(self, *args: str) -> List[str]:
        return [self.systemctl, *args]

    def _run(self, *args: str) -> None:
        """Mutating call: failure is fatal."""
        U.run_cmd(self.logger, self._cmd(*args), capture=True, fatal=True)

    def _probe(self, *args: str) -> subprocess.CompletedProcess:
        """Query call: non-zero exit is an answer, not an error."""
        try:
            return U.run_cmd(self.logger, self._cmd(*args), check=False, capture=True)
        except OSError as e:
            raise Fatal(127, f"{self.systemctl} unavailable: {e}", cause=e) from e

    def restart(self, unit: str) -> bool:
        try:
            U.run_cmd(self.logger, self._cmd("restart", unit), capture=True)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError):
            return False
        return True

    def start(self, unit: str) -> bool:
        try:
            U.run_cmd(self.logger, self._cmd("start", unit), capture=True)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError):
            return False
        return True

    def stop(self, unit: str) -> None:
        self._run("stop", unit)

    def enable(self, unit: str) -> None:
        self._run("enable", unit)

    def disable(self, unit: str) -> None:
        self._run("disable", unit)

    def is_active(self, unit: str) -> bool:
        return self._probe("is-active", "--quiet", unit).returncode == 0

    def is_enabled(self, unit: str) -> bool:
        return self._probe("is-enabled", "--quiet", unit).returncode == 0

    def status(self, unit: str) -> str:
        cp = self._probe("status", unit, "--no-pager", "-l")
        return U.to_text(cp.stdout).rstrip()

    def daemon_reload(self) -> None:
        self._run("daemon-reload")
