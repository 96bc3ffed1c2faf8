# SPDX-License-Identifier: LGPL-3.0-or-later
# pcie_netfix/core/utils.py
from __future__ import annotations

import datetime as _dt
import json
import logging
import os
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Any, List, Optional

from .exceptions import Fatal


class U:
    @staticmethod
    def ensure_dir(p: Path) -> None:
        p.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def which(prog: str) -> Optional[str]:
        return shutil.which(prog)

    @staticmethod
    def now_ts(now: Optional[_dt.datetime] = None) -> str:
        """Backup timestamp, e.g. 20261019_120000."""
        return (now or _dt.datetime.now()).strftime("%Y%m%d_%H%M%S")

    @staticmethod
    def json_dump(obj: Any) -> str:
        return json.dumps(obj, indent=2, sort_keys=True, default=str)

    @staticmethod
    def run_cmd(
        logger: logging.Logger,
        cmd: List[str],
        *,
        check: bool = True,
        capture: bool = False,
        timeout: Optional[int] = None,
        fatal: bool = False,
    ) -> subprocess.CompletedProcess:
        """
        subprocess.run() with logging. Failures are logged with whatever the
        command printed; `fatal=True` turns them into Fatal (exit code of the
        command, 124 on timeout, 127 if it could not be started).
        """
        shown = " ".join(shlex.quote(x) for x in cmd)
        logger.debug("Running: %s", shown)
        try:
            return subprocess.run(cmd, check=check, capture_output=capture, text=True, timeout=timeout)
        except subprocess.CalledProcessError as e:
            out = "\n".join(s.strip() for s in (e.stdout or e.output, e.stderr) if s and s.strip())
            logger.error("Command failed (rc=%s): %s%s", e.returncode, shown, f"\n{out}" if out else "")
            if fatal:
                raise Fatal(e.returncode or 1, f"Command failed: {shown}", cause=e) from e
            raise
        except subprocess.TimeoutExpired as e:
            logger.error("Command timed out after %ss: %s", timeout, shown)
            if fatal:
                raise Fatal(124, f"Command timed out: {shown}", cause=e) from e
            raise
        except OSError as e:
            logger.error("Cannot run %s: %s", shown, e)
            if fatal:
                raise Fatal(127, f"Cannot run {shown}: {e}", cause=e) from e
            raise

    @staticmethod
    def require_root_if_needed(write_actions: bool) -> None:
        if write_actions and os.geteuid() != 0:
            raise Fatal(1, "This operation requires root. Re-run with sudo.")

    @staticmethod
    def to_text(x: Any) -> str:
        if x is None:
            return ""
        if isinstance(x, bytes):
            return x.decode("utf-8", "replace")
        return str(x)
