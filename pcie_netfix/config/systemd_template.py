# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import shlex
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from ..core.file_ops import write_text_atomic
from .settings import DEFAULT_UNIT_NAME

# Keep this template in one place so both CLI help and the installer use the same text.
# We use Python .format_map() so we can inject safe, quoted values.
SYSTEMD_UNIT_TEMPLATE = """\
[Unit]
Description={description}
Documentation=man:systemd.service(5)
DefaultDependencies=no
After=local-fs.target systemd-udevd.service systemd-udev-settle.service
Wants=network-pre.target
Before=network-pre.target {network_service}.service

[Service]
Type=oneshot
RemainAfterExit=yes
ExecStart={python} -m pcie_netfix --restart never{extra_args}
Environment=PYTHONUNBUFFERED=1
StandardOutput=journal
StandardError=journal

[Install]
WantedBy=multi-user.target
"""


def _q(s: str) -> str:
    """Shell-quote for systemd ExecStart arguments."""
    return shlex.quote(s)


def _normalize_extra_args(extra: Any) -> str:
    """
    Extra args are appended verbatim (user-controlled), whitespace collapsed.
    """
    if extra is None:
        return ""
    if isinstance(extra, (list, tuple)):
        extra = " ".join(_q(str(x)) for x in extra)
    s = " ".join(str(extra).split())
    return f" {s}" if s else ""


@dataclass(frozen=True)
class SystemdUnitParams:
    python: str
    description: str = "Rebind PCIe NIC interface name in /etc/network/interfaces"
    network_service: str = "networking"
    extra_args: str = ""


def infer_unit_params(args: Any) -> SystemdUnitParams:
    """
    Build unit params from parsed CLI args (or any object with the same attributes).
    Rebinder overrides given on the command line are baked into ExecStart.
    """
    python = getattr(args, "python", None) or sys.executable or "/usr/bin/python3"

    extra = []
    sig = getattr(args, "signature", None)
    if sig:
        extra += ["--signature", str(sig)]
    ifile = getattr(args, "interfaces_file", None)
    if ifile:
        extra += ["--interfaces-file", str(ifile)]
    bdir = getattr(args, "backup_dir", None)
    if bdir:
        extra += ["--backup-dir", str(bdir)]

    extra_args = _normalize_extra_args(extra)
    user_extra = _normalize_extra_args(getattr(args, "extra_args", None))

    return SystemdUnitParams(
        python=_q(str(python)),
        network_service=str(getattr(args, "network_service", None) or "networking"),
        extra_args=extra_args + user_extra,
    )


def _validate_params(p: SystemdUnitParams) -> None:
    if not p.python:
        raise ValueError("python cannot be empty")
    if not p.network_service or any(ch.isspace() for ch in p.network_service):
        raise ValueError(f"invalid network service name: {p.network_service!r}")


def render_unit(p: SystemdUnitParams) -> str:
    _validate_params(p)
    return SYSTEMD_UNIT_TEMPLATE.format_map(
        {
            "description": p.description,
            "python": p.python,
            "network_service": p.network_service,
            "extra_args": p.extra_args,
        }
    )


def generate_systemd_unit(args: Any, logger=None) -> Optional[Path]:
    """
    Print or write the boot unit.

    With `args.output` set the unit is written atomically and the path returned;
    otherwise it goes to stdout.
    """
    unit = render_unit(infer_unit_params(args))

    out = getattr(args, "output", None)
    if not out:
        print(unit)
        return None

    out_path = Path(str(out)).expanduser()
    write_text_atomic(out_path, unit, prefer_mode=0o644)

    if logger:
        logger.info("Systemd unit written to %s", out_path)

        name = out_path.name
        unit_name = name if name.endswith(".service") else DEFAULT_UNIT_NAME

        logger.info("Next steps:")
        logger.info("  sudo install -m 0644 %s /etc/systemd/system/%s", out_path, unit_name)
        logger.info("  sudo systemctl daemon-reload")
        logger.info("  sudo systemctl enable %s", unit_name)
        logger.info("  sudo journalctl -u %s", unit_name)

    return out_path
