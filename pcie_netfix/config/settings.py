# SPDX-License-Identifier: LGPL-3.0-or-later
# pcie_netfix/config/settings.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

DEFAULT_SIGNATURE = "RTL8111/8168/8211/8411"
DEFAULT_INTERFACES_FILE = "/etc/network/interfaces"
DEFAULT_BACKUP_DIR = "/etc/network/backup"
DEFAULT_NETWORK_SERVICE = "networking"
DEFAULT_UNIT_NAME = "pcie-netfix.service"


@dataclass(frozen=True)
class RebinderConfig:
    """What to look for, which file to rewrite, and where backups go."""

    device_signature: str = DEFAULT_SIGNATURE
    config_path: Path = Path(DEFAULT_INTERFACES_FILE)
    backup_dir: Path = Path(DEFAULT_BACKUP_DIR)

    def __post_init__(self) -> None:
        if not str(self.device_signature or "").strip():
            raise ValueError("device_signature cannot be empty")
        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "config_path", Path(self.config_path).expanduser())
        object.__setattr__(self, "backup_dir", Path(self.backup_dir).expanduser())

    @classmethod
    def from_mapping(cls, m: Optional[Mapping[str, Any]]) -> "RebinderConfig":
        """
        Build from merged config/CLI values. Accepts the CLI dest names
        (`signature`, `interfaces_file`, `backup_dir`) as well as the field names.
        """
        m = dict(m or {})

        def pick(*keys: str, default: Any) -> Any:
            for k in keys:
                v = m.get(k)
                if v is not None and str(v).strip() != "":
                    return v
            return default

        return cls(
            device_signature=str(pick("device_signature", "signature", default=DEFAULT_SIGNATURE)),
            config_path=Path(str(pick("config_path", "interfaces_file", default=DEFAULT_INTERFACES_FILE))),
            backup_dir=Path(str(pick("backup_dir", default=DEFAULT_BACKUP_DIR))),
        )
