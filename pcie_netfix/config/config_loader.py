# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# pcie_netfix/config/config_loader.py
"""
YAML/JSON config file loading for the two-phase CLI parse.

Files are merged in order (later overrides earlier), keys are normalized
to argparse dest style (dashes -> underscores), and the merged mapping is
applied as parser defaults so explicit CLI flags still win.
"""
from __future__ import annotations

import argparse
import glob
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..core.exceptions import Fatal


def _normalize_key(k: Any) -> str:
    return str(k).strip().replace("-", "_")


class Config:
    @staticmethod
    def expand_configs(logger: logging.Logger, cfgs: List[str]) -> List[Path]:
        """
        Expand `~` and shell globs. A literal path that does not exist is fatal;
        a glob that matches nothing is only logged.
        """
        out: List[Path] = []
        for raw in cfgs:
            s = str(Path(str(raw)).expanduser())
            if any(ch in s for ch in "*?["):
                hits = sorted(glob.glob(s))
                if not hits:
                    logger.warning("Config glob matched nothing: %s", s)
                out.extend(Path(h) for h in hits)
                continue
            p = Path(s)
            if not p.is_file():
                raise Fatal(2, f"Config file not found: {p}")
            out.append(p)
        return out

    @staticmethod
    def load_one(logger: logging.Logger, path: Path) -> Dict[str, Any]:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise Fatal(2, f"Cannot read config {path}: {e}", cause=e) from e

        try:
            if Path(path).suffix.lower() == ".json":
                data = json.loads(text) if text.strip() else {}
            else:
                data = yaml.safe_load(text) or {}
        except (yaml.YAMLError, ValueError) as e:
            raise Fatal(2, f"Invalid config {path}: {e}", cause=e) from e

        if not isinstance(data, dict):
            raise Fatal(2, f"Config {path} must be a mapping at top level (got {type(data).__name__})")

        logger.debug("Loaded config %s (%d keys)", path, len(data))
        return {_normalize_key(k): v for k, v in data.items()}

    @staticmethod
    def load_many(logger: logging.Logger, paths: List[Path]) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for p in paths:
            merged.update(Config.load_one(logger, p))
        return merged

    @staticmethod
    def apply_as_defaults(logger: logging.Logger, parser: argparse.ArgumentParser, conf: Dict[str, Any]) -> None:
        """
        Push config values into parser defaults. Unknown keys are ignored (logged).
        """
        known = {a.dest for a in parser._actions}
        defaults: Dict[str, Any] = {}
        for k, v in conf.items():
            if k in known:
                defaults[k] = v
            else:
                logger.debug("Ignoring unknown config key: %s", k)
        if defaults:
            parser.set_defaults(**defaults)
