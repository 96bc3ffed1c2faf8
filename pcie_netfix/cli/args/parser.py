# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# pcie_netfix/cli/args/parser.py
from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, Optional, Sequence, Tuple

from ...config.config_loader import Config
from ...core.logger import Log, c, is_tty
from ...core.utils import U
from .builder import HelpFormatter, _build_epilog
from .groups import (
    _add_global_config_logging,
    _add_modes,
    _add_rebinder_knobs,
    _add_restart_policy,
    _add_systemd_knobs,
)


def build_parser() -> argparse.ArgumentParser:
    color = is_tty(sys.stdout)
    p = argparse.ArgumentParser(
        prog="pcie-netfix",
        description=c(
            "pcie-netfix: keep /etc/network/interfaces in sync with the PCIe NIC's interface name",
            "green",
            ["bold"],
            enable=color,
        ),
        formatter_class=HelpFormatter,
        epilog=_build_epilog(color),
    )

    _add_global_config_logging(p)
    _add_modes(p)
    _add_rebinder_knobs(p)
    _add_restart_policy(p)
    _add_systemd_knobs(p)
    return p


def _build_preparser() -> argparse.ArgumentParser:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", action="append", default=[])
    pre.add_argument("-v", "--verbose", action="count", default=0)
    pre.add_argument("-q", "--quiet", action="count", default=0)
    pre.add_argument("--log-file", dest="log_file", default=None)
    pre.add_argument("--json-logs", dest="json_logs", action="store_true")
    pre.add_argument("--dump-config", action="store_true")
    pre.add_argument("--dump-args", action="store_true")
    return pre


def _load_merged_config(logger: Any, cfgs: Sequence[str]) -> Dict[str, Any]:
    if not cfgs:
        return {}
    expanded = Config.expand_configs(logger, list(cfgs))
    return Config.load_many(logger, expanded)


def validate_args(args: argparse.Namespace) -> None:
    if not str(args.signature or "").strip():
        raise SystemExit("--signature cannot be empty")
    if args.output and not args.generate_systemd:
        raise SystemExit("--output is only valid with --generate-systemd")


def parse_args_with_config(
    argv: Optional[Sequence[str]] = None,
    logger: Any = None,
) -> Tuple[argparse.Namespace, Dict[str, Any], Any]:
    """
    Flow:
      Phase 0: parse ONLY global flags needed to locate config/logging
      Phase 1: load+merge config files
      Phase 2: apply config as defaults onto the parser
      Phase 3: full parse to get final args (CLI wins over config)
      Phase 4: validate; re-apply logging settings that config may have changed

    Returns: (args, merged_config_dict, logger)
    """
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    parser = build_parser()

    pre = _build_preparser()
    args0, _rest = pre.parse_known_args(argv)

    own_logger = logger is None
    if own_logger:
        logger = Log.setup(
            args0.verbose,
            args0.log_file,
            quiet=args0.quiet,
            json_logs=args0.json_logs,
        )

    conf = _load_merged_config(logger, args0.config or [])

    if args0.dump_config:
        print(U.json_dump(conf))
        raise SystemExit(0)

    Config.apply_as_defaults(logger, parser, conf)

    args = parser.parse_args(argv)

    if args0.dump_args:
        print(U.json_dump(vars(args)))
        raise SystemExit(0)

    validate_args(args)

    if own_logger and (
        args.verbose != args0.verbose
        or args.quiet != args0.quiet
        or args.log_file != args0.log_file
        or bool(args.json_logs) != bool(args0.json_logs)
    ):
        logger = Log.setup(args.verbose, args.log_file, quiet=args.quiet, json_logs=bool(args.json_logs))

    return args, conf, logger
