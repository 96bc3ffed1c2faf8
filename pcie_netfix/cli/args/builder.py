# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# pcie_netfix/cli/args/builder.py
from __future__ import annotations

import argparse

from ...core.logger import c
from ..help_texts import FEATURE_SUMMARY, USAGE_EXAMPLES, YAML_EXAMPLE


class HelpFormatter(argparse.RawDescriptionHelpFormatter, argparse.ArgumentDefaultsHelpFormatter):
    """Combines raw description formatting with default value display in help."""


def _build_epilog(color: bool = True) -> str:
    return (
        c("Examples:\n", "cyan", ["bold"], enable=color)
        + c(USAGE_EXAMPLES, "cyan", enable=color)
        + "\n"
        + c("YAML example:\n", "cyan", ["bold"], enable=color)
        + c(YAML_EXAMPLE, "cyan", enable=color)
        + "\n"
        + c("Feature summary:\n", "cyan", ["bold"], enable=color)
        + c(FEATURE_SUMMARY, "cyan", enable=color)
    )
