#!/usr/bin/env python3
# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# Run from a checkout without installing: sudo ./pcie-netfix.py [--dry-run|--status|...]
from __future__ import annotations

from pcie_netfix.cli.main import main

if __name__ == "__main__":
    main()
