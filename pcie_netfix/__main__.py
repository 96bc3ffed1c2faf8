# SPDX-License-Identifier: LGPL-3.0-or-later
# pcie_netfix/__main__.py
from .cli.main import main

if __name__ == "__main__":
    main()
