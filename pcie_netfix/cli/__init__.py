# pcie_netfix/cli/__init__.py
