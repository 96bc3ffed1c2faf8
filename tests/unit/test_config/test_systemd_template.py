# SPDX-License-Identifier: LGPL-3.0-or-later
import argparse
import stat

import pytest

from fakes.fake_logger import FakeLogger
from pcie_netfix.config.systemd_template import (
    SystemdUnitParams,
    generate_systemd_unit,
    infer_unit_params,
    render_unit,
)


def _args(**kw):
    base = dict(
        python="/usr/bin/python3",
        signature="RTL8111/8168/8211/8411",
        interfaces_file="/etc/network/interfaces",
        backup_dir="/etc/network/backup",
        network_service="networking",
        output=None,
    )
    base.update(kw)
    return argparse.Namespace(**base)


@pytest.mark.unit
class TestRender:
    def test_oneshot_before_networking(self):
        unit = render_unit(SystemdUnitParams(python="/usr/bin/python3"))
        assert "Type=oneshot" in unit
        assert "RemainAfterExit=yes" in unit
        assert "Before=network-pre.target networking.service" in unit
        assert "WantedBy=multi-user.target" in unit
        assert "ExecStart=/usr/bin/python3 -m pcie_netfix --restart never\n" in unit
        assert "EnvironmentFile" not in unit

    def test_custom_network_service(self):
        unit = render_unit(SystemdUnitParams(python="py", network_service="NetworkManager"))
        assert "Before=network-pre.target NetworkManager.service" in unit

    @pytest.mark.parametrize("params", [SystemdUnitParams(python=""), SystemdUnitParams(python="py", network_service="a b")])
    def test_invalid_params(self, params):
        with pytest.raises(ValueError):
            render_unit(params)


@pytest.mark.unit
class TestInfer:
    def test_overrides_are_baked_into_exec_start(self):
        p = infer_unit_params(_args(signature="RTL8125 2.5GbE", interfaces_file="/etc/network/interfaces.d/lan"))
        assert p.python == "/usr/bin/python3"
        assert "--signature 'RTL8125 2.5GbE'" in p.extra_args
        assert "--interfaces-file /etc/network/interfaces.d/lan" in p.extra_args
        assert "--backup-dir /etc/network/backup" in p.extra_args

    def test_python_path_is_quoted(self):
        assert infer_unit_params(_args(python="/opt/my venv/bin/python")).python == "'/opt/my venv/bin/python'"


@pytest.mark.unit
class TestGenerate:
    def test_prints_to_stdout(self, capsys):
        assert generate_systemd_unit(_args()) is None
        assert "[Service]" in capsys.readouterr().out

    def test_writes_file_with_next_steps(self, tmp_path):
        out = tmp_path / "pcie-netfix.service"
        log = FakeLogger()

        path = generate_systemd_unit(_args(output=str(out)), log)

        assert path == out
        assert "ExecStart=/usr/bin/python3 -m pcie_netfix --restart never --signature" in out.read_text()
        assert stat.S_IMODE(out.stat().st_mode) == 0o644
        assert any("systemctl enable pcie-netfix.service" in m for m in log.messages("info"))
