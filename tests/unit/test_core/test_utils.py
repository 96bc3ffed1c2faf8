# SPDX-License-Identifier: LGPL-3.0-or-later
import datetime as dt
import subprocess
from unittest.mock import Mock, patch

import pytest

from fakes.fake_logger import FakeLogger
from pcie_netfix.core.exceptions import Fatal
from pcie_netfix.core.utils import U


@pytest.mark.unit
class TestUtils:
    def test_now_ts_format(self):
        assert U.now_ts(dt.datetime(2026, 10, 19, 7, 5, 9)) == "20261019_070509"

    def test_json_dump_is_sorted_and_stringifies(self):
        out = U.json_dump({"b": 1, "a": dt.date(2026, 1, 2)})
        assert out.index('"a"') < out.index('"b"')
        assert "2026-01-02" in out

    def test_to_text(self):
        assert U.to_text(None) == ""
        assert U.to_text(b"enp6s0\xff") == "enp6s0�"
        assert U.to_text(3) == "3"

    @patch("subprocess.run")
    def test_run_cmd_success(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="ok", stderr="")
        cp = U.run_cmd(FakeLogger(), ["ip", "link"], capture=True)
        assert cp.stdout == "ok"
        assert mock_run.call_args.kwargs["capture_output"] is True

    @patch("subprocess.run", side_effect=subprocess.CalledProcessError(4, ["systemctl"], output="", stderr="denied"))
    def test_run_cmd_fatal_wraps_failure(self, _run):
        log = FakeLogger()
        with pytest.raises(Fatal) as ei:
            U.run_cmd(log, ["systemctl", "enable", "x"], fatal=True)
        assert ei.value.code == 4
        assert any("denied" in m for m in log.messages("error"))

    @patch("subprocess.run", side_effect=FileNotFoundError("no such file"))
    def test_run_cmd_reraises_without_fatal(self, _run):
        with pytest.raises(FileNotFoundError):
            U.run_cmd(FakeLogger(), ["lspci"])

    @pytest.mark.security
    @patch("os.geteuid", return_value=1000)
    def test_require_root_raises_without_logging(self, _euid):
        U.require_root_if_needed(False)
        with pytest.raises(Fatal) as ei:
            U.require_root_if_needed(True)
        assert "requires root" in str(ei.value)
