# SPDX-License-Identifier: LGPL-3.0-or-later
import pytest
from rich.console import Console

from fakes.fake_hardware import FakeEnumerator, rtl
from fakes.fake_logger import FakeLogger
from fakes.fake_services import FakeServices
from pcie_netfix.cli import main as main_mod
from pcie_netfix.cli.args import parse_args_with_config
from pcie_netfix.cli.main import App
from pcie_netfix.core.exceptions import Fatal, NotFoundError

INTERFACES = "auto vmbr0\niface vmbr0 inet static\n        bridge-ports enp3s0\n"


@pytest.fixture
def env(tmp_path, monkeypatch):
    iface = tmp_path / "interfaces"
    iface.write_text(INTERFACES, encoding="utf-8")
    monkeypatch.setattr("os.geteuid", lambda: 0)
    return tmp_path


def _app(env, argv, *, records=(rtl(),), services=None, confirm=lambda _s: True, interactive=False):
    argv = ["--interfaces-file", str(env / "interfaces"), "--backup-dir", str(env / "backup"), *argv]
    args, _conf, _ = parse_args_with_config(argv, FakeLogger())
    return App(
        FakeLogger(),
        args,
        enumerator=FakeEnumerator(records),
        services=services or FakeServices(),
        console=Console(record=True, width=160, color_system=None),
        confirm=confirm,
        interactive=interactive,
    )


@pytest.mark.unit
class TestFixMode:
    def test_fix_and_restart_always(self, env):
        app = _app(env, ["--restart", "always"])

        assert app.run() == 0

        assert "bridge-ports enp6s0" in (env / "interfaces").read_text(encoding="utf-8")
        assert app.services.calls == [("restart", "networking")]

    def test_ask_without_tty_never_prompts(self, env):
        asked = []
        app = _app(env, [], confirm=lambda s: asked.append(s) or True, interactive=False)

        app.run()

        assert asked == []
        assert app.services.calls == []
        assert any("systemctl restart networking" in m for m in app.logger.messages("info"))

    def test_ask_interactive_confirmed(self, env, monkeypatch):
        shown = []
        app = _app(env, ["--network-service", "NetworkManager"], interactive=True)
        monkeypatch.setattr(app, "cmd_status", lambda: shown.append(True) or 0)

        app.run()

        assert app.services.calls == [("restart", "NetworkManager")]
        assert shown == [True]

    def test_ask_interactive_declined(self, env):
        app = _app(env, [], confirm=lambda _s: False, interactive=True)
        app.run()
        assert app.services.calls == []

    def test_no_change_means_no_restart(self, env):
        (env / "interfaces").write_text(INTERFACES.replace("enp3s0", "enp6s0"), encoding="utf-8")
        app = _app(env, ["--restart", "always"])
        app.run()
        assert app.services.calls == []

    def test_failed_restart_is_reported_not_raised(self, env):
        app = _app(env, ["--restart", "always"], services=FakeServices(restart_ok=False))
        assert app.run() == 0
        assert any("Failed to restart" in m for m in app.logger.messages("warning"))

    def test_no_controller(self, env):
        with pytest.raises(NotFoundError):
            _app(env, [], records=()).run()

    @pytest.mark.security
    def test_fix_requires_root(self, env, monkeypatch):
        monkeypatch.setattr("os.geteuid", lambda: 1000)
        with pytest.raises(Fatal):
            _app(env, []).run()
        assert "enp3s0" in (env / "interfaces").read_text(encoding="utf-8")


@pytest.mark.unit
class TestOtherModes:
    def test_dry_run_as_unprivileged_user(self, env, monkeypatch):
        monkeypatch.setattr("os.geteuid", lambda: 1000)
        app = _app(env, ["--dry-run"])

        assert app.run() == 0

        assert (env / "interfaces").read_text(encoding="utf-8") == INTERFACES
        assert not (env / "backup").exists()
        out = app.console.export_text()
        assert "3:        bridge-ports enp3s0" in out
        assert "+        bridge-ports enp6s0" in out
        assert any("enp6s0" in m for m in app.logger.messages("info"))

    def test_dry_run_with_non_utf8_comment(self, env):
        raw = b"# r\xe9seau\n" + INTERFACES.encode("utf-8")
        (env / "interfaces").write_bytes(raw)
        app = _app(env, ["--dry-run"])

        assert app.run() == 0

        assert (env / "interfaces").read_bytes() == raw
        assert "+        bridge-ports enp6s0" in app.console.export_text()

    def test_generate_systemd_to_file(self, env):
        out = env / "unit.service"
        app = _app(env, ["--generate-systemd", "--output", str(out), "--python", "/usr/bin/python3"])
        assert app.run() == 0
        assert f"--interfaces-file {env / 'interfaces'}" in out.read_text()

    def test_install_and_uninstall(self, env):
        svc = FakeServices()
        unit_dir = env / "units"

        _app(env, ["--install", "--unit-dir", str(unit_dir)], services=svc).run()
        assert (unit_dir / "pcie-netfix.service").exists()
        assert svc.names() == ["daemon-reload", "enable", "start"]

        svc.calls.clear()
        _app(env, ["--uninstall", "--unit-dir", str(unit_dir)], services=svc).run()
        assert not (unit_dir / "pcie-netfix.service").exists()
        assert "disable" in svc.names()

    def test_test_only_skips_enable(self, env):
        svc = FakeServices()
        _app(env, ["--test-only", "--unit-dir", str(env / "units")], services=svc).run()
        assert svc.names() == ["daemon-reload", "start"]


@pytest.mark.unit
class TestMainExitCodes:
    @pytest.mark.parametrize(
        "exc,code",
        [(NotFoundError(), 2), (Fatal(3, "verify"), 3), (KeyboardInterrupt(), 130), (RuntimeError("x"), 1)],
    )
    def test_exit_code_mapping(self, monkeypatch, exc, code):
        def boom(self):
            raise exc

        monkeypatch.setattr(main_mod.App, "run", boom)
        with pytest.raises(SystemExit) as ei:
            main_mod.main(["-q"])
        assert ei.value.code == code

    def test_success(self, monkeypatch):
        monkeypatch.setattr(main_mod.App, "run", lambda self: 0)
        with pytest.raises(SystemExit) as ei:
            main_mod.main(["-q"])
        assert ei.value.code == 0

    def test_root_error_is_reported_once(self, monkeypatch, capsys, tmp_path):
        monkeypatch.setattr("os.geteuid", lambda: 1000)
        with pytest.raises(SystemExit) as ei:
            main_mod.main(["--interfaces-file", str(tmp_path / "interfaces")])
        assert ei.value.code == 1
        assert capsys.readouterr().err.count("requires root") == 1
