# SPDX-License-Identifier: LGPL-3.0-or-later
import json
import logging

import pytest

from pcie_netfix.core.logger import TRACE, EmojiFormatter, JsonFormatter, Log, LogStyle


def _record(msg, level=logging.INFO, **extra):
    rec = logging.LogRecord("pcie_netfix.test", level, __file__, 10, msg, (), None)
    for k, v in extra.items():
        setattr(rec, k, v)
    return rec


@pytest.mark.unit
class TestLevels:
    @pytest.mark.parametrize(
        "verbose,quiet,level",
        [(0, 0, logging.INFO), (2, 0, logging.DEBUG), (3, 0, TRACE), (0, 1, logging.WARNING), (3, 2, logging.ERROR)],
    )
    def test_level_from_flags(self, verbose, quiet, level):
        assert Log._level_from_flags(verbose, quiet) == level

    def test_get_is_namespaced(self):
        assert Log.get("rebinder").name == "pcie_netfix.rebinder"
        assert Log.get().name == "pcie_netfix"


@pytest.mark.unit
class TestFormatters:
    def test_emoji_formatter_appends_context(self):
        out = EmojiFormatter(LogStyle(color=False)).format(_record("Rewriting", ctx={"iface": "enp6s0"}))
        assert "INFO" in out
        assert out.endswith("Rewriting iface=enp6s0")

    def test_json_formatter_emits_one_object(self):
        line = JsonFormatter().format(_record("hello %s", ctx={"k": 1}))
        obj = json.loads(line)
        assert obj["level"] == "INFO"
        assert obj["logger"] == "pcie_netfix.test"
        assert obj["ctx"] == {"k": 1}


@pytest.mark.unit
def test_setup_writes_log_file(tmp_path):
    log_file = tmp_path / "logs" / "netfix.log"
    logger = Log.setup(0, str(log_file), logger_name="pcie_netfix.test_setup")
    Log.ok(logger, "done", iface="enp6s0")
    for h in logger.handlers:
        h.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "done" in text
    assert "iface=enp6s0" in text

    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()


@pytest.mark.unit
def test_bound_adapter_merges_context(caplog):
    logger = logging.getLogger("pcie_netfix.test_bind")
    logger.propagate = True
    with caplog.at_level(logging.INFO, logger="pcie_netfix.test_bind"):
        Log.bind(logger, iface="enp6s0").info("x", extra={"ctx": {"bus": "06:00.0"}})
    assert caplog.records[-1].ctx == {"iface": "enp6s0", "bus": "06:00.0"}
