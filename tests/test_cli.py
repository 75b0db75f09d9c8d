import re

import pytest

import ifstat
from ifstat import cli
from ifstat.cli import Config, main, parse_config
from ifstat.errors import CounterSourceUnavailable, UsageError

from conftest import FakeSource

HEADER_LINE = "date,input in bytes per second,output in bytes per second\n"
ROW_RE = re.compile(r"^\d{4}\.\d{2}\.\d{2} \d{2}:\d{2}:\d{2},\d+,\d+$")


def test_parse_config_defaults():
    config = parse_config(["out.csv", "5", "em0"])
    assert config == Config(outfile="out.csv", interval=5, interface="em0")


def test_parse_config_options():
    config = parse_config(["--source", "stub", "--emit-first", "--count", "3", "-vv",
                           "out.csv", "0", "stub0"])
    assert config.source == "stub"
    assert config.emit_first
    assert config.count == 3
    assert config.verbosity == 2
    assert config.interval == 0


@pytest.mark.parametrize("interval", ["1.5", "-1", "abc", "", " 1", "１"])
def test_interval_must_be_ascii_digits(interval):
    with pytest.raises(UsageError):
        parse_config(["out.csv", interval, "eth0"])


@pytest.mark.parametrize("argv", [[], ["out.csv"], ["out.csv", "1"], ["a", "1", "eth0", "extra"]])
def test_wrong_argument_count_prints_usage(argv, capsys):
    assert main(argv) == 1
    err = capsys.readouterr().err
    assert err.startswith("usage: ifstat")


def test_bad_interval_exits_1_without_output(tmp_path, capsys):
    out = tmp_path / "out.csv"
    assert main([str(out), "1s", "eth0"]) == 1
    assert "usage:" in capsys.readouterr().err
    assert not out.exists()


def test_unknown_interface_exits_1_without_header(tmp_path, capsys):
    out = tmp_path / "out.csv"
    assert main(["--source", "stub", str(out), "1", "nope0"]) == 1
    err = capsys.readouterr().err
    assert "resolve interface" in err
    assert "nope0" in err
    assert len(err.strip().splitlines()) == 1
    assert not out.exists()


def test_unknown_source_exits_1(tmp_path, capsys):
    assert main(["--source", "sysctl", str(tmp_path / "out.csv"), "1", "eth0"]) == 1
    assert "unknown source" in capsys.readouterr().err


def test_unwritable_output_exits_1(tmp_path, capsys):
    out = tmp_path / "missing" / "out.csv"
    assert main(["--source", "stub", str(out), "0", "stub0"]) == 1
    assert "write output" in capsys.readouterr().err


def test_stub_run_writes_header_and_rows(tmp_path):
    out = tmp_path / "out.csv"
    assert main(["--source", "stub", "--count", "3", str(out), "0", "stub0"]) == 0
    lines = out.read_text().splitlines(keepends=True)
    assert lines[0] == HEADER_LINE
    assert len(lines) == 3
    assert all(ROW_RE.match(line.rstrip("\n")) for line in lines[1:])


def test_no_available_source(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(ifstat, "default_source", lambda: None)
    assert main([str(tmp_path / "out.csv"), "1", "eth0"]) == 1
    assert "no counter source" in capsys.readouterr().err


def test_signal_handlers_restored_after_run(tmp_path):
    import signal

    before = signal.getsignal(signal.SIGINT)
    cli.monitor(Config(outfile=str(tmp_path / "out.csv"), interval=0,
                       interface="stub1", source="stub", count=2))
    assert signal.getsignal(signal.SIGINT) == before


def test_interrupt_during_startup_is_graceful(monkeypatch, tmp_path):
    import signal

    class InterruptedSource(FakeSource):
        def interfaces(self):
            signal.raise_signal(signal.SIGINT)
            return super().interfaces()

    monkeypatch.setattr(cli, "open_source", lambda name: InterruptedSource([(0, 0)]))
    out = tmp_path / "out.csv"
    assert main([str(out), "1", "eth0"]) == 0
    assert not out.exists()


def test_read_failure_mid_run_exits_1_with_complete_rows(monkeypatch, tmp_path, capsys):
    class FailingSource(FakeSource):
        def read(self, handle):
            if self.reads == 2:
                raise CounterSourceUnavailable("interface 'eth0' disappeared")
            return super().read(handle)

    monkeypatch.setattr(cli, "open_source",
                        lambda name: FailingSource([(1_000, 100), (2_000, 200)]))
    out = tmp_path / "out.csv"
    assert main([str(out), "0", "eth0"]) == 1
    assert "read counters" in capsys.readouterr().err
    text = out.read_text()
    assert text.endswith("\n")
    lines = text.splitlines()
    assert lines[0] + "\n" == HEADER_LINE
    assert len(lines) == 2
    assert ROW_RE.match(lines[1])
