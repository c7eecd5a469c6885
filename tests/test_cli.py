import json

import pytest

from pcapstream import cli
from pcapstream.capture import InterfaceInfo

from conftest import header_bytes


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def capture_file(workdir, sample_capture):
    path = workdir / "in.pcap"
    path.write_bytes(sample_capture)
    return path


def test_dump_summary(capture_file, capsys):
    cli.main(["dump", str(capture_file)])
    out = capsys.readouterr().out
    assert "0xa1b2c3d4" in out
    assert "ETHERNET" in out
    assert "Capture Summary" in out


def test_dump_verbose_with_payload_and_json(capture_file, workdir, capsys):
    out_path = workdir / "reports" / "dump.json"
    cli.main(["dump", str(capture_file), "-v", "--payload", "--limit", "2", "--json", str(out_path)])

    out = capsys.readouterr().out
    assert "6865..." in out

    data = json.loads(out_path.read_text())
    assert len(data["records"]) == 3
    assert data["records"][2]["payload"] == "776f"


def test_copy(capture_file, workdir, sample_capture, capsys):
    dst = workdir / "out.pcap"
    cli.main(["copy", str(capture_file), str(dst), "-v"])
    assert dst.read_bytes() == sample_capture
    assert "Copied 3 records" in capsys.readouterr().out


def test_bad_magic_exits_with_error(workdir, capsys):
    bad = workdir / "bad.pcap"
    bad.write_bytes(header_bytes(magic=0xDEADBEEF))
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["dump", str(bad)])
    assert exc_info.value.code == 1
    assert "bad magic" in capsys.readouterr().err


def test_missing_file_exits_with_error(workdir):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["copy", str(workdir / "nope.pcap"), str(workdir / "out.pcap")])
    assert exc_info.value.code == 1


def test_no_command_prints_help(workdir, capsys):
    cli.main([])
    assert "usage" in capsys.readouterr().out.lower()


def test_log_level_from_flag(capture_file):
    cli.main(["--log-level", "debug", "dump", str(capture_file)])
    assert cli.logger.level == 10


def test_list_shows_interface_details(workdir, monkeypatch, capsys):
    class FakeManager:
        def get_all(self):
            return [
                InterfaceInfo("eth0", "aa:bb", "10.0.0.2", True, False, 1000, 1500),
                InterfaceInfo("lo", None, "127.0.0.1", True, True, None, 65536),
            ]

    monkeypatch.setattr(cli, "InterfaceManager", FakeManager)
    cli.main(["list"])

    out = capsys.readouterr().out
    assert "Speed" in out
    assert "1000" in out
    assert "10.0.0.2" in out
    assert "65536" in out
