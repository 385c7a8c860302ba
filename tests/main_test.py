# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.
# pylint: disable=protected-access,unspecified-encoding,consider-using-with
# mypy: allow-untyped-defs, allow-untyped-calls
# ruff: noqa: SLF001,PLR2004

""" """

import io
from contextlib import contextmanager

import pytest

from yaesutool import clone_io, config, consts, ft60, main, model, radio_memory


def _radio_stream(proto, image):
    """Bytes received from radio on download (or as echo on upload)."""
    res = bytearray()
    for block in proto.blocks:
        pos, end = block.start, block.start + block.length
        while pos < end:
            nbytes = min(end - pos, proto.chunk_size)
            res += image[pos : pos + nbytes]
            if block.ack:
                res += consts.ACK

            pos += nbytes

    return bytes(res)


def _ft60_image():
    mem = radio_memory.RadioMemory(ft60.MEM_SIZE, ft60.MAGIC)
    ft60.set_channel(
        mem,
        model.Channel(
            1, name="RPT", rx_freq=146_520_000, tx_freq=147_120_000
        ),
    )
    mem.update_checksum()
    return mem


@pytest.fixture(autouse=True)
def _environment(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setattr(config, "CONFIG", config.Config())
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def link(monkeypatch):
    fake = clone_io.FakeSerial()

    @contextmanager
    def open_link(_port, _baudrate, **_kwargs):
        fake.open()
        yield fake
        fake.close()

    monkeypatch.setattr(clone_io, "open_link", open_link)
    monkeypatch.setattr("sys.stdin", io.StringIO("\n\n"))
    return fake


@pytest.fixture
def image(tmp_path):
    file = tmp_path / "ft60.img"
    ft60.RADIO.save_image(file, _ft60_image())
    return file


def test_radios(capsys):
    assert main.run(["radios"]) == main.EXIT_OK
    out = capsys.readouterr().out
    assert "Yaesu FT-60R" in out
    assert "vx2, vx-2" in out


def test_download(tmp_path, link):
    mem = _ft60_image()
    link.incoming.extend(_radio_stream(ft60.CLONE, mem.mem))
    dst = tmp_path / "out.img"

    args = ["download", "-r", "ft60", "-p", "/dev/ttyS3", str(dst)]
    assert main.run(args) == main.EXIT_OK

    assert dst.read_bytes() == bytes(mem.mem)
    assert not link.is_open
    assert config.CONFIG.last_radio == "Yaesu FT-60R"
    assert config.CONFIG.last_port == "/dev/ttyS3"
    assert config.default_config_path().exists()


def test_download_default_name(tmp_path, link):
    link.incoming.extend(_radio_stream(ft60.CLONE, _ft60_image().mem))
    (tmp_path / "ft60.img").write_bytes(b"old")

    assert main.run(["download", "-r", "FT-60R"]) == 0
    assert (tmp_path / "ft60.img").stat().st_size == ft60.MEM_SIZE + 1
    assert (tmp_path / "ft60.img.bak").read_bytes() == b"old"


def test_download_incompatible(link):
    mem = radio_memory.RadioMemory(ft60.MEM_SIZE, b"AH015$")
    mem.update_checksum()
    link.incoming.extend(_radio_stream(ft60.CLONE, mem.mem))

    assert main.run(["download", "-r", "ft60"]) == main.EXIT_ERROR


def test_download_unknown_radio(link):
    assert main.run(["download", "-r", "ft-8900"]) == main.EXIT_ERROR
    assert not link.written


def test_upload(image, link):
    data = image.read_bytes()
    link.incoming.extend(_radio_stream(ft60.CLONE, data))

    assert main.run(["upload", str(image)]) == 0
    assert link.written == data
    assert config.CONFIG.last_files == [str(image)]


def test_configure(tmp_path, link):
    mem = _ft60_image()
    stream = _radio_stream(ft60.CLONE, mem.mem)
    link.incoming.extend(stream + stream)

    cfg = tmp_path / "radio.conf"
    cfg.write_text(
        "Channel Name Receive Transmit R-Squel T-Squel Power Modulation Scan\n"
        "2 NEW 145.5 +0 - - Low Wide +\n"
    )

    assert main.run(["configure", "-r", "ft60", str(cfg)]) == 0

    backup = tmp_path / "backup-ft60.img"
    assert backup.read_bytes() == bytes(mem.mem)

    uploaded = radio_memory.RadioMemory(
        ft60.MEM_SIZE, bytes(link.written[-(ft60.MEM_SIZE + 1) :])
    )
    assert uploaded.validate_checksum()
    assert not ft60.get_channel(uploaded, 0).used
    assert ft60.get_channel(uploaded, 1).name == "NEW"


def test_show(image, capsys):
    assert main.run(["show", str(image)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Radio: Yaesu FT-60R\n")
    assert "RPT" in out
    assert "# Squelch tones:" not in out


def test_show_to_file(tmp_path, image):
    out = tmp_path / "radio.conf"
    assert main.run(["show", "-V", str(image), "-o", str(out)]) == 0
    assert "# Squelch tones:" in out.read_text()


def test_apply(tmp_path, image, capsys):
    cfg = tmp_path / "radio.conf"
    cfg.write_text(
        "Radio: Yaesu FT-60R\n"
        "\n"
        "PMS     Lower    Upper\n"
        "1 144.0 146.0\n"
        "2 144.0 1000.0\n"
    )
    dst = tmp_path / "new.img"

    assert (
        main.run(["apply", str(image), str(cfg), "-o", str(dst)])
        == main.EXIT_ROWS_REJECTED
    )
    assert "1 row(s) rejected" in capsys.readouterr().err

    mem = ft60.RADIO.load_image(dst)
    assert ft60.get_pms(mem, 0) == model.PmsPair(1, 144_000_000, 146_000_000)
    assert not ft60.get_pms(mem, 1).used
    assert ft60.get_channel(mem, 0).name == "RPT"


def test_apply_in_place(tmp_path, image):
    cfg = tmp_path / "radio.conf"
    cfg.write_text("Bank Channels\n1 1\n")

    assert main.run(["apply", str(image), str(cfg)]) == 0
    assert (tmp_path / "ft60.img.bak").exists()
    mem = ft60.RADIO.load_image(image)
    assert ft60.get_bank_channels(mem, 0) == [1]


def test_apply_config_error(tmp_path, image):
    cfg = tmp_path / "radio.conf"
    cfg.write_text("Radio: Yaesu VX-2\n")

    assert main.run(["apply", str(image), str(cfg)]) == main.EXIT_ERROR


def test_apply_not_utf8(tmp_path, image):
    cfg = tmp_path / "radio.conf"
    cfg.write_bytes(b"Radio: Yaesu FT-60R\n# \xff\xfe\n")
    before = image.read_bytes()

    assert main.run(["apply", str(image), str(cfg)]) == main.EXIT_ERROR
    assert image.read_bytes() == before


def test_info(image, capsys):
    assert main.run(["info", str(image)]) == 0
    out = capsys.readouterr().out
    assert "Radio: Yaesu FT-60R" in out
    assert f"Image size: {ft60.MEM_SIZE}" in out
    assert "(OK)" in out


def test_missing_file(tmp_path):
    assert main.run(["show", str(tmp_path / "none.img")]) == main.EXIT_ERROR


def test_missing_command():
    with pytest.raises(SystemExit):
        main.run([])
