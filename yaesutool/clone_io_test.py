# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.
# pylint: disable=protected-access,unspecified-encoding,consider-using-with
# mypy: allow-untyped-defs, allow-untyped-calls
# ruff: noqa: SLF001,PLR2004

""" """

import io

import pytest

from . import clone_io, consts, radio_memory

ACK = consts.ACK

_PROTO = clone_io.CloneProtocol(
    mem_size=10,
    blocks=(
        clone_io.CloneBlock(0, 4, ack=True, poll=True),
        clone_io.CloneBlock(4, 7),
    ),
    chunk_size=4,
    download_retry_help="RETRY",
    upload_help="UPLOAD",
    upload_cont_help="CONTINUE",
    upload_retry_help="REPEAT",
)

# 10 bytes of data + checksum
_IMAGE = bytes(range(1, 11)) + b"\x37"
_BAD_IMAGE = bytes(range(1, 11)) + b"\x38"


def _stream(image):
    """Data sent by radio (or echoed) for `_PROTO`."""
    return image[0:4] + ACK + image[4:11]


class FakeOperator:
    def __init__(self):
        self.messages = []
        self.waits = 0

    def message(self, text):
        self.messages.append(text)

    def wait_for_user(self):
        self.waits += 1


def test_protocol_must_cover_image():
    with pytest.raises(ValueError):
        clone_io.CloneProtocol(
            mem_size=10, blocks=(clone_io.CloneBlock(0, 10),)
        )


class TestDownload:
    def test_download(self):
        link = clone_io.FakeSerial(_stream(_IMAGE))
        offsets = []

        def progress(pos):
            offsets.append(pos)
            return True

        mem = clone_io.Clone(link, _PROTO, FakeOperator(), progress).download()

        assert bytes(mem.mem) == _IMAGE
        assert mem.validate_checksum()
        # ack for every chunk of first block
        assert link.written == ACK
        assert offsets == [0, 4, 8]

    def test_download_wait_for_radio(self):
        link = clone_io.FakeSerial(_stream(_IMAGE), silent_reads=3)
        mem = clone_io.Clone(link, _PROTO, FakeOperator()).download()
        assert bytes(mem.mem) == _IMAGE

    def test_download_bad_checksum_retry(self):
        link = clone_io.FakeSerial(_stream(_BAD_IMAGE) + _stream(_IMAGE))
        operator = FakeOperator()
        mem = clone_io.Clone(link, _PROTO, operator).download()

        assert bytes(mem.mem) == _IMAGE
        assert "[BAD CHECKSUM]\n" in operator.messages
        assert "RETRY" in operator.messages

    def test_download_short_block(self):
        link = clone_io.FakeSerial(_IMAGE[0:4] + ACK + _IMAGE[4:6])
        with pytest.raises(clone_io.TransportError) as err:
            clone_io.Clone(link, _PROTO, FakeOperator()).download()

        assert err.value.offset == 4
        assert "got only 2 bytes" in str(err.value)

    def test_download_bad_ack(self):
        link = clone_io.FakeSerial(_IMAGE[0:4] + b"\x15")
        with pytest.raises(clone_io.TransportError) as err:
            clone_io.Clone(link, _PROTO, FakeOperator()).download()

        assert str(err.value) == (
            "Communication error at block 0x0000: bad acknowledge: 15"
        )

    def test_download_no_ack(self):
        link = clone_io.FakeSerial(_IMAGE[0:4])
        with pytest.raises(clone_io.TransportError):
            clone_io.Clone(link, _PROTO, FakeOperator()).download()

    def test_download_abort(self):
        link = clone_io.FakeSerial(_stream(_IMAGE))
        with pytest.raises(clone_io.AbortError):
            clone_io.Clone(
                link, _PROTO, FakeOperator(), lambda _pos: False
            ).download()


class TestUpload:
    def _mem(self):
        mem = radio_memory.RadioMemory(10, bytes(range(1, 11)))
        assert mem.checksum == 0
        return mem

    def test_upload(self):
        link = clone_io.FakeSerial(_stream(_IMAGE))
        operator = FakeOperator()
        mem = self._mem()

        clone_io.Clone(link, _PROTO, operator).upload(mem)

        assert mem.checksum == 0x37
        assert link.written == _IMAGE
        assert link.writes == [_IMAGE[0:4], _IMAGE[4:8], _IMAGE[8:11]]
        assert operator.waits == 1
        assert "UPLOAD" in operator.messages
        assert not link.incoming

    def test_upload_continue(self):
        link = clone_io.FakeSerial(_stream(_IMAGE))
        operator = FakeOperator()

        clone_io.Clone(link, _PROTO, operator).upload(self._mem(), cont=True)

        assert "CONTINUE" in operator.messages
        assert "UPLOAD" not in operator.messages

    def test_upload_retry(self):
        link = clone_io.FakeSerial(
            _IMAGE[0:4] + b"\x15" + _stream(_IMAGE)
        )
        operator = FakeOperator()

        clone_io.Clone(link, _PROTO, operator).upload(self._mem())

        assert operator.waits == 2
        assert "REPEAT" in operator.messages
        assert link.written == _IMAGE[0:4] + _IMAGE

    def test_upload_echo_differ(self):
        echo = bytearray(_stream(_IMAGE))
        echo[5] = 0xEE
        link = clone_io.FakeSerial(bytes(echo))
        operator = FakeOperator()

        clone_io.Clone(link, _PROTO, operator).upload(self._mem())

        assert operator.waits == 1

    def test_upload_invalid_size(self):
        link = clone_io.FakeSerial()
        mem = radio_memory.RadioMemory(12)
        with pytest.raises(ValueError):
            clone_io.Clone(link, _PROTO, FakeOperator()).upload(mem)

        assert not link.written


def test_fake_serial_responder():
    link = clone_io.FakeSerial(responder=lambda data: data + ACK)
    link.write(b"\x01\x02")
    assert link.read(3) == b"\x01\x02\x06"
    assert link.read(1) == b""


def test_stream_logger(tmp_path):
    logfile = tmp_path / "data.log"
    fake = clone_io.FakeSerial(b"\xaa\xbb")
    link = clone_io.StreamLogger(fake, logfile)
    link.open()
    assert fake.is_open

    link.write(b"\x01\x02")
    assert link.read(2) == b"\xaa\xbb"
    link.close()

    assert not fake.is_open
    assert logfile.read_text() == "<0102\n>aabb\n"


def test_console_operator():
    out = io.StringIO()
    operator = clone_io.ConsoleOperator(out, io.StringIO("\n"))
    operator.message("Hello")
    operator.message("")
    operator.wait_for_user()

    assert out.getvalue() == "Hello\nPress <Enter> to continue: "


def test_console_progress():
    out = io.StringIO()
    progress = clone_io.ConsoleProgress(out)
    for pos in range(clone_io.PROGRESS_CHUNKS * 2 + 1):
        assert progress(pos)

    assert out.getvalue() == "##"
