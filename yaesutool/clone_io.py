# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.

"""
Clone protocol: block transfer of whole radio memory over serial line.

Line is half-duplex, so every byte written by host is received back
as echo. Blocks are sent in chunks up to 64 bytes; some chunks are
confirmed by ACK byte. Last byte of image is checksum - sum of all data
bytes.
"""

from __future__ import annotations

import logging
import sys
import time
import typing as ty
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import serial

from . import consts, radio_memory

_LOG = logging.getLogger(__name__)

CHUNK_SIZE: ty.Final = 64
# print progress mark every n chunks
PROGRESS_CHUNKS: ty.Final = 16


@dataclass(frozen=True)
class CloneBlock:
    start: int
    length: int
    # every chunk must be confirmed by ACK
    ack: bool = False
    # on download: wait until radio starts sending this block
    poll: bool = False
    # on upload: pause before sending block (in seconds)
    delay: float = 0.0


@dataclass(frozen=True)
class CloneProtocol:
    """Model-specific parameters of clone procedure."""

    mem_size: int
    blocks: tuple[CloneBlock, ...]
    chunk_size: int = CHUNK_SIZE
    # upload: pause between chunks of one block
    chunk_delay: float = 0.0
    # upload: pause after last chunk
    final_delay: float = 0.0

    # instructions for operator
    download_help: str = ""
    download_retry_help: str = ""
    upload_help: str = ""
    upload_cont_help: str = ""
    upload_retry_help: str = ""

    def __post_init__(self) -> None:
        end = max(b.start + b.length for b in self.blocks)
        if end != self.mem_size + 1:
            raise ValueError(f"blocks cover {end} bytes, expected image+1")


@ty.runtime_checkable
class Serial(ty.Protocol):
    def write(self, data: bytes) -> None: ...

    def read(self, length: int) -> bytes: ...

    def reset_input(self) -> None: ...

    def open(self) -> None: ...

    def close(self) -> None: ...


class StreamLogger:
    """
    StreamLogger wrap Serial and append output/input to data.log file.
    """

    def __init__(self, impl: Serial, logfile: Path | None = None) -> None:
        self._impl = impl
        self._logfile = logfile or Path("data.log")
        self._log: ty.TextIO | None = None

    def open(self) -> None:
        self._log = self._logfile.open("at", encoding="ascii")  # noqa: SIM115 # pylint:disable=consider-using-with
        self._impl.open()

    def close(self) -> None:
        self._impl.close()
        if self._log:
            self._log.close()
            self._log = None

    def write(self, data: bytes) -> None:
        if self._log:
            self._log.write(f"<{data.hex()}\n")

        self._impl.write(data)

    def read(self, length: int) -> bytes:
        data = self._impl.read(length)
        if self._log:
            self._log.write(f">{data.hex()}\n")

        return data

    def reset_input(self) -> None:
        self._impl.reset_input()


class RealSerial:
    def __init__(self, port: str, baudrate: int, timeout: float = 1.0) -> None:
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self._serial: serial.Serial | None = None

    def open(self) -> None:
        _LOG.info("opening serial %r, baudrate=%d", self.port, self.baudrate)
        self._serial = serial.Serial(
            self.port or "/dev/ttyUSB0",
            self.baudrate,
            bytesize=serial.EIGHTBITS,
            parity=serial.PARITY_NONE,
            stopbits=serial.STOPBITS_ONE,
        )
        self._serial.timeout = self.timeout
        self._serial.write_timeout = 5

    def close(self) -> None:
        _LOG.info("closing serial")
        assert self._serial
        self._serial.close()
        self._serial = None

    def write(self, data: bytes) -> None:
        assert self._serial
        self._serial.write(data)

    def read(self, length: int) -> bytes:
        assert self._serial
        return self._serial.read(length)  # type: ignore

    def reset_input(self) -> None:
        assert self._serial
        self._serial.reset_input_buffer()


class FakeSerial:
    """Serial replacement that replays `incoming` data.

    Written data is collected in `written`. When `responder` is given,
    its result for every write is appended to incoming data (i.e. echo).
    First `silent_reads` reads return nothing, like radio that not started
    sending yet.
    """

    def __init__(
        self,
        incoming: bytes = b"",
        *,
        responder: ty.Callable[[bytes], bytes] | None = None,
        silent_reads: int = 0,
    ) -> None:
        self.incoming = bytearray(incoming)
        self.written = bytearray()
        self.writes: list[bytes] = []
        self.responder = responder
        self.silent_reads = silent_reads
        self.is_open = False

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def write(self, data: bytes) -> None:
        self.written.extend(data)
        self.writes.append(bytes(data))
        if self.responder:
            self.incoming.extend(self.responder(bytes(data)))

    def read(self, length: int) -> bytes:
        if self.silent_reads > 0:
            self.silent_reads -= 1
            return b""

        data = bytes(self.incoming[:length])
        del self.incoming[:length]
        return data

    def reset_input(self) -> None:
        pass


@contextmanager
def open_link(
    port: str, baudrate: int, *, timeout: float = 1.0, log_data: bool = False
) -> ty.Iterator[Serial]:
    impl: Serial = RealSerial(port, baudrate, timeout)

    if log_data:
        impl = StreamLogger(impl)

    impl.open()

    try:
        yield impl
    finally:
        impl.close()


class Operator(ty.Protocol):
    """Person that handle radio during clone."""

    def message(self, text: str) -> None: ...

    def wait_for_user(self) -> None: ...


class ConsoleOperator:
    def __init__(
        self, out: ty.TextIO | None = None, inp: ty.TextIO | None = None
    ) -> None:
        self._out = out or sys.stderr
        self._inp = inp or sys.stdin

    def message(self, text: str) -> None:
        if text:
            self._out.write(text)
            self._out.flush()

    def wait_for_user(self) -> None:
        self.message("\nPress <Enter> to continue: ")
        self._inp.readline()


class ConsoleProgress:
    """Print progress mark every `PROGRESS_CHUNKS` chunks."""

    def __init__(self, out: ty.TextIO | None = None) -> None:
        self._out = out or sys.stderr
        self.chunks = 0

    def __call__(self, _offset: int) -> bool:
        self.chunks += 1
        if self.chunks % PROGRESS_CHUNKS == 0:
            self._out.write("#")
            self._out.flush()

        return True


ProgressCallback = ty.Callable[[int], bool]


class Clone:
    def __init__(
        self,
        link: Serial,
        proto: CloneProtocol,
        operator: Operator,
        cb: ProgressCallback | None = None,
    ) -> None:
        self._link = link
        self._proto = proto
        self._operator = operator
        self._cb = cb

    def download(self) -> radio_memory.RadioMemory:
        """Read memory from radio; repeat until checksum is valid."""
        proto = self._proto
        self._operator.message(proto.download_help)

        while True:
            self._operator.message("\nWaiting for data... ")
            mem = radio_memory.RadioMemory(proto.mem_size)

            with memoryview(mem.mem) as mv:
                for block in proto.blocks:
                    _LOG.debug("reading block 0x%04x", block.start)
                    while not self._read_block(mv, block):
                        continue

            checksum = mem.calc_checksum()
            if checksum == mem.checksum:
                _LOG.info("checksum = %02x (OK)", checksum)
                self._operator.message("\n")
                return mem

            _LOG.warning(
                "bad checksum = %02x, expected %02x", mem.checksum, checksum
            )
            self._operator.message("[BAD CHECKSUM]\n")
            self._operator.message(proto.download_retry_help)

    def upload(
        self, mem: radio_memory.RadioMemory, *, cont: bool = False
    ) -> None:
        """Write memory into radio; on errors ask operator for retry."""
        proto = self._proto
        if mem.size != proto.mem_size:
            raise ValueError(
                f"invalid memory size {mem.size}, expected {proto.mem_size}"
            )

        checksum = mem.update_checksum()
        _LOG.info("checksum = %02x", checksum)

        self._operator.message(
            proto.upload_cont_help if cont else proto.upload_help
        )

        while True:
            self._link.reset_input()
            self._operator.wait_for_user()
            self._link.reset_input()
            self._operator.message("Sending data... ")

            try:
                with memoryview(mem.mem) as mv:
                    for block in proto.blocks:
                        if block.delay:
                            time.sleep(block.delay)

                        _LOG.debug("writing block 0x%04x", block.start)
                        self._write_block(mv, block)

            except EchoError as err:
                _LOG.warning("upload failed: %s", err)
                self._operator.message(f"\n! {err}\n")
                self._operator.message(proto.upload_retry_help)
                continue

            if proto.final_delay:
                time.sleep(proto.final_delay)

            self._operator.message("\n")
            return

    def _read_block(self, mv: memoryview, block: CloneBlock) -> bool:
        """Read block in chunks into `mv`.

        Return False when nothing was received at the beginning of polled
        block; other errors are fatal.
        """
        pos, end = block.start, block.start + block.length
        while pos < end:
            nbytes = min(end - pos, self._proto.chunk_size)
            data = self._link.read(nbytes)
            if len(data) != nbytes:
                if block.poll and pos == block.start:
                    return False

                _LOG.error(
                    "reading block 0x%04x: got only %d bytes", pos, len(data)
                )
                raise TransportError(pos, f"got only {len(data)} bytes")

            mv[pos : pos + nbytes] = data

            if block.ack:
                self._link.write(consts.ACK)
                reply = self._link.read(1)
                if not reply:
                    raise TransportError(pos, "no acknowledge")

                if reply != consts.ACK:
                    raise TransportError(
                        pos, f"bad acknowledge: {reply.hex()}"
                    )

            self._progress("read", pos, data)
            pos += nbytes

        return True

    def _write_block(self, mv: memoryview, block: CloneBlock) -> None:
        pos, end = block.start, block.start + block.length
        while pos < end:
            nbytes = min(end - pos, self._proto.chunk_size)
            data = bytes(mv[pos : pos + nbytes])
            self._link.write(data)

            echo = self._link.read(nbytes)
            if len(echo) != nbytes:
                raise EchoError(pos, f"echo got only {len(echo)} bytes")

            if echo != data:
                _LOG.warning("echo for block 0x%04x differ", pos)

            if block.ack:
                reply = self._link.read(1)
                if not reply:
                    raise EchoError(pos, "no acknowledge")

                if reply != consts.ACK:
                    raise EchoError(pos, f"bad acknowledge: {reply.hex()}")

            self._progress("write", pos, data)
            pos += nbytes

            if pos < end and self._proto.chunk_delay:
                time.sleep(self._proto.chunk_delay)

    def _progress(self, action: str, pos: int, data: bytes) -> None:
        if _LOG.isEnabledFor(logging.DEBUG):
            _LOG.debug("%s 0x%04x: %s", action, pos, data.hex(" "))

        if self._cb and not self._cb(pos):
            raise AbortError


class TransportError(Exception):
    def __init__(self, offset: int, reason: str) -> None:
        self.offset = offset
        self.reason = reason

    def __str__(self) -> str:
        return (
            f"Communication error at block 0x{self.offset:04x}: {self.reason}"
        )


class EchoError(Exception):
    def __init__(self, offset: int, reason: str) -> None:
        self.offset = offset
        self.reason = reason

    def __str__(self) -> str:
        return f"Write error at block 0x{self.offset:04x}: {self.reason}"


class AbortError(Exception):
    def __str__(self) -> str:
        return "Aborted"
