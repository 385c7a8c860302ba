# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.
# ruff: noqa: PLR2004
"""
Yaesu VX-2R / VX-2E memory layout and configuration tables.

Memory channel record (18 bytes):

      76543210
   0  uunc....   u - unknown, n - narrow FM, c - cpu clock shift,
                 . - unknown (depends on frequency)
   1  mmddssss   m - modulation, d - duplex, s - tuning step
   2-4           receive frequency (BCD in kHz)
   5  pp....tt   p - power, t - tone mode
   6-11          name
   12-14         offset or transmit frequency (BCD in kHz)
   15  ..tttttt  t - CTCSS tone index
   16  .ddddddd  d - DCS code index
   17            unknown

Channel flags are kept separately, 4 bits per channel.
"""

from __future__ import annotations

import enum
import logging
import typing as ty

from . import clone_io, coding, consts, expimp, model, radio_memory
from .model import fmt
from .model._support import (
    get_bits,
    get_u16be,
    is_valid_index,
    set_bits,
    set_u16be,
    try_get,
)

if ty.TYPE_CHECKING:
    from pathlib import Path

    from .model._support import Memory, MutableMemory
    from .radio_memory import RadioMemory

_LOG = logging.getLogger(__name__)

MEM_SIZE: ty.Final = 32594
MAGIC: ty.Final = b"AH015$"

NUM_CHANNELS: ty.Final = 1000
NUM_BANKS: ty.Final = 20
NUM_PMS: ty.Final = 50
NUM_BANDS: ty.Final = 11
BANK_SLOTS: ty.Final = 100

# 0xffff when banks unused
OFFSET_BUSE1: ty.Final = 0x005A
OFFSET_BUSE2: ty.Final = 0x00DA
# number of channels in bank - 1; 0xffff when bank is unused
OFFSET_BNCHAN: ty.Final = 0x016A
OFFSET_WX: ty.Final = 0x0396
OFFSET_HOME: ty.Final = 0x03D2
OFFSET_VFO: ty.Final = 0x04E2
# 100 slots of channel index (u16 BE) for each bank
OFFSET_BANKS: ty.Final = 0x05C2
OFFSET_FLAGS: ty.Final = 0x1562
OFFSET_CHANNELS: ty.Final = 0x17C2
OFFSET_PMS: ty.Final = 0x5E12

CHANNEL_SIZE: ty.Final = 18
BANK_SIZE: ty.Final = BANK_SLOTS * 2

# image bytes presented as "virtual jumpers"
JUMPERS_BYTES: ty.Final = (6, 7, 8, 13)

# fields: (byte, first bit, width)
_F_U1: ty.Final = (0, 0, 4)
_F_NARROW: ty.Final = (0, 5, 1)
_F_STEP: ty.Final = (1, 0, 4)
_F_DUPLEX: ty.Final = (1, 4, 2)
_F_AMFM: ty.Final = (1, 6, 2)
_F_TMODE: ty.Final = (5, 0, 2)
_F_POWER: ty.Final = (5, 6, 2)
_F_TONE: ty.Final = (15, 0, 6)
_F_DCS: ty.Final = (16, 0, 7)

POWER_LEVELS: ty.Final = ["High", "Low", "High", "Low"]
POWER_HIGH: ty.Final = 0
POWER_LOW: ty.Final = 3
MODES: ty.Final = ["FM", "AM", "WFM", "Auto", "NFM"]
MODE_NFM: ty.Final = 4
STEPS: ty.Final = ["5", "10", "12.5", "15", "20", "25", "50", "100", "9"]
STEP_12_5: ty.Final = 2

CHARSET: ty.Final = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ +-/[]"
CHAR_SPACE: ty.Final = 36

FLAG_UNMASKED: ty.Final = 1
FLAG_VALID: ty.Final = 2
FLAG_SKIP: ty.Final = 4
FLAG_PSKIP: ty.Final = 8

# offset field hold offsets below 100MHz, else transmit frequency
_OFFSET_MAX_KHZ: ty.Final = 100_000


class Duplex(enum.IntEnum):
    SIMPLEX = 0
    NEG = 1
    POS = 2
    # offset field contains transmit frequency
    DUPLEX = 3


class ToneMode(enum.IntEnum):
    OFF = 0
    TONE = 1
    TSQL = 2
    DTCS = 3


def is_valid_freq(hz: int) -> bool:
    return 500_000 <= hz <= 999_000_000


def can_transmit(hz: int) -> bool:
    return (
        137_000_000 <= hz < 174_000_000 or 420_000_000 <= hz < 470_000_000
    )


def stored_freq(hz: int) -> int:
    """Frequency as kept in record: kHz digits and 12.5kHz half-step."""
    return coding.decode_freq1k(coding.encode_freq1k(hz))


def band_index(band: int) -> int:
    """Home and VFO record index for band 1-11; record 4 is not used."""
    return band - 1 if band <= 4 else band


def encode_squelch(
    rx: coding.SquelchSpec, tx: coding.SquelchSpec
) -> coding.EncodedSquelch:
    """Find tone mode for squelch pair.

    Radio use the same tone or DCS code for receive and transmit; pairs
    that can't be stored raise InvalidSquelchError.
    """
    if rx.ctcs < 0 or tx.ctcs < 0:
        raise coding.InvalidSquelchError(
            abs(rx.ctcs or tx.ctcs) / 10, "reversed tone is not supported"
        )

    if tx.dcs:
        enc = coding.EncodedSquelch(
            ToneMode.DTCS, consts.TONE_DEFAULT, coding.dcs_index(tx.dcs)
        )
    elif tx.ctcs:
        tone = coding.tone_index(tx.ctcs)
        tmode = ToneMode.TSQL if rx.ctcs else ToneMode.TONE
        enc = coding.EncodedSquelch(tmode, tone)
    else:
        enc = coding.EncodedSquelch(ToneMode.OFF)

    if decode_squelch(*enc) != coding.Squelch(
        rx.ctcs, tx.ctcs, rx.dcs, tx.dcs
    ):
        raise coding.InvalidSquelchError(
            f"{coding.format_squelch(rx).strip()} "
            f"{coding.format_squelch(tx).strip()}",
            "unsupported squelch combination",
        )

    return enc


def decode_squelch(tmode: int, tone: int, dcs: int) -> coding.Squelch:
    match tmode:
        case ToneMode.TONE:
            return coding.Squelch(tx_ctcs=coding.tone_value(tone))

        case ToneMode.TSQL:
            ctcs = coding.tone_value(tone)
            return coding.Squelch(rx_ctcs=ctcs, tx_ctcs=ctcs)

        case ToneMode.DTCS:
            code = coding.dcs_value(dcs)
            return coding.Squelch(rx_dcs=code, tx_dcs=code)

    return coding.Squelch()


def _decode_tx_freq(data: Memory, rx_freq: int) -> int:
    match get_bits(data, *_F_DUPLEX):
        case Duplex.NEG:
            return rx_freq - coding.decode_freq1k(data[12:15])

        case Duplex.POS:
            return rx_freq + coding.decode_freq1k(data[12:15])

        case Duplex.DUPLEX:
            return coding.decode_freq1k(data[12:15])

    return rx_freq


def _encode_offset(rx_freq: int, tx_freq: int) -> tuple[Duplex, bytes]:
    """Find duplex and offset field for frequencies pair.

    Offset that can't be stored exactly is replaced by transmit frequency.
    """
    delta = tx_freq - rx_freq
    if delta == 0:
        return Duplex.SIMPLEX, bytes(3)

    offset = coding.encode_freq1k(abs(delta))
    if (
        abs(delta) < _OFFSET_MAX_KHZ * 1000
        and coding.decode_freq1k(offset) == abs(delta)
    ):
        return (Duplex.POS if delta > 0 else Duplex.NEG), offset

    return Duplex.DUPLEX, coding.encode_freq1k(tx_freq)


def decode_name(data: Memory) -> str:
    """Decode name from record; first byte has display flag in bit 7."""
    if (data[6] & 0x7F) >= len(CHARSET):
        return ""

    return coding.decode_name(data[6:12], CHARSET, 0x7F)


def encode_name(data: MutableMemory, name: str) -> None:
    if not name or name.startswith("-"):
        name = ""

    codes = coding.encode_name(name, CHARSET, CHAR_SPACE)
    if codes[0] != CHAR_SPACE:
        # display name instead of frequency
        codes[0] |= 0x80

    data[6:12] = bytes(codes)


def decode_record(
    number: int, data: Memory, flags: int, *, check_valid: bool = True
) -> model.Channel:
    if check_valid and not flags & FLAG_VALID:
        return model.Channel(number)

    rx_freq = coding.decode_freq1k(data[2:5])
    if flags & FLAG_PSKIP:
        scan = 2
    elif flags & FLAG_SKIP:
        scan = 1
    else:
        scan = 0

    if get_bits(data, *_F_NARROW):
        mode = MODE_NFM
    else:
        mode = get_bits(data, *_F_AMFM)

    ch = model.Channel(
        number,
        rx_freq=rx_freq,
        tx_freq=_decode_tx_freq(data, rx_freq),
        squelch=decode_squelch(
            get_bits(data, *_F_TMODE),
            get_bits(data, *_F_TONE),
            get_bits(data, *_F_DCS),
        ),
        power=get_bits(data, *_F_POWER),
        mode=mode,
        scan=scan,
        step=get_bits(data, *_F_STEP),
    )

    if model._support.DEBUG:  # noqa: SLF001
        ch.debug_info = {"raw": bytes(data).hex(" "), "flags": flags}

    return ch


def encode_record(data: MutableMemory, ch: model.Channel) -> None:
    """Write whole record; name is set from `ch.name`."""
    is_valid_index(POWER_LEVELS, ch.power, "power")
    is_valid_index(MODES, ch.mode, "mode")
    is_valid_index(STEPS, ch.step, "step")

    enc = encode_squelch(ch.squelch.rx, ch.squelch.tx)
    duplex, offset = _encode_offset(ch.rx_freq, ch.tx_freq)

    if ch.rx_freq < 1_800_000:
        unknown = 2
    elif ch.rx_freq < 88_000_000:
        unknown = 0
    else:
        unknown = 5

    data[0:CHANNEL_SIZE] = bytes(CHANNEL_SIZE)
    set_bits(data, *_F_U1, unknown)
    set_bits(data, *_F_NARROW, ch.mode == MODE_NFM)
    set_bits(data, *_F_STEP, ch.step)
    set_bits(data, *_F_DUPLEX, duplex)
    set_bits(data, *_F_AMFM, ch.mode & 3)
    data[2:5] = coding.encode_freq1k(ch.rx_freq)
    set_bits(data, *_F_TMODE, enc.tmode)
    set_bits(data, *_F_POWER, ch.power)
    encode_name(data, ch.name)
    data[12:15] = offset
    set_bits(data, *_F_TONE, enc.tone)
    set_bits(data, *_F_DCS, enc.dcs)


def get_flags(mem: RadioMemory, idx: int) -> int:
    """Get flags of channel; PMS records use indexes from NUM_CHANNELS."""
    return get_bits(mem.mem, OFFSET_FLAGS + idx // 2, (idx & 1) * 4, 4)


def set_flags(mem: RadioMemory, idx: int, flags: int) -> None:
    set_bits(mem.mem, OFFSET_FLAGS + idx // 2, (idx & 1) * 4, 4, flags)


def get_channel(mem: RadioMemory, idx: int) -> model.Channel:
    data = mem.record(OFFSET_CHANNELS, CHANNEL_SIZE, idx)
    ch = decode_record(idx + 1, data, get_flags(mem, idx))
    if ch.used:
        ch.name = decode_name(data)

    return ch


def set_channel(mem: RadioMemory, ch: model.Channel) -> None:
    idx = ch.number - 1
    _LOG.debug("set_channel: %r", ch)
    ch = ch.clone()
    ch.step = STEP_12_5
    encode_record(mem.record(OFFSET_CHANNELS, CHANNEL_SIZE, idx), ch)

    flags = FLAG_VALID | FLAG_UNMASKED
    if ch.scan == 1:
        flags |= FLAG_SKIP
    elif ch.scan == 2:
        flags |= FLAG_PSKIP

    set_flags(mem, idx, flags)


def get_band(mem: RadioMemory, offset: int, band: int) -> model.Channel:
    """Get home or VFO channel for `band` (1-11)."""
    data = mem.record(offset, CHANNEL_SIZE, band_index(band))
    return decode_record(band, data, 0, check_valid=False)


def set_band(mem: RadioMemory, offset: int, ch: model.Channel) -> None:
    ch = ch.clone()
    ch.name = ""
    encode_record(mem.record(offset, CHANNEL_SIZE, band_index(ch.number)), ch)


def _get_pms_freq(mem: RadioMemory, idx: int) -> int:
    if not get_flags(mem, NUM_CHANNELS + idx) & FLAG_VALID:
        return 0

    data = mem.record(OFFSET_PMS, CHANNEL_SIZE, idx)
    return coding.decode_freq1k(data[2:5])


def _set_pms_freq(mem: RadioMemory, idx: int, hz: int) -> None:
    data = mem.record(OFFSET_PMS, CHANNEL_SIZE, idx)
    if not hz:
        data[0:CHANNEL_SIZE] = b"\xff" * CHANNEL_SIZE
        set_flags(mem, NUM_CHANNELS + idx, 0)
        return

    # pms records keep only frequency; other fields are fixed
    encode_record(data, model.Channel(0, rx_freq=hz, tx_freq=hz))
    set_bits(data, *_F_U1, 5)
    set_bits(data, *_F_STEP, STEP_12_5)
    set_bits(data, *_F_TONE, 0)
    set_flags(mem, NUM_CHANNELS + idx, FLAG_VALID | FLAG_UNMASKED)


def get_pms(mem: RadioMemory, idx: int) -> model.PmsPair:
    return model.PmsPair(
        idx + 1, _get_pms_freq(mem, idx * 2), _get_pms_freq(mem, idx * 2 + 1)
    )


def set_pms(mem: RadioMemory, pms: model.PmsPair) -> None:
    idx = pms.number - 1
    _set_pms_freq(mem, idx * 2, pms.lower)
    _set_pms_freq(mem, idx * 2 + 1, pms.upper)


def is_banks_used(mem: RadioMemory) -> bool:
    return (
        get_u16be(mem.mem, OFFSET_BUSE1) != 0xFFFF
        or get_u16be(mem.mem, OFFSET_BUSE2) != 0xFFFF
    )


def _bank_region(mem: RadioMemory, bank: int) -> memoryview:
    return mem.region(OFFSET_BANKS + bank * BANK_SIZE, BANK_SIZE)


def get_bank_channels(mem: RadioMemory, bank: int) -> list[int] | None:
    """Get channels numbers in `bank` (0-based) in slot order.

    Return None for unused bank.
    """
    nchan = get_u16be(mem.mem, OFFSET_BNCHAN + bank * 2)
    if nchan >= BANK_SLOTS:
        return None

    data = _bank_region(mem, bank)
    slots = (get_u16be(data, n * 2) for n in range(nchan + 1))
    return [slot + 1 for slot in slots if slot != 0xFFFF]


def bank_free_slots(mem: RadioMemory, bank: int) -> int:
    data = _bank_region(mem, bank)
    return sum(
        1 for n in range(BANK_SLOTS) if get_u16be(data, n * 2) == 0xFFFF
    )


def add_bank_channels(
    mem: RadioMemory, bank: int, channels: ty.Iterable[int]
) -> None:
    """Put channels in first free slots of `bank` and update counters."""
    data = _bank_region(mem, bank)
    channels = list(channels)
    for n in range(BANK_SLOTS):
        if not channels:
            break

        if get_u16be(data, n * 2) == 0xFFFF:
            set_u16be(data, n * 2, channels.pop(0) - 1)

    if channels:
        raise ValueError(f"bank {bank + 1}: too many channels")

    occupied = BANK_SLOTS - bank_free_slots(mem, bank)
    if occupied:
        set_u16be(mem.mem, OFFSET_BNCHAN + bank * 2, occupied - 1)
        set_u16be(mem.mem, OFFSET_BUSE1, 0)
        set_u16be(mem.mem, OFFSET_BUSE2, 0)


def get_jumpers(mem: RadioMemory) -> list[int]:
    return [mem.mem[idx] for idx in JUMPERS_BYTES]


def set_jumpers(mem: RadioMemory, values: ty.Sequence[int]) -> None:
    for idx, val in zip(JUMPERS_BYTES, values, strict=True):
        mem.mem[idx] = val


def erase_channels(mem: RadioMemory) -> None:
    _LOG.info("erase channels")
    mem.fill(OFFSET_CHANNELS, NUM_CHANNELS * CHANNEL_SIZE, 0xFF)
    mem.fill(OFFSET_FLAGS, NUM_CHANNELS // 2, 0)


def erase_pms(mem: RadioMemory) -> None:
    _LOG.info("erase pms")
    mem.fill(OFFSET_PMS, NUM_PMS * 2 * CHANNEL_SIZE, 0xFF)
    mem.fill(OFFSET_FLAGS + NUM_CHANNELS // 2, NUM_PMS, 0)


def erase_banks(mem: RadioMemory) -> None:
    _LOG.info("erase banks")
    mem.fill(OFFSET_BANKS, NUM_BANKS * BANK_SIZE, 0xFF)
    mem.fill(OFFSET_BNCHAN, NUM_BANKS * 2, 0xFF)
    mem.fill(OFFSET_BUSE1, 2, 0xFF)
    mem.fill(OFFSET_BUSE2, 2, 0xFF)


DOWNLOAD_HELP: ty.Final = """
Please follow the procedure:

1. Power Off the VX-2.
2. Hold down the F/W key and Power On the VX-2.
   CLONE will appear on the display.
3. Press the BAND key until the radio starts to send.
-- Or enter ^C to abort the memory read.
"""

DOWNLOAD_RETRY_HELP: ty.Final = """Please, repeat the procedure:
Press the BAND key until the radio starts to send.
Or enter ^C to abort the memory read.
"""

UPLOAD_HELP: ty.Final = """
Please follow the procedure:

1. Power Off the VX-2.
2. Hold down the F/W key and Power On the VX-2.
   CLONE will appear on the display.
3. Press the V/M key until the radio starts to receive.
4. Press <Enter> to continue.
-- Or enter ^C to abort the memory write.
"""

UPLOAD_CONT_HELP: ty.Final = """
Please follow the procedure:

1. Press the V/M key until the radio starts to receive.
   WAIT will appear on the display.
2. Press <Enter> to continue.
-- Or enter ^C to abort the memory write.
"""

UPLOAD_RETRY_HELP: ty.Final = """
Please, repeat the procedure:
1. Press the V/M key until the radio starts to receive.
2. Press <Enter> to continue.
-- Or enter ^C to abort the memory write.
"""

# chunks of blocks up to 16 bytes are acknowledged
CLONE: ty.Final = clone_io.CloneProtocol(
    mem_size=MEM_SIZE,
    blocks=(
        clone_io.CloneBlock(0, 10, ack=True, poll=True),
        clone_io.CloneBlock(10, 8, ack=True, delay=0.5),
        clone_io.CloneBlock(18, MEM_SIZE - 17, delay=0.5),
    ),
    chunk_delay=0.06,
    final_delay=0.2,
    download_help=DOWNLOAD_HELP,
    download_retry_help=DOWNLOAD_RETRY_HELP,
    upload_help=UPLOAD_HELP,
    upload_cont_help=UPLOAD_CONT_HELP,
    upload_retry_help=UPLOAD_RETRY_HELP,
)

_BAND_COMMENT: ty.Final = """\
# 1) Band number: 1-11
# 2) Receive frequency in MHz
# 3) Transmit frequency or +/- offset in MHz
# 4) Squelch tone for receive, or '-' to disable
# 5) Squelch tone for transmit, or '-' to disable
# 6) Dial step in KHz: 5, 9, 10, 12.5, 15, 20, 25, 50, 100
# 7) Transmit power: High, Low
# 8) Modulation: FM, AM, WFM, NFM, Auto
#"""


def format_offset(rx_freq: int, tx_freq: int) -> str:
    if not can_transmit(rx_freq):
        return " -      "

    return expimp.format_offset(rx_freq, tx_freq)


class VX2:
    name = "Yaesu VX-2"
    aliases = ("vx2", "vx-2", "vx2r", "vx-2r", "vx2e", "vx-2e")
    baudrate = 19200
    mem_size = MEM_SIZE
    magic = MAGIC

    def __repr__(self) -> str:
        return f"VX2(name={self.name!r})"

    def is_compatible(self, mem: RadioMemory) -> bool:
        return mem.magic == self.magic

    def download(
        self,
        link: clone_io.Serial,
        operator: clone_io.Operator,
        cb: clone_io.ProgressCallback | None = None,
    ) -> RadioMemory:
        return clone_io.Clone(link, CLONE, operator, cb).download()

    def upload(
        self,
        link: clone_io.Serial,
        mem: RadioMemory,
        operator: clone_io.Operator,
        cb: clone_io.ProgressCallback | None = None,
        *,
        cont: bool = False,
    ) -> None:
        if not self.is_compatible(mem):
            raise radio_memory.IncompatibleImageError(self.name, mem.magic)

        clone_io.Clone(link, CLONE, operator, cb).upload(mem, cont=cont)

    def load_image(self, file: Path) -> RadioMemory:
        """Load image in VX2 Commander format (data + checksum)."""
        data = radio_memory.load_raw(file)
        if len(data) != MEM_SIZE + 1:
            raise radio_memory.InvalidFileError(
                file, f"expected {MEM_SIZE + 1} bytes, got {len(data)}"
            )

        mem = radio_memory.RadioMemory(MEM_SIZE, data)
        if not self.is_compatible(mem):
            raise radio_memory.IncompatibleImageError(self.name, mem.magic)

        if not mem.validate_checksum():
            _LOG.warning("invalid checksum in %s", file)

        return mem

    def save_image(self, file: Path, mem: RadioMemory) -> None:
        mem.update_checksum()
        radio_memory.save_raw(file, mem.mem)

    def print_version(self, out: ty.TextIO, mem: RadioMemory) -> None:
        pass

    def print_config(
        self, out: ty.TextIO, mem: RadioMemory, *, verbose: bool = False
    ) -> None:
        print(f"Radio: {self.name}", file=out)
        jumpers = " ".join(f"{val:02x}" for val in get_jumpers(mem))
        print(f"Virtual Jumpers: {jumpers}", file=out)

        self._print_channels(out, mem, verbose)
        if verbose:
            expimp.print_squelch_tones(out)

        self._print_banks(out, mem, verbose)

        print(file=out)
        if verbose:
            print("# Table of VFO mode frequencies.", file=out)
            print(_BAND_COMMENT, file=out)

        print(
            "VFO     Receive  Transmit R-Squel T-Squel Step  Power Modulation",
            file=out,
        )
        self._print_bands(out, mem, OFFSET_VFO)

        print(file=out)
        if verbose:
            print("# Table of home frequencies.", file=out)
            print(_BAND_COMMENT, file=out)

        print(
            "Home    Receive  Transmit R-Squel T-Squel Step  Power Modulation",
            file=out,
        )
        self._print_bands(out, mem, OFFSET_HOME)

        self._print_pms(out, mem, verbose)

    def _print_channels(
        self, out: ty.TextIO, mem: RadioMemory, verbose: bool
    ) -> None:
        print(file=out)
        if verbose:
            print("# Table of preprogrammed channels.", file=out)
            print(f"# 1) Channel number: 1-{NUM_CHANNELS}", file=out)
            print("# 2) Name: up to 6 characters, no spaces", file=out)
            print("# 3) Receive frequency in MHz", file=out)
            print("# 4) Transmit frequency or +/- offset in MHz", file=out)
            print("# 5) Squelch tone for receive, or '-' to disable", file=out)
            print(
                "# 6) Squelch tone for transmit, or '-' to disable", file=out
            )
            print("# 7) Transmit power: High, Low", file=out)
            print("# 8) Modulation: FM, AM, WFM, NFM, Auto", file=out)
            print("# 9) Scan mode: +, -, Only", file=out)
            print("#", file=out)

        print(
            "Channel Name    Receive  Transmit R-Squel T-Squel "
            "Power Modulation Scan",
            file=out,
        )
        for idx in range(NUM_CHANNELS):
            ch = get_channel(mem, idx)
            if not ch.used:
                continue

            print(
                f"{ch.number:5d}   {ch.name or '-':<7s} "
                f"{fmt.format_freq(ch.rx_freq, 3):>7s}  "
                f"{format_offset(ch.rx_freq, ch.tx_freq)} "
                f"{coding.format_squelch(ch.squelch.rx)}   "
                f"{coding.format_squelch(ch.squelch.tx)}   "
                f"{POWER_LEVELS[ch.power]:<4s}  "
                f"{try_get(MODES, ch.mode):<10s} "
                f"{consts.SCAN_MODES[ch.scan]}",
                file=out,
            )

    def _print_banks(
        self, out: ty.TextIO, mem: RadioMemory, verbose: bool
    ) -> None:
        if not is_banks_used(mem):
            return

        print(file=out)
        if verbose:
            print("# Table of channel banks.", file=out)
            print(f"# 1) Bank number: 1-{NUM_BANKS}", file=out)
            print(
                "# 2) List of channels: numbers and ranges (N-M) "
                "separated by comma",
                file=out,
            )
            print("#", file=out)

        print("Bank    Channels", file=out)
        for bank in range(NUM_BANKS):
            channels = get_bank_channels(mem, bank)
            if channels is not None:
                chlist = coding.format_channel_list(channels)
                print(f"{bank + 1:4d}    {chlist}", file=out)

    def _print_bands(
        self, out: ty.TextIO, mem: RadioMemory, offset: int
    ) -> None:
        for band in range(1, NUM_BANDS + 1):
            ch = get_band(mem, offset, band)
            if not ch.rx_freq:
                continue

            power = (
                POWER_LEVELS[ch.power]
                if band_index(band) in (6, 9)
                else "-"
            )
            print(
                f"{band:4d}   {fmt.format_freq(ch.rx_freq, 3):>8s}  "
                f"{format_offset(ch.rx_freq, ch.tx_freq)} "
                f"{coding.format_squelch(ch.squelch.rx)}   "
                f"{coding.format_squelch(ch.squelch.tx)}   "
                f"{try_get(STEPS, ch.step):<5s} {power:<4s}  "
                f"{try_get(MODES, ch.mode)}",
                file=out,
            )

    def _print_pms(
        self, out: ty.TextIO, mem: RadioMemory, verbose: bool
    ) -> None:
        print(file=out)
        if verbose:
            print(
                "# Programmable memory scan: list of sub-band limits.",
                file=out,
            )
            print(f"# 1) PMS pair number: 1-{NUM_PMS}", file=out)
            print("# 2) Lower frequency in MHz", file=out)
            print("# 3) Upper frequency in MHz", file=out)
            print("#", file=out)

        print("PMS     Lower    Upper", file=out)
        for idx in range(NUM_PMS):
            pms = get_pms(mem, idx)
            if not pms.used:
                continue

            lower = (
                f"{fmt.format_freq(pms.lower, 4):>8s}"
                if pms.lower
                else "-       "
            )
            upper = (
                f" {fmt.format_freq(pms.upper, 4):>8s}" if pms.upper else " -"
            )
            print(f"{pms.number:5d}   {lower}{upper}", file=out)

    def parse_parameter(self, mem: RadioMemory, name: str, value: str) -> None:
        match name.lower():
            case "radio":
                if value.lower() != self.name.lower():
                    raise expimp.ConfigError(f"bad value for {name}: {value}")

            case "virtual jumpers":
                try:
                    values = [int(val, 16) for val in value.split()]
                except ValueError:
                    values = []

                if len(values) != len(JUMPERS_BYTES) or not all(
                    0 <= val <= 0xFF for val in values
                ):
                    _LOG.warning("wrong value: %s = %s", name, value)
                    return

                set_jumpers(mem, values)

            case _:
                raise expimp.ConfigError(
                    f"unknown parameter: {name} = {value}"
                )

    def parse_header(self, line: str) -> str | None:
        header = line.lower()
        for prefix in ("channel", "home", "vfo", "pms", "bank"):
            if header.startswith(prefix):
                return prefix

        return None

    def parse_row(
        self, mem: RadioMemory, table: str, first_row: bool, line: str
    ) -> None:
        """Parse table row and apply it to `mem`.

        Raise expimp.RowError on invalid values; memory is not changed then.
        """
        _LOG.debug("parse_row: %s %r", table, line)
        match table:
            case "channel":
                ch = self._parse_channel(line)
                if first_row:
                    erase_channels(mem)

                set_channel(mem, ch)

            case "home":
                set_band(mem, OFFSET_HOME, self._parse_band(line))

            case "vfo":
                set_band(mem, OFFSET_VFO, self._parse_band(line))

            case "pms":
                pms = self._parse_pms(line)
                if first_row:
                    erase_pms(mem)

                set_pms(mem, pms)

            case "bank":
                bank, channels = self._parse_bank(line)
                free = BANK_SLOTS if first_row else bank_free_slots(mem, bank)
                if len(channels) > free:
                    raise expimp.RowError(
                        f"bank {bank + 1}: too many channels"
                    )

                if first_row:
                    erase_banks(mem)

                add_bank_channels(mem, bank, channels)

            case _:
                raise ValueError(f"unknown table {table}")

    def _parse_common(
        self, ch: model.Channel, rx: str, tx: str, rsq: str, tsq: str
    ) -> None:
        ch.rx_freq = stored_freq(expimp.parse_rx_freq(rx, is_valid_freq))
        if tx == "-":
            ch.tx_freq = ch.rx_freq
        else:
            ch.tx_freq = stored_freq(
                expimp.parse_tx_freq(tx, ch.rx_freq, is_valid_freq)
            )

        ch.squelch, _enc = expimp.parse_squelch(rsq, tsq, encode_squelch)

    def _parse_power(self, text: str) -> int:
        match text.lower():
            case "high":
                return POWER_HIGH
            case "low" | "-":
                return POWER_LOW

        raise expimp.RowError(f"bad power level: {text}")

    def _parse_channel(self, line: str) -> model.Channel:
        num, name, rx, tx, rsq, tsq, power, mode, scan = expimp.split_row(
            line, 9
        )
        ch = model.Channel(
            expimp.parse_number(num, 1, NUM_CHANNELS, "channel number"),
            name=name,
        )
        self._parse_common(ch, rx, tx, rsq, tsq)
        ch.power = self._parse_power(power)
        ch.mode = expimp.parse_choice(mode, MODES, "modulation")
        ch.scan = expimp.parse_scan(scan)
        return ch

    def _parse_band(self, line: str) -> model.Channel:
        band, rx, tx, rsq, tsq, step, power, mode = expimp.split_row(line, 8)
        ch = model.Channel(expimp.parse_number(band, 1, NUM_BANDS, "band"))
        self._parse_common(ch, rx, tx, rsq, tsq)
        ch.step = expimp.parse_choice(step, STEPS, "frequency step")
        ch.power = self._parse_power(power)
        ch.mode = expimp.parse_choice(mode, MODES, "modulation")
        return ch

    def _parse_pms(self, line: str) -> model.PmsPair:
        num, lower, upper = expimp.split_row(line, 3)
        return model.PmsPair(
            expimp.parse_number(num, 1, NUM_PMS, "PMS number"),
            expimp.parse_pms_freq(lower, is_valid_freq),
            expimp.parse_pms_freq(upper, is_valid_freq),
        )

    def _parse_bank(self, line: str) -> tuple[int, list[int]]:
        num, channels = expimp.split_row(line, 2)
        return (
            expimp.parse_number(num, 1, NUM_BANKS, "bank number") - 1,
            expimp.parse_channel_list(channels, NUM_CHANNELS),
        )


RADIO: ty.Final = VX2()
