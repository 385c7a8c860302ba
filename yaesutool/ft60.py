# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.
# ruff: noqa: PLR2004
"""
Yaesu FT-60R memory layout and configuration tables.

Memory channel record (16 bytes):

      76543210
   0  uanpdddd   u - used, a - AM, n - narrow, p - unknown, d - duplex
   1-3           receive frequency (10kHz BCD, 2.5kHz multiplier)
   4  hhsssttt   h - unknown (freq >= 400MHz), s - step, t - tone mode
   5-7           transmit frequency (cross band only)
   8  pptttttt   p - power, t - CTCSS tone index
   9  .ddddddd   d - DCS code index
   10-11         unknown, always 0f 00
   12            offset in 50kHz units
   13-15         unknown
"""

from __future__ import annotations

import enum
import logging
import typing as ty

from . import clone_io, coding, consts, expimp, model, radio_memory
from .model import fmt
from .model._support import data_set_bit, get_bits, is_valid_index, set_bits

if ty.TYPE_CHECKING:
    from pathlib import Path

    from .model._support import Memory, MutableMemory
    from .radio_memory import RadioMemory

_LOG = logging.getLogger(__name__)

MEM_SIZE: ty.Final = 0x6FC8
MAGIC: ty.Final = b"AH017$"

NUM_CHANNELS: ty.Final = 1000
NUM_BANKS: ty.Final = 10
NUM_PMS: ty.Final = 50

OFFSET_VFO: ty.Final = 0x0048
OFFSET_HOME: ty.Final = 0x01C8
OFFSET_CHANNELS: ty.Final = 0x0248
OFFSET_PMS: ty.Final = 0x40C8
OFFSET_NAMES: ty.Final = 0x4708
OFFSET_BANKS: ty.Final = 0x69C8
OFFSET_SCAN: ty.Final = 0x6EC8

CHANNEL_SIZE: ty.Final = 16
NAME_SIZE: ty.Final = 8
BANK_SIZE: ty.Final = 0x80

# fields: (byte, first bit, width)
_F_DUPLEX: ty.Final = (0, 0, 4)
_F_ISAM: ty.Final = (0, 4, 1)
_F_NARROW: ty.Final = (0, 5, 1)
_F_USED: ty.Final = (0, 7, 1)
_F_TMODE: ty.Final = (4, 0, 3)
_F_STEP: ty.Final = (4, 3, 3)
_F_U2: ty.Final = (4, 6, 2)
_F_TONE: ty.Final = (8, 0, 6)
_F_POWER: ty.Final = (8, 6, 2)
_F_DCS: ty.Final = (9, 0, 7)

POWER_LEVELS: ty.Final = ["High", "Mid", "Low", "??"]
MODES: ty.Final = ["Wide", "Narrow", "AM"]
MODE_WIDE: ty.Final = 0
MODE_NARROW: ty.Final = 1
MODE_AM: ty.Final = 2
STEP_5: ty.Final = 0
STEP_12_5: ty.Final = 2
HOME_BANDS: ty.Final = ["144", "250", "350", "430", "850"]

CHARSET: ty.Final = (
    "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ !`o$%&'()*+,-./|;/=>?@[~]^__"
)
CHAR_OPENBOX: ty.Final = 64

# max offset that can be stored in offset field
_OFFSET_UNIT: ty.Final = 50_000
_OFFSET_MAX: ty.Final = 255


class Duplex(enum.IntEnum):
    SIMPLEX = 0
    NEG = 2
    POS = 3
    CROSS = 4


class ToneMode(enum.IntEnum):
    OFF = 0
    TONE = 1
    TSQL = 2
    TSQL_REV = 3
    DTCS = 4
    D = 5
    T_DCS = 6
    D_TSQL = 7


def is_valid_freq(hz: int) -> bool:
    mhz = hz // 1_000_000
    return 108 <= mhz <= 520 or 700 <= mhz <= 999


def encode_squelch(
    rx: coding.SquelchSpec, tx: coding.SquelchSpec
) -> coding.EncodedSquelch:
    """Find tone mode for receive/transmit squelch pair.

    Receive tone may be negative (reversed tone squelch).
    """
    if tx.ctcs < 0:
        raise coding.InvalidSquelchError(
            -tx.ctcs / 10, "reversed tone is not allowed for transmit"
        )

    if rx.dcs:
        if tx.ctcs:
            return coding.EncodedSquelch(
                ToneMode.T_DCS,
                coding.tone_index(tx.ctcs),
                coding.dcs_index(rx.dcs),
            )

        return coding.EncodedSquelch(
            ToneMode.DTCS, consts.TONE_DEFAULT, coding.dcs_index(rx.dcs)
        )

    if tx.dcs:
        if rx.ctcs:
            return coding.EncodedSquelch(
                ToneMode.D_TSQL,
                coding.tone_index(abs(rx.ctcs)),
                coding.dcs_index(tx.dcs),
            )

        return coding.EncodedSquelch(
            ToneMode.D, consts.TONE_DEFAULT, coding.dcs_index(tx.dcs)
        )

    if tx.ctcs:
        tone = coding.tone_index(tx.ctcs)
        if not rx.ctcs:
            return coding.EncodedSquelch(ToneMode.TONE, tone)

        if rx.ctcs < 0:
            return coding.EncodedSquelch(ToneMode.TSQL_REV, tone)

        return coding.EncodedSquelch(ToneMode.TSQL, tone)

    return coding.EncodedSquelch(ToneMode.OFF)


def decode_squelch(tmode: int, tone: int, dcs: int) -> coding.Squelch:
    match tmode:
        case ToneMode.TONE:
            return coding.Squelch(tx_ctcs=coding.tone_value(tone))

        case ToneMode.TSQL:
            ctcs = coding.tone_value(tone)
            return coding.Squelch(rx_ctcs=ctcs, tx_ctcs=ctcs)

        case ToneMode.TSQL_REV:
            ctcs = coding.tone_value(tone)
            return coding.Squelch(rx_ctcs=-ctcs, tx_ctcs=ctcs)

        case ToneMode.DTCS:
            code = coding.dcs_value(dcs)
            return coding.Squelch(rx_dcs=code, tx_dcs=code)

        case ToneMode.D:
            return coding.Squelch(tx_dcs=coding.dcs_value(dcs))

        case ToneMode.T_DCS:
            return coding.Squelch(
                tx_ctcs=coding.tone_value(tone), rx_dcs=coding.dcs_value(dcs)
            )

        case ToneMode.D_TSQL:
            return coding.Squelch(
                tx_dcs=coding.dcs_value(dcs), rx_ctcs=coding.tone_value(tone)
            )

    return coding.Squelch()


def _decode_tx_freq(data: Memory, rx_freq: int) -> int:
    match get_bits(data, *_F_DUPLEX):
        case Duplex.NEG:
            return rx_freq - data[12] * _OFFSET_UNIT

        case Duplex.POS:
            return rx_freq + data[12] * _OFFSET_UNIT

        case Duplex.CROSS:
            return coding.decode_freq10k(data[5:8])

    return rx_freq


def _encode_duplex(rx_freq: int, tx_freq: int) -> tuple[Duplex, int]:
    """Find duplex and offset (in 50kHz units) for frequencies pair.

    Offsets not representable in offset field are stored as cross band.
    """
    delta = tx_freq - rx_freq
    if delta == 0:
        return Duplex.SIMPLEX, 0

    steps, rest = divmod(abs(delta), _OFFSET_UNIT)
    if rest or steps > _OFFSET_MAX:
        return Duplex.CROSS, 0

    return (Duplex.POS if delta > 0 else Duplex.NEG), steps


def decode_channel(
    number: int, data: Memory, *, check_used: bool = True
) -> model.Channel:
    """Decode channel record; unused channel is returned empty."""
    if check_used and not get_bits(data, *_F_USED):
        return model.Channel(number)

    rx_freq = coding.decode_freq10k(data[1:4])
    if get_bits(data, *_F_ISAM):
        mode = MODE_AM
    elif get_bits(data, *_F_NARROW):
        mode = MODE_NARROW
    else:
        mode = MODE_WIDE

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
        step=get_bits(data, *_F_STEP),
    )

    if model._support.DEBUG:  # noqa: SLF001
        ch.debug_info = {"raw": bytes(data).hex(" ")}

    return ch


def encode_channel(data: MutableMemory, ch: model.Channel) -> None:
    """Write whole channel record (without name and scan flag)."""
    is_valid_index(POWER_LEVELS, ch.power, "power")
    is_valid_index(MODES, ch.mode, "mode")

    enc = encode_squelch(ch.squelch.rx, ch.squelch.tx)
    duplex, offset = _encode_duplex(ch.rx_freq, ch.tx_freq)
    high = ch.rx_freq >= 400_000_000

    data[0:16] = bytes(16)
    set_bits(data, *_F_DUPLEX, duplex)
    set_bits(data, *_F_ISAM, ch.mode == MODE_AM)
    set_bits(data, *_F_NARROW, ch.mode == MODE_NARROW)
    set_bits(data, *_F_USED, ch.rx_freq > 0)
    data[1:4] = coding.encode_freq10k(ch.rx_freq)
    set_bits(data, *_F_TMODE, enc.tmode)
    set_bits(data, *_F_STEP, STEP_12_5 if high else STEP_5)
    set_bits(data, *_F_U2, high)
    if duplex == Duplex.CROSS:
        data[5:8] = coding.encode_freq10k(ch.tx_freq)

    set_bits(data, *_F_TONE, enc.tone)
    set_bits(data, *_F_POWER, ch.power)
    set_bits(data, *_F_DCS, enc.dcs)
    data[10] = 0x0F
    data[12] = offset


def decode_name(data: Memory) -> str:
    """Decode name record; name is valid when both flags are set."""
    if not (data[6] & 0x80 and data[7] & 0x80):
        return ""

    return coding.decode_name(data[:6], CHARSET)


def encode_name(data: MutableMemory, name: str) -> None:
    """Set name; empty name or "-" clear it."""
    if name and not name.startswith("-"):
        data[0:6] = bytes(coding.encode_name(name, CHARSET, CHAR_OPENBOX))
        data_set_bit(data, 6, 7, 1)
        data_set_bit(data, 7, 7, 1)
    else:
        data[0:6] = b"\xff" * 6
        data_set_bit(data, 6, 7, 0)
        data_set_bit(data, 7, 7, 0)


# 4 channels per byte, 2 bits each; channel 0 in lowest bits
def get_scan(mem: RadioMemory, idx: int) -> int:
    return get_bits(mem.mem, OFFSET_SCAN + idx // 4, (idx % 4) * 2, 2)


def set_scan(mem: RadioMemory, idx: int, scan: int) -> None:
    set_bits(mem.mem, OFFSET_SCAN + idx // 4, (idx % 4) * 2, 2, scan)


def get_channel(mem: RadioMemory, idx: int) -> model.Channel:
    data = mem.record(OFFSET_CHANNELS, CHANNEL_SIZE, idx)
    ch = decode_channel(idx + 1, data)
    if ch.used:
        ch.name = decode_name(mem.record(OFFSET_NAMES, NAME_SIZE, idx))
        ch.scan = get_scan(mem, idx)

    return ch


def set_channel(mem: RadioMemory, ch: model.Channel) -> None:
    idx = ch.number - 1
    _LOG.debug("set_channel: %r", ch)
    encode_channel(mem.record(OFFSET_CHANNELS, CHANNEL_SIZE, idx), ch)
    encode_name(mem.record(OFFSET_NAMES, NAME_SIZE, idx), ch.name)
    set_scan(mem, idx, ch.scan)


def get_home(mem: RadioMemory, idx: int) -> model.Channel:
    data = mem.record(OFFSET_HOME, CHANNEL_SIZE, idx)
    return decode_channel(idx, data, check_used=False)


def set_home(mem: RadioMemory, ch: model.Channel) -> None:
    encode_channel(mem.record(OFFSET_HOME, CHANNEL_SIZE, ch.number), ch)


def _get_pms_freq(mem: RadioMemory, idx: int) -> int:
    data = mem.record(OFFSET_PMS, CHANNEL_SIZE, idx)
    if not get_bits(data, *_F_USED):
        return 0

    return coding.decode_freq10k(data[1:4])


def _set_pms_freq(mem: RadioMemory, idx: int, hz: int) -> None:
    data = mem.record(OFFSET_PMS, CHANNEL_SIZE, idx)
    if hz > 0:
        data[1:4] = coding.encode_freq10k(hz)

    set_bits(data, *_F_USED, hz > 0)


def get_pms(mem: RadioMemory, idx: int) -> model.PmsPair:
    return model.PmsPair(
        idx + 1, _get_pms_freq(mem, idx * 2), _get_pms_freq(mem, idx * 2 + 1)
    )


def set_pms(mem: RadioMemory, pms: model.PmsPair) -> None:
    idx = pms.number - 1
    _set_pms_freq(mem, idx * 2, pms.lower)
    _set_pms_freq(mem, idx * 2 + 1, pms.upper)


def _bank_region(mem: RadioMemory, bank: int) -> memoryview:
    return mem.region(OFFSET_BANKS + bank * BANK_SIZE, BANK_SIZE)


def get_bank_channels(mem: RadioMemory, bank: int) -> list[int]:
    """Get numbers of channels in `bank` (0-based)."""
    data = _bank_region(mem, bank)
    return [
        idx + 1
        for idx in range(NUM_CHANNELS)
        if data[idx // 8] & (1 << (idx & 7))
    ]


def add_bank_channels(
    mem: RadioMemory, bank: int, channels: ty.Iterable[int]
) -> None:
    data = _bank_region(mem, bank)
    for num in channels:
        data_set_bit(data, (num - 1) // 8, (num - 1) & 7, 1)


def is_bank_used(mem: RadioMemory, bank: int) -> bool:
    return any(_bank_region(mem, bank)[: NUM_CHANNELS // 8])


def erase_channels(mem: RadioMemory) -> None:
    _LOG.info("erase channels")
    empty = model.Channel(0)
    for idx in range(NUM_CHANNELS):
        empty.number = idx + 1
        set_channel(mem, empty)


def erase_pms(mem: RadioMemory) -> None:
    _LOG.info("erase pms")
    for idx in range(NUM_PMS * 2):
        data = mem.record(OFFSET_PMS, CHANNEL_SIZE, idx)
        set_bits(data, *_F_USED, 0)


def erase_banks(mem: RadioMemory) -> None:
    _LOG.info("erase banks")
    mem.fill(OFFSET_BANKS, NUM_BANKS * BANK_SIZE, 0)


DOWNLOAD_HELP: ty.Final = """
Please follow the procedure:

1. Power Off the FT60.
2. Hold down the MONI switch and Power On the FT60.
3. Rotate the right DIAL knob to select F8 CLONE.
4. Briefly press the [F/W] key. The display should go blank then show CLONE.
5. Press and hold the PTT switch until the radio starts to send.
-- Or enter ^C to abort the memory read.
"""

DOWNLOAD_RETRY_HELP: ty.Final = """Please, repeat the procedure:
Press and hold the PTT switch until the radio starts to send.
Or enter ^C to abort the memory read.
"""

UPLOAD_HELP: ty.Final = """
Please follow the procedure:

1. Power Off the FT60.
2. Hold down the MONI switch and Power On the FT60.
3. Rotate the right DIAL knob to select F8 CLONE.
4. Briefly press the [F/W] key. The display should go blank then show CLONE.
5. Press the MONI switch until the radio starts to receive.
6. Press <Enter> to continue.
-- Or enter ^C to abort the memory write.
"""

UPLOAD_CONT_HELP: ty.Final = """
Please follow the procedure:

1. Press the MONI switch until the radio starts to receive.
2. Press <Enter> to continue.
-- Or enter ^C to abort the memory write.
"""

UPLOAD_RETRY_HELP: ty.Final = """
Please, repeat the procedure:
1. Briefly press the [F/W] key to clear the ERROR status.
2. Press the MONI switch until the radio starts to receive.
3. Press <Enter> to continue.
-- Or enter ^C to abort the memory write.
"""

CLONE: ty.Final = clone_io.CloneProtocol(
    mem_size=MEM_SIZE,
    blocks=(
        clone_io.CloneBlock(0, 8, ack=True, poll=True),
        clone_io.CloneBlock(8, MEM_SIZE - 8, ack=True),
        clone_io.CloneBlock(MEM_SIZE, 1, ack=True),
    ),
    download_help=DOWNLOAD_HELP,
    download_retry_help=DOWNLOAD_RETRY_HELP,
    upload_help=UPLOAD_HELP,
    upload_cont_help=UPLOAD_CONT_HELP,
    upload_retry_help=UPLOAD_RETRY_HELP,
)


class FT60:
    name = "Yaesu FT-60R"
    aliases = ("ft60", "ft-60", "ft60r", "ft-60r")
    baudrate = 9600
    mem_size = MEM_SIZE
    magic = MAGIC

    def __repr__(self) -> str:
        return f"FT60(name={self.name!r})"

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
        """Load image; trailing checksum byte is optional."""
        data = radio_memory.load_raw(file)
        if len(data) not in (MEM_SIZE, MEM_SIZE + 1):
            raise radio_memory.InvalidFileError(
                file, f"expected {MEM_SIZE} bytes, got {len(data)}"
            )

        mem = radio_memory.RadioMemory(MEM_SIZE, data[:MEM_SIZE])
        if not self.is_compatible(mem):
            raise radio_memory.IncompatibleImageError(self.name, mem.magic)

        mem.update_checksum()
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
        self._print_channels(out, mem, verbose)
        if verbose:
            expimp.print_squelch_tones(out)

        self._print_banks(out, mem, verbose)
        self._print_home(out, mem, verbose)
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
            print("# 7) Transmit power: High, Mid, Low", file=out)
            print("# 8) Modulation: Wide, Narrow, AM", file=out)
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
                f"{fmt.format_freq(ch.rx_freq, 4):>8s} "
                f"{expimp.format_offset(ch.rx_freq, ch.tx_freq)} "
                f"{coding.format_squelch(ch.squelch.rx)}   "
                f"{coding.format_squelch(ch.squelch.tx)}   "
                f"{POWER_LEVELS[ch.power]:<4s}  {MODES[ch.mode]:<10s} "
                f"{consts.SCAN_MODES[ch.scan]}",
                file=out,
            )

    def _print_banks(
        self, out: ty.TextIO, mem: RadioMemory, verbose: bool
    ) -> None:
        banks = [b for b in range(NUM_BANKS) if is_bank_used(mem, b)]
        if not banks:
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
        for bank in banks:
            channels = coding.format_channel_list(get_bank_channels(mem, bank))
            print(f"{bank + 1:4d}    {channels}", file=out)

    def _print_home(
        self, out: ty.TextIO, mem: RadioMemory, verbose: bool
    ) -> None:
        print(file=out)
        if verbose:
            print("# Table of home frequencies.", file=out)
            print("# 1) Band: 144, 250, 350, 430 or, 850", file=out)
            print("# 2) Receive frequency in MHz", file=out)
            print("# 3) Transmit frequency or +/- offset in MHz", file=out)
            print("# 4) Squelch tone for receive, or '-' to disable", file=out)
            print(
                "# 5) Squelch tone for transmit, or '-' to disable", file=out
            )
            print("# 6) Transmit power: High, Mid, Low", file=out)
            print("# 7) Modulation: Wide, Narrow, AM", file=out)
            print("#", file=out)

        print(
            "Home    Receive  Transmit R-Squel T-Squel Power Modulation",
            file=out,
        )
        for idx, band in enumerate(HOME_BANDS):
            ch = get_home(mem, idx)
            if not ch.rx_freq:
                continue

            print(
                f"{band:>5s}   {fmt.format_freq(ch.rx_freq, 4):>8s} "
                f"{expimp.format_offset(ch.rx_freq, ch.tx_freq)} "
                f"{coding.format_squelch(ch.squelch.rx)}   "
                f"{coding.format_squelch(ch.squelch.tx)}   "
                f"{POWER_LEVELS[ch.power]:<4s}  {MODES[ch.mode]}",
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
        if name.lower() != "radio":
            raise expimp.ConfigError(f"unknown parameter: {name} = {value}")

        if value.lower() != self.name.lower():
            raise expimp.ConfigError(f"bad value for {name}: {value}")

    def parse_header(self, line: str) -> str | None:
        """Find table by header line."""
        header = line.lower()
        for prefix, table in (
            ("channel", "channel"),
            ("home", "home"),
            ("pms", "pms"),
            ("bank", "bank"),
        ):
            if header.startswith(prefix):
                return table

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
                ch = self._parse_home(line)
                set_home(mem, ch)

            case "pms":
                pms = self._parse_pms(line)
                if first_row:
                    erase_pms(mem)

                set_pms(mem, pms)

            case "bank":
                bank, channels = self._parse_bank(line)
                if first_row:
                    erase_banks(mem)

                add_bank_channels(mem, bank - 1, channels)

            case _:
                raise ValueError(f"unknown table {table}")

    def _parse_common(
        self, ch: model.Channel, rx: str, tx: str, rsq: str, tsq: str
    ) -> None:
        ch.rx_freq = expimp.parse_rx_freq(rx, is_valid_freq)
        ch.tx_freq = expimp.parse_tx_freq(tx, ch.rx_freq, is_valid_freq)
        ch.squelch, _enc = expimp.parse_squelch(rsq, tsq, encode_squelch)

    def _parse_power(self, text: str) -> int:
        if text.lower() == "med":
            text = "Mid"

        return expimp.parse_choice(text, POWER_LEVELS[:3], "power")

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

    def _parse_home(self, line: str) -> model.Channel:
        band, rx, tx, rsq, tsq, power, mode = expimp.split_row(line, 7)
        ch = model.Channel(expimp.parse_choice(band, HOME_BANDS, "band"))
        self._parse_common(ch, rx, tx, rsq, tsq)
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
            expimp.parse_number(num, 1, NUM_BANKS, "bank number"),
            expimp.parse_channel_list(channels, NUM_CHANNELS),
        )


RADIO: ty.Final = FT60()
