# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.

"""
Text configuration import/export.

Configuration text consists of `Key: Value` parameters and tables. Table
starts with header line and ends on blank line or next header. Lines
starting with `#` are comments.
"""

from __future__ import annotations

import logging
import typing as ty

from . import coding, consts
from .model import ValidateError, fmt
from .model._support import find_index
from .radio_memory import IncompatibleImageError

if ty.TYPE_CHECKING:
    from collections import abc

    from .radio import RadioDevice
    from .radio_memory import RadioMemory

_LOG = logging.getLogger(__name__)

# (line number, line, error message)
RowErrorInfo = tuple[int, str, str]


class ConfigError(Exception):
    """Error that stop processing configuration."""

    def __init__(self, msg: str, lineno: int = 0) -> None:
        self.msg = msg
        self.lineno = lineno

    def __str__(self) -> str:
        if self.lineno:
            return f"line {self.lineno}: {self.msg}"

        return self.msg


class RowError(ValueError):
    """Invalid table row; row is skipped."""


def import_config(
    dev: RadioDevice,
    mem: RadioMemory,
    lines: abc.Iterable[str],
) -> list[RowErrorInfo]:
    """Parse configuration `lines` into `mem`.

    Return list of rejected rows; raise ConfigError on unknown parameters
    and tables, IncompatibleImageError when `mem` is not image of `dev`.
    """
    if not dev.is_compatible(mem):
        raise IncompatibleImageError(dev.name, mem.magic)

    errors: list[RowErrorInfo] = []
    table: str | None = None
    first_row = False

    for lineno, rline in enumerate(lines, 1):
        line = rline.strip()

        if not line:
            table = None
            continue

        if line.startswith("#"):
            continue

        try:
            if table is None:
                if line[0].isdigit():
                    raise RowError("data row outside of table")

                if param := split_parameter(line):
                    dev.parse_parameter(mem, *param)
                    continue

                header = dev.parse_header(line)
                if header is None:
                    raise ConfigError(f"unknown table: {line}")

            # next table may start without blank line
            elif (header := dev.parse_header(line)) is None:
                dev.parse_row(mem, table, first_row, line)
                first_row = False
                continue

            _LOG.debug("line %d: table %s", lineno, header)
            table = header
            first_row = True

        except RowError as err:
            _LOG.warning("line %d: %s; row skipped: %r", lineno, err, line)
            errors.append((lineno, line, str(err)))

        except ConfigError as err:
            err.lineno = lineno
            raise

    return errors


def split_parameter(line: str) -> tuple[str, str] | None:
    """Split `Key: Value` or `Key = Value` line."""
    for sep in (":", "="):
        name, found, value = line.partition(sep)
        if found and name.strip():
            return name.strip(), value.strip()

    return None


def split_row(line: str, columns: int) -> list[str]:
    fields = line.split()
    if len(fields) != columns:
        raise RowError(f"expected {columns} fields, got {len(fields)}")

    return fields


def parse_number(text: str, minimal: int, maximal: int, what: str) -> int:
    try:
        num = int(text)
    except ValueError:
        raise RowError(f"bad {what}: {text}") from None

    if not minimal <= num <= maximal:
        raise RowError(f"bad {what}: {text}")

    return num


def parse_choice(text: str, names: abc.Sequence[str], what: str) -> int:
    """Find `text` in `names` ignoring case."""
    try:
        return find_index(names, text, what)
    except ValidateError:
        raise RowError(f"bad {what}: {text}") from None


def parse_rx_freq(text: str, valid: abc.Callable[[int], bool]) -> int:
    try:
        hz = fmt.parse_freq(text)
    except ValueError:
        raise RowError(f"bad receive frequency: {text}") from None

    if hz <= 0 or not valid(hz):
        raise RowError(f"bad receive frequency: {text}")

    return hz


def parse_tx_freq(
    text: str, rx_freq: int, valid: abc.Callable[[int], bool]
) -> int:
    """Parse transmit frequency; value with sign is offset from `rx_freq`."""
    try:
        hz = fmt.parse_freq(text)
    except ValueError:
        raise RowError(f"bad transmit frequency: {text}") from None

    if text[0] in "+-":
        hz += rx_freq

    if hz <= 0 or not valid(hz):
        raise RowError(f"bad transmit frequency: {text}")

    return hz


def parse_pms_freq(text: str, valid: abc.Callable[[int], bool]) -> int:
    """Parse PMS bound; "-" is unused bound (0)."""
    if text == "-":
        return 0

    try:
        hz = fmt.parse_freq(text)
    except ValueError:
        raise RowError(f"bad frequency: {text}") from None

    if hz <= 0 or not valid(hz):
        raise RowError(f"bad frequency: {text}")

    return hz


def parse_scan(text: str) -> int:
    """Parse scan mode: "+" scan, "-" skip, "Only" preferential."""
    match text.lower():
        case "+":
            return 0
        case "-":
            return 1
        case "only":
            return 2

    raise RowError(f"bad scan flag: {text}")


def parse_squelch(
    rx_text: str,
    tx_text: str,
    encoder: abc.Callable[
        [coding.SquelchSpec, coding.SquelchSpec], coding.EncodedSquelch
    ],
) -> tuple[coding.Squelch, coding.EncodedSquelch]:
    """Parse squelch columns and check if radio can encode them."""
    try:
        rx = coding.parse_squelch(rx_text)
    except ValueError as err:
        raise RowError(f"bad receive squelch: {err}") from None

    try:
        tx = coding.parse_squelch(tx_text)
    except ValueError as err:
        raise RowError(f"bad transmit squelch: {err}") from None

    try:
        enc = encoder(rx, tx)
    except ValueError as err:
        raise RowError(str(err)) from None

    return coding.Squelch(rx.ctcs, tx.ctcs, rx.dcs, tx.dcs), enc


def parse_channel_list(text: str, max_num: int) -> list[int]:
    try:
        return coding.parse_channel_list(text, max_num)
    except ValueError as err:
        raise RowError(str(err)) from None


def format_offset(rx_freq: int, tx_freq: int) -> str:
    """Format transmit column: offset when small, else absolute freq."""
    delta = tx_freq - rx_freq
    if delta == 0:
        return "+0      "

    sign = "+" if delta > 0 else "-"
    delta = abs(delta)
    if delta // 50_000 <= 255:  # noqa: PLR2004
        if delta % 1_000_000 == 0:
            return f"{sign}{delta // 1_000_000:<7d}"

        decimals = 3 if delta % 1000 == 0 else 4
        return f"{sign}{fmt.format_freq(delta, decimals):<7s}"

    return f" {fmt.format_freq(tx_freq, 4):<7s}"


def print_squelch_tones(out: ty.TextIO) -> None:
    """Print comment with list of supported CTCSS tones and DCS codes."""
    print("#", file=out)
    print("# Squelch tones:", file=out)
    tones = [f"{tone / 10:.1f}" for tone in consts.CTCSS_TONES]
    for idx in range(0, len(tones), 10):
        line = " ".join(f"{tone:>5s}" for tone in tones[idx : idx + 10])
        print(f"#   {line}", file=out)

    print("#", file=out)
    print("# DCS codes:", file=out)
    codes = [f"D{code:03d}" for code in consts.DCS_CODES]
    for idx in range(0, len(codes), 10):
        print("#   " + " ".join(codes[idx : idx + 10]), file=out)
