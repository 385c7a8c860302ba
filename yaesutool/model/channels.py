# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.

""" """

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from yaesutool import coding


@dataclass
class Channel:
    """Decoded memory, home or VFO channel.

    Indexes (power, mode, step) refers to model-specific name lists.
    Unused channel has all values zeroed.
    """

    number: int
    name: str = ""
    # frequencies in Hz
    rx_freq: int = 0
    tx_freq: int = 0
    squelch: coding.Squelch = field(default_factory=coding.Squelch)
    power: int = 0
    mode: int = 0
    scan: int = 0
    step: int = 0

    debug_info: dict[str, object] | None = None

    @property
    def used(self) -> bool:
        return self.rx_freq > 0

    @property
    def offset(self) -> int:
        return self.tx_freq - self.rx_freq

    def clone(self) -> Channel:
        return copy.deepcopy(self)


@dataclass
class PmsPair:
    """Programmable memory scan limits; 0 = not set."""

    number: int
    lower: int = 0
    upper: int = 0

    @property
    def used(self) -> bool:
        return bool(self.lower or self.upper)
