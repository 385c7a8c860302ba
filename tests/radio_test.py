# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.
# pylint: disable=protected-access,unspecified-encoding,consider-using-with
# mypy: allow-untyped-defs, allow-untyped-calls
# ruff: noqa: SLF001,PLR2004

""" """

import pytest

from yaesutool import ft60, radio, radio_memory, vx2


@pytest.mark.parametrize(
    ("name", "dev"),
    [
        ("ft60", ft60.RADIO),
        ("FT-60R", ft60.RADIO),
        ("Yaesu FT-60R", ft60.RADIO),
        (" vx2 ", vx2.RADIO),
        ("VX-2E", vx2.RADIO),
        ("yaesu vx-2", vx2.RADIO),
    ],
)
def test_find_device(name, dev):
    assert radio.find_device(name) is dev


def test_find_device_unknown():
    with pytest.raises(radio.UnknownRadioError) as err:
        radio.find_device("ft-8900")

    assert str(err.value) == (
        "Unknown radio: ft-8900; supported: Yaesu FT-60R, Yaesu VX-2"
    )


def test_detect_device():
    mem = radio_memory.RadioMemory(ft60.MEM_SIZE, ft60.MAGIC)
    assert radio.detect_device(mem) is ft60.RADIO

    mem = radio_memory.RadioMemory(vx2.MEM_SIZE, vx2.MAGIC)
    assert radio.detect_device(mem) is vx2.RADIO

    # size mismatch
    mem = radio_memory.RadioMemory(ft60.MEM_SIZE, vx2.MAGIC)
    assert radio.detect_device(mem) is None


@pytest.mark.parametrize("suffix", [".img", ".img.gz"])
def test_load_image(tmp_path, suffix):
    file = tmp_path / f"radio{suffix}"
    mem = radio_memory.RadioMemory(vx2.MEM_SIZE, vx2.MAGIC)
    vx2.RADIO.save_image(file, mem)

    dev, loaded = radio.load_image(file)
    assert dev is vx2.RADIO
    assert loaded.mem == mem.mem


def test_load_image_unknown_tag(tmp_path):
    file = tmp_path / "radio.img"
    file.write_bytes(b"XX000$" + bytes(100))

    with pytest.raises(radio.InvalidFileError):
        radio.load_image(file)


def test_load_image_given_device(tmp_path):
    file = tmp_path / "radio.img"
    file.write_bytes(ft60.MAGIC + bytes(vx2.MEM_SIZE - 5))

    with pytest.raises(radio.IncompatibleImageError):
        radio.load_image(file, vx2.RADIO)


def test_devices_protocol():
    for dev in radio.DEVICES:
        assert dev.magic
        assert dev.aliases
        assert dev.mem_size > 0
