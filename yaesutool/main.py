#! /usr/bin/env python3
# vim:fenc=utf-8
#
# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.

""" """

from __future__ import annotations

import argparse
import logging
import sys
import typing as ty
from contextlib import contextmanager
from pathlib import Path

from . import clone_io, config, expimp, model, radio, radio_memory

if ty.TYPE_CHECKING:
    from .radio_memory import RadioMemory

_LOG = logging.getLogger()

EXIT_OK: ty.Final = 0
EXIT_ERROR: ty.Final = 1
EXIT_ROWS_REJECTED: ty.Final = 2


def _port(args: argparse.Namespace) -> str:
    return (args.port or config.CONFIG.last_port).strip()


def _device(args: argparse.Namespace) -> radio.RadioDevice:
    name = args.radio or config.CONFIG.last_radio
    if not name:
        raise radio.UnknownRadioError("<not selected>")

    return radio.find_device(name)


def _remember(
    port: str | None, dev: radio.RadioDevice, file: Path | None = None
) -> None:
    cfg = config.CONFIG
    if port:
        cfg.last_port = port

    cfg.last_radio = dev.name
    if file:
        cfg.push_last_file(str(file))

    config.save(config.default_config_path())


@contextmanager
def _output(file: Path | None) -> ty.Iterator[ty.TextIO]:
    if not file:
        yield sys.stdout
        return

    with file.open("wt", encoding="ascii") as out:
        yield out


def _link(
    args: argparse.Namespace, port: str, dev: radio.RadioDevice
) -> ty.ContextManager[clone_io.Serial]:
    return clone_io.open_link(
        port,
        dev.baudrate,
        timeout=config.CONFIG.read_timeout,
        log_data=args.log_data,
    )


def _download(
    args: argparse.Namespace, port: str, dev: radio.RadioDevice
) -> RadioMemory:
    with _link(args, port, dev) as link:
        mem = dev.download(
            link, clone_io.ConsoleOperator(), clone_io.ConsoleProgress()
        )

    if not dev.is_compatible(mem):
        raise radio.IncompatibleImageError(dev.name, mem.magic)

    return mem


def _import(
    dev: radio.RadioDevice, mem: RadioMemory, file: Path
) -> list[expimp.RowErrorInfo]:
    with file.open(encoding="utf-8") as inp:
        errors = expimp.import_config(dev, mem, inp)

    for lineno, line, msg in errors:
        print(f"{file}:{lineno}: {msg}: {line}", file=sys.stderr)

    if errors:
        print(f"{len(errors)} row(s) rejected", file=sys.stderr)

    return errors


def main_download(args: argparse.Namespace) -> int:
    """cmd: download
    args: [-p <port>] -r <radio> [<image file>]
    """
    dev = _device(args)
    port = _port(args)
    mem = _download(args, port, dev)

    dst = args.image or Path(f"{dev.aliases[0]}.img")
    radio_memory.create_backup(dst)
    dev.save_image(dst, mem)
    print(f"Radio: {dev.name}")
    print(f"Saved {dst}")

    _remember(port, dev, dst)
    return EXIT_OK


def main_upload(args: argparse.Namespace) -> int:
    """cmd: upload
    args: [-p <port>] <image file>
    """
    dev, mem = radio.load_image(args.image)
    port = _port(args)

    with _link(args, port, dev) as link:
        dev.upload(
            link, mem, clone_io.ConsoleOperator(), clone_io.ConsoleProgress()
        )

    print(f"Uploaded {args.image} to {dev.name}")
    _remember(port, dev, args.image)
    return EXIT_OK


def main_show(args: argparse.Namespace) -> int:
    """cmd: show
    args: <image file> [-V] [-o <output file>]
    """
    dev, mem = radio.load_image(args.image)
    verbose = args.verbose_config or config.CONFIG.verbose_config
    with _output(args.output) as out:
        dev.print_config(out, mem, verbose=verbose)

    return EXIT_OK


def main_apply(args: argparse.Namespace) -> int:
    """cmd: apply
    args: <image file> <config file> [-o <output image>]
    """
    dev, mem = radio.load_image(args.image)
    errors = _import(dev, mem, args.config)

    dst = args.output or args.image
    radio_memory.create_backup(dst)
    dev.save_image(dst, mem)
    print(f"Saved {dst}")

    return EXIT_ROWS_REJECTED if errors else EXIT_OK


def main_configure(args: argparse.Namespace) -> int:
    """cmd: configure
    args: [-p <port>] -r <radio> <config file>

    Download configuration from radio, apply config file and upload it back.
    """
    dev = _device(args)
    port = _port(args)
    mem = _download(args, port, dev)

    backup = Path(f"backup-{dev.aliases[0]}.img")
    dev.save_image(backup, mem)
    print(f"Saved {backup}")

    errors = _import(dev, mem, args.config)

    with _link(args, port, dev) as link:
        dev.upload(
            link,
            mem,
            clone_io.ConsoleOperator(),
            clone_io.ConsoleProgress(),
            cont=True,
        )

    print(f"Uploaded {args.config} to {dev.name}")
    _remember(port, dev)
    return EXIT_ROWS_REJECTED if errors else EXIT_OK


def main_info(args: argparse.Namespace) -> int:
    """cmd: info
    args: <image file>
    """
    dev, mem = radio.load_image(args.image)
    print(f"Radio: {dev.name}")
    print(f"Image size: {mem.size}")
    status = "OK" if mem.validate_checksum() else "BAD"
    print(f"Checksum: {mem.checksum:02x} ({status})")
    dev.print_version(sys.stdout, mem)
    return EXIT_OK


def main_radios(_args: argparse.Namespace) -> int:
    """cmd: radios"""
    for dev in radio.DEVICES:
        print(f"{dev.name:<16s} {', '.join(dev.aliases)}")

    return EXIT_OK


def _parse_args_radio_commands(cmds: argparse._SubParsersAction) -> None:  # type: ignore
    cmd = cmds.add_parser("download", help="Read memory image from radio")
    cmd.add_argument("-p", "--port", help="USB/TTY/COM port")
    cmd.add_argument("-r", "--radio", help="Radio name, i.e. ft60, vx2")
    cmd.add_argument(
        "image", type=Path, nargs="?", help="Output image file"
    )
    cmd.set_defaults(func=main_download)

    cmd = cmds.add_parser("upload", help="Write memory image into radio")
    cmd.add_argument("-p", "--port", help="USB/TTY/COM port")
    cmd.add_argument("image", type=Path, help="Input image file")
    cmd.set_defaults(func=main_upload)

    cmd = cmds.add_parser(
        "configure", help="Apply configuration file directly to radio"
    )
    cmd.add_argument("-p", "--port", help="USB/TTY/COM port")
    cmd.add_argument("-r", "--radio", help="Radio name, i.e. ft60, vx2")
    cmd.add_argument("config", type=Path, help="Input configuration file")
    cmd.set_defaults(func=main_configure)


def _parse_args_image_commands(cmds: argparse._SubParsersAction) -> None:  # type: ignore
    cmd = cmds.add_parser("show", help="Print configuration from image")
    cmd.add_argument("image", type=Path, help="Input image file")
    cmd.add_argument(
        "-V",
        "--verbose-config",
        action="store_true",
        help="Add comments to tables",
    )
    cmd.add_argument("-o", "--output", type=Path, help="Output text file")
    cmd.set_defaults(func=main_show)

    cmd = cmds.add_parser("apply", help="Apply configuration file to image")
    cmd.add_argument("image", type=Path, help="Input image file")
    cmd.add_argument("config", type=Path, help="Input configuration file")
    cmd.add_argument(
        "-o", "--output", type=Path, help="Output image file (default: input)"
    )
    cmd.set_defaults(func=main_apply)

    cmd = cmds.add_parser("info", help="Print information about image")
    cmd.add_argument("image", type=Path, help="Input image file")
    cmd.set_defaults(func=main_info)

    cmd = cmds.add_parser("radios", help="List supported radios")
    cmd.set_defaults(func=main_radios)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="yaesutool")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        help="increase log level",
        default=0,
    )
    parser.add_argument(
        "--log-data",
        action="store_true",
        help="log serial traffic into data.log",
    )

    cmds = parser.add_subparsers(dest="command", required=True)

    _parse_args_radio_commands(cmds)
    _parse_args_image_commands(cmds)

    return parser.parse_args(argv)


def run(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    match args.verbose:
        case 0:
            logging.getLogger().setLevel(logging.WARNING)
        case 1:
            logging.getLogger().setLevel(logging.INFO)
        case _:
            logging.getLogger().setLevel(logging.DEBUG)
            model.enable_debug()

    config.load(config.default_config_path())

    try:
        res: int = args.func(args)

    except KeyboardInterrupt:
        print("\nAborted", file=sys.stderr)
        return EXIT_ERROR

    except (
        clone_io.TransportError,
        clone_io.AbortError,
        radio.IncompatibleImageError,
        radio.InvalidFileError,
        radio.UnknownRadioError,
        expimp.ConfigError,
        UnicodeDecodeError,
        OSError,
    ) as err:
        _LOG.error("%s", err)
        return EXIT_ERROR

    return res


def main() -> None:
    logging.basicConfig()
    sys.exit(run())
