# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.

""" """

import configparser
import logging
import os
import typing as ty
from dataclasses import dataclass, field
from pathlib import Path

_LOG = logging.getLogger(__name__)

_MAX_LAST_FILES: ty.Final = 10


@dataclass
class Config:
    last_files: list[str] = field(default_factory=list)
    last_port: str = "/dev/ttyUSB0"
    last_radio: str = ""
    # serial read timeout in seconds
    read_timeout: float = 1.0
    verbose_config: bool = False

    def push_last_file(self, file: str) -> None:
        if not file:
            return

        if file in self.last_files:
            self.last_files.remove(file)

        self.last_files.insert(0, file)
        if len(self.last_files) > _MAX_LAST_FILES:
            self.last_files.pop()


CONFIG = Config()


def load(file: Path) -> Config:
    _LOG.info("loading %s", file)
    if not file.exists():
        return CONFIG

    cfg = configparser.ConfigParser()
    with file.open() as fin:
        cfg.read_file(fin)

    CONFIG.last_files = list(
        filter(None, cfg.get("files", "last_files", fallback="").split(";"))
    )
    CONFIG.last_port = (
        cfg.get("main", "last_port", fallback="") or CONFIG.last_port
    )
    CONFIG.last_radio = cfg.get("main", "last_radio", fallback="")

    try:
        CONFIG.read_timeout = max(
            cfg.getfloat("main", "read_timeout", fallback=CONFIG.read_timeout),
            0.1,
        )
    except ValueError:
        _LOG.warning("invalid read_timeout in %s", file)

    try:
        CONFIG.verbose_config = cfg.getboolean(
            "main", "verbose_config", fallback=False
        )
    except ValueError:
        _LOG.warning("invalid verbose_config in %s", file)

    _LOG.debug("config %r", CONFIG)
    return CONFIG


def save(file: Path) -> None:
    _LOG.info("saving %s", file)
    _LOG.debug("config %r", CONFIG)

    cfg = configparser.ConfigParser()
    cfg["main"] = {
        "last_port": CONFIG.last_port,
        "last_radio": CONFIG.last_radio,
        "read_timeout": f"{CONFIG.read_timeout:.1f}",
        "verbose_config": "yes" if CONFIG.verbose_config else "no",
    }
    cfg["files"] = {
        "last_files": ";".join(CONFIG.last_files),
    }

    file.parent.mkdir(parents=True, exist_ok=True)
    with file.open(mode="w") as fout:
        cfg.write(fout)


def default_config_path() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME", "~/.config/")
    return Path(config_home, "yaesutool", "app.config").expanduser()
