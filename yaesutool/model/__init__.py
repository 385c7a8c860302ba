from . import _support, fmt
from ._support import ValidateError
from .channels import Channel, PmsPair

__all__ = [
    "Channel",
    "PmsPair",
    "ValidateError",
    "fmt",
]


def enable_debug() -> None:
    _support.DEBUG = True
