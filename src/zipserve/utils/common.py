import os
import logging
from datetime import datetime
from pathlib import PurePosixPath
from typing import Union

from .exceptions import ErrorCodes




PathLike = Union[str, os.PathLike]
LOGGER_NAME = "zipserve"




def get_logger(verbose=True, name=LOGGER_NAME):
    root_logger = logging.getLogger(name)

    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    if verbose:
        console_handler = logging.StreamHandler()
        root_logger.setLevel(logging.INFO)
        root_logger.addHandler(console_handler)
    else:
        root_logger.addHandler(logging.NullHandler())

    root_logger.propagate = False
    return root_logger



def quiet_logger():
    return get_logger(verbose=False, name=f"{LOGGER_NAME}.quiet")



def bytes_to_str(obj):
    if isinstance(obj, (bytes, bytearray)):
        obj = bytes(obj).decode("utf-8", errors="replace")
    return obj


def get_extension(name: str) -> str:
    """Lowercased suffix of the last path component, without the dot."""
    return PurePosixPath(name).suffix[1:].lower()


def is_safe_logical_path(path: str) -> bool:
    if not path or "\x00" in path:
        return False

    if path.startswith(("/", "\\")):
        return False

    segments = path.replace("\\", "/").split("/")
    return ".." not in segments


def unpack_error(e):
    return str(e.args[0] if e.args else e)


def has_attribute(obj, attr, check_value=True):
    items = (obj, attr)
    has_attr = hasattr(*items)
    if check_value:
        return all((has_attr, getattr(*items, None)))
    return has_attr


def is_pathlike(fp):
    return isinstance(fp, PathLike)


def is_string(string):
    return isinstance(string, str)


def is_numeric(obj: str | int | float):
    from math import isnan
    if obj is not None:
        if is_string(obj):
            if obj.isnumeric():
                obj = int(obj)
        if isinstance(obj, (int, float)):
            return not isnan(obj)
    return False


def fromtimestamp(timestamp: float | datetime):
    if not is_numeric(timestamp):
        return
    return datetime.fromtimestamp(timestamp)


def to_posix(fp):
    if is_pathlike(fp) and hasattr(fp, "as_posix"):
        fp = fp.as_posix()
    elif has_attribute(fp, "archive_file"):
        fp = to_posix(fp.archive_file)
    return fp



def calculate_ratio(
    compressed_size: str | int | float,
    uncompressed_size: str | int | float
    ):
    if not all(map(is_numeric, (compressed_size, uncompressed_size))):
        return

    if uncompressed_size == 0:
        return

    ratio = (1 - compressed_size / uncompressed_size) * 100
    return round(ratio, 2)


def validate_port(port):
    if not isinstance(port, int) or isinstance(port, bool) or not 0 < port < 65536:
        raise ErrorCodes.raise_error(
            ErrorCodes.CONFIG_ERROR,
            f"Invalid port: {port!r}. Port must be an integer between 1 and 65535."
        )
    return port


def terminate(status=0):
    import sys
    sys.exit(int(status))
