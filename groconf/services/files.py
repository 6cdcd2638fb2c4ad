"""Path-level reading and writing of configuration files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from groconf.errors import StreamError
from groconf.model.state import Configuration
from groconf.services.gro_reader import read_gro
from groconf.services.gro_writer import format_gro

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_gro_file(path: PathLike) -> Configuration:
    """Read a configuration from a GROMOS87 file.

    Parameters
    ----------
    path
        Path to the .gro file.

    Returns
    -------
    Configuration
        Decoded configuration.

    Raises
    ------
    StreamError
        If the file can not be opened.
    FormatError
        If the file content is malformed.
    """

    logger.debug("Reading configuration from %s", path)
    try:
        handle = open(path, "r", encoding="utf-8")
    except OSError as exc:
        raise StreamError(f"Could not open {path} for reading", details=str(exc)) from exc
    with handle:
        return read_gro(handle)


def write_gro_file(conf: Configuration, path: PathLike) -> None:
    """Write a configuration to a GROMOS87 file.

    The file is only created once the configuration has been formatted.

    Parameters
    ----------
    conf
        Configuration to write.
    path
        Destination path.

    Raises
    ------
    GroupingError
        If the atoms do not form complete residues.
    StreamError
        If the file can not be written.
    """

    text = format_gro(conf)
    logger.debug("Writing configuration to %s", path)
    try:
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(text)
    except OSError as exc:
        raise StreamError(f"Could not write {path}", details=str(exc)) from exc
