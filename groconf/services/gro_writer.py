"""GROMOS87 (.gro) formatting utilities."""

from __future__ import annotations

import logging
from typing import List, TextIO

from groconf.config import (
    GRO_BOX_DECIMALS,
    GRO_BOX_WIDTH,
    GRO_FIELD_WIDTH,
    GRO_INDEX_MODULUS,
    GRO_NAME_WIDTH,
    GRO_POSITION_DECIMALS,
    GRO_VELOCITY_DECIMALS,
)
from groconf.errors import FormatError, GroupingError, StreamError
from groconf.model.state import Atom, Configuration
from groconf.model.vector import Vector3

logger = logging.getLogger(__name__)


def _format_name(name: str) -> str:
    name = (name or "").strip()
    if len(name) > GRO_NAME_WIDTH:
        raise ValueError(f"Name {name!r} is longer than {GRO_NAME_WIDTH} characters")
    return name


def _format_vector(vector: Vector3, decimals: int) -> str:
    return "".join(f"{value:{GRO_FIELD_WIDTH}.{decimals}f}" for value in vector)


def format_atom_line(residue_number: int, atom: Atom, atom_number: int) -> str:
    """Format one fixed-width atom line, without a line terminator.

    Parameters
    ----------
    residue_number
        Residue ordinal, wrapped to five digits.
    atom
        Atom to write.
    atom_number
        Atom ordinal, wrapped to five digits.

    Returns
    -------
    str
        Atom line with positions and, if present, velocities.

    Raises
    ------
    ValueError
        If the residue or atom name does not fit in five columns.
    """

    resname = _format_name(atom.residue.name.text)
    atomname = _format_name(atom.name.text)
    line = (
        f"{residue_number % GRO_INDEX_MODULUS:>5}"
        f"{resname:<5}"
        f"{atomname:>5}"
        f"{atom_number % GRO_INDEX_MODULUS:>5}"
        f"{_format_vector(atom.position, GRO_POSITION_DECIMALS)}"
    )
    if atom.velocity is not None:
        line += _format_vector(atom.velocity, GRO_VELOCITY_DECIMALS)
    return line


def format_gro(conf: Configuration) -> str:
    """Build the GROMOS87 text of a configuration.

    Atoms are regrouped into residues with ``Configuration.iter_residues``;
    residue numbers count the groups, atom numbers count the atoms.

    Parameters
    ----------
    conf
        Configuration to format.

    Returns
    -------
    str
        File text ending in a newline.

    Raises
    ------
    GroupingError
        If the atoms do not form complete residues. ``index`` is the 1-based
        ordinal of the offending residue.
    FormatError
        If the title holds a line break or a name does not fit its columns.
        ``line`` is the 1-based line of the output that could not be written.
    """

    if "\n" in conf.title or "\r" in conf.title:
        raise FormatError("Title must be a single line", line=1, details=conf.title)

    lines: List[str] = [conf.title, str(len(conf.atoms))]
    atom_number = 0
    for residue_number, group in enumerate(conf.iter_residues(), start=1):
        if isinstance(group, GroupingError):
            raise GroupingError(
                f"Bad residue {residue_number} starting at atom index {group.index}",
                index=residue_number,
                details={"atom_index": group.index},
            ) from group
        for atom in group:
            atom_number += 1
            try:
                lines.append(format_atom_line(residue_number, atom, atom_number))
            except ValueError as exc:
                raise FormatError(
                    "Could not format atom entry", line=atom_number + 2, details=str(exc)
                ) from exc

    box = "".join(f" {value:{GRO_BOX_WIDTH}.{GRO_BOX_DECIMALS}f}" for value in conf.size)
    lines.append(box)
    return "\n".join(lines) + "\n"


def write_gro(conf: Configuration, stream: TextIO) -> None:
    """Write a configuration to an open text stream.

    The text is fully formatted before anything is written, so a grouping
    error or a name that does not fit leaves the stream untouched.

    Parameters
    ----------
    conf
        Configuration to write.
    stream
        Writable text stream.

    Raises
    ------
    GroupingError
        If the atoms do not form complete residues.
    FormatError
        If the title or a name can not be written in the fixed layout.
    StreamError
        If writing to the stream fails.
    """

    text = format_gro(conf)
    try:
        stream.write(text)
    except OSError as exc:
        raise StreamError("Could not write configuration", details=str(exc)) from exc
    logger.debug("Wrote %d atoms of %r", len(conf.atoms), conf.title)
