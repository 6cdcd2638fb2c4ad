"""Parsing of GROMOS87 (.gro) configuration files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, TextIO

from groconf.config import (
    GRO_ATOMNAME_COLUMNS,
    GRO_FIELD_WIDTH,
    GRO_MIN_LINE_LENGTH,
    GRO_POSITION_START,
    GRO_RESNAME_COLUMNS,
    GRO_VELOCITY_START,
)
from groconf.errors import FormatError, StreamError, VectorParseError
from groconf.model.state import Atom, Configuration, ResidueTable
from groconf.model.vector import Vector3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AtomRecord:
    """Fields of one fixed-width atom line.

    Attributes
    ----------
    residue_name
        Residue name with surrounding whitespace removed.
    atom_name
        Atom name with surrounding whitespace removed.
    position
        Atom position.
    velocity
        Atom velocity, or None if the velocity columns are blank.
    """

    residue_name: str
    atom_name: str
    position: Vector3
    velocity: Optional[Vector3]


def parse_atom_line(line: str) -> AtomRecord:
    """Parse a fixed-width atom line.

    Residue and atom numbers are not read: they are regenerated on output.

    Parameters
    ----------
    line
        Atom line without its line terminator.

    Returns
    -------
    AtomRecord
        Parsed fields.

    Raises
    ------
    ValueError
        If the line is too short, a coordinate is not a number, or the
        velocity columns are present but incomplete.
    """

    if len(line) < GRO_MIN_LINE_LENGTH:
        raise ValueError(f"Atom line has {len(line)} characters, expected at least {GRO_MIN_LINE_LENGTH}")

    residue_name = line[slice(*GRO_RESNAME_COLUMNS)].strip()
    atom_name = line[slice(*GRO_ATOMNAME_COLUMNS)].strip()
    position = Vector3.from_fixed(line[GRO_POSITION_START:GRO_VELOCITY_START], GRO_FIELD_WIDTH)

    velocity_text = line[GRO_VELOCITY_START:]
    velocity = None
    if velocity_text.strip():
        velocity = Vector3.from_fixed(velocity_text, GRO_FIELD_WIDTH)

    return AtomRecord(residue_name, atom_name, position, velocity)


class _LineReader:
    """Read lines from a stream while tracking the 1-based line number."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self.line_number = 0

    def next_line(self, expected: str) -> str:
        self.line_number += 1
        try:
            line = self._stream.readline()
        except (OSError, UnicodeDecodeError) as exc:
            raise StreamError(
                f"Could not read line {self.line_number}", line=self.line_number, details=str(exc)
            ) from exc
        if not line:
            raise FormatError(f"Expected {expected}", line=self.line_number)
        return line.rstrip("\r\n")


def read_gro(stream: TextIO) -> Configuration:
    """Read a configuration from an open GROMOS87 text stream.

    Parameters
    ----------
    stream
        Readable text stream positioned at the title line.

    Returns
    -------
    Configuration
        Decoded configuration. Residue and atom names are interned so atoms
        of the same residue share the residue record and its name slots. The
        origin is always the zero vector.

    Raises
    ------
    FormatError
        If a line is missing or can not be parsed.
    StreamError
        If reading from the stream fails.
    """

    reader = _LineReader(stream)
    title = reader.next_line("a configuration title").rstrip()

    count_text = reader.next_line("a number of atoms entry").strip()
    if not (count_text.isascii() and count_text.isdigit()):
        raise FormatError(
            "Could not parse number of atoms entry", line=reader.line_number, details=count_text
        )
    num_atoms = int(count_text)

    residues = ResidueTable()
    atoms = []
    for _ in range(num_atoms):
        line = reader.next_line("an atom entry")
        try:
            record = parse_atom_line(line)
        except ValueError as exc:
            raise FormatError("Could not parse atom entry", line=reader.line_number, details=str(exc)) from exc
        residue, name = residues.lookup_or_insert_atom(record.residue_name, record.atom_name)
        atoms.append(Atom(name=name, residue=residue, position=record.position, velocity=record.velocity))

    box_line = reader.next_line("a box size entry")
    try:
        size = Vector3.from_whitespace(box_line)
    except VectorParseError as exc:
        raise FormatError("Could not parse box size entry", line=reader.line_number, details=str(exc)) from exc

    logger.debug("Read %d atoms in %d residue types from %r", len(atoms), len(residues), title)
    return Configuration(title=title, origin=Vector3(), size=size, residues=residues, atoms=atoms)
