"""Interned residue records and the configuration data model."""

from __future__ import annotations

import weakref
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from groconf.model.residues import ResidueIter
from groconf.model.vector import Vector3


class InternedName:
    """A shared, mutable name handle.

    Handles are compared by identity: two handles with equal text are still
    different slots. Renaming through ``text`` is seen by every holder and
    re-keys every table that interned the handle.
    """

    __slots__ = ("_text", "_owners")

    def __init__(self, text: str) -> None:
        self._text = text
        self._owners = weakref.WeakSet()

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        if value == self._text:
            return
        owners = list(self._owners)
        for owner in owners:
            owner._check_rekey(value)
        for owner in owners:
            owner._rekey(self, value)
        self._text = value

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"InternedName({self._text!r})"


class Residue:
    """A residue name and its declared atom-name slots.

    Attributes
    ----------
    name
        Interned residue name.
    atoms
        Atom-name slots in the order they were first declared.
    """

    def __init__(self, name: str, atoms: Iterable[str] = ()) -> None:
        self.name = InternedName(name)
        self._atoms: List[InternedName] = []
        self._atom_index: Dict[str, InternedName] = {}
        for atom_name in atoms:
            self.lookup_or_insert_atom(atom_name)

    @property
    def atoms(self) -> List[InternedName]:
        return self._atoms

    def lookup_or_insert_atom(self, name: str) -> InternedName:
        """Return the slot named ``name``, declaring it if it is new.

        Parameters
        ----------
        name
            Atom name text.

        Returns
        -------
        InternedName
            The same handle for every call with equal text.
        """

        handle = self._atom_index.get(name)
        if handle is None:
            handle = InternedName(name)
            handle._owners.add(self)
            self._atom_index[name] = handle
            self._atoms.append(handle)
        return handle

    def _check_rekey(self, new_text: str) -> None:
        if new_text in self._atom_index:
            raise ValueError(f"Atom name {new_text!r} already declared in residue {self.name.text!r}")

    def _rekey(self, handle: InternedName, new_text: str) -> None:
        del self._atom_index[handle.text]
        self._atom_index[new_text] = handle

    def __repr__(self) -> str:
        names = ", ".join(atom.text for atom in self._atoms)
        return f"Residue({self.name.text!r}, [{names}])"


class ResidueTable(Sequence):
    """Ordered, de-duplicated set of residues.

    Residues keep their first-seen order and are never removed. Lookups are
    by name text; the returned handles are the shared records.
    """

    def __init__(self, residues: Iterable[Residue] = ()) -> None:
        self._residues: List[Residue] = []
        self._index: Dict[str, Residue] = {}
        for residue in residues:
            self.add(residue)

    def add(self, residue: Residue) -> Residue:
        """Append an existing residue record.

        Raises
        ------
        ValueError
            If a residue with the same name is present.
        """

        if residue.name.text in self._index:
            raise ValueError(f"Residue {residue.name.text!r} already present")
        residue.name._owners.add(self)
        self._index[residue.name.text] = residue
        self._residues.append(residue)
        return residue

    def get(self, name: str) -> Optional[Residue]:
        return self._index.get(name)

    def lookup_or_insert(self, name: str) -> Residue:
        """Return the residue named ``name``, creating an empty one if it is new."""
        residue = self._index.get(name)
        if residue is None:
            residue = self.add(Residue(name))
        return residue

    def lookup_or_insert_atom(self, residue_name: str, atom_name: str) -> Tuple[Residue, InternedName]:
        """Intern a residue name and an atom name inside that residue.

        Parameters
        ----------
        residue_name
            Residue name text.
        atom_name
            Atom name text.

        Returns
        -------
        tuple
            The shared residue record and the shared atom-name slot.
        """

        residue = self.lookup_or_insert(residue_name)
        return residue, residue.lookup_or_insert_atom(atom_name)

    def _check_rekey(self, new_text: str) -> None:
        if new_text in self._index:
            raise ValueError(f"Residue {new_text!r} already present")

    def _rekey(self, handle: InternedName, new_text: str) -> None:
        self._index[new_text] = self._index.pop(handle.text)

    def __getitem__(self, index):
        return self._residues[index]

    def __len__(self) -> int:
        return len(self._residues)

    def __iter__(self) -> Iterator[Residue]:
        return iter(self._residues)

    def __repr__(self) -> str:
        return f"ResidueTable({self._residues!r})"


@dataclass
class Atom:
    """A single atom of a configuration.

    Attributes
    ----------
    name
        Shared atom-name handle, normally one of the residue's slots.
    residue
        Shared residue record.
    position
        Position in configuration coordinates.
    velocity
        Velocity, if the atom has one.
    """

    name: InternedName
    residue: Residue
    position: Vector3
    velocity: Optional[Vector3] = None


@dataclass
class Configuration:
    """A system configuration.

    Attributes
    ----------
    title
        Configuration title.
    origin
        Origin of the configuration.
    size
        Periodic box size.
    residues
        Residue records used by the atoms.
    atoms
        Atoms in file order, not necessarily grouped by residue.
    """

    title: str = ""
    origin: Vector3 = field(default_factory=Vector3)
    size: Vector3 = field(default_factory=Vector3)
    residues: ResidueTable = field(default_factory=ResidueTable)
    atoms: List[Atom] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.residues, ResidueTable):
            self.residues = ResidueTable(self.residues)

    def iter_residues(self) -> ResidueIter:
        """Group the atoms into residues.

        Returns
        -------
        ResidueIter
            Iterator yielding a list of atoms per residue, or a
            ``GroupingError`` for atoms that do not fit their residue.
        """

        return ResidueIter(self.atoms)

    def pbc_multiply(self, nx: int, ny: int, nz: int) -> Configuration:
        """Replicate the configuration along each box axis.

        Parameters
        ----------
        nx, ny, nz
            Number of images along each axis.

        Returns
        -------
        Configuration
            New configuration sharing the residue records, with the box scaled
            and one translated copy of every atom per image. Images are
            ordered with z varying fastest and x slowest.

        Raises
        ------
        ValueError
            If an image count is negative.
        """

        if min(nx, ny, nz) < 0:
            raise ValueError(f"Image counts must be non-negative, got ({nx}, {ny}, {nz})")

        conf = Configuration(
            title=self.title,
            origin=self.origin,
            size=self.size.pbc_multiply(nx, ny, nz),
            residues=self.residues,
        )
        for ix in range(1, nx + 1):
            for iy in range(1, ny + 1):
                for iz in range(1, nz + 1):
                    shift = self.size.pbc_multiply(ix - 1, iy - 1, iz - 1)
                    conf.atoms.extend(
                        Atom(
                            name=atom.name,
                            residue=atom.residue,
                            position=atom.position + shift,
                            velocity=atom.velocity,
                        )
                        for atom in self.atoms
                    )
        return conf

    def positions(self) -> np.ndarray:
        """Return atom positions as an ``(N, 3)`` array."""
        return np.array([tuple(atom.position) for atom in self.atoms], dtype=float).reshape(-1, 3)

    def velocities(self) -> Optional[np.ndarray]:
        """Return atom velocities as an ``(N, 3)`` array.

        None if there are no atoms or any atom lacks a velocity.
        """
        if not self.atoms or any(atom.velocity is None for atom in self.atoms):
            return None
        return np.array([tuple(atom.velocity) for atom in self.atoms], dtype=float).reshape(-1, 3)
