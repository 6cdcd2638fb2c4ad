"""Regroup a flat atom list into residues."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence, Union

from groconf.errors import GroupingError

if TYPE_CHECKING:
    from groconf.model.state import Atom


class ResidueIter:
    """Iterate over the residues of a sequence of atoms.

    Each step starts at the current atom and tries to match the declared
    atom slots of that atom's residue, comparing name handles by identity.
    A step yields either the list of atoms of one complete residue or a
    ``GroupingError`` whose ``index`` is the atom index where the attempt
    started. Every step consumes at least one atom:

    - if the first atom is not the residue's first slot, only that atom is
      skipped;
    - if a later slot is missing or wrong after ``j`` matched atoms, those
      ``j`` atoms are skipped and the mismatching atom starts the next step.

    The iterator is finite and can not be restarted.
    """

    def __init__(self, atoms: Sequence[Atom]) -> None:
        self._atoms = atoms
        self._index = 0

    @property
    def index(self) -> int:
        """Index of the next atom to be examined."""
        return self._index

    def __iter__(self) -> ResidueIter:
        return self

    def __next__(self) -> Union[List[Atom], GroupingError]:
        start = self._index
        if start >= len(self._atoms):
            raise StopIteration

        first = self._atoms[start]
        slots = first.residue.atoms
        if not slots or first.name is not slots[0]:
            return self._skip(1)

        group = [first]
        for offset in range(1, len(slots)):
            position = start + offset
            if position >= len(self._atoms) or self._atoms[position].name is not slots[offset]:
                return self._skip(offset)
            group.append(self._atoms[position])

        self._index += len(slots)
        return group

    def _skip(self, count: int) -> GroupingError:
        start = self._index
        self._index += count
        return GroupingError(
            f"Bad residue starting at index {start}",
            index=start,
            details={"consumed": count},
        )
