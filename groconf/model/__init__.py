"""Model package exports."""

from groconf.model.residues import ResidueIter
from groconf.model.state import Atom, Configuration, InternedName, Residue, ResidueTable
from groconf.model.vector import Direction, Vector3

__all__ = [
    "Atom",
    "Configuration",
    "Direction",
    "InternedName",
    "Residue",
    "ResidueIter",
    "ResidueTable",
    "Vector3",
]
