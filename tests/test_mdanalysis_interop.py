import numpy as np
import pytest

from groconf.model import Atom, Configuration, Residue, Vector3
from groconf.services.files import read_gro_file, write_gro_file

mda = pytest.importorskip("MDAnalysis")


def _conf() -> Configuration:
    sol = Residue("SOL", ["OW", "HW1", "HW2"])
    atoms = []
    for i in range(2):
        shift = Vector3(0.5 * i, 0.0, 0.0)
        atoms.extend(
            [
                Atom(sol.atoms[0], sol, Vector3(0.126, 1.624, 1.679) + shift, Vector3(0.1227, -0.058, 0.0434)),
                Atom(sol.atoms[1], sol, Vector3(0.190, 1.661, 1.747) + shift, Vector3(0.8085, 0.3191, -0.7791)),
                Atom(sol.atoms[2], sol, Vector3(0.177, 1.568, 1.613) + shift, Vector3(-0.9045, -2.6469, 1.318)),
            ]
        )
    return Configuration(title="Two waters", size=Vector3(1.8206, 1.8206, 1.8206), residues=[sol], atoms=atoms)


def test_written_file_is_readable_by_mdanalysis(tmp_path) -> None:
    conf = _conf()
    path = tmp_path / "water.gro"
    write_gro_file(conf, path)

    universe = mda.Universe(str(path))

    assert universe.atoms.n_atoms == 6
    assert list(universe.atoms.names) == ["OW", "HW1", "HW2"] * 2
    assert list(universe.residues.resnames) == ["SOL", "SOL"]
    assert list(universe.residues.resids) == [1, 2]
    # MDAnalysis works in Angstrom
    np.testing.assert_allclose(universe.atoms.positions, conf.positions() * 10.0, atol=1e-2)
    np.testing.assert_allclose(universe.dimensions[:3], conf.size.to_array() * 10.0, atol=1e-3)


def test_mdanalysis_output_is_readable(tmp_path) -> None:
    source = tmp_path / "water.gro"
    write_gro_file(_conf(), source)
    universe = mda.Universe(str(source))
    output = tmp_path / "mda.gro"
    universe.atoms.write(str(output))

    conf = read_gro_file(output)

    assert len(conf.atoms) == 6
    assert [residue.name.text for residue in conf.residues] == ["SOL"]
    assert [atom.text for atom in conf.residues[0].atoms] == ["OW", "HW1", "HW2"]
    groups = list(conf.iter_residues())
    assert [len(group) for group in groups] == [3, 3]
    np.testing.assert_allclose(conf.positions(), _conf().positions(), atol=1e-3)
