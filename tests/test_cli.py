import json

from groconf.app import _parse_args, main, summarize
from groconf.model import Atom, Configuration, Residue, Vector3
from groconf.services.files import read_gro_file, write_gro_file


def _write_water(path) -> None:
    sol = Residue("SOL", ["OW", "HW1", "HW2"])
    atoms = [
        Atom(sol.atoms[0], sol, Vector3(0.1, 0.2, 0.3)),
        Atom(sol.atoms[1], sol, Vector3(0.2, 0.2, 0.3)),
        Atom(sol.atoms[2], sol, Vector3(0.1, 0.3, 0.3)),
    ]
    write_gro_file(
        Configuration(title="Water", size=Vector3(1.0, 1.5, 2.0), residues=[sol], atoms=atoms), path
    )


def test_parse_args_multiply_defaults() -> None:
    args = _parse_args(["groconf", "multiply", "in.gro", "out.gro", "--nx", "2"])
    assert args.command == "multiply"
    assert (args.nx, args.ny, args.nz) == (2, 1, 1)
    assert args.log_file is None
    assert not args.verbose


def test_parse_args_info_json() -> None:
    args = _parse_args(["groconf", "--verbose", "info", "conf.gro", "--json"])
    assert args.command == "info"
    assert args.path == "conf.gro"
    assert args.as_json
    assert args.verbose


def test_summarize_reports_bad_groups() -> None:
    residue = Residue("RES", ["A", "B"])
    conf = Configuration(
        residues=[residue],
        atoms=[Atom(residue.atoms[1], residue, Vector3()), Atom(residue.atoms[0], residue, Vector3())],
    )

    summary = summarize(conf)

    assert summary["nresidues"] == 0
    assert summary["bad_residue_starts"] == [0, 1]
    assert summary["residue_types"] == [{"name": "RES", "atoms": ["A", "B"]}]
    assert not summary["has_velocities"]


def test_info_json(tmp_path, capsys) -> None:
    path = tmp_path / "water.gro"
    _write_water(path)

    status = main(["groconf", "--log-file", str(tmp_path / "log.txt"), "info", str(path), "--json"])

    assert status == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["ok"]
    assert payload["title"] == "Water"
    assert payload["natoms"] == 3
    assert payload["nresidues"] == 1
    assert payload["box"] == [1.0, 1.5, 2.0]
    assert payload["extent"]["min"] == [0.1, 0.2, 0.3]
    assert payload["extent"]["max"] == [0.2, 0.3, 0.3]


def test_info_text(tmp_path, capsys) -> None:
    path = tmp_path / "water.gro"
    _write_water(path)

    status = main(["groconf", "--log-file", str(tmp_path / "log.txt"), "info", str(path)])

    assert status == 0
    out = capsys.readouterr().out
    assert "Title:      Water" in out
    assert "SOL   3 atoms: OW HW1 HW2" in out


def test_info_missing_file_prints_error_payload(tmp_path, capsys) -> None:
    status = main(
        ["groconf", "--log-file", str(tmp_path / "log.txt"), "info", str(tmp_path / "nope.gro"), "--json"]
    )

    assert status == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["ok"] is False
    assert payload["error"]["code"] == "stream_error"


def test_multiply_command(tmp_path) -> None:
    path = tmp_path / "water.gro"
    output = tmp_path / "big.gro"
    _write_water(path)

    status = main(
        [
            "groconf",
            "--log-file",
            str(tmp_path / "log.txt"),
            "multiply",
            str(path),
            str(output),
            "--nx",
            "2",
            "--nz",
            "3",
        ]
    )

    assert status == 0
    conf = read_gro_file(output)
    assert len(conf.atoms) == 18
    assert tuple(conf.size) == (2.0, 1.5, 6.0)


def test_rename_residue_command(tmp_path) -> None:
    path = tmp_path / "water.gro"
    output = tmp_path / "renamed.gro"
    _write_water(path)

    status = main(
        ["groconf", "--log-file", str(tmp_path / "log.txt"), "rename-residue", str(path), str(output), "SOL", "HOH"]
    )

    assert status == 0
    conf = read_gro_file(output)
    assert [residue.name.text for residue in conf.residues] == ["HOH"]
    assert all(atom.residue.name.text == "HOH" for atom in conf.atoms)


def test_rename_unknown_residue_fails(tmp_path) -> None:
    path = tmp_path / "water.gro"
    _write_water(path)

    status = main(
        ["groconf", "--log-file", str(tmp_path / "log.txt"), "rename-residue", str(path), str(tmp_path / "out.gro"), "XXX", "YYY"]
    )

    assert status == 1
    assert not (tmp_path / "out.gro").exists()
