"""groconf command line application."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

from groconf import config
from groconf.errors import GroconfError, GroupingError
from groconf.logging_config import configure_logging
from groconf.model import Configuration
from groconf.services.files import read_gro_file, write_gro_file

logger = logging.getLogger(__name__)


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return number


def _parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=config.APP_NAME,
        description="Inspect and transform GROMOS87 (.gro) configuration files",
    )
    parser.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Write logs to this file instead of stderr",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version", action="version", version=f"{config.APP_NAME} {config.APP_VERSION}"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    info = commands.add_parser("info", help="Summarize a configuration")
    info.add_argument("path", help="Input .gro file")
    info.add_argument("--json", dest="as_json", action="store_true", help="Print a JSON payload")

    multiply = commands.add_parser("multiply", help="Replicate a configuration along the box axes")
    multiply.add_argument("path", help="Input .gro file")
    multiply.add_argument("output", help="Output .gro file")
    for axis in ("nx", "ny", "nz"):
        multiply.add_argument(
            f"--{axis}",
            dest=axis,
            type=_non_negative_int,
            default=1,
            help=f"Number of images along {axis[1]} (default: 1)",
        )

    rename = commands.add_parser("rename-residue", help="Rename a residue for all of its atoms")
    rename.add_argument("path", help="Input .gro file")
    rename.add_argument("output", help="Output .gro file")
    rename.add_argument("old_name", help="Current residue name")
    rename.add_argument("new_name", help="New residue name")

    return parser.parse_args(argv[1:])


def summarize(conf: Configuration) -> Dict[str, object]:
    """Build a JSON-ready summary of a configuration.

    Parameters
    ----------
    conf
        Configuration to summarize.

    Returns
    -------
    dict
        Title, atom and residue counts, residue templates, box size and the
        extent of the atom positions.
    """

    num_residues = 0
    bad_residues = []
    for group in conf.iter_residues():
        if isinstance(group, GroupingError):
            bad_residues.append(group.index)
        else:
            num_residues += 1

    positions = conf.positions()
    extent = None
    if len(positions):
        extent = {
            "min": positions.min(axis=0).tolist(),
            "max": positions.max(axis=0).tolist(),
        }

    return {
        "ok": True,
        "title": conf.title,
        "natoms": len(conf.atoms),
        "nresidues": num_residues,
        "bad_residue_starts": bad_residues,
        "residue_types": [
            {"name": residue.name.text, "atoms": [atom.text for atom in residue.atoms]}
            for residue in conf.residues
        ],
        "box": list(conf.size),
        "has_velocities": conf.velocities() is not None,
        "extent": extent,
    }


def _print_summary(summary: Dict[str, object]) -> None:
    print(f"Title:      {summary['title']}")
    print(f"Atoms:      {summary['natoms']}")
    print(f"Residues:   {summary['nresidues']}")
    if summary["bad_residue_starts"]:
        print(f"Bad groups: {len(summary['bad_residue_starts'])}")
    for residue in summary["residue_types"]:
        print(f"  {residue['name']:<5} {len(residue['atoms'])} atoms: {' '.join(residue['atoms'])}")
    box = summary["box"]
    print(f"Box:        {box[0]:.5f} {box[1]:.5f} {box[2]:.5f}")
    if summary["extent"] is not None:
        low = summary["extent"]["min"]
        high = summary["extent"]["max"]
        print(f"Extent:     ({low[0]:.3f}, {low[1]:.3f}, {low[2]:.3f}) - ({high[0]:.3f}, {high[1]:.3f}, {high[2]:.3f})")


def _run_command(args: argparse.Namespace) -> None:
    conf = read_gro_file(args.path)

    if args.command == "info":
        summary = summarize(conf)
        if args.as_json:
            print(json.dumps(summary))
        else:
            _print_summary(summary)
    elif args.command == "multiply":
        logger.info("Replicating %s by (%d, %d, %d)", args.path, args.nx, args.ny, args.nz)
        write_gro_file(conf.pbc_multiply(args.nx, args.ny, args.nz), args.output)
    elif args.command == "rename-residue":
        residue = conf.residues.get(args.old_name)
        if residue is None:
            raise GroconfError("residue_not_found", f"No residue named {args.old_name!r}")
        try:
            residue.name.text = args.new_name
        except ValueError as exc:
            raise GroconfError("invalid_input", str(exc)) from exc
        write_gro_file(conf, args.output)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the groconf command line tool.

    Parameters
    ----------
    argv
        Full argument vector including the program name. Defaults to
        ``sys.argv``.

    Returns
    -------
    int
        Process exit status.
    """

    args = _parse_args(sys.argv if argv is None else argv)
    configure_logging(args.log_file, logging.DEBUG if args.verbose else config.DEFAULT_LOG_LEVEL)
    logger.debug("Running command %s", args.command)
    try:
        _run_command(args)
    except GroconfError as exc:
        if getattr(args, "as_json", False):
            print(json.dumps(exc.to_result()))
        else:
            logger.error("%s", exc.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
