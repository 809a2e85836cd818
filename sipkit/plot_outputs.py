"""Collect per-instance solver result files into plottable data tables.

Each results directory holds one ``<instance>.out`` file per instance, made of
``key = value`` lines. The runtimes, node counts and statuses of every
instance are written, one column per results directory, to
``runtimes.data``, ``nodes.data`` and ``statuses.data``.
"""

from __future__ import annotations

import argparse
import sys
from contextlib import ExitStack

# Output files, keyed by the result key whose values they hold, in key order.
OUTPUT_FILES = {
    "nodes": "nodes.data",
    "runtime": "runtimes.data",
    "status": "statuses.data",
}

_USAGE_TAIL = "[options] instances-file results-directory..."


class ResultFileError(Exception):
    """Raised when a result file cannot be read or makes no sense."""


def _read_lines(path: str) -> list[str]:
    try:
        with open(path) as f:
            text = f.read()
    except OSError as exc:
        raise ResultFileError(f"Error reading {path}") from exc
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def parse_result_file(path: str) -> tuple[dict[str, str], bool]:
    """Read a ``key = value`` result file.

    Returns the keys, where the first occurrence of a key wins, and whether
    the run was aborted.
    """
    keys: dict[str, str] = {}
    aborted = False
    for line in _read_lines(path):
        key, sep, value = line.partition("=")
        if not sep:
            raise ResultFileError(f"Couldn't parse '{line}' in {path}")
        key = key.rstrip(" ")
        value = value.lstrip(" ")
        keys.setdefault(key, value)

        if key == "status":
            if value == "aborted":
                aborted = True
            elif value not in ("true", "false"):
                raise ResultFileError(
                    f"Couldn't parse status value '{value}' in {path}"
                )
    return keys, aborted


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        usage=f"%(prog)s {_USAGE_TAIL}",
        description="Collect solver outputs into data files.",
    )
    parser.add_argument(
        "instances_file",
        nargs="?",
        help="the instances file (first column specifies output name)",
    )
    parser.add_argument(
        "results_directories",
        nargs="*",
        metavar="results-directory",
        help="directories which contain results",
    )
    return parser


def _instance_names(lines: list[str]):
    for line in lines:
        words = line.split()
        if words:
            yield words[0]


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    if not args.instances_file or not args.results_directories:
        print(f"Usage: {parser.prog} {_USAGE_TAIL}")
        return 1

    results_dirs: list[str] = args.results_directories

    try:
        with open(args.instances_file) as f:
            instance_lines = f.read().splitlines()
    except OSError:
        print("Error reading instances file", file=sys.stderr)
        return 1

    try:
        with ExitStack() as stack:
            outputs = {
                key: stack.enter_context(open(name, "w"))
                for key, name in OUTPUT_FILES.items()
            }
            header = " ".join(["instance", *results_dirs])
            for out in outputs.values():
                out.write(header + "\n")

            for name in _instance_names(instance_lines):
                rows = {key: [name] for key in outputs}
                for directory in results_dirs:
                    path = f"{directory}/{name}.out"
                    keys, aborted = parse_result_file(path)
                    for key in outputs:
                        if key not in keys:
                            raise ResultFileError(f"Missing key {key} in {path}")
                        if aborted and key in ("runtime", "nodes"):
                            rows[key].append("NaN")
                        else:
                            rows[key].append(keys[key])
                for key, out in outputs.items():
                    out.write(" ".join(rows[key]) + "\n")
    except ResultFileError as exc:
        print(exc, file=sys.stderr)
        return 1
    except OSError:
        print("Error writing output file", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())