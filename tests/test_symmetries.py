import subprocess
from unittest import mock

import pytest

from sipkit.symmetries import GapFailed, find_symmetries, format_lad, parse_gap_output


class Graph:
    def __init__(self, names, edges=()):
        self._names = list(names)
        self._adj = {v: set() for v in range(len(self._names))}
        for a, b in edges:
            self._adj[a].add(b)
            self._adj[b].add(a)

    def size(self):
        return len(self._names)

    def degree(self, v):
        return len(self._adj[v])

    def adjacent(self, a, b):
        return b in self._adj[a]

    def vertex_name(self, v):
        return self._names[v]


PATH = Graph(["a", "b", "c"], [(0, 1), (1, 2)])


def test_format_lad_path():
    assert format_lad(PATH) == "3\n1 1\n2 0 2\n1 1\n"


def test_format_lad_lines_match_degrees():
    lines = format_lad(PATH).splitlines()
    assert int(lines[0]) == PATH.size()
    for v, line in enumerate(lines[1:]):
        fields = line.split()
        assert int(fields[0]) == len(fields) - 1 == PATH.degree(v)


def test_parse_output():
    output = "--pattern-automorphism-group-size 2\n--pattern-less-than '0<2'\n"
    constraints, size = parse_gap_output(output, PATH)
    assert constraints == [("a", "c")]
    assert size == "2"


def test_parse_not_quoted():
    with pytest.raises(GapFailed, match="can't parse pattern-less-than '0<2': not quoted"):
        parse_gap_output("--pattern-less-than 0<2", PATH)


def test_parse_no_less_than():
    with pytest.raises(GapFailed, match="can't parse pattern-less-than '0>2': no less than"):
        parse_gap_output("--pattern-less-than '0>2'", PATH)


def test_parse_unknown_option():
    with pytest.raises(GapFailed, match="unknown option '--frobnicate'"):
        parse_gap_output("--frobnicate 1", PATH)


def test_parse_missing_size():
    with pytest.raises(GapFailed, match="parsing output failed"):
        parse_gap_output("--pattern-less-than '0<1'", PATH)


def test_message_prefix():
    with pytest.raises(GapFailed, match="^Running 'gap for symmetry detection failed: "):
        parse_gap_output("", PATH)


def test_missing_helper(tmp_path):
    with pytest.raises(GapFailed, match="couldn't find gap/findDPfactorsOfGraphs.g"):
        find_symmetries(str(tmp_path / "solver"), PATH)


@pytest.fixture
def argv0(tmp_path):
    helper_dir = tmp_path / "gap"
    helper_dir.mkdir()
    (helper_dir / "findDPfactorsOfGraphs.g").write_text("")
    return str(tmp_path / "solver")


def test_find_symmetries_runs_gap(argv0, tmp_path):
    completed = subprocess.CompletedProcess(
        args=[], returncode=0,
        stdout="--pattern-automorphism-group-size 2 --pattern-less-than '2<0'",
        stderr="",
    )
    with mock.patch("sipkit.symmetries.subprocess.run", return_value=completed) as run:
        constraints, size = find_symmetries(argv0, PATH)
    assert constraints == [("c", "a")]
    assert size == "2"
    args, kwargs = run.call_args
    assert args[0] == ["gap", "-q", "-A", "-b", str(tmp_path / "gap" / "findDPfactorsOfGraphs.g")]
    assert kwargs["input"] == format_lad(PATH)


def test_find_symmetries_exec_failure(argv0):
    with mock.patch("sipkit.symmetries.subprocess.run", side_effect=FileNotFoundError("gap")):
        with pytest.raises(GapFailed, match="exec gap failed"):
            find_symmetries(argv0, PATH)