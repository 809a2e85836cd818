import bz2

import pytest

from sipkit.proof_core import ProofBase, ProofError


def _names(prefix):
    return lambda v: f"{prefix}{v}"


def _build(tmp_path, friendly=False, compress=False, verbose=False):
    proof = ProofBase(
        str(tmp_path / "model.opb"), str(tmp_path / "proof.log"), friendly, compress, verbose
    )
    for p in range(2):
        proof.create_cp_variable(p, 3, _names("p"), _names("t"))
    proof.create_injectivity_constraints(2, 3)
    proof.start_adjacency_constraints_for(0, 0)
    proof.create_adjacency_constraint(0, 1, 0, [1, 2], False)
    return proof


def _read_log(tmp_path, proof):
    proof.close()
    return (tmp_path / "proof.log").read_text().splitlines()


def _constraint_lines(opb_lines):
    return [l for l in opb_lines if not l.startswith("*") and l.endswith(";")]


def test_model_header_counts_match_body(tmp_path):
    proof = _build(tmp_path)
    proof.finalise_model()
    proof.close()
    lines = (tmp_path / "model.opb").read_text().splitlines()
    header = lines[0].split()
    assert header[0] == "*"
    assert header[1] == "#variable="
    assert int(header[2]) == 6
    assert int(header[4]) == len(_constraint_lines(lines))


def test_numeric_variable_names_are_sequential(tmp_path):
    proof = _build(tmp_path)
    proof.finalise_model()
    proof.close()
    text = (tmp_path / "model.opb").read_text()
    for i in range(1, 7):
        assert f"x{i} " in text
    assert "x7" not in text


def test_friendly_names_combine_pattern_and_target(tmp_path):
    proof = _build(tmp_path, friendly=True)
    proof.finalise_model()
    proof.close()
    text = (tmp_path / "model.opb").read_text()
    assert "1 ~xp0_t0 1 xp1_t1 1 xp1_t2 >= 1 ;" in text
    assert "* injectivity on value 2" in text


def test_log_starts_with_version_and_model_reference(tmp_path):
    proof = _build(tmp_path)
    proof.finalise_model()
    log = _read_log(tmp_path, proof)
    opb = (tmp_path / "model.opb").read_text().splitlines()
    n = len(_constraint_lines(opb))
    assert log[0] == "pseudo-Boolean proof version 1.0"
    assert log[1] == f"f {n} 0"


def test_finish_unsat_refers_to_next_line(tmp_path):
    proof = _build(tmp_path)
    proof.finalise_model()
    proof.finish_unsat_proof()
    log = _read_log(tmp_path, proof)
    n = int(log[1].split()[1])
    assert log[-2] == "u >= 1 ;"
    assert log[-1] == f"c {n + 1} 0"


def test_bz2_output(tmp_path):
    proof = _build(tmp_path, compress=True)
    proof.finalise_model()
    proof.close()
    with bz2.open(tmp_path / "model.opb.bz2", "rt") as f:
        assert f.readline().startswith("* #variable= 6")
    with bz2.open(tmp_path / "proof.log.bz2", "rt") as f:
        assert f.readline() == "pseudo-Boolean proof version 1.0\n"


def test_writing_log_before_finalise_raises(tmp_path):
    proof = _build(tmp_path)
    with pytest.raises(ProofError):
        proof.root_propagation_failed()


def test_unwritable_model_raises(tmp_path):
    proof = ProofBase(
        str(tmp_path / "missing" / "m.opb"), str(tmp_path / "p.log"), False, False
    )
    with pytest.raises(ProofError, match="^Proof error: Error writing opb file"):
        proof.finalise_model()


def test_forget_level_only_after_level_was_used(tmp_path):
    proof = _build(tmp_path)
    proof.finalise_model()
    proof.start_level(2)
    proof.forget_level(3)
    proof.forget_level(2)
    log = _read_log(tmp_path, proof)
    assert log[2:] == ["# 2", "w 2"]


def test_incompatible_by_degrees_derives_and_deletes(tmp_path):
    proof = _build(tmp_path, friendly=True)
    proof.finalise_model()
    proof.incompatible_by_degrees(0, (0, "a"), [1], (0, "b"), [1, 2])
    log = _read_log(tmp_path, proof)
    n = int(log[1].split()[1])
    j_line = next(l for l in log if l.startswith("j "))
    d_line = next(l for l in log if l.startswith("d "))
    assert j_line == f"j {n + 1} 1 ~xp0_t0 >= 1 ;"
    assert d_line == f"d {n + 1} 0"
    assert log[2] == "* cannot map a to b due to degrees in graph pairs 0"


def test_post_solution_and_incumbent(tmp_path):
    proof = _build(tmp_path, friendly=True)
    proof.finalise_model()
    proof.post_solution([((0, "a"), (1, "b")), ((1, "c"), (2, "d"))])
    proof.new_incumbent([((0, "a"), (1, "b"), True), ((1, "c"), (0, "e"), False)])
    log = _read_log(tmp_path, proof)
    assert "* found solution a=b c=d" in log
    assert "v xp0_t1 xp1_t2" in log
    assert log[-1] == "o xp0_t1 ~xp1_t0"


def test_incorrect_guess_writes_nogood(tmp_path):
    proof = _build(tmp_path, friendly=True)
    proof.finalise_model()
    proof.incorrect_guess([(0, 1), (1, 2)], True)
    proof.incorrect_guess([(0, 2)], False)
    log = _read_log(tmp_path, proof)
    assert log[2:] == [
        "* [2] incorrect guess",
        "u 1 ~xp0_t1 1 ~xp1_t2 >= 1 ;",
        "* [1] backtracking",
        "u 1 ~xp0_t2 >= 1 ;",
    ]


def test_hall_set_sums_domain_and_injectivity(tmp_path):
    proof = _build(tmp_path)
    proof.finalise_model()
    proof.emit_hall_set_or_violator([(0, "a"), (1, "b")], [(2, "z")])
    log = _read_log(tmp_path, proof)
    assert log[2] == "* hall set or violator { a b } / { z }"
    terms = log[3].split()
    assert terms[0] == "p"
    assert terms[-1] == "0"
    assert terms.count("+") == 2


def test_show_domains_and_verbosity_flag(tmp_path):
    proof = _build(tmp_path, verbose=True)
    assert proof.super_extra_verbose() is True
    proof.finalise_model()
    proof.show_domains("here", [((0, "a"), [(1, "x"), (2, "y")])])
    log = _read_log(tmp_path, proof)
    assert log[2:] == ["* here, domains follow", "*    a size 2 = { x y }"]
    assert _build(tmp_path).super_extra_verbose() is False