# sipkit

Building blocks for subgraph isomorphism and related graph-matching solvers.

## What is inside

- `sipkit.restarts` – restart schedules for backtracking search:
  `NoRestartsSchedule`, `LubyRestartsSchedule`, `GeometricRestartsSchedule`,
  `TimedRestartsSchedule` and `SyncedRestartSchedule` (driven by a shared
  `threading.Event`), all sharing the `RestartsSchedule` interface
  (`did_a_backtrack`, `did_a_restart`, `should_restart`, `might_restart`,
  `clone`).
- `sipkit.timeout` – `Timeout`, a background timer that flags when a search
  should abort (`should_abort`, `aborted`, `trigger_early_abort`, `stop`);
  usable as a context manager. A limit of zero means no time limit.
- `sipkit.thread_utils` – `how_many_threads(n)`, which turns `0` into the
  number of available CPUs (at least one).
- `sipkit.svo_bitset` – `SVOBitset`, a bitset of whole 64-bit words with
  `set`, `test`, `discard`, `clear`, `any`, `find_first`, `count`, `copy`,
  in-place `&=` and `|=`, and `intersect_with_complement`.
- `sipkit.watches` – `Nogood` and `Watches`, a two-watched-literal nogood
  store: nogoods are posted with `post_nogood`, take effect with
  `apply_new_nogoods`, and are propagated with `propagate`.
- `sipkit.verify` – `verify_homomorphism(pattern, target, injective,
  locally_injective, induced, mapping)`, which checks a pattern-to-target
  mapping and raises `BuggySolution` describing the first violation.
- `sipkit.symmetries` – `find_symmetries(argv0, graph)`, which runs the `gap`
  program with the helper script `gap/findDPfactorsOfGraphs.g` found next to
  `argv0`, and returns symmetry-breaking less-than constraints and the
  automorphism group size; `format_lad` and `parse_gap_output` can be used on
  their own. Failures raise `GapFailed`.
- `sipkit.proof_core` – `ProofBase`, which collects a pseudo-Boolean OPB model
  of a subgraph problem, writes it with `finalise_model` (optionally
  bzip2-compressed), and then appends proof steps to a proof log: domain
  eliminations, Hall sets, branching nogoods, levels, solutions and
  incumbents. Write errors are reported as `ProofError`.
- `sipkit.proof_distance` – `DistanceProofs`, a `ProofBase` that also
  justifies adjacency constraints in path and distance-three graphs.

The graph objects passed to `verify_homomorphism` and `find_symmetries` only
need `size()`, `adjacent(a, b)`, `vertex_name(v)` and, as used, `degree(v)`,
`has_vertex_labels()` and `vertex_label(v)`.

## Example

```python
from sipkit.restarts import LubyRestartsSchedule

schedule = LubyRestartsSchedule(100)
for _ in range(100):
    schedule.did_a_backtrack()
assert schedule.should_restart()
schedule.did_a_restart()
```

```python
from sipkit.proof_core import ProofBase

proof = ProofBase("model.opb", "model.pbp", friendly_names=True, bz2=False)
for p in range(2):
    proof.create_cp_variable(p, 3, lambda v: f"p{v}", lambda v: f"t{v}")
proof.create_injectivity_constraints(2, 3)
proof.finalise_model()
proof.root_propagation_failed()
proof.finish_unsat_proof()
proof.close()
```

## Tabulating experiment results

```
sipkit-plot-outputs instances-file results-directory [results-directory ...]
```

reads `<dir>/<instance>.out` (`key = value` lines) for every instance listed
(first word of each line of the instances file) and writes `runtimes.data`,
`nodes.data` and `statuses.data` to the current directory, one column per
results directory. Runtimes and node counts of aborted runs are written as
`NaN`.

## What it does not do

- Proof logging covers subgraph-style models only: there are no steps for
  clique colour bounds, homomorphism clique filtering, or common-subgraph
  objectives and connectedness.
- There is no link to an external solution checker.
- There is no command for tabulating proof-logging and verifier results;
  only `sipkit-plot-outputs` is provided.
- There is no solver here: these are the parts a solver is built from.

## Running the tests

```
pip install -e .[test]
pytest
```