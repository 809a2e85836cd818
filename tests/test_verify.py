import pytest

from sipkit.verify import BuggySolution, verify_homomorphism


class Graph:
    def __init__(self, names, edges=(), labels=None):
        self._names = list(names)
        self._edges = set()
        for a, b in edges:
            self._edges.add((a, b))
            self._edges.add((b, a))
        self._labels = labels

    def size(self):
        return len(self._names)

    def adjacent(self, a, b):
        return (a, b) in self._edges

    def vertex_name(self, v):
        return self._names[v]

    def has_vertex_labels(self):
        return self._labels is not None

    def vertex_label(self, v):
        return self._labels[v]


@pytest.fixture
def path_pattern():
    return Graph(["a", "b", "c"], [(0, 1), (1, 2)])


@pytest.fixture
def target():
    return Graph(["w", "x", "y", "z"], [(0, 1), (1, 2), (2, 3), (0, 2)])


def test_missing_vertex(path_pattern, target):
    with pytest.raises(BuggySolution, match="No mapping for vertex c"):
        verify_homomorphism(path_pattern, target, True, False, False, {0: 0, 1: 1})


def test_out_of_range_target(path_pattern, target):
    with pytest.raises(BuggySolution, match="Mapping c -> 9 out of range"):
        verify_homomorphism(path_pattern, target, True, False, False, {0: 0, 1: 1, 2: 9})


def test_extra_pattern_vertex(path_pattern, target):
    with pytest.raises(BuggySolution, match="Vertex 5 out of range"):
        verify_homomorphism(
            path_pattern, target, True, False, False, {0: 0, 1: 1, 2: 2, 5: 3}
        )


def test_mismatched_labels(target):
    pattern = Graph(["a"], labels=["red"])
    labelled_target = Graph(["w", "x"], labels=["blue", "red"])
    with pytest.raises(BuggySolution, match="Mismatched vertex label for assignment a -> w"):
        verify_homomorphism(pattern, labelled_target, True, False, False, {0: 0})


def test_non_injective(path_pattern, target):
    with pytest.raises(BuggySolution, match="Non-injective mapping: c -> w and a -> w"):
        verify_homomorphism(path_pattern, target, True, False, False, {0: 0, 1: 1, 2: 0})


def test_non_injective_accepted_without_injectivity_but_edges_checked(path_pattern, target):
    with pytest.raises(BuggySolution, match="Non locally-injective mapping"):
        verify_homomorphism(path_pattern, target, False, True, False, {0: 0, 1: 1, 2: 0})


def test_missing_loop(target):
    pattern = Graph(["a"], [(0, 0)])
    with pytest.raises(BuggySolution, match="Vertex a has a loop but mapped vertex w does not"):
        verify_homomorphism(pattern, target, True, False, False, {0: 0})


def test_extra_loop_when_induced():
    pattern = Graph(["a"])
    looped = Graph(["w"], [(0, 0)])
    with pytest.raises(BuggySolution, match="Vertex a has no loop but mapped vertex w does"):
        verify_homomorphism(pattern, looped, True, False, True, {0: 0})


def test_edge_to_non_edge(path_pattern, target):
    with pytest.raises(BuggySolution, match="Edge b -- c mapped to non-edge x -/- z"):
        verify_homomorphism(path_pattern, target, True, False, False, {0: 0, 1: 1, 2: 3})


def test_non_edge_to_edge_when_induced(path_pattern, target):
    with pytest.raises(BuggySolution, match="Non-edge a -/- c mapped to edge w -- y"):
        verify_homomorphism(path_pattern, target, True, False, True, {0: 0, 1: 1, 2: 2})