import itertools
import json

import numpy as np
import pytest

from combinatorial_ph import (
    build_filtration_complex,
    complex_to_json,
    load_complex,
    print_complex_summary,
    save_complex,
    verify_complex,
)
from combinatorial_ph.assembly import assemble_complex, tie_break_offsets
from combinatorial_ph.boundary import build_edge_level, build_higher_level
from combinatorial_ph.errors import DimensionMismatchError, OrderingViolationError
from combinatorial_ph.pipeline import build_levels
from combinatorial_ph.schema import SENTINEL


SQUARE = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])


def _make_pc(n=8, d=3, seed=0):
    rng = np.random.default_rng(seed)
    X = rng.normal(size=(n, d))
    diffs = np.abs(X[:, None, :] - X[None, :, :]).sum(axis=-1)
    radius = float(np.median(diffs[np.triu_indices(n, k=1)]))
    return X, radius


def test_unit_square_edges():
    level = build_edge_level(SQUARE, 2.0)
    assert level["boundary"].shape == (6, 2)
    assert {tuple(sorted(e)) for e in level["boundary"].tolist()} == set(itertools.combinations(range(4), 2))
    assert sorted(level["filtration"].tolist()) == [1.0, 1.0, 1.0, 1.0, 2.0, 2.0]
    lengths = dict(zip(map(tuple, level["boundary"].tolist()), level["filtration"].tolist()))
    assert lengths[(3, 0)] == 2.0 and lengths[(2, 1)] == 2.0


def test_unit_square_triangles():
    edges = build_edge_level(SQUARE, 2.0)
    triangles = build_higher_level(edges, 2)
    assert triangles["boundary"].shape == (4, 3)
    assert {tuple(v) for v in triangles["vertices"].tolist()} == {(2, 1, 0), (3, 1, 0), (3, 2, 0), (3, 2, 1)}
    for facets, value in zip(triangles["boundary"], triangles["filtration"]):
        assert value == edges["filtration"][facets].max()
    assert triangles["filtration"].tolist() == [2.0, 2.0, 2.0, 2.0]


def test_unit_square_complex():
    result = build_filtration_complex(SQUARE, max_dimension=2, max_ball_radius=2.0)
    n = 4
    assert result["counts"] == [4, 6, 4]
    assert result["boundary"].shape == (10, 6)
    assert result["filtration"].tolist() == [0.0] * 4 + [1.0] * 4 + [2.0] * 6
    # equal values: the two long edges must precede every triangle
    assert result["dimensions"].tolist() == [0] * 4 + [1] * 6 + [2] * 4
    assert np.all(result["boundary"][:6, 2:] == SENTINEL)
    assert np.all(result["boundary"][6:, 3:] == SENTINEL)
    for i, row in enumerate(result["boundary"]):
        facets = row[row != SENTINEL]
        assert np.all(facets < n + i)
    assert all(verify_complex(result).values())


def test_empty_radius():
    result = build_filtration_complex(SQUARE, max_dimension=2, max_ball_radius=0.0)
    assert result["counts"] == [4, 0, 0]
    assert result["boundary"].shape == (0, 6)
    assert result["filtration"].tolist() == [0.0, 0.0, 0.0, 0.0]
    assert result["dimensions"].tolist() == [0, 0, 0, 0]
    assert result["top_boundary"].shape == (0, 3)


def test_single_point():
    result = build_filtration_complex([[0.5, -1.0]], max_dimension=3, max_ball_radius=1.0)
    assert result["counts"] == [1, 0, 0, 0]
    assert result["filtration"].tolist() == [0.0]


def test_dimension_one_skips_tie_break():
    X, radius = _make_pc()
    result = build_filtration_complex(X, max_dimension=1, max_ball_radius=radius)
    assert result["tie_break_epsilon"] == 0.0
    assert result["boundary"].shape[1] == 4
    assert all(verify_complex(result).values())


def test_random_cloud_monotone_and_ordered():
    for seed in range(3):
        X, radius = _make_pc(n=9, seed=seed)
        result = build_filtration_complex(X, max_dimension=3, max_ball_radius=radius)
        checks = verify_complex(result, strict=True)
        assert all(checks.values())

        n = result["num_vertices"]
        f = result["filtration"]
        for i, row in enumerate(result["boundary"]):
            facets = row[row != SENTINEL]
            assert f[n + i] >= f[facets].max()


def test_tie_break_offsets_double_per_dimension():
    offsets = tie_break_offsets([1, 1, 2, 3, 4], 0.5)
    assert offsets.tolist() == [0.0, 0.0, 0.5, 1.0, 2.0]


def test_numpy_integer_dimension_accepted():
    result = build_filtration_complex(SQUARE, np.int64(2), 2.0, config={"n_workers": np.int32(2)})
    assert result["counts"] == [4, 6, 4]
    assert type(result["config"]["max_dimension"]) is int
    with pytest.raises(TypeError):
        build_filtration_complex(SQUARE, True, 2.0)


def test_tie_break_roundtrip_with_equal_values_across_dimensions():
    # coincident points: every simplex of every dimension has filtration 0
    X = np.zeros((5, 2))
    levels = build_levels(X, 4, 0.0)
    assert [lvl["filtration"].shape[0] for lvl in levels] == [10, 10, 5, 1]

    values = np.concatenate([lvl["filtration"] for lvl in levels])
    dims = np.repeat(np.arange(1, 5), [lvl["filtration"].shape[0] for lvl in levels])
    offsets = tie_break_offsets(dims, 0.25)
    assert np.all(offsets[dims == 1] == 0.0)
    assert np.all(np.diff(offsets) >= 0)

    perm = np.argsort(values + offsets, kind="stable")
    assert np.array_equal(dims[perm], np.sort(dims))
    assert np.array_equal(values[perm], np.zeros(values.size))

    result = assemble_complex(X.shape[0], levels, tie_break_epsilon=0.25)
    assert np.array_equal(result["filtration"], np.zeros(5 + values.size))
    assert np.array_equal(result["dimensions"][5:], dims[perm])
    assert all(verify_complex(result, strict=True).values())


def test_true_values_recovered_exactly():
    X, radius = _make_pc(n=8, seed=4)
    levels = build_levels(X, 3, radius)
    result = assemble_complex(X.shape[0], levels)
    expected = np.sort(np.concatenate([lvl["filtration"] for lvl in levels]))
    assert np.array_equal(result["filtration"][X.shape[0]:], expected)
    assert result["tie_break_epsilon"] > 0


def test_explicit_epsilon_is_validated():
    with pytest.raises(OrderingViolationError):
        build_filtration_complex(SQUARE, 2, 2.0, config={"tie_break_epsilon": 1.0})
    with pytest.raises(ValueError):
        build_filtration_complex(SQUARE, 2, 2.0, config={"tie_break_epsilon": -1e-9})
    result = build_filtration_complex(SQUARE, 2, 2.0, config={"tie_break_epsilon": 1e-6})
    assert result["tie_break_epsilon"] == 1e-6


def test_worker_count_does_not_change_complex():
    X, radius = _make_pc(n=10, seed=1)
    a = build_filtration_complex(X, 3, radius, config={"n_workers": 1})
    b = build_filtration_complex(X, 3, radius, config={"n_workers": 5})
    assert a["boundary"].tobytes() == b["boundary"].tobytes()
    assert a["filtration"].tobytes() == b["filtration"].tobytes()


def test_input_contract():
    with pytest.raises(DimensionMismatchError):
        build_filtration_complex(np.zeros(4), 2, 1.0)
    with pytest.raises(OrderingViolationError):
        build_filtration_complex(SQUARE, 0, 1.0)
    with pytest.raises(ValueError) as pipeline_err:
        build_filtration_complex(SQUARE, 2, -1.0)
    with pytest.raises(ValueError) as level_err:
        build_edge_level(SQUARE, -1.0)
    assert pipeline_err.type is ValueError and level_err.type is ValueError
    with pytest.raises(ValueError):
        build_filtration_complex([[0.0, np.nan]], 2, 1.0)
    with pytest.raises(ValueError):
        build_filtration_complex(SQUARE, config={"max_radius": 1.0})


def test_higher_level_needs_enough_facets():
    edges = build_edge_level(SQUARE[:2], 5.0)
    triangles = build_higher_level(edges, 2)
    assert triangles["boundary"].shape == (0, 3)
    with pytest.raises(OrderingViolationError):
        build_higher_level(edges, 3)


def test_json_roundtrip(tmp_path):
    result = build_filtration_complex(SQUARE, 2, 2.0)
    payload = json.loads(complex_to_json(result))
    assert payload["counts"] == [4, 6, 4]
    assert "numpy" in payload["library_versions"]

    path = save_complex(result, tmp_path / "out" / "square.json")
    loaded = load_complex(path)
    assert np.array_equal(loaded["boundary"], result["boundary"])
    assert np.array_equal(loaded["filtration"], result["filtration"])
    assert loaded["config"] == result["config"]

    default = build_filtration_complex(SQUARE)
    loaded = load_complex(save_complex(default, tmp_path / "default.json"))
    assert loaded["config"]["max_ball_radius"] == float("inf")
    assert loaded["config"] == default["config"]

    empty = build_filtration_complex(SQUARE, 2, 0.0)
    loaded = load_complex(save_complex(empty, tmp_path / "empty.json"))
    assert loaded["boundary"].shape == (0, 6)


def test_print_summary(capsys):
    print_complex_summary(build_filtration_complex(SQUARE, 2, 2.0))
    out = capsys.readouterr().out
    assert "edges" in out and "triangles" in out
