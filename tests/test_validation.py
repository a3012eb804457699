"""Tests for input validation module."""

import numpy as np
import pytest

from kklayout import Link, Node
from kklayout.validation import (
    InvalidLinkError,
    InvalidSizeError,
    InvalidValueError,
    ValidationError,
    normalize_edges,
    validate_bounds,
    validate_disconnected_distance,
    validate_edge_length,
    validate_epsilon,
    validate_fixed,
    validate_initial,
    validate_iterations,
    validate_kkconst,
    validate_link_indices,
    validate_seed_layout,
    validate_weights,
)


class TestLinkValidation:
    """Tests for link index validation."""

    def test_valid_links(self):
        """Valid links return empty issues list."""
        links = [Link(0, 1), Link(1, 2)]
        issues = validate_link_indices(links, node_count=3)
        assert issues == []

    def test_valid_links_with_node_objects(self):
        """Links with Node objects validate correctly."""
        n0 = Node(index=0)
        n1 = Node(index=1)
        links = [Link(n0, n1)]
        issues = validate_link_indices(links, node_count=2)
        assert issues == []

    def test_valid_tuples(self):
        """(u, v) pairs are accepted."""
        assert validate_link_indices([(0, 1), (2, 2)], node_count=3) == []

    def test_out_of_bounds_source_strict(self):
        """Out of bounds source raises in strict mode."""
        links = [Link(10, 1)]
        with pytest.raises(InvalidLinkError, match="source index 10 out of bounds"):
            validate_link_indices(links, node_count=3, strict=True)

    def test_out_of_bounds_target_tuple(self):
        """Out of bounds target raises for tuples too."""
        with pytest.raises(InvalidLinkError, match="target index 99 out of bounds"):
            validate_link_indices([(0, 99)], node_count=3)

    def test_negative_source_raises(self):
        """Negative source index raises."""
        with pytest.raises(InvalidLinkError, match="source index -1 out of bounds"):
            validate_link_indices([{"source": -1, "target": 1}], node_count=3)

    def test_non_strict_returns_issues(self):
        """Non-strict mode returns issues list without raising."""
        links = [Link(0, 1), Link(10, 20)]
        issues = validate_link_indices(links, node_count=3, strict=False)
        # Link 1 has both source (10) and target (20) out of bounds
        assert len(issues) == 2

    def test_empty_links_valid(self):
        """Empty links list is valid."""
        assert validate_link_indices([], node_count=0) == []

    def test_non_integral_endpoint(self):
        """Fractional endpoints are rejected rather than truncated."""
        with pytest.raises(InvalidLinkError, match="source 0.7 is not an integer vertex index"):
            validate_link_indices([(0.7, 1)], node_count=3)

    def test_integral_float_endpoint(self):
        assert validate_link_indices([(0.0, 2.0)], node_count=3) == []

    def test_unindexed_node_endpoint(self):
        issues = validate_link_indices([Link(Node(), 1)], node_count=2, strict=False)
        assert len(issues) == 1
        assert "not an integer vertex index" in issues[0][1]

    def test_missing_endpoint_in_pair(self):
        with pytest.raises(InvalidLinkError, match="target is None"):
            validate_link_indices([(0,)], node_count=2)


class TestNormalizeEdges:
    """Conversion of validated links to index pairs."""

    def test_mixed_inputs(self):
        n1 = Node(index=1)
        links = [(0, 1), {"source": 2, "target": 0}, Link(n1, 2), np.array([1, 1]), (2.0, 0)]
        assert normalize_edges(links, 3) == [(0, 1), (2, 0), (1, 2), (1, 1), (2, 0)]
        assert all(isinstance(u, int) and isinstance(v, int) for u, v in normalize_edges(links, 3))

    def test_validates_before_converting(self):
        with pytest.raises(InvalidLinkError):
            normalize_edges([(0, 1), (1, 2.5)], 3)


class TestWeightValidation:
    """Tests for edge weight validation."""

    def test_absent(self):
        assert validate_weights(None, 5) is None

    def test_valid(self):
        weights = validate_weights([1, 2.5, 3], 3)
        assert weights.dtype == float
        assert weights.tolist() == [1.0, 2.5, 3.0]

    def test_empty_for_edgeless_graph(self):
        assert validate_weights([], 0).shape == (0,)

    def test_length_mismatch(self):
        with pytest.raises(InvalidSizeError, match="got 2"):
            validate_weights([1.0, 2.0], 3)

    @pytest.mark.parametrize("bad", [0.0, -1.0])
    def test_non_positive(self, bad):
        with pytest.raises(InvalidValueError, match="for edge 1"):
            validate_weights([1.0, bad], 2)

    def test_not_finite(self):
        with pytest.raises(InvalidValueError, match="finite"):
            validate_weights([1.0, float("nan")], 2)


class TestBoundsValidation:
    """Tests for bounding vector validation."""

    def test_none(self):
        assert validate_bounds(3).is_unbounded

    def test_partial(self):
        bounds = validate_bounds(2, min_x=[0, 1], max_y=[5, 5])
        assert bounds.min_x.tolist() == [0.0, 1.0]
        assert bounds.max_x is None
        assert bounds.max_y.tolist() == [5.0, 5.0]

    def test_equal_limits_allowed(self):
        bounds = validate_bounds(1, min_x=[2.0], max_x=[2.0])
        assert bounds.clamp(0, 7.0, 0.0) == (2.0, 0.0)

    def test_length_mismatch(self):
        with pytest.raises(InvalidSizeError, match="min_y"):
            validate_bounds(3, min_y=[0.0, 0.0])

    def test_min_exceeds_max(self):
        with pytest.raises(InvalidValueError, match="vertex 2"):
            validate_bounds(3, min_y=[0, 0, 3], max_y=[1, 1, 1])

    def test_nan(self):
        with pytest.raises(InvalidValueError, match="NaN"):
            validate_bounds(1, max_x=[float("nan")])

    def test_open_infinite_sides_allowed(self):
        inf = float("inf")
        bounds = validate_bounds(2, min_x=[-inf, 0.0], max_x=[inf, 1.0])
        assert bounds.clamp(0, 1e9, 0.0) == (1e9, 0.0)

    @pytest.mark.parametrize(
        "side, value",
        [
            ("min_x", float("inf")),
            ("min_y", float("inf")),
            ("max_x", -float("inf")),
            ("max_y", -float("inf")),
        ],
    )
    def test_infinity_closing_a_side(self, side, value):
        with pytest.raises(InvalidValueError, match=f"{side} must not be"):
            validate_bounds(2, **{side: [0.0, value]})

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            validate_bounds(1, max_x=[0.0, 1.0])


class TestSeedLayoutValidation:
    """Tests for seed layout validation."""

    def test_valid_copy(self):
        seed = np.array([[0.0, 1.0], [2.0, 3.0]])
        result = validate_seed_layout(seed, 2)
        np.testing.assert_array_equal(result, seed)
        assert result is not seed

    def test_list_input(self):
        assert validate_seed_layout([[1, 2]], 1).shape == (1, 2)

    def test_missing(self):
        with pytest.raises(InvalidSizeError):
            validate_seed_layout(None, 2)

    def test_wrong_rows(self):
        with pytest.raises(InvalidSizeError, match=r"\(3, 2\)"):
            validate_seed_layout(np.zeros((2, 2)), 3)

    def test_wrong_columns(self):
        with pytest.raises(InvalidSizeError):
            validate_seed_layout(np.zeros((3, 3)), 3)

    def test_not_finite(self):
        with pytest.raises(InvalidValueError):
            validate_seed_layout([[0.0, float("inf")]], 1)

    def test_empty(self):
        assert validate_seed_layout(np.zeros((0, 2)), 0).shape == (0, 2)


class TestParameterValidation:
    """Tests for scalar parameter validation."""

    def test_iterations(self):
        assert validate_iterations(0) == 0
        assert validate_iterations(10) == 10
        with pytest.raises(InvalidValueError, match=">= 0"):
            validate_iterations(-1)

    def test_epsilon(self):
        assert validate_epsilon(0) == 0.0
        with pytest.raises(InvalidValueError):
            validate_epsilon(-1e-9)
        with pytest.raises(InvalidValueError):
            validate_epsilon(float("inf"))

    def test_kkconst(self):
        assert validate_kkconst(10) == 10.0
        with pytest.raises(InvalidValueError):
            validate_kkconst(0)

    def test_edge_length(self):
        assert validate_edge_length(None) is None
        assert validate_edge_length(5) == 5.0
        with pytest.raises(InvalidValueError):
            validate_edge_length(0)

    def test_disconnected_distance(self):
        assert validate_disconnected_distance(None) is None
        with pytest.raises(InvalidValueError):
            validate_disconnected_distance(-3)

    def test_initial(self):
        assert validate_initial("circle") == "circle"
        with pytest.raises(InvalidValueError, match="circle, random"):
            validate_initial("grid")

    def test_fixed(self):
        assert validate_fixed(None, 3) is None
        assert validate_fixed([1, 0], 2).tolist() == [True, False]
        with pytest.raises(InvalidSizeError):
            validate_fixed([True], 2)

    def test_hierarchy(self):
        assert issubclass(InvalidSizeError, ValidationError)
        assert issubclass(InvalidValueError, ValidationError)
        assert issubclass(InvalidLinkError, ValidationError)
        assert issubclass(ValidationError, ValueError)
