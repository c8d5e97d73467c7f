"""
Tests for the individual Sankey pipeline stages.
"""

import numpy as np
import pytest

from sankey_layout import LayoutResult, LinkLayout, NodeLayout, SankeyConfig
from sankey_layout.engine import (
    DepthSolver,
    LayoutWarning,
    compute_layout,
    compute_link_depths,
    compute_node_breadths,
    compute_node_links,
    compute_node_values,
    link_graph,
    refresh_ports,
)
from sankey_layout.types import SankeyLink, SankeyNode

# =============================================================================
# Test Fixtures
# =============================================================================


def create_chain(n=4, value=10):
    """Create a linear chain 0 -> 1 -> ... -> n-1."""
    nodes = [{} for _ in range(n)]
    links = [{"source": i, "target": i + 1, "value": value} for i in range(n - 1)]
    return nodes, links


def create_fan_in():
    """Three sources feeding one sink."""
    #  0 \
    #  1 -- 3
    #  2 /
    nodes = [{} for _ in range(4)]
    links = [
        {"source": 0, "target": 3, "value": 10},
        {"source": 1, "target": 3, "value": 10},
        {"source": 2, "target": 3, "value": 10},
    ]
    return nodes, links


def prepare(nodes, links, config):
    """Run linking, values and breadths, returning the arena."""
    result = link_graph(nodes, links, config)
    compute_node_values(result)
    compute_node_breadths(result, config)
    return result


def create_fork_result(values=(2.0, 6.0)):
    """Hand-built arena: node 0 feeding nodes 1 and 2 with placed ports."""
    #      /-- 1   (y = 0)
    #  0 --
    #      \-- 2   (y = 20)
    nodes = [
        NodeLayout(index=0, value=8.0, stage=0, y=10.0, dy=16.0, source_links=[0, 1]),
        NodeLayout(index=1, value=2.0, stage=1, y=0.0, dy=4.0, target_links=[0]),
        NodeLayout(index=2, value=6.0, stage=1, y=20.0, dy=12.0, target_links=[1]),
    ]
    links = [
        LinkLayout(index=0, source=0, target=1, value=values[0], dy=4.0, ty=1.0),
        LinkLayout(index=1, source=0, target=2, value=values[1], dy=12.0, ty=3.0),
    ]
    config = SankeyConfig(size=(100, 100), node_width=10)
    return LayoutResult(nodes=nodes, links=links, config=config, stage_count=2)


def create_merge_result(values=(2.0, 6.0)):
    """Hand-built arena: nodes 0 and 1 feeding node 2 with placed ports."""
    #  0 --\    (y = 0)
    #       -- 2
    #  1 --/    (y = 20)
    nodes = [
        NodeLayout(index=0, value=2.0, stage=0, y=0.0, dy=4.0, source_links=[0]),
        NodeLayout(index=1, value=6.0, stage=0, y=20.0, dy=12.0, source_links=[1]),
        NodeLayout(index=2, value=8.0, stage=1, y=10.0, dy=16.0, target_links=[0, 1]),
    ]
    links = [
        LinkLayout(index=0, source=0, target=2, value=values[0], dy=4.0, sy=1.0),
        LinkLayout(index=1, source=1, target=2, value=values[1], dy=12.0, sy=3.0),
    ]
    config = SankeyConfig(size=(100, 100), node_width=10)
    return LayoutResult(nodes=nodes, links=links, config=config, stage_count=2)


# =============================================================================
# GraphLinker
# =============================================================================


class TestGraphLinker:
    """Tests for endpoint resolution and adjacency building."""

    def test_integer_endpoints(self):
        """Integer endpoints become node handles."""
        nodes, links = create_chain(3)
        result = link_graph(nodes, links, SankeyConfig())

        assert [(l.source, l.target) for l in result.links] == [(0, 1), (1, 2)]

    def test_handle_endpoints(self):
        """Node objects are accepted as endpoints and resolved by identity."""
        nodes = [SankeyNode(name="a"), SankeyNode(name="b"), SankeyNode(name="c")]
        links = [
            SankeyLink(nodes[0], nodes[2], 4),
            SankeyLink(1, nodes[2], 6),
        ]
        result = link_graph(nodes, links, SankeyConfig())

        assert (result.links[0].source, result.links[0].target) == (0, 2)
        assert (result.links[1].source, result.links[1].target) == (1, 2)

    def test_adjacency_preserves_link_order(self):
        """Per-node lists follow the input link order."""
        nodes = [{} for _ in range(3)]
        links = [
            {"source": 0, "target": 2, "value": 1},
            {"source": 1, "target": 2, "value": 1},
            {"source": 0, "target": 1, "value": 1},
        ]
        result = link_graph(nodes, links, SankeyConfig())

        assert result.nodes[0].source_links == [0, 2]
        assert result.nodes[2].target_links == [0, 1]
        assert result.nodes[1].source_links == [1]
        assert result.nodes[1].target_links == [2]

    def test_numpy_integer_endpoints(self):
        """Numpy integers are indices, as plain ints are."""
        nodes, _ = create_chain(3)
        links = [
            {"source": np.int64(0), "target": np.int64(1), "value": 1},
            {"source": np.int32(1), "target": 2, "value": 1},
        ]
        result = link_graph(nodes, links, SankeyConfig())

        assert [(l.source, l.target) for l in result.links] == [(0, 1), (1, 2)]
        assert all(type(l.source) is int for l in result.links)

    def test_relinking_is_safe(self):
        """Rebuilding adjacency does not duplicate entries."""
        nodes, links = create_fan_in()
        result = link_graph(nodes, links, SankeyConfig())
        compute_node_links(result)
        compute_node_links(result)

        assert result.nodes[3].target_links == [0, 1, 2]
        assert result.nodes[0].source_links == [0]

    def test_input_not_mutated(self):
        """Caller's links keep their original endpoint values."""
        nodes = [{"name": "a"}, {"name": "b"}]
        links = [{"source": 0, "target": nodes[1], "value": 2}]
        link_graph(nodes, links, SankeyConfig())

        assert links[0]["source"] == 0
        assert links[0]["target"] is nodes[1]
        assert nodes == [{"name": "a"}, {"name": "b"}]


# =============================================================================
# ValueAssigner
# =============================================================================


class TestValueAssigner:
    """Tests for node value derivation."""

    def test_value_is_max_of_in_and_out(self):
        """Node value is the larger of incoming and outgoing flow."""
        nodes = [{} for _ in range(4)]
        links = [
            {"source": 0, "target": 1, "value": 10},
            {"source": 1, "target": 2, "value": 4},
            {"source": 1, "target": 3, "value": 3},
        ]
        result = link_graph(nodes, links, SankeyConfig())
        compute_node_values(result)

        assert result.nodes[0].value == 10
        assert result.nodes[1].value == 10
        assert result.nodes[2].value == 4
        assert result.nodes[3].value == 3

    def test_isolated_node_has_zero_value(self):
        """A node without links has value 0."""
        result = link_graph([{}], [], SankeyConfig())
        compute_node_values(result)
        assert result.nodes[0].value == 0


# =============================================================================
# BreadthAssigner
# =============================================================================


class TestBreadthAssigner:
    """Tests for stage assignment and x scaling."""

    def test_chain_stages(self):
        """Each link in a chain advances one stage."""
        nodes, links = create_chain(4)
        config = SankeyConfig(size=(800, 600), node_width=24)
        result = prepare(nodes, links, config)

        assert [n.stage for n in result.nodes] == [0, 1, 2, 3]
        assert result.stage_count == 4

    def test_longest_path_wins(self):
        """A node reachable by paths of different lengths takes the longest."""
        nodes = [{} for _ in range(3)]
        links = [
            {"source": 0, "target": 1, "value": 1},
            {"source": 1, "target": 2, "value": 1},
            {"source": 0, "target": 2, "value": 1},
        ]
        result = prepare(nodes, links, SankeyConfig(size=(100, 100), node_width=10))

        assert [n.stage for n in result.nodes] == [0, 1, 2]

    def test_sinks_right(self):
        """Nodes without outgoing links move to the last stage."""
        nodes = [{} for _ in range(4)]
        links = [
            {"source": 0, "target": 1, "value": 1},
            {"source": 1, "target": 2, "value": 1},
            {"source": 0, "target": 3, "value": 1},
        ]
        moved = prepare(nodes, links, SankeyConfig(size=(100, 100), node_width=10))
        kept = prepare(
            nodes, links, SankeyConfig(size=(100, 100), node_width=10, sinks_right=False)
        )

        assert moved.nodes[3].stage == 2
        assert kept.nodes[3].stage == 1

    def test_sources_right(self):
        """Pure sources move to one stage before their nearest target."""
        nodes = [{} for _ in range(4)]
        links = [
            {"source": 0, "target": 1, "value": 1},
            {"source": 1, "target": 2, "value": 1},
            {"source": 3, "target": 2, "value": 1},
        ]
        config = SankeyConfig(size=(100, 100), node_width=10, sources_right=True)
        result = prepare(nodes, links, config)

        assert result.nodes[0].stage == 0
        assert result.nodes[3].stage == 1
        assert result.nodes[2].stage == 2

    def test_x_scaling(self):
        """Stages are spread across the canvas width, right column flush."""
        nodes, links = create_chain(4)
        config = SankeyConfig(size=(800, 600), node_width=24)
        result = prepare(nodes, links, config)

        assert result.nodes[0].x == 0
        assert max(n.x + n.dx for n in result.nodes) == 800
        assert all(n.dx == 24 for n in result.nodes)

    def test_single_column(self):
        """All nodes in one stage are placed at x = 0."""
        nodes = [{} for _ in range(3)]
        result = prepare(nodes, [], SankeyConfig(size=(100, 100), node_width=10))

        assert result.stage_count == 1
        assert all(n.x == 0 for n in result.nodes)

    def test_cycle_terminates(self):
        """The level bound stops the sweep on a cycle."""
        nodes = [{} for _ in range(2)]
        links = [
            {"source": 0, "target": 1, "value": 1},
            {"source": 1, "target": 0, "value": 1},
        ]
        result = prepare(nodes, links, SankeyConfig(size=(100, 100), node_width=10))

        assert result.stage_count <= len(nodes)
        for node in result.nodes:
            assert 0 <= node.x <= 90


# =============================================================================
# LinkPortAssigner
# =============================================================================


class TestLinkPortAssigner:
    """Tests for port offset assignment."""

    def _fan_in_result(self):
        nodes, links = create_fan_in()
        config = SankeyConfig(size=(100, 100), node_width=10, node_padding=5)
        result = prepare(nodes, links, config)
        for link in result.links:
            link.dy = link.value
        return result

    def test_ports_follow_source_depth(self):
        """Incoming bands are ordered by the depth of their source."""
        result = self._fan_in_result()
        result.nodes[0].y = 50
        result.nodes[1].y = 0
        result.nodes[2].y = 25
        compute_link_depths(result)

        sink = result.nodes[3]
        assert sink.target_links == [1, 2, 0]
        assert [result.links[i].ty for i in sink.target_links] == [0, 10, 20]

    def test_ports_tile_from_zero(self):
        """Each node's outgoing bands start at 0 and follow each other."""
        nodes = [{} for _ in range(3)]
        links = [
            {"source": 0, "target": 1, "value": 3},
            {"source": 0, "target": 2, "value": 7},
        ]
        result = prepare(nodes, links, SankeyConfig(size=(100, 100), node_width=10))
        for link in result.links:
            link.dy = link.value * 2
        result.nodes[1].y = 40
        result.nodes[2].y = 10
        compute_link_depths(result)

        assert result.nodes[0].source_links == [1, 0]
        assert result.links[1].sy == 0
        assert result.links[0].sy == 14

    def test_ties_keep_previous_order(self):
        """Equal depths keep the order from the previous assignment."""
        result = self._fan_in_result()
        for node in result.nodes[:3]:
            node.y = 0
        compute_link_depths(result)
        first = list(result.nodes[3].target_links)
        compute_link_depths(result)

        assert first == [0, 1, 2]
        assert result.nodes[3].target_links == first

    def test_refresh_ports_returns_result(self):
        """refresh_ports returns the same result for chaining."""
        result = self._fan_in_result()
        assert refresh_ports(result) is result


# =============================================================================
# DepthSolver
# =============================================================================


class TestDepthSolver:
    """Tests for initialization, collision resolution and relaxation."""

    def _solver(self, height=100):
        nodes, links = create_fan_in()
        config = SankeyConfig(size=(100, height), node_width=10, node_padding=5)
        result = prepare(nodes, links, config)
        return result, DepthSolver(result, config)

    def test_vertical_scale(self):
        """The fullest column determines the scale."""
        result, solver = self._solver()
        ky = solver.initialize()

        # column 0: (100 - 2 * 5) / 30 = 3, column 1: 100 / 30
        assert ky == 3
        assert [n.dy for n in result.nodes] == [30, 30, 30, 90]
        assert [l.dy for l in result.links] == [30, 30, 30]

    def test_initial_stacking(self):
        """Nodes are seeded by their position in the column."""
        result, solver = self._solver()
        solver.initialize()

        assert [n.y for n in result.nodes[:3]] == [0, 1, 2]

    def test_collisions_push_down(self):
        """Overlapping nodes are pushed down by padding."""
        result, solver = self._solver()
        solver.initialize()
        for node in result.nodes[:3]:
            node.y = 0
        solver.resolve_collisions()

        assert [n.y for n in result.nodes[:3]] == [0, 35, 70]

    def test_collisions_push_back_up(self):
        """A column overflowing the canvas is pushed back up."""
        result, solver = self._solver()
        solver.initialize()
        for node in result.nodes[:3]:
            node.y = 60
        solver.resolve_collisions()

        assert [n.y for n in result.nodes[:3]] == [0, 35, 70]

    def test_collision_sort_is_stable(self):
        """Nodes with equal depth keep their relative order."""
        result, solver = self._solver()
        solver.initialize()
        result.nodes[0].y = 10
        result.nodes[1].y = 0
        result.nodes[2].y = 10
        solver.resolve_collisions()

        assert solver.columns[0] == [1, 0, 2]

    def test_alpha_decays(self):
        """Damping starts at 1.0 and shrinks by 0.99 per round."""
        _, solver = self._solver()
        alphas = []
        solver.solve(3, on_tick=alphas.append)

        assert len(alphas) == 3
        assert alphas[0] == pytest.approx(0.99)
        assert solver.alpha == pytest.approx(0.99**3)
        assert alphas == sorted(alphas, reverse=True)

    def test_zero_iterations(self):
        """Zero iterations still initializes and de-overlaps."""
        result, solver = self._solver()
        solver.solve(0)

        assert [n.y for n in result.nodes[:3]] == [0, 35, 70]

    def test_padding_exceeding_canvas_warns(self):
        """Padding alone overflowing the canvas gives zero heights."""
        _, solver = self._solver(height=8)
        with pytest.warns(LayoutWarning, match="padding"):
            ky = solver.initialize()
        assert ky == 0

    def test_zero_value_links(self):
        """Zero-value links give zero thickness without NaN."""
        nodes = [{} for _ in range(2)]
        links = [{"source": 0, "target": 1, "value": 0}]
        config = SankeyConfig(size=(100, 100), node_width=10)
        result = prepare(nodes, links, config)
        DepthSolver(result, config).solve(5)

        for node in result.nodes:
            assert node.dy == 0
            assert node.y == node.y  # not NaN
        assert result.links[0].dy == 0

    def test_padding_warning_attributed_to_caller(self):
        """The warning names the frame that called into the solver."""
        _, solver = self._solver(height=8)
        with pytest.warns(LayoutWarning) as direct:
            solver.initialize()
        with pytest.warns(LayoutWarning) as solved:
            solver.solve(1)
        assert direct[0].filename == __file__
        assert solved[0].filename == __file__

    def test_padding_warning_through_pipeline(self):
        nodes, links = create_fan_in()
        config = SankeyConfig(size=(100, 8), node_width=10, node_padding=5)
        with pytest.warns(LayoutWarning) as record:
            compute_layout(nodes, links, config)
        assert record[0].filename == __file__


# =============================================================================
# Relaxation
# =============================================================================


class TestRelaxation:
    """Tests for the value-weighted relaxation sweeps."""

    def test_right_to_left_weighted_by_value(self):
        """A source moves toward the value-weighted center of its target ports."""
        result = create_fork_result()
        solver = DepthSolver(result, result.config)
        solver.relax_right_to_left(0.5)

        # targets: (0 + 1 + 4 / 2) * 2 + (20 + 3 + 12 / 2) * 6 = 180, / 8 = 22.5
        # center of node 0: 10 + 16 / 2 = 18
        assert result.nodes[0].y == pytest.approx(10 + (22.5 - 18) * 0.5)
        assert [n.y for n in result.nodes[1:]] == [0.0, 20.0]

    def test_left_to_right_weighted_by_value(self):
        """A target moves toward the value-weighted center of its source ports."""
        result = create_merge_result()
        solver = DepthSolver(result, result.config)
        solver.relax_left_to_right(0.5)

        assert result.nodes[2].y == pytest.approx(10 + (22.5 - 18) * 0.5)
        assert [n.y for n in result.nodes[:2]] == [0.0, 20.0]

    def test_port_offsets_shift_the_target(self):
        """Moving a port moves the point the node is pulled toward."""
        result = create_fork_result()
        result.links[1].ty = 0.0
        DepthSolver(result, result.config).relax_right_to_left(1.0)

        # (3 * 2 + 26 * 6) / 8 = 20.25
        assert result.nodes[0].y == pytest.approx(10 + (20.25 - 18))

    def test_equal_weights(self):
        """Equal link values give the plain mean of the port centers."""
        result = create_fork_result(values=(4.0, 4.0))
        DepthSolver(result, result.config).relax_right_to_left(1.0)

        # (3 + 29) / 2 = 16
        assert result.nodes[0].y == pytest.approx(10 + (16 - 18))

    def test_zero_weight_node_stays(self):
        """A node whose links carry no value is not moved."""
        fork = create_fork_result(values=(0.0, 0.0))
        DepthSolver(fork, fork.config).relax_right_to_left(0.5)
        merge = create_merge_result(values=(0.0, 0.0))
        DepthSolver(merge, merge.config).relax_left_to_right(0.5)

        assert fork.nodes[0].y == 10.0
        assert merge.nodes[2].y == 10.0
