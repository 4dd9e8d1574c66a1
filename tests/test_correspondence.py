"""Tests for edge-prioritized pixel matching."""

from __future__ import annotations

import random

from repixel.core.correspondence import (
    EDGE_FRACTION,
    Particle,
    build_particles,
    sort_by_brightness,
    split_by_edges,
)
from repixel.core.features import extract_features
from tests.conftest import grid_from_rgb, record, solid_grid


class TestSplitByEdges:
    def test_quarter_goes_to_edges(self):
        records = [record(i, 0, 0.0, edge=float(i)) for i in range(8)]
        edges, body = split_by_edges(records)
        assert len(edges) == 2
        assert len(body) == 6
        assert [r.x for r in edges] == [7, 6]

    def test_split_rounds_down(self):
        edges, body = split_by_edges([record(i, 0, 0.0) for i in range(7)])
        assert len(edges) == 1  # floor(7 * 0.25)
        assert len(body) == 6

    def test_ties_keep_input_order(self):
        records = [record(i, 0, 0.0, edge=1.0) for i in range(8)]
        edges, body = split_by_edges(records)
        assert [r.x for r in edges] == [0, 1]
        assert [r.x for r in body] == [2, 3, 4, 5, 6, 7]

    def test_input_is_not_reordered(self):
        records = [record(i, 0, 0.0, edge=float(i)) for i in range(4)]
        split_by_edges(records)
        assert [r.x for r in records] == [0, 1, 2, 3]

    def test_fraction_constant(self):
        assert EDGE_FRACTION == 0.25


class TestSortByBrightness:
    def test_ascending_and_stable(self):
        records = [record(0, 0, 5.0), record(1, 0, 1.0), record(2, 0, 5.0), record(3, 0, 0.0)]
        assert [r.x for r in sort_by_brightness(records)] == [3, 1, 0, 2]

    def test_returns_new_list(self):
        records = [record(0, 0, 2.0), record(1, 0, 1.0)]
        out = sort_by_brightness(records)
        assert out is not records
        assert [r.x for r in records] == [0, 1]


class TestBuildParticles:
    def test_identical_inputs_map_onto_themselves(self, gradient_grid):
        records = extract_features(gradient_grid)
        particles = build_particles(records, list(records))
        assert len(particles) == len(records)
        for p in particles:
            assert (p.start_x, p.start_y) == (p.end_x, p.end_y)

    def test_color_and_positions(self):
        src = [record(0, 0, 10.0, rgb=(1, 2, 3)), record(1, 0, 20.0, rgb=(4, 5, 6))]
        tgt = [record(5, 5, 99.0), record(6, 6, 1.0)]
        # n=2 -> no edge set, both are body
        particles = build_particles(src, tgt)
        assert particles == [
            Particle(1, 2, 3, 0, 0, 6, 6, 0, 0),
            Particle(4, 5, 6, 1, 0, 5, 5, 1, 0),
        ]

    def test_current_starts_at_source(self):
        particles = build_particles([record(3, 4, 0.0)], [record(9, 9, 0.0)])
        (p,) = particles
        assert (p.current_x, p.current_y) == (3, 4)

    def test_edges_matched_with_edges_first(self):
        # strongest-edge source pixel must land on the strongest-edge target pixel
        src = [record(i, 0, float(i)) for i in range(4)]
        src[2] = record(2, 0, 2.0, edge=50.0)
        tgt = [record(0, i, float(10 - i)) for i in range(4)]
        tgt[0] = record(0, 0, 10.0, edge=80.0)
        particles = build_particles(src, tgt)
        assert (particles[0].start_x, particles[0].end_y) == (2, 0)
        # body pairs darkest with darkest
        body = particles[1:]
        assert [(p.start_x, p.end_y) for p in body] == [(0, 3), (1, 2), (3, 1)]

    def test_count_never_exceeds_smaller_input(self):
        rng = random.Random(7)
        src = [record(i, 0, rng.random() * 255, edge=rng.random() * 40) for i in range(13)]
        tgt = [record(i, 1, rng.random() * 255, edge=rng.random() * 40) for i in range(9)]
        particles = build_particles(src, tgt)
        # edges: min(3, 2) = 2, body: min(10, 7) = 7
        assert len(particles) == 9 <= min(len(src), len(tgt))

    def test_uneven_edge_sets_lose_surplus(self):
        src = [record(i, 0, 0.0) for i in range(8)]  # 2 edges, 6 body
        tgt = [record(i, 0, 0.0) for i in range(5)]  # 1 edge, 4 body
        particles = build_particles(src, tgt)
        assert len(particles) == 1 + 4

    def test_empty_inputs(self):
        assert build_particles([], []) == []
        assert build_particles([record(0, 0, 1.0)], []) == []

    def test_deterministic(self, gradient_grid):
        a = extract_features(gradient_grid)
        b = extract_features(solid_grid(4, 3, (9, 9, 9)))
        assert build_particles(a, b) == build_particles(a, b)


class TestBlackToWhite:
    def test_flat_images_pair_in_row_major_order(self, black_2x2, white_2x2):
        src = extract_features(black_2x2)
        tgt = extract_features(white_2x2)
        assert all(r.brightness == 0 for r in src)
        assert all(r.edge_strength == 0 for r in src + tgt)
        particles = build_particles(src, tgt)
        assert len(particles) == 4
        assert [(p.start_x, p.start_y) for p in particles] == [(0, 0), (1, 0), (0, 1), (1, 1)]
        assert [(p.end_x, p.end_y) for p in particles] == [(0, 0), (1, 0), (0, 1), (1, 1)]
        assert all((p.r, p.g, p.b) == (0, 0, 0) for p in particles)


def test_striped_image_edges_stay_on_stripes():
    # a dark column on a bright field: edge pixels sit next to the column
    rows = [[(255, 255, 255), (0, 0, 0), (255, 255, 255), (255, 255, 255)] for _ in range(4)]
    grid = grid_from_rgb(rows)
    records = extract_features(grid)
    edges, _ = split_by_edges(records)
    assert len(edges) == 4
    assert {r.x for r in edges} == {0, 1}
