from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from operator import attrgetter
from typing import List, Sequence, Tuple

from .features import PixelRecord

logger = logging.getLogger(__name__)

# Share of each image (strongest edges first) matched separately from the body.
EDGE_FRACTION = 0.25


@dataclass
class Particle:
    r: int
    g: int
    b: int
    start_x: int
    start_y: int
    end_x: int
    end_y: int
    current_x: int = 0
    current_y: int = 0

    @classmethod
    def between(cls, source: PixelRecord, target: PixelRecord) -> "Particle":
        return cls(
            source.r,
            source.g,
            source.b,
            source.x,
            source.y,
            target.x,
            target.y,
            source.x,
            source.y,
        )


def sort_by_brightness(records: Sequence[PixelRecord]) -> List[PixelRecord]:
    # sorted() is stable, equal brightness keeps incoming order
    return sorted(records, key=attrgetter("brightness"))


def split_by_edges(records: Sequence[PixelRecord]) -> Tuple[List[PixelRecord], List[PixelRecord]]:
    """Split into (edges, body): the strongest quarter by edge strength, then the rest."""
    by_edge = sorted(records, key=attrgetter("edge_strength"), reverse=True)
    split = math.floor(len(records) * EDGE_FRACTION)
    return by_edge[:split], by_edge[split:]


def pair_in_order(sources: Sequence[PixelRecord], targets: Sequence[PixelRecord]) -> List[Particle]:
    count = min(len(sources), len(targets))
    return [Particle.between(sources[i], targets[i]) for i in range(count)]


def build_particles(source: Sequence[PixelRecord], target: Sequence[PixelRecord]) -> List[Particle]:
    """Match source pixels onto target positions, edges with edges and body with body.

    Inside each partition both sides are ordered by brightness and paired
    positionally. Surplus records on the longer side are dropped.
    """
    src_edges, src_body = split_by_edges(source)
    tgt_edges, tgt_body = split_by_edges(target)

    particles = pair_in_order(sort_by_brightness(src_edges), sort_by_brightness(tgt_edges))
    edge_count = len(particles)
    particles.extend(pair_in_order(sort_by_brightness(src_body), sort_by_brightness(tgt_body)))

    logger.debug(
        "Matched %d edge + %d body particles (source %d px, target %d px)",
        edge_count,
        len(particles) - edge_count,
        len(source),
        len(target),
    )
    if len(particles) < max(len(source), len(target)):
        logger.warning(
            "Source and target differ in size (%d vs %d px); %d pixels left unmatched",
            len(source),
            len(target),
            max(len(source), len(target)) - len(particles),
        )
    return particles
