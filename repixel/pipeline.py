from __future__ import annotations

import logging
from typing import List, Tuple

from .core.correspondence import Particle, build_particles
from .core.features import PixelGrid, extract_features

logger = logging.getLogger(__name__)


def rearrange(source: PixelGrid, target: PixelGrid) -> Tuple[List[Particle], int, int]:
    """Particles that rebuild ``target`` from ``source``'s pixels, plus the canvas size."""
    if (source.width, source.height) != (target.width, target.height):
        logger.warning(
            "Source %dx%d and target %dx%d differ, some pixels will not be matched",
            source.width,
            source.height,
            target.width,
            target.height,
        )
    source_records = extract_features(source)
    target_records = extract_features(target)
    particles = build_particles(source_records, target_records)
    logger.info("Built %d particles for a %dx%d canvas", len(particles), target.width, target.height)
    return particles, target.width, target.height
