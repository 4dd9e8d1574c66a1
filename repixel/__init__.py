"""Repix-inator: rebuild a target image out of a source image's pixels.

Packages:
- core: feature extraction, pixel correspondence, particle animation
- utils: image loading, frame export, Qt frame scheduling
"""

__version__ = "0.1.0"
