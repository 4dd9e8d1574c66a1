"""Core primitives for Repix-inator.

Modules:
- features: pixel grid -> per-pixel records (brightness, edge strength)
- correspondence: edge-prioritized source -> target pixel matching
- render: easing, interpolation and rasterization of particles
- scheduler: frame scheduler protocol + manual / asyncio implementations
- animator: time-driven particle animation state machine
"""
