"""
Engine package - Geometry primitives shared by nodes and plot preparation.

- rng: Seeded Mulberry32 random streams
- geometry: Paths, transforms, clipping and noise
- falloff: Radial falloff for point modifiers
- svg_parser: SVG document import
"""
