"""Feature classifiers.

- base: Classifier contract and per-tile context
- chain: first-match-wins classifier chain
- heuristics: height, building type and facade inference
- footprint: sized 3D model matching for small buildings
- barrier, network, objects, building, forest: the chain's classifiers
- lights: light overlay applied before the chain
"""
