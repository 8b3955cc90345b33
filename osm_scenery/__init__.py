"""OSM to X-Plane scenery generation pipeline.

Classifies tagged OpenStreetMap features (points, lines, polygons) into
scenery primitives: facade buildings, sized 3D objects, barriers, road,
rail and power-line networks, forests, lights and airfields.
"""

__version__ = "0.1.0"
