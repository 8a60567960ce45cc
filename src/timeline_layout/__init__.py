"""Timeline Layout Engine.

Lays out project attachments on an interactive Gantt timeline with:
- Lane packing of overlapping attachments
- Dependency validation and critical path computation
- Collision-avoiding connector routing between boxes
- A clamped pan/zoom time <-> pixel transform
"""

__version__ = "0.1.0"
