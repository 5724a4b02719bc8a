"""
Contagion Field Simulator

A headless agent-based epidemic simulator. Subjects drift around a bounded
2D field and pass an infection to neighbours within a contact radius.

Architecture: SimulationField is the source of truth. Renderers and UIs are consumers.
"""

__version__ = "0.1.0"
