"""
Gift Chaos - Dice-driven gift exchange party game engine.

Players take turns rolling a die; each face redistributes gifts.
The package provides:
- A pure turn engine (phases, budgets, face resolution)
- Snapshot persistence for a single running game
- A message catalog for display text
- A REST API and a CLI on top of the engine
"""

__version__ = "0.1.0"
