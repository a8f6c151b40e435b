"""
schellsim: Schelling segregation simulator with eviction shocks

Simulates residential segregation on a 2D grid and measures how forced
displacement of one class changes spatial clustering.

Core concepts:
- Agents are class labels on grid cells (0 = empty)
- An agent is satisfied with enough like neighbors
- Unsatisfied agents move to random empty cells until nobody moves
- Evictions randomly relocate part of one class, regardless of satisfaction
- Homophily = fraction of like neighbors, per class
"""

__version__ = "0.1.0"
