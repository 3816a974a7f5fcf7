"""Grid Q-Learning Visualizer - an agent learning to reach a goal cell.

This package implements a tabular Q-Learning agent on a bounded grid together
with a live PySide6 view of the training run.
"""

__version__ = "1.0.0"
__author__ = "Grid Q-Learning Demo"
