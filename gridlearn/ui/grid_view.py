"""Grid view for the Q-Learning world."""

from typing import Tuple

from PySide6.QtWidgets import QGraphicsView, QGraphicsScene
from PySide6.QtGui import QBrush, QColor, QPainter, QPen
from PySide6.QtCore import Qt

from ..app.controller import RLController
from ..domain.types import Position, state_key


class GridView(QGraphicsView):
    """Read-only view of the grid, goal, agent and spawn point."""

    def __init__(self, controller: RLController):
        super().__init__()

        self.controller = controller
        self.scene = QGraphicsScene()
        self.setScene(self.scene)

        # Settings
        self.tile_size = 40.0
        self.show_q_values = True

        self.setRenderHint(QPainter.Antialiasing)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)

        self.controller.grid_updated.connect(self.update_grid)

        self.update_grid()

    def set_show_q_values(self, show: bool):
        self.show_q_values = show
        self.update_grid()

    def update_grid(self):
        """Redraw the whole scene from the controller's state."""
        grid = self.controller.grid
        size = self.tile_size

        self.scene.clear()
        self.scene.setSceneRect(0, 0, grid.width * size, grid.height * size)

        # Tiles, shaded by best known Q-value from one snapshot of the table
        best = self.controller.table.best_values() if self.show_q_values else {}
        scale = max((abs(v) for v in best.values()), default=0.0)
        line_pen = QPen(QColor("black"), 0.5)
        for position in grid.positions():
            brush = QBrush(self._tile_color(best.get(state_key(position), 0.0), scale))
            self.scene.addRect(position.x * size, position.y * size, size, size, line_pen, brush)

        # Goal
        goal = grid.goal
        self.scene.addRect(goal.x * size, goal.y * size, size, size,
                           QPen(Qt.NoPen), QBrush(QColor("green")))

        # Agents and their spawn points
        radius = size / 3
        for position, spawn in self.controller.agent_markers():
            cx, cy = self._center(position)
            self.scene.addEllipse(cx - radius, cy - radius, 2 * radius, 2 * radius,
                                  QPen(Qt.NoPen), QBrush(QColor("blue")))

            sx, sy = self._center(spawn)
            self.scene.addEllipse(sx - radius, sy - radius, 2 * radius, 2 * radius,
                                  QPen(QColor("red"), size / 10), QBrush(Qt.NoBrush))

    def _center(self, position: Position) -> Tuple[float, float]:
        return ((position.x + 0.5) * self.tile_size, (position.y + 0.5) * self.tile_size)

    def _tile_color(self, value: float, scale: float) -> QColor:
        if scale <= 0:
            return QColor("white")

        intensity = min(abs(value) / scale, 1.0)
        shade = int(255 - 100 * intensity)
        if value >= 0:
            return QColor(shade, 255, shade)  # High Q-value
        return QColor(255, shade, shade)  # Low Q-value

    def fit_in_view(self):
        """Fit the grid in the view."""
        rect = self.scene.sceneRect()
        if not rect.isEmpty():
            self.fitInView(rect, Qt.KeepAspectRatio)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.fit_in_view()
