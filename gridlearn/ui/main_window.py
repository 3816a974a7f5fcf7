"""Main window for the grid Q-Learning visualizer."""

from PySide6.QtWidgets import (
    QMainWindow, QVBoxLayout, QHBoxLayout, QWidget, QPushButton, QLabel,
    QLineEdit, QComboBox, QCheckBox, QGroupBox, QFormLayout, QStatusBar, QMessageBox
)
from PySide6.QtGui import QKeySequence, QShortcut, QCloseEvent

from ..app.controller import RLController
from ..app.fsm import TrainingState
from ..domain.types import RLConfig
from .grid_view import GridView


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, controller: RLController):
        super().__init__()
        self.controller = controller

        self.setWindowTitle("Grid Q-Learning Visualizer")
        self.setMinimumSize(900, 600)

        self._create_ui()
        self._setup_connections()
        self._setup_shortcuts()

        self._apply_default_params()
        self._update_button_states()
        self._update_statistics_display()

    def _create_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QHBoxLayout(central_widget)

        self.grid_view = GridView(self.controller)
        main_layout.addWidget(self.grid_view, 3)

        side_layout = QVBoxLayout()
        side_layout.addWidget(self._create_params_panel())
        side_layout.addWidget(self._create_controls_panel())
        side_layout.addWidget(self._create_statistics_panel())
        side_layout.addStretch()
        main_layout.addLayout(side_layout, 1)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self._update_status_message()

    def _create_params_panel(self) -> QGroupBox:
        params_group = QGroupBox("Training Parameters")
        form = QFormLayout(params_group)

        self.episodes_input = QLineEdit()
        self.decision_interval_input = QLineEdit()
        self.exploration_rate_input = QLineEdit()
        self.learning_rate_input = QLineEdit()
        self.discount_factor_input = QLineEdit()

        form.addRow("Episodes:", self.episodes_input)
        form.addRow("Decision Interval (ms):", self.decision_interval_input)
        form.addRow("Exploration Rate:", self.exploration_rate_input)
        form.addRow("Learning Rate:", self.learning_rate_input)
        form.addRow("Discount Factor:", self.discount_factor_input)

        self.rule_combo = QComboBox()
        self.rule_combo.addItem("Q-Learning", "q_learning")
        self.rule_combo.addItem("SARSA", "sarsa")
        form.addRow("Learning Rule:", self.rule_combo)

        self.spawn_combo = QComboBox()
        self.spawn_combo.addItem("Fixed (0, 0)", "fixed")
        self.spawn_combo.addItem("Random", "random")
        form.addRow("Spawn:", self.spawn_combo)

        self.show_q_values_cb = QCheckBox("Shade cells by Q-value")
        self.show_q_values_cb.setChecked(True)
        form.addRow(self.show_q_values_cb)

        return params_group

    def _create_controls_panel(self) -> QGroupBox:
        controls_group = QGroupBox("Controls")
        layout = QHBoxLayout(controls_group)

        self.start_btn = QPushButton("Start")
        self.stop_btn = QPushButton("Stop")
        self.reset_btn = QPushButton("Reset")
        for btn in [self.start_btn, self.stop_btn, self.reset_btn]:
            layout.addWidget(btn)

        return controls_group

    def _create_statistics_panel(self) -> QGroupBox:
        stats_group = QGroupBox("Training Statistics")
        form = QFormLayout(stats_group)

        self.state_label = QLabel()
        self.episodes_label = QLabel("0")
        self.total_decisions_label = QLabel("0")
        self.average_decisions_label = QLabel("N/A")
        self.last_decisions_label = QLabel("N/A")

        form.addRow("State:", self.state_label)
        form.addRow("Episodes:", self.episodes_label)
        form.addRow("Total Decisions:", self.total_decisions_label)
        form.addRow("Average Decisions:", self.average_decisions_label)
        form.addRow("Last Decisions:", self.last_decisions_label)

        return stats_group

    def _setup_connections(self):
        self.controller.state_changed.connect(self._on_state_changed)
        self.controller.episode_completed.connect(self._on_episode_completed)
        self.controller.training_completed.connect(self._on_training_completed)
        self.controller.training_cancelled.connect(self._on_training_cancelled)
        self.controller.error_occurred.connect(self._on_error_occurred)

        self.start_btn.clicked.connect(self._on_start_clicked)
        self.stop_btn.clicked.connect(self._on_stop_clicked)
        self.reset_btn.clicked.connect(self._on_reset_clicked)

        self.spawn_combo.currentIndexChanged.connect(self._on_spawn_mode_changed)
        self.show_q_values_cb.toggled.connect(self.grid_view.set_show_q_values)

    def _setup_shortcuts(self):
        QShortcut(QKeySequence("Q"), self, self.close)
        QShortcut(QKeySequence("S"), self, self._on_start_clicked)
        QShortcut(QKeySequence("Escape"), self, self._on_stop_clicked)
        QShortcut(QKeySequence("R"), self, self._on_reset_clicked)

    def _apply_default_params(self):
        """Fill the parameter fields with the default configuration."""
        defaults = RLConfig()
        self.episodes_input.setText(str(defaults.episodes))
        self.decision_interval_input.setText(str(defaults.decision_interval))
        self.exploration_rate_input.setText(str(defaults.exploration_rate))
        self.learning_rate_input.setText(str(defaults.learning_rate))
        self.discount_factor_input.setText(str(defaults.discount_factor))
        self.rule_combo.setCurrentIndex(self.rule_combo.findData(defaults.learning_rule))

    # Controller signal handlers

    def _on_state_changed(self, state: TrainingState):
        self._update_button_states()
        self._update_statistics_display()

    def _on_episode_completed(self, episode):
        self._update_statistics_display()

    def _on_training_completed(self, result):
        self._update_statistics_display()
        message = f"Training completed in {result.elapsed_ms}ms"
        self.status_bar.showMessage(message)
        QMessageBox.information(self, "Training", message)

    def _on_training_cancelled(self, result):
        self._update_statistics_display()
        self.status_bar.showMessage(
            f"Training stopped after {len(result.episodes)} completed episodes")

    def _on_error_occurred(self, error_msg: str):
        self.status_bar.showMessage(f"Error: {error_msg}")
        QMessageBox.warning(self, "Training", error_msg)

    # Button handlers

    def _on_start_clicked(self):
        if not self.controller.can_start_training():
            return
        self.controller.start_training_from_inputs(
            episodes=self.episodes_input.text(),
            decision_interval=self.decision_interval_input.text(),
            exploration_rate=self.exploration_rate_input.text(),
            learning_rate=self.learning_rate_input.text(),
            discount_factor=self.discount_factor_input.text(),
            learning_rule=self.rule_combo.currentData(),
        )

    def _on_stop_clicked(self):
        self.controller.stop_training()

    def _on_reset_clicked(self):
        if self.controller.reset_training():
            self._apply_default_params()
            self._update_statistics_display()
            QMessageBox.information(self, "Training", "Training data has been reset")

    def _on_spawn_mode_changed(self):
        self.controller.set_spawn_mode(self.spawn_combo.currentData())

    # Display updates

    def _update_button_states(self):
        training = not self.controller.can_start_training()

        for widget in [self.episodes_input, self.decision_interval_input,
                       self.exploration_rate_input, self.learning_rate_input,
                       self.discount_factor_input, self.rule_combo, self.spawn_combo]:
            widget.setEnabled(not training)

        self.start_btn.setEnabled(not training)
        self.reset_btn.setEnabled(not training)
        self.stop_btn.setEnabled(self.controller.current_state == TrainingState.TRAINING)

        self._update_status_message()

    def _update_status_message(self):
        self.status_bar.showMessage(self.controller.state_description())

    def _update_statistics_display(self):
        stats = self.controller.get_statistics()
        self.state_label.setText(self.controller.state_description())
        self.episodes_label.setText(str(stats.episodes))
        self.total_decisions_label.setText(str(stats.total_decisions))
        self.average_decisions_label.setText(stats.format_average())
        self.last_decisions_label.setText(stats.format_last())

    def closeEvent(self, event: QCloseEvent):
        """Stop any running training before closing."""
        try:
            self.controller.cleanup()
        except RuntimeError as e:
            print(f"Close event error: {e}")
        event.accept()
