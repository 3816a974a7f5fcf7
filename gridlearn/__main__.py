"""Main entry point for the Grid Q-Learning Visualizer."""

import argparse
import logging
import signal
import sys

from PySide6.QtWidgets import QApplication


def main(argv=None):
    """Main entry point for the visualizer application."""
    parser = argparse.ArgumentParser(description="Grid Q-Learning Visualizer")
    parser.add_argument("--seed", type=int, help="Seed for exploration and random spawns")
    parser.add_argument("--verbose", action="store_true", help="Log every decision")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv[:1])
    app.setApplicationName("Grid Q-Learning Visualizer")
    app.setApplicationVersion("1.0.0")

    # Import UI components (after QApplication is created)
    from .ui.main_window import MainWindow
    from .app.controller import RLController

    controller = RLController(seed=args.seed)
    window = MainWindow(controller)

    def signal_handler(sig, frame):
        """Handle system signals for graceful shutdown."""
        print(f"\nReceived signal {sig}, shutting down gracefully...")
        window.close()
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        window.show()
        return app.exec()
    finally:
        controller.cleanup()


if __name__ == "__main__":
    sys.exit(main())
