#!/usr/bin/env python3
"""
Launch script for the Grid Q-Learning Visualizer.
Sets Qt environment variables before importing PySide6.
"""

import os
import sys

# Set Qt environment variables BEFORE any Qt imports
os.environ.setdefault('QT_AUTO_SCREEN_SCALE_FACTOR', '0')
os.environ.setdefault('QT_SCALE_FACTOR', '1')
os.environ.setdefault('QT_LOGGING_RULES', 'qt.qpa.backingstore=false')

from gridlearn.__main__ import main

if __name__ == "__main__":
    sys.exit(main())
