#!/usr/bin/env python3
"""
CAD Editor
Main application entry point
"""
import logging
import sys
from PySide6.QtWidgets import QApplication
from gui import MainWindow


def main():
    """Main application function"""
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    app = QApplication(sys.argv)

    # Set application metadata
    app.setApplicationName("CAD Editor")
    app.setOrganizationName("CAD Tools")
    app.setApplicationVersion("1.0.0")

    # Create and show main window
    window = MainWindow()
    window.show()

    # Start event loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
