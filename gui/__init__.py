"""GUI module"""
from .main_window import MainWindow
from .cad_viewport import CADViewport
from .command_line_widget import CommandLineWidget

__all__ = ['MainWindow', 'CADViewport', 'CommandLineWidget']
