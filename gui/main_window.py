"""Main Window for CAD application"""
import logging

from PySide6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
                               QToolBar, QMessageBox, QDockWidget, QListWidget,
                               QListWidgetItem, QPushButton, QLabel, QInputDialog)
from PySide6.QtCore import Qt, QSize
from PySide6.QtGui import QAction, QKeySequence

from cad_engine import CADDocument, Point2D
from editor import CommandRunner, CancelInput, PointerClick, PointerMove, TextInput
from tools import SelectionTool, build_registry
from .cad_viewport import CADViewport
from .command_line_widget import CommandLineWidget

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Main application window"""

    def __init__(self):
        super().__init__()
        self.document = CADDocument()
        self.registry = build_registry()
        self.selection_tool = SelectionTool(self.document)
        self.last_command = None

        self.init_ui()

        self.runner = CommandRunner(self.document, self.command_line, self.registry)
        self.document.add_listener(self.update_status)
        self.statusBar().showMessage("Ready")

    def init_ui(self):
        """Initialize user interface"""
        self.setWindowTitle("CAD Editor")
        self.setGeometry(100, 100, 1200, 800)

        # Create central widget with viewport
        self.viewport = CADViewport(self.document, self)
        self.setCentralWidget(self.viewport)

        # Connect viewport signals
        self.viewport.clicked.connect(self.on_viewport_clicked)
        self.viewport.moved.connect(self.on_viewport_moved)

        # Create menus, toolbars and docks
        self.create_command_line()
        self.create_menus()
        self.create_toolbars()
        self.create_layer_panel()

        # Status bar
        self.coord_label = QLabel("")
        self.statusBar().addPermanentWidget(self.coord_label)
        self.status_label = QLabel("")
        self.statusBar().addPermanentWidget(self.status_label)
        self.update_status()

    def create_command_line(self):
        """Create the command line dock"""
        names = []
        for spec in self.registry.all_commands():
            names.extend({spec.global_name, spec.local_name})

        self.command_line = CommandLineWidget(names)
        self.command_line.submitted.connect(self.on_command_text)
        self.command_line.escape_pressed.connect(self.cancel_command)

        dock = QDockWidget("Command Line", self)
        dock.setAllowedAreas(Qt.BottomDockWidgetArea | Qt.TopDockWidgetArea)
        dock.setWidget(self.command_line)
        self.addDockWidget(Qt.BottomDockWidgetArea, dock)

    def create_menus(self):
        """Create menu bar"""
        menubar = self.menuBar()

        # File menu
        file_menu = menubar.addMenu("&File")

        exit_action = QAction("Exit", self)
        exit_action.setShortcut(QKeySequence.Quit)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        # Edit menu
        edit_menu = menubar.addMenu("&Edit")

        undo_action = QAction("Undo", self)
        undo_action.setShortcut(QKeySequence.Undo)
        undo_action.triggered.connect(lambda: self.run_command("UNDO"))
        edit_menu.addAction(undo_action)

        redo_action = QAction("Redo", self)
        redo_action.setShortcut(QKeySequence.Redo)
        redo_action.triggered.connect(lambda: self.run_command("REDO"))
        edit_menu.addAction(redo_action)

        edit_menu.addSeparator()

        select_all_action = QAction("Select All", self)
        select_all_action.setShortcut(QKeySequence.SelectAll)
        select_all_action.triggered.connect(self.select_all)
        edit_menu.addAction(select_all_action)

        delete_action = QAction("Delete", self)
        delete_action.setShortcut(QKeySequence.Delete)
        delete_action.triggered.connect(lambda: self.run_command("ERASE"))
        edit_menu.addAction(delete_action)

        # One menu per command group
        for group, specs in self.registry.groups().items():
            if group == "Edit":
                continue
            group_menu = menubar.addMenu(f"&{group}")
            for spec in specs:
                action = QAction(f"{spec.global_name.title()} ({spec.local_name})", self)
                action.setStatusTip(spec.description)
                action.triggered.connect(lambda checked=False, name=spec.global_name:
                                         self.run_command(name))
                group_menu.addAction(action)

        # View menu
        view_menu = menubar.addMenu("&View")

        zoom_in_action = QAction("Zoom In", self)
        zoom_in_action.setShortcut(QKeySequence.ZoomIn)
        zoom_in_action.triggered.connect(self.viewport.zoom_in)
        view_menu.addAction(zoom_in_action)

        zoom_out_action = QAction("Zoom Out", self)
        zoom_out_action.setShortcut(QKeySequence.ZoomOut)
        zoom_out_action.triggered.connect(self.viewport.zoom_out)
        view_menu.addAction(zoom_out_action)

        zoom_extents_action = QAction("Zoom Extents", self)
        zoom_extents_action.triggered.connect(self.viewport.zoom_extents)
        view_menu.addAction(zoom_extents_action)

        view_menu.addSeparator()

        reset_view_action = QAction("Reset View", self)
        reset_view_action.triggered.connect(self.viewport.reset_view)
        view_menu.addAction(reset_view_action)

        # Layer menu
        layer_menu = menubar.addMenu("&Layer")

        new_layer_action = QAction("New Layer...", self)
        new_layer_action.triggered.connect(self.new_layer)
        layer_menu.addAction(new_layer_action)

    def create_toolbars(self):
        """Create toolbars"""
        # Draw / modify toolbar, one button per command
        command_toolbar = QToolBar("Commands")
        command_toolbar.setIconSize(QSize(24, 24))
        self.addToolBar(command_toolbar)

        for group, specs in self.registry.groups().items():
            for spec in specs:
                button = QAction(spec.global_name.title(), self)
                button.setStatusTip(spec.description)
                button.triggered.connect(lambda checked=False, name=spec.global_name:
                                         self.run_command(name))
                command_toolbar.addAction(button)
            command_toolbar.addSeparator()

        # View toolbar
        view_toolbar = QToolBar("View")
        view_toolbar.setIconSize(QSize(24, 24))
        self.addToolBar(view_toolbar)

        zoom_in_btn = QAction("Zoom +", self)
        zoom_in_btn.triggered.connect(self.viewport.zoom_in)
        view_toolbar.addAction(zoom_in_btn)

        zoom_out_btn = QAction("Zoom -", self)
        zoom_out_btn.triggered.connect(self.viewport.zoom_out)
        view_toolbar.addAction(zoom_out_btn)

        zoom_extents_btn = QAction("Zoom Extents", self)
        zoom_extents_btn.triggered.connect(self.viewport.zoom_extents)
        view_toolbar.addAction(zoom_extents_btn)

    def create_layer_panel(self):
        """Create layer management panel"""
        dock = QDockWidget("Layers", self)
        dock.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea)

        widget = QWidget()
        layout = QVBoxLayout()

        self.layer_list = QListWidget()
        self.layer_list.itemClicked.connect(self.on_layer_selected)
        self.layer_list.itemChanged.connect(self.on_layer_lock_changed)
        layout.addWidget(self.layer_list)

        # Layer buttons
        btn_layout = QHBoxLayout()

        new_layer_btn = QPushButton("New")
        new_layer_btn.clicked.connect(self.new_layer)
        btn_layout.addWidget(new_layer_btn)

        delete_layer_btn = QPushButton("Delete")
        delete_layer_btn.clicked.connect(self.delete_layer)
        btn_layout.addWidget(delete_layer_btn)

        layout.addLayout(btn_layout)

        widget.setLayout(layout)
        dock.setWidget(widget)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)

        self.update_layer_list()

    # ------------------------------------------------------------------
    # Command plumbing
    # ------------------------------------------------------------------

    def run_command(self, name: str):
        """Start a command from a menu, toolbar or the command line"""
        if self.runner.running:
            self.runner.cancel()
        if self.runner.start(name):
            self.last_command = name
        self.command_line.input.setFocus()

    def on_command_text(self, text: str):
        """Enter pressed on the command line"""
        if self.runner.running:
            self.runner.send(TextInput(text))
            return

        name = text.strip()
        if not name:
            # Enter at the idle prompt repeats the last command
            if self.last_command:
                self.run_command(self.last_command)
            return
        self.run_command(name)

    def cancel_command(self):
        if self.runner.running:
            self.runner.send(CancelInput())
        else:
            self.document.clear_selection()
            self.statusBar().showMessage("Selection cleared")

    def on_viewport_clicked(self, x: float, y: float):
        """Handle viewport click"""
        if self.runner.running:
            hits = self.document.get_geometries_at_point(x, y, self.viewport.pick_tolerance())
            handle = hits[0].handle if hits else None
            self.runner.send(PointerClick(Point2D(x, y), handle))
        else:
            self.selection_tool.toggle_at_point(x, y, self.viewport.pick_tolerance())

    def on_viewport_moved(self, x: float, y: float):
        self.coord_label.setText(f"{x:.4f}, {y:.4f}")
        if self.runner.running:
            self.runner.send(PointerMove(Point2D(x, y)))

    def select_all(self):
        """Select all objects"""
        if not self.runner.running:
            self.document.select_all()

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    def new_layer(self):
        """Create new layer"""
        name, ok = QInputDialog.getText(self, "New Layer", "Layer name:")
        if ok and name:
            if self.document.layer_manager.add_layer(name):
                self.update_layer_list()
                self.statusBar().showMessage(f"Created layer '{name}'")
            else:
                QMessageBox.warning(self, "Error", "Layer already exists")

    def delete_layer(self):
        """Delete selected layer"""
        current_item = self.layer_list.currentItem()
        if current_item:
            layer_name = current_item.text()
            if self.document.layer_manager.remove_layer(layer_name):
                self.update_layer_list()
                self.statusBar().showMessage(f"Deleted layer '{layer_name}'")
            else:
                QMessageBox.warning(self, "Error", "Cannot delete this layer")

    def on_layer_selected(self, item):
        """Handle layer selection"""
        layer_name = item.text()
        if self.document.layer_manager.set_current_layer(layer_name):
            self.statusBar().showMessage(f"Current layer: {layer_name}")
        else:
            self.statusBar().showMessage(f"Layer '{layer_name}' is locked")

    def on_layer_lock_changed(self, item):
        """Checkbox of a layer item toggles its lock"""
        locked = item.checkState() == Qt.Checked
        self.document.layer_manager.set_layer_locked(item.text(), locked)

    def update_layer_list(self):
        """Update layer list widget"""
        self.layer_list.blockSignals(True)
        self.layer_list.clear()
        for name in self.document.layer_manager.get_all_layers():
            item = QListWidgetItem(name)
            item.setFlags(item.flags() | Qt.ItemIsUserCheckable)
            locked = self.document.layer_manager.is_layer_locked(name)
            item.setCheckState(Qt.Checked if locked else Qt.Unchecked)
            item.setToolTip("Checked = locked")
            self.layer_list.addItem(item)
        self.layer_list.blockSignals(False)

    def update_status(self):
        """Update status bar with document statistics"""
        stats = self.document.get_statistics()
        status_text = (f"Objects: {stats['total_objects']} | Selected: {stats['selected']} | "
                       f"Layer: {self.document.layer_manager.get_current_layer()}")
        self.status_label.setText(status_text)

    def keyPressEvent(self, event):
        """Handle key press events"""
        if event.key() == Qt.Key_Escape:
            self.cancel_command()
        elif event.key() in (Qt.Key_Return, Qt.Key_Enter):
            self.on_command_text("")
        elif event.text() and event.text().isprintable():
            # Typing anywhere goes to the command line
            self.command_line.type_text(event.text())
        else:
            super().keyPressEvent(event)
