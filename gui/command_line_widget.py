"""Command line dock: history, prompt and input field"""
from PySide6.QtWidgets import (QWidget, QVBoxLayout, QHBoxLayout, QPlainTextEdit,
                               QLabel, QLineEdit, QCompleter)
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QTextCharFormat, QColor, QTextCursor

from editor.command_line import MessageType

SEVERITY_COLORS = {
    MessageType.COMMAND: QColor(120, 200, 255),
    MessageType.RESPONSE: QColor(220, 220, 220),
    MessageType.SUCCESS: QColor(120, 220, 120),
    MessageType.ERROR: QColor(255, 110, 110),
}


class CommandLineWidget(QWidget):
    """Text command line implementing the engine's CommandLine interface"""

    submitted = Signal(str)  # Emitted when Enter is pressed (text may be empty)
    escape_pressed = Signal()

    def __init__(self, command_names=None, parent=None):
        super().__init__(parent)

        layout = QVBoxLayout()
        layout.setContentsMargins(2, 2, 2, 2)

        self.history = QPlainTextEdit()
        self.history.setReadOnly(True)
        self.history.setMaximumBlockCount(500)
        layout.addWidget(self.history)

        input_layout = QHBoxLayout()
        self.prompt_label = QLabel("Command:")
        input_layout.addWidget(self.prompt_label)

        self.input = QLineEdit()
        self.input.returnPressed.connect(self._on_return)
        if command_names:
            completer = QCompleter(sorted(command_names), self)
            completer.setCaseSensitivity(Qt.CaseInsensitive)
            self.input.setCompleter(completer)
        input_layout.addWidget(self.input, 1)

        layout.addLayout(input_layout)
        self.setLayout(layout)

    def print(self, message: str, severity: MessageType = MessageType.RESPONSE):
        """Append a line to the history"""
        fmt = QTextCharFormat()
        fmt.setForeground(SEVERITY_COLORS.get(severity, SEVERITY_COLORS[MessageType.RESPONSE]))
        cursor = self.history.textCursor()
        cursor.movePosition(QTextCursor.End)
        if not self.history.document().isEmpty():
            cursor.insertBlock()
        cursor.insertText(message, fmt)
        self.history.setTextCursor(cursor)
        self.history.ensureCursorVisible()

    def set_prompt(self, text: str):
        if text:
            self.prompt_label.setText(text)

    def type_text(self, text: str):
        """Forward a keystroke typed elsewhere (e.g. in the viewport)"""
        self.input.setFocus()
        self.input.insert(text)

    def _on_return(self):
        text = self.input.text()
        self.input.clear()
        if text.strip():
            self.print(f"{self.prompt_label.text()} {text}", MessageType.RESPONSE)
        self.submitted.emit(text)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Escape:
            self.escape_pressed.emit()
        else:
            super().keyPressEvent(event)
