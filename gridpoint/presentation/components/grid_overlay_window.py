# gridpoint/presentation/components/grid_overlay_window.py
"""
Full-screen grid overlay.

Paints the activation screenshot with the numbered grid on top and turns
mouse and keyboard input into cell selection signals.
"""
from typing import List, Optional

from PySide6.QtCore import Qt, QRect, Signal
from PySide6.QtGui import QColor, QFont, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QLabel, QMainWindow, QWidget

from gridpoint.domain.geometry.grid_model import grid_lines, iter_cells
from gridpoint.domain.models.selection import ActivationSnapshot


class GridOverlayWindow(QMainWindow):
    """
    A borderless, topmost window covering one display.

    Clicks are reported in absolute screen coordinates; the session decides
    which cell they hit.
    """
    point_picked = Signal(float, float)  # absolute x, y
    digit_typed = Signal(str)
    digit_erased = Signal()
    digits_committed = Signal()
    cancelled = Signal()
    closed = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)

        self.setWindowFlags(
            Qt.FramelessWindowHint |
            Qt.WindowStaysOnTopHint |
            Qt.Tool  # So it doesn't appear in taskbar
        )
        self.setCursor(Qt.CrossCursor)

        self.central_widget = QWidget(self)
        self.setCentralWidget(self.central_widget)

        self.snapshot: Optional[ActivationSnapshot] = None
        self.background: Optional[QPixmap] = None
        self._xs: List[int] = []
        self._ys: List[int] = []

        self.instructions = QLabel(
            "Click a cell or type its number. Enter confirms, Backspace erases, Esc cancels.", self
        )
        self.instructions.setStyleSheet(
            "color: white; background-color: rgba(0, 0, 0, 150); padding: 10px; border-radius: 5px;"
        )
        self.instructions.setAlignment(Qt.AlignCenter)
        self.instructions.adjustSize()

        self.entry_label = QLabel(self)
        self.entry_label.setStyleSheet(
            "color: white; background-color: rgba(58, 124, 165, 220); padding: 8px 14px;"
            "border-radius: 5px; font-size: 20px; font-weight: bold;"
        )
        self.entry_label.hide()

    def load(self, snapshot: ActivationSnapshot, background: Optional[QPixmap]) -> None:
        """Lay the window over the snapshot's display and prepare the grid."""
        self.snapshot = snapshot
        self.background = background

        display = snapshot.display
        self.setGeometry(QRect(display.x, display.y, display.width, display.height))
        self._xs, self._ys = grid_lines(display, snapshot.config.grid)

        self.instructions.move(
            (display.width - self.instructions.width()) // 2,
            display.height - self.instructions.height() - 50
        )
        self.set_entry("")
        self.update()

    def set_entry(self, digits: str) -> None:
        """Show the cell number typed so far."""
        if not digits:
            self.entry_label.hide()
            return
        self.entry_label.setText(f"Cell {digits}")
        self.entry_label.adjustSize()
        self.entry_label.move((self.width() - self.entry_label.width()) // 2, 40)
        self.entry_label.show()
        self.entry_label.raise_()

    def paintEvent(self, event):
        """Paint the frozen screenshot, the grid and the cell numbers."""
        if self.snapshot is None:
            return

        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        if self.background is not None:
            painter.drawPixmap(self.rect(), self.background)
        painter.fillRect(self.rect(), QColor(0, 0, 0, 60))

        display = self.snapshot.display
        painter.setPen(QPen(QColor(255, 64, 64, 200), 1))
        for x in self._xs[1:-1]:
            painter.drawLine(x - display.x, 0, x - display.x, display.height)
        for y in self._ys[1:-1]:
            painter.drawLine(0, y - display.y, display.width, y - display.y)

        font = QFont()
        font.setBold(True)
        font.setPointSize(14)
        painter.setFont(font)
        for cell in iter_cells(display, self.snapshot.config.grid):
            local = QRect(cell.rect.x - display.x, cell.rect.y - display.y, cell.rect.width, cell.rect.height)
            # dark halo first so labels read on light screens
            painter.setPen(QColor(0, 0, 0, 200))
            painter.drawText(local.translated(1, 1), Qt.AlignCenter, cell.label)
            painter.setPen(QColor(255, 255, 255))
            painter.drawText(local, Qt.AlignCenter, cell.label)

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton and self.snapshot is not None:
            position = event.position()
            self.point_picked.emit(self.snapshot.display.x + position.x(),
                                   self.snapshot.display.y + position.y())

    def keyPressEvent(self, event):
        """Digits build a cell number; Enter, Backspace and Esc act on it."""
        key = event.key()
        text = event.text()
        if key == Qt.Key_Escape:
            self.cancelled.emit()
        elif key in (Qt.Key_Return, Qt.Key_Enter):
            self.digits_committed.emit()
        elif key == Qt.Key_Backspace:
            self.digit_erased.emit()
        elif len(text) == 1 and text.isdigit():
            self.digit_typed.emit(text)
        else:
            super().keyPressEvent(event)

    def closeEvent(self, event):
        # only reached for window manager or Alt+F4 closes; the service uses hide()
        self.closed.emit()
        event.accept()
