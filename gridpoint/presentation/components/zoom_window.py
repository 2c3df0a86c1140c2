# gridpoint/presentation/components/zoom_window.py
from typing import Optional, Tuple

from PySide6.QtCore import Qt, QRect, QRectF, Signal
from PySide6.QtGui import QColor, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QLabel, QMainWindow, QWidget

from gridpoint.domain.models.geometry import Rect
from gridpoint.domain.models.selection import ZoomView


class ZoomWindow(QMainWindow):
    """
    Magnified view of the area around the selected cell.

    The crop is stretched to exactly the viewport size, so a click at viewport
    point (vx, vy) is the point the zoom transform maps back to the screen.
    """
    point_picked = Signal(float, float)  # viewport x, y
    back_requested = Signal()
    cancelled = Signal()
    closed = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)

        self.setWindowFlags(
            Qt.FramelessWindowHint |
            Qt.WindowStaysOnTopHint |
            Qt.Tool
        )
        self.setCursor(Qt.CrossCursor)

        self.central_widget = QWidget(self)
        self.setCentralWidget(self.central_widget)

        self.view: Optional[ZoomView] = None
        self.pixmap: Optional[QPixmap] = None
        self.cell_outline: Optional[Tuple[float, float, float, float]] = None

        self.hint = QLabel("Click the exact target. B returns to the grid, Esc cancels.", self)
        self.hint.setStyleSheet(
            "color: white; background-color: rgba(0, 0, 0, 150); padding: 6px; border-radius: 4px;"
        )
        self.hint.adjustSize()

    def load(self, view: ZoomView, pixmap: Optional[QPixmap], usable_area: Rect,
             cell_outline: Optional[Tuple[float, float, float, float]] = None) -> None:
        """
        Size the window to the viewport and center it inside the usable area.

        ``cell_outline`` is the selected cell in viewport coordinates; the
        padding around it is context only.
        """
        self.view = view
        self.pixmap = pixmap
        self.cell_outline = cell_outline

        width, height = view.viewport.width, view.viewport.height
        self.setFixedSize(width, height)
        left = usable_area.x + (usable_area.width - width) // 2
        top = usable_area.y + (usable_area.height - height) // 2
        self.setGeometry(QRect(left, top, width, height))

        self.hint.move((width - self.hint.width()) // 2, height - self.hint.height() - 10)
        self.update()

    def paintEvent(self, event):
        if self.view is None:
            return
        painter = QPainter(self)
        if self.pixmap is not None:
            painter.drawPixmap(self.rect(), self.pixmap)
        else:
            painter.fillRect(self.rect(), QColor(40, 40, 40))
        painter.setPen(QPen(QColor(58, 124, 165), 3))
        painter.drawRect(self.rect().adjusted(1, 1, -2, -2))
        if self.cell_outline is not None:
            painter.setPen(QPen(QColor(255, 215, 0), 1, Qt.DashLine))
            painter.drawRect(QRectF(*self.cell_outline))

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton and self.view is not None:
            position = event.position()
            self.point_picked.emit(position.x(), position.y())

    def keyPressEvent(self, event):
        key = event.key()
        if key == Qt.Key_Escape:
            self.cancelled.emit()
        elif key in (Qt.Key_B, Qt.Key_Backspace):
            self.back_requested.emit()
        else:
            super().keyPressEvent(event)

    def closeEvent(self, event):
        self.closed.emit()
        event.accept()
