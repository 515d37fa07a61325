from pathlib import Path
from typing import Optional

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QPixmap
from PyQt5.QtWidgets import (
    QComboBox,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from IC_Libs.ImageEditingLib.editing_errors import ImageLoadError
from IC_Libs.ImageEditingLib.filter_engine import FilterKind
from IC_Libs.ImageEditingLib.image_editing_ops import encode_png
from IC_Libs.ImageEditingLib.image_models import PixelBuffer
from IC_Libs.SessionLib.editor_session import EditorSession
from IC_Libs.SessionLib.platform_presets import list_presets
from IC_Libs.SessionLib.viewport import fit_display_size, screen_to_image
from IC_Libs.constants import ASPECT_RATIO_OPTIONS, GRADIENT_PRESETS, MAX_BORDER_WIDTH


class CanvasLabel(QLabel):
    """Preview label that reports pointer events in widget coordinates."""

    pressed = pyqtSignal(float, float)
    moved = pyqtSignal(float, float)
    released = pyqtSignal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setMouseTracking(False)

    def mousePressEvent(self, event) -> None:
        self.pressed.emit(float(event.x()), float(event.y()))

    def mouseMoveEvent(self, event) -> None:
        self.moved.emit(float(event.x()), float(event.y()))

    def mouseReleaseEvent(self, event) -> None:
        self.released.emit()

    def leaveEvent(self, event) -> None:
        self.released.emit()


class ImageCraftEditorWindow(QMainWindow):
    def __init__(self, session: Optional[EditorSession] = None) -> None:
        super().__init__()
        self.setWindowTitle("ImageCraft Editor")
        self.resize(1200, 800)

        self.session = session or EditorSession(on_notice=self._show_info)
        self._display_size = (0, 0)

        self._build_ui()
        self._connect_signals()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        root = QHBoxLayout(central)
        controls_col = QVBoxLayout()

        self.btn_load = QPushButton("Load Image")
        self.btn_rotate_left = QPushButton("Rotate Left")
        self.btn_rotate_right = QPushButton("Rotate Right")
        self.btn_zoom_in = QPushButton("Zoom In")
        self.btn_zoom_out = QPushButton("Zoom Out")
        self.btn_flip_h = QPushButton("Flip Horizontal")
        self.btn_flip_v = QPushButton("Flip Vertical")
        self.btn_circle = QPushButton("Circle")
        self.btn_crop = QPushButton("Crop")
        self.btn_reset_crop = QPushButton("Reset Crop")
        self.btn_reset_position = QPushButton("Reset Pos")
        self.btn_save = QPushButton("Download")

        self.spin_border = QSpinBox()
        self.spin_border.setRange(0, MAX_BORDER_WIDTH)

        self.combo_gradient = QComboBox()
        self.combo_gradient.addItems(list(GRADIENT_PRESETS))
        self.combo_gradient.setCurrentText("Solid")

        self.combo_filter = QComboBox()
        self.combo_filter.addItems([kind.value for kind in FilterKind])

        self.combo_aspect = QComboBox()
        self.combo_aspect.addItems(list(ASPECT_RATIO_OPTIONS))

        self.combo_preset = QComboBox()
        self.combo_preset.addItems(list_presets())
        self.btn_apply_preset = QPushButton("Apply Preset")

        self.canvas = CanvasLabel("Load an image to start")
        self.canvas.setAlignment(Qt.AlignCenter)
        self.canvas.setMinimumSize(600, 600)
        self.canvas.setStyleSheet("border: 1px solid #888;")

        for widget in (
            self.btn_load,
            self.btn_rotate_left,
            self.btn_rotate_right,
            self.btn_zoom_in,
            self.btn_zoom_out,
            self.btn_flip_h,
            self.btn_flip_v,
            self.btn_circle,
            self.btn_crop,
            self.btn_reset_crop,
            self.btn_reset_position,
        ):
            controls_col.addWidget(widget)

        controls_col.addWidget(QLabel("Border Width"))
        controls_col.addWidget(self.spin_border)
        controls_col.addWidget(QLabel("Border Gradient"))
        controls_col.addWidget(self.combo_gradient)
        controls_col.addWidget(QLabel("Filter"))
        controls_col.addWidget(self.combo_filter)
        controls_col.addWidget(QLabel("Aspect Ratio"))
        controls_col.addWidget(self.combo_aspect)
        controls_col.addWidget(QLabel("Platform Preset"))
        controls_col.addWidget(self.combo_preset)
        controls_col.addWidget(self.btn_apply_preset)
        controls_col.addStretch(1)
        controls_col.addWidget(self.btn_save)

        root.addLayout(controls_col, stretch=1)
        root.addWidget(self.canvas, stretch=3)

    def _connect_signals(self) -> None:
        state = self.session.state
        self.btn_load.clicked.connect(self.load_image)
        self.btn_rotate_left.clicked.connect(lambda: self._edit(lambda: state.rotate(-90)))
        self.btn_rotate_right.clicked.connect(lambda: self._edit(lambda: state.rotate(90)))
        self.btn_zoom_in.clicked.connect(lambda: self._edit(state.zoom_in))
        self.btn_zoom_out.clicked.connect(lambda: self._edit(state.zoom_out))
        self.btn_flip_h.clicked.connect(lambda: self._edit(state.toggle_flip_horizontal))
        self.btn_flip_v.clicked.connect(lambda: self._edit(state.toggle_flip_vertical))
        self.btn_circle.clicked.connect(lambda: self._edit(state.toggle_circular_mask))
        self.btn_crop.clicked.connect(lambda: self._edit(self.session.toggle_crop_mode))
        self.btn_reset_crop.clicked.connect(lambda: self._edit(self.session.reset_crop))
        self.btn_reset_position.clicked.connect(lambda: self._edit(self.session.reset_position))
        self.btn_apply_preset.clicked.connect(self.apply_preset)
        self.btn_save.clicked.connect(self.save_image)

        self.spin_border.valueChanged.connect(lambda value: self._edit(lambda: state.set_border_width(value)))
        self.combo_gradient.currentTextChanged.connect(self.on_gradient_selected)
        self.combo_filter.currentTextChanged.connect(lambda value: self._edit(lambda: state.set_filter(value)))
        self.combo_aspect.currentTextChanged.connect(
            lambda name: self.session.set_aspect_ratio(ASPECT_RATIO_OPTIONS[name])
        )

        self.canvas.pressed.connect(self.on_canvas_pressed)
        self.canvas.moved.connect(self.on_canvas_moved)
        self.canvas.released.connect(self.on_canvas_released)

    def _edit(self, command) -> None:
        command()
        self.refresh_preview()

    def load_image(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Select Image",
            "",
            "Images (*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp)",
        )
        if not file_path:
            return
        self.open_path(Path(file_path))

    def open_path(self, path: Path) -> None:
        try:
            self.session.load_file(path)
        except ImageLoadError as exc:
            QMessageBox.warning(self, "Invalid file type", str(exc))
            return
        self.refresh_preview()

    def on_gradient_selected(self, name: str) -> None:
        self._edit(lambda: self.session.state.set_border_gradient(GRADIENT_PRESETS.get(name, "")))

    def apply_preset(self) -> None:
        self._edit(lambda: self.session.apply_preset(self.combo_preset.currentText()))
        self.spin_border.blockSignals(True)
        self.spin_border.setValue(self.session.state.border.width_px)
        self.spin_border.blockSignals(False)

    def _to_image_coords(self, x: float, y: float):
        frame = self.session.working
        display_w, display_h = self._display_size
        if frame is None or display_w <= 0 or display_h <= 0:
            return None
        origin = (
            (self.canvas.width() - display_w) / 2,
            (self.canvas.height() - display_h) / 2,
        )
        return screen_to_image(x, y, origin, self._display_size, frame.size)

    def on_canvas_pressed(self, x: float, y: float) -> None:
        point = self._to_image_coords(x, y)
        if point is not None:
            self._edit(lambda: self.session.pointer_down(*point))

    def on_canvas_moved(self, x: float, y: float) -> None:
        point = self._to_image_coords(x, y)
        if point is not None:
            self._edit(lambda: self.session.pointer_move(*point))

    def on_canvas_released(self) -> None:
        self._edit(self.session.pointer_up)

    def save_image(self) -> None:
        if not self.session.has_image:
            return
        folder = QFileDialog.getExistingDirectory(self, "Select Save Directory")
        if not folder:
            return
        self.session.save_export(Path(folder))

    def refresh_preview(self) -> None:
        frame = self.session.get_current_frame()
        if frame is None:
            self.canvas.setText("Load an image to start")
            self._display_size = (0, 0)
            return
        self._set_preview(frame)

    def _set_preview(self, frame: PixelBuffer) -> None:
        pixmap = QPixmap()
        if not pixmap.loadFromData(encode_png(frame), "PNG"):
            self.canvas.setText("Preview failed")
            return

        self._display_size = fit_display_size(
            frame.size,
            (self.canvas.width(), self.canvas.height()),
        )
        scaled = pixmap.scaled(
            self._display_size[0],
            self._display_size[1],
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self.canvas.setPixmap(scaled)

    def _show_info(self, title: str, message: str) -> None:
        QMessageBox.information(self, title, message)
