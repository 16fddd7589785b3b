import torch
from PyQt5.QtWidgets import (QDialog, QVBoxLayout, QHBoxLayout, QSpinBox, QDoubleSpinBox,
                             QPushButton, QComboBox, QGroupBox, QFormLayout)
from .constants import (DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_INTERVAL, DEFAULT_DENSITY,
                        DEFAULT_FRAME_SKIP, DEFAULT_BACKEND)


class PowerOfTwoSpinBox(QSpinBox):
    def __init__(self, value, parent=None):
        super().__init__(parent)
        self.setRange(1, 65536)
        self.setValue(value)

    def stepBy(self, steps):
        # Double or halve the value when stepping
        if steps > 0:
            for _ in range(steps):
                self.setValue(self.value() * 2)
        else:
            for _ in range(-steps):
                self.setValue(max(1, self.value() // 2))


class SettingsDialog(QDialog):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Game of Life Settings")
        self.setup_ui()

    def setup_ui(self):
        layout = QVBoxLayout()

        # Grid Settings
        grid_group = QGroupBox("Grid Settings")
        grid_layout = QFormLayout()

        self.width_spin = PowerOfTwoSpinBox(DEFAULT_WIDTH)
        grid_layout.addRow("Grid Width:", self.width_spin)

        self.height_spin = PowerOfTwoSpinBox(DEFAULT_HEIGHT)
        grid_layout.addRow("Grid Height:", self.height_spin)

        self.density_spin = QDoubleSpinBox()
        self.density_spin.setRange(0.0, 1.0)
        self.density_spin.setValue(DEFAULT_DENSITY)
        self.density_spin.setSingleStep(0.05)
        self.density_spin.setDecimals(2)
        grid_layout.addRow("Random Fill Density:", self.density_spin)

        grid_group.setLayout(grid_layout)
        layout.addWidget(grid_group)

        # Animation Settings
        anim_group = QGroupBox("Animation Settings")
        anim_layout = QFormLayout()

        self.interval_spin = QSpinBox()
        self.interval_spin.setRange(10, 1000)
        self.interval_spin.setValue(DEFAULT_INTERVAL)
        self.interval_spin.setSingleStep(10)
        anim_layout.addRow("Update Interval (ms):", self.interval_spin)

        self.frame_skip_spin = QSpinBox()
        self.frame_skip_spin.setRange(1, 10)
        self.frame_skip_spin.setValue(DEFAULT_FRAME_SKIP)
        anim_layout.addRow("Frame Skip:", self.frame_skip_spin)

        anim_group.setLayout(anim_layout)
        layout.addWidget(anim_group)

        # Compute Settings
        device_group = QGroupBox("Compute Settings")
        device_layout = QFormLayout()

        self.device_combo = QComboBox()
        if torch.cuda.is_available():
            self.device_combo.addItem("CUDA (GPU)", "cuda")
            self.device_combo.addItem("CPU", "cpu")
            self.device_combo.setCurrentIndex(0)
        else:
            self.device_combo.addItem("CPU (CUDA not available)", "cpu")
        device_layout.addRow("Device:", self.device_combo)

        self.backend_combo = QComboBox()
        self.backend_combo.addItem("Convolution (torch)", "torch")
        self.backend_combo.addItem("Cell by cell", "scalar")
        self.backend_combo.setCurrentIndex(self.backend_combo.findData(DEFAULT_BACKEND))
        device_layout.addRow("Tick Backend:", self.backend_combo)

        device_group.setLayout(device_layout)
        layout.addWidget(device_group)

        # Buttons
        button_layout = QHBoxLayout()
        self.ok_button = QPushButton("Start Simulation")
        self.cancel_button = QPushButton("Cancel")
        button_layout.addWidget(self.ok_button)
        button_layout.addWidget(self.cancel_button)
        layout.addLayout(button_layout)

        self.setLayout(layout)

        # Connect signals
        self.ok_button.clicked.connect(self.accept)
        self.cancel_button.clicked.connect(self.reject)
