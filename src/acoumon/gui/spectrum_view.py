"""PyQtGraph chart that renders one :class:`RenderSeries` per tick."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import numpy as np
import pyqtgraph as pg
from pyqtgraph.exporters import ImageExporter
from PySide6.QtWidgets import QVBoxLayout, QWidget

from ..core.models import RenderSeries

logger = logging.getLogger(__name__)

NORMAL_RGB = (0, 255, 204)
FAULT_RGB = (255, 51, 102)
Y_RANGE = (0.0, 255.0)


class SpectrumPlotWidget(QWidget):
    """Filled magnitude curve over Hz, recoloured when the frame flags a fault."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._plot = pg.PlotWidget(self)
        self._plot.setBackground((0, 0, 0, 80))
        self._plot.setMenuEnabled(False)
        self._plot.hideButtons()
        self._plot.showGrid(x=True, y=False, alpha=0.3)
        self._plot.setYRange(*Y_RANGE, padding=0.0)
        self._plot.enableAutoRange(x=True, y=False)
        self._plot.setMouseEnabled(x=False, y=False)
        self._plot.getAxis("left").hide()
        self._plot.setLabel("bottom", "Frequency", units="Hz")
        layout.addWidget(self._plot)

        self._curve = self._plot.plot([], [], fillLevel=0.0)
        self._fault_color: Optional[bool] = None
        self._apply_color(False)

    @property
    def plot_item(self) -> pg.PlotItem:
        return self._plot.getPlotItem()

    def _apply_color(self, fault: bool) -> None:
        if fault == self._fault_color:
            return
        rgb = FAULT_RGB if fault else NORMAL_RGB
        self._curve.setPen(pg.mkPen(color=rgb, width=2))
        self._curve.setBrush(pg.mkBrush(*rgb, 90))
        self._fault_color = fault

    def set_series(self, series: RenderSeries) -> None:
        x = np.asarray(series.labels, dtype=float)
        y = np.asarray(series.values, dtype=float)
        self._apply_color(bool(series.fault_color))
        self._curve.setData(x, y)

    def clear(self) -> None:
        self._curve.setData([], [])
        self._apply_color(False)

    def export_png(self, path: Path) -> Path:
        """Save the currently displayed chart as a PNG image."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        exporter = ImageExporter(self.plot_item)
        exporter.export(str(path))
        logger.info("Chart snapshot saved to %s", path)
        return path
