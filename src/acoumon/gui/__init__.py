"""Desktop GUI implementation built with PySide6/Qt and PyQtGraph.

:mod:`main_window` lays out the live chart, status badge and operator
controls; :mod:`monitor_controller` owns the QTimer that ticks the
:class:`~acoumon.core.monitor.MonitorSession` at display refresh rate.
"""
