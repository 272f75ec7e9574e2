"""Miscellaneous tools and standalone helpers.

This package contains the headless Matplotlib report exporter (also usable
as the ``acoumon-report`` command) and opt-in debug instrumentation.
"""
