"""Configuration modules for the medical report analyzer."""

from medreport.app.config.export_defaults import ExportDefaults, get_export_defaults
from medreport.app.config.labels import labels_for

__all__ = [
    "ExportDefaults",
    "get_export_defaults",
    "labels_for",
]
