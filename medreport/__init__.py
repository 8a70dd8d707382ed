"""
medreport - AI Medical Report Analyzer
"""

__version__ = "1.0.0"
__author__ = "medreport Team"
__description__ = "Structured analysis of medical lab report images with PDF, PNG and HTML export"
