"""
Output Module - PDF reports of captured transactions.
"""

from .writer import (
    PDFReportWriter,
    generate_pdf_report
)

__all__ = [
    'PDFReportWriter',
    'generate_pdf_report',
]
