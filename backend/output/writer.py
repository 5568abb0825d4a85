"""
PDF Report Writer Module
Generates formatted PDF reports of captured SMS transactions.
"""

import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from reportlab.lib.pagesizes import letter
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.enums import TA_CENTER
from extractors.sms_rules import TransactionDirection, format_amount_display
from storage.transaction_store import StoredTransaction

logger = logging.getLogger(__name__)

HEADER_COLOR = colors.HexColor('#ef8145')
STRIPE_COLOR = colors.HexColor('#e8e0dc')
GRID_COLOR = colors.HexColor('#808183')


class PDFReportWriter:
    """Generates PDF reports from stored transactions."""

    def __init__(self, output_path: str, page_size=letter):
        """
        Initialize PDF writer.

        Args:
            output_path: Path where PDF will be saved
            page_size: Page size (default: letter)
        """
        self.output_path = output_path
        self.page_size = page_size
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Setup custom paragraph styles."""
        self.styles.add(ParagraphStyle(
            name='CustomTitle',
            parent=self.styles['Heading1'],
            fontSize=24,
            textColor=colors.HexColor('#1a1a1a'),
            spaceAfter=30,
            alignment=TA_CENTER,
            fontName='Helvetica-Bold'
        ))

        self.styles.add(ParagraphStyle(
            name='SectionHeading',
            parent=self.styles['Heading2'],
            fontSize=16,
            textColor=colors.HexColor('#2c5aa0'),
            spaceAfter=12,
            spaceBefore=20,
            fontName='Helvetica-Bold'
        ))

        self.styles.add(ParagraphStyle(
            name='InfoText',
            parent=self.styles['Normal'],
            fontSize=11,
            textColor=colors.HexColor('#444444'),
            spaceAfter=6
        ))

    def generate_report(self, transactions: list[StoredTransaction], title: str = "SMS Transaction Report"):
        """
        Generate PDF report with credits and debits in separate sections.

        Args:
            transactions: Stored transactions to include
            title: Report title

        Raises:
            ValueError: If transactions is not a list
            Exception: If PDF generation fails
        """
        if transactions is None or not isinstance(transactions, list):
            logger.error("transactions must be a list")
            raise ValueError("transactions must be a list")

        logger.info(f"Generating PDF report: {self.output_path} ({len(transactions)} transactions)")

        credits = [txn for txn in transactions if not txn.is_debit]
        debits = [txn for txn in transactions if txn.is_debit]

        try:
            output_path = Path(self.output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)

            doc = SimpleDocTemplate(
                str(output_path),
                pagesize=self.page_size,
                rightMargin=0.75*inch,
                leftMargin=0.75*inch,
                topMargin=0.75*inch,
                bottomMargin=0.75*inch
            )

            story = []
            story.extend(self._create_header(title, len(transactions)))

            if not transactions:
                logger.warning("No transactions to include in report")
                story.append(Paragraph("No transactions captured yet.", self.styles['InfoText']))
            else:
                story.append(self._create_totals_table(credits, debits))
                for heading, section in (("Credits", credits), ("Debits", debits)):
                    if section:
                        story.append(Paragraph(heading, self.styles['SectionHeading']))
                        story.append(self._create_transaction_table(section))

            doc.build(story)
            logger.info(f"PDF report generated successfully: {self.output_path}")

        except PermissionError as e:
            logger.error(f"Permission denied writing to {self.output_path}: {e}")
            raise Exception(f"Cannot write to {self.output_path}. File may be open or directory is read-only.") from e

        except OSError as e:
            logger.error(f"OS error writing PDF: {e}", exc_info=True)
            raise Exception(f"Failed to write PDF file: {e}") from e

    def _create_header(self, title: str, total_transactions: int) -> list:
        """Create report header section."""
        elements = [
            Paragraph(title, self.styles['CustomTitle']),
            Spacer(1, 0.2 * inch),
        ]

        info_lines = [
            f"<b>Generated:</b> {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            f"<b>Total Transactions:</b> {total_transactions}"
        ]
        for line in info_lines:
            elements.append(Paragraph(line, self.styles['InfoText']))

        elements.append(Spacer(1, 0.3 * inch))
        return elements

    def _create_transaction_table(self, transactions: list[StoredTransaction]) -> Table:
        """
        Create table of transactions with a total row.

        Args:
            transactions: Transactions of a single direction

        Returns:
            reportlab Table object
        """
        direction = transactions[0].direction
        data = [['Captured', 'Merchant', 'Mode', 'Account', 'Amount']]

        for txn in transactions:
            data.append([
                datetime.fromtimestamp(txn.timestamp / 1000).strftime('%Y-%m-%d %H:%M'),
                self._truncate(txn.merchant_name or '[Unknown]', max_length=30),
                txn.transaction_mode.value,
                txn.account_number or '-',
                format_amount_display(txn.amount, direction)
            ])

        total = sum((txn.amount for txn in transactions), Decimal("0"))
        data.append(['', 'TOTAL', '', '', format_amount_display(total, direction)])

        table = Table(data, colWidths=[1.3 * inch, 2.4 * inch, 0.8 * inch, 1.1 * inch, 1.2 * inch])
        table.setStyle(TableStyle([
            # Column header row
            ('BACKGROUND', (0, 0), (-1, 0), HEADER_COLOR),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('ALIGN', (0, 0), (-1, 0), 'CENTER'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 11),

            # Data rows
            ('FONTNAME', (0, 1), (-1, -2), 'Helvetica'),
            ('FONTSIZE', (0, 1), (-1, -2), 9),
            ('ALIGN', (4, 1), (4, -1), 'RIGHT'),

            # Total row
            ('BACKGROUND', (0, -1), (-1, -1), HEADER_COLOR),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('LINEABOVE', (0, -1), (-1, -1), 2, colors.black),

            ('GRID', (0, 0), (-1, -1), 1, GRID_COLOR),
            *[('BACKGROUND', (0, i), (-1, i), STRIPE_COLOR)
              for i in range(2, len(data) - 1, 2)]
        ]))
        return table

    def _create_totals_table(
        self,
        credits: list[StoredTransaction],
        debits: list[StoredTransaction]
    ) -> Table:
        """Create the credits / debits / net summary table."""
        total_credits = sum((txn.amount for txn in credits), Decimal("0"))
        total_debits = sum((txn.amount for txn in debits), Decimal("0"))
        net_total = total_credits - total_debits
        net_display = f"+{net_total:.2f}" if net_total >= 0 else f"{net_total:.2f}"

        data = [
            ['Total Credits', 'Total Debits', 'Net Amount'],
            [
                format_amount_display(total_credits, TransactionDirection.CREDIT),
                format_amount_display(total_debits, TransactionDirection.DEBIT),
                net_display
            ]
        ]

        table = Table(data, colWidths=[2.3 * inch, 2.3 * inch, 2.3 * inch])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), HEADER_COLOR),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, -1), 'Helvetica-Bold'),
            ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
            ('TOPPADDING', (0, 0), (-1, -1), 8),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
            ('GRID', (0, 0), (-1, -1), 1, GRID_COLOR)
        ]))
        return table

    @staticmethod
    def _truncate(value: str, max_length: int = 30) -> str:
        if len(value) <= max_length:
            return value
        return value[:max_length - 3] + "..."


def generate_pdf_report(output_path: str, transactions: list[StoredTransaction], title: str = "SMS Transaction Report"):
    """
    Convenience function to generate a PDF report.

    Args:
        output_path: Path where PDF will be saved
        transactions: Stored transactions to include
        title: Report title
    """
    writer = PDFReportWriter(output_path)
    writer.generate_report(transactions, title=title)
