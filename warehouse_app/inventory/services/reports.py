import csv
import io

from django.http import HttpResponse
from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .transaction_log import TransactionLogService


HEADERS = [
    'Date',
    'Requester',
    'Area',
    'Item code',
    'Item name',
    'Type',
    'Quantity',
    'Asset serial',
    'User',
]


class ReportService:
    """Transaction report exports"""

    @staticmethod
    def transaction_rows(start, end):
        rows = []
        for entry in TransactionLogService.list_by_date_range(start, end):
            rows.append([
                timezone.localtime(entry.requested_at).strftime('%Y-%m-%d %H:%M'),
                entry.requester_name,
                entry.area,
                entry.item.code,
                entry.item.name,
                entry.movement_type,
                '' if entry.quantity is None else str(entry.quantity),
                entry.asset.serial_number if entry.asset else '',
                entry.user.get_username(),
            ])
        return rows

    @staticmethod
    def generate_transactions_report_csv(start, end):
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(HEADERS)
        writer.writerows(ReportService.transaction_rows(start, end))

        response = HttpResponse(content_type='text/csv; charset=utf-8')
        response['Content-Disposition'] = f'attachment; filename="transactions_{start}_{end}.csv"'

        # BOM so spreadsheet tools detect UTF-8
        response.content = '\ufeff' + output.getvalue()

        return response

    @staticmethod
    def generate_transactions_report_pdf(start, end):
        response = HttpResponse(content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename="transactions_{start}_{end}.pdf"'

        doc = SimpleDocTemplate(
            response, pagesize=landscape(A4),
            rightMargin=30, leftMargin=30, topMargin=30, bottomMargin=30,
        )

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            'ReportTitle',
            parent=styles['Heading1'],
            fontSize=18,
            textColor=colors.HexColor('#1a202c'),
            spaceAfter=20,
            alignment=TA_CENTER,
        )

        elements = [
            Paragraph(f"Transaction report {start} to {end}", title_style),
            Spacer(1, 12),
        ]

        rows = ReportService.transaction_rows(start, end)
        if not rows:
            elements.append(Paragraph("No transactions in this period.", styles['Normal']))
        else:
            data = [HEADERS] + [[cell[:40] for cell in row] for row in rows]
            table = Table(data, repeatRows=1)
            table.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
                ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
                ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('FONTSIZE', (0, 0), (-1, 0), 10),
                ('FONTSIZE', (0, 1), (-1, -1), 8),
                ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
                ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
                ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.lightgrey]),
            ]))
            elements.append(table)

        doc.build(elements)

        return response
