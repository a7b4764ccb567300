import io

import docx
import pymupdf
import pytest
from openpyxl import Workbook
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docshield.config.settings import Settings


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sparse_pdf_bytes() -> bytes:
    """Single page carrying exactly 30 non-whitespace characters."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "abcdefghij" * 3)
    c.save()
    return buf.getvalue()


@pytest.fixture()
def dense_pdf_bytes() -> bytes:
    """Single page carrying well over 1000 non-whitespace characters."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.setFont("Helvetica", 8)
    y = 750
    for _ in range(30):
        c.drawString(40, y, "Lorem ipsum dolor sit amet consectetur adipiscing elit sed do")
        y -= 12
    c.save()
    return buf.getvalue()


@pytest.fixture()
def form_pdf_bytes() -> bytes:
    """PDF with a filled ``Surname`` text field and a contact line in the body."""
    doc = pymupdf.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Contact: mario@example.com")

    widget = pymupdf.Widget()
    widget.field_type = pymupdf.PDF_WIDGET_TYPE_TEXT
    widget.field_name = "Surname"
    widget.field_value = "Rossi"
    widget.rect = pymupdf.Rect(72, 100, 272, 120)
    page.add_widget(widget)

    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture()
def checkbox_form_pdf_bytes() -> bytes:
    """PDF with one checked and one unchecked checkbox plus an empty text field."""
    doc = pymupdf.open()
    page = doc.new_page()

    for index, (name, checked) in enumerate([("c1_consentGiven[0]", True), ("newsletter", False)]):
        widget = pymupdf.Widget()
        widget.field_type = pymupdf.PDF_WIDGET_TYPE_CHECKBOX
        widget.field_name = name
        widget.field_value = checked
        widget.rect = pymupdf.Rect(72, 100 + index * 40, 92, 120 + index * 40)
        page.add_widget(widget)

    empty = pymupdf.Widget()
    empty.field_type = pymupdf.PDF_WIDGET_TYPE_TEXT
    empty.field_name = "notes"
    empty.field_value = ""
    empty.rect = pymupdf.Rect(72, 200, 272, 220)
    page.add_widget(empty)

    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture()
def choice_form_pdf_bytes() -> bytes:
    """PDF with a radio group, a combo box and a multi-select list box."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Registration form")
    form = c.acroForm

    for index, (option, selected) in enumerate([("male", False), ("female", True)]):
        form.radio(
            name="gender",
            value=option,
            selected=selected,
            x=72 + index * 40,
            y=650,
            size=20,
        )
    form.choice(
        name="city",
        value="Roma",
        options=["Torino", "Roma", "Milano"],
        x=72,
        y=580,
        width=200,
        height=20,
    )
    form.listbox(
        name="langs",
        value=["it", "fr"],
        options=["it", "en", "fr"],
        fieldFlags="multiSelect",
        x=72,
        y=480,
        width=200,
        height=60,
    )

    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def docx_bytes() -> bytes:
    """DOCX with a paragraph, a table and a trailing paragraph."""
    document = docx.Document()
    document.add_paragraph("Patient: Mario Rossi")
    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Phone"
    table.cell(0, 1).text = "+39 333 1234567"
    table.cell(1, 0).text = "City"
    table.cell(1, 1).text = "Torino"
    document.add_paragraph("End of record")
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture()
def xlsx_bytes() -> bytes:
    """Workbook with a filled sheet and an empty one."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Contacts"
    sheet.append(["Name", "Email"])
    sheet.append(["Mario Rossi", "mario@example.com"])
    workbook.create_sheet("Empty")
    buf = io.BytesIO()
    workbook.save(buf)
    return buf.getvalue()


@pytest.fixture()
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, model_provider="example", ocr_enabled=False)
