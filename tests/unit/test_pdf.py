"""Unit tests for PDF text reading"""

from datetime import date
from nalo_connector.domain.extraction import extract
from nalo_connector.infrastructure.pdf import read_pdf_text


def test_read_pdf_text_unreadable_document():
    """Test content that is not a PDF gives empty text instead of failing"""
    assert read_pdf_text(b"this is not a pdf") == ""


def test_read_pdf_text_transfer_invoice(transfer_pdf: bytes):
    """Test each printed line comes back as its own line, accents included"""
    lines = read_pdf_text(transfer_pdf).split("\n")

    assert "Paris, le 14 mars 2023" in lines
    assert "Versement complémentaire" in lines
    assert lines[-5:] == ["Montant", "brut", "versé:", "1 234,56", "Euros"]


def test_extract_from_transfer_pdf(transfer_pdf: bytes):
    fields = extract(read_pdf_text(transfer_pdf))

    assert fields.ignore is False
    assert fields.date == date(2023, 3, 14)
    assert fields.amount == 1234.56


def test_extract_from_arbitrage_pdf(arbitrage_pdf: bytes):
    assert extract(read_pdf_text(arbitrage_pdf)).ignore is True
