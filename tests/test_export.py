"""Tests for the CSV exporter."""

from datetime import date

import pytest

from smartspend.export import csv_exporter
from smartspend.export import (
    BOM,
    NothingToExportError,
    export_filename,
    select_export_rows,
    to_delimited_text,
)


class TestDelimitedText:
    """Tests for CSV rendering."""
    
    def test_bom_and_header(self, sample_ledger):
        text = to_delimited_text(sample_ledger, "$")
        assert text.startswith(BOM)
        assert text[len(BOM):].split("\n")[0] == "Date,Description,Category,Type,Amount,Currency"
    
    def test_row_quoting_and_amount(self, make_tx):
        tx = make_tx(amount="200", description='Lunch "to go"', date="2024-01-02")
        lines = to_delimited_text([tx], "$").split("\n")
        assert lines[1] == '"2024-01-02","Lunch ""to go""","Food","expense",200.00,"$"'
    
    def test_amount_rounded_to_cents(self, make_tx):
        line = to_delimited_text([make_tx(amount="3.456")], "₹").split("\n")[1]
        assert line.endswith(',3.46,"₹"')
    
    def test_corrupt_amount_exports_as_zero(self, make_tx):
        line = to_delimited_text([make_tx(amount="oops")], "$").split("\n")[1]
        assert ",0.00," in line
    
    def test_amount_beyond_default_precision(self, make_tx):
        line = to_delimited_text([make_tx(amount="1e30")], "$").split("\n")[1]
        assert line.endswith(',1000000000000000000000000000000.00,"$"')
    
    def test_one_row_per_transaction(self, sample_ledger):
        lines = to_delimited_text(sample_ledger, "$").strip("\n").split("\n")
        assert len(lines) == 1 + len(sample_ledger)
    
    def test_empty_is_an_error(self):
        with pytest.raises(NothingToExportError):
            to_delimited_text([], "$")


class TestSelectExportRows:

    def test_uses_filtered_view(self, sample_ledger):
        assert select_export_rows(sample_ledger[:1], sample_ledger) == sample_ledger[:1]
    
    def test_falls_back_to_full_ledger(self, sample_ledger):
        assert select_export_rows([], sample_ledger) == sample_ledger
    
    def test_both_empty_is_an_error(self):
        with pytest.raises(NothingToExportError):
            select_export_rows([], [])


class TestExportFile:

    def test_filename(self):
        assert export_filename("smartspend", date(2024, 5, 6)) == "smartspend_export_2024-05-06.csv"
    
    def test_download_bytes_carry_single_bom(self, sample_ledger):
        raw = to_delimited_text(sample_ledger, "$").encode("utf-8")
        assert raw.startswith(b"\xef\xbb\xbf")
        assert not raw[3:].startswith(b"\xef\xbb\xbf")
    
    def test_module_documents_row_format(self):
        assert '"Lunch ""to go"" box"' in csv_exporter.__doc__


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
