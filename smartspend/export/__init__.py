"""Export package."""

from smartspend.export.csv_exporter import (
    BOM,
    HEADER,
    NothingToExportError,
    export_filename,
    select_export_rows,
    to_delimited_text,
)

__all__ = [
    "BOM",
    "HEADER",
    "NothingToExportError",
    "export_filename",
    "select_export_rows",
    "to_delimited_text",
]
