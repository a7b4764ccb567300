import io

import pandas as pd

from docshield.extraction.exceptions import DecodeError


class XlsxAdapter:
    """Renders every worksheet as tab-separated text using pandas."""

    def extract_sheets(self, workbook_bytes: bytes) -> list[tuple[str, str]]:
        """Return ``(sheet_name, text)`` pairs in workbook order, skipping empty sheets.

        Raises:
            DecodeError: if the workbook cannot be read.
        """
        try:
            frames = pd.read_excel(
                io.BytesIO(workbook_bytes), sheet_name=None, header=None, dtype=str
            )
        except Exception as exc:
            raise DecodeError(f"spreadsheet extraction failed: {exc}") from exc

        sheets: list[tuple[str, str]] = []
        for name, frame in frames.items():
            text = frame.fillna("").to_csv(sep="\t", index=False, header=False)
            if text.strip():
                sheets.append((str(name), text.strip()))
        return sheets
