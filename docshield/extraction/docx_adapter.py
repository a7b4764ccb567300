import io

import docx
from docx.table import Table

from docshield.extraction.exceptions import DecodeError


class DocxAdapter:
    """Extracts raw text from DOCX files using python-docx."""

    def extract(self, docx_bytes: bytes) -> str:
        """Return paragraph and table text in body order, one line per paragraph or row.

        Raises:
            DecodeError: if the file is not a readable DOCX package.
        """
        try:
            document = docx.Document(io.BytesIO(docx_bytes))
            lines: list[str] = []
            for block in document.iter_inner_content():
                if isinstance(block, Table):
                    lines.extend(self._table_lines(block))
                else:
                    lines.append(block.text)
            return "\n".join(lines)
        except DecodeError:
            raise
        except Exception as exc:
            raise DecodeError(f"docx extraction failed: {exc}") from exc

    @staticmethod
    def _table_lines(table: Table) -> list[str]:
        return ["\t".join(cell.text for cell in row.cells) for row in table.rows]
