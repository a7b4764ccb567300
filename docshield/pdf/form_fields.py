"""Structured form-field (AcroForm) extraction.

Processing flow:
1. Read every widget with PyMuPDF and group widgets by field name.
2. Resolve each field to display text according to its FieldKind.
3. Clean the field name into a question-like label.
4. Emit a delimited ``label: value`` header block, or nothing.

Failures never propagate: a broken field is skipped, a broken form yields
no header and text extraction carries on.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import ClassVar

import pymupdf

from docshield.extraction.exceptions import FieldExtractionError
from docshield.logging.logger import Log
from docshield.pdf.models import FieldKind, FieldValue, FormField

HEADER_START = "--- FORM DATA ---"
HEADER_END = "--- END FORM DATA ---"

_OFF_STATE = "Off"

_INDEX_TOKEN_RE = re.compile(r"\[\d+\]")
_FIELD_PREFIX_RE = re.compile(r"^[fc]\d+_")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_PDF_STRING_RE = re.compile(r"\(((?:\\.|[^\\)])*)\)")
_PDF_ESCAPE_RE = re.compile(r"\\([()\\])")


def clean_field_label(name: str) -> str:
    """Turn a raw field identifier into a readable label.

    ``topmostSubform[0].Page1[0].f1_firstName[0]`` becomes ``first Name``.
    """
    label = name.split(".")[-1] or name
    label = _INDEX_TOKEN_RE.sub("", label)
    label = _FIELD_PREFIX_RE.sub("", label)
    label = _CAMEL_BOUNDARY_RE.sub(" ", label)
    label = label.replace("_", " ")
    return " ".join(label.split())


def _unescape_pdf_string(literal: str) -> str:
    return _PDF_ESCAPE_RE.sub(r"\1", literal)


class FormFieldExtractor:
    """Builds the form-data context header for form-capable PDFs."""

    _WIDGET_KINDS: ClassVar[dict[int, FieldKind]] = {
        pymupdf.PDF_WIDGET_TYPE_TEXT: FieldKind.TEXT,
        pymupdf.PDF_WIDGET_TYPE_CHECKBOX: FieldKind.CHECKBOX,
        pymupdf.PDF_WIDGET_TYPE_COMBOBOX: FieldKind.SINGLE_SELECT,
        pymupdf.PDF_WIDGET_TYPE_LISTBOX: FieldKind.MULTI_SELECT,
        pymupdf.PDF_WIDGET_TYPE_RADIOBUTTON: FieldKind.RADIO,
    }

    def __init__(
        self,
        *,
        checked_label: str = "Yes",
        unchecked_label: str = "No",
        multi_value_separator: str = ", ",
    ) -> None:
        self._checked_label = checked_label
        self._unchecked_label = unchecked_label
        self._separator = multi_value_separator
        self._resolvers: dict[FieldKind, Callable[[FieldValue], str]] = {
            FieldKind.TEXT: self._resolve_text,
            FieldKind.CHECKBOX: self._resolve_checkbox,
            FieldKind.SINGLE_SELECT: self._resolve_single_select,
            FieldKind.MULTI_SELECT: self._resolve_multi_select,
            FieldKind.RADIO: self._resolve_radio,
        }

    @property
    def resolvers(self) -> dict[FieldKind, Callable[[FieldValue], str]]:
        return dict(self._resolvers)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract_header(self, pdf_bytes: bytes) -> str:
        """Return the form-data header block, or "" when no field has a value."""
        try:
            fields = self.read_fields(pdf_bytes)
        except FieldExtractionError as exc:
            Log.warning(f"Form field extraction skipped: {exc}")
            return ""
        return self.build_header(fields)

    def read_fields(self, pdf_bytes: bytes) -> list[FormField]:
        """Read raw field values, one entry per field name in first-seen order.

        Raises:
            FieldExtractionError: if the document's form cannot be read at all.
        """
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return self._collect_fields(doc)
        except Exception as exc:
            raise FieldExtractionError(f"Form read failed: {exc}") from exc

    def build_header(self, fields: list[FormField]) -> str:
        lines: list[str] = []
        for form_field in fields:
            try:
                value = self.resolve(form_field)
            except FieldExtractionError as exc:
                Log.debug(f"Skipping form field '{form_field.name}': {exc}")
                continue
            label = clean_field_label(form_field.name)
            if not value or not label:
                continue
            lines.append(f"{label}: {value}")

        if not lines:
            return ""
        Log.info(f"Form data: {len(lines)} fields with values")
        return "\n".join([HEADER_START, *lines, HEADER_END]) + "\n\n"

    def resolve(self, form_field: FormField) -> str:
        """Resolve a field to its trimmed display value ("" when unset).

        Raises:
            FieldExtractionError: if the field kind has no resolver or its value
                has an unexpected shape.
        """
        resolver = self._resolvers.get(form_field.kind)
        if resolver is None:
            raise FieldExtractionError(f"No resolver for field kind {form_field.kind!r}")
        try:
            value = resolver(form_field.value).strip()
        except (TypeError, ValueError) as exc:
            raise FieldExtractionError(f"Unreadable value: {exc}") from exc
        return "" if value == _OFF_STATE else value

    # ------------------------------------------------------------------
    # Widget reading
    # ------------------------------------------------------------------

    def _collect_fields(self, doc: pymupdf.Document) -> list[FormField]:
        fields: dict[str, FormField] = {}
        for page in doc:
            for widget in page.widgets():
                try:
                    form_field = self._read_widget(widget)
                except Exception as exc:
                    Log.debug(f"Skipping unreadable widget: {exc}")
                    continue
                if form_field is None:
                    continue
                existing = fields.get(form_field.name)
                if existing is None or (
                    existing.kind is FieldKind.RADIO and not existing.value
                ):
                    fields[form_field.name] = form_field
        return list(fields.values())

    def _read_widget(self, widget: pymupdf.Widget) -> FormField | None:
        kind = self._WIDGET_KINDS.get(widget.field_type)
        name = widget.field_name or ""
        if kind is None or not name:
            return None

        raw = widget.field_value
        if kind is FieldKind.CHECKBOX:
            return FormField(name=name, kind=kind, value=self._is_on(raw))
        if kind is FieldKind.RADIO:
            # Only the selected button of a group carries its on-state.
            if not self._is_on(raw):
                return FormField(name=name, kind=kind, value=None)
            state = widget.on_state() if raw is True else raw
            return FormField(name=name, kind=kind, value=str(state))
        if kind is FieldKind.MULTI_SELECT:
            selected = self._read_selection(widget)
            if selected is not None:
                return FormField(name=name, kind=kind, value=selected)
        return FormField(name=name, kind=kind, value=raw)

    @staticmethod
    def _read_selection(widget: pymupdf.Widget) -> list[str] | None:
        """Read a list box's ``/V`` array, which ``field_value`` reports as "".

        Returns None when the value is not an array, so the caller falls back
        to ``field_value``.
        """
        doc = widget.parent.parent
        xref = widget.xref
        kind, raw = doc.xref_get_key(xref, "V")
        if kind == "null":
            # Widget is a kid; the value lives on its parent field.
            parent_kind, parent_ref = doc.xref_get_key(xref, "Parent")
            if parent_kind != "xref":
                return None
            kind, raw = doc.xref_get_key(int(parent_ref.split()[0]), "V")
        if kind != "array":
            return None
        return [_unescape_pdf_string(item) for item in _PDF_STRING_RE.findall(raw)]

    @staticmethod
    def _is_on(raw: object) -> bool:
        return raw not in (None, False, "", _OFF_STATE)

    # ------------------------------------------------------------------
    # Resolvers
    # ------------------------------------------------------------------

    def _resolve_text(self, value: FieldValue) -> str:
        return "" if value is None else str(value)

    def _resolve_checkbox(self, value: FieldValue) -> str:
        return self._checked_label if value else self._unchecked_label

    def _resolve_single_select(self, value: FieldValue) -> str:
        if isinstance(value, list):
            return str(value[0]) if value else ""
        return "" if value is None else str(value)

    def _resolve_multi_select(self, value: FieldValue) -> str:
        if isinstance(value, list):
            return self._separator.join(str(v) for v in value if str(v).strip())
        return "" if value is None else str(value)

    def _resolve_radio(self, value: FieldValue) -> str:
        return "" if value is None else str(value)
