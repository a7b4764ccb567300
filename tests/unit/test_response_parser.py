from docshield.scan.models import Finding
from docshield.scan.response_parser import is_placeholder, parse_line, parse_response


class TestParseLine:
    def test_accepts_category_and_value(self) -> None:
        assert parse_line("[EMAIL] a@b.com") == Finding(category="EMAIL", value="a@b.com")

    def test_ignores_lines_without_brackets(self) -> None:
        assert parse_line("no brackets here") is None

    def test_rejects_value_of_two_chars(self) -> None:
        assert parse_line("[ID] 12") is None

    def test_accepts_value_of_three_chars(self) -> None:
        assert parse_line("[ID] 123") == Finding(category="ID", value="123")

    def test_uppercases_category(self) -> None:
        assert parse_line("[email] a@b.com") == Finding(category="EMAIL", value="a@b.com")

    def test_allows_leading_whitespace_and_no_gap(self) -> None:
        assert parse_line("   [PHONE]+39 333 1234567  ") == Finding(
            category="PHONE", value="+39 333 1234567"
        )

    def test_accepts_underscore_categories(self) -> None:
        finding = parse_line("[NOME_PERSONA] Mario")
        assert finding is not None
        assert finding.category == "NOME_PERSONA"

    def test_rejects_digits_in_category(self) -> None:
        assert parse_line("[ID2] 12345") is None


class TestIsPlaceholder:
    def test_detects_bracketed_residue(self) -> None:
        assert is_placeholder("[NAME]")

    def test_detects_phrases(self) -> None:
        assert is_placeholder("Not specified")
        assert is_placeholder("information not available")
        assert is_placeholder("synthetic data")

    def test_detects_templated_names(self) -> None:
        assert is_placeholder("PERSON_1")
        assert is_placeholder("PHONE_NUMBER_12")

    def test_real_values_pass(self) -> None:
        assert not is_placeholder("Mario Rossi")
        assert not is_placeholder("+39 333 1234567")

    def test_lowercase_identifiers_are_not_templated_names(self) -> None:
        assert not is_placeholder("user_1")


class TestParseResponse:
    def test_keeps_line_order_and_duplicates(self) -> None:
        raw = "[EMAIL] mario@example.com\nsome chatter\n[SURNAME] Rossi\n[EMAIL] mario@example.com"
        assert parse_response(raw) == [
            Finding("EMAIL", "mario@example.com"),
            Finding("SURNAME", "Rossi"),
            Finding("EMAIL", "mario@example.com"),
        ]

    def test_empty_reply_yields_nothing(self) -> None:
        assert parse_response("") == []

    def test_lenient_mode_keeps_placeholders(self) -> None:
        assert parse_response("[NAME] PERSON_1") == [Finding("NAME", "PERSON_1")]

    def test_strict_mode_drops_placeholders(self) -> None:
        raw = "[NAME] PERSON_1\n[NAME] Mario Rossi\n[CITY] not specified"
        assert parse_response(raw, strict=True) == [Finding("NAME", "Mario Rossi")]
