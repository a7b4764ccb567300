from pathlib import Path

from docshield.scan.exceptions import ScanError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_system_prompt(path: Path | None = None) -> str:
    """Load the base PII-scan system prompt from a file.

    Args:
        path: Path to the prompt file.
              Defaults to the bundled system_prompt.txt.

    Returns:
        The prompt text, stripped.

    Raises:
        ScanError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "system_prompt.txt"
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ScanError(f"Failed to load system prompt: {exc}") from exc
