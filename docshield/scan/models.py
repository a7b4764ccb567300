from dataclasses import dataclass, field


@dataclass(frozen=True)
class Chunk:
    """Window of normalized document text; ``index`` orders chunks globally."""

    index: int
    offset: int
    text: str


@dataclass(frozen=True)
class Finding:
    """Accepted PII candidate."""

    category: str  # upper-case token, e.g. "EMAIL", "NOME_PERSONA"
    value: str

    @property
    def dedup_key(self) -> str:
        return f"{self.value.lower()}|{self.category}"


@dataclass(frozen=True)
class ChunkSucceeded:
    """Raw model reply for one chunk."""

    chunk_index: int
    raw_response: str


@dataclass(frozen=True)
class ChunkFailed:
    """A chunk whose model call or parsing failed; contributes zero findings."""

    chunk_index: int
    reason: str


ChunkOutcome = ChunkSucceeded | ChunkFailed


@dataclass(frozen=True)
class GenerationOptions:
    """Sampling parameters forwarded opaquely to the model transport."""

    temperature: float = 0.1
    num_ctx: int = 32768
    num_predict: int = 4096

    def as_dict(self) -> dict[str, float | int]:
        return {
            "temperature": self.temperature,
            "num_ctx": self.num_ctx,
            "num_predict": self.num_predict,
        }


@dataclass
class ScanResult:
    """Output of a PII scan."""

    findings: list[Finding] = field(default_factory=list)
    total_chunks: int = 0
    failed_chunks: int = 0
    cancelled: bool = False
