from docshield.scan.models import Chunk


def chunk_text(text: str, chunk_size: int, overlap: int) -> list[Chunk]:
    """Split text into fixed-size windows that overlap by exactly *overlap* chars.

    The window advances by ``chunk_size - overlap``. The last chunk may be
    shorter than *chunk_size*; text no longer than *chunk_size* yields one
    chunk equal to the text, and empty text yields no chunks.

    Raises:
        ValueError: if chunk_size is not positive or overlap is outside
            ``[0, chunk_size)``.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if overlap < 0 or overlap >= chunk_size:
        raise ValueError("overlap must be non-negative and less than chunk_size")

    if not text:
        return []

    step = chunk_size - overlap
    chunks: list[Chunk] = []
    start = 0
    while True:
        end = min(start + chunk_size, len(text))
        chunks.append(Chunk(index=len(chunks), offset=start, text=text[start:end]))
        if end >= len(text):
            break
        start += step
    return chunks
