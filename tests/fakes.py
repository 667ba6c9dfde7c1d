"""Implementações falsas das portas, para os testes."""

from docextract.core.interfaces.ocr_engine import IOCREngine, OCRError


class FakeOCREngine(IOCREngine):  # pragma: no cover
    """Devolve um texto fixo ou lança o erro configurado."""

    def __init__(self, text: str = "", error: OCRError | None = None) -> None:
        self.text = text
        self.error = error
        self.calls = 0

    async def extract_text(self, image_bytes: bytes) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text
