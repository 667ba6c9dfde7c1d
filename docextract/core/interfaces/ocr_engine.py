"""
Contract: OCR Engine

Converte a imagem do documento em texto bruto.
Qualquer engine (PaddleOCR local, serviço HTTP, API de nuvem)
deve implementar este contrato.
"""

from abc import ABC, abstractmethod


class OCRError(Exception):
    """Falha de transporte do OCR (serviço inacessível ou imagem rejeitada)."""


class OCRServiceUnavailable(OCRError):
    """Serviço temporariamente indisponível (retentável: 503, conexão, timeout)."""


class OCRServiceError(OCRError):
    """Erro não retentável (4xx/5xx, payload inválido, engine ausente)."""


class IOCREngine(ABC):
    """
    Port: OCR Engine

    Única chamada com I/O do pipeline; deve ser aguardada sem
    bloquear outras invocações concorrentes. Política de retry e
    timeout pertence à implementação, não ao orquestrador.
    """

    @abstractmethod
    async def extract_text(self, image_bytes: bytes) -> str:
        """
        Extrai o texto bruto da imagem.

        Args:
            image_bytes: Imagem em bytes (JPEG/PNG).

        Returns:
            Texto reconhecido, com quebras de linha preservadas quando
            a engine fornece layout. Pode ser vazio.

        Raises:
            OCRError: falha de transporte, sem dado parcial.
        """
        ...
