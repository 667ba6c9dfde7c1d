"""
Adapter: PaddleOCR Engine

OCR local com PaddleOCR. As linhas reconhecidas são ordenadas de
cima para baixo e unidas com quebra de linha, preservando o layout
que os extratores de identidade esperam.
"""

import asyncio
import logging
from typing import Any

import cv2
import numpy as np

from docextract.core.interfaces.ocr_engine import IOCREngine, OCRServiceError

logger = logging.getLogger(__name__)


class PaddleOCREngine(IOCREngine):
    """
    OCR usando PaddleOCR, executado fora do event loop.

    Pipeline:
        1. Decodifica a imagem (OpenCV)
        2. PaddleOCR extrai caixas + texto
        3. Linhas ordenadas por (y, x) e unidas com "\\n"
    """

    def __init__(self, lang: str = "pt", use_gpu: bool = False):
        self._lang = lang
        self._use_gpu = use_gpu
        self._engine = None  # Lazy init (PaddleOCR é pesado)

    def _get_engine(self) -> Any:
        """Inicializa PaddleOCR sob demanda."""
        if self._engine is None:
            try:
                from paddleocr import PaddleOCR
            except ImportError as e:
                raise OCRServiceError("PaddleOCR não instalado") from e

            self._engine = PaddleOCR(
                use_angle_cls=True,
                lang=self._lang,
                use_gpu=self._use_gpu,
                show_log=False,
            )
            logger.info("PaddleOCR inicializado (lang=%s, gpu=%s)", self._lang, self._use_gpu)
        return self._engine

    async def extract_text(self, image_bytes: bytes) -> str:
        return await asyncio.to_thread(self._extract_sync, image_bytes)

    def _extract_sync(self, image_bytes: bytes) -> str:
        img_array = np.frombuffer(image_bytes, dtype=np.uint8)
        img = cv2.imdecode(img_array, cv2.IMREAD_COLOR) if img_array.size else None
        if img is None:
            raise OCRServiceError("Imagem inválida")

        engine = self._get_engine()
        try:
            result = engine.ocr(img, cls=True)
        except Exception as e:
            logger.error("PaddleOCR falhou: %s", e)
            raise OCRServiceError(f"PaddleOCR falhou: {e}") from e

        if not result or not result[0]:
            logger.info("Nenhum texto detectado")
            return ""

        return self.join_lines(result[0])

    @staticmethod
    def join_lines(detections: list) -> str:
        """[[bbox, (texto, conf)], ...] → texto em ordem de leitura."""
        lines = []
        for bbox, (text, _conf) in detections:
            top = min(point[1] for point in bbox)
            left = min(point[0] for point in bbox)
            lines.append((int(top), int(left), text))
        lines.sort(key=lambda line: (line[0], line[1]))
        return "\n".join(text for _, _, text in lines)
