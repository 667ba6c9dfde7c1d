"""
Adapter: HTTP OCR Engine

Cliente do serviço de OCR externo. Usa httpx assíncrono com
timeouts configuráveis e tenacity para retry com backoff
exponencial em 503 (cold start) e erros de conexão.
"""

import base64
import logging

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from docextract.core.interfaces.ocr_engine import (
    IOCREngine,
    OCRServiceError,
    OCRServiceUnavailable,
)

logger = logging.getLogger(__name__)


def _detail(resp: httpx.Response, default: str) -> str:
    try:
        return resp.json().get("detail", default)
    except ValueError:
        return default


class HttpOCREngine(IOCREngine):
    """POST {base_url}/ocr com {"image_b64"} → {"text"}."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        connect_timeout: float = 10.0,
        retry_attempts: int = 3,
        retry_delay: float = 1.0,
        retry_backoff: float = 2.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._retry_attempts = retry_attempts
        self._retry_delay = retry_delay
        self._retry_backoff = retry_backoff
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(
                connect=float(connect_timeout),
                read=float(timeout),
                write=30.0,
                pool=30.0,
            ),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def extract_text(self, image_bytes: bytes) -> str:
        """
        Envia a imagem ao serviço de OCR.

        Raises OCRServiceUnavailable (esgotadas as tentativas) ou
        OCRServiceError (não retentável).
        """
        payload = {"image_b64": base64.b64encode(image_bytes).decode()}

        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(OCRServiceUnavailable),
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(
                multiplier=self._retry_delay,
                exp_base=self._retry_backoff,
                max=60,
            ),
            reraise=True,
            before_sleep=lambda state: logger.warning(
                "Serviço de OCR indisponível, nova tentativa em %.1fs (tentativa %d/%d)",
                state.next_action.sleep,  # type: ignore[union-attr]
                state.attempt_number,
                self._retry_attempts,
            ),
        ):
            with attempt:
                return await self._send(payload)
        raise OCRServiceUnavailable("Nenhuma tentativa executada")

    async def _send(self, payload: dict) -> str:
        """Uma única requisição ao serviço."""
        try:
            resp = await self._client.post("/ocr", json=payload)
        except (httpx.ConnectError, httpx.ConnectTimeout) as e:
            logger.warning("Falha de conexão com o OCR: %s", e)
            raise OCRServiceUnavailable(f"Sem conexão com o serviço de OCR: {e}") from e
        except httpx.ReadTimeout as e:
            logger.warning("Timeout de leitura do OCR: %s", e)
            raise OCRServiceUnavailable(f"Timeout do serviço de OCR: {e}") from e
        except httpx.HTTPError as e:
            logger.error("Erro HTTP do OCR: %s", e)
            raise OCRServiceError(f"Erro HTTP do serviço de OCR: {e}") from e

        if resp.status_code == 503:
            detail = _detail(resp, "Service unavailable")
            logger.warning("OCR devolveu 503: %s", detail)
            raise OCRServiceUnavailable(detail)

        if resp.status_code != 200:
            detail = _detail(resp, f"HTTP {resp.status_code}")
            logger.error("OCR devolveu %d: %s", resp.status_code, detail)
            raise OCRServiceError(detail)

        try:
            data = resp.json()
        except ValueError as e:
            raise OCRServiceError("Resposta do OCR não é JSON") from e
        text = data.get("text") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise OCRServiceError("Resposta do OCR sem campo 'text'")
        return text

    async def health(self) -> dict:
        """Saúde do serviço; nunca lança."""
        try:
            resp = await self._client.get("/health", timeout=10.0)
            return resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Health check do OCR falhou: %s", e)
            return {"status": "unreachable", "error": str(e)}
