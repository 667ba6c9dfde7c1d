"""
Roda o pipeline de extração num arquivo de texto (saída de OCR já
pronta) ou numa imagem, via o backend de OCR configurado.

    python scripts/extract_text.py amostra.txt
    python scripts/extract_text.py carteirinha.jpg --image
"""
import argparse
import asyncio
import json
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from docextract.api.schemas.responses import ExtractionResponse
from docextract.config.container import build_use_case
from docextract.config.logging_config import configure_logging
from docextract.config.settings import get_settings


def main():
    parser = argparse.ArgumentParser(description="Extract structured fields from a document")
    parser.add_argument("path", help="Text file with OCR output, or an image with --image")
    parser.add_argument("--image", action="store_true", help="Treat input as an image and run OCR")
    parser.add_argument("--no-legacy", action="store_true", help="Disable the legacy fallback path")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    args = parser.parse_args()

    settings = get_settings()
    if args.no_legacy:
        settings = settings.model_copy(update={"legacy_fallback_enabled": False})
    configure_logging(args.log_level or settings.log_level)

    use_case = build_use_case(settings, with_ocr=args.image)
    if args.image:
        with open(args.path, "rb") as f:
            result = asyncio.run(use_case.process(f.read()))
    else:
        with open(args.path, encoding="utf-8") as f:
            result = use_case.process_text(f.read())

    print(json.dumps(ExtractionResponse.from_result(result).model_dump(), ensure_ascii=False, indent=2))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
