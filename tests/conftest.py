from __future__ import annotations

import pytest

from docextract.config.container import build_use_case
from docextract.config.settings import Settings
from docextract.core.interfaces.ocr_engine import IOCREngine


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def use_case(settings):
    return build_use_case(settings, with_ocr=False)


@pytest.fixture
def make_use_case(settings):
    def _make(engine: IOCREngine, **overrides):
        return build_use_case(settings.model_copy(update=overrides), ocr_engine=engine)
    return _make
