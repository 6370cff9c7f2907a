import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))


@pytest.fixture(autouse=True)
def clean_rsc_env(monkeypatch):
    """Keep the developer's RSC_* variables and the shared runtime out of tests."""
    for var in ("RSC_SEED", "RSC_MAX_INPUT_ATTEMPTS", "RSC_MAX_STEPS", "RSC_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)

    from rsc.runtime import reset_default_runtime

    reset_default_runtime()
    yield
    reset_default_runtime()
