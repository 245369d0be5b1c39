from __future__ import annotations

import importlib
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))


@pytest.fixture
def backend_module(monkeypatch):
    monkeypatch.setenv("INTAKE_ENV", "test")
    monkeypatch.setenv("INTAKE_LOG_LEVEL", "WARNING")
    monkeypatch.delenv("INTAKE_DEFAULT_MEMBER_ID", raising=False)

    if "main" in sys.modules:
        module = importlib.reload(sys.modules["main"])
    else:
        module = importlib.import_module("main")
    return module


@pytest.fixture
def client(backend_module):
    with TestClient(backend_module.app) as test_client:
        yield test_client


@pytest.fixture
def pipeline():
    from triage_core import IntakePipeline

    return IntakePipeline()
