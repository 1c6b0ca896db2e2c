"""Tests for Streamlit Altair dependency checks."""

import sys
import types

from src.adapters.interface.streamlit import app


def _install(monkeypatch, numpy, pandas) -> None:
    monkeypatch.setitem(sys.modules, "numpy", numpy)
    monkeypatch.setitem(sys.modules, "pandas", pandas)


def test_check_altair_dependencies_ok(monkeypatch) -> None:
    """Return ok when numpy/pandas expose expected attributes."""
    _install(
        monkeypatch,
        types.SimpleNamespace(ndarray=object),
        types.SimpleNamespace(Timestamp=object),
    )

    ok, message = app._check_altair_dependencies()

    assert ok is True
    assert message is None


def test_check_altair_dependencies_missing_numpy_ndarray(monkeypatch) -> None:
    """Return error when the numpy install is incomplete."""
    _install(
        monkeypatch,
        types.SimpleNamespace(),
        types.SimpleNamespace(Timestamp=object),
    )

    ok, message = app._check_altair_dependencies()

    assert ok is False
    assert "numpy" in message


def test_check_altair_dependencies_missing_pandas_timestamp(monkeypatch) -> None:
    """Return error when the pandas install is incomplete."""
    _install(
        monkeypatch,
        types.SimpleNamespace(ndarray=object),
        types.SimpleNamespace(),
    )

    ok, message = app._check_altair_dependencies()

    assert ok is False
    assert "pandas" in message


def test_check_altair_dependencies_import_error(monkeypatch) -> None:
    """A missing module is reported instead of raised."""
    monkeypatch.setitem(sys.modules, "pandas", None)
    monkeypatch.setitem(sys.modules, "numpy", types.SimpleNamespace(ndarray=object))

    ok, message = app._check_altair_dependencies()

    assert ok is False
    assert message.startswith("Altair dependencies are missing")
