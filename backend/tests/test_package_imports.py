"""Package imports — every module of ledger_gateway imports cleanly."""

import importlib
import pkgutil

import pytest

import ledger_gateway

MODULES = sorted(
    m.name for m in pkgutil.walk_packages(
        ledger_gateway.__path__, prefix="ledger_gateway.",
    )
)


def test_all_layers_are_discovered():
    for layer in ("api", "core", "services", "infrastructure", "schemas"):
        assert f"ledger_gateway.{layer}" in MODULES


@pytest.mark.parametrize("name", MODULES)
def test_module_imports(name):
    assert importlib.import_module(name) is not None
