import importlib
import pkgutil

import aurora_field
import pytest


ALL_MODULES = sorted(
    module_info.name
    for module_info in pkgutil.walk_packages(aurora_field.__path__, prefix=f"{aurora_field.__name__}.")
)


@pytest.mark.parametrize("module_name", ALL_MODULES)
def test_import_module(module_name: str) -> None:
    if module_name.startswith("aurora_field.gui"):
        pytest.importorskip("tkinter")
    if module_name == "aurora_field.gui.app":
        pytest.importorskip("matplotlib.backends.backend_tkagg")
    importlib.import_module(module_name)
