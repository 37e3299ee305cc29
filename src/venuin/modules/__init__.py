"""Feature modules with auto-discovery."""

from importlib import import_module
from importlib.util import find_spec
from pathlib import Path

import structlog
from fastapi import APIRouter


logger = structlog.get_logger()


def discover_modules() -> list[APIRouter]:
    """Auto-discover and return routers from all modules.

    Scans the modules directory for packages with a ``routes`` submodule
    exposing a ``router`` attribute.

    Returns:
        List of FastAPI routers from discovered modules.
    """
    modules_dir = Path(__file__).parent
    routers: list[APIRouter] = []

    for path in sorted(modules_dir.iterdir()):
        if not path.is_dir() or path.name.startswith("_"):
            continue
        name = f"venuin.modules.{path.name}.routes"
        if find_spec(name) is None:
            continue
        module = import_module(name)
        if hasattr(module, "router"):
            routers.append(module.router)
            logger.debug("module_loaded", module=path.name)

    return routers


def load_models() -> None:
    """Import every model module so that the metadata is complete."""
    for path in sorted(Path(__file__).parent.iterdir()):
        if path.is_dir() and (path / "models.py").exists():
            import_module(f"venuin.modules.{path.name}.models")
    import_module("venuin.core.audit.models")
