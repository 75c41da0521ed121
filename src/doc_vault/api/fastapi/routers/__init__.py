from __future__ import annotations

import importlib
import logging
import pkgutil
from types import ModuleType
from typing import Optional

from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _should_skip_module(module_name: str) -> bool:
    # private/dunder final segment
    return module_name.rsplit(".", 1)[-1].startswith("_")


def register_all_routers(
        app: FastAPI,
        *,
        base_package: Optional[str] = None,
        prefix: str = "",
) -> list[str]:
    """
    Discover and register every FastAPI router under a routers package.

    Args:
        app: FastAPI application instance.
        base_package: Import path of the routers package. Defaults to this package.
        prefix: Prefix for all routers (e.g., "/api").

    Behavior:
        - Any module with a top-level `router` variable is included.
        - Modules whose final segment starts with '_' are skipped.
        - ROUTER_PREFIX and ROUTER_TAG module attributes are honored.
        - Import errors propagate; a broken router module is a startup failure.

    Returns the names of the modules whose routers were included.
    """
    if base_package is None:
        if __package__ is None:
            raise RuntimeError("Cannot derive base_package; please pass base_package explicitly.")
        base_package = __package__

    package_module: ModuleType = importlib.import_module(base_package)
    if not hasattr(package_module, "__path__"):
        raise RuntimeError(f"Provided base_package '{base_package}' is not a package (no __path__).")

    included: list[str] = []
    for _, module_name, _ in pkgutil.walk_packages(package_module.__path__, prefix=f"{base_package}."):
        if _should_skip_module(module_name):
            logger.debug("Skipping private router module: %s", module_name)
            continue
        module = importlib.import_module(module_name)
        router = getattr(module, "router", None)
        if router is None:
            continue
        router_prefix = getattr(module, "ROUTER_PREFIX", None)
        router_tag = getattr(module, "ROUTER_TAG", None)
        include_kwargs: dict = {"prefix": prefix.rstrip("/") + (router_prefix or "")}
        if router_tag:
            include_kwargs["tags"] = [router_tag]
        app.include_router(router, **include_kwargs)
        included.append(module_name)
        logger.debug(
            "Included router from module: %s (prefix=%s, tag=%s)",
            module_name, include_kwargs["prefix"], router_tag,
        )
    return included
