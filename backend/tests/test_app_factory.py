from __future__ import annotations

import importlib

from fastapi import FastAPI


def test_main_module_imports_and_builds_app() -> None:
    main = importlib.import_module("phixiv.main")
    assert isinstance(main.app, FastAPI)
    assert callable(main.run)

    paths = [getattr(route, "path", "") for route in main.create_app().routes]
    assert "/healthz" in paths
    assert "/i/{path_first}/{path_rest:path}" in paths
    # The artwork catch-all must stay behind every specific route.
    assert paths[-1] == "/{full_path:path}"


def test_artwork_path_module_imports() -> None:
    module = importlib.import_module("phixiv.core.artwork_path")
    assert module.ROUTE_PATTERNS
    assert module.match_artwork_path("/artworks/1").ref is not None
