"""Serves the built single-page frontend.

Any GET outside ``/api`` returns the matching file from the dist directory
when one exists, and ``index.html`` otherwise so the client router can take
over. Unknown paths under ``/api`` answer 404 for every method.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from asistencia.core import config
from asistencia.core.errors import NotFound

logger = logging.getLogger(__name__)

router = APIRouter(tags=['frontend'])

API_PREFIX = '/api'
API_METHODS = ['GET', 'HEAD', 'POST', 'PUT', 'PATCH', 'DELETE']
FRONTEND_MISSING = 'Frontend no disponible'


def resolve_asset(dist_dir: Path, requested_path: str) -> Path | None:
    """Return the file for ``requested_path`` if it lies inside ``dist_dir``."""
    if not requested_path:
        return None

    root = dist_dir.resolve()
    candidate = (root / requested_path).resolve()
    if not candidate.is_relative_to(root) or not candidate.is_file():
        return None
    return candidate


@router.api_route(API_PREFIX, methods=API_METHODS, include_in_schema=False)
@router.api_route(API_PREFIX + '/{unknown_path:path}', methods=API_METHODS, include_in_schema=False)
def unknown_api_path():
    raise NotFound()


@router.get('/{full_path:path}', include_in_schema=False)
def serve_frontend(full_path: str):
    dist_dir = Path(config.FRONTEND_DIST_DIR)
    asset = resolve_asset(dist_dir, full_path)
    if asset is not None:
        return FileResponse(asset)

    index_file = dist_dir / 'index.html'
    if not index_file.is_file():
        raise NotFound(FRONTEND_MISSING)
    return FileResponse(index_file, media_type='text/html')


def mount_frontend(app: FastAPI) -> None:
    assets_dir = Path(config.FRONTEND_DIST_DIR) / 'assets'
    if assets_dir.is_dir():
        app.mount('/assets', StaticFiles(directory=assets_dir), name='assets')
    else:
        logger.info('No built frontend assets at %s', assets_dir)

    # Registered last so every API route matches first.
    app.include_router(router)
