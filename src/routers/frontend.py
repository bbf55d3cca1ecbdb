from pathlib import Path

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse

router = APIRouter(tags=["frontend"])

INDEX_FILE = "index.html"
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.get("/api/health")
def health():
    return {"status": "ok"}


@router.api_route("/api", methods=ALL_METHODS, include_in_schema=False)
@router.api_route("/api/{api_path:path}", methods=ALL_METHODS, include_in_schema=False)
def api_not_found(api_path: str = ""):
    # Unmatched API calls get JSON, never the HTML fallback
    raise HTTPException(status_code=404, detail="Not found")


def _resolve_static_file(static_root: Path, page_path: str):
    """Return the file under static_root for page_path, or None if it is missing or escapes the root."""
    if not page_path:
        return None
    candidate = (static_root / page_path).resolve()
    if not candidate.is_relative_to(static_root) or not candidate.is_file():
        return None
    return candidate


@router.get("/{page_path:path}", include_in_schema=False)
def spa_fallback(request: Request, page_path: str):
    """
    Serve a literal static asset when one exists, otherwise the single-page
    app entry document so client-side routes resolve.
    """
    static_root = Path(request.app.state.settings.static_dir).resolve()

    asset = _resolve_static_file(static_root, page_path)
    if asset is not None:
        return FileResponse(asset)

    index = static_root / INDEX_FILE
    if not index.is_file():
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(index, media_type="text/html")
