from fastapi import APIRouter, HTTPException, Request

from controllers.library_controller import delete_saved_poem, export_saved_poem, list_library

router = APIRouter(prefix="/library", tags=["library"])


@router.get("")
async def list_library_route(request: Request):
    """Return saved poems, newest first."""
    try:
        return await list_library(request)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{poem_id}/export")
async def export_saved_poem_route(request: Request, poem_id: int):
    """Download a saved poem as a .doc file."""
    try:
        return await export_saved_poem(request, poem_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/{poem_id}")
async def delete_saved_poem_route(request: Request, poem_id: int):
    try:
        return await delete_saved_poem(request, poem_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))
