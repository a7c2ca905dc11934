"""Server-Sent Events stream carrying every calendar and user mutation."""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from cuadrante.application.services import SyncBus
from cuadrante.infrastructure.dependencies import get_sync_bus

router = APIRouter(tags=["Sync"])


@router.get("/events")
async def event_stream(
    sync_bus: SyncBus = Depends(get_sync_bus),
) -> StreamingResponse:
    """SSE endpoint for real-time sync.

    Clients connect via EventSource and receive ``entry_upserted``,
    ``entry_deleted``, ``user_added`` and ``user_deleted`` events. No
    filtering is done here; clients drop events outside their month.
    """
    return StreamingResponse(
        sync_bus.subscribe(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
