import air
from air.responses import JSONResponse
from fastapi import APIRouter
from fastapi import Depends
from fastapi.responses import StreamingResponse

from proximity.broadcaster import Broadcaster
from proximity.deps import get_broadcaster
from proximity.schemas import BroadcastCreate
from proximity.schemas import BroadcastEvent
from proximity.settings import settings
from proximity.utils import read_model
from proximity.utils import utc_timestamp

router = APIRouter(prefix="/api/proximity", tags=["broadcast"])


@router.post("/broadcast")
async def broadcast(request: air.Request, broadcaster: Broadcaster = Depends(get_broadcaster)):
    data = await read_model(request, BroadcastCreate)
    extra = {"metadata": data.metadata} if "metadata" in data.model_fields_set else {}
    event = BroadcastEvent(
        profile_id=data.profile_id,
        location=data.location,
        timestamp=utc_timestamp(),
        **extra,
    )

    subscriber_count = await broadcaster.publish(data.channel_id, event)

    return JSONResponse(
        {
            "published": True,
            "channelId": data.channel_id,
            "subscriberCount": subscriber_count,
        }
    )


@router.get("/stream/{channel_id}")
async def stream_channel(
    request: air.Request, channel_id: str, broadcaster: Broadcaster = Depends(get_broadcaster)
):
    frames = broadcaster.stream(
        channel_id,
        keepalive=settings.stream_keepalive_seconds,
        is_disconnected=request.is_disconnected,
    )

    return StreamingResponse(
        frames,
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )


@router.get("/channels")
def list_channels(broadcaster: Broadcaster = Depends(get_broadcaster)):
    channels = [c.to_wire() for c in broadcaster.channels()]
    return JSONResponse({"channels": channels, "total": len(channels)})
