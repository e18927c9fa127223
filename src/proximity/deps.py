from fastapi import Request

from proximity.broadcaster import Broadcaster


def get_broadcaster(request: Request) -> Broadcaster:
    # Created by the app lifespan
    return request.app.state.broadcaster
