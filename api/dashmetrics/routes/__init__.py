from fastapi import FastAPI

from .analytics import router as analytics_router
from .drops import router as drops_router
from .messages import router as messages_router
from .profiles import router as profiles_router
from .world_domination import router as world_domination_router


def include_modular_routers(app: FastAPI) -> None:
    app.include_router(analytics_router, tags=["analytics"])
    app.include_router(profiles_router, tags=["profiles"])
    app.include_router(messages_router, tags=["messages"])
    app.include_router(drops_router, tags=["drops"])
    app.include_router(world_domination_router, tags=["world-domination"])


__all__ = ["include_modular_routers"]
