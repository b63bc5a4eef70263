"""FastAPI application for the Confluence mirror."""

from __future__ import annotations

from fastapi import FastAPI

from server.routers.pages import router as pages_router

app = FastAPI(title="confluence-mirror")
app.include_router(pages_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
