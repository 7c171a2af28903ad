# chatmemory/main.py
import logging
from fastapi import FastAPI
from chatmemory.config import settings
from chatmemory.Application import hookRoute, conversationRoute, proxyRoute

logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

# Routes
app.include_router(hookRoute, prefix=settings.API_V1_STR)
app.include_router(conversationRoute, prefix=settings.API_V1_STR)
app.include_router(proxyRoute, prefix=settings.API_V1_STR)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("chatmemory.main:app", host="0.0.0.0", port=8000, reload=True)
