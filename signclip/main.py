import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from signclip import settings
from signclip.api.routes import router as api_router
from signclip.api.ws import router as ws_router
from signclip.pipeline.orchestrator import get_resolver

# Configure root logger so our app messages are visible
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s",
    datefmt="%H:%M:%S",
)
# Suppress noisy third-party HTTP/model logs
for _noisy in ("httpx", "httpcore", "openai"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

logger = logging.getLogger("signclip.startup")

app = FastAPI(title="SignClip Overlay Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # the extension proxies requests from arbitrary video sites
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
app.include_router(ws_router)

# Sign media is served from disk when the datasets are present
for _route, _directory in (
    (settings.MEDIA_ROUTE, settings.MEDIA_DIR),
    ("/fingerspelling", settings.FINGERSPELL_DIR),
    ("/asl", settings.LETTER_DATASET_DIR),
):
    if os.path.isdir(_directory):
        app.mount(_route, StaticFiles(directory=_directory), name=_route.strip("/"))
        logger.info("Serving %s from %s", _route, _directory)
    else:
        logger.warning("Media directory not found, %s disabled: %s", _route, _directory)


@app.on_event("startup")
async def _startup():
    resolver = get_resolver()
    logger.info(
        "✅ Vocabulary loaded: %d glosses, %d fingerspelling characters",
        len(resolver.index), len(resolver.letters),
    )


def run():
    import uvicorn

    uvicorn.run("signclip.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
