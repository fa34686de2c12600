import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from arkvault import __version__, config, models
from arkvault.database import engine
from arkvault.errors import ConfigurationError, DecryptionError, LeakCheckError, MailerError
from arkvault.routers import account, audit, auth, generator, passwords

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

models.base.metadata.create_all(bind=engine)

app = FastAPI(
    title="ArkVault API",
    description="Password manager: store, generate, share and audit credentials.",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(passwords.router)
app.include_router(generator.router)
app.include_router(audit.router)
app.include_router(account.router)


# ── Error mapping ──────────────────────────────────────────────────────────────

@app.exception_handler(DecryptionError)
def decryption_error_handler(request: Request, exc: DecryptionError):
    logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(ConfigurationError)
def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("server misconfigured: %s", exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(MailerError)
@app.exception_handler(LeakCheckError)
def upstream_error_handler(request: Request, exc: Exception):
    logger.warning("upstream failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


# ── Ping ───────────────────────────────────────────────────────────────────────

@app.get("/ping")
def ping():
    return {"status": "running"}


import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        app,
        host="127.0.0.1",
        port=8048,
        reload=False
    )
