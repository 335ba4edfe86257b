import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from server.config import resolve_provider_config
from server.models import ChatRequest, ChatResponse
from server.relay import Relay, RelayError

load_dotenv(override=True)

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

port = int(os.environ.get("PORT", 3000))

CONTENT_SECURITY_POLICY = (
    "default-src 'self'; connect-src 'self' http://localhost:3000 ws:; "
    "style-src 'self' 'unsafe-inline'"
)

relay: Relay | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global relay
    relay = Relay(resolve_provider_config())
    if relay.provider_name:
        logger.info("Relaying chat to %s", relay.provider_name)
    else:
        logger.warning("No OPENAI_API_KEY or GEMINI_API_KEY set; /chat will answer 500")
    yield


app = FastAPI(title="Task List Chat Relay", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def content_security_policy(request: Request, call_next):
    response = await call_next(request)
    response.headers["Content-Security-Policy"] = CONTENT_SECURITY_POLICY
    return response


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    return JSONResponse(status_code=exc.status_code, content={"reply": exc.reply})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"reply": "Invalid request body"})


@app.get("/health")
async def health():
    return {"status": "ok", "provider": relay.provider_name if relay else None}


# Plain def: runs on the threadpool, one worker per inbound call.
@app.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest):
    return relay.chat(request)


# Mount frontend last (catch-all)
public = Path(__file__).parent.parent / "public"
if public.exists():
    app.mount("/", StaticFiles(directory=str(public), html=True), name="static")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.main:app", host="0.0.0.0", port=port)
