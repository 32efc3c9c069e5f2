import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse

from .config import get_settings
from .errors import CsvCodecError
from .models import ErrorResponse, HealthResponse, LineBreakName, ParseResponse, RenderRequest
from .parser import parse
from .renderer import render
from .rules import LINE_BREAKS
from .sources import decode_bytes

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    yield
    logger.info(f"Shutting down {settings.APP_NAME}")


app = FastAPI(
    title=settings.APP_NAME,
    description="RFC 4180 CSV rendering and parsing",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)


@app.exception_handler(CsvCodecError)
async def codec_error_handler(request: Request, exc: CsvCodecError):
    logger.info("codec error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=422,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/render", response_class=PlainTextResponse, responses={422: {"model": ErrorResponse}})
def render_csv(body: RenderRequest):
    line_break = LINE_BREAKS[body.line_break or settings.DEFAULT_LINE_BREAK]
    text = render(
        body.rows,
        line_break=line_break,
        unification=body.unification or settings.DEFAULT_UNIFICATION,
        include_header=body.include_header,
    )
    return PlainTextResponse(text, media_type="text/csv")


@app.post("/parse", response_model=ParseResponse, responses={422: {"model": ErrorResponse}})
async def parse_csv(
    file: UploadFile = File(...),
    include_header: bool = False,
    line_break: Optional[LineBreakName] = None,
):
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    raw = await file.read()
    if len(raw) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail=f"Upload exceeds {settings.MAX_UPLOAD_BYTES} bytes")

    text, encoding = decode_bytes(raw)
    rows = parse(
        text,
        include_header=include_header,
        line_break=LINE_BREAKS[line_break or settings.DEFAULT_LINE_BREAK],
    )
    return {"rows": rows, "count": len(rows), "encoding": encoding}
