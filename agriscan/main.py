import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

load_dotenv()

from .config import Settings, get_settings
from .pipeline import ImageValidationError, build_image_input, create_orchestrator, parse_coordinates, plan_providers
from .pipeline.validator import check_content_type, check_size
from .schemas import AnalysisData, AnalyzeResponse, ErrorResponse

logger = logging.getLogger("agriscan")

GENERIC_ERROR = "Analysis failed. Please try again."


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(ErrorResponse(error=message).model_dump(), status_code=status_code)


def create_app(settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = httpx.AsyncClient(timeout=settings.provider_timeout_seconds, transport=transport)
        plan = plan_providers(settings, client)
        app.state.http_client = client
        app.state.plan = plan
        app.state.orchestrator = create_orchestrator(plan)
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/healthz")
    def healthz(request: Request):
        plan = getattr(request.app.state, "plan", None)
        return {"status": "ok", "providers": plan.active() if plan else []}

    @app.post(
        "/api/analyze",
        response_model=AnalyzeResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def analyze(request: Request, response: Response):
        try:
            form = await request.form()
            upload = form.get("image")
            if not isinstance(upload, UploadFile):
                raise ImageValidationError("No image provided")

            # Reject on the declared size before reading the body into memory
            check_content_type(upload.content_type)
            if upload.size is not None:
                check_size(upload.size, settings.max_upload_bytes)
            data = await upload.read()
            image = build_image_input(data, upload.content_type, upload.filename, settings.max_upload_bytes)

            latitude = form.get("latitude")
            longitude = form.get("longitude")
            geo = parse_coordinates(
                latitude if isinstance(latitude, str) else None,
                longitude if isinstance(longitude, str) else None,
            )

            logger.info(
                "/api/analyze filename=%s type=%s bytes=%d geo=%s",
                image.filename, image.content_type, image.size, geo is not None,
            )
            report, raw_data = await request.app.state.orchestrator.analyze(image, geo)
        except ImageValidationError as e:
            logger.info("/api/analyze rejected: %s", e)
            return _error(str(e), 400)
        except Exception:
            logger.exception("/api/analyze failed")
            return _error(GENERIC_ERROR, 500)

        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
        return AnalyzeResponse(data=AnalysisData(analysis=report, rawData=raw_data))

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", str(get_settings().port))))
