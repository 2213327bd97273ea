"""FastAPI application exposing the CancerScan inference endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, File, Request, UploadFile
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from .context import ServiceContext, build_context
from .controller import PredictionController
from .errors import ErrorKind, PredictionError, describe_error
from .schemas import FailureResponse, HealthResponse, HistoriesResponse, PredictionResponse
from .services.model import CancerModel

LOGGER = logging.getLogger(__name__)

router = APIRouter()

_FAILURE_RESPONSES = {
    400: {"model": FailureResponse},
    413: {"model": FailureResponse},
    500: {"model": FailureResponse},
}


def get_context(request: Request) -> ServiceContext:
    return request.app.state.context


def get_controller(context: ServiceContext = Depends(get_context)) -> PredictionController:
    return PredictionController(context)


async def load_model_in_background(model: CancerModel) -> None:
    """Load the classifier off the event loop; failures leave the model not ready."""

    LOGGER.info("Loading model...")
    try:
        await run_in_threadpool(model.load)
    except Exception as exc:  # pylint: disable=broad-except
        LOGGER.exception("Failed to load model, predictions stay unavailable: %s", exc)
        return
    LOGGER.info("Model is ready to serve predictions")


@router.get("/health", response_model=HealthResponse, tags=["Operations"])
def health_check(context: ServiceContext = Depends(get_context)) -> HealthResponse:
    """Expose service and model readiness information."""

    return HealthResponse(status="ok", model_loaded=context.model.is_ready)


@router.post(
    "/predict",
    response_model=PredictionResponse,
    responses=_FAILURE_RESPONSES,
    tags=["Inference"],
)
async def predict(
    image: Optional[UploadFile] = File(None, description="Image to classify, at most 1 MB."),
    controller: PredictionController = Depends(get_controller),
) -> PredictionResponse:
    """Classify a single uploaded image and store the verdict."""

    record = await controller.predict(image)
    return PredictionResponse(data=record)


@router.get(
    "/predict/histories",
    response_model=HistoriesResponse,
    responses={500: {"model": FailureResponse}},
    tags=["Inference"],
)
async def histories(
    controller: PredictionController = Depends(get_controller),
) -> HistoriesResponse:
    """List every stored prediction."""

    return HistoriesResponse(data=await controller.histories())


def create_app(context: Optional[ServiceContext] = None) -> FastAPI:
    """Build the API around ``context``, or around one derived from the settings."""

    context = context or build_context()

    app = FastAPI(
        title="CancerScan Inference API",
        version="1.0.0",
        description="Binary cancer screening of uploaded images with persisted prediction history.",
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(context.settings.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)

    @app.exception_handler(PredictionError)
    async def handle_prediction_error(request: Request, exc: PredictionError) -> JSONResponse:
        status_code, body = describe_error(exc.kind, context.settings.max_upload_bytes)
        LOGGER.warning(
            "%s %s failed with %s: %s", request.method, request.url.path, exc.kind.value, exc.detail
        )
        return JSONResponse(status_code=status_code, content=body.model_dump())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # A non-file "image" field means nothing usable was uploaded.
        if request.url.path == "/predict" and any(
            tuple(error.get("loc", ()))[:1] == ("body",) for error in exc.errors()
        ):
            return await handle_prediction_error(
                request, PredictionError(ErrorKind.EMPTY_INPUT, "Upload is not a file.")
            )
        return await request_validation_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
        status_code, body = describe_error(ErrorKind.SERVER_ERROR, context.settings.max_upload_bytes)
        return JSONResponse(status_code=status_code, content=body.model_dump())

    @app.on_event("startup")
    async def start_model_loading() -> None:
        """Start loading the model without delaying startup; requests see it once ready."""

        app.state.model_load_task = asyncio.create_task(load_model_in_background(context.model))

    return app


app = create_app()
