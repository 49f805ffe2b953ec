# outreach/main.py
"""
FastAPI application exposing the patient outreach wizard.

The app owns exactly one WizardController (on ``app.state``); every
endpoint is a thin call into it and returns the controller snapshot.
"""

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel
from typing import Dict, Optional
from contextlib import asynccontextmanager
from datetime import datetime
import logging

from outreach.core.config import settings, validate_required_settings
from outreach.core.exceptions import ValidationError, WizardFlowError
from outreach.core.logging_config import setup_logging
from outreach.core.scenario_registry import list_scenarios
from outreach.core.wizard_controller import WizardController, create_controller

logger = logging.getLogger(__name__)


# API Models
class ContactRequest(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None


class ScenarioRequest(BaseModel):
    scenario: str


class FieldsRequest(BaseModel):
    fields: Dict[str, str]


class ToneRequest(BaseModel):
    tone: str


class MessageEditRequest(BaseModel):
    message: str


def get_controller(request: Request) -> WizardController:
    return request.app.state.controller


def create_app(controller: Optional[WizardController] = None) -> FastAPI:
    """Build the API around ``controller`` (a fresh one if omitted)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """FastAPI lifespan event handler for startup/shutdown"""
        logger.info("=" * 60)
        logger.info(f"🚀 {settings.APP_NAME} API starting...")

        if not validate_required_settings():
            logger.warning("⚠️ Some environment variables are missing - generation will fail until set")

        if getattr(app.state, "controller", None) is None:
            app.state.controller = create_controller(settings)

        logger.info("✅ Wizard ready")
        logger.info("=" * 60)

        yield

        logger.info("🛑 Shutting down...")
        shutdown = getattr(app.state.controller.message_generator, "shutdown", None)
        if shutdown is not None:
            await shutdown()

    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Guided wizard for patient outreach messages",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.controller = controller

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all non-health requests"""
        if request.url.path not in ("/", "/health"):
            logger.info(f"📥 Request: {request.method} {request.url.path}")
        return await call_next(request)

    @app.exception_handler(WizardFlowError)
    async def flow_error_handler(request: Request, exc: WizardFlowError):
        logger.warning(f"Flow error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=409,
            content={"detail": exc.message, "current_step": exc.current_step}
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=422,
            content={"detail": exc.message, "field": exc.field}
        )

    # =========================================================================
    # HEALTH
    # =========================================================================

    @app.get("/", status_code=200)
    def read_root():
        return {"status": "ok", "version": "1.0.0", "service": "patient-outreach"}

    @app.get("/health", status_code=200)
    def health():
        return {"status": "healthy", "timestamp": datetime.now().isoformat()}

    @app.get("/healthz", response_class=PlainTextResponse, status_code=200)
    def healthz():
        return "OK"

    # =========================================================================
    # WIZARD
    # =========================================================================

    @app.get("/scenarios")
    def scenarios():
        return [info.model_dump(mode="json") for info in list_scenarios()]

    @app.get("/wizard")
    def wizard_state(controller: WizardController = Depends(get_controller)):
        return controller.snapshot(consume_notices=True)

    @app.put("/wizard/contact")
    def update_contact(req: ContactRequest, controller: WizardController = Depends(get_controller)):
        if req.name is not None:
            controller.set_name(req.name)
        if req.phone is not None:
            controller.set_phone(req.phone)
        return controller.snapshot(consume_notices=True)

    @app.post("/wizard/continue")
    def continue_wizard(controller: WizardController = Depends(get_controller)):
        controller.continue_to_scenarios()
        return controller.snapshot(consume_notices=True)

    @app.post("/wizard/back")
    def back(controller: WizardController = Depends(get_controller)):
        controller.back()
        return controller.snapshot(consume_notices=True)

    @app.post("/wizard/scenario")
    def select_scenario(req: ScenarioRequest, controller: WizardController = Depends(get_controller)):
        controller.select_scenario(req.scenario)
        return controller.snapshot(consume_notices=True)

    @app.put("/wizard/fields")
    def update_fields(req: FieldsRequest, controller: WizardController = Depends(get_controller)):
        controller.set_fields(req.fields)
        return controller.snapshot(consume_notices=True)

    @app.put("/wizard/tone")
    def update_tone(req: ToneRequest, controller: WizardController = Depends(get_controller)):
        controller.set_tone(req.tone)
        return controller.snapshot(consume_notices=True)

    @app.post("/wizard/generate")
    async def generate(controller: WizardController = Depends(get_controller)):
        await controller.generate()
        return controller.snapshot(consume_notices=True)

    @app.put("/wizard/message")
    def edit_message(req: MessageEditRequest, controller: WizardController = Depends(get_controller)):
        controller.edit_message(req.message)
        return controller.snapshot(consume_notices=True)

    @app.post("/wizard/copy")
    def copy_message(controller: WizardController = Depends(get_controller)):
        controller.copy_message()
        snapshot = controller.snapshot(consume_notices=True)
        snapshot["text"] = controller.state.message
        return snapshot

    @app.post("/wizard/share")
    async def share_image(controller: WizardController = Depends(get_controller)):
        result = await controller.share_image()
        if result is None:
            return JSONResponse(status_code=502, content=controller.snapshot(consume_notices=True))

        return Response(
            content=result.image,
            media_type="image/png",
            headers={
                "Content-Disposition": f'attachment; filename="{result.filename}"',
                "X-Share-Method": result.method.value,
                "X-Share-Delivered": str(result.delivered).lower()
            }
        )

    @app.get("/wizard/whatsapp")
    def whatsapp_link(controller: WizardController = Depends(get_controller)):
        return {"url": controller.open_messaging_link()}

    @app.post("/wizard/reset")
    def reset(controller: WizardController = Depends(get_controller)):
        controller.reset()
        return controller.snapshot(consume_notices=True)

    @app.get("/debug/flow")
    def flow_debug(controller: WizardController = Depends(get_controller)):
        summary = controller.engine.get_flow_summary()
        summary["issues"] = controller.engine.validate_fsm() + controller.engine.check_invariants(controller.state)
        return summary

    return app


setup_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info("🚀 Starting server on port 8000...")
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
