"""
MathSheet API Server - FastAPI Backend for the sheet frontend
Provides REST and WebSocket endpoints that drive the sheet controller.
"""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional, Set

from fastapi import FastAPI, WebSocket, WebSocketDisconnect, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ValidationError

from mathsheet.config import get_config
from mathsheet.constants import APP_NAME, APP_VERSION
from mathsheet.evaluation_client import HttpEvaluationService
from mathsheet.logging_config import setup_logging
from mathsheet.navigation import NavigationBridge, NavigationEvent, NavigationKind
from mathsheet.sheet_controller import SheetController
from mathsheet.sheet_io import load_from_file, save_to_file

logger = logging.getLogger(__name__)


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class EditRequest(BaseModel):
    text: str


class NavigationRequest(BaseModel):
    kind: NavigationKind
    row: int


class OpenRequest(BaseModel):
    content: str
    name: Optional[str] = None


class EditMessage(BaseModel):
    row: int
    text: str


class RowMessage(BaseModel):
    row: int


class FileRequest(BaseModel):
    path: str


class FileResponse(BaseModel):
    path: str
    rows: int


class ContentResponse(BaseModel):
    content: str


class CopyResponse(BaseModel):
    text: str


class RowResponse(BaseModel):
    text: str
    result: Optional[Dict[str, Any]] = None


class SheetResponse(BaseModel):
    rows: List[RowResponse]
    mode: str
    mode_locked: bool
    focused_row: int
    sequence: int


# =============================================================================
# WEBSOCKET CONNECTION MANAGER
# =============================================================================

class ConnectionManager:
    def __init__(self):
        self.active_connections: List[WebSocket] = []
        self._pending: Set[asyncio.Task] = set()

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def send_personal_message(self, message: str, websocket: WebSocket):
        await websocket.send_text(message)

    async def broadcast(self, message: str):
        for connection in list(self.active_connections):
            try:
                await connection.send_text(message)
            except (WebSocketDisconnect, RuntimeError):
                # Remove dead connections
                self.disconnect(connection)

    def schedule_broadcast(self, message: str) -> None:
        """Broadcast from synchronous code running inside the event loop."""
        if not self.active_connections:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self.broadcast(message))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


# =============================================================================
# FASTAPI APPLICATION SETUP
# =============================================================================

def create_app(evaluator=None, config=None) -> FastAPI:
    """
    Build the API application around a single sheet.

    Args:
        evaluator: Object with ``async evaluate(mode, text)``; defaults to the
            HTTP client pointed at the configured evaluator URL
        config: Configuration class (see mathsheet.config)

    Returns:
        FastAPI: The application
    """
    config = config or get_config()
    if evaluator is None:
        evaluator = HttpEvaluationService(config.EVALUATOR_URL, config.EVALUATION_TIMEOUT)

    controller = SheetController(
        evaluator,
        timeout=config.EVALUATION_TIMEOUT,
        focus_after_delete=config.FOCUS_AFTER_DELETE,
    )
    bridge = NavigationBridge(controller)
    manager = ConnectionManager()

    def broadcast_event(event: str, payload: Dict[str, Any]) -> None:
        manager.schedule_broadcast(json.dumps({"type": event, "data": payload}))

    controller.add_listener(broadcast_event)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("%s API server started (evaluator: %s)", APP_NAME, config.EVALUATOR_URL)
        controller.refresh()
        yield
        await controller.close()
        close = getattr(evaluator, "close", None)
        if callable(close):
            close()

    app = FastAPI(
        title=f"{APP_NAME} API",
        description="Backend API for the MathSheet expression sheet",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    # Enable CORS for the web frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.controller = controller
    app.state.bridge = bridge
    app.state.manager = manager

    def check_row(index: int) -> None:
        if not 0 <= index < len(controller.rows):
            raise HTTPException(status_code=404, detail=f"Row {index} not found")

    # =========================================================================
    # API ENDPOINTS
    # =========================================================================

    @app.get("/")
    @app.head("/")
    async def root():
        """Health check endpoint"""
        return {
            "message": f"{APP_NAME} API Server",
            "version": APP_VERSION,
            "status": "running",
            "timestamp": datetime.now().isoformat()
        }

    @app.get("/api/sheet", response_model=SheetResponse)
    async def get_sheet(wait: bool = False):
        """
        Current sheet snapshot. With ``wait`` the response is delayed until no
        evaluation is in flight.
        """
        if wait:
            await controller.flush()
        return controller.snapshot()

    @app.put("/api/rows/{index}", response_model=SheetResponse)
    async def edit_row(index: int, request: EditRequest):
        check_row(index)
        controller.edit_row(index, request.text)
        return controller.snapshot()

    @app.post("/api/rows", response_model=SheetResponse)
    async def append_row():
        controller.append_row()
        return controller.snapshot()

    @app.post("/api/navigate", response_model=SheetResponse)
    async def navigate(request: NavigationRequest):
        """Apply an enter/up/down/delete gesture from the input widget."""
        check_row(request.row)
        bridge.handle(NavigationEvent(request.kind, request.row))
        return controller.snapshot()

    @app.post("/api/open", response_model=SheetResponse)
    async def open_sheet(request: OpenRequest):
        controller.load_text(request.content, name=request.name)
        return controller.snapshot()

    @app.get("/api/save", response_model=ContentResponse)
    async def save_sheet():
        return ContentResponse(content=controller.full_text())

    @app.post("/api/files/open", response_model=FileResponse)
    async def open_file(request: FileRequest):
        """Replace the sheet with the lines of a file on the server host."""
        if not load_from_file(controller, request.path):
            raise HTTPException(status_code=404, detail=f"Unable to open {request.path}")
        return FileResponse(path=request.path, rows=len(controller.rows))

    @app.post("/api/files/save", response_model=FileResponse)
    async def save_file(request: FileRequest):
        """Write the sheet to a file on the server host."""
        if not save_to_file(controller, request.path):
            raise HTTPException(status_code=500, detail=f"Unable to save {request.path}")
        return FileResponse(path=request.path, rows=len(controller.rows))

    @app.get("/api/rows/{index}/copy", response_model=CopyResponse)
    async def copy_row(index: int):
        check_row(index)
        return CopyResponse(text=controller.copy_row(index))

    # =========================================================================
    # WEBSOCKET ENDPOINTS
    # =========================================================================

    def handle_message(message: Dict[str, Any]) -> Dict[str, Any]:
        kind = message.get("type")

        if kind == "edit":
            edit = EditMessage(**message)
            controller.edit_row(edit.row, edit.text)
        elif kind == "append":
            controller.append_row()
        elif kind == "navigate":
            navigation = NavigationRequest(**message)
            bridge.handle(NavigationEvent(navigation.kind, navigation.row))
        elif kind == "open":
            opened = OpenRequest(**message)
            controller.load_text(opened.content, name=opened.name)
        elif kind == "copy":
            return {"type": "copy", "text": controller.copy_row(RowMessage(**message).row)}
        elif kind != "snapshot":
            raise ValueError(f"Unknown message type: {kind!r}")

        return {"type": "snapshot", "data": controller.snapshot()}

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """
        WebSocket endpoint for the sheet frontend. Each message gets a direct
        reply; controller events are broadcast to every connection.
        """
        await manager.connect(websocket)
        try:
            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                    if not isinstance(message, dict):
                        raise ValueError("Message must be a JSON object")
                    reply = handle_message(message)
                except ValidationError as e:
                    logger.warning("Rejected websocket message %r: %s", data, e)
                    reply = {
                        "type": "error",
                        "message": str(e),
                        "errors": e.errors(include_url=False, include_context=False),
                    }
                except (ValueError, KeyError, IndexError, TypeError) as e:
                    logger.warning("Rejected websocket message %r: %s", data, e)
                    reply = {"type": "error", "message": str(e)}
                await manager.send_personal_message(json.dumps(reply), websocket)
        except WebSocketDisconnect:
            manager.disconnect(websocket)

    return app


app = create_app()


# =============================================================================
# SERVER STARTUP
# =============================================================================

def main():
    import uvicorn

    config = get_config()
    setup_logging(config.LOG_LEVEL)
    logger.info("Server will be available at: http://%s:%d", config.HOST, config.PORT)
    logger.info("API documentation at: http://%s:%d/docs", config.HOST, config.PORT)

    uvicorn.run(
        "mathsheet.api_server:app",
        host=config.HOST,
        port=config.PORT,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
