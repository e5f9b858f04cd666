import logging
from pathlib import Path

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, ValidationError

from golf_admin.backgrounds import DELETE_PROMPT as BACKGROUND_DELETE_PROMPT
from golf_admin.backgrounds import FormSettingsManager
from golf_admin.csv_import import decode_upload
from golf_admin.db import ensure_schema
from golf_admin.errors import (
    AdminError,
    ControllerBusy,
    CsvParseError,
    LoadError,
    ValidationSkip,
)
from golf_admin.golfers import CLEAR_PROMPT, DELETE_PROMPT, GolferRoster
from golf_admin.media_api import MediaApiClient
from golf_admin.notifications import confirm_from_form
from golf_admin.rich_text import editor_config
from golf_admin.settings import load_settings
from golf_admin.store import create_store

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

app = FastAPI()

app.mount("/static", StaticFiles(directory=BASE_DIR / "static"), name="static")
templates = Jinja2Templates(directory=BASE_DIR / "templates")
settings = load_settings()
roster = GolferRoster(create_store(settings), table=settings.golfers_table)
form_settings = FormSettingsManager(MediaApiClient(settings.admin_api_url, settings.http_timeout))


@app.on_event("startup")
def startup() -> None:
    if settings.store_backend != "postgres":
        return
    try:
        ensure_schema(settings.database_url, settings.golfers_table)
    except Exception as exc:  # noqa: BLE001
        # The roster page reports load failures itself; don't block startup.
        logger.warning("Could not ensure golfers schema: %s", exc)


def _golfers_context(request: Request, name: str = "", salary: str = "") -> dict:
    return {
        "request": request,
        "golfers": roster.golfers,
        "busy": roster.busy,
        "name": name,
        "salary": salary,
        "notices": roster.notifier.drain(),
        "delete_prompt": DELETE_PROMPT,
        "clear_prompt": CLEAR_PROMPT,
    }


def _admin_context(request: Request) -> dict:
    return {
        "request": request,
        "form_title": form_settings.form_title,
        "rules": form_settings.rules,
        "backgrounds": form_settings.backgrounds,
        "active_key": form_settings.active_key,
        "uploading": form_settings.uploading,
        "editor": editor_config(),
        "notices": form_settings.notifier.drain(),
        "delete_prompt": BACKGROUND_DELETE_PROMPT,
    }


def _prime_form_settings() -> None:
    if form_settings.loaded:
        return
    try:
        form_settings.load_all()
    except LoadError:
        pass


@app.get("/", response_class=RedirectResponse)
async def index():
    return RedirectResponse(url="/admin", status_code=302)


@app.get("/admin", response_class=HTMLResponse)
async def admin(request: Request):
    try:
        form_settings.load_all()
    except LoadError:
        pass
    return templates.TemplateResponse(request, "admin.html", _admin_context(request))


@app.post("/admin/settings", response_class=HTMLResponse)
async def admin_save_setting(request: Request, key: str = Form(...), value: str = Form("")):
    _prime_form_settings()
    form_settings.save_setting(key, value)
    return templates.TemplateResponse(request, "admin.html", _admin_context(request))


@app.post("/admin/backgrounds/upload", response_class=HTMLResponse)
async def admin_upload_background(request: Request, image: UploadFile | None = File(None)):
    _prime_form_settings()
    filename = image.filename if image else None
    content = await image.read() if image and image.filename else None
    try:
        form_settings.upload_image(filename, content, image.content_type if image else None)
    except AdminError:
        pass
    return templates.TemplateResponse(request, "admin.html", _admin_context(request))


@app.post("/admin/backgrounds/select", response_class=HTMLResponse)
async def admin_select_background(request: Request, key: str = Form("")):
    _prime_form_settings()
    try:
        form_settings.set_background(key)
    except AdminError:
        pass
    return templates.TemplateResponse(request, "admin.html", _admin_context(request))


@app.post("/admin/backgrounds/delete", response_class=HTMLResponse)
async def admin_delete_background(request: Request, key: str = Form(""), confirm: str = Form("")):
    _prime_form_settings()
    try:
        form_settings.delete_image(key, confirm_from_form(confirm))
    except AdminError:
        pass
    return templates.TemplateResponse(request, "admin.html", _admin_context(request))


@app.get("/admin/golfers", response_class=HTMLResponse)
async def golfers_page(request: Request):
    try:
        roster.load()
    except LoadError:
        pass
    return templates.TemplateResponse(request, "golfers.html", _golfers_context(request))


@app.post("/admin/golfers", response_class=HTMLResponse)
async def golfers_add(request: Request, name: str = Form(""), salary: str = Form("")):
    try:
        roster.add_golfer(name, salary)
    except AdminError:
        return templates.TemplateResponse(
            request, "golfers.html", _golfers_context(request, name=name, salary=salary)
        )
    return templates.TemplateResponse(request, "golfers.html", _golfers_context(request))


@app.post("/admin/golfers/import", response_class=HTMLResponse)
async def golfers_import(
    request: Request,
    csv_file: UploadFile | None = File(None),
    strict: str = Form(""),
):
    text = None
    if csv_file is not None and csv_file.filename:
        text = decode_upload(await csv_file.read())
    try:
        count = roster.import_csv(text, strict=bool(strict))
    except AdminError:
        pass
    else:
        roster.notifier.info(f"Imported {count} golfer{'s' if count != 1 else ''}.")
    return templates.TemplateResponse(request, "golfers.html", _golfers_context(request))


@app.post("/admin/golfers/clear", response_class=HTMLResponse)
async def golfers_clear(request: Request, confirm: str = Form("")):
    try:
        roster.clear_all(confirm_from_form(confirm))
    except AdminError:
        pass
    return templates.TemplateResponse(request, "golfers.html", _golfers_context(request))


@app.post("/admin/golfers/{golfer_id}/delete", response_class=HTMLResponse)
async def golfers_delete(request: Request, golfer_id: int, confirm: str = Form("")):
    try:
        roster.delete_golfer(golfer_id, confirm_from_form(confirm))
    except AdminError:
        pass
    return templates.TemplateResponse(request, "golfers.html", _golfers_context(request))


@app.get("/api/golfers")
async def api_golfers():
    try:
        golfers = roster.load()
    except LoadError as exc:
        roster.notifier.drain()
        return JSONResponse({"error": str(exc)}, status_code=502)
    return {"golfers": [golfer.as_dict() for golfer in golfers]}


class CsvImportPayload(BaseModel):
    csv: str
    strict: bool = False


@app.post("/api/golfers/import")
async def api_golfers_import(request: Request):
    try:
        payload = CsvImportPayload.model_validate(await request.json())
    except ValidationError as exc:
        return JSONResponse({"error": "Invalid payload", "details": exc.errors()}, status_code=422)

    try:
        inserted = roster.import_csv(payload.csv, strict=payload.strict)
    except CsvParseError as exc:
        status_code, error = 422, {"error": str(exc), "rows": exc.problems}
    except ValidationSkip as exc:
        status_code, error = 400, {"error": str(exc)}
    except ControllerBusy as exc:
        status_code, error = 409, {"error": str(exc)}
    except AdminError as exc:
        status_code, error = 502, {"error": str(exc)}
    else:
        roster.notifier.drain()
        return {"inserted": inserted, "golfers": [golfer.as_dict() for golfer in roster.golfers]}
    roster.notifier.drain()
    return JSONResponse(error, status_code=status_code)
