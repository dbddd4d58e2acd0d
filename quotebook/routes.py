import logging
from datetime import datetime
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from quotebook.csrf import issue_token, verify_token
from quotebook.forms import CSRF_FIELD_NAME, decode, encode
from quotebook.models import AddQuoteForm
from quotebook.render import quote_html

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.filters["quote_html"] = quote_html

router = APIRouter(tags=["quotes"])

TIME_FORMAT = "%a, %d %b %Y %H:%M:%S %Z"


def format_time(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.strftime(TIME_FORMAT).strip()


templates.env.filters["quote_time"] = format_time


def render_add_quote(request: Request, form: AddQuoteForm, errors: dict | None = None, status_code: int = 200):
    state = request.app.state
    markup = encode(
        form,
        csrf_token=issue_token(state.settings),
        errors=errors,
        registry=state.validators,
    )
    return templates.TemplateResponse(
        request,
        "add_quote.html",
        {"form": markup, "errors": errors or {}},
        status_code=status_code,
    )


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/", response_class=HTMLResponse)
def index(request: Request):
    try:
        quotes = request.app.state.store.list()
    except (OSError, ValueError):
        logger.exception("Failed to list quotes")
        return PlainTextResponse("oh god its broken", status_code=500)

    return templates.TemplateResponse(request, "index.html", {"quotes": quotes})


@router.get("/add-quote", response_class=HTMLResponse)
def add_quote(request: Request):
    return render_add_quote(request, AddQuoteForm())


@router.post("/submit")
async def submit(request: Request):
    state = request.app.state
    form_data = await request.form()

    if not verify_token(form_data.get(CSRF_FIELD_NAME), state.settings):
        logger.warning("Rejected submission with missing or invalid CSRF token")
        return PlainTextResponse("bad csrf token", status_code=403)

    result = decode(
        AddQuoteForm,
        form_data,
        registry=state.validators,
        value_on_validation_error=True,
    )
    if not result.ok:
        logger.info(f"Quote submission rejected: {sorted(result.errors)}")
        return render_add_quote(request, result.record, result.errors, status_code=400)

    quote = result.record.quote
    quote.time = datetime.now().astimezone()

    try:
        state.store.save(quote)
    except OSError:
        logger.exception("Failed to save quote")
        return PlainTextResponse("couldn't save quote", status_code=500)

    return RedirectResponse("/", status_code=302)
