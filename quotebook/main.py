import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from quotebook import __version__
from quotebook.config import Settings, settings
from quotebook.forms import SchemaError, build_registry, reflect
from quotebook.models import AddQuoteForm
from quotebook.routes import router
from quotebook.store import QuoteStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    folder = app.state.store.ensure_folder()
    logger.info(f"Quotebook started, storing quotes in {folder}")
    yield


def create_app(config: Settings | None = None) -> FastAPI:
    config = config or settings

    app = FastAPI(title="Quotebook", version=__version__, lifespan=lifespan)
    app.state.settings = config
    app.state.store = QuoteStore(config.quotes_folder)
    app.state.validators = build_registry(password=config.password)

    # Fail at startup, not on the first request, if the form is misconfigured
    reflect(AddQuoteForm, app.state.validators)

    app.include_router(router)

    @app.exception_handler(SchemaError)
    async def schema_error_handler(request: Request, exc: SchemaError):
        logger.error(f"Form schema error on {request.url.path}: {exc}")
        return PlainTextResponse("internal error", status_code=500)

    return app


app = create_app()
