from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from fxdesk.services.rates.store import RateStore

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def get_rate_store(request: Request) -> RateStore:
    # Created and loaded once in create_app
    return request.app.state.rate_store
