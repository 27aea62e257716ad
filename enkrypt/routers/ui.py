from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from enkrypt.services.rates.cache_service import RateCacheService
from enkrypt.services.rates.conversion import convert, rate_text

router = APIRouter(tags=["ui"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

QUICK_AMOUNTS = (500, 1000, 5000, 10000)


def get_rate_service(request: Request) -> RateCacheService:
    return request.app.state.rates


@router.get("/", response_class=HTMLResponse, summary="INR to USDT converter page")
def converter_page(
    request: Request,
    amount: Optional[str] = Query(None),
    refresh: bool = Query(False),
    rates: RateCacheService = Depends(get_rate_service),
):
    quote = rates.refresh() if refresh else rates.get_quote()
    result = convert(amount, quote.rate)
    return templates.TemplateResponse(
        request,
        "converter.html",
        {
            "app_name": request.app.state.settings.app_name,
            "amount": amount or "",
            "result": result,
            "quote": quote,
            "rate_text": rate_text(quote.rate),
            "quick_amounts": QUICK_AMOUNTS,
        },
    )
