"""Price, market cap and summary endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
import structlog

from advc_explorer.api.dependencies import get_explorer
from advc_explorer.core.explorer import BlockExplorer

router = APIRouter()
logger = structlog.get_logger(__name__)

CACHE_HEADERS = {"Cache-Control": "public, max-age=30"}


@router.get("/price", response_class=PlainTextResponse)
def get_price(explorer: BlockExplorer = Depends(get_explorer)):
    """Current USD price as plain text."""
    return PlainTextResponse(explorer.get_price(), headers=CACHE_HEADERS)


@router.get("/market-cap", response_class=PlainTextResponse)
def get_market_cap(explorer: BlockExplorer = Depends(get_explorer)):
    """Circulating supply times price, two decimals."""
    return PlainTextResponse(explorer.get_market_cap(), headers=CACHE_HEADERS)


@router.get("/summary")
def get_summary(explorer: BlockExplorer = Depends(get_explorer)):
    summary = explorer.get_summary()
    logger.debug("Summary served", block_height=summary.block_height.value)
    return summary.to_dict()
