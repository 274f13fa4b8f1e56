import io
from datetime import datetime
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from chainview.adapters.registry import AdapterRegistry, get_adapter
from chainview.api.deps import get_registry, get_settings
from chainview.api.errors import to_http_error
from chainview.api.schemas.chains import ChainList, ChainResponse, TransactionPage, TransactionResponse
from chainview.config import Settings
from chainview.domain.models.transaction import FetchOptions
from chainview.exceptions import ChainViewError, InvalidAddressError
from chainview.services.filters import DirectionFilter, SortOrder, TransactionFilters
from chainview.services.session import TransactionSession

router = APIRouter(prefix="/api/chains", tags=["chains"])

RegistryDep = Annotated[AdapterRegistry, Depends(get_registry)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


@router.get("", response_model=ChainList)
async def list_chains(registry: RegistryDep) -> ChainList:
    chains = [ChainResponse.model_validate(adapter.info) for adapter in registry.values()]
    return ChainList(chains=chains)


@router.get("/{chain_id}/transactions", response_model=TransactionPage)
async def get_transactions(
    chain_id: str,
    registry: RegistryDep,
    settings: SettingsDep,
    address: str = Query(..., min_length=1),
    cursor: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1, le=1000),
) -> TransactionPage:
    address = address.strip()
    try:
        adapter = get_adapter(registry, chain_id)
        if not adapter.validate_address(address):
            raise InvalidAddressError(f"Invalid address format for {adapter.info.name}")
        result = await adapter.fetch_transactions(address, FetchOptions(cursor=cursor, limit=limit or settings.page_size))
    except ChainViewError as exc:
        raise to_http_error(exc) from exc

    return TransactionPage(
        chain_id=chain_id,
        address=address,
        records=[TransactionResponse.model_validate(r) for r in result.records],
        next_cursor=result.next_cursor,
        has_more=result.has_more,
        total_count=result.total_count,
    )


@router.get("/{chain_id}/export.csv")
async def export_csv(
    chain_id: str,
    registry: RegistryDep,
    settings: SettingsDep,
    address: str = Query(..., min_length=1),
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    direction: DirectionFilter = DirectionFilter.ALL,
    type: str = "",
    asset: str = "",
    search: str = "",
    sort: str = "date",
    order: SortOrder = SortOrder.DESC,
):
    """Fetch every page (up to the configured cap), then filter, sort and render Awaken CSV."""
    address = address.strip()
    session = TransactionSession(registry, page_size=settings.page_size)
    try:
        await session.fetch_all(chain_id, address, max_pages=settings.export_max_pages)
    except ChainViewError as exc:
        raise to_http_error(exc) from exc

    filters = TransactionFilters(start=start, end=end, direction=direction, type=type, asset=asset, search=search)
    content = session.export_csv(filters, sort, order)
    filename = f"{chain_id}_{address[:10]}_awaken.csv"
    return StreamingResponse(
        io.BytesIO(content.encode("utf-8")),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
