"""Block, transaction, address and chain data endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
import structlog

from advc_explorer.api.dependencies import get_explorer
from advc_explorer.core.explorer import BlockExplorer
from advc_explorer.models.known_addresses import get_known_address

router = APIRouter()
logger = structlog.get_logger(__name__)


def paged(items, pagination, key: str):
    return {key: [item.to_dict() for item in items], "pagination": pagination.to_dict()}


@router.get("/blocks")
def list_blocks(
    page: int = Query(default=1, description="1-based page number"),
    limit: int = Query(default=20, description="Blocks per page"),
    explorer: BlockExplorer = Depends(get_explorer)
):
    """Blocks derived from the transaction log, newest first."""
    blocks, pagination = explorer.blocks.list_blocks(page, limit)
    return paged(blocks, pagination, "blocks")


@router.get("/blocks/{block_hash}")
def get_block(block_hash: str, explorer: BlockExplorer = Depends(get_explorer)):
    block = explorer.blocks.get_block(block_hash)
    if block is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Block not found")
    return block.to_dict()


@router.get("/blocks/{block_hash}/transactions")
def get_block_transactions(block_hash: str, explorer: BlockExplorer = Depends(get_explorer)):
    transactions = explorer.transactions.transactions_by_block_hash(block_hash)
    return {"transactions": [tx.to_dict() for tx in transactions]}


@router.get("/transactions")
def list_transactions(
    page: int = Query(default=1, description="1-based page number"),
    limit: int = Query(default=20, description="Transactions per page"),
    explorer: BlockExplorer = Depends(get_explorer)
):
    transactions, pagination = explorer.transactions.list_transactions(page, limit)
    return paged(transactions, pagination, "transactions")


@router.get("/tx/{txid}")
def get_transaction(txid: str, explorer: BlockExplorer = Depends(get_explorer)):
    """Confirmed transaction, or the pending one from the mempool."""
    transaction = explorer.transactions.get_transaction(txid)
    if transaction is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return transaction.to_dict()


@router.get("/address/{address}")
def get_address(address: str, explorer: BlockExplorer = Depends(get_explorer)):
    record = explorer.addresses.get_address(address)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Address not found")

    known = get_known_address(address)
    response = record.to_dict()
    response["label"] = known.to_dict() if known else None
    return response


@router.get("/address/{address}/transactions")
def get_address_transactions(
    address: str,
    page: int = Query(default=1, description="1-based page number"),
    limit: int = Query(default=20, description="Transactions per page"),
    explorer: BlockExplorer = Depends(get_explorer)
):
    history, pagination = explorer.addresses.get_address_transactions(address, page, limit)
    return paged(history, pagination, "transactions")


@router.get("/richlist")
def get_rich_list(
    limit: int = Query(default=100, description="Number of addresses"),
    explorer: BlockExplorer = Depends(get_explorer)
):
    addresses = []
    for record in explorer.addresses.get_rich_list(limit):
        entry = record.to_dict()
        known = get_known_address(record.a_id)
        entry["label"] = known.tag if known else None
        addresses.append(entry)
    return {"addresses": addresses}


@router.get("/mempool")
def get_mempool(explorer: BlockExplorer = Depends(get_explorer)):
    snapshot = explorer.mempool.get_mempool()
    logger.debug("Mempool served", entries=len(snapshot.entries), pool_size=snapshot.stats.size)
    return snapshot.to_dict()


@router.get("/mining")
def get_mining_stats(explorer: BlockExplorer = Depends(get_explorer)):
    return explorer.network.get_mining_stats().to_dict()


@router.get("/difficulty")
def get_difficulty_history(
    limit: int = Query(default=50, description="Number of heights"),
    explorer: BlockExplorer = Depends(get_explorer)
):
    points = explorer.difficulty.get_difficulty_history(limit)
    return [point.to_dict() for point in points]


@router.get("/network-history")
def get_network_history(
    limit: int = Query(default=30, description="Number of snapshots"),
    explorer: BlockExplorer = Depends(get_explorer)
):
    return [snapshot.to_dict() for snapshot in explorer.difficulty.get_network_history(limit)]


@router.get("/peers")
def get_peers(explorer: BlockExplorer = Depends(get_explorer)):
    return explorer.get_peer_info()
