"""Address histories and the rich list."""

from typing import List, Optional, Tuple
import structlog

from advc_explorer.core.fallback import SOURCE_ERRORS
from advc_explorer.database.manager import DatabaseManager
from advc_explorer.database.models import AddressRecord
from advc_explorer.models.config import ExplorerConfig
from advc_explorer.models.explorer import AddressTransaction, Pagination

logger = structlog.get_logger(__name__)


class AddressView:
    """Joins the address index with the transaction log."""

    def __init__(self, config: ExplorerConfig, db_manager: DatabaseManager):
        self.config = config
        self.db_manager = db_manager
        self.logger = logger.bind(component="address_view")

    def get_address(self, address: str) -> Optional[AddressRecord]:
        try:
            return self.db_manager.get_address(address)
        except SOURCE_ERRORS as e:
            self.logger.warning("Failed to load address", address=address, error=str(e))
            return None

    def get_address_transactions(self, address: str, page: int = 1,
                                 limit: int = 20) -> Tuple[List[AddressTransaction], Pagination]:
        """
        One page of an address history, newest block first.

        ``total_items`` counts index records; records whose transaction is
        missing from the log are dropped from the page without changing it.
        """
        page, limit = Pagination.normalize(page, limit, self.config.max_page_size)

        try:
            total_count = self.db_manager.count_address_transactions(address)
            index_records = self.db_manager.address_transactions_page(
                address, Pagination.offset(page, limit), limit
            )

            history = []
            for record in index_records:
                transaction = self.db_manager.get_transaction(record.txid)
                if transaction is None:
                    self.logger.debug("Indexed transaction missing", address=address, txid=record.txid)
                    continue
                history.append(AddressTransaction(
                    a_id=record.a_id,
                    txid=record.txid,
                    blockindex=record.blockindex,
                    timestamp=transaction.timestamp,
                    amount=record.amount or 0
                ))
        except SOURCE_ERRORS as e:
            self.logger.warning("Failed to load address history", address=address, error=str(e))
            return [], Pagination.build(page, limit, 0)

        return history, Pagination.build(page, limit, total_count)

    def get_rich_list(self, limit: int = 100) -> List[AddressRecord]:
        """Addresses by descending balance."""
        limit = min(max(1, limit), self.config.max_page_size)
        try:
            return self.db_manager.rich_list(limit)
        except SOURCE_ERRORS as e:
            self.logger.warning("Failed to load rich list", error=str(e))
            return []
