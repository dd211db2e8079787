"""Node JSON-RPC client."""

import json
import time
from typing import Dict, Any, Optional, List
import requests
import structlog

from advc_explorer.models.config import ExplorerConfig

logger = structlog.get_logger(__name__)


class NodeRPCError(Exception):
    """Node RPC call failed: transport, decoding or a node-reported error."""
    
    def __init__(self, message: str, method: Optional[str] = None, code: Optional[int] = None):
        super().__init__(message)
        self.method = method
        self.code = code


class NodeRPCClient:
    """JSON-RPC over HTTP with basic authentication.

    Each call is attempted once; callers fall back to other sources on
    ``NodeRPCError``.
    """
    
    def __init__(self, config: ExplorerConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'User-Agent': 'advc-explorer/1.0.0'
        })
        
        self.rpc_url = config.rpc_url
        self.auth = (config.rpc_user, config.rpc_password)
        
        logger.info("Node RPC client initialized",
                   host=config.rpc_host,
                   port=config.rpc_port)
    
    def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Invoke an RPC method and return its ``result``."""
        payload = {
            "jsonrpc": "1.0",
            "id": int(time.time() * 1000),
            "method": method,
            "params": params or []
        }
        
        try:
            response = self.session.post(
                self.rpc_url,
                json=payload,
                auth=self.auth,
                timeout=self.config.rpc_timeout
            )
            data = response.json()
        except (requests.RequestException, json.JSONDecodeError, ValueError) as e:
            logger.warning("RPC request failed", method=method, error=str(e))
            raise NodeRPCError(f"RPC request failed: {e}", method=method) from e
        
        # Nodes answer errors with HTTP 500 and a JSON error body
        error = data.get('error') if isinstance(data, dict) else None
        if error:
            code = error.get('code', -1) if isinstance(error, dict) else -1
            message = error.get('message', 'Unknown RPC error') if isinstance(error, dict) else str(error)
            logger.warning("RPC error", method=method, code=code, error=message)
            raise NodeRPCError(f"RPC Error {code}: {message}", method=method, code=code)
        
        if not response.ok:
            raise NodeRPCError(f"RPC HTTP {response.status_code}", method=method)
        
        return data.get('result') if isinstance(data, dict) else None
    
    def get_raw_transaction(self, txid: str) -> Optional[Dict[str, Any]]:
        """Decoded transaction by id."""
        return self.call("getrawtransaction", [txid, 1])
    
    def get_raw_mempool(self) -> Dict[str, Any]:
        """Verbose mempool listing keyed by txid."""
        return self.call("getrawmempool", [True])
    
    def get_mempool_info(self) -> Dict[str, Any]:
        return self.call("getmempoolinfo")
    
    def get_mining_info(self) -> Dict[str, Any]:
        return self.call("getmininginfo")
    
    def get_network_hash_ps(self, blocks: int = 120, height: int = -1) -> float:
        """Estimated network hashes per second over the last ``blocks`` blocks."""
        return self.call("getnetworkhashps", [blocks, height])
    
    def get_peer_info(self) -> List[Dict[str, Any]]:
        return self.call("getpeerinfo")
    
    def test_connection(self) -> bool:
        """Test RPC connection."""
        try:
            info = self.get_mining_info()
            logger.info("RPC connection successful",
                       blocks=(info or {}).get('blocks'))
            return True
        except NodeRPCError as e:
            logger.error("RPC connection failed", error=str(e))
            return False
    
    def close(self):
        """Close the RPC session."""
        self.session.close()
        logger.info("RPC client session closed")
