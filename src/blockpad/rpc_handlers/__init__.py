"""RPC handler modules for ui_rpc_server.

This package contains handler functions organized by domain:
- editor: Block editor sessions (open, key, input, toolbar, polish)
"""

from __future__ import annotations

from blockpad.rpc.types import RpcError

__all__ = ["RpcError"]
