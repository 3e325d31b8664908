"""
Global settings for the multicall client
Values are read from the environment or a .env file
"""
import os
from typing import Final, Optional

from dotenv import load_dotenv

load_dotenv()

# Logging level
LOG_LEVEL: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()

# JSON-RPC endpoint used when no web3 handle or provider is supplied
NODE_URL: Final[Optional[str]] = os.getenv("MULTICALL_NODE_URL") or None

# Aggregator contract override, takes priority over the network table
CUSTOM_CONTRACT_ADDRESS: Final[Optional[str]] = os.getenv("MULTICALL_CUSTOM_ADDRESS") or None

# Use tryBlockAndAggregate so single call failures don't abort the batch
TRY_AGGREGATE: Final[bool] = os.getenv("MULTICALL_TRY_AGGREGATE", "false").lower() == "true"

# Block used when the caller doesn't pin one
DEFAULT_BLOCK_IDENTIFIER: Final[str] = "latest"
