"""
Network configuration for the Multicall aggregator contracts
Maps chain IDs to the deployed aggregator address on each chain
"""
from enum import IntEnum
from typing import Final, Optional

from ethereum_multicall.core.errors import UnsupportedNetworkError


class Networks(IntEnum):
    """Blockchain chain IDs with a known aggregator deployment"""
    MAINNET = 1
    ROPSTEN = 3
    RINKEBY = 4
    GOERLI = 5
    OPTIMISM = 10
    CRONOS = 25
    KOVAN = 42
    BSC = 56
    KOVAN_OPTIMISM = 69
    BSC_TESTNET = 97
    XDAI = 100
    ETHERLITE = 111
    MATIC = 137
    FANTOM = 250
    ARBITRUM = 42161
    AVALANCHE_FUJI = 43113
    AVALANCHE_MAINNET = 43114
    MUMBAI = 80001
    AURORA = 1313161554
    HARMONY = 1666600000


_ETHEREUM_MULTICALL: Final[str] = "0x5BA1e12693Dc8F9c48aAD8770482f4739bEeD696"

MULTICALL_ADDRESSES: Final[dict[Networks, str]] = {
    # Ethereum mainnet and testnets share one deployment address
    Networks.MAINNET: _ETHEREUM_MULTICALL,
    Networks.KOVAN: _ETHEREUM_MULTICALL,
    Networks.RINKEBY: _ETHEREUM_MULTICALL,
    Networks.ROPSTEN: _ETHEREUM_MULTICALL,
    Networks.GOERLI: _ETHEREUM_MULTICALL,
    Networks.BSC: "0xC50F4c1E81c873B2204D7eFf7069Ffec6Fbe136D",
    Networks.BSC_TESTNET: "0x73CCde5acdb9980f54BcCc0483B28B8b4a537b4A",
    Networks.XDAI: "0x2325b72990D81892E0e09cdE5C80DD221F147F8B",
    Networks.MUMBAI: "0xe9939e7Ea7D7fb619Ac57f648Da7B1D425832631",
    Networks.MATIC: "0x275617327c958bD06b5D6b871E7f491D76113dd8",
    Networks.ETHERLITE: "0x21681750D7ddCB8d1240eD47338dC984f94AF2aC",
    Networks.ARBITRUM: "0x80C7DD17B01855a6D2347444a0FCC36136a314de",
    Networks.AVALANCHE_FUJI: "0x3D015943d2780fE97FE3f69C97edA2CCC094f78c",
    Networks.AVALANCHE_MAINNET: "0xed386Fe855C1EFf2f843B910923Dd8846E45C5A4",
    Networks.FANTOM: "0xD98e3dBE5950Ca8Ce5a4b59630a5652110403E5c",
    Networks.CRONOS: "0x5e954f5972EC6BFc7dECd75779F10d848230345F",
    Networks.HARMONY: "0x5c41f6817feeb65d7b2178b0b9cebfc8fad97969",
    Networks.OPTIMISM: "0xeAa6877139d436Dc6d1f75F3aF15B74662617B2C",
    Networks.KOVAN_OPTIMISM: "0x91c88479F21203444D2B20Aa001f951EC8CF2F68",
    Networks.AURORA: "0x04364F8908BDCB4cc7EA881d0DE869398BA849C9",
}


def get_multicall_address(chain_id: int, override: Optional[str] = None) -> str:
    """
    Get the aggregator contract address for a chain

    Args:
        chain_id: Chain ID reported by the connected node
        override: Custom aggregator address, always used when given

    Raises:
        UnsupportedNetworkError: no deployment is known and no override was given
    """
    if override:
        return override

    try:
        return MULTICALL_ADDRESSES[Networks(chain_id)]
    except ValueError:
        raise UnsupportedNetworkError(
            f"Network - {chain_id} doesn't have a multicall contract address defined. "
            "Please check your network or deploy your own contract on it."
        ) from None
