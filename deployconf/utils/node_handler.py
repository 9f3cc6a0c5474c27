import json

from .common import pull, mask_text
from .logger import logger
from .custom_exceptions import NodeError


def get_chain_id(rpc_url: str) -> int:
    """
    Get the chain ID from an RPC node.

    Args:
        rpc_url: The RPC URL

    Returns:
        The chain ID as an integer

    Raises:
        NodeError: If the chain ID cannot be retrieved
    """
    logger.info(f'Receiving the chain ID from "{mask_text(rpc_url)}" ...')

    payload = json.dumps(
        {"id": 1, "jsonrpc": "2.0", "method": "eth_chainId", "params": []}
    )

    headers = {"Content-Type": "application/json"}
    chain_id_response = pull(rpc_url, payload, headers).json()

    if "result" not in chain_id_response:
        raise NodeError(f"Failed to retrieve chain ID: {chain_id_response}")

    logger.okay("Chain ID was successfully received")

    # Convert hex string to decimal integer
    try:
        return int(chain_id_response["result"], 16)
    except (TypeError, ValueError):
        raise NodeError(f"Received bad chain ID: {chain_id_response['result']!r}")


def verify_chain_id(profile) -> int:
    """
    Compare the chain ID reported by the profile endpoint with the declared one.

    Args:
        profile: A ResolvedProfile

    Returns:
        The chain ID reported by the node

    Raises:
        NodeError: If the node is unreachable or reports another chain
    """
    actual_chain_id = get_chain_id(profile.endpoint)

    if profile.chain_id is None:
        logger.warn(
            f"Target '{profile.name}' declares no chain ID, node reports", actual_chain_id
        )
    elif profile.chain_id != actual_chain_id:
        raise NodeError(
            f"target '{profile.name}' declares chain ID {profile.chain_id}, node reports {actual_chain_id}"
        )
    else:
        logger.okay(f"Chain ID of '{profile.name}' matches", actual_chain_id)

    return actual_chain_id
