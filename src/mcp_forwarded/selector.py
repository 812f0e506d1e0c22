"""Client address selection over normalized forwarded-address tokens."""

import logging
from typing import List, Optional, Sequence, Tuple

from .utils.ip_utils import AddressClassifier

logger = logging.getLogger(__name__)


def find_client_address(tokens: Sequence[str], classifier: AddressClassifier) -> Optional[str]:
    """Return the leftmost valid, non-private token, or None."""
    for token in tokens:
        if classifier.classify(token).selectable:
            return token
    return None


def select_client(
    tokens: Sequence[str],
    classifier: AddressClassifier,
) -> Tuple[Optional[str], List[str]]:
    """Partition *tokens* into a client address and the proxy list.

    Every occurrence of the client address is removed from the proxy list.
    Without a client address the proxy list is the full token list,
    invalid tokens included.
    """
    if not tokens:
        return None, []

    client_address = find_client_address(tokens, classifier)
    if client_address is None:
        logger.debug(f"No public address among {len(tokens)} tokens")
        return None, list(tokens)

    proxies = [token for token in tokens if token != client_address]
    return client_address, proxies
