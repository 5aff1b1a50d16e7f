from typing import Optional

import attrs


@attrs.frozen
class RequestContext:
    """Where a mutation came from; copied onto every audit entry it produces"""

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
