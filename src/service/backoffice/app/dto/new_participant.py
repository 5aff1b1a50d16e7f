from typing import Optional

import attrs


@attrs.frozen
class NewParticipant:
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
