from typing import Optional

import attrs


@attrs.frozen
class ProofFile:
    filename: str
    content: bytes = attrs.field(repr=lambda c: f'<{len(c)} bytes>')
    content_type: Optional[str] = None
