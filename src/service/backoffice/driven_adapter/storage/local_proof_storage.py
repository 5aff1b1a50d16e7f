from pathlib import PurePosixPath
from uuid import UUID

import anyio

from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger
from src.platform.types import generate_uuid7
from src.service.backoffice.app.dto.proof_file import ProofFile
from src.service.backoffice.app.interface.i_proof_storage import IProofStorage


ALLOWED_PROOF_EXTENSIONS = frozenset({'.jpg', '.jpeg', '.png', '.webp', '.pdf'})


class LocalProofStorage(IProofStorage):
    """Payment proofs on local disk under <upload_dir>/proofs/<reservation_id>/"""

    def __init__(
        self, *, upload_dir: str, url_prefix: str, max_bytes: int = 5 * 1024 * 1024
    ) -> None:
        self._root = anyio.Path(upload_dir)
        self._url_prefix = url_prefix.rstrip('/')
        self._max_bytes = max_bytes

    @Logger.io
    async def save(self, *, reservation_id: UUID, proof: ProofFile) -> str:
        extension = PurePosixPath(proof.filename).suffix.lower()
        if extension not in ALLOWED_PROOF_EXTENSIONS:
            raise ValidationError('Unsupported proof file type')
        if not proof.content:
            raise ValidationError('Proof file is empty')
        if len(proof.content) > self._max_bytes:
            raise ValidationError('Proof file is too large')

        relative = PurePosixPath('proofs', str(reservation_id), f'{generate_uuid7()}{extension}')
        target = self._root / str(relative)
        await target.parent.mkdir(parents=True, exist_ok=True)
        await target.write_bytes(proof.content)
        return f'{self._url_prefix}/{relative}'

    @Logger.io
    async def delete(self, *, url: str) -> None:
        if not url.startswith(f'{self._url_prefix}/'):
            Logger.base.warning(f'⚠️ [STORAGE] Refusing to delete foreign url {url}')
            return
        relative = url[len(self._url_prefix) + 1 :]
        if '..' in PurePosixPath(relative).parts:
            Logger.base.warning(f'⚠️ [STORAGE] Refusing to delete path {relative}')
            return
        await (self._root / relative).unlink(missing_ok=True)
