from pathlib import Path
from uuid import uuid4

import pytest

from src.platform.exception.exceptions import ValidationError
from src.service.backoffice.app.dto.proof_file import ProofFile
from src.service.backoffice.driven_adapter.storage.local_proof_storage import LocalProofStorage


class TestLocalProofStorage:
    @pytest.fixture
    def storage(self, tmp_path: Path) -> LocalProofStorage:
        return LocalProofStorage(upload_dir=str(tmp_path), url_prefix='/uploads/', max_bytes=16)

    @pytest.mark.asyncio
    async def test_save_then_delete(self, storage, tmp_path):
        reservation_id = uuid4()

        url = await storage.save(
            reservation_id=reservation_id, proof=ProofFile(filename='Receipt.PNG', content=b'png')
        )

        assert url.startswith(f'/uploads/proofs/{reservation_id}/')
        assert url.endswith('.png')
        stored = tmp_path / url.removeprefix('/uploads/')
        assert stored.read_bytes() == b'png'

        await storage.delete(url=url)
        assert not stored.exists()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'proof,message',
        [
            (ProofFile(filename='script.exe', content=b'x'), 'Unsupported'),
            (ProofFile(filename='empty.pdf', content=b''), 'empty'),
            (ProofFile(filename='big.pdf', content=b'x' * 17), 'too large'),
        ],
    )
    async def test_rejects_invalid_proof(self, storage, proof, message):
        with pytest.raises(ValidationError, match=message):
            await storage.save(reservation_id=uuid4(), proof=proof)

    @pytest.mark.asyncio
    async def test_delete_ignores_foreign_and_traversal_urls(self, storage, tmp_path):
        outside = tmp_path.parent / 'keep.txt'
        outside.write_text('keep')

        await storage.delete(url='https://elsewhere.example/keep.txt')
        await storage.delete(url='/uploads/../keep.txt')

        assert outside.read_text() == 'keep'

    @pytest.mark.asyncio
    async def test_delete_missing_file_is_noop(self, storage):
        await storage.delete(url='/uploads/proofs/missing.png')
