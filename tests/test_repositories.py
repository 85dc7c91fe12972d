"""
Repository Tests

The same contract is checked against the flat-file and SQL (aiosqlite)
backends.
"""

import json
from unittest.mock import patch

import pytest
import pytest_asyncio
from pydantic import ValidationError as PydanticValidationError

from certify.core.config import Settings
from certify.core.exceptions import ConfigError, DuplicateCertificateError, NotFoundError
from certify.repositories import FileCertificateRepository, SqlCertificateRepository, build_repository
from certify.schemas.certificate import Certificate


def make_certificate(cert_id: str = "HF-2024-1234", **overrides) -> Certificate:
    values = dict(
        cert_id=cert_id,
        candidate_name="Ada Lovelace",
        position="Intern",
        hours="40",
        start_date="2024-01-01",
        end_date="2024-02-01",
        email="ada@example.com",
        issue_date="1/15/2024",
        image_url="https://res.cloudinary.com/demo/HF.png",
    )
    values.update(overrides)
    return Certificate(**values)


@pytest_asyncio.fixture(params=["file", "sql"])
async def repository(request, tmp_path):
    settings = Settings(
        _env_file=None,
        STORAGE_BACKEND=request.param,
        PERSISTENT_STORAGE_PATH=str(tmp_path / "data"),
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'certificates.sqlite3'}",
    )
    repo = await build_repository(settings)
    yield repo
    await repo.close()


# ==================== Contract ====================

class TestRepositoryContract:
    """Behaviour every backend must share."""

    @pytest.mark.asyncio
    async def test_create_and_find(self, repository):
        certificate = make_certificate()

        await repository.create(certificate)
        found = await repository.find_one("HF-2024-1234")

        assert found == certificate

    @pytest.mark.asyncio
    async def test_find_missing_returns_none(self, repository):
        assert await repository.find_one("HF-2024-0000") is None

    @pytest.mark.asyncio
    async def test_duplicate_cert_id_rejected(self, repository):
        await repository.create(make_certificate())

        with pytest.raises(DuplicateCertificateError):
            await repository.create(make_certificate(candidate_name="Someone Else"))

        assert len(await repository.list_all()) == 1

    @pytest.mark.asyncio
    async def test_update_merges_fields(self, repository):
        """Verify updates touch only the given fields and never imageUrl or certId."""
        await repository.create(make_certificate())

        updated = await repository.update_fields(
            "HF-2024-1234",
            {"candidate_name": "Ada King", "image_url": "https://evil.example.com", "cert_id": "X"},
        )

        assert updated.candidate_name == "Ada King"
        assert updated.image_url == "https://res.cloudinary.com/demo/HF.png"
        assert updated.cert_id == "HF-2024-1234"
        stored = await repository.find_one("HF-2024-1234")
        assert stored.candidate_name == "Ada King"
        assert stored.position == "Intern"

    @pytest.mark.asyncio
    async def test_update_ignores_nulls(self, repository):
        """Verify null values never overwrite stored fields."""
        await repository.create(make_certificate())

        updated = await repository.update_fields(
            "HF-2024-1234", {"valid": None, "email": None, "position": "Mentor"}
        )

        assert updated.valid is True
        assert updated.email == "ada@example.com"
        stored = await repository.find_one("HF-2024-1234")
        assert stored.position == "Mentor"
        assert stored.email == "ada@example.com"

    @pytest.mark.asyncio
    async def test_update_missing(self, repository):
        with pytest.raises(NotFoundError):
            await repository.update_fields("HF-2024-0000", {"valid": False})

    @pytest.mark.asyncio
    async def test_revoke_flag(self, repository):
        await repository.create(make_certificate())

        await repository.update_fields("HF-2024-1234", {"valid": False})

        assert (await repository.find_one("HF-2024-1234")).valid is False

    @pytest.mark.asyncio
    async def test_delete(self, repository):
        await repository.create(make_certificate())

        await repository.delete("HF-2024-1234")

        assert await repository.find_one("HF-2024-1234") is None

    @pytest.mark.asyncio
    async def test_delete_missing(self, repository):
        with pytest.raises(NotFoundError):
            await repository.delete("HF-2024-0000")

    @pytest.mark.asyncio
    async def test_list_newest_first(self, repository):
        for cert_id in ("HF-2024-1001", "HF-2024-1002", "HF-2024-1003"):
            await repository.create(make_certificate(cert_id))

        listed = await repository.list_all()

        assert [c.cert_id for c in listed] == ["HF-2024-1003", "HF-2024-1002", "HF-2024-1001"]


class TestBuildRepository:
    @pytest.mark.asyncio
    async def test_file_backend(self, tmp_path):
        repo = await build_repository(Settings(_env_file=None, PERSISTENT_STORAGE_PATH=str(tmp_path)))

        assert isinstance(repo, FileCertificateRepository)

    @pytest.mark.asyncio
    async def test_sql_backend(self, tmp_path):
        repo = await build_repository(Settings(
            _env_file=None,
            STORAGE_BACKEND="sql",
            DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'db.sqlite3'}",
        ))

        assert isinstance(repo, SqlCertificateRepository)
        await repo.close()

    @pytest.mark.asyncio
    async def test_unknown_backend(self):
        with pytest.raises(ConfigError):
            await build_repository(Settings(_env_file=None, STORAGE_BACKEND="mongo"))


# ==================== Flat-file specifics ====================

class TestFileRepository:
    """On-disk behaviour of the JSON-lines store."""

    @pytest.mark.asyncio
    async def test_survives_restart(self, tmp_path):
        repo = FileCertificateRepository(str(tmp_path))
        await repo.create(make_certificate("HF-2024-1001"))
        await repo.create(make_certificate("HF-2024-1002"))
        await repo.update_fields("HF-2024-1001", {"valid": False})
        await repo.delete("HF-2024-1002")

        reopened = FileCertificateRepository(str(tmp_path))

        listed = await reopened.list_all()
        assert [c.cert_id for c in listed] == ["HF-2024-1001"]
        assert listed[0].valid is False

    @pytest.mark.asyncio
    async def test_failed_rewrite_keeps_memory_in_sync(self, tmp_path):
        """Verify a write error leaves the in-memory view matching the file."""
        repo = FileCertificateRepository(str(tmp_path))
        await repo.create(make_certificate())

        with patch.object(repo, "_rewrite", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                await repo.update_fields("HF-2024-1234", {"candidate_name": "Ada King"})
            with pytest.raises(OSError):
                await repo.delete("HF-2024-1234")

        stored = await repo.find_one("HF-2024-1234")
        assert stored.candidate_name == "Ada Lovelace"
        reopened = FileCertificateRepository(str(tmp_path))
        assert await reopened.find_one("HF-2024-1234") == stored

    @pytest.mark.asyncio
    async def test_invalid_merge_is_not_written(self, tmp_path):
        """Verify a merge that would not load back is rejected before writing."""
        repo = FileCertificateRepository(str(tmp_path))
        await repo.create(make_certificate())

        with pytest.raises(PydanticValidationError):
            await repo.update_fields("HF-2024-1234", {"valid": "not-a-bool"})

        reopened = FileCertificateRepository(str(tmp_path))
        assert (await reopened.find_one("HF-2024-1234")).valid is True

    def test_creates_missing_directory(self, tmp_path):
        target = tmp_path / "nested" / "data"

        FileCertificateRepository(str(target))

        assert target.is_dir()

    @pytest.mark.asyncio
    async def test_reads_legacy_documents(self, tmp_path):
        """Verify older files with cloudinaryUrl, deletions and index markers load."""
        lines = [
            {"$$indexCreated": {"fieldName": "certId", "unique": True}},
            {"_id": "a1", "certId": "HF-2023-1111", "candidateName": "Old", "email": "old@example.com",
             "cloudinaryUrl": "https://res.cloudinary.com/demo/old.png", "valid": True},
            {"_id": "b2", "certId": "HF-2023-2222", "candidateName": "Gone", "valid": True},
            {"_id": "b2", "$$deleted": True},
        ]
        path = tmp_path / "certificates.db"
        path.write_text("\n".join(json.dumps(line) for line in lines) + "\n{corrupt\n")

        repo = FileCertificateRepository(str(tmp_path))

        listed = await repo.list_all()
        assert len(listed) == 1
        assert listed[0].image_url == "https://res.cloudinary.com/demo/old.png"
        assert listed[0].candidate_name == "Old"

    @pytest.mark.asyncio
    async def test_documents_use_camel_case(self, tmp_path):
        repo = FileCertificateRepository(str(tmp_path))
        await repo.create(make_certificate())

        doc = json.loads((tmp_path / "certificates.db").read_text().splitlines()[0])

        assert doc["certId"] == "HF-2024-1234"
        assert doc["imageUrl"].startswith("https://")
        assert "_id" in doc
