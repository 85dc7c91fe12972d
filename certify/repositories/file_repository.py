"""
Flat-file Certificate Repository

Newline-delimited JSON documents in ``<PERSISTENT_STORAGE_PATH>/certificates.db``.

The on-disk format is append-only for inserts and compacted on update or
delete. Files written by the previous NeDB-based backend load as-is:
later lines override earlier ones with the same ``_id``, ``$$deleted``
markers drop a document and ``cloudinaryUrl`` is read as ``imageUrl``.
"""

import asyncio
import json
import logging
import os
import uuid
from pathlib import Path
from typing import Dict, List, Optional

from certify.core.exceptions import DuplicateCertificateError, NotFoundError
from certify.repositories.base import CertificateRepository, filter_changes
from certify.schemas.certificate import Certificate


logger = logging.getLogger(__name__)

DB_FILENAME = "certificates.db"


def _to_certificate(doc: dict) -> Certificate:
    data = {k: v for k, v in doc.items() if not k.startswith("_")}
    if "imageUrl" not in data and "cloudinaryUrl" in data:
        data["imageUrl"] = data.pop("cloudinaryUrl")
    data.pop("cloudinaryUrl", None)
    return Certificate.model_validate(data)


class FileCertificateRepository(CertificateRepository):
    """Certificate store backed by a single JSON-lines file."""

    name = "file"

    def __init__(self, directory: str):
        self.directory = Path(directory)
        if not self.directory.exists():
            logger.info(f"Creating persistent directory: {self.directory}")
            self.directory.mkdir(parents=True, exist_ok=True)

        self.path = self.directory / DB_FILENAME
        self._lock = asyncio.Lock()
        # _id -> document, insertion ordered
        self._docs: Dict[str, dict] = {}
        self._load()
        logger.info(f"Connected to file database at {self.path} ({len(self._docs)} certificates)")

    # ============== Disk I/O ==============

    def _load(self) -> None:
        if not self.path.exists():
            return

        with open(self.path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    doc = json.loads(line)
                except ValueError:
                    logger.warning(f"Skipping corrupt line {lineno} in {self.path}")
                    continue

                doc_id = doc.get("_id")
                if not doc_id:
                    continue
                if doc.get("$$deleted"):
                    self._docs.pop(doc_id, None)
                    continue
                if "$$indexCreated" in doc:
                    continue
                self._docs[doc_id] = doc

    def _append(self, doc: dict) -> None:
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(doc) + "\n")

    def _rewrite(self, docs: Dict[str, dict]) -> None:
        tmp_path = self.path.with_suffix(".db~")
        with open(tmp_path, "w", encoding="utf-8") as f:
            for doc in docs.values():
                f.write(json.dumps(doc) + "\n")
        os.replace(tmp_path, self.path)

    def _find_id(self, cert_id: str) -> Optional[str]:
        for doc_id, doc in self._docs.items():
            if doc.get("certId") == cert_id:
                return doc_id
        return None

    # ============== Repository API ==============

    async def create(self, certificate: Certificate) -> Certificate:
        async with self._lock:
            logger.info(
                f"[DB] Inserting certificate for: {certificate.candidate_name} ({certificate.email})"
            )
            if self._find_id(certificate.cert_id) is not None:
                raise DuplicateCertificateError(
                    f"Certificate ID {certificate.cert_id} already exists"
                )

            doc = {"_id": uuid.uuid4().hex, **certificate.model_dump(by_alias=True)}
            await asyncio.to_thread(self._append, doc)
            self._docs[doc["_id"]] = doc
            logger.info(f"[DB] Insert success. ID: {doc['_id']}")
            return certificate

    async def find_one(self, cert_id: str) -> Optional[Certificate]:
        doc_id = self._find_id(cert_id)
        if doc_id is None:
            return None
        return _to_certificate(self._docs[doc_id])

    async def update_fields(self, cert_id: str, changes: dict) -> Certificate:
        async with self._lock:
            doc_id = self._find_id(cert_id)
            if doc_id is None:
                raise NotFoundError("Certificate not found")

            current = _to_certificate(self._docs[doc_id])
            updated = Certificate.model_validate(
                {**current.model_dump(), **filter_changes(changes)}
            )

            # Memory follows disk: swap in the new map only once it is written
            docs = dict(self._docs)
            docs[doc_id] = {"_id": doc_id, **updated.model_dump(by_alias=True)}
            await asyncio.to_thread(self._rewrite, docs)
            self._docs = docs
            return updated

    async def delete(self, cert_id: str) -> None:
        async with self._lock:
            doc_id = self._find_id(cert_id)
            if doc_id is None:
                raise NotFoundError("Certificate not found")

            docs = {k: v for k, v in self._docs.items() if k != doc_id}
            await asyncio.to_thread(self._rewrite, docs)
            self._docs = docs

    async def list_all(self) -> List[Certificate]:
        return [_to_certificate(doc) for doc in reversed(list(self._docs.values()))]
