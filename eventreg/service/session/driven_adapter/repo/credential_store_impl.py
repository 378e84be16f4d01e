"""
Credential stores

The file store is the durable client-local storage: one JSON document
holding `{SESSION_STORAGE_KEY: <identity record>}`, replaced atomically on
every write.
"""

import os
from pathlib import Path
import tempfile
from typing import Any

import orjson

from eventreg.platform.exception.exceptions import DomainError
from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.session.app.interface.i_credential_store import ICredentialStore
from eventreg.service.session.domain.entity.identity_entity import Identity


class FileCredentialStore(ICredentialStore):
    def __init__(self, *, path: Path, storage_key: str) -> None:
        self.path = Path(path)
        self.storage_key = storage_key

    def load(self) -> Identity | None:
        try:
            document = orjson.loads(self.path.read_bytes())
        except FileNotFoundError:
            return None
        except (OSError, orjson.JSONDecodeError) as e:
            Logger.base.warning(f'💾 [CREDENTIAL-STORE] Ignoring unreadable {self.path}: {e}')
            return None

        record = document.get(self.storage_key) if isinstance(document, dict) else None
        if not record:
            return None
        try:
            return Identity.from_record(record)
        except (KeyError, TypeError, DomainError) as e:
            Logger.base.warning(f'💾 [CREDENTIAL-STORE] Ignoring malformed session record: {e}')
            return None

    def save(self, identity: Identity) -> None:
        self._write({self.storage_key: identity.to_record()})

    def clear(self) -> None:
        if self.path.exists():
            self._write({})

    def _write(self, document: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix='.session-')
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(orjson.dumps(document))
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class InMemoryCredentialStore(ICredentialStore):
    """Non-durable store for embedded use and tests"""

    def __init__(self, identity: Identity | None = None) -> None:
        self._record = identity.to_record() if identity else None

    def load(self) -> Identity | None:
        return Identity.from_record(self._record) if self._record else None

    def save(self, identity: Identity) -> None:
        self._record = identity.to_record()

    def clear(self) -> None:
        self._record = None
