import logging
import uuid
from pathlib import Path
from typing import Callable, Optional, Union

from ..config import config


def _generate_uuid() -> str:
    return str(uuid.uuid4())


class ServerIdentityStore:
    """
    Durable identity of this server installation.

    Resolution order is fixed:
    1. Load the first line of the storage file in the config directory.
    2. Generate a new id and try to persist it. A failed write is logged and
       the generated id is still returned.
    """

    def __init__(
        self,
        file_name: Optional[str] = None,
        generator: Optional[Callable[[], str]] = None,
    ) -> None:
        self.file_name = file_name or config.FILES.SERVER_ID
        self._generator = generator or _generate_uuid

    def storage_path(self, config_path: Union[str, Path]) -> Path:
        return Path(config_path) / self.file_name

    def resolve(self, config_path: Union[str, Path]) -> str:
        server_id = self.load(config_path)
        if server_id is not None:
            return server_id

        server_id = self.generate()
        if self.store(config_path, server_id):
            logger.info("Generated new server id %s", server_id)
        return server_id

    def load(self, config_path: Union[str, Path]) -> Optional[str]:
        path = self.storage_path(config_path)
        try:
            with open(path, "rb") as f:
                line = f.readline()
        except OSError:
            return None
        return line.rstrip(b"\r\n").decode("utf-8", errors="surrogateescape")

    def generate(self) -> str:
        return self._generator()

    def store(self, config_path: Union[str, Path], server_id: str) -> bool:
        path = self.storage_path(config_path)
        try:
            with open(path, "wb") as f:
                f.write(server_id.encode("utf-8", errors="surrogateescape"))
        except OSError:
            logger.warning("Could not store server id to %s", path, exc_info=True)
            return False
        return True


logger = logging.getLogger(__name__)
