from typing import BinaryIO, Optional


class StorageProvider:
    def save(self, key: str, stream: BinaryIO) -> None:
        raise NotImplementedError

    def get_url(self, key: str) -> Optional[str]:
        raise NotImplementedError
