# artiklo_assistant/models/request_models.py
import base64
import binascii
import re
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

_DATA_URL_PREFIX = re.compile(r"^data:[\w.+/-]*;base64,", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


class TransportFile(BaseModel):
    """A file ready to be appended to the multipart payload."""

    name: str
    content_type: str
    content: bytes

    def as_multipart(self, field: str = "files"):
        return field, (self.name, self.content, self.content_type)


class BinaryFile(BaseModel):
    """File picked in a browser or uploaded over HTTP, already raw bytes."""

    kind: Literal["binary"] = "binary"
    name: str
    type: str = "application/octet-stream"
    content: bytes = b""

    @property
    def size(self) -> int:
        return len(self.content)

    def to_transport_binary(self) -> TransportFile:
        return TransportFile(name=self.name, content_type=self.type, content=self.content)


class Base64File(BaseModel):
    """File captured by a device camera or gallery, delivered as base64 text."""

    kind: Literal["base64"] = "base64"
    name: str
    type: str = "application/octet-stream"
    data: str = ""

    def _payload(self) -> str:
        return _WHITESPACE.sub("", _DATA_URL_PREFIX.sub("", self.data or "", count=1))

    @property
    def size(self) -> int:
        payload = self._payload()
        return max(0, (len(payload) * 3) // 4 - payload[-2:].count("="))

    def to_transport_binary(self) -> TransportFile:
        """
        Decodes ``data`` into raw bytes.

        Raises:
            ValueError: data is empty or not valid base64.
        """
        payload = self._payload()
        if not payload:
            raise ValueError("Dosya verisi boş veya eksik")
        try:
            content = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Geçersiz base64 verisi: {e}") from e
        return TransportFile(name=self.name, content_type=self.type, content=content)


FileHandle = Annotated[Union[BinaryFile, Base64File], Field(discriminator="kind")]


class AnalysisRequest(BaseModel):
    text: Optional[str] = None
    files: List[FileHandle] = Field(default_factory=list)
    model: Literal["flash", "pro"] = "flash"
    noCache: Optional[bool] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def file_names(self) -> List[str]:
        return [f.name for f in self.files]
