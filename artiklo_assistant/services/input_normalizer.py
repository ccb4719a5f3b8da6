# artiklo_assistant/services/input_normalizer.py
import logging
from typing import Dict, List, Sequence, Tuple

from artiklo_assistant.exceptions import FileDecodeError
from artiklo_assistant.models.request_models import FileHandle, TransportFile

logger = logging.getLogger(__name__)

MultipartFile = Tuple[str, Tuple[str, bytes, str]]


class InputNormalizer:
    """
    Turns a mixed file list (raw uploads and base64 captures) into one
    multipart file set. No disk or network I/O happens here.
    """

    FIELD_NAME = "files"

    def to_transport(self, files: Sequence[FileHandle]) -> List[TransportFile]:
        """
        Converts every handle to a ``TransportFile``.

        Raises:
            FileDecodeError: listing every file that failed. Nothing is
                returned in that case, so no partial submission is possible.
        """
        converted: List[TransportFile] = []
        failures: Dict[str, str] = {}

        for file in files:
            try:
                converted.append(file.to_transport_binary())
                logger.debug(f"Prepared file '{file.name}' ({file.kind}, {file.type})")
            except ValueError as e:
                logger.error(f"Error processing captured file '{file.name}': {e}")
                failures[file.name] = str(e)

        if failures:
            raise FileDecodeError(failures=failures)

        return converted

    def normalize(self, files: Sequence[FileHandle]) -> List[MultipartFile]:
        return [item.as_multipart(self.FIELD_NAME) for item in self.to_transport(files)]
