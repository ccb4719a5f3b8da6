# artiklo_assistant/utils/json_encoder.py
import json
from datetime import datetime
from enum import Enum
from uuid import UUID


class CustomJSONEncoder(json.JSONEncoder):
    def default(self, obj):
        if hasattr(obj, "model_dump"):
            return obj.model_dump(mode="json", exclude_none=True)

        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat() if obj.tzinfo else obj.isoformat() + "Z"
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, (bytes, bytearray)):
            return f"<{len(obj)} bytes>"

        return json.JSONEncoder.default(self, obj)


def dumps(data) -> str:
    """Serializes to JSON keeping Turkish characters readable."""
    return json.dumps(data, cls=CustomJSONEncoder, ensure_ascii=False)
