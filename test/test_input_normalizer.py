# test/test_input_normalizer.py
import base64

import pytest

from artiklo_assistant.exceptions import FileDecodeError
from artiklo_assistant.models.request_models import Base64File, BinaryFile
from artiklo_assistant.services.input_normalizer import InputNormalizer

JPEG_BYTES = bytes([0xFF, 0xD8, 0xFF, 0xE0, 0x00, 0x10]) + b"JFIF" + bytes(range(256))


@pytest.fixture
def normalizer() -> InputNormalizer:
    return InputNormalizer()


def test_base64_capture_decodes_to_identical_bytes(normalizer):
    capture = Base64File(name="foto.jpg", type="image/jpeg", data=base64.b64encode(JPEG_BYTES).decode())

    [transport] = normalizer.to_transport([capture])

    assert transport.content == JPEG_BYTES
    assert transport.name == "foto.jpg"
    assert transport.content_type == "image/jpeg"


def test_data_url_prefix_and_line_breaks_are_ignored(normalizer):
    encoded = base64.b64encode(JPEG_BYTES).decode()
    wrapped = "\n".join(encoded[i:i + 76] for i in range(0, len(encoded), 76))
    capture = Base64File(name="foto.jpg", type="image/jpeg", data=f"data:image/jpeg;base64,{wrapped}")

    [transport] = normalizer.to_transport([capture])

    assert transport.content == JPEG_BYTES


def test_binary_file_passes_through_unchanged(normalizer):
    upload = BinaryFile(name="sozlesme.pdf", type="application/pdf", content=b"%PDF-1.7 ...")

    assert normalizer.normalize([upload]) == [
        ("files", ("sozlesme.pdf", b"%PDF-1.7 ...", "application/pdf")),
    ]


def test_mixed_list_keeps_order(normalizer):
    files = [
        BinaryFile(name="a.pdf", type="application/pdf", content=b"a"),
        Base64File(name="b.png", type="image/png", data=base64.b64encode(b"b").decode()),
        BinaryFile(name="c.txt", type="text/plain", content=b"c"),
    ]

    parts = normalizer.normalize(files)

    assert [name for _, (name, _, _) in parts] == ["a.pdf", "b.png", "c.txt"]
    assert parts[1][1][1] == b"b"


def test_malformed_capture_fails_whole_batch(normalizer):
    """
    Test: one valid upload, one malformed and one empty capture.
    Expected: FileDecodeError naming both bad files, nothing returned.
    """
    files = [
        BinaryFile(name="ok.pdf", type="application/pdf", content=b"ok"),
        Base64File(name="bozuk.jpg", type="image/jpeg", data="%%%not base64%%%"),
        Base64File(name="bos.jpg", type="image/jpeg", data=""),
    ]

    with pytest.raises(FileDecodeError) as exc_info:
        normalizer.normalize(files)

    error = exc_info.value
    assert error.file_names == ["bozuk.jpg", "bos.jpg"]
    assert "bozuk.jpg" in error.message
    assert "bos.jpg" in error.message


def test_empty_list(normalizer):
    assert normalizer.normalize([]) == []
