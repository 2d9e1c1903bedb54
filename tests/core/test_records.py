from __future__ import annotations

import pytest

from airgrab.core.errors import PayloadError
from airgrab.core.records import (
    FileDescriptor,
    ImageDescriptor,
    ModelRecord,
    ModelVersionRecord,
    get_category,
)


def test_first_matching_tag_wins():
    assert get_category(["anime", "character", "style"]) == "character"


def test_tag_order_beats_category_order():
    # "style" comes after "character" in the category list but first in the tags
    assert get_category(["style", "character"]) == "style"


def test_no_match_is_misc():
    assert get_category(["anime", "sfw"]) == "misc"
    assert get_category([]) == "misc"


def test_matching_is_case_insensitive_and_keeps_tag_casing():
    assert get_category(["Base Model"]) == "Base Model"


def test_custom_category_list():
    assert get_category(["anime"], categories=("anime",)) == "anime"


def test_model_record_derives_category(payloads):
    model = ModelRecord.from_json(payloads.model())
    assert model.id == 1234
    assert model.type == "LORA"
    assert model.tags == ("anime", "Character", "style")
    assert model.category == "Character"


def test_model_record_without_tags():
    model = ModelRecord.from_json({"id": 1, "name": "m", "type": "Checkpoint"})
    assert model.category == "misc"


def test_version_record_parses_files_and_images(payloads):
    version = ModelVersionRecord.from_json(payloads.version())
    assert (version.id, version.model_id, version.name) == (5678, 1234, "v1.0 final")
    primary = version.primary_file()
    assert primary is not None
    assert primary.name == "model.safetensors"
    assert primary.size_bytes == int(0.01 * 1024)
    assert [i.file_name for i in version.images] == ["preview-1.jpeg"]


def test_primary_file_is_first_flagged(payloads):
    files = [
        {"name": "a.yaml", "downloadUrl": "u1", "primary": False},
        {"name": "b.safetensors", "downloadUrl": "u2", "primary": True},
        {"name": "c.safetensors", "downloadUrl": "u3", "primary": True},
    ]
    version = ModelVersionRecord.from_json(payloads.version(files=files))
    assert version.primary_file().name == "b.safetensors"


def test_no_primary_file_returns_none(payloads):
    files = [{"name": "a.yaml", "downloadUrl": "u1"}]
    assert ModelVersionRecord.from_json(payloads.version(files=files)).primary_file() is None


def test_keys_are_case_insensitive():
    version = ModelVersionRecord.from_json({"ID": 1, "Name": "v", "modelid": 2, "Files": [], "Images": []})
    assert (version.id, version.model_id) == (1, 2)


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"name": "v", "modelId": 1},
        {"id": "x", "name": "v", "modelId": 1},
        {"id": 1, "name": "v", "modelId": 1, "files": "nope"},
        {"id": 1, "name": "v", "modelId": 1, "files": [{"name": "f", "downloadUrl": "u", "sizeKB": "big"}]},
    ],
)
def test_malformed_version_payload(payload):
    with pytest.raises(PayloadError):
        ModelVersionRecord.from_json(payload)


def test_image_file_name_ignores_query_and_unquotes():
    img = ImageDescriptor("https://img.test/a/b/my%20preview.png?token=1")
    assert img.file_name == "my preview.png"
    assert ImageDescriptor("https://img.test/").file_name == ""


def test_file_descriptor_defaults():
    f = FileDescriptor.from_json({"name": "x.pt", "downloadUrl": "u"})
    assert f.size_bytes == 0
    assert f.primary is False
