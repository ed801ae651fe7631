import pytest

from mediashelf.domain.entities.media import Media
from mediashelf.domain.entities.tag import Tag
from mediashelf.domain.enums import MediaKind
from uuid import uuid4


def test_image_and_audio_use_storage_key():
    img = Media(kind=MediaKind.image, title="pic", storage_key="images/a.png")
    aud = Media(kind="audio", title="song", storage_key="audio/a.mp3")

    assert img.is_image() and not img.is_video()
    assert aud.is_audio() and aud.kind is MediaKind.audio
    assert img.uses_object_storage() and aud.uses_object_storage()


def test_video_uses_external_url():
    vid = Media(kind=MediaKind.video, title="clip", external_url="https://v.example/1")
    assert vid.is_video()
    assert not vid.uses_object_storage()
    assert vid.display_url is None


@pytest.mark.parametrize(
    "kw",
    [
        {"kind": MediaKind.image},
        {"kind": MediaKind.image, "storage_key": "images/a.png", "external_url": "https://x"},
        {"kind": MediaKind.video},
        {"kind": MediaKind.video, "external_url": "https://x", "storage_key": "images/a.png"},
        {"kind": MediaKind.audio, "storage_key": "   "},
    ],
)
def test_locator_must_match_kind(kw):
    with pytest.raises(ValueError):
        Media(title="t", **kw)


@pytest.mark.parametrize("title", ["", "   ", "x" * 256])
def test_title_validation(title):
    with pytest.raises(ValueError):
        Media(kind=MediaKind.image, title=title, storage_key="images/a.png")


def test_unknown_kind_rejected():
    with pytest.raises(ValueError):
        Media(kind="document", title="t", storage_key="docs/a.pdf")


def test_tag_ids_skip_unsaved_tags():
    saved = Tag(id=uuid4(), name="saved")
    m = Media(kind=MediaKind.image, title="t", storage_key="images/a.png", tags=[saved, Tag(name="draft")])
    assert m.tag_ids() == [saved.id]
    assert m.as_dict()["tags"][0]["name"] == "saved"
