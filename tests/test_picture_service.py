"""Tests for picture creation, edits and deletion."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from picture_catalog.domain.errors import (
    CatalogNotFoundError,
    InvalidLicenseError,
    MissingFieldError,
    PictureNotFoundError,
    PlaceNotFoundError,
    ValidationError,
)
from picture_catalog.domain.pictures import ORIGINAL_RESOLUTION, License
from picture_catalog.domain.submissions import ChangeProposal, PictureSubmission
from picture_catalog.services.files import compute_hash
from tests.conftest import FailingExifExtractor, image_bytes, lake_submission


def test_create_picture_with_single_validated_version(
    picture_service, picture_repository, file_store
) -> None:
    picture = picture_service.create(lake_submission())

    assert len(picture.versions) == 1
    assert picture.validated_version_id == picture.versions[0].id
    assert picture.file is not None
    assert picture.file.hash == compute_hash(image_bytes("lake"))
    assert picture.file.original_name == "lake.jpg"
    assert picture.file.mime_type == "image/jpeg"
    assert picture.original_file_name == picture.file.path
    assert picture.original_file_name.startswith("picture")
    assert picture.original_file_name.endswith(".jpg")
    assert file_store.uploads == [picture.file.path]
    stored = picture_repository.get_picture(picture.id)
    assert stored is not None
    assert stored.validated_version.name == "Lake"


def test_create_builds_version_from_exif(picture_service) -> None:
    picture = picture_service.create(lake_submission())

    version = picture.validated_version
    assert version.exif is not None
    assert version.exif.model == "X100V"
    assert version.exif.iso == 200
    assert version.position is None
    assert version.original_resolution is not None
    assert version.original_resolution.slug == ORIGINAL_RESOLUTION
    assert (version.original_resolution.width, version.original_resolution.height) == (
        640,
        480,
    )


def test_create_uses_default_license(picture_service) -> None:
    picture = picture_service.create(lake_submission())

    assert picture.validated_version.license == License(name="CC-BY")


def test_create_reports_missing_fields(picture_service, file_store) -> None:
    with pytest.raises(MissingFieldError) as excinfo:
        picture_service.create(PictureSubmission(name="Lake"))

    assert excinfo.value.fields == ["source", "file", "original_filename"]
    assert file_store.uploads == []


def test_create_aggregates_missing_fields_and_invalid_license(
    picture_service, picture_repository, file_store
) -> None:
    submission = PictureSubmission(name="Lake", license_name="WTFPL")

    with pytest.raises(ValidationError) as excinfo:
        picture_service.create(submission)

    kinds = {type(error) for error in excinfo.value.errors}
    assert kinds == {MissingFieldError, InvalidLicenseError}
    assert picture_repository.documents == {}
    assert file_store.uploads == []


def test_create_rejects_unknown_catalog_and_place(picture_service) -> None:
    submission = lake_submission(catalog_id=uuid4(), place_id=uuid4())

    with pytest.raises(ValidationError) as excinfo:
        picture_service.create(submission)

    kinds = {type(error) for error in excinfo.value.errors}
    assert kinds == {CatalogNotFoundError, PlaceNotFoundError}


def test_create_attaches_catalog_and_place(
    picture_service, catalog_repository, place_repository
) -> None:
    catalog = catalog_repository.add("Holidays")
    place = place_repository.add("Annecy")

    picture = picture_service.create(
        lake_submission(catalog_id=catalog.id, place_id=place.id)
    )

    assert picture.catalog_id == catalog.id
    assert picture.validated_version.place_id == place.id


def test_create_survives_exif_failure(picture_service) -> None:
    picture_service.exif_reader.extractor = FailingExifExtractor()

    picture = picture_service.create(lake_submission())

    version = picture.validated_version
    assert version.exif is None
    assert version.original_resolution is not None
    assert version.original_resolution.width is None


def test_create_removes_upload_when_save_fails(
    picture_service, picture_repository, file_store
) -> None:
    picture_repository.fail_on_save = True

    with pytest.raises(RuntimeError):
        picture_service.create(lake_submission())

    assert file_store.files == {}
    assert file_store.removals == file_store.uploads


def test_edit_with_identical_file_keeps_single_version(
    picture_service, file_store
) -> None:
    picture = picture_service.create(lake_submission())
    original_path = picture.original_file_name

    edited = picture_service.edit(
        picture.id,
        PictureSubmission(file=image_bytes("lake"), original_filename="again.jpg"),
    )

    assert len(edited.versions) == 1
    assert edited.original_file_name == original_path
    assert file_store.uploads == [original_path]
    assert file_store.removals == []


def test_edit_with_new_file_appends_version(
    picture_service, picture_repository, file_store
) -> None:
    picture = picture_service.create(lake_submission())
    old_path = picture.original_file_name

    edited = picture_service.edit(
        picture.id,
        PictureSubmission(file=image_bytes("lake-2"), original_filename="lake2.png"),
    )

    assert len(edited.versions) == 2
    assert edited.validated_version_id == edited.versions[-1].id
    assert edited.validated_version.name == "Lake"
    assert edited.original_file_name != old_path
    assert edited.file is not None
    assert edited.file.hash == compute_hash(image_bytes("lake-2"))
    assert file_store.removals == [old_path]
    assert old_path not in file_store.files
    stored = picture_repository.get_picture(picture.id)
    assert stored is not None
    assert len(stored.versions) == 2


def test_edit_without_file_merges_in_place(picture_service, file_store) -> None:
    picture = picture_service.create(lake_submission(description="Morning"))
    version_id = picture.validated_version_id

    edited = picture_service.edit(
        picture.id, PictureSubmission(name="Lake at dawn", source="")
    )

    assert len(edited.versions) == 1
    assert edited.validated_version_id == version_id
    assert edited.validated_version.name == "Lake at dawn"
    assert edited.validated_version.source == "camera"
    assert edited.validated_version.description == "Morning"
    assert file_store.removals == []


def test_edit_clears_description_when_explicitly_null(picture_service) -> None:
    picture = picture_service.create(
        lake_submission(
            description="Morning", taken_at=datetime(2020, 5, 1, 7, 30, tzinfo=UTC)
        )
    )

    edited = picture_service.edit(picture.id, PictureSubmission(description=None))

    assert edited.validated_version.description is None
    assert edited.validated_version.taken_at == datetime(2020, 5, 1, 7, 30, tzinfo=UTC)


def test_edit_rejects_unknown_license(picture_service, picture_repository) -> None:
    picture = picture_service.create(lake_submission())

    with pytest.raises(InvalidLicenseError):
        picture_service.edit(picture.id, PictureSubmission(license_name="WTFPL"))

    stored = picture_repository.get_picture(picture.id)
    assert stored is not None
    assert stored.validated_version.license.name == "CC-BY"


def test_edit_changes_license(picture_service) -> None:
    picture = picture_service.create(lake_submission())

    edited = picture_service.edit(
        picture.id,
        PictureSubmission(license_name="CC0", license_is_edited=True),
    )

    assert edited.validated_version.license == License(name="CC0", is_edited=True)


def test_edit_detaches_place_with_explicit_null(
    picture_service, place_repository
) -> None:
    place = place_repository.add("Annecy")
    picture = picture_service.create(lake_submission(place_id=place.id))

    edited = picture_service.edit(picture.id, PictureSubmission(place_id=None))

    assert edited.validated_version.place_id is None
    assert place_repository.detached == [(place.id, picture.id)]


def test_edit_moving_place_detaches_previous_place(
    picture_service, place_repository
) -> None:
    annecy = place_repository.add("Annecy")
    lyon = place_repository.add("Lyon")
    picture = picture_service.create(lake_submission(place_id=annecy.id))

    edited = picture_service.edit(picture.id, PictureSubmission(place_id=lyon.id))

    assert edited.validated_version.place_id == lyon.id
    assert place_repository.detached == [(annecy.id, picture.id)]


def test_edit_keeping_place_leaves_link(picture_service, place_repository) -> None:
    place = place_repository.add("Annecy")
    picture = picture_service.create(lake_submission(place_id=place.id))

    picture_service.edit(
        picture.id,
        PictureSubmission(file=image_bytes("lake-2"), original_filename="lake2.jpg"),
    )

    assert place_repository.detached == []


def test_edit_with_unnamed_file_uses_detected_extension(picture_service) -> None:
    picture = picture_service.create(lake_submission())
    png = b"\x89PNG\r\n\x1a\n" + b"lake"

    edited = picture_service.edit(picture.id, PictureSubmission(file=png))

    assert edited.file is not None
    assert edited.file.mime_type == "image/png"
    assert edited.file.original_name == "lake.png"
    assert edited.original_file_name.endswith(".png")


def test_edit_unknown_picture(picture_service) -> None:
    with pytest.raises(PictureNotFoundError):
        picture_service.edit(uuid4(), PictureSubmission(name="Ghost"))


def test_delete_removes_binary_place_link_and_changes(  # noqa: PLR0913
    picture_service,
    moderation_service,
    picture_repository,
    change_repository,
    place_repository,
    file_store,
) -> None:
    place = place_repository.add("Annecy")
    picture = picture_service.create(lake_submission(place_id=place.id))
    moderation_service.propose(
        picture.id, [ChangeProposal(field="name", value="Other")], "alice"
    )
    path = picture.original_file_name

    picture_service.delete(picture.id)

    assert picture_repository.get_picture(picture.id) is None
    assert change_repository.list_for_picture(picture.id) == []
    assert place_repository.detached == [(place.id, picture.id)]
    assert file_store.removals == [path]


def test_delete_unknown_picture(picture_service) -> None:
    with pytest.raises(PictureNotFoundError):
        picture_service.delete(uuid4())


def test_get_picture_attaches_changes(picture_service, moderation_service) -> None:
    picture = picture_service.create(lake_submission())
    moderation_service.propose(
        picture.id, [ChangeProposal(field="source", value="scanner")], "alice"
    )

    loaded = picture_service.get_picture(picture.id)

    assert [change.field for change in loaded.object_changes.values()] == ["source"]


def test_list_pictures_and_file_url(picture_service) -> None:
    first = picture_service.create(lake_submission())
    picture_service.create(lake_submission(name="River", file=image_bytes("river")))

    pictures = picture_service.list_pictures()

    assert {picture.validated_version.name for picture in pictures} == {
        "Lake",
        "River",
    }
    assert picture_service.file_url(first).endswith(first.original_file_name)
