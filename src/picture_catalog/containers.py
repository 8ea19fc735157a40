"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from picture_catalog.adapters.pillow_exif_extractor import PillowExifExtractor
from picture_catalog.adapters.supabase_audit_repository import SupabaseAuditRepository
from picture_catalog.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from picture_catalog.adapters.supabase_change_record_repository import (
    SupabaseChangeRecordRepository,
)
from picture_catalog.adapters.supabase_file_store import SupabaseFileStore
from picture_catalog.adapters.supabase_picture_repository import (
    SupabasePictureRepository,
)
from picture_catalog.adapters.supabase_place_repository import SupabasePlaceRepository
from picture_catalog.config import Settings, parse_allowed_licenses
from picture_catalog.services.audit import AuditService
from picture_catalog.services.exif import ExifReader
from picture_catalog.services.files import HashingFileIngestor
from picture_catalog.services.licenses import LicensePolicy
from picture_catalog.services.moderation import ModerationService
from picture_catalog.services.pictures import PictureService
from picture_catalog.services.versions import VersionBuilder


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    picture_service: PictureService
    moderation_service: ModerationService


def build_license_policy(settings: Settings) -> LicensePolicy:
    """Create the license policy described by the settings."""
    return LicensePolicy(
        allowed=parse_allowed_licenses(
            settings.allowed_licenses, settings.default_license
        ),
        default_name=settings.default_license,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    picture_repository = SupabasePictureRepository(supabase_client)
    change_repository = SupabaseChangeRecordRepository(supabase_client)
    place_repository = SupabasePlaceRepository(supabase_client)
    builder = VersionBuilder()
    license_policy = build_license_policy(resolved_settings)
    picture_service = PictureService(
        pictures=picture_repository,
        changes=change_repository,
        places=place_repository,
        catalogs=SupabaseCatalogRepository(supabase_client),
        file_store=SupabaseFileStore(
            supabase_client, bucket=resolved_settings.storage_bucket
        ),
        ingestor=HashingFileIngestor(),
        exif_reader=ExifReader(PillowExifExtractor()),
        builder=builder,
        license_policy=license_policy,
    )
    moderation_service = ModerationService(
        pictures=picture_repository,
        changes=change_repository,
        places=place_repository,
        builder=builder,
        license_policy=license_policy,
        audit_service=AuditService(SupabaseAuditRepository(supabase_client)),
    )
    return AppContainer(
        settings=resolved_settings,
        picture_service=picture_service,
        moderation_service=moderation_service,
    )
