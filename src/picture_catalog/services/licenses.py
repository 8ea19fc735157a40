"""License resolution and allow-list checks."""

from dataclasses import dataclass

from picture_catalog.domain.errors import InvalidLicenseError
from picture_catalog.domain.pictures import License
from picture_catalog.domain.submissions import PictureSubmission


@dataclass(frozen=True)
class LicensePolicy:
    """Recognized license names and the default applied to new pictures."""

    allowed: frozenset[str]
    default_name: str

    def resolve(
        self, previous: License | None, submission: PictureSubmission
    ) -> License:
        """Return the license a new or merged version should carry.

        Without a submitted name the previous license is carried forward
        unchanged (or the default for a first version).
        """
        baseline = previous or License(name=self.default_name)
        if not submission.license_name:
            if submission.license_is_edited is None:
                return baseline
            return License(
                name=baseline.name, is_edited=submission.license_is_edited
            )
        is_edited = submission.license_is_edited
        if is_edited is None:
            is_edited = baseline.is_edited
        return License(name=submission.license_name, is_edited=is_edited)

    def check(self, candidate: License) -> InvalidLicenseError | None:
        """Return an error when the license name is not recognized."""
        if candidate.name in self.allowed:
            return None
        return InvalidLicenseError(candidate.name)
