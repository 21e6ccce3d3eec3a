"""Schema for the upstream directory-listing manifest."""

from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter


class ManifestEntry(BaseModel):
    """One entry of a GitHub contents-API directory listing.

    Only ``name`` and ``type`` are read; the many other fields GitHub
    returns are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    name: str
    type: str

    @property
    def is_file(self) -> bool:
        return self.type == "file"


_manifest_adapter = TypeAdapter(list[ManifestEntry])


def parse_manifest(payload: Any) -> list[ManifestEntry]:
    """Validate a decoded listing payload.

    Raises:
        pydantic.ValidationError: If the payload is not a list of entries
    """
    return _manifest_adapter.validate_python(payload)
