"""Library for giving build artifacts a deterministic, human readable name.

The assembly step of an Android build always writes its artifact as
`app-<variant>.apk` in the variant output directory. Once assembly has
completed, the artifact is copied next to the original as
`<application>-<version>-<variant>.apk`:

```
build/app/outputs/apk/release/app-release.apk
build/app/outputs/apk/release/poke-discoverer-1.2.0-release.apk
```

The copy is written to a temporary file in the same directory and moved into
place with an atomic replace, so the target is either absent or complete.
When an existing target must be kept, the temporary file is published with a
hard link instead, which fails if the target appeared in the meantime. The
original artifact is never modified since later packaging steps may use it.
"""

from dataclasses import dataclass
import logging
from pathlib import Path
import re

import aiofiles
import aiofiles.os
from aiofiles.ospath import exists, isfile

from .exceptions import (
    ArtifactExists,
    InputException,
    InvalidVersion,
    IOFailure,
    MissingArtifact,
)
from .manifest import DEFAULT_EXTENSION, BuildVariant

__all__ = [
    "ArtifactDescriptor",
    "artifact_descriptor",
    "rename_artifact",
    "validate_version_name",
    "validate_application_name",
]

_LOGGER = logging.getLogger(__name__)

# Characters allowed in a single file name component
SAFE_NAME_RE = re.compile(r"[A-Za-z0-9._+-]+")
UNSAFE_NAMES = {".", ".."}

_CHUNK_SIZE = 1024 * 1024
_PARTIAL_SUFFIX = ".partial"


def _is_safe_name(value: str) -> bool:
    return bool(SAFE_NAME_RE.fullmatch(value)) and value not in UNSAFE_NAMES


def validate_version_name(version_name: str | None) -> str:
    """Return the version name if it is safe to embed in a file name."""
    if not version_name:
        raise InvalidVersion("Version name must not be empty")
    if not _is_safe_name(version_name):
        raise InvalidVersion(
            f"Version name '{version_name}' contains characters that are not "
            "allowed in a file name"
        )
    return version_name


def validate_application_name(application_name: str) -> str:
    """Return the application name if it is safe to embed in a file name."""
    if not application_name or not _is_safe_name(application_name):
        raise InputException(
            f"Application name '{application_name}' is not a valid file name"
        )
    return application_name


@dataclass(frozen=True)
class ArtifactDescriptor:
    """Where an artifact is produced and the name it is copied to."""

    application_name: str
    version_name: str
    variant: BuildVariant
    source_path: Path
    target_path: Path

    @property
    def target_name(self) -> str:
        """Return the file name of the renamed artifact."""
        return self.target_path.name


def artifact_descriptor(
    application_name: str,
    version_name: str | None,
    variant: BuildVariant,
    build_dir: Path,
) -> ArtifactDescriptor:
    """Return the descriptor for the artifact of the specified variant.

    Both names are validated before any path is built so an unsafe version
    can never address a file outside of the variant output directory.
    """
    validate_application_name(application_name)
    version_name = validate_version_name(version_name)
    output_dir = variant.output_dir(build_dir)
    return ArtifactDescriptor(
        application_name=application_name,
        version_name=version_name,
        variant=variant,
        source_path=output_dir / variant.default_artifact_name(),
        target_path=output_dir
        / f"{application_name}-{version_name}-{variant.value}.{DEFAULT_EXTENSION}",
    )


async def _copy(source: Path, dest: Path) -> None:
    async with aiofiles.open(source, mode="rb") as src_file:
        async with aiofiles.open(dest, mode="wb") as dest_file:
            while chunk := await src_file.read(_CHUNK_SIZE):
                await dest_file.write(chunk)


async def rename_artifact(
    descriptor: ArtifactDescriptor, overwrite: bool = True
) -> Path:
    """Copy the produced artifact to its deterministic name and return the path.

    An existing target is replaced when `overwrite` is set so that running
    the rename again for the same inputs yields the same file. Otherwise an
    existing target is left untouched and `ArtifactExists` is raised.
    """
    source = descriptor.source_path
    target = descriptor.target_path
    if not await isfile(source):
        raise MissingArtifact(source)
    if not overwrite and await exists(target):
        raise ArtifactExists(target)

    partial = target.with_name(f".{target.name}{_PARTIAL_SUFFIX}")
    _LOGGER.debug("Copying %s to %s", source, partial)
    try:
        await _copy(source, partial)
        if overwrite:
            await aiofiles.os.replace(partial, target)
        else:
            await aiofiles.os.link(partial, target)
    except FileExistsError as err:
        raise ArtifactExists(target) from err
    except OSError as err:
        raise IOFailure(f"Unable to copy {source} to {target}: {err}") from err
    finally:
        # Also reached when the copy is cancelled
        if await exists(partial):
            await aiofiles.os.remove(partial)
    _LOGGER.info("Renamed artifact %s to %s", source.name, target)
    return target
