"""Tests for the renamer library."""

import asyncio
from pathlib import Path

import aiofiles.os
import pytest

from artifact_renamer.exceptions import (
    ArtifactExists,
    InputException,
    InvalidVersion,
    IOFailure,
    MissingArtifact,
)
from artifact_renamer.manifest import BuildVariant
from artifact_renamer import renamer
from artifact_renamer.renamer import (
    ArtifactDescriptor,
    artifact_descriptor,
    rename_artifact,
    validate_version_name,
)

APP_NAME = "poke-discoverer"
APK_CONTENT = b"PK\x03\x04" + bytes(range(256)) * 64


def assemble(descriptor: ArtifactDescriptor, content: bytes = APK_CONTENT) -> Path:
    """Write an artifact where the assembly step would."""
    descriptor.source_path.parent.mkdir(parents=True, exist_ok=True)
    descriptor.source_path.write_bytes(content)
    return descriptor.source_path


@pytest.mark.parametrize(
    ("variant", "source", "target"),
    [
        (BuildVariant.RELEASE, "app-release.apk", "poke-discoverer-1.2.0-release.apk"),
        (BuildVariant.DEBUG, "app-debug.apk", "poke-discoverer-1.2.0-debug.apk"),
    ],
)
def test_artifact_descriptor(variant: BuildVariant, source: str, target: str) -> None:
    """Test the source and target paths of each variant."""
    descriptor = artifact_descriptor(APP_NAME, "1.2.0", variant, Path("build/app"))
    output_dir = Path("build/app/outputs/apk") / variant.value
    assert descriptor == ArtifactDescriptor(
        application_name=APP_NAME,
        version_name="1.2.0",
        variant=variant,
        source_path=output_dir / source,
        target_path=output_dir / target,
    )
    assert descriptor.target_name == target


@pytest.mark.parametrize(
    "version_name",
    ["1.2.0", "1.2.0-beta.1", "1.2.0+3", "2024.10.01", "v1_2"],
)
def test_valid_version_name(version_name: str) -> None:
    """Test version names that are safe to use in a file name."""
    assert validate_version_name(version_name) == version_name


@pytest.mark.parametrize(
    "version_name",
    [None, "", ".", "..", "../1.2.0", "1.2/0", "1.2\\0", "1.2 0", "1.2.0\n"],
)
def test_invalid_version_name(version_name: str | None) -> None:
    """Test version names that are empty or could escape the output directory."""
    with pytest.raises(InvalidVersion):
        artifact_descriptor(APP_NAME, version_name, BuildVariant.RELEASE, Path("."))


@pytest.mark.parametrize("application_name", ["", "poke/discoverer", ".."])
def test_invalid_application_name(application_name: str) -> None:
    """Test application names that are not valid file names."""
    with pytest.raises(InputException, match="not a valid file name"):
        artifact_descriptor(application_name, "1.0", BuildVariant.DEBUG, Path("."))


async def test_rename_artifact(tmp_path: Path) -> None:
    """Test the renamed artifact is a copy and the original is untouched."""
    descriptor = artifact_descriptor(APP_NAME, "1.2.0", BuildVariant.RELEASE, tmp_path)
    source = assemble(descriptor)

    result = await rename_artifact(descriptor)

    assert result == tmp_path / "outputs/apk/release/poke-discoverer-1.2.0-release.apk"
    assert result.read_bytes() == APK_CONTENT
    assert source.read_bytes() == APK_CONTENT
    assert sorted(p.name for p in result.parent.iterdir()) == [
        "app-release.apk",
        "poke-discoverer-1.2.0-release.apk",
    ]


async def test_rename_missing_artifact(tmp_path: Path) -> None:
    """Test renaming before the variant is assembled."""
    descriptor = artifact_descriptor(APP_NAME, "1.2.0", BuildVariant.DEBUG, tmp_path)
    descriptor.source_path.parent.mkdir(parents=True)

    with pytest.raises(MissingArtifact, match="app-debug.apk does not exist"):
        await rename_artifact(descriptor)
    assert not descriptor.target_path.exists()
    assert list(descriptor.source_path.parent.iterdir()) == []


async def test_rename_twice(tmp_path: Path) -> None:
    """Test renaming again replaces the target with the same content."""
    descriptor = artifact_descriptor(APP_NAME, "1.2.0", BuildVariant.RELEASE, tmp_path)
    assemble(descriptor)

    first = (await rename_artifact(descriptor)).read_bytes()
    second = (await rename_artifact(descriptor)).read_bytes()
    assert first == second == APK_CONTENT


async def test_rename_replaces_stale_target(tmp_path: Path) -> None:
    """Test a target left by a previous build is replaced."""
    descriptor = artifact_descriptor(APP_NAME, "1.2.0", BuildVariant.RELEASE, tmp_path)
    assemble(descriptor)
    descriptor.target_path.write_bytes(b"stale")

    await rename_artifact(descriptor)
    assert descriptor.target_path.read_bytes() == APK_CONTENT


async def test_rename_no_overwrite(tmp_path: Path) -> None:
    """Test an existing target is kept when overwriting is disabled."""
    descriptor = artifact_descriptor(APP_NAME, "1.2.0", BuildVariant.RELEASE, tmp_path)
    assemble(descriptor)
    descriptor.target_path.write_bytes(b"previous")

    with pytest.raises(ArtifactExists):
        await rename_artifact(descriptor, overwrite=False)
    assert descriptor.target_path.read_bytes() == b"previous"


async def test_rename_write_failure(tmp_path: Path) -> None:
    """Test a target that can't be written fails without a partial file."""
    descriptor = artifact_descriptor(APP_NAME, "1.2.0", BuildVariant.RELEASE, tmp_path)
    assemble(descriptor)
    # A directory in place of the target can't be replaced by a file
    descriptor.target_path.mkdir()

    with pytest.raises(IOFailure, match="Unable to copy"):
        await rename_artifact(descriptor)
    assert sorted(p.name for p in descriptor.source_path.parent.iterdir()) == [
        "app-release.apk",
        "poke-discoverer-1.2.0-release.apk",
    ]
    assert descriptor.source_path.read_bytes() == APK_CONTENT


async def test_rename_no_overwrite_target_created_during_copy(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test a target that appears while copying is kept when not overwriting."""
    descriptor = artifact_descriptor(APP_NAME, "1.2.0", BuildVariant.RELEASE, tmp_path)
    assemble(descriptor)
    copy = renamer._copy

    async def copy_then_create_target(source: Path, dest: Path) -> None:
        await copy(source, dest)
        descriptor.target_path.write_bytes(b"concurrent")

    monkeypatch.setattr(renamer, "_copy", copy_then_create_target)

    with pytest.raises(ArtifactExists):
        await rename_artifact(descriptor, overwrite=False)
    assert descriptor.target_path.read_bytes() == b"concurrent"
    assert sorted(p.name for p in descriptor.source_path.parent.iterdir()) == [
        "app-release.apk",
        "poke-discoverer-1.2.0-release.apk",
    ]


async def test_rename_no_overwrite_new_target(tmp_path: Path) -> None:
    """Test a new target is written when overwriting is disabled."""
    descriptor = artifact_descriptor(APP_NAME, "1.2.0", BuildVariant.DEBUG, tmp_path)
    assemble(descriptor)

    result = await rename_artifact(descriptor, overwrite=False)
    assert result.read_bytes() == APK_CONTENT
    assert sorted(p.name for p in result.parent.iterdir()) == [
        "app-debug.apk",
        "poke-discoverer-1.2.0-debug.apk",
    ]


async def test_rename_cancelled(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test a cancelled rename leaves neither a partial file nor a target."""
    descriptor = artifact_descriptor(APP_NAME, "1.2.0", BuildVariant.RELEASE, tmp_path)
    assemble(descriptor)

    async def cancelled(*args: object) -> None:
        raise asyncio.CancelledError()

    monkeypatch.setattr(aiofiles.os, "replace", cancelled)

    with pytest.raises(asyncio.CancelledError):
        await rename_artifact(descriptor)
    assert [p.name for p in descriptor.source_path.parent.iterdir()] == [
        "app-release.apk"
    ]
