"""Fixtures for command line tool tests."""

from collections.abc import Generator
import pathlib
import shutil

import pytest

from artifact_renamer.manifest import BuildVariant

TESTDATA = pathlib.Path(__file__).parent.parent / "testdata" / "poke-discoverer"

APK_CONTENT = {
    BuildVariant.DEBUG: b"PK\x03\x04 debug apk",
    BuildVariant.RELEASE: b"PK\x03\x04 release apk",
}


@pytest.fixture(name="project_dir")
def project_dir_fixture(tmp_path: pathlib.Path) -> Generator[pathlib.Path, None, None]:
    """Copy the sample project to a temporary directory."""
    project_dir = tmp_path / "poke-discoverer"
    shutil.copytree(TESTDATA, project_dir)
    yield project_dir


@pytest.fixture(name="project_file")
def project_file_fixture(project_dir: pathlib.Path) -> pathlib.Path:
    """Return the project file of the sample project."""
    return project_dir / "artifact-renamer.yaml"


@pytest.fixture(name="assembled")
def assembled_fixture(project_dir: pathlib.Path) -> dict[BuildVariant, pathlib.Path]:
    """Write artifacts as if every variant was assembled."""
    results = {}
    for variant, content in APK_CONTENT.items():
        output_dir = variant.output_dir(project_dir / "build" / "app")
        output_dir.mkdir(parents=True)
        artifact = output_dir / variant.default_artifact_name()
        artifact.write_bytes(content)
        results[variant] = artifact
    return results
