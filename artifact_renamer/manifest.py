"""Representation of the Android build configuration of a project.

A project file is a small YAML document that names the application and
carries the values the Gradle build script declares in `android { ... }`:

```yaml
applicationName: poke-discoverer
pubspec: pubspec.yaml
android:
  namespace: io.github.professor_eggs.pokediscoverer
  applicationId: io.github.professor_eggs.pokediscoverer
  compileSdk: 35
  minSdk: 21
  targetSdk: 35
```

When `versionName` is not set the version is read from the Flutter pubspec,
which stores both the version name and code as `version: 1.2.0+3`.
"""

from dataclasses import dataclass, field, replace
from enum import StrEnum
import logging
from pathlib import Path
import re
from typing import Any

import aiofiles
import yaml
from mashumaro import DataClassDictMixin, field_options
from mashumaro.codecs.yaml import yaml_encode
from mashumaro.config import BaseConfig
from mashumaro.exceptions import InvalidFieldValue, MissingField

from .exceptions import InputException, InvalidVersion

__all__ = [
    "read_project",
    "parse_pubspec_version",
    "BuildVariant",
    "AndroidConfig",
    "Project",
]

_LOGGER = logging.getLogger(__name__)

DEFAULT_BUILD_DIR = Path("build/app")
DEFAULT_EXTENSION = "apk"
DEFAULT_ARTIFACT_PREFIX = "app"

# Flutter pubspec version, e.g. "1.2.0+3" where 3 is the build number
PUBSPEC_VERSION_RE = re.compile(r"^(?P<name>[^+\s]+)(?:\+(?P<code>\d+))?$")

# Keys holding a version that must keep the text written in the file
VERSION_KEYS = frozenset({"version", "versionName"})

_STR_TAG = "tag:yaml.org,2002:str"
_NUMBER_TAGS = frozenset({"tag:yaml.org,2002:int", "tag:yaml.org,2002:float"})


class VersionLoader(yaml.SafeLoader):
    """A safe YAML loader that reads unquoted versions as strings.

    Without this `versionName: 1.10` would load as the float `1.1`.
    """

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> Any:
        pairs = node.value if isinstance(node, yaml.MappingNode) else []
        for key_node, value_node in pairs:
            if (
                isinstance(key_node, yaml.ScalarNode)
                and key_node.value in VERSION_KEYS
                and isinstance(value_node, yaml.ScalarNode)
                and value_node.tag in _NUMBER_TAGS
            ):
                value_node.tag = _STR_TAG
        return super().construct_mapping(node, deep=deep)


def _load_yaml(content: str) -> Any:
    return yaml.load(content, Loader=VersionLoader)


class BuildVariant(StrEnum):
    """A named build configuration producing a distinct installable artifact."""

    DEBUG = "debug"
    RELEASE = "release"

    @property
    def task_suffix(self) -> str:
        """Return the capitalized name used in task names e.g. `assembleRelease`."""
        return self.value[:1].upper() + self.value[1:]

    def output_dir(self, build_dir: Path) -> Path:
        """Return the directory the assembly step writes artifacts to."""
        return build_dir / "outputs" / DEFAULT_EXTENSION / self.value

    def default_artifact_name(self) -> str:
        """Return the file name the assembly step gives the artifact."""
        return f"{DEFAULT_ARTIFACT_PREFIX}-{self.value}.{DEFAULT_EXTENSION}"


@dataclass
class BaseManifest(DataClassDictMixin):
    """Base class for all project configuration objects."""

    def yaml(self) -> str:
        """Return a YAML string representation of the object."""
        return yaml_encode(self, self.__class__)  # type: ignore[return-value]

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True


@dataclass
class AndroidConfig(BaseManifest):
    """Values declared in the `android` block of the app build script."""

    namespace: str | None = None
    """The namespace of the generated R and BuildConfig classes."""

    application_id: str | None = field(
        metadata=field_options(alias="applicationId"), default=None
    )
    """The unique application id on the device and in the store."""

    compile_sdk: int | None = field(
        metadata=field_options(alias="compileSdk"), default=None
    )
    min_sdk: int | None = field(metadata=field_options(alias="minSdk"), default=None)
    target_sdk: int | None = field(
        metadata=field_options(alias="targetSdk"), default=None
    )

    version_code: int | None = field(
        metadata=field_options(alias="versionCode"), default=None
    )
    """The internal version number, increasing with every release."""

    version_name: str | None = field(
        metadata=field_options(alias="versionName"), default=None
    )
    """The version string shown to users and embedded in artifact names."""

    ndk_version: str | None = field(
        metadata=field_options(alias="ndkVersion"), default=None
    )

    java_version: str = field(metadata=field_options(alias="javaVersion"), default="11")
    """Source, target and jvm target compatibility level."""


@dataclass
class Project(BaseManifest):
    """An application and the build configuration used to assemble it."""

    application_name: str = field(metadata=field_options(alias="applicationName"))
    """Name embedded in renamed artifacts e.g. `poke-discoverer`."""

    android: AndroidConfig = field(default_factory=AndroidConfig)

    build_dir: Path = field(
        metadata=field_options(alias="buildDir"), default=DEFAULT_BUILD_DIR
    )
    """The build output directory of the android app module."""

    pubspec: Path | None = None
    """Optional Flutter pubspec to read the version from."""

    assemble_command: str | None = field(
        metadata=field_options(alias="assembleCommand"), default=None
    )
    """Command that assembles a variant; `{variant}` is substituted."""

    root: Path | None = None
    """Directory containing the project file, set when the file is read."""

    @property
    def version_name(self) -> str:
        """Return the version name or raise if the project does not declare one."""
        if not self.android.version_name:
            raise InvalidVersion(
                f"Project {self.application_name} does not declare a versionName"
            )
        return self.android.version_name

    @classmethod
    def parse_yaml(cls, content: str) -> "Project":
        """Parse a serialized project file."""
        try:
            doc = _load_yaml(content)
        except yaml.YAMLError as err:
            raise InputException(f"Unable to parse project file: {err}") from err
        if not isinstance(doc, dict):
            raise InputException(f"Invalid project file, expected a mapping: {doc}")
        return cls.parse_doc(doc)

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "Project":
        """Parse a project from a parsed YAML document."""
        android = doc.get("android")
        if isinstance(android, dict):
            version_name = android.get("versionName")
            if version_name is not None and not isinstance(version_name, str):
                raise InvalidVersion(
                    f"Invalid versionName '{version_name}', expected a string"
                )
        try:
            return cls.from_dict(doc)
        except (MissingField, InvalidFieldValue) as err:
            raise InputException(f"Invalid project file: {err}") from err


def parse_pubspec_version(content: str) -> tuple[str, int | None]:
    """Return the version name and optional version code from a Flutter pubspec."""
    try:
        doc = _load_yaml(content)
    except yaml.YAMLError as err:
        raise InputException(f"Unable to parse pubspec: {err}") from err
    if not isinstance(doc, dict) or doc.get("version") is None:
        raise InputException("Pubspec does not contain a version")
    version = doc["version"]
    if not isinstance(version, str) or not (
        match := PUBSPEC_VERSION_RE.match(version)
    ):
        raise InvalidVersion(f"Pubspec version '{version}' is not valid")
    code = match.group("code")
    return match.group("name"), int(code) if code is not None else None


async def read_pubspec_version(pubspec_path: Path) -> tuple[str, int | None]:
    """Return the version name and code from the pubspec at the specified path."""
    try:
        async with aiofiles.open(str(pubspec_path)) as pubspec_file:
            content = await pubspec_file.read()
    except OSError as err:
        raise InputException(f"Unable to read pubspec {pubspec_path}: {err}") from err
    return parse_pubspec_version(content)


async def read_project(project_path: Path) -> Project:
    """Return the contents of a project file with all paths resolved.

    Relative paths in the file are relative to the directory that contains it.
    """
    try:
        async with aiofiles.open(str(project_path)) as project_file:
            content = await project_file.read()
    except OSError as err:
        raise InputException(
            f"Unable to read project file {project_path}: {err}"
        ) from err
    if not content.strip():
        raise InputException(f"Project file {project_path} is empty")
    project = Project.parse_yaml(content)

    root = project_path.parent.absolute()
    project = replace(project, root=root, build_dir=root / project.build_dir)
    if project.pubspec is not None:
        project = replace(project, pubspec=root / project.pubspec)

    android = project.android
    if android.version_name is None and project.pubspec is not None:
        version_name, version_code = await read_pubspec_version(project.pubspec)
        _LOGGER.debug(
            "Read version %s (%s) from %s", version_name, version_code, project.pubspec
        )
        android = replace(
            android,
            version_name=version_name,
            version_code=(
                android.version_code if android.version_code is not None else version_code
            ),
        )
        project = replace(project, android=android)

    if project.android.version_name is None:
        raise InvalidVersion(
            f"Project file {project_path} does not declare a versionName or pubspec"
        )
    return project
