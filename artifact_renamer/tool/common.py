"""Library for common command line flags."""

from argparse import ArgumentParser
import logging
import pathlib

from artifact_renamer.config import RenameConfig, SigningConfig
from artifact_renamer.graph import TaskGraph
from artifact_renamer.manifest import BuildVariant, Project, read_project
from artifact_renamer.renamer import ArtifactDescriptor
from artifact_renamer.tasks import register_variant_tasks

_LOGGER = logging.getLogger(__name__)

DEFAULT_PROJECT_FILE = "artifact-renamer.yaml"


def add_project_flags(args: ArgumentParser) -> None:
    """Add flags for locating the project file."""
    args.add_argument(
        "--project-file",
        type=pathlib.Path,
        default=pathlib.Path(DEFAULT_PROJECT_FILE),
        help="YAML file describing the application and its android build",
    )


def add_variant_flags(args: ArgumentParser, default: list[str] | None = None) -> None:
    """Add flags for selecting build variants."""
    args.add_argument(
        "--variant",
        dest="variants",
        action="append",
        choices=[variant.value for variant in BuildVariant],
        default=None,
        help="Build variant to process, may be repeated",
    )
    args.set_defaults(default_variants=default or [v.value for v in BuildVariant])


def selected_variants(
    variants: list[str] | None, default_variants: list[str]
) -> list[BuildVariant]:
    """Return the variants selected by flags, in a stable order."""
    names = variants or default_variants
    return [variant for variant in BuildVariant if variant.value in names]


async def build_graph(
    project_file: pathlib.Path,
    variants: list[BuildVariant],
    signing: SigningConfig | None = None,
    rename_config: RenameConfig | None = None,
    skip_assemble: bool = False,
) -> tuple[Project, TaskGraph, dict[BuildVariant, ArtifactDescriptor]]:
    """Read the project and register the tasks for each variant."""
    project = await read_project(project_file)
    graph = TaskGraph()
    descriptors = {}
    for variant in variants:
        descriptors[variant] = register_variant_tasks(
            graph,
            project,
            variant,
            signing=signing,
            rename_config=rename_config,
            skip_assemble=skip_assemble,
        )
    return project, graph, descriptors
