"""Registers the assembly and rename tasks for a build variant."""

import logging
import shlex

from . import command
from .command import Command
from .config import RenameConfig, SigningConfig
from .exceptions import InputException
from .graph import BuildTask, TaskGraph
from .manifest import BuildVariant, Project
from .renamer import ArtifactDescriptor, artifact_descriptor, rename_artifact

__all__ = [
    "assemble_task_name",
    "rename_task_name",
    "assemble_command",
    "register_variant_tasks",
]

_LOGGER = logging.getLogger(__name__)

DEFAULT_ASSEMBLE_COMMAND = "flutter build apk --{variant}"


def assemble_task_name(variant: BuildVariant) -> str:
    """Return the name of the task that assembles the variant."""
    return f"assemble{variant.task_suffix}"


def rename_task_name(variant: BuildVariant) -> str:
    """Return the name of the task that renames the variant artifact."""
    return f"rename{variant.task_suffix}Apk"


def assemble_command(
    project: Project, variant: BuildVariant, signing: SigningConfig | None = None
) -> Command:
    """Return the command that assembles the variant of the project."""
    template = project.assemble_command or DEFAULT_ASSEMBLE_COMMAND
    try:
        args = [
            arg.format(variant=variant.value, Variant=variant.task_suffix)
            for arg in shlex.split(template)
        ]
    except (ValueError, KeyError, IndexError) as err:
        raise InputException(
            f"Invalid assemble command '{template}': {err}"
        ) from err
    if not args:
        raise InputException("Assemble command must not be empty")
    return Command(
        args,
        cwd=project.root,
        env=signing.to_env() if signing is not None else None,
    )


def register_variant_tasks(
    graph: TaskGraph,
    project: Project,
    variant: BuildVariant,
    signing: SigningConfig | None = None,
    rename_config: RenameConfig | None = None,
    skip_assemble: bool = False,
) -> ArtifactDescriptor:
    """Register `assemble<Variant>` and `rename<Variant>Apk` for the variant.

    The artifact descriptor, including the version name, is computed now and
    consumed once when the rename task runs.
    """
    rename_config = rename_config or RenameConfig()
    descriptor = artifact_descriptor(
        project.application_name,
        project.version_name,
        variant,
        project.build_dir,
    )

    if skip_assemble:

        async def assemble() -> None:
            _LOGGER.debug("Skipping assembly of %s", variant)

        assemble_description = f"Use an existing {variant} artifact"
    else:
        cmd = assemble_command(project, variant, signing)

        async def assemble() -> None:
            await command.run(cmd)

        assemble_description = f"Assemble the {variant} artifact: {cmd.string}"

    async def rename() -> None:
        await rename_artifact(descriptor, overwrite=rename_config.overwrite)

    assemble_name = assemble_task_name(variant)
    graph.register(BuildTask(assemble_name, assemble, description=assemble_description))
    graph.register(
        BuildTask(
            rename_task_name(variant),
            rename,
            depends_on=[assemble_name],
            description=f"Copy the {variant} artifact to {descriptor.target_name}",
        )
    )
    return descriptor
