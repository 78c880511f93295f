"""Artifact-renamer get action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
from dataclasses import asdict
import logging
import pathlib
from typing import cast

from artifact_renamer.config import SigningConfig
from artifact_renamer.manifest import read_project

from . import common
from .format import PrintFormatter, YamlFormatter

_LOGGER = logging.getLogger(__name__)


class GetProjectAction:
    """Get the resolved project configuration."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "project",
                help="Get the project configuration",
                description="Print the project file with versions and paths resolved",
            ),
        )
        common.add_project_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        project_file: pathlib.Path,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        project = await read_project(project_file)
        print(project.yaml(), end="")


class GetTasksAction:
    """Get the tasks registered for each build variant."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "tasks",
                help="Get the build tasks",
                description="Print the tasks and their dependencies",
            ),
        )
        common.add_project_flags(args)
        common.add_variant_flags(args)
        args.add_argument(
            "--skip-assemble",
            action="store_true",
            help="Show tasks as if artifacts were already assembled",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        project_file: pathlib.Path,
        variants: list[str] | None,
        default_variants: list[str],
        skip_assemble: bool,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        _, graph, _ = await common.build_graph(
            project_file,
            common.selected_variants(variants, default_variants),
            skip_assemble=skip_assemble,
        )
        results = [
            {
                "name": task.name,
                "depends_on": ",".join(task.depends_on) or "-",
                "description": task.description,
            }
            for task in graph.tasks()
        ]
        PrintFormatter(["name", "depends_on", "description"]).print(results)


class GetArtifactsAction:
    """Get the source and target artifact paths for each build variant."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "artifacts",
                help="Get the artifact paths",
                description="Print where each artifact is produced and renamed to",
            ),
        )
        common.add_project_flags(args)
        common.add_variant_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        project_file: pathlib.Path,
        variants: list[str] | None,
        default_variants: list[str],
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        _, _, descriptors = await common.build_graph(
            project_file,
            common.selected_variants(variants, default_variants),
            skip_assemble=True,
        )
        results = [
            {
                "variant": str(variant),
                "source": descriptor.source_path.name,
                "target": descriptor.target_name,
            }
            for variant, descriptor in descriptors.items()
        ]
        PrintFormatter(["variant", "source", "target"]).print(results)


class GetSigningAction:
    """Get the signing configuration."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "signing",
                help="Get the release signing configuration",
                description=(
                    "Print the signing configuration handed to the assembly "
                    "command, with passwords masked"
                ),
            ),
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        signing: SigningConfig | None = None,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        signing = signing or SigningConfig()
        YamlFormatter().print(asdict(signing.masked()))


class GetAction:
    """Get details about the project."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args: ArgumentParser = subparsers.add_parser(
            "get",
            help="Print information about the project",
            description="Print information about the project build configuration",
        )
        subcmds = args.add_subparsers(
            title="Available commands",
            required=True,
        )
        GetProjectAction.register(subcmds)
        GetTasksAction.register(subcmds)
        GetArtifactsAction.register(subcmds)
        GetSigningAction.register(subcmds)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        # No-op given subcommands are dispatched
