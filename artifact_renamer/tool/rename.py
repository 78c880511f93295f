"""Artifact-renamer rename action."""

from argparse import (
    ArgumentParser,
    BooleanOptionalAction,
    _SubParsersAction as SubParsersAction,
)
import logging
import pathlib
from typing import cast

from artifact_renamer.config import RenameConfig, SigningConfig
from artifact_renamer.manifest import BuildVariant
from artifact_renamer.tasks import rename_task_name

from . import common

_LOGGER = logging.getLogger(__name__)


class RenameAction:
    """Artifact-renamer rename action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "rename",
                help="Assemble build variants and rename their artifacts",
                description="""Runs the assembly command for each build variant
                    then copies the produced artifact to a name that includes the
                    application name, version and variant. The original artifact
                    is left in place.""",
            ),
        )
        common.add_project_flags(args)
        common.add_variant_flags(args, default=[BuildVariant.RELEASE.value])
        args.add_argument(
            "--skip-assemble",
            action="store_true",
            help="Rename artifacts that were already assembled",
        )
        args.add_argument(
            "--overwrite",
            type=bool,
            action=BooleanOptionalAction,
            default=True,
            help="Replace a previously renamed artifact",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        project_file: pathlib.Path,
        variants: list[str] | None,
        default_variants: list[str],
        skip_assemble: bool,
        overwrite: bool,
        signing: SigningConfig | None = None,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        selected = common.selected_variants(variants, default_variants)
        _, graph, descriptors = await common.build_graph(
            project_file,
            selected,
            signing=signing,
            rename_config=RenameConfig(overwrite=overwrite),
            skip_assemble=skip_assemble,
        )
        for variant in selected:
            await graph.run(rename_task_name(variant))
            print(descriptors[variant].target_path)
