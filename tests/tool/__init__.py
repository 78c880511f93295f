"""Test helpers for artifact-renamer tools."""

from artifact_renamer.command import Command, run

ARTIFACT_RENAMER_BIN = "artifact-renamer"


async def run_command(args: list[str], env: dict[str, str] | None = None) -> str:
    return await run(Command([ARTIFACT_RENAMER_BIN] + args, env=env))
