"""Run the artifact-renamer command line tool with `python -m artifact_renamer`."""

from artifact_renamer.tool.artifact_renamer import main

if __name__ == "__main__":
    main()
