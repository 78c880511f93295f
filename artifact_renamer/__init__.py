"""
artifact-renamer copies the installable package produced by an Android build
to a deterministic name embedding the application name, version and build
variant, e.g. `poke-discoverer-1.2.0-release.apk`.
"""

__all__ = [
    "manifest",
    "renamer",
    "graph",
    "tasks",
    "config",
    "exceptions",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
