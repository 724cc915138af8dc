"""
depsweep - find declared Cargo dependencies that can be removed

For every workspace member and every dependency group, each dependency is
removed on a scratch basis, the member is checked, built and its doc
examples compiled, and the tree is reset. Removals that survived are written
to a replayable script:

    $ cd my-workspace && depsweep
    $ sh unused_deps.sh
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("depsweep")
except PackageNotFoundError:
    # Fallback for development/uninstalled package
    __version__ = "unknown"

__all__ = ["__version__"]
