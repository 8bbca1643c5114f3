from cube_makefile.workspace.base import Workspace
from cube_makefile.workspace.local import LocalWorkspace

__all__ = ["LocalWorkspace", "Workspace"]
