"""wsroot domain models — enums and well-known names."""

from enum import Enum


class EnvVar(str, Enum):
    WORKING_DIR_LOGS_LEVEL = "ENABLE_WORKING_DIR_LOGS_LEVEL"
    ROOT_WORKING_DIRECTORY = "ROOT_WORKING_DIRECTORY"
    NODE_ENV = "NODE_ENV"


class WorkingDirLogsLevel(str, Enum):
    NONE = "none"
    INFO = "info"
    VERBOSE = "verbose"


class RootDecision(str, Enum):
    SINGLE_WORKSPACE = "single_workspace"
    NO_WORKSPACE = "no_workspace"
    MULTIPLE_WORKSPACES = "multiple_workspaces"
    OVERRIDE = "override"


# Node.js conventions the discovery walk is built on.
DEPENDENCY_DIRNAME = "node_modules"
MANIFEST_FILENAME = "package.json"
