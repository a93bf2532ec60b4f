"""gitboot constants shared across modules."""

from __future__ import annotations

# =============================================================================
# Toolchain
# =============================================================================

#: Page offered when git is missing or too old.
GIT_DOWNLOAD_URL: str = "https://git-scm.com/"

#: Version prefixes treated as legacy (git 0.x and 1.x).
LEGACY_VERSION_PATTERN: str = r"^[01]"

#: Directory that marks a folder as a git working tree.
GIT_MARKER_DIR: str = ".git"

# =============================================================================
# Credential prompt routing
# =============================================================================

#: Variable git reads to find its askpass program.
GIT_ASKPASS_ENV_VAR: str = "GIT_ASKPASS"

#: Interpreter that runs the askpass helper module.
ASKPASS_PYTHON_ENV_VAR: str = "GITBOOT_ASKPASS_PYTHON"

#: Socket path (POSIX) or loopback URL (Windows) of the askpass server.
ASKPASS_HANDLE_ENV_VAR: str = "GITBOOT_ASKPASS_HANDLE"

#: Shared secret the helper presents to the server.
ASKPASS_TOKEN_ENV_VAR: str = "GITBOOT_ASKPASS_TOKEN"

#: HTTP header carrying the shared secret.
ASKPASS_TOKEN_HEADER: str = "X-Gitboot-Askpass-Token"

# =============================================================================
# Commands
# =============================================================================

CMD_SHOW_OUTPUT: str = "git.showOutput"
CMD_SET_EDITOR: str = "git.setGitEditor"
CMD_SET_DIFF_TOOL: str = "git.setGitDiffTool"
CMD_SET_MERGE_TOOL: str = "git.setGitMergeTool"
CMD_SET_TOOLS: str = "git.setGitTools"
