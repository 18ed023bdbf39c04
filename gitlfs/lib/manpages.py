"""Static help text for every documented command and topic.

Keys are command names as typed after ``git lfs``; values are the full
help pages. Surrounding whitespace is stripped when the page is printed.
"""

from types import MappingProxyType

_PAGES = {
    "git-lfs": """
git lfs <command> [<args>]

Git LFS is a system for managing and versioning large files in association
with a Git repository. Instead of storing the large files within the Git
repository as blobs, Git LFS stores special "pointer files" in the
repository, while storing the actual file contents on a Git LFS server.

Commands
--------

Like Git, Git LFS commands are separated into high level ("porcelain")
commands and low level ("plumbing") commands.

* git lfs completion:
    Generate shell scripts for command-line tab-completion of Git LFS
    commands.
* git lfs help:
    Display help for a command or topic.
* git lfs version:
    Report the version number.

Topics
------

* git lfs help config:
    Configuration options for Git LFS.
* git lfs help faq:
    Frequently asked questions about Git LFS.

Options
-------

-v, --version:
    Report the version number and exit.
""",
    "completion": """
git lfs completion <shell>

Outputs a script which, when executed in a session of the given shell, will
implement command-line tab-completion of Git LFS commands.

The shell argument must be one of bash, zsh, fish or powershell.

To load completions:

Bash:

  $ source <(git-lfs completion bash)

  # To load completions for each session, execute once:
  # Linux:
  $ git-lfs completion bash > /etc/bash_completion.d/git-lfs
  # macOS:
  $ git-lfs completion bash > $(brew --prefix)/etc/bash_completion.d/git-lfs

Zsh:

  # If shell completion is not already enabled in your environment,
  # you will need to enable it.  You can execute the following once:

  $ echo "autoload -U compinit; compinit" >> ~/.zshrc

  # To load completions for each session, execute once:
  $ git-lfs completion zsh > "${fpath[1]}/_git-lfs"

  # You will need to start a new shell for this setup to take effect.

fish:

  $ git-lfs completion fish | source

  # To load completions for each session, execute once:
  $ git-lfs completion fish > ~/.config/fish/completions/git-lfs.fish

PowerShell:

  PS> git-lfs completion powershell | Out-String | Invoke-Expression

  # To load completions for every new session, run:
  PS> git-lfs completion powershell > git-lfs.ps1
  # and source this file from your PowerShell profile.
""",
    "help": """
git lfs help <command>
git lfs <command> -h

Display help information about a Git LFS command or topic.
""",
    "version": """
git lfs version

Report the version number.
""",
    "config": """
Git LFS config options can be set in the environment.

General settings
----------------

* GIT_DIR:
    The repository's git directory. Diagnostic logs are written below
    <GIT_DIR>/lfs/logs.

* GIT_LOG_STATS:
    When set to any non-empty value, statistics about every HTTP request made
    by Git LFS are written to <GIT_DIR>/lfs/logs/http/http-<timestamp>.log.

* GIT_LFS_HTTP_TIMEOUT:
    Timeout in seconds for requests to the Git LFS API. Defaults to 30.

* GIT_TRACE:
    When set to a non-empty value other than 0 or false, debug messages are
    written to standard error.
""",
    "faq": """
Frequently asked questions
--------------------------

Where are the diagnostic logs?
    Under <GIT_DIR>/lfs/logs. HTTP statistics are only recorded when
    GIT_LOG_STATS is set.

Why does tab-completion not work under "git lfs"?
    Regenerate the script with "git lfs completion <shell>". The bash and zsh
    scripts are adjusted so that Git's own completion can find them.
""",
}

MAN_PAGES = MappingProxyType(_PAGES)
