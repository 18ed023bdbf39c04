"""Shell completion scripts and the candidate protocol they call back into.

The generated scripts do not embed the command list. On every <TAB> they run
``<prog> __complete <words...>`` (or ``__completeNoDesc``), which prints one
candidate per line, optionally followed by a tab and a description, and a
final ``:<directive>`` line.
"""

import io
import logging
import sys
from collections.abc import Sequence
from typing import TextIO

from gitlfs.cli.parser import RAW_ARGS_ATTR, CommandTree
from gitlfs.lib.exceptions import UnsupportedShellError
from gitlfs.lib.messages import get_message
from gitlfs.models.command import CommandSpec

logger = logging.getLogger(__name__)

SHELLS = ("bash", "zsh", "fish", "powershell")

COMPLETE_COMMAND = "__complete"
COMPLETE_NO_DESC_COMMAND = "__completeNoDesc"

# Directives understood by the generated scripts
DIRECTIVE_DEFAULT = 0
DIRECTIVE_NO_FILE_COMP = 4

# Git's bash completion looks for _git_<subcommand>
BASH_TRAILER = "_{ident}() {{ __start_{prog}; }}\n"

# Under "git lfs", zsh reports the first word as "git"; rebuild the real
# program name from it.
ZSH_REQUEST_ORIGINAL = 'requestComp="${words[1]}'
ZSH_REQUEST_REWRITTEN = 'requestComp="git-${words[1]#*git-}'


# =============================================================================
# Script templates
# =============================================================================

_BASH_TEMPLATE = r"""# bash completion for @PROG@                              -*- shell-script -*-

__start_@PROG@()
{
    local cur requestComp out directive start
    COMPREPLY=()
    cur="${COMP_WORDS[COMP_CWORD]}"

    # Under git's completion the words are "git lfs ..."
    start=1
    if [ "${COMP_WORDS[0]}" = "git" ]; then
        start=2
    fi

    requestComp="@PROG@ @REQUEST@ ${COMP_WORDS[*]:$start:$((COMP_CWORD - start + 1))}"
    if [ -z "${cur}" ]; then
        requestComp="${requestComp} \"\""
    fi

    out=$(eval "${requestComp}" 2>/dev/null)
    directive=${out##*:}
    out=${out%:*}
    if [ "${directive}" = "${out}" ]; then
        directive=0
    fi

    if [ $((directive & 4)) -ne 0 ]; then
        compopt +o default 2>/dev/null
    fi

    local IFS=$'\n'
    COMPREPLY=($(compgen -W "${out}" -- "${cur}"))
}

if [[ $(type -t compopt) = "builtin" ]]; then
    complete -o default -F __start_@PROG@ @PROG@
else
    complete -o default -o nospace -F __start_@PROG@ @PROG@
fi

# ex: ts=4 sw=4 et filetype=sh
"""

_ZSH_TEMPLATE = r"""#compdef @PROG@
compdef _@PROG@ @PROG@

# zsh completion for @PROG@                               -*- shell-script -*-

_@PROG@()
{
    local lastParam lastChar requestComp out directive comp
    local -a completions

    words=("${=words[1,CURRENT]}")
    lastParam=${words[-1]}
    lastChar=${lastParam[-1]}

    requestComp="${words[1]} @REQUEST@ ${words[2,-1]}"
    if [ "${lastChar}" = "" ]; then
        requestComp="${requestComp} \"\""
    fi

    out=$(eval ${requestComp} 2>/dev/null)
    directive=${out##*:}
    out=${out%:*}
    if [ "${directive}" = "${out}" ]; then
        directive=0
    fi

    local tab="$(printf '\t')"
    while IFS='\n' read -r comp; do
        if [ -n "$comp" ]; then
            comp=${comp//:/\\:}
            comp=${comp//$tab/:}
            completions+=${comp}
        fi
    done < <(printf "%s\n" "${out[@]}")

    if [ $((directive & 4)) -ne 0 ]; then
        _describe "completions" completions
    else
        _describe "completions" completions || _files
    fi
}

if [ "$funcstack[1]" = "_@PROG@" ]; then
    _@PROG@ "$@"
fi
"""

_FISH_TEMPLATE = r"""# fish completion for @PROG@                              -*- shell-script -*-

function __@IDENT@_perform_completion
    set -l args (commandline -opc)
    set -l lastArg (string escape -- (commandline -ct))
    set -l requestComp "$args[1] @REQUEST@ $args[2..-1] $lastArg"
    if test -z "$lastArg"
        set requestComp "$requestComp ''"
    end

    for line in (eval $requestComp 2>/dev/null)
        if not string match -q -- ":*" $line
            printf "%s\n" $line
        end
    end
end

complete -c @PROG@ -e
complete -c @PROG@ -f -a '(__@IDENT@_perform_completion)'
"""

_POWERSHELL_TEMPLATE = r"""# powershell completion for @PROG@                        -*- shell-script -*-

Register-ArgumentCompleter -CommandName '@PROG@' -ScriptBlock {
    param($WordToComplete, $CommandAst, $CursorPosition)

    $Command = "$($CommandAst.CommandElements)"
    $Command = $Command.Substring(0, [Math]::Min($Command.Length, $CursorPosition))
    $Program, $Arguments = $Command.Split(" ", 2)

    $RequestComp = "$Program @REQUEST@ $Arguments"
    if ($WordToComplete -eq "") {
        $RequestComp = "$RequestComp ''"
    }

    $Out = Invoke-Expression -Command "$RequestComp" 2>$null
    $Out | Where-Object { $_ -notlike ':*' } | ForEach-Object {
        $Name, $Description = $_.Split("`t", 2)
        if (-not $Description) { $Description = " " }
        [System.Management.Automation.CompletionResult]::new($Name, $Name, 'ParameterValue', $Description)
    }
}
"""


def _render(template: str, prog: str, include_descriptions: bool) -> str:
    request = COMPLETE_COMMAND if include_descriptions else COMPLETE_NO_DESC_COMMAND
    return (
        template.replace("@PROG@", prog)
        .replace("@IDENT@", prog.replace("-", "_"))
        .replace("@REQUEST@", request)
    )


def gen_bash_completion(prog: str, out: TextIO) -> None:
    """Write the bash completion script for ``prog``."""
    out.write(_render(_BASH_TEMPLATE, prog, include_descriptions=False))


def gen_zsh_completion(prog: str, out: TextIO) -> None:
    """Write the zsh completion script for ``prog``."""
    out.write(_render(_ZSH_TEMPLATE, prog, include_descriptions=True))


def gen_fish_completion(prog: str, out: TextIO, include_descriptions: bool) -> None:
    """Write the fish completion script for ``prog``."""
    out.write(_render(_FISH_TEMPLATE, prog, include_descriptions))


def gen_powershell_completion(prog: str, out: TextIO, include_descriptions: bool) -> None:
    """Write the PowerShell completion script for ``prog``."""
    out.write(_render(_POWERSHELL_TEMPLATE, prog, include_descriptions))


class CompletionGenerator:
    """Renders a completion script for one of SHELLS.

    bash and zsh output is post-processed so the scripts also work when
    the tool runs as ``git lfs`` through Git's own completion.
    """

    def __init__(self, prog: str):
        self.prog = prog

    def generate(self, shell: str, writer: TextIO) -> None:
        """Write the completion script for ``shell`` to ``writer``.

        Raises:
            UnsupportedShellError: ``shell`` is not one of SHELLS; nothing
                is written
        """
        if shell not in SHELLS:
            raise UnsupportedShellError(shell, SHELLS)

        logger.debug(f"Generating {shell} completion for {self.prog}")
        if shell == "bash":
            completion = io.StringIO()
            gen_bash_completion(self.prog, completion)
            completion.write(
                BASH_TRAILER.format(ident=self.prog.replace("-", "_"), prog=self.prog)
            )
            writer.write(completion.getvalue())
        elif shell == "zsh":
            completion = io.StringIO()
            gen_zsh_completion(self.prog, completion)
            writer.write(
                completion.getvalue().replace(ZSH_REQUEST_ORIGINAL, ZSH_REQUEST_REWRITTEN, 1)
            )
        elif shell == "fish":
            gen_fish_completion(self.prog, writer, include_descriptions=True)
        elif shell == "powershell":
            gen_powershell_completion(self.prog, writer, include_descriptions=True)


# =============================================================================
# Candidate protocol
# =============================================================================


def complete_args(
    tree: CommandTree, words: Sequence[str]
) -> tuple[list[tuple[str, str]], int]:
    """Compute completion candidates for a partial command line.

    Args:
        tree: Assembled command tree
        words: Words after the program name; the last one is being completed

    Returns:
        (candidate, description) pairs and the directive for the script
    """
    if not words:
        words = [""]
    *preceding, to_complete = words

    spec = tree.root
    for word in preceding:
        if word.startswith("-") or spec is not tree.root:
            continue
        child = tree.get(word)
        if child is None or child.hidden:
            return [], DIRECTIVE_DEFAULT
        spec = child

    if to_complete.startswith("-"):
        candidates = [
            (option, description)
            for option, description in tree.options(spec)
            if option.startswith(to_complete)
        ]
        return candidates, DIRECTIVE_NO_FILE_COMP

    if spec is tree.root:
        candidates = [
            (child.name, child.short_help)
            for child in tree.commands
            if not child.hidden and child.name.startswith(to_complete)
        ]
        return candidates, DIRECTIVE_NO_FILE_COMP

    if spec.valid_args:
        candidates = [(arg, "") for arg in spec.valid_args if arg.startswith(to_complete)]
        return candidates, DIRECTIVE_NO_FILE_COMP

    return [], DIRECTIVE_DEFAULT


def write_completions(
    tree: CommandTree,
    words: Sequence[str],
    include_descriptions: bool,
    out: TextIO,
) -> None:
    """Print candidates in the format the generated scripts read."""
    candidates, directive = complete_args(tree, words)
    for name, description in candidates:
        if include_descriptions and description:
            out.write(f"{name}\t{description}\n")
        else:
            out.write(f"{name}\n")
    out.write(f":{directive}\n")


def build_complete_commands(tree: CommandTree) -> list[CommandSpec]:
    """Hidden nodes answering completion requests from the shell scripts."""

    def complete(args) -> None:
        write_completions(tree, getattr(args, RAW_ARGS_ATTR), True, sys.stdout)

    def complete_no_desc(args) -> None:
        write_completions(tree, getattr(args, RAW_ARGS_ATTR), False, sys.stdout)

    return [
        CommandSpec(
            name=COMPLETE_COMMAND,
            run=complete,
            pre_run=None,
            hidden=True,
            raw_args=True,
        ),
        CommandSpec(
            name=COMPLETE_NO_DESC_COMMAND,
            run=complete_no_desc,
            pre_run=None,
            hidden=True,
            raw_args=True,
        ),
    ]


def build_completion_command(generator: CompletionGenerator) -> CommandSpec:
    """The ``completion <shell>`` node."""

    def add_arguments(parser) -> None:
        parser.add_argument("shell", choices=SHELLS)

    def run(args) -> None:
        generator.generate(args.shell, sys.stdout)

    return CommandSpec(
        name="completion",
        run=run,
        short_help=get_message("COMPLETION_SHORT"),
        pre_run=None,
        add_arguments=add_arguments,
        valid_args=SHELLS,
    )
