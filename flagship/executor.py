"""
Flagship executor: route argv to a command, bind it, run it, report faults.

Invocation shape
    <program> <command-name> [positional-args...] [flags...]

Behavior
- no tokens            → MissingCommandError + command list, exit code 1.
- unknown command name → UnknownCommandError (with suggestion) + command list, 1.
- "<name> --help" / "<name> -h" alone (when the command does not declare those
  aliases itself) → the command's help on stdout, 0.
- binding fault        → the fault + the command's help on stderr, 1.
- callback raises      → CommandFailedError + the command's help on stderr, 1
  (KeyboardInterrupt and SystemExit propagate).
- otherwise the command's callback runs with the bound namespace; None means 0,
  an int is returned as the exit code.

Faults are surfaced through faults.trigger() in shell/deferred mode, so they are
printed through rich (colorful/fancy as configured) and control comes back here
to pick the exit code. Exit codes belong to the executor; the binder and the
renderers only return values or raise.
"""
import shlex
import sys
from collections.abc import Iterable

from rich.console import Console

from .catalog import Catalog
from .commands import Command
from .faults import (
    MissingArgumentError,
    InvalidArgumentValueError,
    UnknownCommandError,
    MissingCommandError,
    CommandFailedError,
    FaultCode,
    getdoc,
    trigger,
)
from .help import command_help_text, command_list_text
from .utils import Unset, coalesce

_HELP = ("--help", "-h")


class Executor:
    """
    Dispatcher over a Catalog.

    Parameters
    - catalog: Catalog (frozen on construction: registration ends here).
    - console / stderr: rich consoles for regular output and for faults
      (defaults: stdout and stderr).
    - colorful: style help and faults with the palette (see __styles__).
    - fancy: wrap faults in a rich panel.
    """

    def __init__(self, catalog, /, *, console=Unset, stderr=Unset, colorful=False, fancy=False):
        if not isinstance(catalog, Catalog):
            raise TypeError("executor 'catalog' must be a catalog")
        self._catalog = catalog.freeze()
        self._console = coalesce(console, Console())
        self._stderr = coalesce(stderr, Console(stderr=True))
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)

    @property
    def catalog(self):
        return self._catalog

    def _report(self, fault):
        trigger(
            fault,
            shell=True,
            deferred=True,
            console=self._stderr,
            colorful=self._colorful,
            fancy=self._fancy,
        )

    def _print(self, text, /, *, stderr=False):
        (self._stderr if stderr else self._console).print(text, end="", soft_wrap=True)

    def help(self, command, /, *, stderr=False):
        """Print the help of one command."""
        self._print(command_help_text(command, colorful=self._colorful), stderr=stderr)

    def listing(self, /, *, stderr=False):
        """Print the list of available commands."""
        self._print(command_list_text(self._catalog, colorful=self._colorful), stderr=stderr)

    def execute(self, args, /):
        """
        Run one invocation and return its exit code.

        Parameters
        - args: Iterable[str], the command name first (program name excluded).
        """
        if isinstance(args, str) or not isinstance(args, Iterable):
            raise TypeError("execute() argument must be an iterable of strings")
        args = list(args)

        if not args:
            self._report(MissingCommandError(
                "no command specified",
                title="missing command",
                code=FaultCode.MISSING_COMMAND,
                hint="pick one of the commands listed below",
                docs=getdoc(FaultCode.MISSING_COMMAND),
            ))
            self._print("\n", stderr=True)
            self.listing(stderr=True)
            return 1

        name, *tokens = args
        try:
            command = self._catalog.lookup(name)
        except UnknownCommandError as fault:
            self._report(fault)
            self._print("\n", stderr=True)
            self.listing(stderr=True)
            return 1

        if len(tokens) == 1 and tokens[0] in _HELP and not _declares_help(command):
            self.help(command)
            return 0

        try:
            arguments = command.parse(tokens)
        except (MissingArgumentError, InvalidArgumentValueError) as fault:
            self._report(fault)
            self._print("\n", stderr=True)
            self.help(command, stderr=True)
            return 1

        try:
            result = command(arguments)
        except Exception as error:
            fault = CommandFailedError(
                "error executing command %r: %s" % (command.name, error),
                title="command failed",
                code=FaultCode.COMMAND_FAILED,
                command=command.name,
                cause=error,
                hint="the callback raised %s" % type(error).__name__,
                docs=getdoc(FaultCode.COMMAND_FAILED),
            )
            fault.__cause__ = error
            self._report(fault)
            self._print("\n", stderr=True)
            self.help(command, stderr=True)
            return 1
        if result is None:
            return 0
        if isinstance(result, bool) or not isinstance(result, int):
            raise TypeError(f"command {command.name!r} callback must return an integer exit code or None")
        return result


def _declares_help(command):
    spellings = set()
    for field in command.flags:
        spellings.update(field.alias.spellings())
    for field in command.enums:
        for member in field.members:
            spellings.update(member.alias.spellings())
    return bool(spellings & set(_HELP))


def invoke(object, prompt=Unset, /, **options):
    """
    Convenience runner for a Catalog or a single Command; returns the exit code.

    Parameters
    - object: Catalog (prompt starts with the command name) or Command (prompt
      holds only its arguments).
    - prompt:
      • Unset: read sys.argv[1:].
      • str: shell-like string; split with shlex.split.
      • Iterable[str]: pre-tokenized sequence.
    - options: forwarded to Executor (console, stderr, colorful, fancy).

    Raises
    - TypeError: when object is neither a Catalog nor a Command, or the prompt
      is not a string / iterable of strings.
    """
    if prompt is Unset:
        tokens = sys.argv[1:]
    elif isinstance(prompt, str):
        tokens = shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("invoke() prompt must be a string or an iterable of strings")
    else:
        raise TypeError("invoke() prompt must be a string or an iterable of strings")

    if isinstance(object, Command):
        return Executor(Catalog([object]), **options).execute([object.name, *tokens])
    if isinstance(object, Catalog):
        return Executor(object, **options).execute(tokens)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must be a catalog or a command")


__all__ = (
    "Executor",
    "invoke",
)
