"""Line-oriented command interpreter for the in-memory filesystem."""

import logging
import shlex
import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape

from treefs.config import Settings
from treefs.filesystem import Filesystem, FilesystemError, OperationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    """A shell command and how many arguments it accepts."""

    name: str
    usage: str
    help: str
    min_args: int = 0
    max_args: int = 0


COMMANDS: dict[str, Command] = {
    command.name: command
    for command in (
        Command("touch", "touch NAME", "Create an empty file", 1, 1),
        Command("mkdir", "mkdir NAME", "Create a directory", 1, 1),
        Command("cd", "cd [NAME]", "Change directory (., .., / or a child)", 0, 1),
        Command("ls", "ls [NAME]", "List a directory or show a file", 0, 1),
        Command("pwd", "pwd", "Print the current directory"),
        Command("rm", "rm NAME", "Remove a file or a directory tree", 1, 1),
        Command("tree", "tree [NAME]", "Show a directory tree", 0, 1),
        Command("help", "help", "Show this help"),
        Command("exit", "exit", "Leave the shell"),
        Command("quit", "quit", "Leave the shell"),
    )
}


class CommandInterpreter:
    """Maps text commands onto Filesystem operations.

    Listings and paths go to the filesystem's output stream; errors and
    help text go to the rich console.
    """

    def __init__(
        self,
        filesystem: Filesystem,
        console: Console | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the interpreter.

        Args:
            filesystem: Filesystem the commands operate on.
            console: Rich console for errors and help. Creates new one if not provided.
            settings: Shell settings. Defaults are used if not provided.
        """
        self.filesystem = filesystem
        self.console = console or Console()
        self.settings = settings or Settings()
        self.finished = False

    def execute(self, line: str) -> bool:
        """Run a single command line.

        Args:
            line: Raw input line

        Returns:
            True if the command succeeded (blank lines and comments count as success)
        """
        line = line.strip()
        if not line or line.startswith("#"):
            return True

        if self.settings.echo_commands:
            self.console.print(f"[dim]{escape(self.settings.prompt)}{escape(line)}[/dim]")

        try:
            words = shlex.split(line)
        except ValueError as e:
            return self._fail("parse", str(e))

        name, args = words[0], words[1:]
        command = COMMANDS.get(name)
        if command is None:
            return self._fail(name, "command not found")
        if not command.min_args <= len(args) <= command.max_args:
            return self._fail(name, f"usage: {command.usage}")

        logger.debug(f"Executing {name} {args}")
        handler: Callable[..., bool] = getattr(self, f"_do_{name}")
        return handler(*args)

    def run_lines(self, lines: Iterable[str]) -> int:
        """Run a sequence of command lines.

        Stops early on exit, or on the first failure when stop_on_error is set.

        Args:
            lines: Command lines

        Returns:
            Number of failed commands
        """
        failures = 0
        for line in lines:
            if not self.execute(line):
                failures += 1
                if self.settings.stop_on_error:
                    logger.info("Stopping at first failed command")
                    break
            if self.finished:
                break
        return failures

    def repl(self, input_func: Callable[[str], str] = input) -> int:
        """Prompt for commands until exit or end of input.

        Args:
            input_func: Function that reads one line given a prompt

        Returns:
            Number of failed commands
        """
        failures = 0
        while not self.finished:
            try:
                line = input_func(self.settings.prompt)
            except EOFError:
                break
            except KeyboardInterrupt:
                self.console.print()
                continue
            if not self.execute(line):
                failures += 1
        return failures

    def _report(self, command: str, result: OperationResult) -> bool:
        if not result:
            return self._fail(command, result.message)
        return True

    def _fail(self, command: str, message: str) -> bool:
        self.console.print(f"[red]Error:[/red] {escape(command)}: {escape(message)}")
        return False

    def _do_touch(self, name: str) -> bool:
        return self._report("touch", self.filesystem.touch(name))

    def _do_mkdir(self, name: str) -> bool:
        return self._report("mkdir", self.filesystem.mkdir(name))

    def _do_cd(self, name: str = ".") -> bool:
        return self._report("cd", self.filesystem.cd(name))

    def _do_ls(self, name: str = ".") -> bool:
        return self._report("ls", self.filesystem.ls(name))

    def _do_pwd(self) -> bool:
        return self._report("pwd", self.filesystem.pwd())

    def _do_rm(self, name: str) -> bool:
        return self._report("rm", self.filesystem.rm(name))

    def _do_tree(self, name: str = ".") -> bool:
        try:
            snapshot = self.filesystem.tree(name, max_depth=self.settings.tree_max_depth)
        except FilesystemError as e:
            return self._fail("tree", e.message)

        (self.filesystem.out or sys.stdout).write(snapshot.to_string())
        return True

    def _do_help(self) -> bool:
        for command in COMMANDS.values():
            self.console.print(f"  [bold]{escape(f'{command.usage:<12}')}[/bold] {command.help}")
        return True

    def _do_exit(self) -> bool:
        self.finished = True
        return True

    _do_quit = _do_exit
