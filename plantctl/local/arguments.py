import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from plantctl.errors import UsageError

log = logging.getLogger(__name__)

#* --- Macro expansion table ---
MACROS: Dict[str, str] = {
    "+production": "-kcrp",
    "+debug": "-kcrd",
    "+update-assets": "-nu",
    "+refresh-assets": "-kcr",
    "+prepare-release": "-kc",
}

# short flag -> (option attribute, takes an argument)
SHORT_FLAGS: Dict[str, tuple] = {
    "a": ("app_file", True),
    "c": ("clean", False),
    "d": ("debug", False),
    "e": ("example", False),
    "h": ("help", False),
    "k": ("kill", False),
    "n": ("no_start", False),
    "p": ("production", False),
    "r": ("rebuild", False),
    "u": ("update", False),
    "v": ("verbose", False),
    "w": ("watch", False),
}

LONG_FLAGS: Dict[str, tuple] = {
    "app": ("app_file", True),
    "clean": ("clean", False),
    "debug": ("debug", False),
    "example": ("example", False),
    "help": ("help", False),
    "kill": ("kill", False),
    "no-start": ("no_start", False),
    "production": ("production", False),
    "rebuild": ("rebuild", False),
    "update": ("update", False),
    "appendlog": ("append_log", False),
    "no-kill": ("no_kill", False),
    "verbose": ("verbose", False),
    "watch": ("watch", False),
}


@dataclass(frozen=True)
class LaunchOptions:
    """The immutable result of parsing the command line."""

    app_file: Optional[str] = None
    clean: bool = False
    debug: bool = False
    example: bool = False
    help: bool = False
    kill: bool = False
    no_start: bool = False
    production: bool = False
    rebuild: bool = False
    update: bool = False
    append_log: bool = False
    no_kill: bool = False
    verbose: bool = False
    watch: bool = False

    @property
    def should_start(self) -> bool:
        """True when a server process is going to be launched."""
        return (self.debug or self.production or self.example) and not self.no_start

    @property
    def should_update(self) -> bool:
        """True when the asset pipeline has to run. Selecting a mode builds its assets."""
        return self.update or self.rebuild or self.watch or self.debug or self.production or self.example

    @property
    def should_kill(self) -> bool:
        """True when previous instances must be stopped first."""
        return self.kill or (self.should_start and not self.no_kill)

    @property
    def has_command(self) -> bool:
        return any((
            self.kill, self.clean, self.update, self.rebuild,
            self.debug, self.production, self.example, self.watch,
        ))

    @property
    def modes(self) -> List[str]:
        """
        The build modes selected on the command line.

        Neither -d nor -p selects both modes, debug first. -e alone implies debug.
        """
        selected = []
        if self.debug or (self.example and not self.production):
            selected.append("debug")
        if self.production:
            selected.append("production")
        if not selected:
            selected = ["debug", "production"]
        return selected


def expand_macros(tokens: Sequence[str]) -> List[str]:
    """
    Replaces every macro token with the flag bundle it stands for.

    :param tokens: The raw command-line tokens.
    :return list: The tokens with all macros expanded in place.
    :raises UsageError: If a token looks like a macro but is not a known one.
    """
    expanded: List[str] = []
    for token in tokens:
        if token.startswith("+"):
            if token not in MACROS:
                raise UsageError(f"Unknown macro '{token}'. Available: {', '.join(MACROS)}")
            log.debug(f"Expanding macro {token} -> {MACROS[token]}")
            expanded.append(MACROS[token])
        else:
            expanded.append(token)
    return expanded


def parse_arguments(tokens: Sequence[str]) -> LaunchOptions:
    """
    Parses command-line tokens into LaunchOptions.

    Short flags may be concatenated (-kcrp); only the last character of a
    concatenation may consume the following token as its argument.

    :param tokens: The command-line tokens, without the program name.
    :return LaunchOptions: The parsed, validated options.
    :raises UsageError: On unknown flags, missing arguments, stray tokens,
        conflicting modes, or when no command is given.
    """
    values: Dict[str, object] = {}
    queue = expand_macros(tokens)
    index = 0

    def take_argument(flag: str) -> str:
        nonlocal index
        if index >= len(queue) or queue[index].startswith(("-", "+")):
            raise UsageError(f"Option '{flag}' requires an argument.")
        argument = queue[index]
        index += 1
        return argument

    while index < len(queue):
        token = queue[index]
        index += 1

        if token.startswith("--"):
            name = token[2:]
            if name not in LONG_FLAGS:
                raise UsageError(f"Unknown option '{token}'.")
            attribute, needs_argument = LONG_FLAGS[name]
            values[attribute] = take_argument(token) if needs_argument else True

        elif token.startswith("-") and len(token) > 1:
            letters = token[1:]
            for position, letter in enumerate(letters):
                if letter not in SHORT_FLAGS:
                    raise UsageError(f"Unknown option '-{letter}'.")
                attribute, needs_argument = SHORT_FLAGS[letter]
                if needs_argument:
                    if position != len(letters) - 1:
                        raise UsageError(
                            f"Option '-{letter}' takes an argument and must be last in '{token}'."
                        )
                    values[attribute] = take_argument(f"-{letter}")
                else:
                    values[attribute] = True
        else:
            raise UsageError(f"Unexpected argument '{token}'.")

    options = LaunchOptions(**values)
    validate_options(options)
    return options


def validate_options(options: LaunchOptions) -> None:
    """Fails fast on option combinations that cannot be executed."""
    if options.help:
        return
    if not options.has_command:
        raise UsageError("No command given.")
    if options.debug and options.production and options.should_start:
        raise UsageError(
            "Options --debug and --production are mutually exclusive when starting a server "
            "(add --no-start to only build both)."
        )
