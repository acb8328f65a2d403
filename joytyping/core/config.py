"""
joytyping — Configuration

Rule blocks per mode, phrase lists for the recognizer and word mappings for
the speech command compiler. Stored as JSON next to the other per-user files.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Settings:
    log_level: str = "info"
    # stick counts as neutral while both axes stay below this ratio
    spin_neutral_threshold: float = 0.08
    # Up/Down/Left/Right edge events fire once an axis exceeds this ratio
    spin_edge_threshold: float = 0.70


@dataclass(frozen=True)
class ModeConfig:
    mode: str
    rules: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Config:
    settings: Settings = Settings()
    modes: List[ModeConfig] = field(default_factory=list)
    phrase_list: Dict[str, List[str]] = field(default_factory=dict)
    word_mapping: Dict[str, List[str]] = field(default_factory=dict)


DEFAULT_CONFIG = Config(
    settings=Settings(),
    modes=[
        ModeConfig(
            mode="[idle] -id id1",
            rules=[
                # modes
                "[switch]  button -id ZR   -> [mode] -id WordMode",
                "[switch]  button -id R    -> [mode] -id SentenceMode",
                '[switch]  button -id "+"  -> [mode] -id MouseMode',
                "[switch]  button -id R-SL -> [mode] -id some_test_mode",
                # buttons
                "[trigger] button -id X -> [hotkey] -keys i",
                "[trigger] button -id B -> [hotkey] -keys esc",
                "[trigger] button -id A -> [hotkey] -keys enter",
                "[trigger] button -id Y -> [speak] -text space",
                "[trigger] button -id R-SR -> [hotkey] -keys s ctrl",
                "[trigger] button -id Home -> [repeat]",
                # stick
                "[trigger] stick -side Right -dir Up    -> [hotkey] -keys up",
                "[trigger] stick -side Right -dir Down  -> [hotkey] -keys down",
                "[trigger] stick -side Right -dir Left  -> [hotkey] -keys left",
                "[trigger] stick -side Right -dir Right -> [hotkey] -keys right",
                "[trigger] speech -> [speech] -map programming vim application go",
                # moves the cursor if gyro streaming failed to stop after leaving MouseMode
                "[trigger] gyro -> [cursor] -speed 0.03",
            ],
        ),
        ModeConfig(
            mode="[speech] -id WordMode -flushonexit -phrase programming vim go application test",
            rules=[
                '[trigger] button -id X -> [speak] -text "c_o de"',
                '[trigger] button -id B -> [speak] -text "c_o db"',
                "[trigger] button -id Y -> [hotkey] -keys backspace",
                "[trigger] button -id A -> [hotkey] -keys delete",
                "[trigger] button -id Home -> [hotkey] -keys S",
                '[trigger] stick -side Right -dir Left  -> [speak] -text "c_o b"',
                '[trigger] stick -side Right -dir Right -> [speak] -text "c_o e"',
                '[trigger] stick -side Right -dir Down  -> [speak] -text "c_o w"',
                "[trigger] button -id Home  -> [notify] -text text -title title",
                "[trigger] button -id B     -> [flush]",
                "[trigger] speech -> [speech] -map programming vim application go",
            ],
        ),
        ModeConfig(
            mode="[speech] -id SentenceMode",
            rules=[
                "[switch] button -id X   -> [upper]",
                "[trigger] stick -side Right -dir Up    -> [hotkey] -keys up",
                "[trigger] stick -side Right -dir Down  -> [hotkey] -keys down",
                "[trigger] stick -side Right -dir Left  -> [hotkey] -keys left",
                "[trigger] stick -side Right -dir Right -> [hotkey] -keys right",
                "[trigger] speech        -> [speech] --nospace=false -map programming application go",
            ],
        ),
        ModeConfig(
            mode="[gyro] -id MouseMode",
            rules=[
                "[trigger] gyro -> [cursor] -speed 0.03",
                "[switch]  button -id R   -> [mouse_toggle]",
                "[trigger] button -id ZR  -> [click]",
                "[trigger] button -id X   -> [click] -button right",
            ],
        ),
        ModeConfig(
            mode="[speech] -id some_test_mode",
            rules=[
                "[trigger] speech -> [speech] --nospace=false --number=false",
                '[trigger] button -id R-SR  -> [notify] -text "just a test" -title "a title"',
            ],
        ),
    ],
    phrase_list={
        "programming": [
            "a", "alpha", "b", "bat", "c", "d", "e", "emma", "f", "g", "h", "i", "j", "k", "l", "lot", "m",
            "maiden", "n", "near", "o", "p", "q", "r", "s", "t", "u", "v", "vest", "w", "x", "y", "z", "zed",
            "zero", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine", "ten",
            "eleven", "twelve", "thirteen", "fourteen", "fifteen", "sixteen", "seventeen", "eighteen", "nineteen",
            "twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety",
            "hundred", "thousand",
            "second", "millisecond", "minute", "hour", "day", "week", "month", "year",
            "upper", "camel", "title", "snake",
            "slash", "underline", "underscore", "dash", "negative", "plus", "or",
            "not", "equal", "dot", "point", "comma", "semi", "colon", "semicolon", "double", "single", "loop",
            "condition", "quote", "quotes", "tick", "back", "round", "square", "curly", "angle", "bracket",
            "brackets", "close", "pair", "return", "enter", "space", "bar", "left", "right", "up", "down",
            "caret", "at", "tilde", "question", "minus", "multiply", "divide", "star", "comment", "dollar",
            "mod", "escape", "less", "greater", "than", "repeat", "append", "pre", "post", "begin", "ending",
            "check",
        ],
        "application": [
            "hotkey", "launch", "shell", "bash", "control", "shift", "alt", "tab", "meta", "move", "resize",
            "maximize", "minimize", "window", "run", "command", "telegram", "chrome", "brave", "terminal",
            "aptitude", "nala", "vim", "explorer", "update", "upgrade", "shut", "close", "workspace", "switch",
            "git", "clone", "status", "file", "manager", "job", "note",
        ],
        "test": ["elephant", "cobra", "delay", "hello", "world"],
        "go": [
            "struct", "var", "type", "import", "package", "switch", "function", "go", "make", "new", "const",
            "unsigned", "int", "float", "byte", "array", "spring", "print", "line", "format", "assert",
            "select", "main", "truth", "false", "break",
        ],
        "vim": [
            "mode", "insert", "undo", "redo", "search", "mark", "next", "previous", "last", "position",
            "modify", "zoom", "page", "middle", "top", "bottom", "down", "buffer",
        ],
    },
    word_mapping={
        "vim": [
            "s_h -> [hotkey] h shift", "c_o -> [hotkey] o ctrl", "c_i -> [hotkey] i ctrl", "insert -> i",
            "select line -> escape vil", "select 9 -> escape vil", "line begin -> c_o I", "9 begin -> c_o I",
            "line ending -> c_o A", "9 ending -> c_o A", "undo -> escape u", 'redo -> escape ";redo" enter',
            "new line -> c_o o", "new 9 -> c_o o", "new line upper -> c_o O", "new 9 upper -> c_o O",
            'search -> "/"', "mark -> m", "next -> n", "previous -> N", "last position -> c_o c_o",
            "next position -> c_o c_i", "last modify -> c_o \"'\" \".\"", "middle -> M", "top -> H",
            "bottom -> L", "zoom -> zz", "page down -> [hotkey] d ctrl", "page up -> [hotkey] e ctrl",
            "buffer right -> [hotkey] l ctrl", "buffer left -> [hotkey] h ctrl",
            "buffer up -> [hotkey] k ctrl", "buffer down -> [hotkey] j ctrl",
        ],
        "programming": [
            "repeat -> [repeat]",
            'the -> ""', 'alpha -> "a"', 'bat -> "b"', 'emma -> "e"', 'lot -> "l"', 'maiden -> "m"',
            'near -> "n"', 'vest -> "v"', "zed -> z", "escape -> [hotkey] esc", 'space -> " "',
            'bar -> " "', 'dot -> "."', "equal -> =", 'dash -> "-"', 'minus -> "-"', 'negative -> "-"',
            'tick -> "`"', 'plus -> "+"', 'at -> "@"', 'multiply -> "*"', 'star -> "*"', 'divide -> "/"',
            "dollar -> '$'", "underscore -> _", "underline -> _", "enter -> [hotkey] enter",
            "return -> [hotkey] enter", 'round -> "("', 'round close -> ")"', 'round pair -> "()"',
            'square -> "["', 'square close -> "]"', 'square pair -> "[]"', 'curly -> "{"',
            'curly close -> "}"', 'curly pair -> "{}"', 'angle -> "<"', 'angle close -> ">"',
            'angle pair -> "<>"', 'less than -> "<"', 'greater than -> ">"', 'less equal -> " <= "',
            'greater equal -> " >= "', "single quote -> \"'\"", "quote -> '\"'", 'semi -> ";"',
            'colon -> ":"', 'comma -> ","', 'f check -> "if "', 'y loop -> "while "',
            "camel -> [camel]", "title -> [title]", "snake -> [snake]", "upper -> [upper]",
            "elephant -> [camel] [title]",  # ThisIsElephant
            "cobra -> [snake] [title]",     # I_am_cobra
        ],
        "application": [
            "file manager -> [shell] dw",
            "run terminal -> [hotkey] t control alt",
            'run job -> [shell] v "/e/job/job.md"',
            'run note -> [shell] v "/e/job/note.md"',
            'run brave -> [shell] "brave-browser" "--no-sandbox"',
            "run command -> [hotkey] esc alt",
            "maximize window -> [hotkey] e alt",
            "minimize window -> [hotkey] e alt",
            "shut -> [hotkey] w alt",
            "resize window -> [hotkey] r alt",
            "move window -> [hotkey] e alt",
            "control c -> [hotkey] c ctrl",
            "control v -> [hotkey] v ctrl",
            "control d -> [hotkey] d ctrl",
            "control p -> [hotkey] p ctrl",
            "control f -> [hotkey] f ctrl",
            "control zed -> [hotkey] z ctrl",
            "new tab -> [hotkey] t ctrl",
            "last page -> [hotkey] left alt",
            "next page -> [hotkey] right alt",
            "close tab -> [hotkey] w ctrl",
            "move workspace 2 -> [hotkey] 2 alt ctrl",
            "move workspace 1 -> [hotkey] 1 alt ctrl",
            "hotkey -> [hotkey]",
            "delay -> [delay]",
        ],
        "go": [
            'spring -> "fmt.Sprintf("',
            'assert -> "if e != nil {"',
            '4 loop -> "for "',
            'colon equal -> " := "',
            'function -> "func "',
            "truth -> true",
        ],
    },
)


def config_path() -> Path:
    p = Path.home() / ".config" / "joytyping"
    p.mkdir(parents=True, exist_ok=True)
    return p / "config.json"


def config_to_dict(cfg: Config) -> dict:
    return asdict(cfg)


def config_from_dict(data: dict) -> Config:
    settings = Settings(**data.get("settings", {}))
    modes = [ModeConfig(mode=m["mode"], rules=list(m.get("rules", []))) for m in data.get("modes", [])]
    return Config(
        settings=settings,
        modes=modes,
        phrase_list={k: list(v) for k, v in data.get("phrase_list", {}).items()},
        word_mapping={k: list(v) for k, v in data.get("word_mapping", {}).items()},
    )


def save_config(cfg: Config, path: Optional[Path] = None) -> Path:
    p = path or config_path()
    p.write_text(json.dumps(config_to_dict(cfg), indent=2))
    return p


def load_config(path: Optional[Path] = None) -> Config:
    """Read the config file, writing DEFAULT_CONFIG there on first launch."""
    p = path or config_path()
    if not p.exists():
        save_config(DEFAULT_CONFIG, p)
    return config_from_dict(json.loads(p.read_text()))
