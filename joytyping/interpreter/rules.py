"""
joytyping — RULE COMPILER

Builds modes from configuration. Each mode block is a declaration line
plus rule lines:

    [speech] -id WordMode -flushonexit -phrase programming vim
    [trigger] button -id X -> [hotkey] -keys i
    [switch]  button -id R -> [upper]

Both sides of a rule are split with shell quoting. Keyword options
(`-id X`, `--nospace=false`) are parsed by argparse; a bare boolean flag
(`-double`) means true.
"""

from __future__ import annotations

import argparse
import logging
import shlex
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from joytyping.core.config import Config
from joytyping.core.types import BUTTON_NAMES, DIRECTION_NAMES, SIDE_NAMES, ButtonId, SpinDirection, StickSide
from joytyping.injector.keys import is_key_name
from joytyping.interpreter.actions import (
    MOUSE_BUTTONS,
    Action,
    EnableGyro,
    FlushVoice,
    HotkeyAction,
    MouseClick,
    MouseToggle,
    MoveCursor,
    RepeatSpeech,
    RestoreMode,
    Speak,
    SwitchMode,
    SysNotify,
)
from joytyping.interpreter.conditions import (
    ButtonCondition,
    GyroCondition,
    SpeechCondition,
    StickDirectionCondition,
    StickMoveCondition,
)
from joytyping.interpreter.modes import DEFAULT_SPEECH_HOST, GyroMode, IdleMode, Mode, SpeechMode
from joytyping.interpreter.modifiers import CursorBoost, Modifier, TextPrefix
from joytyping.interpreter.speech.exec_speech import ExecSpeech, MappingError
from joytyping.interpreter.speech.executors import TAG_CAMEL, TAG_SNAKE, TAG_TITLE, TAG_UPPER
from joytyping.interpreter.switches import Switch, Trigger, button_switch, stick_direction_switch

if TYPE_CHECKING:
    from joytyping.interpreter.context import EngineContext

logger = logging.getLogger(__name__)

KNOWN_ENGINES = ("vosk",)

# buttons that can be held with [mouse_toggle]
TOGGLE_BUTTONS = ("left", "center", "right")

CASE_MODIFIERS = {
    "[upper]": TAG_UPPER,
    "[camel]": TAG_CAMEL,
    "[title]": TAG_TITLE,
    "[snake]": TAG_SNAKE,
}


class CompileError(ValueError):
    """The configuration cannot be compiled; the message names the offending line or mode."""


class _RuleArgs(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise CompileError(f"{self.prog}: {message}")


def _to_bool(s: str) -> bool:
    low = s.lower()
    if low in ("true", "1", "yes", "on"):
        return True
    if low in ("false", "0", "no", "off"):
        return False
    raise argparse.ArgumentTypeError(f"not a boolean: {s}")


def _parser(keyword: str) -> _RuleArgs:
    return _RuleArgs(prog=keyword, add_help=False, allow_abbrev=False)


def _opt(p: _RuleArgs, name: str, **kw) -> None:
    p.add_argument(f"-{name}", f"--{name}", dest=name, **kw)


def _flag(p: _RuleArgs, name: str, default: bool) -> None:
    _opt(p, name, nargs="?", const=True, default=default, type=_to_bool)


def _parse(p: _RuleArgs, args: Sequence[str]) -> argparse.Namespace:
    return p.parse_args(list(args))


def split_rule(line: str) -> Tuple[List[str], List[str]]:
    parts = line.split("->")
    if len(parts) != 2:
        raise CompileError("missing or repeated '->'")
    try:
        lefts = shlex.split(parts[0])
        rights = shlex.split(parts[1])
    except ValueError as e:
        raise CompileError(f"wrong quoting: {e}") from e
    if len(lefts) < 2 or not rights:
        raise CompileError("a rule needs a kind and a condition before '->' and something after it")
    return lefts, rights


def _button(name: str) -> ButtonId:
    b = BUTTON_NAMES.get(name)
    if b is None:
        raise CompileError(f"no button named: {name}")
    return b


def _side(name: str) -> StickSide:
    s = SIDE_NAMES.get(name)
    if s is None:
        raise CompileError(f"unsupported side: {name}")
    return s


def _direction(name: str) -> SpinDirection:
    d = DIRECTION_NAMES.get(name)
    if d is None:
        raise CompileError(f"invalid direction: {name}")
    return d


# ============================================================
# Left-hand side
# ============================================================

def parse_trigger(name: str, args: Sequence[str]) -> Trigger:
    kind = name.lower()
    if kind == "button":
        p = _parser("button")
        _opt(p, "id", required=True)
        _flag(p, "whendown", True)
        ns = _parse(p, args)
        return Trigger(ButtonCondition(_button(ns.id), when_down=ns.whendown))

    if kind == "stick":
        p = _parser("stick")
        _opt(p, "side", required=True)
        _opt(p, "dir")
        ns = _parse(p, args)
        side = _side(ns.side)
        if ns.dir is None:
            return Trigger(StickMoveCondition(side))
        return Trigger(StickDirectionCondition(side, _direction(ns.dir)))

    if kind == "gyro":
        _parse(_parser("gyro"), args)
        return Trigger(GyroCondition())

    if kind == "speech":
        _parse(_parser("speech"), args)
        return Trigger(SpeechCondition())

    raise CompileError(f"no trigger named: {name}")


def parse_switch(name: str, args: Sequence[str]) -> Switch:
    kind = name.lower()
    if kind == "button":
        p = _parser("button")
        _opt(p, "id", required=True)
        ns = _parse(p, args)
        return button_switch(_button(ns.id))

    if kind == "stick":
        p = _parser("stick")
        _opt(p, "side", required=True)
        _opt(p, "dir", required=True)
        ns = _parse(p, args)
        return stick_direction_switch(_side(ns.side), _direction(ns.dir))

    raise CompileError(f"no switch named: {name}")


# ============================================================
# Right-hand side
# ============================================================

def parse_modifier(name: str, args: Sequence[str]) -> Optional[Modifier]:
    """Return None when `name` is not a modifier keyword at all."""
    kind = name.lower()
    if kind in CASE_MODIFIERS:
        _parse(_parser(kind), args)
        return TextPrefix(CASE_MODIFIERS[kind], space=True)

    if kind == "[prefix]":
        p = _parser(kind)
        _opt(p, "prefix", required=True)
        _flag(p, "space", True)
        ns = _parse(p, args)
        return TextPrefix(ns.prefix, space=ns.space)

    if kind == "[boost]":
        p = _parser(kind)
        _opt(p, "multiplier", required=True, type=float)
        ns = _parse(p, args)
        return CursorBoost(ns.multiplier)

    return None


def parse_action(
    name: str, args: Sequence[str], ctx: "EngineContext", word_mapping: Dict[str, List[str]],
) -> Action:
    kind = name.lower()
    p = _parser(kind)

    if kind == "[cursor]":
        _opt(p, "speed", type=float, default=0.01)
        ns = _parse(p, args)
        return MoveCursor(ctx, speed=ns.speed)

    if kind == "[click]":
        _opt(p, "button", default="left", choices=MOUSE_BUTTONS)
        _flag(p, "double", False)
        ns = _parse(p, args)
        return MouseClick(ctx, button=ns.button, double=ns.double)

    if kind == "[hotkey]":
        _opt(p, "keys", nargs="+", required=True)
        ns = _parse(p, args)
        for k in ns.keys:
            if not is_key_name(k):
                raise CompileError(f"unknown key: {k}")
        return HotkeyAction(ctx, keys=tuple(ns.keys))

    if kind == "[notify]":
        _opt(p, "title", default="")
        _opt(p, "text", default="")
        _opt(p, "icon", default="")
        ns = _parse(p, args)
        return SysNotify(ctx, title=ns.title, text=ns.text, icon=ns.icon)

    if kind == "[speak]":
        _opt(p, "text", default="")
        ns = _parse(p, args)
        return Speak(ctx, text=ns.text)

    if kind == "[speech]":
        _flag(p, "number", True)
        _flag(p, "nospace", True)
        _flag(p, "typing", True)
        _opt(p, "map", nargs="*", default=[])
        ns = _parse(p, args)
        try:
            return ExecSpeech(
                ctx,
                cast_number=ns.number,
                no_space=ns.nospace,
                typing=ns.typing,
                mapping_ids=list(ns.map),
                word_mapping=word_mapping,
            )
        except MappingError as e:
            raise CompileError(str(e)) from e

    if kind == "[flush]":
        _parse(p, args)
        return FlushVoice(ctx)

    if kind == "[repeat]":
        _parse(p, args)
        return RepeatSpeech(ctx)

    if kind == "[mode]":
        _opt(p, "id", required=True)
        ns = _parse(p, args)
        return SwitchMode(ctx, mode_id=ns.id)

    raise CompileError(f"unknown action: {name}")


# ============================================================
# Mode declaration
# ============================================================

def parse_mode(
    name: str, args: Sequence[str], ctx: "EngineContext", phrase_list: Dict[str, List[str]],
) -> Mode:
    kind = name.lower()
    p = _parser(kind)
    _opt(p, "id", required=True)

    if kind == "[idle]":
        ns = _parse(p, args)
        return IdleMode(ns.id)

    if kind == "[gyro]":
        ns = _parse(p, args)
        return GyroMode(ns.id, ctx=ctx)

    if kind == "[speech]":
        _opt(p, "host", default=DEFAULT_SPEECH_HOST)
        _opt(p, "engine", default="vosk")
        _opt(p, "phrase", nargs="*", default=[])
        _flag(p, "flushonexit", False)
        ns = _parse(p, args)

        if ns.engine not in KNOWN_ENGINES:
            raise CompileError(f"unknown speech engine: {ns.engine}")
        words: List[str] = []
        for ph_id in ns.phrase:
            ph = phrase_list.get(ph_id)
            if ph is None:
                raise CompileError(f"phrase '{ph_id}' not exist")
            words.extend(ph)
        return SpeechMode(
            ns.id,
            ctx=ctx,
            engine=ctx.new_speech_engine(ns.engine),
            host=ns.host,
            phrase_list=words,
            flush_on_exit=ns.flushonexit,
        )

    raise CompileError(f"no mode named: '{name}'")


# ============================================================
# Whole configuration
# ============================================================

def _compile_rule(
    line: str,
    mode: Mode,
    is_default: bool,
    ctx: "EngineContext",
    cfg: Config,
    mode_switches: List[Switch],
) -> None:
    lefts, rights = split_rule(line)
    head = lefts[0].lower()

    if head == "[trigger]":
        trig = parse_trigger(lefts[1], lefts[2:])
        trig.action = parse_action(rights[0], rights[1:], ctx, cfg.word_mapping)
        mode.triggers.append(trig)
        return

    if head != "[switch]":
        raise CompileError(f"unknown key '{lefts[0]}', should begin with either [trigger] or [switch]")

    sw = parse_switch(lefts[1], lefts[2:])
    mod = parse_modifier(rights[0], rights[1:])
    if mod is not None:
        mode.switches.append((sw, mod))
        return

    kind = rights[0].lower()
    if kind == "[mode]":
        if not is_default:
            raise CompileError("mode switch can only be defined in the default mode (the first in the list)")
        sw.on_trigger.action = parse_action(rights[0], rights[1:], ctx, cfg.word_mapping)
        sw.off_trigger.action = RestoreMode(ctx)
        mode_switches.append(sw)
    elif kind == "[gyro]":
        _parse(_parser(kind), rights[1:])
        sw.on_trigger.action = EnableGyro(ctx, enable=True)
        sw.off_trigger.action = EnableGyro(ctx, enable=False)
        mode.switches.append((sw, None))
    elif kind == "[mouse_toggle]":
        p = _parser(kind)
        _opt(p, "button", default="left", choices=TOGGLE_BUTTONS)
        ns = _parse(p, rights[1:])
        sw.on_trigger.action = MouseToggle(ctx, button=ns.button, down=True)
        sw.off_trigger.action = MouseToggle(ctx, button=ns.button, down=False)
        mode.switches.append((sw, None))
    else:
        raise CompileError(f"unknown switch: {rights[0]}")


def compile_rules(cfg: Config, ctx: "EngineContext") -> Tuple[List[Mode], List[Switch]]:
    """
    Compile every mode block of `cfg`.

    Returns the modes in declaration order (the first is the default) and
    the global mode switches declared in the first block.
    """
    if not cfg.modes:
        raise CompileError("no mode rules configured")

    modes: List[Mode] = []
    mode_switches: List[Switch] = []
    seen = set()

    for index, block in enumerate(cfg.modes):
        try:
            decl = shlex.split(block.mode)
        except ValueError as e:
            raise CompileError(f"wrong mode '{block.mode}': {e}") from e
        if not decl:
            raise CompileError(f"missing type for mode[{index}]")
        try:
            mode = parse_mode(decl[0], decl[1:], ctx, cfg.phrase_list)
        except CompileError as e:
            raise CompileError(f"wrong mode '{block.mode}': {e}") from e
        if mode.id in seen:
            raise CompileError(f"duplicated mode id: {mode.id}")
        seen.add(mode.id)

        for line in block.rules:
            try:
                _compile_rule(line, mode, index == 0, ctx, cfg, mode_switches)
            except CompileError as e:
                raise CompileError(f"{line}: {e}") from e

        modes.append(mode)

    logger.info("compiled %d modes, %d mode switches", len(modes), len(mode_switches))
    return modes, mode_switches


def install(cfg: Config, ctx: "EngineContext") -> None:
    """Compile `cfg` and hand the result to the manager; on error the running modes stay."""
    modes, mode_switches = compile_rules(cfg, ctx)
    ctx.manager.set_modes(modes, mode_switches)
