"""User-defined constants and their storage in a shared settings file."""

from __future__ import annotations

import configparser
import copy
import os
import string
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Callable, Iterable

from .values import INFINITY_SYMBOL, PI_SYMBOL, Value, get_evaluator

_GROUP = "UserConstants"
_OLD_GROUP = "Constants"
_PREDEFINED = frozenset({"pi", PI_SYMBOL, "e", INFINITY_SYMBOL})


class ConstantScope(IntFlag):
    """Where a constant is kept; scopes may be combined."""

    Document = 0x1
    Global = 0x2
    All = 0x3


@dataclass
class Constant:
    """The value of a constant and the scopes it belongs to."""

    value: Value = field(default_factory=Value)
    scope: ConstantScope = ConstantScope.Document | ConstantScope.Global


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    return parser


class Constants:
    """A collection of named constants, kept in name order."""

    def __init__(self, reserved_names: Iterable[str] | None = None) -> None:
        self._constants: dict[str, Constant] = {}
        self._callbacks: list[Callable[[], None]] = []
        self.reserved_names: set[str] = set(reserved_names or ())

    def _changed(self) -> None:
        for callback in list(self._callbacks):
            callback()

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call ``callback`` whenever the constants change; returns an unsubscriber."""
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def value(self, name: str) -> Value:
        """The value of ``name``, or a default value if there is no such constant."""
        constant = self._constants.get(name)
        return constant.value if constant is not None else Value()

    def have(self, name: str) -> bool:
        return name in self._constants

    def remove(self, name: str) -> None:
        if self._constants.pop(name, None) is not None:
            self._changed()

    def add(self, name: str, constant: Constant) -> None:
        """Store a copy of ``constant`` under ``name``, replacing any previous one."""
        self._constants[name] = copy.deepcopy(constant)
        self._changed()

    def list(self, scope: ConstantScope = ConstantScope.All) -> dict[str, Constant]:
        """Copies of the constants sharing a scope with ``scope``, in name order."""
        return {
            name: copy.deepcopy(constant)
            for name, constant in sorted(self._constants.items())
            if constant.scope & scope
        }

    def names(self) -> list[str]:
        return sorted(self._constants)

    def is_valid_name(self, name: str) -> bool:
        """Whether ``name`` may be used for a constant."""
        if not name:
            return False
        if name in self.reserved_names or name in get_evaluator().function_names():
            return False
        if name in _PREDEFINED:
            return False
        return all(ch.isalpha() for ch in name)

    def generate_unique_name(self) -> str:
        """A valid name that no constant uses yet."""
        prefix = ""
        while True:
            for letter in string.ascii_uppercase:
                name = prefix + letter
                if self.is_valid_name(name) and not self.have(name):
                    return name
            prefix += string.ascii_uppercase[-1]

    def load(self, path: str | os.PathLike[str]) -> None:
        """Read the global constants saved in the settings file at ``path``."""
        parser = _new_parser()
        parser.read(path, encoding="utf-8")
        if not parser.has_section(_GROUP):
            return
        group = parser[_GROUP]
        index = 0
        while True:
            name = group.get(f"nameConstant{index}")
            expression = group.get(f"expressionConstant{index}")
            value = group.get(f"valueConstant{index}")
            index += 1

            if name is None:
                return
            if not name:
                continue
            if expression is None:
                expression = value if value is not None else " "

            if not self.is_valid_name(name) or self.have(name):
                name = self.generate_unique_name()

            self.add(name, Constant(Value(expression), ConstantScope.Global))

    def save(self, path: str | os.PathLike[str]) -> None:
        """Write the global constants to the settings file at ``path``, keeping other groups."""
        parser = _new_parser()
        if os.path.exists(path):
            parser.read(path, encoding="utf-8")
        parser.remove_section(_OLD_GROUP)
        parser.remove_section(_GROUP)
        parser.add_section(_GROUP)
        group = parser[_GROUP]
        for index, (name, constant) in enumerate(self.list(ConstantScope.Global).items()):
            group[f"nameConstant{index}"] = name
            group[f"expressionConstant{index}"] = constant.value.expression
            group[f"valueConstant{index}"] = repr(constant.value.value)
        with open(path, "w", encoding="utf-8") as handle:
            parser.write(handle, space_around_delimiters=False)