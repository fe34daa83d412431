"""
Typed options with change notification.

Addons declare options while they load. Every change is announced through
`OptManager.changed`; a receiver that rejects the new values by raising
`OptionsError` causes the whole update to be rolled back.
"""
from __future__ import annotations

import contextlib
import copy
import textwrap
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Optional
from typing import TextIO

import ruamel.yaml

from navredirect import exceptions
from navredirect.utils import signals
from navredirect.utils import typecheck

_UNSET = object()

_TRUE = ("", "true")
_FALSE = ("false",)


class _Option:
    __slots__ = ("name", "typespec", "value", "_default", "choices", "help")

    def __init__(
        self,
        name: str,
        typespec: type | object,  # Optional[x] is not a type
        default: Any,
        help: str,
        choices: Sequence[str] | None,
    ) -> None:
        typecheck.check_option_type(name, default, typespec)
        self.name = name
        self.typespec = typespec
        self._default = default
        self.value: Any = _UNSET
        self.help = " ".join(textwrap.dedent(help).split())
        self.choices = choices

    def __repr__(self):
        return f"{self.current()!r} [{self.typespec}]"

    @property
    def default(self) -> Any:
        return copy.deepcopy(self._default)

    def current(self) -> Any:
        return self.default if self.value is _UNSET else copy.deepcopy(self.value)

    def set(self, value: Any) -> None:
        typecheck.check_option_type(self.name, value, self.typespec)
        if self.choices is not None and value not in self.choices:
            raise exceptions.OptionsError(
                f"Invalid value for {self.name}: {value!r}. "
                f"Valid values are {', '.join(self.choices)}."
            )
        self.value = value

    def has_changed(self) -> bool:
        return self.current() != self._default

    def __deepcopy__(self, memo):
        o = _Option(self.name, self.typespec, self._default, self.help, self.choices)
        if self.value is not _UNSET:
            o.value = copy.deepcopy(self.value, memo)
        return o


@dataclass
class _RawValues:
    """Values from `--set` for an option that does not exist yet."""

    values: list[str]


def _changed_receiver(updated: set[str]) -> None:  # pragma: no cover
    ...


def _errored_receiver(exc: Exception) -> None:  # pragma: no cover
    ...


class OptManager:
    """
    Base class for Options objects.

    Options read like attributes and always hand out copies. Assigning to an
    attribute is the same as calling `update` with a single option.
    """

    def __init__(self) -> None:
        self.deferred: dict[str, Any] = {}
        self.changed = signals.SyncSignal(_changed_receiver)
        self.errored = signals.SyncSignal(_errored_receiver)
        # Attribute assignment goes through update() once _options exists,
        # so it has to be set last.
        self._options: dict[str, _Option] = {}

    def add_option(
        self,
        name: str,
        typespec: type | object,
        default: Any,
        help: str,
        choices: Sequence[str] | None = None,
    ) -> None:
        self._options[name] = _Option(name, typespec, default, help, choices)
        self.changed.send(updated={name})

    @contextlib.contextmanager
    def rollback(self, updated, reraise=False):
        """
        Restore the previous option values if the block raises OptionsError.
        Receivers are notified of the restored values.
        """
        saved = copy.deepcopy(self._options)
        try:
            yield
        except exceptions.OptionsError as e:
            self.errored.send(exc=e)
            self.__dict__["_options"] = saved
            self.changed.send(updated=updated)
            if reraise:
                raise

    def __getattr__(self, attr):
        try:
            return self.__dict__["_options"][attr].current()
        except KeyError:
            raise AttributeError(f"No such option: {attr}") from None

    def __setattr__(self, attr, value):
        if "_options" not in self.__dict__:
            super().__setattr__(attr, value)
        else:
            self.update(**{attr: value})

    def __contains__(self, name):
        return name in self._options

    def keys(self) -> set[str]:
        return set(self._options)

    def has_changed(self, name: str) -> bool:
        """Does the option differ from its default?"""
        return self._options[name].has_changed()

    def update_known(self, **kwargs) -> dict[str, Any]:
        """
        Set all known options in one go and return the unknown ones.
        """
        known = {k: v for k, v in kwargs.items() if k in self._options}
        unknown = {k: v for k, v in kwargs.items() if k not in self._options}
        if known:
            updated = set(known)
            with self.rollback(updated, reraise=True):
                for name, value in known.items():
                    self._options[name].set(value)
                self.changed.send(updated=updated)
        return unknown

    def update_defer(self, **kwargs) -> None:
        """
        Like update, but unknown options are kept until an addon adds them.
        """
        self.deferred.update(self.update_known(**kwargs))

    def update(self, **kwargs) -> None:
        unknown = self.update_known(**kwargs)
        if unknown:
            raise KeyError(f"Unknown options: {', '.join(unknown)}")

    def set(self, *specs: str, defer: bool = False) -> None:
        """
        Apply `option=value` strings as given on the command line. A bare
        `option` sets booleans to true and optional values to None.

        Unknown options raise OptionsError, unless defer is set, in which
        case they are applied by `process_deferred` once they exist.
        """
        raw: dict[str, list[str]] = {}
        for spec in specs:
            name, sep, value = spec.partition("=")
            raw.setdefault(name, [])
            if sep:
                raw[name].append(value)

        parsed = {
            name: self._parse_setval(self._options[name], values)
            for name, values in raw.items()
            if name in self._options
        }
        unknown = {k: v for k, v in raw.items() if k not in parsed}
        if unknown and not defer:
            raise exceptions.OptionsError(f"Unknown option(s): {', '.join(unknown)}")
        for name, values in unknown.items():
            self.deferred[name] = _RawValues(values)

        self.update(**parsed)

    def process_deferred(self) -> None:
        """
        Apply deferred values for options that have been added since.
        """
        ready: dict[str, Any] = {}
        for name, value in self.deferred.items():
            if name not in self._options:
                continue
            if isinstance(value, _RawValues):
                value = self._parse_setval(self._options[name], value.values)
            ready[name] = value
        self.update(**ready)
        for name in ready:
            del self.deferred[name]

    def _parse_setval(self, o: _Option, values: list[str]) -> Any:
        if len(values) > 1:
            raise exceptions.OptionsError(
                f"Received multiple values for {o.name}: {values}"
            )
        text = values[0] if values else None

        if o.typespec == bool:
            if text == "toggle":
                return not o.current()
            if text is None or text in _TRUE:
                return True
            if text in _FALSE:
                return False
            raise exceptions.OptionsError(
                'Boolean must be "true", "false", "toggle" or have the value omitted.'
            )
        if o.typespec in (str, Optional[str]):
            if o.typespec == str and text is None:
                raise exceptions.OptionsError(f"Option is required: {o.name}")
            return text
        if o.typespec in (int, Optional[int]):
            if not text:
                if o.typespec == int:
                    raise exceptions.OptionsError(f"Option is required: {o.name}")
                return None
            try:
                return int(text)
            except ValueError:
                raise exceptions.OptionsError(f"Not an integer: {text}") from None
        raise NotImplementedError(f"Unsupported option type: {o.typespec}")

    def make_parser(self, parser, optname, metavar=None, short=None):
        """
        Add a command line flag for an option. Booleans get a --no- flag
        as well. Options that do not exist are skipped.
        """
        o = self._options.get(optname)
        if o is None:
            return

        flag = "--" + optname.replace("_", "-")
        negated = "--no-" + optname.replace("_", "-")

        if o.typespec == bool:
            on, off = [flag], [negated]
            # the short flag flips the default
            if short:
                (off if o.default else on).append("-" + short)
            group = parser.add_mutually_exclusive_group(required=False)
            group.add_argument(*off, action="store_false", dest=optname)
            group.add_argument(*on, action="store_true", dest=optname, help=o.help)
            parser.set_defaults(**{optname: None})
            return

        if o.typespec in (int, Optional[int]):
            kwargs: dict[str, Any] = {"type": int}
        elif o.typespec in (str, Optional[str]):
            kwargs = {"type": str, "choices": o.choices}
        else:
            raise ValueError(f"Unsupported option type: {o.typespec}")
        flags = [flag] + (["-" + short] if short else [])
        parser.add_argument(
            *flags, action="store", dest=optname, help=o.help, metavar=metavar, **kwargs
        )


def dump_defaults(opts: OptManager, out: TextIO):
    """
    Write all options with their defaults as YAML, each preceded by its
    help text.
    """
    data = ruamel.yaml.comments.CommentedMap()
    for name in sorted(opts.keys()):
        o = opts._options[name]
        data[name] = o.default
        if o.choices:
            extra = "Valid values are %s." % ", ".join(repr(c) for c in o.choices)
        else:
            extra = f"Type {typecheck.typespec_to_str(o.typespec)}."
        comment = "\n".join(textwrap.wrap(f"{o.help} {extra}"))
        data.yaml_set_comment_before_after_key(name, before="\n" + comment)
    return ruamel.yaml.YAML().dump(data, out)


def parse(text: str) -> dict:
    if not text:
        return {}
    try:
        data = ruamel.yaml.YAML(typ="safe", pure=True).load(text)
    except ruamel.yaml.error.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        if mark is None:
            raise exceptions.OptionsError("Could not parse options.")
        raise exceptions.OptionsError(
            f"Config error at line {mark.line + 1}:\n"
            f"{mark.get_snippet()}\n{getattr(e, 'problem', '')}"
        )
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise exceptions.OptionsError("Config error - no keys found.")
    return data


def load(opts: OptManager, text: str, cwd: Path | str | None = None) -> None:
    """
    Apply a YAML config. Options no addon has added yet are deferred.
    A relative rules_file is resolved against cwd, the directory of the
    config file.
    """
    data = parse(text)
    if cwd is not None and data.get("rules_file"):
        data["rules_file"] = str(relative_path(data["rules_file"], relative_to=cwd))
    opts.update_defer(**data)


def load_paths(opts: OptManager, *paths: Path | str) -> None:
    """
    Load config files in order, later files overriding earlier ones.
    Missing files are skipped.
    """
    for p in paths:
        p = Path(p).expanduser()
        if not p.is_file():
            continue
        try:
            load(opts, p.read_text(encoding="utf8"), cwd=p.absolute().parent)
        except (UnicodeDecodeError, exceptions.OptionsError) as e:
            raise exceptions.OptionsError(f"Error reading {p}: {e}") from e


def relative_path(path: Path | str, *, relative_to: Path | str) -> Path:
    """
    Resolve a path from a config file against the config file's directory.
    Absolute and home-relative paths are returned as they are (expanded).
    """
    path = Path(path).expanduser()
    return (Path(relative_to) / path).absolute()
