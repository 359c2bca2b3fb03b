"""Compile options and their defaults."""

import dataclasses
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, List, Mapping, Optional, Union

from astrogen.compiler.exceptions import InvalidOptionError

if TYPE_CHECKING:
    from astrogen.compiler.plugins import Plugin

CLIENT_DIRECTIVES = (
    "client:load",
    "client:idle",
    "client:visible",
    "client:media",
    "none",
)
DEFAULT_CLIENT_DIRECTIVE = "client:load"
OUTPUT_FORMATS = ("astro", "typescript")

# Accept the option names used by the JavaScript tooling as aliases
_ALIASES = {
    "clientDirective": "client_directive",
    "outputFormat": "output_format",
    "explicitImportFileExtension": "explicit_import_file_extension",
}


@dataclass
class CompileOptions:
    """Options for one compilation.

    `client_directive=None` lets the hydration analysis pick the strategy.
    """

    client_directive: Optional[str] = None
    typescript: bool = True
    output_format: str = "astro"
    prettier: bool = True
    plugins: List["Plugin"] = field(default_factory=list)
    explicit_import_file_extension: bool = False
    formatter: Optional[Callable[[str], str]] = None

    def validate(self) -> None:
        if self.client_directive is not None and self.client_directive not in CLIENT_DIRECTIVES:
            raise InvalidOptionError(
                f"Unknown client directive {self.client_directive!r}; "
                f"expected one of {', '.join(CLIENT_DIRECTIVES)}"
            )
        if self.output_format not in OUTPUT_FORMATS:
            raise InvalidOptionError(
                f"Unknown output format {self.output_format!r}; "
                f"expected one of {', '.join(OUTPUT_FORMATS)}"
            )


def initialize_options(
    user_options: Union[None, CompileOptions, Mapping[str, Any]] = None,
) -> CompileOptions:
    """Merge caller options over the defaults into a fresh `CompileOptions`."""
    if user_options is None:
        options = CompileOptions()
    elif isinstance(user_options, CompileOptions):
        options = dataclasses.replace(user_options, plugins=list(user_options.plugins))
    else:
        known = {f.name for f in dataclasses.fields(CompileOptions)}
        values = {}
        for key, value in user_options.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise InvalidOptionError(f"Unknown compile option {key!r}")
            values[name] = value
        if values.get("plugins") is None:
            values.pop("plugins", None)
        else:
            values["plugins"] = list(values["plugins"])
        options = CompileOptions(**values)

    options.validate()
    return options
