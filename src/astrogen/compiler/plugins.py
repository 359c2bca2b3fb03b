"""Pre/post hooks around the IR and the generated text."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from astrogen.compiler.ast_nodes import Component

logger = logging.getLogger(__name__)

JsonHook = Callable[[Component], Component]
CodeHook = Callable[[Component, str], str]


@dataclass
class Plugin:
    """A bundle of optional hooks; any of them may be left as None."""

    name: str = "plugin"
    pre_json: Optional[JsonHook] = None
    post_json: Optional[JsonHook] = None
    pre_code: Optional[CodeHook] = None
    post_code: Optional[CodeHook] = None


def _run_json_hooks(component: Component, plugins: Sequence[Plugin], stage: str) -> Component:
    for plugin in plugins:
        hook: Optional[JsonHook] = getattr(plugin, stage)
        if hook is None:
            continue
        logger.debug("Running %s hook of plugin %r", stage, plugin.name)
        component = hook(component)
    return component


def _run_code_hooks(component: Component, code: str, plugins: Sequence[Plugin], stage: str) -> str:
    for plugin in plugins:
        hook: Optional[CodeHook] = getattr(plugin, stage)
        if hook is None:
            continue
        logger.debug("Running %s hook of plugin %r", stage, plugin.name)
        code = hook(component, code)
    return code


def run_pre_json_plugins(component: Component, plugins: Sequence[Plugin]) -> Component:
    return _run_json_hooks(component, plugins, "pre_json")


def run_post_json_plugins(component: Component, plugins: Sequence[Plugin]) -> Component:
    return _run_json_hooks(component, plugins, "post_json")


def run_pre_code_plugins(component: Component, code: str, plugins: Sequence[Plugin]) -> str:
    return _run_code_hooks(component, code, plugins, "pre_code")


def run_post_code_plugins(component: Component, code: str, plugins: Sequence[Plugin]) -> str:
    return _run_code_hooks(component, code, plugins, "post_code")
