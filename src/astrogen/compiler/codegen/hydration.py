"""Decides whether a component needs client-side hydration."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from astrogen.compiler.ast_nodes import Component, Node
from astrogen.compiler.helpers import get_refs

logger = logging.getLogger(__name__)

# Events that only work once the component is hydrated
HYDRATION_EVENTS = frozenset(
    {
        "onClick",
        "onChange",
        "onInput",
        "onSubmit",
        "onFocus",
        "onBlur",
        "onMouseOver",
        "onMouseOut",
        "onKeyDown",
        "onKeyUp",
        "onScroll",
    }
)

EAGER_DIRECTIVE = "client:load"
IDLE_DIRECTIVE = "client:idle"


@dataclass
class EventHit:
    event: str
    node_name: str


@dataclass
class HydrationAnalysis:
    needs_hydration: bool = False
    reasons: List[str] = field(default_factory=list)
    suggested_directive: str = EAGER_DIRECTIVE
    ref_count: int = 0
    event_hits: List[EventHit] = field(default_factory=list)


def _find_event_hits(nodes: Iterable[Node], hits: List[EventHit]) -> None:
    for node in nodes:
        event = next((key for key in node.bindings if key in HYDRATION_EVENTS), None)
        if event is not None:
            hits.append(EventHit(event=event, node_name=node.name))
            continue
        _find_event_hits(node.children, hits)
        else_branch = node.else_branch
        if else_branch is not None:
            _find_event_hits([else_branch], hits)


def analyze_hydration(component: Component) -> HydrationAnalysis:
    """
    Work out whether `component` needs a client directive and which one.

    Refs, onMount hooks, declared onUpdate hooks and interactive event
    handlers each add a reason. Event-only components are hydrated when idle;
    refs keep the eager `client:load`, and onMount hooks always force it.
    """
    analysis = HydrationAnalysis()

    refs = get_refs(component)
    analysis.ref_count = len(refs)
    if refs:
        analysis.needs_hydration = True
        analysis.reasons.append(f"uses {len(refs)} ref(s)")

    on_mount = component.hooks.on_mount
    if len(on_mount) > 0:
        analysis.needs_hydration = True
        analysis.reasons.append(f"has {len(on_mount)} onMount hook(s)")

    if component.hooks.on_update is not None:
        analysis.needs_hydration = True
        analysis.reasons.append("has onUpdate hooks")

    _find_event_hits(component.children, analysis.event_hits)
    for hit in analysis.event_hits:
        analysis.needs_hydration = True
        analysis.reasons.append(f"handles {hit.event} on <{hit.node_name}>")

    directive = EAGER_DIRECTIVE
    if analysis.event_hits and not refs:
        directive = IDLE_DIRECTIVE
    if on_mount:
        directive = EAGER_DIRECTIVE
    analysis.suggested_directive = directive

    logger.debug(
        "Hydration for %s: needed=%s directive=%s reasons=%s",
        component.name,
        analysis.needs_hydration,
        directive,
        analysis.reasons,
    )
    return analysis
