"""Context-sensitive rewriting of binding expressions."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from astrogen.compiler.exceptions import ExpressionSyntaxError
from astrogen.compiler.helpers import kebab_case
from astrogen.compiler.jsexpr import transform_object_keys
from astrogen.compiler.preprocessor import rewrite_references

logger = logging.getLogger(__name__)

# Frontmatter (setup section) vs template markup
SETUP = "setup"
MARKUP = "markup"


class RewriteStatus(Enum):
    REWRITTEN = "rewritten"
    UNCHANGED = "unchanged"
    RECOVERED = "recovered"


@dataclass(frozen=True)
class BindingResult:
    code: str
    status: RewriteStatus
    diagnostic: Optional[str] = None

    @property
    def recovered(self) -> bool:
        return self.status is RewriteStatus.RECOVERED


def rewrite_binding(code: Optional[str], context: str = MARKUP) -> BindingResult:
    """
    Rewrite one expression for the frontmatter or the template.

    - `state.x` always becomes `x`.
    - `props.x` becomes `x` in markup and stays `props.x` in setup.
    - In markup, an expression that is an object literal gets its identifier
      keys hyphenated (`{fontSize: 12}` -> `{"font-size": 12}`).

    Never raises: if an object literal cannot be parsed its keys are left as
    written, the reference-rewritten text comes back with status RECOVERED
    and a diagnostic.
    """
    if code is None:
        logger.warning("Binding has no code; emitting an empty expression")
        return BindingResult("", RewriteStatus.RECOVERED, "missing expression")

    processed = rewrite_references(code, qualify_props=context == SETUP)
    if context == MARKUP and processed.lstrip().startswith("{"):
        try:
            hyphenated = transform_object_keys(processed, kebab_case)
        except ExpressionSyntaxError as e:
            logger.warning("Could not hyphenate keys of binding %r: %s", code, e)
            return BindingResult(processed, RewriteStatus.RECOVERED, str(e))
        if hyphenated is not None:
            processed = hyphenated

    if processed == code:
        return BindingResult(code, RewriteStatus.UNCHANGED)
    return BindingResult(processed, RewriteStatus.REWRITTEN)


def process_binding(code: Optional[str], context: str = MARKUP) -> str:
    return rewrite_binding(code, context).code
