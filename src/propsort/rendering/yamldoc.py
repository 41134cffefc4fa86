#!/usr/bin/env python3
"""
PROPSORT YAML RECONSTRUCTOR
---------------------------
Block mappings and sequences are rendered positionally: entry blocks
are whole lines, so indentation, blank lines, quoting styles, anchors
and comments move with their entry untouched. YAML has one comment
form and no separators, so there is nothing to synthesize.

A flow collection at the root ('{b: 1, a: 2}') is rebuilt in sorted
order and dumped by ruamel.yaml in flow style.

Author: PropSort Team
Date: 2026-10-18
"""

import logging
from io import StringIO
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq

from propsort.core.errors import ReconstructionError
from propsort.core.models import ParsedEntity
from propsort.rendering.base import Reconstructor
from propsort.rendering.formatting import CommentSyntax, convert_line_endings, resolve_line_ending

logger = logging.getLogger("propsort.rendering.yaml")


def _key(name: str) -> Any:
    """Flow keys come back as text; integer keys are restored."""
    if name.lstrip("-").isdigit():
        return int(name)
    return name


class YAMLReconstructor(Reconstructor):
    syntax = CommentSyntax(line="#", block=False)
    default_separator = ""
    error_format = "# Error reconstructing {name}: {error}"

    @property
    def synthesize(self) -> bool:
        return False

    def reconstruct_entity(self, entity: ParsedEntity) -> str:
        if entity.inline:
            return self._flow(entity)
        return super().reconstruct_entity(entity)

    def _flow(self, entity: ParsedEntity) -> str:
        if entity.type == "yaml-object":
            data = CommentedMap()
            for prop in entity.properties:
                data[_key(prop.name)] = prop.value
        else:
            data = CommentedSeq([prop.value for prop in entity.properties])
        data.fa.set_flow_style()

        yaml = YAML(typ="rt")
        yaml.preserve_quotes = self.options.preserve_string_styles
        yaml.default_flow_style = True
        yaml.width = 4096
        stream = StringIO()
        try:
            yaml.dump(data, stream)
        except Exception as e:
            raise ReconstructionError(f"Unable to dump flow collection '{entity.name}': {e}") from e
        rendered = stream.getvalue().rstrip("\n")
        logger.debug(f"Flow collection '{entity.name}' re-dumped ({len(entity.properties)} entries)")
        if self.options.line_ending != "auto":
            rendered = convert_line_endings(rendered, resolve_line_ending(self.options, entity.original_text))
        return rendered
