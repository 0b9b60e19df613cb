# texpipe/schemas.py

from typing import Annotated, Literal, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


# ==============================================================================
# SECTION 1: MATH AST NODES
# ==============================================================================
class BaseNode(BaseModel):
    """Nodes are immutable once the parser has built them."""
    model_config = ConfigDict(frozen=True, extra='forbid')


class RootNode(BaseNode): type: Literal['root'] = 'root'; children: Tuple['MathNode', ...] = ()
class GroupNode(BaseNode): type: Literal['group'] = 'group'; children: Tuple['MathNode', ...] = ()
class TextNode(BaseNode): type: Literal['text'] = 'text'; value: str
class SymbolNode(BaseNode): type: Literal['symbol'] = 'symbol'; value: str
class OperatorNode(BaseNode): type: Literal['operator'] = 'operator'; value: str


class FractionNode(BaseNode):
    type: Literal['fraction'] = 'fraction'
    numerator: 'MathNode'
    denominator: 'MathNode'


class SubscriptNode(BaseNode):
    type: Literal['subscript'] = 'subscript'
    base: 'MathNode'
    sub: 'MathNode'


class SuperscriptNode(BaseNode):
    type: Literal['superscript'] = 'superscript'
    base: 'MathNode'
    sup: 'MathNode'


MathNode = Annotated[
    Union[RootNode, GroupNode, TextNode, SymbolNode, OperatorNode, FractionNode, SubscriptNode, SuperscriptNode],
    Field(discriminator='type')
]

for _model in (RootNode, GroupNode, FractionNode, SubscriptNode, SuperscriptNode):
    _model.model_rebuild()

# Validates a dumped AST (e.g. JSON sent back by a client) into node instances.
MathNodeAdapter = TypeAdapter(MathNode)
