"""
Graphviz DOT export of a hypotheses graph.
"""

from pathlib import Path
from typing import Optional, Sequence, Union

from hypotheses import HypothesesGraph, VariableKind
from optimization.model_builder import AssembledModel

ACTIVE_COLOR = 'blue'
INACTIVE_COLOR = 'gray'


def _node_attributes(hyp, model, solution) -> str:
    label = str(hyp.id)
    if solution is None:
        return f'label="{label}"'

    active = model.is_active(solution, VariableKind.DETECTION, hyp.id)
    flags = [
        name for kind, name in (
            (VariableKind.DIVISION, 'div'),
            (VariableKind.APPEARANCE, 'app'),
            (VariableKind.DISAPPEARANCE, 'dis'),
        )
        if model.is_active(solution, kind, hyp.id)
    ]
    if flags:
        label += '\\n' + ','.join(flags)
    color = ACTIVE_COLOR if active else INACTIVE_COLOR
    style = ', penwidth=2' if active else ''
    return f'label="{label}", color={color}{style}'


def to_dot(
    graph: HypothesesGraph,
    model: Optional[AssembledModel] = None,
    solution: Optional[Sequence[int]] = None
) -> str:
    """
    Describe the graph as a DOT digraph.

    One node per segmentation hypothesis, one edge per linking hypothesis,
    and dashed undirected edges between members of each exclusion set.
    Nodes and edges are colored by activation when a solution is given.

    Args:
        graph: Hypotheses graph.
        model: Assembled model; required together with solution.
        solution: Optional labeling indexed by variable id.

    Returns:
        DOT source text.
    """
    if solution is not None:
        if model is None:
            raise ValueError("A model is needed to interpret the solution")
        solution = model.check_solution(solution)

    lines = ['digraph G {']

    for hyp in graph.sorted_segmentations():
        lines.append(f'    "{hyp.id}" [{_node_attributes(hyp, model, solution)}];')

    for link in graph.sorted_links():
        if solution is None:
            attributes = ''
        elif model.is_active(solution, VariableKind.LINK, link.key):
            attributes = f' [color={ACTIVE_COLOR}, penwidth=2]'
        else:
            attributes = f' [color={INACTIVE_COLOR}]'
        lines.append(f'    "{link.src_id}" -> "{link.dest_id}"{attributes};')

    for exclusion in graph.exclusions:
        members = exclusion.to_list()
        for i, a in enumerate(members):
            for b in members[i + 1:]:
                lines.append(f'    "{a}" -> "{b}" [dir=none, style=dashed, color=red];')

    lines.append('}')
    return '\n'.join(lines) + '\n'


def save_dot(
    path: Union[str, Path],
    graph: HypothesesGraph,
    model: Optional[AssembledModel] = None,
    solution: Optional[Sequence[int]] = None
):
    """Write to_dot(graph, model, solution) to a file."""
    with open(path, 'w') as f:
        f.write(to_dot(graph, model, solution))
