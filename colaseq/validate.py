from typing import Iterable, Set

from .layout import InstanceLayout


class ValidationError(Exception):
    pass


def _duplicates(values: Iterable[str]) -> Set[str]:
    seen: Set[str] = set()
    dups: Set[str] = set()
    for value in values:
        if value in seen:
            dups.add(value)
        seen.add(value)
    return dups


def validate_layout(layout: InstanceLayout) -> None:
    dup_nodes = _duplicates(node.id for node in layout.nodes)
    if dup_nodes:
        raise ValidationError(f'node ids must be unique (duplicated: {", ".join(sorted(dup_nodes))})')

    dup_groups = _duplicates(group.name for group in layout.groups)
    if dup_groups:
        raise ValidationError(f'group names must be unique (duplicated: {", ".join(sorted(dup_groups))})')

    node_ids = set(layout.node_ids)
    for edge in layout.edges:
        for end in (edge.source, edge.target):
            if end not in node_ids:
                raise ValidationError(f'edge "{edge.id}" references unknown node "{end}"')

    for node in layout.nodes:
        if node.width is not None and node.width < 0:
            raise ValidationError(f'node "{node.id}" has negative width')
        if node.height is not None and node.height < 0:
            raise ValidationError(f'node "{node.id}" has negative height')
