import pytest

from colaseq.layout import InstanceLayout, LayoutGroup, LayoutNode
from colaseq.validate import ValidationError, validate_layout


def test_validate_accepts_valid_layout():
    layout = InstanceLayout(
        nodes=[LayoutNode('A'), LayoutNode('B')],
        groups=[LayoutGroup('g', ['A'])],
    )

    validate_layout(layout)


@pytest.mark.parametrize(
    'layout, message_part',
    [
        (InstanceLayout(nodes=[LayoutNode('A'), LayoutNode('A')]), 'node ids must be unique'),
        (
            InstanceLayout(
                nodes=[LayoutNode('A')],
                groups=[LayoutGroup('g', ['A']), LayoutGroup('g', ['A'])],
            ),
            'group names must be unique',
        ),
        (InstanceLayout(nodes=[LayoutNode('A', width=-1)]), 'negative width'),
        (InstanceLayout(nodes=[LayoutNode('A', height=-5)]), 'negative height'),
    ],
)
def test_validate_rejects_broken_layouts(layout, message_part):
    with pytest.raises(ValidationError) as exc:
        validate_layout(layout)

    assert message_part in str(exc.value)
