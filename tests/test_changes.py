from colaseq.layout import Instance
from colaseq.sequence import analyze_node_changes, build_fingerprints, removed_neighbor_loss


def test_fingerprints_cover_every_tuple_participant():
    inst = Instance.build(['A', 'B', 'C'], {'next': [('A', 'B')], 'owns': [('C', 'A')]})

    fingerprints = build_fingerprints(inst)

    assert fingerprints['A'] == {'next:A->B', 'owns:C->A'}
    assert fingerprints['B'] == {'next:A->B'}
    assert fingerprints['C'] == {'owns:C->A'}


def test_identical_snapshots_are_all_stable():
    inst = Instance.build(['A', 'B'], {'next': [('A', 'B')]})

    analysis = analyze_node_changes(inst, inst)

    assert analysis.changed_ids == set()
    assert analysis.status('A') == 'stable'
    assert analysis.intensity('A') == 0


def test_classification_of_new_removed_changed_and_stable():
    prev = Instance.build(['A', 'B', 'C', 'D'], {'next': [('A', 'B'), ('C', 'D')]})
    curr = Instance.build(['A', 'B', 'C', 'E'], {'next': [('A', 'B'), ('C', 'E')]})

    analysis = analyze_node_changes(prev, curr)

    assert analysis.status('A') == 'stable'
    assert analysis.status('B') == 'stable'
    assert analysis.status('C') == 'changed'
    assert analysis.status('D') == 'removed'
    assert analysis.status('E') == 'new'
    assert analysis.changed_ids == {'C', 'D', 'E'}


def test_changed_intensity_adds_removed_neighbor_loss():
    prev = Instance.build(['A', 'B', 'C'], {'next': [('A', 'B'), ('A', 'C')]})
    curr = Instance.build(['A', 'B'], {'next': [('A', 'B')]})

    analysis = analyze_node_changes(prev, curr)

    # symmetric difference {next:A->C} plus one tuple that lost C
    assert analysis.intensity('A') == 2
    assert analysis.signature('A').endswith('removed_loss:1')
    assert removed_neighbor_loss(prev, curr) == {'A': 1}


def test_changed_intensity_is_at_least_symmetric_difference():
    prev = Instance.build(['A', 'B', 'C'], {'r': [('A', 'B')]})
    curr = Instance.build(['A', 'B', 'C'], {'r': [('A', 'C')], 's': [('A', 'B')]})

    analysis = analyze_node_changes(prev, curr)

    assert analysis.intensity('A') == 3
    assert analysis.status('B') == 'changed'
    assert analysis.intensity('B') == 2


def test_new_and_removed_intensity_is_fingerprint_size():
    prev = Instance.build(['A', 'Gone'], {'r': [('A', 'Gone'), ('Gone', 'Gone')]})
    curr = Instance.build(['A', 'Fresh'], {})

    analysis = analyze_node_changes(prev, curr)

    assert analysis.intensity('Gone') == 2
    assert analysis.intensity('Fresh') == 1


def test_signature_is_deterministic():
    prev = Instance.build(['A', 'B'], {'r': [('A', 'B')]})
    curr = Instance.build(['A', 'B'], {'r': [('B', 'A')]})

    first = analyze_node_changes(prev, curr)
    second = analyze_node_changes(prev, curr)

    assert first.signature('A') == second.signature('A')
    assert first.signature('A').startswith('diff|r:A->B|r:B->A')
