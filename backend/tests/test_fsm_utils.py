import pytest
from repair_tracker.utils.fsm import TransitionValidator
from repair_tracker.errors import ValidationError
from repair_tracker.constants.statuses import ALL_STATUSES, REPAIR_JOB_TRANSITIONS


def test_allowed_transition():
    fsm = TransitionValidator(REPAIR_JOB_TRANSITIONS)
    assert fsm.assert_can_transition('REPAIRING', 'QUALITY_CHECK') is True
    assert 'COMPLETED' in fsm.allowed_from('READY_FOR_PICKUP')


def test_disallowed_transition_names_both_states():
    fsm = TransitionValidator(REPAIR_JOB_TRANSITIONS)
    with pytest.raises(ValidationError) as exc:
        fsm.assert_can_transition('NEW_QUEUE', 'COMPLETED')
    assert 'NEW_QUEUE -> COMPLETED' in exc.value.errors[0]['message']
    assert fsm.allowed_from('COMPLETED') == set()


def test_transition_table_only_mentions_known_statuses():
    assert set(REPAIR_JOB_TRANSITIONS) == set(ALL_STATUSES)
    for targets in REPAIR_JOB_TRANSITIONS.values():
        assert targets <= set(ALL_STATUSES)


def test_openapi_exposes_statuses_and_transitions(client):
    spec = client.get('/openapi.json').get_json()
    job = spec['components']['schemas']['RepairJob']
    assert job['x-statuses'] == list(ALL_STATUSES)
    assert job['x-transitions']['REPAIRING'] == sorted(REPAIR_JOB_TRANSITIONS['REPAIRING'])
    assert '/api/jobs/{job_id}' in spec['paths']
