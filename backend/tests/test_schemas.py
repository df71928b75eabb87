import pytest
from repair_tracker.errors import ValidationError
from repair_tracker.schemas import JobCreateInput, StatusUpdateInput, JobFilters
from repair_tracker.config.pagination import normalize_pagination
from tests.test_lifecycle_helpers import VALID_JOB


def test_create_input_defaults():
    data = JobCreateInput.from_payload(VALID_JOB)
    assert data.priority == 'NORMAL'
    assert data.problem_category == 'OTHER'
    assert data.source == 'ONLINE'
    assert data.customer_email is None


@pytest.mark.parametrize('phone', ['0812345678', '66812345678', '+66812345678', '081-234-5678'])
def test_thai_mobile_formats_accepted(phone):
    data = JobCreateInput.from_payload({**VALID_JOB, 'customerPhone': phone})
    assert ' ' not in data.customer_phone and '-' not in data.customer_phone


@pytest.mark.parametrize('phone', ['12345', '081234567', '+1 555 123 4567', 'phone'])
def test_bad_phone_rejected(phone):
    with pytest.raises(ValidationError) as exc:
        JobCreateInput.from_payload({**VALID_JOB, 'customerPhone': phone})
    assert exc.value.fields == ['customerPhone']


def test_missing_drop_app_rejected():
    payload = {k: v for k, v in VALID_JOB.items() if k != 'dropAppId'}
    with pytest.raises(ValidationError) as exc:
        JobCreateInput.from_payload(payload)
    assert exc.value.fields == ['dropAppId']


def test_status_update_parsing():
    data = StatusUpdateInput.from_payload({'status': 'REPAIRING', 'actualCost': '350.5', 'location': 'ASP'})
    assert data.actual_cost == 350.5
    assert data.location == 'ASP'
    assert data.estimated_cost is None
    with pytest.raises(ValidationError):
        StatusUpdateInput.from_payload({'status': 'REPAIRING', 'actualCost': -1})
    with pytest.raises(ValidationError):
        StatusUpdateInput.from_payload(None)


def test_filters_from_query_args():
    filters = JobFilters.from_args({'status': 'all', 'branchId': 'drop_app_002', 'search': '  iphone ', 'page': '2'})
    assert filters.status is None
    assert filters.store_filters() == {'drop_app_id': 'drop_app_002'}
    assert filters.search == 'iphone'
    assert (filters.page, filters.limit) == (2, 20)


def test_pagination_bounds():
    assert normalize_pagination(None, None) == (1, 20)
    assert normalize_pagination('0', '500') == (1, 100)
    with pytest.raises(ValueError):
        normalize_pagination('x', None)
