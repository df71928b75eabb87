from repair_tracker import get_db
from repair_tracker.services.store import MemoryJobStore, SqlJobStore
from tests.test_lifecycle_helpers import (
    VALID_JOB, staff_headers, create_job_and_assert, assert_status_update, exercise_repair_job_lifecycle,
)


def test_create_job_returns_envelope(client, clean_jobs):
    body = create_job_and_assert(client)
    assert body['message'] == 'Repair job created'
    data = body['data']
    assert data['queueNumber'] == 1
    assert data['customerName'] == 'Somchai'
    assert len(data['jobId']) == 10

    second = create_job_and_assert(client)
    assert second['data']['queueNumber'] == 2


def test_create_job_validation_errors(client, clean_jobs):
    resp = client.post('/api/jobs', json={'customerName': '', 'customerPhone': '12345'})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body['success'] is False
    fields = {e['field'] for e in body['errors']}
    assert {'customerName', 'customerPhone', 'deviceModel', 'problemDescription', 'dropAppId'} <= fields


def test_create_job_rejects_bad_email_and_priority(client, clean_jobs):
    resp = client.post('/api/jobs', json={**VALID_JOB, 'customerEmail': 'not-an-email', 'priority': 'ASAP'})
    assert resp.status_code == 400
    assert {e['field'] for e in resp.get_json()['errors']} == {'customerEmail', 'priority'}


def test_create_job_accepts_international_phone(client, clean_jobs):
    create_job_and_assert(client, {**VALID_JOB, 'customerPhone': '+66 81-234-5678'})


def test_staff_can_read_full_job(client, clean_jobs):
    headers = staff_headers()
    job_id = create_job_and_assert(client)['data']['jobId']
    resp = client.get(f'/api/jobs/{job_id}', headers=headers)
    assert resp.status_code == 200
    job = resp.get_json()['data']
    assert job['customerPhone'] == '0812345678'
    assert job['status'] == 'NEW_QUEUE'
    assert job['history'][0]['updatedBy'] == 'system'
    assert job['history'][0]['note'] == 'Job created'
    assert job['completedAt'] is None
    assert 'customerEmail' in job


def test_anonymous_read_gets_public_view(client, clean_jobs):
    job_id = create_job_and_assert(client, {**VALID_JOB, 'customerEmail': 'somchai@example.com'})['data']['jobId']
    job = client.get(f'/api/jobs/{job_id}').get_json()['data']
    assert job['customerPhone'] == '******5678'
    assert 'customerEmail' not in job
    assert 'updatedBy' not in job['history'][0]


def test_get_unknown_job_is_404(client, clean_jobs):
    resp = client.get('/api/jobs/nonexistent')
    assert resp.status_code == 404
    assert resp.get_json() == {'success': False, 'message': 'Job not found'}


def test_full_lifecycle_records_history(client, clean_jobs):
    headers = staff_headers('tech@example.com', role='ASP')
    job_id = exercise_repair_job_lifecycle(client, headers)
    job = client.get(f'/api/jobs/{job_id}', headers=headers).get_json()['data']
    assert job['status'] == 'COMPLETED'
    assert job['completedAt'] is not None
    assert len(job['history']) == 11
    assert job['history'][-1]['updatedBy'] == 'tech'
    assert job['history'][-1]['note'] == 'Status changed from READY_FOR_PICKUP to COMPLETED'


def test_update_requires_staff(client, clean_jobs):
    job_id = create_job_and_assert(client)['data']['jobId']
    resp = client.put(f'/api/jobs/{job_id}', json={'status': 'RECEIVED_AT_DROP'})
    assert resp.status_code == 401
    customer = staff_headers('walkin@example.com', role='CUSTOMER')
    assert client.put(f'/api/jobs/{job_id}', json={'status': 'RECEIVED_AT_DROP'}, headers=customer).status_code == 403


def test_update_validation_and_not_found(client, clean_jobs):
    headers = staff_headers()
    job_id = create_job_and_assert(client)['data']['jobId']
    assert_status_update(client, job_id, 'LOST', headers, expected_http=400)
    resp = client.put(f'/api/jobs/{job_id}', json={'status': 'REPAIRING', 'estimatedCost': 'abc'}, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'estimatedCost'
    assert_status_update(client, 'nonexistent', 'COMPLETED', headers, expected_http=404)


def test_update_applies_costs_and_note(client, clean_jobs):
    headers = staff_headers()
    job_id = create_job_and_assert(client)['data']['jobId']
    body = assert_status_update(client, job_id, 'EVALUATING', headers, note='Checking board', estimatedCost=2500)
    assert body['data']['oldStatus'] == 'NEW_QUEUE'
    assert body['data']['updatedAt'].endswith('Z')
    job = client.get(f'/api/jobs/{job_id}', headers=headers).get_json()['data']
    assert job['estimatedCost'] == 2500
    assert job['history'][-1]['note'] == 'Checking board'
    assert job['history'][-1]['location'] == 'API'


def test_transition_table_enforced_when_enabled(client, clean_jobs, app_instance, monkeypatch):
    monkeypatch.setitem(app_instance.config, 'ENFORCE_STATUS_TRANSITIONS', True)
    headers = staff_headers()
    job_id = create_job_and_assert(client)['data']['jobId']
    assert_status_update(client, job_id, 'COMPLETED', headers, expected_http=400)
    assert_status_update(client, job_id, 'RECEIVED_AT_DROP', headers)


def test_list_jobs_filters_and_paginates(client, clean_jobs):
    headers = staff_headers()
    ids = [create_job_and_assert(client, {**VALID_JOB, 'customerName': name})['data']['jobId']
           for name in ('Anong', 'Boonmee', 'Chai')]
    assert_status_update(client, ids[0], 'COMPLETED', headers)

    resp = client.get('/api/jobs?status=COMPLETED', headers=headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert [j['jobId'] for j in body['data']] == [ids[0]]
    assert body['pagination'] == {'page': 1, 'limit': 20, 'total': 1, 'totalPages': 1}

    everything = client.get('/api/jobs?status=all&limit=2', headers=headers).get_json()
    assert everything['pagination']['total'] == 3
    assert everything['pagination']['totalPages'] == 2
    assert len(everything['data']) == 2

    found = client.get('/api/jobs?search=boon', headers=headers).get_json()
    assert [j['customerName'] for j in found['data']] == ['Boonmee']


def test_list_jobs_rejects_bad_query(client, clean_jobs):
    headers = staff_headers()
    assert client.get('/api/jobs?status=LOST', headers=headers).status_code == 400
    assert client.get('/api/jobs?limit=abc', headers=headers).status_code == 400
    assert client.get('/api/jobs').status_code == 401


def test_stats_summary_and_queue(client, clean_jobs):
    headers = staff_headers()
    ids = [create_job_and_assert(client)['data']['jobId'] for _ in range(3)]
    assert_status_update(client, ids[0], 'REPAIRING', headers)
    assert_status_update(client, ids[1], 'COMPLETED', headers)

    stats = client.get('/api/jobs/stats/summary').get_json()['data']
    assert stats['total'] == 3
    assert stats['completed'] == 1
    assert stats['pending'] == 1
    assert stats['inProgress'] == 1
    assert stats['completionRate'] == 33
    assert stats['currentQueue'] == 3
    assert stats['todayJobs'] == 3

    queue = client.get('/api/jobs/queue/current').get_json()['data']
    assert [e['jobId'] for e in queue['queueList']] == [ids[2]]
    assert queue['queueList'][0]['position'] == 1
    assert queue['averageWaitTime'] == 30
    assert queue['totalToday'] == 3


def test_analytics_endpoints(client, clean_jobs):
    headers = staff_headers()
    create_job_and_assert(client, {**VALID_JOB, 'priority': 'URGENT'})
    assert client.get('/api/jobs/analytics/overview').status_code == 401
    overview = client.get('/api/jobs/analytics/overview', headers=headers).get_json()['data']
    assert overview['performance']['totalJobs'] == 1
    assert overview['performance']['priorityBreakdown']['URGENT'] == 1
    daily = client.get('/api/jobs/analytics/daily?days=3', headers=headers).get_json()['data']
    assert len(daily) == 3
    assert daily[-1]['created'] == 1
    assert client.get('/api/jobs/analytics/daily?days=90', headers=headers).status_code == 400


def test_memory_store_backs_the_same_api(client, app_instance, monkeypatch):
    monkeypatch.setitem(app_instance.extensions, 'job_store', MemoryJobStore())
    job_id = create_job_and_assert(client)['data']['jobId']
    assert client.get(f'/api/jobs/{job_id}').status_code == 200
    assert isinstance(app_instance.extensions['job_store'], MemoryJobStore)
    assert SqlJobStore(get_db).get(job_id) is None
