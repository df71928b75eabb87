from tests.test_lifecycle_helpers import staff_headers, create_job_and_assert


def test_list_if_none_match_returns_304(client, clean_jobs):
    headers = staff_headers()
    create_job_and_assert(client)
    first = client.get('/api/jobs', headers=headers)
    assert first.status_code == 200
    etag = first.headers['ETag']
    assert first.headers.get('Last-Modified')
    again = client.get('/api/jobs', headers={**headers, 'If-None-Match': etag})
    assert again.status_code == 304
    assert again.headers['ETag'] == etag


def test_list_etag_changes_after_new_job(client, clean_jobs):
    headers = staff_headers()
    create_job_and_assert(client)
    etag = client.get('/api/jobs', headers=headers).headers['ETag']
    create_job_and_assert(client)
    assert client.get('/api/jobs', headers={**headers, 'If-None-Match': etag}).status_code == 200


def test_detail_if_modified_since(client, clean_jobs):
    job_id = create_job_and_assert(client)['data']['jobId']
    first = client.get(f'/api/jobs/{job_id}')
    last_modified = first.headers['X-Last-Modified-ISO']
    resp = client.get(f'/api/jobs/{job_id}', headers={'If-Modified-Since': last_modified})
    assert resp.status_code == 304


def test_public_and_staff_views_have_distinct_etags(client, clean_jobs):
    job_id = create_job_and_assert(client)['data']['jobId']
    public = client.get(f'/api/jobs/{job_id}').headers['ETag']
    staff = client.get(f'/api/jobs/{job_id}', headers=staff_headers()).headers['ETag']
    assert public != staff
