import json

import httpx
import pytest

from resendex import (
    BatchValidation,
    ClientConfig,
    ConsumedIdentifierError,
    CreateEmailOptions,
    DomainId,
    EmailId,
    Idempotent,
    ListOptions,
    Resend,
    with_idempotency_key,
)
from resendex.contacts import CreateContactOptions
from resendex.emails import Email, UpdateEmailOptions


@pytest.fixture
def email(email_payload):
    return CreateEmailOptions(**email_payload)


class TestConstruction:
    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            Resend()

    def test_rejects_invalid_options(self):
        with pytest.raises(ValueError):
            Resend('re_123', rate_limit=0)

    def test_defaults(self):
        client = Resend('re_123')
        assert client.blocking is False
        assert client.config.base_url == 'https://api.resend.com'
        assert client.limiter.max_requests == 9
        assert client.limiter.time_window == 1.1

    def test_repr_hides_api_key(self):
        client = Resend('re_secret_value', blocking=True)
        assert 're_secret_value' not in repr(client)
        assert 're_secret_value' not in repr(client.config)
        client.close()

    def test_config_with_overrides(self):
        config = ClientConfig(api_key='re_123', rate_limit=3)
        client = Resend('re_456', config=config, blocking=True, timeout=5.0)
        assert client.config.bearer_token == 're_456'
        assert client.config.rate_limit == 3
        assert client.config.timeout == 5.0
        client.close()

    def test_with_options_builds_independent_client(self, make_client):
        client = make_client(blocking=True)
        other = client.with_options(rate_limit=2)

        assert other.config.rate_limit == 2
        assert other.blocking is True
        assert other.limiter is not client.limiter
        client.close()
        other.close()

    def test_context_manager_must_match_mode(self, make_client):
        client = make_client(blocking=False)
        with pytest.raises(TypeError):
            with client:
                pass


class TestFromEnv:
    def test_missing_api_key(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv('RESEND_API_KEY', raising=False)
        with pytest.raises(ValueError):
            Resend.from_env()

    def test_blank_api_key(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv('RESEND_API_KEY', '   ')
        with pytest.raises(ValueError):
            Resend.from_env()

    def test_reads_environment(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv('RESEND_API_KEY', 're_from_env')
        monkeypatch.setenv('RESEND_BASE_URL', 'http://localhost:8080/')
        monkeypatch.setenv('RESEND_RATE_LIMIT', '5')

        client = Resend.from_env(blocking=True)

        assert client.config.bearer_token == 're_from_env'
        assert client.config.base_url == 'http://localhost:8080'
        assert client.config.rate_limit == 5
        client.close()

    def test_dotenv_file(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv('RESEND_API_KEY', raising=False)
        (tmp_path / '.env').write_text('RESEND_API_KEY=re_dotenv\n')

        config = ClientConfig.from_env()

        assert config.bearer_token == 're_dotenv'


class TestBlockingClient:
    def test_send_email(self, api, make_client, email):
        api.reply('POST', '/emails', json={'id': 'e_1'})

        with make_client(blocking=True) as client:
            sent = client.emails.send(email)

        assert sent.id == EmailId('e_1')
        body = api.last_json()
        assert body['from'] == 'Acme <onboarding@resend.dev>'
        assert body['to'] == ['delivered@resend.dev']
        assert 'from_' not in body
        assert 'cc' not in body
        assert 'idempotency-key' not in api.last.headers

    def test_send_with_idempotency_key(self, api, make_client, email):
        api.reply('POST', '/emails', json={'id': 'e_1'})

        with make_client(blocking=True) as client:
            client.emails.send(Idempotent(email).with_key('welcome/42'))

        assert api.last.headers.get_list('idempotency-key') == ['welcome/42']

    def test_returned_id_round_trips(self, api, make_client, email):
        api.reply('POST', '/emails', json={'id': 'e_1'})
        api.reply('GET', '/emails/e_1', json={
            'object': 'email', 'id': 'e_1', 'from': 'Acme <onboarding@resend.dev>',
            'to': ['delivered@resend.dev'], 'subject': 'Hello', 'last_event': 'delivered',
        })

        with make_client(blocking=True) as client:
            sent = client.emails.send(email)
            fetched = client.emails.get(sent.id)

        assert isinstance(fetched, Email)
        assert fetched.id == sent.id
        assert fetched.from_ == 'Acme <onboarding@resend.dev>'
        assert api.last.url.path == '/emails/e_1'

    def test_reschedule_and_cancel(self, api, make_client):
        api.reply('PATCH', '/emails/e_1', json={'object': 'email', 'id': 'e_1'})
        api.reply('POST', '/emails/e_1/cancel', json={'object': 'email', 'id': 'e_1'})

        with make_client(blocking=True) as client:
            client.emails.update('e_1', UpdateEmailOptions(scheduled_at='in 1 hour'))
            assert api.last_json() == {'scheduled_at': 'in 1 hour'}
            cancelled = client.emails.cancel('e_1')

        assert cancelled.id == 'e_1'

    def test_delete_consumes_identifier(self, api, make_client):
        api.reply('DELETE', '/domains/d_1', json={'object': 'domain', 'id': 'd_1', 'deleted': True})
        domain_id = DomainId('d_1')
        kept = domain_id.copy()

        with make_client(blocking=True) as client:
            result = client.domains.delete(domain_id)

            assert result.deleted is True
            assert domain_id.consumed
            with pytest.raises(ConsumedIdentifierError):
                client.domains.get(domain_id)

        assert kept.value == 'd_1'
        assert len(api.requests) == 1

    def test_list_with_pagination(self, api, make_client):
        api.reply('GET', '/domains', json={
            'object': 'list',
            'has_more': True,
            'data': [{'id': 'd_1', 'name': 'a.dev'}, {'id': 'd_2', 'name': 'b.dev'}],
        })

        with make_client(blocking=True) as client:
            options = ListOptions(limit=2)
            page = client.domains.list(options)

        assert len(page) == 2
        assert [d.name for d in page] == ['a.dev', 'b.dev']
        assert page.next_cursor == 'd_2'
        assert options.next_page(page) == ListOptions(limit=2, after='d_2')
        assert dict(api.last.url.params) == {'limit': '2'}

    def test_contacts_are_scoped_to_audience(self, api, make_client):
        api.reply('POST', '/audiences/a_1/contacts', json={'object': 'contact', 'id': 'c_1'})

        with make_client(blocking=True) as client:
            created = client.contacts.create('a_1', CreateContactOptions(email='jane@example.com'))

        assert created.id == 'c_1'
        assert api.last_json() == {'email': 'jane@example.com'}

    def test_api_key_delete_with_empty_body(self, api, make_client):
        api.reply('DELETE', '/api-keys/k_1', content=b'')

        with make_client(blocking=True) as client:
            assert client.api_keys.delete('k_1') is None

    def test_services_share_one_limiter(self, api, make_client):
        api.reply('GET', '/domains', json={'data': []})
        api.reply('GET', '/audiences', json={'data': []})
        api.reply('GET', '/webhooks', json={'data': []})

        with make_client(blocking=True) as client:
            client.domains.list()
            client.audiences.list()
            client.webhooks.list()

            assert client.get_stats().total_requests == 3


class TestBatch:
    @pytest.mark.parametrize('size', [1, 1000])
    def test_one_key_for_whole_batch(self, api, make_client, email, size):
        api.reply('POST', '/emails/batch', json={'data': [{'id': f'e_{i}'} for i in range(size)]})

        with make_client(blocking=True) as client:
            created = client.batch.send(with_idempotency_key([email] * size, 'batch-1'))

        assert len(created) == size
        assert len(api.requests) == 1
        assert api.last.headers.get_list('idempotency-key') == ['batch-1']
        assert len(json.loads(api.last.content)) == size

    def test_batch_without_key(self, api, make_client, email):
        api.reply('POST', '/emails/batch', json={'data': [{'id': 'e_1'}]})

        with make_client(blocking=True) as client:
            client.batch.send(iter([email]))

        assert 'idempotency-key' not in api.last.headers
        assert api.last.headers['x-batch-validation'] == 'strict'

    def test_per_email_keys_are_rejected(self, make_client, email):
        with make_client(blocking=True) as client:
            with pytest.raises(ValueError):
                client.batch.send([Idempotent(email, 'a'), Idempotent(email, 'b')])

    @pytest.mark.parametrize('keyed', [False, True])
    def test_single_email_is_rejected(self, api, make_client, email, keyed):
        payload = Idempotent(email, 'k1') if keyed else email

        with make_client(blocking=True) as client:
            with pytest.raises(ValueError):
                client.batch.send(payload)

        assert api.requests == []

    def test_permissive_validation(self, api, make_client, email):
        api.reply('POST', '/emails/batch', json={
            'data': [{'id': 'e_1'}],
            'errors': [{'index': 1, 'message': 'Invalid `to` field.'}],
        })

        with make_client(blocking=True) as client:
            response = client.batch.send_with_validation([email, email], BatchValidation.PERMISSIVE)

        assert api.last.headers['x-batch-validation'] == 'permissive'
        assert [e.id for e in response.data] == ['e_1']
        assert response.errors[0].index == 1


class TestAsyncClient:
    @pytest.mark.asyncio
    async def test_send_email(self, api, make_client, email):
        api.reply('POST', '/emails', json={'id': 'e_1'})

        async with make_client() as client:
            sent = await client.emails.send(email)

        assert sent.id == 'e_1'
        assert api.last.method == 'POST'

    @pytest.mark.asyncio
    async def test_batch_key(self, api, make_client, email):
        api.reply('POST', '/emails/batch', json={'data': [{'id': 'e_1'}, {'id': 'e_2'}]})

        async with make_client() as client:
            created = await client.batch.send(with_idempotency_key([email, email], 'async-batch'))

        assert [c.id for c in created] == ['e_1', 'e_2']
        assert api.last.headers.get_list('idempotency-key') == ['async-batch']

    @pytest.mark.asyncio
    async def test_delete_consumes_identifier(self, api, make_client):
        api.reply('DELETE', '/domains/d_1', json={'object': 'domain', 'id': 'd_1', 'deleted': True})
        domain_id = DomainId('d_1')

        async with make_client() as client:
            await client.domains.delete(domain_id)

        with pytest.raises(ConsumedIdentifierError):
            str(domain_id)

    @pytest.mark.asyncio
    async def test_blocking_close_is_rejected(self, make_client):
        client = make_client()
        with pytest.raises(TypeError):
            client.close()
        await client.aclose()

    @pytest.mark.asyncio
    async def test_custom_http_client(self, api):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(api.handler))
        api.reply('GET', '/audiences/a_1', json={'object': 'audience', 'id': 'a_1', 'name': 'News'})

        async with Resend('re_123', http_client=http_client) as client:
            audience = await client.audiences.get('a_1')

        assert audience.name == 'News'
