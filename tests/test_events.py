import json

import pytest

from resendex.events import (
    ContactEvent,
    DomainEvent,
    EmailEvent,
    EventType,
    parse_event,
)
from resendex.exceptions import ParseError
from resendex.ids import EmailId

EMAIL_SENT = '''
{
  "type": "email.sent",
  "created_at": "2024-11-23T15:53:07.839Z",
  "data": {
    "created_at": "2024-11-23 15:53:07.743225+00",
    "email_id": "9a148e6d-d79f-43cb-8022-22320546e1db",
    "from": "Acme <onboarding@resend.dev>",
    "subject": "hello world",
    "to": ["delivered@resend.dev"]
  }
}
'''


def test_email_event():
    event = parse_event(EMAIL_SENT)

    assert isinstance(event, EmailEvent)
    assert event.type is EventType.EMAIL_SENT
    assert event.data.email_id == EmailId('9a148e6d-d79f-43cb-8022-22320546e1db')
    assert event.data.from_ == 'Acme <onboarding@resend.dev>'
    assert event.data.click is None


def test_clicked_event_carries_click():
    payload = json.loads(EMAIL_SENT)
    payload['type'] = 'email.clicked'
    payload['data']['click'] = {
        'ipAddress': '122.115.53.11',
        'link': 'https://resend.com',
        'timestamp': '2024-11-24T05:00:57.163Z',
        'userAgent': 'Mozilla/5.0',
    }

    event = parse_event(json.dumps(payload).encode())

    assert event.type is EventType.EMAIL_CLICKED
    assert event.data.click.ip_address == '122.115.53.11'
    assert event.data.click.user_agent == 'Mozilla/5.0'


def test_contact_event():
    event = parse_event({
        'type': 'contact.created',
        'created_at': '2024-11-17T19:32:22.980Z',
        'data': {
            'id': 'e169aa45-1ecf-4183-9955-b1499d5701d3',
            'audience_id': '78261eea-8f8b-4381-83c6-79fa7120f1cf',
            'created_at': '2024-11-17T19:32:22.980Z',
            'updated_at': '2024-11-17T19:32:22.980Z',
            'email': 'steve.wozniak@gmail.com',
            'first_name': 'Steve',
            'last_name': 'Wozniak',
            'unsubscribed': False,
        },
    })

    assert isinstance(event, ContactEvent)
    assert event.type.category == 'contact'
    assert event.data.first_name == 'Steve'


def test_domain_event():
    event = parse_event({
        'type': 'domain.updated',
        'created_at': '2024-11-17T19:32:22.980Z',
        'data': {
            'id': 'd91cd9bd-1176-453e-8fc1-35364d380206',
            'name': 'example.com',
            'status': 'partially_verified',
            'created_at': '2024-04-26T20:21:26.347412+00:00',
            'region': 'us-east-1',
            'records': [
                {'record': 'SPF', 'name': 'send', 'type': 'MX', 'ttl': 'Auto',
                 'status': 'verified', 'value': 'feedback-smtp.us-east-1.amazonses.com', 'priority': 10},
            ],
        },
    })

    assert isinstance(event, DomainEvent)
    assert event.data.records[0].priority == 10


@pytest.mark.parametrize('payload', [
    'not json at all',
    '[1, 2, 3]',
    '{"type": "email.teleported", "created_at": "x", "data": {}}',
    '{"created_at": "x", "data": {}}',
    '{"type": "email.sent", "created_at": "x", "data": {"subject": "no id"}}',
])
def test_bad_payloads_raise_parse_error(payload):
    with pytest.raises(ParseError):
        parse_event(payload)
