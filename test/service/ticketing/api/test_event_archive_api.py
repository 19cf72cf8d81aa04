from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
import pytest

from src.platform.constant.route_constant import (
    ARCHIVE_BATCH,
    ARCHIVE_EVENT,
    ARCHIVE_LIST,
    ARCHIVE_LOG_CLEANUP,
    ARCHIVE_RESTORE,
    ARCHIVE_STATS,
    EVENT_CANCEL,
    EVENT_CREATE,
    EVENT_DELETE,
    EVENT_GET,
    EVENT_LIST,
    EVENT_PUBLISH,
    EVENT_UPDATE,
)
from test.service.ticketing.api.api_helpers import as_user, book, create_event
from test.util_constant import ANOTHER_ORGANIZER_ID, BUYER_ID, ORGANIZER_ID


@pytest.mark.integration
class TestEventApi:
    def test_create_requires_identity(self, client: TestClient) -> None:
        response = client.post(
            EVENT_CREATE,
            json={'name': 'x', 'starts_at': '2026-11-20T18:00:00Z', 'total_tickets': 1},
        )

        assert response.status_code == 401

    def test_create_rejects_end_before_start(self, client: TestClient) -> None:
        response = client.post(
            EVENT_CREATE,
            json={
                'name': 'Backwards',
                'starts_at': '2026-11-20T18:00:00Z',
                'ends_at': '2026-11-20T17:00:00Z',
                'total_tickets': 1,
            },
            headers=as_user(ORGANIZER_ID),
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'invalid_request'

    def test_draft_publish_flow(self, client: TestClient) -> None:
        event = create_event(client, total_tickets=5, publish=False)

        blocked = book(client, event_id=event['id'], quantity=1, user_id=BUYER_ID)
        published = client.post(
            EVENT_PUBLISH.format(event_id=event['id']), headers=as_user(ORGANIZER_ID)
        )
        allowed = book(client, event_id=event['id'], quantity=1, user_id=BUYER_ID)

        assert event['status'] == 'draft'
        assert blocked.status_code == 409
        assert blocked.json()['code'] == 'event_not_active'
        assert published.json()['status'] == 'active'
        assert allowed.status_code == 201

    def test_update_and_resize(self, client: TestClient) -> None:
        event = create_event(client, total_tickets=5)

        resized = client.patch(
            EVENT_UPDATE.format(event_id=event['id']),
            json={'total_tickets': 8, 'location': 'Hall B'},
            headers=as_user(ORGANIZER_ID),
        )
        book(client, event_id=event['id'], quantity=1, user_id=BUYER_ID)
        locked = client.patch(
            EVENT_UPDATE.format(event_id=event['id']),
            json={'total_tickets': 3},
            headers=as_user(ORGANIZER_ID),
        )

        assert resized.json()['available_tickets'] == 8
        assert resized.json()['location'] == 'Hall B'
        assert locked.status_code == 409

    def test_list_and_delete(self, client: TestClient) -> None:
        event = create_event(client)

        listed = client.get(EVENT_LIST, params={'event_status': 'active'})
        deleted = client.delete(
            EVENT_DELETE.format(event_id=event['id']), headers=as_user(ORGANIZER_ID)
        )
        missing = client.get(EVENT_GET.format(event_id=event['id']))

        assert [e['id'] for e in listed.json()] == [event['id']]
        assert deleted.status_code == 204
        assert missing.status_code == 404

    def test_malformed_event_id(self, client: TestClient) -> None:
        response = client.get(EVENT_GET.format(event_id='not-a-uuid'))

        assert response.status_code == 400


@pytest.mark.integration
class TestArchiveApi:
    def test_archive_and_restore(self, client: TestClient) -> None:
        """
        GIVEN: An event with 30 of 100 sold
        WHEN: The organizer archives it, then restores it
        THEN: Bookings are refused while archived; counters survive the round trip
        """
        event = create_event(client, total_tickets=100)
        book(client, event_id=event['id'], quantity=30, user_id=BUYER_ID)

        archived = client.post(
            ARCHIVE_EVENT.format(event_id=event['id']), headers=as_user(ORGANIZER_ID)
        )
        refused = book(client, event_id=event['id'], quantity=1, user_id=BUYER_ID)
        listed = client.get(ARCHIVE_LIST, params={'organizer_id': ORGANIZER_ID})
        restored = client.post(
            ARCHIVE_RESTORE.format(archive_id=archived.json()['id']),
            headers=as_user(ORGANIZER_ID),
        )

        assert archived.status_code == 200
        assert archived.json()['reason'] == 'manual'
        assert archived.json()['snapshot']['sold_tickets'] == 30
        assert refused.status_code == 409
        assert refused.json()['code'] == 'event_not_active'
        assert [r['id'] for r in listed.json()] == [archived.json()['id']]
        assert restored.status_code == 200
        assert restored.json()['status'] == 'active'
        assert restored.json()['sold_tickets'] == 30
        assert client.get(ARCHIVE_LIST).json() == []

    def test_archive_by_someone_else(self, client: TestClient) -> None:
        event = create_event(client)

        response = client.post(
            ARCHIVE_EVENT.format(event_id=event['id']), headers=as_user(ANOTHER_ORGANIZER_ID)
        )

        assert response.status_code == 403

    def test_cancelled_event_cannot_be_restored(self, client: TestClient) -> None:
        event = create_event(client)

        cancelled = client.post(
            EVENT_CANCEL.format(event_id=event['id']), headers=as_user(ORGANIZER_ID)
        )
        restore = client.post(
            ARCHIVE_RESTORE.format(archive_id=cancelled.json()['id']),
            headers=as_user(ORGANIZER_ID),
        )

        assert cancelled.json()['reason'] == 'cancelled'
        assert restore.status_code == 409
        assert restore.json()['code'] == 'invalid_transition'

    def test_batch_dry_run_then_archive(self, client: TestClient) -> None:
        past = datetime.now(timezone.utc) - timedelta(days=3)
        event = create_event(
            client, starts_at=past.isoformat(), ends_at=(past + timedelta(hours=2)).isoformat()
        )
        upcoming = datetime.now(timezone.utc) + timedelta(days=7)
        create_event(
            client,
            starts_at=upcoming.isoformat(),
            ends_at=(upcoming + timedelta(hours=2)).isoformat(),
        )

        dry = client.post(ARCHIVE_BATCH, json={'dry_run': True, 'buffer_hours': 24})
        real = client.post(ARCHIVE_BATCH, json={'buffer_hours': 24})
        stats = client.get(ARCHIVE_STATS)

        assert dry.json()['eligible'] == 1
        assert dry.json()['archived'] == 0
        assert dry.json()['outcomes'][0]['status'] == 'eligible'
        assert real.json()['archived'] == 1
        assert real.json()['outcomes'][0]['event_id'] == event['id']
        assert stats.json()['archived'] == 1
        assert stats.json()['active'] == 1
        assert stats.json()['archive_rate'] == 50.0

    def test_log_cleanup(self, client: TestClient) -> None:
        event = create_event(client)
        client.post(ARCHIVE_EVENT.format(event_id=event['id']), headers=as_user(ORGANIZER_ID))

        kept = client.post(ARCHIVE_LOG_CLEANUP, json={'days_to_keep': 90})
        purged = client.post(ARCHIVE_LOG_CLEANUP, json={'days_to_keep': 0})

        assert kept.json() == {'deleted': 0}
        assert purged.json() == {'deleted': 1}
