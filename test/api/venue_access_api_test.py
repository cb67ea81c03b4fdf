"""
End-to-end HTTP flows through the real app (lifespan, DI wiring, SQLite).

Every test uses its own venue id so they can share the session database.
"""

from datetime import datetime, timedelta, timezone

import pytest

from test.test_constants import ADMIN_ID, CARD_TOKEN, CUSTOMER_ID, STAFF_ID


def _iso(dt: datetime) -> str:
    return dt.isoformat()


@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc)


class TestPlatformEndpoints:
    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'

    def test_metrics_exposed(self, client):
        response = client.get('/metrics')

        assert response.status_code == 200
        assert 'text/plain' in response.headers['content-type']


class TestAuth:
    def test_missing_token(self, client):
        assert client.post('/api/reservation', json={'tier_id': 1}).status_code == 401

    def test_bad_signature(self, client):
        response = client.post(
            '/api/reservation',
            json={'tier_id': 1},
            headers={'Authorization': 'Bearer not-a-jwt'},
        )
        assert response.status_code == 401

    def test_customer_cannot_create_events(self, client, bearer, now):
        response = client.post(
            '/api/event',
            json={
                'venue_id': 301,
                'name': 'Nope',
                'starts_at': _iso(now + timedelta(days=1)),
                'ends_at': _iso(now + timedelta(days=1, hours=4)),
                'tiers': [
                    {
                        'name': 'GA',
                        'price': 1000,
                        'quantity': 10,
                        'sales_start': _iso(now),
                        'sales_end': _iso(now + timedelta(days=1)),
                    }
                ],
            },
            headers=bearer(user_id=CUSTOMER_ID, role='customer'),
        )
        assert response.status_code == 403

    def test_staff_of_another_venue(self, client, bearer):
        response = client.get(
            '/api/pos/302/integration',
            headers=bearer(user_id=STAFF_ID, role='staff', venue_ids=[999]),
        )
        assert response.status_code == 403


class TestTicketingFlow:
    def test_create_reserve_confirm_check_in(self, client, bearer, now):
        venue_id = 310
        staff = bearer(user_id=STAFF_ID, role='staff', venue_ids=[venue_id])
        customer = bearer(user_id=CUSTOMER_ID, role='customer')

        created = client.post(
            '/api/event',
            json={
                'venue_id': venue_id,
                'name': 'Friday Night',
                'starts_at': _iso(now + timedelta(minutes=30)),
                'ends_at': _iso(now + timedelta(hours=6)),
                'tiers': [
                    {
                        'name': 'GA',
                        'price': 2500,
                        'quantity': 1,
                        'sales_start': _iso(now - timedelta(days=1)),
                        'sales_end': _iso(now + timedelta(minutes=30)),
                    }
                ],
            },
            headers=staff,
        )
        assert created.status_code == 201
        tier_id = created.json()['tiers'][0]['id']

        reserved = client.post(
            '/api/reservation', json={'tier_id': tier_id, 'quantity': 1}, headers=customer
        )
        assert reserved.status_code == 201
        reservation_id = reserved.json()['id']

        sold_out = client.post(
            '/api/reservation',
            json={'tier_id': tier_id, 'quantity': 1},
            headers=bearer(user_id=CUSTOMER_ID + 1, role='customer'),
        )
        assert sold_out.status_code == 409
        assert sold_out.json()['reason'] == 'SOLD_OUT'

        confirmed = client.post(f'/api/reservation/{reservation_id}/confirm', headers=customer)
        assert confirmed.status_code == 200
        qr_token = confirmed.json()['tickets'][0]['qr_token']

        admitted = client.post(
            '/api/check_in/ticket',
            json={'qr_token': qr_token, 'venue_id': venue_id},
            headers=staff,
        )
        assert admitted.status_code == 200

        again = client.post(
            '/api/check_in/ticket',
            json={'qr_token': qr_token, 'venue_id': venue_id},
            headers=staff,
        )
        assert again.status_code == 409
        assert again.json()['reason'] == 'ALREADY_REDEEMED'
        assert again.json()['context']['staff_id'] == STAFF_ID

    def test_unknown_tier(self, client, bearer):
        response = client.post(
            '/api/reservation',
            json={'tier_id': 987654, 'quantity': 1},
            headers=bearer(user_id=CUSTOMER_ID, role='customer'),
        )
        assert response.status_code == 404


class TestSpendBasedAccess:
    def test_webhook_unlocks_tier(self, client, bearer, now):
        venue_id = 320
        staff = bearer(user_id=STAFF_ID, role='staff', venue_ids=[venue_id])

        rule = client.post(
            '/api/spend_rule',
            json={
                'venue_id': venue_id,
                'name': 'Regulars',
                'threshold': 5000,
                'tier': 'regular',
                'access_level': 'public_lobby',
                'window_days': 30,
            },
            headers=staff,
        )
        assert rule.status_code == 201

        linked = client.post(
            '/api/pos/card_link',
            json={'card_token': CARD_TOKEN, 'user_id': CUSTOMER_ID},
            headers=bearer(user_id=ADMIN_ID, role='admin'),
        )
        assert linked.status_code == 200

        payment = {
            'id': 'sq-api-1',
            'status': 'COMPLETED',
            'created_at': _iso(now - timedelta(minutes=5)),
            'amount_money': {'amount': 6000, 'currency': 'USD'},
            'card_details': {'card': {'fingerprint': CARD_TOKEN}},
        }
        first = client.post(f'/api/pos/{venue_id}/square/webhook', json=payment, headers=staff)
        assert first.status_code == 200
        assert first.json()['outcome'] == 'STORED'
        assert [g['tier'] for g in first.json()['new_grants']] == ['regular']

        replay = client.post(f'/api/pos/{venue_id}/square/webhook', json=payment, headers=staff)
        assert replay.json()['outcome'] == 'DEDUPLICATED'
        assert replay.json()['new_grants'] == []

        grants = client.get(
            '/api/access_grant', headers=bearer(user_id=CUSTOMER_ID, role='customer')
        )
        assert grants.status_code == 200
        assert {(g['venue_id'], g['tier']) for g in grants.json()} >= {(venue_id, 'regular')}

    def test_malformed_payload_is_rejected(self, client, bearer):
        venue_id = 321
        response = client.post(
            f'/api/pos/{venue_id}/square/webhook',
            json={'id': 'x', 'status': 'COMPLETED'},
            headers=bearer(user_id=STAFF_ID, role='staff', venue_ids=[venue_id]),
        )
        assert response.status_code == 422

    def test_invalid_rule_window(self, client, bearer):
        venue_id = 322
        response = client.post(
            '/api/spend_rule',
            json={
                'venue_id': venue_id,
                'name': 'Broken',
                'threshold': 100,
                'tier': 'platinum',
                'access_level': 'inner_circle',
                'live_window_start': '25:00',
                'live_window_end': '02:00',
            },
            headers=bearer(user_id=STAFF_ID, role='staff', venue_ids=[venue_id]),
        )
        assert response.status_code == 400

    def test_rule_update(self, client, bearer):
        venue_id = 323
        staff = bearer(user_id=STAFF_ID, role='staff', venue_ids=[venue_id])
        created = client.post(
            '/api/spend_rule',
            json={
                'venue_id': venue_id,
                'name': 'Regulars',
                'threshold': 5000,
                'tier': 'regular',
                'access_level': 'public_lobby',
            },
            headers=staff,
        )
        rule_id = created.json()['id']

        updated = client.patch(
            f'/api/spend_rule/{rule_id}', json={'threshold': 7500, 'priority': 3}, headers=staff
        )
        assert updated.status_code == 200
        assert (updated.json()['threshold'], updated.json()['priority']) == (7500, 3)
        assert updated.json()['name'] == 'Regulars'

        half_window = client.patch(
            f'/api/spend_rule/{rule_id}', json={'live_window_start': '22:00'}, headers=staff
        )
        assert half_window.status_code == 400


class TestAccessGrantAdministration:
    def test_revoke_requires_admin(self, client, bearer):
        venue_id = 330
        staff = bearer(user_id=STAFF_ID, role='staff', venue_ids=[venue_id])
        granted = client.post(
            '/api/access_grant',
            json={
                'user_id': CUSTOMER_ID,
                'venue_id': venue_id,
                'tier': 'whale',
                'access_level': 'inner_circle',
            },
            headers=staff,
        )
        assert granted.status_code == 201
        grant_id = granted.json()['id']

        by_staff = client.post(f'/api/access_grant/{grant_id}/revoke', headers=staff)
        assert by_staff.status_code == 403

        by_admin = client.post(
            f'/api/access_grant/{grant_id}/revoke', headers=bearer(user_id=ADMIN_ID, role='admin')
        )
        assert by_admin.status_code == 200
        assert not by_admin.json()['is_active']
        assert by_admin.json()['revoked_by'] == ADMIN_ID


class TestPosManagement:
    def test_disconnect_and_list_transactions(self, client, bearer, now):
        venue_id = 340
        staff = bearer(user_id=STAFF_ID, role='staff', venue_ids=[venue_id])
        connected = client.post(
            f'/api/pos/{venue_id}/integration',
            json={'provider': 'square', 'location_id': 'LOC-340'},
            headers=staff,
        )
        assert connected.status_code == 201

        disconnected = client.post(f'/api/pos/{venue_id}/square/disconnect', headers=staff)
        assert disconnected.status_code == 200
        assert not disconnected.json()['is_active']
        assert client.post(f'/api/pos/{venue_id}/square/sync', headers=staff).status_code == 400

        for i, status in enumerate(['COMPLETED', 'COMPLETED', 'FAILED']):
            client.post(
                f'/api/pos/{venue_id}/square/webhook',
                json={
                    'id': f'sq-list-{i}',
                    'status': status,
                    'created_at': _iso(now - timedelta(minutes=10 * (i + 1))),
                    'amount_money': {'amount': 1000, 'currency': 'USD'},
                },
                headers=staff,
            )

        page = client.get(
            f'/api/pos/{venue_id}/transaction',
            params={'status': 'completed', 'limit': 1},
            headers=staff,
        )
        assert page.status_code == 200
        body = page.json()
        assert (body['total'], body['limit'], body['offset'], body['has_more']) == (2, 1, 0, True)
        assert [t['provider_txn_id'] for t in body['transactions']] == ['sq-list-0']

        naive = client.get(
            f'/api/pos/{venue_id}/transaction',
            params={'since': '2026-06-01T00:00:00'},
            headers=staff,
        )
        assert naive.status_code == 400
