from __future__ import annotations

import datetime
from types import SimpleNamespace

import pytest
from app.notifications.events import Notification
from app.notifications.preference_repo import PreferenceRepository
from app.notifications.push_subscription_repo import PushSubscriptionEntry, PushSubscriptionRepository
from app.notifications.sent_log_repo import SentNotificationRepository
from sqlalchemy.dialects import postgresql


def _compiled(session):
  stmt = session.execute.await_args.args[0]
  return stmt.compile(dialect=postgresql.dialect())


@pytest.mark.anyio
async def test_list_for_account_maps_rows(mock_db_session):
  row = SimpleNamespace(endpoint="endA", push_subscription_object='{"endpoint": "endA"}', gateway="near.social", account="acct1")
  mock_db_session.execute.return_value.scalars.return_value.all.return_value = [row]

  entries = await PushSubscriptionRepository(mock_db_session).list_for_account(account="acct1")

  assert entries == [PushSubscriptionEntry(endpoint="endA", push_subscription_object='{"endpoint": "endA"}', gateway="near.social", account="acct1")]
  compiled = _compiled(mock_db_session)
  assert '"Subscription".account = %(account_1)s' in str(compiled)
  assert compiled.params["account_1"] == "acct1"


@pytest.mark.anyio
async def test_delete_by_endpoint_commits(mock_db_session):
  await PushSubscriptionRepository(mock_db_session).delete_by_endpoint(endpoint="endA")

  compiled = _compiled(mock_db_session)
  assert str(compiled).startswith('DELETE FROM "Subscription"')
  assert compiled.params["endpoint_1"] == "endA"
  mock_db_session.commit.assert_awaited_once()


@pytest.mark.anyio
@pytest.mark.parametrize(("row", "expected"), [(None, False), (7, True)])
async def test_is_blocked(mock_db_session, row, expected):
  mock_db_session.execute.return_value.scalar_one_or_none.return_value = row

  blocked = await PreferenceRepository(mock_db_session).is_blocked(account="acct1", value_type="dapp1")

  assert blocked is expected
  compiled = _compiled(mock_db_session)
  assert compiled.params["account_1"] == "acct1"
  assert compiled.params["dapp_1"] == "dapp1"
  assert "IS true" in str(compiled)


@pytest.mark.anyio
async def test_sent_log_exists_filters_by_id_and_endpoint(mock_db_session):
  mock_db_session.execute.return_value.scalar_one_or_none.return_value = "n1"

  assert await SentNotificationRepository(mock_db_session).exists(notification_id="n1", endpoint="endA") is True

  compiled = _compiled(mock_db_session)
  assert compiled.params["id_1"] == "n1"
  assert compiled.params["endpoint_1"] == "endA"


@pytest.mark.anyio
async def test_sent_log_count_since_uses_inclusive_window(mock_db_session):
  mock_db_session.execute.return_value.scalar_one.return_value = 3
  since = datetime.datetime(2026, 10, 17, 12, 0, tzinfo=datetime.UTC)

  count = await SentNotificationRepository(mock_db_session).count_since(receiver="acct1", endpoint="endA", since=since)

  assert count == 3
  compiled = _compiled(mock_db_session)
  assert '"Notification".sent_at >= %(sent_at_1)s' in str(compiled)
  assert compiled.params["sent_at_1"] == since
  assert compiled.params["receiver_1"] == "acct1"


@pytest.mark.anyio
async def test_sent_log_insert_ignores_conflicting_duplicate(mock_db_session):
  notification = Notification.model_validate({"id": "n1", "blockHeight": 101, "initiatedBy": "alice.near", "itemType": "post", "path": "alice.near/post/main", "receiver": "acct1", "valueType": "dapp1"})
  sent_at = datetime.datetime(2026, 10, 18, 12, 0, tzinfo=datetime.UTC)

  await SentNotificationRepository(mock_db_session).insert(notification=notification, endpoint="endA", gateway="near.social", sent_at=sent_at)

  compiled = _compiled(mock_db_session)
  assert "ON CONFLICT (id, endpoint) DO NOTHING" in str(compiled)
  assert compiled.params["id"] == "n1"
  assert compiled.params["endpoint"] == "endA"
  assert compiled.params["block_height"] == 101
  assert compiled.params["gateway"] == "near.social"
  assert compiled.params["value_type"] == "dapp1"
  assert compiled.params["sent_at"] == sent_at
  mock_db_session.commit.assert_awaited_once()
