"""Tests for content_service/admin/notifications.py: transient notices."""

from content_service.admin.notifications import NotificationCenter


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class TestNotificationCenter:

    def test_notice_expires_after_ttl(self):
        clock = FakeClock()
        center = NotificationCenter(ttl=4.0, clock=clock)
        center.success("Saved")

        clock.now += 3.9
        assert [n.message for n in center.active()] == ["Saved"]
        clock.now += 0.2
        assert center.active() == []

    def test_kinds_and_order(self):
        center = NotificationCenter(ttl=4.0, clock=FakeClock())
        center.success("one")
        center.error("two")
        assert [(n.kind, n.message) for n in center.active()] == [("success", "one"), ("error", "two")]

    def test_dismiss(self):
        center = NotificationCenter(ttl=4.0, clock=FakeClock())
        first = center.success("one")
        center.success("two")
        center.dismiss(first.id)
        assert [n.message for n in center.active()] == ["two"]

    def test_default_ttl_from_settings(self, override_settings):
        override_settings(NOTIFICATION_TTL_SECONDS="2.5")
        assert NotificationCenter().ttl == 2.5
