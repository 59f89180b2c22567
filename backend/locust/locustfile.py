"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Concurrent ticket saves on one event
  locust -f locustfile.py --tags throughput   # Mode / CTA reads
  locust -f locustfile.py --tags edge         # Bad input
  locust -f locustfile.py                     # All tests
"""

import random
from locust import HttpUser, task, between, tag, events
from datetime import datetime, timezone, timedelta

# Shared state
EVENT_IDS = []
CONCURRENCY_EVENT_ID = None

PRESETS = ["full_price", "concession", "child", "member", "student", "senior", "early_bird", "vip"]


def future_start():
    return (datetime.now(timezone.utc) + timedelta(days=random.randint(1, 90))).isoformat()


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "="*60)
    print("SETUP: Creating concurrency test event...")
    print("="*60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - many vendors saving ticket types on one event

    Run: locust -f locustfile.py --tags concurrency -u 50 -r 25 --run-time 30s

    After test, verify every config has exactly one published variation:
      SELECT COUNT(*) FROM product_variations WHERE event_id = X AND published;
    Should equal the number of ticket_types rows for X
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        if not CONCURRENCY_EVENT_ID:
            resp = self.client.post("/api/v1/vendor/events", json={
                "title": "Concurrency Gala",
                "event_type": "both",
                "start_at": future_start(),
                "rsvp_capacity": 50,
            })
            if resp.status_code == 201:
                globals()["CONCURRENCY_EVENT_ID"] = resp.json()["event"]["id"]
                print(f"\n✓ Created event {CONCURRENCY_EVENT_ID}\n")

    @tag("concurrency")
    @task(3)
    def save_ticket_types(self):
        """All users sync the same event's configs."""
        if not CONCURRENCY_EVENT_ID:
            return

        with self.client.post(f"/api/v1/vendor/events/{CONCURRENCY_EVENT_ID}/tickets/sync",
            name="/api/v1/vendor/events/{id}/tickets/sync",
            catch_response=True
        ) as resp:
            # synced=false means the lock was busy; that is expected under contention
            if resp.status_code == 200:
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @tag("concurrency")
    @task(1)
    def add_ticket_type(self):
        if not CONCURRENCY_EVENT_ID:
            return

        self.client.post(f"/api/v1/vendor/events/{CONCURRENCY_EVENT_ID}/tickets",
            json={
                "preset_key": random.choice(PRESETS),
                "price": f"{random.randint(0, 200)}.00",
                "capacity": random.randint(0, 300),
            },
            name="/api/v1/vendor/events/{id}/tickets")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - booking mode reads

    Run: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s

    Mode and CTA are recomputed on every request; watch P95/P99 latency.
    """
    wait_time = between(0.1, 0.5)

    def on_start(self):
        resp = self.client.post("/api/v1/vendor/events", json={
            "title": f"Event {random.randint(1, 10000)}",
            "event_type": random.choice(["rsvp", "paid", "both", "external"]),
            "external_url": "https://tickets.example.com",
            "start_at": future_start(),
            "rsvp_capacity": random.randint(0, 200),
        })
        if resp.status_code == 201:
            EVENT_IDS.append(resp.json()["event"]["id"])

    @tag("throughput", "read")
    @task(10)
    def primary_cta(self):
        if EVENT_IDS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_IDS)}/cta",
                name="/api/v1/events/{id}/cta")

    @tag("throughput", "read")
    @task(5)
    def template_variables(self):
        if EVENT_IDS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_IDS)}/template-variables",
                name="/api/v1/events/{id}/template-variables")

    @tag("throughput", "read")
    @task(3)
    def availability(self):
        if EVENT_IDS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_IDS)}/availability",
                name="/api/v1/events/{id}/availability")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    @tag("edge")
    @task
    def unknown_event(self):
        with self.client.get("/api/v1/events/999999/cta",
            name="/api/v1/events/[missing]/cta",
            catch_response=True
        ) as resp:
            if resp.status_code == 404:
                resp.success()
            else:
                resp.failure(f"Expected 404, got {resp.status_code}")

    @tag("edge")
    @task
    def negative_price(self):
        with self.client.post("/api/v1/vendor/events/1/tickets",
            json={"preset_key": "vip", "price": "-10.00"},
            name="/api/v1/vendor/events/{id}/tickets [bad]",
            catch_response=True
        ) as resp:
            if resp.status_code in [404, 422]:
                resp.success()
            else:
                resp.failure(f"Expected 404/422, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_event_type(self):
        with self.client.post("/api/v1/vendor/events",
            json={"title": "Raffle", "event_type": "raffle"},
            catch_response=True
        ) as resp:
            if resp.status_code == 422:
                resp.success()
            else:
                resp.failure(f"Expected 422, got {resp.status_code}")

    @tag("edge")
    @task
    def invalid_sync_intent(self):
        with self.client.post("/api/v1/vendor/events/1/product/sync?intent=purge",
            name="/api/v1/vendor/events/{id}/product/sync [bad]",
            catch_response=True
        ) as resp:
            if resp.status_code == 404 or (resp.status_code == 200 and not resp.json()["synced"]):
                resp.success()
            else:
                resp.failure(f"Expected rejected sync, got {resp.status_code}")

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/v1/vendor/events",
            data="not json at all",
            catch_response=True
        ) as resp:
            if resp.status_code in [400, 422]:
                resp.success()
            else:
                resp.failure(f"Expected 400/422, got {resp.status_code}")
