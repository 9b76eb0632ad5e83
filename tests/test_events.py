from finance_core.events import (
    ALL_EVENTS,
    CATEGORY_ADDED,
    CURRENCY_CHANGED,
    LEDGER_CLEARED,
    TRANSACTION_ADDED,
    TRANSACTION_DELETED,
    EventBus,
)


def test_publish_without_subscribers():
    assert EventBus().publish(TRANSACTION_ADDED, {}) == []


def test_subscribe_and_unsubscribe():
    bus = EventBus()
    seen = []

    def handler(event):
        seen.append(event)
        return event.payload["id"]

    bus.subscribe(TRANSACTION_ADDED, handler)
    assert bus.publish(TRANSACTION_ADDED, {"id": 1}) == [1]
    assert seen[0].name == TRANSACTION_ADDED
    assert seen[0].ts

    bus.unsubscribe(TRANSACTION_ADDED, handler)
    bus.unsubscribe(TRANSACTION_ADDED, handler)
    assert bus.publish(TRANSACTION_ADDED, {"id": 2}) == []


def test_ledger_notifies_after_each_mutation(ledger, storage):
    names = []
    persisted_at_notification = []

    def record(event):
        names.append(event.name)
        persisted_at_notification.append(storage.load("transactions"))

    ledger.subscribe(ALL_EVENTS, record)

    transaction = ledger.add_transaction("income", "10", "2024-01-01", 1)
    ledger.delete_transaction(transaction.id)
    ledger.add_category("Rent", "expense")
    ledger.set_currency("AUD")
    ledger.clear_all()

    assert names == [
        TRANSACTION_ADDED,
        TRANSACTION_DELETED,
        CATEGORY_ADDED,
        CURRENCY_CHANGED,
        LEDGER_CLEARED,
    ]
    assert persisted_at_notification[0] == [transaction.to_dict()]


def test_rejected_mutation_does_not_notify(ledger):
    names = []
    ledger.subscribe(CATEGORY_ADDED, lambda event: names.append(event.name))

    try:
        ledger.add_category("Food", "expense")
    except ValueError:
        pass

    assert names == []


def test_ledgers_have_independent_buses(storage):
    from finance_core.ledger import Ledger
    from finance_core.storage import MemoryStorage

    first, second = Ledger(storage), Ledger(MemoryStorage())
    calls = []
    first.subscribe(TRANSACTION_ADDED, calls.append)

    second.add_transaction("income", "1", "2024-01-01", 1)

    assert calls == []


def test_failing_subscriber_does_not_break_the_mutation(ledger, storage, caplog):
    calls = []

    def broken(event):
        raise RuntimeError("render failed")

    ledger.subscribe(TRANSACTION_ADDED, broken)
    ledger.subscribe(TRANSACTION_ADDED, lambda event: calls.append(event.payload["id"]))

    transaction = ledger.add_transaction("income", "10", "2024-01-01", 1)

    assert calls == [transaction.id]
    assert storage.load("transactions") == [transaction.to_dict()]
    assert "render failed" in caplog.text
