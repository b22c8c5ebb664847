from src.hrms_payroll.hrms_payroll.common.events import ChangeFeed


class Doc:
    def __init__(self, user_id):
        self.user_id = user_id


def test_subscribe_and_unsubscribe():
    feed = ChangeFeed()
    seen = []
    unsubscribe = feed.subscribe("leaves", lambda name, doc: seen.append((name, doc.user_id)))

    feed.publish("leaves", Doc(1))
    feed.publish("salary", Doc(2))
    unsubscribe()
    feed.publish("leaves", Doc(3))

    assert seen == [("leaves", 1)]
    assert feed.listener_count("leaves") == 0


def test_where_filters_documents():
    feed = ChangeFeed()
    seen = []
    feed.subscribe("salary", lambda name, doc: seen.append(doc.user_id), where=lambda doc: doc.user_id == 7)

    feed.publish("salary", Doc(1))
    feed.publish("salary", Doc(7))

    assert seen == [7]


def test_failing_listener_does_not_stop_others():
    feed = ChangeFeed()
    seen = []

    def broken(name, doc):
        raise RuntimeError("listener bug")

    feed.subscribe("attendance", broken)
    feed.subscribe("attendance", lambda name, doc: seen.append(doc.user_id))

    feed.publish("attendance", Doc(4))

    assert seen == [4]
