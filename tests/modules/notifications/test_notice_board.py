from vocab_master.notifications import Notice, NoticeBoard, NoticeLevel


def test_publish_fans_out_to_subscribers():
    board = NoticeBoard()
    received = []
    unsubscribe = board.subscribe(received.append)

    board.publish(Notice.success("Favorited: Ephemeral"))
    unsubscribe()
    board.publish(Notice.info("Unfavorited: Ephemeral"))

    assert received == [Notice("Favorited: Ephemeral", NoticeLevel.SUCCESS)]
    assert board.latest == Notice.info("Unfavorited: Ephemeral")


def test_failing_listener_does_not_block_others():
    board = NoticeBoard()
    received = []

    def broken(_notice):
        raise RuntimeError("listener exploded")

    board.subscribe(broken)
    board.subscribe(received.append)

    board.publish(Notice.error("Could not save definition locally."))

    assert [notice.level for notice in received] == [NoticeLevel.ERROR]


def test_backlog_is_bounded_and_drainable():
    board = NoticeBoard(max_backlog=2)
    for index in range(3):
        board.publish(Notice.info(f"notice {index}"))

    drained = board.drain()

    assert [notice.message for notice in drained] == ["notice 1", "notice 2"]
    assert board.drain() == []
    assert board.latest is None
