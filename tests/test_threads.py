from app.services.threads import build_comment_thread, count_thread


def row(id, parent_id=None, content=None):
    return {"id": id, "parent_id": parent_id, "content": content or f"comment {id}"}


def test_empty_thread():
    assert build_comment_thread([]) == []
    assert count_thread([]) == 0


def test_roots_keep_input_order():
    roots = build_comment_thread([row(1), row(2), row(3)])
    assert [r["id"] for r in roots] == [1, 2, 3]
    assert all(r["replies"] == [] for r in roots)


def test_replies_attach_to_their_root():
    roots = build_comment_thread([row(1), row(2), row(3, parent_id=1), row(4, parent_id=1)])

    assert [r["id"] for r in roots] == [1, 2]
    assert [r["id"] for r in roots[0]["replies"]] == [3, 4]
    assert roots[1]["replies"] == []
    assert count_thread(roots) == 4


def test_reply_to_reply_is_flattened_under_root():
    roots = build_comment_thread([
        row(1),
        row(2, parent_id=1),
        row(3, parent_id=2),
        row(4, parent_id=3),
    ])

    assert len(roots) == 1
    assert [r["id"] for r in roots[0]["replies"]] == [2, 3, 4]
    assert all(r["replies"] == [] for r in roots[0]["replies"])


def test_unknown_parent_becomes_root():
    roots = build_comment_thread([row(1), row(2, parent_id=99)])
    assert [r["id"] for r in roots] == [1, 2]


def test_reply_listed_before_its_parent():
    roots = build_comment_thread([row(5, parent_id=1), row(1)])
    assert [r["id"] for r in roots] == [1]
    assert [r["id"] for r in roots[0]["replies"]] == [5]


def test_input_rows_are_not_mutated():
    rows = [row(1), row(2, parent_id=1)]
    build_comment_thread(rows)
    assert "replies" not in rows[0]


def test_parent_cycle_does_not_hang():
    roots = build_comment_thread([row(1, parent_id=2), row(2, parent_id=1)])
    assert count_thread(roots) == 2
    assert len(roots) == 1
