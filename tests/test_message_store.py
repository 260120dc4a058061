from messenger.services import message_store, user_directory


def test_history_contains_both_directions_only(db, users):
    alice, bob, carol = users["alice"], users["bob"], users["carol"]
    m1 = message_store.create(db, alice, bob, text="hi bob")
    m2 = message_store.create(db, bob, alice, text="hi alice")
    message_store.create(db, alice, carol, text="hi carol")
    message_store.create(db, carol, bob, text="carol to bob")
    m3 = message_store.create(db, alice, bob, image_url="https://cdn.test/x.png")
    db.commit()

    history = message_store.history(db, alice, bob)
    assert [m.id for m in history] == [m1.id, m2.id, m3.id]
    assert [m.id for m in message_store.history(db, bob, alice)] == [m1.id, m2.id, m3.id]


def test_create_assigns_id_before_commit(db, users):
    message = message_store.create(db, users["alice"], users["bob"], text="draft")
    assert message.id is not None
    db.rollback()
    assert message_store.history(db, users["alice"], users["bob"]) == []


def test_list_others_excludes_caller(db, users):
    others = user_directory.list_others(db, users["alice"])
    assert {u.id for u in others} == {users["bob"], users["carol"]}
